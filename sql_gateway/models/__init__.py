from .base import RowObject, RowObjectFactory, model_factory

__all__ = [
    "RowObject",
    "RowObjectFactory",
    "model_factory",
]
