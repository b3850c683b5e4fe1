"""
Row Object Base Model and Factories

A row object is an immutable snapshot of one persisted row. Gateways never
mutate a row object in place: an update builds a new snapshot and replaces
the identity cache entry.

## Components

- RowObject: frozen pydantic model; undeclared columns are kept as extras
- RowObjectFactory: callable building a row object from a raw attribute map
- model_factory: builds a RowObjectFactory for a RowObject subclass
"""

import logging
from typing import Any, Callable, Dict, Mapping, Optional, Type, TypeVar

from pydantic import BaseModel, ConfigDict, PrivateAttr

logger = logging.getLogger(__name__)

R = TypeVar('R', bound='RowObject')

RowObjectFactory = Callable[[Mapping[str, Any], Optional[Mapping[str, str]]], 'RowObject']


class RowObject(BaseModel):
    """
    Immutable snapshot of one table row.

    Subclasses declare the columns they care about; any other column the
    database returns is retained as an extra attribute so that
    ``to_attributes()`` always reflects the full row.

    Example:
        class User(RowObject):
            id: int
            name: str

        user = User.from_row({'id': 1, 'name': 'a', 'created_at': '...'})
        user.to_attributes()  # {'id': 1, 'name': 'a', 'created_at': '...'}
    """

    model_config = ConfigDict(
        frozen=True,
        extra='allow',
        populate_by_name=True
    )

    _field_types: Dict[str, str] = PrivateAttr(default_factory=dict)

    @property
    def field_types(self) -> Dict[str, str]:
        """Column type names reported by the driver when the row was loaded."""
        return dict(self._field_types)

    def to_attributes(self) -> Dict[str, Any]:
        """Return the full column name -> value map of this row."""
        return self.model_dump()

    def get(self, column: str, default: Any = None) -> Any:
        return self.to_attributes().get(column, default)

    @classmethod
    def from_row(
        cls: Type[R],
        attributes: Mapping[str, Any],
        field_types: Optional[Mapping[str, str]] = None
    ) -> R:
        """
        Create a row object from a raw attribute map.

        Args:
            attributes: Column name -> value map as returned by the driver
            field_types: Optional column name -> type name metadata

        Returns:
            Row object instance

        Raises:
            ValidationError: If the attributes are invalid for the model
        """
        try:
            row = cls.model_validate(dict(attributes))
        except Exception as e:
            logger.error(f"Failed to convert row to {cls.__name__}: {e}")
            from ..exceptions import ValidationError
            raise ValidationError(f"Failed to convert row to {cls.__name__}: {e}", original_error=e) from e

        if field_types:
            row._field_types = dict(field_types)
        return row


def model_factory(model_cls: Type[RowObject]) -> RowObjectFactory:
    """
    Build a row object factory for a RowObject subclass.

    Args:
        model_cls: The RowObject subclass rows should be built as

    Returns:
        Callable taking (attributes, field_types) and returning a row object
    """
    def factory(attributes: Mapping[str, Any], field_types: Optional[Mapping[str, str]] = None) -> RowObject:
        return model_cls.from_row(attributes, field_types)

    factory.model_class = model_cls
    return factory
