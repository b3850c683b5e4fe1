"""Identity map of loaded row objects, keyed by canonical key."""

import logging
from typing import Any, Dict, Iterator, Optional

from ..models.base import RowObject

logger = logging.getLogger(__name__)


class IdentityCache:
    """
    In-memory map from canonical key to row object.

    Owned by exactly one gateway. There is no eviction policy and no size
    bound; entries leave only through remove() or clear(). Not thread-safe.
    """

    def __init__(self, name: str = ""):
        self.name = name
        self._objects: Dict[Any, RowObject] = {}

    def get(self, key: Any) -> Optional[RowObject]:
        return self._objects.get(key)

    def put(self, key: Any, obj: RowObject) -> None:
        self._objects[key] = obj

    def remove(self, key: Any) -> None:
        """Remove the entry for key; absent keys are ignored."""
        if self._objects.pop(key, None) is not None:
            logger.debug(f"Evicted {self.name}:{key} from cache")

    def clear(self) -> None:
        if self._objects:
            logger.debug(f"Cleared {len(self._objects)} cached {self.name} objects")
        self._objects = {}

    def keys(self):
        return self._objects.keys()

    def __contains__(self, key: Any) -> bool:
        return key in self._objects

    def __len__(self) -> int:
        return len(self._objects)

    def __iter__(self) -> Iterator[Any]:
        return iter(self._objects)

    def __repr__(self) -> str:
        return f"IdentityCache(name={self.name!r}, size={len(self._objects)})"
