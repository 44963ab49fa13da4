from __future__ import annotations
from typing import TYPE_CHECKING, Dict, Iterable, Iterator, Optional, Tuple
import logging

from .axes import Axis, AxisWrapper
from .identity import IdentityRegistry

if TYPE_CHECKING:
    from .coordinates import CoordinateSystem


logger = logging.getLogger(__name__)

# (id(axis), id(owner)); cached wrappers hold both objects, so the key cannot be recycled
_Key = Tuple[int, int]


def _key(axis: Axis, owner: "CoordinateSystem") -> _Key:
    return (id(axis), id(owner))


class WrapperResolver:
    """Issues and caches one AxisWrapper per (axis, coordinate system) pair."""
    def __init__(self, ids: Optional[IdentityRegistry] = None):
        self._ids = ids
        self._wrappers: Dict[_Key, AxisWrapper] = {}

    @property
    def ids(self) -> Optional[IdentityRegistry]:
        return self._ids

    def use(self, ids: IdentityRegistry) -> None:
        """Draw wrapper ids from ``ids``; wrappers issued by another registry are dropped."""
        if ids is not self._ids:
            self._wrappers.clear()
            self._ids = ids

    def wrap(self, axis: Axis, owner: "CoordinateSystem") -> AxisWrapper:
        key = _key(axis, owner)
        w = self._wrappers.get(key)
        if w is None:
            w = AxisWrapper(axis, owner, ids=self._ids)
            self._wrappers[key] = w
            logger.debug("wrapped axis %d for coordinate system %d as %d", axis.id, owner.id, w.id)
        return w

    def get(self, axis: Axis, owner: "CoordinateSystem") -> Optional[AxisWrapper]:
        return self._wrappers.get(_key(axis, owner))

    def retain(self, pairs: Iterable[Tuple[Axis, "CoordinateSystem"]]) -> None:
        """Forget wrappers whose pair is no longer part of the graph."""
        live = {_key(a, cs) for a, cs in pairs}
        for key in [k for k in self._wrappers if k not in live]:
            del self._wrappers[key]

    def clear(self) -> None:
        self._wrappers.clear()

    def __len__(self) -> int:
        return len(self._wrappers)

    def __iter__(self) -> Iterator[AxisWrapper]:
        return iter(self._wrappers.values())
