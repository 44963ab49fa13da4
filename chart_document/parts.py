from __future__ import annotations
from enum import Enum
from typing import TYPE_CHECKING, Any, ClassVar, Iterable, List, Optional, Protocol, runtime_checkable
import re

from pydantic_chart_config import Position, TooltipTrigger
from .encoding import EncodeBuffer, encode_pair, encode_nested
from .identity import IdentityRegistry, default_registry

if TYPE_CHECKING:
    from .data import DataProvider


class PartKind(str, Enum):
    """Document section a part is emitted under, in emission order."""
    title = "title"
    legend = "legend"
    tooltip = "tooltip"
    dataset = "dataset"
    angle_axis = "angleAxis"
    radius_axis = "radiusAxis"
    x_axis = "xAxis"
    y_axis = "yAxis"
    polar = "polar"
    grid = "grid"
    series = "series"
    data_zoom = "dataZoom"


# ---------- Capabilities ----------

@runtime_checkable
class Encodable(Protocol):
    def encode(self, buf: EncodeBuffer, state: Any = None) -> None: ...

@runtime_checkable
class Named(Protocol):
    def get_name(self) -> Optional[str]: ...

@runtime_checkable
class Positioned(Protocol):
    def get_position(self) -> Optional[Position]: ...

@runtime_checkable
class DataOwning(Protocol):
    def declare_data(self, sink: List["DataProvider"]) -> None: ...


def encode_position(buf: EncodeBuffer, position: Optional[Position]) -> bool:
    if position is None:
        return False
    def _write(scratch: EncodeBuffer) -> None:
        for field in ("left", "right", "width", "top", "bottom", "height"):
            v = getattr(position, field)
            if v is not None:
                encode_pair(scratch, field, v)
    return encode_nested(buf, None, _write)


def class_name(cls: type) -> str:
    """'PolarCoordinate' -> 'Polar Coordinate'"""
    return re.sub(r"(?<=[a-z0-9])(?=[A-Z])", " ", cls.__name__)


# ---------- Base part ----------

class Part:
    kind: ClassVar[Optional[PartKind]] = None
    # wrapped parts are only emitted through a wrapper; their own id must not appear
    wrapped: ClassVar[bool] = False

    def __init__(self, name: Optional[str] = None, *, ids: Optional[IdentityRegistry] = None):
        self.registry = ids or default_registry
        self._id = self.registry.next_id()
        self.name = name
        self.visible = True
        self.position: Optional[Position] = None
        self.serial = -1

    @property
    def id(self) -> int:
        return self._id

    def show(self) -> None:
        self.visible = True

    def hide(self) -> None:
        self.visible = False

    def get_name(self) -> Optional[str]:
        return self.name

    def get_position(self) -> Optional[Position]:
        return self.position

    def set_position(self, position: Optional[Position]) -> None:
        self.position = position

    def position_box(self) -> Position:
        """Current position, created on first use."""
        if self.position is None:
            self.position = Position()
        return self.position

    def children(self) -> Iterable["Part"]:
        return ()

    def validate(self) -> None:
        pass

    def class_name(self) -> str:
        name = self.get_name()
        return class_name(type(self)) + ("" if name is None else f" ({name})")

    # ---------- encoding ----------

    def encode(self, buf: EncodeBuffer, state: Any = None) -> None:
        self.encode_preamble(buf)
        self.encode_body(buf, state)

    def encode_preamble(self, buf: EncodeBuffer, *, part_id: Optional[int] = None) -> None:
        name = self.get_name()
        if name is not None:
            encode_pair(buf, "name", name)
        if part_id is None and not self.wrapped:
            part_id = self.id
        if part_id is not None:
            encode_pair(buf, "id", part_id)
        encode_position(buf, self.get_position())
        encode_pair(buf, "show", self.visible)

    def encode_body(self, buf: EncodeBuffer, state: Any) -> None:
        pass

    def __repr__(self) -> str:
        return f"<{type(self).__name__} id={self.id} serial={self.serial}>"


# ---------- Leaf components ----------

class Title(Part):
    kind = PartKind.title

    def __init__(self, text: str, subtext: Optional[str] = None, **kw):
        super().__init__(**kw)
        self.text = text
        self.subtext = subtext

    def encode_body(self, buf: EncodeBuffer, state: Any) -> None:
        encode_pair(buf, "text", self.text)
        if self.subtext is not None:
            encode_pair(buf, "subtext", self.subtext)


class Legend(Part):
    kind = PartKind.legend

    def __init__(self, **kw):
        super().__init__(**kw)
        self.vertical = False

    def show_vertically(self) -> None:
        self.vertical = True

    def encode_body(self, buf: EncodeBuffer, state: Any) -> None:
        if self.vertical:
            encode_pair(buf, "orient", "vertical")


class Tooltip(Part):
    kind = PartKind.tooltip

    def __init__(self, trigger: Optional[TooltipTrigger] = None, **kw):
        super().__init__(**kw)
        self.trigger = trigger

    def encode_body(self, buf: EncodeBuffer, state: Any) -> None:
        if self.trigger is not None:
            encode_pair(buf, "trigger", TooltipTrigger(self.trigger).value)
