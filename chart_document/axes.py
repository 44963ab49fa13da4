from __future__ import annotations
from typing import TYPE_CHECKING, Any, ClassVar, Optional

from pydantic_chart_config import AXIS_TYPES, DataType
from .encoding import EncodeBuffer, encode_pair
from .errors import StructuralConflict
from .parts import Part, PartKind

if TYPE_CHECKING:
    from .coordinates import CoordinateSystem


__all__ = ["Axis", "XAxis", "YAxis", "AngleAxis", "RadiusAxis", "AxisWrapper"]


class Axis(Part):
    """
    An axis is only ever emitted through an AxisWrapper bound to one coordinate
    system. ``coordinate_system`` is the owner claimed during validation;
    ``shared`` axes may be held by more than one coordinate system.
    """
    wrapped = True
    wrapper_kind: ClassVar[PartKind]

    def __init__(self, data_type: DataType = DataType.number, name: Optional[str] = None, *,
                 shared: bool = False, **kw):
        super().__init__(name, **kw)
        self.data_type = DataType(data_type)
        self.shared = shared
        self.coordinate_system: Optional["CoordinateSystem"] = None
        self.min: Optional[Any] = None
        self.max: Optional[Any] = None

    @property
    def axis_type(self) -> str:
        return AXIS_TYPES[self.data_type]

    def validate(self) -> None:
        if self.data_type is DataType.object:
            # object data has no axis representation
            raise StructuralConflict(f"{self.class_name()} cannot use object data")

    def encode_body(self, buf: EncodeBuffer, state: Any) -> None:
        encode_pair(buf, "type", self.axis_type)
        if self.min is not None:
            encode_pair(buf, "min", self.min)
        if self.max is not None:
            encode_pair(buf, "max", self.max)


class _XYAxis(Axis):
    opposite_side: ClassVar[str]

    def __init__(self, *args, **kw):
        super().__init__(*args, **kw)
        self.opposite = False
        self.offset = 0

    def encode_body(self, buf: EncodeBuffer, state: Any) -> None:
        super().encode_body(buf, state)
        if self.opposite:
            encode_pair(buf, "position", self.opposite_side)
        if self.offset > 0:
            encode_pair(buf, "offset", self.offset)

class XAxis(_XYAxis):
    wrapper_kind = PartKind.x_axis
    opposite_side = "top"

class YAxis(_XYAxis):
    wrapper_kind = PartKind.y_axis
    opposite_side = "right"


class AngleAxis(Axis):
    wrapper_kind = PartKind.angle_axis

    def __init__(self, *args, **kw):
        super().__init__(*args, **kw)
        self.clockwise = True
        self.start_angle = 90

    def anticlockwise(self) -> None:
        self.clockwise = False

    def encode_body(self, buf: EncodeBuffer, state: Any) -> None:
        super().encode_body(buf, state)
        if not self.clockwise:
            encode_pair(buf, "clockwise", False)
        encode_pair(buf, "startAngle", self.start_angle)

class RadiusAxis(Axis):
    wrapper_kind = PartKind.radius_axis


class AxisWrapper(Part):
    """Identity of one axis placed in one coordinate system."""
    def __init__(self, axis: Axis, owner: "CoordinateSystem", **kw):
        super().__init__(**kw)
        self.axis = axis
        self.owner = owner

    @property
    def kind(self) -> PartKind:  # type: ignore[override]
        return self.axis.wrapper_kind

    def get_name(self) -> Optional[str]:
        return self.axis.get_name()

    def class_name(self) -> str:
        return self.axis.class_name()

    def encode(self, buf: EncodeBuffer, state: Any = None) -> None:
        self.axis.encode_preamble(buf, part_id=self.id)
        self.axis.encode_body(buf, state)
        encode_pair(buf, self.owner.index_key, self.owner.serial)

    def __repr__(self) -> str:
        return f"<AxisWrapper id={self.id} axis={self.axis.id} owner={self.owner.id} serial={self.serial}>"
