from __future__ import annotations
from enum import Enum
from typing import TYPE_CHECKING, Any, ClassVar, Iterable, List, Optional, Tuple, Type
import logging

from .axes import AngleAxis, Axis, RadiusAxis, XAxis, YAxis
from .encoding import EncodeBuffer, encode_pair
from .errors import ChartError, MissingRequiredPart, StructuralConflict
from .parts import Part, PartKind

if TYPE_CHECKING:
    from .charts import Chart


__all__ = ["ValidationState", "CoordinateSystem", "PolarCoordinate", "RectangularCoordinate"]

logger = logging.getLogger(__name__)


class ValidationState(Enum):
    unvalidated = "unvalidated"
    validating = "validating"
    valid = "valid"
    rejected = "rejected"


class CoordinateSystem(Part):
    """
    Owns a fixed set of named axis slots and the series plotted on it.

    Validation walks UNVALIDATED -> VALIDATING -> VALID | REJECTED. A rejected
    coordinate system keeps the error and re-raises it until ``reset()``.
    """
    index_key: ClassVar[str]
    required_slots: ClassVar[Tuple[str, ...]] = ()
    slot_types: ClassVar[dict] = {}

    def __init__(self, name: Optional[str] = None, **kw):
        super().__init__(name, **kw)
        self.state = ValidationState.unvalidated
        self.rejection: Optional[ChartError] = None
        self.charts: List["Chart"] = []

    # ---------- slots ----------

    def axis_slots(self) -> List[Tuple[str, Optional[Axis]]]:
        raise NotImplementedError

    def axes(self) -> List[Axis]:
        return [a for _, a in self.axis_slots() if a is not None]

    def children(self) -> Iterable[Part]:
        return [*self.axes(), *self.charts]

    # ---------- series ----------

    def add(self, *charts: "Chart") -> None:
        for chart in charts:
            if chart is None:
                continue
            if chart.coordinate_system is not None and chart.coordinate_system is not self:
                chart.coordinate_system.remove(chart)
            if chart not in self.charts:
                self.charts.append(chart)
            chart.coordinate_system = self

    def remove(self, *charts: "Chart") -> None:
        for chart in charts:
            if chart in self.charts:
                self.charts.remove(chart)
                chart.coordinate_system = None

    # ---------- validation ----------

    def reset(self) -> None:
        self.state = ValidationState.unvalidated
        self.rejection = None

    def validate(self) -> None:
        if self.state is ValidationState.valid:
            return
        if self.state is ValidationState.rejected:
            raise self.rejection
        self.state = ValidationState.validating
        try:
            self._check_slots()
            for axis in self.axes():
                if axis.coordinate_system is None:
                    axis.coordinate_system = self
                axis.validate()
        except ChartError as e:
            self.state = ValidationState.rejected
            self.rejection = e
            logger.debug("%s rejected: %s", self.class_name(), e)
            raise
        self.state = ValidationState.valid

    def _check_slots(self) -> None:
        slots = self.axis_slots()
        filled = {slot for slot, axis in slots if axis is not None}
        for slot in self.required_slots:
            if slot not in filled:
                raise MissingRequiredPart(f"{slot.capitalize()} axis is not set for {self.class_name()}")
        for slot, axis in slots:
            if axis is None:
                continue
            expected: Type[Axis] = self.slot_types[slot]
            if not isinstance(axis, expected):
                raise StructuralConflict(f"{axis.class_name()} cannot be used as {slot} axis of {self.class_name()}")
            owner = axis.coordinate_system
            if owner is not None and owner is not self and not axis.shared:
                raise StructuralConflict(f"{axis.class_name()} is already used by {owner.class_name()}")

    @property
    def is_valid(self) -> bool:
        return self.state is ValidationState.valid

    # ---------- encoding ----------

    def encode_series_reference(self, buf: EncodeBuffer, chart: "Chart", state: Any) -> None:
        """Members a series needs to locate itself on this coordinate system."""
        raise NotImplementedError


class PolarCoordinate(CoordinateSystem):
    kind = PartKind.polar
    index_key = "polarIndex"
    required_slots = ("radius", "angle")
    slot_types = {"radius": RadiusAxis, "angle": AngleAxis}

    def __init__(self, angle_axis: Optional[AngleAxis] = None, radius_axis: Optional[RadiusAxis] = None, **kw):
        super().__init__(**kw)
        self.angle_axis = angle_axis
        self.radius_axis = radius_axis

    def axis_slots(self) -> List[Tuple[str, Optional[Axis]]]:
        return [("radius", self.radius_axis), ("angle", self.angle_axis)]

    def get_position(self):
        # polar layout is driven by center/radius, not by a box
        return None

    def encode_series_reference(self, buf: EncodeBuffer, chart: "Chart", state: Any) -> None:
        encode_pair(buf, "coordinateSystem", "polar")
        encode_pair(buf, "polarIndex", self.serial)


class RectangularCoordinate(CoordinateSystem):
    kind = PartKind.grid
    index_key = "gridIndex"
    required_slots = ("x", "y")
    slot_types = {"x": XAxis, "y": YAxis}

    def __init__(self, x_axis: Optional[XAxis] = None, y_axis: Optional[YAxis] = None, **kw):
        super().__init__(**kw)
        self.x_axes: List[XAxis] = []
        self.y_axes: List[YAxis] = []
        self.add_x_axis(x_axis)
        self.add_y_axis(y_axis)

    def add_x_axis(self, axis: Optional[XAxis]) -> None:
        if axis is not None and axis not in self.x_axes:
            self.x_axes.append(axis)

    def add_y_axis(self, axis: Optional[YAxis]) -> None:
        if axis is not None and axis not in self.y_axes:
            self.y_axes.append(axis)

    def axis_slots(self) -> List[Tuple[str, Optional[Axis]]]:
        return [("x", a) for a in self.x_axes] + [("y", a) for a in self.y_axes]

    def encode_series_reference(self, buf: EncodeBuffer, chart: "Chart", state: Any) -> None:
        encode_pair(buf, "coordinateSystem", "cartesian2d")
        x = chart.x_axis if chart.x_axis is not None else self.x_axes[0]
        y = chart.y_axis if chart.y_axis is not None else self.y_axes[0]
        encode_pair(buf, "xAxisIndex", state.resolver.wrap(x, self).serial)
        encode_pair(buf, "yAxisIndex", state.resolver.wrap(y, self).serial)
