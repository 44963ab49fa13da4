from __future__ import annotations
from typing import Any, Callable, Dict, Iterable, List, Optional, Tuple, Type, Union

from pydantic import BaseModel

from pydantic_chart_config import (
    CHART_SLOTS, SELF_POSITIONING, ChartType, ZoomOptions, ZoomType,
    LineOptions, BarOptions, ScatterOptions, PieOptions, FunnelOptions, options_dict,
)
from .axes import Axis, XAxis, YAxis
from .coordinates import CoordinateSystem, RectangularCoordinate
from .data import DataProvider
from .encoding import EncodeBuffer, encode_nested, encode_pair
from .errors import EmptyData, MissingRequiredPart, StructuralConflict
from .parts import Part, PartKind


__all__ = ["Chart", "DataZoom", "register_body"]


BodyEncoder = Callable[["Chart", EncodeBuffer], None]


# ---------- Registry & dispatch ----------

_BODY_REGISTRY: Dict[ChartType, Tuple[Type[BaseModel], BodyEncoder]] = {}

def register_body(t: ChartType, options: Type[BaseModel]):
    def deco(fn: BodyEncoder):
        _BODY_REGISTRY[t] = (options, fn)
        return fn
    return deco


def _slot_label(slot: str) -> str:
    # 'itemName' -> 'Item Name'
    out = slot[0].upper()
    for c in slot[1:]:
        out += (" " + c) if c.isupper() else c
    return out


class Chart(Part):
    """
    A data series. The ChartType tag selects the data slots, the options model
    and the body encoder; everything else is shared by all series types.
    """
    kind = PartKind.series

    def __init__(self, chart_type: ChartType = ChartType.line, *data: Optional[DataProvider],
                 name: Optional[str] = None, **kw):
        super().__init__(name, **kw)
        self.chart_type = ChartType(chart_type)
        slots = CHART_SLOTS[self.chart_type]
        if len(data) > len(slots):
            raise ValueError(f"{self.chart_type.value} chart takes at most {len(slots)} data providers, got {len(data)}")
        self.data: List[Optional[DataProvider]] = [None] * len(slots)
        for i, d in enumerate(data):
            self.data[i] = d
        self.options: BaseModel = _BODY_REGISTRY[self.chart_type][0]()
        self.coordinate_system: Optional[CoordinateSystem] = None
        self.x_axis: Optional[XAxis] = None
        self.y_axis: Optional[YAxis] = None

    # ---------- data ----------

    @property
    def slots(self) -> Tuple[str, ...]:
        return CHART_SLOTS[self.chart_type]

    def set_data(self, data: Optional[DataProvider], slot: Union[int, str]) -> None:
        index = slot if isinstance(slot, int) else self.slots.index(slot)
        self.data[index] = data

    def declare_data(self, sink: List[DataProvider]) -> None:
        sink.extend(d for d in self.data if d is not None)

    def configure(self, **options: Any) -> "Chart":
        """Merge type-specific options (validated by the type's options model)."""
        model = type(self.options)
        merged = {**self.options.model_dump(exclude_none=True), **options}
        self.options = model.model_validate(merged)
        return self

    # ---------- placement ----------

    def plot_on(self, coordinate_system: Optional[CoordinateSystem], *,
                x_axis: Optional[XAxis] = None, y_axis: Optional[YAxis] = None) -> "Chart":
        if coordinate_system is None:
            if self.coordinate_system is not None:
                self.coordinate_system.remove(self)
        else:
            coordinate_system.add(self)
        self.x_axis = x_axis
        self.y_axis = y_axis
        return self

    @property
    def requires_coordinates(self) -> bool:
        return self.chart_type not in SELF_POSITIONING

    def children(self) -> Iterable[Part]:
        out: List[Part] = []
        if self.coordinate_system is not None:
            out.append(self.coordinate_system)
        out.extend(d for d in self.data if d is not None)
        return out

    def get_name(self) -> Optional[str]:
        return self.name if self.name is not None else f"Chart {self.serial + 1}"

    def class_name(self) -> str:
        label = f"{_slot_label(self.chart_type.value)} Chart"
        return label if not self.name else f"{label} ({self.name})"

    def validate(self) -> None:
        if all(d is None for d in self.data):
            raise EmptyData(f"Data not set for {self.class_name()}")
        for slot, d in zip(self.slots, self.data):
            if d is None:
                raise MissingRequiredPart(f"Data for {_slot_label(slot)} not set for {self.class_name()}")
        cs = self.coordinate_system
        if self.requires_coordinates:
            if cs is None:
                raise MissingRequiredPart(f"Coordinate system not set for {self.class_name()}")
        elif cs is not None:
            raise StructuralConflict(f"{self.class_name()} cannot be plotted on {cs.class_name()}")
        for axis, pool in ((self.x_axis, "x_axes"), (self.y_axis, "y_axes")):
            if axis is None:
                continue
            if not isinstance(cs, RectangularCoordinate) or axis not in getattr(cs, pool):
                raise StructuralConflict(f"{axis.class_name()} doesn't belong to the coordinate system of {self.class_name()}")

    # ---------- encoding ----------

    def encode_body(self, buf: EncodeBuffer, state: Any) -> None:
        encode_pair(buf, "type", self.chart_type.value)
        if self.coordinate_system is not None:
            self.coordinate_system.encode_series_reference(buf, self, state)
        def _encode(scratch: EncodeBuffer) -> None:
            for slot, d in zip(self.slots, self.data):
                encode_pair(scratch, slot, d.serial)
        encode_nested(buf, "encode", _encode)
        _BODY_REGISTRY[self.chart_type][1](self, buf)


# ---------- Type bodies ----------

def _encode_options(chart: Chart, buf: EncodeBuffer) -> None:
    for k, v in options_dict(chart.options).items():
        encode_pair(buf, k, v)

@register_body(ChartType.line, LineOptions)
def _line(chart: Chart, buf: EncodeBuffer) -> None:
    _encode_options(chart, buf)

@register_body(ChartType.bar, BarOptions)
def _bar(chart: Chart, buf: EncodeBuffer) -> None:
    _encode_options(chart, buf)

@register_body(ChartType.scatter, ScatterOptions)
def _scatter(chart: Chart, buf: EncodeBuffer) -> None:
    _encode_options(chart, buf)

@register_body(ChartType.effect_scatter, ScatterOptions)
def _effect_scatter(chart: Chart, buf: EncodeBuffer) -> None:
    _encode_options(chart, buf)
    encode_pair(buf, "showEffectOn", "render")

@register_body(ChartType.pie, PieOptions)
def _pie(chart: Chart, buf: EncodeBuffer) -> None:
    _encode_options(chart, buf)

@register_body(ChartType.funnel, FunnelOptions)
def _funnel(chart: Chart, buf: EncodeBuffer) -> None:
    _encode_options(chart, buf)


# ---------- Zoom ----------

class DataZoom(Part):
    """Zoom control over some (default: all) axes of one coordinate system."""
    kind = PartKind.data_zoom

    def __init__(self, coordinate_system: Optional[CoordinateSystem], *axes: Axis,
                 zoom_type: ZoomType = ZoomType.slider, **kw):
        super().__init__(**kw)
        self.coordinate_system = coordinate_system
        self.zoom_type = ZoomType(zoom_type)
        self.axes: List[Axis] = []
        self.options = ZoomOptions()
        self.add_axis(*axes)

    def add_axis(self, *axes: Axis) -> None:
        for a in axes:
            if a is not None and a not in self.axes:
                self.axes.append(a)

    def configure(self, **options: Any) -> "DataZoom":
        merged = {**self.options.model_dump(exclude_none=True), **options}
        self.options = ZoomOptions.model_validate(merged)
        return self

    def target_axes(self) -> List[Axis]:
        return self.axes or self.coordinate_system.axes()

    def children(self) -> Iterable[Part]:
        return [] if self.coordinate_system is None else [self.coordinate_system]

    def validate(self) -> None:
        cs = self.coordinate_system
        if cs is None:
            raise MissingRequiredPart(f"Coordinate system not set for {self.class_name()}")
        owned = cs.axes()
        for a in self.axes:
            if a not in owned:
                raise StructuralConflict(f"{a.class_name()} doesn't belong to the coordinate system of {self.class_name()}")

    def encode_body(self, buf: EncodeBuffer, state: Any) -> None:
        encode_pair(buf, "type", self.zoom_type.value)
        by_kind: Dict[str, List[int]] = {}
        for a in self.target_axes():
            w = state.resolver.wrap(a, self.coordinate_system)
            by_kind.setdefault(f"{a.wrapper_kind.value}Index", []).append(w.serial)
        for key, serials in by_kind.items():
            encode_pair(buf, key, serials)
        for k, v in options_dict(self.options).items():
            encode_pair(buf, k, v)
