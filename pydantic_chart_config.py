from __future__ import annotations
from enum import Enum
from typing import Any, Dict, Optional, Tuple, Union
import re

from pydantic import BaseModel, Field, field_validator, ConfigDict


# ---------- Enums ----------

class DataType(str, Enum):
    number = "number"
    category = "category"
    date = "date"
    time = "time"
    log = "log"
    object = "object"

class ChartType(str, Enum):
    line = "line"
    bar = "bar"
    scatter = "scatter"
    effect_scatter = "effectScatter"
    pie = "pie"
    funnel = "funnel"

class TooltipTrigger(str, Enum):
    item = "item"
    axis = "axis"
    none = "none"

class ZoomType(str, Enum):
    slider = "slider"
    inside = "inside"

class FilterMode(str, Enum):
    filter = "filter"
    weak_filter = "weakFilter"
    empty = "empty"
    none = "none"


# axis "type" understood by the runtime for each data type
AXIS_TYPES: Dict[DataType, str] = {
    DataType.number: "value",
    DataType.category: "category",
    DataType.date: "time",
    DataType.time: "time",
    DataType.log: "log",
    DataType.object: "",
}

# data slots each series type reads, in encoding order
CHART_SLOTS: Dict[ChartType, Tuple[str, ...]] = {
    ChartType.line: ("x", "y"),
    ChartType.bar: ("x", "y"),
    ChartType.scatter: ("x", "y"),
    ChartType.effect_scatter: ("x", "y"),
    ChartType.pie: ("itemName", "value"),
    ChartType.funnel: ("itemName", "value"),
}

SELF_POSITIONING = {ChartType.pie, ChartType.funnel}


# ---------- Small validators ----------

_PERCENT = re.compile(r"^(?:100|[1-9]?[0-9])%$")
_KEYWORDS = {"left", "center", "right", "top", "middle", "bottom"}

def _valid_size(v: Union[int, str]) -> bool:
    if isinstance(v, bool):
        return False
    if isinstance(v, int):
        return v >= 0
    return bool(_PERCENT.match(v)) or v in _KEYWORDS


# ---------- Nested leaf models ----------

class Position(BaseModel):
    """Layout box of a part. Unset edges are left to the runtime."""
    left: Optional[Union[int, str]] = None
    right: Optional[Union[int, str]] = None
    width: Optional[Union[int, str]] = None
    top: Optional[Union[int, str]] = None
    bottom: Optional[Union[int, str]] = None
    height: Optional[Union[int, str]] = None

    model_config = ConfigDict(extra="forbid", validate_assignment=True)

    @field_validator("left", "right", "width", "top", "bottom", "height")
    @classmethod
    def _validate_size(cls, v):
        if v is not None and not _valid_size(v):
            raise ValueError(f"Invalid size: {v!r} (pixels, 'NN%' or an alignment keyword)")
        return v

    def center(self) -> "Position":
        self.left = "center"
        self.top = "middle"
        return self

    def is_empty(self) -> bool:
        return all(getattr(self, f) is None for f in type(self).model_fields)


class LineOptions(BaseModel):
    smooth: Optional[Union[bool, float]] = None
    step: Optional[Union[bool, str]] = None
    connect_nulls: Optional[bool] = Field(None, alias="connectNulls")
    symbol: Optional[str] = None

    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    @field_validator("smooth")
    @classmethod
    def _smooth_range(cls, v):
        if isinstance(v, float) and not 0.0 <= v <= 1.0:
            raise ValueError("smooth must be within 0..1")
        return v

    @field_validator("step")
    @classmethod
    def _step_location(cls, v):
        if isinstance(v, str) and v not in ("start", "middle", "end"):
            raise ValueError("step must be one of start, middle, end")
        return v

class BarOptions(BaseModel):
    round_cap: Optional[bool] = Field(None, alias="roundCap")
    bar_gap: Optional[str] = Field(None, alias="barGap")
    bar_category_gap: Optional[str] = Field(None, alias="barCategoryGap")
    bar_width: Optional[Union[int, str]] = Field(None, alias="barWidth")

    model_config = ConfigDict(extra="forbid", populate_by_name=True)

class ScatterOptions(BaseModel):
    symbol: Optional[str] = None
    symbol_size: Optional[int] = Field(None, alias="symbolSize", ge=1, le=256)

    model_config = ConfigDict(extra="forbid", populate_by_name=True)

class PieOptions(BaseModel):
    center: Optional[Tuple[Union[int, str], Union[int, str]]] = None
    radius: Optional[Union[int, str, Tuple[Union[int, str], Union[int, str]]]] = None
    start_angle: Optional[int] = Field(None, alias="startAngle", ge=0, le=360)
    clockwise: Optional[bool] = None
    rose_type: Optional[str] = Field(None, alias="roseType")

    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    @field_validator("rose_type")
    @classmethod
    def _rose(cls, v):
        if v is not None and v not in ("radius", "area"):
            raise ValueError("roseType must be 'radius' or 'area'")
        return v

class FunnelOptions(BaseModel):
    sort: Optional[str] = None
    gap: Optional[int] = Field(None, ge=0)
    min_size: Optional[str] = Field(None, alias="minSize")
    max_size: Optional[str] = Field(None, alias="maxSize")

    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    @field_validator("sort")
    @classmethod
    def _sort(cls, v):
        if v is not None and v not in ("ascending", "descending", "none"):
            raise ValueError("sort must be ascending, descending or none")
        return v

class ZoomOptions(BaseModel):
    filter_mode: Optional[FilterMode] = Field(None, alias="filterMode")
    start: Optional[float] = Field(None, ge=0, le=100)
    end: Optional[float] = Field(None, ge=0, le=100)
    zoom_lock: Optional[bool] = Field(None, alias="zoomLock")

    model_config = ConfigDict(extra="forbid", populate_by_name=True)


# ---------- Build configuration ----------

class BuildConfig(BaseModel):
    default_legend: bool = True       # add a Legend when the graph has none
    default_tooltip: bool = True      # add a Tooltip when the graph has none
    ensure_ascii: bool = False
    check_output: bool = True         # json round-trip guard on the final text

    model_config = ConfigDict(extra="forbid")


def options_dict(options: Optional[BaseModel]) -> Dict[str, Any]:
    """Runtime-facing (aliased) view of an options model, unset fields dropped."""
    if options is None:
        return {}
    return options.model_dump(by_alias=True, exclude_none=True, mode="json")
