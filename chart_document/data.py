from __future__ import annotations
from typing import Any, Callable, Dict, Iterable, Iterator, List, Optional, Sequence, Union
import itertools
import logging

import numpy as np
import pandas as pd

from pydantic_chart_config import AXIS_TYPES, DataType
from .encoding import EncodeBuffer, encode_values
from .errors import StructuralConflict
from .parts import DataOwning, Part, PartKind


__all__ = [
    "DataProvider",
    "Data",
    "CategoryData",
    "DateData",
    "TimeData",
    "DataStream",
    "DataTable",
    "DataRegistry",
    "infer_data_type",
    "from_series",
    "from_frame",
]

logger = logging.getLogger(__name__)


# ---------- Providers ----------

class DataProvider(Part):
    """A lazy sequence of values plus its serial in the shared data table (-1 until collected)."""
    kind = PartKind.dataset

    def __init__(self, data_type: DataType = DataType.number, name: Optional[str] = None, **kw):
        super().__init__(name, **kw)
        self.data_type = DataType(data_type)

    def values(self) -> Iterator[Any]:
        raise NotImplementedError

    def as_list(self) -> List[Any]:
        return list(self.values())

    @property
    def axis_type(self) -> str:
        return AXIS_TYPES[self.data_type]

    def encode(self, buf: EncodeBuffer, state: Any = None) -> None:
        encode_values(buf, self.values())


class Data(DataProvider):
    """List-backed numeric data."""
    default_type = DataType.number

    def __init__(self, *values: Any, data_type: Optional[DataType] = None, name: Optional[str] = None, **kw):
        super().__init__(data_type or self.default_type, name, **kw)
        self._values: List[Any] = list(values)

    def values(self) -> Iterator[Any]:
        return iter(self._values)

    def append(self, value: Any) -> None:
        self._values.append(value)

    def extend(self, values: Iterable[Any]) -> None:
        self._values.extend(values)

    def __len__(self) -> int:
        return len(self._values)

    def __iter__(self) -> Iterator[Any]:
        return self.values()

    def __getitem__(self, index):
        return self._values[index]

class CategoryData(Data):
    default_type = DataType.category

class DateData(Data):
    default_type = DataType.date

class TimeData(Data):
    default_type = DataType.time


class DataStream(DataProvider):
    """
    Values pulled lazily from a source.

    A callable source is called on every pass (restartable). A re-iterable
    (list, range, Series) is iterated afresh each pass. A one-shot iterator is
    cached on its first pass so later encodings see the same values. ``limit``
    caps infinite sources.
    """
    def __init__(self, source: Union[Callable[[], Iterable[Any]], Iterable[Any]],
                 data_type: DataType = DataType.number, *, limit: Optional[int] = None,
                 name: Optional[str] = None, **kw):
        super().__init__(data_type, name, **kw)
        if limit is not None and limit < 0:
            raise ValueError("limit must be >= 0")
        self._source = source
        self.limit = limit
        self._cache: Optional[List[Any]] = None

    def _pass(self) -> Iterable[Any]:
        if callable(self._source):
            return self._source()
        if iter(self._source) is self._source:
            if self._cache is None:
                self._cache = list(itertools.islice(self._source, self.limit))
            return self._cache
        return self._source

    def values(self) -> Iterator[Any]:
        it = iter(self._pass())
        return it if self.limit is None else itertools.islice(it, self.limit)


# ---------- pandas / numpy input ----------

def infer_data_type(values: Union[pd.Series, np.ndarray, Sequence[Any]]) -> DataType:
    s = values if isinstance(values, pd.Series) else pd.Series(values)
    if pd.api.types.is_bool_dtype(s.dtype):
        return DataType.category
    if pd.api.types.is_numeric_dtype(s.dtype):
        return DataType.number
    if pd.api.types.is_datetime64_any_dtype(s.dtype):
        return DataType.time
    return DataType.category

def from_series(values: Union[pd.Series, np.ndarray, Sequence[Any]], *,
                data_type: Optional[DataType] = None, name: Optional[str] = None, **kw) -> Data:
    """Snapshot a Series/array into a list-backed provider; type inferred from the dtype."""
    dt = data_type or infer_data_type(values)
    if name is None and isinstance(values, pd.Series) and values.name is not None:
        name = str(values.name)
    items = values.tolist() if isinstance(values, (pd.Series, np.ndarray)) else list(values)
    return Data(*items, data_type=dt, name=name, **kw)

def from_frame(df: pd.DataFrame, columns: Optional[Sequence[str]] = None, **kw) -> Dict[str, Data]:
    cols = list(columns) if columns is not None else list(df.columns)
    missing = [c for c in cols if c not in df.columns]
    if missing:
        raise KeyError(f"columns not found in dataframe: {missing}")
    return {c: from_series(df[c], **kw) for c in cols}


# ---------- Shared table ----------

class DataTable:
    """Distinct providers of one build, in first-seen order. Position == serial."""
    def __init__(self, providers: Sequence[DataProvider] = ()):
        self._providers: List[DataProvider] = list(providers)

    def __len__(self) -> int:
        return len(self._providers)

    def __iter__(self) -> Iterator[DataProvider]:
        return iter(self._providers)

    def __getitem__(self, serial: int) -> DataProvider:
        return self._providers[serial]

    def __contains__(self, provider: object) -> bool:
        return any(p is provider for p in self._providers)

    def serial_of(self, provider: DataProvider) -> int:
        for i, p in enumerate(self._providers):
            if p is provider:
                return i
        return -1

    def encode(self, buf: EncodeBuffer) -> None:
        buf.append("[")
        for i, p in enumerate(self._providers):
            if i:
                buf.append(",")
            try:
                p.encode(buf)
            except (TypeError, ValueError) as e:
                raise StructuralConflict(f"{p.class_name()} holds a value that cannot be encoded: {e}") from e
        buf.append("]")


class DataRegistry:
    """Collects every distinct provider declared by data-owning parts and numbers them."""
    def __init__(self):
        self._last: Optional[DataTable] = None

    def collect(self, parts: Iterable[Part]) -> DataTable:
        seen: Dict[int, DataProvider] = {}  # id(provider) -> provider, insertion ordered
        for part in parts:
            if isinstance(part, DataProvider):
                continue
            if not isinstance(part, DataOwning):
                continue
            sink: List[DataProvider] = []
            part.declare_data(sink)
            for provider in sink:
                if provider is not None and id(provider) not in seen:
                    seen[id(provider)] = provider
        table = DataTable(list(seen.values()))
        if self._last is not None:
            for stale in self._last:
                if id(stale) not in seen:
                    stale.serial = -1
        for serial, provider in enumerate(table):
            provider.serial = serial
        self._last = table
        logger.debug("collected %d distinct data providers", len(table))
        return table
