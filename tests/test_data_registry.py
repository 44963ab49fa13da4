import itertools

import numpy as np
import pandas as pd
import pytest

from pydantic_chart_config import ChartType, DataType
from chart_document import (
    CategoryData, Chart, Data, DataRegistry, DataStream, DateData, IdentityRegistry, from_frame,
    from_series, infer_data_type,
)
from chart_document.encoding import EncodeBuffer


def test_same_instance_collected_once():
    shared = Data(1, 2, 3)
    a = Chart(ChartType.line, shared, shared)
    b = Chart(ChartType.bar, shared, shared)
    table = DataRegistry().collect([a, b])
    assert len(table) == 1
    assert table[0] is shared
    assert shared.serial == 0

def test_equal_values_are_distinct_entries():
    d1, d2 = Data(1, 2, 3), Data(1, 2, 3)
    table = DataRegistry().collect([Chart(ChartType.line, d1, d2)])
    assert len(table) == 2
    assert (d1.serial, d2.serial) == (0, 1)

def test_equal_ids_from_separate_registries_stay_distinct():
    d1, d2 = Data(1, ids=IdentityRegistry()), Data(2, ids=IdentityRegistry())
    assert d1.id == d2.id
    table = DataRegistry().collect([Chart(ChartType.line, d1, d2)])
    assert len(table) == 2
    assert (d1.serial, d2.serial) == (0, 1)

def test_first_seen_order():
    x, y, z = CategoryData("a", "b"), Data(1, 2), Data(3, 4)
    table = DataRegistry().collect([Chart(ChartType.line, x, y), Chart(ChartType.line, x, z)])
    assert [p is q for p, q in zip(table, [x, y, z])] == [True, True, True]
    assert [x.serial, y.serial, z.serial] == [0, 1, 2]
    assert table.serial_of(z) == 2

def test_empty_provider_keeps_a_slot():
    empty, full = Data(), Data(5)
    table = DataRegistry().collect([Chart(ChartType.line, empty, full)])
    assert len(table) == 2
    buf = EncodeBuffer()
    table.encode(buf)
    assert buf.getvalue() == "[[],[5]]"

def test_recollect_assigns_fresh_serials():
    reg = DataRegistry()
    x, y, z = Data(1), Data(2), Data(3)
    reg.collect([Chart(ChartType.line, x, y)])
    assert (x.serial, y.serial) == (0, 1)
    table = reg.collect([Chart(ChartType.line, z, y)])
    assert len(table) == 2
    assert (z.serial, y.serial) == (0, 1)
    assert x.serial == -1

def test_no_providers_gives_empty_table():
    assert len(DataRegistry().collect([])) == 0

def test_unregistered_serial_is_minus_one():
    assert Data(1).serial == -1


# ---------- streams ----------

def test_one_shot_iterator_is_stable_across_passes():
    s = DataStream(iter([1, 2, 3]))
    assert s.as_list() == [1, 2, 3]
    assert s.as_list() == [1, 2, 3]

def test_callable_source_restarts():
    calls = []
    def source():
        calls.append(1)
        return range(3)
    s = DataStream(source)
    assert s.as_list() == [0, 1, 2]
    assert s.as_list() == [0, 1, 2]
    assert len(calls) == 2

def test_limit_caps_infinite_source():
    s = DataStream(itertools.count(10), limit=3)
    assert s.as_list() == [10, 11, 12]
    assert s.as_list() == [10, 11, 12]
    with pytest.raises(ValueError):
        DataStream([], limit=-1)


# ---------- pandas / numpy ----------

def test_infer_types():
    assert infer_data_type(pd.Series([1.5, 2.0])) == DataType.number
    assert infer_data_type(np.arange(3)) == DataType.number
    assert infer_data_type(pd.Series(pd.date_range("2024-01-01", periods=2))) == DataType.time
    assert infer_data_type(["a", "b"]) == DataType.category

def test_from_series_snapshots_values():
    s = pd.Series([1, 2, 3], name="units")
    d = from_series(s)
    assert d.name == "units"
    assert d.as_list() == [1, 2, 3]
    assert d.data_type == DataType.number
    assert d.axis_type == "value"

def test_from_frame_and_missing_columns():
    df = pd.DataFrame({"cat": ["a", "b"], "v": [1.0, 2.0]})
    out = from_frame(df)
    assert out["cat"].data_type == DataType.category
    assert out["v"].as_list() == [1.0, 2.0]
    with pytest.raises(KeyError):
        from_frame(df, ["nope"])

def test_dates_encode_as_iso_strings():
    from datetime import date
    d = DateData(date(2024, 1, 1), date(2024, 1, 2))
    buf = EncodeBuffer()
    d.encode(buf)
    assert buf.getvalue() == '["2024-01-01","2024-01-02"]'
    assert d.axis_type == "time"
