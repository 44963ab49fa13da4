import pytest
from pydantic import ValidationError

from pydantic_chart_config import BuildConfig, ChartType, LineOptions, PieOptions, Position
from chart_document import (
    Chart, ConfigValidationError, Data, DocumentAssembler, parse_build_config,
)


def test_parse_from_json_and_dict():
    cfg = parse_build_config('{"default_legend": false}')
    assert cfg.default_legend is False and cfg.default_tooltip is True
    assert parse_build_config({"ensure_ascii": True}).ensure_ascii is True
    assert parse_build_config(None) == BuildConfig()
    same = BuildConfig(check_output=False)
    assert parse_build_config(same) is same

def test_unknown_keys_rejected():
    with pytest.raises(ConfigValidationError):
        parse_build_config({"pretty": True})
    with pytest.raises(ConfigValidationError):
        parse_build_config("{not json")

def test_assembler_accepts_raw_config():
    asm = DocumentAssembler('{"default_tooltip": false}')
    assert asm.config.default_tooltip is False

def test_position_sizes():
    p = Position(left=10, width="50%", top="bottom")
    assert not p.is_empty()
    assert Position().is_empty()
    with pytest.raises(ValidationError):
        Position(left="wide")
    with pytest.raises(ValidationError):
        Position(height=-1)
    with pytest.raises(ValidationError):
        Position(top="150%")

def test_chart_options_are_validated():
    with pytest.raises(ValidationError):
        LineOptions(smooth=2.0)
    with pytest.raises(ValidationError):
        PieOptions(rose_type="spiral")
    chart = Chart(ChartType.pie, Data(1), Data(2))
    with pytest.raises(ValidationError):
        chart.configure(bar_width=10)
    chart.configure(start_angle=45).configure(clockwise=False)
    assert chart.options.start_angle == 45 and chart.options.clockwise is False
