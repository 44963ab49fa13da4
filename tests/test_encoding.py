import json
from datetime import date

import numpy as np

from pydantic_chart_config import Position
from chart_document import IdentityRegistry, Title
from chart_document.encoding import EncodeBuffer, encode_nested, encode_pair, encode_values, escape
from chart_document.parts import encode_position


def test_escape_scalars():
    assert escape(True) == "true"
    assert escape(None) == "null"
    assert escape(np.int64(3)) == "3"
    assert escape(float("nan")) == "null"
    assert escape(date(2024, 1, 2)) == '"2024-01-02"'
    assert escape('say "hi"\n') == '"say \\"hi\\"\\n"'

def test_pairs_separate_themselves():
    buf = EncodeBuffer()
    buf.append("{")
    encode_pair(buf, "a", 1)
    encode_pair(buf, "b", "x")
    buf.append("}")
    assert buf.getvalue() == '{"a":1,"b":"x"}'

def test_empty_position_writes_nothing():
    buf = EncodeBuffer()
    buf.append("{")
    before = len(buf)
    assert encode_position(buf, Position()) is False
    assert len(buf) == before
    assert encode_position(buf, None) is False
    assert buf.getvalue() == "{"

def test_position_fields_in_order():
    buf = EncodeBuffer()
    buf.append("{")
    encode_position(buf, Position(top="50%", left=10))
    buf.append("}")
    assert buf.getvalue() == '{"left":10,"top":"50%"}'

def test_nested_object_dropped_when_empty():
    buf = EncodeBuffer()
    buf.append("{")
    encode_pair(buf, "a", 1)
    assert encode_nested(buf, "style", lambda b: None) is False
    assert encode_nested(buf, "inner", lambda b: encode_pair(b, "k", 2)) is True
    buf.append("}")
    assert buf.getvalue() == '{"a":1,"inner":{"k":2}}'

def test_part_with_unset_optionals_is_well_formed():
    t = Title("T", ids=IdentityRegistry())
    t.set_position(Position())
    buf = EncodeBuffer()
    buf.append("{")
    t.encode(buf)
    buf.append("}")
    text = buf.getvalue()
    assert text == '{"id":1,"show":true,"text":"T"}'
    assert ",," not in text and ",}" not in text
    assert json.loads(text)["text"] == "T"

def test_encode_values_lazy():
    buf = EncodeBuffer()
    n = encode_values(buf, (i * i for i in range(4)))
    assert n == 4
    assert buf.getvalue() == "[0,1,4,9]"
    empty = EncodeBuffer()
    assert encode_values(empty, iter(())) == 0
    assert empty.getvalue() == "[]"

def test_ensure_ascii():
    buf = EncodeBuffer(ensure_ascii=True)
    encode_pair(buf, "t", "café")
    assert buf.getvalue() == '"t":"caf\\u00e9"'
