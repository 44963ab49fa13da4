from __future__ import annotations
from typing import Any, Callable, Iterable, List, Optional
import json

from plotly.utils import PlotlyJSONEncoder


__all__ = ["EncodeBuffer", "escape", "encode_pair", "encode_values", "encode_nested"]


_OPENERS = ("{", "[", ",")


def escape(value: Any, *, ensure_ascii: bool = False) -> str:
    """JSON text of a scalar (or small container); numpy/pandas/dates handled by plotly's encoder."""
    return json.dumps(value, cls=PlotlyJSONEncoder, separators=(",", ":"), ensure_ascii=ensure_ascii)


class EncodeBuffer:
    """Append-only text buffer. Separators are decided from what was actually written."""
    def __init__(self, *, ensure_ascii: bool = False):
        self.ensure_ascii = ensure_ascii
        self._chunks: List[str] = []
        self._length = 0

    def __len__(self) -> int:
        return self._length

    def append(self, text: str) -> "EncodeBuffer":
        if text:
            self._chunks.append(text)
            self._length += len(text)
        return self

    def last_char(self) -> str:
        for chunk in reversed(self._chunks):
            s = chunk.rstrip(" \n")
            if s:
                return s[-1]
        return ""

    def add_comma(self) -> None:
        last = self.last_char()
        if last and last not in _OPENERS:
            self.append(",")

    def tentative(self) -> "EncodeBuffer":
        """Scratch buffer for a write that may turn out empty."""
        return EncodeBuffer(ensure_ascii=self.ensure_ascii)

    def getvalue(self) -> str:
        return "".join(self._chunks)

    def __str__(self) -> str:
        return self.getvalue()


def encode_pair(buf: EncodeBuffer, name: str, value: Any) -> None:
    buf.add_comma()
    buf.append(escape(name, ensure_ascii=buf.ensure_ascii)).append(":")
    buf.append(escape(value, ensure_ascii=buf.ensure_ascii))


def encode_values(buf: EncodeBuffer, values: Iterable[Any]) -> int:
    """Write a JSON array from a (possibly lazy) iterable; returns the count written."""
    count = 0
    buf.append("[")
    for v in values:
        if count:
            buf.append(",")
        buf.append(escape(v, ensure_ascii=buf.ensure_ascii))
        count += 1
    buf.append("]")
    return count


def encode_nested(buf: EncodeBuffer, name: Optional[str], write: Callable[[EncodeBuffer], None]) -> bool:
    """
    Encode an optional sub-object. With a name it is written as "name":{...};
    without one its members are merged into the current object. Nothing at all
    (not even a separator) is written when the sub-object produces no content.
    """
    scratch = buf.tentative()
    write(scratch)
    if len(scratch) == 0:
        return False
    buf.add_comma()
    if name is not None:
        buf.append(escape(name, ensure_ascii=buf.ensure_ascii)).append(":{")
        buf.append(scratch.getvalue()).append("}")
    else:
        buf.append(scratch.getvalue())
    return True
