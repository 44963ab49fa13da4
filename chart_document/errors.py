from __future__ import annotations


__all__ = [
    "ChartError",
    "StructuralConflict",
    "MissingRequiredPart",
    "EmptyData",
    "ConfigParseError",
    "ConfigValidationError",
]


# ---------- Errors ----------

class ChartError(Exception): ...

# two owners claim the same exclusive child, or a part sits where its type is not allowed
class StructuralConflict(ChartError): ...

# a coordinate system without a mandatory axis, a series without a data slot, ...
class MissingRequiredPart(ChartError): ...

# a data-bearing part with no data source at all
class EmptyData(ChartError): ...

class ConfigParseError(ChartError): ...
class ConfigValidationError(ChartError): ...
