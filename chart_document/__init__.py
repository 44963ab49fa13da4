
from .assembler import Document, DocumentAssembler, build, parse_build_config
from .axes import AngleAxis, Axis, AxisWrapper, RadiusAxis, XAxis, YAxis
from .charts import Chart, DataZoom, register_body
from .coordinates import CoordinateSystem, PolarCoordinate, RectangularCoordinate, ValidationState
from .data import (
    CategoryData, Data, DataProvider, DataRegistry, DataStream, DataTable, DateData, TimeData,
    from_frame, from_series, infer_data_type,
)
from .errors import (
    ChartError, ConfigParseError, ConfigValidationError, EmptyData, MissingRequiredPart, StructuralConflict,
)
from .identity import IdentityRegistry, default_registry, next_id
from .io_utils import document_to_dict, read_document, write_document
from .parts import Legend, Part, PartKind, Title, Tooltip
from .wrapping import WrapperResolver
