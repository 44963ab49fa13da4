from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional, Sequence, Union
import json
import logging

from pydantic import ValidationError

from pydantic_chart_config import BuildConfig
from .axes import Axis, AxisWrapper
from .coordinates import CoordinateSystem
from .data import DataProvider, DataRegistry, DataTable
from .encoding import EncodeBuffer
from .errors import ChartError, ConfigParseError, ConfigValidationError, StructuralConflict
from .identity import IdentityRegistry, default_registry
from .parts import Legend, Part, PartKind, Tooltip
from .wrapping import WrapperResolver


__all__ = ["Document", "DocumentAssembler", "build", "parse_build_config"]

logger = logging.getLogger(__name__)

SECTIONS = tuple(PartKind)


def parse_build_config(config: Union[str, Dict[str, Any], BuildConfig, None]) -> BuildConfig:
    """Parse/validate a build configuration given as JSON text, a dict or a model."""
    if config is None:
        return BuildConfig()
    if isinstance(config, BuildConfig):
        return config
    try:
        if isinstance(config, str):
            return BuildConfig.model_validate_json(config)
        return BuildConfig.model_validate(config)
    except ValidationError as ve:
        raise ConfigValidationError(ve.json()) from ve
    except Exception as e:
        raise ConfigParseError(str(e)) from e


@dataclass(frozen=True)
class Document:
    """The serialized chart configuration handed to the runtime."""
    text: str
    data_table: DataTable
    section_sizes: Dict[str, int] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return json.loads(self.text)

    def __str__(self) -> str:
        return self.text


@dataclass
class BuildState:
    config: BuildConfig
    resolver: WrapperResolver
    table: DataTable
    sections: Dict[PartKind, List[Part]]


class DocumentAssembler:
    """
    Director of a document build: validate, collect data, resolve wrappers,
    number the sections, encode. The wrapper cache lives as long as the
    assembler, so rebuilding an unchanged graph reproduces the same ids.
    """
    def __init__(self, config: Union[str, Dict[str, Any], BuildConfig, None] = None, *,
                 ids: Optional[IdentityRegistry] = None):
        self.config = parse_build_config(config)
        self.ids = ids
        self.roots: List[Part] = []
        self.resolver = WrapperResolver(ids)
        self.registry = DataRegistry()
        self._state: Optional[BuildState] = None
        self._legend: Optional[Legend] = None
        self._tooltip: Optional[Tooltip] = None

    # ---------- roots ----------

    def add(self, *parts: Part) -> "DocumentAssembler":
        for p in parts:
            if p is not None and all(p is not r for r in self.roots):
                self.roots.append(p)
        return self

    def remove(self, *parts: Part) -> None:
        self.roots = [r for r in self.roots if all(r is not p for p in parts)]

    def clear(self) -> None:
        self.roots = []

    # ---------- pipeline ----------

    def build(self, roots: Optional[Sequence[Part]] = None) -> Document:
        parts = reachable(self.roots if roots is None else roots)
        self._state = None
        self.resolver.use(self._registry_for(parts))

        coordinate_systems = [p for p in parts if isinstance(p, CoordinateSystem)]
        _validate(parts, coordinate_systems)

        table = self.registry.collect(parts)
        wrappers = self._resolve_wrappers(coordinate_systems)

        emitted = [p for p in parts if not isinstance(p, (Axis, DataProvider))]
        emitted.extend(self._defaults(emitted))
        sections = _number_sections(emitted, wrappers)

        state = BuildState(self.config, self.resolver, table, sections)
        text = _encode(state)
        if self.config.check_output:
            _check_output(text)
        self._state = state
        logger.debug("built document: %d parts, %d data providers, %d chars",
                     len(emitted) + len(wrappers), len(table), len(text))
        return Document(text, table, {k.value: len(v) for k, v in sections.items() if v})

    def encode(self) -> str:
        """Re-encode the last successful build without re-validating."""
        if self._state is None:
            raise ChartError("Document has not been built")
        return _encode(self._state)

    def _registry_for(self, parts: List[Part]) -> IdentityRegistry:
        """The one registry every part of this document draws its id from."""
        registry = self.ids
        for p in parts:
            if registry is None:
                registry = p.registry
            elif p.registry is not registry:
                raise StructuralConflict(
                    f"{p.class_name()} draws its id from a different identity registry than the rest of the document")
        return registry or default_registry

    def _resolve_wrappers(self, coordinate_systems: List[CoordinateSystem]) -> List[AxisWrapper]:
        pairs = [(axis, cs) for cs in coordinate_systems for axis in cs.axes()]
        self.resolver.retain(pairs)
        return [self.resolver.wrap(axis, cs) for axis, cs in pairs]

    def _defaults(self, parts: List[Part]) -> List[Part]:
        out: List[Part] = []
        if self.config.default_legend and not any(isinstance(p, Legend) for p in parts):
            if self._legend is None or self._legend.registry is not self.resolver.ids:
                self._legend = Legend(ids=self.resolver.ids)
            out.append(self._legend)
        if self.config.default_tooltip and not any(isinstance(p, Tooltip) for p in parts):
            if self._tooltip is None or self._tooltip.registry is not self.resolver.ids:
                self._tooltip = Tooltip(ids=self.resolver.ids)
            out.append(self._tooltip)
        return out


def build(*roots: Part, config: Union[str, Dict[str, Any], BuildConfig, None] = None) -> Document:
    return DocumentAssembler(config).build(roots)


# ---------- Steps ----------

def reachable(roots: Iterable[Part]) -> List[Part]:
    """Depth-first, declaration order, each part object once."""
    seen = set()  # id(part); every visited part stays referenced from out
    out: List[Part] = []

    def visit(p: Part) -> None:
        if p is None or id(p) in seen:
            return
        seen.add(id(p))
        out.append(p)
        for c in p.children():
            visit(c)

    for r in roots:
        visit(r)
    return out


def _validate(parts: List[Part], coordinate_systems: List[CoordinateSystem]) -> None:
    # fresh pass: ownership is re-derived from the current graph
    for cs in coordinate_systems:
        cs.reset()
        for axis in cs.axes():
            axis.coordinate_system = None
    for cs in coordinate_systems:
        cs.validate()
    for p in parts:
        if not isinstance(p, (CoordinateSystem, Axis)):
            p.validate()
    logger.debug("validated %d parts (%d coordinate systems)", len(parts), len(coordinate_systems))


def _number_sections(parts: List[Part], wrappers: List[AxisWrapper]) -> Dict[PartKind, List[Part]]:
    sections: Dict[PartKind, List[Part]] = {k: [] for k in SECTIONS}
    for p in [*wrappers, *parts]:
        if p.kind is None or p.kind is PartKind.dataset:
            continue
        members = sections[p.kind]
        p.serial = len(members)
        members.append(p)
    return sections


def _encode(state: BuildState) -> str:
    buf = EncodeBuffer(ensure_ascii=state.config.ensure_ascii)
    buf.append("{")
    for kind in SECTIONS:
        if kind is PartKind.dataset:
            if len(state.table):
                buf.add_comma()
                buf.append(f'"{kind.value}":')
                state.table.encode(buf)
            continue
        members = state.sections.get(kind) or []
        if not members:
            continue
        buf.add_comma()
        buf.append(f'"{kind.value}":[')
        for i, p in enumerate(members):
            if i:
                buf.append(",")
            buf.append("{")
            try:
                p.encode(buf, state)
            except (TypeError, ValueError) as e:
                raise StructuralConflict(f"{p.class_name()} holds a value that cannot be encoded: {e}") from e
            buf.append("}")
        buf.append("]")
    buf.append("}")
    return buf.getvalue()


def _check_output(text: str) -> None:
    try:
        json.loads(text)
    except ValueError as e:
        raise ChartError(f"Encoded document is not valid JSON: {e}") from e
