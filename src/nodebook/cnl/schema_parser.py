# ──────────────────────────────────────────────────────────────────────
# Nodebook Core — User Schema Block Parser
# © 1998–2026 Miroslav Šotek. All rights reserved.
# Contact: www.anulum.li | protoscience@anulum.li
# ORCID: https://orcid.org/0009-0009-3560-0851
# License: GNU AGPL v3 | Commercial licensing available
# ──────────────────────────────────────────────────────────────────────
"""
Parser for user schema blocks.

One declaration per line::

    nodeType: Planet, "A celestial body", parent: class
    relationType: orbits, "Moves around", domain: Planet, range: Star, transitive: false
    attributeType: gravity, float, "Surface gravity", unit: m/s^2, domain: Planet
    transitionType: melt, "Solid to liquid", inputs: Solid, outputs: Liquid
    functionType: area, "width * height", scope: Object, description: Surface

Fields are comma-separated outside quotes; ``key: value`` fields are
options, pipe-separated values are lists.  Bad lines are reported with
their 1-based line number and parsing continues.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Dict, Iterable, List, Optional, Tuple

from .schemas import (
    AttributeTypeSchema,
    FunctionTypeSchema,
    NodeTypeSchema,
    RelationTypeSchema,
    SchemaCatalog,
    TransitionTypeSchema,
    merge_by_name,
)


class SchemaLineError(ValueError):
    """Raised by a line decoder when mandatory fields are missing."""


@dataclass
class SchemaParseError:
    message: str
    line: int


@dataclass
class SchemaParseResult:
    schemas: SchemaCatalog = field(default_factory=SchemaCatalog.empty)
    errors: List[SchemaParseError] = field(default_factory=list)


def split_fields(text: str) -> List[str]:
    """Split on commas that are not inside single or double quotes."""
    parts: List[str] = []
    current: List[str] = []
    quote: Optional[str] = None
    for ch in text:
        if quote is not None:
            if ch == quote:
                quote = None
            else:
                current.append(ch)
        elif ch in ("'", '"'):
            quote = ch
        elif ch == ",":
            parts.append("".join(current).strip())
            current = []
        else:
            current.append(ch)
    parts.append("".join(current).strip())
    return [p for p in parts if p]


def _options(fields: Iterable[str]) -> Dict[str, str]:
    kvs: Dict[str, str] = {}
    for part in fields:
        idx = part.find(":")
        if idx > 0:
            kvs[part[:idx].strip().lower()] = part[idx + 1:].strip()
    return kvs


def _pipe_list(value: Optional[str]) -> Tuple[str, ...]:
    if not value:
        return ()
    return tuple(s.strip() for s in value.split("|") if s.strip())


def _first_positional(fields: Iterable[str]) -> str:
    for part in fields:
        if ":" not in part:
            return part
    return ""


def _flag(kvs: Dict[str, str], key: str) -> Optional[bool]:
    if key not in kvs:
        return None
    return kvs[key].lower() == "true"


def parse_node_type(fields: List[str]) -> NodeTypeSchema:
    if not fields:
        raise SchemaLineError("nodeType requires at least: name")
    rest = fields[1:]
    kvs = _options(rest)
    return NodeTypeSchema(
        name=fields[0],
        description=_first_positional(rest),
        parent_types=_pipe_list(kvs.get("parent")),
    )


def parse_relation_type(fields: List[str]) -> RelationTypeSchema:
    if not fields:
        raise SchemaLineError("relationType requires at least: name")
    rest = fields[1:]
    kvs = _options(rest)
    return RelationTypeSchema(
        name=fields[0],
        description=_first_positional(rest),
        domain=_pipe_list(kvs.get("domain")),
        range=_pipe_list(kvs.get("range")),
        symmetric=_flag(kvs, "symmetric"),
        transitive=_flag(kvs, "transitive"),
        inverse_name=kvs.get("inverse"),
        aliases=_pipe_list(kvs.get("aliases")),
    )


def parse_attribute_type(fields: List[str]) -> AttributeTypeSchema:
    if len(fields) < 2:
        raise SchemaLineError("attributeType requires at least: name, data_type")
    rest = fields[2:]
    kvs = _options(rest)
    values = kvs.get("values")
    return AttributeTypeSchema(
        name=fields[0],
        data_type=fields[1],
        description=_first_positional(rest),
        unit=kvs.get("unit") or None,
        domain=_pipe_list(kvs.get("domain")),
        allowed_values=_pipe_list(values) if values else None,
    )


def parse_transition_type(fields: List[str]) -> TransitionTypeSchema:
    if not fields:
        raise SchemaLineError("transitionType requires at least: name")
    rest = fields[1:]
    kvs = _options(rest)
    return TransitionTypeSchema(
        name=fields[0],
        description=_first_positional(rest),
        inputs=_pipe_list(kvs.get("inputs")),
        outputs=_pipe_list(kvs.get("outputs")),
    )


def parse_function_type(fields: List[str]) -> FunctionTypeSchema:
    if len(fields) < 2:
        raise SchemaLineError("functionType requires at least: name, expression")
    kvs = _options(fields[2:])
    return FunctionTypeSchema(
        name=fields[0],
        expression=fields[1],
        scope=_pipe_list(kvs.get("scope")),
        description=kvs.get("description"),
    )


_DECODERS: Dict[str, Tuple[str, Callable[[List[str]], object]]] = {
    "nodetype": ("node_types", parse_node_type),
    "relationtype": ("relation_types", parse_relation_type),
    "attributetype": ("attribute_types", parse_attribute_type),
    "transitiontype": ("transition_types", parse_transition_type),
    "functiontype": ("function_types", parse_function_type),
}


def parse_schema_block(text: str) -> SchemaParseResult:
    """Parse a schema block into a user catalog plus line-numbered errors."""
    result = SchemaParseResult()
    for lineno, line in enumerate(text.split("\n"), start=1):
        raw = line.strip()
        if not raw or raw.startswith("#"):
            continue

        idx = raw.find(":")
        if idx < 0:
            result.errors.append(
                SchemaParseError(f'Line {lineno}: Missing type prefix (e.g., "nodeType:")', lineno)
            )
            continue

        prefix = raw[:idx].strip().lower()
        decoder = _DECODERS.get(prefix)
        if decoder is None:
            result.errors.append(SchemaParseError(f'Line {lineno}: Unknown type prefix "{prefix}"', lineno))
            continue

        target, parse = decoder
        try:
            entry = parse(split_fields(raw[idx + 1:].strip()))
        except SchemaLineError as exc:
            result.errors.append(SchemaParseError(f"Line {lineno}: {exc}", lineno))
            continue
        getattr(result.schemas, target).append(entry)
    return result


def merge_schema_results(results: Iterable[SchemaParseResult]) -> SchemaParseResult:
    """Merge several parsed blocks; later declarations win by name."""
    merged = SchemaParseResult()
    for result in results:
        merged.errors.extend(result.errors)
        cat = merged.schemas
        cat.node_types = merge_by_name(cat.node_types, result.schemas.node_types)
        cat.relation_types = merge_by_name(cat.relation_types, result.schemas.relation_types)
        cat.attribute_types = merge_by_name(cat.attribute_types, result.schemas.attribute_types)
        cat.transition_types = merge_by_name(cat.transition_types, result.schemas.transition_types)
        cat.function_types = merge_by_name(cat.function_types, result.schemas.function_types)
    return merged
