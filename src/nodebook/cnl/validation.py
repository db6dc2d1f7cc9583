# ──────────────────────────────────────────────────────────────────────
# Nodebook Core — Schema Validator
# © 1998–2026 Miroslav Šotek. All rights reserved.
# Contact: www.anulum.li | protoscience@anulum.li
# ORCID: https://orcid.org/0009-0009-3560-0851
# License: GNU AGPL v3 | Commercial licensing available
# ──────────────────────────────────────────────────────────────────────
"""
Advisory cross-check of an operation stream against a schema catalog.

Warnings never block assembly or rendering; they are returned to the
caller alongside the graph.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence, Set, Tuple

from .operations import AddAttribute, AddNode, AddRelation, ApplyFunction, Operation
from .schemas import SchemaCatalog, default_catalog

logger = logging.getLogger(__name__)

BUILTIN_ROLES = ("individual", "class")

UNKNOWN_NODE_TYPE = "unknown_node_type"
UNKNOWN_ATTRIBUTE = "unknown_attribute"
UNKNOWN_RELATION = "unknown_relation"
UNKNOWN_FUNCTION = "unknown_function"
INVALID_VALUE = "invalid_value"
DOMAIN_VIOLATION = "domain_violation"
SURFACE_CONSOLIDATION = "surface_consolidation"


@dataclass(frozen=True)
class SchemaWarning:
    kind: str
    message: str
    operation_id: Optional[str] = None


def _strip_quotes(value: str) -> str:
    value = value.strip()
    if len(value) >= 2 and value[0] == value[-1] and value[0] in ("'", '"'):
        return value[1:-1]
    return value


def validate_operations(
    operations: Sequence[Operation], catalog: Optional[SchemaCatalog] = None
) -> List[SchemaWarning]:
    """Return advisory warnings for *operations* checked against *catalog*.

    *catalog* is the merged catalog to check against; it defaults to the
    built-in dictionaries.
    """
    cat = catalog if catalog is not None else default_catalog()
    warnings: List[SchemaWarning] = []
    roles: Dict[str, str] = {}
    surfaces: Dict[str, str] = {}
    reported: Set[Tuple[str, str]] = set()

    def note_surface(node_id: str, surface: str) -> None:
        first = surfaces.setdefault(node_id, surface)
        if first == surface or (node_id, surface) in reported:
            return
        reported.add((node_id, surface))
        warnings.append(
            SchemaWarning(
                SURFACE_CONSOLIDATION,
                f'"{surface}" and "{first}" both resolve to node "{node_id}"',
                node_id,
            )
        )

    # headings and relation targets both count as spellings of a node
    for op in operations:
        if isinstance(op, AddNode):
            roles.setdefault(op.id, op.payload.role)
            note_surface(op.id, op.payload.display_name)
        elif isinstance(op, AddRelation) and op.payload.target_surface is not None:
            note_surface(op.payload.target, op.payload.target_surface)

    known_roles = ", ".join(nt.name for nt in cat.node_types)
    for op in operations:
        if isinstance(op, AddNode):
            role = op.payload.role
            if role and role not in BUILTIN_ROLES and cat.node_type(role) is None:
                warnings.append(
                    SchemaWarning(
                        UNKNOWN_NODE_TYPE,
                        f'Unknown node type "{role}". Known types: {known_roles}',
                        op.id,
                    )
                )
        elif isinstance(op, AddAttribute):
            p = op.payload
            schema = cat.attribute_type(p.name)
            if schema is None:
                warnings.append(SchemaWarning(UNKNOWN_ATTRIBUTE, f'Unknown attribute type "{p.name}"', op.id))
            elif schema.allowed_values is not None and _strip_quotes(p.value) not in schema.allowed_values:
                allowed = ", ".join(schema.allowed_values)
                warnings.append(
                    SchemaWarning(
                        INVALID_VALUE,
                        f'Value "{p.value}" is not allowed for "{p.name}" (allowed: {allowed})',
                        op.id,
                    )
                )
        elif isinstance(op, AddRelation):
            p = op.payload
            schema = cat.relation_type(p.name)
            if schema is None:
                warnings.append(SchemaWarning(UNKNOWN_RELATION, f'Unknown relation type "{p.name}"', op.id))
                continue
            source_role = roles.get(p.source)
            if schema.domain and source_role is not None:
                ancestors = cat.role_ancestors(source_role)
                if not any(d in ancestors for d in schema.domain):
                    warnings.append(
                        SchemaWarning(
                            DOMAIN_VIOLATION,
                            f'Relation "{p.name}" expects a source of type '
                            f'{" | ".join(schema.domain)}, but "{p.source}" is "{source_role}"',
                            op.id,
                        )
                    )
        elif isinstance(op, ApplyFunction):
            if cat.function_type(op.payload.name) is None:
                warnings.append(
                    SchemaWarning(UNKNOWN_FUNCTION, f'Unknown function type "{op.payload.name}"', op.id)
                )

    if warnings:
        logger.debug("Schema validation produced %d warnings", len(warnings))
    return warnings
