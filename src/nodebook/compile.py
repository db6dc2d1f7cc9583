# ──────────────────────────────────────────────────────────────────────
# Nodebook Core — Compilation Pipeline
# © 1998–2026 Miroslav Šotek. All rights reserved.
# Contact: www.anulum.li | protoscience@anulum.li
# ORCID: https://orcid.org/0009-0009-3560-0851
# License: GNU AGPL v3 | Commercial licensing available
# ──────────────────────────────────────────────────────────────────────
"""
End-to-end CNL compilation: text -> operations -> graph -> warnings.

``compile_text`` is the single entry point for embedding applications.
It never raises on input: an unexpected failure is logged and returned
as an empty graph carrying the error, so the caller renders nothing
instead of crashing.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence

from .cnl.assembler import operations_to_graph
from .cnl.model import GraphData, ParseError
from .cnl.operations import ORIGIN_MINDMAP, AddNode, Operation
from .cnl.parser import get_operations
from .cnl.schemas import SchemaCatalog
from .cnl.validation import SchemaWarning, validate_operations
from .petri.accounting import TRANSACTION_ROLE
from .petri.structure import TRANSITION_ROLES

logger = logging.getLogger(__name__)

MODE_PETRI = "petri-net"
MODE_ACCOUNTING = "accounting"
MODE_MINDMAP = "mindmap"
MODE_CONCEPT = "concept-map"


@dataclass
class CompileResult:
    graph: GraphData = field(default_factory=GraphData)
    operations: List[Operation] = field(default_factory=list)
    warnings: List[SchemaWarning] = field(default_factory=list)
    mode: str = MODE_CONCEPT

    @property
    def ok(self) -> bool:
        return not self.graph.errors

    def to_dict(self) -> Dict[str, object]:
        return {
            "mode": self.mode,
            "graph": self.graph.to_dict(),
            "warnings": [
                {"kind": w.kind, "message": w.message, "operation_id": w.operation_id}
                for w in self.warnings
            ],
        }


def detect_graph_mode(graph: GraphData, operations: Sequence[Operation] = ()) -> str:
    """Classify *graph* for presentation and simulation.

    ``accounting`` when any node is a Transaction, ``petri-net`` when any
    node is a Transition, ``mindmap`` when every node came from a mindmap
    block, else ``concept-map``.
    """
    roles = {n.role for n in graph.nodes}
    if TRANSACTION_ROLE in roles:
        return MODE_ACCOUNTING
    if roles & set(TRANSITION_ROLES):
        return MODE_PETRI
    node_ops = [op for op in operations if isinstance(op, AddNode)]
    if node_ops and all(op.origin == ORIGIN_MINDMAP for op in node_ops):
        return MODE_MINDMAP
    return MODE_CONCEPT


def compile_text(text: str, catalog: Optional[SchemaCatalog] = None) -> CompileResult:
    """Parse, assemble and validate one CNL text block.

    Parameters
    ----------
    text : str
        CNL source, possibly containing mindmap blocks.
    catalog : SchemaCatalog, optional
        Merged schema catalog for validation; defaults to the built-in one.
    """
    try:
        operations = get_operations(text)
        graph = operations_to_graph(operations)
        warnings = validate_operations(operations, catalog)
    except Exception as exc:
        logger.exception("CNL compilation failed")
        return CompileResult(graph=GraphData(errors=[ParseError(f"Parse failed: {exc}")]))

    mode = detect_graph_mode(graph, operations)
    logger.info(
        "Compiled %s graph with %d schema warning(s)",
        mode,
        len(warnings),
        extra={
            "graph_context": {
                "mode": mode,
                "nodes": len(graph.nodes),
                "edges": len(graph.edges),
                "warnings": len(warnings),
            }
        },
    )
    return CompileResult(graph=graph, operations=operations, warnings=warnings, mode=mode)
