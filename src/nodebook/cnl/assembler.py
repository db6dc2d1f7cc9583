# ──────────────────────────────────────────────────────────────────────
# Nodebook Core — Graph Assembler
# © 1998–2026 Miroslav Šotek. All rights reserved.
# Contact: www.anulum.li | protoscience@anulum.li
# ORCID: https://orcid.org/0009-0009-3560-0851
# License: GNU AGPL v3 | Commercial licensing available
# ──────────────────────────────────────────────────────────────────────
"""
Operation stream -> :class:`~nodebook.cnl.model.GraphData`.

Three passes over the stream:

1. ``AddNode``: the first declaration of an id wins; each node gets its
   ``basic`` morph.
2. ``AddMorph``: appended to the owning node.
3. Everything else: edges and attributes are built and linked to the
   requested morph, or to the basic morph when none is given.

Dangling references are collected in ``GraphData.errors``; the graph is
always returned fully constructed.
"""

from __future__ import annotations

import logging
from typing import Dict, Optional, Sequence

from .model import BASIC_MORPH_NAME, Attribute, Edge, GraphData, Morph, Node, ParseError
from .operations import (
    AddAttribute,
    AddMorph,
    AddNode,
    AddRelation,
    ApplyFunction,
    Operation,
    SetCurrency,
    SetGraphDescription,
    UpdateNodeField,
)

logger = logging.getLogger(__name__)

SUPPORTED_NODE_FIELDS = ("description",)


class _Assembly:
    """Mutable state of one ``operations_to_graph`` call."""

    def __init__(self) -> None:
        self.nodes: Dict[str, Node] = {}
        self.edges: Dict[str, Edge] = {}
        self.attributes: Dict[str, Attribute] = {}
        self.graph = GraphData()
        self._basic_counter = 0

    def error(self, message: str) -> None:
        logger.debug("Assembly error: %s", message)
        self.graph.errors.append(ParseError(message=message))

    # ── Pass 1 ───────────────────────────────────────────────────────

    def add_node(self, op: AddNode) -> None:
        if op.id in self.nodes:
            return
        self._basic_counter += 1
        basic = Morph(
            morph_id=f"{op.id}_morph_basic_{self._basic_counter}",
            node_id=op.id,
            name=BASIC_MORPH_NAME,
        )
        p = op.payload
        name = f"{p.adjective} {p.base_name}" if p.adjective else p.base_name
        node = Node(
            id=op.id,
            base_name=p.base_name,
            name=name,
            display_name=p.display_name,
            role=p.role or "individual",
            adjective=p.adjective,
            quantifier=p.quantifier,
            parent_types=list(p.parent_types),
            morphs=[basic],
            nbh=basic.morph_id,
        )
        self.nodes[op.id] = node
        self.graph.nodes.append(node)

    # ── Pass 2 ───────────────────────────────────────────────────────

    def add_morph(self, op: AddMorph) -> None:
        p = op.payload
        node = self.nodes.get(p.node_id)
        if node is None:
            self.error(f'Morph "{p.name}" refers to unknown node "{p.node_id}"')
            return
        if node.morph(p.morph_id) is not None:
            return
        node.morphs.append(Morph(morph_id=p.morph_id, node_id=p.node_id, name=p.name))

    # ── Pass 3 ───────────────────────────────────────────────────────

    def _target_morph(self, source_id: str, morph_id: Optional[str], what: str) -> Optional[Morph]:
        node = self.nodes.get(source_id)
        if node is None:
            self.error(f'{what} refers to unknown node "{source_id}"')
            return None
        if morph_id is None:
            return node.basic_morph
        morph = node.morph(morph_id)
        if morph is None:
            self.error(f'{what} refers to unknown morph "{morph_id}" of node "{source_id}"')
        return morph

    def add_relation(self, op: AddRelation) -> None:
        p = op.payload
        morph = self._target_morph(p.source, p.morph_id, f'Relation "{op.id}"')
        edge = self.edges.get(op.id)
        if edge is None:
            edge = Edge(
                id=op.id,
                source_id=p.source,
                target_id=p.target,
                name=p.name,
                weight=p.weight,
            )
            self.edges[op.id] = edge
            self.graph.edges.append(edge)
        if morph is not None and morph.morph_id not in edge.morph_ids:
            morph.relation_ids.append(edge.id)
            edge.morph_ids.append(morph.morph_id)

    def _link_attribute(self, attr: Attribute, morph_id: Optional[str]) -> None:
        morph = self._target_morph(attr.source_id, morph_id, f'Attribute "{attr.id}"')
        existing = self.attributes.get(attr.id)
        if existing is None:
            self.attributes[attr.id] = attr
            self.graph.attributes.append(attr)
            existing = attr
        if morph is not None and morph.morph_id not in existing.morph_ids:
            morph.attribute_ids.append(existing.id)
            existing.morph_ids.append(morph.morph_id)

    def add_attribute(self, op: AddAttribute) -> None:
        p = op.payload
        attr = Attribute(
            id=op.id,
            source_id=p.source,
            name=p.name,
            value=p.value,
            unit=p.unit,
            adverb=p.adverb,
            modality=p.modality,
            quantifier=p.quantifier,
        )
        self._link_attribute(attr, p.morph_id)

    def apply_function(self, op: ApplyFunction) -> None:
        p = op.payload
        attr = Attribute(id=op.id, source_id=p.source, name=p.name, value=f"function:{p.name}")
        self._link_attribute(attr, p.morph_id)

    def update_node_field(self, op: UpdateNodeField) -> None:
        p = op.payload
        node = self.nodes.get(p.node_id)
        if node is None:
            self.error(f'Update of field "{p.field}" refers to unknown node "{p.node_id}"')
            return
        if p.field not in SUPPORTED_NODE_FIELDS:
            self.error(f'Unsupported node field "{p.field}" on node "{p.node_id}"')
            return
        node.description = p.value


def operations_to_graph(operations: Sequence[Operation]) -> GraphData:
    """Assemble *operations* (in emission order) into a graph."""
    state = _Assembly()

    for op in operations:
        if isinstance(op, AddNode):
            state.add_node(op)

    for op in operations:
        if isinstance(op, AddMorph):
            state.add_morph(op)

    for op in operations:
        if isinstance(op, (AddNode, AddMorph)):
            continue
        if isinstance(op, AddRelation):
            state.add_relation(op)
        elif isinstance(op, AddAttribute):
            state.add_attribute(op)
        elif isinstance(op, ApplyFunction):
            state.apply_function(op)
        elif isinstance(op, UpdateNodeField):
            state.update_node_field(op)
        elif isinstance(op, SetGraphDescription):
            state.graph.description = op.payload.description
        elif isinstance(op, SetCurrency):
            state.graph.currency = op.payload.currency
        else:
            raise TypeError(f"Unsupported operation type: {type(op).__name__}")

    graph = state.graph
    logger.debug(
        "Assembled graph: %d nodes, %d edges, %d attributes, %d errors",
        len(graph.nodes),
        len(graph.edges),
        len(graph.attributes),
        len(graph.errors),
    )
    return graph
