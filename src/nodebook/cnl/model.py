# ──────────────────────────────────────────────────────────────────────
# Nodebook Core — Graph Data Model
# © 1998–2026 Miroslav Šotek. All rights reserved.
# Contact: www.anulum.li | protoscience@anulum.li
# ORCID: https://orcid.org/0009-0009-3560-0851
# License: GNU AGPL v3 | Commercial licensing available
# ──────────────────────────────────────────────────────────────────────
"""Knowledge-graph primitives produced by the graph assembler."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Optional, Union

Number = Union[int, float]

BASIC_MORPH_NAME = "basic"


@dataclass
class Morph:
    morph_id: str
    node_id: str
    name: str
    relation_ids: List[str] = field(default_factory=list)
    attribute_ids: List[str] = field(default_factory=list)


@dataclass
class Node:
    id: str
    base_name: str
    name: str
    display_name: str
    role: str
    adjective: Optional[str] = None
    quantifier: Optional[str] = None
    description: Optional[str] = None
    parent_types: List[str] = field(default_factory=list)
    morphs: List[Morph] = field(default_factory=list)
    nbh: str = ""

    @property
    def basic_morph(self) -> Morph:
        return self.morphs[0]

    def morph(self, morph_id: str) -> Optional[Morph]:
        for morph in self.morphs:
            if morph.morph_id == morph_id:
                return morph
        return None


@dataclass
class Edge:
    id: str
    source_id: str
    target_id: str
    name: str
    weight: Number = 1
    morph_ids: List[str] = field(default_factory=list)


@dataclass
class Attribute:
    id: str
    source_id: str
    name: str
    value: str
    unit: Optional[str] = None
    adverb: Optional[str] = None
    modality: Optional[str] = None
    quantifier: Optional[str] = None
    morph_ids: List[str] = field(default_factory=list)


@dataclass
class ParseError:
    message: str
    line: Optional[int] = None


@dataclass
class GraphData:
    """Assembled graph: nodes, edges, attributes and graph-level metadata."""

    nodes: List[Node] = field(default_factory=list)
    edges: List[Edge] = field(default_factory=list)
    attributes: List[Attribute] = field(default_factory=list)
    description: Optional[str] = None
    currency: Optional[str] = None
    errors: List[ParseError] = field(default_factory=list)

    def node(self, node_id: str) -> Optional[Node]:
        for node in self.nodes:
            if node.id == node_id:
                return node
        return None

    def edges_from(self, node_id: str, name: Optional[str] = None) -> List[Edge]:
        return [
            e
            for e in self.edges
            if e.source_id == node_id and (name is None or e.name == name)
        ]

    def attributes_of(self, node_id: str, name: Optional[str] = None) -> List[Attribute]:
        return [
            a
            for a in self.attributes
            if a.source_id == node_id and (name is None or a.name == name)
        ]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "nodes": [asdict(n) for n in self.nodes],
            "edges": [asdict(e) for e in self.edges],
            "attributes": [asdict(a) for a in self.attributes],
            "description": self.description,
            "currency": self.currency,
            "errors": [asdict(err) for err in self.errors],
        }
