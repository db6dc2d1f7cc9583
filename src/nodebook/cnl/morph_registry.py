# ──────────────────────────────────────────────────────────────────────
# Nodebook Core — Morph Registry
# © 1998–2026 Miroslav Šotek. All rights reserved.
# Contact: www.anulum.li | protoscience@anulum.li
# ORCID: https://orcid.org/0009-0009-3560-0851
# License: GNU AGPL v3 | Commercial licensing available
# ──────────────────────────────────────────────────────────────────────
"""Bidirectional visibility index: which records belong to which morph."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Sequence, Set, TypeVar, Union

from .model import Attribute, Edge, GraphData

_R = TypeVar("_R", Edge, Attribute)


@dataclass
class MorphData:
    morph_id: str
    node_id: str
    name: str
    relation_ids: List[str] = field(default_factory=list)
    attribute_ids: List[str] = field(default_factory=list)


class MorphRegistry:
    """Index node -> morphs, morph -> record ids and record id -> morphs.

    Built once per assembled graph so visibility queries do not rescan
    the edge and attribute lists.
    """

    def __init__(self) -> None:
        self._morphs: Dict[str, MorphData] = {}
        self._node_morphs: Dict[str, List[str]] = {}
        self._relation_morphs: Dict[str, List[str]] = {}
        self._attribute_morphs: Dict[str, List[str]] = {}

    @classmethod
    def from_graph(cls, graph: GraphData) -> "MorphRegistry":
        registry = cls()
        for node in graph.nodes:
            for morph in node.morphs:
                registry.add_morph(
                    morph.morph_id, node.id, morph.name, morph.relation_ids, morph.attribute_ids
                )
        return registry

    def add_morph(
        self,
        morph_id: str,
        node_id: str,
        name: str,
        relation_ids: Iterable[str] = (),
        attribute_ids: Iterable[str] = (),
    ) -> MorphData:
        data = MorphData(morph_id, node_id, name, list(relation_ids), list(attribute_ids))
        previous = self._morphs.get(morph_id)
        if previous is not None:
            self._unlink(previous)
        self._morphs[morph_id] = data
        self._node_morphs.setdefault(node_id, []).append(morph_id)
        for rel_id in data.relation_ids:
            self._relation_morphs.setdefault(rel_id, []).append(morph_id)
        for attr_id in data.attribute_ids:
            self._attribute_morphs.setdefault(attr_id, []).append(morph_id)
        return data

    def _unlink(self, data: MorphData) -> None:
        self._node_morphs[data.node_id].remove(data.morph_id)
        for rel_id in data.relation_ids:
            self._relation_morphs[rel_id].remove(data.morph_id)
        for attr_id in data.attribute_ids:
            self._attribute_morphs[attr_id].remove(data.morph_id)

    # ── Queries ──────────────────────────────────────────────────────

    def get_morph(self, morph_id: str) -> Optional[MorphData]:
        return self._morphs.get(morph_id)

    def node_morphs(self, node_id: str) -> List[MorphData]:
        return [self._morphs[m] for m in self._node_morphs.get(node_id, []) if m in self._morphs]

    def find_morph(self, node_id: str, name: str) -> Optional[MorphData]:
        for data in self.node_morphs(node_id):
            if data.name == name:
                return data
        return None

    def morph_relations(self, morph_id: str) -> List[str]:
        data = self._morphs.get(morph_id)
        return list(data.relation_ids) if data else []

    def morph_attributes(self, morph_id: str) -> List[str]:
        data = self._morphs.get(morph_id)
        return list(data.attribute_ids) if data else []

    def relation_morphs(self, relation_id: str) -> List[str]:
        return list(self._relation_morphs.get(relation_id, []))

    def attribute_morphs(self, attribute_id: str) -> List[str]:
        return list(self._attribute_morphs.get(attribute_id, []))

    # ── Filters ──────────────────────────────────────────────────────

    def _visible(self, morph_ids: Union[str, Sequence[str]], relations: bool) -> Set[str]:
        ids = [morph_ids] if isinstance(morph_ids, str) else morph_ids
        visible: Set[str] = set()
        for morph_id in ids:
            data = self._morphs.get(morph_id)
            if data is not None:
                visible.update(data.relation_ids if relations else data.attribute_ids)
        return visible

    @staticmethod
    def _filter(candidates: Iterable[_R], visible: Set[str]) -> List[_R]:
        seen: Set[str] = set()
        out: List[_R] = []
        for item in candidates:
            if item.id in visible and item.id not in seen:
                seen.add(item.id)
                out.append(item)
        return out

    def filter_relations(self, relations: Iterable[Edge], morph_ids: Union[str, Sequence[str]]) -> List[Edge]:
        """Edges visible under any of *morph_ids*, each returned once."""
        return self._filter(relations, self._visible(morph_ids, relations=True))

    def filter_attributes(
        self, attributes: Iterable[Attribute], morph_ids: Union[str, Sequence[str]]
    ) -> List[Attribute]:
        """Attributes visible under any of *morph_ids*, each returned once."""
        return self._filter(attributes, self._visible(morph_ids, relations=False))

    def clear(self) -> None:
        self._morphs.clear()
        self._node_morphs.clear()
        self._relation_morphs.clear()
        self._attribute_morphs.clear()

    def stats(self) -> Dict[str, int]:
        return {
            "total_morphs": len(self._morphs),
            "total_nodes": len(self._node_morphs),
            "total_relations": len(self._relation_morphs),
            "total_attributes": len(self._attribute_morphs),
        }
