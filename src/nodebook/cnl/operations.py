# ──────────────────────────────────────────────────────────────────────
# Nodebook Core — Operation Stream Types
# © 1998–2026 Miroslav Šotek. All rights reserved.
# Contact: www.anulum.li | protoscience@anulum.li
# ORCID: https://orcid.org/0009-0009-3560-0851
# License: GNU AGPL v3 | Commercial licensing available
# ──────────────────────────────────────────────────────────────────────
"""
Typed operations emitted by the CNL and mindmap parsers.

Each operation kind is a frozen dataclass with its own payload record, so
the graph assembler can dispatch exhaustively on the operation class.
Operations are replayed in emission order.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, Dict, Optional, Tuple, Union

from .model import Number

ORIGIN_CNL = "cnl"
ORIGIN_MINDMAP = "mindmap"


# ── Payloads ─────────────────────────────────────────────────────────────────


@dataclass(frozen=True)
class NodePayload:
    base_name: str
    display_name: str
    role: str
    adjective: Optional[str] = None
    quantifier: Optional[str] = None
    parent_types: Tuple[str, ...] = ()


@dataclass(frozen=True)
class MorphPayload:
    node_id: str
    morph_id: str
    name: str


@dataclass(frozen=True)
class RelationPayload:
    source: str
    target: str
    name: str
    weight: Number = 1
    morph_id: Optional[str] = None
    target_surface: Optional[str] = None


@dataclass(frozen=True)
class AttributePayload:
    source: str
    name: str
    value: str
    unit: Optional[str] = None
    adverb: Optional[str] = None
    modality: Optional[str] = None
    quantifier: Optional[str] = None
    morph_id: Optional[str] = None


@dataclass(frozen=True)
class FunctionPayload:
    source: str
    name: str
    morph_id: Optional[str] = None


@dataclass(frozen=True)
class NodeFieldPayload:
    node_id: str
    field: str
    value: str


@dataclass(frozen=True)
class DescriptionPayload:
    description: str


@dataclass(frozen=True)
class CurrencyPayload:
    currency: str


# ── Operations ───────────────────────────────────────────────────────────────


@dataclass(frozen=True)
class _BaseOperation:
    id: str

    @property
    def kind(self) -> str:
        return type(self).__name__

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["type"] = self.kind
        return data


@dataclass(frozen=True)
class AddNode(_BaseOperation):
    payload: NodePayload
    origin: str = ORIGIN_CNL


@dataclass(frozen=True)
class AddMorph(_BaseOperation):
    payload: MorphPayload
    origin: str = ORIGIN_CNL


@dataclass(frozen=True)
class AddRelation(_BaseOperation):
    payload: RelationPayload
    origin: str = ORIGIN_CNL


@dataclass(frozen=True)
class AddAttribute(_BaseOperation):
    payload: AttributePayload
    origin: str = ORIGIN_CNL


@dataclass(frozen=True)
class ApplyFunction(_BaseOperation):
    payload: FunctionPayload
    origin: str = ORIGIN_CNL


@dataclass(frozen=True)
class UpdateNodeField(_BaseOperation):
    payload: NodeFieldPayload
    origin: str = ORIGIN_CNL


@dataclass(frozen=True)
class SetGraphDescription(_BaseOperation):
    payload: DescriptionPayload
    origin: str = ORIGIN_CNL


@dataclass(frozen=True)
class SetCurrency(_BaseOperation):
    payload: CurrencyPayload
    origin: str = ORIGIN_CNL


Operation = Union[
    AddNode,
    AddMorph,
    AddRelation,
    AddAttribute,
    ApplyFunction,
    UpdateNodeField,
    SetGraphDescription,
    SetCurrency,
]
