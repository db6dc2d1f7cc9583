# ──────────────────────────────────────────────────────────────────────
# Nodebook Core — Place/Transition Net Structure
# © 1998–2026 Miroslav Šotek. All rights reserved.
# Contact: www.anulum.li | protoscience@anulum.li
# ORCID: https://orcid.org/0009-0009-3560-0851
# License: GNU AGPL v3 | Commercial licensing available
# ──────────────────────────────────────────────────────────────────────
"""
Place/Transition net structure built from an assembled graph.

Builds two sparse matrices that encode the net topology:
    W_in  : (n_transitions, n_places)  input arc weights (``has prior_state``)
    W_out : (n_places, n_transitions)  output arc weights (``has post_state``)

Arcs are accumulated in COO form, so parallel arcs between the same place
and transition are summed when the CSR matrices are built.  The same
matrices back the structural report returned by ``topology()``.
"""

from __future__ import annotations

import logging
import math
from dataclasses import asdict, dataclass, field
from enum import Enum, auto
from typing import TYPE_CHECKING, Dict, List, Optional, Tuple

import numpy as np
from numpy.typing import NDArray
from scipy import sparse  # type: ignore[import-untyped]
from scipy.sparse.csgraph import connected_components  # type: ignore[import-untyped]

from .accounting import ACCOUNT_ROLES, TRANSACTION_ROLE, parse_amount

if TYPE_CHECKING:
    from ..cnl.model import GraphData, Node

FloatArray = NDArray[np.float64]

logger = logging.getLogger(__name__)

PRIOR_STATE = "has prior_state"
POST_STATE = "has post_state"
TRANSITION_ROLES = ("Transition", TRANSACTION_ROLE)
BALANCE_ATTRIBUTE = "balance"


class _NodeKind(Enum):
    PLACE = auto()
    TRANSITION = auto()


@dataclass(frozen=True)
class TopologyReport:
    """Structural diagnostics of a compiled net; see :meth:`PlaceTransitionNet.topology`."""

    isolated_places: List[str] = field(default_factory=list)
    isolated_transitions: List[str] = field(default_factory=list)
    input_free_transitions: List[str] = field(default_factory=list)
    unseeded_cycles: List[List[str]] = field(default_factory=list)

    @property
    def clean(self) -> bool:
        return not (
            self.isolated_places
            or self.isolated_transitions
            or self.input_free_transitions
            or self.unseeded_cycles
        )

    def to_dict(self) -> Dict[str, object]:
        return asdict(self)


class PlaceTransitionNet:
    """Weighted Place/Transition net with sparse matrix representation.

    Usage::

        net = PlaceTransitionNet()
        net.add_place("glucose", initial_tokens=2)
        net.add_place("co2")
        net.add_transition("respiration")
        net.add_arc("glucose", "respiration", weight=1)
        net.add_arc("respiration", "co2", weight=6)
        net.compile()
    """

    def __init__(self) -> None:
        # Ordered registries -------------------------------------------------
        self._places: List[str] = []
        self._place_tokens: List[float] = []
        self._place_idx: Dict[str, int] = {}

        self._transitions: List[str] = []
        self._transition_idx: Dict[str, int] = {}

        self._kind: Dict[str, _NodeKind] = {}
        self._roles: Dict[str, str] = {}

        # Each arc: (source_name, target_name, weight)
        self._arcs: List[Tuple[str, str, float]] = []

        # Compiled products ----------------------------------------------------
        self.W_in: sparse.csr_matrix | None = None  # (nT, nP)
        self.W_out: sparse.csr_matrix | None = None  # (nP, nT)
        self._compiled: bool = False

    # ── Builder API ──────────────────────────────────────────────────────────

    def add_place(self, name: str, initial_tokens: float = 0.0, role: Optional[str] = None) -> None:
        """Add a place holding *initial_tokens* (a balance in accounting nets)."""
        if name in self._kind:
            raise ValueError(f"Node '{name}' already exists.")
        if not math.isfinite(initial_tokens):
            raise ValueError(f"initial_tokens must be finite, got {initial_tokens}")
        self._place_idx[name] = len(self._places)
        self._places.append(name)
        self._place_tokens.append(float(initial_tokens))
        self._kind[name] = _NodeKind.PLACE
        if role is not None:
            self._roles[name] = role
        self._compiled = False

    def add_transition(self, name: str, role: str = "Transition") -> None:
        if name in self._kind:
            raise ValueError(f"Node '{name}' already exists.")
        self._transition_idx[name] = len(self._transitions)
        self._transitions.append(name)
        self._kind[name] = _NodeKind.TRANSITION
        self._roles[name] = role
        self._compiled = False

    def add_arc(self, source: str, target: str, weight: float = 1.0) -> None:
        """Add a directed arc between a Place and a Transition (either direction).

        Valid arcs:
            Place      -> Transition  (input arc,  stored in W_in)
            Transition -> Place       (output arc, stored in W_out)

        Raises ``ValueError`` for same-kind connections, unknown nodes or
        non-positive weights.
        """
        if source not in self._kind:
            raise ValueError(f"Unknown node '{source}'.")
        if target not in self._kind:
            raise ValueError(f"Unknown node '{target}'.")
        src_kind = self._kind[source]
        tgt_kind = self._kind[target]
        if src_kind == tgt_kind:
            raise ValueError(
                f"Arc must connect Place<->Transition, got "
                f"{src_kind.name}->{tgt_kind.name} ('{source}'->'{target}')."
            )
        if not weight > 0.0:
            raise ValueError(f"weight must be > 0, got {weight}")
        self._arcs.append((source, target, float(weight)))
        self._compiled = False

    # ── Graph import ─────────────────────────────────────────────────────────

    @classmethod
    def from_graph(
        cls, graph: "GraphData", accounting: bool = False, initial_tokens: float = 1
    ) -> "PlaceTransitionNet":
        """Classify *graph* nodes into transitions and places and build the net.

        Transitions are nodes whose role is ``Transition`` or ``Transaction``;
        places are the targets of their ``has prior_state`` / ``has
        post_state`` edges, plus every account node in *accounting* mode.

        Places seeded with *initial_tokens* are those with an input arc;
        output-only places start empty.  In *accounting* mode every place
        starts at its ``balance`` attribute (default 0).
        """
        net = cls()
        transitions = [n for n in graph.nodes if n.role in TRANSITION_ROLES]
        transition_ids = {n.id for n in transitions}

        arcs: List[Tuple[str, str, float, str]] = []
        inputs = set()
        place_ids = set()
        for edge in graph.edges:
            if edge.name not in (PRIOR_STATE, POST_STATE) or edge.source_id not in transition_ids:
                continue
            if edge.target_id in transition_ids:
                logger.warning(
                    "Skipping arc %s: '%s' -> '%s' connects two transitions",
                    edge.id, edge.source_id, edge.target_id,
                )
                continue
            if not edge.weight > 0:
                logger.warning("Skipping arc %s with non-positive weight %r", edge.id, edge.weight)
                continue
            place_ids.add(edge.target_id)
            if edge.name == PRIOR_STATE:
                inputs.add(edge.target_id)
            arcs.append((edge.source_id, edge.target_id, float(edge.weight), edge.name))

        if accounting:
            place_ids.update(
                n.id for n in graph.nodes if n.role in ACCOUNT_ROLES and n.id not in transition_ids
            )

        nodes_by_id = {n.id: n for n in graph.nodes}
        ordered = [n.id for n in graph.nodes if n.id in place_ids]
        ordered += sorted(place_ids.difference(ordered))
        for place_id in ordered:
            node = nodes_by_id.get(place_id)
            role = node.role if node is not None else None
            if accounting:
                seed = _opening_balance(graph, node) if node is not None else 0.0
            else:
                seed = float(initial_tokens) if place_id in inputs else 0.0
            net.add_place(place_id, initial_tokens=seed, role=role)

        for node in transitions:
            net.add_transition(node.id, role=node.role)

        for transition_id, place_id, weight, name in arcs:
            if name == PRIOR_STATE:
                net.add_arc(place_id, transition_id, weight)
            else:
                net.add_arc(transition_id, place_id, weight)

        net.compile()
        logger.debug(
            "Built net from graph: P=%d T=%d arcs=%d accounting=%s",
            net.n_places, net.n_transitions, len(net._arcs), accounting,
        )
        return net

    # ── Compile ──────────────────────────────────────────────────────────────

    def compile(self) -> None:
        """Build sparse W_in and W_out matrices from the arc list."""
        nP = len(self._places)
        nT = len(self._transitions)

        # COO accumulators
        in_rows: List[int] = []
        in_cols: List[int] = []
        in_vals: List[float] = []

        out_rows: List[int] = []
        out_cols: List[int] = []
        out_vals: List[float] = []

        for src, tgt, w in self._arcs:
            if self._kind[src] is _NodeKind.PLACE:
                # Place -> Transition  => W_in[transition_idx, place_idx]
                in_rows.append(self._transition_idx[tgt])
                in_cols.append(self._place_idx[src])
                in_vals.append(w)
            else:
                # Transition -> Place  => W_out[place_idx, transition_idx]
                out_rows.append(self._place_idx[tgt])
                out_cols.append(self._transition_idx[src])
                out_vals.append(w)

        self.W_in = sparse.csr_matrix(
            (in_vals, (in_rows, in_cols)), shape=(nT, nP), dtype=np.float64
        )
        self.W_out = sparse.csr_matrix(
            (out_vals, (out_rows, out_cols)), shape=(nP, nT), dtype=np.float64
        )
        self._compiled = True

    def _ensure_compiled(self) -> None:
        if not self._compiled:
            self.compile()

    def topology(self) -> TopologyReport:
        """Structural diagnostics read off the compiled incidence matrices.

        The place graph has an edge ``p -> q`` when some transition consumes
        from ``p`` and produces into ``q``; its strongly connected components
        that form a cycle are reported when none of their places is seeded.
        """
        self._ensure_compiled()
        assert self.W_in is not None
        assert self.W_out is not None
        consumes = self.W_in.sign()
        produces = self.W_out.sign()

        place_degree = np.asarray(consumes.sum(axis=0)).ravel() + np.asarray(produces.sum(axis=1)).ravel()
        n_inputs = np.asarray(consumes.sum(axis=1)).ravel()
        n_outputs = np.asarray(produces.sum(axis=0)).ravel()

        isolated_places = sorted(self._places[i] for i in np.flatnonzero(place_degree == 0))
        isolated_transitions = sorted(
            self._transitions[j] for j in np.flatnonzero((n_inputs + n_outputs) == 0)
        )
        input_free = sorted(
            self._transitions[j] for j in np.flatnonzero((n_inputs == 0) & (n_outputs > 0))
        )

        unseeded: List[List[str]] = []
        if self.n_places:
            flow = sparse.csr_matrix(consumes.T @ produces.T)
            n_components, labels = connected_components(flow, directed=True, connection="strong")
            self_loops = flow.diagonal()
            for label in range(n_components):
                members = np.flatnonzero(labels == label)
                if len(members) == 1 and self_loops[members[0]] == 0:
                    continue
                if any(self._place_tokens[i] > 0.0 for i in members):
                    continue
                unseeded.append(sorted(self._places[i] for i in members))
        unseeded.sort()

        return TopologyReport(
            isolated_places=isolated_places,
            isolated_transitions=isolated_transitions,
            input_free_transitions=input_free,
            unseeded_cycles=unseeded,
        )

    # ── Accessors ────────────────────────────────────────────────────────────

    @property
    def n_places(self) -> int:
        return len(self._places)

    @property
    def n_transitions(self) -> int:
        return len(self._transitions)

    @property
    def place_names(self) -> List[str]:
        return list(self._places)

    @property
    def transition_names(self) -> List[str]:
        return list(self._transitions)

    @property
    def is_compiled(self) -> bool:
        return self._compiled

    def has_place(self, name: str) -> bool:
        return self._kind.get(name) is _NodeKind.PLACE

    def has_transition(self, name: str) -> bool:
        return self._kind.get(name) is _NodeKind.TRANSITION

    def role(self, name: str) -> Optional[str]:
        return self._roles.get(name)

    def input_weights(self, transition: str) -> Dict[str, float]:
        """Summed input arc weight per place for *transition*."""
        self._ensure_compiled()
        assert self.W_in is not None
        row = self.W_in[self._transition_idx[transition]]
        return {self._places[j]: float(w) for j, w in zip(row.indices, row.data) if w != 0.0}

    def output_weights(self, transition: str) -> Dict[str, float]:
        """Summed output arc weight per place for *transition*."""
        self._ensure_compiled()
        assert self.W_out is not None
        col = self.W_out[:, self._transition_idx[transition]].tocoo()
        return {self._places[i]: float(w) for i, w in zip(col.row, col.data) if w != 0.0}

    def get_initial_marking(self) -> FloatArray:
        """Return (n_places,) float64 vector of initial tokens."""
        return np.array(self._place_tokens, dtype=np.float64)


def _opening_balance(graph: "GraphData", node: "Node") -> float:
    """``balance`` attribute visible under the node's basic morph, or 0."""
    basic_ids = set(node.basic_morph.attribute_ids)
    for attr in graph.attributes_of(node.id, BALANCE_ATTRIBUTE):
        if attr.id not in basic_ids:
            continue
        amount = parse_amount(attr.value)
        if amount is None:
            logger.warning("Ignoring unparseable balance %r on '%s'", attr.value, node.id)
            return 0.0
        return amount
    return 0.0
