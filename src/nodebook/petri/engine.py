# ──────────────────────────────────────────────────────────────────────
# Nodebook Core — Petri-Net Execution Engine
# © 1998–2026 Miroslav Šotek. All rights reserved.
# Contact: www.anulum.li | protoscience@anulum.li
# ORCID: https://orcid.org/0009-0009-3560-0851
# License: GNU AGPL v3 | Commercial licensing available
# ──────────────────────────────────────────────────────────────────────
"""
Token engine over an assembled graph.

The engine owns the only mutable state of the pipeline, the marking.
Enabling, firing and reset run under one re-entrant lock so a reader
never observes a half-applied firing.
"""

from __future__ import annotations

import logging
import threading
from typing import TYPE_CHECKING, Dict, List, Mapping, Optional, Union

import numpy as np

from .accounting import (
    TRANSACTION_ROLE,
    AccountingSummary,
    TransactionBalance,
    accounting_summary,
    book,
    round_money,
    transaction_balances as _transaction_balances,
)
from ..config_schema import PetriParams
from .structure import PlaceTransitionNet

if TYPE_CHECKING:
    from ..cnl.model import GraphData

logger = logging.getLogger(__name__)

Number = Union[int, float]
Marking = Dict[str, Number]

_TOL = 1e-12


def _as_number(value: float) -> Number:
    value = float(value)
    return int(value) if value.is_integer() else value


def is_accounting_graph(graph: "GraphData") -> bool:
    return any(n.role == TRANSACTION_ROLE for n in graph.nodes)


class PetriEngine:
    """Marking, enabling test, firing, reset and deadlock detection.

    Parameters
    ----------
    graph : GraphData
        Assembled graph; transitions are ``Transition``/``Transaction`` nodes.
    initial_tokens : int or float, optional
        Tokens placed on every input place at reset.  Defaults to
        ``settings.initial_tokens`` (1).
    accounting : bool, optional
        Force or disable accounting mode; auto-detected when ``None``.
    settings : PetriParams, optional
        Epsilon, rounding and default token settings.
    """

    def __init__(
        self,
        graph: "GraphData",
        initial_tokens: Optional[Number] = None,
        accounting: Optional[bool] = None,
        settings: Optional[PetriParams] = None,
    ) -> None:
        self.settings = settings if settings is not None else PetriParams()
        self.graph = graph
        self.accounting = is_accounting_graph(graph) if accounting is None else bool(accounting)
        self._initial_tokens: Number = (
            self.settings.initial_tokens if initial_tokens is None else initial_tokens
        )
        if self._initial_tokens < 0:
            raise ValueError(f"initial_tokens must be >= 0, got {self._initial_tokens}")
        self._lock = threading.RLock()
        self.net = PlaceTransitionNet.from_graph(
            graph, accounting=self.accounting, initial_tokens=self._initial_tokens
        )
        self._marking: Marking = {}
        self.reset()

    # ── State ────────────────────────────────────────────────────────────────

    @property
    def mode(self) -> str:
        return "accounting" if self.accounting else "petri-net"

    @property
    def initial_tokens(self) -> Number:
        return self._initial_tokens

    @property
    def marking(self) -> Marking:
        with self._lock:
            return dict(self._marking)

    @property
    def transitions(self) -> List[str]:
        return self.net.transition_names

    @property
    def places(self) -> List[str]:
        return self.net.place_names

    def _initial_marking(self) -> Marking:
        seeds = self.net.get_initial_marking()
        if not self.accounting:
            return {p: _as_number(v) for p, v in zip(self.net.place_names, seeds)}

        decimals = self.settings.monetary_decimals
        marking: Dict[str, float] = {
            p: round_money(v, decimals) for p, v in zip(self.net.place_names, seeds)
        }
        for t in self.net.transition_names:
            if self.net.role(t) == TRANSACTION_ROLE:
                marking = book(self.net, marking, t, decimals)
        return dict(marking)

    def reset(self, initial_tokens: Optional[Number] = None) -> Marking:
        """Recompute the initial marking, optionally with a new token count."""
        with self._lock:
            if initial_tokens is not None and initial_tokens != self._initial_tokens:
                if initial_tokens < 0:
                    raise ValueError(f"initial_tokens must be >= 0, got {initial_tokens}")
                self._initial_tokens = initial_tokens
                self.net = PlaceTransitionNet.from_graph(
                    self.graph, accounting=self.accounting, initial_tokens=initial_tokens
                )
            self._marking = self._initial_marking()
            logger.debug("Reset marking (%s): %s", self.mode, self._marking)
            return dict(self._marking)

    # ── Enabling / firing ────────────────────────────────────────────────────

    def is_enabled(self, transition_id: str, marking: Optional[Mapping[str, Number]] = None) -> bool:
        """True iff *transition_id* can fire under *marking* (default: current).

        A transition needs at least one input arc and every input place must
        hold the summed weight of its arcs.  Accounting Transactions are
        always enabled.
        """
        with self._lock:
            if not self.net.has_transition(transition_id):
                return False
            if self.accounting and self.net.role(transition_id) == TRANSACTION_ROLE:
                return True
            m = self._marking if marking is None else marking
            needs = self.net.input_weights(transition_id)
            if not needs:
                return False
            return all(float(m.get(p, 0)) >= w - _TOL for p, w in needs.items())

    def enabled_transitions(self) -> List[str]:
        with self._lock:
            return [t for t in self.net.transition_names if self.is_enabled(t)]

    def has_deadlock(self) -> bool:
        """True iff no transition is enabled under the current marking."""
        with self._lock:
            return not any(self.is_enabled(t) for t in self.net.transition_names)

    def fire(self, transition_id: str) -> Marking:
        """Fire *transition_id* atomically; disabled or unknown ids are no-ops."""
        with self._lock:
            if not self.is_enabled(transition_id):
                logger.info(
                    "Transition '%s' is not enabled; marking unchanged",
                    transition_id,
                    extra={"graph_context": {"transition": transition_id, "fired": False}},
                )
                return dict(self._marking)

            self._marking = self.successor(transition_id, self._marking)
            logger.debug(
                "Fired '%s' -> %s",
                transition_id,
                self._marking,
                extra={"graph_context": {"transition": transition_id, "fired": True}},
            )
            return dict(self._marking)

    def successor(self, transition_id: str, marking: Mapping[str, Number]) -> Marking:
        """Marking reached by firing *transition_id* from *marking* (no enabling check)."""
        if self.accounting and self.net.role(transition_id) == TRANSACTION_ROLE:
            return dict(book(self.net, marking, transition_id, self.settings.monetary_decimals))
        updated: Marking = dict(marking)
        for p, w in self.net.input_weights(transition_id).items():
            updated[p] = self._settle(float(updated.get(p, 0)) - w)
        for p, w in self.net.output_weights(transition_id).items():
            updated[p] = self._settle(float(updated.get(p, 0)) + w)
        return updated

    def _settle(self, value: float) -> Number:
        if self.accounting:
            return round_money(value, self.settings.monetary_decimals)
        if abs(value) < _TOL:
            return 0
        return _as_number(value)

    def marking_vector(self) -> np.ndarray:
        """Current marking as a (n_places,) float64 vector in place order."""
        with self._lock:
            return np.array(
                [float(self._marking.get(p, 0)) for p in self.net.place_names], dtype=np.float64
            )

    # ── Accounting ───────────────────────────────────────────────────────────

    def transaction_balances(self) -> List[TransactionBalance]:
        return _transaction_balances(
            self.net, self.settings.balance_epsilon, self.settings.monetary_decimals
        )

    def accounting_summary(self) -> AccountingSummary:
        with self._lock:
            return accounting_summary(
                self.net,
                self._marking,
                self.settings.balance_epsilon,
                self.settings.monetary_decimals,
            )

    def to_dict(self) -> Dict[str, object]:
        """JSON-ready snapshot of the engine state."""
        with self._lock:
            out: Dict[str, object] = {
                "mode": self.mode,
                "marking": dict(self._marking),
                "enabled": self.enabled_transitions(),
                "deadlock": self.has_deadlock(),
                "topology": self.net.topology().to_dict(),
            }
            if self.accounting:
                out["transactions"] = [
                    {
                        "id": b.transaction_id,
                        "debit": b.debit_total,
                        "credit": b.credit_total,
                        "balanced": b.balanced,
                    }
                    for b in self.transaction_balances()
                ]
                out["summary"] = self.accounting_summary().to_dict()
            return out
