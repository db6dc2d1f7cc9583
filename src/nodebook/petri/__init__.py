# ──────────────────────────────────────────────────────────────────────
# Nodebook Core — Petri-Net Token Engine
# © 1998–2026 Miroslav Šotek. All rights reserved.
# Contact: www.anulum.li | protoscience@anulum.li
# ORCID: https://orcid.org/0009-0009-3560-0851
# License: GNU AGPL v3 | Commercial licensing available
# ──────────────────────────────────────────────────────────────────────
"""
Petri-net interpretation of an assembled graph
==============================================

``structure.PlaceTransitionNet``
    Transition/place classification with sparse W_in / W_out matrices.

``engine.PetriEngine``
    Marking, enabling, firing, reset and deadlock queries.

``accounting``
    Double-entry posting, transaction balances and the accounting equation.

``formal_analysis.explore_reachability``
    Bounded breadth-first reachability search.
"""

from .structure import PlaceTransitionNet, TopologyReport
from .accounting import AccountingSummary, TransactionBalance, accounting_summary, transaction_balances
from .engine import Marking, PetriEngine, is_accounting_graph
from .formal_analysis import ReachabilityReport, explore_reachability

__all__ = [
    "PlaceTransitionNet",
    "TopologyReport",
    "PetriEngine",
    "Marking",
    "is_accounting_graph",
    "AccountingSummary",
    "TransactionBalance",
    "accounting_summary",
    "transaction_balances",
    "ReachabilityReport",
    "explore_reachability",
]
