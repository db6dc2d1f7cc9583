# ──────────────────────────────────────────────────────────────────────
# Nodebook Core — Double-Entry Accounting over Petri Arcs
# © 1998–2026 Miroslav Šotek. All rights reserved.
# Contact: www.anulum.li | protoscience@anulum.li
# ORCID: https://orcid.org/0009-0009-3560-0851
# License: GNU AGPL v3 | Commercial licensing available
# ──────────────────────────────────────────────────────────────────────
"""
Accounting variant of the token engine.

``<credit> N Account`` is stored as a ``has prior_state`` arc and
``<debit> N Account`` as a ``has post_state`` arc, so a Transaction is an
ordinary transition whose arc weights are monetary amounts.  Posting
follows each account's normal side:

===========  ===========  ================
Role         Normal side  Debit / Credit
===========  ===========  ================
Asset        debit        + / -
Expense      debit        + / -
Account      debit        + / -
Liability    credit       - / +
Equity       credit       - / +
Revenue      credit       - / +
===========  ===========  ================
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Dict, List, Mapping, Optional

if TYPE_CHECKING:
    from .structure import PlaceTransitionNet

TRANSACTION_ROLE = "Transaction"
STANDARD_ROLES = ("Asset", "Liability", "Equity", "Revenue", "Expense")
ACCOUNT_ROLES = ("Account",) + STANDARD_ROLES
CREDIT_NORMAL_ROLES = frozenset({"Liability", "Equity", "Revenue"})

DEBIT = "debit"
CREDIT = "credit"

DEFAULT_EPSILON = 1e-3
DEFAULT_DECIMALS = 2


def normal_side(role: Optional[str]) -> str:
    return CREDIT if role in CREDIT_NORMAL_ROLES else DEBIT


def posting_sign(role: Optional[str], side: str) -> int:
    """+1 when posting on *side* increases an account of *role*, else -1."""
    return 1 if normal_side(role) == side else -1


def round_money(value: float, decimals: int = DEFAULT_DECIMALS) -> float:
    rounded = round(float(value), decimals)
    return 0.0 if rounded == 0 else rounded


def parse_amount(text: str) -> Optional[float]:
    """Parse ``"1000"``, ``"1,250.50"`` or ``'"-3"'``; ``None`` when not numeric."""
    cleaned = text.strip().strip("\"'").replace(",", "").replace("_", "").strip()
    try:
        return float(cleaned)
    except ValueError:
        return None


def book(
    net: "PlaceTransitionNet",
    marking: Mapping[str, float],
    transaction_id: str,
    decimals: int = DEFAULT_DECIMALS,
) -> Dict[str, float]:
    """Return a copy of *marking* with *transaction_id* posted once."""
    updated = dict(marking)
    postings = [(place, w, CREDIT) for place, w in net.input_weights(transaction_id).items()]
    postings += [(place, w, DEBIT) for place, w in net.output_weights(transaction_id).items()]
    for place, amount, side in postings:
        delta = posting_sign(net.role(place), side) * amount
        updated[place] = round_money(updated.get(place, 0.0) + delta, decimals)
    return updated


@dataclass(frozen=True)
class TransactionBalance:
    transaction_id: str
    debit_total: float
    credit_total: float
    balanced: bool

    @property
    def difference(self) -> float:
        return self.debit_total - self.credit_total


def transaction_balances(
    net: "PlaceTransitionNet",
    epsilon: float = DEFAULT_EPSILON,
    decimals: int = DEFAULT_DECIMALS,
) -> List[TransactionBalance]:
    """Debit and credit totals per Transaction; unbalanced ones are reported, not blocked."""
    out: List[TransactionBalance] = []
    for t in net.transition_names:
        if net.role(t) != TRANSACTION_ROLE:
            continue
        debit = round_money(sum(net.output_weights(t).values()), decimals)
        credit = round_money(sum(net.input_weights(t).values()), decimals)
        out.append(TransactionBalance(t, debit, credit, abs(debit - credit) <= epsilon))
    return out


@dataclass
class AccountingSummary:
    totals: Dict[str, float] = field(default_factory=dict)
    unclassified: float = 0.0
    residual: float = 0.0
    balanced: bool = True

    def to_dict(self) -> Dict[str, object]:
        return {
            "totals": dict(self.totals),
            "unclassified": self.unclassified,
            "residual": self.residual,
            "balanced": self.balanced,
        }


def accounting_summary(
    net: "PlaceTransitionNet",
    marking: Mapping[str, float],
    epsilon: float = DEFAULT_EPSILON,
    decimals: int = DEFAULT_DECIMALS,
) -> AccountingSummary:
    """Group balances by the five standard roles and check the accounting equation.

    ``residual = Assets - Liabilities - Equity - Revenue + Expenses``; plain
    ``Account`` places are totalled separately as *unclassified*.
    """
    totals = {role: 0.0 for role in STANDARD_ROLES}
    unclassified = 0.0
    for place in net.place_names:
        role = net.role(place)
        balance = float(marking.get(place, 0.0))
        if role in totals:
            totals[role] += balance
        elif role == "Account":
            unclassified += balance
    totals = {role: round_money(v, decimals) for role, v in totals.items()}
    residual = round_money(
        totals["Asset"]
        - totals["Liability"]
        - totals["Equity"]
        - totals["Revenue"]
        + totals["Expense"],
        decimals,
    )
    return AccountingSummary(
        totals=totals,
        unclassified=round_money(unclassified, decimals),
        residual=residual,
        balanced=abs(residual) <= epsilon,
    )
