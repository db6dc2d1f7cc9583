# ──────────────────────────────────────────────────────────────────────
# Nodebook Core — Ledger Computation
# © 1998–2026 Miroslav Šotek. All rights reserved.
# Contact: www.anulum.li | protoscience@anulum.li
# ORCID: https://orcid.org/0009-0009-3560-0851
# License: GNU AGPL v3 | Commercial licensing available
# ──────────────────────────────────────────────────────────────────────
"""
Running balances, category totals and period aggregation over a parsed
ledger.  Per-account balances are a sequential fold in date order;
category and period totals are pandas group-bys over the transaction
frame.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date, timedelta
from typing import Callable, Dict, Iterable, List, Sequence

import pandas as pd

from .parser import CHART_SUBJECTS, LedgerData, Transaction

logger = logging.getLogger(__name__)

UNCATEGORIZED = "uncategorized"

FRAME_COLUMNS = ["date", "description", "amount", "account", "target_account", "categories"]


# ── Result records ───────────────────────────────────────────────────


@dataclass(frozen=True)
class TransactionRow:
    date: str
    description: str
    amount: float
    account: str
    categories: tuple
    running_balance: float


@dataclass(frozen=True)
class AccountBalance:
    name: str
    balance: float


@dataclass(frozen=True)
class CategorySummary:
    category: str
    total: float
    count: int


@dataclass(frozen=True)
class PeriodSummary:
    period: str
    income: float
    expenses: float
    net: float


@dataclass
class ComputedLedger:
    rows: List[TransactionRow] = field(default_factory=list)
    account_balances: List[AccountBalance] = field(default_factory=list)
    category_summaries: List[CategorySummary] = field(default_factory=list)

    def balance_of(self, account: str) -> float:
        for b in self.account_balances:
            if b.name == account:
                return b.balance
        raise KeyError(account)

    def to_dict(self) -> Dict[str, object]:
        return {
            "rows": [
                {
                    "date": r.date,
                    "description": r.description,
                    "amount": r.amount,
                    "account": r.account,
                    "categories": list(r.categories),
                    "running_balance": r.running_balance,
                }
                for r in self.rows
            ],
            "account_balances": [{"name": b.name, "balance": b.balance} for b in self.account_balances],
            "category_summaries": [
                {"category": c.category, "total": c.total, "count": c.count}
                for c in self.category_summaries
            ],
        }


# ── DataFrame export ─────────────────────────────────────────────────


def transactions_frame(transactions: Sequence[Transaction]) -> pd.DataFrame:
    """One row per transaction, columns :data:`FRAME_COLUMNS`."""
    if not transactions:
        return pd.DataFrame(columns=FRAME_COLUMNS)
    return pd.DataFrame(
        [
            {
                "date": t.date,
                "description": t.description,
                "amount": float(t.amount),
                "account": t.account,
                "target_account": t.target_account,
                "categories": list(t.categories),
            }
            for t in transactions
        ],
        columns=FRAME_COLUMNS,
    )


# ── Balances / categories ────────────────────────────────────────────


def _category_summaries(transactions: Sequence[Transaction], uncategorized: str) -> List[CategorySummary]:
    if not transactions:
        return []
    df = transactions_frame(transactions)
    df["category"] = df["categories"].map(lambda cats: list(cats) if cats else [uncategorized])
    exploded = df.explode("category")
    grouped = exploded.groupby("category", sort=True)["amount"].agg(["sum", "count"])
    return [
        CategorySummary(category=str(cat), total=float(row["sum"]), count=int(row["count"]))
        for cat, row in grouped.iterrows()
    ]


def compute_ledger(data: LedgerData, uncategorized: str = UNCATEGORIZED) -> ComputedLedger:
    """Fold transactions into running balances and per-category totals.

    Declared accounts start at their opening balance, accounts first seen
    in a row start at zero.  A transfer ``A -> B`` adds the amount to A and
    subtracts it from B; the row's running balance is that of A.
    """
    balances: Dict[str, float] = {}
    for account in data.accounts:
        balances[account.name] = float(account.initial_balance)

    rows: List[TransactionRow] = []
    for tx in data.transactions:
        balances[tx.account] = balances.get(tx.account, 0.0) + tx.amount
        if tx.target_account is not None:
            balances[tx.target_account] = balances.get(tx.target_account, 0.0) - tx.amount
        rows.append(
            TransactionRow(
                date=tx.date,
                description=tx.description,
                amount=tx.amount,
                account=tx.account,
                categories=tuple(tx.categories),
                running_balance=balances[tx.account],
            )
        )

    logger.debug("Computed ledger: %d rows, %d accounts", len(rows), len(balances))
    return ComputedLedger(
        rows=rows,
        account_balances=[AccountBalance(name, bal) for name, bal in balances.items()],
        category_summaries=_category_summaries(data.transactions, uncategorized),
    )


# ── Periods ──────────────────────────────────────────────────────────


def day_key(date_text: str) -> str:
    return date_text


def week_key(date_text: str) -> str:
    """ISO date of the Monday starting the week that contains *date_text*."""
    d = date.fromisoformat(date_text)
    return (d - timedelta(days=d.weekday())).isoformat()


def month_key(date_text: str) -> str:
    return date_text[:7]


PERIOD_KEYS: Dict[str, Callable[[str], str]] = {
    "daily": day_key,
    "weekly": week_key,
    "monthly": month_key,
    "categories": day_key,
}


def aggregate_by_period(transactions: Sequence[Transaction], period: str) -> List[PeriodSummary]:
    """Income (non-negative amounts) and expenses (absolute negative amounts) per period key.

    Raises
    ------
    ValueError
        If *period* is not one of ``daily``, ``weekly``, ``monthly`` or
        ``categories`` (which buckets by day).
    """
    if period not in PERIOD_KEYS:
        raise ValueError(f"Unknown period '{period}'; expected one of {', '.join(CHART_SUBJECTS)}")
    if not transactions:
        return []

    df = transactions_frame(transactions)
    df["period"] = df["date"].map(PERIOD_KEYS[period])
    df["income"] = df["amount"].where(df["amount"] >= 0, 0.0)
    df["expenses"] = (-df["amount"]).where(df["amount"] < 0, 0.0)
    grouped = df.groupby("period", sort=True)[["income", "expenses"]].sum()

    return [
        PeriodSummary(
            period=str(key),
            income=float(row["income"]),
            expenses=float(row["expenses"]),
            net=float(row["income"] - row["expenses"]),
        )
        for key, row in grouped.iterrows()
    ]


def filter_by_categories(transactions: Iterable[Transaction], categories: Sequence[str]) -> List[Transaction]:
    """Transactions tagged with any of *categories*; all when none given."""
    transactions = list(transactions)
    if not categories:
        return transactions
    wanted = set(categories)
    return [t for t in transactions if wanted.intersection(t.categories)]
