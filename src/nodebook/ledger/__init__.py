# ──────────────────────────────────────────────────────────────────────
# Nodebook Core — Ledger Engine
# © 1998–2026 Miroslav Šotek. All rights reserved.
# Contact: www.anulum.li | protoscience@anulum.li
# ORCID: https://orcid.org/0009-0009-3560-0851
# License: GNU AGPL v3 | Commercial licensing available
# ──────────────────────────────────────────────────────────────────────
"""
Flat transaction ledger
=======================

Independent of the graph pipeline: ``parse_ledger`` reads accounts,
table rows and report directives, ``compute_ledger`` folds them into
running balances and category totals.
"""

from .parser import (
    Account,
    BalanceDirective,
    ChartDirective,
    LedgerData,
    SummaryDirective,
    Transaction,
    parse_ledger,
)
from .compute import (
    AccountBalance,
    CategorySummary,
    ComputedLedger,
    PeriodSummary,
    TransactionRow,
    aggregate_by_period,
    compute_ledger,
    filter_by_categories,
    transactions_frame,
)

__all__ = [
    # Parsing
    "Account",
    "Transaction",
    "BalanceDirective",
    "SummaryDirective",
    "ChartDirective",
    "LedgerData",
    "parse_ledger",
    # Computation
    "TransactionRow",
    "AccountBalance",
    "CategorySummary",
    "PeriodSummary",
    "ComputedLedger",
    "compute_ledger",
    "aggregate_by_period",
    "filter_by_categories",
    "transactions_frame",
]
