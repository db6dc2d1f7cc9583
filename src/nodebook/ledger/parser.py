# ──────────────────────────────────────────────────────────────────────
# Nodebook Core — Ledger Parser
# © 1998–2026 Miroslav Šotek. All rights reserved.
# Contact: www.anulum.li | protoscience@anulum.li
# ORCID: https://orcid.org/0009-0009-3560-0851
# License: GNU AGPL v3 | Commercial licensing available
# ──────────────────────────────────────────────────────────────────────
"""
Parser for the flat ledger mini-grammar.

    @account Cash 100.00
    | Date       | Description | Amount | Account        | Tags  |
    |------------|-------------|--------|----------------|-------|
    | 2024-01-01 | Coffee      | -4.00  | Cash           | #food |
    | 2024-01-02 | Move        | 20     | Savings -> Cash |      |
    ---
    balance
    summary #food
    chart pie categories

Lines that cannot be read are reported with their 1-based line number;
parsing always continues.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from datetime import date
from typing import Dict, List, Optional, Tuple, Union

logger = logging.getLogger(__name__)

CHART_KINDS = ("pie", "bar")
CHART_SUBJECTS = ("categories", "daily", "weekly", "monthly")

_ACCOUNT_RE = re.compile(r"^@account\s+(.+?)\s+([-+]?\d+(?:\.\d+)?)$")
_SEPARATOR_RE = re.compile(r"^\|[\s\-:|]+\|$")
_ROW_RE = re.compile(r"^\|(.+)\|$")
_COMMENT_RE = re.compile(r"^#\s")
_DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")
_TRANSFER_RE = re.compile(r"^(.+?)\s*->\s*(.+)$")
_LEADING_NUMBER_RE = re.compile(r"^\s*[-+]?(?:\d+\.?\d*|\.\d+)(?:[eE][-+]?\d+)?")

_HEADER_WORDS = ("date", "description", "amount")


# ── Records ──────────────────────────────────────────────────────────


@dataclass(frozen=True)
class Account:
    name: str
    initial_balance: float


@dataclass(frozen=True)
class Transaction:
    date: str
    description: str
    amount: float
    account: str
    target_account: Optional[str] = None
    categories: Tuple[str, ...] = ()
    line: Optional[int] = None

    @property
    def is_transfer(self) -> bool:
        return self.target_account is not None

    def to_dict(self) -> Dict[str, object]:
        return {
            "date": self.date,
            "description": self.description,
            "amount": self.amount,
            "account": self.account,
            "target_account": self.target_account,
            "categories": list(self.categories),
        }


@dataclass(frozen=True)
class BalanceDirective:
    type: str = "balance"


@dataclass(frozen=True)
class SummaryDirective:
    categories: Tuple[str, ...] = ()
    type: str = "summary"


@dataclass(frozen=True)
class ChartDirective:
    kind: str = "pie"
    subject: str = "categories"
    type: str = "chart"


Directive = Union[BalanceDirective, SummaryDirective, ChartDirective]


@dataclass
class LedgerData:
    accounts: List[Account] = field(default_factory=list)
    transactions: List[Transaction] = field(default_factory=list)
    directives: List[Directive] = field(default_factory=list)
    errors: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, object]:
        directives: List[Dict[str, object]] = []
        for d in self.directives:
            entry: Dict[str, object] = {"type": d.type}
            if isinstance(d, SummaryDirective):
                entry["categories"] = list(d.categories)
            elif isinstance(d, ChartDirective):
                entry["kind"] = d.kind
                entry["subject"] = d.subject
            directives.append(entry)
        return {
            "accounts": [{"name": a.name, "initial_balance": a.initial_balance} for a in self.accounts],
            "transactions": [t.to_dict() for t in self.transactions],
            "directives": directives,
            "errors": list(self.errors),
        }


# ── Helpers ──────────────────────────────────────────────────────────


def parse_number(text: str) -> Optional[float]:
    """Leading decimal number of *text*, or ``None`` when there is none."""
    m = _LEADING_NUMBER_RE.match(text)
    if not m:
        return None
    return float(m.group(0))


def parse_tags(text: str) -> Tuple[str, ...]:
    """``#``-prefixed tokens of *text* without the ``#``."""
    return tuple(tok[1:] for tok in text.split() if tok.startswith("#"))


def _cells(line: str) -> Optional[List[str]]:
    m = _ROW_RE.match(line)
    if not m:
        return None
    return [c.strip() for c in m.group(1).split("|")]


def _is_header(cells: List[str]) -> bool:
    return len(cells) >= 3 and cells[0].lower() in _HEADER_WORDS


def parse_row(line: str, line_number: Optional[int] = None) -> Optional[Transaction]:
    """Decode one pipe-delimited transaction row, ``None`` if malformed."""
    cells = _cells(line)
    if cells is None or len(cells) < 4:
        return None
    date_text, description, amount_text, account_text = cells[:4]
    if not _DATE_RE.match(date_text):
        return None
    try:
        date.fromisoformat(date_text)
    except ValueError:
        return None
    amount = parse_number(amount_text)
    if amount is None:
        return None

    account, target = account_text, None
    transfer = _TRANSFER_RE.match(account_text)
    if transfer:
        account, target = transfer.group(1).strip(), transfer.group(2).strip()

    return Transaction(
        date=date_text,
        description=description,
        amount=amount,
        account=account,
        target_account=target,
        categories=parse_tags(" ".join(cells[4:])),
        line=line_number,
    )


def parse_directive(line: str) -> Optional[Directive]:
    parts = line.split()
    if not parts:
        return None
    command = parts[0]
    if command == "balance":
        return BalanceDirective()
    if command == "summary":
        return SummaryDirective(categories=parse_tags(" ".join(parts[1:])))
    if command == "chart":
        kind = parts[1] if len(parts) > 1 else ""
        subject = parts[2] if len(parts) > 2 else "categories"
        if kind not in CHART_KINDS or subject not in CHART_SUBJECTS:
            return None
        return ChartDirective(kind=kind, subject=subject)
    return None


# ── Entry point ──────────────────────────────────────────────────────


def parse_ledger(text: str) -> LedgerData:
    """Parse a ledger block into accounts, transactions and directives.

    Transactions are sorted by date; the sort is stable so same-day rows
    keep their order in the text.
    """
    data = LedgerData()
    in_directives = False

    for number, raw in enumerate(text.split("\n"), start=1):
        line = raw.strip()
        if not line or _COMMENT_RE.match(line):
            continue
        if line == "---":
            in_directives = True
            continue

        if in_directives:
            directive = parse_directive(line)
            if directive is None:
                data.errors.append(f'Line {number}: Unknown directive "{line}"')
            else:
                data.directives.append(directive)
            continue

        if _SEPARATOR_RE.match(line):
            continue

        account = _ACCOUNT_RE.match(line)
        if account:
            data.accounts.append(Account(account.group(1), float(account.group(2))))
            continue

        if line.startswith("|"):
            cells = _cells(line)
            if cells is not None and _is_header(cells):
                continue
            tx = parse_row(line, number)
            if tx is not None:
                data.transactions.append(tx)
                continue

        data.errors.append(f'Line {number}: Could not parse "{line}"')

    data.transactions.sort(key=lambda t: t.date)
    if data.errors:
        logger.debug("Ledger parsed with %d error(s)", len(data.errors))
    return data
