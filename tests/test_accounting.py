# ──────────────────────────────────────────────────────────────────────
# Nodebook Core — Accounting Variant Tests
# ──────────────────────────────────────────────────────────────────────
from __future__ import annotations

import pytest

from nodebook.cnl.assembler import operations_to_graph
from nodebook.cnl.parser import get_operations
from nodebook.petri.accounting import (
    CREDIT,
    DEBIT,
    normal_side,
    parse_amount,
    posting_sign,
    round_money,
)
from nodebook.petri.engine import PetriEngine

PURCHASE = "# Cash [Asset]\nbalance: 1000;\n# Buy [Transaction]\n<debit> 50 Office;\n<credit> 50 Cash;"

BOOKS = """
# Cash [Asset]
balance: 1000;
# Capital [Equity]
balance: 1000;
# Rent [Expense]
# Sales [Revenue]
# PayRent [Transaction]
<debit> 200 Rent;
<credit> 200 Cash;
# Sell [Transaction]
<debit> 500 Cash;
<credit> 500 Sales;
"""


def _engine(text: str, **kwargs) -> PetriEngine:
    return PetriEngine(operations_to_graph(get_operations(text)), **kwargs)


def test_normal_sides_and_signs() -> None:
    assert normal_side("Asset") == DEBIT
    assert normal_side("Expense") == DEBIT
    assert normal_side("Account") == DEBIT
    assert normal_side(None) == DEBIT
    assert normal_side("Liability") == CREDIT
    assert posting_sign("Asset", DEBIT) == 1
    assert posting_sign("Asset", CREDIT) == -1
    assert posting_sign("Revenue", CREDIT) == 1
    assert posting_sign("Equity", DEBIT) == -1


def test_money_helpers() -> None:
    assert round_money(0.1 + 0.2) == 0.3
    assert str(round_money(-0.001)) == "0.0"
    assert parse_amount("1000") == 1000.0
    assert parse_amount("1,250.50") == 1250.5
    assert parse_amount('"-3"') == -3.0
    assert parse_amount("lots") is None


def test_purchase_example() -> None:
    engine = _engine(PURCHASE)
    assert engine.mode == "accounting"
    assert engine.marking == {"cash": 950.0, "office": 50.0}

    (balance,) = engine.transaction_balances()
    assert balance.transaction_id == "buy"
    assert balance.debit_total == 50.0
    assert balance.credit_total == 50.0
    assert balance.balanced
    assert balance.difference == 0.0


def test_transactions_are_always_enabled() -> None:
    engine = _engine(PURCHASE)
    assert engine.is_enabled("buy")
    assert not engine.has_deadlock()
    assert engine.fire("buy") == {"cash": 900.0, "office": 100.0}
    assert engine.reset() == {"cash": 950.0, "office": 50.0}


def test_unbalanced_transaction_is_reported_not_blocked() -> None:
    engine = _engine("# Odd [Transaction]\n<debit> 50 A;\n<credit> 40 B;")
    (balance,) = engine.transaction_balances()
    assert not balance.balanced
    assert balance.difference == pytest.approx(10.0)
    assert engine.marking == {"a": 50.0, "b": -40.0}


def test_accounting_equation_holds_for_booked_set() -> None:
    engine = _engine(BOOKS)
    assert engine.marking == {
        "cash": 1300.0,
        "capital": 1000.0,
        "rent": 200.0,
        "sales": 500.0,
    }
    summary = engine.accounting_summary()
    assert summary.totals["Asset"] == 1300.0
    assert summary.totals["Liability"] == 0.0
    assert summary.residual == 0.0
    assert summary.balanced
    assert summary.unclassified == 0.0


def test_plain_accounts_are_unclassified() -> None:
    summary = _engine(PURCHASE).accounting_summary()
    assert summary.unclassified == 50.0
    assert summary.residual == 950.0
    assert not summary.balanced


def test_epsilon_from_settings() -> None:
    from nodebook.config_schema import PetriParams

    text = "# Odd [Transaction]\n<debit> 50.01 A;\n<credit> 50 B;"
    strict = _engine(text)
    loose = _engine(text, settings=PetriParams(balance_epsilon=0.05))
    assert not strict.transaction_balances()[0].balanced
    assert loose.transaction_balances()[0].balanced


def test_forced_generic_mode_on_transaction_graph() -> None:
    engine = _engine(PURCHASE, accounting=False, initial_tokens=50)
    assert engine.mode == "petri-net"
    assert engine.marking == {"office": 0, "cash": 50}
    assert engine.is_enabled("buy")


def test_accounting_to_dict() -> None:
    data = _engine(PURCHASE).to_dict()
    assert data["mode"] == "accounting"
    assert data["transactions"] == [{"id": "buy", "debit": 50.0, "credit": 50.0, "balanced": True}]
    assert data["summary"]["totals"]["Asset"] == 950.0
