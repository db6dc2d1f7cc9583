# ──────────────────────────────────────────────────────────────────────
# Nodebook Core — Ledger Engine Tests
# ──────────────────────────────────────────────────────────────────────
from __future__ import annotations

import pytest

from nodebook.ledger.compute import (
    FRAME_COLUMNS,
    aggregate_by_period,
    compute_ledger,
    filter_by_categories,
    transactions_frame,
    week_key,
)
from nodebook.ledger.parser import (
    BalanceDirective,
    ChartDirective,
    SummaryDirective,
    parse_ledger,
    parse_number,
)

COFFEE = "@account Cash 100.00\n| 2024-01-01 | Coffee | -4.00 | Cash | #food |"

HOUSEHOLD = """
# Household ledger
@account Checking 1000
@account Savings 500

| Date       | Description | Amount  | Account             | Tags        |
|------------|-------------|---------|---------------------|-------------|
| 2024-02-05 | Rent        | -800    | Checking            | #housing    |
| 2024-01-31 | Salary      | 2500    | Checking            | #income     |
| 2024-02-05 | Groceries   | -120.50 | Checking            | #food #home |
| 2024-02-10 | Move        | 200     | Checking -> Savings |             |
| not a row  |
---
balance
summary #food #housing
chart bar monthly
chart line daily
"""


def test_coffee_example() -> None:
    data = parse_ledger(COFFEE)
    computed = compute_ledger(data)
    assert computed.balance_of("Cash") == pytest.approx(96.0)
    (food,) = computed.category_summaries
    assert food.category == "food"
    assert food.total == pytest.approx(-4.0)
    assert food.count == 1
    assert computed.rows[0].running_balance == pytest.approx(96.0)


def test_parse_accounts_rows_and_directives() -> None:
    data = parse_ledger(HOUSEHOLD)
    assert [(a.name, a.initial_balance) for a in data.accounts] == [("Checking", 1000.0), ("Savings", 500.0)]
    assert len(data.transactions) == 4
    assert data.directives == [
        BalanceDirective(),
        SummaryDirective(categories=("food", "housing")),
        ChartDirective(kind="bar", subject="monthly"),
    ]
    assert len(data.errors) == 2
    assert data.errors[0].startswith("Line 12: Could not parse")
    assert data.errors[1] == 'Line 17: Unknown directive "chart line daily"'


def test_transactions_sorted_stably_by_date() -> None:
    data = parse_ledger(HOUSEHOLD)
    assert [t.description for t in data.transactions] == ["Salary", "Rent", "Groceries", "Move"]
    assert data.transactions[1].line == 8


def test_row_fields() -> None:
    data = parse_ledger(HOUSEHOLD)
    groceries = data.transactions[2]
    assert groceries.amount == -120.5
    assert groceries.categories == ("food", "home")
    move = data.transactions[3]
    assert move.account == "Checking"
    assert move.target_account == "Savings"
    assert move.is_transfer
    assert move.categories == ()


def test_running_balances_and_transfers() -> None:
    computed = compute_ledger(parse_ledger(HOUSEHOLD))
    assert [r.running_balance for r in computed.rows] == pytest.approx([3500.0, 2700.0, 2579.5, 2779.5])
    assert computed.balance_of("Checking") == pytest.approx(2779.5)
    assert computed.balance_of("Savings") == pytest.approx(300.0)
    with pytest.raises(KeyError):
        computed.balance_of("Nowhere")


def test_undeclared_account_starts_at_zero() -> None:
    computed = compute_ledger(parse_ledger("| 2024-03-01 | Tip | 5 | Wallet | |"))
    assert computed.balance_of("Wallet") == 5.0


def test_category_summaries_sorted_with_uncategorized() -> None:
    computed = compute_ledger(parse_ledger(HOUSEHOLD))
    summary = {(c.category, c.count): c.total for c in computed.category_summaries}
    assert [c.category for c in computed.category_summaries] == [
        "food",
        "home",
        "housing",
        "income",
        "uncategorized",
    ]
    assert summary[("food", 1)] == pytest.approx(-120.5)
    assert summary[("uncategorized", 1)] == pytest.approx(200.0)


def test_custom_uncategorized_label() -> None:
    computed = compute_ledger(parse_ledger("| 2024-03-01 | Tip | 5 | Wallet |"), uncategorized="misc")
    assert [c.category for c in computed.category_summaries] == ["misc"]


def test_week_key_is_monday() -> None:
    assert week_key("2024-01-03") == "2024-01-01"  # Wednesday
    assert week_key("2024-01-01") == "2024-01-01"  # Monday
    assert week_key("2024-01-07") == "2024-01-01"  # Sunday
    assert week_key("2024-03-01") == "2024-02-26"


def test_aggregate_by_period_monthly() -> None:
    data = parse_ledger(HOUSEHOLD)
    periods = aggregate_by_period(data.transactions, "monthly")
    assert [p.period for p in periods] == ["2024-01", "2024-02"]
    jan, feb = periods
    assert jan.income == pytest.approx(2500.0)
    assert jan.expenses == 0.0
    assert feb.income == pytest.approx(200.0)
    assert feb.expenses == pytest.approx(920.5)
    assert feb.net == pytest.approx(-720.5)


def test_aggregate_by_period_weekly_and_daily() -> None:
    data = parse_ledger(HOUSEHOLD)
    assert [p.period for p in aggregate_by_period(data.transactions, "weekly")] == [
        "2024-01-29",
        "2024-02-05",
    ]
    assert [p.period for p in aggregate_by_period(data.transactions, "daily")] == [
        "2024-01-31",
        "2024-02-05",
        "2024-02-10",
    ]
    assert aggregate_by_period([], "daily") == []
    with pytest.raises(ValueError):
        aggregate_by_period(data.transactions, "yearly")


def test_filter_by_categories() -> None:
    txs = parse_ledger(HOUSEHOLD).transactions
    assert [t.description for t in filter_by_categories(txs, ["food", "income"])] == ["Salary", "Groceries"]
    assert filter_by_categories(txs, []) == txs


def test_transactions_frame() -> None:
    txs = parse_ledger(HOUSEHOLD).transactions
    df = transactions_frame(txs)
    assert list(df.columns) == FRAME_COLUMNS
    assert len(df) == 4
    assert df["amount"].sum() == pytest.approx(1779.5)
    assert list(transactions_frame([]).columns) == FRAME_COLUMNS


def test_parse_number_leading_digits() -> None:
    assert parse_number("12.5") == 12.5
    assert parse_number("-4.00") == -4.0
    assert parse_number("7 EUR") == 7.0
    assert parse_number("abc") is None


def test_malformed_rows_are_errors() -> None:
    data = parse_ledger("| 2024-13 | Bad date | 1 | Cash |\n| 2024-01-01 | No amount | x | Cash |\n| 2024-01-01 | short |")
    assert len(data.errors) == 3
    assert data.transactions == []


def test_impossible_calendar_dates_are_errors() -> None:
    data = parse_ledger("@account Cash 10\n| 2024-13-45 | Coffee | -4.00 | Cash | #food |\n| 2023-02-29 | Tea | -2 | Cash |")
    assert data.transactions == []
    assert [e.split(":")[0] for e in data.errors] == ["Line 2", "Line 3"]
    assert aggregate_by_period(data.transactions, "weekly") == []


def test_leap_day_is_accepted() -> None:
    data = parse_ledger("| 2024-02-29 | Tea | -2 | Cash |")
    assert data.errors == []
    assert [p.period for p in aggregate_by_period(data.transactions, "weekly")] == ["2024-02-26"]
