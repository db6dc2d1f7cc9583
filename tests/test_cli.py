from __future__ import annotations

import json
from pathlib import Path

from click.testing import CliRunner

from nodebook.cli import cli

REACTION = "# A [Transition]\n<has prior_state> 2 X;\n<has post_state> Y;"
PURCHASE = "# Cash [Asset]\nbalance: 1000;\n# Buy [Transaction]\n<debit> 50 Office;\n<credit> 50 Cash;"
CYCLE = (
    "# Go [Transition]\n<has prior_state> A;\n<has post_state> B;\n"
    "# Back [Transition]\n<has prior_state> B;\n<has post_state> A;"
)
LEDGER = (
    "@account Checking 1000\n"
    "| 2024-01-31 | Salary | 2500 | Checking | #income |\n"
    "| 2024-02-05 | Rent | -800 | Checking | #housing |\n"
    "---\nbalance\n"
)


def _write(tmp_path: Path, name: str, text: str) -> str:
    path = tmp_path / name
    path.write_text(text, encoding="utf-8")
    return str(path)


def _json(result) -> dict:
    assert result.exit_code == 0, result.output
    return json.loads(result.stdout)


def test_cli_help_lists_commands() -> None:
    result = CliRunner().invoke(cli, ["--help"])
    assert result.exit_code == 0
    for name in ("ops", "graph", "validate", "simulate", "ledger"):
        assert name in result.output


def test_ops_prints_operation_stream(tmp_path: Path) -> None:
    src = _write(tmp_path, "water.cnl", '# Water [Molecule]\nstate: "liquid";')
    ops = _json(CliRunner().invoke(cli, ["ops", src]))
    kinds = [op["type"] for op in ops]
    assert kinds[0] == "AddNode"
    assert "AddAttribute" in kinds
    assert ops[0]["id"] == "water"


def test_graph_reads_stdin_and_reports_mode() -> None:
    payload = _json(CliRunner().invoke(cli, ["graph"], input=REACTION))
    assert payload["mode"] == "petri-net"
    assert [n["id"] for n in payload["graph"]["nodes"]] == ["a", "x", "y"]
    assert payload["graph"]["errors"] == []


def test_validate_with_user_schema(tmp_path: Path) -> None:
    src = _write(tmp_path, "zorg.cnl", "# Zorg [Alien]\nglow: bright;")
    bare = _json(CliRunner().invoke(cli, ["validate", src]))
    assert [w["kind"] for w in bare["warnings"]] == ["unknown_node_type", "unknown_attribute"]

    schema = _write(tmp_path, "alien.schema", "nodeType: Alien\nattributeType: glow, string\nbogus line")
    extended = _json(CliRunner().invoke(cli, ["validate", src, "--schema", schema]))
    assert extended["warnings"] == []
    assert extended["schema_errors"][0]["line"] == 3


def test_simulate_fires_in_order() -> None:
    payload = _json(
        CliRunner().invoke(cli, ["simulate", "--initial-tokens", "2", "--fire", "a", "--fire", "a"], input=REACTION)
    )
    assert payload["mode"] == "petri-net"
    assert [s["fired"] for s in payload["steps"]] == [True, False]
    assert payload["steps"][0]["marking"] == {"x": 0, "y": 1}
    assert payload["marking"] == {"x": 0, "y": 1}
    assert payload["deadlock"] is True


def test_simulate_unknown_transition_fails() -> None:
    result = CliRunner().invoke(cli, ["simulate", "--fire", "nope"], input=REACTION)
    assert result.exit_code == 1
    assert "Unknown transition 'nope'" in result.output


def test_simulate_explore_adds_reachability() -> None:
    payload = _json(CliRunner().invoke(cli, ["simulate", "--explore"], input=CYCLE))
    assert payload["reachability"]["states"] == 3
    assert payload["topology"]["unseeded_cycles"] == []
    assert payload["reachability"]["deadlock_reachable"] is False


def test_simulate_accounting_graph() -> None:
    payload = _json(CliRunner().invoke(cli, ["simulate"], input=PURCHASE))
    assert payload["mode"] == "accounting"
    assert payload["marking"] == {"cash": 950.0, "office": 50.0}
    assert payload["transactions"][0]["balanced"] is True

    refused = CliRunner().invoke(cli, ["simulate", "--explore"], input=PURCHASE)
    assert refused.exit_code == 1


def test_ledger_command_uses_period_option(tmp_path: Path) -> None:
    src = _write(tmp_path, "books.ledger", LEDGER)
    monthly = _json(CliRunner().invoke(cli, ["ledger", src]))
    assert monthly["period"] == "monthly"
    assert [p["period"] for p in monthly["periods"]] == ["2024-01", "2024-02"]
    assert monthly["account_balances"] == [{"name": "Checking", "balance": 2700.0}]
    assert monthly["directives"] == [{"type": "balance"}]

    daily = _json(CliRunner().invoke(cli, ["ledger", src, "--period", "daily"]))
    assert [p["period"] for p in daily["periods"]] == ["2024-01-31", "2024-02-05"]


def test_config_file_sets_defaults(tmp_path: Path) -> None:
    config = _write(
        tmp_path,
        "nodebook.json",
        json.dumps({"petri": {"initial_tokens": 2}, "ledger": {"default_period": "weekly"}}),
    )
    src = _write(tmp_path, "books.ledger", LEDGER)
    payload = _json(CliRunner().invoke(cli, ["--config", config, "ledger", src]))
    assert payload["period"] == "weekly"

    sim = _json(CliRunner().invoke(cli, ["--config", config, "simulate", "--fire", "a"], input=REACTION))
    assert sim["steps"][0]["fired"] is True


def test_invalid_config_file_is_rejected(tmp_path: Path) -> None:
    config = _write(tmp_path, "bad.json", json.dumps({"ledger": {"default_period": "hourly"}}))
    result = CliRunner().invoke(cli, ["--config", config, "graph"], input=REACTION)
    assert result.exit_code == 1
    assert "Invalid settings file" in result.output


def test_ledger_bad_date_reported_not_crashing() -> None:
    text = LEDGER.replace("---", "| 2024-13-45 | Ghost | 1 | Checking |\n---")
    payload = _json(CliRunner().invoke(cli, ["ledger", "--period", "weekly"], input=text))
    assert payload["errors"] == ['Line 4: Could not parse "| 2024-13-45 | Ghost | 1 | Checking |"']
    assert [p["period"] for p in payload["periods"]] == ["2024-01-29", "2024-02-05"]
