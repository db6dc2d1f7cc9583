# ──────────────────────────────────────────────────────────────────────
# Nodebook Core — Unified CLI
# © 1998–2026 Miroslav Šotek. All rights reserved.
# Contact: www.anulum.li | protoscience@anulum.li
# License: GNU AGPL v3 | Commercial licensing available
# ──────────────────────────────────────────────────────────────────────
from __future__ import annotations

import json
import logging
import sys
from typing import Any, Optional, TextIO

import click
from pydantic import ValidationError

from .cnl.parser import get_operations
from .cnl.schema_parser import merge_schema_results, parse_schema_block
from .cnl.schemas import default_catalog
from .cnl.validation import validate_operations
from .compile import compile_text
from .config_schema import PERIODS, NodebookConfig, load_config
from .io.logging_config import setup_nodebook_logging
from .ledger.compute import aggregate_by_period, compute_ledger
from .ledger.parser import parse_ledger
from .petri.engine import PetriEngine
from .petri.formal_analysis import explore_reachability


LOGGER = logging.getLogger("nodebook.cli")


def _configure_logging(level: str, config: NodebookConfig) -> None:
    if config.logging.json_output or config.logging.log_file:
        setup_nodebook_logging(level, json_output=config.logging.json_output, log_file=config.logging.log_file)
        return
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
    )


def _emit(payload: Any) -> None:
    click.echo(json.dumps(payload, indent=2, ensure_ascii=False, default=str))


def _config(ctx: click.Context) -> NodebookConfig:
    return ctx.obj["config"]


@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.option(
    "--config",
    "config_path",
    type=click.Path(exists=True, dir_okay=False),
    default=None,
    help="JSON settings file (petri, ledger, logging sections).",
)
@click.option(
    "--log-level",
    default=None,
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    help="CLI log level (overrides the settings file).",
)
@click.pass_context
def cli(ctx: click.Context, config_path: Optional[str], log_level: Optional[str]) -> None:
    """Nodebook CNL compiler, token engine and ledger.

    Every subcommand reads its input from FILE (``-`` for stdin) and
    writes JSON to stdout.
    """
    if config_path is None:
        config = NodebookConfig()
    else:
        try:
            config = load_config(config_path)
        except (ValidationError, ValueError) as exc:
            raise click.ClickException(f"Invalid settings file {config_path}: {exc}") from exc
    _configure_logging(log_level or config.logging.level, config)
    ctx.ensure_object(dict)
    ctx.obj["config"] = config


@cli.command()
@click.argument("source", type=click.File("r", encoding="utf-8"), default="-")
def ops(source: TextIO) -> None:
    """Print the operation stream emitted for SOURCE."""
    _emit([op.to_dict() for op in get_operations(source.read())])


@cli.command()
@click.argument("source", type=click.File("r", encoding="utf-8"), default="-")
def graph(source: TextIO) -> None:
    """Compile SOURCE and print the assembled graph, mode and warnings."""
    _emit(compile_text(source.read()).to_dict())


@cli.command()
@click.argument("source", type=click.File("r", encoding="utf-8"), default="-")
@click.option(
    "--schema",
    "schema_files",
    multiple=True,
    type=click.File("r", encoding="utf-8"),
    help="Schema block file merged over the built-in catalog (repeatable).",
)
def validate(source: TextIO, schema_files: tuple) -> None:
    """Check SOURCE against the schema catalog (advisory warnings only)."""
    parsed = merge_schema_results(parse_schema_block(f.read()) for f in schema_files)
    catalog = default_catalog().merged_with(parsed.schemas)
    warnings = validate_operations(get_operations(source.read()), catalog)
    LOGGER.info("validate: %d warning(s), %d schema error(s)", len(warnings), len(parsed.errors))
    _emit(
        {
            "warnings": [
                {"kind": w.kind, "message": w.message, "operation_id": w.operation_id} for w in warnings
            ],
            "schema_errors": [{"message": e.message, "line": e.line} for e in parsed.errors],
        }
    )


@cli.command()
@click.argument("source", type=click.File("r", encoding="utf-8"), default="-")
@click.option("--fire", "fire_ids", multiple=True, help="Transition id to fire, in order (repeatable).")
@click.option("--initial-tokens", type=float, default=None, help="Tokens placed on each input place.")
@click.option(
    "--accounting/--no-accounting",
    default=None,
    help="Force accounting mode on or off (auto-detected by default).",
)
@click.option("--explore", is_flag=True, help="Add a bounded reachability report (token nets only).")
@click.pass_context
def simulate(
    ctx: click.Context,
    source: TextIO,
    fire_ids: tuple,
    initial_tokens: Optional[float],
    accounting: Optional[bool],
    explore: bool,
) -> None:
    """Run the token engine over SOURCE, firing transitions in order."""
    result = compile_text(source.read())
    if result.graph.errors and not result.graph.nodes:
        raise click.ClickException(result.graph.errors[0].message)
    try:
        engine = PetriEngine(
            result.graph,
            initial_tokens=initial_tokens,
            accounting=accounting,
            settings=_config(ctx).petri,
        )
    except ValueError as exc:
        raise click.ClickException(str(exc)) from exc

    steps = []
    for tid in fire_ids:
        if tid not in engine.transitions:
            known = ", ".join(engine.transitions) or "none"
            raise click.ClickException(f"Unknown transition '{tid}'. Transitions: {known}")
        enabled = engine.is_enabled(tid)
        steps.append({"transition": tid, "fired": enabled, "marking": engine.fire(tid)})

    payload = engine.to_dict()
    payload["steps"] = steps
    if explore:
        if engine.accounting:
            raise click.ClickException("--explore requires a token net, not an accounting net.")
        payload["reachability"] = explore_reachability(engine).to_dict()
    _emit(payload)


@cli.command()
@click.argument("source", type=click.File("r", encoding="utf-8"), default="-")
@click.option(
    "--period",
    type=click.Choice(list(PERIODS)),
    default=None,
    help="Aggregation period (defaults to ledger.default_period).",
)
@click.pass_context
def ledger(ctx: click.Context, source: TextIO, period: Optional[str]) -> None:
    """Parse a ledger block and print balances, categories and periods."""
    settings = _config(ctx).ledger
    data = parse_ledger(source.read())
    computed = compute_ledger(data, uncategorized=settings.uncategorized_label)
    chosen = period or settings.default_period
    payload = data.to_dict()
    payload.update(computed.to_dict())
    payload["period"] = chosen
    payload["periods"] = [
        {"period": p.period, "income": p.income, "expenses": p.expenses, "net": p.net}
        for p in aggregate_by_period(data.transactions, chosen)
    ]
    _emit(payload)


def main() -> int:
    try:
        cli.main(standalone_mode=False)
    except click.ClickException as exc:
        exc.show()
        return exc.exit_code
    except SystemExit as exc:
        code = exc.code if isinstance(exc.code, int) else 1
        return code
    return 0


if __name__ == "__main__":
    sys.exit(main())
