"""
editions - command-line tools for the edition contract.

Commands:
  config     Print the effective configuration (env + defaults) as JSON
  simulate   Run a JSON plan against a fresh contract and print a report

Global options:
  --log-level TEXT   Logging level (DEBUG, INFO, WARNING, ...)  [env: EDITIONS_LOG_LEVEL]

Examples:
  editions config
  EDITIONS_MAX_SUPPLY=100 editions config
  editions simulate plan.json
  editions --log-level DEBUG simulate plan.json --strict

Exit codes for `simulate`: 0 when every step matched its expectation, 1 when
at least one did not, 2 when the plan itself is invalid.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path

import typer
from pydantic import ValidationError

from .config import load_config
from .errors import LedgerError
from .plan import Plan, run_plan

app = typer.Typer(
    name="editions",
    help="Capped paid minting with locked payment splits.",
    no_args_is_help=True,
    add_completion=False,
)


def _pretty(obj: object) -> str:
    return json.dumps(obj, indent=2, sort_keys=True)


@app.callback()
def main(
    log_level: str = typer.Option("WARNING", "--log-level", envvar="EDITIONS_LOG_LEVEL", help="Logging level"),
) -> None:
    level = getattr(logging, log_level.upper(), None)
    if not isinstance(level, int):
        raise typer.BadParameter(f"unknown log level {log_level!r}", param_hint="--log-level")
    logging.basicConfig(level=level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")


@app.command("config")
def show_config() -> None:
    """Print the effective configuration."""
    typer.echo(_pretty(load_config().as_dict()))


@app.command()
def simulate(
    plan_path: Path = typer.Argument(..., exists=True, dir_okay=False, readable=True, help="Plan JSON file"),
    strict: bool = typer.Option(False, "--strict", help="Stop at the first step that misses its expectation"),
) -> None:
    """Deploy a fresh contract and run the plan's steps against it."""
    try:
        plan = Plan.model_validate_json(plan_path.read_text(encoding="utf-8"))
        report = run_plan(plan, stop_on_unexpected=strict)
    except (ValidationError, LedgerError, TypeError, ValueError) as exc:
        typer.echo(f"invalid plan: {exc}", err=True)
        raise typer.Exit(code=2)

    typer.echo(_pretty(report))
    if report["unexpected"]:
        raise typer.Exit(code=1)


if __name__ == "__main__":  # pragma: no cover
    app()
