"""Primary Typer application wiring the closuretree CLI."""

from __future__ import annotations

from typing import List, Optional

import typer
from rich.table import Table

from . import tree
from .common import configure_state, console, parse_override, report_errors

app = typer.Typer(
    add_completion=False,
    help="Validate inclusion plans and materialise closure-table rows into trees.",
    no_args_is_help=True,
)


@app.callback()
def main(
    ctx: typer.Context,
    environment: Optional[str] = typer.Option(
        None,
        "--environment",
        "-e",
        help="Active configuration environment (development, testing, production).",
        show_default=False,
    ),
    override: List[str] = typer.Option(  # noqa: B008 - Typer callback signature
        [],
        "--override",
        "-o",
        metavar="KEY=VALUE",
        help="Configuration override in dotted.key=value notation (repeatable).",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Emit debug logging and the resolved CLI context.",
    ),
) -> None:
    """Configure shared CLI state prior to executing subcommands."""

    overrides = [parse_override(item) for item in override]
    with report_errors():
        configure_state(
            ctx,
            environment=environment,
            overrides=overrides,
            verbose=verbose,
        )

    if verbose:
        state = ctx.obj
        table = Table(title="CLI Context", show_header=False, box=None)
        table.add_row("Environment", state.environment)
        table.add_row("Policy version", state.settings.policy_version)
        table.add_row("Log file", str(state.settings.log_file))
        console.print(table)


app.add_typer(tree.app, name="tree", help="Hierarchy validation and materialisation")
