"""Commands validating inclusion plans and materialising fetched rows."""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer
from rich.table import Table

from closuretree.materialization.main import materialize_file, validate_plan_file

from .common import console, get_state, report_errors, resolve_path

app = typer.Typer(
    add_completion=False,
    help="Validate hierarchy requests and build trees from closure-table rows.",
    no_args_is_help=True,
)


def _validate_command(
    ctx: typer.Context,
    *,
    models: Path = typer.Option(..., "--models", "-m", help="YAML or JSON model definitions."),
    plan: Optional[Path] = typer.Option(None, "--plan", "-p", help="Inclusion plan YAML or JSON."),
    model: Optional[str] = typer.Option(
        None,
        "--model",
        help="Root model name; defaults to the only hierarchical model.",
    ),
) -> None:
    state = get_state(ctx)
    with report_errors():
        hierarchy_exists = validate_plan_file(
            resolve_path(models),
            resolve_path(plan) if plan else None,
            model_name=model,
            settings=state.settings,
        )
    verdict = "requests" if hierarchy_exists else "does not request"
    console.print(f"[green]Plan is valid[/green] and {verdict} hierarchy expansion.")


def _materialize_command(
    ctx: typer.Context,
    *,
    rows: Path = typer.Option(..., "--rows", "-r", help="Fetched rows as a JSON list of records."),
    models: Path = typer.Option(..., "--models", "-m", help="YAML or JSON model definitions."),
    plan: Optional[Path] = typer.Option(None, "--plan", "-p", help="Inclusion plan YAML or JSON."),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Destination for the tree JSON."),
    model: Optional[str] = typer.Option(
        None,
        "--model",
        help="Root model name; defaults to the only hierarchical model.",
    ),
    rich: bool = typer.Option(False, "--rich", help="Load rows as rich records with a shadow store."),
) -> None:
    state = get_state(ctx)
    with report_errors():
        result = materialize_file(
            resolve_path(rows),
            resolve_path(models),
            resolve_path(plan) if plan else None,
            output_path=resolve_path(output, must_exist=False) if output else None,
            model_name=model,
            rich=rich,
            settings=state.settings,
        )

    table = Table(title=f"Materialised: {result.model.name}", box=None)
    table.add_column("Metric")
    table.add_column("Value", justify="right")
    for key in ("roots", "nodes", "max_depth"):
        table.add_row(key.replace("_", " ").title(), str(result.statistics.get(key, 0)))
    table.add_row("Output", str(result.output_path) if result.output_path else "-")
    console.print(table)


app.command("validate")(_validate_command)
app.command("materialize")(_materialize_command)
