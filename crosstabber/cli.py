"""Command-line interface for crosstabber."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Annotated

import typer
from pydantic import ValidationError
from rich.console import Console

from crosstabber import __version__
from crosstabber.config import load_settings
from crosstabber.models import Crosstab, load_crosstab

logger = logging.getLogger(__name__)

app = typer.Typer(
    name="crosstabber",
    help="Statistical analysis and insight extraction for audience crosstabs.",
    no_args_is_help=True,
)
console = Console(width=min(80, Console().width))


def _version_callback(value: bool) -> None:
    if value:
        console.print(f"crosstabber {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: Annotated[
        bool,
        typer.Option(
            "--version", "-V",
            help="Show version and exit.",
            callback=_version_callback,
            is_eager=True,
        ),
    ] = False,
) -> None:
    """Statistical analysis and insight extraction for audience crosstabs."""


def _load(path: Path) -> Crosstab:
    if not path.is_file():
        console.print(f"[red]File {path} not found.[/red]")
        raise typer.Exit(1)
    try:
        return load_crosstab(path)
    except ValidationError as exc:
        console.print(f"[red]Invalid crosstab file {path}:[/red] {exc.error_count()} error(s)")
        for error in exc.errors()[:5]:
            loc = ".".join(str(p) for p in error["loc"]) or "(root)"
            console.print(f"  {loc}: {error['msg']}", markup=False)
        raise typer.Exit(1) from exc


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------


@app.command()
def analyze(
    file: Annotated[
        Path,
        typer.Argument(help="Crosstab JSON file, as saved from the crosstab API."),
    ],
    templates: Annotated[
        bool | None,
        typer.Option(
            "--templates/--no-templates",
            help="Append specialised template analyses (default from CROSSTABBER_APPLY_TEMPLATES).",
        ),
    ] = None,
    as_json: Annotated[
        bool,
        typer.Option("--json", help="Print a JSON report instead of markdown."),
    ] = False,
    output_dir: Annotated[
        Path | None,
        typer.Option("--output-dir", "-o", help="Directory for the crosstabber log file."),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Enable verbose logging."),
    ] = False,
) -> None:
    """Analyze a crosstab and print the findings."""
    from crosstabber.analysis import NoDataError, analyze as run_analysis
    from crosstabber.logging import setup_logging
    from crosstabber.render_output import NO_DATA_MESSAGE, format_report
    from crosstabber.templates import TemplateEngine

    settings = load_settings(apply_templates=templates, output_dir=output_dir)
    setup_logging(output_dir=settings.output_dir, verbose=verbose)

    crosstab = _load(file)
    try:
        analysis = run_analysis(crosstab)
    except NoDataError as exc:
        logger.warning("%s", exc, extra={"crosstab": crosstab.id})
        console.print(f"[yellow]{NO_DATA_MESSAGE}[/yellow]")
        raise typer.Exit(1) from exc

    template_results = {}
    if settings.apply_templates:
        template_results = TemplateEngine().analyze_with_templates(crosstab, analysis)

    if as_json:
        from crosstabber.actions import build_suggested_actions
        from crosstabber.charts import build_index_charts
        from crosstabber.export import build_report, report_to_json

        charts = build_index_charts(
            analysis, crosstab.name, max_label_length=settings.max_label_length
        )
        actions = build_suggested_actions(
            analysis, crosstab.name, multi_market=crosstab.is_multi_market
        )
        report = build_report(
            crosstab,
            analysis,
            charts=charts,
            template_results=template_results,
            actions=actions,
        )
        typer.echo(report_to_json(report, indent=settings.json_indent))
        return

    typer.echo(format_report(crosstab, analysis, template_results))


@app.command(name="templates")
def list_templates(
    file: Annotated[
        Path,
        typer.Argument(help="Crosstab JSON file, as saved from the crosstab API."),
    ],
) -> None:
    """List the specialised analyses that apply to a crosstab."""
    from crosstabber.templates import TemplateEngine

    crosstab = _load(file)
    selected = TemplateEngine().select_templates(crosstab)
    if not selected:
        console.print("[dim]No specialised templates apply to this crosstab.[/dim]")
        return
    for template in selected:
        console.print(f"[bold]{template.name}[/bold]  [dim]{template.description}[/dim]")
