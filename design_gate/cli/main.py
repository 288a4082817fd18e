"""
Design Gate CLI
Classify design files by name and check the service admission signal
"""

import asyncio
import json
import mimetypes
from pathlib import Path
from typing import Annotated, List, Optional

import typer
from rich.console import Console
from rich.table import Table

from design_gate import __version__
from design_gate.config import settings
from design_gate.core.exceptions import DesignGateError
from design_gate.core.monitoring.history import MetricsHistory
from design_gate.core.monitoring.metrics import MetricsSampler
from design_gate.models.design import DesignReport
from design_gate.services.analysis_service import DesignAnalysisService
from design_gate.utils.formatting import format_file_size
from design_gate.utils.logging import setup_logging

app = typer.Typer(
    name="design-gate",
    help="Print-design classification and service health checks",
    no_args_is_help=True,
    rich_markup_mode="rich",
    pretty_exceptions_show_locals=False,
)
console = Console()

OCTET_STREAM = "application/octet-stream"


def _version_callback(value: bool) -> None:
    if value:
        console.print(f"design-gate {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: Annotated[
        Optional[bool],
        typer.Option(
            "--version",
            "-v",
            callback=_version_callback,
            is_eager=True,
            help="Show version",
        ),
    ] = None,
    verbose: Annotated[
        bool, typer.Option("--verbose", help="Show informational log output")
    ] = False,
):
    """
    Design Gate CLI

    [bold green]Examples:[/bold green]

      [cyan]design-gate analyze kartvizit.pdf poster.svg[/cyan]

      [cyan]design-gate health --connections 12[/cyan]
    """
    setup_logging(
        log_level=settings.log_level if verbose else "WARNING", json_logs=False
    )


def _guess_mime_type(file_name: str) -> str:
    guessed, _ = mimetypes.guess_type(file_name)
    return guessed or OCTET_STREAM


def _reports_table(reports: List[DesignReport]) -> Table:
    table = Table(title="Design Analysis")
    table.add_column("File", style="cyan")
    table.add_column("Category")
    table.add_column("Size (mm)", justify="right")
    table.add_column("Complexity")
    table.add_column("Rotate")
    table.add_column("Recommendations")

    for report in reports:
        c = report.classification
        dims = report.optimization.optimized_dimensions
        table.add_row(
            c.name,
            c.category.value,
            f"{dims.width:g}×{dims.height:g}",
            c.complexity.value,
            "yes" if c.suggested_rotation else "no",
            "\n".join(report.optimization.recommendations) or "-",
        )
    return table


@app.command()
def analyze(
    files: Annotated[List[str], typer.Argument(help="Design filenames to classify")],
    mime: Annotated[
        Optional[str],
        typer.Option(
            "--mime", "-m", help="Mimetype for every file (guessed if omitted)"
        ),
    ] = None,
    as_json: Annotated[bool, typer.Option("--json", help="Print JSON output")] = False,
):
    """
    Classify design files by filename and mimetype

    Examples:
      design-gate analyze business_card.pdf
      design-gate analyze label.bin --mime image/png
    """
    service = DesignAnalysisService(
        history=MetricsHistory(),
        max_batch_size=settings.max_batch_size,
        supported_mime_types=settings.supported_mime_types,
    )
    # Plain descriptors; the batch validates them and reports bad ones by index
    descriptors = [
        {
            "path": f,
            "name": Path(f).name,
            "mime_type": mime or _guess_mime_type(f),
        }
        for f in files
    ]

    try:
        reports = asyncio.run(service.analyze_batch(descriptors))
    except DesignGateError as e:
        console.print(f"[red]Error ({e.error_code}): {e.message}[/red]")
        raise typer.Exit(2)

    if as_json:
        typer.echo(
            json.dumps([r.model_dump(mode="json") for r in reports], ensure_ascii=False)
        )
    else:
        console.print(_reports_table(reports))


@app.command()
def health(
    connections: Annotated[
        int, typer.Option("--connections", "-c", help="Active connection count")
    ] = 0,
    as_json: Annotated[bool, typer.Option("--json", help="Print JSON output")] = False,
):
    """
    Sample process metrics once and report the admission signal

    Exits with code 1 when the service would refuse new work.
    """
    history = MetricsHistory(
        max_size=settings.metrics_history_size,
        heap_limit_mb=settings.healthy_heap_limit_mb,
        connection_limit=settings.healthy_connection_limit,
    )

    try:
        history.record(MetricsSampler().sample(connections))
    except DesignGateError as e:
        console.print(f"[red]Error ({e.error_code}): {e.message}[/red]")
        raise typer.Exit(2)

    healthy = history.is_healthy()
    summary = history.summary()

    if as_json:
        typer.echo(json.dumps(summary))
    else:
        snapshot = history.current()
        table = Table(title="Service Health")
        table.add_column("Metric", style="cyan")
        table.add_column("Value", justify="right")
        table.add_row("Heap used", format_file_size(snapshot.memory_usage.heap_used))
        table.add_row(
            "Virtual memory", format_file_size(snapshot.memory_usage.heap_total)
        )
        table.add_row("User CPU (s)", f"{snapshot.cpu_usage:.2f}")
        table.add_row("Active connections", str(snapshot.active_connections))
        table.add_row("Cache size", str(snapshot.cache_size))
        table.add_row(
            "Status", "[green]healthy[/green]" if healthy else "[red]unhealthy[/red]"
        )
        console.print(table)

    if not healthy:
        raise typer.Exit(1)


if __name__ == "__main__":
    app()
