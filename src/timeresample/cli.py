"""Command-line interface for the timeresample pipeline."""

from pathlib import Path
from typing import Annotated

import pandas as pd
import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

app = typer.Typer(
    name="timeresample",
    help="Normalize date columns and resample tabular time series.",
    no_args_is_help=True,
)

console = Console()


@app.command()
def run(
    config: Annotated[
        Path,
        typer.Option(
            "--config",
            "-c",
            help="Path to configuration YAML file.",
            exists=True,
            dir_okay=False,
        ),
    ],
    output: Annotated[
        Path | None,
        typer.Option(
            "--output",
            "-o",
            help="Output path for the resampled CSV. Overrides data.output.",
        ),
    ] = None,
    preview: Annotated[
        int,
        typer.Option(
            "--preview",
            "-n",
            help="Number of resampled rows to print.",
            min=0,
        ),
    ] = 10,
) -> None:
    """Parse dates, derive calendar keys and aggregate."""
    from pydantic import ValidationError

    from timeresample.config.loader import load_config
    from timeresample.etl import run_pipeline
    from timeresample.utils.logging import configure_logging

    console.print(f"[blue]Loading configuration from {config}[/blue]")
    try:
        pipeline_config = load_config(config)
    except (ValueError, ValidationError) as e:
        console.print(f"[red]Invalid configuration: {escape(str(e))}[/red]")
        raise typer.Exit(code=1) from e

    configure_logging(
        level=pipeline_config.logging.level,
        json_output=pipeline_config.logging.json_output,
    )

    console.print(f"[blue]Running resample pipeline for {pipeline_config.project}[/blue]")

    try:
        result = run_pipeline(pipeline_config, output_path=output)
    except FileNotFoundError as e:
        console.print(f"[red]Error: {escape(str(e))}[/red]")
        raise typer.Exit(code=1) from e
    except Exception as e:
        console.print(f"[red]Resampling failed: {escape(str(e))}[/red]")
        raise typer.Exit(code=1) from e

    console.print()
    summary = Table(title="Resample Results")
    summary.add_column("Metric", style="cyan")
    summary.add_column("Value", style="green")
    summary.add_row("Input rows", str(result.n_input_rows))
    summary.add_row("Groups", str(result.n_groups))
    for column, n_null in result.null_dates.items():
        summary.add_row(f"Null dates in {column}", str(n_null))
    console.print(summary)

    if preview and not result.resampled.empty:
        rows = Table(title=f"First {min(preview, result.n_groups)} groups")
        for column in result.resampled.columns:
            rows.add_column(str(column))
        for record in result.resampled.head(preview).itertuples(index=False):
            rows.add_row(*("" if pd.isna(v) else str(v) for v in record))
        console.print(rows)

    if result.output_path:
        console.print(f"\n[green]Saved to: {result.output_path}[/green]")


@app.command()
def version() -> None:
    """Show version information."""
    from timeresample import __version__

    console.print(f"timeresample version {__version__}")


if __name__ == "__main__":
    app()
