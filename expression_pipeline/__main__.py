"""Command-line interface for the expression pipeline."""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

import typer

from .config import load_config
from .errors import PipelineError
from .pipeline import ExpressionPipeline

app = typer.Typer(add_completion=False, help="Reshape, join, annotate and scale expression tables.")


@app.callback()
def cli() -> None:
    """Reshape, join, annotate and scale expression tables."""


@app.command()
def run(
    config: Path = typer.Option(..., exists=True, dir_okay=False, help="Path to YAML configuration."),
    output_dir: Optional[Path] = typer.Option(None, file_okay=False, help="Override the configured output directory."),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log every stage at DEBUG level."),
) -> None:
    """Execute the pipeline end to end."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    cfg = load_config(config)
    pipeline = ExpressionPipeline(cfg)
    try:
        paths = pipeline.run_from_config(output_dir)
    except PipelineError as exc:
        typer.echo(f"Pipeline failed: {exc}", err=True)
        raise typer.Exit(code=1)
    typer.echo(f"Wrote {len(paths)} tables to {output_dir or cfg.output_dir}.")


def main() -> None:
    app()


if __name__ == "__main__":
    main()
