"""
Command-line interface for Longevity Feed.

Uses Typer to provide a CLI with options for all major configuration
settings. Supports loading .env files for API key configuration.
"""

from __future__ import annotations

from pathlib import Path

from dotenv import load_dotenv
import typer
from rich.console import Console
import yaml

from .config import AppConfig, load_config
from .errors import PipelineError
from .runner import run_pipeline
from .sources import available_sources

app = typer.Typer(add_completion=False)
console = Console()


@app.command()
def run(
    corpus: Path | None = typer.Option(None, "--corpus", "-d", help="Corpus JSON file."),
    config: Path | None = typer.Option(None, "--config", "-c", exists=True),
    source: list[str] | None = typer.Option(
        None,
        "--source",
        "-s",
        help="Source key to fetch; repeat to enable several (overrides config).",
    ),
    batch_size: int | None = typer.Option(
        None, "--batch-size", help="Maximum records enriched per run."
    ),
    model: str | None = typer.Option(None, "--model", help="Generation model identifier."),
    api_key: str | None = typer.Option(
        None,
        "--api-key",
        help="Override provider API key (or set OPENAI_API_KEY / .env).",
    ),
    log_level: str | None = typer.Option(None, "--log-level", help="Logging level."),
    log_dir: Path | None = typer.Option(None, "--log-dir", help="Directory for log files."),
    dry_run: bool = typer.Option(False, "--dry-run", help="Do not write the corpus."),
    progress: bool = typer.Option(True, "--progress/--no-progress"),
):
    """Run one ingestion pass and merge new records into the corpus.

    Fetches the enabled sources, skips items already in the corpus,
    enriches the rest with lay-language summaries, and rewrites the
    corpus sorted by date and capped in size.

    Args:
        corpus: Path to the corpus JSON file
        config: Optional path to YAML config file
        source: Source keys to enable for this run
        batch_size: Maximum number of records enriched per run
        model: Generation model identifier
        api_key: Override generation provider API key
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR)
        log_dir: Directory for JSONL log files
        dry_run: Run all stages without writing the corpus
        progress: Whether to show progress bar
    """
    # Load environment variables from .env if available
    load_dotenv()

    cfg = _load_or_exit(config)

    if source:
        cfg.sources.enabled = list(source)
    if batch_size is not None:
        cfg.enrichment.batch_size = batch_size
    if model:
        cfg.provider.model = model
    if api_key:
        cfg.provider.api_key = api_key
    if log_level:
        cfg.logging.level = log_level
    if log_dir is not None:
        cfg.logging.directory = str(log_dir)

    try:
        stats = run_pipeline(
            cfg,
            corpus_path=corpus,
            show_progress=progress,
            console=console,
            dry_run=dry_run,
        )
    except (PipelineError, ValueError) as exc:
        console.print(f"[bold red]Ingestion failed[/bold red]: {exc}")
        raise typer.Exit(code=1) from exc

    suffix = " (dry run)" if dry_run else ""
    console.print(f"Added {stats.added} new items; corpus holds {stats.corpus_size}{suffix}")


@app.command()
def sources(
    config: Path | None = typer.Option(None, "--config", "-c", exists=True),
):
    """List registered sources and mark the enabled ones."""
    cfg = _load_or_exit(config)
    enabled = set(cfg.sources.enabled)
    for key in available_sources():
        marker = "*" if key in enabled else " "
        console.print(f"{marker} {key}")


def _load_or_exit(config: Path | None) -> AppConfig:
    try:
        return load_config(config)
    except (ValueError, yaml.YAMLError) as exc:
        console.print(f"[bold red]Invalid config[/bold red]: {exc}")
        raise typer.Exit(code=1) from exc


if __name__ == "__main__":
    app()
