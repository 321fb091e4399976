"""CLI entry point for pkgscore."""

import asyncio
import json
from pathlib import Path

# Load .env file if it exists
from dotenv import load_dotenv
load_dotenv()

import typer
from rich.console import Console
from rich.panel import Panel
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich.table import Table

from pkgscore.analyzers.pipeline import RepositoryEvaluator
from pkgscore.config import ConfigError, Settings, parse_weights
from pkgscore.logs import configure_logging
from pkgscore.models.schemas import MetricName, RepositoryRecord

app = typer.Typer(help="Package trustworthiness scoring tool.")

console = Console(stderr=True)


def read_url_file(path: Path) -> list[str]:
    """Read one URL per line, skipping blank lines.

    Raises:
        typer.BadParameter: If the file is missing or lists no URL.
    """
    if not path.is_file():
        raise typer.BadParameter(f"URL file not found: {path}")
    urls = [line.strip() for line in path.read_text(encoding="utf-8").splitlines()]
    urls = [url for url in urls if url]
    if not urls:
        raise typer.BadParameter(f"URL file is empty: {path}")
    return urls


def load_settings(weights: list[str] | None = None, concurrency: int | None = None) -> Settings:
    """Read settings from the environment and apply CLI overrides."""
    try:
        settings = Settings.from_env()
        overrides = {}
        if weights:
            overrides["weights"] = parse_weights(weights)
        if concurrency is not None:
            overrides["max_concurrency"] = concurrency
        settings = settings.model_copy(update=overrides)
    except ConfigError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(1)

    configure_logging(settings.log_level, settings.log_file, console=console)
    settings.check_github_token()
    return settings


def build_evaluator(settings: Settings) -> RepositoryEvaluator:
    return RepositoryEvaluator(
        github_token=settings.github_token,
        weights=settings.weights,
        max_concurrency=settings.max_concurrency,
        http_timeout=settings.http_timeout,
    )


@app.command()
def score(
    url_file: Path = typer.Argument(..., help="File with one GitHub or npm URL per line"),
    weight: list[str] | None = typer.Option(
        None, "--weight", "-w", help="NetScore weight as Name=value (repeatable)"
    ),
    concurrency: int | None = typer.Option(
        None, "--concurrency", "-c", min=1, help="Repositories evaluated at once"
    ),
) -> None:
    """Score every URL in a file and print one NDJSON record per URL."""
    try:
        urls = read_url_file(url_file)
    except typer.BadParameter as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(1)

    settings = load_settings(weight, concurrency)
    records = asyncio.run(_score(urls, settings))
    for record in records:
        typer.echo(json.dumps(record.to_output()))


async def _score(urls: list[str], settings: Settings) -> list[RepositoryRecord]:
    """Async implementation of score."""
    async with build_evaluator(settings) as evaluator:
        return await evaluator.evaluate_many(urls)


@app.command()
def evaluate(
    url: str = typer.Argument(..., help="GitHub repository or npm package URL"),
    output: Path | None = typer.Option(None, "--output", "-o", help="Output JSON file"),
    weight: list[str] | None = typer.Option(
        None, "--weight", "-w", help="NetScore weight as Name=value (repeatable)"
    ),
) -> None:
    """Evaluate a single package and show its score breakdown."""
    settings = load_settings(weight)

    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        console=console,
    ) as progress:
        progress.add_task(f"Evaluating {url}...", total=None)
        record = asyncio.run(_evaluate(url, settings))

    render_record(record)

    # Save if requested
    if output:
        output.write_text(json.dumps(record.to_output(), indent=2))
        console.print(f"\n[green]Saved to {output}[/green]")


async def _evaluate(url: str, settings: Settings) -> RepositoryRecord:
    """Async implementation of evaluate."""
    async with build_evaluator(settings) as evaluator:
        return await evaluator.evaluate(url)


def render_record(record: RepositoryRecord) -> None:
    """Print a record as a NetScore panel and a metric table."""
    out = Console()
    out.print()
    out.print(f"[bold cyan]{record.url}[/bold cyan]")
    out.print()

    net = record.net_score
    if net is None or net.score is None:
        out.print(
            Panel(
                "[bold yellow]NetScore Unavailable[/bold yellow]\n\nNo metric could be computed.",
                title="NetScore",
                expand=False,
                border_style="yellow",
            )
        )
    else:
        color = _score_color(net.score)
        out.print(
            Panel(
                f"[bold][{color}]{net.score:.2f}[/{color}][/bold] / 1.00",
                title="NetScore",
                expand=False,
            )
        )
    out.print()

    table = Table(title="Metric Breakdown", show_header=True)
    table.add_column("Metric", style="bold")
    table.add_column("Score", justify="right")
    table.add_column("Latency (ms)", justify="right", style="dim")
    table.add_column("Bar", width=20)

    for name in MetricName:
        result = record.metrics.get(name)
        if result is None or result.score is None:
            latency = f"{result.latency_ms:.3f}" if result else "-"
            table.add_row(name.value, "[dim]n/a[/dim]", latency, "")
            continue
        color = _score_color(result.score)
        table.add_row(
            name.value,
            f"[{color}]{result.score:.2f}[/{color}]",
            f"{result.latency_ms:.3f}",
            _score_bar(result.score),
        )

    out.print(table)


def _score_color(score: float) -> str:
    return "green" if score >= 0.8 else "yellow" if score >= 0.6 else "red"


def _score_bar(score: float, width: int = 20) -> str:
    """Create a visual score bar."""
    filled = int(score * width)
    empty = width - filled
    color = _score_color(score)
    return f"[{color}]{'█' * filled}[/{color}][dim]{'░' * empty}[/dim]"


@app.command()
def version() -> None:
    """Show version information."""
    from pkgscore import __version__

    typer.echo(f"pkgscore v{__version__}")


if __name__ == "__main__":
    app()
