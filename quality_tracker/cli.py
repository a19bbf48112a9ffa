"""CLI interface for the quality tracker."""

import json
import logging
import os
from pathlib import Path

import typer
from rich.console import Console
from rich.markup import escape
from rich.progress import BarColumn, Progress, SpinnerColumn, TextColumn
from rich.table import Table

from quality_tracker.consts import (
    DATA_DIR_ENV_VAR,
    DEFAULT_DATA_DIR,
    FETCH_CONCURRENCY,
    FETCH_TIMEOUT_SECONDS,
    ISSUES_MAX_FILES,
    ISSUES_MAX_PER_FILE,
)
from quality_tracker.errors import IngestionError, SourceNotFoundError
from quality_tracker.fetcher.report_fetcher import ReportFetcher
from quality_tracker.history.history_store import HistoryStore
from quality_tracker.models.model_fetch import FetchErrorType
from quality_tracker.pipeline import run_fetch, run_fetch_all
from quality_tracker.registry.source_registry import SourceRegistry, sanitize_key
from quality_tracker.report.issues import top_files
from quality_tracker.report.overview import build_overview
from quality_tracker.report.scoring import score_band
from quality_tracker.storage.permanent_storage.file_manager import FileManager

app = typer.Typer(
    name="qtrack",
    help="Code quality tracker - Ingest PHPCS JSON reports, score them, keep history",
)

console = Console()

_BAND_COLORS = {"good": "green", "fair": "yellow", "poor": "red"}


def _resolve_data_dir(data_dir: str | None) -> Path:
    """Data directory resolution: explicit option > env var > default."""
    if data_dir:
        return Path(data_dir)
    env_dir = os.getenv(DATA_DIR_ENV_VAR, "").strip()
    if env_dir:
        return Path(env_dir)
    return DEFAULT_DATA_DIR


def _open_stores(ctx: typer.Context) -> tuple[SourceRegistry, HistoryStore]:
    storage = FileManager(ctx.obj["data_dir"])
    return SourceRegistry(storage), HistoryStore(storage)


def _score_markup(score: int) -> str:
    color = _BAND_COLORS[score_band(score)]
    return f"[{color}]{score}/100[/{color}]"


def _mask_token(token: str) -> str:
    if not token:
        return "-"
    if len(token) <= 8:
        return "****"
    return f"****{token[-4:]}"


def _clean_source_id(source_id: str) -> str:
    """Normalize a source id the way stored ids are, exiting on ids with nothing usable."""
    cleaned = sanitize_key(source_id)
    if not cleaned:
        console.print(f"[red]Error:[/red] Invalid source id: {escape(source_id)}")
        raise typer.Exit(1)
    return cleaned


@app.callback()
def main(
    ctx: typer.Context,
    data_dir: str = typer.Option(
        None, "--data-dir", help=f"Data directory (default: ${DATA_DIR_ENV_VAR} or ./data)"
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
) -> None:
    """Configure logging and the data directory for all commands."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )
    ctx.obj = {"data_dir": _resolve_data_dir(data_dir)}


@app.command("save-sources")
def save_sources(
    ctx: typer.Context,
    file: Path = typer.Argument(..., help="JSON file with a list of source rows"),
) -> None:
    """Replace the configured sources with the rows in a JSON file."""
    try:
        rows = json.loads(file.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as e:
        console.print(f"[red]Error:[/red] Cannot read {escape(str(file))}: {escape(str(e))}")
        raise typer.Exit(1)

    registry, _ = _open_stores(ctx)
    saved = registry.sanitize_and_replace(rows)

    submitted = len(rows) if isinstance(rows, (list, dict)) else 0
    console.print(f"[green]Saved {len(saved)} sources[/green]")
    if submitted > len(saved):
        console.print(
            f"[yellow]{submitted - len(saved)} rows skipped (missing name or valid URL)[/yellow]"
        )


@app.command()
def sources(ctx: typer.Context) -> None:
    """List configured sources."""
    registry, _ = _open_stores(ctx)
    configured = registry.list()

    if not configured:
        console.print("[yellow]No sources configured. Use 'qtrack save-sources' first.[/yellow]")
        return

    table = Table(title=f"Sources ({len(configured)})")
    table.add_column("ID", style="cyan")
    table.add_column("Type", style="blue")
    table.add_column("Name", style="bold")
    table.add_column("URL", style="dim")
    table.add_column("Token", style="dim")

    for source in configured:
        table.add_row(
            source.id,
            source.type.label,
            escape(source.name),
            escape(source.url),
            _mask_token(source.token),
        )

    console.print(table)


@app.command()
def fetch(
    ctx: typer.Context,
    source_id: str = typer.Argument(None, help="Source id to fetch"),
    all_sources: bool = typer.Option(False, "--all", help="Fetch every configured source"),
    concurrency: int = typer.Option(FETCH_CONCURRENCY, "--concurrency", help="Max concurrent fetches"),
    timeout: float = typer.Option(FETCH_TIMEOUT_SECONDS, "--timeout", help="Request timeout (seconds)"),
    strict: bool = typer.Option(False, "--strict", help="Require a 'files' object in reports"),
) -> None:
    """Fetch the latest report for a source and record it in history."""
    if not source_id and not all_sources:
        console.print("[red]Error:[/red] Must specify a SOURCE_ID or --all")
        raise typer.Exit(1)

    registry, history = _open_stores(ctx)
    fetcher = ReportFetcher(timeout=timeout, strict=strict)

    if all_sources:
        configured = registry.list()
        if not configured:
            console.print("[yellow]No sources configured.[/yellow]")
            raise typer.Exit(1)

        with Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            BarColumn(),
            TextColumn("[progress.percentage]{task.percentage:>3.0f}%"),
            console=console,
        ) as progress:
            task = progress.add_task("Fetching...", total=len(configured))

            def on_progress(current: int, total: int) -> None:
                progress.update(task, completed=current)

            result = run_fetch_all(
                registry,
                history,
                fetcher,
                concurrency=concurrency,
                progress_callback=on_progress,
            )

        summary_table = Table(title="Fetch Summary")
        summary_table.add_column("Metric", style="cyan")
        summary_table.add_column("Count", justify="right", style="magenta")
        summary_table.add_row("Total", str(result.total))
        summary_table.add_row("Succeeded", str(result.succeeded))
        summary_table.add_row("Failed", str(result.failed))
        summary_table.add_row("Duration", f"{result.duration_seconds:.1f}s")
        console.print(summary_table)

        if result.failures:
            console.print(f"\n[yellow]Failed fetches ({len(result.failures)}):[/yellow]")
            for failed_id, error in result.failures.items():
                console.print(f"  [dim]{failed_id}:[/dim] {escape(error[:80])}")
            raise typer.Exit(1)
        return

    source_id = _clean_source_id(source_id)
    try:
        entry = run_fetch(source_id, registry, history, fetcher)
    except SourceNotFoundError:
        console.print(f"[red]Error:[/red] Source not found: {source_id}")
        raise typer.Exit(1)
    except IngestionError as e:
        result = e.result
        console.print(f"[red]Fetch failed:[/red] {escape(result.error or 'unknown error')}")
        if result.error_type == FetchErrorType.HTTP_STATUS:
            console.print(
                "[dim]Tip: if the repository is private, add a token for this source.[/dim]"
            )
        if result.error_type == FetchErrorType.MALFORMED_REPORT:
            console.print("[dim]Tip: make sure the URL points at the RAW JSON report.[/dim]")
        if result.body_snippet:
            console.print("\n[bold]Response:[/bold]")
            console.print(escape(result.body_snippet))
        raise typer.Exit(1)

    console.print(f"[bold green]Fetched {source_id}[/bold green]: {_score_markup(entry.score)}")
    console.print(
        f"Errors: {entry.summary.errors} · Warnings: {entry.summary.warnings} · "
        f"Files with issues: {entry.summary.files_with_issues}"
    )


@app.command("history")
def show_history(
    ctx: typer.Context,
    source_id: str = typer.Argument(..., help="Source id"),
) -> None:
    """Show retained scans for a source (newest first)."""
    source_id = _clean_source_id(source_id)
    _, history = _open_stores(ctx)
    entries = history.list(source_id)

    if not entries:
        console.print(f"[yellow]No scans yet for {source_id}. Run 'qtrack fetch {source_id}'.[/yellow]")
        return

    table = Table(title=f"Scan History for {source_id} (last {len(entries)})")
    table.add_column("Fetched", style="cyan")
    table.add_column("Score", justify="right")
    table.add_column("Errors", justify="right", style="red")
    table.add_column("Warnings", justify="right", style="yellow")
    table.add_column("Files", justify="right", style="magenta")
    table.add_column("Source", style="dim")

    for entry in entries:
        table.add_row(
            entry.fetched_at.strftime("%Y-%m-%d %H:%M:%S"),
            _score_markup(entry.score),
            str(entry.summary.errors),
            str(entry.summary.warnings),
            str(entry.summary.files_with_issues),
            escape(entry.source),
        )

    console.print(table)


@app.command("clear-history")
def clear_history(
    ctx: typer.Context,
    source_id: str = typer.Argument(None, help="Source id to clear (default: all sources)"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation"),
) -> None:
    """Delete retained scans for one source or all sources."""
    _, history = _open_stores(ctx)
    if not source_id:
        if not yes and not typer.confirm("Clear history of every source?"):
            console.print("[yellow]Aborted.[/yellow]")
            raise typer.Exit(1)
        count = history.clear_all()
        console.print(f"[green]Cleared {count} scans across all sources[/green]")
    else:
        source_id = _clean_source_id(source_id)
        count = history.clear(source_id)
        console.print(f"[green]Cleared {count} scans for {source_id}[/green]")


@app.command()
def dashboard(ctx: typer.Context) -> None:
    """Show the overall score and the latest summary per source."""
    registry, history = _open_stores(ctx)
    configured = registry.list()

    if not configured:
        console.print("[yellow]No sources configured.[/yellow]")
        return

    overview = build_overview(configured, history)

    overall = Table(title="Overall Code Quality")
    overall.add_column("Quality Score", justify="right")
    overall.add_column("Errors", justify="right", style="red")
    overall.add_column("Warnings", justify="right", style="yellow")
    overall.add_column("Files with issues", justify="right", style="magenta")
    overall.add_row(
        _score_markup(overview.score),
        str(overview.summary.errors),
        str(overview.summary.warnings),
        str(overview.summary.files_with_issues),
    )
    console.print(overall)
    console.print()

    per_source = Table(title="Latest Summary (Per Repo)")
    per_source.add_column("Source", style="bold")
    per_source.add_column("Score", justify="right")
    per_source.add_column("Errors", justify="right", style="red")
    per_source.add_column("Warnings", justify="right", style="yellow")
    per_source.add_column("Last fetched", style="dim")

    for source in configured:
        latest = overview.latest_by_source.get(source.id)
        if latest is None:
            per_source.add_row(escape(source.label), "-", "-", "-", "Not fetched yet")
            continue
        per_source.add_row(
            escape(source.label),
            _score_markup(latest.score),
            str(latest.summary.errors),
            str(latest.summary.warnings),
            latest.fetched_at.strftime("%Y-%m-%d %H:%M:%S"),
        )

    console.print(per_source)


@app.command()
def issues(
    ctx: typer.Context,
    source_id: str = typer.Argument(..., help="Source id"),
    max_files: int = typer.Option(ISSUES_MAX_FILES, "--max-files", help="Files to show"),
    max_per_file: int = typer.Option(ISSUES_MAX_PER_FILE, "--max-per-file", help="Issues per file"),
) -> None:
    """Show the issues of the latest report for a source."""
    source_id = _clean_source_id(source_id)
    _, history = _open_stores(ctx)
    latest = history.latest(source_id)

    if latest is None:
        console.print(f"[yellow]No report data for {source_id}. Run 'qtrack fetch' first.[/yellow]")
        return

    rows = top_files(latest.report, max_files=max_files, max_per_file=max_per_file)
    if not rows:
        console.print("[green]No issues in the latest report.[/green]")
        return

    console.print(
        f"[dim]Top {max_files} files by issue count (limit {max_per_file} issues per file)[/dim]\n"
    )
    for row in rows:
        table = Table(
            title=f"{escape(row.path)} - Errors: {row.errors}, Warnings: {row.warnings}",
            title_justify="left",
        )
        table.add_column("Type")
        table.add_column("Line", justify="right", style="cyan")
        table.add_column("Message")
        table.add_column("Rule", style="dim")

        for message in row.messages:
            color = "red" if message.is_error else "yellow"
            location = f"{message.line}:{message.column}" if message.column > 0 else str(message.line)
            table.add_row(
                f"[{color}]{escape(message.type) or '-'}[/{color}]",
                location,
                escape(message.message),
                escape(message.rule),
            )

        console.print(table)
        if row.truncated:
            console.print(f"[dim]Showing first {max_per_file} of {row.issue_count} issues only.[/dim]")
        console.print()


if __name__ == "__main__":
    app()
