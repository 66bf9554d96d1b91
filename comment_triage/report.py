"""Summaries of a triaged batch: counts, JSON export and terminal table."""

from __future__ import annotations

from datetime import UTC, datetime
from pathlib import Path

from rich.console import Console
from rich.table import Table

from .models import Category, TriageReport
from .triage import CategorizedBatch

CATEGORY_STYLES = {
    Category.POSITIVE: "green",
    Category.NEGATIVE: "red",
    Category.NEUTRAL: "dim",
    Category.SPAM: "magenta",
}


def format_pct(value: float | None) -> str:
    """Format percentage, dropping a trailing .0"""
    if value is None:
        return "N/A"
    if value == int(value):
        return f"{int(value)}%"
    return f"{value:.1f}%"


def summarize(batch: CategorizedBatch) -> TriageReport:
    """Build the exportable report. Counts are derived from the buckets."""
    return TriageReport(
        generated_at=datetime.now(UTC),
        total=batch.total,
        counts={category: len(texts) for category, texts in batch.buckets.items()},
        comments={category: list(texts) for category, texts in batch.buckets.items()},
        dropped=batch.dropped,
    )


def write_report(report: TriageReport, path: Path) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(report.model_dump_json(indent=2))


def build_summary_table(report: TriageReport) -> Table:
    """Per-category counts and share of the categorized total."""
    table = Table(title="Comment Triage")
    table.add_column("Category", style="cyan")
    table.add_column("Comments", justify="right")
    table.add_column("Share", justify="right")

    for category in Category:
        count = report.counts.get(category, 0)
        share = 100.0 * count / report.total if report.total else None
        style = CATEGORY_STYLES[category]
        table.add_row(f"[{style}]{category.value}[/]", str(count), format_pct(share))

    table.add_row("[bold]Total[/]", f"[bold]{report.total}[/]", "")
    if report.dropped:
        table.add_row("[yellow]Dropped[/]", f"[yellow]{report.dropped}[/]", "")

    return table


def print_report(report: TriageReport, console: Console, show_comments: bool = False) -> None:
    console.print(build_summary_table(report))

    if not show_comments:
        return

    for category in Category:
        comments = report.comments.get(category, [])
        if not comments:
            continue
        style = CATEGORY_STYLES[category]
        console.print(f"\n[bold {style}]{category.value}[/] ({len(comments)})")
        for comment in comments:
            console.print(f"  - {comment}", markup=False, highlight=False)
