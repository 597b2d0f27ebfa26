"""Terminal reporter with rich output formatting."""

from __future__ import annotations

from typing import TYPE_CHECKING

from rich.console import Console
from rich.panel import Panel
from rich.table import Table

if TYPE_CHECKING:
    from browsercov.models.coverage import CoverageMetrics, FilteringStats, Report

console = Console()

_HIGH_COVERAGE = 80.0
_MEDIUM_COVERAGE = 60.0
_MAX_URL_LENGTH = 60


def coverage_color(percentage: float) -> str:
    """Return a Rich color name for a coverage percentage."""
    if percentage >= _HIGH_COVERAGE:
        return "green"
    if percentage >= _MEDIUM_COVERAGE:
        return "yellow"
    return "red"


def _pct(value: float, *, bold: bool = False) -> str:
    color = coverage_color(value)
    style = f"bold {color}" if bold else color
    return f"[{style}]{value:.1f}%[/{style}]"


def _truncate(text: str, limit: int = _MAX_URL_LENGTH) -> str:
    if len(text) <= limit:
        return text
    return "…" + text[-(limit - 1) :]


class CoverageTerminalReporter:
    """Render a coverage report as rich tables."""

    def __init__(self, output: Console | None = None) -> None:
        self.console = output or console

    def print_report(self, report: Report) -> None:
        """Print the header panel, totals, filtering breakdown and files."""
        self.console.print()
        self.console.print(
            Panel(
                f"[bold white]Application coverage: "
                f"{_pct(report.application_coverage_pct, bold=True)}[/bold white]\n"
                f"[dim]{report.timestamp:%Y-%m-%d %H:%M:%S %Z}[/dim]",
                border_style="cyan",
                padding=(0, 2),
            )
        )
        self.print_totals(report.total_metrics)
        self.print_filtering(report.filtering_stats)
        self.print_files(report)

    def print_totals(self, metrics: CoverageMetrics) -> None:
        """Print the statements/functions/lines totals with the overall mean."""
        table = Table(title="Coverage Summary", title_style="bold cyan")
        table.add_column("Metric", style="bold")
        table.add_column("Covered", justify="right")
        table.add_column("Total", justify="right")
        table.add_column("Coverage", justify="right")

        for name, stat in (
            ("Statements", metrics.statements),
            ("Functions", metrics.functions),
            ("Lines", metrics.lines),
        ):
            table.add_row(name, str(stat.covered), str(stat.total), _pct(stat.pct))

        table.add_section()
        table.add_row("[bold]Overall[/bold]", "", "", _pct(metrics.overall_pct, bold=True))
        self.console.print(table)

    def print_filtering(self, stats: FilteringStats) -> None:
        """Print how many scripts each reason accounted for."""
        if stats.total_scripts == 0:
            self.console.print("  [dim]No scripts in snapshot[/dim]")
            return

        table = Table(
            title=(
                f"Script Filtering ({stats.application_scripts} of "
                f"{stats.total_scripts} included)"
            ),
            title_style="bold cyan",
        )
        table.add_column("", justify="center")
        table.add_column("Reason", style="bold")
        table.add_column("Scripts", justify="right")
        table.add_column("Share", justify="right")

        for reason, count, pct in stats.reason_breakdown():
            style = "green" if reason.is_inclusion else "dim"
            table.add_row(
                reason.icon,
                f"[{style}]{reason.description}[/{style}]",
                str(count),
                f"{pct:.1f}%",
            )

        self.console.print(table)
        self.console.print(
            f"  [dim]Processed in {stats.processing_time_ms:.1f}ms "
            f"({stats.avg_time_per_script_ms:.2f}ms per script)[/dim]"
        )

    def print_files(self, report: Report) -> None:
        """Print per-file metrics of the included scripts."""
        if not report.file_entries:
            self.console.print("[yellow]⚠[/yellow] No application scripts found")
            return

        table = Table(title="Application Scripts", title_style="bold cyan")
        table.add_column("Script", style="bold")
        table.add_column("Statements", justify="right")
        table.add_column("Functions", justify="right")
        table.add_column("Lines", justify="right")

        for entry in report.file_entries:
            m = entry.metrics
            table.add_row(
                _truncate(entry.url),
                _pct(m.statements.pct),
                _pct(m.functions.pct),
                _pct(m.lines.pct),
            )

        self.console.print(table)
