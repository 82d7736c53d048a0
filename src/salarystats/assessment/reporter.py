"""
Console rendering of assessment results with Rich.
"""

from typing import ClassVar

import pandas as pd
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from salarystats.assessment.core import AssessmentResult, CheckResult, CheckStatus


def _cell(value: object) -> str:
    return "-" if pd.isna(value) else str(value)


class AssessmentReporter:
    """
    Prints an AssessmentResult: header, one row per check, a one-line
    summary and, for flagged checks, the details and sample rows.
    """

    STATUS_STYLES: ClassVar[dict[CheckStatus, tuple[str, str]]] = {
        CheckStatus.PASS: ("PASS", "green"),
        CheckStatus.WARN: ("WARN", "yellow"),
        CheckStatus.FAIL: ("FAIL", "red"),
        CheckStatus.SKIP: ("SKIP", "dim"),
    }

    def __init__(self, console: Console | None = None) -> None:
        self.console = console or Console()

    def _status(self, status: CheckStatus) -> Text:
        label, style = self.STATUS_STYLES[status]
        return Text(label, style=style)

    def print_results(self, result: AssessmentResult) -> None:
        """Print the full assessment."""
        _, border = self.STATUS_STYLES[result.overall_status]
        self.console.print(
            Panel.fit(
                Text.assemble(
                    ("Working Set Assessment", "bold"),
                    "\n",
                    (f"Source: {result.source}", "dim"),
                ),
                border_style=border,
            )
        )

        table = Table(title="Checks", header_style="bold")
        table.add_column("Check", style="cyan", no_wrap=True)
        table.add_column("Status", justify="center")
        table.add_column("Rows", justify="right")
        table.add_column("Failing", justify="right")
        table.add_column("Result")
        for check in result.checks:
            table.add_row(
                check.name,
                self._status(check.status),
                str(check.n_checked) if check.n_checked else "-",
                str(check.n_failed) if check.n_failed else "-",
                check.message,
            )
        self.console.print(table)

        self.console.print(
            Text.assemble(
                "Overall: ",
                self._status(result.overall_status),
                f"  ({result.n_passed} passed, {result.n_warned} warned, "
                f"{result.n_failed} failed)",
            )
        )

        flagged = [
            c for c in result.checks if c.status in (CheckStatus.WARN, CheckStatus.FAIL)
        ]
        for check in flagged:
            self._print_flagged(check)

    def _print_flagged(self, check: CheckResult) -> None:
        """Details and sample rows of one warned or failed check."""
        _, style = self.STATUS_STYLES[check.status]
        self.console.rule(f"[{style}]{check.name}[/{style}]", align="left")
        self.console.print(check.message)
        if check.details:
            self.console.print(f"[dim]{check.details}[/dim]")

        sample = check.sample_failures
        if sample is None or sample.empty:
            return
        rows = Table(box=None, header_style="bold dim", padding=(0, 1))
        for col in sample.columns:
            rows.add_column(str(col), overflow="fold")
        for record in sample.itertuples(index=False):
            rows.add_row(*[_cell(v) for v in record])
        if check.n_failed > len(sample):
            rows.caption = f"first {len(sample)} of {check.n_failed} rows"
        self.console.print(rows)

