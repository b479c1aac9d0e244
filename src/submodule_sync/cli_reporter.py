"""
CLI-specific implementation of the reporter interface.
"""

from __future__ import annotations

from typing import List

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from .models import PlannedStep, RecordPlan, SubmoduleRecord, SyncReport
from .progress_interface import SyncReporter


_STEP_STYLES = {
    PlannedStep.SKIP: "yellow",
    PlannedStep.REGISTER: "magenta",
    PlannedStep.INITIALIZE: "blue",
    PlannedStep.SYNC: "green",
}


class CliReporter(SyncReporter):
    """CLI implementation of the reporter interface using rich."""

    def __init__(self, console: Console = None):
        self.console = console or Console()

    def step(self, title: str) -> None:
        self.console.print(f"\n[cyan]=== {escape(title)} ===[/cyan]")

    def record_started(self, record: SubmoduleRecord) -> None:
        self.step(f"Processing: {record.name}")
        self.console.print(f"Path:   {record.path}", style="green", markup=False)
        self.console.print(f"URL:    {record.url}", style="green", markup=False)
        self.console.print(f"Branch: {record.branch}", style="green", markup=False)
        self.console.print(f"Ignore: {record.ignore_policy.value}", style="green", markup=False)

    def record_skipped(self, record: SubmoduleRecord) -> None:
        self.console.print(
            f"[SKIP] Submodule {record.name} is ignore={record.ignore_policy.value}",
            style="yellow",
            markup=False,
        )

    def record_missing(self, record: SubmoduleRecord) -> None:
        self.console.print(
            f"[WARN] Submodule path {record.path} is missing or empty. Adding/initializing",
            style="yellow",
            markup=False,
        )

    def no_local_changes(self, record: SubmoduleRecord) -> None:
        self.console.print(f"[WARN] No local changes in {record.path}", style="yellow", markup=False)

    def dirty_ignored(self, record: SubmoduleRecord) -> None:
        self.console.print(
            f"[WARN] Untracked/modified changes in {record.path} ignore={record.ignore_policy.value}",
            style="yellow",
            markup=False,
        )

    def record_failed(self, record: SubmoduleRecord, message: str) -> None:
        self.console.print(f"[ERROR] {message}", style="red", markup=False)

    def parent_unchanged(self) -> None:
        self.console.print("[WARN] No changes to commit in main repository", style="yellow", markup=False)

    def show_plan(self, plans: List[RecordPlan]) -> None:
        self.step("Sync Plan")
        if not plans:
            self.console.print("No submodules configured.")
            return

        table = Table(show_header=True, header_style="bold magenta")
        table.add_column("Order", justify="center")
        table.add_column("Submodule", style="cyan")
        table.add_column("Path", style="dim")
        table.add_column("Branch", style="green")
        table.add_column("Ignore", style="yellow")
        table.add_column("Action")

        for i, plan in enumerate(plans, 1):
            style = _STEP_STYLES.get(plan.step, "")
            table.add_row(
                str(i),
                escape(plan.record.name),
                escape(plan.record.path),
                escape(plan.record.branch),
                plan.record.ignore_policy.value,
                f"[{style}]{plan.step.value}[/{style}]" if style else plan.step.value,
            )

        self.console.print(table)

    def summary(self, report: SyncReport) -> None:
        self.step("Summary")
        committed = report.committed_records()
        if committed:
            names = ", ".join(r.name for r in committed)
            self.console.print(f"Committed local changes in: {names}", style="dim", markup=False)
        skipped = report.skipped_records()
        if skipped:
            names = ", ".join(r.name for r in skipped)
            self.console.print(f"Skipped (ignore=all): {names}", style="dim", markup=False)
        self.console.print("[DONE] All repositories are updated.\n", style="green", markup=False)

    def failure(self, message: str) -> None:
        self.step("Summary")
        self.console.print(f"[ERROR] {message}\n", style="red", markup=False)
