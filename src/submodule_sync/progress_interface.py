"""
UI-agnostic reporter interface for sync progress.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import List

from .models import RecordPlan, SubmoduleRecord, SyncReport


class SyncReporter(ABC):
    """Abstract interface for reporting sync progress to a user."""

    @abstractmethod
    def step(self, title: str) -> None:
        """Announce a new step of the run."""
        pass

    @abstractmethod
    def record_started(self, record: SubmoduleRecord) -> None:
        """
        Show the resolved settings of a submodule before it is processed.

        Args:
            record: The submodule about to be processed
        """
        pass

    @abstractmethod
    def record_skipped(self, record: SubmoduleRecord) -> None:
        """Report that a submodule is skipped because of ignore=all."""
        pass

    @abstractmethod
    def record_missing(self, record: SubmoduleRecord) -> None:
        """Report that a submodule path is missing or empty."""
        pass

    @abstractmethod
    def no_local_changes(self, record: SubmoduleRecord) -> None:
        pass

    @abstractmethod
    def dirty_ignored(self, record: SubmoduleRecord) -> None:
        """Report local changes that are left uncommitted because of ignore=dirty."""
        pass

    @abstractmethod
    def record_failed(self, record: SubmoduleRecord, message: str) -> None:
        pass

    @abstractmethod
    def parent_unchanged(self) -> None:
        """Report that the parent repository has nothing to commit."""
        pass

    @abstractmethod
    def show_plan(self, plans: List[RecordPlan]) -> None:
        """Show what a run would do for each submodule."""
        pass

    @abstractmethod
    def summary(self, report: SyncReport) -> None:
        """Show the final summary of a successful run."""
        pass

    @abstractmethod
    def failure(self, message: str) -> None:
        """Show the final summary of a failed run."""
        pass


class NoOpReporter(SyncReporter):
    """Reporter that discards everything."""

    def step(self, title: str) -> None:
        pass

    def record_started(self, record: SubmoduleRecord) -> None:
        pass

    def record_skipped(self, record: SubmoduleRecord) -> None:
        pass

    def record_missing(self, record: SubmoduleRecord) -> None:
        pass

    def no_local_changes(self, record: SubmoduleRecord) -> None:
        pass

    def dirty_ignored(self, record: SubmoduleRecord) -> None:
        pass

    def record_failed(self, record: SubmoduleRecord, message: str) -> None:
        pass

    def parent_unchanged(self) -> None:
        pass

    def show_plan(self, plans: List[RecordPlan]) -> None:
        pass

    def summary(self, report: SyncReport) -> None:
        pass

    def failure(self, message: str) -> None:
        pass
