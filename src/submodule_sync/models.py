"""
Data models for the Git submodule sync tool.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Callable, List, Optional, Set


logger = logging.getLogger(__name__)

DEFAULT_BRANCH = "main"
DEFAULT_REMOTE = "origin"


class IgnorePolicy(Enum):
    """How much of the sync applies to a submodule (`submodule.<name>.ignore`)."""

    NONE = "none"
    DIRTY = "dirty"
    ALL = "all"

    @classmethod
    def parse(cls, value: Optional[str]) -> IgnorePolicy:
        """Parse a configured value; anything unrecognized falls back to NONE."""
        if value is None:
            return cls.NONE
        normalized = str(value).strip().lower()
        for policy in cls:
            if policy.value == normalized:
                return policy
        logger.debug(f"Unrecognized ignore value '{value}', treating as '{cls.NONE.value}'")
        return cls.NONE


@dataclass(frozen=True)
class SubmoduleRecord:
    """One submodule entry read from .gitmodules."""

    name: str
    path: str
    url: str = ""
    branch: str = DEFAULT_BRANCH
    ignore_policy: IgnorePolicy = IgnorePolicy.NONE

    def absolute_path(self, root_path: Path) -> Path:
        return Path(root_path) / self.path

    def matches(self, token: str) -> bool:
        """True if token names this record by name or by path."""
        token = token.strip().rstrip("/")
        return token == self.name or token == self.path.rstrip("/")


@dataclass
class SyncContext:
    """Run-level settings collected once at startup."""

    root_path: Path
    repo_name: str = ""
    remote_name: str = DEFAULT_REMOTE
    include: Set[str] = field(default_factory=set)
    exclude: Set[str] = field(default_factory=set)
    clock: Callable[[], datetime] = datetime.now

    def __post_init__(self) -> None:
        """Ensure path is absolute and the repository name is set."""
        self.root_path = Path(self.root_path).resolve()
        if not self.repo_name:
            self.repo_name = self.root_path.name

    def timestamp(self) -> str:
        """Timestamp used in automated commit messages, e.g. 'Thu Feb  5 14:03:11 2026'.

        Same layout as `date`, day of month padded with a space, without the time zone.
        """
        now = self.clock()
        return f"{now:%a %b} {now.day:2d} {now:%H:%M:%S %Y}"


class RecordOutcome(Enum):
    """What happened to a single submodule during a run."""

    SKIPPED = "skipped"
    NO_CHANGES = "no_changes"
    DIRTY_IGNORED = "dirty_ignored"
    COMMITTED = "committed"


class MaterializeAction(Enum):
    """How a missing submodule was brought onto disk."""

    NONE = "none"
    REGISTERED = "registered"
    INITIALIZED = "initialized"


class PlannedStep(Enum):
    """What a run would do for a submodule, as computed by a dry run."""

    SKIP = "skip"
    REGISTER = "register"
    INITIALIZE = "initialize"
    SYNC = "sync"


@dataclass
class RecordResult:
    """Result of processing one submodule."""

    record: SubmoduleRecord
    outcome: RecordOutcome
    materialized: MaterializeAction = MaterializeAction.NONE


@dataclass
class RecordPlan:
    record: SubmoduleRecord
    step: PlannedStep


@dataclass
class SyncReport:
    """Summary of a completed sync run."""

    results: List[RecordResult] = field(default_factory=list)
    parent_committed: bool = False
    parent_branch: Optional[str] = None

    def committed_records(self) -> List[SubmoduleRecord]:
        return [r.record for r in self.results if r.outcome == RecordOutcome.COMMITTED]

    def skipped_records(self) -> List[SubmoduleRecord]:
        return [r.record for r in self.results if r.outcome == RecordOutcome.SKIPPED]


class SyncError(Exception):
    """Base exception for sync operations."""

    pass


class GitRepositoryError(SyncError):
    """Exception raised when a Git operation fails."""

    pass


class NotAGitRepositoryError(GitRepositoryError):
    """Exception raised when the target directory is not a Git working tree."""

    pass


class SubmoduleError(SyncError):
    """Exception raised for submodule related errors."""

    pass


class MaterializationError(SubmoduleError):
    """Exception raised when a submodule path cannot be made to exist."""

    pass


class ConfigurationError(SyncError):
    """Exception raised when .gitmodules cannot be read."""

    pass
