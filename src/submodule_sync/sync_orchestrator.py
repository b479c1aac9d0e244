"""
Main sync orchestration logic for a repository and its submodules.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Callable, List, Optional

from .git_manager import GitManager
from .models import (
    IgnorePolicy,
    MaterializationError,
    MaterializeAction,
    NotAGitRepositoryError,
    PlannedStep,
    RecordOutcome,
    RecordPlan,
    RecordResult,
    SubmoduleError,
    SubmoduleRecord,
    SyncContext,
    SyncReport,
)
from .progress_interface import NoOpReporter, SyncReporter
from .submodule_config import SubmoduleConfigReader


logger = logging.getLogger(__name__)

GitManagerFactory = Callable[[Path], GitManager]


class SyncOrchestrator:
    """Synchronizes every configured submodule, then the parent's submodule pointers."""

    def __init__(
        self,
        context: SyncContext,
        reporter: Optional[SyncReporter] = None,
        git_manager_factory: GitManagerFactory = GitManager,
    ) -> None:
        """Initialize the orchestrator.

        Opening the parent repository happens here, so a directory that is not a
        Git working tree fails with NotAGitRepositoryError before anything else.
        """
        self.context = context
        self.reporter = reporter or NoOpReporter()
        self._git_manager_factory = git_manager_factory

        self.git_manager = git_manager_factory(context.root_path)
        _ = self.git_manager.repo
        self.config_reader = SubmoduleConfigReader(context.root_path)
        logger.info(f"Initialized sync orchestrator for {context.repo_name} at {context.root_path}")

    @property
    def root_path(self) -> Path:
        return self.context.root_path

    def discover(self) -> List[SubmoduleRecord]:
        """Return the configured submodules in file order, after include/exclude filters."""
        records = self.config_reader.read_records()
        include = {t for t in self.context.include if t.strip()}
        exclude = {t for t in self.context.exclude if t.strip()}
        if include:
            records = [r for r in records if any(r.matches(t) for t in include)]
        if exclude:
            records = [r for r in records if not any(r.matches(t) for t in exclude)]
        return records

    def _is_missing(self, record: SubmoduleRecord) -> bool:
        path = record.absolute_path(self.root_path)
        return not path.is_dir() or not any(path.iterdir())

    def plan(self) -> List[RecordPlan]:
        """Compute what run() would do for each submodule, without changing anything."""
        plans: List[RecordPlan] = []
        for record in self.discover():
            if record.ignore_policy == IgnorePolicy.ALL:
                step = PlannedStep.SKIP
            elif not self._is_missing(record):
                step = PlannedStep.SYNC
            elif self.git_manager.is_submodule_tracked(record.path):
                step = PlannedStep.INITIALIZE
            else:
                step = PlannedStep.REGISTER
            plans.append(RecordPlan(record=record, step=step))
        return plans

    def run(self) -> SyncReport:
        """
        Sync all submodules, then commit and push the parent repository.

        Stops at the first submodule that cannot be materialized; commits and
        pushes already made for earlier submodules are kept.

        Returns:
            SyncReport describing every processed submodule
        """
        report = SyncReport()
        for record in self.discover():
            report.results.append(self.sync_record(record))

        report.parent_committed, report.parent_branch = self.finalize()
        logger.info(
            f"Sync completed: {len(report.results)} submodule(s), "
            f"{len(report.committed_records())} committed, parent committed={report.parent_committed}"
        )
        return report

    def sync_record(self, record: SubmoduleRecord) -> RecordResult:
        """Materialize, update and (depending on ignore policy) commit one submodule."""
        self.reporter.record_started(record)
        policy = record.ignore_policy

        if policy == IgnorePolicy.ALL:
            logger.info(f"Skipping {record.name} (ignore={policy.value})")
            self.reporter.record_skipped(record)
            return RecordResult(record=record, outcome=RecordOutcome.SKIPPED)

        materialized = MaterializeAction.NONE
        if self._is_missing(record):
            materialized = self._materialize(record)

        path = record.absolute_path(self.root_path)
        if not path.is_dir():
            message = f"Failed to ensure submodule at {record.path} exists."
            logger.error(message)
            self.reporter.record_failed(record, message)
            raise MaterializationError(message)

        outcome = self._sync_working_tree(record, path)
        return RecordResult(record=record, outcome=outcome, materialized=materialized)

    def _materialize(self, record: SubmoduleRecord) -> MaterializeAction:
        logger.warning(f"Submodule path {record.path} is missing or empty")
        self.reporter.record_missing(record)
        record.absolute_path(self.root_path).parent.mkdir(parents=True, exist_ok=True)

        if not self.git_manager.is_submodule_tracked(record.path):
            self.reporter.step("Registering and cloning new submodule")
            if not record.url:
                message = f"Submodule {record.name} has no url configured; cannot clone {record.path}."
                logger.error(message)
                self.reporter.record_failed(record, message)
                raise MaterializationError(message)
            self.git_manager.add_submodule(record.name, record.url, record.path, record.branch)
            return MaterializeAction.REGISTERED

        self.reporter.step("Updating existing but missing submodule")
        self.git_manager.update_submodule(record.path)
        return MaterializeAction.INITIALIZED

    def _sync_working_tree(self, record: SubmoduleRecord, path: Path) -> RecordOutcome:
        remote = self.context.remote_name
        gm = self._git_manager_factory(path)
        try:
            _ = gm.repo
        except NotAGitRepositoryError as e:
            message = f"Submodule path {record.path} exists but is not a Git repository."
            logger.error(f"{message} ({e})")
            self.reporter.record_failed(record, message)
            raise SubmoduleError(message) from e

        gm.fetch_remote(remote)
        gm.checkout_or_create_branch(record.branch, remote)
        gm.pull(record.branch, remote)

        if not gm.has_local_changes():
            self.reporter.no_local_changes(record)
            return RecordOutcome.NO_CHANGES

        if record.ignore_policy == IgnorePolicy.DIRTY:
            logger.info(f"Leaving local changes in {record.path} uncommitted (ignore=dirty)")
            self.reporter.dirty_ignored(record)
            return RecordOutcome.DIRTY_IGNORED

        self.reporter.step(f"Local changes detected in {record.path}. Committing and pushing")
        gm.add_all()
        gm.commit(f"Automated sync: {self.context.timestamp()}")
        gm.push(record.branch, remote)
        return RecordOutcome.COMMITTED

    def finalize(self) -> tuple[bool, Optional[str]]:
        """
        Stage and commit updated submodule pointers in the parent repository.

        Returns:
            Tuple of (committed, pushed branch or None)
        """
        gm = self.git_manager
        gm.add_all()

        self.reporter.step("Committing and Pushing changes in main repository")
        if not gm.get_porcelain_status().strip():
            logger.info("No changes to commit in main repository")
            self.reporter.parent_unchanged()
            return False, None

        branch = gm.get_current_branch()
        gm.commit(f"Automated submodule sync: {self.context.timestamp()}")
        gm.push(branch, self.context.remote_name)
        return True, branch
