"""
Tests for the rich-based progress reporter.
"""

import io

from rich.console import Console

from submodule_sync.cli_reporter import CliReporter
from submodule_sync.models import (
    IgnorePolicy, PlannedStep, RecordOutcome, RecordPlan, RecordResult, SubmoduleRecord, SyncReport,
)


def _reporter():
    buffer = io.StringIO()
    return CliReporter(Console(file=buffer, width=120, color_system=None)), buffer


RECORD = SubmoduleRecord(
    name="libfoo", path="vendor/libfoo", url="https://example.org/libfoo.git", ignore_policy=IgnorePolicy.DIRTY
)


def test_record_lines_keep_bracketed_labels():
    reporter, buffer = _reporter()

    reporter.record_started(RECORD)
    reporter.record_skipped(RECORD)
    reporter.dirty_ignored(RECORD)
    reporter.no_local_changes(RECORD)
    reporter.record_failed(RECORD, "Failed to ensure submodule at vendor/libfoo exists.")

    output = buffer.getvalue()
    assert "=== Processing: libfoo ===" in output
    assert "Path:   vendor/libfoo" in output
    assert "Ignore: dirty" in output
    assert "[SKIP] Submodule libfoo is ignore=dirty" in output
    assert "[WARN] Untracked/modified changes in vendor/libfoo ignore=dirty" in output
    assert "[WARN] No local changes in vendor/libfoo" in output
    assert "[ERROR] Failed to ensure submodule at vendor/libfoo exists." in output


def test_summary_and_failure():
    reporter, buffer = _reporter()

    legacy = SubmoduleRecord(name="legacy", path="vendor/legacy", ignore_policy=IgnorePolicy.ALL)
    reporter.summary(SyncReport(results=[
        RecordResult(record=RECORD, outcome=RecordOutcome.COMMITTED),
        RecordResult(record=legacy, outcome=RecordOutcome.SKIPPED),
    ]))
    reporter.failure("Submodule synchronization failed.")

    output = buffer.getvalue()
    assert "=== Summary ===" in output
    assert "Committed local changes in: libfoo" in output
    assert "Skipped (ignore=all): legacy" in output
    assert "[DONE] All repositories are updated." in output
    assert "[ERROR] Submodule synchronization failed." in output


def test_plan_table():
    reporter, buffer = _reporter()

    reporter.show_plan([RecordPlan(record=RECORD, step=PlannedStep.REGISTER)])

    output = buffer.getvalue()
    assert "Sync Plan" in output
    assert "vendor/libfoo" in output
    assert "register" in output


def test_empty_plan():
    reporter, buffer = _reporter()
    reporter.show_plan([])
    assert "No submodules configured." in buffer.getvalue()
