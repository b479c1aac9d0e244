"""
Tests for data models.
"""

from datetime import datetime
from pathlib import Path

import pytest

from submodule_sync.models import (
    IgnorePolicy, SubmoduleRecord, SyncContext, SyncReport, RecordResult, RecordOutcome,
    MaterializeAction, SyncError, GitRepositoryError, NotAGitRepositoryError,
    SubmoduleError, MaterializationError, ConfigurationError,
)


class TestIgnorePolicy:
    """Test IgnorePolicy parsing."""

    @pytest.mark.parametrize("value, expected", [
        ("none", IgnorePolicy.NONE),
        ("dirty", IgnorePolicy.DIRTY),
        ("all", IgnorePolicy.ALL),
        (" ALL ", IgnorePolicy.ALL),
    ])
    def test_known_values(self, value, expected):
        assert IgnorePolicy.parse(value) is expected

    @pytest.mark.parametrize("value", [None, "", "untracked", "everything"])
    def test_unknown_values_default_to_none(self, value):
        assert IgnorePolicy.parse(value) is IgnorePolicy.NONE


class TestSubmoduleRecord:
    """Test SubmoduleRecord model."""

    def test_defaults(self):
        record = SubmoduleRecord(name="libfoo", path="vendor/libfoo")

        assert record.url == ""
        assert record.branch == "main"
        assert record.ignore_policy is IgnorePolicy.NONE

    def test_absolute_path(self):
        record = SubmoduleRecord(name="libfoo", path="vendor/libfoo")
        assert record.absolute_path(Path("/repo")) == Path("/repo/vendor/libfoo")

    def test_matches_name_or_path(self):
        record = SubmoduleRecord(name="libfoo", path="vendor/libfoo")

        assert record.matches("libfoo")
        assert record.matches("vendor/libfoo")
        assert record.matches("vendor/libfoo/")
        assert not record.matches("vendor")


class TestSyncContext:
    """Test SyncContext model."""

    def test_context_creation(self, tmp_path):
        context = SyncContext(root_path=tmp_path / "project")

        assert context.root_path == (tmp_path / "project").resolve()
        assert context.repo_name == "project"
        assert context.remote_name == "origin"
        assert context.include == set()
        assert context.exclude == set()

    def test_timestamp_uses_clock(self, tmp_path):
        context = SyncContext(root_path=tmp_path, clock=lambda: datetime(2026, 2, 5, 9, 4, 7))
        assert context.timestamp() == "Thu Feb  5 09:04:07 2026"


class TestSyncReport:
    """Test SyncReport helpers."""

    def test_committed_and_skipped(self):
        a = SubmoduleRecord(name="a", path="a")
        b = SubmoduleRecord(name="b", path="b", ignore_policy=IgnorePolicy.ALL)
        c = SubmoduleRecord(name="c", path="c")
        report = SyncReport(results=[
            RecordResult(record=a, outcome=RecordOutcome.COMMITTED, materialized=MaterializeAction.REGISTERED),
            RecordResult(record=b, outcome=RecordOutcome.SKIPPED),
            RecordResult(record=c, outcome=RecordOutcome.NO_CHANGES),
        ])

        assert report.committed_records() == [a]
        assert report.skipped_records() == [b]
        assert report.parent_committed is False
        assert report.parent_branch is None


class TestExceptions:
    """Test custom exceptions."""

    @pytest.mark.parametrize("exc_class, parent", [
        (GitRepositoryError, SyncError),
        (NotAGitRepositoryError, GitRepositoryError),
        (SubmoduleError, SyncError),
        (MaterializationError, SubmoduleError),
        (ConfigurationError, SyncError),
    ])
    def test_hierarchy(self, exc_class, parent):
        with pytest.raises(parent) as exc_info:
            raise exc_class("boom")

        assert str(exc_info.value) == "boom"
