"""
Basic tests for the Git submodule sync tool.
"""

import re

from submodule_sync import __version__
from submodule_sync import (
    SyncOrchestrator, IgnorePolicy, SubmoduleRecord, SyncContext, SyncReport,
    RecordResult, GitManager, SubmoduleConfigReader, SyncReporter, NoOpReporter
)


def test_version_format():
    assert isinstance(__version__, str)
    assert __version__ != ""


def test_version_matches_semver():
    semver_pattern = r"^\d+\.\d+\.\d+$"
    assert re.match(semver_pattern, __version__)


def test_all_imports():
    """Test that all main classes can be imported."""
    assert SyncOrchestrator is not None
    assert IgnorePolicy is not None
    assert SubmoduleRecord is not None
    assert SyncContext is not None
    assert SyncReport is not None
    assert RecordResult is not None
    assert GitManager is not None
    assert SubmoduleConfigReader is not None
    assert SyncReporter is not None
    assert NoOpReporter is not None


def test_package_structure():
    """Test package structure and __all__ exports."""
    import submodule_sync

    for export in submodule_sync.__all__:
        assert hasattr(submodule_sync, export), f"Missing export: {export}"
