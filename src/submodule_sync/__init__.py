"""
Git Submodule Sync Tool - Keep a repository's submodules cloned, updated and pushed.

This package reads the submodules declared in .gitmodules, materializes missing
ones, pulls upstream changes, commits local changes according to each
submodule's ignore policy and finally updates the parent's submodule pointers.
"""

__version__ = "1.3.2"

from .sync_orchestrator import SyncOrchestrator
from .models import IgnorePolicy, SubmoduleRecord, SyncContext, SyncReport, RecordResult
from .git_manager import GitManager
from .submodule_config import SubmoduleConfigReader
from .progress_interface import SyncReporter, NoOpReporter

__all__ = [
    "SyncOrchestrator",
    "IgnorePolicy",
    "SubmoduleRecord",
    "SyncContext",
    "SyncReport",
    "RecordResult",
    "GitManager",
    "SubmoduleConfigReader",
    "SyncReporter",
    "NoOpReporter",
]
