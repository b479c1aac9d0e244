"""
Shared fixtures for the submodule sync tests.
"""

from pathlib import Path
from typing import Dict

import pytest


@pytest.fixture(autouse=True)
def isolated_log_path(tmp_path: Path, monkeypatch):
    """Keep CLI log files out of the user's home directory."""
    log_path = tmp_path / "logs" / "submodule-sync.log"
    monkeypatch.setenv("SUBMODULE_SYNC_LOG", str(log_path))
    return log_path


def write_gitmodules(root: Path, entries: Dict[str, Dict[str, str]]) -> Path:
    """Write a .gitmodules file with one section per entry, in dict order."""
    lines = []
    for name, options in entries.items():
        lines.append(f'[submodule "{name}"]')
        for key, value in options.items():
            lines.append(f"\t{key} = {value}")
    path = Path(root) / ".gitmodules"
    path.write_text("\n".join(lines) + "\n", encoding="utf-8")
    return path
