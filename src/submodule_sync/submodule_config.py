"""
Submodule discovery from the .gitmodules configuration store.
"""

from __future__ import annotations

import logging
from configparser import Error as ConfigParserError
from pathlib import Path
from typing import Iterable, List, Optional

from git.config import GitConfigParser
from git.objects.submodule.util import sm_name

from .models import DEFAULT_BRANCH, ConfigurationError, IgnorePolicy, SubmoduleRecord


logger = logging.getLogger(__name__)

GITMODULES_FILE = ".gitmodules"
SECTION_PREFIX = 'submodule "'


class SubmoduleConfigReader:
    """Reads SubmoduleRecords from a repository's .gitmodules file."""

    def __init__(self, root_path: Path) -> None:
        self.root_path = Path(root_path).resolve()

    @property
    def gitmodules_path(self) -> Path:
        return self.root_path / GITMODULES_FILE

    def read_records(self) -> List[SubmoduleRecord]:
        """
        Read all submodule records in file order.

        Returns:
            List of records; empty if .gitmodules is absent or has no submodules
        """
        path = self.gitmodules_path
        if not path.is_file():
            logger.info(f"No {GITMODULES_FILE} found at {self.root_path}")
            return []

        parser = GitConfigParser(str(path), read_only=True)
        try:
            parser.read()
            records = list(self._parse_sections(parser, parser.sections()))
        except (ConfigParserError, OSError) as e:
            logger.error(f"Error reading {path}: {e}")
            raise ConfigurationError(f"Failed to read {path}: {e}") from e
        finally:
            parser.release()

        logger.info(f"Discovered {len(records)} submodule(s) in {path}")
        return records

    def _parse_sections(self, parser: GitConfigParser, sections: Iterable[str]) -> Iterable[SubmoduleRecord]:
        seen_paths = set()
        for section in sections:
            if not section.startswith(SECTION_PREFIX):
                continue
            if not parser.has_option(section, "path"):
                continue
            name = sm_name(section)
            path = self._get(parser, section, "path") or ""
            if not path:
                logger.warning(f"Submodule {name} has an empty path; ignoring it")
                continue
            if path in seen_paths:
                logger.warning(f"Submodule {name} repeats path {path}; ignoring it")
                continue
            seen_paths.add(path)

            yield SubmoduleRecord(
                name=name,
                path=path,
                url=self._get(parser, section, "url") or "",
                branch=self._get(parser, section, "branch") or DEFAULT_BRANCH,
                ignore_policy=IgnorePolicy.parse(self._get(parser, section, "ignore")),
            )

    @staticmethod
    def _get(parser: GitConfigParser, section: str, option: str) -> Optional[str]:
        if not parser.has_option(section, option):
            return None
        value = parser.get(section, option)
        return str(value).strip() if value is not None else None
