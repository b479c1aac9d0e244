"""
Git repository management and operations.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional, Union
from git import Repo, InvalidGitRepositoryError, NoSuchPathError
from git.exc import GitCommandError

from .models import DEFAULT_REMOTE, GitRepositoryError, NotAGitRepositoryError


logger = logging.getLogger(__name__)


class GitManager:
    """Manages Git operations for the parent repository or one submodule."""

    def __init__(self, repo_path: Optional[Path] = None, search_parent_directories: bool = False) -> None:
        """Initialize Git manager with optional repository path."""
        self.repo_path = Path(repo_path or Path.cwd()).resolve()
        self.search_parent_directories = search_parent_directories
        self._repo: Optional[Repo] = None

    @property
    def repo(self) -> Repo:
        """Get the Git repository instance."""
        if self._repo is None:
            self._repo = self._open_repository()
        return self._repo

    def _open_repository(self) -> Repo:
        logger.debug(f"Opening repository in: {self.repo_path}")
        try:
            repo = Repo(self.repo_path, search_parent_directories=self.search_parent_directories)
        except (InvalidGitRepositoryError, NoSuchPathError) as e:
            raise NotAGitRepositoryError(f"Not a git repository: {self.repo_path}") from e
        if repo.bare:
            raise NotAGitRepositoryError(f"Repository at {self.repo_path} has no working tree")
        return repo

    @property
    def working_dir(self) -> Path:
        return Path(self.repo.working_tree_dir)

    def _to_repo_relative_str(self, p: Union[str, Path]) -> str:
        """Return a POSIX-style path relative to the repo root when `p` lies inside it."""
        pp = Path(p)
        if not pp.is_absolute():
            return pp.as_posix()
        try:
            return pp.resolve().relative_to(self.working_dir).as_posix()
        except ValueError:
            logger.debug(f"Path '{pp}' not under repo root '{self.working_dir}'; passing as-is")
            return pp.as_posix()

    # --- Remote synchronization ---
    def fetch_remote(self, remote_name: str = DEFAULT_REMOTE) -> None:
        """Fetch updates from a remote."""
        try:
            self.repo.git.fetch(remote_name)
            logger.info(f"Fetched updates from {remote_name} in {self.repo_path}")
        except GitCommandError as e:
            logger.error(f"Failed to fetch from {remote_name}: {e}")
            raise GitRepositoryError(f"Failed to fetch from {remote_name}: {e}")

    def checkout_or_create_branch(self, branch_name: str, remote_name: str = DEFAULT_REMOTE) -> bool:
        """Checkout a branch, creating it from remote/branch if the checkout fails.

        Returns True if the local branch had to be created.
        """
        try:
            self.repo.git.checkout(branch_name)
            logger.info(f"Checked out branch: {branch_name}")
            return False
        except GitCommandError as e:
            # Any checkout failure is read as "no such local branch"
            logger.debug(f"Checkout of {branch_name} failed, creating from {remote_name}: {e}")

        remote_ref = f"{remote_name}/{branch_name}"
        try:
            self.repo.git.checkout("-b", branch_name, remote_ref)
            logger.info(f"Created branch {branch_name} tracking {remote_ref}")
            return True
        except GitCommandError as e:
            logger.error(f"Error creating branch {branch_name} from {remote_ref}: {e}")
            raise GitRepositoryError(f"Failed to checkout branch {branch_name}: {e}")

    def pull(self, branch_name: str, remote_name: str = DEFAULT_REMOTE) -> None:
        """Pull branch from remote into the current branch."""
        try:
            self.repo.git.pull(remote_name, branch_name)
            logger.info(f"Pulled {remote_name}/{branch_name} in {self.repo_path}")
        except GitCommandError as e:
            logger.error(f"Failed to pull {remote_name}/{branch_name}: {e}")
            raise GitRepositoryError(f"Failed to pull {remote_name}/{branch_name}: {e}")

    def push(self, branch_name: str, remote_name: str = DEFAULT_REMOTE) -> None:
        """Push a branch to a remote."""
        try:
            self.repo.git.push(remote_name, branch_name)
            logger.info(f"Pushed {branch_name} to {remote_name} from {self.repo_path}")
        except GitCommandError as e:
            logger.error(f"Failed to push {branch_name} to {remote_name}: {e}")
            raise GitRepositoryError(f"Failed to push {branch_name} to {remote_name}: {e}")

    def get_current_branch(self) -> str:
        """Get the current branch name."""
        try:
            return self.repo.active_branch.name
        except TypeError as e:
            # Detached HEAD
            logger.error(f"Error getting current branch: {e}")
            raise GitRepositoryError(f"Could not determine current branch: {e}")

    # --- Working tree / index ---
    def get_short_status(self) -> str:
        """Return `git status -s` output (tracked changes and untracked files)."""
        try:
            return self.repo.git.status("-s")
        except GitCommandError as e:
            logger.error(f"Failed to read status in {self.repo_path}: {e}")
            raise GitRepositoryError(f"Failed to read status: {e}")

    def has_local_changes(self) -> bool:
        return bool(self.get_short_status().strip())

    def get_porcelain_status(self) -> str:
        try:
            return self.repo.git.status("--porcelain")
        except GitCommandError as e:
            logger.error(f"Failed to read status in {self.repo_path}: {e}")
            raise GitRepositoryError(f"Failed to read status: {e}")

    def add_all(self) -> None:
        """Stage every change in the working tree."""
        try:
            self.repo.git.add(".")
        except GitCommandError as e:
            logger.error(f"Failed to stage changes in {self.repo_path}: {e}")
            raise GitRepositoryError(f"Failed to stage changes: {e}")

    def commit(self, message: str) -> None:
        try:
            self.repo.git.commit("-m", message)
            logger.info(f"Committed in {self.repo_path}: {message}")
        except GitCommandError as e:
            logger.error(f"Failed to commit in {self.repo_path}: {e}")
            raise GitRepositoryError(f"Failed to commit: {e}")

    # --- Submodules ---
    def is_submodule_tracked(self, submodule_path: Union[str, Path]) -> bool:
        """Return True if `git submodule status` knows the path."""
        rel = self._to_repo_relative_str(submodule_path)
        try:
            output = self.repo.git.submodule("status", "--", rel)
        except GitCommandError as e:
            logger.debug(f"No submodule status for {rel}: {e}")
            return False
        return bool(output.strip())

    def add_submodule(self, name: str, url: str, submodule_path: Union[str, Path], branch: str) -> None:
        """Register and clone a submodule, overwriting any conflicting entry at the path."""
        rel = self._to_repo_relative_str(submodule_path)
        try:
            self.repo.git.submodule("add", "--force", "--name", name, "-b", branch, "--", url, rel)
            logger.info(f"Registered submodule {name} at {rel} ({url} @ {branch})")
        except GitCommandError as e:
            logger.error(f"Failed to add submodule {name} at {rel}: {e}")
            raise GitRepositoryError(f"Failed to add submodule {name} at {rel}: {e}")

    def update_submodule(self, submodule_path: Union[str, Path]) -> None:
        """Initialize and check out a tracked submodule, including nested ones."""
        rel = self._to_repo_relative_str(submodule_path)
        try:
            self.repo.git.submodule("update", "--init", "--recursive", "--", rel)
            logger.info(f"Initialized submodule at {rel}")
        except GitCommandError as e:
            logger.error(f"Failed to update submodule at {rel}: {e}")
            raise GitRepositoryError(f"Failed to update submodule at {rel}: {e}")
