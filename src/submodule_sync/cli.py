"""
Command-line interface for the Git submodule sync tool.
"""

from __future__ import annotations

import logging
from logging.handlers import RotatingFileHandler
import os
import sys
from pathlib import Path
from typing import Optional
from datetime import datetime

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from .sync_orchestrator import SyncOrchestrator
from .cli_reporter import CliReporter
from .git_manager import GitManager
from .models import NotAGitRepositoryError, SyncContext, SyncError
from . import __version__ as PACKAGE_VERSION


console = Console()
logger = logging.getLogger(__name__)


def _print_version(ctx, param, value):
    """Eager option callback to print version and exit."""
    if not value or ctx.resilient_parsing:
        return
    click.echo(f"submodule-sync {PACKAGE_VERSION}")
    ctx.exit()


def _default_log_path() -> Path:
    """Determine default log file path (~/.submodule-sync/submodule-sync.log)."""
    env_path = os.environ.get("SUBMODULE_SYNC_LOG")
    if env_path:
        p = Path(env_path).expanduser()
        p.parent.mkdir(parents=True, exist_ok=True)
        return p
    base = Path.home() / ".submodule-sync"
    base.mkdir(parents=True, exist_ok=True)
    return base / "submodule-sync.log"


class SafeConsoleFilter(logging.Filter):
    """Sanitize record messages for console by replacing unencodable characters.

    Runs before RichHandler emits, since RichHandler renders the message text itself.
    """

    def __init__(self, encoding: Optional[str] = None):
        super().__init__()
        self.encoding = encoding or getattr(sys.stderr, "encoding", None) or "utf-8"

    def filter(self, record: logging.LogRecord) -> bool:  # always keep the record
        message = record.getMessage()
        try:
            message.encode(self.encoding, errors="strict")
        except UnicodeEncodeError:
            record.msg = message.encode(self.encoding, errors="replace").decode(self.encoding, errors="replace")
            record.args = ()
        return True


def setup_logging(verbose: bool = False, console_level: Optional[str] = None, log_file: Optional[Path] = None) -> Path:
    """Setup logging with a per-run file and a stable rotating aggregate.

    - Per-run log file: <stem>-YYYYMMDD_HHMMSS.log
    - Stable aggregate log: <stem>.log (rotated)
    - Best-effort hardlink: <stem>-current.log -> per-run file
    - Console logging disabled by default; enable via --verbose or --log-level

    Returns the best path to show the user for this run.
    """
    provided = Path(log_file) if log_file else _default_log_path()
    if provided.exists() and provided.is_dir():
        base_dir = provided
        base_stem = "submodule-sync"
        stable_aggregate_path = base_dir / f"{base_stem}.log"
    else:
        base_dir = provided.parent
        base_stem = provided.stem or "submodule-sync"
        stable_aggregate_path = provided
    base_dir.mkdir(parents=True, exist_ok=True)

    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    per_run_path = base_dir / f"{base_stem}-{timestamp}.log"
    current_link_path = base_dir / f"{base_stem}-current.log"

    root = logging.getLogger()
    # Clear existing handlers to avoid duplication in tests / repeated invocations
    root.handlers.clear()
    root.setLevel(logging.DEBUG)

    file_fmt = logging.Formatter(
        fmt="%(asctime)s %(levelname)s [%(name)s] %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    run_file_handler = logging.FileHandler(str(per_run_path), encoding="utf-8")
    run_file_handler.setLevel(logging.DEBUG)
    run_file_handler.setFormatter(file_fmt)
    root.addHandler(run_file_handler)

    aggregate_handler = RotatingFileHandler(
        str(stable_aggregate_path), maxBytes=1_000_000, backupCount=3, encoding="utf-8"
    )
    aggregate_handler.setLevel(logging.DEBUG)
    aggregate_handler.setFormatter(file_fmt)
    root.addHandler(aggregate_handler)

    # GitPython logs every command at DEBUG; keep it out of our files
    logging.getLogger("git").setLevel(logging.INFO)

    created_hardlink = False
    try:
        if current_link_path.exists():
            current_link_path.unlink()
        os.link(per_run_path, current_link_path)
        created_hardlink = True
    except OSError:
        # Hardlinks may be unsupported across volumes or filesystems
        created_hardlink = False

    if verbose or console_level:
        level_map = {
            "debug": logging.DEBUG,
            "info": logging.INFO,
            "warning": logging.WARNING,
            "error": logging.ERROR,
        }
        ch_level = level_map.get((console_level or "info").lower(), logging.INFO)
        console_handler = RichHandler(console=console, rich_tracebacks=True)
        console_handler.setLevel(ch_level)
        stream = getattr(console, "file", sys.stderr)
        enc = getattr(stream, "encoding", None) or getattr(sys.stderr, "encoding", None) or "utf-8"
        console_handler.setFormatter(logging.Formatter("%(message)s"))
        console_handler.addFilter(SafeConsoleFilter(encoding=enc))
        root.addHandler(console_handler)

    return current_link_path if created_hardlink else stable_aggregate_path


def _maybe_print_log_notice(verbose: bool, console_level: Optional[str], log_path: Path) -> None:
    """Inform user about logging destination and how to enable console logs."""
    if verbose or console_level:
        return
    console.print(f"[dim]Logs are written to {log_path}. Use -v or --log-level to enable console logs.[/dim]")


def _resolve_root(repo_path: Optional[Path]) -> Path:
    """Return the working-tree root containing repo_path (or the current directory)."""
    return GitManager(repo_path or Path.cwd(), search_parent_directories=True).working_dir


@click.group()
@click.option(
    "--version",
    "-V",
    is_flag=True,
    callback=_print_version,
    expose_value=False,
    is_eager=True,
    help="Show version and exit.",
)
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose console logging (INFO)")
@click.option(
    "--log-level",
    type=click.Choice(["debug", "info", "warning", "error"], case_sensitive=False),
    default=None,
    help="Console log level. By default, console logging is disabled.",
)
@click.option(
    "--repo-path",
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    help="Path to repository (defaults to current directory)",
)
@click.pass_context
def cli(ctx: click.Context, verbose: bool, log_level: Optional[str], repo_path: Optional[Path]) -> None:
    """Git Submodule Sync Tool - Clone, update and push every submodule of a repository."""
    log_path = setup_logging(verbose, console_level=log_level)

    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["console_level"] = log_level
    ctx.obj["log_path"] = log_path
    ctx.obj["repo_path"] = repo_path.resolve() if isinstance(repo_path, Path) else None
    logger.debug(f"CLI init: cwd={Path.cwd()} repo_path={ctx.obj['repo_path']}")


@cli.command()
@click.option("--remote", "remote_name", default="origin", show_default=True, help="Remote to fetch from and push to")
@click.option(
    "--include",
    "includes",
    multiple=True,
    help="Sync only these submodules (name or path). Repeatable.",
)
@click.option(
    "--exclude",
    "excludes",
    multiple=True,
    help="Do not sync these submodules (name or path). Repeatable.",
)
@click.option("--dry-run", is_flag=True, help="Show what would be done without executing")
@click.pass_context
def sync(
    ctx: click.Context,
    remote_name: str,
    includes: tuple[str, ...],
    excludes: tuple[str, ...],
    dry_run: bool,
) -> None:
    """
    Sync every submodule listed in .gitmodules, then update the parent repository.

    Example: submodule-sync sync --exclude vendor/legacy
    """
    reporter = CliReporter(console)
    try:
        _maybe_print_log_notice(ctx.obj.get("verbose"), ctx.obj.get("console_level"), ctx.obj.get("log_path"))
        context = SyncContext(
            root_path=_resolve_root(ctx.obj.get("repo_path")),
            remote_name=remote_name,
            include={s.strip() for s in includes if s.strip()},
            exclude={s.strip() for s in excludes if s.strip()},
        )
        orchestrator = SyncOrchestrator(context, reporter)

        if dry_run:
            reporter.show_plan(orchestrator.plan())
            console.print("\nDry Run Complete - No changes made")
            return

        report = orchestrator.run()
        reporter.summary(report)

    except NotAGitRepositoryError as e:
        console.print("[ERROR] Not a git repository.", style="red", markup=False)
        logger.debug(f"Sync aborted: {e}", exc_info=True)
        sys.exit(1)
    except SyncError as e:
        reporter.failure("Submodule synchronization failed.")
        console.print(f"{e}", style="dim", markup=False)
        logger.debug("Sync aborted due to SyncError", exc_info=True)
        sys.exit(1)
    except (click.Abort, KeyboardInterrupt):
        console.print("\n\nOperation cancelled by user", style="bold yellow")
        logger.debug("Operation cancelled by user", exc_info=True)
        sys.exit(130)
    except Exception as e:
        console.print(f"\nUnexpected Error: {e}", style="bold red", markup=False)
        if ctx.obj.get("verbose"):
            console.print_exception()
        logger.debug("Unexpected error during sync", exc_info=True)
        sys.exit(1)


@cli.command("list")
@click.pass_context
def list_submodules(ctx: click.Context) -> None:
    """List the submodules configured in .gitmodules."""
    try:
        _maybe_print_log_notice(ctx.obj.get("verbose"), ctx.obj.get("console_level"), ctx.obj.get("log_path"))
        orchestrator = SyncOrchestrator(SyncContext(root_path=_resolve_root(ctx.obj.get("repo_path"))))
        records = orchestrator.discover()

        console.print("\n**Configured Submodules**")
        if not records:
            console.print("No submodules configured.")
            return

        table = Table(show_header=True, header_style="bold magenta")
        table.add_column("Name", style="cyan")
        table.add_column("Path", style="dim")
        table.add_column("URL")
        table.add_column("Branch", style="green")
        table.add_column("Ignore", style="yellow")
        table.add_column("On Disk", justify="center")

        for record in records:
            present = record.absolute_path(orchestrator.root_path).is_dir()
            table.add_row(
                record.name,
                record.path,
                record.url,
                record.branch,
                record.ignore_policy.value,
                "yes" if present else "no",
            )

        console.print(table)

    except NotAGitRepositoryError as e:
        console.print("[ERROR] Not a git repository.", style="red", markup=False)
        logger.debug(f"List aborted: {e}", exc_info=True)
        sys.exit(1)
    except Exception as e:
        console.print(f"\nError listing submodules: {e}", style="bold red", markup=False)
        logger.debug("Error in list command", exc_info=True)
        sys.exit(1)


@cli.command()
def version() -> None:
    """Print the current submodule-sync version."""
    console.print(f"submodule-sync {PACKAGE_VERSION}")


def main() -> None:
    """Main entry point for the CLI."""
    try:
        cli()
    except KeyboardInterrupt:
        console.print("\n\nOperation cancelled by user", style="bold yellow")
        logger.debug("Top-level cancellation (KeyboardInterrupt)", exc_info=True)
        sys.exit(130)


if __name__ == "__main__":
    main()
