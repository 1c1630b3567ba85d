"""Command line entry point."""

import argparse
import logging
import sys
from pathlib import Path

import colorama
from colorama import Fore, Style

from .config import get_fetch_enabled, get_ignore_filename, get_notify_method
from .notify import NotificationMethod, notify
from .paths import display_path, resolve_path
from .scan import ScanSummary, discover_repos, scan
from .status import RepoState, RepoStatus

logger = logging.getLogger(__name__)

TITLE = "git-sync-check"

STATE_COLORS = {
    RepoState.CURRENT: Fore.GREEN,
    RepoState.NEEDS_PULL: Fore.YELLOW,
    RepoState.NEEDS_PUSH: Fore.YELLOW,
    RepoState.DIVERGED: Fore.RED,
    RepoState.ERROR: Fore.RED,
}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog=TITLE,
        description="Find git repositories and report how each compares with its upstream.",
    )
    parser.add_argument(
        "search_directory",
        nargs="?",
        default=".",
        help="Directory to search for repositories (default: current directory)",
    )
    parser.add_argument(
        "notification_method",
        nargs="?",
        default=None,
        help="terminal, system or both (default: git config syncCheck.notify, else terminal)",
    )
    parser.add_argument(
        "--no-fetch",
        dest="fetch",
        action="store_false",
        default=None,
        help="Compare against the last fetched upstream without fetching",
    )
    parser.add_argument(
        "--include-worktrees",
        action="store_true",
        help="Also check linked worktrees",
    )
    parser.add_argument(
        "--ignore-file",
        default=None,
        help="Name of gitignore-style files listing repositories to skip "
        "(default: git config syncCheck.ignoreFile, else .syncignore)",
    )
    parser.add_argument(
        "-q", "--quiet",
        action="store_true",
        help="Only print the summary",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Log every git invocation",
    )
    return parser


def setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        format="%(levelname)s %(name)s: %(message)s",
        level=logging.DEBUG if verbose else logging.WARNING,
        stream=sys.stderr,
    )


def format_status(status: RepoStatus, root: Path) -> str:
    color = STATE_COLORS[status.state]
    branch = f" [{status.branch}]" if status.branch else ""
    return f"{color}{status.describe():<36}{Style.RESET_ALL} {display_path(status.path, root)}{branch}"


def print_summary(summary: ScanSummary) -> None:
    counts = summary.counts
    print()
    print(f"{Style.BRIGHT}Summary{Style.RESET_ALL} ({summary.total} repositories)")
    for state in RepoState:
        print(f"  {STATE_COLORS[state]}{state.label + ':':<12}{Style.RESET_ALL} {counts[state]}")


def main(argv: list[str] | None = None) -> int:
    """
    Run a scan and report the results.

    Always returns 0: problems with individual repositories are part of
    the report, not failures of the tool. Usage errors and --help are
    printed by argparse and also return 0.
    """
    try:
        args = build_parser().parse_args(argv)
    except SystemExit:
        return 0
    setup_logging(args.verbose)
    colorama.just_fix_windows_console()

    root = resolve_path(args.search_directory)
    if not root.is_dir():
        print(f"{TITLE}: {args.search_directory}: not a directory", file=sys.stderr)
        return 0

    method = NotificationMethod.parse(args.notification_method or get_notify_method(root))
    ignore_filename = args.ignore_file or get_ignore_filename(root)

    fetch = args.fetch
    if fetch is None:
        try:
            fetch = get_fetch_enabled(root)
        except ValueError as exc:
            logger.error("%s; fetching anyway", exc)
            fetch = True

    repos = discover_repos(
        root,
        include_worktrees=args.include_worktrees,
        ignore_filename=ignore_filename,
    )
    if not repos:
        print(f"No git repositories found under {root}")
        return 0

    def report(status: RepoStatus) -> None:
        if not args.quiet:
            print(format_status(status, root))

    summary = scan(repos, fetch=fetch, on_status=report)
    print_summary(summary)

    if summary.needing_attention:
        notify(TITLE, summary.message(), method)

    return 0


def run() -> None:
    sys.exit(main())
