"""Sequential scan of every repository under a directory."""

import logging
from collections import Counter
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from pathlib import Path

from .git import GitClient, filter_repos_by_ignore_file, find_git_repos
from .status import RepoState, RepoStatus, check_repo

logger = logging.getLogger(__name__)


@dataclass
class ScanSummary:
    """Statuses of all scanned repositories, in scan order."""

    statuses: list[RepoStatus] = field(default_factory=list)

    def add(self, status: RepoStatus) -> None:
        self.statuses.append(status)

    @property
    def counts(self) -> dict[RepoState, int]:
        """Number of repositories per state, including zero counts."""
        counter = Counter(status.state for status in self.statuses)
        return {state: counter.get(state, 0) for state in RepoState}

    @property
    def total(self) -> int:
        return len(self.statuses)

    @property
    def needing_attention(self) -> list[RepoStatus]:
        return [status for status in self.statuses if status.needs_attention]

    def message(self) -> str:
        """
        One-line summary suitable for a notification.

        >>> ScanSummary().message()
        'All 0 repositories are up to date'

        """
        attention = self.needing_attention
        if not attention:
            return f"All {self.total} repositories are up to date"

        counts = self.counts
        parts = [
            f"{counts[state]} {state.label.lower()}"
            for state in RepoState
            if state is not RepoState.CURRENT and counts[state]
        ]
        noun = "repository needs" if len(attention) == 1 else "repositories need"
        return f"{len(attention)} {noun} attention: {', '.join(parts)}"


def discover_repos(
    root_dir: Path,
    *,
    include_worktrees: bool = False,
    ignore_filename: str | None = None,
) -> list[Path]:
    """
    Find the repositories to check under root_dir.

    Args:
        root_dir: Directory to search.
        include_worktrees: Also return worktrees (where .git is a file).
        ignore_filename: Name of gitignore-style files excluding repositories.
                         None disables filtering.

    Returns:
        Sorted repository paths.
    """
    repos: Iterable[Path] = find_git_repos(root_dir, include_worktrees=include_worktrees)
    if ignore_filename:
        repos = filter_repos_by_ignore_file(repos, root_dir, ignore_filename)
    return list(repos)


def scan(
    repos: Iterable[Path],
    client: GitClient | None = None,
    *,
    fetch: bool = True,
    on_status: Callable[[RepoStatus], None] | None = None,
) -> ScanSummary:
    """
    Check repositories one after another.

    Each repository is checked exactly once; a failing repository becomes an
    ERROR status and the scan moves on.

    Args:
        repos: Repository paths to check.
        client: Git client shared by all checks. Defaults to a `GitClient`.
        fetch: Whether to fetch each repository before comparing.
        on_status: Called with each status as soon as it is known.

    Returns:
        Summary of all statuses.

    Example:
        summary = scan(discover_repos(Path.home() / "develop"))
        print(summary.counts)
    """
    client = client or GitClient()
    summary = ScanSummary()

    for repo in repos:
        logger.info("Checking %s", repo)
        status = check_repo(repo, client, fetch=fetch)
        summary.add(status)
        if on_status is not None:
            on_status(status)

    return summary
