"""Comparison of a repository with its upstream branch."""

import enum
import logging
import subprocess
from dataclasses import dataclass
from pathlib import Path

from .git import GitClient
from .paths import is_repo_dir

logger = logging.getLogger(__name__)


class RepoState(enum.Enum):
    """Where a repository stands relative to its upstream."""

    CURRENT = "current"
    NEEDS_PULL = "needs-pull"
    NEEDS_PUSH = "needs-push"
    DIVERGED = "diverged"
    ERROR = "error"

    @property
    def label(self) -> str:
        return _LABELS[self]


_LABELS = {
    RepoState.CURRENT: "Up to date",
    RepoState.NEEDS_PULL: "Needs pull",
    RepoState.NEEDS_PUSH: "Needs push",
    RepoState.DIVERGED: "Diverged",
    RepoState.ERROR: "Error",
}


@dataclass(frozen=True)
class RepoStatus:
    """
    Result of checking one repository.

    `ahead` counts commits on the local branch missing from upstream,
    `behind` counts upstream commits missing locally. Both are zero unless
    the state calls for them. `error` explains an ERROR state.

    """

    path: Path
    state: RepoState
    branch: str | None = None
    local: str | None = None
    remote: str | None = None
    base: str | None = None
    ahead: int = 0
    behind: int = 0
    error: str | None = None

    @property
    def needs_attention(self) -> bool:
        return self.state is not RepoState.CURRENT

    def describe(self) -> str:
        """Short human-readable summary, e.g. "Diverged (2 ahead, 1 behind)"."""
        if self.state is RepoState.ERROR:
            return f"{self.state.label}: {self.error}"
        if self.state is RepoState.NEEDS_PULL:
            return f"{self.state.label} ({self.behind} behind)"
        if self.state is RepoState.NEEDS_PUSH:
            return f"{self.state.label} ({self.ahead} ahead)"
        if self.state is RepoState.DIVERGED:
            return f"{self.state.label} ({self.ahead} ahead, {self.behind} behind)"
        return self.state.label


def classify_state(
    local: str | None,
    remote: str | None,
    base: str | None,
) -> RepoState:
    """
    Classify a repository from its local, upstream and merge-base commits.

    Any argument may be None when git could not resolve it. A missing local
    or upstream commit is an error; a missing merge-base (unrelated
    histories) only matters when local and upstream differ, and then the
    branches have diverged.

    >>> classify_state("a", "a", "a")
    <RepoState.CURRENT: 'current'>
    >>> classify_state("a", "b", "a")
    <RepoState.NEEDS_PULL: 'needs-pull'>
    >>> classify_state("b", "a", "a")
    <RepoState.NEEDS_PUSH: 'needs-push'>

    """
    if remote is None or local is None:
        return RepoState.ERROR
    if local == remote:
        return RepoState.CURRENT
    if local == base:
        return RepoState.NEEDS_PULL
    if remote == base:
        return RepoState.NEEDS_PUSH
    return RepoState.DIVERGED


def _last_stderr_line(exc: subprocess.CalledProcessError) -> str | None:
    lines = (exc.stderr or "").strip().splitlines()
    return lines[-1] if lines else None


def _error(repo: Path, reason: str, **fields) -> RepoStatus:
    logger.debug("%s: %s", repo, reason)
    return RepoStatus(path=repo, state=RepoState.ERROR, error=reason, **fields)


def check_repo(
    repo: Path,
    client: GitClient | None = None,
    *,
    fetch: bool = True,
) -> RepoStatus:
    """
    Compare the checked out branch of a repository with its upstream.

    Fetches first (unless disabled), then resolves HEAD, the upstream and
    their merge-base, and counts the commits on whichever side is missing
    them. Failures are returned as an ERROR status, never raised.

    Args:
        repo: Path to the working copy.
        client: Git client to use. Defaults to a `GitClient`.
        fetch: Whether to fetch from the remote before comparing.

    Returns:
        The repository's status.

    Example:
        status = check_repo(Path("~/develop/project").expanduser())
        print(status.describe())

    """
    client = client or GitClient()

    if not is_repo_dir(repo):
        return _error(repo, "not a git working copy")

    try:
        if not client.remotes(repo):
            return _error(repo, "no remote configured")

        if fetch:
            try:
                client.fetch(repo)
            except subprocess.CalledProcessError as exc:
                detail = _last_stderr_line(exc)
                reason = f"fetch failed: {detail}" if detail else "fetch failed"
                return _error(repo, reason)

        branch = client.current_branch(repo)
        local = client.rev_parse(repo, "HEAD")
        if local is None:
            return _error(repo, "no commits", branch=branch)
        if branch is None:
            return _error(repo, "detached HEAD has no upstream", local=local)

        upstream = client.upstream(repo)
        remote = client.rev_parse(repo, upstream) if upstream else None
        if remote is None:
            return _error(repo, f"no upstream branch for {branch}", branch=branch, local=local)

        base = client.merge_base(repo, local, remote)
        state = classify_state(local, remote, base)

        ahead = behind = 0
        if state in (RepoState.NEEDS_PUSH, RepoState.DIVERGED):
            ahead = client.count_commits(repo, remote, local)
        if state in (RepoState.NEEDS_PULL, RepoState.DIVERGED):
            behind = client.count_commits(repo, local, remote)

    except subprocess.CalledProcessError as exc:
        detail = _last_stderr_line(exc)
        reason = f"git failed: {detail}" if detail else f"git exited with status {exc.returncode}"
        return _error(repo, reason)

    logger.debug("%s: %s (local %s, remote %s, base %s)", repo, state.value, local, remote, base)
    return RepoStatus(
        path=repo,
        state=state,
        branch=branch,
        local=local,
        remote=remote,
        base=base,
        ahead=ahead,
        behind=behind,
    )
