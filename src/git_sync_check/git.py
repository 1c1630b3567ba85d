"""Core git operations."""

import logging
import subprocess
from collections.abc import Iterable, Iterator
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)


def run_git(
    *args: str,
    repo: Path | None = None,
    check: bool = True,
    capture: bool = False,
    **kwargs: Any,
) -> subprocess.CompletedProcess:
    """
    Run a git command and return the result.

    Args:
        *args: Git command arguments (e.g., "rev-parse", "HEAD")
        repo: Optional repository path. If None, runs in current directory.
        check: Whether to raise CalledProcessError on non-zero exit (default: True)
        capture: Whether to capture stdout/stderr (default: False)
        **kwargs: Additional arguments to pass to subprocess.run()

    Returns:
        CompletedProcess result

    Example:
        run_git("rev-parse", "HEAD", capture=True)
        run_git("fetch", "--quiet", repo=Path("/path/to/repo"))
    """
    cmd = ["git"]

    if repo is not None:
        cmd.extend(["-C", str(repo)])

    cmd.extend(args)
    logger.debug("Running %s", " ".join(cmd))

    if capture:
        return subprocess.run(
            cmd, capture_output=True, text=True, check=check, **kwargs
        )

    return subprocess.run(cmd, check=check, **kwargs)


def git_config(
    key: str,
    repo: Path | None = None,
    default: str | None = None,
) -> str | None:
    """
    Get a git config value.

    Args:
        key: Config key to retrieve (e.g., "syncCheck.notify")
        repo: Optional repository path. If None, uses current directory.
        default: Default value if config key is not set.

    Returns:
        Config value if set, otherwise default.
    """
    result = run_git("config", key, repo=repo, capture=True, check=False)
    if result.returncode == 0 and result.stdout.strip():
        return result.stdout.strip()
    return default


def find_git_repos(
    root_dir: str | Path,
    include_worktrees: bool = False,
) -> Iterator[Path]:
    """
    Find all git repositories under root_dir.

    Yields repository paths (parent of .git file/directory) in sorted order.
    Handles both regular repos (.git directory) and worktrees (.git file).

    Args:
        root_dir: Root directory to search for git repositories
        include_worktrees: If True, also yield git worktrees (where .git is a file).

    Yields:
        Repository paths

    Example:
        for repo in find_git_repos(Path.home() / "develop"):
            print(repo.name)
    """
    found = set()
    for git_marker in Path(root_dir).rglob(".git"):
        # Skip exotic filesystem objects (devices, pipes, etc.)
        if git_marker.is_dir() or (include_worktrees and git_marker.is_file()):
            found.add(git_marker.parent)
    yield from sorted(found)


def filter_repos_by_ignore_file(
    repos: Iterable[Path],
    root_dir: str | Path,
    ignore_filename: str,
) -> Iterator[Path]:
    """
    Filter repositories based on gitignore-style ignore files.

    Ignore files are collected from root_dir and every parent directory.
    Like .gitignore, each file's patterns are relative to the directory
    holding it, and files closer to root_dir take precedence, so a negation
    there can re-include a repository a parent file ignores. Unreadable
    ignore files are skipped with a warning.

    Args:
        repos: Repository paths to filter
        root_dir: Root directory that was searched
        ignore_filename: Name of ignore file to look for (e.g., ".syncignore")

    Yields:
        Repository paths that are not ignored

    Example:
        repos = find_git_repos(Path.home() / "develop")
        for repo in filter_repos_by_ignore_file(repos, Path.home() / "develop", ".syncignore"):
            print(repo)
    """
    import pathspec

    root_dir = Path(root_dir).resolve()

    ignore_files = [
        ignore_file
        for parent in [root_dir, *root_dir.parents]
        if (ignore_file := parent / ignore_filename).is_file()
    ]
    # Outermost first, so deeper files override
    ignore_files.reverse()

    specs = []
    for ignore_file in ignore_files:
        try:
            lines = ignore_file.read_text().splitlines()
        except (OSError, UnicodeDecodeError) as exc:
            logger.warning("Skipping unreadable ignore file %s: %s", ignore_file, exc)
            continue
        specs.append((ignore_file.parent, pathspec.GitIgnoreSpec.from_lines(lines)))

    if not specs:
        yield from repos
        return

    for repo in repos:
        resolved = Path(repo).resolve()
        if not resolved.is_relative_to(root_dir):
            # Outside root_dir, nothing can match
            yield repo
            continue

        ignored = False
        for base, spec in specs:
            # Trailing slash so directory-only patterns ("archive/") match too
            result = spec.check_file(f"{resolved.relative_to(base).as_posix()}/")
            if result.include is not None:
                ignored = result.include

        if ignored:
            logger.debug("Ignoring %s", repo)
            continue
        yield repo


def git_config_bool(
    key: str,
    repo: Path | None = None,
    default: bool = False,
) -> bool:
    """
    Get a boolean git config value, interpreted by git itself.

    Args:
        key: Config key to retrieve (e.g., "syncCheck.fetch")
        repo: Optional repository path. If None, uses current directory.
        default: Value returned when the key is not set.

    Returns:
        The configured boolean, otherwise default.

    Raises:
        ValueError: If git does not accept the value as a boolean.

    Example:
        if git_config_bool("syncCheck.fetch", default=True):
            fetch()
    """
    result = run_git("config", "--type=bool", key, repo=repo, capture=True, check=False)
    if result.returncode == 0:
        return result.stdout.strip() == "true"
    if result.returncode == 1 and not result.stderr.strip():
        return default
    raise ValueError(f"Invalid boolean for {key}: {result.stderr.strip()}")


class GitClient:
    """
    Version-control queries needed to compare a repository with its upstream.

    Every method takes the repository path explicitly. Query methods return
    None when git cannot answer (missing ref, no upstream, unrelated
    histories); only `fetch` raises.

    Tests substitute an object with the same methods to exercise the
    comparison logic without a git binary.
    """

    def remotes(self, repo: Path) -> list[str]:
        """Names of the configured remotes."""
        result = run_git("remote", repo=repo, capture=True, check=False)
        if result.returncode != 0:
            return []
        return [name for line in result.stdout.splitlines() if (name := line.strip())]

    def fetch(self, repo: Path) -> None:
        """
        Fetch from the default remote.

        Raises:
            subprocess.CalledProcessError: If the fetch fails.
        """
        run_git("fetch", "--quiet", repo=repo, capture=True)

    def current_branch(self, repo: Path) -> str | None:
        """Checked out branch name, or None when HEAD is detached."""
        result = run_git("symbolic-ref", "--quiet", "--short", "HEAD", repo=repo, capture=True, check=False)
        if result.returncode == 0 and (branch := result.stdout.strip()):
            return branch
        return None

    def upstream(self, repo: Path) -> str | None:
        """Upstream of the current branch in "remote/branch" form, or None."""
        result = run_git(
            "rev-parse", "--abbrev-ref", "--symbolic-full-name", "@{upstream}",
            repo=repo,
            capture=True,
            check=False,
        )
        if result.returncode == 0 and (upstream := result.stdout.strip()):
            return upstream
        return None

    def rev_parse(self, repo: Path, ref: str) -> str | None:
        """Full commit hash of ref, or None if it cannot be resolved."""
        result = run_git(
            "rev-parse", "--verify", "--quiet", f"{ref}^{{commit}}",
            repo=repo,
            capture=True,
            check=False,
        )
        if result.returncode == 0 and (commit := result.stdout.strip()):
            return commit
        return None

    def merge_base(self, repo: Path, first: str, second: str) -> str | None:
        """Nearest common ancestor of two commits, or None for unrelated histories."""
        result = run_git("merge-base", first, second, repo=repo, capture=True, check=False)
        if result.returncode == 0 and (commit := result.stdout.strip()):
            return commit
        return None

    def count_commits(self, repo: Path, exclude: str, include: str) -> int:
        """Number of commits reachable from include but not from exclude."""
        result = run_git("rev-list", "--count", f"{exclude}..{include}", repo=repo, capture=True)
        return int(result.stdout.strip() or "0")
