"""Path and repository resolution utilities."""

from pathlib import Path


def resolve_path(path: str | Path | None = None) -> Path:
    """
    Resolve a path to an absolute Path object.

    Args:
        path: Path to resolve. If None or empty string, returns current directory.

    Returns:
        Absolute Path object

    Example:
        resolve_path("~/projects")  # Returns /home/user/projects
        resolve_path(None)           # Returns current directory
    """
    if not path:
        return Path.cwd()

    return Path(path).expanduser().resolve()


def is_repo_dir(path: Path) -> bool:
    """
    Check if the given path is the top level of a git working copy.

    Returns:
        True if path is a directory containing a .git directory or file
    """
    return path.is_dir() and (path / ".git").exists()


def display_path(repo: Path, root: Path) -> str:
    """
    Shorten a repository path for reports.

    Paths under root are shown relative to it ("." for root itself);
    anything else is shown in full.

    >>> display_path(Path("/src/a/b"), Path("/src"))
    'a/b'
    """
    try:
        return str(repo.relative_to(root))
    except ValueError:
        return str(repo)
