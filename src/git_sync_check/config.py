"""Defaults read from git config."""

from pathlib import Path

from .git import git_config, git_config_bool

DEFAULT_IGNORE_FILE = ".syncignore"


def get_sync_config(
    key: str,
    repo: Path | None = None,
    default: str | None = None,
) -> str | None:
    """
    Get a configuration value from the `syncCheck.*` git config namespace.

    Args:
        key: Config key without the "syncCheck." prefix (e.g., "notify").
        repo: Optional repository path whose local config is consulted too.
              If None, uses current directory.
        default: Default value if config key is not set.

    Example:
        git config --global syncCheck.notify both

    """
    return git_config(f"syncCheck.{key}", repo=repo, default=default)


def get_notify_method(repo: Path | None = None) -> str:
    """
    Default notification method.

    Reads from `syncCheck.notify`. Default: `"terminal"`

    """
    return get_sync_config("notify", repo=repo) or "terminal"


def get_ignore_filename(repo: Path | None = None) -> str:
    """
    Name of the ignore file listing repositories to skip.

    Reads from `syncCheck.ignoreFile`. Default: `".syncignore"`

    """
    return get_sync_config("ignoreFile", repo=repo) or DEFAULT_IGNORE_FILE


def get_fetch_enabled(repo: Path | None = None) -> bool:
    """
    Whether to fetch before comparing.

    Reads the boolean `syncCheck.fetch`, using git's own boolean rules.
    Default: `True`

    Raises:
        ValueError: If git does not accept the value as a boolean.

    """
    return git_config_bool("syncCheck.fetch", repo=repo, default=True)
