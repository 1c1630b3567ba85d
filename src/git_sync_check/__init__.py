"""Report how git repositories under a directory compare with their upstreams.

Each repository is fetched and its checked out branch classified as up to
date, needing a pull, needing a push, diverged, or in error.
"""

# Re-export all public names from submodules
from .git import (
    GitClient,
    filter_repos_by_ignore_file,
    find_git_repos,
    git_config,
    run_git,
)
from .notify import (
    NotificationMethod,
    send_system_notification,
)
from .paths import (
    is_repo_dir,
    resolve_path,
)
from .scan import (
    ScanSummary,
    discover_repos,
    scan,
)
from .status import (
    RepoState,
    RepoStatus,
    check_repo,
    classify_state,
)

__all__ = (
    "GitClient",
    "NotificationMethod",
    "RepoState",
    "RepoStatus",
    "ScanSummary",
    "check_repo",
    "classify_state",
    "discover_repos",
    "filter_repos_by_ignore_file",
    "find_git_repos",
    "git_config",
    "is_repo_dir",
    "resolve_path",
    "run_git",
    "scan",
    "send_system_notification",
)
