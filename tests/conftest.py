"""Shared pytest fixtures for git-sync-check tests."""

import subprocess
from pathlib import Path

import pytest


def git(repo: Path, *args: str) -> str:
    """Run git in repo for test setup and return its stripped stdout."""
    result = subprocess.run(
        ["git", *args],
        cwd=repo,
        check=True,
        capture_output=True,
        text=True,
    )
    return result.stdout.strip()


def init_repo(repo: Path) -> Path:
    """Initialize a repository on branch main with a test identity."""
    repo.mkdir(parents=True, exist_ok=True)
    git(repo, "init", "-b", "main")
    git(repo, "config", "user.email", "test@example.com")
    git(repo, "config", "user.name", "Test User")
    return repo


@pytest.fixture
def commit():
    """
    Return a function that creates a commit in a repository.

    Each call writes a new file so commits never collide.
    """
    counter = iter(range(1_000_000))

    def make_commit(repo: Path, message: str = "Change") -> str:
        name = f"file-{next(counter)}.txt"
        (repo / name).write_text(f"{message}\n")
        git(repo, "add", name)
        git(repo, "commit", "-m", message)
        return git(repo, "rev-parse", "HEAD")

    return make_commit


@pytest.fixture
def git_repo(tmp_path, commit):
    """
    Create a temporary git repository with one commit.

    Returns:
        Path: Path to the temporary git repository
    """
    repo = init_repo(tmp_path / "test-repo")
    commit(repo, "Initial commit")
    return repo


@pytest.fixture
def git_repo_with_remote(tmp_path, git_repo):
    """
    Create a git repository tracking a bare remote.

    Returns:
        tuple: (main_repo_path, remote_repo_path)
    """
    remote_repo = tmp_path / "remote.git"
    remote_repo.mkdir()
    git(remote_repo, "init", "--bare", "-b", "main")

    git(git_repo, "remote", "add", "origin", str(remote_repo))
    git(git_repo, "push", "-u", "origin", "main")

    return git_repo, remote_repo


@pytest.fixture
def other_clone(tmp_path, git_repo_with_remote):
    """
    A second clone of the remote, used to push commits the main repo lacks.

    Returns:
        Path: Path to the second clone
    """
    _, remote_repo = git_repo_with_remote
    clone = tmp_path / "other-clone"
    git(tmp_path, "clone", str(remote_repo), str(clone))
    git(clone, "config", "user.email", "other@example.com")
    git(clone, "config", "user.name", "Other User")
    return clone
