"""Tests for cli module."""

import pytest

from conftest import git, init_repo
from git_sync_check import notify as notify_module
from git_sync_check.cli import main


@pytest.fixture(autouse=True)
def isolated_git_config(tmp_path_factory, monkeypatch):
    """Point git at an empty global config so user settings don't leak in."""
    config = tmp_path_factory.mktemp("home") / "gitconfig"
    config.write_text("")
    monkeypatch.setenv("GIT_CONFIG_GLOBAL", str(config))
    return config


@pytest.fixture
def no_desktop_notifier(monkeypatch):
    monkeypatch.setattr(notify_module.shutil, "which", lambda name: None)


class TestMain:
    """Tests for main function."""

    def test_reports_each_repo_and_summary(self, tmp_path, git_repo_with_remote, commit, capsys):
        repo, _ = git_repo_with_remote
        commit(repo, "Unpushed")
        lonely = init_repo(tmp_path / "lonely")
        commit(lonely, "Only local")

        assert main([str(tmp_path)]) == 0

        out = capsys.readouterr().out
        assert "Needs push (1 ahead)" in out
        assert "test-repo [main]" in out
        assert "Error: no remote configured" in out
        assert "lonely" in out
        assert "Summary" in out
        assert "(2 repositories)" in out
        assert "2 repositories need attention: 1 needs push, 1 error" in out

    def test_all_current_sends_no_notification(self, tmp_path, git_repo_with_remote, capsys):
        assert main([str(tmp_path), "terminal"]) == 0

        out = capsys.readouterr().out
        assert "Up to date" in out
        assert "attention" not in out

    def test_quiet_prints_only_summary(self, tmp_path, git_repo_with_remote, capsys):
        assert main([str(tmp_path), "--quiet"]) == 0

        out = capsys.readouterr().out
        assert "test-repo" not in out
        assert "Summary" in out

    def test_no_fetch(self, tmp_path, git_repo_with_remote, other_clone, commit, capsys):
        commit(other_clone, "Upstream change")
        git(other_clone, "push", "origin", "main")
        # The other clone itself is current, the main repo is behind
        assert main([str(tmp_path), "--no-fetch"]) == 0
        out = capsys.readouterr().out
        assert "Needs pull (" not in out
        assert "Up to date" in out

        assert main([str(tmp_path)]) == 0
        assert "Needs pull (1 behind)" in capsys.readouterr().out

    def test_fetch_disabled_in_config(
        self, tmp_path, git_repo_with_remote, other_clone, commit, capsys, isolated_git_config
    ):
        commit(other_clone, "Upstream change")
        git(other_clone, "push", "origin", "main")
        isolated_git_config.write_text("[syncCheck]\n\tfetch = false\n")

        assert main([str(tmp_path)]) == 0
        out = capsys.readouterr().out
        assert "Needs pull (" not in out
        assert "Up to date" in out

    def test_ignore_file(self, tmp_path, git_repo_with_remote, commit, capsys):
        commit(init_repo(tmp_path / "lonely"), "Only local")
        (tmp_path / ".skip").write_text("test-repo\n")

        assert main([str(tmp_path), "--ignore-file", ".skip"]) == 0
        out = capsys.readouterr().out
        assert "test-repo" not in out
        assert "lonely" in out

    def test_no_repositories(self, tmp_path, capsys):
        assert main([str(tmp_path)]) == 0
        assert "No git repositories found" in capsys.readouterr().out

    def test_missing_directory_still_exits_zero(self, tmp_path, capsys):
        assert main([str(tmp_path / "missing")]) == 0
        assert "not a directory" in capsys.readouterr().err

    def test_system_notification_without_notifier(
        self, tmp_path, git_repo, no_desktop_notifier, capsys, caplog
    ):
        assert main([str(tmp_path), "system"]) == 0

        out = capsys.readouterr().out
        assert "attention" not in out
        assert "No desktop notifier" in caplog.text

    def test_unknown_method_uses_terminal(self, tmp_path, git_repo, capsys):
        assert main([str(tmp_path), "carrier-pigeon"]) == 0
        assert "1 repository needs attention" in capsys.readouterr().out

    def test_method_from_config(
        self, tmp_path, git_repo, no_desktop_notifier, capsys, isolated_git_config
    ):
        isolated_git_config.write_text("[syncCheck]\n\tnotify = system\n")

        assert main([str(tmp_path)]) == 0
        assert "attention" not in capsys.readouterr().out

    def test_unreadable_ignore_file_is_skipped(self, tmp_path, git_repo_with_remote, capsys, caplog):
        (tmp_path / ".syncignore").write_bytes(b"\xff\xfe bad\n")

        assert main([str(tmp_path)]) == 0
        assert "test-repo [main]" in capsys.readouterr().out
        assert "Skipping unreadable ignore file" in caplog.text

    def test_usage_error_still_exits_zero(self, capsys):
        assert main(["--bogus"]) == 0
        assert "unrecognized arguments: --bogus" in capsys.readouterr().err

    def test_help_exits_zero(self, capsys):
        assert main(["--help"]) == 0
        assert "search_directory" in capsys.readouterr().out
