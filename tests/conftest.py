"""Shared fixtures: throwaway git repositories."""

import os
import shutil
import subprocess

import pytest

GIT_ENV = {
    "GIT_AUTHOR_NAME": "Test",
    "GIT_AUTHOR_EMAIL": "test@example.com",
    "GIT_COMMITTER_NAME": "Test",
    "GIT_COMMITTER_EMAIL": "test@example.com",
    "GIT_CONFIG_NOSYSTEM": "1",
}

requires_git = pytest.mark.skipif(shutil.which("git") is None, reason="git not installed")


def git(cwd, *args) -> str:
    """Run git in cwd with a fixed identity, failing the test on error."""
    env = {**os.environ, **GIT_ENV, "HOME": str(cwd)}
    result = subprocess.run(
        ["git", *args], cwd=cwd, capture_output=True, text=True, env=env, check=True
    )
    return result.stdout


def commit_file(repo, path: str, content: str, message: str) -> str:
    """Write a file, commit it, and return the new commit sha."""
    target = repo / path
    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_text(content)
    git(repo, "add", path)
    git(repo, "commit", "-q", "-m", message)
    return git(repo, "rev-parse", "HEAD").strip()


@pytest.fixture
def git_repo(tmp_path, monkeypatch):
    """A repo on main with one commit, and a feature branch with two more."""
    for key, value in GIT_ENV.items():
        monkeypatch.setenv(key, value)

    repo = tmp_path / "repo"
    repo.mkdir()
    git(repo, "init", "-q", "-b", "main")
    commit_file(repo, "app.py", "def hello():\n    return 'hello'\n", "Initial commit")

    git(repo, "checkout", "-q", "-b", "feature")
    commit_file(repo, "app.py", "def hello():\n    return 'hello world'\n", "Change greeting")
    commit_file(repo, "tests/test_app.py", "def test_hello():\n    pass\n", "Add test")
    return repo
