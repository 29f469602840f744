"""Tests for GitClient against a real local repository."""

import shutil
import subprocess

import pytest
from depmap import ExternalToolError
from depmap import GitClient

pytestmark = pytest.mark.skipif(shutil.which("git") is None, reason="git is not installed")


def _git(*args, cwd):
    subprocess.run(["git", *args], cwd=cwd, check=True, capture_output=True)


@pytest.fixture
def upstream(tmp_path):
    """A local repository with one commit on branch "main" and a "dev" branch."""
    repo = tmp_path / "upstream"
    repo.mkdir()
    _git("init", "-b", "main", cwd=repo)
    _git("config", "user.email", "test@example.com", cwd=repo)
    _git("config", "user.name", "Test", cwd=repo)
    (repo / "README.md").write_text("# upstream\n")
    _git("add", "README.md", cwd=repo)
    _git("commit", "-m", "initial", cwd=repo)
    _git("branch", "dev", cwd=repo)
    return repo


@pytest.mark.asyncio
async def test_clone_and_pull(tmp_path, upstream):
    """clone creates a working copy; pull updates it."""
    project = tmp_path / "project"
    project.mkdir()
    git = GitClient(cwd=project)

    await git.clone(str(upstream), ".dep/upstream", "main")
    assert (project / ".dep" / "upstream" / "README.md").exists()

    (upstream / "NEW.md").write_text("new\n")
    _git("add", "NEW.md", cwd=upstream)
    _git("commit", "-m", "second", cwd=upstream)

    await git.pull(".dep/upstream", "main")
    assert (project / ".dep" / "upstream" / "NEW.md").exists()


@pytest.mark.asyncio
async def test_switch(tmp_path, upstream):
    """switch checks out another branch."""
    git = GitClient(cwd=tmp_path)
    await git.clone(str(upstream), "clone")

    await git.switch("clone", "dev")

    head = subprocess.run(
        ["git", "-C", "clone", "branch", "--show-current"], cwd=tmp_path, capture_output=True, text=True
    )
    assert head.stdout.strip() == "dev"


@pytest.mark.asyncio
async def test_failure_raises_external_tool_error(tmp_path):
    """Non-zero exits carry the status and captured output."""
    git = GitClient(cwd=tmp_path)

    with pytest.raises(ExternalToolError, match="Command failed with code") as exc_info:
        await git.pull("not-a-repo")

    assert exc_info.value.returncode != 0
    assert exc_info.value.output


@pytest.mark.asyncio
async def test_missing_executable(tmp_path):
    """A missing git binary is reported as an external tool error."""
    git = GitClient(cwd=tmp_path, executable="git-does-not-exist")

    with pytest.raises(ExternalToolError, match="Failed to run"):
        await git.clone("https://github.com/acme/widgets.git", "widgets")
