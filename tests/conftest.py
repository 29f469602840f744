import pytest
from click.testing import CliRunner


class MockVersionControl:
    """In-process version control: "clones" by writing a small tree."""

    def __init__(self, root):
        self.root = root
        self.calls: list[tuple] = []

    def _populate(self, destination: str) -> None:
        tree = self.root / destination
        (tree / ".git").mkdir(parents=True, exist_ok=True)
        (tree / ".git" / "HEAD").write_text("ref: refs/heads/main\n")
        (tree / "src" / "core").mkdir(parents=True, exist_ok=True)
        (tree / "src" / "core" / "core.py").write_text("CORE = 1\n")
        (tree / "README.md").write_text("# widgets\n")

    async def clone(self, url: str, destination: str, branch: str | None = None) -> str:
        self.calls.append(("clone", url, destination, branch))
        self._populate(destination)
        return f"Cloning into '{destination}'..."

    async def pull(self, destination: str, branch: str | None = None) -> str:
        self.calls.append(("pull", destination, branch))
        (self.root / destination / "CHANGELOG.md").write_text("pulled\n")
        return "Already up to date."

    async def switch(self, destination: str, ref: str) -> str:
        self.calls.append(("switch", destination, ref))
        return f"Switched to branch '{ref}'"


@pytest.fixture
def vcs(tmp_path):
    """Mock version control rooted at the test's project directory."""
    return MockVersionControl(tmp_path)


@pytest.fixture
def runner():
    """Click CLI runner fixture."""
    return CliRunner()
