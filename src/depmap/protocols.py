"""Protocols for the collaborators the install engine drives.

The engine never shells out or touches the disk itself; apps hand it a
version-control client and a file store. `GitClient` and `LocalFileStore`
are the stock implementations, tests provide in-memory ones.
"""

from typing import Protocol


class VersionControlProtocol(Protocol):
    """Fetches and updates dependency trees.

    Every method returns the tool's combined output and raises
    ExternalToolError on a non-zero exit.
    """

    async def clone(self, url: str, destination: str, branch: str | None = None) -> str:
        """Clone `url` into `destination`, optionally checking out `branch`."""
        ...

    async def pull(self, destination: str, branch: str | None = None) -> str:
        """Update an existing clone at `destination`."""
        ...

    async def switch(self, destination: str, ref: str) -> str:
        """Switch the clone at `destination` to `ref`."""
        ...


class FileStoreProtocol(Protocol):
    """Filesystem operations on project-relative paths."""

    async def exists(self, path: str) -> bool:
        """True if `path` exists (file, directory or link)."""
        ...

    async def is_file(self, path: str) -> bool:
        """True if `path` is a regular file."""
        ...

    async def copy_recursive(self, source: str, destination: str, overwrite: bool = True) -> None:
        """Copy `source` onto `destination`, creating missing parent directories.

        Raises:
            SourceMissingError: If `source` matches nothing
        """
        ...

    async def remove_recursive(self, path: str) -> None:
        """Delete `path`, and everything below it if it is a directory."""
        ...

    async def make_directories(self, path: str) -> None:
        """Create `path` and any missing parents."""
        ...
