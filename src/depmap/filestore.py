"""Local filesystem store anchored at the project root.

All paths are project-relative; a leading "/" also means "from the project
root", so "/vendor/widgets" lands in <root>/vendor/widgets.

Source paths passed to copy_recursive are shell words as produced by
resolve_source_path: "\\ " is an escaped space and "*", "?" and "[...]" are
glob patterns, unless a path of that exact name exists. A bare "*" skips
dot-entries, so a clone's .git directory is never copied.
"""

import asyncio
import glob
import logging
import shutil
from pathlib import Path

from .exceptions import SourceMissingError

logger = logging.getLogger(__name__)

_GLOB_CHARS = frozenset("*?[")


def _unescape(source: str) -> str:
    return source.replace("\\ ", " ")


def _is_pattern(path: str) -> bool:
    return any(char in _GLOB_CHARS for char in path)


class LocalFileStore:
    """FileStoreProtocol implementation on top of shutil and glob."""

    def __init__(self, root: Path):
        """Initialize with the project root every relative path is resolved against.

        Args:
            root: Project root directory
        """
        self.root = root

    def resolve(self, path: str) -> Path:
        """Absolute location of a project-relative path."""
        return self.root / path.lstrip("/")

    async def exists(self, path: str) -> bool:
        return self.resolve(path).exists()

    async def is_file(self, path: str) -> bool:
        return self.resolve(path).is_file()

    async def make_directories(self, path: str) -> None:
        await asyncio.to_thread(self.resolve(path).mkdir, parents=True, exist_ok=True)

    async def remove_recursive(self, path: str) -> None:
        await asyncio.to_thread(self._remove, self.resolve(path))

    async def copy_recursive(self, source: str, destination: str, overwrite: bool = True) -> None:
        """Copy a source path (or glob) onto a destination.

        - Directory source: its contents are merged into `destination`
        - File source: copied to `destination`, or into it when it is an existing directory
        - Glob source: every match is copied into the `destination` directory

        Missing parent directories of `destination` are created.

        Raises:
            SourceMissingError: If the source does not exist or the glob matches nothing
        """
        await asyncio.to_thread(self._copy, source, destination, overwrite)

    def _copy(self, source: str, destination: str, overwrite: bool) -> None:
        pattern = _unescape(source)
        target = self.resolve(destination)
        item = self.resolve(pattern)

        # An existing path is copied as-is even if its name has glob characters ("routes/[id]")
        if not item.exists() and _is_pattern(pattern):
            matches = sorted(glob.glob(pattern.lstrip("/"), root_dir=self.root))
            if not matches:
                raise SourceMissingError(
                    f"Source path {source} does not exist.",
                    context={"source": source},
                )
            target.mkdir(parents=True, exist_ok=True)
            for match in matches:
                matched = self.root / match
                self._copy_item(matched, target / matched.name, overwrite)
            return

        if not item.exists():
            raise SourceMissingError(f"Source path {source} does not exist.", context={"source": source})
        if item.is_file() and target.is_dir():
            target = target / item.name
        self._copy_item(item, target, overwrite)

    def _copy_item(self, item: Path, target: Path, overwrite: bool) -> None:
        if target.exists() and not overwrite:
            logger.debug(f"Keeping existing {target}")
            return
        if item.is_dir():
            if target.exists() and not target.is_dir():
                target.unlink()
            shutil.copytree(item, target, dirs_exist_ok=True)
            return
        if target.is_dir():
            shutil.rmtree(target)
        target.parent.mkdir(parents=True, exist_ok=True)
        shutil.copy2(item, target)

    @staticmethod
    def _remove(path: Path) -> None:
        if path.is_dir() and not path.is_symlink():
            shutil.rmtree(path)
        else:
            path.unlink()
