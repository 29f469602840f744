"""Dependency installation mechanism (protocol-based).

The engine does not know HOW to fetch or copy: apps pass a version-control
client and a file store. It decides WHAT to do for one dependency:

- install: clone (or pull, or force re-clone), then copy every mapped source
  to its destinations
- uninstall: remove the local clone and every destination in the mapping

Install walks resolver.copy_plan, uninstall walks resolver.flatten_destinations.
Both come from the same mapping, so uninstall removes exactly what install
created.
"""

import logging

from .exceptions import DependencyError
from .exceptions import DependencyInstallError
from .exceptions import SourceMissingError
from .protocols import FileStoreProtocol
from .protocols import VersionControlProtocol
from .resolver import copy_plan
from .resolver import flatten_destinations
from .resolver import resolve_source_path
from .schema import DEFAULT_WORKSPACE_DIR
from .schema import DependencyRecord
from .schema import FolderKind

logger = logging.getLogger(__name__)


async def _fetch(
    record: DependencyRecord,
    vcs: VersionControlProtocol,
    files: FileStoreProtocol,
    workspace_dir: str,
    force: bool,
) -> list[str]:
    """Clone the dependency, or pull it if a clone is already present."""
    output: list[str] = []
    folder = record.local_folder(workspace_dir)

    if await files.exists(folder):
        if not force:
            output.append(f"Pulling {folder}")
            logger.debug(f"Pulling {record.name} in {folder}")
            result = await vcs.pull(folder, record.branch)
            if result:
                output.append(result)
            return output
        # Forced reinstall starts from a clean slate
        output.extend(await uninstall_dependency(record, files=files, workspace_dir=workspace_dir))

    output.append(f"Cloning {record.repo} into {folder}")
    logger.debug(f"Cloning {record.repo} into {folder}")
    result = await vcs.clone(record.repo, folder, record.branch)
    if result:
        output.append(result)
    return output


async def install_dependency(
    record: DependencyRecord,
    vcs: VersionControlProtocol,
    files: FileStoreProtocol,
    workspace_dir: str = DEFAULT_WORKSPACE_DIR,
    force: bool = False,
) -> list[str]:
    """
    Install one dependency: fetch it, then distribute its files.

    Process:
    1. Workspace dependency: clone it, or pull if the local folder already
       exists (with `force`, uninstall first and clone fresh).
       Local alias: skip version control; the folder must already exist.
    2. For every (sub-path, destinations) pair in the output mapping, copy the
       resolved source into each destination.

    Args:
        record: Dependency to install
        vcs: Version-control client
        files: File store for project-relative paths
        workspace_dir: Folder that holds fetched dependencies
        force: Re-clone even if the local folder exists

    Returns:
        Human-readable log of every operation performed, in order

    Raises:
        ExternalToolError: If clone or pull fails
        SourceMissingError: If a mapped source path does not exist
        DependencyInstallError: If copying fails for any other reason

    Example:
        >>> files = LocalFileStore(Path.cwd())
        >>> log = await install_dependency(record, vcs=GitClient(Path.cwd()), files=files)
    """
    folder = record.local_folder(workspace_dir)
    logger.info(f"Installing dependency: {record.name}")

    if record.kind is FolderKind.LOCAL_ALIAS:
        if not await files.exists(folder):
            raise SourceMissingError(
                f"Local folder {folder} of dependency {record.name} does not exist.",
                context={"name": record.name, "folder": folder},
            )
        output = [f"Using local folder {folder}"]
    else:
        output = await _fetch(record, vcs, files, workspace_dir, force)

    for sub_path, destinations in copy_plan(record.out):
        source = resolve_source_path(folder, sub_path)
        for destination in destinations:
            logger.debug(f"Copying {source} to {destination}")
            try:
                await files.copy_recursive(source, destination, overwrite=True)
            except DependencyError:
                raise
            except Exception as e:
                raise DependencyInstallError(
                    f"Failed to copy files from {record.name} to {destination}: {e}",
                    context={"name": record.name, "source": source, "destination": destination},
                ) from e
            output.append(f"Copying {source} to {destination}")

    logger.info(f"Successfully installed dependency: {record.name}")
    return output


async def uninstall_dependency(
    record: DependencyRecord,
    files: FileStoreProtocol,
    workspace_dir: str = DEFAULT_WORKSPACE_DIR,
) -> list[str]:
    """
    Uninstall one dependency: remove its local clone and all destinations.

    Paths that do not exist are skipped, so uninstalling twice (or after the
    clone was deleted by hand) succeeds. A local alias folder belongs to the
    project, not to the dependency, and is left in place.

    Args:
        record: Dependency to uninstall
        files: File store for project-relative paths
        workspace_dir: Folder that holds fetched dependencies

    Returns:
        Human-readable log of every removal, in order

    Raises:
        DependencyInstallError: If a path exists but cannot be removed
    """
    logger.info(f"Uninstalling dependency: {record.name}")

    folders = flatten_destinations(record.out)
    if record.kind is FolderKind.WORKSPACE:
        folders = [record.local_folder(workspace_dir), *folders]

    output: list[str] = []
    for folder in folders:
        if not await files.exists(folder):
            continue
        try:
            await files.remove_recursive(folder)
        except Exception as e:
            raise DependencyInstallError(
                f"Failed to remove {folder} of dependency {record.name}: {e}",
                context={"name": record.name, "folder": folder},
            ) from e
        output.append(f"Removing {folder}")

    logger.info(f"Successfully uninstalled: {record.name}")
    return output
