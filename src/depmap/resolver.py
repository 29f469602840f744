"""Mapping resolver - turn output mappings into concrete paths.

Pure functions only. The install engine asks for a copy plan, the uninstall
path asks for the flattened destination list; both read the same mapping so
they always agree on what belongs to a dependency.
"""

from .mapping import ROOT
from .mapping import Keyed
from .mapping import Multi
from .mapping import Single

WHOLE_TREE = "*"


def resolve_source_path(local_folder: str, sub_path: str = WHOLE_TREE) -> str:
    """Join a dependency's local folder and a sub-path into a source path.

    The result is a shell word: spaces are escaped and the default "*" selects
    everything in the fetched tree.

    Args:
        local_folder: Folder the dependency was fetched into (e.g., ".dep/widgets")
        sub_path: Path relative to the fetched root; a leading "/" is ignored

    Returns:
        Source path such as ".dep/widgets/src/core"

    Examples:
        >>> resolve_source_path(".dep/widgets/", "/src")
        '.dep/widgets/src'
        >>> resolve_source_path("vendor files")
        'vendor\\\\ files/*'
    """
    if sub_path.startswith("/"):
        sub_path = sub_path[1:]
    if local_folder.endswith("/"):
        local_folder = local_folder[:-1]
    return f"{local_folder}/{sub_path}".replace(" ", "\\ ")


def _leaf_paths(leaf: Single | Multi) -> list[str]:
    if isinstance(leaf, Single):
        return [leaf.path]
    return list(leaf.paths)


def flatten_destinations(mapping: Single | Multi | Keyed | None) -> list[str]:
    """List every destination path in a mapping, whatever its shape.

    Order follows the mapping (keys in insertion order, paths in list order);
    duplicates are kept. Which sub-path fed each destination is dropped.
    """
    if mapping is None:
        return []
    if isinstance(mapping, Keyed):
        folders: list[str] = []
        for leaf in mapping.entries.values():
            folders.extend(_leaf_paths(leaf))
        return folders
    return _leaf_paths(mapping)


def copy_plan(mapping: Single | Multi | Keyed | None) -> list[tuple[str, list[str]]]:
    """Pair each source sub-path with the destinations it is copied to.

    A Single or Multi mapping copies the whole tree ("*"). Under a Keyed mapping
    the "/" key also means the whole tree; other keys are used as given.

    Returns:
        (sub_path, destinations) pairs in mapping order. Empty when there is no mapping.
    """
    if mapping is None:
        return []
    if isinstance(mapping, Keyed):
        return [
            (WHOLE_TREE if key == ROOT else key, _leaf_paths(leaf))
            for key, leaf in mapping.entries.items()
        ]
    return [(WHOLE_TREE, _leaf_paths(mapping))]
