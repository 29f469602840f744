"""Output mapping model - where a dependency's files end up.

An output mapping has exactly three shapes:

- Single: one destination path ("/vendor/widgets")
- Multi: an ordered list of destination paths (["/vendor/widgets", "/lib/widgets"])
- Keyed: source sub-path -> Single or Multi ({"src/core": "/lib/core", "/": [...]})

Keyed values are never Keyed themselves. The key "/" stands for the
dependency's whole fetched tree.

On disk the mapping keeps the untyped JSON form (str | list | dict); in memory
it is one of the frozen models below, so code dispatches on the type rather
than sniffing JSON values.
"""

from typing import Annotated
from typing import Any
from typing import Literal

from pydantic import BaseModel
from pydantic import ConfigDict
from pydantic import Field

from .validation import validate_out

ROOT = "/"


class Single(BaseModel):
    """One destination path."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["single"] = "single"
    path: str


class Multi(BaseModel):
    """Several destination paths, copied in order. Duplicates are kept."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["multi"] = "multi"
    paths: tuple[str, ...]


Leaf = Annotated[Single | Multi, Field(discriminator="kind")]


class Keyed(BaseModel):
    """Source sub-path -> destinations. Insertion order is copy order."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["keyed"] = "keyed"
    entries: dict[str, Leaf]


OutputMapping = Annotated[Single | Multi | Keyed, Field(discriminator="kind")]


def normalize_sub_path(sub_path: str | None) -> str:
    """Map "no sub-path given" (None, "", "/") to ROOT."""
    if not sub_path or sub_path == ROOT:
        return ROOT
    return sub_path


def _grow(leaf: Single | Multi | None, destination: str) -> Single | Multi:
    if leaf is None:
        return Single(path=destination)
    if isinstance(leaf, Single):
        return Multi(paths=(leaf.path, destination))
    return Multi(paths=(*leaf.paths, destination))


def add_destination(
    mapping: Single | Multi | Keyed | None,
    destination: str,
    sub_path: str | None = None,
) -> Single | Multi | Keyed:
    """Return a new mapping that also copies `sub_path` to `destination`.

    Never drops an existing destination: Single grows into Multi, and a
    Single/Multi that needs a sub-path key is promoted to Keyed with its
    previous value kept under "/".

    Args:
        mapping: Current mapping (None when the dependency has no output yet)
        destination: Destination path to add
        sub_path: Source sub-path inside the dependency (None or "/" for the whole tree)

    Returns:
        The grown mapping. The input is left untouched.

    Example:
        >>> add_destination(Single(path="a"), "b", "x")
        Keyed(kind='keyed', entries={'x': Single(kind='single', path='b'), '/': Single(kind='single', path='a')})
    """
    key = normalize_sub_path(sub_path)

    if mapping is None:
        if key == ROOT:
            return Single(path=destination)
        return Keyed(entries={key: Single(path=destination)})

    if isinstance(mapping, Keyed):
        entries = dict(mapping.entries)
        entries[key] = _grow(entries.get(key), destination)
        return Keyed(entries=entries)

    if key == ROOT:
        return _grow(mapping, destination)

    return Keyed(entries={key: Single(path=destination), ROOT: mapping})


def _leaf_from_json(raw: str | list[str]) -> Single | Multi:
    if isinstance(raw, str):
        return Single(path=raw)
    return Multi(paths=tuple(raw))


def mapping_from_json(raw: Any) -> Single | Multi | Keyed | None:
    """Build a mapping from its registry JSON form.

    Raises:
        DependencyValidationError: If `raw` is not a well-formed mapping
    """
    validate_out(raw)
    if raw is None:
        return None
    if isinstance(raw, dict):
        return Keyed(entries={key: _leaf_from_json(value) for key, value in raw.items()})
    return _leaf_from_json(raw)


def mapping_to_json(mapping: Single | Multi | Keyed | None) -> str | list[str] | dict[str, Any] | None:
    """Convert a mapping back to its registry JSON form."""
    if mapping is None:
        return None
    if isinstance(mapping, Single):
        return mapping.path
    if isinstance(mapping, Multi):
        return list(mapping.paths)
    return {key: mapping_to_json(value) for key, value in mapping.entries.items()}
