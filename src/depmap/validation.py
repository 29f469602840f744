"""Structural validation of dependency records as they appear in the registry.

Each check fails fast with its own message; nothing is coerced. Validation runs
on the raw JSON form, both when a registry is loaded and before it is saved.
"""

import posixpath
import re
from typing import Any

from .exceptions import DependencyValidationError

REPO_PATTERN = re.compile(r"^https://github\.com/[^/\s]+/[^/\s]+?(?:\.git)?$")

RECORD_KEYS = frozenset({"name", "repo", "branch", "out"})

_OUT_SHAPE = 'Dependency "out" property must be a string, an array of strings, or an object of those.'


def validate_name(name: Any) -> None:
    """Validate the `name` property.

    Raises:
        DependencyValidationError: If the name is missing, not a string or empty
    """
    if name is None:
        raise DependencyValidationError("Dependency is missing a name")
    if not isinstance(name, str):
        raise DependencyValidationError("Dependency name is not a string.")
    if not name:
        raise DependencyValidationError("Dependency name is empty.")


def validate_repo(repo: Any) -> None:
    """Validate the repository URL.

    Only https://github.com/<owner>/<name>[.git] is accepted.

    Raises:
        DependencyValidationError: If the URL is missing, not a string or malformed
    """
    if repo is None:
        raise DependencyValidationError("Dependency is missing a repo")
    if not isinstance(repo, str):
        raise DependencyValidationError("Dependency repo is not a string.")
    if not REPO_PATTERN.match(repo):
        raise DependencyValidationError(
            f'Dependency repo "{repo}" is not a valid GitHub repo URL.',
            context={"repo": repo},
        )


def validate_branch(branch: Any) -> None:
    """Validate the optional `branch` property."""
    if branch is None:
        return
    if not isinstance(branch, str):
        raise DependencyValidationError("Dependency branch is not a string.")
    if not branch:
        raise DependencyValidationError("Dependency branch is empty.")


def _validate_destination(folder: str) -> None:
    """A destination must be a non-empty path strictly below the project root."""
    if not folder:
        raise DependencyValidationError('Dependency "out" property contains an empty path.')
    normalized = posixpath.normpath(folder.lstrip("/"))
    if normalized == "." or normalized == ".." or normalized.startswith("../"):
        raise DependencyValidationError(
            f'Dependency "out" destination "{folder}" must be a path inside the project, below its root.',
            context={"destination": folder},
        )


def _validate_paths(out: Any) -> None:
    """Check a Single (str) or Multi (list of str) value."""
    if isinstance(out, str):
        _validate_destination(out)
        return
    if isinstance(out, list):
        for folder in out:
            if not isinstance(folder, str):
                raise DependencyValidationError('Dependency "out" property must be an array of strings.')
            _validate_destination(folder)
        return
    if isinstance(out, dict):
        raise DependencyValidationError('Dependency "out" sub-path entries cannot be nested objects.')
    raise DependencyValidationError(_OUT_SHAPE)


def validate_out(out: Any) -> None:
    """Validate the optional `out` property (an output mapping in JSON form).

    Accepted shapes: a non-empty string, an array of non-empty strings, or an
    object whose keys are non-empty sub-paths and whose values are either of
    the first two shapes.
    """
    if out is None:
        return
    if isinstance(out, dict):
        for key, value in out.items():
            if not isinstance(key, str) or not key:
                raise DependencyValidationError('Dependency "out" property has an empty sub-path key.')
            _validate_paths(value)
        return
    _validate_paths(out)


def validate_dependency(data: Any) -> None:
    """Validate a full dependency record.

    Raises:
        DependencyValidationError: On the first problem found
    """
    if not isinstance(data, dict):
        raise DependencyValidationError("Dependency definition must be an object.")

    validate_name(data.get("name"))
    validate_repo(data.get("repo"))
    validate_branch(data.get("branch"))
    validate_out(data.get("out"))

    unknown = sorted(set(data) - RECORD_KEYS)
    if unknown:
        raise DependencyValidationError(
            f"Dependency \"{data['name']}\" has unknown properties: {', '.join(unknown)}.",
            context={"name": data["name"], "unknown": unknown},
        )
