"""Dependency record schema - one declared external source tree.

Records are frozen: operations that change a dependency build a new record
and hand it back to the registry, which replaces the old one by value.
"""

from enum import StrEnum
from pathlib import PurePosixPath
from typing import Any

from pydantic import BaseModel
from pydantic import ConfigDict

from .mapping import OutputMapping
from .mapping import mapping_from_json
from .mapping import mapping_to_json
from .validation import validate_dependency

DEFAULT_WORKSPACE_DIR = ".dep"


class FolderKind(StrEnum):
    """Where a dependency's local tree lives."""

    # Fetched by version control into the hidden workspace directory
    WORKSPACE = "workspace"
    # Name is a literal project-relative path; never cloned or pulled
    LOCAL_ALIAS = "local_alias"


class DependencyRecord(BaseModel):
    """
    One entry in the dependency registry.

    JSON form (as stored in the registry file):
    {
        "name": "widgets",
        "repo": "https://github.com/acme/widgets.git",
        "branch": "main",
        "out": {"src/core": "/lib/core", "/": ["/vendor/widgets"]}
    }

    `branch` and `out` are optional and omitted from the JSON when unset.
    """

    model_config = ConfigDict(frozen=True)

    name: str
    repo: str
    branch: str | None = None
    out: OutputMapping | None = None

    @property
    def kind(self) -> FolderKind:
        """Local aliases are names starting with "."."""
        return FolderKind.LOCAL_ALIAS if self.name.startswith(".") else FolderKind.WORKSPACE

    def local_folder(self, workspace_dir: str = DEFAULT_WORKSPACE_DIR) -> str:
        """Project-relative folder holding this dependency's tree."""
        if self.kind is FolderKind.LOCAL_ALIAS:
            return self.name
        return str(PurePosixPath(workspace_dir) / self.name)

    def matches(self, identifier: str) -> bool:
        """True if `identifier` is this record's name or repo URL."""
        return identifier in (self.name, self.repo)

    def to_dict(self) -> dict[str, Any]:
        """Convert to the registry JSON form."""
        data: dict[str, Any] = {"name": self.name, "repo": self.repo}
        if self.branch is not None:
            data["branch"] = self.branch
        if self.out is not None:
            data["out"] = mapping_to_json(self.out)
        return data

    @classmethod
    def from_dict(cls, data: Any) -> "DependencyRecord":
        """Validate a registry JSON object and build a record from it.

        Raises:
            DependencyValidationError: If `data` is not a well-formed record
        """
        validate_dependency(data)
        return cls(
            name=data["name"],
            repo=data["repo"],
            branch=data.get("branch"),
            out=mapping_from_json(data.get("out")),
        )
