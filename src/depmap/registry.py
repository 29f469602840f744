"""Dependency registry - the on-disk list of declared dependencies.

Registry format (JSON array, declaration order is install order):
[
    {
        "name": "widgets",
        "repo": "https://github.com/acme/widgets.git",
        "out": "/vendor/widgets"
    }
]

The registry path is injected by the app. Records are validated when the
file is read and again before it is written; a failed save leaves the file
untouched.
"""

import json
import logging
import os
from collections.abc import Iterable
from pathlib import Path

from .exceptions import DependencyNotFoundError
from .exceptions import DependencyValidationError
from .exceptions import DuplicateDependencyError
from .mapping import add_destination
from .schema import DependencyRecord
from .utils import extract_dependency_name_from_repo
from .validation import validate_dependency
from .validation import validate_name
from .validation import validate_repo

logger = logging.getLogger(__name__)

DEFAULT_REGISTRY_FILE = "dep.json"


class DependencyRegistry:
    """
    Dependency registry manager (with injected registry path).

    Holds the ordered records in memory; every mutating method saves the file
    before returning.
    """

    def __init__(self, registry_path: Path):
        """Initialize registry with app-provided file path and load it.

        An absent file is created holding an empty array.

        Args:
            registry_path: Path to registry file (app determines location)

        Raises:
            DependencyValidationError: If the file is unreadable or holds an invalid record

        Example:
            >>> registry = DependencyRegistry(registry_path=Path("dep.json"))
        """
        self.registry_path = registry_path
        self._records: list[DependencyRecord] = []
        self._load()

    def _read(self) -> object:
        """Read and parse the registry file, creating it if absent."""
        try:
            if not self.registry_path.exists():
                self.registry_path.parent.mkdir(parents=True, exist_ok=True)
                self.registry_path.write_text("[]\n", encoding="utf-8")
                logger.debug(f"Created empty registry at {self.registry_path}")
            with open(self.registry_path, encoding="utf-8") as f:
                return json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise DependencyValidationError(
                f"Failed to read or parse dependency file at {self.registry_path}: {e}",
                context={"registry_path": str(self.registry_path)},
            ) from e

    def _load(self) -> None:
        data = self._read()
        if not isinstance(data, list):
            raise DependencyValidationError(
                f"Dependency file {self.registry_path} must contain an array.",
                context={"registry_path": str(self.registry_path)},
            )

        self._records = [DependencyRecord.from_dict(item) for item in data]
        logger.debug(f"Loaded {len(self._records)} dependencies from {self.registry_path}")

    def save(self, records: list[DependencyRecord] | None = None) -> None:
        """
        Validate and write records to the registry file.

        Args:
            records: New record list (defaults to the current one)

        Raises:
            DependencyValidationError: If any record is malformed
            DuplicateDependencyError: If two records share a name
        """
        records = self._records if records is None else records

        data = []
        seen: set[str] = set()
        for record in records:
            item = record.to_dict()
            validate_dependency(item)
            if record.name in seen:
                raise DuplicateDependencyError(
                    f'Duplicate dependency name found: "{record.name}".',
                    context={"name": record.name},
                )
            seen.add(record.name)
            data.append(item)

        content = json.dumps(data, indent=4) + "\n"
        tmp_path = self.registry_path.with_name(self.registry_path.name + ".tmp")
        try:
            tmp_path.write_text(content, encoding="utf-8")
            os.replace(tmp_path, self.registry_path)
        except OSError as e:
            raise DependencyValidationError(
                f"Failed to write dependency file at {self.registry_path}: {e}",
                context={"registry_path": str(self.registry_path)},
            ) from e

        self._records = list(records)
        logger.debug(f"Saved registry with {len(self._records)} dependencies")

    @property
    def records(self) -> list[DependencyRecord]:
        """Declared dependencies in declaration order (a copy)."""
        return list(self._records)

    def find(self, identifier: str) -> DependencyRecord:
        """
        Look up a dependency by name or repository URL.

        Raises:
            DependencyNotFoundError: If no record matches
        """
        for record in self._records:
            if record.matches(identifier):
                return record
        raise DependencyNotFoundError(f'Dependency "{identifier}" not found.', context={"identifier": identifier})

    def select(self, identifiers: Iterable[str] = ()) -> list[DependencyRecord]:
        """
        Records matching any identifier, in declaration order.

        No identifiers selects every record. Unknown identifiers are ignored;
        callers decide whether an empty result is an error.
        """
        wanted = list(identifiers)
        if not wanted:
            return self.records
        return [record for record in self._records if any(record.matches(i) for i in wanted)]

    def add(self, repo: str, name: str | None = None) -> DependencyRecord:
        """
        Declare a new dependency.

        Args:
            repo: Repository URL
            name: Dependency name (defaults to the repo's last path segment)

        Returns:
            The new record

        Raises:
            DependencyValidationError: If repo or name is invalid
            DuplicateDependencyError: If the name is already taken
        """
        validate_repo(repo)
        name = name or extract_dependency_name_from_repo(repo)
        validate_name(name)

        if any(record.name == name for record in self._records):
            raise DuplicateDependencyError(
                f'A dependency with the name "{name}" already exists.',
                context={"name": name},
            )

        record = DependencyRecord(name=name, repo=repo)
        self.save([*self._records, record])
        logger.info(f"Added dependency {name}")
        return record

    def remove(self, identifier: str) -> list[DependencyRecord]:
        """
        Remove every dependency whose name or repo equals `identifier`.

        Returns:
            The removed records

        Raises:
            DependencyNotFoundError: If nothing matched
        """
        kept = [record for record in self._records if not record.matches(identifier)]
        removed = [record for record in self._records if record.matches(identifier)]
        if not removed:
            raise DependencyNotFoundError(f'Dependency "{identifier}" not found.', context={"identifier": identifier})

        self.save(kept)
        logger.info(f"Removed dependency {identifier}")
        return removed

    def set_output(self, identifier: str, destination: str, sub_path: str | None = None) -> DependencyRecord:
        """
        Add an output destination to a dependency's mapping.

        The grown mapping replaces the old one only if the updated record
        validates and the registry saves.

        Args:
            identifier: Dependency name or repo URL
            destination: Destination path to add
            sub_path: Source sub-path inside the dependency (None for the whole tree)

        Returns:
            The updated record

        Raises:
            DependencyNotFoundError: If no record matches
            DependencyValidationError: If the resulting mapping is invalid
        """
        current = self.find(identifier)
        updated = current.model_copy(update={"out": add_destination(current.out, destination, sub_path)})
        records = [updated if record is current else record for record in self._records]

        self.save(records)
        logger.info(f"Updated dependency output for {current.name}")
        return updated
