"""depmap - vendor source dependencies by fetching them and copying mapped paths.

Public API exports.

The library is mechanism; apps inject policy (registry path, workspace
folder, version-control client, file store).
"""

from .exceptions import DependencyError
from .exceptions import DependencyInstallError
from .exceptions import DependencyNotFoundError
from .exceptions import DependencyValidationError
from .exceptions import DuplicateDependencyError
from .exceptions import ExternalToolError
from .exceptions import SourceMissingError
from .filestore import LocalFileStore
from .installer import install_dependency
from .installer import uninstall_dependency
from .mapping import ROOT
from .mapping import Keyed
from .mapping import Multi
from .mapping import Single
from .mapping import add_destination
from .mapping import mapping_from_json
from .mapping import mapping_to_json
from .protocols import FileStoreProtocol
from .protocols import VersionControlProtocol
from .registry import DependencyRegistry
from .resolver import copy_plan
from .resolver import flatten_destinations
from .resolver import resolve_source_path
from .schema import DependencyRecord
from .schema import FolderKind
from .utils import extract_dependency_name_from_repo
from .validation import validate_dependency
from .validation import validate_out
from .vcs import GitClient

__all__ = [
    # Records
    "DependencyRecord",
    "FolderKind",
    "validate_dependency",
    "validate_out",
    # Output mapping
    "ROOT",
    "Single",
    "Multi",
    "Keyed",
    "add_destination",
    "mapping_from_json",
    "mapping_to_json",
    # Resolution
    "resolve_source_path",
    "flatten_destinations",
    "copy_plan",
    # Installation
    "install_dependency",
    "uninstall_dependency",
    "VersionControlProtocol",
    "FileStoreProtocol",
    "GitClient",
    "LocalFileStore",
    # Registry
    "DependencyRegistry",
    # Exceptions
    "DependencyError",
    "DependencyInstallError",
    "DependencyNotFoundError",
    "DependencyValidationError",
    "DuplicateDependencyError",
    "ExternalToolError",
    "SourceMissingError",
    # Utilities
    "extract_dependency_name_from_repo",
]

__version__ = "0.1.0"
