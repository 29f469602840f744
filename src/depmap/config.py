"""Configuration loading.

Settings are loaded in priority order (highest first):
  1. Command-line options     (--file, --root)
  2. Environment variables    (DEPMAP_REGISTRY_FILE=deps.json)
  3. Hardcoded defaults
"""

from pathlib import Path
from typing import Literal

from pydantic_settings import BaseSettings
from pydantic_settings import SettingsConfigDict

from .registry import DEFAULT_REGISTRY_FILE
from .schema import DEFAULT_WORKSPACE_DIR


class DepSettings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="DEPMAP_")

    project_root: Path = Path(".")
    # Relative to project_root
    registry_file: str = DEFAULT_REGISTRY_FILE
    workspace_dir: str = DEFAULT_WORKSPACE_DIR
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "WARNING"

    @property
    def registry_path(self) -> Path:
        return self.project_root / self.registry_file
