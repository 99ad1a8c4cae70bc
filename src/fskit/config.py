"""Settings shared by the filesystem, tree and document layers."""

from __future__ import annotations

import json
from pathlib import Path

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError


class FsSettings(BaseModel):
    """Tunable defaults for fskit operations."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    encoding: str = "utf-8"
    json_indent: int = Field(default=4, alias="jsonIndent", ge=0)
    head_bytes: int = Field(default=20, alias="headBytes", gt=0)
    temp_prefix: str = Field(default=".tmp-", alias="tempPrefix")
    hash_algorithm: str = Field(default="md5", alias="hashAlgorithm")
    directory_mode: int = Field(default=0o755, alias="directoryMode")
    csv_delimiter: str = Field(default=",", alias="csvDelimiter", min_length=1, max_length=1)
    xml_root: str = Field(default="root", alias="xmlRoot")

    @classmethod
    def create_default(cls) -> FsSettings:
        """Create settings with every default applied."""
        return cls()

    @classmethod
    def from_file(cls, path: Path) -> FsSettings:
        """Load settings from a JSON or YAML file.

        Args:
            path: Path to a .json, .yaml or .yml file.

        Returns:
            Parsed FsSettings.

        Raises:
            FileNotFoundError: If file doesn't exist.
            ValueError: If the content is not a valid settings mapping.
        """
        if not path.exists():
            raise FileNotFoundError(f"Settings file not found: {path}")

        text = path.read_text(encoding="utf-8")
        try:
            if path.suffix.lower() in (".yaml", ".yml"):
                data = yaml.safe_load(text) or {}
            else:
                data = json.loads(text)
        except (yaml.YAMLError, json.JSONDecodeError) as e:
            raise ValueError(f"Invalid settings file {path}: {e}") from e

        if not isinstance(data, dict):
            raise ValueError(f"Settings file must contain a mapping: {path}")

        try:
            return cls.model_validate(data)
        except ValidationError as e:
            raise ValueError(f"Invalid settings in {path}: {e}") from e
