"""Configuration loader for the literature parser."""

import os
from pathlib import Path

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, Field, field_validator

from litparse.models.rules import SegmentationRules


class AppInfo(BaseModel):
    """Application metadata."""

    name: str = "Literature Parser"
    version: str = "1.0.0"


class StorageConfig(BaseModel):
    """Storage paths configuration."""

    literature_dir: str = "./public/literature"


class OutputConfig(BaseModel):
    """JSON output configuration."""

    indent: int = 2
    words_per_minute: int = 200

    @field_validator("words_per_minute")
    @classmethod
    def positive_rate(cls, value: int) -> int:
        """Reject a zero or negative reading speed."""
        if value <= 0:
            raise ValueError("words_per_minute must be positive")
        return value


class WorkConfig(BaseModel):
    """Profile for one literary work: its sources, output and rules.

    ``sources`` and ``output`` are relative to the literature directory
    unless absolute. Several sources are read in order as one text.
    """

    title: str
    author: str | None = None
    year: int | None = None
    sources: list[str]
    output: str
    include_statistics: bool = False
    rules: SegmentationRules = Field(default_factory=SegmentationRules)

    @field_validator("sources")
    @classmethod
    def at_least_one_source(cls, value: list[str]) -> list[str]:
        """Reject a work with an empty source list."""
        if not value:
            raise ValueError("A work needs at least one source file")
        return value

    def source_paths(self, base_dir: str | Path) -> list[Path]:
        """Resolve the source files against the literature directory.

        Args:
            base_dir: The literature directory.

        Returns:
            One path per source, in reading order. Absolute sources are
            returned unchanged.
        """
        return [Path(base_dir) / source for source in self.sources]

    def output_path(self, base_dir: str | Path) -> Path:
        """Resolve the output JSON file against the literature directory.

        Args:
            base_dir: The literature directory.

        Returns:
            The destination path, or ``output`` itself when it is absolute.
        """
        return Path(base_dir) / self.output


class AppConfig(BaseModel):
    """Root application configuration."""

    app: AppInfo = Field(default_factory=AppInfo)
    storage: StorageConfig = Field(default_factory=StorageConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)
    works: dict[str, WorkConfig] = Field(default_factory=dict)


def load_config(config_path: str | Path = "config.yaml") -> AppConfig:
    """Load configuration from YAML file and environment variables.

    Args:
        config_path: Path to the YAML configuration file.

    Returns:
        Fully populated AppConfig instance.
    """
    load_dotenv()

    yaml_data: dict = {}
    config_file = Path(config_path)
    if config_file.exists():
        with open(config_file, encoding="utf-8") as f:
            yaml_data = yaml.safe_load(f) or {}

    config = AppConfig(**yaml_data)

    # Override the literature directory from environment
    literature_dir = os.getenv("LITERATURE_DIR")
    if literature_dir:
        config.storage.literature_dir = literature_dir

    return config
