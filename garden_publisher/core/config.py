"""Publisher configuration loaded from a YAML file."""

import os
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator, model_validator

from garden_publisher.core.models import ConfigError

DEFAULT_NOTES_PREFIX = "src/site/notes"
DEFAULT_API_URL = "https://api.github.com"


class PublisherConfig(BaseModel):
    """Settings for publishing a vault to a GitHub-hosted garden site."""
    vault_path: Path = Path(".")
    github_repo: str = ""
    github_user_name: str = ""
    github_token: str = ""
    token_env: str = "GITHUB_TOKEN"
    notes_prefix: str = DEFAULT_NOTES_PREFIX
    api_url: str = DEFAULT_API_URL
    max_transclusion_depth: int = Field(default=1, ge=0)
    strict_lookup: bool = False
    timeout: float = Field(default=30.0, gt=0)

    @field_validator("vault_path")
    @classmethod
    def _expand_vault_path(cls, value: Path) -> Path:
        return value.expanduser()

    @model_validator(mode="after")
    def _token_from_environment(self) -> "PublisherConfig":
        if not self.github_token:
            self.github_token = os.environ.get(self.token_env, "")
        return self

    @classmethod
    def from_dict(cls, data: Dict[str, Any], base_dir: Optional[Path] = None) -> "PublisherConfig":
        """Build a config from a mapping, ignoring unknown keys.

        Args:
            data: Parsed settings
            base_dir: Directory a relative vault_path is resolved against

        Raises:
            ConfigError: If a setting has the wrong type or is out of range
        """
        values = {k: v for k, v in data.items() if k in cls.model_fields and v is not None}
        try:
            config = cls(**values)
        except ValidationError as e:
            problems = "; ".join(
                f"{'.'.join(str(loc) for loc in err['loc'])}: {err['msg']}"
                for err in e.errors()
            )
            raise ConfigError(f"Config error: {problems}") from e
        if base_dir is not None and not config.vault_path.is_absolute():
            config.vault_path = Path(base_dir) / config.vault_path
        return config

    @classmethod
    def from_yaml(cls, path: Union[str, Path]) -> "PublisherConfig":
        """Load settings from a YAML file.

        Raises:
            ConfigError: If the file cannot be read, is not a mapping or
                         holds invalid values
        """
        path = Path(path)
        try:
            data = yaml.safe_load(path.read_text(encoding='utf-8')) or {}
        except (OSError, yaml.YAMLError) as e:
            raise ConfigError(f"Cannot load config {path}: {e}") from e
        if not isinstance(data, dict):
            raise ConfigError(f"Config {path} must be a mapping")
        return cls.from_dict(data, base_dir=path.parent)

    def validate_settings(self) -> None:
        """Ensure the GitHub settings needed for uploading are present.

        Raises:
            ConfigError: Naming the first missing setting
        """
        if not self.github_repo:
            raise ConfigError("Config error: You need to define a GitHub repo in the settings")
        if not self.github_user_name:
            raise ConfigError("Config error: You need to define a GitHub Username in the settings")
        if not self.github_token:
            raise ConfigError(
                "Config error: You need to define a GitHub Token in the settings "
                f"or the {self.token_env} environment variable"
            )
