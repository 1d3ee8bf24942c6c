"""Configuration loading.

Precedence (lowest to highest): defaults, YAML config file, environment
variables, command-line options (applied by the CLI callback).
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Optional

import yaml

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path.home() / ".stackwipe" / "config.yaml"


class ConfigError(Exception):
    """Raised when the config file cannot be parsed."""


@dataclass
class Config:
    """CLI configuration.

    Attributes:
        aws_profile: AWS profile name (optional)
        region: AWS region for regional services
        log_level: Default log level name
        log_group_prefix: Only log groups under this prefix are listed
        protected_role_prefixes: Extra IAM role name prefixes never offered for deletion
        audit_enabled: Write a YAML audit log for each wipe
        audit_path: Audit log directory (optional, default ~/.stackwipe/audit-logs)
    """

    aws_profile: Optional[str] = None
    region: str = "us-east-1"
    log_level: str = "WARNING"
    log_group_prefix: Optional[str] = "/aws/"
    protected_role_prefixes: list[str] = field(default_factory=list)
    audit_enabled: bool = True
    audit_path: Optional[str] = None

    @classmethod
    def load(cls, path: Optional[Path] = None) -> "Config":
        """Load configuration from file and environment.

        Args:
            path: Config file path (default: $STACKWIPE_CONFIG or ~/.stackwipe/config.yaml)

        Returns:
            Config instance

        Raises:
            ConfigError: If the file exists but is not a valid YAML mapping
        """
        if path is None:
            env_path = os.environ.get("STACKWIPE_CONFIG")
            path = Path(env_path) if env_path else DEFAULT_CONFIG_PATH

        config = cls()

        if path.exists():
            try:
                data = yaml.safe_load(path.read_text()) or {}
            except yaml.YAMLError as e:
                raise ConfigError(f"Invalid YAML in {path}: {e}") from e
            if not isinstance(data, dict):
                raise ConfigError(f"Expected a mapping in {path}")
            config._apply(data)
            logger.debug(f"Loaded config from {path}")

        config._apply_env()
        return config

    def _apply(self, data: dict) -> None:
        known_keys = {f.name for f in fields(self)}
        for key, value in data.items():
            if key not in known_keys:
                logger.warning(f"Ignoring unknown config key: {key}")
                continue
            if key == "protected_role_prefixes":
                if isinstance(value, str):
                    value = [value]
                value = [str(prefix) for prefix in value or []]
            setattr(self, key, value)

    def _apply_env(self) -> None:
        if os.environ.get("AWS_PROFILE"):
            self.aws_profile = os.environ["AWS_PROFILE"]
        region = os.environ.get("AWS_REGION") or os.environ.get("AWS_DEFAULT_REGION")
        if region:
            self.region = region
        if os.environ.get("STACKWIPE_LOG_LEVEL"):
            self.log_level = os.environ["STACKWIPE_LOG_LEVEL"]
