"""Validator configuration."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING, Any

import yaml

if TYPE_CHECKING:
    from fieldcheck.validation.registry import RuleRegistry
    from fieldcheck.validation.validator import Validator


class ConfigError(Exception):
    """Raised when a configuration file cannot be used."""

    def __init__(self, message: str, path: Path | None = None):
        self.path = path
        prefix = f"{path}: " if path else ""
        super().__init__(f"{prefix}{message}")


@dataclass
class ValidatorConfig:
    """Message overrides and logging level shared by validators.

    Attributes:
        messages: Message templates by rule name, overriding the built-in ones
        log_level: Logging level name used by the CLI
    """

    messages: dict[str, str] = field(default_factory=dict)
    log_level: str = "WARNING"

    @classmethod
    def from_env(cls) -> ValidatorConfig:
        """Create config from environment variables.

        Resolution:
        1. FIELDCHECK_MESSAGES: path to a YAML mapping of rule name -> message
        2. FIELDCHECK_LOG_LEVEL: logging level name (default WARNING)
        """
        messages: dict[str, str] = {}
        messages_path = os.environ.get("FIELDCHECK_MESSAGES")
        if messages_path:
            messages = _load_messages(Path(messages_path))

        return cls(
            messages=messages,
            log_level=os.environ.get("FIELDCHECK_LOG_LEVEL", "WARNING").upper(),
        )

    @classmethod
    def from_yaml(cls, path: Path) -> ValidatorConfig:
        """Load config from a YAML file with optional ``messages`` and ``log_level`` keys.

        Raises:
            ConfigError: If the file is unreadable or not a mapping
        """
        path = Path(path)
        data = _read_yaml(path)
        if data is None:
            return cls()
        if not isinstance(data, dict):
            raise ConfigError("config must be a mapping", path)

        messages = data.get("messages") or {}
        if not isinstance(messages, dict):
            raise ConfigError("'messages' must be a mapping of rule name to template", path)

        return cls(
            messages={str(k): str(v) for k, v in messages.items()},
            log_level=str(data.get("log_level", "WARNING")).upper(),
        )

    def create_validator(self, target: Any, registry: RuleRegistry | None = None) -> Validator:
        """Build a Validator with this config's message overrides."""
        from fieldcheck.validation.validator import Validator

        return Validator(target, messages=self.messages, registry=registry)


def _read_yaml(path: Path) -> Any:
    try:
        with open(path) as f:
            return yaml.safe_load(f)
    except OSError as e:
        raise ConfigError(f"cannot read config: {e}", path) from e
    except yaml.YAMLError as e:
        raise ConfigError(f"malformed YAML: {e}", path) from e


def _load_messages(path: Path) -> dict[str, str]:
    data = _read_yaml(path)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError("messages file must be a mapping of rule name to template", path)
    return {str(k): str(v) for k, v in data.items()}
