"""Service configuration: a YAML file with environment-variable overrides."""

from __future__ import annotations

import os
import secrets
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

ENV_PREFIX = "CCNUBOX_CLASSROOM"
DEFAULT_CONFIG_DIR = "conf"
DEFAULT_CONFIG_NAME = "config.yaml"

SHORT_ID_ALPHABET = "0123456789ABCDEFGHIJKLMNOPQRSTUVWXYZ_abcdefghijklmnopqrstuvwxyz-"
SHORT_ID_LENGTH = 9


def _lower_keys(value: Any) -> Any:
    if isinstance(value, Mapping):
        return {str(key).lower(): _lower_keys(item) for key, item in value.items()}
    if isinstance(value, list):
        return [_lower_keys(item) for item in value]
    return value


@dataclass
class Settings:
    """Configuration values, looked up by dotted keys without regard to case.

    A non-empty environment variable named ``CCNUBOX_CLASSROOM_<KEY>``, with
    dots replaced by underscores, takes precedence over the file's value.
    """

    data: dict[str, Any] = field(default_factory=dict)
    environ: Mapping[str, str] = field(default_factory=lambda: os.environ)

    def __post_init__(self) -> None:
        self.data = _lower_keys(self.data)

    def get(self, key: str, default: Any = None) -> Any:
        """Return the value for a dotted key, or ``default`` when it is unset."""
        env_name = f"{ENV_PREFIX}_{key.replace('.', '_').upper()}"
        env_value = self.environ.get(env_name)
        if env_value:
            return env_value

        node: Any = self.data
        for part in key.lower().split("."):
            if not isinstance(node, Mapping) or part not in node:
                return default
            node = node[part]
        return node


def project_abs_path() -> str:
    """Return the directory the service was started from."""
    return os.getcwd()


def load_config(path: str | os.PathLike[str] | None = None,
                environ: Mapping[str, str] | None = None) -> Settings:
    """Read the YAML configuration file.

    Without a path, ``conf/config.yaml`` under the working directory is read.
    """
    config_path = (
        Path(path) if path else Path(project_abs_path()) / DEFAULT_CONFIG_DIR / DEFAULT_CONFIG_NAME
    )
    with config_path.open("r", encoding="utf-8") as handle:
        loaded = yaml.safe_load(handle)

    if loaded is None:
        loaded = {}
    if not isinstance(loaded, Mapping):
        raise ValueError(f"configuration file {config_path} does not hold a mapping")

    return Settings(dict(loaded), os.environ if environ is None else environ)


def gen_short_id() -> str:
    """Return a short random identifier."""
    return "".join(secrets.choice(SHORT_ID_ALPHABET) for _ in range(SHORT_ID_LENGTH))