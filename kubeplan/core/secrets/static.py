"""
Static secret provider — secrets from an in-memory nested mapping.

Usually fed from a YAML file in local setups and tests:

    db:
      password: hunter2
    api:
      keys:
        stripe: sk_test_123

``get(env, "db/password")`` → SecretValue(name="password", value="hunter2").
The environment is ignored: one tree serves every environment.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from pathlib import Path
from typing import Any

import yaml

from kubeplan.core import tree
from kubeplan.core.errors import SecretError, SecretTypeError
from kubeplan.core.secrets.base import SecretProvider, SecretValue

logger = logging.getLogger(__name__)


class StaticSecretProvider(SecretProvider):
    def __init__(self, secrets: Mapping[str, Any] | None = None):
        self._secrets: Mapping[str, Any] = secrets or {}

    @classmethod
    def from_file(cls, path: Path) -> StaticSecretProvider:
        """Load the secret tree from a YAML file."""
        try:
            data = yaml.safe_load(path.read_text(encoding="utf-8"))
        except OSError as e:
            raise SecretError(f"Cannot read secrets file {path}: {e}") from e
        except yaml.YAMLError as e:
            raise SecretError(f"Invalid YAML in {path}: {e}") from e

        if data is None:
            data = {}
        if not isinstance(data, dict):
            raise SecretError(
                f"Expected a YAML mapping in {path}, got {type(data).__name__}"
            )
        logger.debug("Loaded static secrets from %s", path)
        return cls(data)

    def get(self, env: str, name: str) -> SecretValue:
        segments = name.split("/")
        value = tree.optional(self._secrets, segments)
        if value is not None and not isinstance(value, str):
            raise SecretTypeError(name, value)
        return SecretValue(name=segments[-1], value=value)

    def get_prefix(self, env: str, prefix: str) -> list[SecretValue]:
        value = tree.optional(self._secrets, prefix.split("/"))
        if value is None:
            return []
        if not isinstance(value, Mapping):
            raise SecretTypeError(prefix, value)
        return [
            SecretValue(name=str(key), value=None if val is None else str(val))
            for key, val in value.items()
        ]
