"""
Configuration loader — reads kubeplan.yml into typed models.

This is the primary entry point for loading configuration. It reads
YAML, validates against Pydantic schemas, and builds the Context and
Kubectl objects the planner and runner consume.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import yaml

from kubeplan.adapters.kubectl import Kubectl
from kubeplan.core.context import Context
from kubeplan.core.errors import ConfigError, SecretError
from kubeplan.core.models.config import KubeplanConfig
from kubeplan.core.secrets import NoopSecretProvider, SecretProvider, StaticSecretProvider

logger = logging.getLogger(__name__)

# Default config filename
CONFIG_FILE = "kubeplan.yml"


def find_config_file(start_dir: Path | None = None) -> Path | None:
    """Locate kubeplan.yml in ``start_dir`` (default: cwd) or the nearest ancestor.

    Running kubeplan from a subdirectory of a deploy repo (e.g. next to a
    module file) still picks up the repo-level config.
    """
    start = (start_dir or Path.cwd()).resolve()
    for directory in (start, *start.parents):
        candidate = directory / CONFIG_FILE
        if candidate.is_file():
            logger.debug("Found %s in %s", CONFIG_FILE, directory)
            return candidate

    logger.debug("No %s in %s or any parent", CONFIG_FILE, start)
    return None


def load_config(path: Path) -> KubeplanConfig:
    """Load and validate a config file.

    Raises:
        ConfigError: If the file is missing or invalid.
    """
    if not path.is_file():
        raise ConfigError(f"Config file not found: {path}")

    logger.debug("Loading config from %s", path)

    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"Cannot read {path}: {e}") from e

    try:
        data = yaml.safe_load(raw)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ConfigError(f"Expected a YAML mapping in {path}, got {type(data).__name__}")

    try:
        config = KubeplanConfig.model_validate(data)
    except Exception as e:
        raise ConfigError(f"Invalid configuration: {e}") from e

    logger.info("Loaded config from %s (env=%r)", path, config.env)
    return config


def parse_vars(pairs: list[str] | tuple[str, ...]) -> dict[str, str]:
    """Parse ``key=value`` pairs from the command line."""
    result: dict[str, str] = {}
    for pair in pairs:
        key, sep, value = pair.partition("=")
        if not sep or not key:
            raise ConfigError(f"Invalid variable: {pair} (expected key=value)")
        result[key] = value
    return result


def build_secret_provider(config: KubeplanConfig, base_dir: Path) -> SecretProvider:
    settings = config.secrets
    if settings.provider == "static":
        if not settings.file:
            raise ConfigError("secrets.file is required for the static provider")
        try:
            return StaticSecretProvider.from_file(base_dir / settings.file)
        except SecretError as e:
            raise ConfigError(str(e)) from e
    return NoopSecretProvider()


def build_context(
    config: KubeplanConfig,
    base_dir: Path,
    env: str | None = None,
    variables: dict[str, Any] | None = None,
) -> Context:
    """Context for generators: config values, overridden by CLI ones."""
    return Context(
        env=env or config.env,
        configs={**config.configs, **(variables or {})},
        secrets=build_secret_provider(config, base_dir),
    )


def build_kubectl(
    config: KubeplanConfig,
    context: str | None = None,
    namespace: str | None = None,
    kubeconfig: str | None = None,
) -> Kubectl:
    """Kubectl from config, overridden by explicit (CLI) values."""
    kube = config.kube
    kubeconfig = kubeconfig or kube.kubeconfig
    return Kubectl(
        context=context if context is not None else kube.context,
        namespace=namespace if namespace is not None else kube.namespace,
        kubeconfig=str(Path(kubeconfig).expanduser()) if kubeconfig else "",
        binary=kube.binary,
    )
