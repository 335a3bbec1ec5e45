"""
Module file loader — import the Python file that declares modules.

Module declarations are code (generators are functions), so they
live in a Python file rather than YAML. The file must expose either
a ``MODULES`` list or a ``modules()`` function returning one.
"""

from __future__ import annotations

import importlib.util
import logging
import sys
from pathlib import Path

from kubeplan.core.errors import ConfigError
from kubeplan.core.models.module import Module

logger = logging.getLogger(__name__)


def load_modules(path: Path) -> list[Module]:
    """Import ``path`` and return the modules it declares.

    Raises:
        ConfigError: Missing file, import error, or nothing usable exported.
    """
    if not path.is_file():
        raise ConfigError(f"Module file not found: {path}")

    module_name = f"kubeplan_modules_{path.stem}"
    spec = importlib.util.spec_from_file_location(module_name, path)
    if spec is None or spec.loader is None:
        raise ConfigError(f"Failed to load module file: {path}")

    namespace = importlib.util.module_from_spec(spec)
    sys.modules[module_name] = namespace
    try:
        spec.loader.exec_module(namespace)
    except Exception as e:
        sys.modules.pop(module_name, None)
        raise ConfigError(f"Error importing {path}: {e}") from e

    if hasattr(namespace, "MODULES"):
        declared = namespace.MODULES
    elif callable(getattr(namespace, "modules", None)):
        declared = namespace.modules()
    else:
        raise ConfigError(f"{path} defines neither MODULES nor modules()")

    modules = list(declared)
    for item in modules:
        if not isinstance(item, Module):
            raise ConfigError(
                f"{path}: expected Module instances, got {type(item).__name__}"
            )

    logger.info("Loaded %d modules from %s", len(modules), path)
    return modules
