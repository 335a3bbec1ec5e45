"""
Tree lookup — typed access into nested mappings.

Generators read configuration and static secrets as nested dicts
loaded from YAML. These helpers walk a path of keys through such a
tree and check the shape of what they find:

    optional(tree, "db.host")           → value or None
    required(tree, ["db", "host"])      → value, or MissingValue
    get_str(tree, "db/host", default="localhost")

Paths are lists of segments or strings separated by ``.`` or ``/``.
List elements can be addressed by integer segments (``"hosts.0"``).
"""

from __future__ import annotations

import re
from collections.abc import Mapping, Sequence
from typing import Any

from kubeplan.core.errors import MissingValue, TreeTypeError

Path = str | Sequence[str]

_SEPARATORS = re.compile(r"[./]")
_MISSING = object()


def split_path(path: Path) -> list[str]:
    """Normalize a path into its non-empty segments."""
    if isinstance(path, str):
        return [s for s in _SEPARATORS.split(path) if s]
    return [str(s) for s in path if s != ""]


def _lookup(tree: Any, segments: list[str]) -> Any:
    node = tree
    for seg in segments:
        if isinstance(node, Mapping):
            if seg not in node:
                return _MISSING
            node = node[seg]
        elif isinstance(node, list) and seg.isdigit():
            idx = int(seg)
            if idx >= len(node):
                return _MISSING
            node = node[idx]
        else:
            return _MISSING
    return node


def optional(tree: Any, path: Path, default: Any = None) -> Any:
    """Return the value at ``path`` or ``default`` when any segment is absent."""
    value = _lookup(tree, split_path(path))
    if value is _MISSING or value is None:
        return default
    return value


def required(tree: Any, path: Path) -> Any:
    """Return the value at ``path``; raise MissingValue when absent."""
    segments = split_path(path)
    value = _lookup(tree, segments)
    if value is _MISSING or value is None:
        raise MissingValue(segments)
    return value


def _typed(
    tree: Any,
    path: Path,
    types: type | tuple[type, ...],
    expected: str,
    default: Any,
) -> Any:
    segments = split_path(path)
    value = _lookup(tree, segments)
    if value is _MISSING or value is None:
        if default is _MISSING:
            raise MissingValue(segments)
        return default
    # bool is an int subclass; never accept it as a number
    if isinstance(value, bool) and bool not in _as_tuple(types):
        raise TreeTypeError(segments, expected, value)
    if not isinstance(value, types):
        raise TreeTypeError(segments, expected, value)
    return value


def _as_tuple(types: type | tuple[type, ...]) -> tuple[type, ...]:
    return types if isinstance(types, tuple) else (types,)


def get_str(tree: Any, path: Path, default: Any = _MISSING) -> str:
    return _typed(tree, path, str, "string", default)


def get_number(tree: Any, path: Path, default: Any = _MISSING) -> int | float:
    return _typed(tree, path, (int, float), "number", default)


def get_int(tree: Any, path: Path, default: Any = _MISSING) -> int:
    return _typed(tree, path, int, "integer", default)


def get_bool(tree: Any, path: Path, default: Any = _MISSING) -> bool:
    return _typed(tree, path, bool, "bool", default)


def get_list(tree: Any, path: Path, default: Any = _MISSING) -> list[Any]:
    return _typed(tree, path, list, "list", default)


def get_mapping(tree: Any, path: Path, default: Any = _MISSING) -> Mapping[str, Any]:
    return _typed(tree, path, Mapping, "mapping", default)
