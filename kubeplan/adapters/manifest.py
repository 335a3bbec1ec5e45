"""
Manifest serialization — objects to the YAML fed to ``kubectl -f -``.

Block style, keys in insertion order, every string scalar
double-quoted so values like ``"yes"``, ``"1.10"`` or ``"on"`` reach
the API server as strings.
"""

from __future__ import annotations

from typing import Any

import yaml


class _ManifestDumper(yaml.SafeDumper):
    pass


def _represent_str(dumper: yaml.SafeDumper, data: str) -> yaml.ScalarNode:
    return dumper.represent_scalar("tag:yaml.org,2002:str", data, style='"')


_ManifestDumper.add_representer(str, _represent_str)


def to_manifest(obj: dict[str, Any]) -> str:
    """Render one object as a YAML document."""
    return yaml.dump(
        obj,
        Dumper=_ManifestDumper,
        default_flow_style=False,
        sort_keys=False,
        allow_unicode=True,
    )
