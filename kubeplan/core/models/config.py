"""
Config model — the contents of kubeplan.yml.

    env: staging
    kube:
      context: my-cluster
      namespace: apps
    modules: deploy/modules.py
    configs:
      image_tag: "1.2.3"
    secrets:
      provider: static
      file: secrets.yml
"""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, Field

from kubeplan.adapters.kubectl import KUBECTL_BIN


class KubeSettings(BaseModel):
    """How to reach the cluster."""

    context: str = ""
    namespace: str = "default"
    kubeconfig: str = ""
    binary: str = KUBECTL_BIN


class SecretSettings(BaseModel):
    """Which secret provider generators get."""

    provider: Literal["noop", "static"] = "noop"
    file: str | None = None     # YAML tree for the static provider


class KubeplanConfig(BaseModel):
    """Root configuration. Every field has a default, so an empty file is valid."""

    env: str = ""
    kube: KubeSettings = Field(default_factory=KubeSettings)
    modules: str = "modules.py"  # python file exposing MODULES
    configs: dict[str, Any] = Field(default_factory=dict)
    secrets: SecretSettings = Field(default_factory=SecretSettings)
