"""
Planning context — everything a module generator may read.

A Context bundles the target environment name, an arbitrary
configuration bag and a secret provider. It is built once per
planning pass by the entry point (CLI, tests, scripts) and handed
unchanged to every generator:

    def make_api(ctx: Context) -> list[dict]:
        tag = ctx.config_str("image.tag", default="latest")
        password = ctx.secret("db/password").value
        ...

Design notes:
    - Immutable.  ``merge`` and ``with_configs`` return new contexts.
    - Typed accessors go through ``kubeplan.core.tree`` so a wrong
      shape fails loudly instead of leaking into a manifest.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from kubeplan.core import tree
from kubeplan.core.secrets.base import NoopSecretProvider, SecretProvider, SecretValue


class Context(BaseModel):
    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    env: str = ""
    configs: dict[str, Any] = Field(default_factory=dict)
    secrets: SecretProvider = Field(default_factory=NoopSecretProvider)

    def merge(self, other: Context) -> Context:
        """Shallow-merge configs; ``other`` wins. Env and secrets come from ``other``
        when set there."""
        return Context(
            env=other.env or self.env,
            configs={**self.configs, **other.configs},
            secrets=(
                other.secrets
                if not isinstance(other.secrets, NoopSecretProvider)
                else self.secrets
            ),
        )

    def with_configs(self, **configs: Any) -> Context:
        return self.model_copy(update={"configs": {**self.configs, **configs}})

    # ── Config accessors ────────────────────────────────────────

    def config(self, path: tree.Path, default: Any = None) -> Any:
        return tree.optional(self.configs, path, default)

    def require(self, path: tree.Path) -> Any:
        return tree.required(self.configs, path)

    def config_str(self, path: tree.Path, **kwargs: Any) -> str:
        return tree.get_str(self.configs, path, **kwargs)

    def config_number(self, path: tree.Path, **kwargs: Any) -> int | float:
        return tree.get_number(self.configs, path, **kwargs)

    def config_int(self, path: tree.Path, **kwargs: Any) -> int:
        return tree.get_int(self.configs, path, **kwargs)

    def config_bool(self, path: tree.Path, **kwargs: Any) -> bool:
        return tree.get_bool(self.configs, path, **kwargs)

    def config_list(self, path: tree.Path, **kwargs: Any) -> list[Any]:
        return tree.get_list(self.configs, path, **kwargs)

    # ── Secrets ─────────────────────────────────────────────────

    def secret(self, name: str) -> SecretValue:
        return self.secrets.get(self.env, name)

    def secrets_with_prefix(self, prefix: str) -> list[SecretValue]:
        return self.secrets.get_prefix(self.env, prefix)


EMPTY = Context()
