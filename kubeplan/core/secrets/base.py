"""
Secret provider base — the contract generators use to read secrets.

Generators never talk to a secret backend directly; they call the
provider attached to their Context. Providers are looked up per
environment so the same module set can be planned for dev and prod.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from pydantic import BaseModel, ConfigDict


class SecretValue(BaseModel):
    """A named secret. ``value`` is None when the secret is absent."""

    model_config = ConfigDict(frozen=True)

    name: str
    value: str | None = None

    @property
    def present(self) -> bool:
        return self.value is not None


class SecretProvider(ABC):
    """Abstract base class for secret providers.

    To create a new provider:
        1. Subclass SecretProvider
        2. Implement get and get_prefix
        3. Pass an instance to Context(secrets=...)
    """

    @abstractmethod
    def get(self, env: str, name: str) -> SecretValue:
        """Look up one secret by its ``/``-separated name."""

    @abstractmethod
    def get_prefix(self, env: str, prefix: str) -> list[SecretValue]:
        """List every secret stored directly under ``prefix``."""

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__}>"


class NoopSecretProvider(SecretProvider):
    """Provider with no secrets at all."""

    def get(self, env: str, name: str) -> SecretValue:
        return SecretValue(name=name)

    def get_prefix(self, env: str, prefix: str) -> list[SecretValue]:
        return []
