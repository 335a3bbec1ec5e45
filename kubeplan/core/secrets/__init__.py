"""Secret providers consumed by module generators."""

from kubeplan.core.secrets.base import NoopSecretProvider, SecretProvider, SecretValue
from kubeplan.core.secrets.static import StaticSecretProvider

__all__ = [
    "NoopSecretProvider",
    "SecretProvider",
    "SecretValue",
    "StaticSecretProvider",
]
