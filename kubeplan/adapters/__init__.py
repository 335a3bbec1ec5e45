"""Adapters — bindings for the external tools kubeplan drives.

Public re-exports for convenient access.
"""

from kubeplan.adapters.kubectl import Kubectl
from kubeplan.adapters.manifest import to_manifest
from kubeplan.adapters.shell.command import CommandResult, race, run_command

__all__ = [
    "CommandResult",
    "Kubectl",
    "race",
    "run_command",
    "to_manifest",
]
