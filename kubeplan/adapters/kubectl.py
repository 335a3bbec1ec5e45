"""
kubectl adapter — the control-plane invocation surface.

Builds kubectl argument lists and runs them through the shell
helpers. Knows nothing about plans or modules: callers decide what
a non-zero exit means.

Every invocation starts with the common flags, in this order:

    kubectl [--kubeconfig=<path>] [--context=<ctx>] [--namespace=<ns>] <verb> ...
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from kubeplan.adapters.shell.command import CommandResult, race, run_command

logger = logging.getLogger(__name__)

KUBECTL_BIN = "kubectl"

JOB_COMPLETE = "complete"
JOB_FAILED = "failed"


@dataclass
class Kubectl:
    context: str = ""
    namespace: str = "default"
    kubeconfig: str = ""
    binary: str = KUBECTL_BIN

    def common_args(self) -> list[str]:
        args: list[str] = []
        if self.kubeconfig:
            args.append(f"--kubeconfig={self.kubeconfig}")
        if self.context:
            args.append(f"--context={self.context}")
        if self.namespace:
            args.append(f"--namespace={self.namespace}")
        return args

    def command(self, *args: str) -> list[str]:
        return [self.binary, *self.common_args(), *args]

    # ── Deploy verbs ────────────────────────────────────────────

    def apply(self, manifest: str, dry_run: bool = False) -> CommandResult:
        args = ["apply"]
        if dry_run:
            args.append("--dry-run=server")
        args.extend(["-f", "-"])
        return run_command(self.command(*args), input=manifest)

    def diff(self, manifest: str) -> CommandResult:
        return run_command(self.command("diff", "-f", "-"), input=manifest)

    def delete_job(self, name: str) -> CommandResult:
        return run_command(
            self.command("delete", "jobs", name, "--ignore-not-found"),
        )

    # ── Wait verbs ──────────────────────────────────────────────

    def wait_job_command(self, name: str, condition: str, timeout: int) -> list[str]:
        return self.command(
            "wait",
            f"--timeout={timeout}s",
            f"--for=condition={condition}",
            f"job/{name}",
        )

    def race_job_conditions(self, name: str, timeout: int) -> tuple[str, int]:
        """Wait for a Job to become complete OR failed, whichever is first.

        Returns:
            (condition of the watcher that exited first, its exit code)
        """
        conditions = (JOB_COMPLETE, JOB_FAILED)
        index, returncode = race(
            [self.wait_job_command(name, c, timeout) for c in conditions]
        )
        return conditions[index], returncode

    def rollout_status(self, kind: str, name: str, timeout: int) -> CommandResult:
        return run_command(
            self.command("rollout", "status", f"--timeout={timeout}s", f"{kind}/{name}"),
        )
