"""
Executors — what a runner calls to perform one step.

Every executor exposes two primitives, ``wait(step)`` and
``deploy(step)``. Each returns None on success and raises
StepFailure on any detectable error.

Strategies:

    KubeExecutor   live: delete+apply Jobs, apply everything else,
                   wait on Jobs / rollouts
    ServerDryRun   wraps another executor: ``apply --dry-run=server``
    Diff           wraps another executor: ``diff`` against live state
    NoopExecutor   does nothing

ServerDryRun and Diff perform their own kubectl call and then hand
the step to the executor they wrap, so they stack:

    Diff(kubectl, ServerDryRun(kubectl))   # show diff, then validate
"""

from __future__ import annotations

import logging
from typing import Literal, Protocol

from kubeplan.adapters.kubectl import JOB_COMPLETE, Kubectl
from kubeplan.adapters.manifest import to_manifest
from kubeplan.adapters.shell.command import CommandResult
from kubeplan.core.errors import StepFailure, UnsupportedWaitKind
from kubeplan.core.models.step import DeployStep, Step, WaitStep

logger = logging.getLogger(__name__)

ROLLOUT_KINDS = frozenset({"deployment", "statefulset"})

Mode = Literal["live", "dry-run", "diff", "noop"]


class Executor(Protocol):
    def wait(self, step: WaitStep) -> None: ...

    def deploy(self, step: DeployStep) -> None: ...


def is_job(kind: str) -> bool:
    return kind.lower() == "job"


def job_wait_succeeded(condition: str, returncode: int) -> bool:
    """Outcome of a Job wait, from the watcher that exited first.

        complete watcher, exit 0     → success
        complete watcher, exit != 0  → failure (never reached complete)
        failed watcher,   exit 0     → failure
        failed watcher,   exit != 0  → success
    """
    if condition == JOB_COMPLETE:
        return returncode == 0
    # Open question: the failed-watcher erroring or timing out is read
    # as "the job did not fail". Kept as-is; it may hide a timeout.
    return returncode != 0


def _check(result: CommandResult, kind: Literal["deploy", "wait"], step: Step, verb: str) -> None:
    if not result.ok:
        raise StepFailure(
            kind,
            step,
            f"kubectl {verb} exited with code {result.returncode}",
            returncode=result.returncode,
        )


class NoopExecutor:
    """Performs no external action. Default inner executor of wrappers."""

    def wait(self, step: WaitStep) -> None:
        logger.debug("noop wait %s/%s", step.wait.kind, step.wait.name)

    def deploy(self, step: DeployStep) -> None:
        logger.debug("noop deploy %s/%s", step.kind, step.name)


class KubeExecutor:
    """Live executor against the cluster.

    With ``dry_run=True`` waits succeed without contacting the cluster,
    since nothing real exists to observe.
    """

    def __init__(self, kubectl: Kubectl | None = None, dry_run: bool = False):
        self.kubectl = kubectl or Kubectl()
        self.dry_run = dry_run
        self.warnings: list[UnsupportedWaitKind] = []

    # ── Deploy ──────────────────────────────────────────────────

    def deploy(self, step: DeployStep) -> None:
        manifest = to_manifest(step.object)

        # Job specs are immutable: recreate instead of re-applying.
        if is_job(step.kind):
            if not step.name:
                raise StepFailure("deploy", step, "Job object has no metadata.name")
            _check(self.kubectl.delete_job(step.name), "deploy", step, "delete")

        _check(self.kubectl.apply(manifest), "deploy", step, "apply")

    # ── Wait ────────────────────────────────────────────────────

    def wait(self, step: WaitStep) -> None:
        if self.dry_run:
            return

        kind = step.wait.kind.lower()
        if kind == "job":
            self._wait_job(step)
        elif kind in ROLLOUT_KINDS:
            result = self.kubectl.rollout_status(
                step.wait.kind, step.wait.name, step.wait.effective_timeout,
            )
            _check(result, "wait", step, "rollout status")
        else:
            warning = UnsupportedWaitKind(step.wait.kind, step.wait.name)
            logger.warning("%s", warning)
            self.warnings.append(warning)

    def _wait_job(self, step: WaitStep) -> None:
        name = step.wait.name
        condition, returncode = self.kubectl.race_job_conditions(
            name, step.wait.effective_timeout,
        )
        logger.debug(
            "job/%s: '%s' watcher settled first with exit %d",
            name, condition, returncode,
        )
        if not job_wait_succeeded(condition, returncode):
            raise StepFailure("wait", step, f'job "{name}" failed', returncode=returncode)


class ServerDryRun:
    """Validate deploys server-side without persisting them.

    Waits are no-ops. Jobs are skipped: their delete-then-create cannot
    be represented in a dry run.
    """

    def __init__(self, kubectl: Kubectl, inner: Executor | None = None):
        self.kubectl = kubectl
        self.inner: Executor = inner or NoopExecutor()

    def wait(self, step: WaitStep) -> None:
        logger.debug("dry-run: skipping wait %s/%s", step.wait.kind, step.wait.name)

    def deploy(self, step: DeployStep) -> None:
        if is_job(step.kind):
            logger.info("dry-run: skipping Job %s", step.name)
            return
        _check(
            self.kubectl.apply(to_manifest(step.object), dry_run=True),
            "deploy", step, "apply --dry-run=server",
        )
        self.inner.deploy(step)


class Diff:
    """Show what a deploy would change in the live cluster.

    ``kubectl diff`` exits 1 when differences exist; only greater exit
    codes are failures. Waits are no-ops and Jobs are skipped.
    """

    def __init__(self, kubectl: Kubectl, inner: Executor | None = None):
        self.kubectl = kubectl
        self.inner: Executor = inner or NoopExecutor()

    def wait(self, step: WaitStep) -> None:
        logger.debug("diff: skipping wait %s/%s", step.wait.kind, step.wait.name)

    def deploy(self, step: DeployStep) -> None:
        if is_job(step.kind):
            logger.info("diff: skipping Job %s", step.name)
            return
        result = self.kubectl.diff(to_manifest(step.object))
        if result.returncode > 1:
            raise StepFailure(
                "deploy",
                step,
                f"kubectl diff exited with code {result.returncode}",
                returncode=result.returncode,
            )
        self.inner.deploy(step)


def make_executor(mode: Mode, kubectl: Kubectl | None = None) -> Executor:
    """Build the executor for a run mode."""
    kubectl = kubectl or Kubectl()
    if mode == "live":
        return KubeExecutor(kubectl)
    if mode == "dry-run":
        return ServerDryRun(kubectl)
    if mode == "diff":
        return Diff(kubectl)
    if mode == "noop":
        return NoopExecutor()
    raise ValueError(f"Unknown run mode: {mode!r}")
