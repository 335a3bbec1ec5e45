"""
Run use case — plan, then execute the plan against the cluster.

This is the top-level orchestrator: it builds the plan, picks the
executor for the requested mode and drives the plan through a Runner.
The first failing step ends the run; steps before it stay applied.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from kubeplan.adapters.kubectl import Kubectl
from kubeplan.core.config.loader import build_kubectl
from kubeplan.core.engine.executors import KubeExecutor, Mode, make_executor
from kubeplan.core.engine.runner import Runner, StepListener
from kubeplan.core.errors import KubeplanError, StepFailure
from kubeplan.core.models.step import Step, Wait, WaitStep
from kubeplan.core.use_cases.plan import PlanResult, build_plan

logger = logging.getLogger(__name__)


@dataclass
class RunResult:
    """Result of running a plan."""

    mode: str = "live"
    plan: PlanResult | None = None
    completed: list[Step] = field(default_factory=list)
    failed_step: Step | None = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def planned(self) -> int:
        return len(self.plan.plan) if self.plan else 0

    def to_dict(self) -> dict:
        result: dict = {"mode": self.mode, "status": "ok" if self.ok else "failed"}
        result["planned"] = self.planned
        result["completed"] = [s.model_dump(mode="json") for s in self.completed]
        if self.failed_step is not None:
            result["failed_step"] = self.failed_step.model_dump(mode="json")
        if self.error:
            result["error"] = self.error
        return result


def run_plan(
    mode: Mode = "live",
    config_path: Path | None = None,
    env: str | None = None,
    variables: dict[str, Any] | None = None,
    start: str | None = None,
    kube_context: str | None = None,
    namespace: str | None = None,
    kubeconfig: str | None = None,
    listener: StepListener | None = None,
    planned: PlanResult | None = None,
) -> RunResult:
    """Build the plan and execute it in ``mode``.

    Args:
        mode: live, dry-run, diff or noop.
        config_path, env, variables, start: See ``build_plan``.
        kube_context, namespace, kubeconfig: Override the config's kube settings.
        listener: Forwarded to the Runner for progress output.
        planned: A plan already built by ``build_plan`` (skips planning).

    Returns:
        RunResult with the completed steps and, on failure, the error.
    """
    result = RunResult(mode=mode)

    if planned is None:
        planned = build_plan(
            config_path=config_path, env=env, variables=variables, start=start,
        )
    result.plan = planned
    if not planned.ok:
        result.error = planned.error
        return result

    assert planned.config is not None
    kubectl = build_kubectl(
        planned.config, context=kube_context, namespace=namespace, kubeconfig=kubeconfig,
    )

    def _track(step: Step, event: str) -> None:
        if event == "ok":
            result.completed.append(step)
        if listener is not None:
            listener(step, event)

    runner = Runner(make_executor(mode, kubectl), listener=_track)
    try:
        runner.run(planned.plan)
    except StepFailure as e:
        result.failed_step = e.step
        result.error = str(e)
    except KubeplanError as e:
        result.error = str(e)
    except FileNotFoundError as e:
        result.error = f"Cannot run {kubectl.binary}: {e}"

    logger.info(
        "Run finished (%s): %d/%d steps", mode, len(result.completed), result.planned,
    )
    return result


def wait_for(kind: str, name: str, timeout: int | None, kubectl: Kubectl) -> None:
    """Run a single wait against the cluster. Raises StepFailure."""
    step = WaitStep(module="-", wait=Wait(kind=kind, name=name, timeout=timeout))
    KubeExecutor(kubectl).wait(step)
