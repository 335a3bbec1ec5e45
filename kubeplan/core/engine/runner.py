"""
Runner — drive a Plan through an executor.

Steps run strictly in order, one at a time. The first step that
raises stops the run and the exception reaches the caller unchanged:
no retries, no rollback, no skipping ahead. Steps already executed
stay executed.

Flow:
    for step in plan → log intent → executor.wait / executor.deploy → log success
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field

from kubeplan.core.engine.executors import Executor
from kubeplan.core.models.step import DeployStep, Plan, Step, WaitStep

logger = logging.getLogger(__name__)

StepListener = Callable[[Step, str], None]


@dataclass
class RunReport:
    """Steps a run completed, in execution order."""

    completed: list[Step] = field(default_factory=list)

    @property
    def total(self) -> int:
        return len(self.completed)

    @property
    def deployed(self) -> int:
        return sum(1 for s in self.completed if isinstance(s, DeployStep))

    @property
    def waited(self) -> int:
        return sum(1 for s in self.completed if isinstance(s, WaitStep))

    def to_dict(self) -> dict:
        return {
            "total": self.total,
            "deployed": self.deployed,
            "waited": self.waited,
            "steps": [s.model_dump(mode="json") for s in self.completed],
        }


def describe_intent(step: Step) -> str:
    if isinstance(step, WaitStep):
        return (
            f'Started to wait for "{step.wait.kind}/{step.wait.name}" '
            f'in module "{step.module}"'
        )
    return f'Started to deploy "{step.kind}/{step.name}" in module "{step.module}"'


class Runner:
    """Sequential, fail-fast plan runner.

    Args:
        executor: Performs the wait / deploy primitives.
        listener: Optional callback, called with ``(step, "start")``
            before and ``(step, "ok")`` after each step.
    """

    def __init__(self, executor: Executor, listener: StepListener | None = None):
        self.executor = executor
        self.listener = listener

    def _notify(self, step: Step, event: str) -> None:
        if self.listener is not None:
            self.listener(step, event)

    def run(self, plan: Plan) -> RunReport:
        report = RunReport()
        logger.info("Executing plan: %d steps", len(plan))

        for step in plan:
            logger.info(describe_intent(step))
            self._notify(step, "start")

            if isinstance(step, WaitStep):
                self.executor.wait(step)
            else:
                self.executor.deploy(step)

            logger.info("====> Success")
            report.completed.append(step)
            self._notify(step, "ok")

        return report
