"""
Planner — turn a resolved graph into an ordered Plan.

Modules are visited in topological (bfs) order. For each module the
planner emits its wait steps first, then one deploy step per object
its generator produced. Waits come first because they reference
resources created by the module's dependencies, and the module's own
objects may assume those resources are ready.

Planning is all-or-nothing: if any generator raises, no plan is
returned.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable

from kubeplan.adapters.manifest import to_manifest
from kubeplan.core.context import EMPTY, Context
from kubeplan.core.engine.graph import ModuleGraph
from kubeplan.core.engine.walker import bfs
from kubeplan.core.errors import GeneratorFailure
from kubeplan.core.models.module import Module
from kubeplan.core.models.step import DeployStep, Plan, Step, WaitStep

logger = logging.getLogger(__name__)


def module_steps(module: Module, context: Context) -> list[Step]:
    """The (waits, deploys) block one module contributes to a plan."""
    # A generator returning something that is not an object fails the
    # same way as one that raises.
    try:
        deploys: list[Step] = [
            DeployStep(module=module.name, object=obj) for obj in module.generator(context)
        ]
    except Exception as e:
        raise GeneratorFailure(module.name, e) from e

    waits: list[Step] = [WaitStep(module=module.name, wait=w) for w in module.waits]
    return waits + deploys


def plan_from_graph(
    graph: ModuleGraph,
    context: Context = EMPTY,
    start: str | None = None,
) -> Plan:
    """Build the plan for a resolved graph.

    Args:
        graph: Resolved module graph.
        context: Handed to every module generator.
        start: Optional module name; plan only the subtree it unlocks.

    Returns:
        Ordered list of steps.

    Raises:
        GeneratorFailure: A generator raised; the cause is chained.
    """
    plan: Plan = []
    for item in bfs(graph, start):
        steps = module_steps(item.module, context)
        logger.debug("Planned module '%s': %d steps", item.module.name, len(steps))
        plan.extend(steps)

    logger.info("Plan ready: %d steps across %d modules", len(plan), len(graph))
    return plan


def plan_from_modules(
    modules: Iterable[Module],
    context: Context = EMPTY,
    start: str | None = None,
) -> Plan:
    """Resolve ``modules`` into a graph and plan it."""
    return plan_from_graph(ModuleGraph.resolve(modules), context, start)


def describe_step(step: Step) -> str:
    if isinstance(step, DeployStep):
        return f"[DEPLOY] {step.module} | {step.kind} / {step.name}"
    timeout = step.wait.timeout or 0
    return (
        f"[ WAIT ] {step.module} | {step.wait.kind} / {step.wait.name} "
        f"(timeout: {timeout}s)"
    )


def describe_plan(plan: Plan, verbose: bool = False) -> list[str]:
    """Human-readable lines for a plan, one per step.

    With ``verbose``, each deploy is followed by its manifest,
    indented by two spaces.
    """
    lines: list[str] = []
    for step in plan:
        lines.append(describe_step(step))
        if verbose and isinstance(step, DeployStep):
            manifest = to_manifest(step.object)
            lines.extend(f"  {line}" for line in manifest.splitlines())
    return lines
