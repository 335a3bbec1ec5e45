"""
Plan use case — from kubeplan.yml to an ordered Plan.

Loads the config, imports the module file, builds the generator
Context, resolves the graph and plans it. Errors are captured in the
result, never raised, so every entry point reports them the same way.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from kubeplan.core.config.loader import (
    build_context,
    find_config_file,
    load_config,
)
from kubeplan.core.config.module_loader import load_modules
from kubeplan.core.context import Context
from kubeplan.core.engine.graph import ModuleGraph
from kubeplan.core.engine.planner import plan_from_graph
from kubeplan.core.errors import ConfigError, KubeplanError
from kubeplan.core.models.config import KubeplanConfig
from kubeplan.core.models.step import Plan

logger = logging.getLogger(__name__)


@dataclass
class PlanResult:
    """Everything produced while planning, or the error that stopped it."""

    config: KubeplanConfig | None = None
    config_path: Path | None = None
    context: Context | None = None
    graph: ModuleGraph | None = None
    plan: Plan = field(default_factory=list)
    error: str | None = None
    error_type: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def to_dict(self) -> dict:
        result: dict = {}
        if self.error:
            result["error"] = self.error
            result["error_type"] = self.error_type
            return result

        result["env"] = self.context.env if self.context else ""
        if self.graph is not None:
            result["modules"] = sorted(self.graph.modules)
            result["roots"] = list(self.graph.roots)
            result["leafs"] = list(self.graph.leafs)
        result["steps"] = [step.model_dump(mode="json") for step in self.plan]
        return result


def build_plan(
    config_path: Path | None = None,
    env: str | None = None,
    variables: dict[str, Any] | None = None,
    start: str | None = None,
) -> PlanResult:
    """Load everything and build the plan.

    Args:
        config_path: Explicit kubeplan.yml. If None, searches upward from cwd.
        env: Overrides the config's environment.
        variables: Override entries of ``configs``.
        start: Plan only the subtree unlocked by this module.

    Returns:
        PlanResult; ``error`` is set when any stage failed.
    """
    result = PlanResult()

    try:
        if config_path is None:
            config_path = find_config_file()
        if config_path is None:
            raise ConfigError("No kubeplan.yml found. Specify one with --config.")

        base_dir = config_path.parent.resolve()
        config = load_config(config_path)
        result.config = config
        result.config_path = config_path

        modules = load_modules(base_dir / config.modules)
        result.context = build_context(config, base_dir, env=env, variables=variables)
        result.graph = ModuleGraph.resolve(modules)
        result.plan = plan_from_graph(result.graph, result.context, start=start)

    except KubeplanError as e:
        logger.debug("Planning failed", exc_info=True)
        result.error = str(e)
        result.error_type = type(e).__name__
        result.plan = []

    return result
