"""
Tests for the planner — step ordering, generator handling, descriptions.
"""

import pytest
from pydantic import ValidationError

from kubeplan.core.context import Context
from kubeplan.core.engine.graph import ModuleGraph
from kubeplan.core.engine.planner import (
    describe_plan,
    module_steps,
    plan_from_graph,
    plan_from_modules,
)
from kubeplan.core.errors import CyclicGraph, GeneratorFailure
from kubeplan.core.models import DeployStep, Module, Wait, WaitStep


def _objects(*names, kind="Deployment"):
    def generate(ctx):
        return [{"kind": kind, "metadata": {"name": n}} for n in names]
    return generate


class TestModuleSteps:
    def test_waits_before_deploys(self):
        module = Module(
            "api",
            generator=_objects("api", "api-worker"),
            waits=[Wait(kind="Job", name="migrate"), Wait(kind="Deployment", name="db")],
        )
        steps = module_steps(module, Context())

        assert len(steps) == 4
        assert [type(s) for s in steps] == [WaitStep, WaitStep, DeployStep, DeployStep]
        assert steps[0].wait.name == "migrate"
        assert steps[1].wait.name == "db"
        assert steps[2].name == "api"
        assert steps[3].name == "api-worker"
        assert all(s.module == "api" for s in steps)

    def test_module_without_generator(self):
        module = Module("gate", waits=[Wait(kind="Job", name="seed")])
        steps = module_steps(module, Context())
        assert len(steps) == 1
        assert isinstance(steps[0], WaitStep)

    def test_generator_receives_context(self):
        seen = []

        def generate(ctx):
            seen.append(ctx.env)
            return []

        module_steps(Module("m", generator=generate), Context(env="prod"))
        assert seen == ["prod"]

    def test_generator_may_yield(self):
        def generate(ctx):
            yield {"kind": "ConfigMap", "metadata": {"name": "one"}}
            yield {"kind": "ConfigMap", "metadata": {"name": "two"}}

        steps = module_steps(Module("m", generator=generate), Context())
        assert [s.name for s in steps] == ["one", "two"]

    def test_generator_failure_wraps_cause(self):
        def generate(ctx):
            raise RuntimeError("secret backend down")

        with pytest.raises(GeneratorFailure) as exc:
            module_steps(Module("broken", generator=generate), Context())
        assert exc.value.module == "broken"
        assert isinstance(exc.value.__cause__, RuntimeError)

    def test_non_object_output_is_generator_failure(self):
        with pytest.raises(GeneratorFailure) as exc:
            module_steps(Module("bad", generator=lambda ctx: ["not-an-object"]), Context())
        assert exc.value.module == "bad"
        assert isinstance(exc.value.__cause__, ValidationError)


class TestPlanFromGraph:
    def _graph(self, generators=None):
        generators = generators or {}
        return ModuleGraph.resolve([
            Module("db", generator=generators.get("db", _objects("db"))),
            Module(
                "migrate",
                deps=["db"],
                generator=_objects("migrate", kind="Job"),
                waits=[Wait(kind="Deployment", name="db")],
            ),
            Module(
                "api",
                deps=["migrate"],
                generator=generators.get("api", _objects("api", "api-svc")),
                waits=[Wait(kind="Job", name="migrate")],
            ),
        ])

    def test_concatenates_blocks_in_topological_order(self):
        plan = plan_from_graph(self._graph(), Context())
        assert [(s.type, s.module) for s in plan] == [
            ("deploy", "db"),
            ("wait", "migrate"),
            ("deploy", "migrate"),
            ("wait", "api"),
            ("deploy", "api"),
            ("deploy", "api"),
        ]

    def test_all_or_nothing(self):
        def boom(ctx):
            raise ValueError("nope")

        with pytest.raises(GeneratorFailure) as exc:
            plan_from_graph(self._graph({"api": boom}), Context())
        assert exc.value.module == "api"

    def test_generators_run_in_order(self):
        calls = []

        def tracking(name):
            def generate(ctx):
                calls.append(name)
                return []
            return generate

        plan_from_graph(self._graph({"db": tracking("db"), "api": tracking("api")}), Context())
        assert calls == ["db", "api"]

    def test_start_limits_to_subtree(self):
        plan = plan_from_graph(self._graph(), Context(), start="migrate")
        assert {s.module for s in plan} == {"migrate", "api"}

    def test_fresh_plan_per_call(self):
        graph = self._graph()
        first = plan_from_graph(graph, Context())
        second = plan_from_graph(graph, Context())
        assert first == second
        assert first is not second


class TestPlanFromModules:
    def test_resolves_then_plans(self):
        plan = plan_from_modules(
            [Module("b", deps=["a"], generator=_objects("b")), Module("a", generator=_objects("a"))],
        )
        assert [s.name for s in plan] == ["a", "b"]

    def test_graph_errors_propagate(self):
        with pytest.raises(CyclicGraph):
            plan_from_modules([Module("a", deps=["b"]), Module("b", deps=["a"])])


class TestDescribePlan:
    def test_lines(self):
        plan = [
            WaitStep(module="api", wait=Wait(kind="Job", name="migrate", timeout=60)),
            DeployStep(module="api", object={"kind": "Service", "metadata": {"name": "api"}}),
        ]
        assert describe_plan(plan) == [
            "[ WAIT ] api | Job / migrate (timeout: 60s)",
            "[DEPLOY] api | Service / api",
        ]

    def test_verbose_includes_indented_manifest(self):
        plan = [DeployStep(module="api", object={"kind": "Service", "metadata": {"name": "api"}})]
        lines = describe_plan(plan, verbose=True)
        assert lines[0] == "[DEPLOY] api | Service / api"
        assert '  "kind": "Service"' in lines
        assert all(line.startswith("  ") for line in lines[1:])
