"""
Error taxonomy — every failure the planner and runner can surface.

All errors derive from ``KubeplanError`` so entry points can catch one
type and report it. Graph errors abort ``resolve``, generator errors
abort planning, step errors abort a run. Nothing is retried.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Literal

if TYPE_CHECKING:
    from kubeplan.core.models.step import Step


class KubeplanError(Exception):
    """Base class for all kubeplan errors."""


# ── Graph ───────────────────────────────────────────────────────


class GraphError(KubeplanError):
    """Raised when a module set cannot be resolved into a graph."""


class DuplicateModuleName(GraphError):
    def __init__(self, name: str):
        self.name = name
        super().__init__(f'Already have a module defined with name "{name}"')


class UnknownDependency(GraphError):
    def __init__(self, dep: str, module: str):
        self.dep = dep
        self.module = module
        super().__init__(f'Unknown dep "{dep}" of module "{module}"')


class CyclicGraph(GraphError):
    """The dependency graph contains a cycle.

    ``reason`` is either ``"no root exists"`` or the name of the node
    the offending traversal started from.
    """

    def __init__(self, reason: str, start: str | None = None):
        self.reason = reason
        self.start = start
        super().__init__(f"Cyclic detected in graph. {reason}")

    @classmethod
    def no_root(cls) -> CyclicGraph:
        return cls("No root node exists")

    @classmethod
    def back_edge(cls, start: str) -> CyclicGraph:
        return cls(f"Path started at {start}", start=start)


class UnknownModule(GraphError):
    def __init__(self, name: str):
        self.name = name
        super().__init__(f'No module named "{name}" in graph')


# ── Planning ────────────────────────────────────────────────────


class GeneratorFailure(KubeplanError):
    """A module's object generator raised; planning was abandoned."""

    def __init__(self, module: str, cause: BaseException):
        self.module = module
        self.cause = cause
        super().__init__(f'Generator of module "{module}" failed: {cause}')


# ── Execution ───────────────────────────────────────────────────


class StepFailure(KubeplanError):
    """A deploy or wait step did not succeed."""

    def __init__(
        self,
        kind: Literal["deploy", "wait"],
        step: Step,
        detail: str,
        returncode: int | None = None,
    ):
        self.kind = kind
        self.step = step
        self.detail = detail
        self.returncode = returncode
        super().__init__(f"{kind} failed in module \"{step.module}\": {detail}")


class UnsupportedWaitKind(UserWarning):
    """Logged, never raised: the wait is treated as satisfied."""

    def __init__(self, kind: str, name: str):
        self.kind = kind
        self.name = name
        super().__init__(
            f'Dont know how to wait on object kind "{kind}" ({name}). Skipping'
        )


# ── Secrets / config lookup ─────────────────────────────────────


class SecretError(KubeplanError):
    """Raised by secret providers."""


class SecretTypeError(SecretError):
    def __init__(self, name: str, value: object):
        self.name = name
        super().__init__(
            f"invalid secret value type of secret {name}: {type(value).__name__}"
        )


class TreeError(KubeplanError):
    """Raised by the tree lookup helpers."""


class MissingValue(TreeError, KeyError):
    def __init__(self, path: list[str]):
        self.path = path
        super().__init__(f"No value at path {'.'.join(path)!r}")

    def __str__(self) -> str:
        return self.args[0]


class TreeTypeError(TreeError, TypeError):
    def __init__(self, path: list[str], expected: str, value: object):
        self.path = path
        self.expected = expected
        super().__init__(
            f"Value at {'.'.join(path)!r} is {type(value).__name__}, expected {expected}"
        )


class ConfigError(KubeplanError):
    """Raised when configuration or a module file is invalid or missing."""
