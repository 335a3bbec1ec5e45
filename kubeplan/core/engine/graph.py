"""
Module graph — the static, validated dependency graph.

``ModuleGraph.resolve`` is the only way to build a graph. It checks
that names are unique, that every dependency exists and that there
are no cycles, then derives the reverse edges (``children``), the
roots (no deps) and the leafs (no dependents).

Flow:
    sort by name → register → reverse-resolve edges → leafs → cycle check
"""

from __future__ import annotations

import enum
import logging
from collections.abc import Iterable, Iterator

from kubeplan.core.errors import (
    CyclicGraph,
    DuplicateModuleName,
    UnknownDependency,
    UnknownModule,
)
from kubeplan.core.models.module import Module

logger = logging.getLogger(__name__)


class _Mark(enum.Enum):
    UNVISITED = 0
    IN_PROGRESS = 1
    DONE = 2


class ModuleGraph:
    """A resolved module graph. Read-only once ``resolve`` returns."""

    def __init__(self) -> None:
        self.modules: dict[str, Module] = {}
        self.children: dict[str, list[str]] = {}
        self.roots: list[str] = []
        self.leafs: list[str] = []

    # ── Construction ────────────────────────────────────────────

    @classmethod
    def resolve(cls, modules: Iterable[Module]) -> ModuleGraph:
        """Build and validate a graph over ``modules``.

        Raises:
            DuplicateModuleName: Two modules share a name.
            UnknownDependency: A module depends on a name not in the set.
            CyclicGraph: The dependencies form a cycle.
        """
        graph = cls()
        for module in sorted(modules, key=lambda m: m.name):
            graph._add(module)
        graph._reverse_resolve()
        graph._check_cycles()
        logger.debug(
            "Resolved graph: %d modules, roots=%s, leafs=%s",
            len(graph.modules),
            graph.roots,
            graph.leafs,
        )
        return graph

    def _add(self, module: Module) -> None:
        if module.name in self.modules:
            raise DuplicateModuleName(module.name)
        self.modules[module.name] = module
        self.children[module.name] = []
        if not module.deps:
            self.roots.append(module.name)

    def _reverse_resolve(self) -> None:
        for module in self.modules.values():
            for dep in module.deps:
                if dep not in self.modules:
                    raise UnknownDependency(dep, module.name)
                self.children[dep].append(module.name)

        self.leafs = [name for name, kids in self.children.items() if not kids]

    def _check_cycles(self) -> None:
        if self.modules and not self.roots:
            raise CyclicGraph.no_root()

        marks = {name: _Mark.UNVISITED for name in self.modules}

        # Roots first, then everything else: a cycle can sit in a part
        # of the graph no root reaches.
        for start in [*self.roots, *self.modules]:
            if marks[start] is not _Mark.UNVISITED:
                continue

            marks[start] = _Mark.IN_PROGRESS
            stack: list[tuple[str, Iterator[str]]] = [
                (start, iter(self.children[start])),
            ]
            while stack:
                node, pending = stack[-1]
                child = next(pending, None)
                if child is None:
                    marks[node] = _Mark.DONE
                    stack.pop()
                    continue
                if marks[child] is _Mark.IN_PROGRESS:
                    raise CyclicGraph.back_edge(start)
                if marks[child] is _Mark.UNVISITED:
                    marks[child] = _Mark.IN_PROGRESS
                    stack.append((child, iter(self.children[child])))

    # ── Queries ─────────────────────────────────────────────────

    def get(self, name: str) -> Module:
        try:
            return self.modules[name]
        except KeyError:
            raise UnknownModule(name) from None

    def dependents_of(self, name: str) -> set[str]:
        """Every module that transitively depends on ``name``."""
        self.get(name)
        found: set[str] = set()
        stack = list(self.children[name])
        while stack:
            child = stack.pop()
            if child in found:
                continue
            found.add(child)
            stack.extend(self.children[child])
        return found

    def __contains__(self, name: object) -> bool:
        return name in self.modules

    def __len__(self) -> int:
        return len(self.modules)

    def __repr__(self) -> str:
        return f"<ModuleGraph modules={len(self.modules)} roots={self.roots!r}>"
