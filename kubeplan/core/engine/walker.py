"""
Graph walker — lazy traversals over a resolved ModuleGraph.

Both traversals are generator functions: each call starts over from
the beginning and the iterator it returns is single-pass and finite.

    bfs  → topological order (Kahn's algorithm); what the planner uses
    dfs  → depth-first pre-order; single-subtree and diagnostic use

``depth`` on each item is presentation metadata only (indentation).
"""

from __future__ import annotations

from collections import deque
from collections.abc import Iterator
from dataclasses import dataclass

from kubeplan.core.engine.graph import ModuleGraph
from kubeplan.core.models.module import Module


@dataclass(frozen=True)
class WalkItem:
    module: Module
    depth: int = 0


def _frontier(graph: ModuleGraph, start: str | None) -> list[str]:
    if start:
        graph.get(start)
        return [start]
    return list(graph.roots)


def bfs(graph: ModuleGraph, start: str | None = None) -> Iterator[WalkItem]:
    """Yield modules in topological order.

    A module is yielded only after every one of its dependencies has
    been yielded. Modules that become ready in the same wave come out
    in the order they became ready, not sorted by name.

    With ``start``, only ``start`` and the modules unlocked beneath it
    are visited; dependents that also need modules outside that
    subtree are never unlocked.
    """
    remaining = {name: len(m.deps) for name, m in graph.modules.items()}
    queue = deque((name, 0) for name in _frontier(graph, start))
    visited: set[str] = set()

    while queue:
        name, depth = queue.popleft()
        if name in visited:
            continue
        visited.add(name)
        yield WalkItem(graph.modules[name], depth)

        for child in graph.children[name]:
            remaining[child] -= 1
            if remaining[child] == 0:
                queue.append((child, depth + 1))


def dfs(graph: ModuleGraph, start: str | None = None) -> Iterator[WalkItem]:
    """Yield modules in depth-first pre-order, following dependents."""
    stack = [(name, 0) for name in _frontier(graph, start)]
    visited: set[str] = set()

    while stack:
        name, depth = stack.pop()
        if name in visited:
            continue
        visited.add(name)
        yield WalkItem(graph.modules[name], depth)

        stack.extend(
            (child, depth + 1)
            for child in graph.children[name]
            if child not in visited
        )
