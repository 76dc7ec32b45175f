"""Graph algorithms for module dependency graphs."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping


def build_dependency_graph(
    dependencies: Mapping[str, Iterable[str]],
) -> dict[str, set[str]]:
    """Build an adjacency mapping restricted to known nodes.

    Args:
        dependencies: Mapping of module name to the modules it depends on

    Returns:
        Dictionary keyed by every module in ``dependencies``; edges to
        modules outside the mapping are dropped.
    """
    nodes = set(dependencies)
    return {
        node: {target for target in targets if target in nodes}
        for node, targets in dependencies.items()
    }


class _DfsState:
    """Mutable state container for cycle-detecting depth-first search."""

    def __init__(self) -> None:
        self.visited: set[str] = set()
        self.stack: list[str] = []
        self.on_stack: set[str] = set()
        self.cycles: list[list[str]] = []


def _visit(node: str, graph: dict[str, set[str]], state: _DfsState) -> None:
    """Process a node; every back edge found records one cycle."""
    state.visited.add(node)
    state.stack.append(node)
    state.on_stack.add(node)

    for neighbor in sorted(graph.get(node, set())):
        if neighbor in state.on_stack:
            start = state.stack.index(neighbor)
            state.cycles.append(state.stack[start:])
        elif neighbor not in state.visited:
            _visit(neighbor, graph, state)

    state.stack.pop()
    state.on_stack.remove(node)


def find_cycles(
    graph: dict[str, set[str]],
    roots: Iterable[str] | None = None,
) -> list[list[str]]:
    """Find cycles in a directed graph using depth-first search.

    Roots are tried in ``roots`` order (default: graph order); a node already
    visited from an earlier root is not used as a new root. The recursion
    stack is per traversal, so a finished traversal never leaves nodes behind
    that later roots could mistake for back edges.

    Args:
        graph: Dictionary representing the graph
        roots: Optional root order

    Returns:
        List of cycles in traversal order, each starting at the node the
        back edge returned to (``["a", "b", "c"]`` for a -> b -> c -> a).
    """
    state = _DfsState()

    for node in roots if roots is not None else graph:
        if node not in state.visited:
            _visit(node, graph, state)

    return state.cycles


def format_cycle(cycle: list[str], arrow: str = " → ") -> str:
    """Render a cycle closed back to its first node.

    Examples:
        >>> format_cycle(["a", "b", "c"])
        'a → b → c → a'
    """
    return arrow.join([*cycle, cycle[0]])


__all__ = [
    "_DfsState",
    "_visit",
    "build_dependency_graph",
    "find_cycles",
    "format_cycle",
]
