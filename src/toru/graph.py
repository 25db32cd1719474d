"""Dependency graph between tasks, keyed by task id."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import TYPE_CHECKING, Any

from toru import log
from toru.errors import InternalError, RecordError, UserError

if TYPE_CHECKING:
    from toru.tasks.model import Task


class DependencyGraph:
    """Adjacency map from a task id to the ids it depends on.

    Every id that appears anywhere (as a node or as an edge target) has a
    node entry, possibly with an empty edge set. Self loops are refused and
    the graph stays acyclic as long as edges go through :meth:`insert_edge`.

    Usage::

        graph = DependencyGraph()
        graph.insert_node(0)
        graph.insert_node(1)
        graph.insert_edge(1, 0)          # task 1 depends on task 0
        existed, dependents = graph.remove_node(0)
    """

    def __init__(self, edges: Mapping[int, Iterable[int]] | None = None) -> None:
        self._edges: dict[int, set[int]] = {}
        for node, targets in (edges or {}).items():
            self._edges.setdefault(node, set()).update(targets)
            for target in targets:
                self._edges.setdefault(target, set())

    @classmethod
    def create(cls, tasks: Iterable[Task]) -> DependencyGraph:
        """Build the graph from each task's stored dependency set."""
        return cls({task.id: task.dependencies for task in tasks})

    # ── node / edge queries ──────────────────────────────────────

    def __len__(self) -> int:
        return len(self._edges)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, DependencyGraph):
            return NotImplemented
        return self._edges == other._edges

    def __repr__(self) -> str:
        return f"DependencyGraph({self.to_dict()!r})"

    def nodes(self) -> list[int]:
        return sorted(self._edges)

    def contains_node(self, node: int) -> bool:
        return node in self._edges

    def dependencies_of(self, node: int) -> set[int]:
        """Direct dependencies of *node* (empty set for unknown ids)."""
        return set(self._edges.get(node, ()))

    def dependents_of(self, node: int) -> set[int]:
        """Ids of the nodes with an edge pointing at *node*."""
        return {n for n, targets in self._edges.items() if node in targets}

    # ── mutation ─────────────────────────────────────────────────

    def insert_node(self, node: int) -> bool:
        """Add *node* with no edges. Returns ``False`` if it was already present."""
        if node in self._edges:
            return False
        self._edges[node] = set()
        return True

    def insert_edge(self, first: int, second: int) -> bool:
        """Record that *first* depends on *second*.

        Both nodes must already exist; callers validate user-supplied ids
        before getting here. Returns whether the edge is new.
        """
        if first not in self._edges or second not in self._edges:
            raise InternalError(
                f"Attempt to insert edge {first} -> {second} with a node that is not in the dependency graph"
            )
        if first == second:
            raise UserError(f"Task with id {first} cannot depend on itself")
        outgoing = self._edges[first]
        if second in outgoing:
            return False
        outgoing.add(second)
        log.debug(f"Graph: added edge {first} -> {second}")
        return True

    def remove_edge(self, first: int, second: int) -> bool:
        outgoing = self._edges.get(first)
        if outgoing is None or second not in outgoing:
            return False
        outgoing.discard(second)
        log.debug(f"Graph: removed edge {first} -> {second}")
        return True

    def remove_node(self, node: int) -> tuple[bool, set[int]]:
        """Drop *node* and every edge pointing at it.

        Returns whether the node existed, and the ids whose edge sets lost
        *node*. The task files of those dependents still list *node* until
        the caller re-saves them.
        """
        if node not in self._edges:
            return False, set()
        del self._edges[node]
        dependents: set[int] = set()
        for other, outgoing in self._edges.items():
            if node in outgoing:
                outgoing.discard(node)
                dependents.add(other)
        log.debug(f"Graph: removed node {node} (dependents: {sorted(dependents)})")
        return True, dependents

    # ── traversal ────────────────────────────────────────────────

    def find_cycle(self) -> list[int] | None:
        """Return one cycle as ``[a, b, ..., a]``, or ``None`` if acyclic.

        Roots are taken in ascending id order so the result is deterministic.
        Each consecutive pair in the returned list is an edge of the graph.
        """
        unvisited = set(self._edges)
        while unvisited:
            root = min(unvisited)
            cycle = self._find_cycle_from(root, unvisited, [], set())
            if cycle is not None:
                return cycle
        return None

    def _find_cycle_from(
        self,
        node: int,
        unvisited: set[int],
        path: list[int],
        on_path: set[int],
    ) -> list[int] | None:
        if node in on_path:
            return path[path.index(node):] + [node]
        if node not in unvisited:
            return None

        unvisited.discard(node)
        path.append(node)
        on_path.add(node)
        for target in sorted(self._edges[node]):
            cycle = self._find_cycle_from(target, unvisited, path, on_path)
            if cycle is not None:
                return cycle
        path.pop()
        on_path.discard(node)
        return None

    def get_nested_deps(self, node: int) -> set[int]:
        """Transitive closure of *node*'s dependencies.

        Does not guard against cycles; only call once :meth:`find_cycle`
        has returned ``None``.
        """
        nested: set[int] = set()
        for dep in self._edges.get(node, ()):
            nested.add(dep)
            nested |= self.get_nested_deps(dep)
        return nested

    def get_tasks_with_dependents(self) -> set[int]:
        """Ids that at least one other task depends on."""
        targets: set[int] = set()
        for outgoing in self._edges.values():
            targets |= outgoing
        return targets

    # ── serialization ────────────────────────────────────────────

    def to_dict(self) -> dict[int, list[int]]:
        return {node: sorted(self._edges[node]) for node in sorted(self._edges)}

    @classmethod
    def from_dict(cls, raw: Any) -> DependencyGraph:
        if raw is None:
            return cls()
        if not isinstance(raw, Mapping):
            raise RecordError(f"Dependency graph must be a mapping, got {type(raw).__name__}")
        edges: dict[int, list[int]] = {}
        try:
            for node, targets in raw.items():
                edges[int(node)] = [int(t) for t in (targets or [])]
        except (TypeError, ValueError) as exc:
            raise RecordError(f"Malformed dependency graph: {exc}") from exc
        return cls(edges)


def format_cycle(cycle: list[int]) -> str:
    """Render a cycle for diagnostics, e.g. ``5 -> 6 -> 5``."""
    return " -> ".join(str(node) for node in cycle)
