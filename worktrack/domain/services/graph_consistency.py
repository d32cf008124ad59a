"""Graph consistency for the hierarchy and dependency relations

Both relations share the todo id space but have different shapes:

* hierarchy: every todo has at most one parent, so parent pointers form a
  forest and cycle checks are an O(depth) walk up the ancestors;
* dependencies: many-to-many, must stay a DAG, so cycle checks are a
  reachability search bounded by the number of nodes.

Each relation is held once (parent pointers, ``(todo_id, dependency_id)``
edges) and both directions are derived indexes over that single store.
"""
from collections import defaultdict
from dataclasses import dataclass, field
from typing import Dict, FrozenSet, Iterable, Iterator, List, Mapping, Optional, Set, Tuple

from worktrack.domain.entities.todo import Todo
from worktrack.domain.errors import (
    CircularReferenceError,
    DependencyCycleError,
    DependencyExistsError,
    DependencyNotFoundError,
    SelfDependencyError,
    SelfReferenceError,
    SubtaskNotFoundError,
)

DEFAULT_TREE_DEPTH = 10

Edge = Tuple[str, str]


class DependencyGraph:
    """Immutable index over ``(todo_id, dependency_id)`` edges"""

    def __init__(self, edges: Iterable[Edge] = ()):
        self._edges: Set[Edge] = set()
        self._dependencies: Dict[str, Set[str]] = defaultdict(set)
        self._dependents: Dict[str, Set[str]] = defaultdict(set)
        for todo_id, dependency_id in edges:
            self._edges.add((todo_id, dependency_id))
            self._dependencies[todo_id].add(dependency_id)
            self._dependents[dependency_id].add(todo_id)

    @property
    def edges(self) -> FrozenSet[Edge]:
        return frozenset(self._edges)

    @property
    def nodes(self) -> Set[str]:
        return set(self._dependencies) | set(self._dependents)

    def __len__(self) -> int:
        return len(self._edges)

    def has_edge(self, todo_id: str, dependency_id: str) -> bool:
        return (todo_id, dependency_id) in self._edges

    def dependencies_of(self, todo_id: str) -> List[str]:
        return sorted(self._dependencies.get(todo_id, ()))

    def dependents_of(self, todo_id: str) -> List[str]:
        return sorted(self._dependents.get(todo_id, ()))

    def reaches(self, source: str, target: str) -> bool:
        """True if ``target`` is reachable from ``source`` along dependency edges"""
        if source == target:
            return True
        visited = {source}
        stack = [source]
        while stack:
            current = stack.pop()
            for nxt in self._dependencies.get(current, ()):
                if nxt == target:
                    return True
                if nxt not in visited:
                    visited.add(nxt)
                    stack.append(nxt)
        return False

    def is_acyclic(self) -> bool:
        """Kahn's algorithm over the whole graph"""
        in_degree = {node: 0 for node in self.nodes}
        for _, dependency_id in self._edges:
            in_degree[dependency_id] += 1
        ready = [node for node, degree in in_degree.items() if degree == 0]
        seen = 0
        while ready:
            node = ready.pop()
            seen += 1
            for nxt in self._dependencies.get(node, ()):
                in_degree[nxt] -= 1
                if in_degree[nxt] == 0:
                    ready.append(nxt)
        return seen == len(in_degree)

    def with_edge(self, todo_id: str, dependency_id: str) -> "DependencyGraph":
        return DependencyGraph(self._edges | {(todo_id, dependency_id)})

    def without_edge(self, todo_id: str, dependency_id: str) -> "DependencyGraph":
        return DependencyGraph(self._edges - {(todo_id, dependency_id)})


class HierarchyIndex:
    """Immutable index over child -> parent pointers with a derived children view"""

    def __init__(self, parent_links: Mapping[str, Optional[str]] = None):
        self._parents: Dict[str, str] = {}
        self._children: Dict[str, Set[str]] = defaultdict(set)
        for child_id, parent_id in (parent_links or {}).items():
            if parent_id is not None:
                self._parents[child_id] = parent_id
                self._children[parent_id].add(child_id)

    @property
    def parent_links(self) -> Dict[str, str]:
        return dict(self._parents)

    def parent_of(self, todo_id: str) -> Optional[str]:
        return self._parents.get(todo_id)

    def children_of(self, todo_id: str) -> List[str]:
        return sorted(self._children.get(todo_id, ()))

    def ancestors(self, todo_id: str) -> Iterator[str]:
        """Walk parent pointers upward from ``todo_id`` (exclusive)

        Stops if stored pointers already loop, so a corrupted relation cannot
        hang the walk.
        """
        seen = {todo_id}
        current = self._parents.get(todo_id)
        while current is not None and current not in seen:
            yield current
            seen.add(current)
            current = self._parents.get(current)

    def is_ancestor(self, candidate: str, todo_id: str) -> bool:
        return any(ancestor == candidate for ancestor in self.ancestors(todo_id))

    def with_parent(self, child_id: str, parent_id: Optional[str]) -> "HierarchyIndex":
        links = dict(self._parents)
        links[child_id] = parent_id
        return HierarchyIndex(links)


def ensure_can_set_parent(index: HierarchyIndex, child_id: str, parent_id: str) -> None:
    """Reject a parent assignment that breaks the forest shape

    Raises:
        SelfReferenceError: child and parent are the same todo
        CircularReferenceError: ``parent_id`` is ``child_id`` or one of its descendants
    """
    if child_id == parent_id:
        raise SelfReferenceError(child_id)
    if index.is_ancestor(child_id, parent_id):
        raise CircularReferenceError(child_id, parent_id)


def ensure_is_subtask(index: HierarchyIndex, parent_id: str, subtask_id: str) -> None:
    if index.parent_of(subtask_id) != parent_id:
        raise SubtaskNotFoundError(subtask_id, parent_id)


def ensure_can_add_dependency(graph: DependencyGraph, todo_id: str, dependency_id: str) -> None:
    """Reject an edge that is a self-loop, a duplicate, or closes a cycle

    The new edge ``todo_id -> dependency_id`` closes a cycle exactly when
    ``dependency_id`` already reaches ``todo_id``.
    """
    if todo_id == dependency_id:
        raise SelfDependencyError(todo_id)
    if graph.has_edge(todo_id, dependency_id):
        raise DependencyExistsError(todo_id, dependency_id)
    if graph.reaches(dependency_id, todo_id):
        raise DependencyCycleError(todo_id, dependency_id)


def ensure_can_remove_dependency(graph: DependencyGraph, todo_id: str, dependency_id: str) -> None:
    if not graph.has_edge(todo_id, dependency_id):
        raise DependencyNotFoundError(todo_id, dependency_id)


@dataclass
class TodoTreeNode:
    """One node of an unfolded hierarchy or dependency tree"""
    todo: Todo
    children: List["TodoTreeNode"] = field(default_factory=list)

    def walk(self) -> Iterator["TodoTreeNode"]:
        yield self
        for child in self.children:
            yield from child.walk()

    @property
    def depth(self) -> int:
        if not self.children:
            return 0
        return 1 + max(child.depth for child in self.children)


def build_dependency_tree(
    root: Todo,
    graph: DependencyGraph,
    todos: Mapping[str, Todo],
    max_depth: int = DEFAULT_TREE_DEPTH,
) -> TodoTreeNode:
    """Unfold dependencies from ``root`` down to ``max_depth`` levels

    A todo met again on its own path means the stored edges contain a cycle,
    which raises :class:`DependencyCycleError`. The same todo reached through
    two different branches is a diamond and is expanded in both.
    """

    def unfold(todo: Todo, depth: int, path: FrozenSet[str]) -> TodoTreeNode:
        node = TodoTreeNode(todo)
        if depth >= max_depth:
            return node
        for dependency_id in graph.dependencies_of(todo.id):
            if dependency_id in path:
                raise DependencyCycleError(todo.id, dependency_id)
            dependency = todos.get(dependency_id)
            if dependency is None:
                continue
            node.children.append(unfold(dependency, depth + 1, path | {dependency_id}))
        return node

    return unfold(root, 0, frozenset({root.id}))


def build_subtask_tree(
    root: Todo,
    index: HierarchyIndex,
    todos: Mapping[str, Todo],
    max_depth: int = DEFAULT_TREE_DEPTH,
) -> TodoTreeNode:
    """Unfold subtasks from ``root`` down to ``max_depth`` levels"""

    def unfold(todo: Todo, depth: int, path: FrozenSet[str]) -> TodoTreeNode:
        node = TodoTreeNode(todo)
        if depth >= max_depth:
            return node
        for child_id in index.children_of(todo.id):
            if child_id in path:
                raise CircularReferenceError(child_id, todo.id)
            child = todos.get(child_id)
            if child is None:
                continue
            node.children.append(unfold(child, depth + 1, path | {child_id}))
        return node

    return unfold(root, 0, frozenset({root.id}))
