"""Subtask hierarchy and dependency use cases

Every mutation runs read -> validate -> write inside the repository's write
lock for its relation, so two concurrent edge insertions cannot both pass
validation against the same stale graph.
"""
import logging
from typing import Iterable, List, Optional, Set

from worktrack.application.dto.todo_dto import TodoResponseDTO, TodoTreeNodeDTO
from worktrack.application.use_cases.todo_use_cases import todo_to_dto
from worktrack.domain.entities.todo import Todo
from worktrack.domain.errors import DomainError, TodoNotFoundError
from worktrack.domain.repositories.todo_repository import TodoRepository
from worktrack.domain.services.graph_consistency import (
    DEFAULT_TREE_DEPTH,
    DependencyGraph,
    HierarchyIndex,
    TodoTreeNode,
    build_dependency_tree,
    build_subtask_tree,
    ensure_can_add_dependency,
    ensure_can_remove_dependency,
    ensure_can_set_parent,
    ensure_is_subtask,
)

logger = logging.getLogger(__name__)

HIERARCHY_SCOPE = "hierarchy"
DEPENDENCY_SCOPE = "dependency"


def tree_to_dto(node: TodoTreeNode) -> TodoTreeNodeDTO:
    return TodoTreeNodeDTO(
        id=node.todo.id,
        title=node.todo.title,
        status=node.todo.status,
        priority=node.todo.priority,
        children=[tree_to_dto(child) for child in node.children],
    )


def _collect_within_depth(root_id: str, neighbours, max_depth: int) -> Set[str]:
    """IDs reachable from ``root_id`` in at most ``max_depth`` steps"""
    seen = {root_id}
    frontier = [root_id]
    for _ in range(max_depth):
        next_frontier = []
        for node_id in frontier:
            for nxt in neighbours(node_id):
                if nxt not in seen:
                    seen.add(nxt)
                    next_frontier.append(nxt)
        if not next_frontier:
            break
        frontier = next_frontier
    return seen


class TodoRelationUseCases:
    """Use cases for the subtask hierarchy and the dependency graph"""

    def __init__(
        self,
        todo_repository: TodoRepository,
        subtask_tree_max_depth: int = DEFAULT_TREE_DEPTH,
        dependency_tree_max_depth: int = DEFAULT_TREE_DEPTH,
    ):
        self.todo_repository = todo_repository
        self.subtask_tree_max_depth = subtask_tree_max_depth
        self.dependency_tree_max_depth = dependency_tree_max_depth

    async def _require(self, todo_ids: Iterable[str]) -> List[Todo]:
        todos = []
        for todo_id in todo_ids:
            todo = await self.todo_repository.get_by_id(todo_id)
            if not todo:
                raise TodoNotFoundError(todo_id)
            todos.append(todo)
        return todos

    async def _hierarchy(self) -> HierarchyIndex:
        return HierarchyIndex(await self.todo_repository.get_parent_links())

    async def _dependency_graph(self) -> DependencyGraph:
        return DependencyGraph(await self.todo_repository.get_dependency_edges())

    # Hierarchy

    async def set_parent(self, child_id: str, parent_id: str) -> TodoResponseDTO:
        """Move ``child_id`` under ``parent_id``"""
        async with self.todo_repository.write_lock(HIERARCHY_SCOPE):
            await self._require([child_id, parent_id])
            try:
                ensure_can_set_parent(await self._hierarchy(), child_id, parent_id)
            except DomainError as e:
                logger.warning("Rejected parent %s for todo %s: %s", parent_id, child_id, e)
                raise
            updated = await self.todo_repository.set_parent(child_id, parent_id)
        logger.info("Set parent of todo %s to %s", child_id, parent_id)
        return todo_to_dto(updated)

    async def remove_parent(self, child_id: str) -> TodoResponseDTO:
        """Detach ``child_id`` from its parent, if any"""
        async with self.todo_repository.write_lock(HIERARCHY_SCOPE):
            await self._require([child_id])
            updated = await self.todo_repository.set_parent(child_id, None)
        logger.info("Removed parent of todo %s", child_id)
        return todo_to_dto(updated)

    async def add_subtask(self, parent_id: str, subtask_id: str) -> TodoResponseDTO:
        """Attach ``subtask_id`` under ``parent_id``; returns the subtask"""
        return await self.set_parent(subtask_id, parent_id)

    async def remove_subtask(self, parent_id: str, subtask_id: str) -> TodoResponseDTO:
        """Detach ``subtask_id`` from ``parent_id``; returns the subtask"""
        async with self.todo_repository.write_lock(HIERARCHY_SCOPE):
            await self._require([parent_id, subtask_id])
            ensure_is_subtask(await self._hierarchy(), parent_id, subtask_id)
            updated = await self.todo_repository.set_parent(subtask_id, None)
        logger.info("Removed subtask %s from todo %s", subtask_id, parent_id)
        return todo_to_dto(updated)

    async def get_subtasks(self, parent_id: str) -> List[TodoResponseDTO]:
        await self._require([parent_id])
        return [todo_to_dto(todo) for todo in await self.todo_repository.find_children(parent_id)]

    async def get_parent(self, todo_id: str) -> Optional[TodoResponseDTO]:
        (todo,) = await self._require([todo_id])
        if todo.parent_id is None:
            return None
        parent = await self.todo_repository.get_by_id(todo.parent_id)
        return todo_to_dto(parent) if parent else None

    async def get_subtask_tree(self, todo_id: str, max_depth: Optional[int] = None) -> TodoTreeNodeDTO:
        max_depth = self.subtask_tree_max_depth if max_depth is None else max_depth
        (root,) = await self._require([todo_id])
        index = await self._hierarchy()
        todo_ids = _collect_within_depth(todo_id, index.children_of, max_depth)
        todos = await self.todo_repository.get_by_ids(sorted(todo_ids))
        return tree_to_dto(build_subtask_tree(root, index, todos, max_depth))

    # Dependencies

    async def add_dependency(self, todo_id: str, dependency_id: str) -> TodoResponseDTO:
        """Record that ``todo_id`` depends on ``dependency_id``"""
        async with self.todo_repository.write_lock(DEPENDENCY_SCOPE):
            await self._require([todo_id, dependency_id])
            try:
                ensure_can_add_dependency(await self._dependency_graph(), todo_id, dependency_id)
            except DomainError as e:
                logger.warning("Rejected dependency %s -> %s: %s", todo_id, dependency_id, e)
                raise
            await self.todo_repository.add_dependency(todo_id, dependency_id)
        logger.info("Added dependency %s -> %s", todo_id, dependency_id)
        return todo_to_dto(await self.todo_repository.get_by_id(todo_id))

    async def remove_dependency(self, todo_id: str, dependency_id: str) -> TodoResponseDTO:
        async with self.todo_repository.write_lock(DEPENDENCY_SCOPE):
            await self._require([todo_id, dependency_id])
            ensure_can_remove_dependency(await self._dependency_graph(), todo_id, dependency_id)
            await self.todo_repository.remove_dependency(todo_id, dependency_id)
        logger.info("Removed dependency %s -> %s", todo_id, dependency_id)
        return todo_to_dto(await self.todo_repository.get_by_id(todo_id))

    async def get_dependencies(self, todo_id: str) -> List[TodoResponseDTO]:
        await self._require([todo_id])
        return [todo_to_dto(todo) for todo in await self.todo_repository.find_dependencies(todo_id)]

    async def get_dependents(self, todo_id: str) -> List[TodoResponseDTO]:
        await self._require([todo_id])
        return [todo_to_dto(todo) for todo in await self.todo_repository.find_dependents(todo_id)]

    async def get_dependency_tree(self, todo_id: str, max_depth: Optional[int] = None) -> TodoTreeNodeDTO:
        max_depth = self.dependency_tree_max_depth if max_depth is None else max_depth
        (root,) = await self._require([todo_id])
        graph = await self._dependency_graph()
        todo_ids = _collect_within_depth(todo_id, graph.dependencies_of, max_depth)
        todos = await self.todo_repository.get_by_ids(sorted(todo_ids))
        return tree_to_dto(build_dependency_tree(root, graph, todos, max_depth))
