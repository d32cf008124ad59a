"""Subtasks API router"""
from fastapi import APIRouter, Depends, Query
from typing import List, Optional
from worktrack.application.dto.todo_dto import (
    AddSubtaskDTO,
    SetParentDTO,
    TodoResponseDTO,
    TodoTreeNodeDTO,
)
from worktrack.application.use_cases.todo_relation_use_cases import TodoRelationUseCases
from worktrack.domain.errors import DomainError
from worktrack.presentation.api.v1.dependencies import get_relation_use_cases
from worktrack.presentation.api.v1.errors import to_http_exception

router = APIRouter(prefix="/todos", tags=["subtasks"], redirect_slashes=False)


@router.get("/{todo_id}/subtasks", response_model=List[TodoResponseDTO])
async def get_subtasks(
    todo_id: str,
    use_cases: TodoRelationUseCases = Depends(get_relation_use_cases),
):
    """Get direct subtasks of a todo"""
    try:
        return await use_cases.get_subtasks(todo_id)
    except DomainError as e:
        raise to_http_exception(e)


@router.post("/{todo_id}/subtasks", response_model=TodoResponseDTO)
async def add_subtask(
    todo_id: str,
    subtask_data: AddSubtaskDTO,
    use_cases: TodoRelationUseCases = Depends(get_relation_use_cases),
):
    """Attach an existing todo as a subtask; returns the subtask"""
    try:
        return await use_cases.add_subtask(todo_id, subtask_data.subtask_id)
    except DomainError as e:
        raise to_http_exception(e)


@router.delete("/{todo_id}/subtasks/{subtask_id}", response_model=TodoResponseDTO)
async def remove_subtask(
    todo_id: str,
    subtask_id: str,
    use_cases: TodoRelationUseCases = Depends(get_relation_use_cases),
):
    """Detach a subtask; returns the detached todo"""
    try:
        return await use_cases.remove_subtask(todo_id, subtask_id)
    except DomainError as e:
        raise to_http_exception(e)


@router.get("/{todo_id}/subtasks/tree", response_model=TodoTreeNodeDTO)
async def get_subtask_tree(
    todo_id: str,
    max_depth: Optional[int] = Query(default=None, ge=0),
    use_cases: TodoRelationUseCases = Depends(get_relation_use_cases),
):
    """Get the nested subtask tree rooted at a todo"""
    try:
        return await use_cases.get_subtask_tree(todo_id, max_depth=max_depth)
    except DomainError as e:
        raise to_http_exception(e)


@router.get("/{todo_id}/parent", response_model=Optional[TodoResponseDTO])
async def get_parent(
    todo_id: str,
    use_cases: TodoRelationUseCases = Depends(get_relation_use_cases),
):
    """Get the parent of a todo, or null for a root todo"""
    try:
        return await use_cases.get_parent(todo_id)
    except DomainError as e:
        raise to_http_exception(e)


@router.put("/{todo_id}/parent", response_model=TodoResponseDTO)
async def set_parent(
    todo_id: str,
    parent_data: SetParentDTO,
    use_cases: TodoRelationUseCases = Depends(get_relation_use_cases),
):
    """Move a todo under another one

    Returns 409 if the new parent is the todo itself or one of its descendants.
    """
    try:
        return await use_cases.set_parent(todo_id, parent_data.parent_id)
    except DomainError as e:
        raise to_http_exception(e)


@router.delete("/{todo_id}/parent", response_model=TodoResponseDTO)
async def remove_parent(
    todo_id: str,
    use_cases: TodoRelationUseCases = Depends(get_relation_use_cases),
):
    """Make a todo a root todo"""
    try:
        return await use_cases.remove_parent(todo_id)
    except DomainError as e:
        raise to_http_exception(e)
