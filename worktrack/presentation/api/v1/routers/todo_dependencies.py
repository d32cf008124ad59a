"""Todo dependencies API router"""
from fastapi import APIRouter, Depends, Query
from typing import List, Optional
from worktrack.application.dto.todo_dto import (
    AddDependencyDTO,
    TodoResponseDTO,
    TodoTreeNodeDTO,
)
from worktrack.application.use_cases.todo_relation_use_cases import TodoRelationUseCases
from worktrack.domain.errors import DomainError
from worktrack.presentation.api.v1.dependencies import get_relation_use_cases
from worktrack.presentation.api.v1.errors import to_http_exception

router = APIRouter(prefix="/todos", tags=["dependencies"], redirect_slashes=False)


@router.get("/{todo_id}/dependencies", response_model=List[TodoResponseDTO])
async def get_dependencies(
    todo_id: str,
    use_cases: TodoRelationUseCases = Depends(get_relation_use_cases),
):
    """Get the todos this todo depends on"""
    try:
        return await use_cases.get_dependencies(todo_id)
    except DomainError as e:
        raise to_http_exception(e)


@router.post("/{todo_id}/dependencies", response_model=TodoResponseDTO)
async def add_dependency(
    todo_id: str,
    dependency_data: AddDependencyDTO,
    use_cases: TodoRelationUseCases = Depends(get_relation_use_cases),
):
    """Make this todo depend on another one

    Returns 409 if the edge exists already or would close a cycle.
    """
    try:
        return await use_cases.add_dependency(todo_id, dependency_data.dependency_id)
    except DomainError as e:
        raise to_http_exception(e)


@router.delete("/{todo_id}/dependencies/{dependency_id}", response_model=TodoResponseDTO)
async def remove_dependency(
    todo_id: str,
    dependency_id: str,
    use_cases: TodoRelationUseCases = Depends(get_relation_use_cases),
):
    try:
        return await use_cases.remove_dependency(todo_id, dependency_id)
    except DomainError as e:
        raise to_http_exception(e)


@router.get("/{todo_id}/dependencies/tree", response_model=TodoTreeNodeDTO)
async def get_dependency_tree(
    todo_id: str,
    max_depth: Optional[int] = Query(default=None, ge=0),
    use_cases: TodoRelationUseCases = Depends(get_relation_use_cases),
):
    """Get the nested dependency tree rooted at a todo"""
    try:
        return await use_cases.get_dependency_tree(todo_id, max_depth=max_depth)
    except DomainError as e:
        raise to_http_exception(e)


@router.get("/{todo_id}/dependents", response_model=List[TodoResponseDTO])
async def get_dependents(
    todo_id: str,
    use_cases: TodoRelationUseCases = Depends(get_relation_use_cases),
):
    """Get the todos that depend on this todo"""
    try:
        return await use_cases.get_dependents(todo_id)
    except DomainError as e:
        raise to_http_exception(e)
