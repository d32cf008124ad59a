"""Projects API router"""
from fastapi import APIRouter, Depends, HTTPException, Response, status
from typing import List
from worktrack.application.dto.project_dto import (
    ProjectCreateDTO,
    ProjectResponseDTO,
    ProjectUpdateDTO,
    ProjectWithTodosDTO,
)
from worktrack.application.dto.todo_dto import TodoResponseDTO
from worktrack.application.use_cases.project_use_cases import ProjectUseCases
from worktrack.domain.errors import DomainError
from worktrack.presentation.api.v1.dependencies import get_project_use_cases
from worktrack.presentation.api.v1.errors import to_http_exception

router = APIRouter(prefix="/projects", tags=["projects"], redirect_slashes=False)


@router.post("/", response_model=ProjectResponseDTO, status_code=status.HTTP_201_CREATED)
async def create_project(
    project_data: ProjectCreateDTO,
    use_cases: ProjectUseCases = Depends(get_project_use_cases),
):
    """Create a new project"""
    try:
        return await use_cases.create_project(project_data)
    except DomainError as e:
        raise to_http_exception(e)


@router.get("/", response_model=List[ProjectResponseDTO])
async def get_all_projects(use_cases: ProjectUseCases = Depends(get_project_use_cases)):
    """Get all projects"""
    return await use_cases.get_all_projects()


@router.get("/{project_id}", response_model=ProjectResponseDTO)
async def get_project(
    project_id: str,
    use_cases: ProjectUseCases = Depends(get_project_use_cases),
):
    """Get project by ID"""
    project = await use_cases.get_project(project_id)
    if not project:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Project not found",
        )
    return project


@router.put("/{project_id}", response_model=ProjectResponseDTO)
async def update_project(
    project_id: str,
    project_data: ProjectUpdateDTO,
    use_cases: ProjectUseCases = Depends(get_project_use_cases),
):
    """Update name, description, color or status"""
    try:
        return await use_cases.update_project(project_id, project_data)
    except DomainError as e:
        raise to_http_exception(e)


@router.delete("/{project_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_project(
    project_id: str,
    use_cases: ProjectUseCases = Depends(get_project_use_cases),
):
    """Delete project; its todos are kept without a project"""
    deleted = await use_cases.delete_project(project_id)
    if not deleted:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Project not found",
        )
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/{project_id}/todos", response_model=ProjectWithTodosDTO)
async def get_project_todos(
    project_id: str,
    use_cases: ProjectUseCases = Depends(get_project_use_cases),
):
    """Get a project together with its todos"""
    try:
        return await use_cases.get_todos_by_project(project_id)
    except DomainError as e:
        raise to_http_exception(e)


@router.post("/{project_id}/todos/{todo_id}", response_model=TodoResponseDTO)
async def add_todo_to_project(
    project_id: str,
    todo_id: str,
    use_cases: ProjectUseCases = Depends(get_project_use_cases),
):
    try:
        return await use_cases.add_todo_to_project(project_id, todo_id)
    except DomainError as e:
        raise to_http_exception(e)


@router.delete("/{project_id}/todos/{todo_id}", response_model=TodoResponseDTO)
async def remove_todo_from_project(
    project_id: str,
    todo_id: str,
    use_cases: ProjectUseCases = Depends(get_project_use_cases),
):
    try:
        return await use_cases.remove_todo_from_project(project_id, todo_id)
    except DomainError as e:
        raise to_http_exception(e)
