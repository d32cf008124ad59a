"""Tags API router"""
from fastapi import APIRouter, Depends, HTTPException, Response, status
from typing import List
from worktrack.application.dto.tag_dto import (
    BulkTagOperationDTO,
    BulkTagOperationResultDTO,
    TagCreateDTO,
    TagResponseDTO,
    TagStatisticsDTO,
    TagUpdateDTO,
)
from worktrack.application.use_cases.tag_use_cases import TagUseCases
from worktrack.domain.errors import DomainError
from worktrack.presentation.api.v1.dependencies import get_tag_use_cases
from worktrack.presentation.api.v1.errors import to_http_exception

router = APIRouter(prefix="/tags", tags=["tags"], redirect_slashes=False)


@router.post("/", response_model=TagResponseDTO, status_code=status.HTTP_201_CREATED)
async def create_tag(
    tag_data: TagCreateDTO,
    use_cases: TagUseCases = Depends(get_tag_use_cases),
):
    try:
        return await use_cases.create_tag(tag_data)
    except DomainError as e:
        raise to_http_exception(e)


@router.get("/", response_model=List[TagResponseDTO])
async def get_all_tags(use_cases: TagUseCases = Depends(get_tag_use_cases)):
    return await use_cases.get_all_tags()


@router.get("/statistics", response_model=List[TagStatisticsDTO])
async def get_tag_statistics(use_cases: TagUseCases = Depends(get_tag_use_cases)):
    """Usage counts per tag"""
    return await use_cases.get_tag_statistics()


@router.put("/{tag_id}", response_model=TagResponseDTO)
async def update_tag(
    tag_id: str,
    tag_data: TagUpdateDTO,
    use_cases: TagUseCases = Depends(get_tag_use_cases),
):
    try:
        return await use_cases.update_tag(tag_id, tag_data)
    except DomainError as e:
        raise to_http_exception(e)


@router.delete("/{tag_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_tag(
    tag_id: str,
    use_cases: TagUseCases = Depends(get_tag_use_cases),
):
    """Delete a tag and detach it from every todo"""
    deleted = await use_cases.delete_tag(tag_id)
    if not deleted:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Tag not found",
        )
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/{tag_id}/bulk-assign", response_model=BulkTagOperationResultDTO)
async def bulk_assign_tag(
    tag_id: str,
    operation: BulkTagOperationDTO,
    use_cases: TagUseCases = Depends(get_tag_use_cases),
):
    """Attach a tag to several todos at once"""
    try:
        return await use_cases.bulk_assign_tag(tag_id, operation.todo_ids)
    except DomainError as e:
        raise to_http_exception(e)


@router.post("/{tag_id}/bulk-remove", response_model=BulkTagOperationResultDTO)
async def bulk_remove_tag(
    tag_id: str,
    operation: BulkTagOperationDTO,
    use_cases: TagUseCases = Depends(get_tag_use_cases),
):
    """Detach a tag from several todos at once"""
    try:
        return await use_cases.bulk_remove_tag(tag_id, operation.todo_ids)
    except DomainError as e:
        raise to_http_exception(e)
