"""Tag use cases"""
import logging
import uuid
from typing import List, Sequence

from worktrack.application.dto.tag_dto import (
    BulkTagOperationResultDTO,
    TagCreateDTO,
    TagMatchMode,
    TagResponseDTO,
    TagStatisticsDTO,
    TagUpdateDTO,
)
from worktrack.application.dto.todo_dto import TodoResponseDTO
from worktrack.application.use_cases.todo_use_cases import todo_to_dto
from worktrack.domain.entities.tag import Tag, TagUsage
from worktrack.domain.errors import TagExistsError, TagNotFoundError, TodoNotFoundError
from worktrack.domain.repositories.tag_repository import TagRepository
from worktrack.domain.repositories.todo_repository import TodoRepository

logger = logging.getLogger(__name__)


def tag_to_dto(tag: Tag) -> TagResponseDTO:
    return TagResponseDTO(id=tag.id, name=tag.name, color=tag.color, created_at=tag.created_at)


def usage_to_dto(usage: TagUsage) -> TagStatisticsDTO:
    return TagStatisticsDTO(
        id=usage.tag.id,
        name=usage.tag.name,
        color=usage.tag.color,
        usage_count=usage.usage_count,
        pending_todo_count=usage.pending_todo_count,
        completed_todo_count=usage.completed_todo_count,
    )


class TagUseCases:
    """Use cases for tags and their assignment to todos"""

    def __init__(self, tag_repository: TagRepository, todo_repository: TodoRepository):
        self.tag_repository = tag_repository
        self.todo_repository = todo_repository

    async def create_tag(self, tag_data: TagCreateDTO) -> TagResponseDTO:
        """Create a tag with a unique name"""
        if await self.tag_repository.get_by_name(tag_data.name):
            logger.warning("Rejected duplicate tag name %r", tag_data.name)
            raise TagExistsError(tag_data.name)
        tag = await self.tag_repository.create(
            Tag(id=str(uuid.uuid4()), name=tag_data.name, color=tag_data.color)
        )
        logger.info("Created tag %s (%s)", tag.id, tag.name)
        return tag_to_dto(tag)

    async def get_all_tags(self) -> List[TagResponseDTO]:
        return [tag_to_dto(tag) for tag in await self.tag_repository.get_all()]

    async def update_tag(self, tag_id: str, tag_data: TagUpdateDTO) -> TagResponseDTO:
        """Rename or recolor a tag; a new name must still be unique"""
        tag = await self._get_or_raise(tag_id)
        if tag_data.name is not None and tag_data.name != tag.name:
            other = await self.tag_repository.get_by_name(tag_data.name)
            if other and other.id != tag_id:
                logger.warning("Rejected rename of tag %s to taken name %r", tag_id, tag_data.name)
                raise TagExistsError(tag_data.name)
            tag.name = tag_data.name
        if tag_data.color is not None:
            tag.color = tag_data.color
        updated = await self.tag_repository.update(tag)
        logger.info("Updated tag %s", tag_id)
        return tag_to_dto(updated)

    async def get_tag_statistics(self) -> List[TagStatisticsDTO]:
        """Per tag: how many todos carry it, and how many of those are pending or completed"""
        return [usage_to_dto(usage) for usage in await self.tag_repository.get_usage_statistics()]

    async def delete_tag(self, tag_id: str) -> bool:
        deleted = await self.tag_repository.delete(tag_id)
        if deleted:
            logger.info("Deleted tag %s", tag_id)
        return deleted

    async def _get_or_raise(self, tag_id: str) -> Tag:
        tag = await self.tag_repository.get_by_id(tag_id)
        if not tag:
            raise TagNotFoundError(tag_id)
        return tag

    async def _check(self, tag_id: str, todo_id: str) -> None:
        await self._get_or_raise(tag_id)
        if not await self.todo_repository.get_by_id(todo_id):
            raise TodoNotFoundError(todo_id)

    async def add_tag_to_todo(self, tag_id: str, todo_id: str) -> TodoResponseDTO:
        """Attach a tag to a todo; attaching twice is a no-op"""
        await self._check(tag_id, todo_id)
        await self.tag_repository.add_to_todo(tag_id, todo_id)
        logger.info("Tagged todo %s with %s", todo_id, tag_id)
        return todo_to_dto(await self.todo_repository.get_by_id(todo_id))

    async def remove_tag_from_todo(self, tag_id: str, todo_id: str) -> TodoResponseDTO:
        await self._check(tag_id, todo_id)
        await self.tag_repository.remove_from_todo(tag_id, todo_id)
        logger.info("Untagged todo %s from %s", todo_id, tag_id)
        return todo_to_dto(await self.todo_repository.get_by_id(todo_id))

    async def get_todos_by_tags(
        self, tag_ids: Sequence[str], mode: TagMatchMode = TagMatchMode.ALL
    ) -> List[TodoResponseDTO]:
        """Todos carrying all (or any) of the given tags; no tags selects nothing"""
        if not tag_ids:
            return []
        for tag_id in tag_ids:
            await self._get_or_raise(tag_id)

        if mode == TagMatchMode.ALL:
            todo_ids = await self.tag_repository.get_todo_ids_with_all_tags(tag_ids)
        else:
            todo_ids = await self.tag_repository.get_todo_ids_with_any_tag(tag_ids)
        todos = await self.todo_repository.get_by_ids(todo_ids)
        return [todo_to_dto(todos[todo_id]) for todo_id in todo_ids if todo_id in todos]

    async def _check_bulk(self, tag_id: str, todo_ids: Sequence[str]) -> Tag:
        tag = await self._get_or_raise(tag_id)
        found = await self.todo_repository.get_by_ids(list(todo_ids))
        missing = [todo_id for todo_id in todo_ids if todo_id not in found]
        if missing:
            raise TodoNotFoundError(missing[0])
        return tag

    async def bulk_assign_tag(self, tag_id: str, todo_ids: Sequence[str]) -> BulkTagOperationResultDTO:
        """Attach a tag to every listed todo; all of them must exist"""
        tag = await self._check_bulk(tag_id, todo_ids)
        assigned = await self.tag_repository.bulk_add_to_todos(tag_id, todo_ids) if todo_ids else 0
        logger.info("Tagged %s todo(s) with %s", assigned, tag_id)
        return BulkTagOperationResultDTO(tag=tag_to_dto(tag), affected_count=assigned)

    async def bulk_remove_tag(self, tag_id: str, todo_ids: Sequence[str]) -> BulkTagOperationResultDTO:
        """Detach a tag from every listed todo; all of them must exist"""
        tag = await self._check_bulk(tag_id, todo_ids)
        removed = await self.tag_repository.bulk_remove_from_todos(tag_id, todo_ids) if todo_ids else 0
        logger.info("Untagged %s todo(s) from %s", removed, tag_id)
        return BulkTagOperationResultDTO(tag=tag_to_dto(tag), affected_count=removed)
