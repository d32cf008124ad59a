"""SQLAlchemy implementation of TagRepository"""
from typing import Dict, List, Optional, Sequence
from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from worktrack.domain.entities.tag import Tag, TagUsage
from worktrack.domain.entities.todo import TodoStatus
from worktrack.domain.errors import TagExistsError, TagNotFoundError
from worktrack.domain.repositories.tag_repository import TagRepository
from worktrack.infrastructure.database.models import TagModel, TodoModel, TodoTagModel


class TagRepositoryDB(TagRepository):
    """SQLAlchemy implementation of TagRepository"""

    def __init__(self, db: Session):
        self.db = db

    def _tag_model_to_entity(self, model: TagModel) -> Tag:
        return Tag(
            id=str(model.id),
            name=model.name,
            color=model.color,
            created_at=model.created_at,
        )

    def _commit_unique_name(self, name: str) -> None:
        # The unique index on name settles races between two writers
        try:
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            raise TagExistsError(name)

    async def create(self, tag: Tag) -> Tag:
        tag_model = TagModel(
            id=tag.id if tag.id else None,
            name=tag.name,
            color=tag.color,
            created_at=tag.created_at,
        )
        self.db.add(tag_model)
        self._commit_unique_name(tag.name)
        self.db.refresh(tag_model)
        return self._tag_model_to_entity(tag_model)

    async def get_by_id(self, tag_id: str) -> Optional[Tag]:
        tag_model = self.db.query(TagModel).filter(TagModel.id == tag_id).first()
        return self._tag_model_to_entity(tag_model) if tag_model else None

    async def get_by_name(self, name: str) -> Optional[Tag]:
        tag_model = self.db.query(TagModel).filter(TagModel.name == name).first()
        return self._tag_model_to_entity(tag_model) if tag_model else None

    async def get_all(self) -> List[Tag]:
        return [self._tag_model_to_entity(model) for model in self.db.query(TagModel).order_by(TagModel.name).all()]

    async def update(self, tag: Tag) -> Tag:
        tag_model = self.db.query(TagModel).filter(TagModel.id == tag.id).first()
        if not tag_model:
            raise TagNotFoundError(tag.id)
        tag_model.name = tag.name
        tag_model.color = tag.color
        self._commit_unique_name(tag.name)
        self.db.refresh(tag_model)
        return self._tag_model_to_entity(tag_model)

    async def delete(self, tag_id: str) -> bool:
        tag_model = self.db.query(TagModel).filter(TagModel.id == tag_id).first()
        if not tag_model:
            return False
        self.db.query(TodoTagModel).filter(TodoTagModel.tag_id == tag_id).delete(synchronize_session=False)
        self.db.delete(tag_model)
        self.db.commit()
        return True

    async def get_usage_statistics(self) -> List[TagUsage]:
        usage = {str(model.id): TagUsage(tag=self._tag_model_to_entity(model))
                 for model in self.db.query(TagModel).order_by(TagModel.name).all()}
        rows = (
            self.db.query(TodoTagModel.tag_id, TodoModel.status, func.count())
            .join(TodoModel, TodoModel.id == TodoTagModel.todo_id)
            .group_by(TodoTagModel.tag_id, TodoModel.status)
            .all()
        )
        for tag_id, todo_status, count in rows:
            entry = usage[str(tag_id)]
            entry.usage_count += count
            if todo_status == TodoStatus.PENDING.value:
                entry.pending_todo_count += count
            elif todo_status == TodoStatus.COMPLETED.value:
                entry.completed_todo_count += count
        return list(usage.values())

    async def get_tag_ids_for_todo(self, todo_id: str) -> List[str]:
        links = self.db.query(TodoTagModel).filter(TodoTagModel.todo_id == todo_id).all()
        return sorted(str(link.tag_id) for link in links)

    async def get_tag_ids_for_todos(self, todo_ids: Sequence[str]) -> Dict[str, List[str]]:
        result: Dict[str, List[str]] = {todo_id: [] for todo_id in todo_ids}
        if not result:
            return result
        links = self.db.query(TodoTagModel).filter(TodoTagModel.todo_id.in_(list(result))).all()
        for link in links:
            result[str(link.todo_id)].append(str(link.tag_id))
        return result

    async def add_to_todo(self, tag_id: str, todo_id: str) -> None:
        exists = (
            self.db.query(TodoTagModel)
            .filter(TodoTagModel.todo_id == todo_id, TodoTagModel.tag_id == tag_id)
            .first()
        )
        if exists:
            return
        self.db.add(TodoTagModel(todo_id=todo_id, tag_id=tag_id))
        self.db.commit()

    async def remove_from_todo(self, tag_id: str, todo_id: str) -> bool:
        deleted = (
            self.db.query(TodoTagModel)
            .filter(TodoTagModel.todo_id == todo_id, TodoTagModel.tag_id == tag_id)
            .delete(synchronize_session=False)
        )
        self.db.commit()
        return deleted > 0

    async def get_todo_ids_with_all_tags(self, tag_ids: Sequence[str]) -> List[str]:
        wanted = set(tag_ids)
        if not wanted:
            return []
        rows = (
            self.db.query(TodoTagModel.todo_id)
            .filter(TodoTagModel.tag_id.in_(list(wanted)))
            .group_by(TodoTagModel.todo_id)
            .having(func.count(TodoTagModel.tag_id) == len(wanted))
            .all()
        )
        return sorted(str(todo_id) for (todo_id,) in rows)

    async def get_todo_ids_with_any_tag(self, tag_ids: Sequence[str]) -> List[str]:
        if not tag_ids:
            return []
        rows = (
            self.db.query(TodoTagModel.todo_id)
            .filter(TodoTagModel.tag_id.in_(list(tag_ids)))
            .distinct()
            .all()
        )
        return sorted(str(todo_id) for (todo_id,) in rows)

    async def bulk_add_to_todos(self, tag_id: str, todo_ids: Sequence[str]) -> int:
        already = {
            str(todo_id)
            for (todo_id,) in self.db.query(TodoTagModel.todo_id)
            .filter(TodoTagModel.tag_id == tag_id, TodoTagModel.todo_id.in_(list(todo_ids)))
            .all()
        }
        new_ids = [todo_id for todo_id in dict.fromkeys(todo_ids) if todo_id not in already]
        self.db.add_all(TodoTagModel(todo_id=todo_id, tag_id=tag_id) for todo_id in new_ids)
        self.db.commit()
        return len(new_ids)

    async def bulk_remove_from_todos(self, tag_id: str, todo_ids: Sequence[str]) -> int:
        deleted = (
            self.db.query(TodoTagModel)
            .filter(TodoTagModel.tag_id == tag_id, TodoTagModel.todo_id.in_(list(todo_ids)))
            .delete(synchronize_session=False)
        )
        self.db.commit()
        return deleted
