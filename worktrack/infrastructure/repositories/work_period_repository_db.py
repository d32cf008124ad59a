"""SQLAlchemy implementation of WorkPeriodRepository"""
from datetime import date, datetime
from typing import List, Optional, Sequence
from sqlalchemy.orm import Session
from worktrack.domain.entities.work_period import WorkPeriod
from worktrack.domain.errors import WorkPeriodNotFoundError
from worktrack.domain.repositories.work_period_repository import WorkPeriodRepository
from worktrack.infrastructure.database.models import TodoActivityModel, WorkPeriodModel
from worktrack.infrastructure.repositories.locking import RelationLockMixin


class WorkPeriodRepositoryDB(RelationLockMixin, WorkPeriodRepository):
    """SQLAlchemy implementation of WorkPeriodRepository"""

    def __init__(self, db: Session):
        self.db = db

    def _period_model_to_entity(self, model: WorkPeriodModel) -> WorkPeriod:
        """Convert WorkPeriodModel to WorkPeriod entity"""
        return WorkPeriod(
            id=str(model.id),
            name=model.name,
            date=model.date,
            start_time=model.start_time,
            end_time=model.end_time,
            created_at=model.created_at,
            updated_at=model.updated_at,
        )

    async def create(self, period: WorkPeriod) -> WorkPeriod:
        """Create a new work period"""
        period_model = WorkPeriodModel(
            id=period.id if period.id else None,
            name=period.name,
            date=period.date,
            start_time=period.start_time,
            end_time=period.end_time,
            created_at=period.created_at,
            updated_at=period.updated_at,
        )

        self.db.add(period_model)
        self.db.commit()
        self.db.refresh(period_model)

        return self._period_model_to_entity(period_model)

    async def get_by_id(self, period_id: str) -> Optional[WorkPeriod]:
        """Get work period by ID"""
        period_model = self.db.query(WorkPeriodModel).filter(WorkPeriodModel.id == period_id).first()
        if not period_model:
            return None
        return self._period_model_to_entity(period_model)

    async def get_all(self) -> List[WorkPeriod]:
        """Get all work periods, latest date first"""
        return await self.find()

    async def find(
        self,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        period_ids: Optional[Sequence[str]] = None,
    ) -> List[WorkPeriod]:
        """Get work periods, optionally within a date range and/or by ID"""
        query = self.db.query(WorkPeriodModel)
        if start_date is not None:
            query = query.filter(WorkPeriodModel.date >= start_date)
        if end_date is not None:
            query = query.filter(WorkPeriodModel.date <= end_date)
        if period_ids is not None:
            query = query.filter(WorkPeriodModel.id.in_(list(period_ids)))
        period_models = query.order_by(WorkPeriodModel.date.desc(), WorkPeriodModel.start_time).all()
        return [self._period_model_to_entity(model) for model in period_models]

    async def find_overlapping(
        self,
        on_date: date,
        start_time: datetime,
        end_time: datetime,
        exclude_id: Optional[str] = None,
    ) -> List[WorkPeriod]:
        """Get periods on ``on_date`` intersecting ``[start_time, end_time)``"""
        query = self.db.query(WorkPeriodModel).filter(
            WorkPeriodModel.date == on_date,
            WorkPeriodModel.start_time < end_time,
            WorkPeriodModel.end_time > start_time,
        )
        if exclude_id is not None:
            query = query.filter(WorkPeriodModel.id != exclude_id)
        return [self._period_model_to_entity(model) for model in query.all()]

    async def update(self, period: WorkPeriod) -> WorkPeriod:
        """Replace the stored fields of a work period"""
        period_model = self.db.query(WorkPeriodModel).filter(WorkPeriodModel.id == period.id).first()
        if not period_model:
            raise WorkPeriodNotFoundError(period.id)

        period_model.name = period.name
        period_model.date = period.date
        period_model.start_time = period.start_time
        period_model.end_time = period.end_time
        period_model.updated_at = period.updated_at

        self.db.commit()
        self.db.refresh(period_model)
        return self._period_model_to_entity(period_model)

    async def delete(self, period_id: str) -> bool:
        """Delete work period; linked activities are detached"""
        period_model = self.db.query(WorkPeriodModel).filter(WorkPeriodModel.id == period_id).first()
        if not period_model:
            return False

        self.db.query(TodoActivityModel).filter(TodoActivityModel.work_period_id == period_id).update(
            {TodoActivityModel.work_period_id: None}, synchronize_session=False
        )
        self.db.delete(period_model)
        self.db.commit()
        return True
