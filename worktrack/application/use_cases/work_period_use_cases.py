"""Work period use cases"""
import logging
from datetime import date
from typing import List, Optional

from worktrack.application.dto.todo_activity_dto import TodoActivityResponseDTO
from worktrack.application.dto.work_period_dto import (
    WorkPeriodCreateDTO,
    WorkPeriodResponseDTO,
    WorkPeriodStatisticsDTO,
    WorkPeriodStatisticsQueryDTO,
    WorkPeriodUpdateDTO,
)
from worktrack.application.use_cases.todo_activity_use_cases import activity_to_dto
from worktrack.domain.entities.work_period import WorkPeriod
from worktrack.domain.errors import (
    OverlappingPeriodError,
    TodoActivityNotFoundError,
    WorkPeriodNotFoundError,
)
from worktrack.domain.repositories.tag_repository import TagRepository
from worktrack.domain.repositories.todo_activity_repository import TodoActivityRepository
from worktrack.domain.repositories.work_period_repository import WorkPeriodRepository
from worktrack.domain.services.work_period_ledger import (
    StatisticsFilter,
    compute_statistics,
    ensure_no_overlap,
)

logger = logging.getLogger(__name__)

WORK_PERIOD_SCOPE = "work_period"


def period_to_dto(period: WorkPeriod) -> WorkPeriodResponseDTO:
    """Convert WorkPeriod entity to WorkPeriodResponseDTO"""
    return WorkPeriodResponseDTO(
        id=period.id,
        name=period.name,
        date=period.date,
        start_time=period.start_time,
        end_time=period.end_time,
        duration_seconds=period.duration_seconds,
        created_at=period.created_at,
        updated_at=period.updated_at,
    )


class WorkPeriodUseCases:
    """Use cases for scheduled work periods and their statistics"""

    def __init__(
        self,
        period_repository: WorkPeriodRepository,
        activity_repository: TodoActivityRepository,
        tag_repository: TagRepository,
    ):
        self.period_repository = period_repository
        self.activity_repository = activity_repository
        self.tag_repository = tag_repository

    async def _get_or_raise(self, period_id: str) -> WorkPeriod:
        period = await self.period_repository.get_by_id(period_id)
        if not period:
            raise WorkPeriodNotFoundError(period_id)
        return period

    async def _ensure_free(self, candidate: WorkPeriod, exclude_id: Optional[str] = None) -> None:
        existing = await self.period_repository.find_overlapping(
            candidate.date, candidate.start_time, candidate.end_time, exclude_id=exclude_id
        )
        try:
            ensure_no_overlap(candidate, existing)
        except OverlappingPeriodError as e:
            logger.warning("Rejected work period %r: overlaps %s", candidate.name, e.conflicting_ids)
            raise

    async def create_period(self, period_data: WorkPeriodCreateDTO) -> WorkPeriodResponseDTO:
        """Create a work period that does not overlap any other on its date"""
        period = WorkPeriod.create(
            name=period_data.name,
            start_time=period_data.start_time,
            end_time=period_data.end_time,
            date=period_data.date,
        )
        async with self.period_repository.write_lock(WORK_PERIOD_SCOPE):
            await self._ensure_free(period)
            created = await self.period_repository.create(period)
        logger.info("Created work period %s on %s", created.id, created.date)
        return period_to_dto(created)

    async def get_period(self, period_id: str) -> Optional[WorkPeriodResponseDTO]:
        """Get work period by ID"""
        period = await self.period_repository.get_by_id(period_id)
        if not period:
            return None
        return period_to_dto(period)

    async def list_periods(
        self, start_date: Optional[date] = None, end_date: Optional[date] = None
    ) -> List[WorkPeriodResponseDTO]:
        """List work periods, optionally within an inclusive date range"""
        if start_date is None and end_date is None:
            periods = await self.period_repository.get_all()
        else:
            periods = await self.period_repository.find(start_date=start_date, end_date=end_date)
        return [period_to_dto(period) for period in periods]

    async def update_period(self, period_id: str, period_data: WorkPeriodUpdateDTO) -> WorkPeriodResponseDTO:
        """Rename, move or resize a work period

        The overlap check runs again only when the date or interval changes.
        """
        async with self.period_repository.write_lock(WORK_PERIOD_SCOPE):
            existing = await self._get_or_raise(period_id)
            updated = existing
            if period_data.name is not None:
                updated = updated.with_name(period_data.name)
            if period_data.start_time is not None or period_data.end_time is not None:
                updated = updated.with_interval(
                    period_data.start_time or existing.start_time,
                    period_data.end_time or existing.end_time,
                )
            if period_data.date is not None:
                updated = updated.with_date(period_data.date)

            if updated is existing:
                return period_to_dto(existing)

            moved = (
                updated.date != existing.date
                or updated.start_time != existing.start_time
                or updated.end_time != existing.end_time
            )
            if moved:
                await self._ensure_free(updated, exclude_id=period_id)
            saved = await self.period_repository.update(updated)
        logger.info("Updated work period %s", period_id)
        return period_to_dto(saved)

    async def delete_period(self, period_id: str) -> bool:
        """Delete a work period; its activities stay but lose the link"""
        deleted = await self.period_repository.delete(period_id)
        if deleted:
            logger.info("Deleted work period %s", period_id)
        return deleted

    async def associate_activity(self, period_id: str, activity_id: str) -> TodoActivityResponseDTO:
        """Link an activity to a work period"""
        await self._get_or_raise(period_id)
        activity = await self.activity_repository.get_by_id(activity_id)
        if not activity:
            raise TodoActivityNotFoundError(activity_id)
        updated = await self.activity_repository.update_work_period(activity_id, period_id)
        logger.info("Linked activity %s to work period %s", activity_id, period_id)
        return activity_to_dto(updated)

    async def dissociate_activity(self, activity_id: str) -> TodoActivityResponseDTO:
        """Remove an activity's work period link"""
        activity = await self.activity_repository.get_by_id(activity_id)
        if not activity:
            raise TodoActivityNotFoundError(activity_id)
        updated = await self.activity_repository.update_work_period(activity_id, None)
        logger.info("Unlinked activity %s from work period %s", activity_id, activity.work_period_id)
        return activity_to_dto(updated)

    async def get_statistics(
        self, query: Optional[WorkPeriodStatisticsQueryDTO] = None
    ) -> WorkPeriodStatisticsDTO:
        """Compare tracked activity time with scheduled period time"""
        query = query or WorkPeriodStatisticsQueryDTO()
        criteria = StatisticsFilter(
            start_date=query.start_date,
            end_date=query.end_date,
            work_period_ids=query.work_period_ids,
            todo_ids=query.todo_ids,
            tag_ids=query.tag_ids,
        )

        periods = await self.period_repository.find(
            start_date=query.start_date,
            end_date=query.end_date,
            period_ids=query.work_period_ids,
        )
        activities = await self.activity_repository.get_by_work_period_ids([period.id for period in periods])
        tags_by_todo = await self.tag_repository.get_tag_ids_for_todos(
            sorted({activity.todo_id for activity in activities})
        )

        stats = compute_statistics(periods, activities, tags_by_todo, criteria)
        return WorkPeriodStatisticsDTO(
            total_work_period_time=stats.total_work_period_time,
            total_activity_time=stats.total_activity_time,
            utilization_rate=stats.utilization_rate,
            activities_by_todo=stats.activities_by_todo,
            activities_by_tag=stats.activities_by_tag,
        )
