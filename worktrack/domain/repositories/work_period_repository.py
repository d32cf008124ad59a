"""Work period repository interface"""
from abc import ABC, abstractmethod
from datetime import date, datetime
from typing import AsyncContextManager, List, Optional, Sequence
from worktrack.domain.entities.work_period import WorkPeriod


class WorkPeriodRepository(ABC):
    """Interface for work period repository"""

    @abstractmethod
    async def create(self, period: WorkPeriod) -> WorkPeriod:
        """Create a new work period"""
        pass

    @abstractmethod
    async def get_by_id(self, period_id: str) -> Optional[WorkPeriod]:
        """Get work period by ID"""
        pass

    @abstractmethod
    async def get_all(self) -> List[WorkPeriod]:
        """Get all work periods, latest date first"""
        pass

    @abstractmethod
    async def find(
        self,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        period_ids: Optional[Sequence[str]] = None,
    ) -> List[WorkPeriod]:
        """Get work periods, optionally within a date range and/or by ID"""
        pass

    @abstractmethod
    async def find_overlapping(
        self,
        on_date: date,
        start_time: datetime,
        end_time: datetime,
        exclude_id: Optional[str] = None,
    ) -> List[WorkPeriod]:
        """Get periods on ``on_date`` intersecting ``[start_time, end_time)``"""
        pass

    @abstractmethod
    async def update(self, period: WorkPeriod) -> WorkPeriod:
        """Replace the stored fields of a work period"""
        pass

    @abstractmethod
    async def delete(self, period_id: str) -> bool:
        """Delete work period; linked activities are detached"""
        pass

    @abstractmethod
    def write_lock(self, scope: str) -> AsyncContextManager[None]:
        """Serialize read-validate-write sequences on ``scope``"""
        pass
