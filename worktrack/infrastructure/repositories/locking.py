"""Scoped write locks shared by the SQLAlchemy repositories"""
import logging
from contextlib import asynccontextmanager

from sqlalchemy import update
from sqlalchemy.orm import Session

from worktrack.infrastructure.database.models import RelationLockModel

logger = logging.getLogger(__name__)


class RelationLockMixin:
    """Provides ``write_lock`` for repositories holding ``self.db``

    Bumping the scope's version row takes a row lock on PostgreSQL and the
    database write lock on SQLite. Both are held until the enclosed write
    commits, so a concurrent writer on the same scope re-reads the graph only
    after this one is done.
    """

    db: Session

    def _acquire(self, scope: str) -> None:
        result = self.db.execute(
            update(RelationLockModel)
            .where(RelationLockModel.scope == scope)
            .values(version=RelationLockModel.version + 1)
        )
        if result.rowcount == 0:
            self.db.add(RelationLockModel(scope=scope, version=1))
            self.db.flush()

    @asynccontextmanager
    async def write_lock(self, scope: str):
        try:
            self._acquire(scope)
            yield
        except Exception:
            logger.debug("Releasing %s lock after failure", scope)
            self.db.rollback()
            raise
        self.db.commit()
