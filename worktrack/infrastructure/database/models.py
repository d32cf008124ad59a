"""SQLAlchemy database models"""
from sqlalchemy import (
    CheckConstraint, Column, Date, DateTime, ForeignKey, Index, Integer, String, Text,
)
import uuid
from datetime import datetime
from worktrack.infrastructure.database.base import Base
from worktrack.domain.entities.project import ProjectStatus
from worktrack.domain.entities.todo import PriorityLevel, TodoStatus, WorkState


def get_id_column():
    """UUID primary key stored as VARCHAR(36)"""
    return Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))


def get_foreign_key_column(foreign_table, ondelete="CASCADE", primary_key=False):
    """Get foreign key column"""
    return Column(
        String(36),
        ForeignKey(foreign_table, ondelete=ondelete),
        nullable=False,
        primary_key=primary_key,
        index=not primary_key,
    )


def get_foreign_key_column_nullable(foreign_table, ondelete="SET NULL"):
    """Get nullable foreign key column"""
    return Column(String(36), ForeignKey(foreign_table, ondelete=ondelete), nullable=True, index=True)


class ProjectModel(Base):
    """Project database model"""
    __tablename__ = "projects"

    id = get_id_column()
    name = Column(String(100), unique=True, nullable=False, index=True)
    description = Column(Text, nullable=True)
    color = Column(String(20), nullable=True)
    status = Column(String(20), nullable=False, default=ProjectStatus.ACTIVE.value)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)


class TodoModel(Base):
    """Todo database model"""
    __tablename__ = "todos"

    id = get_id_column()
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    status = Column(String(20), nullable=False, default=TodoStatus.PENDING.value, index=True)
    work_state = Column(String(20), nullable=False, default=WorkState.IDLE.value)
    total_work_time = Column(Integer, nullable=False, default=0)
    last_state_change_at = Column(DateTime, nullable=False, default=datetime.utcnow)
    priority = Column(String(10), nullable=False, default=PriorityLevel.MEDIUM.value)
    due_date = Column(DateTime, nullable=True, index=True)

    # Owning side of the hierarchy; children are found through this index
    parent_id = get_foreign_key_column_nullable("todos.id")
    project_id = get_foreign_key_column_nullable("projects.id")

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    __table_args__ = (
        CheckConstraint("parent_id IS NULL OR parent_id <> id", name="ck_todos_not_own_parent"),
        CheckConstraint("total_work_time >= 0", name="ck_todos_work_time_non_negative"),
    )


class TodoDependencyModel(Base):
    """Dependency edge: ``todo_id`` depends on ``dependency_id``

    The only storage of the relation; dependencies and dependents are two
    indexed lookups over this table.
    """
    __tablename__ = "todo_dependencies"

    todo_id = get_foreign_key_column("todos.id", primary_key=True)
    dependency_id = get_foreign_key_column("todos.id", primary_key=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    __table_args__ = (
        CheckConstraint("todo_id <> dependency_id", name="ck_todo_dependencies_no_self_loop"),
        Index("ix_todo_dependencies_dependency_id", "dependency_id"),
    )


class WorkPeriodModel(Base):
    """Work period database model"""
    __tablename__ = "work_periods"

    id = get_id_column()
    name = Column(String(255), nullable=False)
    date = Column(Date, nullable=False, index=True)
    start_time = Column(DateTime, nullable=False)
    end_time = Column(DateTime, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    __table_args__ = (
        CheckConstraint("start_time < end_time", name="ck_work_periods_interval"),
    )


class TodoActivityModel(Base):
    """Todo activity (time-tracking event) database model"""
    __tablename__ = "todo_activities"

    id = get_id_column()
    todo_id = get_foreign_key_column("todos.id")
    type = Column(String(20), nullable=False)
    work_time = Column(Integer, nullable=True)
    previous_state = Column(String(20), nullable=False)
    note = Column(Text, nullable=True)
    work_period_id = get_foreign_key_column_nullable("work_periods.id")
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False, index=True)


class TagModel(Base):
    """Tag database model"""
    __tablename__ = "tags"

    id = get_id_column()
    name = Column(String(50), unique=True, nullable=False, index=True)
    color = Column(String(20), nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)


class TodoTagModel(Base):
    """Many-to-many relationship between todos and tags"""
    __tablename__ = "todo_tags"

    todo_id = get_foreign_key_column("todos.id", primary_key=True)
    tag_id = get_foreign_key_column("tags.id", primary_key=True)


class RelationLockModel(Base):
    """One row per write scope; bumping ``version`` holds the row lock until commit"""
    __tablename__ = "relation_locks"

    scope = Column(String(50), primary_key=True)
    version = Column(Integer, nullable=False, default=0)
