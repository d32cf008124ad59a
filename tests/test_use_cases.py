"""Use-case tests against an in-memory SQLite database."""

import asyncio
import uuid
from datetime import date, datetime, timedelta, timezone

import pytest
from sqlalchemy.exc import SQLAlchemyError

from worktrack.application.dto.project_dto import ProjectCreateDTO, ProjectUpdateDTO
from worktrack.application.dto.tag_dto import TagCreateDTO, TagMatchMode, TagUpdateDTO
from worktrack.application.dto.todo_activity_dto import TodoActivityCreateDTO
from worktrack.application.dto.todo_dto import BulkDueDateUpdateDTO, TodoCreateDTO, TodoUpdateDTO
from worktrack.application.dto.work_period_dto import (
    WorkPeriodCreateDTO,
    WorkPeriodStatisticsQueryDTO,
    WorkPeriodUpdateDTO,
)
from worktrack.application.use_cases.project_use_cases import ProjectUseCases
from worktrack.application.use_cases.tag_use_cases import TagUseCases
from worktrack.application.use_cases.todo_activity_use_cases import TodoActivityUseCases
from worktrack.application.use_cases.todo_relation_use_cases import TodoRelationUseCases
from worktrack.application.use_cases.todo_use_cases import TodoUseCases
from worktrack.application.use_cases.work_period_use_cases import WorkPeriodUseCases
from worktrack.domain.entities.project import ProjectStatus
from worktrack.domain.entities.tag import Tag
from worktrack.domain.entities.todo import TodoStatus, WorkState
from worktrack.domain.entities.todo_activity import ActivityType
from worktrack.domain.errors import (
    CircularReferenceError,
    DependencyCycleError,
    DependencyExistsError,
    DependencyNotFoundError,
    InvalidIntervalError,
    InvalidStateTransitionError,
    OverlappingPeriodError,
    ProjectNameExistsError,
    ProjectNotFoundError,
    SelfDependencyError,
    SelfReferenceError,
    SubtaskNotFoundError,
    TagExistsError,
    TagNotFoundError,
    TodoActivityNotFoundError,
    TodoNotFoundError,
    TodoNotInProjectError,
    UnauthorizedActivityDeletionError,
)
from worktrack.domain.services import work_state_machine
from worktrack.infrastructure.database.models import RelationLockModel
from worktrack.infrastructure.repositories.project_repository_db import ProjectRepositoryDB
from worktrack.infrastructure.repositories.tag_repository_db import TagRepositoryDB
from worktrack.infrastructure.repositories.todo_activity_repository_db import TodoActivityRepositoryDB
from worktrack.infrastructure.repositories.todo_repository_db import TodoRepositoryDB
from worktrack.infrastructure.repositories.work_period_repository_db import WorkPeriodRepositoryDB

T0 = datetime(2024, 1, 15, 9, 0, 0)
DAY = T0.date()


def run(coro):
    return asyncio.run(coro)


def at(seconds):
    return T0 + timedelta(seconds=seconds)


def hour(h, day=DAY):
    return datetime(day.year, day.month, day.day, h)


@pytest.fixture
def todo_repo(db):
    return TodoRepositoryDB(db)


@pytest.fixture
def activity_repo(db):
    return TodoActivityRepositoryDB(db)


@pytest.fixture
def project_repo(db):
    return ProjectRepositoryDB(db)


@pytest.fixture
def todos(todo_repo, project_repo):
    return TodoUseCases(todo_repo, project_repo)


@pytest.fixture
def projects(project_repo, todo_repo):
    return ProjectUseCases(project_repo, todo_repo)


@pytest.fixture
def activities(todo_repo, activity_repo):
    return TodoActivityUseCases(todo_repo, activity_repo)


@pytest.fixture
def relations(todo_repo):
    return TodoRelationUseCases(todo_repo)


@pytest.fixture
def periods(db, activity_repo):
    return WorkPeriodUseCases(WorkPeriodRepositoryDB(db), activity_repo, TagRepositoryDB(db))


@pytest.fixture
def tags(db, todo_repo):
    return TagUseCases(TagRepositoryDB(db), todo_repo)


def new_todo(todos, title, **kwargs):
    return run(todos.create_todo(TodoCreateDTO(title=title, **kwargs)))


def new_project(projects, name, **kwargs):
    return run(projects.create_project(ProjectCreateDTO(name=name, **kwargs)))


def record(activities, todo_id, activity_type, seconds, note=None):
    return run(
        activities.record_activity(
            todo_id, TodoActivityCreateDTO(type=activity_type, note=note), now=at(seconds)
        )
    )


class TestTodoUseCases:
    def test_create_and_get(self, todos):
        created = new_todo(todos, "Write report", description="Q1")
        fetched = run(todos.get_todo(created.id))
        assert fetched.title == "Write report"
        assert fetched.status == TodoStatus.PENDING
        assert fetched.work_state == WorkState.IDLE
        assert fetched.total_work_time == 0

    def test_create_under_missing_parent(self, todos):
        with pytest.raises(TodoNotFoundError):
            new_todo(todos, "Orphan", parent_id="missing")

    def test_update_only_given_fields(self, todos):
        created = new_todo(todos, "Draft", description="keep me")
        updated = run(todos.update_todo(created.id, TodoUpdateDTO(title="Final")))
        assert updated.title == "Final"
        assert updated.description == "keep me"

    def test_filter_by_status(self, todos, activities):
        first = new_todo(todos, "First")
        new_todo(todos, "Second")
        record(activities, first.id, ActivityType.STARTED, 0)
        in_progress = run(todos.get_all_todos(status=TodoStatus.IN_PROGRESS.value))
        assert [todo.id for todo in in_progress] == [first.id]

    def test_reopen(self, todos, activities):
        created = new_todo(todos, "Ship it")
        record(activities, created.id, ActivityType.STARTED, 0)
        record(activities, created.id, ActivityType.COMPLETED, 600)
        reopened = run(todos.reopen_todo(created.id, now=at(700)))
        assert reopened.status == TodoStatus.PENDING
        assert reopened.work_state == WorkState.IDLE
        assert reopened.total_work_time == 600
        with pytest.raises(InvalidStateTransitionError):
            run(todos.reopen_todo(created.id))

    def test_work_time(self, todos, activities):
        created = new_todo(todos, "Timed")
        record(activities, created.id, ActivityType.STARTED, 0)
        record(activities, created.id, ActivityType.PAUSED, 9015)
        work_time = run(todos.get_work_time(created.id))
        assert work_time.total_work_time == 9015
        assert work_time.formatted_time == "2 hours, 30 minutes, 15 seconds"

    def test_overdue_and_due_soon(self, todos):
        now = datetime(2024, 3, 1, 12, 0)
        late = new_todo(todos, "Late", due_date=now - timedelta(days=1))
        soon = new_todo(todos, "Soon", due_date=now + timedelta(days=1))
        new_todo(todos, "Later", due_date=now + timedelta(days=10))
        assert [t.id for t in run(todos.get_overdue_todos(now=now))] == [late.id]
        assert [t.id for t in run(todos.get_due_soon_todos(now=now))] == [soon.id]
        assert len(run(todos.get_due_soon_todos(days=30, now=now))) == 2

    def test_delete_detaches_children_and_edges(self, todos, relations):
        parent = new_todo(todos, "Parent")
        child = new_todo(todos, "Child", parent_id=parent.id)
        other = new_todo(todos, "Other")
        run(relations.add_dependency(other.id, parent.id))

        assert run(todos.delete_todo(parent.id)) is True
        assert run(todos.get_todo(child.id)).parent_id is None
        assert run(todos.get_todo(other.id)).dependency_ids == []
        assert run(todos.delete_todo(parent.id)) is False

    def test_unknown_project_is_rejected(self, todos):
        with pytest.raises(ProjectNotFoundError):
            new_todo(todos, "Orphan", project_id="missing")
        created = new_todo(todos, "Loose")
        with pytest.raises(ProjectNotFoundError):
            run(todos.update_todo(created.id, TodoUpdateDTO(project_id="missing")))

    def test_offset_aware_due_date_is_stored_as_utc(self, todos):
        created = new_todo(todos, "Call", due_date=datetime(2024, 3, 1, 14, 0, tzinfo=timezone(timedelta(hours=2))))
        assert created.due_date == datetime(2024, 3, 1, 12, 0)
        assert [t.id for t in run(todos.get_overdue_todos(now=datetime(2024, 3, 2)))] == [created.id]

    def test_due_date_range(self, todos):
        first = new_todo(todos, "First", due_date=datetime(2024, 3, 5))
        second = new_todo(todos, "Second", due_date=datetime(2024, 3, 1))
        new_todo(todos, "Later", due_date=datetime(2024, 4, 1))
        new_todo(todos, "Undated")
        in_march = run(todos.get_todos_by_due_date_range(datetime(2024, 3, 1), datetime(2024, 3, 31)))
        assert [t.id for t in in_march] == [second.id, first.id]

    def test_bulk_due_date_update(self, todos):
        first = new_todo(todos, "First")
        second = new_todo(todos, "Second", due_date=datetime(2024, 3, 1))
        due = datetime(2024, 6, 1, 9, 0, tzinfo=timezone.utc)

        updated = run(
            todos.bulk_update_due_date(
                BulkDueDateUpdateDTO(todo_ids=[first.id, "missing", second.id], due_date=due)
            )
        )
        assert [t.id for t in updated] == [first.id, second.id]
        assert {t.due_date for t in updated} == {datetime(2024, 6, 1, 9, 0)}

        cleared = run(todos.bulk_update_due_date(BulkDueDateUpdateDTO(todo_ids=[second.id])))
        assert cleared[0].due_date is None
        assert run(todos.get_todo(first.id)).due_date == datetime(2024, 6, 1, 9, 0)



class TestActivityUseCases:
    def test_start_pause_resume_pause(self, todos, activities):
        todo = new_todo(todos, "Focus")
        record(activities, todo.id, ActivityType.STARTED, 0)
        paused = record(activities, todo.id, ActivityType.PAUSED, 3600)
        assert paused.work_time == 3600
        assert run(todos.get_todo(todo.id)).total_work_time == 3600

        record(activities, todo.id, ActivityType.STARTED, 4000)
        record(activities, todo.id, ActivityType.PAUSED, 5800)
        stored = run(todos.get_todo(todo.id))
        assert stored.total_work_time == 5400
        assert stored.work_state == WorkState.PAUSED

    def test_pause_when_paused_changes_nothing(self, todos, activities):
        todo = new_todo(todos, "Focus")
        record(activities, todo.id, ActivityType.STARTED, 0)
        record(activities, todo.id, ActivityType.PAUSED, 60)
        with pytest.raises(InvalidStateTransitionError):
            record(activities, todo.id, ActivityType.PAUSED, 120)
        assert run(todos.get_todo(todo.id)).total_work_time == 60
        assert len(run(activities.get_activities(todo.id))) == 2

    def test_history_is_newest_first(self, todos, activities):
        todo = new_todo(todos, "Focus")
        record(activities, todo.id, ActivityType.STARTED, 0)
        record(activities, todo.id, ActivityType.DISCARDED, 10, note="meeting")
        history = run(activities.get_activities(todo.id))
        assert [a.type for a in history] == [ActivityType.DISCARDED, ActivityType.STARTED]
        assert history[0].note == "meeting"

    def test_unknown_todo(self, activities):
        with pytest.raises(TodoNotFoundError):
            record(activities, "missing", ActivityType.STARTED, 0)

    def test_delete_guards(self, todos, activities):
        todo = new_todo(todos, "Focus")
        first_start = record(activities, todo.id, ActivityType.STARTED, 0)
        pause = record(activities, todo.id, ActivityType.PAUSED, 100)
        note = record(activities, todo.id, ActivityType.DISCARDED, 150)
        second_start = record(activities, todo.id, ActivityType.STARTED, 200)

        with pytest.raises(UnauthorizedActivityDeletionError):
            run(activities.delete_activity(todo.id, pause.id))
        with pytest.raises(UnauthorizedActivityDeletionError):
            run(activities.delete_activity(todo.id, second_start.id))

        run(activities.delete_activity(todo.id, note.id))
        run(activities.delete_activity(todo.id, first_start.id))
        remaining = {a.id for a in run(activities.get_activities(todo.id))}
        assert remaining == {pause.id, second_start.id}

    def test_delete_activity_of_another_todo(self, todos, activities):
        mine = new_todo(todos, "Mine")
        theirs = new_todo(todos, "Theirs")
        activity = record(activities, theirs.id, ActivityType.DISCARDED, 0)
        with pytest.raises(UnauthorizedActivityDeletionError):
            run(activities.delete_activity(mine.id, activity.id))

    def test_delete_missing_activity(self, todos, activities):
        todo = new_todo(todos, "Focus")
        with pytest.raises(TodoActivityNotFoundError):
            run(activities.delete_activity(todo.id, "missing"))

    def test_failed_activity_insert_leaves_todo_untouched(self, monkeypatch, todos, activities):
        todo = new_todo(todos, "Focus")
        started = record(activities, todo.id, ActivityType.STARTED, 0)

        # The next activity reuses an existing primary key, so its insert fails
        monkeypatch.setattr(work_state_machine.uuid, "uuid4", lambda: uuid.UUID(started.id))
        with pytest.raises(SQLAlchemyError):
            record(activities, todo.id, ActivityType.PAUSED, 600)
        monkeypatch.undo()

        stored = run(todos.get_todo(todo.id))
        assert stored.work_state == WorkState.ACTIVE
        assert stored.total_work_time == 0
        assert [a.id for a in run(activities.get_activities(todo.id))] == [started.id]

        paused = record(activities, todo.id, ActivityType.PAUSED, 600)
        assert paused.work_time == 600



class TestHierarchyUseCases:
    def test_add_and_list_subtasks(self, todos, relations):
        parent = new_todo(todos, "Parent")
        child = new_todo(todos, "Child")
        updated = run(relations.add_subtask(parent.id, child.id))
        assert updated.parent_id == parent.id
        assert [t.id for t in run(relations.get_subtasks(parent.id))] == [child.id]
        assert run(relations.get_parent(child.id)).id == parent.id
        assert run(relations.get_parent(parent.id)) is None

    def test_cycle_is_rejected(self, todos, relations):
        a = new_todo(todos, "A")
        b = new_todo(todos, "B", parent_id=a.id)
        c = new_todo(todos, "C", parent_id=b.id)
        with pytest.raises(CircularReferenceError):
            run(relations.set_parent(a.id, c.id))
        with pytest.raises(SelfReferenceError):
            run(relations.set_parent(a.id, a.id))
        assert run(todos.get_todo(a.id)).parent_id is None

    def test_remove_subtask(self, todos, relations):
        parent = new_todo(todos, "Parent")
        child = new_todo(todos, "Child", parent_id=parent.id)
        stranger = new_todo(todos, "Stranger")
        with pytest.raises(SubtaskNotFoundError):
            run(relations.remove_subtask(parent.id, stranger.id))
        detached = run(relations.remove_subtask(parent.id, child.id))
        assert detached.parent_id is None

    def test_remove_parent(self, todos, relations):
        parent = new_todo(todos, "Parent")
        child = new_todo(todos, "Child", parent_id=parent.id)
        assert run(relations.remove_parent(child.id)).parent_id is None

    def test_subtask_tree(self, todos, relations):
        root = new_todo(todos, "Root")
        a = new_todo(todos, "A", parent_id=root.id)
        new_todo(todos, "A1", parent_id=a.id)
        new_todo(todos, "B", parent_id=root.id)
        tree = run(relations.get_subtask_tree(root.id))
        assert tree.id == root.id
        assert sorted(child.title for child in tree.children) == ["A", "B"]
        a_node = next(child for child in tree.children if child.id == a.id)
        assert [grandchild.title for grandchild in a_node.children] == ["A1"]

        shallow = run(relations.get_subtask_tree(root.id, max_depth=1))
        assert all(child.children == [] for child in shallow.children)

    def test_missing_todo(self, todos, relations):
        parent = new_todo(todos, "Parent")
        with pytest.raises(TodoNotFoundError):
            run(relations.add_subtask(parent.id, "missing"))


class TestDependencyUseCases:
    def test_both_directions(self, todos, relations):
        a = new_todo(todos, "A")
        b = new_todo(todos, "B")
        updated = run(relations.add_dependency(a.id, b.id))
        assert updated.dependency_ids == [b.id]
        assert [t.id for t in run(relations.get_dependencies(a.id))] == [b.id]
        assert [t.id for t in run(relations.get_dependents(b.id))] == [a.id]
        assert run(todos.get_todo(b.id)).dependent_ids == [a.id]

    def test_chain_rejects_closing_edge(self, todos, relations):
        a, b, c = (new_todo(todos, title) for title in "ABC")
        run(relations.add_dependency(a.id, b.id))
        run(relations.add_dependency(b.id, c.id))
        with pytest.raises(DependencyCycleError):
            run(relations.add_dependency(c.id, a.id))
        assert run(relations.get_dependencies(c.id)) == []

    def test_self_and_duplicate_rejected(self, todos, relations):
        a = new_todo(todos, "A")
        b = new_todo(todos, "B")
        with pytest.raises(SelfDependencyError):
            run(relations.add_dependency(a.id, a.id))
        run(relations.add_dependency(a.id, b.id))
        with pytest.raises(DependencyExistsError):
            run(relations.add_dependency(a.id, b.id))

    def test_remove(self, todos, relations):
        a = new_todo(todos, "A")
        b = new_todo(todos, "B")
        run(relations.add_dependency(a.id, b.id))
        assert run(relations.remove_dependency(a.id, b.id)).dependency_ids == []
        with pytest.raises(DependencyNotFoundError):
            run(relations.remove_dependency(a.id, b.id))

    def test_dependency_tree(self, todos, relations):
        a, b, c, d = (new_todo(todos, title) for title in "ABCD")
        run(relations.add_dependency(a.id, b.id))
        run(relations.add_dependency(a.id, c.id))
        run(relations.add_dependency(b.id, d.id))
        run(relations.add_dependency(c.id, d.id))
        tree = run(relations.get_dependency_tree(a.id))
        assert sorted(child.title for child in tree.children) == ["B", "C"]
        assert all([n.title for n in child.children] == ["D"] for child in tree.children)

    def test_rejected_mutation_leaves_lock_version(self, db, todos, relations):
        a = new_todo(todos, "A")
        with pytest.raises(SelfDependencyError):
            run(relations.add_dependency(a.id, a.id))
        version = db.query(RelationLockModel).filter(RelationLockModel.scope == "dependency").one().version
        assert version == 0

    def test_successful_mutation_bumps_lock_version(self, db, todos, relations):
        a = new_todo(todos, "A")
        b = new_todo(todos, "B")
        run(relations.add_dependency(a.id, b.id))
        version = db.query(RelationLockModel).filter(RelationLockModel.scope == "dependency").one().version
        assert version == 1


class TestWorkPeriodUseCases:
    def create(self, periods, name, start, end):
        return run(periods.create_period(WorkPeriodCreateDTO(name=name, start_time=start, end_time=end)))

    def test_create_and_list(self, periods):
        created = self.create(periods, "Morning", hour(9), hour(12))
        assert created.date == DAY
        assert created.duration_seconds == 3 * 3600
        assert [p.id for p in run(periods.list_periods())] == [created.id]
        assert run(periods.list_periods(start_date=date(2024, 2, 1))) == []

    def test_overlap_rejected_touching_accepted(self, periods):
        first = self.create(periods, "A", hour(10), hour(12))
        with pytest.raises(OverlappingPeriodError) as exc:
            self.create(periods, "B", hour(11), hour(13))
        assert exc.value.conflicting_ids == [first.id]
        self.create(periods, "C", hour(12), hour(13))

    def test_invalid_interval(self, periods):
        with pytest.raises(InvalidIntervalError):
            self.create(periods, "Backwards", hour(12), hour(10))

    def test_update(self, periods):
        first = self.create(periods, "A", hour(9), hour(10))
        self.create(periods, "B", hour(11), hour(12))

        renamed = run(periods.update_period(first.id, WorkPeriodUpdateDTO(name="Early")))
        assert renamed.name == "Early"

        widened = run(periods.update_period(first.id, WorkPeriodUpdateDTO(end_time=hour(11))))
        assert widened.duration_seconds == 7200

        with pytest.raises(OverlappingPeriodError):
            run(periods.update_period(first.id, WorkPeriodUpdateDTO(end_time=hour(12))))
        with pytest.raises(InvalidIntervalError):
            run(periods.update_period(first.id, WorkPeriodUpdateDTO(start_time=hour(11))))
        assert run(periods.get_period(first.id)).end_time == hour(11)

    def test_associate_and_statistics(self, todos, activities, periods, tags):
        todo = new_todo(todos, "Focus")
        tag = run(tags.create_tag(TagCreateDTO(name="backend")))
        run(tags.add_tag_to_todo(tag.id, todo.id))

        morning = self.create(periods, "Morning", hour(9), hour(10))
        afternoon = self.create(periods, "Afternoon", hour(14), hour(15))

        record(activities, todo.id, ActivityType.STARTED, 0)
        pause = record(activities, todo.id, ActivityType.PAUSED, 1800)
        record(activities, todo.id, ActivityType.STARTED, 2000)
        complete = record(activities, todo.id, ActivityType.COMPLETED, 3800)

        linked = run(periods.associate_activity(morning.id, pause.id))
        assert linked.work_period_id == morning.id
        run(periods.associate_activity(afternoon.id, complete.id))

        stats = run(periods.get_statistics())
        assert stats.total_work_period_time == 7200
        assert stats.total_activity_time == 3600
        assert stats.utilization_rate == 0.5
        assert stats.activities_by_todo == {todo.id: 3600}
        assert stats.activities_by_tag == {tag.id: 3600}

        only_morning = run(periods.get_statistics(WorkPeriodStatisticsQueryDTO(work_period_ids=[morning.id])))
        assert only_morning.utilization_rate == 0.5
        assert only_morning.total_activity_time == 1800

        run(periods.dissociate_activity(complete.id))
        assert run(periods.get_statistics()).total_activity_time == 1800

    def test_statistics_without_periods(self, periods):
        stats = run(periods.get_statistics())
        assert stats.total_work_period_time == 0
        assert stats.utilization_rate == 0.0

    def test_delete_keeps_activities(self, todos, activities, periods):
        todo = new_todo(todos, "Focus")
        note = record(activities, todo.id, ActivityType.DISCARDED, 0)
        period = self.create(periods, "Morning", hour(9), hour(10))
        run(periods.associate_activity(period.id, note.id))

        assert run(periods.delete_period(period.id)) is True
        history = run(activities.get_activities(todo.id))
        assert history[0].work_period_id is None

    def test_associate_missing_activity(self, periods):
        period = self.create(periods, "Morning", hour(9), hour(10))
        with pytest.raises(TodoActivityNotFoundError):
            run(periods.associate_activity(period.id, "missing"))

    def test_offset_aware_times_compare_as_utc(self, periods):
        utc = timezone.utc
        first = self.create(
            periods, "A", datetime(2025, 1, 1, 10, tzinfo=utc), datetime(2025, 1, 1, 12, tzinfo=utc)
        )
        assert first.start_time == datetime(2025, 1, 1, 10)
        assert first.date == date(2025, 1, 1)

        with pytest.raises(OverlappingPeriodError):
            self.create(periods, "B", datetime(2025, 1, 1, 11, tzinfo=utc), datetime(2025, 1, 1, 13, tzinfo=utc))
        plus_two = timezone(timedelta(hours=2))
        with pytest.raises(OverlappingPeriodError):
            self.create(
                periods, "C", datetime(2025, 1, 1, 13, tzinfo=plus_two), datetime(2025, 1, 1, 15, tzinfo=plus_two)
            )

        resized = run(
            periods.update_period(first.id, WorkPeriodUpdateDTO(end_time=datetime(2025, 1, 1, 12, 30, tzinfo=utc)))
        )
        assert resized.end_time == datetime(2025, 1, 1, 12, 30)
        assert resized.duration_seconds == 9000

    def test_empty_id_filter_selects_nothing(self, periods):
        self.create(periods, "Morning", hour(9), hour(10))
        stats = run(periods.get_statistics(WorkPeriodStatisticsQueryDTO(work_period_ids=[])))
        assert stats.total_work_period_time == 0
        assert run(periods.get_statistics()).total_work_period_time == 3600



class TestTagUseCases:
    def test_unique_names(self, tags):
        run(tags.create_tag(TagCreateDTO(name="urgent", color="#ff0000")))
        with pytest.raises(TagExistsError):
            run(tags.create_tag(TagCreateDTO(name="urgent")))
        assert [t.name for t in run(tags.get_all_tags())] == ["urgent"]

    def test_attach_detach(self, todos, tags):
        todo = new_todo(todos, "Focus")
        tag = run(tags.create_tag(TagCreateDTO(name="urgent")))
        assert run(tags.add_tag_to_todo(tag.id, todo.id)).tag_ids == [tag.id]
        assert run(tags.add_tag_to_todo(tag.id, todo.id)).tag_ids == [tag.id]
        assert run(tags.remove_tag_from_todo(tag.id, todo.id)).tag_ids == []

    def test_delete_detaches(self, todos, tags):
        todo = new_todo(todos, "Focus")
        tag = run(tags.create_tag(TagCreateDTO(name="urgent")))
        run(tags.add_tag_to_todo(tag.id, todo.id))
        assert run(tags.delete_tag(tag.id)) is True
        assert run(todos.get_todo(todo.id)).tag_ids == []

    def test_update_tag(self, tags):
        urgent = run(tags.create_tag(TagCreateDTO(name="urgent", color="#ff0000")))
        run(tags.create_tag(TagCreateDTO(name="later")))

        renamed = run(tags.update_tag(urgent.id, TagUpdateDTO(name="asap")))
        assert renamed.name == "asap"
        assert renamed.color == "#ff0000"
        with pytest.raises(TagExistsError):
            run(tags.update_tag(urgent.id, TagUpdateDTO(name="later")))
        with pytest.raises(TagNotFoundError):
            run(tags.update_tag("missing", TagUpdateDTO(color="#000000")))

    def test_duplicate_name_at_the_database_is_a_domain_error(self, db):
        repo = TagRepositoryDB(db)
        run(repo.create(Tag(id=str(uuid.uuid4()), name="urgent")))
        # Another writer got past the name check first
        with pytest.raises(TagExistsError):
            run(repo.create(Tag(id=str(uuid.uuid4()), name="urgent")))
        assert [t.name for t in run(repo.get_all())] == ["urgent"]

    def test_statistics(self, todos, activities, tags):
        urgent = run(tags.create_tag(TagCreateDTO(name="urgent")))
        run(tags.create_tag(TagCreateDTO(name="unused")))
        pending = new_todo(todos, "Pending")
        started = new_todo(todos, "Started")
        done = new_todo(todos, "Done")
        record(activities, started.id, ActivityType.STARTED, 0)
        record(activities, done.id, ActivityType.STARTED, 0)
        record(activities, done.id, ActivityType.COMPLETED, 60)
        for todo in (pending, started, done):
            run(tags.add_tag_to_todo(urgent.id, todo.id))

        stats = {s.name: s for s in run(tags.get_tag_statistics())}
        assert stats["urgent"].usage_count == 3
        assert stats["urgent"].pending_todo_count == 1
        assert stats["urgent"].completed_todo_count == 1
        assert stats["unused"].usage_count == 0

    def test_todos_by_tags(self, todos, tags):
        urgent = run(tags.create_tag(TagCreateDTO(name="urgent")))
        home = run(tags.create_tag(TagCreateDTO(name="home")))
        both = new_todo(todos, "Both")
        only_home = new_todo(todos, "Home")
        new_todo(todos, "Neither")
        run(tags.add_tag_to_todo(urgent.id, both.id))
        run(tags.add_tag_to_todo(home.id, both.id))
        run(tags.add_tag_to_todo(home.id, only_home.id))

        matched_all = run(tags.get_todos_by_tags([urgent.id, home.id]))
        assert [t.id for t in matched_all] == [both.id]
        matched_any = run(tags.get_todos_by_tags([urgent.id, home.id], TagMatchMode.ANY))
        assert {t.id for t in matched_any} == {both.id, only_home.id}
        assert run(tags.get_todos_by_tags([])) == []
        with pytest.raises(TagNotFoundError):
            run(tags.get_todos_by_tags([urgent.id, "missing"]))

    def test_bulk_assign_and_remove(self, todos, tags):
        tag = run(tags.create_tag(TagCreateDTO(name="urgent")))
        first = new_todo(todos, "First")
        second = new_todo(todos, "Second")
        run(tags.add_tag_to_todo(tag.id, first.id))

        assigned = run(tags.bulk_assign_tag(tag.id, [first.id, second.id]))
        assert assigned.affected_count == 1
        assert run(todos.get_todo(second.id)).tag_ids == [tag.id]

        with pytest.raises(TodoNotFoundError):
            run(tags.bulk_remove_tag(tag.id, [first.id, "missing"]))
        assert run(todos.get_todo(first.id)).tag_ids == [tag.id]

        removed = run(tags.bulk_remove_tag(tag.id, [first.id, second.id]))
        assert removed.affected_count == 2
        assert run(tags.bulk_assign_tag(tag.id, [])).affected_count == 0
        with pytest.raises(TagNotFoundError):
            run(tags.bulk_assign_tag("missing", []))


class TestProjectUseCases:
    def test_create_with_unique_name(self, projects):
        project = new_project(projects, "Website", color="#00ff00")
        assert project.status == ProjectStatus.ACTIVE
        with pytest.raises(ProjectNameExistsError):
            new_project(projects, "Website")
        assert [p.name for p in run(projects.get_all_projects())] == ["Website"]

    def test_update(self, projects):
        website = new_project(projects, "Website")
        new_project(projects, "Mobile")

        archived = run(projects.update_project(website.id, ProjectUpdateDTO(status=ProjectStatus.ARCHIVED)))
        assert archived.status == ProjectStatus.ARCHIVED
        assert archived.name == "Website"
        with pytest.raises(ProjectNameExistsError):
            run(projects.update_project(website.id, ProjectUpdateDTO(name="Mobile")))
        with pytest.raises(ProjectNotFoundError):
            run(projects.update_project("missing", ProjectUpdateDTO(name="Other")))

    def test_assign_and_remove_todos(self, todos, projects):
        website = new_project(projects, "Website")
        mobile = new_project(projects, "Mobile")
        todo = new_todo(todos, "Landing page")
        new_todo(todos, "Unrelated")

        assert run(projects.add_todo_to_project(website.id, todo.id)).project_id == website.id
        listing = run(projects.get_todos_by_project(website.id))
        assert listing.project.id == website.id
        assert [t.id for t in listing.todos] == [todo.id]

        with pytest.raises(TodoNotInProjectError):
            run(projects.remove_todo_from_project(mobile.id, todo.id))
        assert run(projects.remove_todo_from_project(website.id, todo.id)).project_id is None
        assert run(projects.get_todos_by_project(website.id)).todos == []

    def test_missing_references(self, todos, projects):
        website = new_project(projects, "Website")
        todo = new_todo(todos, "Landing page")
        with pytest.raises(ProjectNotFoundError):
            run(projects.add_todo_to_project("missing", todo.id))
        with pytest.raises(TodoNotFoundError):
            run(projects.add_todo_to_project(website.id, "missing"))
        with pytest.raises(ProjectNotFoundError):
            run(projects.get_todos_by_project("missing"))

    def test_delete_detaches_todos(self, todos, projects):
        website = new_project(projects, "Website")
        todo = new_todo(todos, "Landing page", project_id=website.id)
        assert run(projects.delete_project(website.id)) is True
        assert run(projects.delete_project(website.id)) is False
        assert run(todos.get_todo(todo.id)).project_id is None
        assert run(projects.get_project(website.id)) is None
