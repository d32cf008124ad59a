"""Domain errors

Every rejected operation raises one of these. They subclass ``ValueError``
so callers that only care about "bad input" can keep catching that.
"""


class DomainError(ValueError):
    """Base class for all domain validation failures"""


class NotFoundError(DomainError):
    """Referenced entity does not exist"""

    entity = "Entity"

    def __init__(self, entity_id: str):
        self.entity_id = entity_id
        super().__init__(f"{self.entity} with ID '{entity_id}' not found")


class TodoNotFoundError(NotFoundError):
    entity = "Todo"


class TodoActivityNotFoundError(NotFoundError):
    entity = "Todo activity"


class WorkPeriodNotFoundError(NotFoundError):
    entity = "Work period"


class TagNotFoundError(NotFoundError):
    entity = "Tag"


class SubtaskNotFoundError(NotFoundError):
    """Item is not a subtask of the given parent"""

    def __init__(self, subtask_id: str, parent_id: str):
        self.parent_id = parent_id
        self.entity_id = subtask_id
        DomainError.__init__(
            self, f"Todo '{subtask_id}' is not a subtask of '{parent_id}'"
        )


class InvalidStateTransitionError(DomainError):
    """Work-state guard violated"""


class SelfReferenceError(DomainError):
    """A todo cannot be its own parent"""

    def __init__(self, todo_id: str):
        self.todo_id = todo_id
        super().__init__(f"Todo '{todo_id}' cannot be its own parent")


class CircularReferenceError(DomainError):
    """Setting this parent would make a todo its own ancestor"""

    def __init__(self, child_id: str, parent_id: str):
        self.child_id = child_id
        self.parent_id = parent_id
        super().__init__(
            f"Making '{parent_id}' the parent of '{child_id}' would create a circular hierarchy"
        )


class SelfDependencyError(DomainError):
    """A todo cannot depend on itself"""

    def __init__(self, todo_id: str):
        self.todo_id = todo_id
        super().__init__(f"Todo '{todo_id}' cannot depend on itself")


class DependencyExistsError(DomainError):
    def __init__(self, todo_id: str, dependency_id: str):
        self.todo_id = todo_id
        self.dependency_id = dependency_id
        super().__init__(f"Todo '{todo_id}' already depends on '{dependency_id}'")


class DependencyNotFoundError(DomainError):
    def __init__(self, todo_id: str, dependency_id: str):
        self.todo_id = todo_id
        self.dependency_id = dependency_id
        super().__init__(f"Todo '{todo_id}' does not depend on '{dependency_id}'")


class DependencyCycleError(DomainError):
    """Adding the edge would close a cycle, or a cycle was found in stored data"""

    def __init__(self, todo_id: str, dependency_id: str):
        self.todo_id = todo_id
        self.dependency_id = dependency_id
        super().__init__(
            f"Dependency from '{todo_id}' to '{dependency_id}' would create a cycle"
        )


class InvalidIntervalError(DomainError):
    """Start time is not strictly before end time"""

    def __init__(self, start_time, end_time):
        self.start_time = start_time
        self.end_time = end_time
        super().__init__(
            f"Start time {start_time.isoformat()} must be before end time {end_time.isoformat()}"
        )


class OverlappingPeriodError(DomainError):
    def __init__(self, conflicting_ids):
        self.conflicting_ids = list(conflicting_ids)
        super().__init__(
            "This time period overlaps with existing work period(s): "
            + ", ".join(self.conflicting_ids)
        )


class UnauthorizedActivityDeletionError(DomainError):
    def __init__(self, activity_id: str, reason: str):
        self.activity_id = activity_id
        self.reason = reason
        super().__init__(f"Cannot delete activity '{activity_id}': {reason}")


class TagExistsError(DomainError):
    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Tag '{name}' already exists")


class ProjectNotFoundError(NotFoundError):
    entity = "Project"


class ProjectNameExistsError(DomainError):
    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Project '{name}' already exists")


class TodoNotInProjectError(DomainError):
    def __init__(self, todo_id: str, project_id: str):
        self.todo_id = todo_id
        self.project_id = project_id
        super().__init__(f"Todo '{todo_id}' does not belong to project '{project_id}'")
