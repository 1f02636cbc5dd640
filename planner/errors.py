"""Typed rejections raised by the planner services."""

from __future__ import annotations


class PlannerError(Exception):
    """Base class for errors surfaced to API callers."""


class NotFound(PlannerError):
    """Raised when a referenced skill, developer, or task id does not exist."""

    def __init__(self, entity: str, entity_id: int) -> None:
        self.entity = entity
        self.entity_id = entity_id
        super().__init__(f"{entity} with ID {entity_id} not found")


class IneligibleAssignment(PlannerError):
    """Raised when a developer lacks at least one skill a task requires."""

    def __init__(self, developer_name: str, missing_skills: list[str]) -> None:
        self.developer_name = developer_name
        self.missing_skills = missing_skills
        super().__init__(
            f'Developer "{developer_name}" does not have the required skill(s): '
            f"{', '.join(missing_skills)}. "
            "Task can only be assigned to a developer with all required skills."
        )


class IncompleteSubtasks(PlannerError):
    """Raised when a task is marked Done while some descendants are not."""

    def __init__(self, titles: list[str]) -> None:
        self.titles = titles
        super().__init__(
            "Cannot mark task as Done. The following subtasks are not completed: "
            + ", ".join(titles)
        )
