"""Task tree engine: recursive creation, retrieval, and guarded updates."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping

from django.db import transaction

from planner.assignment import validate_assignment
from planner.developers import get_developer
from planner.errors import IncompleteSubtasks, NotFound
from planner.models import Task, TaskStatus
from planner.skills import get_skill

logger = logging.getLogger("planner.task_tree")

INCOMPLETE_CHILDREN_SUFFIX = "(has incomplete subtasks)"


def _task_queryset():
    return Task.objects.select_related("assigned_developer", "parent_task").prefetch_related(
        "required_skills",
        "assigned_developer__skills",
    )


def _load_subtrees(roots: Iterable[Task]) -> None:
    """Attach the full descendant tree to each root, one query per depth level.

    Every loaded node gets a ``children`` list ordered by id.
    """
    level = list(roots)
    for node in level:
        node.children = []

    while level:
        by_id = {node.id: node for node in level}
        children = list(_task_queryset().filter(parent_task_id__in=list(by_id)).order_by("id"))
        for child in children:
            child.children = []
            by_id[child.parent_task_id].children.append(child)
        level = children


def get_task(task_id: int) -> Task:
    """Fetch one task with its skills, assignee, parent, and whole subtree.

    Raises:
        NotFound: If no task has that id.
    """
    try:
        task = _task_queryset().get(pk=task_id)
    except Task.DoesNotExist:
        raise NotFound("Task", task_id) from None
    _load_subtrees([task])
    return task


def list_top_level_tasks() -> list[Task]:
    """Return every root task, newest first, each with its subtree loaded."""
    roots = list(_task_queryset().filter(parent_task__isnull=True).order_by("-created_at", "-id"))
    _load_subtrees(roots)
    return roots


# ---------------------------------------------------------------------------
# Creation
# ---------------------------------------------------------------------------

def _create_node(payload: Mapping, parent: Task | None) -> Task:
    skills = [get_skill(skill_id) for skill_id in payload.get("required_skill_ids") or []]

    developer = None
    developer_id = payload.get("assigned_developer_id")
    if developer_id is not None:
        developer = get_developer(developer_id)
        validate_assignment(developer, {skill.id for skill in skills})

    task = Task.objects.create(
        title=payload["title"],
        status=payload.get("status") or TaskStatus.TODO,
        parent_task=parent,
        assigned_developer=developer,
    )
    task.required_skills.set(skills)

    task.children = [
        _create_node(child_payload, parent=task) for child_payload in payload.get("subtasks") or []
    ]

    if task.status == TaskStatus.DONE:
        incomplete = incomplete_descendants(task)
        if incomplete:
            raise IncompleteSubtasks(incomplete)

    return task


def create_task(payload: Mapping) -> Task:
    """Create a task and all of its nested subtasks in one transaction.

    Args:
        payload: A mapping with ``title`` and optionally ``status``,
            ``assigned_developer_id``, ``required_skill_ids`` and ``subtasks``
            (a list of mappings of the same shape).

    Returns:
        The root task re-fetched from the database with its subtree loaded.

    Raises:
        NotFound: If any skill or developer id in the tree does not exist.
        IneligibleAssignment: If any node's assignee lacks a required skill.
        IncompleteSubtasks: If a node is submitted as Done above a
            descendant that is not Done.
    """
    with transaction.atomic():
        root = _create_node(payload, parent=None)

    logger.info("Created task %s (%r)", root.id, root.title)
    return get_task(root.id)


# ---------------------------------------------------------------------------
# Update
# ---------------------------------------------------------------------------

def incomplete_descendants(task: Task) -> list[str]:
    """List titles of descendants blocking *task* from being marked Done.

    A child that is not Done is listed by title. A child with unfinished
    descendants of its own is listed again with a suffix, followed by the
    entries for those descendants.
    """
    titles: list[str] = []
    for child in task.children:
        if child.status != TaskStatus.DONE:
            titles.append(child.title)
        nested = incomplete_descendants(child)
        if nested:
            titles.append(f"{child.title} {INCOMPLETE_CHILDREN_SUFFIX}")
            titles.extend(nested)
    return titles


def update_task(task_id: int, changes: Mapping) -> Task:
    """Apply a partial update to one task node.

    Keys that are absent from *changes* are left alone. An
    ``assigned_developer_id`` that is present and ``None`` unassigns the task.
    The whole update is rejected when any check fails.

    Raises:
        NotFound: If the task, a skill, or the developer does not exist.
        IncompleteSubtasks: If the task is being marked Done while some
            descendant is not Done.
        IneligibleAssignment: If the new or existing assignee lacks one of
            the effective required skills.
    """
    with transaction.atomic():
        task = get_task(task_id)

        if changes.get("status") == TaskStatus.DONE and task.status != TaskStatus.DONE:
            incomplete = incomplete_descendants(task)
            if incomplete:
                logger.warning("Task %s cannot be completed, blocked by: %s", task_id, incomplete)
                raise IncompleteSubtasks(incomplete)

        if "title" in changes:
            task.title = changes["title"]

        if "status" in changes:
            task.status = changes["status"]

        new_skills = None
        if changes.get("required_skill_ids") is not None:
            new_skills = [get_skill(skill_id) for skill_id in changes["required_skill_ids"]]

        if new_skills is not None:
            effective_skill_ids = {skill.id for skill in new_skills}
        else:
            effective_skill_ids = task.required_skill_ids

        if "assigned_developer_id" in changes:
            developer_id = changes["assigned_developer_id"]
            if developer_id is None:
                task.assigned_developer = None
            else:
                developer = get_developer(developer_id)
                validate_assignment(developer, effective_skill_ids)
                task.assigned_developer = developer
        elif task.assigned_developer is not None and new_skills is not None:
            # Skills changed under an existing assignee: it must still qualify.
            validate_assignment(task.assigned_developer, effective_skill_ids)

        task.save()
        if new_skills is not None:
            task.required_skills.set(new_skills)

    logger.info("Updated task %s with fields: %s", task_id, sorted(changes))
    return get_task(task_id)
