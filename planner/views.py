"""REST views for the skill catalog, the developer roster, and task trees."""

import logging

from rest_framework.decorators import api_view
from rest_framework.response import Response

from planner.ai.skill_inference import fill_missing_skill_ids
from planner.developers import get_developer, list_developers
from planner.errors import IncompleteSubtasks, IneligibleAssignment, NotFound, PlannerError
from planner.serializers import (
    RosterDeveloperSerializer,
    SkillSerializer,
    TaskCreateSerializer,
    TaskSerializer,
    TaskUpdateSerializer,
)
from planner.skills import get_skill, list_skills
from planner.task_tree import create_task, get_task, list_top_level_tasks, update_task

logger = logging.getLogger("planner.views")


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _error_response(exc: PlannerError) -> Response:
    """Translate a planner error into a JSON error response."""
    if isinstance(exc, NotFound):
        return Response({"error": str(exc)}, status=404)
    if isinstance(exc, IneligibleAssignment):
        return Response(
            {
                "error": str(exc),
                "developer": exc.developer_name,
                "missing_skills": exc.missing_skills,
            },
            status=400,
        )
    if isinstance(exc, IncompleteSubtasks):
        return Response({"error": str(exc), "incomplete_subtasks": exc.titles}, status=400)
    return Response({"error": str(exc)}, status=400)


def _invalid_request(errors) -> Response:
    return Response({"error": "Invalid request", "details": errors}, status=400)


# ---------------------------------------------------------------------------
# Core views
# ---------------------------------------------------------------------------

@api_view(["GET"])
def health_check(request):
    """Return a simple health-check response."""
    return Response({"status": "ok", "service": "Task Assignment API"})


@api_view(["GET"])
def skill_list(request):
    """Return every skill ordered by name."""
    return Response({"skills": SkillSerializer(list_skills(), many=True).data})


@api_view(["GET"])
def skill_detail(request, skill_id):
    try:
        skill = get_skill(skill_id)
    except NotFound as e:
        return _error_response(e)
    return Response({"skill": SkillSerializer(skill).data})


@api_view(["GET"])
def developer_list(request):
    """Return every developer with their skills and assigned tasks."""
    developers = list_developers()
    return Response({"developers": RosterDeveloperSerializer(developers, many=True).data})


@api_view(["GET"])
def developer_detail(request, developer_id):
    try:
        developer = get_developer(developer_id)
    except NotFound as e:
        return _error_response(e)
    return Response({"developer": RosterDeveloperSerializer(developer).data})


# ---------------------------------------------------------------------------
# Task trees
# ---------------------------------------------------------------------------

@api_view(["GET", "POST"])
def task_list_or_create(request):
    """GET lists top-level tasks with their subtrees; POST creates a task tree."""
    if request.method == "GET":
        tasks = list_top_level_tasks()
        return Response({"tasks": TaskSerializer(tasks, many=True).data})

    serializer = TaskCreateSerializer(data=request.data)
    if not serializer.is_valid():
        return _invalid_request(serializer.errors)

    payload = dict(serializer.validated_data)
    fill_missing_skill_ids(payload)
    if not payload["required_skill_ids"]:
        return Response(
            {"error": "At least one required skill is needed for a top-level task"},
            status=400,
        )

    try:
        task = create_task(payload)
    except PlannerError as e:
        logger.warning("Task creation rejected: %s", e)
        return _error_response(e)

    return Response({"task": TaskSerializer(task).data}, status=201)


@api_view(["GET", "PATCH"])
def task_detail_or_update(request, task_id):
    """GET returns one task with its subtree; PATCH applies a partial update."""
    if request.method == "GET":
        try:
            task = get_task(task_id)
        except NotFound as e:
            return _error_response(e)
        return Response({"task": TaskSerializer(task).data})

    serializer = TaskUpdateSerializer(data=request.data, partial=True)
    if not serializer.is_valid():
        return _invalid_request(serializer.errors)

    changes = dict(serializer.validated_data)
    logger.info("UPDATE task %s, fields: %s", task_id, sorted(changes))
    try:
        task = update_task(task_id, changes)
    except PlannerError as e:
        logger.warning("Update of task %s rejected: %s", task_id, e)
        return _error_response(e)

    return Response({"task": TaskSerializer(task).data})
