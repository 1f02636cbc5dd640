"""Developer roster lookups."""

from __future__ import annotations

from django.db.models import Prefetch

from planner.errors import NotFound
from planner.models import Developer, Task


def _developer_queryset():
    return Developer.objects.prefetch_related(
        "skills",
        Prefetch(
            "assigned_tasks",
            queryset=Task.objects.order_by("id").prefetch_related("required_skills"),
        ),
    )


def list_developers() -> list[Developer]:
    """Return every developer ordered by name, with skills and assigned tasks loaded."""
    return list(_developer_queryset().order_by("name", "id"))


def get_developer(developer_id: int) -> Developer:
    """Fetch a single developer with skills and assigned tasks loaded.

    Raises:
        NotFound: If no developer has that id.
    """
    try:
        return _developer_queryset().get(pk=developer_id)
    except Developer.DoesNotExist:
        raise NotFound("Developer", developer_id) from None
