"""Skill-eligibility check run whenever a developer is linked to a task."""

from __future__ import annotations

import logging
from collections.abc import Iterable

from planner.errors import IneligibleAssignment
from planner.models import Developer
from planner.skills import get_skill

logger = logging.getLogger("planner.assignment")


def missing_skill_ids(developer: Developer, required_skill_ids: Iterable[int]) -> set[int]:
    """Return the required skill ids the developer does not hold."""
    return set(required_skill_ids) - developer.skill_ids


def validate_assignment(developer: Developer, required_skill_ids: Iterable[int]) -> None:
    """Check that *developer* holds every skill in *required_skill_ids*.

    Args:
        developer: The candidate assignee.
        required_skill_ids: Skill ids demanded by the task node.

    Raises:
        IneligibleAssignment: If at least one skill is missing. The error
            carries the developer's name and the missing skill names.
        NotFound: If a missing id does not resolve in the catalog. That means
            the caller passed an id that was never resolved, so it is not
            hidden.
    """
    missing = missing_skill_ids(developer, required_skill_ids)
    if not missing:
        return

    missing_names = sorted(get_skill(skill_id).name for skill_id in missing)
    logger.warning(
        "Developer %s (id=%s) is missing skills: %s",
        developer.name, developer.id, ", ".join(missing_names),
    )
    raise IneligibleAssignment(developer.name, missing_names)
