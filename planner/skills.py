"""Skill catalog lookups."""

from __future__ import annotations

import logging

from planner.errors import NotFound
from planner.models import Skill

logger = logging.getLogger("planner.skills")


def list_skills() -> list[Skill]:
    """Return every skill ordered by name."""
    return list(Skill.objects.order_by("name"))


def get_skill(skill_id: int) -> Skill:
    """Fetch a single skill.

    Raises:
        NotFound: If no skill has that id.
    """
    try:
        return Skill.objects.get(pk=skill_id)
    except Skill.DoesNotExist:
        raise NotFound("Skill", skill_id) from None


def skill_names() -> list[str]:
    return list(Skill.objects.order_by("name").values_list("name", flat=True))


def resolve_skill_names(names: list[str]) -> list[Skill]:
    """Map skill names back to catalog rows.

    Matching is case-insensitive. Unknown names are dropped and the order of
    *names* is kept, without duplicates.
    """
    by_name = {skill.name.lower(): skill for skill in Skill.objects.all()}
    resolved: list[Skill] = []
    for name in names:
        skill = by_name.get(name.strip().lower())
        if skill is None:
            logger.debug("Ignoring unknown skill name %r", name)
            continue
        if skill not in resolved:
            resolved.append(skill)
    return resolved
