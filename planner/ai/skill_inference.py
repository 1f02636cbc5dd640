"""Best-effort LLM matching of task titles to catalog skill names."""

from __future__ import annotations

import logging
import re
from collections.abc import MutableMapping

from django.conf import settings

from planner.ai.llm import run_completion
from planner.ai.prompts import load_prompt
from planner.skills import resolve_skill_names, skill_names

logger = logging.getLogger("planner.ai.skill_inference")

_PREFIX_RES = (
    re.compile(r"^required skills?:?\s*", re.IGNORECASE),
    re.compile(r"^the required skills? (?:are|is):?\s*", re.IGNORECASE),
)
_TRAILING_PUNCT_RE = re.compile(r"[.!?]+$")
_SPLIT_RE = re.compile(r"[,;\n]")


def parse_skills(raw: str, known_skills: list[str]) -> list[str]:
    """Pick the known skill names mentioned in an LLM reply.

    Each comma, semicolon or newline separated piece is matched against
    *known_skills* case-insensitively, either exactly or when one string
    contains the other. The first matching known name wins for each piece.
    """
    if not raw or not raw.strip():
        return []

    cleaned = raw.strip().strip('"').strip()
    for prefix_re in _PREFIX_RES:
        cleaned = prefix_re.sub("", cleaned)
    cleaned = _TRAILING_PUNCT_RE.sub("", cleaned)

    lowered = [skill.lower() for skill in known_skills]
    matched: list[str] = []
    for piece in _SPLIT_RE.split(cleaned):
        candidate = piece.strip().strip('"').strip().lower()
        if not candidate:
            continue
        for index, known in enumerate(lowered):
            if known == candidate or candidate in known or known in candidate:
                if known_skills[index] not in matched:
                    matched.append(known_skills[index])
                break
    return matched


def infer_skills(title: str, known_skills: list[str]) -> list[str]:
    """Ask the LLM which of *known_skills* a task titled *title* needs.

    Args:
        title: The task title or description.
        known_skills: Skill names from the catalog.

    Returns:
        The matched subset of *known_skills*. Falls back to an empty list
        when inference is disabled, the input is empty, or anything fails.
    """
    if not settings.SKILL_INFERENCE_ENABLED:
        return []

    if not title or not title.strip():
        logger.warning("Empty task title provided, skipping skill inference")
        return []

    if not known_skills:
        logger.warning("Skill catalog is empty, skipping skill inference")
        return []

    system_prompt = load_prompt("skill_inference").replace("{skills}", ", ".join(known_skills))
    user_message = f'Task description: "{title.strip()}"\n\nRequired skills for the given task:'

    try:
        raw = run_completion(system_prompt, user_message, max_tokens=60, temperature=0.0)
    except Exception:
        logger.exception("LLM inference failed for task title: %s", title)
        return []

    matched = parse_skills(raw, known_skills)
    if not matched:
        logger.warning("No known skills found in LLM response: %s", raw)
    else:
        logger.info("Identified skills for task %r: %s", title, ", ".join(matched))
    return matched


def infer_skills_batch(titles: list[str], known_skills: list[str]) -> list[list[str]]:
    return [infer_skills(title, known_skills) for title in titles]


def fill_missing_skill_ids(payload: MutableMapping, known_skills: list[str] | None = None) -> None:
    """Fill ``required_skill_ids`` for every node of a tree payload that omits it.

    Inferred names are resolved back to catalog ids. Nodes for which nothing
    could be inferred get an empty list. The catalog is read once per tree.
    """
    if known_skills is None:
        known_skills = skill_names()

    if payload.get("required_skill_ids") is None:
        inferred = infer_skills(payload.get("title", ""), known_skills)
        payload["required_skill_ids"] = [skill.id for skill in resolve_skill_names(inferred)]

    for child in payload.get("subtasks") or []:
        fill_missing_skill_ids(child, known_skills)
