"""Shared fixtures for planner tests."""

from __future__ import annotations

import pytest
from rest_framework.test import APIClient

from planner.models import Developer, Skill

SKILL_NAMES = ["Frontend", "Backend", "Database", "CSS"]


def _llm_unavailable(*args, **kwargs):
    raise RuntimeError("LLM not available in tests")


@pytest.fixture(autouse=True)
def no_llm(monkeypatch):
    """Never load a real model; tests that need replies patch run_completion."""
    monkeypatch.setattr("planner.ai.skill_inference.run_completion", _llm_unavailable)


@pytest.fixture
def skills(db) -> dict[str, Skill]:
    return {name: Skill.objects.create(name=name) for name in SKILL_NAMES}


@pytest.fixture
def make_developer(db):
    def _make(name: str, *skill_objs: Skill) -> Developer:
        developer = Developer.objects.create(name=name)
        developer.skills.set(skill_objs)
        return developer

    return _make


@pytest.fixture
def api_client() -> APIClient:
    return APIClient()
