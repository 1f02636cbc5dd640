"""AI package — public API for LLM completion and skill inference."""

from planner.ai.llm import run_completion
from planner.ai.skill_inference import fill_missing_skill_ids, infer_skills

__all__ = ["fill_missing_skill_ids", "infer_skills", "run_completion"]
