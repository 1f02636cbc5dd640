"""Management command to preview skill inference for a task title."""

from django.core.management.base import BaseCommand

from planner.ai.skill_inference import infer_skills
from planner.skills import skill_names


class Command(BaseCommand):
    help = "Print the catalog skills the LLM identifies for a task title."

    def add_arguments(self, parser):
        parser.add_argument("title", help="Task title or description")

    def handle(self, *args, **options):
        known = skill_names()
        if not known:
            self.stdout.write("Skill catalog is empty. Run seed_planner first.")
            return

        matched = infer_skills(options["title"], known)
        if not matched:
            self.stdout.write("No skills identified.")
            return
        self.stdout.write(self.style.SUCCESS(", ".join(matched)))
