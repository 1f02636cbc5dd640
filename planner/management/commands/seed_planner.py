"""Management command to load the default skill catalog and sample developers.

Safe to run repeatedly:
    python manage.py seed_planner --with-developers
"""

import logging

from django.core.management.base import BaseCommand
from django.db import transaction

from planner.models import Developer, Skill

logger = logging.getLogger("planner.management.seed_planner")

DEFAULT_SKILLS = ["Frontend", "Backend", "Database", "CSS", "DevOps", "Testing"]

SAMPLE_DEVELOPERS = {
    "Alice": ["Frontend", "CSS"],
    "Bob": ["Backend", "Database"],
    "Carol": ["Frontend", "Backend"],
    "Dave": ["Backend", "DevOps", "Testing"],
}


class Command(BaseCommand):
    help = "Create the default skill catalog and, optionally, sample developers."

    def add_arguments(self, parser):
        parser.add_argument(
            "--with-developers",
            action="store_true",
            help="Also create sample developers with skill sets.",
        )

    @transaction.atomic
    def handle(self, *args, **options):
        skills = {}
        created_skills = 0
        for name in DEFAULT_SKILLS:
            skills[name], created = Skill.objects.get_or_create(name=name)
            created_skills += created
        self.stdout.write(f"Skills: {created_skills} created, {len(DEFAULT_SKILLS) - created_skills} existing.")

        if not options["with_developers"]:
            return

        created_developers = 0
        for name, skill_names in SAMPLE_DEVELOPERS.items():
            developer, created = Developer.objects.get_or_create(name=name)
            if created:
                developer.skills.set(skills[skill] for skill in skill_names)
                created_developers += 1
                logger.info("Seeded developer %s with %s", name, ", ".join(skill_names))
        self.stdout.write(self.style.SUCCESS(f"Developers: {created_developers} created."))
