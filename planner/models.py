"""Data models for skills, developers, and the task tree."""

from django.db import models


class Skill(models.Model):
    """A named technical skill that developers hold and tasks require."""

    name = models.CharField(max_length=50, unique=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["name"]

    def __str__(self) -> str:
        return self.name


class Developer(models.Model):
    name = models.CharField(max_length=100)
    skills = models.ManyToManyField(Skill, related_name="developers", blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["name"]

    def __str__(self) -> str:
        return self.name

    @property
    def skill_ids(self) -> set[int]:
        return {skill.id for skill in self.skills.all()}


class TaskStatus(models.TextChoices):
    TODO = "To-do", "To-do"
    IN_PROGRESS = "In Progress", "In Progress"
    DONE = "Done", "Done"


class Task(models.Model):
    """One node of a task tree.

    ``parent_task`` is null for top-level tasks. Children are reachable through
    the ``subtasks`` reverse relation; the tree loader in ``planner.task_tree``
    additionally caches them on ``children``.
    """

    title = models.TextField()
    status = models.CharField(max_length=16, choices=TaskStatus.choices, default=TaskStatus.TODO)
    assigned_developer = models.ForeignKey(
        Developer,
        null=True,
        blank=True,
        on_delete=models.SET_NULL,
        related_name="assigned_tasks",
    )
    parent_task = models.ForeignKey(
        "self",
        null=True,
        blank=True,
        on_delete=models.CASCADE,
        related_name="subtasks",
    )
    required_skills = models.ManyToManyField(Skill, related_name="tasks", blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at", "-id"]

    def __str__(self) -> str:
        return f"{self.title} [{self.status}]"

    @property
    def required_skill_ids(self) -> set[int]:
        return {skill.id for skill in self.required_skills.all()}
