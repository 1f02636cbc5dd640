"""Request validation and response rendering for the planner API."""

from __future__ import annotations

from rest_framework import serializers

from planner.models import Developer, Skill, Task, TaskStatus


# ---------------------------------------------------------------------------
# Responses
# ---------------------------------------------------------------------------

class SkillSerializer(serializers.ModelSerializer):
    class Meta:
        model = Skill
        fields = ["id", "name", "created_at"]


class DeveloperSerializer(serializers.ModelSerializer):
    skills = SkillSerializer(many=True, read_only=True)

    class Meta:
        model = Developer
        fields = ["id", "name", "created_at", "skills"]


class AssignedTaskSerializer(serializers.ModelSerializer):
    required_skills = SkillSerializer(many=True, read_only=True)

    class Meta:
        model = Task
        fields = ["id", "title", "status", "required_skills"]


class RosterDeveloperSerializer(DeveloperSerializer):
    """Developer with the tasks currently assigned to them."""

    assigned_tasks = AssignedTaskSerializer(many=True, read_only=True)

    class Meta(DeveloperSerializer.Meta):
        fields = DeveloperSerializer.Meta.fields + ["assigned_tasks"]


class TaskSerializer(serializers.ModelSerializer):
    """A task node with its loaded subtree.

    Expects instances produced by ``planner.task_tree``, which cache the
    children of every node on ``children``.
    """

    required_skills = SkillSerializer(many=True, read_only=True)
    assigned_developer = DeveloperSerializer(read_only=True)
    parent_task = serializers.SerializerMethodField()
    subtasks = serializers.SerializerMethodField()

    class Meta:
        model = Task
        fields = [
            "id", "title", "status", "created_at", "updated_at",
            "required_skills", "assigned_developer", "parent_task", "subtasks",
        ]

    def get_parent_task(self, obj: Task) -> dict | None:
        if obj.parent_task is None:
            return None
        return {"id": obj.parent_task.id, "title": obj.parent_task.title}

    def get_subtasks(self, obj: Task) -> list[dict]:
        return TaskSerializer(getattr(obj, "children", []), many=True).data


# ---------------------------------------------------------------------------
# Requests
# ---------------------------------------------------------------------------

class TaskCreateSerializer(serializers.Serializer):
    """One node of a task tree submitted for creation.

    ``subtasks`` holds nested nodes of the same shape, validated recursively.
    ``required_skill_ids`` may be omitted so that skills can be inferred.
    """

    title = serializers.CharField()
    status = serializers.ChoiceField(choices=TaskStatus.choices, required=False)
    assigned_developer_id = serializers.IntegerField(required=False, allow_null=True)
    required_skill_ids = serializers.ListField(child=serializers.IntegerField(), required=False)
    subtasks = serializers.ListField(child=serializers.DictField(), required=False)

    def validate_subtasks(self, value: list[dict]) -> list[dict]:
        validated = []
        errors = {}
        for index, item in enumerate(value):
            child = TaskCreateSerializer(data=item)
            if child.is_valid():
                validated.append(dict(child.validated_data))
            else:
                errors[index] = child.errors
        if errors:
            raise serializers.ValidationError(errors)
        return validated


class TaskUpdateSerializer(serializers.Serializer):
    title = serializers.CharField(required=False)
    status = serializers.ChoiceField(choices=TaskStatus.choices, required=False)
    assigned_developer_id = serializers.IntegerField(required=False, allow_null=True)
    required_skill_ids = serializers.ListField(
        child=serializers.IntegerField(), required=False, min_length=1,
    )
