"""Tests for the task tree engine."""

from __future__ import annotations

import pytest

from planner.errors import IncompleteSubtasks, IneligibleAssignment, NotFound
from planner.models import Task, TaskStatus
from planner.task_tree import (
    create_task,
    get_task,
    incomplete_descendants,
    list_top_level_tasks,
    update_task,
)


def _ids(*skill_objs) -> list[int]:
    return [s.id for s in skill_objs]


@pytest.mark.django_db
class TestCreateTask:
    def test_login_form_scenario(self, skills) -> None:
        create_task({
            "title": "Build login form",
            "required_skill_ids": _ids(skills["Frontend"]),
            "subtasks": [
                {"title": "Style form", "required_skill_ids": _ids(skills["Frontend"], skills["CSS"])},
            ],
        })

        tasks = list_top_level_tasks()
        assert len(tasks) == 1
        root = tasks[0]
        assert root.title == "Build login form"
        assert root.status == TaskStatus.TODO
        assert len(root.children) == 1
        child = root.children[0]
        assert child.title == "Style form"
        assert child.status == TaskStatus.TODO
        assert child.parent_task_id == root.id
        assert {s.name for s in child.required_skills.all()} == {"Frontend", "CSS"}

    def test_returns_refetched_tree(self, skills, make_developer) -> None:
        dev = make_developer("Fay", skills["Frontend"], skills["CSS"])
        task = create_task({
            "title": "Landing page",
            "status": TaskStatus.IN_PROGRESS,
            "required_skill_ids": _ids(skills["Frontend"]),
            "assigned_developer_id": dev.id,
            "subtasks": [
                {
                    "title": "Hero section",
                    "required_skill_ids": _ids(skills["CSS"]),
                    "assigned_developer_id": dev.id,
                    "subtasks": [{"title": "Gradient", "required_skill_ids": _ids(skills["CSS"])}],
                },
            ],
        })

        assert task.pk is not None
        assert task.status == TaskStatus.IN_PROGRESS
        assert task.assigned_developer == dev
        assert task.created_at is not None
        assert task.children[0].assigned_developer == dev
        assert task.children[0].children[0].title == "Gradient"
        assert task.children[0].children[0].children == []
        assert Task.objects.count() == 3

    def test_unknown_skill_anywhere_persists_nothing(self, skills) -> None:
        with pytest.raises(NotFound):
            create_task({
                "title": "Checkout",
                "required_skill_ids": _ids(skills["Backend"]),
                "subtasks": [
                    {"title": "Cart", "required_skill_ids": _ids(skills["Backend"])},
                    {"title": "Payment", "required_skill_ids": [987654]},
                ],
            })

        assert list_top_level_tasks() == []
        assert Task.objects.count() == 0

    def test_unknown_developer_persists_nothing(self, skills) -> None:
        with pytest.raises(NotFound) as exc_info:
            create_task({
                "title": "Checkout",
                "required_skill_ids": _ids(skills["Backend"]),
                "assigned_developer_id": 555,
            })
        assert exc_info.value.entity == "Developer"
        assert Task.objects.count() == 0

    def test_ineligible_subtask_assignee_persists_nothing(self, skills, make_developer) -> None:
        dev = make_developer("Gus", skills["Backend"])
        with pytest.raises(IneligibleAssignment) as exc_info:
            create_task({
                "title": "Reports",
                "required_skill_ids": _ids(skills["Backend"]),
                "assigned_developer_id": dev.id,
                "subtasks": [
                    {
                        "title": "Report schema",
                        "required_skill_ids": _ids(skills["Backend"], skills["Database"]),
                        "assigned_developer_id": dev.id,
                    },
                ],
            })

        assert exc_info.value.missing_skills == ["Database"]
        assert Task.objects.count() == 0

    def test_subtask_may_have_no_skills(self, skills) -> None:
        task = create_task({
            "title": "Docs",
            "required_skill_ids": _ids(skills["Frontend"]),
            "subtasks": [{"title": "Write README", "required_skill_ids": []}],
        })
        assert list(task.children[0].required_skills.all()) == []

    def test_done_over_unfinished_subtask_is_rejected(self, skills) -> None:
        with pytest.raises(IncompleteSubtasks) as exc_info:
            create_task({
                "title": "Release",
                "status": TaskStatus.DONE,
                "required_skill_ids": _ids(skills["Backend"]),
                "subtasks": [{"title": "Changelog", "required_skill_ids": []}],
            })
        assert exc_info.value.titles == ["Changelog"]
        assert Task.objects.count() == 0


@pytest.mark.django_db
class TestReadTasks:
    def test_get_missing_raises_not_found(self, db) -> None:
        with pytest.raises(NotFound) as exc_info:
            get_task(1)
        assert str(exc_info.value) == "Task with ID 1 not found"

    def test_get_subtask_includes_parent_and_descendants(self, skills) -> None:
        root = create_task({
            "title": "Root",
            "required_skill_ids": _ids(skills["Backend"]),
            "subtasks": [{"title": "Mid", "subtasks": [{"title": "Leaf"}]}],
        })

        mid = get_task(root.children[0].id)
        assert mid.parent_task.title == "Root"
        assert [c.title for c in mid.children] == ["Leaf"]

    def test_list_only_top_level_newest_first(self, skills) -> None:
        create_task({"title": "First", "required_skill_ids": _ids(skills["CSS"]),
                     "subtasks": [{"title": "First child"}]})
        create_task({"title": "Second", "required_skill_ids": _ids(skills["CSS"])})

        tasks = list_top_level_tasks()
        assert [t.title for t in tasks] == ["Second", "First"]
        assert [c.title for c in tasks[1].children] == ["First child"]

    def test_children_keep_insertion_order(self, skills) -> None:
        root = create_task({
            "title": "Root",
            "required_skill_ids": _ids(skills["CSS"]),
            "subtasks": [{"title": "a"}, {"title": "b"}, {"title": "c"}],
        })
        assert [c.title for c in get_task(root.id).children] == ["a", "b", "c"]


@pytest.mark.django_db
class TestCompletionGuard:
    def test_parent_done_blocked_by_in_progress_subtask(self, skills) -> None:
        root = create_task({
            "title": "Parent",
            "required_skill_ids": _ids(skills["Backend"]),
            "subtasks": [{"title": "Child", "status": TaskStatus.IN_PROGRESS}],
        })

        with pytest.raises(IncompleteSubtasks) as exc_info:
            update_task(root.id, {"status": TaskStatus.DONE})

        assert exc_info.value.titles == ["Child"]
        assert get_task(root.id).status == TaskStatus.TODO

    def test_rejected_done_leaves_other_fields_untouched(self, skills) -> None:
        root = create_task({
            "title": "Parent",
            "required_skill_ids": _ids(skills["Backend"]),
            "subtasks": [{"title": "Child"}],
        })

        with pytest.raises(IncompleteSubtasks):
            update_task(root.id, {
                "status": TaskStatus.DONE,
                "title": "Renamed",
                "required_skill_ids": _ids(skills["CSS"]),
            })

        reloaded = get_task(root.id)
        assert reloaded.title == "Parent"
        assert reloaded.required_skill_ids == {skills["Backend"].id}

    def test_nested_incomplete_descendants_are_annotated(self, skills) -> None:
        root = create_task({
            "title": "Epic",
            "required_skill_ids": _ids(skills["Backend"]),
            "subtasks": [
                {
                    "title": "Story",
                    "subtasks": [
                        {"title": "Task A", "status": TaskStatus.DONE},
                        {"title": "Task B", "status": TaskStatus.IN_PROGRESS},
                    ],
                },
                {"title": "Story 2", "status": TaskStatus.DONE},
            ],
        })

        assert incomplete_descendants(get_task(root.id)) == [
            "Story",
            "Story (has incomplete subtasks)",
            "Task B",
        ]

    def test_done_child_with_unfinished_grandchild_still_blocks(self, skills) -> None:
        root = create_task({
            "title": "Epic",
            "required_skill_ids": _ids(skills["Backend"]),
            "subtasks": [{"title": "Story", "subtasks": [{"title": "Leaf"}]}],
        })
        story = root.children[0]
        # Leaf was never finished; force Story to Done behind the engine's back.
        Task.objects.filter(pk=story.id).update(status=TaskStatus.DONE)

        with pytest.raises(IncompleteSubtasks) as exc_info:
            update_task(root.id, {"status": TaskStatus.DONE})
        assert exc_info.value.titles == ["Story (has incomplete subtasks)", "Leaf"]

    def test_done_allowed_bottom_up(self, skills) -> None:
        root = create_task({
            "title": "Epic",
            "required_skill_ids": _ids(skills["Backend"]),
            "subtasks": [{"title": "Story", "subtasks": [{"title": "Leaf"}]}],
        })
        story = root.children[0]
        leaf = story.children[0]

        update_task(leaf.id, {"status": TaskStatus.DONE})
        update_task(story.id, {"status": TaskStatus.DONE})
        done = update_task(root.id, {"status": TaskStatus.DONE})

        assert done.status == TaskStatus.DONE

    def test_leaf_can_be_done_without_precondition(self, skills) -> None:
        root = create_task({"title": "Solo", "required_skill_ids": _ids(skills["CSS"])})
        assert update_task(root.id, {"status": TaskStatus.DONE}).status == TaskStatus.DONE

    def test_transition_out_of_done_is_unrestricted(self, skills) -> None:
        root = create_task({
            "title": "Solo",
            "status": TaskStatus.DONE,
            "required_skill_ids": _ids(skills["CSS"]),
        })
        assert update_task(root.id, {"status": TaskStatus.TODO}).status == TaskStatus.TODO


@pytest.mark.django_db
class TestUpdateTask:
    def test_missing_task_raises_not_found(self, db) -> None:
        with pytest.raises(NotFound):
            update_task(77, {"title": "x"})

    def test_title_only_touches_nothing_else(self, skills, make_developer) -> None:
        dev = make_developer("Hal", skills["Backend"])
        root = create_task({
            "title": "Old",
            "status": TaskStatus.IN_PROGRESS,
            "required_skill_ids": _ids(skills["Backend"]),
            "assigned_developer_id": dev.id,
        })

        updated = update_task(root.id, {"title": "New"})

        assert updated.title == "New"
        assert updated.status == TaskStatus.IN_PROGRESS
        assert updated.required_skill_ids == {skills["Backend"].id}
        assert updated.assigned_developer == dev
        assert updated.updated_at >= root.updated_at

    def test_assign_ineligible_developer(self, skills, make_developer) -> None:
        dev = make_developer("Ivy", skills["Backend"])
        root = create_task({
            "title": "Schema",
            "required_skill_ids": _ids(skills["Backend"], skills["Database"]),
        })

        with pytest.raises(IneligibleAssignment) as exc_info:
            update_task(root.id, {"assigned_developer_id": dev.id})

        assert exc_info.value.missing_skills == ["Database"]
        assert get_task(root.id).assigned_developer is None

    def test_assign_eligible_developer(self, skills, make_developer) -> None:
        dev = make_developer("Jo", skills["Backend"], skills["Database"])
        root = create_task({
            "title": "Schema",
            "required_skill_ids": _ids(skills["Backend"], skills["Database"]),
        })
        assert update_task(root.id, {"assigned_developer_id": dev.id}).assigned_developer == dev

    def test_assignee_validated_against_new_skills(self, skills, make_developer) -> None:
        dev = make_developer("Kit", skills["CSS"])
        root = create_task({"title": "Theme", "required_skill_ids": _ids(skills["Backend"])})

        updated = update_task(root.id, {
            "required_skill_ids": _ids(skills["CSS"]),
            "assigned_developer_id": dev.id,
        })

        assert updated.assigned_developer == dev
        assert updated.required_skill_ids == {skills["CSS"].id}

    def test_unassign_skips_validation(self, skills, make_developer) -> None:
        dev = make_developer("Lu", skills["Backend"])
        root = create_task({
            "title": "API",
            "required_skill_ids": _ids(skills["Backend"]),
            "assigned_developer_id": dev.id,
        })

        updated = update_task(root.id, {
            "assigned_developer_id": None,
            "required_skill_ids": _ids(skills["Frontend"]),
        })

        assert updated.assigned_developer is None
        assert updated.required_skill_ids == {skills["Frontend"].id}

    def test_skill_change_revalidates_existing_assignee(self, skills, make_developer) -> None:
        dev = make_developer("Max", skills["Frontend"])
        root = create_task({
            "title": "Widget",
            "required_skill_ids": _ids(skills["Frontend"]),
            "assigned_developer_id": dev.id,
        })

        with pytest.raises(IneligibleAssignment) as exc_info:
            update_task(root.id, {"required_skill_ids": _ids(skills["Frontend"], skills["Backend"])})

        assert exc_info.value.missing_skills == ["Backend"]
        reloaded = get_task(root.id)
        assert reloaded.assigned_developer == dev
        assert reloaded.required_skill_ids == {skills["Frontend"].id}

    def test_developer_skill_change_does_not_unassign(self, skills, make_developer) -> None:
        dev = make_developer("Ned", skills["Backend"])
        root = create_task({
            "title": "Jobs",
            "required_skill_ids": _ids(skills["Backend"]),
            "assigned_developer_id": dev.id,
        })
        dev.skills.clear()

        updated = update_task(root.id, {"status": TaskStatus.IN_PROGRESS})

        assert updated.assigned_developer == dev

    def test_unknown_skill_rejects_whole_update(self, skills) -> None:
        root = create_task({"title": "Old", "required_skill_ids": _ids(skills["Backend"])})

        with pytest.raises(NotFound):
            update_task(root.id, {"title": "New", "required_skill_ids": [31337]})

        assert get_task(root.id).title == "Old"

    def test_unknown_developer(self, skills) -> None:
        root = create_task({"title": "Old", "required_skill_ids": _ids(skills["Backend"])})
        with pytest.raises(NotFound) as exc_info:
            update_task(root.id, {"assigned_developer_id": 404})
        assert exc_info.value.entity == "Developer"
