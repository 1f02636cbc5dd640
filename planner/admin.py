from django.contrib import admin

from .models import Developer, Skill, Task


@admin.register(Skill)
class SkillAdmin(admin.ModelAdmin):
    list_display = ("id", "name", "created_at")
    search_fields = ("name",)


@admin.register(Developer)
class DeveloperAdmin(admin.ModelAdmin):
    list_display = ("id", "name", "created_at")
    search_fields = ("name",)
    filter_horizontal = ("skills",)


@admin.register(Task)
class TaskAdmin(admin.ModelAdmin):
    list_display = ("id", "title", "status", "assigned_developer", "parent_task", "updated_at")
    list_filter = ("status",)
    search_fields = ("title",)
    filter_horizontal = ("required_skills",)
    readonly_fields = ("status", "assigned_developer", "parent_task", "created_at", "updated_at")
