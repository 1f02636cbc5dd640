"""URL routes for the planner app."""

from django.urls import path

from . import views

app_name = "planner"

urlpatterns = [
    path("health/", views.health_check, name="health_check"),
    path("skills/", views.skill_list, name="skill_list"),
    path("skills/<int:skill_id>/", views.skill_detail, name="skill_detail"),
    path("developers/", views.developer_list, name="developer_list"),
    path("developers/<int:developer_id>/", views.developer_detail, name="developer_detail"),
    path("tasks/", views.task_list_or_create, name="task_list_or_create"),
    path("tasks/<int:task_id>/", views.task_detail_or_update, name="task_detail_or_update"),
]
