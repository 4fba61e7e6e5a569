# qms_core/urls.py

from django.urls import path

from .views_workflows import (
    HealthCheckView,
    WorkflowCheckView,
    WorkflowDefinitionView,
    WorkflowListView,
    WorkflowNextStatesView,
)


app_name = "qms_core"

urlpatterns = [
    path("health/", HealthCheckView.as_view(), name="health"),

    # -------------------------------------------------
    # Workflow definitions and checks (read-only)
    # -------------------------------------------------
    path("workflows/", WorkflowListView.as_view(), name="workflow-list"),
    path(
        "workflows/<str:machine>/",
        WorkflowDefinitionView.as_view(),
        name="workflow-definition",
    ),
    path(
        "workflows/<str:machine>/next/",
        WorkflowNextStatesView.as_view(),
        name="workflow-next",
    ),
    path(
        "workflows/<str:machine>/check/",
        WorkflowCheckView.as_view(),
        name="workflow-check",
    ),
]
