from django.urls import path

from . import views

urlpatterns = [
    path("assignments/", views.AssignmentListCreateView.as_view(), name="assignment-list"),
    path("assignments/<int:pk>/", views.AssignmentDetailView.as_view(), name="assignment-detail"),
    path(
        "assignments/<int:pk>/publish/",
        views.AssignmentPublishView.as_view(),
        name="assignment-publish",
    ),
    path(
        "assignments/<int:pk>/unpublish/",
        views.AssignmentUnpublishView.as_view(),
        name="assignment-unpublish",
    ),
    path(
        "assignments/<int:pk>/submissions/",
        views.AssignmentSubmissionsView.as_view(),
        name="assignment-submissions",
    ),
    path(
        "assignments/<int:pk>/submissions/<int:submission_id>/grade/",
        views.GradeSubmissionView.as_view(),
        name="submission-grade",
    ),
    path(
        "assignments/<int:pk>/submissions/<int:submission_id>/return/",
        views.ReturnSubmissionView.as_view(),
        name="submission-return",
    ),
    path(
        "assignments/<int:pk>/submissions/<int:submission_id>/recompute-lateness/",
        views.RecomputeLatenessView.as_view(),
        name="submission-recompute-lateness",
    ),
    path(
        "assignments/<int:pk>/analytics/",
        views.AssignmentAnalyticsView.as_view(),
        name="assignment-analytics",
    ),
    path("grading-queue/", views.GradingQueueView.as_view(), name="grading-queue"),
    path("assignment-types/", views.AssignmentTypesView.as_view(), name="assignment-types"),
    path("my/assignments/", views.MyAssignmentListView.as_view(), name="my-assignment-list"),
    path(
        "my/assignments/<int:pk>/submission/",
        views.MySubmissionView.as_view(),
        name="my-submission",
    ),
    path(
        "my/assignments/<int:pk>/submission/submit/",
        views.MySubmissionSubmitView.as_view(),
        name="my-submission-submit",
    ),
]
