from django.urls import path

from . import views

urlpatterns = [
    path("classes/", views.SchoolClassListCreateView.as_view(), name="class-list"),
    path("classes/<int:pk>/", views.SchoolClassDetailView.as_view(), name="class-detail"),
    path(
        "classes/<int:pk>/enroll-students/",
        views.EnrollStudentsView.as_view(),
        name="class-enroll-students",
    ),
    path(
        "classes/<int:pk>/remove-students/",
        views.RemoveStudentsView.as_view(),
        name="class-remove-students",
    ),
    path("available-students/", views.AvailableStudentsView.as_view(), name="available-students"),
]
