from django.urls import path

from . import views

app_name = "cms"

urlpatterns = [
    path("cms/content/", views.ContentListCreateView.as_view(), name="content-list"),
    path("cms/content/<int:pk>/", views.ContentDetailView.as_view(), name="content-detail"),
    path(
        "cms/content/<int:pk>/versions/",
        views.ContentVersionListView.as_view(),
        name="content-versions",
    ),
    path(
        "cms/content/<int:pk>/publish-version/",
        views.PublishVersionView.as_view(),
        name="content-publish-version",
    ),
    path("cms/content-types/", views.ContentTypesView.as_view(), name="content-types"),
    path(
        "cms/content-templates/",
        views.ContentTemplatesView.as_view(),
        name="content-templates",
    ),
    path("public/content/", views.PublicContentListView.as_view(), name="public-content-list"),
    path(
        "public/content/<slug:slug>/",
        views.PublicContentDetailView.as_view(),
        name="public-content-detail",
    ),
]
