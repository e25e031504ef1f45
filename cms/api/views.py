import logging

from django.db.models import Q
from django.shortcuts import get_object_or_404
from django.utils import timezone
from rest_framework import exceptions, generics, permissions, status
from rest_framework.response import Response
from rest_framework.views import APIView

from accounts.permissions import IsTeacherOrAdmin

from .. import services
from ..models import Content, ContentVersion
from .serializers import (
    ContentSerializer,
    ContentVersionSerializer,
    PublicContentSerializer,
    PublishVersionSerializer,
)

logger = logging.getLogger(__name__)

SORT_FIELDS = {"title", "created_at", "updated_at", "published_at", "sort_order"}


def _choice_list(choices):
    return [{"value": value, "label": label} for value, label in choices]


class ContentListCreateView(generics.ListCreateAPIView):
    serializer_class = ContentSerializer
    permission_classes = [IsTeacherOrAdmin]

    def get_queryset(self):
        queryset = Content.objects.select_related("author", "current_version")
        params = self.request.query_params
        if params.get("type"):
            queryset = queryset.filter(type=params["type"])
        if params.get("status"):
            queryset = queryset.filter(status=params["status"])
        if params.get("search"):
            term = params["search"]
            queryset = queryset.filter(Q(title__icontains=term) | Q(body__icontains=term))

        sort_by = params.get("sort_by", "updated_at")
        if sort_by not in SORT_FIELDS:
            sort_by = "updated_at"
        if params.get("sort_order", "desc") == "desc":
            sort_by = f"-{sort_by}"
        return queryset.order_by(sort_by, "id")


class ContentDetailView(generics.RetrieveUpdateDestroyAPIView):
    serializer_class = ContentSerializer
    permission_classes = [IsTeacherOrAdmin]
    queryset = Content.objects.select_related("author", "current_version")

    def check_object_permissions(self, request, obj):
        super().check_object_permissions(request, obj)
        if request.method not in permissions.SAFE_METHODS and not obj.can_edit(request.user):
            raise exceptions.PermissionDenied("You can only edit your own content.")

    def perform_destroy(self, instance):
        logger.info("Content %s deleted by %s", instance.pk, self.request.user.pk)
        instance.delete()


class ContentVersionListView(APIView):
    permission_classes = [IsTeacherOrAdmin]

    def get(self, request, pk: int, *args, **kwargs):
        content = get_object_or_404(Content, pk=pk)
        versions = list(content.versions.select_related("created_by").order_by("-version_number"))
        data = ContentVersionSerializer(versions, many=True).data
        # Versions are newest first; each one is compared with the one before it.
        for item, version, previous in zip(data, versions, versions[1:] + [None]):
            item["changes"] = (
                services.version_differences(previous, version) if previous else {}
            )
        return Response(
            {
                "content_id": content.id,
                "current_version_id": content.current_version_id,
                "versions": data,
            }
        )


class PublishVersionView(APIView):
    permission_classes = [IsTeacherOrAdmin]

    def post(self, request, pk: int, *args, **kwargs):
        content = get_object_or_404(Content, pk=pk)
        if not content.can_edit(request.user):
            raise exceptions.PermissionDenied("You can only publish your own content.")

        serializer = PublishVersionSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        version = get_object_or_404(ContentVersion, pk=serializer.validated_data["version_id"])
        try:
            services.publish_version(content, version)
        except ValueError as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_422_UNPROCESSABLE_ENTITY)
        return Response(ContentSerializer(content, context={"request": request}).data)


class ContentTypesView(APIView):
    permission_classes = [IsTeacherOrAdmin]

    def get(self, request, *args, **kwargs):
        return Response(_choice_list(Content.Type.choices))


class ContentTemplatesView(APIView):
    permission_classes = [IsTeacherOrAdmin]

    def get(self, request, *args, **kwargs):
        return Response(_choice_list(Content.Template.choices))


def published_content():
    return Content.objects.filter(
        status=Content.Status.PUBLISHED, published_at__lte=timezone.now()
    )


class PublicContentListView(generics.ListAPIView):
    serializer_class = PublicContentSerializer
    authentication_classes = []
    permission_classes = [permissions.AllowAny]

    def get_queryset(self):
        queryset = published_content()
        content_type = self.request.query_params.get("type")
        if content_type:
            queryset = queryset.filter(type=content_type)
        if self.request.query_params.get("featured") in ("1", "true"):
            queryset = queryset.filter(is_featured=True)
        return queryset.order_by("sort_order", "-published_at")


class PublicContentDetailView(generics.RetrieveAPIView):
    serializer_class = PublicContentSerializer
    authentication_classes = []
    permission_classes = [permissions.AllowAny]
    lookup_field = "slug"

    def get_queryset(self):
        return published_content()
