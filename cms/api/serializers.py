from rest_framework import serializers

from .. import services
from ..models import Content, ContentVersion
from ..rendering import render_content


class ContentVersionSerializer(serializers.ModelSerializer):
    label = serializers.CharField(read_only=True)
    created_by = serializers.StringRelatedField(read_only=True)

    class Meta:
        model = ContentVersion
        fields = [
            "id",
            "version_number",
            "label",
            "title",
            "body",
            "meta_data",
            "template",
            "change_summary",
            "created_by",
            "is_current",
            "created_at",
        ]
        read_only_fields = fields


class ContentSerializer(serializers.ModelSerializer):
    author = serializers.StringRelatedField(read_only=True)
    current_version = ContentVersionSerializer(read_only=True)
    change_summary = serializers.CharField(
        write_only=True, required=False, allow_blank=True
    )
    rendered_body = serializers.SerializerMethodField()
    can_edit = serializers.SerializerMethodField()

    class Meta:
        model = Content
        fields = [
            "id",
            "title",
            "slug",
            "body",
            "rendered_body",
            "type",
            "status",
            "meta_data",
            "template",
            "rendering_strategy",
            "sort_order",
            "is_featured",
            "published_at",
            "author",
            "current_version",
            "change_summary",
            "can_edit",
            "created_at",
            "updated_at",
        ]
        read_only_fields = ["id", "author", "current_version", "created_at", "updated_at"]
        extra_kwargs = {"slug": {"required": False, "allow_blank": True}}

    def get_rendered_body(self, obj: Content) -> str:
        return render_content(obj)

    def get_can_edit(self, obj: Content) -> bool:
        request = self.context.get("request")
        return bool(request and obj.can_edit(request.user))

    def validate_meta_data(self, value):
        if not isinstance(value, dict):
            raise serializers.ValidationError("Meta data must be an object.")
        return value

    def create(self, validated_data):
        return services.create_content(validated_data, author=self.context["request"].user)

    def update(self, instance, validated_data):
        return services.update_content(
            instance, validated_data, author=self.context["request"].user
        )


class PublicContentSerializer(serializers.ModelSerializer):
    rendered_body = serializers.SerializerMethodField()

    class Meta:
        model = Content
        fields = [
            "id",
            "title",
            "slug",
            "rendered_body",
            "type",
            "meta_data",
            "template",
            "is_featured",
            "published_at",
        ]
        read_only_fields = fields

    def get_rendered_body(self, obj: Content) -> str:
        return render_content(obj)


class PublishVersionSerializer(serializers.Serializer):
    version_id = serializers.IntegerField()
