from django.contrib import admin

from .models import Content, ContentVersion


class ContentVersionInline(admin.TabularInline):
    model = ContentVersion
    extra = 0
    fields = ("version_number", "title", "change_summary", "created_by", "is_current", "created_at")
    readonly_fields = fields
    can_delete = False
    ordering = ("-version_number",)


@admin.register(Content)
class ContentAdmin(admin.ModelAdmin):
    list_display = ("title", "type", "status", "is_featured", "published_at", "author")
    list_filter = ("type", "status", "is_featured", "template")
    search_fields = ("title", "body")
    prepopulated_fields = {"slug": ("title",)}
    readonly_fields = ("current_version", "created_at", "updated_at")
    inlines = [ContentVersionInline]


@admin.register(ContentVersion)
class ContentVersionAdmin(admin.ModelAdmin):
    list_display = ("content", "version_number", "is_current", "created_by", "created_at")
    list_filter = ("is_current",)
    search_fields = ("content__title", "title", "change_summary")
    readonly_fields = ("is_current", "created_at")
