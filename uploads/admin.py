from django.contrib import admin

from .models import PendingUpload


@admin.register(PendingUpload)
class PendingUploadAdmin(admin.ModelAdmin):
    list_display = ["path", "purpose", "uploaded_by", "created_at"]
    list_filter = ["purpose", "created_at"]
    search_fields = ["path", "url"]
    readonly_fields = ["path", "url", "purpose", "uploaded_by", "created_at"]
    date_hierarchy = "created_at"
    list_per_page = 25
