from django.contrib import admin

from .models import CorrectionReport


@admin.register(CorrectionReport)
class CorrectionReportAdmin(admin.ModelAdmin):
    list_display = ["restaurant", "field_name", "status", "user", "merge_applied", "created_at"]
    list_filter = ["status", "field_name", "merge_claimed", "created_at"]
    list_select_related = ["restaurant", "user"]
    search_fields = ["restaurant__name", "suggested_value", "reason"]
    readonly_fields = ["merge_applied", "reviewed_by", "reviewed_at", "created_at"]
    date_hierarchy = "created_at"
    list_per_page = 25
