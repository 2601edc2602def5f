from django.contrib import admin

from .models import Feedback


@admin.register(Feedback)
class FeedbackAdmin(admin.ModelAdmin):
    list_display = ["type", "status", "contact_email", "user", "created_at"]
    list_editable = ["status"]
    list_filter = ["status", "type", "created_at"]
    search_fields = ["message", "contact_email"]
    readonly_fields = ["created_at", "updated_at"]
    list_per_page = 25
