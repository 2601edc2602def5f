from django.contrib import admin

from .models import Review


@admin.register(Review)
class ReviewAdmin(admin.ModelAdmin):
    list_display = ["restaurant", "user", "rating", "is_hidden", "created_at"]
    list_editable = ["is_hidden"]
    list_filter = ["is_hidden", "rating", "created_at"]
    list_select_related = ["restaurant", "user"]
    search_fields = ["comment", "restaurant__name", "user__email"]
    readonly_fields = ["image_url", "created_at", "updated_at"]
    list_per_page = 25
