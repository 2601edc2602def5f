from django.contrib import admin

from .models import Pet


@admin.register(Pet)
class PetAdmin(admin.ModelAdmin):
    list_display = ["name", "type", "size", "breed", "user", "created_at"]
    list_filter = ["type", "size"]
    list_select_related = ["user"]
    search_fields = ["name", "breed", "user__email"]
    list_per_page = 25
