from django.contrib import admin

from . import models


@admin.register(models.User)
class UserProfileAdmin(admin.ModelAdmin):
    list_display = ["full_name", "email", "role", "preferred_language", "is_staff", "is_active"]
    ordering = ["first_name", "last_name"]
    list_filter = ["role", "is_staff", "is_active"]
    list_editable = ["role"]
    list_per_page = 10
    search_fields = ["first_name__istartswith", "last_name__istartswith", "email__istartswith"]

    def full_name(self, user):
        return f"{user.first_name} {user.last_name}"
