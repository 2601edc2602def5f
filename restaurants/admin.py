from django.contrib import admin
from django.utils.html import format_html

from .models import CuisineType, PetPolicy, Restaurant


@admin.register(Restaurant)
class RestaurantAdmin(admin.ModelAdmin):
    list_display = ["name", "status", "cuisine_list", "pet_policy", "submitted_by", "cover", "created_at"]
    list_filter = ["status", "pet_policy", "created_at"]
    list_select_related = ["submitted_by", "reviewed_by"]
    search_fields = ["name", "name_zh", "name_pt", "address"]
    readonly_fields = ["image_url", "cover", "version", "reviewed_by", "reviewed_at", "created_at", "updated_at"]
    date_hierarchy = "created_at"
    list_per_page = 25

    def cuisine_list(self, restaurant):
        return ", ".join(restaurant.cuisine_type)
    cuisine_list.short_description = "Cuisine"

    def cover(self, restaurant):
        if restaurant.image_url:
            return format_html('<img src="{}" width="100" height="100" />', restaurant.image_url)
        return ""


@admin.register(CuisineType)
class CuisineTypeAdmin(admin.ModelAdmin):
    list_display = ["name", "name_zh", "name_pt", "sort_order"]
    list_editable = ["sort_order"]
    search_fields = ["name", "name_zh", "name_pt"]


@admin.register(PetPolicy)
class PetPolicyAdmin(admin.ModelAdmin):
    list_display = ["name", "name_zh", "name_pt", "sort_order"]
    list_editable = ["sort_order"]
    search_fields = ["name", "name_zh", "name_pt"]
