from django.contrib import admin

from .models import Favorite


@admin.register(Favorite)
class FavoriteAdmin(admin.ModelAdmin):
    list_display = ("restaurant", "get_user_email", "created_at")
    list_filter = ("created_at",)
    list_select_related = ("restaurant", "user")
    search_fields = ("user__email", "user__first_name", "user__last_name", "restaurant__name")
    readonly_fields = ("created_at",)
    date_hierarchy = "created_at"

    def get_user_email(self, obj):
        return obj.user.email
    get_user_email.short_description = "User"
    get_user_email.admin_order_field = "user__email"
