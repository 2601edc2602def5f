from django.conf import settings
from django.conf.urls.static import static
from django.contrib import admin
from django.urls import include, path

urlpatterns = [
    path("admin/", admin.site.urls),
    path("api/", include("users.urls")),
    path("api/", include("restaurants.urls")),
    path("api/", include("reports.urls")),
    path("api/", include("reviews.urls")),
    path("api/", include("pets.urls")),
    path("api/", include("feedback.urls")),
    path("api/favorites/", include("favorites.urls")),
    path("api/admin/", include("moderation.urls")),
]

if settings.DEBUG:
    urlpatterns += static(settings.MEDIA_URL, document_root=settings.MEDIA_ROOT)
