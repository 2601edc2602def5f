from rest_framework_nested import routers

from . import views

router = routers.SimpleRouter()
router.register("reviews", views.ReviewViewSet, basename="review")

urlpatterns = router.urls
