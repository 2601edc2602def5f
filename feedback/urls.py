from rest_framework_nested import routers

from . import views

router = routers.SimpleRouter()
router.register("feedback", views.FeedbackViewSet, basename="feedback")

urlpatterns = router.urls
