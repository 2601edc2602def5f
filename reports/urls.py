from rest_framework_nested import routers

from . import views

router = routers.SimpleRouter()
router.register("reports", views.CorrectionReportViewSet, basename="report")

urlpatterns = router.urls
