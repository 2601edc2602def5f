from rest_framework_nested import routers

from . import views

router = routers.SimpleRouter()
router.register("pets", views.PetViewSet, basename="pet")

urlpatterns = router.urls
