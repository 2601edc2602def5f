from rest_framework_nested import routers

from reports.views import RestaurantReportViewSet
from reviews.views import RestaurantReviewViewSet

from . import views

router = routers.DefaultRouter()
router.register("restaurants", views.RestaurantViewSet, basename="restaurant")
router.register("cuisine-types", views.CuisineTypeViewSet, basename="cuisine-type")
router.register("pet-policies", views.PetPolicyViewSet, basename="pet-policy")

restaurants_router = routers.NestedDefaultRouter(router, "restaurants", lookup="restaurant")
restaurants_router.register("reviews", RestaurantReviewViewSet, basename="restaurant-reviews")
restaurants_router.register("reports", RestaurantReportViewSet, basename="restaurant-reports")

urlpatterns = router.urls + restaurants_router.urls
