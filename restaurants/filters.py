import django_filters

from .models import Restaurant


class RestaurantFilter(django_filters.FilterSet):
    cuisine = django_filters.CharFilter(method="filter_cuisine")
    pet_policy = django_filters.CharFilter(field_name="pet_policy", lookup_expr="iexact")
    status = django_filters.ChoiceFilter(choices=Restaurant.STATUS_CHOICES)

    class Meta:
        model = Restaurant
        fields = ["status", "pet_policy", "cuisine"]

    def filter_cuisine(self, queryset, name, value):
        # matches against the serialized JSON list
        return queryset.filter(cuisine_type__icontains=value)
