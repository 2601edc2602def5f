import django_filters

from .models import Review


class ReviewFilter(django_filters.FilterSet):
    min_rating = django_filters.NumberFilter(field_name="rating", lookup_expr="gte")

    class Meta:
        model = Review
        fields = ["restaurant", "rating", "is_hidden", "min_rating"]
