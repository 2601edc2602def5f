import django_filters

from .models import CorrectionReport


class CorrectionReportFilter(django_filters.FilterSet):
    class Meta:
        model = CorrectionReport
        fields = ["status", "field_name", "restaurant"]
