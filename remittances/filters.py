import django_filters

from remittances.models import Remittance


class RemittanceFilter(django_filters.FilterSet):
    created_from = django_filters.DateFilter(field_name="created_at", lookup_expr="date__gte")
    created_to = django_filters.DateFilter(field_name="created_at", lookup_expr="date__lte")

    class Meta:
        model = Remittance
        fields = [
            "state",
            "delivery_type",
            "courier",
            "reseller",
            "invoiced",
            "is_request",
            "province",
        ]
