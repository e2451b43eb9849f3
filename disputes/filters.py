import django_filters

from disputes.models import Dispute


class DisputeFilter(django_filters.FilterSet):
    created_from = django_filters.DateFilter(field_name="created_at", lookup_expr="date__gte")
    created_to = django_filters.DateFilter(field_name="created_at", lookup_expr="date__lte")
    overdue_before = django_filters.IsoDateTimeFilter(field_name="deadline", lookup_expr="lt")

    class Meta:
        model = Dispute
        fields = [
            "status",
            "priority",
            "kind",
            "remittance",
            "assigned_to",
        ]
