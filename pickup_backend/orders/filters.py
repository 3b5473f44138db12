# orders/filters.py

import django_filters

from orders.models import Order, Payment


class OrderFilter(django_filters.FilterSet):
    pickup_date_from = django_filters.DateFilter(field_name="pickup_date", lookup_expr="gte")
    pickup_date_to = django_filters.DateFilter(field_name="pickup_date", lookup_expr="lte")

    class Meta:
        model = Order
        fields = ["status", "payment_status", "store", "pickup_date"]


class PaymentFilter(django_filters.FilterSet):
    class Meta:
        model = Payment
        fields = ["status", "order"]
