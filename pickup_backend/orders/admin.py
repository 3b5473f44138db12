from django.contrib import admin

from orders.models import Order, OrderItem, Payment


class OrderItemInline(admin.TabularInline):
    model = OrderItem
    extra = 0
    readonly_fields = ("product", "product_name", "quantity", "unit_price", "subtotal")
    can_delete = False


class PaymentInline(admin.TabularInline):
    model = Payment
    extra = 0
    fields = ("amount", "status", "receipt_image", "verification_notes", "submitted_at")
    readonly_fields = ("submitted_at",)


@admin.register(Order)
class OrderAdmin(admin.ModelAdmin):
    list_display = (
        "order_number",
        "user",
        "store",
        "status",
        "payment_status",
        "total_amount",
        "pickup_date",
        "pickup_time",
        "created_at",
    )
    list_filter = ("status", "payment_status", "store", "pickup_date")
    search_fields = ("order_number", "user__email", "user__full_name")
    # Status changes go through the API so the transition rules apply.
    readonly_fields = (
        "order_number",
        "status",
        "payment_status",
        "total_amount",
        "otp",
        "otp_issued_at",
        "created_at",
        "updated_at",
        "confirmed_at",
        "ready_at",
        "collected_at",
        "cancelled_at",
    )
    inlines = [OrderItemInline, PaymentInline]


@admin.register(Payment)
class PaymentAdmin(admin.ModelAdmin):
    list_display = ("id", "order", "user", "amount", "status", "submitted_at", "verified_at")
    list_filter = ("status",)
    search_fields = ("order__order_number", "user__email")
    readonly_fields = ("status", "verified_by", "verified_at", "submitted_at", "updated_at")
