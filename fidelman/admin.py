"""Fidelman admin.

Orders, payments and ledger entries are read-only here: they change only
through services (lifecycle, payments, ledger) so the ledger invariants
hold.
"""

from django.contrib import admin
from django.utils.html import format_html

from fidelman.models import (
    Client,
    Establishment,
    Order,
    OrderItem,
    Payment,
    PointsTransaction,
    Product,
)


# ===========================================
# Client Admin
# ===========================================


@admin.register(Client)
class ClientAdmin(admin.ModelAdmin):
    list_display = ["name", "email", "points_balance", "owner_badge", "is_active", "created_at"]
    list_filter = ["is_active"]
    search_fields = ["name", "email", "document"]
    readonly_fields = ["points_balance", "created_at", "updated_at"]

    def owner_badge(self, obj):
        if obj.is_owner:
            return format_html(
                '<span style="background:#28a745; color:#fff; padding:2px 8px; '
                'border-radius:3px; font-size:11px;">{}</span>',
                obj.owned_establishment.name,
            )
        return "-"

    owner_badge.short_description = "Estabelecimento"


# ===========================================
# Catalog Admin
# ===========================================


class ProductInline(admin.TabularInline):
    model = Product
    extra = 0
    fields = ["name", "price", "is_active"]


@admin.register(Establishment)
class EstablishmentAdmin(admin.ModelAdmin):
    list_display = ["name", "category", "owner", "created_at"]
    list_filter = ["category"]
    search_fields = ["name", "owner__email"]
    raw_id_fields = ["owner"]
    inlines = [ProductInline]


@admin.register(Product)
class ProductAdmin(admin.ModelAdmin):
    list_display = ["name", "establishment", "price", "is_active"]
    list_filter = ["is_active", "establishment"]
    search_fields = ["name", "establishment__name"]
    raw_id_fields = ["establishment"]


# ===========================================
# Order Admin
# ===========================================


class OrderItemInline(admin.TabularInline):
    model = OrderItem
    extra = 0
    readonly_fields = ["product", "quantity", "unit_price", "total_price"]

    def has_add_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False


class PaymentInline(admin.TabularInline):
    model = Payment
    extra = 0
    readonly_fields = ["amount", "method", "status", "transaction_id", "created_at"]

    def has_add_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False


@admin.register(Order)
class OrderAdmin(admin.ModelAdmin):
    list_display = [
        "id",
        "client",
        "establishment",
        "status_badge",
        "total_amount",
        "points_generated",
        "created_at",
    ]
    list_filter = ["status", "establishment"]
    search_fields = ["id", "client__email", "client__name"]
    readonly_fields = [
        "client",
        "establishment",
        "status",
        "total_amount",
        "points_generated",
        "created_at",
        "updated_at",
    ]
    date_hierarchy = "created_at"
    inlines = [OrderItemInline, PaymentInline]

    def has_add_permission(self, request):
        return False

    def has_delete_permission(self, request, obj=None):
        return False

    def status_badge(self, obj):
        colors = {
            "pending": "#6c757d",
            "confirmed": "#17a2b8",
            "preparing": "#ffc107",
            "ready": "#007bff",
            "completed": "#28a745",
            "cancelled": "#dc3545",
        }
        return format_html(
            '<span style="background:{}; color:#fff; padding:2px 8px; '
            'border-radius:3px; font-size:11px;">{}</span>',
            colors.get(obj.status, "#6c757d"),
            obj.get_status_display(),
        )

    status_badge.short_description = "Status"


@admin.register(Payment)
class PaymentAdmin(admin.ModelAdmin):
    list_display = ["transaction_id", "order", "client", "amount", "method", "status", "created_at"]
    list_filter = ["status", "method"]
    search_fields = ["transaction_id", "client__email"]
    readonly_fields = [
        "order",
        "client",
        "amount",
        "method",
        "status",
        "transaction_id",
        "created_at",
    ]

    def has_add_permission(self, request):
        return False

    def has_delete_permission(self, request, obj=None):
        return False


# ===========================================
# Points Ledger Admin
# ===========================================


@admin.register(PointsTransaction)
class PointsTransactionAdmin(admin.ModelAdmin):
    list_display = [
        "created_at",
        "client",
        "type",
        "points_display",
        "balance_after",
        "order",
        "description",
    ]
    list_filter = ["type"]
    search_fields = ["client__email", "client__name", "description"]
    readonly_fields = [
        "client",
        "order",
        "type",
        "points",
        "balance_after",
        "description",
        "created_at",
    ]
    date_hierarchy = "created_at"

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False

    def points_display(self, obj):
        if obj.signed_points >= 0:
            return format_html('<span style="color:green">+{}</span>', obj.points)
        return format_html('<span style="color:red">-{}</span>', obj.points)

    points_display.short_description = "Pontos"
