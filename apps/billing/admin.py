from django.contrib import admin
from .models import Payment


@admin.register(Payment)
class PaymentAdmin(admin.ModelAdmin):
    """Read-only payment ledger."""

    list_display = ['received_at', 'amount', 'method', 'repair', 'received_by']
    list_filter = ['method', 'received_at']
    search_fields = ['repair__customer__name', 'received_by__email']
    ordering = ['-received_at']
    date_hierarchy = 'received_at'
    readonly_fields = ['id', 'repair', 'amount', 'method', 'received_by', 'received_at']

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False
