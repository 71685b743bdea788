# ==========================================
# apps/repairs/admin.py
# ==========================================

from django.contrib import admin
from django.core.exceptions import ValidationError
from django.db.models import Sum
from django.forms.models import BaseInlineFormSet
from django.utils.html import format_html
from decimal import Decimal
from .models import Repair, RepairCharge
from apps.billing.models import Payment
from apps.billing.services import recalculate_repair_charges


class RepairChargeFormSet(BaseInlineFormSet):
    """Rejects charge edits that would total less than what was already paid."""

    def clean(self):
        super().clean()
        if self.instance.pk is None:
            return

        total = sum(
            (
                form.cleaned_data.get('amount') or Decimal('0.00')
                for form in self.forms
                if form.cleaned_data and not self._should_delete_form(form)
            ),
            Decimal('0.00'),
        )
        paid = self.instance.payments.aggregate(total=Sum('amount'))['total'] or Decimal('0.00')
        if total < paid:
            raise ValidationError(
                f"Charges total {total} is less than the {paid} already paid."
            )


class RepairChargeInline(admin.TabularInline):
    """Inline admin for charge lines within a repair."""
    model = RepairCharge
    formset = RepairChargeFormSet
    extra = 0
    fields = ['description', 'amount', 'created_at']
    readonly_fields = ['created_at']

    def has_add_permission(self, request, obj=None):
        """Settled repairs keep their charges."""
        return obj is None or not obj.is_locked

    def has_change_permission(self, request, obj=None):
        return obj is None or not obj.is_locked

    def has_delete_permission(self, request, obj=None):
        return obj is None or not obj.is_locked


class PaymentInline(admin.TabularInline):
    """Payments are recorded through the billing API only."""
    model = Payment
    extra = 0
    fields = ['amount', 'method', 'received_by', 'received_at']
    readonly_fields = fields

    def has_add_permission(self, request, obj=None):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False


@admin.register(Repair)
class RepairAdmin(admin.ModelAdmin):
    """
    Admin interface for repairs.

    Settlement fields are written by the payment service and are read-only here.
    """

    list_display = [
        'device_description',
        'customer',
        'status',
        'total_charges',
        'get_paid_display',
        'locked_badge',
        'assigned_to',
        'created_at',
    ]

    list_filter = ['status', 'is_locked', 'created_at']
    search_fields = ['device_description', 'customer__name', 'customer__phone']
    ordering = ['-created_at']
    date_hierarchy = 'created_at'
    inlines = [RepairChargeInline, PaymentInline]

    readonly_fields = [
        'id',
        'total_charges',
        'is_locked',
        'staff_share_amount',
        'shop_share_amount',
        'created_at',
        'updated_at',
    ]

    def get_queryset(self, request):
        return super().get_queryset(request).select_related('customer', 'assigned_to')

    def get_paid_display(self, obj):
        paid = obj.payments.aggregate(total=Sum('amount'))['total'] or Decimal('0.00')
        return f"{paid} / {obj.total_charges}"
    get_paid_display.short_description = 'Paid'

    def locked_badge(self, obj):
        """Display settlement state as colored badge."""
        bg, label = ('#6B8E5E', 'Settled') if obj.is_locked else ('#E5C49A', 'Open')
        return format_html(
            '<span style="background: {}; padding: 3px 8px; '
            'border-radius: 10px; font-size: 11px;">{}</span>',
            bg, label
        )
    locked_badge.short_description = 'Settlement'

    def save_formset(self, request, form, formset, change):
        """Keep the cached total in sync with the charge lines (may settle the repair)."""
        super().save_formset(request, form, formset, change)
        if formset.model is RepairCharge and formset.has_changed():
            recalculate_repair_charges(repair_id=form.instance.pk)
