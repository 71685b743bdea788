from rest_framework import serializers
from .models import Payment, PaymentMethod
from apps.repairs.models import RepairCharge


# =============================================================================
# Input Serializers
# =============================================================================

class PaymentInputSerializer(serializers.Serializer):
    """
    Request body for payment endpoints.

    Fields:
        amount (decimal): Amount received, positive, at most 2 decimal places
        method (str): One of CASH, CARD, BANK_TRANSFER, OTHER

    Values are validated by the payment service so that errors keep their
    stable messages; this serializer documents the schema.
    """

    amount = serializers.DecimalField(max_digits=10, decimal_places=2)
    method = serializers.ChoiceField(choices=PaymentMethod.choices)


# =============================================================================
# Output Serializers
# =============================================================================

class CreatedPaymentSerializer(serializers.Serializer):
    paymentId = serializers.UUIDField(source='payment.id')
    repairId = serializers.UUIDField(source='repair_id')
    amount = serializers.DecimalField(max_digits=10, decimal_places=2)


class PaymentResultSerializer(serializers.Serializer):
    createdPayments = CreatedPaymentSerializer(source='created_payments', many=True)


class RepairChargeSerializer(serializers.ModelSerializer):
    class Meta:
        model = RepairCharge
        fields = ['id', 'description', 'amount', 'created_at']
        read_only_fields = fields


class PaymentSerializer(serializers.ModelSerializer):
    received_by = serializers.SerializerMethodField()

    class Meta:
        model = Payment
        fields = ['id', 'amount', 'method', 'received_by', 'received_at']
        read_only_fields = fields

    def get_received_by(self, obj):
        return obj.received_by.get_display_name() if obj.received_by else None


class BillingCustomerSerializer(serializers.Serializer):
    id = serializers.UUIDField()
    name = serializers.CharField()
    phone = serializers.CharField(allow_null=True)
    phone2 = serializers.CharField(allow_null=True)
    email = serializers.CharField(allow_null=True)
    address = serializers.CharField(allow_null=True)


class BillingItemSerializer(serializers.Serializer):
    """One billable repair with its totals."""

    repairId = serializers.UUIDField(source='repair.id')
    deviceDescription = serializers.CharField(source='repair.device_description')
    status = serializers.CharField(source='repair.status')
    isLocked = serializers.BooleanField(source='repair.is_locked')
    createdAt = serializers.DateTimeField(source='repair.created_at')
    total = serializers.DecimalField(max_digits=10, decimal_places=2)
    paid = serializers.DecimalField(max_digits=10, decimal_places=2)
    due = serializers.DecimalField(max_digits=10, decimal_places=2)
    charges = RepairChargeSerializer(source='repair.charges', many=True)
    payments = PaymentSerializer(source='repair.payments', many=True)


class CustomerBillingSerializer(serializers.Serializer):
    """Combined billing for a customer across all billable repairs."""

    customer = BillingCustomerSerializer()
    items = BillingItemSerializer(source='bills', many=True)
    combinedTotal = serializers.DecimalField(source='combined_total', max_digits=12, decimal_places=2)
    combinedPaid = serializers.DecimalField(source='combined_paid', max_digits=12, decimal_places=2)
    combinedDue = serializers.DecimalField(source='combined_due', max_digits=12, decimal_places=2)
