import logging

from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.exceptions import ParseError
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework import serializers as drf_serializers
from drf_spectacular.utils import extend_schema

from .serializers import (
    PaymentInputSerializer,
    PaymentResultSerializer,
    CustomerBillingSerializer,
)
from .permissions import CanTakePayment, CanViewBilling
from .services import (
    apply_customer_payment,
    apply_repair_payment,
    get_customer_billing_summary,
    # Exceptions
    BillingServiceError,
    TransientStorageError,
)

logger = logging.getLogger(__name__)

INTERNAL_ERROR = {'message': 'Internal server error'}

# Seconds a client should wait before retrying after a transient failure
RETRY_AFTER_SECONDS = 1


# Response serializers for API documentation
class MessageResponseSerializer(drf_serializers.Serializer):
    message = drf_serializers.CharField()


def _payment_payload(request):
    """Pull amount/method from the body; unparsable or non-object bodies count as missing."""
    try:
        data = request.data
    except ParseError:
        return None, None
    if not hasattr(data, 'get'):
        data = {}
    return data.get('amount'), data.get('method')


def _error_response(exc):
    """Translate a billing service error into its HTTP response."""
    response = Response({'message': exc.message}, status=exc.status_code)
    if isinstance(exc, TransientStorageError):
        response['Retry-After'] = str(RETRY_AFTER_SECONDS)
    return response


@extend_schema(
    request=PaymentInputSerializer,
    responses={
        201: PaymentResultSerializer,
        400: MessageResponseSerializer,
        404: MessageResponseSerializer,
        503: MessageResponseSerializer,
    },
    description=(
        "Record a payment for a customer and allocate it across their "
        "billable repairs with a balance due, oldest first. Creates one "
        "payment per repair that receives a portion."
    ),
    tags=['billing'],
)
@api_view(['POST'])
@permission_classes([IsAuthenticated, CanTakePayment])
def customer_pay(request, customer_id):
    """
    Allocate a customer payment.

    POST /api/customers/{id}/pay/
    Body: {"amount": "600.00", "method": "CASH"}
    """
    amount, method = _payment_payload(request)

    try:
        result = apply_customer_payment(
            customer_id=customer_id,
            amount=amount,
            method=method,
            acting_user=request.user,
        )
    except BillingServiceError as e:
        logger.info("Customer %s payment rejected: %s", customer_id, e.message)
        return _error_response(e)
    except Exception:
        logger.exception("Customer pay error (customer %s)", customer_id)
        return Response(INTERNAL_ERROR, status=status.HTTP_500_INTERNAL_SERVER_ERROR)

    return Response(PaymentResultSerializer(result).data, status=status.HTTP_201_CREATED)


@extend_schema(
    request=PaymentInputSerializer,
    responses={
        201: PaymentResultSerializer,
        400: MessageResponseSerializer,
        404: MessageResponseSerializer,
        503: MessageResponseSerializer,
    },
    description="Record a payment against a single repair.",
    tags=['billing'],
)
@api_view(['POST'])
@permission_classes([IsAuthenticated, CanTakePayment])
def repair_pay(request, repair_id):
    """
    Pay one repair.

    POST /api/repairs/{id}/pay/
    Body: {"amount": "100.00", "method": "CARD"}
    """
    amount, method = _payment_payload(request)

    try:
        result = apply_repair_payment(
            repair_id=repair_id,
            amount=amount,
            method=method,
            acting_user=request.user,
        )
    except BillingServiceError as e:
        logger.info("Repair %s payment rejected: %s", repair_id, e.message)
        return _error_response(e)
    except Exception:
        logger.exception("Repair pay error (repair %s)", repair_id)
        return Response(INTERNAL_ERROR, status=status.HTTP_500_INTERNAL_SERVER_ERROR)

    return Response(PaymentResultSerializer(result).data, status=status.HTTP_201_CREATED)


@extend_schema(
    responses={200: CustomerBillingSerializer, 404: MessageResponseSerializer},
    description=(
        "Combined billing for a customer: repairs that are Repaired or "
        "Unrepairable, with charges, payments and dues."
    ),
    tags=['billing'],
)
@api_view(['GET'])
@permission_classes([IsAuthenticated, CanViewBilling])
def customer_billing(request, customer_id):
    """
    Get combined billing for a customer.

    GET /api/customers/{id}/billing/
    """
    try:
        ledger = get_customer_billing_summary(customer_id=customer_id)
    except BillingServiceError as e:
        return _error_response(e)

    return Response(CustomerBillingSerializer(ledger).data)
