"""
Management command to audit stored billing data against ledger invariants.

Reports repairs where payments exceed charges, settlement shares do not add
up, or money was recorded on a repair that is not billable. Makes no changes.

Usage:
    python manage.py check_billing_integrity
    python manage.py check_billing_integrity --customer <uuid>
"""

import uuid
from decimal import Decimal

from django.core.management.base import BaseCommand, CommandError

from apps.repairs.models import Repair
from apps.billing.services.ledger import compute_bill_ledger

ZERO = Decimal('0.00')


def find_repair_faults(repair):
    """Return human-readable invariant violations for one repair."""
    bill = compute_bill_ledger(repair)
    faults = []

    if bill.is_overpaid:
        faults.append(f'paid {bill.paid} exceeds total {bill.total}')

    if repair.is_locked:
        share_sum = repair.staff_share_amount + repair.shop_share_amount
        if share_sum != repair.total_charges:
            faults.append(
                f'shares {repair.staff_share_amount} + {repair.shop_share_amount} '
                f'!= total {repair.total_charges}'
            )
    else:
        if repair.staff_share_amount != ZERO or repair.shop_share_amount != ZERO:
            faults.append('unsettled repair carries commission shares')
        if bill.total > ZERO and bill.paid >= bill.total:
            faults.append('fully paid but not settled')

    if bill.paid > ZERO and not repair.is_billable:
        faults.append(f'payments recorded on {repair.status} repair')

    return faults


class Command(BaseCommand):
    help = 'Check repairs and payments for billing invariant violations'

    def add_arguments(self, parser):
        parser.add_argument(
            '--customer',
            help='Only check repairs of this customer (UUID)',
        )

    def handle(self, *args, **options):
        repairs = Repair.objects.select_related('customer').prefetch_related('payments')
        if options['customer']:
            try:
                customer_id = uuid.UUID(options['customer'])
            except ValueError:
                raise CommandError(f"Invalid customer id: {options['customer']}")
            repairs = repairs.filter(customer_id=customer_id)

        checked = 0
        fault_count = 0

        for repair in repairs.order_by('created_at', 'id'):
            checked += 1
            for fault in find_repair_faults(repair):
                fault_count += 1
                self.stdout.write(
                    self.style.ERROR(f'  - Repair {repair.id} ({repair.customer.name}): {fault}')
                )

        if fault_count:
            raise CommandError(
                f'{fault_count} billing integrity fault(s) found in {checked} repair(s)'
            )

        self.stdout.write(
            self.style.SUCCESS(f'Checked {checked} repair(s): no billing faults found.')
        )
