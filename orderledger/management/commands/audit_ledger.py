"""
Management command to audit the order ledger.

Usage:
    python manage.py audit_ledger
    python manage.py audit_ledger --order 42
"""

from django.core.management.base import BaseCommand, CommandError

from orderledger import orders


class Command(BaseCommand):
    """Audit ledger command."""

    help = 'Checks that stock, movements and orders agree'

    def add_arguments(self, parser):
        parser.add_argument(
            '--order',
            type=int,
            default=None,
            help='Audit a single order id instead of the whole ledger'
        )

    def handle(self, *args, **options):
        findings = orders.audit(options['order'])

        if not findings:
            self.stdout.write(self.style.SUCCESS('Ledger is consistent'))
            return

        for order, code, data in findings:
            label = f'order #{order.pk}' if order else 'stock'
            self.stdout.write(f'{code} {label}: {data}')

        raise CommandError(f'{len(findings)} finding(s)')
