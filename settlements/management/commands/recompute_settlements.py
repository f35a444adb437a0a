from django.core.management.base import BaseCommand
from django.db.models import Sum

from sachetworks.money import to_money
from settlements.models import Settlement
from settlements.services import recompute_settlement


class Command(BaseCommand):
    help = "Re-derive every settlement's settled amount, balance and status from its payments"

    def add_arguments(self, parser):
        parser.add_argument('--dry-run', action='store_true', help='Only report settlements that have drifted')

    def handle(self, *args, **options):
        drifted = 0
        for settlement in Settlement.objects.annotate(paid=Sum('payments__amount')).order_by('pk'):
            settled = to_money(settlement.paid)
            remaining = to_money(settlement.expected_amount) - settled
            if (settlement.settled_amount, settlement.remaining_balance, settlement.is_settled) == \
                    (settled, remaining, remaining <= 0):
                continue
            drifted += 1
            self.stdout.write(f"Settlement #{settlement.pk}: stored {settlement.settled_amount}/"
                              f"{settlement.remaining_balance}, payments say {settled}/{remaining}")
            if not options['dry_run']:
                recompute_settlement(settlement)
        verb = 'would be fixed' if options['dry_run'] else 'fixed'
        self.stdout.write(self.style.SUCCESS(f"{drifted} settlement(s) {verb}"))
