from django.core.management.base import BaseCommand

from ledger.services.inventory import get_inventory_status


class Command(BaseCommand):
    help = "Print remaining producible bags and whether a restock is due"

    def add_arguments(self, parser):
        parser.add_argument('--threshold', type=int, default=None,
                            help='Restock threshold in bags (defaults to the configured one)')

    def handle(self, *args, **options):
        status = get_inventory_status(options['threshold'])
        for name, stock in (('Sachet rolls', status.sachet_rolls), ('Packing nylon', status.packing_nylon)):
            self.stdout.write(f"{name}: {stock.units} units, capacity {stock.capacity}, used {stock.used_bags}, "
                              f"remaining {stock.remaining_bags}")
        self.stdout.write(f"Bags sold: {status.total_bags_sold}; effective capacity {status.effective_capacity}")
        line = f"Remaining bags: {status.total_remaining_bags} (threshold {status.threshold})"
        if status.needs_restock:
            self.stdout.write(self.style.WARNING(line + ' - restock needed'))
        else:
            self.stdout.write(self.style.SUCCESS(line))
