from datetime import date

from django.core.management.base import BaseCommand, CommandError

from ledger.services.reports import PERIODS, default_report_date, generate_report, period_bounds


class Command(BaseCommand):
    help = "Print the financial report for a period (defaults to the latest day with activity)"

    def add_arguments(self, parser):
        parser.add_argument('--period', choices=PERIODS, default='daily')
        parser.add_argument('--start', help='YYYY-MM-DD, first day (inclusive)', default=None)
        parser.add_argument('--end', help='YYYY-MM-DD, last day (inclusive)', default=None)

    def handle(self, *args, **options):
        period = options['period']
        try:
            start = date.fromisoformat(options['start']) if options['start'] else None
            end = date.fromisoformat(options['end']) if options['end'] else None
        except ValueError as exc:
            raise CommandError(f'Bad date: {exc}')
        if start is None:
            start, default_end = period_bounds(period, default_report_date())
            end = end or default_end
        elif end is None:
            _, end = period_bounds(period, start)
        if end < start:
            raise CommandError('--end must not be before --start')

        report = generate_report(period, start, end)
        self.stdout.write(f"{period} report {report.start_date} .. {report.end_date}")
        for label, value in (
            ('Revenue', report.total_revenue),
            ('Fuel', report.fuel_costs),
            ('Driver payments', report.driver_payments),
            ('Other expenses', report.other_expenses),
            ('Uncategorized', report.uncategorized_expenses),
            ('Materials purchased', report.material_costs),
            ('Materials allocated', report.material_cost_allocated),
            ('Salaries', report.total_salaries),
            ('Total expenses', report.total_expenses),
            ('Profit', report.profit),
        ):
            self.stdout.write(f"  {label:<20} {value:>14}")
        self.stdout.write(f"  {'Margin %':<20} {report.profit_margin:>14}")
        if report.partial:
            self.stdout.write(self.style.WARNING('Report is partial: data could not be read, see logs'))
        else:
            self.stdout.write(self.style.SUCCESS(f"Built report over {report.total_bags_sold} bags sold"))
