from django.core.management.base import BaseCommand, CommandError
from django.utils.dateparse import parse_date

from sales.aggregation import compute_metrics, summarize_by_salesman
from sales.repositories import SaleRepository
from storage.conf import vendorpro_setting
from storage.store import Store
from users.repositories import SalesmanRepository


class Command(BaseCommand):
    help = 'Print revenue, commission and sale counts from the local store'

    def add_arguments(self, parser):
        parser.add_argument('--shop', help='Only sales of this shop id')
        parser.add_argument('--date', help="Day used for today's sales (YYYY-MM-DD, default today)")
        parser.add_argument(
            '--by-salesman',
            action='store_true',
            help='Also print one line per salesman',
        )

    def handle(self, *args, **options):
        reference_date = None
        if options.get('date'):
            try:
                reference_date = parse_date(options['date'])
            except ValueError:
                reference_date = None
            if reference_date is None:
                raise CommandError(f"Invalid date: {options['date']} (expected YYYY-MM-DD)")

        store = Store()
        sales = SaleRepository(store)
        loaded = sales.load()
        if not loaded:
            raise CommandError(loaded.error)

        shop_id = options.get('shop')
        rows = sales.for_shop(shop_id) if shop_id else sales.all()
        metrics = compute_metrics(rows, reference_date=reference_date)
        currency = vendorpro_setting('CURRENCY_SYMBOL')

        self.stdout.write(self.style.WARNING(f"Sales report{f' for {shop_id}' if shop_id else ''}"))
        self.stdout.write(f"Total revenue:      {currency}{metrics.total_revenue:.2f}")
        self.stdout.write(f"Total commission:   {currency}{metrics.total_commission:.2f}")
        self.stdout.write(f"Pending commission: {currency}{metrics.pending_commission:.2f}")
        self.stdout.write(f"Today's sales:      {currency}{metrics.todays_sales_amount:.2f}")
        self.stdout.write(
            f"Sales: {metrics.total_count} "
            f"(completed {metrics.completed_count}, pending {metrics.pending_count}, "
            f"rejected {metrics.rejected_count})"
        )

        if options.get('by_salesman'):
            salesmen = SalesmanRepository(store)
            names = {s.id: s.name for s in salesmen.all()} if salesmen.load() else {}
            for summary in summarize_by_salesman(rows):
                self.stdout.write(
                    f"  {names.get(summary.salesman_id, 'Unassigned')}: "
                    f"{summary.sale_count} sale(s), {currency}{summary.total_amount:.2f}, "
                    f"earned {currency}{summary.earned_commission:.2f}"
                )

        self.stdout.write(self.style.SUCCESS('✅ Report complete'))
