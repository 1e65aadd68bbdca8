"""
Dashboard figures over a list of sales.

Amounts are read from the sales themselves, so a sale whose product or
salesman has since been deleted still counts.
"""

from dataclasses import dataclass, field
from decimal import Decimal

from django.utils import timezone

from .entities import SaleStatus

ZERO = Decimal('0')


@dataclass
class SaleMetrics:
    total_revenue: Decimal = ZERO
    total_commission: Decimal = ZERO
    pending_commission: Decimal = ZERO
    todays_sales_amount: Decimal = ZERO
    pending_count: int = 0
    completed_count: int = 0
    rejected_count: int = 0

    @property
    def total_count(self):
        return self.pending_count + self.completed_count + self.rejected_count


@dataclass
class SalesmanSummary:
    salesman_id: str
    sale_count: int = 0
    completed_count: int = 0
    pending_count: int = 0
    total_amount: Decimal = ZERO
    earned_commission: Decimal = ZERO
    pending_commission: Decimal = ZERO
    sale_ids: list = field(default_factory=list)


def _day(reference_date):
    if reference_date is None:
        return timezone.now().date().isoformat()
    if isinstance(reference_date, str):
        return reference_date[:10]
    return reference_date.isoformat()[:10]


def compute_metrics(sales, reference_date=None, shop_id=None, salesman_id=None):
    """
    Revenue, commission and counts over ``sales``.

    Only completed sales count towards revenue and earned commission.
    ``todays_sales_amount`` takes every sale that is not rejected whose
    ``createdAt`` day equals ``reference_date`` (today in UTC by default).
    """
    today = _day(reference_date)
    metrics = SaleMetrics()

    for sale in sales:
        if shop_id is not None and sale.shop_id != shop_id:
            continue
        if salesman_id is not None and sale.salesman_id != salesman_id:
            continue

        if sale.status == SaleStatus.COMPLETED:
            metrics.completed_count += 1
            metrics.total_revenue += sale.total_amount
            metrics.total_commission += sale.commission
        elif sale.status == SaleStatus.REJECTED:
            metrics.rejected_count += 1
        else:
            metrics.pending_count += 1
            metrics.pending_commission += sale.commission

        if sale.status != SaleStatus.REJECTED and sale.created_date == today:
            metrics.todays_sales_amount += sale.total_amount

    return metrics


def summarize_by_salesman(sales):
    summaries = {}
    for sale in sales:
        summary = summaries.get(sale.salesman_id)
        if summary is None:
            summary = summaries[sale.salesman_id] = SalesmanSummary(salesman_id=sale.salesman_id)

        summary.sale_count += 1
        summary.sale_ids.append(sale.id)
        summary.total_amount += sale.total_amount
        if sale.status == SaleStatus.COMPLETED:
            summary.completed_count += 1
            summary.earned_commission += sale.commission
        elif sale.status == SaleStatus.PENDING:
            summary.pending_count += 1
            summary.pending_commission += sale.commission
    return list(summaries.values())


def filter_sales(sales, status=None, search=None, resolve_product=None):
    """
    Status filter plus a case-insensitive search on the customer name and,
    when ``resolve_product`` maps a product id to a name, the product name.
    """
    result = list(sales)
    if status and status != 'all':
        result = [sale for sale in result if sale.status == status]

    query = (search or '').strip().lower()
    if query:
        def matches(sale):
            if query in (sale.customer_name or '').lower():
                return True
            if resolve_product is not None:
                name = resolve_product(sale.product_id) or ''
                return query in name.lower()
            return False
        result = [sale for sale in result if matches(sale)]
    return result


def sort_sales(sales, field='date', descending=True):
    if field == 'amount':
        key = lambda sale: sale.total_amount
    else:
        key = lambda sale: sale.created_at or ''
    return sorted(sales, key=key, reverse=descending)
