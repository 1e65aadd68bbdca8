"""
Sales Application

Sales recorded by salesmen and approved or rejected by the owner.

FEATURES:
- Sale totals and commission fixed at creation time
- Status flow: pending -> completed, pending -> rejected
- Dashboard metrics (revenue, commission, counts, today's sales)
- Per-salesman summaries for the owner
- Optional stock adjustment in one transaction with the sale

USAGE:
    from sales.services import SaleService
    from sales.aggregation import compute_metrics

    service = SaleService()
    result = service.record_sale(salesman, product_id, 3, 'Anita')
    if result:
        service.approve_sale(result.value.id)

    metrics = compute_metrics(service.sales.all())
"""

__version__ = '1.0.0'
