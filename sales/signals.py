# sales/signals.py - SALE EVENTS AND AUDIT LOGGING

from django.dispatch import Signal, receiver
import logging

logger = logging.getLogger(__name__)

# Sent by SaleService after the sales array was written.
#   sale_recorded:       sender=SaleService, sale, salesman, product
#   sale_status_changed: sender=SaleService, sale, old_status
sale_recorded = Signal()
sale_status_changed = Signal()


# ============================================
# SALE CREATION
# ============================================

@receiver(sale_recorded)
def log_sale_recorded(sender, sale, salesman=None, product=None, **kwargs):
    """Audit line for every recorded sale."""
    logger.info(
        f"[SALE MONITOR] Sale {sale.id} | "
        f"Product: {product.name if product else sale.product_id} | "
        f"Quantity: {sale.quantity} | "
        f"Customer: {sale.customer_name} | "
        f"Salesman: {salesman.username if salesman else sale.salesman_id} | "
        f"Total: {sale.total_amount} | Commission: {sale.commission}"
    )


# ============================================
# STATUS CHANGES
# ============================================

@receiver(sale_status_changed)
def log_sale_status_changed(sender, sale, old_status, **kwargs):
    if sale.rejection_reason:
        logger.info(
            f"[SALE STATUS] Sale {sale.id} | {old_status} → {sale.status} | "
            f"Reason: {sale.rejection_reason}"
        )
    else:
        logger.info(f"[SALE STATUS] Sale {sale.id} | {old_status} → {sale.status}")
