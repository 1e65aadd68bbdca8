from dataclasses import dataclass, replace
from decimal import Decimal
from typing import Optional

from storage.fields import decimal_to_json, drop_none, new_id, now_iso, to_bool, to_decimal, to_int


class SaleStatus:
    PENDING = 'pending'
    COMPLETED = 'completed'
    REJECTED = 'rejected'

    CHOICES = (PENDING, COMPLETED, REJECTED)


@dataclass
class Sale:
    id: str
    shop_id: str
    product_id: str
    salesman_id: str
    customer_name: str
    quantity: int
    # both amounts are fixed when the sale is recorded
    total_amount: Decimal = Decimal('0')
    commission: Decimal = Decimal('0')
    status: str = SaleStatus.PENDING
    rejection_reason: Optional[str] = None
    # set when recording the sale took the quantity out of stock
    stock_adjusted: bool = False
    created_at: str = ''
    updated_at: str = ''

    @classmethod
    def create(cls, shop_id, product_id, salesman_id, customer_name, quantity,
               total_amount, commission, stock_adjusted=False):
        now = now_iso()
        return cls(
            id=new_id('sale'),
            shop_id=shop_id,
            product_id=product_id,
            salesman_id=salesman_id,
            customer_name=customer_name,
            quantity=quantity,
            total_amount=total_amount,
            commission=commission,
            status=SaleStatus.PENDING,
            stock_adjusted=stock_adjusted,
            created_at=now,
            updated_at=now,
        )

    def changed(self, **changes):
        return replace(self, updated_at=now_iso(), **changes)

    @property
    def is_pending(self):
        return self.status == SaleStatus.PENDING

    @property
    def created_date(self):
        """Calendar day of ``created_at`` as written, ``YYYY-MM-DD``."""
        return (self.created_at or '')[:10]

    def to_dict(self):
        return drop_none({
            'id': self.id,
            'shopId': self.shop_id,
            'productId': self.product_id,
            'salesmanId': self.salesman_id,
            'customerName': self.customer_name,
            'quantity': self.quantity,
            'totalAmount': decimal_to_json(self.total_amount),
            'commission': decimal_to_json(self.commission),
            'status': self.status,
            'rejectionReason': self.rejection_reason,
            'stockAdjusted': self.stock_adjusted or None,
            'createdAt': self.created_at,
            'updatedAt': self.updated_at,
        })

    @classmethod
    def from_dict(cls, data):
        status = data.get('status')
        return cls(
            id=str(data.get('id', '')),
            shop_id=str(data.get('shopId', '')),
            product_id=str(data.get('productId') or ''),
            salesman_id=str(data.get('salesmanId') or ''),
            customer_name=data.get('customerName', ''),
            quantity=to_int(data.get('quantity')),
            total_amount=to_decimal(data.get('totalAmount')),
            commission=to_decimal(data.get('commission')),
            status=status if status in SaleStatus.CHOICES else SaleStatus.PENDING,
            rejection_reason=data.get('rejectionReason') or None,
            stock_adjusted=to_bool(data.get('stockAdjusted'), default=False),
            created_at=data.get('createdAt', ''),
            updated_at=data.get('updatedAt', ''),
        )
