from dataclasses import dataclass, replace
from decimal import Decimal
from typing import Optional

from storage.fields import (
    decimal_to_json, drop_none, new_id, now_iso, to_bool, to_decimal, to_int,
)


@dataclass
class Shop:
    id: str
    name: str
    address: str = ''
    contact_number: str = ''
    email: Optional[str] = None
    gstin: Optional[str] = None
    owner_id: Optional[str] = None
    is_active: bool = True
    created_at: str = ''
    updated_at: str = ''

    @classmethod
    def create(cls, name, address, contact_number, email=None, gstin=None, owner_id=None):
        now = now_iso()
        return cls(
            id=new_id('shop'),
            name=name,
            address=address,
            contact_number=contact_number,
            email=email or None,
            gstin=gstin or None,
            owner_id=owner_id,
            created_at=now,
            updated_at=now,
        )

    def changed(self, **changes):
        return replace(self, updated_at=now_iso(), **changes)

    def to_dict(self):
        return drop_none({
            'id': self.id,
            'name': self.name,
            'address': self.address,
            'contactNumber': self.contact_number,
            'email': self.email,
            'gstin': self.gstin,
            'ownerId': self.owner_id,
            'isActive': self.is_active,
            'createdAt': self.created_at,
            'updatedAt': self.updated_at,
        })

    @classmethod
    def from_dict(cls, data):
        return cls(
            id=str(data.get('id', '')),
            name=data.get('name', ''),
            address=data.get('address') or '',
            # older builds stored the number as "phone"
            contact_number=data.get('contactNumber') or data.get('phone') or '',
            email=data.get('email') or None,
            gstin=data.get('gstin') or None,
            owner_id=data.get('ownerId'),
            is_active=to_bool(data.get('isActive'), default=True),
            created_at=data.get('createdAt', ''),
            updated_at=data.get('updatedAt', ''),
        )


@dataclass
class Product:
    id: str
    shop_id: str
    name: str
    base_price: Decimal = Decimal('0')
    selling_price: Decimal = Decimal('0')
    quantity: int = 0
    category: Optional[str] = None
    description: Optional[str] = None
    unit: Optional[str] = None
    image_uri: Optional[str] = None
    created_at: str = ''
    updated_at: str = ''

    @classmethod
    def create(cls, shop_id, name, base_price, selling_price, quantity,
               category=None, description=None, unit=None, image_uri=None):
        now = now_iso()
        return cls(
            id=new_id('product'),
            shop_id=shop_id,
            name=name,
            base_price=to_decimal(base_price),
            selling_price=to_decimal(selling_price),
            quantity=to_int(quantity),
            category=category or None,
            description=description or None,
            unit=unit or None,
            image_uri=image_uri or None,
            created_at=now,
            updated_at=now,
        )

    def changed(self, **changes):
        return replace(self, updated_at=now_iso(), **changes)

    @property
    def profit_margin(self):
        return self.selling_price - self.base_price

    @property
    def stock_value(self):
        return self.base_price * self.quantity

    @property
    def in_stock(self):
        return self.quantity > 0

    def to_dict(self):
        return drop_none({
            'id': self.id,
            'shopId': self.shop_id,
            'name': self.name,
            'category': self.category,
            'description': self.description,
            'basePrice': decimal_to_json(self.base_price),
            'sellingPrice': decimal_to_json(self.selling_price),
            'quantity': self.quantity,
            'unit': self.unit,
            'imageUri': self.image_uri,
            'createdAt': self.created_at,
            'updatedAt': self.updated_at,
        })

    @classmethod
    def from_dict(cls, data):
        return cls(
            id=str(data.get('id', '')),
            shop_id=str(data.get('shopId', '')),
            name=data.get('name', ''),
            base_price=to_decimal(data.get('basePrice')),
            selling_price=to_decimal(data.get('sellingPrice')),
            quantity=to_int(data.get('quantity')),
            category=data.get('category') or None,
            description=data.get('description') or None,
            unit=data.get('unit') or None,
            image_uri=data.get('imageUri') or None,
            created_at=data.get('createdAt', ''),
            updated_at=data.get('updatedAt', ''),
        )
