from dataclasses import dataclass, replace
from datetime import datetime
from decimal import Decimal
from typing import Optional

from django.utils import timezone
from django.utils.dateparse import parse_datetime

from storage.fields import (
    decimal_to_json, drop_none, new_id, now_iso, to_bool, to_decimal,
)


@dataclass
class Salesman:
    id: str
    shop_id: str
    name: str
    mobile: str
    username: str = ''
    # Django password hash; older records may still hold plaintext
    password: str = ''
    commission_rate: Decimal = Decimal('0')
    is_active: bool = True
    created_at: str = ''
    updated_at: str = ''

    @classmethod
    def create(cls, shop_id, name, mobile, username, password, commission_rate, is_active=True):
        now = now_iso()
        return cls(
            id=new_id('salesman'),
            shop_id=shop_id,
            name=name,
            mobile=mobile,
            username=username,
            password=password,
            commission_rate=to_decimal(commission_rate),
            is_active=is_active,
            created_at=now,
            updated_at=now,
        )

    def changed(self, **changes):
        return replace(self, updated_at=now_iso(), **changes)

    def public_dict(self):
        return drop_none({
            'id': self.id,
            'shopId': self.shop_id,
            'name': self.name,
            'mobile': self.mobile,
            'username': self.username,
            'commissionRate': decimal_to_json(self.commission_rate),
            'isActive': self.is_active,
            'createdAt': self.created_at,
            'updatedAt': self.updated_at,
        })

    def to_dict(self):
        data = self.public_dict()
        data['password'] = self.password
        return data

    @classmethod
    def from_dict(cls, data):
        return cls(
            id=str(data.get('id', '')),
            shop_id=str(data.get('shopId', '')),
            name=data.get('name', ''),
            mobile=str(data.get('mobile') or ''),
            username=data.get('username') or '',
            password=data.get('password') or '',
            commission_rate=to_decimal(data.get('commissionRate')),
            is_active=to_bool(data.get('isActive'), default=True),
            created_at=data.get('createdAt', ''),
            updated_at=data.get('updatedAt', ''),
        )


@dataclass
class OwnerProfile:
    name: str
    mobile: str
    email: Optional[str] = None
    business_name: Optional[str] = None

    @property
    def id(self):
        # shops record the owner by mobile number
        return self.mobile

    def to_dict(self):
        return drop_none({
            'name': self.name,
            'mobile': self.mobile,
            'email': self.email,
            'businessName': self.business_name,
        })

    @classmethod
    def from_dict(cls, data):
        return cls(
            name=data.get('name', ''),
            mobile=str(data.get('mobile') or ''),
            email=data.get('email') or None,
            business_name=data.get('businessName') or None,
        )


@dataclass(frozen=True)
class SalesmanSession:
    """
    An authenticated salesman on this device.

    Built at login, persisted under ``currentSalesman`` and dropped at
    logout. It is only honoured until ``expires_at``.
    """

    token: str
    salesman_id: str
    shop_id: str
    issued_at: datetime
    expires_at: datetime

    def is_valid(self, now=None):
        now = now or timezone.now()
        return self.issued_at <= now < self.expires_at

    def to_dict(self):
        return {
            'token': self.token,
            'salesmanId': self.salesman_id,
            'shopId': self.shop_id,
            'issuedAt': self.issued_at.isoformat(),
            'expiresAt': self.expires_at.isoformat(),
        }

    @classmethod
    def from_dict(cls, data):
        issued_at = parse_datetime(data.get('issuedAt') or '')
        expires_at = parse_datetime(data.get('expiresAt') or '')
        if not data.get('token') or issued_at is None or expires_at is None:
            return None
        return cls(
            token=data['token'],
            salesman_id=str(data.get('salesmanId', '')),
            shop_id=str(data.get('shopId', '')),
            issued_at=issued_at,
            expires_at=expires_at,
        )
