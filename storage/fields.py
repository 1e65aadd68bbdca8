"""Helpers shared by the entity dataclasses for their JSON shapes."""

import uuid
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP

from django.utils import timezone

TWO_PLACES = Decimal('0.01')


def new_id(prefix):
    return f"{prefix}-{uuid.uuid4().hex}"


def now_iso():
    return timezone.now().isoformat()


def to_decimal(value, default='0'):
    if value is None or value == '':
        return Decimal(default)
    try:
        return Decimal(str(value))
    except (InvalidOperation, ValueError, TypeError):
        return Decimal(default)


def round2(value):
    return to_decimal(value).quantize(TWO_PLACES, rounding=ROUND_HALF_UP)


def decimal_to_json(value):
    # JSON numbers, as the mobile app wrote them
    value = to_decimal(value)
    if value == value.to_integral_value():
        return int(value)
    return float(value)


def to_int(value, default=0):
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


def to_bool(value, default=True):
    if value is None:
        return default
    if isinstance(value, str):
        return value.strip().lower() in ('true', '1', 'yes')
    return bool(value)


def drop_none(data):
    return {k: v for k, v in data.items() if v is not None}
