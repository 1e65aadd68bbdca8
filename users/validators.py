import re

from inventory.validators import parse_decimal
from storage.fields import to_bool
from storage.results import OperationResult

MOBILE_RE = re.compile(r'^\d{10}$')


def _text(data, name):
    value = data.get(name)
    return '' if value is None else str(value).strip()


def validate_salesman(data, salesmen, existing=None):
    """
    Validate the salesman form against the loaded ``salesmen`` repository.

    ``existing`` is the record being edited, or None for a new salesman.
    Uniqueness is only checked against what is currently loaded.
    """
    exclude_id = existing.id if existing is not None else None

    name = _text(data, 'name')
    if not name:
        return OperationResult.invalid('Name is required', field='name')

    mobile = _text(data, 'mobile')
    if not MOBILE_RE.match(mobile):
        return OperationResult.invalid('Mobile number must be 10 digits', field='mobile')

    username = _text(data, 'username')
    if not username:
        return OperationResult.invalid('Username is required', field='username')

    password = data.get('password') or ''
    if existing is None and not password.strip():
        return OperationResult.invalid('Password is required for new salesmen', field='password')

    raw_rate = data.get('commissionRate')
    if raw_rate is None or raw_rate == '':
        commission_rate = existing.commission_rate if existing is not None else parse_decimal(0)
    else:
        commission_rate = parse_decimal(raw_rate)
    if commission_rate is None or commission_rate < 0 or commission_rate > 100:
        return OperationResult.invalid('Commission rate must be between 0 and 100%', field='commissionRate')

    default_active = existing.is_active if existing is not None else True
    is_active = to_bool(data.get('isActive'), default=default_active)

    if is_active and salesmen.username_taken(username, exclude_id=exclude_id):
        return OperationResult.conflict('Username already exists. Please choose another.', field='username')

    if salesmen.mobile_taken(mobile, exclude_id=exclude_id):
        return OperationResult.conflict('Mobile number already registered with another salesman', field='mobile')

    return OperationResult.success({
        'name': name,
        'mobile': mobile,
        'username': username,
        'password': password,
        'commission_rate': commission_rate,
        'is_active': is_active,
    })


def validate_owner_profile(data):
    name = _text(data, 'name')
    if not name:
        return OperationResult.invalid('Name is required', field='name')

    mobile = _text(data, 'mobile')
    if not MOBILE_RE.match(mobile):
        return OperationResult.invalid('Please enter a valid 10-digit mobile number', field='mobile')

    return OperationResult.success({
        'name': name,
        'mobile': mobile,
        'email': _text(data, 'email') or None,
        'business_name': _text(data, 'businessName') or None,
    })
