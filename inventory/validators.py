"""
Form validation for shops and products.

Each validator checks the submitted fields in order and reports the first
problem only, the way the shop forms do. On success the result value is a
dict of cleaned fields.
"""

from decimal import Decimal, InvalidOperation

from storage.results import OperationResult


def _text(data, name):
    value = data.get(name)
    if value is None:
        return ''
    return str(value).strip()


def _missing(value):
    return value is None or (isinstance(value, str) and not value.strip())


def parse_decimal(value):
    try:
        parsed = Decimal(str(value).strip())
    except (InvalidOperation, ValueError, TypeError):
        return None
    if not parsed.is_finite():
        return None
    return parsed


def parse_int(value):
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    try:
        parsed = Decimal(str(value).strip())
    except (InvalidOperation, ValueError, TypeError):
        return None
    if not parsed.is_finite() or parsed != parsed.to_integral_value():
        return None
    return int(parsed)


def validate_shop(data):
    name = _text(data, 'name')
    if not name:
        return OperationResult.invalid('Shop name is required', field='name')

    address = _text(data, 'address')
    if not address:
        return OperationResult.invalid('Shop address is required', field='address')

    contact_number = _text(data, 'contactNumber')
    if not contact_number:
        return OperationResult.invalid('Contact number is required', field='contactNumber')

    return OperationResult.success({
        'name': name,
        'address': address,
        'contact_number': contact_number,
        'email': _text(data, 'email') or None,
        'gstin': _text(data, 'gstin').upper() or None,
    })


PRODUCT_REQUIRED = (
    ('name', 'Name'),
    ('basePrice', 'Base price'),
    ('sellingPrice', 'Selling price'),
    ('quantity', 'Quantity'),
)


def validate_product(data):
    for field, label in PRODUCT_REQUIRED:
        if _missing(data.get(field)):
            return OperationResult.invalid(f'{label} is required', field=field)

    base_price = parse_decimal(data.get('basePrice'))
    if base_price is None or base_price < 0:
        return OperationResult.invalid('Base price must be a valid number', field='basePrice')

    selling_price = parse_decimal(data.get('sellingPrice'))
    if selling_price is None or selling_price < 0:
        return OperationResult.invalid('Selling price must be a valid number', field='sellingPrice')

    quantity = parse_int(data.get('quantity'))
    if quantity is None or quantity < 0:
        return OperationResult.invalid('Quantity must be a valid number', field='quantity')

    return OperationResult.success({
        'name': _text(data, 'name'),
        'base_price': base_price,
        'selling_price': selling_price,
        'quantity': quantity,
        'category': _text(data, 'category') or None,
        'description': _text(data, 'description') or None,
        'unit': _text(data, 'unit') or None,
        'image_uri': _text(data, 'imageUri') or None,
    })
