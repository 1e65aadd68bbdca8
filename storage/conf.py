from django.conf import settings

DEFAULTS = {
    'LOW_STOCK_THRESHOLD': 5,
    'ADJUST_STOCK_ON_SALE': False,
    'SALESMAN_SESSION_TTL': 86400,
    'CURRENCY_SYMBOL': '₹',
    'DEFAULT_REJECTION_REASON': 'No reason provided',
    'GENERATED_PASSWORD_LENGTH': 8,
}


def vendorpro_setting(name):
    """Read one entry of settings.VENDORPRO, falling back to DEFAULTS."""
    config = getattr(settings, 'VENDORPRO', {})
    if name in config:
        return config[name]
    return DEFAULTS[name]
