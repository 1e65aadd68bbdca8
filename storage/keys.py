# Store keys. Values are JSON strings.

SHOPS = 'shops'
PRODUCTS = 'products'
SALES = 'sales'
SALESMEN = 'salesmen'

CURRENT_SHOP = 'currentShop'
OWNER_PROFILE = 'user'
CURRENT_SALESMAN = 'currentSalesman'
# live salesman sessions keyed by token
SALESMAN_SESSIONS = 'salesmanSessions'

# Written by older app builds; only ever removed now
LEGACY_SALESMAN_AUTHENTICATED = 'salesmanAuthenticated'

ENTITY_KEYS = (SHOPS, PRODUCTS, SALES, SALESMEN)
ALL_KEYS = ENTITY_KEYS + (
    CURRENT_SHOP, OWNER_PROFILE, CURRENT_SALESMAN, SALESMAN_SESSIONS, LEGACY_SALESMAN_AUTHENTICATED,
)
