"""
Local Store Application

Durable key-value storage for the VendorPro shop data.

FEATURES:
- One row per key, each value a JSON-encoded string
- get / set / remove per key, no cross-key transaction unless asked for
- Explicit atomic boundary (Store.atomic) for multi-key updates
- JSON array repositories with an in-memory copy per entity
- OperationResult values for expected failures (validation, not found, store)

KEYS:
- shops, products, sales, salesmen: JSON arrays of entities
- currentShop: last selected shop
- user: owner profile {name, mobile}
- currentSalesman: active salesman session

USAGE:
    from storage.store import Store
    from storage.keys import SALES

    store = Store()
    store.set(SALES, "[]")
    raw = store.get(SALES)   # '[]'
"""

__version__ = '1.0.0'
