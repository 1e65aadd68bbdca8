"""
Inventory Application

Shops and the products each shop sells.

FEATURES:
- Shops with address, contact number, optional email and GSTIN
- Current shop selection (the last shop the owner opened)
- Products with base price, selling price and stock quantity
- Low stock listing below VENDORPRO['LOW_STOCK_THRESHOLD']
- REST API endpoints for shops and products

BUSINESS LOGIC:
  - Deleting a shop never removes its products, sales or salesmen
  - Prices must be numbers >= 0, quantity an integer >= 0
  - Stock only changes on sale when VENDORPRO['ADJUST_STOCK_ON_SALE'] is on

USAGE:
    from inventory.services import ShopService, ProductService

    shop = ShopService().add_shop({
        'name': 'Main Street',
        'address': '12 Main Street',
        'contactNumber': '9876543210',
    }).value

    ProductService().add_product(shop.id, {
        'name': 'Rice 5kg',
        'basePrice': '250',
        'sellingPrice': '300',
        'quantity': 20,
    })
"""

__version__ = '1.0.0'
