from storage import keys
from storage.repository import JsonRepository

from .entities import Sale


class SaleRepository(JsonRepository):
    key = keys.SALES
    entity_class = Sale
    label = 'sale'

    def for_shop(self, shop_id):
        return [sale for sale in self._items if sale.shop_id == shop_id]

    def for_salesman(self, salesman_id):
        return [sale for sale in self._items if sale.salesman_id == salesman_id]
