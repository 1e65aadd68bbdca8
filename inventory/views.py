import logging

from rest_framework import status, viewsets
from rest_framework.decorators import action

from storage.api import request_payload, result_response
from storage.results import OperationResult
from storage.store import Store
from users.services import OwnerService

from .serializers import ProductSerializer, ShopSerializer
from .services import ProductService, ShopService
from .validators import parse_int

logger = logging.getLogger(__name__)


# ====================================
# REST API VIEWSETS
# ====================================

class ShopViewSet(viewsets.ViewSet):
    """API endpoint for shops and the current shop"""

    def get_service(self):
        return ShopService(Store())

    def list(self, request):
        service = self.get_service()
        result = service.load()
        if result and request.query_params.get('active') in ('1', 'true'):
            result = OperationResult.success(service.shops.active())
        return result_response(result, ShopSerializer, many=True)

    def create(self, request):
        store = Store()
        profile = OwnerService(store).profile()
        owner_id = profile.value.id if profile and profile.value is not None else None

        result = ShopService(store).add_shop(request_payload(request), owner_id=owner_id)
        return result_response(result, ShopSerializer, status_code=status.HTTP_201_CREATED)

    def retrieve(self, request, pk=None):
        service = self.get_service()
        result = service.load()
        if result:
            shop = service.shops.get(pk)
            result = OperationResult.success(shop) if shop else OperationResult.not_found('Shop not found')
        return result_response(result, ShopSerializer)

    def update(self, request, pk=None, partial=False):
        service = self.get_service()
        data = request_payload(request)
        if partial:
            loaded = service.load()
            existing = service.shops.get(pk) if loaded else None
            if existing is not None:
                data = {**existing.to_dict(), **data}
        return result_response(service.update_shop(pk, data), ShopSerializer)

    def partial_update(self, request, pk=None):
        return self.update(request, pk=pk, partial=True)

    def destroy(self, request, pk=None):
        result = self.get_service().delete_shop(pk)
        return result_response(result, ShopSerializer)

    @action(detail=False, methods=['get', 'post', 'put'])
    def current(self, request):
        """
        GET: the last selected shop (null when none).
        POST/PUT {"shopId": "..."}: select a shop; a null shopId clears it.
        """
        service = self.get_service()
        if request.method == 'GET':
            return result_response(service.current_shop(), ShopSerializer)

        shop_id = request_payload(request).get('shopId') or None
        return result_response(service.set_current_shop(shop_id), ShopSerializer)


class ProductViewSet(viewsets.ViewSet):
    """API endpoint for products"""

    def get_service(self):
        return ProductService(Store())

    def get_serializer_context(self, store):
        shops = ShopService(store).shops
        if not shops.load():
            return {}
        return {'shop_names': {shop.id: shop.name for shop in shops.all()}}

    def list(self, request):
        """Filter products by shop (?shop=) or search by name/category (?search=)"""
        service = self.get_service()
        result = service.load()
        if result:
            products = service.products.search(
                request.query_params.get('search'),
                shop_id=request.query_params.get('shop') or None,
            )
            result = OperationResult.success(products)
        context = self.get_serializer_context(service.store)
        return result_response(result, ProductSerializer, context=context, many=True)

    def create(self, request):
        data = request_payload(request)
        result = self.get_service().add_product(data.get('shopId'), data)
        return result_response(result, ProductSerializer, status_code=status.HTTP_201_CREATED)

    def retrieve(self, request, pk=None):
        service = self.get_service()
        result = service.load()
        if result:
            product = service.products.get(pk)
            result = OperationResult.success(product) if product else OperationResult.not_found('Product not found')
        context = self.get_serializer_context(service.store)
        return result_response(result, ProductSerializer, context=context)

    def update(self, request, pk=None, partial=False):
        service = self.get_service()
        data = request_payload(request)
        if partial:
            loaded = service.load()
            existing = service.products.get(pk) if loaded else None
            if existing is not None:
                data = {**existing.to_dict(), **data}
        return result_response(service.update_product(pk, data), ProductSerializer)

    def partial_update(self, request, pk=None):
        return self.update(request, pk=pk, partial=True)

    def destroy(self, request, pk=None):
        return result_response(self.get_service().delete_product(pk), ProductSerializer)

    @action(detail=False, methods=['get'], url_path='low-stock')
    def low_stock(self, request):
        """Products at or below the threshold, lowest quantity first"""
        service = self.get_service()
        result = service.load()
        if result:
            threshold = parse_int(request.query_params.get('threshold'))
            products = service.products.low_stock(
                shop_id=request.query_params.get('shop') or None,
                threshold=threshold,
            )
            result = OperationResult.success(products)
        return result_response(result, ProductSerializer, many=True)

    @action(detail=True, methods=['post'])
    def restock(self, request, pk=None):
        quantity = request_payload(request).get('quantity')
        result = self.get_service().restock(pk, quantity)
        if result:
            logger.info(f"[API RESTOCK] {pk} | Added: {quantity}")
        return result_response(result, ProductSerializer)
