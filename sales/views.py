import logging

from django.utils.dateparse import parse_date
from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import AllowAny

from storage.api import request_payload, result_response
from storage.results import OperationResult
from storage.store import Store
from users.authentication import IsSalesman
from users.repositories import SalesmanRepository

from .aggregation import compute_metrics, filter_sales, sort_sales
from .serializers import SaleMetricsSerializer, SaleSerializer
from .services import SaleService

logger = logging.getLogger(__name__)

ORDERING = {
    'date': ('date', False),
    '-date': ('date', True),
    'amount': ('amount', False),
    '-amount': ('amount', True),
}


class SaleViewSet(viewsets.ViewSet):
    """
    API endpoint for sales.

    Recording a sale needs a salesman session; the owner actions
    (approve, reject, delete) do not.
    """

    def get_permissions(self):
        if self.action == 'create':
            return [IsSalesman()]
        return [AllowAny()]

    def get_service(self):
        return SaleService(Store())

    def get_serializer_context(self, service):
        context = {}
        if service.products.ensure_loaded():
            context['product_names'] = {p.id: p.name for p in service.products.all()}
        salesmen = SalesmanRepository(service.store)
        if salesmen.load():
            context['salesman_names'] = {s.id: s.name for s in salesmen.all()}
        return context

    def _scoped_sales(self, service, params):
        sales = service.sales.all()
        shop_id = params.get('shop')
        if shop_id:
            sales = [sale for sale in sales if sale.shop_id == shop_id]
        salesman_id = params.get('salesman')
        if salesman_id:
            sales = [sale for sale in sales if sale.salesman_id == salesman_id]
        return sales

    def list(self, request):
        """
        Filters: ?shop=, ?salesman=, ?status=, ?search= (customer or product
        name), ?ordering= (date, -date, amount, -amount; newest first by default)
        """
        service = self.get_service()
        result = service.load()
        if not result:
            return result_response(result)

        params = request.query_params
        context = self.get_serializer_context(service)
        product_names = context.get('product_names', {})

        sales = filter_sales(
            self._scoped_sales(service, params),
            status=params.get('status'),
            search=params.get('search'),
            resolve_product=product_names.get,
        )
        field, descending = ORDERING.get(params.get('ordering') or '-date', ('date', True))
        sales = sort_sales(sales, field=field, descending=descending)
        return result_response(OperationResult.success(sales), SaleSerializer, context=context, many=True)

    def create(self, request):
        data = request_payload(request)
        salesman = request.user.salesman
        service = self.get_service()
        result = service.record_sale(
            salesman,
            data.get('productId'),
            data.get('quantity'),
            data.get('customerName'),
        )
        context = self.get_serializer_context(service) if result else None
        return result_response(result, SaleSerializer, context=context, status_code=status.HTTP_201_CREATED)

    def retrieve(self, request, pk=None):
        service = self.get_service()
        result = service.load()
        if result:
            sale = service.sales.get(pk)
            result = OperationResult.success(sale) if sale else OperationResult.not_found('Sale not found')
        context = self.get_serializer_context(service) if result else None
        return result_response(result, SaleSerializer, context=context)

    def destroy(self, request, pk=None):
        return result_response(self.get_service().delete_sale(pk), SaleSerializer)

    @action(detail=True, methods=['post'])
    def approve(self, request, pk=None):
        return result_response(self.get_service().approve_sale(pk), SaleSerializer)

    @action(detail=True, methods=['post'])
    def reject(self, request, pk=None):
        reason = request_payload(request).get('reason')
        return result_response(self.get_service().reject_sale(pk, reason), SaleSerializer)

    @action(detail=False, methods=['get'])
    def metrics(self, request):
        """Dashboard figures (?shop=, ?salesman=, ?date=YYYY-MM-DD)"""
        service = self.get_service()
        result = service.load()
        if not result:
            return result_response(result)

        raw_date = request.query_params.get('date')
        try:
            reference_date = parse_date(raw_date) if raw_date else None
        except ValueError:
            reference_date = None
        if raw_date and reference_date is None:
            return result_response(OperationResult.invalid('Date must be YYYY-MM-DD', field='date'))

        metrics = compute_metrics(
            self._scoped_sales(service, request.query_params),
            reference_date=reference_date,
        )
        return result_response(OperationResult.success(metrics), SaleMetricsSerializer)
