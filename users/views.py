import logging

from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from rest_framework.views import APIView

from sales.aggregation import summarize_by_salesman
from storage.api import request_payload, result_response
from storage.results import OperationResult
from storage.store import Store

from .auth import SessionManager, generate_password, generate_username
from .authentication import IsSalesman
from .serializers import (
    LoginSerializer, OwnerProfileSerializer, SalesmanSerializer,
    SalesmanSummarySerializer, SessionSerializer,
)
from .services import OwnerService, SalesmanService

logger = logging.getLogger(__name__)


# ================================
# SALESMEN (owner side)
# ================================

class SalesmanViewSet(viewsets.ViewSet):
    """API endpoint for the salesmen of a shop"""

    def get_service(self):
        return SalesmanService(Store())

    def list(self, request):
        service = self.get_service()
        result = service.load()
        shop_id = request.query_params.get('shop')
        if result and shop_id:
            result = OperationResult.success(service.salesmen.for_shop(shop_id))
        return result_response(result, SalesmanSerializer, many=True)

    def create(self, request):
        data = request_payload(request)
        result = self.get_service().add_salesman(data.get('shopId'), data)
        return result_response(result, SalesmanSerializer, status_code=status.HTTP_201_CREATED)

    def retrieve(self, request, pk=None):
        service = self.get_service()
        result = service.load()
        if result:
            salesman = service.salesmen.get(pk)
            result = OperationResult.success(salesman) if salesman else OperationResult.not_found('Salesman not found')
        return result_response(result, SalesmanSerializer)

    def update(self, request, pk=None, partial=False):
        service = self.get_service()
        data = request_payload(request)
        if partial:
            loaded = service.load()
            existing = service.salesmen.get(pk) if loaded else None
            if existing is not None:
                data = {**existing.public_dict(), **data}
        return result_response(service.update_salesman(pk, data), SalesmanSerializer)

    def partial_update(self, request, pk=None):
        return self.update(request, pk=pk, partial=True)

    def destroy(self, request, pk=None):
        return result_response(self.get_service().delete_salesman(pk), SalesmanSerializer)

    @action(detail=False, methods=['get'])
    def summary(self, request):
        """Sales count, amount and commission per salesman (?shop=)"""
        service = self.get_service()
        for loaded in (service.load(), service.sales.load()):
            if not loaded:
                return result_response(loaded)

        shop_id = request.query_params.get('shop')
        sales = service.sales.for_shop(shop_id) if shop_id else service.sales.all()
        context = {'salesman_names': {s.id: s.name for s in service.salesmen.all()}}
        return result_response(
            OperationResult.success(summarize_by_salesman(sales)),
            SalesmanSummarySerializer,
            context=context,
            many=True,
        )

    @action(detail=False, methods=['post'], url_path='generate-credentials')
    def generate_credentials(self, request):
        """Suggest a username and password for the salesman form"""
        service = self.get_service()
        loaded = service.load()
        if not loaded:
            return result_response(loaded)

        name = request_payload(request).get('name') or ''
        username = generate_username(name, taken=service.salesmen.username_taken)
        if not username:
            return result_response(OperationResult.invalid('Name is required', field='name'))
        return Response({
            'success': True,
            'data': {'username': username, 'password': generate_password()},
        })


# ================================
# SALESMAN LOGIN
# ================================

class SalesmanLoginView(APIView):
    permission_classes = [AllowAny]
    authentication_classes = []

    def post(self, request):
        data = request_payload(request)
        manager = SessionManager(Store())
        result = manager.login(data.get('username'), data.get('password'))
        if not result:
            return result_response(result)

        salesman = manager.salesmen.get(result.value.salesman_id)
        payload = LoginSerializer(result.value).data
        payload['salesman'] = SalesmanSerializer(salesman).data
        return Response({'success': True, 'data': payload})


class SalesmanLogoutView(APIView):
    """Ends the calling salesman's session only"""

    permission_classes = [IsSalesman]

    def post(self, request):
        token = request.user.session.token
        return result_response(SessionManager(Store()).logout(token))


class SalesmanSessionView(APIView):
    permission_classes = [IsSalesman]

    def get(self, request):
        payload = SessionSerializer(request.user.session).data
        payload['salesman'] = SalesmanSerializer(request.user.salesman).data
        return Response({'success': True, 'data': payload})


# ================================
# OWNER PROFILE
# ================================

class OwnerProfileView(APIView):
    """
    GET: profile (null before registration)
    POST: register
    PUT/PATCH: update
    DELETE: log out, which removes the profile
    """

    permission_classes = [AllowAny]

    def get_service(self):
        return OwnerService(Store())

    def get(self, request):
        return result_response(self.get_service().profile(), OwnerProfileSerializer)

    def post(self, request):
        result = self.get_service().register(request_payload(request))
        return result_response(result, OwnerProfileSerializer, status_code=status.HTTP_201_CREATED)

    def put(self, request):
        result = self.get_service().update_profile(request_payload(request))
        return result_response(result, OwnerProfileSerializer)

    patch = put

    def delete(self, request):
        return result_response(self.get_service().logout())
