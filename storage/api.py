"""Turning OperationResult values into DRF responses."""

from collections.abc import Mapping

from rest_framework import exceptions, status
from rest_framework.response import Response
from rest_framework.views import exception_handler as drf_exception_handler

from .results import AUTH, CONFLICT, NOT_FOUND, STORE, VALIDATION, OperationResult

STATUS_BY_CODE = {
    VALIDATION: status.HTTP_400_BAD_REQUEST,
    NOT_FOUND: status.HTTP_404_NOT_FOUND,
    CONFLICT: status.HTTP_409_CONFLICT,
    AUTH: status.HTTP_401_UNAUTHORIZED,
    STORE: status.HTTP_503_SERVICE_UNAVAILABLE,
}

INVALID_BODY = 'Request body must be a JSON object'


class InvalidPayload(exceptions.ParseError):
    default_detail = INVALID_BODY


def request_payload(request):
    """
    ``request.data`` as a plain dict, whether it came as JSON or a form.

    Raises InvalidPayload when the body is not an object.
    """
    data = request.data
    if hasattr(data, 'dict'):
        return data.dict()
    if not isinstance(data, Mapping):
        raise InvalidPayload()
    return dict(data)


def exception_handler(exc, context):
    if isinstance(exc, InvalidPayload):
        return error_response(OperationResult.invalid(str(exc.detail)))
    return drf_exception_handler(exc, context)


def error_response(result):
    return Response(result.as_dict(), status=STATUS_BY_CODE.get(result.code, status.HTTP_400_BAD_REQUEST))


def result_response(result, serializer_class=None, context=None, status_code=status.HTTP_200_OK, many=False):
    if not result:
        return error_response(result)

    data = result.value
    if serializer_class is not None and data is not None:
        data = serializer_class(data, many=many, context=context or {}).data
    return Response({'success': True, 'data': data}, status=status_code)
