# views/utils.py
"""
Shared tooling cho views:
- drf-spectacular helpers (params, responses)
- error_response: map lỗi nghiệp vụ → HTTP (400 / 404 / 409)
"""
from drf_spectacular.utils import (
    extend_schema, extend_schema_view,
    OpenApiParameter, OpenApiExample, OpenApiResponse, inline_serializer,
)
from drf_spectacular.types import OpenApiTypes
from rest_framework import serializers, status
from rest_framework.response import Response

from payroll.exceptions import ConflictError, NotFoundError, ValidationError, error_message

# ---- Lỗi nghiệp vụ mà view bắt; lỗi khác (DB...) để DRF/Django trả 500
DOMAIN_ERRORS = (ValidationError, NotFoundError, ConflictError)

_STATUS_BY_ERROR = (
    (NotFoundError, status.HTTP_404_NOT_FOUND),
    (ConflictError, status.HTTP_409_CONFLICT),
    (ValidationError, status.HTTP_400_BAD_REQUEST),
)


def error_response(exc: Exception) -> Response:
    for cls, code in _STATUS_BY_ERROR:
        if isinstance(exc, cls):
            return Response({"detail": error_message(exc)}, status=code)
    raise exc


# ---- Reusable error schema
ErrorSerializer = inline_serializer(
    name="Error",
    fields={"detail": serializers.CharField()}
)

# ---- Param helpers

def path_int(name: str, description: str):
    return OpenApiParameter(name, OpenApiTypes.INT, OpenApiParameter.PATH, description=description)

def path_date(name: str, description: str):
    return OpenApiParameter(name, OpenApiTypes.DATE, OpenApiParameter.PATH, description=description)

def q_int(name: str, description: str, required: bool = False):
    return OpenApiParameter(name, OpenApiTypes.INT, OpenApiParameter.QUERY, required=required, description=description)

def q_str(name: str, description: str, required: bool = False):
    return OpenApiParameter(name, OpenApiTypes.STR, OpenApiParameter.QUERY, required=required, description=description)

def q_date(name: str, description: str, required: bool = False):
    return OpenApiParameter(name, OpenApiTypes.DATE, OpenApiParameter.QUERY, required=required, description=description)

PAGE_PARAMS = [
    q_int("page", "Trang (mặc định 1)"),
    q_int("page_size", "Kích thước trang (mặc định 20, tối đa 200)"),
]

# ---- Convenience for common responses

def responses_ok(serializer_cls, many: bool = False, description: str | None = None, extra: dict | None = None):
    """Build a {200: ...} response mapping quickly."""
    serializer = serializer_cls(many=many) if isinstance(serializer_cls, type) else serializer_cls
    mapping = {200: OpenApiResponse(response=serializer, description=description or "OK")}
    if extra:
        mapping.update(extra)
    return mapping


def std_errors(extra: dict | None = None):
    """Standard error response mapping you can merge into responses=..."""
    errs = {
        400: OpenApiResponse(ErrorSerializer, description="Bad Request"),
        401: OpenApiResponse(ErrorSerializer, description="Unauthorized"),
        403: OpenApiResponse(ErrorSerializer, description="Forbidden"),
        404: OpenApiResponse(ErrorSerializer, description="Not Found"),
        409: OpenApiResponse(ErrorSerializer, description="Conflict"),
    }
    if extra:
        errs.update(extra)
    return errs


__all__ = [
    "extend_schema", "extend_schema_view", "OpenApiParameter", "OpenApiExample", "OpenApiResponse",
    "OpenApiTypes", "inline_serializer", "ErrorSerializer",
    "path_int", "path_date", "q_int", "q_str", "q_date", "PAGE_PARAMS",
    "responses_ok", "std_errors", "error_response", "DOMAIN_ERRORS",
]
