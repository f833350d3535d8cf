# -*- coding: utf-8 -*-
"""
Catalog API: WorkType, WorkItem, OvertimeConfig.
Đọc: mọi user đã đăng nhập; ghi: admin.
"""
from __future__ import annotations
from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.response import Response

from payroll.serializers.catalog_serializer import (
    WorkTypeSerializer,
    WorkItemSerializer,
    OvertimeConfigSerializer,
    OvertimeConfigCreateSerializer,
    OvertimeConfigUpdateSerializer,
    QuantityMadeSerializer,
)
from payroll.selectors.catalog_selector import (
    get_overtime_config,
    get_work_item,
    get_work_type,
    list_overtime_configs,
    list_work_items,
    list_work_types,
)
from payroll.services.registry import get_services
from payroll.utils.pagination import DefaultPagination
from payroll.utils.permissions import ReadOnlyOrAdmin
from .utils import (
    extend_schema, extend_schema_view, PAGE_PARAMS, path_int, q_str, std_errors,
    error_response, DOMAIN_ERRORS,
)


def _not_found(what: str) -> Response:
    return Response({"detail": f"{what} not found"}, status=status.HTTP_404_NOT_FOUND)


# ============== WorkType ==============
@extend_schema_view(
    list=extend_schema(
        tags=["Catalog"], summary="Danh sách loại công việc",
        parameters=PAGE_PARAMS + [
            q_str("department", "Lọc theo phòng ban"),
            q_str("calculation_type", "hourly | daily | weld_count"),
        ],
    ),
    retrieve=extend_schema(tags=["Catalog"], summary="Chi tiết loại công việc"),
    create=extend_schema(tags=["Catalog"], summary="Tạo loại công việc (admin)",
                         description="Tên không trùng (không phân biệt hoa thường) trong cùng phòng ban.",
                         responses={201: WorkTypeSerializer, **std_errors()}),
    update=extend_schema(tags=["Catalog"], summary="Cập nhật loại công việc (admin)"),
    partial_update=extend_schema(tags=["Catalog"], summary="Cập nhật một phần (admin)"),
    destroy=extend_schema(tags=["Catalog"], summary="Xoá loại công việc (admin)", responses={204: None, **std_errors()}),
)
class WorkTypeViewSet(viewsets.ModelViewSet):
    serializer_class = WorkTypeSerializer
    permission_classes = [ReadOnlyOrAdmin]
    pagination_class = DefaultPagination
    lookup_value_regex = r"\d+"

    def get_queryset(self):
        return list_work_types(self.request.query_params)

    def retrieve(self, request, pk=None):
        wt = get_work_type(pk)
        if wt is None:
            return _not_found("Work type")
        return Response(WorkTypeSerializer(wt).data)

    def create(self, request, *args, **kwargs):
        ser = WorkTypeSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        try:
            wt = get_services().catalog.create_work_type(ser.validated_data)
        except DOMAIN_ERRORS as e:
            return error_response(e)
        return Response(WorkTypeSerializer(wt).data, status=status.HTTP_201_CREATED)

    def update(self, request, pk=None, partial: bool = False):
        wt = get_work_type(pk)
        if wt is None:
            return _not_found("Work type")
        ser = WorkTypeSerializer(wt, data=request.data, partial=partial)
        ser.is_valid(raise_exception=True)
        try:
            wt = get_services().catalog.update_work_type(wt.id, ser.validated_data)
        except DOMAIN_ERRORS as e:
            return error_response(e)
        return Response(WorkTypeSerializer(wt).data)

    def partial_update(self, request, pk=None):
        return self.update(request, pk=pk, partial=True)

    def destroy(self, request, pk=None):
        try:
            get_services().catalog.delete_work_type(int(pk))
        except DOMAIN_ERRORS as e:
            return error_response(e)
        return Response(status=status.HTTP_204_NO_CONTENT)


# ============== WorkItem ==============
@extend_schema_view(
    list=extend_schema(
        tags=["Catalog"], summary="Danh sách sản phẩm (work item)",
        parameters=PAGE_PARAMS + [
            q_str("difficulty_level", "Lọc theo độ khó"),
            q_str("status", "new | in_progress | done"),
        ],
    ),
    retrieve=extend_schema(tags=["Catalog"], summary="Chi tiết sản phẩm"),
    create=extend_schema(tags=["Catalog"], summary="Tạo sản phẩm (admin)", description="status luôn bắt đầu là `new`.",
                         responses={201: WorkItemSerializer, **std_errors()}),
    update=extend_schema(tags=["Catalog"], summary="Cập nhật sản phẩm (admin)"),
    partial_update=extend_schema(tags=["Catalog"], summary="Cập nhật một phần (admin)"),
    destroy=extend_schema(tags=["Catalog"], summary="Xoá sản phẩm (admin)", responses={204: None, **std_errors()}),
)
class WorkItemViewSet(viewsets.ModelViewSet):
    serializer_class = WorkItemSerializer
    permission_classes = [ReadOnlyOrAdmin]
    pagination_class = DefaultPagination
    lookup_value_regex = r"\d+"

    def get_queryset(self):
        return list_work_items(self.request.query_params)

    def retrieve(self, request, pk=None):
        item = get_work_item(pk)
        if item is None:
            return _not_found("Work item")
        return Response(WorkItemSerializer(item).data)

    def create(self, request, *args, **kwargs):
        ser = WorkItemSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        try:
            item = get_services().catalog.create_work_item(ser.validated_data)
        except DOMAIN_ERRORS as e:
            return error_response(e)
        return Response(WorkItemSerializer(item).data, status=status.HTTP_201_CREATED)

    def update(self, request, pk=None, partial: bool = False):
        item = get_work_item(pk)
        if item is None:
            return _not_found("Work item")
        ser = WorkItemSerializer(item, data=request.data, partial=partial)
        ser.is_valid(raise_exception=True)
        try:
            item = get_services().catalog.update_work_item(item.id, ser.validated_data)
        except DOMAIN_ERRORS as e:
            return error_response(e)
        return Response(WorkItemSerializer(item).data)

    def partial_update(self, request, pk=None):
        return self.update(request, pk=pk, partial=True)

    def destroy(self, request, pk=None):
        try:
            get_services().catalog.delete_work_item(int(pk))
        except DOMAIN_ERRORS as e:
            return error_response(e)
        return Response(status=status.HTTP_204_NO_CONTENT)

    @extend_schema(
        tags=["Catalog"], summary="Tổng số lượng đã làm của sản phẩm",
        description="Σ (quantity + overtime_quantity) của mọi work record gắn với sản phẩm.",
        parameters=[path_int("id", "Work item ID")],
        responses={200: QuantityMadeSerializer, **std_errors()},
    )
    @action(detail=True, methods=["get"], url_path="quantity-made")
    def quantity_made(self, request, pk=None):
        try:
            made = get_services().catalog.quantity_made(int(pk))
        except DOMAIN_ERRORS as e:
            return error_response(e)
        item = get_work_item(pk)
        return Response(QuantityMadeSerializer({
            "work_item_id": item.id, "total_quantity": item.total_quantity, "quantity_made": made,
        }).data)


# ============== OvertimeConfig (lookup theo work_type_id) ==============
@extend_schema_view(
    list=extend_schema(tags=["Catalog"], summary="Danh sách cấu hình tăng ca"),
    retrieve=extend_schema(tags=["Catalog"], summary="Cấu hình tăng ca của loại công việc",
                           parameters=[path_int("work_type_id", "Work type ID")],
                           responses={200: OvertimeConfigSerializer, **std_errors()}),
    create=extend_schema(
        tags=["Catalog"], summary="Tạo cấu hình tăng ca (admin)",
        description=(
            "weld_count: cần `overtime_price_per_weld` (>= 0), % bị đặt về 0.\n"
            "hourly: cần `overtime_percentage` (0..100), giá/mối hàn bị đặt về 0.\n"
            "daily: không hỗ trợ."
        ),
        request=OvertimeConfigCreateSerializer,
        responses={201: OvertimeConfigSerializer, **std_errors()},
    ),
    update=extend_schema(tags=["Catalog"], summary="Cập nhật cấu hình tăng ca (admin)",
                         parameters=[path_int("work_type_id", "Work type ID")],
                         request=OvertimeConfigUpdateSerializer,
                         responses={200: OvertimeConfigSerializer, **std_errors()}),
    destroy=extend_schema(tags=["Catalog"], summary="Xoá cấu hình tăng ca (admin)",
                          parameters=[path_int("work_type_id", "Work type ID")],
                          responses={204: None, **std_errors()}),
)
class OvertimeConfigViewSet(viewsets.ViewSet):
    permission_classes = [ReadOnlyOrAdmin]
    lookup_field = "work_type_id"
    lookup_value_regex = r"\d+"

    def list(self, request):
        return Response(OvertimeConfigSerializer(list_overtime_configs(), many=True).data)

    def retrieve(self, request, work_type_id=None):
        cfg = get_overtime_config(int(work_type_id))
        if cfg is None:
            return _not_found("Overtime config")
        return Response(OvertimeConfigSerializer(cfg).data)

    def create(self, request):
        ser = OvertimeConfigCreateSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        data = dict(ser.validated_data)
        work_type_id = data.pop("work_type_id")
        try:
            cfg = get_services().catalog.create_overtime_config(work_type_id, data)
        except DOMAIN_ERRORS as e:
            return error_response(e)
        return Response(OvertimeConfigSerializer(cfg).data, status=status.HTTP_201_CREATED)

    def update(self, request, work_type_id=None):
        ser = OvertimeConfigUpdateSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        try:
            cfg = get_services().catalog.update_overtime_config(int(work_type_id), ser.validated_data)
        except DOMAIN_ERRORS as e:
            return error_response(e)
        return Response(OvertimeConfigSerializer(cfg).data)

    def destroy(self, request, work_type_id=None):
        try:
            get_services().catalog.delete_overtime_config(int(work_type_id))
        except DOMAIN_ERRORS as e:
            return error_response(e)
        return Response(status=status.HTTP_204_NO_CONTENT)
