# -*- coding: utf-8 -*-
"""
Work Record API.
Đọc: mọi user đã đăng nhập; ghi: member/admin. Record đã thanh toán không sửa/xoá được (409).
"""
from __future__ import annotations
from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.response import Response

from payroll.models import WorkRecord
from payroll.serializers.work_record_serializer import (
    WorkRecordReadSerializer,
    WorkRecordCreateSerializer,
    WorkRecordUpdateSerializer,
    HoursInDaySerializer,
)
from payroll.selectors.work_record_selector import (
    filter_work_records,
    get_total_hours_in_day,
    get_work_record,
    get_work_records_by_employee_and_month,
    get_work_records_by_monthly_salary,
)
from payroll.services.registry import get_services
from payroll.utils.filters import as_date
from payroll.utils.pagination import DefaultPagination
from payroll.utils.permissions import ReadOnlyOrMember
from .utils import (
    extend_schema, extend_schema_view, OpenApiExample, PAGE_PARAMS,
    path_date, path_int, q_date, q_int, q_str, std_errors,
    error_response, DOMAIN_ERRORS,
)


@extend_schema_view(
    list=extend_schema(
        tags=["Work Record"], summary="Danh sách work record",
        parameters=PAGE_PARAMS + [
            q_str("employee_id", "Một hoặc nhiều ID, phân tách bằng dấu phẩy"),
            q_str("work_type_id", "Một hoặc nhiều ID, phân tách bằng dấu phẩy"),
            q_str("status", "new | paid (có thể nhiều giá trị)"),
            q_date("date_from", "Từ ngày (YYYY-MM-DD)"),
            q_date("date_to", "Đến ngày (YYYY-MM-DD)"),
        ],
        responses={200: WorkRecordReadSerializer(many=True), **std_errors()},
    ),
    retrieve=extend_schema(tags=["Work Record"], summary="Chi tiết work record",
                           responses={200: WorkRecordReadSerializer, **std_errors()}),
    create=extend_schema(
        tags=["Work Record"], summary="Ghi nhận công việc (member/admin)",
        description="Giá được tính và snapshot lúc ghi. weld_count bắt buộc `work_item_id`.",
        request=WorkRecordCreateSerializer,
        responses={201: WorkRecordReadSerializer, **std_errors()},
        examples=[
            OpenApiExample(
                "Weld count with overtime",
                value={
                    "employee_id": 1, "work_date": "2025-03-03", "work_type_id": 2, "work_item_id": 5,
                    "quantity": 10, "is_overtime": True, "overtime_quantity": 2,
                },
                request_only=True,
            ),
            OpenApiExample(
                "Hourly",
                value={"employee_id": 1, "work_date": "2025-03-03", "work_type_id": 3, "quantity": 8},
                request_only=True,
            ),
        ],
    ),
    update=extend_schema(tags=["Work Record"], summary="Cập nhật work record (member/admin)",
                         request=WorkRecordUpdateSerializer,
                         responses={200: WorkRecordReadSerializer, **std_errors()}),
    partial_update=extend_schema(tags=["Work Record"], summary="Cập nhật một phần (member/admin)",
                                 request=WorkRecordUpdateSerializer,
                                 responses={200: WorkRecordReadSerializer, **std_errors()}),
    destroy=extend_schema(tags=["Work Record"], summary="Xoá work record (member/admin)",
                          responses={204: None, **std_errors()}),
)
class WorkRecordViewSet(viewsets.GenericViewSet):
    queryset = WorkRecord.objects.all()
    serializer_class = WorkRecordReadSerializer
    permission_classes = [ReadOnlyOrMember]
    pagination_class = DefaultPagination
    lookup_value_regex = r"\d+"

    def list(self, request):
        try:
            qs = filter_work_records(request.query_params)
        except DOMAIN_ERRORS as e:
            return error_response(e)
        page = self.paginate_queryset(qs)
        if page is not None:
            return self.get_paginated_response(WorkRecordReadSerializer(page, many=True).data)
        return Response(WorkRecordReadSerializer(qs, many=True).data)

    def retrieve(self, request, pk=None):
        rec = get_work_record(int(pk))
        if rec is None:
            return Response({"detail": "Work record not found"}, status=status.HTTP_404_NOT_FOUND)
        return Response(WorkRecordReadSerializer(rec).data)

    def create(self, request):
        ser = WorkRecordCreateSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        try:
            rec = get_services().work_record_service.create_work_record(ser.validated_data, actor_id=request.user.id)
        except DOMAIN_ERRORS as e:
            return error_response(e)
        return Response(WorkRecordReadSerializer(rec).data, status=status.HTTP_201_CREATED)

    def update(self, request, pk=None):
        ser = WorkRecordUpdateSerializer(data=request.data, partial=True)
        ser.is_valid(raise_exception=True)
        try:
            rec = get_services().work_record_service.update_work_record(int(pk), ser.validated_data)
        except DOMAIN_ERRORS as e:
            return error_response(e)
        return Response(WorkRecordReadSerializer(rec).data)

    def partial_update(self, request, pk=None):
        return self.update(request, pk=pk)

    def destroy(self, request, pk=None):
        try:
            get_services().work_record_service.delete_work_record(int(pk))
        except DOMAIN_ERRORS as e:
            return error_response(e)
        return Response(status=status.HTTP_204_NO_CONTENT)

    @extend_schema(
        tags=["Work Record"], summary="Work record của nhân viên theo tháng",
        parameters=[
            q_int("employee_id", "Employee ID", required=True),
            q_int("year", "Năm", required=True),
            q_int("month", "Tháng (1-12)", required=True),
            q_str("status", "new | paid"),
        ],
        responses={200: WorkRecordReadSerializer(many=True), **std_errors()},
    )
    @action(detail=False, methods=["get"], url_path="by-month")
    def by_month(self, request):
        try:
            qs = get_work_records_by_employee_and_month(request.query_params)
        except DOMAIN_ERRORS as e:
            return error_response(e)
        return Response(WorkRecordReadSerializer(qs, many=True).data)

    @extend_schema(
        tags=["Work Record"], summary="Work record đã gắn với một bảng lương",
        parameters=[path_int("monthly_salary_id", "Monthly salary ID")],
        responses={200: WorkRecordReadSerializer(many=True), **std_errors()},
    )
    @action(detail=False, methods=["get"], url_path=r"by-salary/(?P<monthly_salary_id>\d+)")
    def by_salary(self, request, monthly_salary_id=None):
        qs = get_work_records_by_monthly_salary(int(monthly_salary_id))
        return Response(WorkRecordReadSerializer(qs, many=True).data)

    @extend_schema(
        tags=["Work Record"], summary="Tổng số giờ (hourly) của nhân viên trong ngày",
        parameters=[path_int("employee_id", "Employee ID"), path_date("work_date", "Ngày (YYYY-MM-DD)")],
        responses={200: HoursInDaySerializer, **std_errors()},
    )
    @action(detail=False, methods=["get"], url_path=r"hours/(?P<employee_id>\d+)/(?P<work_date>\d{4}-\d{2}-\d{2})")
    def hours(self, request, employee_id=None, work_date=None):
        try:
            day = as_date(work_date, "work_date")
        except DOMAIN_ERRORS as e:
            return error_response(e)
        total = get_total_hours_in_day(int(employee_id), day)
        return Response(HoursInDaySerializer({
            "employee_id": int(employee_id), "work_date": day, "total_hours": total,
        }).data)
