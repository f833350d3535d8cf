# -*- coding: utf-8 -*-
"""
Monthly salary API: list/detail, tính lương (1 nhân viên / tất cả), phụ cấp, thanh toán, xoá.
Tính lương, thanh toán, phụ cấp, xoá: chỉ admin.
"""
from __future__ import annotations
from rest_framework import permissions, status, viewsets
from rest_framework.decorators import action
from rest_framework.response import Response

from payroll.models import MonthlySalary
from payroll.serializers.salary_serializer import (
    MonthlySalaryReadSerializer,
    MonthlySalaryCalculateSerializer,
    MonthlySalaryCalculateAllSerializer,
    AllowancesSerializer,
    BatchResultSerializer,
)
from payroll.selectors.salary_selector import filter_monthly_salaries, get_monthly_salary
from payroll.services.registry import get_services
from payroll.utils.pagination import DefaultPagination
from payroll.utils.permissions import IsAdminRole
from .utils import (
    extend_schema, extend_schema_view, OpenApiExample, PAGE_PARAMS,
    q_int, q_str, std_errors, error_response, DOMAIN_ERRORS,
)

ADMIN_ACTIONS = {"calculate", "calculate_all", "allowances", "pay", "destroy"}


@extend_schema_view(
    list=extend_schema(
        tags=["Monthly Salary"], summary="Danh sách bảng lương",
        parameters=PAGE_PARAMS + [
            q_str("employee_id", "Một hoặc nhiều ID, phân tách bằng dấu phẩy"),
            q_int("year", "Năm"),
            q_int("month", "Tháng"),
            q_str("status", "draft | paid"),
            q_str("department", "Phòng ban"),
        ],
        responses={200: MonthlySalaryReadSerializer(many=True), **std_errors()},
    ),
    retrieve=extend_schema(tags=["Monthly Salary"], summary="Chi tiết bảng lương",
                           responses={200: MonthlySalaryReadSerializer, **std_errors()}),
    destroy=extend_schema(
        tags=["Monthly Salary"], summary="Xoá bảng lương (admin)",
        description="Bảng lương đã thanh toán: các work record liên quan được trả về status `new` trước khi xoá.",
        responses={204: None, **std_errors()},
    ),
)
class MonthlySalaryViewSet(viewsets.GenericViewSet):
    queryset = MonthlySalary.objects.all()
    serializer_class = MonthlySalaryReadSerializer
    pagination_class = DefaultPagination
    lookup_value_regex = r"\d+"

    def get_permissions(self):
        if self.action in ADMIN_ACTIONS:
            return [IsAdminRole()]
        return [permissions.IsAuthenticated()]

    def list(self, request):
        try:
            qs = filter_monthly_salaries(request.query_params)
        except DOMAIN_ERRORS as e:
            return error_response(e)
        page = self.paginate_queryset(qs)
        if page is not None:
            return self.get_paginated_response(MonthlySalaryReadSerializer(page, many=True).data)
        return Response(MonthlySalaryReadSerializer(qs, many=True).data)

    def retrieve(self, request, pk=None):
        ms = get_monthly_salary(int(pk))
        if ms is None:
            return Response({"detail": "Monthly salary not found"}, status=status.HTTP_404_NOT_FOUND)
        return Response(MonthlySalaryReadSerializer(ms).data)

    def destroy(self, request, pk=None):
        try:
            get_services().settlement.delete_monthly_salary(int(pk), actor_id=request.user.id)
        except DOMAIN_ERRORS as e:
            return error_response(e)
        return Response(status=status.HTTP_204_NO_CONTENT)

    @extend_schema(
        tags=["Monthly Salary"], summary="Tính lương tháng cho một nhân viên (admin)",
        description=(
            "Có `year` + `month`: tính theo kỳ chỉ định (draft cũ được tính lại tại chỗ).\n"
            "Bỏ trống cả hai: tự nhận kỳ từ các work record chưa thanh toán."
        ),
        request=MonthlySalaryCalculateSerializer,
        responses={201: MonthlySalaryReadSerializer, **std_errors()},
        examples=[
            OpenApiExample("Explicit period", value={"employee_id": 1, "year": 2025, "month": 3}, request_only=True),
            OpenApiExample("Auto-detect", value={"employee_id": 1}, request_only=True),
        ],
    )
    @action(detail=False, methods=["post"], url_path="calculate")
    def calculate(self, request):
        ser = MonthlySalaryCalculateSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        d = ser.validated_data
        try:
            ms = get_services().aggregator.calculate_monthly_salary(
                employee_id=d["employee_id"], year=d.get("year"), month=d.get("month"), actor_id=request.user.id,
            )
        except DOMAIN_ERRORS as e:
            return error_response(e)
        return Response(MonthlySalaryReadSerializer(ms).data, status=status.HTTP_201_CREATED)

    @extend_schema(
        tags=["Monthly Salary"], summary="Tính lương tháng cho tất cả nhân viên đang làm (admin)",
        description="Mỗi nhân viên chạy độc lập; lỗi của một người không ảnh hưởng người khác.",
        request=MonthlySalaryCalculateAllSerializer,
        responses={200: BatchResultSerializer, **std_errors()},
    )
    @action(detail=False, methods=["post"], url_path="calculate-all")
    def calculate_all(self, request):
        ser = MonthlySalaryCalculateAllSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        try:
            result = get_services().aggregator.calculate_monthly_salary_for_all(
                year=ser.validated_data["year"], month=ser.validated_data["month"], actor_id=request.user.id,
            )
        except DOMAIN_ERRORS as e:
            return error_response(e)
        return Response(BatchResultSerializer(result).data)

    @extend_schema(
        tags=["Monthly Salary"], summary="Cập nhật phụ cấp (admin)",
        request=AllowancesSerializer,
        responses={200: MonthlySalaryReadSerializer, **std_errors()},
    )
    @action(detail=True, methods=["put"], url_path="allowances")
    def allowances(self, request, pk=None):
        ser = AllowancesSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        try:
            ms = get_services().settlement.update_allowances(
                int(pk), ser.validated_data["allowances"], actor_id=request.user.id,
            )
        except DOMAIN_ERRORS as e:
            return error_response(e)
        return Response(MonthlySalaryReadSerializer(ms).data)

    @extend_schema(
        tags=["Monthly Salary"], summary="Thanh toán bảng lương (admin)",
        description=(
            "Chuyển draft → paid và đánh dấu work record là paid. "
            "Nếu cùng kỳ có nhiều bảng lương, chúng được gộp thành một bảng lương paid duy nhất."
        ),
        request=None,
        responses={200: MonthlySalaryReadSerializer, **std_errors()},
    )
    @action(detail=True, methods=["put"], url_path="pay")
    def pay(self, request, pk=None):
        try:
            ms = get_services().settlement.pay_monthly_salary(int(pk), actor_id=request.user.id)
        except DOMAIN_ERRORS as e:
            return error_response(e)
        return Response(MonthlySalaryReadSerializer(ms).data)
