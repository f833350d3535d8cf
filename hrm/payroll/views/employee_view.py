# -*- coding: utf-8 -*-
from __future__ import annotations
from rest_framework import status, viewsets
from rest_framework.response import Response

from payroll.serializers.employee_serializer import EmployeeSerializer
from payroll.selectors.employee_selector import filter_employees, get_employee_by_id
from payroll.services.registry import get_services
from payroll.utils.pagination import DefaultPagination
from payroll.utils.permissions import ReadOnlyOrAdmin
from .utils import (
    extend_schema, extend_schema_view, PAGE_PARAMS, q_int, q_str, std_errors,
    error_response, DOMAIN_ERRORS,
)


@extend_schema_view(
    list=extend_schema(
        tags=["Employee"], summary="Danh sách nhân viên",
        parameters=PAGE_PARAMS + [
            q_str("department", "Lọc theo phòng ban"),
            q_str("status", "active | inactive"),
            q_int("manager_id", "Lọc theo quản lý"),
            q_str("q", "Tìm theo tên / mã / email"),
        ],
    ),
    retrieve=extend_schema(tags=["Employee"], summary="Chi tiết nhân viên", responses={200: EmployeeSerializer, **std_errors()}),
    create=extend_schema(tags=["Employee"], summary="Tạo nhân viên (admin)", responses={201: EmployeeSerializer, **std_errors()}),
    update=extend_schema(tags=["Employee"], summary="Cập nhật nhân viên (admin)", responses={200: EmployeeSerializer, **std_errors()}),
    partial_update=extend_schema(tags=["Employee"], summary="Cập nhật một phần (admin)", responses={200: EmployeeSerializer, **std_errors()}),
    destroy=extend_schema(tags=["Employee"], summary="Xoá nhân viên (admin)", responses={204: None, **std_errors()}),
)
class EmployeeViewSet(viewsets.ModelViewSet):
    serializer_class = EmployeeSerializer
    permission_classes = [ReadOnlyOrAdmin]
    pagination_class = DefaultPagination
    lookup_value_regex = r"\d+"

    def get_queryset(self):
        return filter_employees(self.request.query_params)

    def retrieve(self, request, pk=None):
        emp = get_employee_by_id(pk)
        if emp is None:
            return Response({"detail": "Employee not found"}, status=status.HTTP_404_NOT_FOUND)
        return Response(EmployeeSerializer(emp).data)

    def create(self, request, *args, **kwargs):
        ser = EmployeeSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        try:
            emp = get_services().employee_service.create_employee(ser.validated_data)
        except DOMAIN_ERRORS as e:
            return error_response(e)
        return Response(EmployeeSerializer(emp).data, status=status.HTTP_201_CREATED)

    def update(self, request, pk=None, partial: bool = False):
        emp = get_employee_by_id(pk)
        if emp is None:
            return Response({"detail": "Employee not found"}, status=status.HTTP_404_NOT_FOUND)
        ser = EmployeeSerializer(emp, data=request.data, partial=partial)
        ser.is_valid(raise_exception=True)
        try:
            emp = get_services().employee_service.update_employee(emp.id, ser.validated_data)
        except DOMAIN_ERRORS as e:
            return error_response(e)
        return Response(EmployeeSerializer(emp).data)

    def partial_update(self, request, pk=None):
        return self.update(request, pk=pk, partial=True)

    def destroy(self, request, pk=None):
        try:
            get_services().employee_service.delete_employee(int(pk))
        except DOMAIN_ERRORS as e:
            return error_response(e)
        return Response(status=status.HTTP_204_NO_CONTENT)
