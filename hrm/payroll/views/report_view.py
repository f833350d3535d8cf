# -*- coding: utf-8 -*-
from __future__ import annotations
from rest_framework import permissions
from rest_framework.response import Response
from rest_framework.views import APIView

from payroll.serializers.report_serializer import MonthlyReportSerializer, WeeklyReportSerializer
from payroll.services.registry import get_services
from payroll.utils.filters import as_int
from .utils import extend_schema, q_int, q_str, std_errors, error_response, DOMAIN_ERRORS


class WeeklyReportView(APIView):
    permission_classes = [permissions.IsAuthenticated]

    @extend_schema(
        tags=["Report"], summary="Báo cáo tuần (work record đã thanh toán)",
        description="Tuần ISO (thứ 2 → chủ nhật).",
        parameters=[
            q_int("year", "Năm", required=True),
            q_int("week", "Tuần ISO (1-53)", required=True),
            q_str("department", "Phòng ban"),
            q_int("employee_id", "Employee ID"),
        ],
        responses={200: WeeklyReportSerializer, **std_errors()},
    )
    def get(self, request):
        p = request.query_params
        try:
            data = get_services().reports.get_weekly_report(
                year=as_int(p.get("year"), "year", required=True),
                week=as_int(p.get("week"), "week", required=True),
                department=(p.get("department") or "").strip() or None,
                employee_id=as_int(p.get("employee_id"), "employee_id"),
            )
        except DOMAIN_ERRORS as e:
            return error_response(e)
        return Response(WeeklyReportSerializer(data).data)


class MonthlyReportView(APIView):
    permission_classes = [permissions.IsAuthenticated]

    @extend_schema(
        tags=["Report"], summary="Báo cáo tháng (bảng lương đã thanh toán)",
        description="Số tiền mỗi bảng lương = total_amount + allowances.",
        parameters=[
            q_int("year", "Năm", required=True),
            q_int("month", "Tháng (1-12)", required=True),
            q_str("department", "Phòng ban"),
            q_int("employee_id", "Employee ID"),
        ],
        responses={200: MonthlyReportSerializer, **std_errors()},
    )
    def get(self, request):
        p = request.query_params
        try:
            data = get_services().reports.get_monthly_report(
                year=as_int(p.get("year"), "year", required=True),
                month=as_int(p.get("month"), "month", required=True),
                department=(p.get("department") or "").strip() or None,
                employee_id=as_int(p.get("employee_id"), "employee_id"),
            )
        except DOMAIN_ERRORS as e:
            return error_response(e)
        return Response(MonthlyReportSerializer(data).data)
