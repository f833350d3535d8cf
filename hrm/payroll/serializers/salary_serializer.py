# -*- coding: utf-8 -*-
from __future__ import annotations
from rest_framework import serializers
from payroll.models import MonthlySalary


class MonthlySalaryReadSerializer(serializers.ModelSerializer):
    status_display = serializers.CharField(source="get_status_display", read_only=True)
    employee_name = serializers.CharField(source="employee.full_name", read_only=True)
    employee_code = serializers.CharField(source="employee.code", read_only=True)
    department = serializers.CharField(source="employee.department", read_only=True)
    period = serializers.CharField(read_only=True)
    grand_total = serializers.SerializerMethodField()

    class Meta:
        model = MonthlySalary
        fields = [
            "id",
            "employee_id", "employee_name", "employee_code", "department",
            "year", "month", "period",
            "total_work_days", "total_amount", "allowances", "grand_total",
            "status", "status_display",
            "calculated_at", "paid_at",
            "created_at", "updated_at",
        ]

    def get_grand_total(self, obj) -> float:
        return float(obj.total_amount + obj.allowances)


class MonthlySalaryCalculateSerializer(serializers.Serializer):
    employee_id = serializers.IntegerField()
    # Bỏ trống cả hai → tự nhận kỳ từ các work record chưa thanh toán
    year = serializers.IntegerField(required=False, allow_null=True)
    month = serializers.IntegerField(required=False, allow_null=True, min_value=1, max_value=12)


class MonthlySalaryCalculateAllSerializer(serializers.Serializer):
    year = serializers.IntegerField()
    month = serializers.IntegerField(min_value=1, max_value=12)


class AllowancesSerializer(serializers.Serializer):
    allowances = serializers.DecimalField(max_digits=15, decimal_places=2)


class BatchItemSerializer(serializers.Serializer):
    employee_id = serializers.IntegerField()
    employee_name = serializers.CharField()
    success = serializers.BooleanField()
    message = serializers.CharField()
    monthly_salary_id = serializers.IntegerField(allow_null=True)


class BatchResultSerializer(serializers.Serializer):
    total = serializers.IntegerField()
    success = serializers.IntegerField()
    failed = serializers.IntegerField()
    results = BatchItemSerializer(many=True)
