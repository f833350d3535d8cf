# -*- coding: utf-8 -*-
from __future__ import annotations
from rest_framework import serializers
from payroll.models import WorkRecord


class WorkRecordReadSerializer(serializers.ModelSerializer):
    status_display = serializers.CharField(source="get_status_display", read_only=True)
    employee_name = serializers.CharField(source="employee.full_name", read_only=True)
    employee_code = serializers.CharField(source="employee.code", read_only=True)
    department = serializers.CharField(source="employee.department", read_only=True)
    work_type_name = serializers.CharField(source="work_type.name", read_only=True)
    calculation_type = serializers.CharField(source="work_type.calculation_type", read_only=True)
    work_item_name = serializers.CharField(source="work_item.name", read_only=True, default=None)

    class Meta:
        model = WorkRecord
        fields = [
            "id",
            "employee_id", "employee_name", "employee_code", "department",
            "work_date",
            "work_type_id", "work_type_name", "calculation_type",
            "work_item_id", "work_item_name",
            "quantity", "unit_price", "total_amount",
            "is_overtime", "overtime_quantity", "overtime_hours",
            "status", "status_display",
            "notes", "created_by",
            "created_at", "updated_at",
        ]


class WorkRecordCreateSerializer(serializers.Serializer):
    employee_id = serializers.IntegerField()
    work_date = serializers.DateField()
    work_type_id = serializers.IntegerField()
    work_item_id = serializers.IntegerField(required=False, allow_null=True)
    quantity = serializers.DecimalField(max_digits=12, decimal_places=2)
    # Ghi đè đơn giá (hourly/daily); bỏ trống → lấy theo work type
    unit_price = serializers.DecimalField(max_digits=15, decimal_places=2, required=False, allow_null=True)
    is_overtime = serializers.BooleanField(required=False, default=False)
    overtime_quantity = serializers.DecimalField(max_digits=12, decimal_places=2, required=False, allow_null=True)
    overtime_hours = serializers.DecimalField(max_digits=6, decimal_places=2, required=False, allow_null=True)
    notes = serializers.CharField(required=False, allow_blank=True, default="")


class WorkRecordUpdateSerializer(serializers.Serializer):
    employee_id = serializers.IntegerField(required=False)
    work_date = serializers.DateField(required=False)
    work_type_id = serializers.IntegerField(required=False)
    work_item_id = serializers.IntegerField(required=False, allow_null=True)
    quantity = serializers.DecimalField(max_digits=12, decimal_places=2, required=False)
    unit_price = serializers.DecimalField(max_digits=15, decimal_places=2, required=False, allow_null=True)
    is_overtime = serializers.BooleanField(required=False)
    overtime_quantity = serializers.DecimalField(max_digits=12, decimal_places=2, required=False, allow_null=True)
    overtime_hours = serializers.DecimalField(max_digits=6, decimal_places=2, required=False, allow_null=True)
    notes = serializers.CharField(required=False, allow_blank=True)


class HoursInDaySerializer(serializers.Serializer):
    employee_id = serializers.IntegerField()
    work_date = serializers.DateField()
    total_hours = serializers.DecimalField(max_digits=6, decimal_places=2, coerce_to_string=False)
