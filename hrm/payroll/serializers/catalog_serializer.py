# -*- coding: utf-8 -*-
from __future__ import annotations
from rest_framework import serializers
from payroll.models import WorkType, WorkItem, OvertimeConfig
from payroll.services.registry import get_services


class WorkTypeSerializer(serializers.ModelSerializer):
    calculation_type_display = serializers.CharField(source="get_calculation_type_display", read_only=True)

    class Meta:
        model = WorkType
        fields = [
            "id", "name", "department",
            "calculation_type", "calculation_type_display",
            "unit_price", "created_at", "updated_at",
        ]
        read_only_fields = ["created_at", "updated_at"]


class WorkItemSerializer(serializers.ModelSerializer):
    status_display = serializers.CharField(source="get_status_display", read_only=True)
    quantity_made = serializers.SerializerMethodField()

    class Meta:
        model = WorkItem
        fields = [
            "id", "name", "difficulty_level",
            "price_per_weld", "total_quantity", "welds_per_item",
            "status", "status_display", "quantity_made",
            "estimated_delivery_date", "weight_kg",
            "created_at", "updated_at",
        ]
        # status là giá trị dẫn xuất, không cho client ghi
        read_only_fields = ["status", "created_at", "updated_at"]

    def get_quantity_made(self, obj) -> float:
        made = getattr(obj, "quantity_made", None)
        if made is None:
            made = get_services().work_records.total_quantity_made(obj.id)
        return float(made)


class OvertimeConfigSerializer(serializers.ModelSerializer):
    work_type_id = serializers.IntegerField(read_only=True)
    work_type_name = serializers.CharField(source="work_type.name", read_only=True)
    calculation_type = serializers.CharField(source="work_type.calculation_type", read_only=True)

    class Meta:
        model = OvertimeConfig
        fields = [
            "id", "work_type_id", "work_type_name", "calculation_type",
            "overtime_price_per_weld", "overtime_percentage",
            "created_at", "updated_at",
        ]


class OvertimeConfigCreateSerializer(serializers.Serializer):
    work_type_id = serializers.IntegerField()
    overtime_price_per_weld = serializers.DecimalField(max_digits=15, decimal_places=2, required=False, allow_null=True)
    overtime_percentage = serializers.DecimalField(max_digits=5, decimal_places=2, required=False, allow_null=True)


class OvertimeConfigUpdateSerializer(serializers.Serializer):
    overtime_price_per_weld = serializers.DecimalField(max_digits=15, decimal_places=2, required=False, allow_null=True)
    overtime_percentage = serializers.DecimalField(max_digits=5, decimal_places=2, required=False, allow_null=True)


class QuantityMadeSerializer(serializers.Serializer):
    work_item_id = serializers.IntegerField()
    total_quantity = serializers.IntegerField()
    quantity_made = serializers.DecimalField(max_digits=15, decimal_places=2, coerce_to_string=False)
