# -*- coding: utf-8 -*-
from __future__ import annotations
from rest_framework import serializers


def _money():
    return serializers.DecimalField(max_digits=18, decimal_places=2, coerce_to_string=False)


class DepartmentRowSerializer(serializers.Serializer):
    department = serializers.CharField()
    total_amount = _money()
    total_work_days = serializers.IntegerField()
    employee_count = serializers.IntegerField(required=False)


class WorkTypeRowSerializer(serializers.Serializer):
    work_type_name = serializers.CharField()
    total_amount = _money()
    count = serializers.IntegerField()


class WeeklyReportSerializer(serializers.Serializer):
    period = serializers.CharField()
    date_from = serializers.DateField()
    date_to = serializers.DateField()
    total_employees = serializers.IntegerField()
    total_work_days = serializers.IntegerField()
    total_amount = _money()
    by_department = DepartmentRowSerializer(many=True)
    by_work_type = WorkTypeRowSerializer(many=True)


class MonthlyReportSerializer(serializers.Serializer):
    period = serializers.CharField()
    total_employees = serializers.IntegerField()
    total_work_days = serializers.IntegerField()
    total_amount = _money()
    total_allowances = _money()
    by_department = DepartmentRowSerializer(many=True)
    by_work_type = WorkTypeRowSerializer(many=True)
