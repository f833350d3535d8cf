# -*- coding: utf-8 -*-
from __future__ import annotations
from rest_framework import serializers
from payroll.models import Employee


class EmployeeSerializer(serializers.ModelSerializer):
    full_name = serializers.CharField(read_only=True)
    status_display = serializers.CharField(source="get_status_display", read_only=True)

    class Meta:
        model = Employee
        fields = [
            "id", "code", "first_name", "last_name", "full_name",
            "email", "phone", "position", "department",
            "salary", "hire_date", "manager",
            "status", "status_display",
            "created_at", "updated_at",
        ]
        read_only_fields = ["created_at", "updated_at"]
