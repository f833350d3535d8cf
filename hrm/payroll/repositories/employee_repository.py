# -*- coding: utf-8 -*-
"""
Repository cho Employee (employee directory).
"""
from __future__ import annotations
from typing import Any, Dict, Optional

from django.db.models import Q, QuerySet

from payroll.models import Employee
from .base import BaseRepository


class EmployeeRepository(BaseRepository[Employee]):
    model = Employee

    def list_active(self) -> QuerySet[Employee]:
        return self.base_qs().filter(status=Employee.Status.ACTIVE).order_by("last_name", "first_name")

    def filter_employees(self, filters: Dict[str, Any]) -> QuerySet[Employee]:
        qs = self.base_qs().select_related("manager")
        if (dept := filters.get("department")):
            qs = qs.filter(department=dept)
        if (status := filters.get("status")):
            qs = qs.filter(status=status)
        if (manager_id := filters.get("manager_id")):
            qs = qs.filter(manager_id=manager_id)
        if (qtext := (filters.get("q") or "").strip()):
            qs = qs.filter(
                Q(first_name__icontains=qtext) | Q(last_name__icontains=qtext)
                | Q(code__icontains=qtext) | Q(email__icontains=qtext)
            )
        return qs.order_by("last_name", "first_name")

    def code_taken(self, code: str, exclude_id: Optional[int] = None) -> bool:
        qs = self.base_qs().filter(code=code)
        if exclude_id:
            qs = qs.exclude(id=exclude_id)
        return qs.exists()
