# -*- coding: utf-8 -*-
from __future__ import annotations
from typing import Any, Dict, Optional

from django.db.models import QuerySet

from payroll.models import Employee
from payroll.services.registry import get_services


def get_employee_by_id(employee_id: int) -> Optional[Employee]:
    return get_services().employees.get_or_none(employee_id)


def list_active_employees() -> QuerySet[Employee]:
    return get_services().employees.list_active()


def filter_employees(params: Dict[str, Any]) -> QuerySet[Employee]:
    filters = {
        "department": (params.get("department") or "").strip() or None,
        "status": (params.get("status") or "").strip() or None,
        "manager_id": params.get("manager_id") or None,
        "q": params.get("q") or "",
    }
    return get_services().employees.filter_employees(filters)
