# -*- coding: utf-8 -*-
from __future__ import annotations
from typing import Any, Dict, Optional

from django.db.models import QuerySet

from payroll.models import MonthlySalary
from payroll.services.registry import get_services
from payroll.utils.filters import as_int, as_int_list, as_str_list


def filter_monthly_salaries(params: Dict[str, Any]) -> QuerySet[MonthlySalary]:
    filters = {
        "employee_id": as_int_list(params.get("employee_id")),
        "year": as_int(params.get("year"), "year"),
        "month": as_int(params.get("month"), "month"),
        "status": as_str_list(params.get("status")),
        "department": (params.get("department") or "").strip() or None,
    }
    return get_services().salaries.filter_salaries(filters)


def get_monthly_salary(salary_id: int) -> Optional[MonthlySalary]:
    return get_services().salaries.get_or_none(salary_id)
