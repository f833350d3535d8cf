# -*- coding: utf-8 -*-
"""
Selectors cho WorkRecord:
- Chuẩn hoá filter từ query params (list id, date) rồi gọi repository
"""
from __future__ import annotations
from datetime import date
from decimal import Decimal
from typing import Any, Dict, List, Optional

from django.db.models import QuerySet

from payroll.exceptions import ValidationError
from payroll.models import WorkRecord
from payroll.services.registry import get_services
from payroll.utils.filters import as_date, as_int, as_int_list, as_str_list


def filter_work_records(params: Dict[str, Any], order_by: Optional[List[str]] = None) -> QuerySet[WorkRecord]:
    filters = {
        "employee_id": as_int_list(params.get("employee_id")),
        "work_type_id": as_int_list(params.get("work_type_id")),
        "status": as_str_list(params.get("status")),
        "date_from": as_date(params.get("date_from"), "date_from"),
        "date_to": as_date(params.get("date_to"), "date_to"),
    }
    if filters["date_from"] and filters["date_to"] and filters["date_from"] > filters["date_to"]:
        raise ValidationError("date_from must be on or before date_to")
    return get_services().work_records.filter_records(filters, order_by=order_by)


def get_work_record(record_id: int) -> Optional[WorkRecord]:
    return get_services().work_records.get_or_none(record_id)


def get_work_records_by_employee_and_month(params: Dict[str, Any]) -> QuerySet[WorkRecord]:
    employee_id = as_int(params.get("employee_id"), "employee_id", required=True)
    year = as_int(params.get("year"), "year", required=True)
    month = as_int(params.get("month"), "month", required=True)
    if not (1 <= month <= 12):
        raise ValidationError("Month must be between 1 and 12")
    status = (params.get("status") or "").strip() or None
    return get_services().work_records.list_by_employee_and_month(employee_id, year, month, status=status)


def get_work_records_by_monthly_salary(monthly_salary_id: int) -> QuerySet[WorkRecord]:
    return get_services().work_records.list_by_monthly_salary(monthly_salary_id)


def get_total_hours_in_day(employee_id: int, work_date: date) -> Decimal:
    return get_services().work_records.total_hours_in_day(employee_id, work_date)
