# -*- coding: utf-8 -*-
"""
Repository layer cho WorkRecord (thuần DB):
- CRUD, filter, aggregate (Σ quantity theo work item, Σ giờ theo ngày)
- Đổi status hàng loạt theo chỉ thị từ service (settlement)
"""
from __future__ import annotations
from datetime import date
from decimal import Decimal
from typing import Any, Dict, Iterable, List, Optional

from django.db import transaction
from django.db.models import DecimalField, QuerySet, Sum, Value
from django.db.models.functions import Coalesce
from django.utils import timezone

from payroll.models import WorkRecord, WorkType
from .base import BaseRepository

ZERO = Decimal("0")


def _dec_sum(field: str):
    return Coalesce(Sum(field), Value(ZERO), output_field=DecimalField(max_digits=20, decimal_places=2))


class WorkRecordRepository(BaseRepository[WorkRecord]):
    model = WorkRecord

    def base_qs(self) -> QuerySet[WorkRecord]:
        return WorkRecord.objects.select_related("employee", "work_type", "work_item")

    def filter_records(self, filters: Dict[str, Any], order_by: Optional[List[str]] = None) -> QuerySet[WorkRecord]:
        qs = self.base_qs()
        if (emp_ids := filters.get("employee_id")):
            qs = qs.filter(employee_id__in=emp_ids)
        if (d_from := filters.get("date_from")):
            qs = qs.filter(work_date__gte=d_from)
        if (d_to := filters.get("date_to")):
            qs = qs.filter(work_date__lte=d_to)
        if (wt_ids := filters.get("work_type_id")):
            qs = qs.filter(work_type_id__in=wt_ids)
        if (statuses := filters.get("status")):
            qs = qs.filter(status__in=statuses)
        return qs.order_by(*order_by) if order_by else qs.order_by("-work_date", "-created_at")

    def list_by_employee_and_month(self, employee_id: int, year: int, month: int,
                                   status: Optional[str] = None) -> QuerySet[WorkRecord]:
        qs = self.base_qs().filter(employee_id=employee_id, work_date__year=year, work_date__month=month)
        if status:
            qs = qs.filter(status=status)
        return qs.order_by("-work_date", "-created_at")

    def list_by_status(self, employee_id: int, status: str) -> QuerySet[WorkRecord]:
        return self.base_qs().filter(employee_id=employee_id, status=status).order_by("work_date", "id")

    def list_by_monthly_salary(self, monthly_salary_id: int) -> QuerySet[WorkRecord]:
        return self.base_qs().filter(salary_links__monthly_salary_id=monthly_salary_id).order_by("work_date", "id")

    def list_paid_in_range(self, date_from: date, date_to: date, department: Optional[str] = None,
                           employee_id: Optional[int] = None) -> QuerySet[WorkRecord]:
        qs = self.base_qs().filter(status=WorkRecord.Status.PAID, work_date__gte=date_from, work_date__lte=date_to)
        if department:
            qs = qs.filter(employee__department=department)
        if employee_id:
            qs = qs.filter(employee_id=employee_id)
        return qs.order_by("work_date", "id")

    # ============== Aggregates ==============
    def total_quantity_made(self, work_item_id: int, exclude_record_id: Optional[int] = None) -> Decimal:
        qs = WorkRecord.objects.filter(work_item_id=work_item_id)
        if exclude_record_id:
            qs = qs.exclude(id=exclude_record_id)
        agg = qs.aggregate(q=_dec_sum("quantity"), ot=_dec_sum("overtime_quantity"))
        return agg["q"] + agg["ot"]

    def total_hours_in_day(self, employee_id: int, work_date: date, exclude_record_id: Optional[int] = None) -> Decimal:
        qs = WorkRecord.objects.filter(
            employee_id=employee_id,
            work_date=work_date,
            work_type__calculation_type=WorkType.CalculationType.HOURLY,
        )
        if exclude_record_id:
            qs = qs.exclude(id=exclude_record_id)
        agg = qs.aggregate(h=_dec_sum("quantity"), ot=_dec_sum("overtime_hours"))
        return agg["h"] + agg["ot"]

    # ============== Mutations ==============
    @transaction.atomic
    def set_status(self, record_ids: Iterable[int], status: str) -> int:
        ids = list(record_ids)
        if not ids:
            return 0
        return WorkRecord.objects.filter(id__in=ids).update(status=status, updated_at=timezone.now())
