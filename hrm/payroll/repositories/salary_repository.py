# -*- coding: utf-8 -*-
"""
Repository layer cho MonthlySalary + junction MonthlySalaryWorkRecord (thuần DB).
Không chứa rule về status: SettlementStateMachine quyết định.
"""
from __future__ import annotations
from typing import Any, Dict, Iterable, List, Optional

from django.db import transaction
from django.db.models import QuerySet

from payroll.models import MonthlySalary, MonthlySalaryWorkRecord
from .base import BaseRepository, for_update


class MonthlySalaryRepository(BaseRepository[MonthlySalary]):
    model = MonthlySalary

    def base_qs(self) -> QuerySet[MonthlySalary]:
        return MonthlySalary.objects.select_related("employee")

    def filter_salaries(self, filters: Dict[str, Any]) -> QuerySet[MonthlySalary]:
        qs = self.base_qs()
        if (emp_ids := filters.get("employee_id")):
            qs = qs.filter(employee_id__in=emp_ids)
        if (year := filters.get("year")):
            qs = qs.filter(year=year)
        if (month := filters.get("month")):
            qs = qs.filter(month=month)
        if (statuses := filters.get("status")):
            qs = qs.filter(status__in=statuses)
        if (dept := filters.get("department")):
            qs = qs.filter(employee__department=dept)
        return qs.order_by("-year", "-month", "employee__last_name", "employee__first_name", "id")

    def list_for_period(self, employee_id: int, year: int, month: int,
                        status: Optional[str] = None, lock: bool = False) -> List[MonthlySalary]:
        qs = MonthlySalary.objects.filter(employee_id=employee_id, year=year, month=month)
        if status:
            qs = qs.filter(status=status)
        if lock:
            qs = for_update(qs)
        return list(qs.order_by("id"))

    def list_paid_for_period(self, year: int, month: int, department: Optional[str] = None,
                             employee_id: Optional[int] = None) -> QuerySet[MonthlySalary]:
        qs = self.base_qs().filter(year=year, month=month, status=MonthlySalary.Status.PAID)
        if department:
            qs = qs.filter(employee__department=department)
        if employee_id:
            qs = qs.filter(employee_id=employee_id)
        return qs.order_by("employee_id", "id")

    def linked_record_ids(self, salary_ids: Iterable[int]) -> List[int]:
        ids = (
            MonthlySalaryWorkRecord.objects
            .filter(monthly_salary_id__in=list(salary_ids))
            .values_list("work_record_id", flat=True)
        )
        return sorted(set(ids))

    def record_links_for(self, salary_ids: Iterable[int]) -> QuerySet[MonthlySalaryWorkRecord]:
        return (
            MonthlySalaryWorkRecord.objects
            .filter(monthly_salary_id__in=list(salary_ids))
            .select_related("work_record__work_type")
            .order_by("monthly_salary_id", "work_record_id")
        )

    def draft_linked_record_ids(self, employee_id: int, exclude_salary_ids: Iterable[int] = ()) -> List[int]:
        """Record id đang nằm trong draft khác của nhân viên (tránh 1 record thuộc 2 draft)."""
        ids = (
            MonthlySalaryWorkRecord.objects
            .filter(monthly_salary__employee_id=employee_id, monthly_salary__status=MonthlySalary.Status.DRAFT)
            .exclude(monthly_salary_id__in=list(exclude_salary_ids))
            .values_list("work_record_id", flat=True)
        )
        return sorted(set(ids))

    # ============== Mutations ==============
    def _link(self, salary: MonthlySalary, record_ids: Iterable[int]) -> None:
        MonthlySalaryWorkRecord.objects.bulk_create(
            [MonthlySalaryWorkRecord(monthly_salary=salary, work_record_id=rid) for rid in sorted(set(record_ids))]
        )

    @transaction.atomic
    def create_with_records(self, data: Dict[str, Any], record_ids: Iterable[int]) -> MonthlySalary:
        obj = MonthlySalary.objects.create(**data)
        self._link(obj, record_ids)
        return obj

    @transaction.atomic
    def replace_records(self, salary: MonthlySalary, record_ids: Iterable[int]) -> MonthlySalary:
        MonthlySalaryWorkRecord.objects.filter(monthly_salary=salary).delete()
        self._link(salary, record_ids)
        return salary

    @transaction.atomic
    def delete_many(self, salary_ids: Iterable[int]) -> int:
        # junction rows bị xoá theo CASCADE
        _, per_model = MonthlySalary.objects.filter(id__in=list(salary_ids)).delete()
        return per_model.get(MonthlySalary._meta.label, 0)
