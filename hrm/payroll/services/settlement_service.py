# -*- coding: utf-8 -*-
"""
Settlement State Machine cho MonthlySalary: draft → paid (một chiều).

- pay_monthly_salary: CAS trên status (khoá dòng rồi đọc lại); nhiều bảng lương cùng kỳ → gộp thành 1 dòng paid
- delete_monthly_salary: xoá paid thì trả các work record về status=new trước
- update_allowances: phụ cấp >= 0, sửa được cả draft lẫn paid
Bất biến: record paid ⇔ thuộc một bảng lương paid.
"""
from __future__ import annotations
import logging
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import List, Optional, Sequence

from django.db import transaction
from django.utils import timezone

from payroll.exceptions import ConflictError, NotFoundError, ValidationError
from payroll.models import MonthlySalary, WorkRecord
from payroll.repositories.salary_repository import MonthlySalaryRepository
from payroll.repositories.work_record_repository import WorkRecordRepository
from payroll.services.audit_service import AuditService, salary_snapshot
from payroll.utils.filters import as_decimal

logger = logging.getLogger(__name__)

ZERO = Decimal("0")


@dataclass(frozen=True)
class MergedTotals:
    total_amount: Decimal
    allowances: Decimal
    total_work_days: int
    calculated_at: Optional[datetime]


def merge_totals(salaries: Sequence[MonthlySalary]) -> MergedTotals:
    """Gộp nhiều bảng lương cùng kỳ; phụ cấp cộng riêng nên không bị tính 2 lần vào total_amount."""
    stamps = [s.calculated_at for s in salaries if s.calculated_at]
    return MergedTotals(
        total_amount=sum((s.total_amount for s in salaries), ZERO),
        allowances=sum((s.allowances for s in salaries), ZERO),
        total_work_days=sum(s.total_work_days for s in salaries),
        calculated_at=max(stamps) if stamps else None,
    )


class SettlementStateMachine:
    def __init__(self, salaries: MonthlySalaryRepository, work_records: WorkRecordRepository, audit: AuditService):
        self.salaries = salaries
        self.work_records = work_records
        self.audit = audit

    @transaction.atomic
    def pay_monthly_salary(self, salary_id: int, actor_id: Optional[int] = None) -> MonthlySalary:
        target = self.salaries.get_for_update(salary_id)
        if target is None:
            raise NotFoundError("Monthly salary not found")
        if target.status != MonthlySalary.Status.DRAFT:
            raise ConflictError("Bảng lương đã được thanh toán")

        emp_id, year, month = target.employee_id, target.year, target.month
        drafts = self.salaries.list_for_period(emp_id, year, month, status=MonthlySalary.Status.DRAFT, lock=True)
        paid = self.salaries.list_for_period(emp_id, year, month, status=MonthlySalary.Status.PAID, lock=True)
        draft_record_ids = self.salaries.linked_record_ids([d.id for d in drafts])
        now = timezone.now()

        if len(drafts) == 1 and not paid:
            before = salary_snapshot(target)
            self.salaries.save_fields(target, {"status": MonthlySalary.Status.PAID, "paid_at": now})
            self.work_records.set_status(draft_record_ids, WorkRecord.Status.PAID)
            self.audit.log_action(
                actor=actor_id, action="monthly_salary.pay", object_type="monthly_salary",
                object_id=target.id, before=before, after=salary_snapshot(target),
            )
            logger.info("[settlement] paid #%s emp=%s %s total=%s records=%s",
                        target.id, emp_id, target.period, target.total_amount, len(draft_record_ids))
            return self.salaries.get_by_id(target.id)

        group: List[MonthlySalary] = drafts + paid
        totals = merge_totals(group)
        old_ids = [s.id for s in group]
        all_record_ids = self.salaries.linked_record_ids(old_ids)

        self.work_records.set_status(draft_record_ids, WorkRecord.Status.PAID)
        self.salaries.delete_many(old_ids)
        merged = self.salaries.create_with_records({
            "employee_id": emp_id, "year": year, "month": month,
            "total_amount": totals.total_amount,
            "allowances": totals.allowances,
            "total_work_days": totals.total_work_days,
            "calculated_at": totals.calculated_at,
            "status": MonthlySalary.Status.PAID,
            "paid_at": now,
        }, all_record_ids)

        self.audit.log_action(
            actor=actor_id, action="monthly_salary.merge_pay", object_type="monthly_salary",
            object_id=merged.id, before=[salary_snapshot(s) for s in group], after=salary_snapshot(merged),
        )
        logger.info("[settlement] merged %s rows %s into paid #%s emp=%s %02d/%s total=%s",
                    len(group), old_ids, merged.id, emp_id, month, year, merged.total_amount)
        return self.salaries.get_by_id(merged.id)

    @transaction.atomic
    def delete_monthly_salary(self, salary_id: int, actor_id: Optional[int] = None) -> None:
        ms = self.salaries.get_for_update(salary_id)
        if ms is None:
            raise NotFoundError("Monthly salary not found")
        before = salary_snapshot(ms)
        reverted = 0
        if ms.status == MonthlySalary.Status.PAID:
            record_ids = self.salaries.linked_record_ids([ms.id])
            reverted = self.work_records.set_status(record_ids, WorkRecord.Status.NEW)
        self.salaries.delete(ms)
        self.audit.log_action(
            actor=actor_id, action="monthly_salary.delete", object_type="monthly_salary",
            object_id=salary_id, before=before,
        )
        logger.info("[settlement] deleted #%s (%s), %s records reverted to new", salary_id, before["status"], reverted)

    @transaction.atomic
    def update_allowances(self, salary_id: int, allowances, actor_id: Optional[int] = None) -> MonthlySalary:
        value = as_decimal(allowances, "allowances")
        if value is None:
            raise ValidationError("allowances is required")
        if value < ZERO:
            raise ValidationError("Phụ cấp không được âm")
        ms = self.salaries.get_for_update(salary_id)
        if ms is None:
            raise NotFoundError("Monthly salary not found")
        before = salary_snapshot(ms)
        self.salaries.save_fields(ms, {"allowances": value})
        self.audit.log_action(
            actor=actor_id, action="monthly_salary.allowances", object_type="monthly_salary",
            object_id=ms.id, before=before, after=salary_snapshot(ms),
        )
        logger.info("[settlement] allowances #%s: %s → %s", ms.id, before["allowances"], value)
        return self.salaries.get_by_id(ms.id)
