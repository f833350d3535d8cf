# -*- coding: utf-8 -*-
"""
Monthly Salary Aggregator.

calculate_monthly_salary(employee_id, year=None, month=None):
  - Có year+month (kỳ chỉ định): lấy work record status=new trong tháng đó.
      * đã có draft cho kỳ → tính lại tại chỗ (idempotent), snapshot lại junction
      * không có record: có bảng lương đã trả → ConflictError;
        còn lại dùng lương mặc định employee.salary (nếu bật PAYROLL_DEFAULT_SALARY_FALLBACK), không thì ValidationError
  - Không có year/month (tự nhận kỳ): lấy tất cả record status=new,
      kỳ = (năm, tháng) có nhiều record nhất, hoà thì lấy tháng chứa ngày muộn nhất.
      đã có draft cho kỳ → ConflictError
  - total_amount = Σ total_amount của record; total_work_days = số ngày phân biệt

Mỗi record status=new chỉ thuộc tối đa 1 draft; record đã nằm trong draft khác bị bỏ qua.
"""
from __future__ import annotations
import logging
from collections import Counter
from decimal import Decimal
from typing import Any, Dict, Iterable, List, Optional, Tuple

from django.db import DatabaseError, transaction
from django.utils import timezone

from payroll.exceptions import ConflictError, NotFoundError, ValidationError, error_message
from payroll.models import MonthlySalary, WorkRecord
from payroll.repositories.employee_repository import EmployeeRepository
from payroll.repositories.salary_repository import MonthlySalaryRepository
from payroll.repositories.work_record_repository import WorkRecordRepository
from payroll.services.audit_service import AuditService, salary_snapshot

logger = logging.getLogger(__name__)

ZERO = Decimal("0")


def summarize_records(records: Iterable[WorkRecord]) -> Tuple[Decimal, int]:
    """(Σ total_amount, số ngày làm việc phân biệt)"""
    total = ZERO
    days = set()
    for r in records:
        total += r.total_amount
        days.add(r.work_date)
    return total, len(days)


def detect_period(records: Iterable[WorkRecord]) -> Tuple[int, int]:
    """Kỳ (year, month) có nhiều record nhất; hoà → tháng chứa work_date muộn nhất."""
    counts: Counter = Counter()
    latest: Dict[Tuple[int, int], Any] = {}
    for r in records:
        key = (r.work_date.year, r.work_date.month)
        counts[key] += 1
        if key not in latest or r.work_date > latest[key]:
            latest[key] = r.work_date
    if not counts:
        raise ValidationError("Cannot detect a salary period without work records")
    return max(counts, key=lambda k: (counts[k], latest[k]))


def _check_period(year, month) -> Tuple[int, int]:
    try:
        year, month = int(year), int(month)
    except (TypeError, ValueError):
        raise ValidationError("year and month must be integers")
    if not (1 <= month <= 12):
        raise ValidationError("Month must be between 1 and 12")
    if not (1900 <= year <= 9999):
        raise ValidationError("Year is out of range")
    return year, month


class MonthlySalaryAggregator:
    def __init__(
        self,
        employees: EmployeeRepository,
        work_records: WorkRecordRepository,
        salaries: MonthlySalaryRepository,
        audit: AuditService,
        default_salary_fallback: bool = True,
    ):
        self.employees = employees
        self.work_records = work_records
        self.salaries = salaries
        self.audit = audit
        self.default_salary_fallback = default_salary_fallback

    def calculate_monthly_salary(self, *, employee_id: int, year: Optional[int] = None,
                                 month: Optional[int] = None, actor_id: Optional[int] = None) -> MonthlySalary:
        if (year is None) != (month is None):
            raise ValidationError("year and month must be provided together")
        with transaction.atomic():
            # Khoá employee: 2 lần tính lương đồng thời cho cùng nhân viên chạy tuần tự
            employee = self.employees.get_for_update(employee_id)
            if employee is None:
                raise NotFoundError("Employee not found")
            if year is None:
                ms = self._calculate_from_status(employee)
            else:
                ms = self._calculate_for_period(employee, *_check_period(year, month))
            self.audit.log_action(
                actor=actor_id, action="monthly_salary.calculate", object_type="monthly_salary",
                object_id=ms.id, after=salary_snapshot(ms),
            )
        logger.info("[salary] calculated #%s emp=%s %s total=%s days=%s",
                    ms.id, ms.employee_id, ms.period, ms.total_amount, ms.total_work_days)
        return self.salaries.get_by_id(ms.id)

    def _calculate_for_period(self, employee, year: int, month: int) -> MonthlySalary:
        drafts = self.salaries.list_for_period(employee.id, year, month, status=MonthlySalary.Status.DRAFT, lock=True)
        busy = set(self.salaries.draft_linked_record_ids(employee.id, exclude_salary_ids=[d.id for d in drafts]))
        records = [
            r for r in self.work_records.list_by_employee_and_month(employee.id, year, month, status=WorkRecord.Status.NEW)
            if r.id not in busy
        ]

        if records:
            total, days = summarize_records(records)
        else:
            paid = self.salaries.list_for_period(employee.id, year, month, status=MonthlySalary.Status.PAID)
            if paid:
                raise ConflictError(
                    f"Bảng lương {month:02d}/{year} của nhân viên {employee.full_name} đã thanh toán, không thể tính lại"
                )
            salary = employee.salary or ZERO
            if not (self.default_salary_fallback and salary > ZERO):
                raise ValidationError(f"Không có dữ liệu lương cho nhân viên {employee.full_name}")
            total, days = salary, 0
            logger.info("[salary] emp=%s %02d/%s: no work records, using default salary %s",
                        employee.id, month, year, salary)

        now = timezone.now()
        record_ids = [r.id for r in records]
        if drafts:
            target, extra = drafts[0], drafts[1:]
            if extra:
                # gom về một draft duy nhất cho kỳ
                self.salaries.delete_many([d.id for d in extra])
            self.salaries.save_fields(target, {
                "total_amount": total, "total_work_days": days, "calculated_at": now,
            })
            self.salaries.replace_records(target, record_ids)
            return target

        return self.salaries.create_with_records({
            "employee": employee, "year": year, "month": month,
            "total_amount": total, "total_work_days": days,
            "allowances": ZERO, "status": MonthlySalary.Status.DRAFT, "calculated_at": now,
        }, record_ids)

    def _calculate_from_status(self, employee) -> MonthlySalary:
        all_new = list(self.work_records.list_by_status(employee.id, WorkRecord.Status.NEW))
        if not all_new:
            raise ValidationError(f"Không có work record chưa thanh toán cho nhân viên {employee.full_name}")

        busy = set(self.salaries.draft_linked_record_ids(employee.id))
        records = [r for r in all_new if r.id not in busy]
        if not records:
            raise ConflictError("Tất cả work record đã nằm trong bảng lương tạm tính. Hãy xoá bảng lương cũ trước")

        year, month = detect_period(records)
        if self.salaries.list_for_period(employee.id, year, month, status=MonthlySalary.Status.DRAFT):
            raise ConflictError(
                f"Đã có bảng lương tạm tính {month:02d}/{year} cho nhân viên {employee.full_name}. "
                "Hãy xoá bảng lương cũ trước"
            )

        total, days = summarize_records(records)
        return self.salaries.create_with_records({
            "employee": employee, "year": year, "month": month,
            "total_amount": total, "total_work_days": days,
            "allowances": ZERO, "status": MonthlySalary.Status.DRAFT, "calculated_at": timezone.now(),
        }, [r.id for r in records])

    def calculate_monthly_salary_for_all(self, *, year: int, month: int,
                                         actor_id: Optional[int] = None) -> Dict[str, Any]:
        year, month = _check_period(year, month)
        results: List[Dict[str, Any]] = []
        for emp in self.employees.list_active():
            item = {"employee_id": emp.id, "employee_name": emp.full_name}
            try:
                # savepoint riêng: lỗi của một nhân viên không rollback các nhân viên khác
                with transaction.atomic():
                    ms = self.calculate_monthly_salary(employee_id=emp.id, year=year, month=month, actor_id=actor_id)
                item.update(success=True, message="OK", monthly_salary_id=ms.id)
            except (ValidationError, NotFoundError, ConflictError, DatabaseError) as e:
                logger.warning("[salary] batch %02d/%s emp=%s failed: %s", month, year, emp.id, error_message(e))
                item.update(success=False, message=error_message(e), monthly_salary_id=None)
            results.append(item)

        success = sum(1 for r in results if r["success"])
        logger.info("[salary] batch %02d/%s: %s/%s succeeded", month, year, success, len(results))
        return {"total": len(results), "success": success, "failed": len(results) - success, "results": results}
