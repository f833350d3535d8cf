# -*- coding: utf-8 -*-
"""
Reporting Aggregator (chỉ đọc).

- Tuần: work record status=paid trong tuần ISO (thứ 2 → chủ nhật)
- Tháng: bảng lương status=paid của kỳ; số tiền = total_amount + allowances,
  breakdown theo loại công việc lấy từ các work record gắn với bảng lương.
  Phần total_amount không có work record tương ứng (lương mặc định) gom vào
  nhóm DEFAULT_SALARY_LABEL.
"""
from __future__ import annotations
import logging
from datetime import date
from decimal import Decimal
from typing import Any, Dict, Optional

from payroll.exceptions import ValidationError
from payroll.repositories.salary_repository import MonthlySalaryRepository
from payroll.repositories.work_record_repository import WorkRecordRepository

logger = logging.getLogger(__name__)

ZERO = Decimal("0")
UNKNOWN = "Unknown"
DEFAULT_SALARY_LABEL = "Lương mặc định"


def iso_week_range(year: int, week: int):
    if not (1 <= week <= 53):
        raise ValidationError("Week must be between 1 and 53")
    try:
        return date.fromisocalendar(year, week, 1), date.fromisocalendar(year, week, 7)
    except ValueError:
        raise ValidationError(f"Year {year} has no ISO week {week}")


def _rows(groups: Dict[str, Dict[str, Any]], key_name: str):
    return [{key_name: k, **v} for k, v in sorted(groups.items())]


class ReportService:
    def __init__(self, work_records: WorkRecordRepository, salaries: MonthlySalaryRepository):
        self.work_records = work_records
        self.salaries = salaries

    def get_weekly_report(self, *, year: int, week: int, department: Optional[str] = None,
                          employee_id: Optional[int] = None) -> Dict[str, Any]:
        date_from, date_to = iso_week_range(year, week)
        records = self.work_records.list_paid_in_range(date_from, date_to, department=department, employee_id=employee_id)

        total = ZERO
        employees, days = set(), set()
        by_dept: Dict[str, Dict[str, Any]] = {}
        dept_days: Dict[str, set] = {}
        by_type: Dict[str, Dict[str, Any]] = {}
        for r in records:
            total += r.total_amount
            employees.add(r.employee_id)
            days.add(r.work_date)

            dept = r.employee.department or UNKNOWN
            d = by_dept.setdefault(dept, {"total_amount": ZERO, "total_work_days": 0})
            d["total_amount"] += r.total_amount
            dept_days.setdefault(dept, set()).add(r.work_date)

            t = by_type.setdefault(r.work_type.name or UNKNOWN, {"total_amount": ZERO, "count": 0})
            t["total_amount"] += r.total_amount
            t["count"] += 1

        for dept, dset in dept_days.items():
            by_dept[dept]["total_work_days"] = len(dset)

        return {
            "period": f"Week {week}, {year}",
            "date_from": date_from,
            "date_to": date_to,
            "total_employees": len(employees),
            "total_work_days": len(days),
            "total_amount": total,
            "by_department": _rows(by_dept, "department"),
            "by_work_type": _rows(by_type, "work_type_name"),
        }

    def get_monthly_report(self, *, year: int, month: int, department: Optional[str] = None,
                           employee_id: Optional[int] = None) -> Dict[str, Any]:
        if not (1 <= month <= 12):
            raise ValidationError("Month must be between 1 and 12")
        salaries = list(self.salaries.list_paid_for_period(year, month, department=department, employee_id=employee_id))

        total = ZERO
        total_allowances = ZERO
        total_days = 0
        employees = set()
        by_dept: Dict[str, Dict[str, Any]] = {}
        dept_emps: Dict[str, set] = {}
        by_type: Dict[str, Dict[str, Any]] = {}

        linked: Dict[int, list] = {}
        if salaries:
            for link in self.salaries.record_links_for([ms.id for ms in salaries]):
                linked.setdefault(link.monthly_salary_id, []).append(link.work_record)

        for ms in salaries:
            amount = ms.total_amount + ms.allowances
            total += amount
            total_allowances += ms.allowances
            total_days += ms.total_work_days
            employees.add(ms.employee_id)

            dept = ms.employee.department or UNKNOWN
            d = by_dept.setdefault(dept, {"total_amount": ZERO, "total_work_days": 0, "employee_count": 0})
            d["total_amount"] += amount
            d["total_work_days"] += ms.total_work_days
            dept_emps.setdefault(dept, set()).add(ms.employee_id)

            records = linked.get(ms.id, [])
            for r in records:
                t = by_type.setdefault(r.work_type.name or UNKNOWN, {"total_amount": ZERO, "count": 0})
                t["total_amount"] += r.total_amount
                t["count"] += 1

            # phần không có work record: lương mặc định (kể cả khi đã gộp vào bảng lương có công)
            rest = ms.total_amount - sum((r.total_amount for r in records), ZERO)
            if rest > 0:
                t = by_type.setdefault(DEFAULT_SALARY_LABEL, {"total_amount": ZERO, "count": 0})
                t["total_amount"] += rest
                t["count"] += 1

        for dept, eset in dept_emps.items():
            by_dept[dept]["employee_count"] = len(eset)

        return {
            "period": f"{month}/{year}",
            "total_employees": len(employees),
            "total_work_days": total_days,
            "total_amount": total,
            "total_allowances": total_allowances,
            "by_department": _rows(by_dept, "department"),
            "by_work_type": _rows(by_type, "work_type_name"),
        }
