# -*- coding: utf-8 -*-
"""
Wiring repository → service cho payroll.
Dựng một lần lúc khởi động (PayrollConfig.ready) rồi lấy lại qua get_services().
Test có thể gọi build_services(...) để dựng bộ service riêng với policy khác.
"""
from __future__ import annotations
from dataclasses import dataclass
from typing import Optional

from django.apps import apps
from django.conf import settings

from payroll.repositories.audit_repository import AuditLogRepository
from payroll.repositories.catalog_repository import (
    OvertimeConfigRepository,
    WorkItemRepository,
    WorkTypeRepository,
)
from payroll.repositories.employee_repository import EmployeeRepository
from payroll.repositories.salary_repository import MonthlySalaryRepository
from payroll.repositories.work_record_repository import WorkRecordRepository
from payroll.services.audit_service import AuditService
from payroll.services.catalog_service import CatalogService
from payroll.services.employee_service import EmployeeService
from payroll.services.report_service import ReportService
from payroll.services.salary_service import MonthlySalaryAggregator
from payroll.services.settlement_service import SettlementStateMachine
from payroll.services.work_record_service import WorkRecordService


@dataclass
class PayrollServices:
    employees: EmployeeRepository
    work_types: WorkTypeRepository
    work_items: WorkItemRepository
    overtime_configs: OvertimeConfigRepository
    work_records: WorkRecordRepository
    salaries: MonthlySalaryRepository
    audit_logs: AuditLogRepository

    audit: AuditService
    employee_service: EmployeeService
    catalog: CatalogService
    work_record_service: WorkRecordService
    aggregator: MonthlySalaryAggregator
    settlement: SettlementStateMachine
    reports: ReportService


def build_services(*, default_salary_fallback: Optional[bool] = None,
                   max_hours_per_day: Optional[int] = None) -> PayrollServices:
    if default_salary_fallback is None:
        default_salary_fallback = getattr(settings, "PAYROLL_DEFAULT_SALARY_FALLBACK", True)
    if max_hours_per_day is None:
        max_hours_per_day = getattr(settings, "PAYROLL_MAX_HOURS_PER_DAY", 24)

    employees = EmployeeRepository()
    work_types = WorkTypeRepository()
    work_items = WorkItemRepository()
    overtime_configs = OvertimeConfigRepository()
    work_records = WorkRecordRepository()
    salaries = MonthlySalaryRepository()
    audit_logs = AuditLogRepository()

    audit = AuditService(audit_logs)
    catalog = CatalogService(work_types, work_items, overtime_configs, work_records)
    return PayrollServices(
        employees=employees,
        work_types=work_types,
        work_items=work_items,
        overtime_configs=overtime_configs,
        work_records=work_records,
        salaries=salaries,
        audit_logs=audit_logs,
        audit=audit,
        employee_service=EmployeeService(employees),
        catalog=catalog,
        work_record_service=WorkRecordService(
            work_records, employees, work_types, work_items, overtime_configs, catalog,
            max_hours_per_day=max_hours_per_day,
        ),
        aggregator=MonthlySalaryAggregator(
            employees, work_records, salaries, audit, default_salary_fallback=default_salary_fallback,
        ),
        settlement=SettlementStateMachine(salaries, work_records, audit),
        reports=ReportService(work_records, salaries),
    )


def get_services() -> PayrollServices:
    return apps.get_app_config("payroll").services
