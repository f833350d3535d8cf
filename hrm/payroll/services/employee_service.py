# -*- coding: utf-8 -*-
"""
Service cho Employee directory: create / update / delete với rule mã nhân viên duy nhất.
"""
from __future__ import annotations
import logging
from typing import Any, Dict

from django.db import transaction
from django.db.models import ProtectedError

from payroll.exceptions import ConflictError, NotFoundError, ValidationError
from payroll.models import Employee
from payroll.repositories.employee_repository import EmployeeRepository

logger = logging.getLogger(__name__)


class EmployeeService:
    def __init__(self, employees: EmployeeRepository):
        self.employees = employees

    def _check(self, data: Dict[str, Any], exclude_id=None) -> None:
        code = data.get("code")
        if code is not None and self.employees.code_taken(code, exclude_id=exclude_id):
            raise ValidationError(f"Employee code '{code}' already exists")
        salary = data.get("salary")
        if salary is not None and salary < 0:
            raise ValidationError("Salary must not be negative")
        manager = data.get("manager")
        if exclude_id and manager is not None and getattr(manager, "id", manager) == exclude_id:
            raise ValidationError("Employee cannot be their own manager")

    @transaction.atomic
    def create_employee(self, data: Dict[str, Any]) -> Employee:
        self._check(data)
        emp = self.employees.create(data)
        logger.info("[employee] created #%s %s", emp.id, emp.code)
        return emp

    @transaction.atomic
    def update_employee(self, employee_id: int, data: Dict[str, Any]) -> Employee:
        emp = self.employees.get_for_update(employee_id)
        if emp is None:
            raise NotFoundError("Employee not found")
        self._check(data, exclude_id=emp.id)
        return self.employees.save_fields(emp, data)

    @transaction.atomic
    def delete_employee(self, employee_id: int) -> None:
        emp = self.employees.get_or_none(employee_id)
        if emp is None:
            raise NotFoundError("Employee not found")
        try:
            self.employees.delete(emp)
        except ProtectedError:
            raise ConflictError("Employee has work records or salaries; set status=inactive instead")
        logger.info("[employee] deleted #%s", employee_id)
