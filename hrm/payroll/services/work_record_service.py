# -*- coding: utf-8 -*-
"""
Service cho WorkRecord (Work Record Store):
- create / update / delete, giá được snapshot lúc ghi (pricing_service)
- Rule: quantity > 0, loại trừ field tăng ca, Σ giờ/ngày <= PAYROLL_MAX_HOURS_PER_DAY,
  Σ số lượng đã làm <= target của WorkItem
- Record đã thanh toán (paid) là bất biến: sửa/xoá → ConflictError
- Sau mỗi thao tác tính lại status của WorkItem liên quan
"""
from __future__ import annotations
import logging
from datetime import date
from decimal import Decimal
from typing import Any, Dict, Optional

from django.db import transaction

from payroll.exceptions import ConflictError, NotFoundError, ValidationError
from payroll.models import WorkRecord, WorkType
from payroll.repositories.catalog_repository import (
    OvertimeConfigRepository,
    WorkItemRepository,
    WorkTypeRepository,
)
from payroll.repositories.employee_repository import EmployeeRepository
from payroll.repositories.work_record_repository import WorkRecordRepository
from payroll.services.catalog_service import CatalogService
from payroll.services.pricing_service import OvertimeInput, price_work_record, validate_overtime
from payroll.utils.filters import as_decimal

logger = logging.getLogger(__name__)

ZERO = Decimal("0")

_PATCHABLE = (
    "employee_id", "work_date", "work_type_id", "work_item_id", "quantity", "unit_price",
    "is_overtime", "overtime_quantity", "overtime_hours", "notes",
)


class WorkRecordService:
    def __init__(
        self,
        work_records: WorkRecordRepository,
        employees: EmployeeRepository,
        work_types: WorkTypeRepository,
        work_items: WorkItemRepository,
        overtime_configs: OvertimeConfigRepository,
        catalog: CatalogService,
        max_hours_per_day: int = 24,
    ):
        self.work_records = work_records
        self.employees = employees
        self.work_types = work_types
        self.work_items = work_items
        self.overtime_configs = overtime_configs
        self.catalog = catalog
        self.max_hours_per_day = Decimal(max_hours_per_day)

    # ============== Helpers ==============
    def _build_row(self, data: Dict[str, Any], exclude_record_id: Optional[int] = None) -> Dict[str, Any]:
        """Validate + tính giá cho một view đầy đủ của record, trả dict field để ghi DB."""
        employee_id = data.get("employee_id")
        if not employee_id or self.employees.get_or_none(employee_id) is None:
            raise NotFoundError("Employee not found")

        work_date = data.get("work_date")
        if not isinstance(work_date, date):
            raise ValidationError("work_date is required")

        quantity = as_decimal(data.get("quantity"), "quantity")
        if quantity is None or quantity <= ZERO:
            raise ValidationError("Quantity must be greater than 0")

        work_type = self.work_types.get_or_none(data.get("work_type_id"))
        if work_type is None:
            raise NotFoundError("Work type not found")

        overtime = validate_overtime(work_type.calculation_type, OvertimeInput(
            is_overtime=bool(data.get("is_overtime")),
            overtime_quantity=as_decimal(data.get("overtime_quantity"), "overtime_quantity"),
            overtime_hours=as_decimal(data.get("overtime_hours"), "overtime_hours"),
        ))

        work_type, work_item, pricing = price_work_record(
            work_types=self.work_types,
            work_items=self.work_items,
            overtime_configs=self.overtime_configs,
            work_type_id=work_type.id,
            work_item_id=data.get("work_item_id"),
            quantity=quantity,
            overtime=overtime,
            unit_price=as_decimal(data.get("unit_price"), "unit_price"),
            lock_work_item=True,
        )

        if work_item is not None and work_item.total_quantity:
            made = self.work_records.total_quantity_made(work_item.id, exclude_record_id=exclude_record_id)
            made += quantity + (overtime.overtime_quantity or ZERO)
            if made > Decimal(work_item.total_quantity):
                raise ValidationError(
                    f"Số lượng đã làm ({made}) vượt quá số lượng cần làm ({work_item.total_quantity})"
                )

        if work_type.calculation_type == WorkType.CalculationType.HOURLY:
            hours = self.work_records.total_hours_in_day(employee_id, work_date, exclude_record_id=exclude_record_id)
            hours += quantity + (overtime.overtime_hours or ZERO)
            if hours > self.max_hours_per_day:
                raise ValidationError(
                    f"Tổng số giờ làm trong ngày {work_date} ({hours}) vượt quá {self.max_hours_per_day} giờ"
                )

        return {
            "employee_id": employee_id,
            "work_date": work_date,
            "work_type": work_type,
            "work_item": work_item,
            "quantity": quantity,
            "unit_price": pricing.unit_price,
            "total_amount": pricing.total_amount,
            "is_overtime": overtime.is_overtime,
            "overtime_quantity": overtime.overtime_quantity,
            "overtime_hours": overtime.overtime_hours,
            "notes": data.get("notes") or "",
        }

    # ============== Commands ==============
    @transaction.atomic
    def create_work_record(self, data: Dict[str, Any], actor_id: Optional[int] = None) -> WorkRecord:
        row = self._build_row(data)
        rec = self.work_records.create({**row, "status": WorkRecord.Status.NEW, "created_by": actor_id})
        self.catalog.refresh_work_item_status(rec.work_item_id)
        logger.info("[work_record] created #%s emp=%s date=%s total=%s",
                    rec.id, rec.employee_id, rec.work_date, rec.total_amount)
        return self.work_records.get_by_id(rec.id)

    @transaction.atomic
    def update_work_record(self, record_id: int, patch: Dict[str, Any]) -> WorkRecord:
        rec = self.work_records.get_for_update(record_id)
        if rec is None:
            raise NotFoundError("Work record not found")
        if rec.status == WorkRecord.Status.PAID:
            raise ConflictError("Không thể sửa work record đã thanh toán")

        merged = {
            "employee_id": rec.employee_id,
            "work_date": rec.work_date,
            "work_type_id": rec.work_type_id,
            "work_item_id": rec.work_item_id,
            "quantity": rec.quantity,
            "is_overtime": rec.is_overtime,
            "overtime_quantity": rec.overtime_quantity,
            "overtime_hours": rec.overtime_hours,
            "notes": rec.notes,
        }
        # Giữ đơn giá snapshot khi không đổi loại công việc
        if patch.get("work_type_id", rec.work_type_id) == rec.work_type_id:
            merged["unit_price"] = rec.unit_price
        merged.update({k: v for k, v in patch.items() if k in _PATCHABLE})
        # Tắt tăng ca mà không gửi field OT → xoá field OT cũ
        if patch.get("is_overtime") is False:
            merged["overtime_quantity"] = None
            merged["overtime_hours"] = None

        old_item_id = rec.work_item_id
        row = self._build_row(merged, exclude_record_id=rec.id)
        rec = self.work_records.save_fields(rec, row)

        self.catalog.refresh_work_item_status(old_item_id)
        if rec.work_item_id != old_item_id:
            self.catalog.refresh_work_item_status(rec.work_item_id)
        logger.info("[work_record] updated #%s total=%s", rec.id, rec.total_amount)
        return self.work_records.get_by_id(rec.id)

    @transaction.atomic
    def delete_work_record(self, record_id: int) -> None:
        rec = self.work_records.get_for_update(record_id)
        if rec is None:
            raise NotFoundError("Work record not found")
        if rec.status == WorkRecord.Status.PAID:
            raise ConflictError("Không thể xoá work record đã thanh toán")
        item_id = rec.work_item_id
        self.work_records.delete(rec)
        self.catalog.refresh_work_item_status(item_id)
        logger.info("[work_record] deleted #%s", record_id)
