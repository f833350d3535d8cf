# -*- coding: utf-8 -*-
"""
Service cho catalog: WorkType, WorkItem, OvertimeConfig.

- WorkType: tên duy nhất (không phân biệt hoa thường) trong cùng department
- WorkItem: status là giá trị dẫn xuất (new / in_progress / done) từ Σ quantity đã làm so với target
- OvertimeConfig: tối đa 1 config / work type
    weld_count → overtime_price_per_weld >= 0, overtime_percentage = 0
    hourly     → overtime_percentage trong [0, 100], overtime_price_per_weld = 0
    daily      → không cho cấu hình tăng ca
"""
from __future__ import annotations
import logging
from decimal import Decimal
from typing import Any, Dict, Optional

from django.db import transaction
from django.db.models import ProtectedError

from payroll.exceptions import ConflictError, NotFoundError, ValidationError
from payroll.models import OvertimeConfig, WorkItem, WorkType
from payroll.repositories.catalog_repository import (
    OvertimeConfigRepository,
    WorkItemRepository,
    WorkTypeRepository,
)
from payroll.repositories.work_record_repository import WorkRecordRepository

logger = logging.getLogger(__name__)

ZERO = Decimal("0")
HUNDRED = Decimal("100")


def derive_work_item_status(quantity_made: Decimal, total_quantity: int) -> str:
    if quantity_made <= ZERO:
        return WorkItem.Status.NEW
    if total_quantity and quantity_made >= Decimal(total_quantity):
        return WorkItem.Status.DONE
    return WorkItem.Status.IN_PROGRESS


class CatalogService:
    def __init__(
        self,
        work_types: WorkTypeRepository,
        work_items: WorkItemRepository,
        overtime_configs: OvertimeConfigRepository,
        work_records: WorkRecordRepository,
    ):
        self.work_types = work_types
        self.work_items = work_items
        self.overtime_configs = overtime_configs
        self.work_records = work_records

    # ============== WorkType ==============
    @transaction.atomic
    def create_work_type(self, data: Dict[str, Any]) -> WorkType:
        name = (data.get("name") or "").strip()
        if not name:
            raise ValidationError("Work type name is required")
        if self.work_types.name_taken(name, data.get("department", ""), None):
            raise ValidationError("Tên loại công việc đã tồn tại trong phòng ban này")
        data = {**data, "name": name}
        wt = self.work_types.create(data)
        logger.info("[catalog] work type #%s '%s' (%s) created", wt.id, wt.name, wt.calculation_type)
        return wt

    @transaction.atomic
    def update_work_type(self, work_type_id: int, data: Dict[str, Any]) -> WorkType:
        wt = self.work_types.get_for_update(work_type_id)
        if wt is None:
            raise NotFoundError("Work type not found")
        name = (data.get("name", wt.name) or "").strip()
        department = data.get("department", wt.department)
        if not name:
            raise ValidationError("Work type name is required")
        if self.work_types.name_taken(name, department, exclude_id=wt.id):
            raise ValidationError("Tên loại công việc đã tồn tại trong phòng ban này")
        if "name" in data:
            data = {**data, "name": name}

        old_calc = wt.calculation_type
        wt = self.work_types.save_fields(wt, data)
        if wt.calculation_type != old_calc:
            self._normalize_overtime_config(wt)
        return wt

    def _normalize_overtime_config(self, wt: WorkType) -> None:
        cfg = self.overtime_configs.get_by_work_type(wt.id)
        if cfg is None:
            return
        if wt.calculation_type == WorkType.CalculationType.DAILY:
            self.overtime_configs.delete(cfg)
            logger.info("[catalog] overtime config of work type #%s removed (daily)", wt.id)
        elif wt.calculation_type == WorkType.CalculationType.WELD_COUNT:
            self.overtime_configs.save_fields(cfg, {"overtime_percentage": ZERO})
        else:
            self.overtime_configs.save_fields(cfg, {"overtime_price_per_weld": ZERO})

    @transaction.atomic
    def delete_work_type(self, work_type_id: int) -> None:
        wt = self.work_types.get_or_none(work_type_id)
        if wt is None:
            raise NotFoundError("Work type not found")
        try:
            self.work_types.delete(wt)
        except ProtectedError:
            raise ConflictError("Work type is used by work records")

    # ============== WorkItem ==============
    @transaction.atomic
    def create_work_item(self, data: Dict[str, Any]) -> WorkItem:
        data = {k: v for k, v in data.items() if k != "status"}
        if data.get("price_per_weld") is not None and data["price_per_weld"] < 0:
            raise ValidationError("price_per_weld must not be negative")
        item = self.work_items.create({**data, "status": WorkItem.Status.NEW})
        logger.info("[catalog] work item #%s '%s' created", item.id, item.name)
        return item

    @transaction.atomic
    def update_work_item(self, work_item_id: int, data: Dict[str, Any]) -> WorkItem:
        item = self.work_items.lock(work_item_id)
        if item is None:
            raise NotFoundError("Work item not found")
        data = {k: v for k, v in data.items() if k != "status"}
        if data.get("price_per_weld") is not None and data["price_per_weld"] < 0:
            raise ValidationError("price_per_weld must not be negative")
        if "total_quantity" in data:
            made = self.work_records.total_quantity_made(item.id)
            if data["total_quantity"] and made > Decimal(data["total_quantity"]):
                raise ValidationError(
                    f"Số lượng cần làm ({data['total_quantity']}) nhỏ hơn số lượng đã làm ({made})"
                )
        item = self.work_items.save_fields(item, data)
        return self.refresh_work_item_status(item.id)

    @transaction.atomic
    def delete_work_item(self, work_item_id: int) -> None:
        item = self.work_items.get_or_none(work_item_id)
        if item is None:
            raise NotFoundError("Work item not found")
        try:
            self.work_items.delete(item)
        except ProtectedError:
            raise ConflictError("Work item is used by work records")

    def quantity_made(self, work_item_id: int) -> Decimal:
        if self.work_items.get_or_none(work_item_id) is None:
            raise NotFoundError("Work item not found")
        return self.work_records.total_quantity_made(work_item_id)

    @transaction.atomic
    def refresh_work_item_status(self, work_item_id: Optional[int]) -> Optional[WorkItem]:
        """Tính lại status của WorkItem từ Σ (quantity + overtime_quantity) các work record."""
        if not work_item_id:
            return None
        item = self.work_items.lock(work_item_id)
        if item is None:
            return None
        made = self.work_records.total_quantity_made(item.id)
        new_status = derive_work_item_status(made, item.total_quantity)
        if new_status != item.status:
            logger.info("[catalog] work item #%s status %s → %s (made=%s/%s)",
                        item.id, item.status, new_status, made, item.total_quantity)
        return self.work_items.set_status(item, new_status)

    # ============== OvertimeConfig ==============
    def _overtime_values(self, wt: WorkType, data: Dict[str, Any],
                         current: Optional[OvertimeConfig] = None) -> Dict[str, Decimal]:
        calc = wt.calculation_type
        if calc == WorkType.CalculationType.WELD_COUNT:
            price = data.get("overtime_price_per_weld")
            if price is None:
                price = current.overtime_price_per_weld if current else None
            if price is None:
                raise ValidationError("overtime_price_per_weld is required for weld count work types")
            if Decimal(price) < ZERO:
                raise ValidationError("overtime_price_per_weld must not be negative")
            return {"overtime_price_per_weld": Decimal(price), "overtime_percentage": ZERO}
        if calc == WorkType.CalculationType.HOURLY:
            pct = data.get("overtime_percentage")
            if pct is None:
                pct = current.overtime_percentage if current else None
            if pct is None:
                raise ValidationError("overtime_percentage is required for hourly work types")
            if not (ZERO <= Decimal(pct) <= HUNDRED):
                raise ValidationError("overtime_percentage must be between 0 and 100")
            return {"overtime_price_per_weld": ZERO, "overtime_percentage": Decimal(pct)}
        raise ValidationError("Loại công việc tính theo ngày không hỗ trợ tăng ca")

    @transaction.atomic
    def create_overtime_config(self, work_type_id: int, data: Dict[str, Any]) -> OvertimeConfig:
        wt = self.work_types.get_or_none(work_type_id)
        if wt is None:
            raise NotFoundError("Work type not found")
        if self.overtime_configs.get_by_work_type(wt.id) is not None:
            raise ConflictError("Overtime config already exists for this work type")
        values = self._overtime_values(wt, data)
        cfg = self.overtime_configs.create({"work_type": wt, **values})
        logger.info("[catalog] overtime config for work type #%s: %s", wt.id, values)
        return cfg

    @transaction.atomic
    def update_overtime_config(self, work_type_id: int, data: Dict[str, Any]) -> OvertimeConfig:
        cfg = self.overtime_configs.get_by_work_type(work_type_id)
        if cfg is None:
            raise NotFoundError("Overtime config not found")
        values = self._overtime_values(cfg.work_type, data, current=cfg)
        return self.overtime_configs.save_fields(cfg, values)

    @transaction.atomic
    def delete_overtime_config(self, work_type_id: int) -> None:
        cfg = self.overtime_configs.get_by_work_type(work_type_id)
        if cfg is None:
            raise NotFoundError("Overtime config not found")
        self.overtime_configs.delete(cfg)
