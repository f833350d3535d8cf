# -*- coding: utf-8 -*-
"""
Repository cho catalog: WorkType, WorkItem, OvertimeConfig (thuần DB).
"""
from __future__ import annotations
from decimal import Decimal
from typing import Optional

from django.db import transaction
from django.db.models import DecimalField, QuerySet, Sum, Value
from django.db.models.functions import Coalesce

from payroll.models import WorkType, WorkItem, OvertimeConfig
from .base import BaseRepository, for_update

_DEC = DecimalField(max_digits=20, decimal_places=2)


class WorkTypeRepository(BaseRepository[WorkType]):
    model = WorkType

    def list_work_types(self, department: Optional[str] = None, calculation_type: Optional[str] = None) -> QuerySet[WorkType]:
        qs = self.base_qs()
        if department:
            qs = qs.filter(department=department)
        if calculation_type:
            qs = qs.filter(calculation_type=calculation_type)
        return qs.order_by("department", "name")

    def name_taken(self, name: str, department: str, exclude_id: Optional[int] = None) -> bool:
        qs = self.base_qs().filter(name__iexact=name, department=department)
        if exclude_id:
            qs = qs.exclude(id=exclude_id)
        return qs.exists()


class WorkItemRepository(BaseRepository[WorkItem]):
    model = WorkItem

    def list_work_items(self, difficulty_level: Optional[str] = None, status: Optional[str] = None) -> QuerySet[WorkItem]:
        qs = self.base_qs().annotate(
            quantity_made=Coalesce(Sum("work_records__quantity"), Value(Decimal("0")), output_field=_DEC)
            + Coalesce(Sum("work_records__overtime_quantity"), Value(Decimal("0")), output_field=_DEC)
        )
        if difficulty_level:
            qs = qs.filter(difficulty_level=difficulty_level)
        if status:
            qs = qs.filter(status=status)
        return qs.order_by("difficulty_level", "name")

    def lock(self, work_item_id: int) -> Optional[WorkItem]:
        return for_update(self.model.objects.filter(id=work_item_id)).first()

    @transaction.atomic
    def set_status(self, obj: WorkItem, status: str) -> WorkItem:
        if obj.status != status:
            obj.status = status
            obj.save(update_fields=["status", "updated_at"])
        return obj


class OvertimeConfigRepository(BaseRepository[OvertimeConfig]):
    model = OvertimeConfig

    def base_qs(self) -> QuerySet[OvertimeConfig]:
        return OvertimeConfig.objects.select_related("work_type")

    def get_by_work_type(self, work_type_id: int) -> Optional[OvertimeConfig]:
        return self.base_qs().filter(work_type_id=work_type_id).first()

    def list_all(self) -> QuerySet[OvertimeConfig]:
        return self.base_qs().order_by("work_type__department", "work_type__name")
