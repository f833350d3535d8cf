# -*- coding: utf-8 -*-
from __future__ import annotations
from typing import Any, Dict, Optional

from django.db.models import QuerySet

from payroll.models import OvertimeConfig, WorkItem, WorkType
from payroll.services.registry import get_services


def get_work_type(work_type_id: int) -> Optional[WorkType]:
    return get_services().work_types.get_or_none(work_type_id)


def get_work_item(work_item_id: int) -> Optional[WorkItem]:
    return get_services().work_items.get_or_none(work_item_id)


def get_overtime_config(work_type_id: int) -> Optional[OvertimeConfig]:
    return get_services().overtime_configs.get_by_work_type(work_type_id)


def list_work_types(params: Dict[str, Any]) -> QuerySet[WorkType]:
    return get_services().work_types.list_work_types(
        department=(params.get("department") or "").strip() or None,
        calculation_type=(params.get("calculation_type") or "").strip() or None,
    )


def list_work_items(params: Dict[str, Any]) -> QuerySet[WorkItem]:
    return get_services().work_items.list_work_items(
        difficulty_level=(params.get("difficulty_level") or "").strip() or None,
        status=(params.get("status") or "").strip() or None,
    )


def list_overtime_configs() -> QuerySet[OvertimeConfig]:
    return get_services().overtime_configs.list_all()
