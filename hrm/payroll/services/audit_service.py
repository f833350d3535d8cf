# -*- coding: utf-8 -*-
from __future__ import annotations
import logging
from decimal import Decimal
from typing import Any, Dict, Optional

from payroll.repositories.audit_repository import AuditLogRepository

logger = logging.getLogger(__name__)


def salary_snapshot(ms) -> Optional[Dict[str, Any]]:
    """Snapshot JSON-safe của MonthlySalary cho AuditLog.before/after."""
    if ms is None:
        return None
    return {
        "id": ms.id,
        "employee_id": ms.employee_id,
        "year": ms.year,
        "month": ms.month,
        "status": ms.status,
        "total_work_days": ms.total_work_days,
        "total_amount": str(Decimal(ms.total_amount)),
        "allowances": str(Decimal(ms.allowances)),
    }


class AuditService:
    def __init__(self, logs: AuditLogRepository):
        self.logs = logs

    def log_action(self, *, actor: Optional[int], action: str, object_type: str, object_id,
                   before=None, after=None):
        entry = self.logs.create({
            "actor": actor, "action": action, "object_type": object_type,
            "object_id": str(object_id), "before": before, "after": after,
        })
        logger.info("[audit] %s %s#%s by %s", action, object_type, object_id, actor)
        return entry
