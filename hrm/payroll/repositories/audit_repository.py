from __future__ import annotations

from payroll.models import AuditLog
from .base import BaseRepository


class AuditLogRepository(BaseRepository[AuditLog]):
    model = AuditLog

    def for_object(self, object_type: str, object_id) -> list:
        return list(self.base_qs().filter(object_type=object_type, object_id=str(object_id)).order_by("id"))
