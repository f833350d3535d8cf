# -*- coding: utf-8 -*-
"""
Base repository (thuần DB):
- get / filter / create / save_fields / delete cho một model
- select_for_update khi backend hỗ trợ
- KHÔNG chứa rule nghiệp vụ, service quyết định.
"""
from __future__ import annotations
from typing import Any, Dict, Generic, Iterable, List, Optional, Type, TypeVar

from django.db import connection, models, transaction
from django.db.models import QuerySet

M = TypeVar("M", bound=models.Model)


def supports_for_update() -> bool:
    return getattr(connection.features, "has_select_for_update", False)


def for_update(qs: QuerySet) -> QuerySet:
    return qs.select_for_update() if supports_for_update() else qs


class BaseRepository(Generic[M]):
    model: Type[M]

    def base_qs(self) -> QuerySet[M]:
        return self.model.objects.all()

    def get_by_id(self, obj_id: int) -> M:
        return self.base_qs().get(id=obj_id)

    def get_or_none(self, obj_id: int) -> Optional[M]:
        return self.base_qs().filter(id=obj_id).first()

    def get_for_update(self, obj_id: int) -> Optional[M]:
        return for_update(self.model.objects.filter(id=obj_id)).first()

    @transaction.atomic
    def create(self, data: Dict[str, Any]) -> M:
        return self.model.objects.create(**data)

    @transaction.atomic
    def save_fields(self, obj: M, patch: Dict[str, Any], allowed: Optional[Iterable[str]] = None) -> M:
        fields: List[str] = []
        for k, v in patch.items():
            if (allowed is None) or (k in allowed):
                setattr(obj, k, v)
                fields.append(k)
        if fields:
            fields.append("updated_at")
            obj.save(update_fields=fields)
        return obj

    @transaction.atomic
    def delete(self, obj: M) -> None:
        obj.delete()
