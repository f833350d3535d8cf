# -*- coding: utf-8 -*-
"""
Chuẩn hoá query params (string → list/int/date) cho selector.
"""
from __future__ import annotations
from datetime import date
from decimal import Decimal, InvalidOperation
from typing import Any, List, Optional

from django.core.exceptions import ValidationError
from django.utils.dateparse import parse_date


def as_int_list(v: Any) -> List[int]:
    if v is None:
        return []
    if isinstance(v, (list, tuple, set)):
        raw = []
        for x in v:
            if x is None:
                continue
            raw.extend(str(x).split(","))
    else:
        raw = str(v).split(",")
    out = []
    for s in raw:
        s = s.strip()
        if s.isdigit():
            out.append(int(s))
    return out


def as_str_list(v: Any) -> List[str]:
    if v is None:
        return []
    if isinstance(v, (list, tuple, set)):
        raw = [str(x) for x in v if x is not None]
    else:
        raw = str(v).split(",")
    return [s.strip() for s in raw if s and s.strip()]


def as_int(v: Any, name: str, required: bool = False) -> Optional[int]:
    if v in (None, ""):
        if required:
            raise ValidationError(f"{name} is required")
        return None
    try:
        return int(v)
    except (TypeError, ValueError):
        raise ValidationError(f"{name} must be an integer")


def as_date(v: Any, name: str) -> Optional[date]:
    if v in (None, ""):
        return None
    if isinstance(v, date):
        return v
    try:
        parsed = parse_date(str(v))
    except ValueError:
        parsed = None
    if parsed is None:
        raise ValidationError(f"{name} must be a date (YYYY-MM-DD)")
    return parsed


def as_decimal(v: Any, name: str) -> Optional[Decimal]:
    if v in (None, ""):
        return None
    if isinstance(v, Decimal):
        return v
    try:
        # float → str trước để tránh sai số nhị phân
        return Decimal(str(v))
    except (InvalidOperation, ValueError):
        raise ValidationError(f"{name} must be a number")
