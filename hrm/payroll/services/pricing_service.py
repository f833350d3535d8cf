# -*- coding: utf-8 -*-
"""
Pricing Calculator cho WorkRecord.

- compute_work_record_amount: hàm thuần (không chạm DB), trả PricingResult
- validate_overtime: rule loại trừ giữa overtime_quantity (weld_count) và overtime_hours (hourly)
- price_work_record: wrapper resolve WorkType/WorkItem/OvertimeConfig qua repository rồi gọi hàm thuần

Công thức:
  weld_count: base = q × welds_per_item × price_per_weld
              OT   = ot_q × welds_per_item × (price_per_weld + ot_price_per_weld)
  hourly:     base = q × unit_price
              OT   = ot_h × unit_price × (1 + pct/100)
  daily:      base = q × unit_price (không có phụ trội)
"""
from __future__ import annotations
from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Optional, Tuple

from payroll.exceptions import NotFoundError, ValidationError
from payroll.models import WorkType

ZERO = Decimal("0")
HUNDRED = Decimal("100")
CENT = Decimal("0.01")

CalcType = WorkType.CalculationType


@dataclass(frozen=True)
class OvertimeInput:
    is_overtime: bool = False
    overtime_quantity: Optional[Decimal] = None
    overtime_hours: Optional[Decimal] = None


@dataclass(frozen=True)
class PricingResult:
    unit_price: Decimal
    base_amount: Decimal
    overtime_amount: Decimal
    total_amount: Decimal


def _money(v: Decimal) -> Decimal:
    return v.quantize(CENT, rounding=ROUND_HALF_UP)


def _d(v: Any) -> Decimal:
    if v is None:
        return ZERO
    if isinstance(v, Decimal):
        return v
    return Decimal(str(v))


def validate_overtime(calculation_type: str, overtime: Optional[OvertimeInput]) -> OvertimeInput:
    """
    Trả về OvertimeInput đã chuẩn hoá:
    - is_overtime=False → xoá cả 2 field OT
    - daily không nhận field OT
    - weld_count chỉ nhận overtime_quantity, hourly chỉ nhận overtime_hours
    - is_overtime=True thì field OT đúng mode phải > 0
    """
    ot = overtime or OvertimeInput()
    ot_q = ot.overtime_quantity
    ot_h = ot.overtime_hours

    if ot_q is not None and ot_h is not None:
        raise ValidationError("Only one of overtime_quantity / overtime_hours may be set")

    if not ot.is_overtime:
        return OvertimeInput(is_overtime=False)

    if calculation_type == CalcType.DAILY:
        if ot_q is not None or ot_h is not None:
            raise ValidationError("Daily work types do not accept overtime quantity or hours")
        return OvertimeInput(is_overtime=True)

    if calculation_type == CalcType.WELD_COUNT:
        if ot_h is not None:
            raise ValidationError("Weld count work types use overtime_quantity, not overtime_hours")
        if ot_q is None or _d(ot_q) <= ZERO:
            raise ValidationError("overtime_quantity must be greater than 0 when is_overtime is set")
        return OvertimeInput(is_overtime=True, overtime_quantity=_d(ot_q))

    if calculation_type == CalcType.HOURLY:
        if ot_q is not None:
            raise ValidationError("Hourly work types use overtime_hours, not overtime_quantity")
        if ot_h is None or _d(ot_h) <= ZERO:
            raise ValidationError("overtime_hours must be greater than 0 when is_overtime is set")
        return OvertimeInput(is_overtime=True, overtime_hours=_d(ot_h))

    raise ValidationError(f"Unknown calculation type: {calculation_type}")


def compute_work_record_amount(
    work_type,
    quantity,
    work_item=None,
    overtime: Optional[OvertimeInput] = None,
    overtime_config=None,
    unit_price=None,
) -> PricingResult:
    """
    work_type: object có `calculation_type`, `unit_price`
    work_item: object có `price_per_weld`, `welds_per_item` (bắt buộc với weld_count)
    overtime_config: object có `overtime_price_per_weld`, `overtime_percentage` (tuỳ chọn)
    unit_price: override đơn giá cho hourly/daily
    """
    q = _d(quantity)
    if q <= ZERO:
        raise ValidationError("Quantity must be greater than 0")

    calc = work_type.calculation_type
    ot = validate_overtime(calc, overtime)
    overtime_amount = ZERO

    if calc == CalcType.WELD_COUNT:
        if work_item is None:
            raise ValidationError("Work item is required for weld count calculation")
        price = _d(work_item.price_per_weld)
        welds = _d(work_item.welds_per_item)
        base = q * welds * price
        ot_price = _d(getattr(overtime_config, "overtime_price_per_weld", None))
        if ot.is_overtime and ot.overtime_quantity and ot_price > ZERO:
            overtime_amount = ot.overtime_quantity * welds * (price + ot_price)
    elif calc in (CalcType.HOURLY, CalcType.DAILY):
        price = _d(unit_price) if unit_price is not None else _d(work_type.unit_price)
        if price < ZERO:
            raise ValidationError("Unit price must not be negative")
        base = q * price
        pct = _d(getattr(overtime_config, "overtime_percentage", None))
        if calc == CalcType.HOURLY and ot.is_overtime and ot.overtime_hours and pct > ZERO:
            overtime_amount = ot.overtime_hours * price * (1 + pct / HUNDRED)
    else:
        raise ValidationError(f"Unknown calculation type: {calc}")

    base = _money(base)
    overtime_amount = _money(overtime_amount)
    return PricingResult(
        unit_price=_money(price),
        base_amount=base,
        overtime_amount=overtime_amount,
        total_amount=base + overtime_amount,
    )


def price_work_record(
    *,
    work_types,
    work_items,
    overtime_configs,
    work_type_id: int,
    quantity,
    work_item_id: Optional[int] = None,
    overtime: Optional[OvertimeInput] = None,
    unit_price=None,
    lock_work_item: bool = False,
) -> Tuple[Any, Any, PricingResult]:
    """
    Resolve catalog rồi tính tiền. Trả (work_type, work_item|None, PricingResult).
    work_item chỉ được resolve cho weld_count; với loại khác luôn là None.
    """
    work_type = work_types.get_or_none(work_type_id)
    if work_type is None:
        raise NotFoundError("Work type not found")

    work_item = None
    if work_type.calculation_type == CalcType.WELD_COUNT:
        if not work_item_id:
            raise ValidationError("Work item is required for weld count calculation")
        work_item = work_items.lock(work_item_id) if lock_work_item else work_items.get_or_none(work_item_id)
        if work_item is None:
            raise ValidationError("Work item not found")

    config = None
    if overtime and overtime.is_overtime:
        config = overtime_configs.get_by_work_type(work_type.id)

    result = compute_work_record_amount(
        work_type, quantity,
        work_item=work_item,
        overtime=overtime,
        overtime_config=config,
        unit_price=unit_price,
    )
    return work_type, work_item, result
