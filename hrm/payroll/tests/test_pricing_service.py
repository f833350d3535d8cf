import pytest
from decimal import Decimal
from types import SimpleNamespace
from django.core.exceptions import ValidationError

from payroll.exceptions import NotFoundError
from payroll.services.pricing_service import (
    OvertimeInput, compute_work_record_amount, price_work_record, validate_overtime,
)

WELD = SimpleNamespace(calculation_type="weld_count", unit_price=Decimal("0"))
HOURLY = SimpleNamespace(calculation_type="hourly", unit_price=Decimal("50000"))
DAILY = SimpleNamespace(calculation_type="daily", unit_price=Decimal("300000"))
ITEM = SimpleNamespace(price_per_weld=Decimal("1000"), welds_per_item=2)


def test_weld_count_base_amount():
    r = compute_work_record_amount(WELD, Decimal("10"), work_item=ITEM)
    assert r.total_amount == Decimal("20000")
    assert r.unit_price == Decimal("1000")
    assert r.overtime_amount == Decimal("0")


def test_weld_count_with_overtime():
    cfg = SimpleNamespace(overtime_price_per_weld=Decimal("500"), overtime_percentage=Decimal("0"))
    ot = OvertimeInput(is_overtime=True, overtime_quantity=Decimal("3"))
    r = compute_work_record_amount(WELD, Decimal("10"), work_item=ITEM, overtime=ot, overtime_config=cfg)
    # 10×2×1000 + 3×2×(1000+500)
    assert r.base_amount == Decimal("20000")
    assert r.overtime_amount == Decimal("9000")
    assert r.total_amount == Decimal("29000")


def test_weld_count_overtime_without_config_adds_nothing():
    ot = OvertimeInput(is_overtime=True, overtime_quantity=Decimal("3"))
    r = compute_work_record_amount(WELD, Decimal("10"), work_item=ITEM, overtime=ot)
    assert r.total_amount == Decimal("20000")


def test_weld_count_requires_work_item():
    with pytest.raises(ValidationError):
        compute_work_record_amount(WELD, Decimal("1"))


def test_hourly_with_overtime_percentage():
    cfg = SimpleNamespace(overtime_price_per_weld=Decimal("0"), overtime_percentage=Decimal("50"))
    ot = OvertimeInput(is_overtime=True, overtime_hours=Decimal("2"))
    r = compute_work_record_amount(HOURLY, Decimal("8"), overtime=ot, overtime_config=cfg)
    # 8×50000 + 2×50000×1.5
    assert r.base_amount == Decimal("400000")
    assert r.overtime_amount == Decimal("150000")
    assert r.total_amount == Decimal("550000")


def test_hourly_unit_price_override():
    r = compute_work_record_amount(HOURLY, Decimal("1.5"), unit_price=Decimal("40000"))
    assert r.unit_price == Decimal("40000")
    assert r.total_amount == Decimal("60000")


def test_daily_has_no_overtime_surcharge():
    r = compute_work_record_amount(DAILY, Decimal("1"), overtime=OvertimeInput(is_overtime=True))
    assert r.total_amount == Decimal("300000")


@pytest.mark.parametrize("qty", [Decimal("0"), Decimal("-1")])
def test_quantity_must_be_positive(qty):
    with pytest.raises(ValidationError):
        compute_work_record_amount(DAILY, qty)


def test_overtime_fields_are_exclusive():
    with pytest.raises(ValidationError):
        validate_overtime("hourly", OvertimeInput(is_overtime=True, overtime_quantity=Decimal("1")))
    with pytest.raises(ValidationError):
        validate_overtime("weld_count", OvertimeInput(is_overtime=True, overtime_hours=Decimal("1")))
    with pytest.raises(ValidationError):
        validate_overtime("daily", OvertimeInput(is_overtime=True, overtime_hours=Decimal("1")))


def test_overtime_flag_requires_positive_field():
    with pytest.raises(ValidationError):
        validate_overtime("hourly", OvertimeInput(is_overtime=True))


def test_overtime_fields_cleared_when_flag_off():
    ot = validate_overtime("hourly", OvertimeInput(is_overtime=False, overtime_hours=Decimal("2")))
    assert ot.overtime_hours is None and ot.overtime_quantity is None


@pytest.mark.django_db
def test_price_work_record_resolves_catalog(services, master_data, overtime_configs):
    wt, item, r = price_work_record(
        work_types=services.work_types, work_items=services.work_items, overtime_configs=services.overtime_configs,
        work_type_id=master_data["weld"].id, work_item_id=master_data["item"].id, quantity=Decimal("5"),
        overtime=OvertimeInput(is_overtime=True, overtime_quantity=Decimal("1")),
    )
    assert item.id == master_data["item"].id
    # 5×2×1000 + 1×2×1500
    assert r.total_amount == Decimal("13000")


@pytest.mark.django_db
def test_price_work_record_unknown_ids(services, master_data):
    kwargs = dict(work_types=services.work_types, work_items=services.work_items,
                  overtime_configs=services.overtime_configs, quantity=Decimal("1"))
    with pytest.raises(NotFoundError):
        price_work_record(work_type_id=999999, **kwargs)
    with pytest.raises(ValidationError):
        price_work_record(work_type_id=master_data["weld"].id, work_item_id=999999, **kwargs)
