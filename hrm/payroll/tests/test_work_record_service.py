import pytest
from datetime import date
from decimal import Decimal
from django.core.exceptions import ValidationError

from payroll.exceptions import ConflictError, NotFoundError
from payroll.models import WorkItem, WorkRecord


@pytest.mark.django_db
def test_create_snapshots_price(make_record, master_data):
    rec = make_record(10)
    assert rec.unit_price == Decimal("1000.00")
    assert rec.total_amount == Decimal("20000.00")
    assert rec.status == WorkRecord.Status.NEW

    # đổi giá catalog không ảnh hưởng record đã ghi
    item = master_data["item"]
    item.price_per_weld = Decimal("9999.00")
    item.save()
    rec.refresh_from_db()
    assert rec.total_amount == Decimal("20000.00")


@pytest.mark.django_db
def test_work_item_status_follows_quantity_made(make_record, services, master_data):
    item = master_data["item"]
    rec = make_record(40)
    item.refresh_from_db()
    assert item.status == WorkItem.Status.IN_PROGRESS

    make_record(60)
    item.refresh_from_db()
    assert item.status == WorkItem.Status.DONE

    services.work_record_service.delete_work_record(rec.id)
    item.refresh_from_db()
    assert item.status == WorkItem.Status.IN_PROGRESS


@pytest.mark.django_db
def test_quantity_made_cannot_exceed_target(make_record):
    make_record(90)
    with pytest.raises(ValidationError):
        make_record(11)


@pytest.mark.django_db
def test_hours_per_day_limit(make_record):
    make_record(16, work_type="hourly")
    with pytest.raises(ValidationError):
        make_record(9, work_type="hourly")
    # ngày khác thì được
    make_record(9, work_type="hourly", work_date=date(2024, 3, 5))


@pytest.mark.django_db
def test_overtime_hours_count_towards_daily_limit(make_record, overtime_configs):
    make_record(20, work_type="hourly", is_overtime=True, overtime_hours=Decimal("4"))
    with pytest.raises(ValidationError):
        make_record(1, work_type="hourly")


@pytest.mark.django_db
def test_update_rescales_total(make_record, services):
    rec = make_record(8, work_type="hourly")
    assert rec.total_amount == Decimal("400000.00")
    rec = services.work_record_service.update_work_record(rec.id, {"quantity": Decimal("4")})
    assert rec.total_amount == Decimal("200000.00")
    assert rec.unit_price == Decimal("50000.00")


@pytest.mark.django_db
def test_update_excludes_itself_from_limits(make_record, services):
    rec = make_record(20, work_type="hourly")
    rec = services.work_record_service.update_work_record(rec.id, {"quantity": Decimal("24")})
    assert rec.quantity == Decimal("24")


@pytest.mark.django_db
def test_paid_record_is_immutable(make_record, services):
    rec = make_record(5)
    WorkRecord.objects.filter(id=rec.id).update(status=WorkRecord.Status.PAID)
    with pytest.raises(ConflictError):
        services.work_record_service.update_work_record(rec.id, {"quantity": Decimal("1")})
    with pytest.raises(ConflictError):
        services.work_record_service.delete_work_record(rec.id)


@pytest.mark.django_db
def test_unknown_references(services, master_data):
    with pytest.raises(NotFoundError):
        services.work_record_service.create_work_record({
            "employee_id": 999999, "work_date": date(2024, 3, 1),
            "work_type_id": master_data["daily"].id, "quantity": Decimal("1"),
        })
    with pytest.raises(NotFoundError):
        services.work_record_service.update_work_record(999999, {"quantity": Decimal("1")})


@pytest.mark.django_db
def test_weld_record_with_unknown_work_item_is_invalid(services, master_data):
    with pytest.raises(ValidationError):
        services.work_record_service.create_work_record({
            "employee_id": master_data["emp"].id, "work_date": date(2024, 3, 1),
            "work_type_id": master_data["weld"].id, "work_item_id": 999999, "quantity": Decimal("1"),
        })
    assert not WorkRecord.objects.exists()


@pytest.mark.django_db
def test_weld_count_requires_work_item(services, master_data):
    with pytest.raises(ValidationError):
        services.work_record_service.create_work_record({
            "employee_id": master_data["emp"].id, "work_date": date(2024, 3, 1),
            "work_type_id": master_data["weld"].id, "quantity": Decimal("1"),
        })
