import pytest
from datetime import date, timedelta
from decimal import Decimal
from django.core.exceptions import ValidationError
from django.utils import timezone

from payroll.exceptions import ConflictError, NotFoundError
from payroll.models import MonthlySalary, WorkRecord


def _salary(emp, status=MonthlySalary.Status.DRAFT, total="0", allowances="0", days=0, **extra):
    extra.setdefault("calculated_at", timezone.now())
    return MonthlySalary.objects.create(
        employee=emp, year=2024, month=3, status=status,
        total_amount=Decimal(total), allowances=Decimal(allowances), total_work_days=days,
        **extra,
    )


@pytest.mark.django_db
def test_pay_single_draft_marks_records_paid(make_record, services, master_data):
    rec = make_record(10)
    ms = services.aggregator.calculate_monthly_salary(employee_id=master_data["emp"].id, year=2024, month=3)
    paid = services.settlement.pay_monthly_salary(ms.id, actor_id=7)

    assert paid.id == ms.id
    assert paid.status == MonthlySalary.Status.PAID
    assert paid.paid_at is not None
    rec.refresh_from_db()
    assert rec.status == WorkRecord.Status.PAID
    logs = services.audit_logs.for_object("monthly_salary", ms.id)
    assert [l.action for l in logs] == ["monthly_salary.calculate", "monthly_salary.pay"]
    assert logs[-1].actor == 7
    assert logs[-1].before["status"] == "draft" and logs[-1].after["status"] == "paid"


@pytest.mark.django_db
def test_pay_twice_is_rejected(make_record, services, master_data):
    make_record(10)
    ms = services.aggregator.calculate_monthly_salary(employee_id=master_data["emp"].id, year=2024, month=3)
    services.settlement.pay_monthly_salary(ms.id)
    with pytest.raises(ConflictError):
        services.settlement.pay_monthly_salary(ms.id)


@pytest.mark.django_db
def test_pay_merges_all_settlements_of_period(services, master_data):
    emp = master_data["emp"]
    d1 = _salary(emp, total="100", allowances="10", days=2)
    d2 = _salary(emp, total="100", allowances="10", days=3, calculated_at=timezone.now() + timedelta(hours=1))
    p = _salary(emp, status=MonthlySalary.Status.PAID, total="50", days=1, paid_at=timezone.now())

    merged = services.settlement.pay_monthly_salary(d1.id)

    assert merged.total_amount == Decimal("250")
    assert merged.allowances == Decimal("20")
    assert merged.total_work_days == 6
    assert merged.status == MonthlySalary.Status.PAID
    rows = MonthlySalary.objects.filter(employee=emp, year=2024, month=3)
    assert rows.count() == 1
    assert rows.get().id == merged.id
    assert not MonthlySalary.objects.filter(id__in=[d1.id, d2.id, p.id]).exists()


@pytest.mark.django_db
def test_merge_links_union_of_records(make_record, services, master_data):
    emp = master_data["emp"]
    r1 = make_record(10, work_date=date(2024, 3, 4))
    first = services.aggregator.calculate_monthly_salary(employee_id=emp.id, year=2024, month=3)
    services.settlement.pay_monthly_salary(first.id)

    r2 = make_record(5, work_date=date(2024, 3, 20))
    second = services.aggregator.calculate_monthly_salary(employee_id=emp.id, year=2024, month=3)
    merged = services.settlement.pay_monthly_salary(second.id)

    assert set(merged.work_records.values_list("id", flat=True)) == {r1.id, r2.id}
    assert merged.total_amount == Decimal("30000.00")
    assert WorkRecord.objects.filter(id__in=[r1.id, r2.id], status=WorkRecord.Status.PAID).count() == 2


@pytest.mark.django_db
def test_pay_deleted_settlement_is_not_found(make_record, services, master_data):
    make_record(10)
    ms = services.aggregator.calculate_monthly_salary(employee_id=master_data["emp"].id, year=2024, month=3)
    services.settlement.delete_monthly_salary(ms.id)
    with pytest.raises(NotFoundError):
        services.settlement.pay_monthly_salary(ms.id)


@pytest.mark.django_db
def test_delete_paid_reverts_records(make_record, services, master_data):
    rec = make_record(10)
    ms = services.aggregator.calculate_monthly_salary(employee_id=master_data["emp"].id, year=2024, month=3)
    services.settlement.pay_monthly_salary(ms.id)
    services.settlement.delete_monthly_salary(ms.id)

    rec.refresh_from_db()
    assert rec.status == WorkRecord.Status.NEW
    assert not MonthlySalary.objects.filter(id=ms.id).exists()
    # record quay lại được tính lương
    again = services.aggregator.calculate_monthly_salary(employee_id=master_data["emp"].id, year=2024, month=3)
    assert again.total_amount == Decimal("20000.00")


@pytest.mark.django_db
def test_delete_missing_settlement(services, db):
    with pytest.raises(NotFoundError):
        services.settlement.delete_monthly_salary(999999)


@pytest.mark.django_db
def test_update_allowances(services, master_data):
    draft = _salary(master_data["emp"], total="100")
    ms = services.settlement.update_allowances(draft.id, Decimal("15.50"))
    assert ms.allowances == Decimal("15.50")

    paid = _salary(master_data["emp_salaried"], status=MonthlySalary.Status.PAID, total="100")
    ms = services.settlement.update_allowances(paid.id, "20")
    assert ms.allowances == Decimal("20")

    with pytest.raises(ValidationError):
        services.settlement.update_allowances(draft.id, Decimal("-1"))
    with pytest.raises(NotFoundError):
        services.settlement.update_allowances(999999, Decimal("1"))
