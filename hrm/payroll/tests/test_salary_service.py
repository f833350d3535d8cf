import pytest
from datetime import date
from decimal import Decimal
from django.core.exceptions import ValidationError

from payroll.exceptions import ConflictError, NotFoundError
from payroll.models import Employee, MonthlySalary, WorkRecord
from payroll.services.registry import build_services
from payroll.services.salary_service import detect_period


@pytest.mark.django_db
def test_same_day_records_count_as_one_work_day(make_record, services, master_data):
    make_record(10)
    make_record(5)
    ms = services.aggregator.calculate_monthly_salary(employee_id=master_data["emp"].id, year=2024, month=3)
    assert ms.total_amount == Decimal("30000.00")
    assert ms.total_work_days == 1
    assert ms.status == MonthlySalary.Status.DRAFT
    assert ms.work_records.count() == 2


@pytest.mark.django_db
def test_distinct_dates_are_counted(make_record, services, master_data):
    make_record(1, work_date=date(2024, 3, 4))
    make_record(1, work_date=date(2024, 3, 5))
    make_record(1, work_date=date(2024, 3, 5))
    ms = services.aggregator.calculate_monthly_salary(employee_id=master_data["emp"].id, year=2024, month=3)
    assert ms.total_work_days == 2


@pytest.mark.django_db
def test_default_salary_when_no_records(services, master_data):
    ms = services.aggregator.calculate_monthly_salary(employee_id=master_data["emp_salaried"].id, year=2024, month=3)
    assert ms.total_amount == Decimal("5000000.00")
    assert ms.total_work_days == 0
    assert ms.work_records.count() == 0


@pytest.mark.django_db
def test_default_salary_fallback_can_be_disabled(master_data):
    svc = build_services(default_salary_fallback=False)
    with pytest.raises(ValidationError):
        svc.aggregator.calculate_monthly_salary(employee_id=master_data["emp_salaried"].id, year=2024, month=3)


@pytest.mark.django_db
def test_no_data_and_no_default_salary(services, master_data):
    with pytest.raises(ValidationError):
        services.aggregator.calculate_monthly_salary(employee_id=master_data["emp"].id, year=2024, month=3)


@pytest.mark.django_db
def test_recalculation_is_idempotent(make_record, services, master_data):
    emp_id = master_data["emp"].id
    make_record(10)
    first = services.aggregator.calculate_monthly_salary(employee_id=emp_id, year=2024, month=3)
    second = services.aggregator.calculate_monthly_salary(employee_id=emp_id, year=2024, month=3)
    assert first.id == second.id
    assert second.total_amount == first.total_amount
    assert MonthlySalary.objects.filter(employee_id=emp_id, year=2024, month=3).count() == 1

    # record mới trong tháng → draft được tính lại tại chỗ
    make_record(5, work_date=date(2024, 3, 10))
    third = services.aggregator.calculate_monthly_salary(employee_id=emp_id, year=2024, month=3)
    assert third.id == first.id
    assert third.total_amount == Decimal("30000.00")
    assert third.total_work_days == 2
    assert third.work_records.count() == 2


@pytest.mark.django_db
def test_paid_period_cannot_be_recalculated(make_record, services, master_data):
    emp_id = master_data["emp"].id
    make_record(10)
    ms = services.aggregator.calculate_monthly_salary(employee_id=emp_id, year=2024, month=3)
    services.settlement.pay_monthly_salary(ms.id)
    with pytest.raises(ConflictError):
        services.aggregator.calculate_monthly_salary(employee_id=emp_id, year=2024, month=3)


@pytest.mark.django_db
def test_auto_detect_period_from_new_records(make_record, services, master_data):
    make_record(1, work_date=date(2024, 2, 28))
    make_record(1, work_date=date(2024, 3, 1))
    make_record(1, work_date=date(2024, 3, 2))
    ms = services.aggregator.calculate_monthly_salary(employee_id=master_data["emp"].id)
    assert (ms.year, ms.month) == (2024, 3)
    # tự nhận kỳ lấy mọi record chưa thanh toán
    assert ms.work_records.count() == 3
    assert ms.total_work_days == 3


@pytest.mark.django_db
def test_auto_detect_conflicts_with_existing_draft(make_record, services, master_data):
    emp_id = master_data["emp"].id
    make_record(1)
    services.aggregator.calculate_monthly_salary(employee_id=emp_id)
    make_record(1, work_date=date(2024, 3, 6))
    with pytest.raises(ConflictError):
        services.aggregator.calculate_monthly_salary(employee_id=emp_id)


@pytest.mark.django_db
def test_auto_detect_without_records(services, master_data):
    with pytest.raises(ValidationError):
        services.aggregator.calculate_monthly_salary(employee_id=master_data["emp_salaried"].id)


@pytest.mark.django_db
def test_invalid_arguments(services, master_data):
    emp_id = master_data["emp"].id
    with pytest.raises(ValidationError):
        services.aggregator.calculate_monthly_salary(employee_id=emp_id, year=2024)
    with pytest.raises(ValidationError):
        services.aggregator.calculate_monthly_salary(employee_id=emp_id, year=2024, month=13)
    with pytest.raises(NotFoundError):
        services.aggregator.calculate_monthly_salary(employee_id=999999, year=2024, month=3)


def test_detect_period_tie_goes_to_latest_month():
    recs = [
        WorkRecord(work_date=date(2024, 1, 5)),
        WorkRecord(work_date=date(2024, 2, 5)),
    ]
    assert detect_period(recs) == (2024, 2)


@pytest.mark.django_db
def test_calculate_for_all_isolates_failures(make_record, services, master_data):
    make_record(10)
    Employee.objects.create(code="E003", first_name="Le", last_name="Van C", department="Welding")
    Employee.objects.create(code="E004", first_name="Pham", last_name="D", status=Employee.Status.INACTIVE,
                            salary=Decimal("1000"))

    result = services.aggregator.calculate_monthly_salary_for_all(year=2024, month=3)
    assert result["total"] == 3
    assert result["success"] == 2
    assert result["failed"] == 1
    failed = [r for r in result["results"] if not r["success"]]
    assert failed[0]["employee_name"] == "Le Van C"
    assert MonthlySalary.objects.filter(year=2024, month=3).count() == 2
