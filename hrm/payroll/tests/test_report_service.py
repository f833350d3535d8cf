import pytest
from datetime import date
from decimal import Decimal
from django.core.exceptions import ValidationError

from payroll.services.report_service import DEFAULT_SALARY_LABEL, iso_week_range


def test_iso_week_range():
    assert iso_week_range(2024, 10) == (date(2024, 3, 4), date(2024, 3, 10))
    with pytest.raises(ValidationError):
        iso_week_range(2024, 54)
    with pytest.raises(ValidationError):
        iso_week_range(2023, 53)  # 2023 chỉ có 52 tuần ISO


@pytest.fixture
def paid_march(make_record, services, master_data):
    make_record(10, work_date=date(2024, 3, 4))
    make_record(5, work_date=date(2024, 3, 4))
    make_record(8, work_type="hourly", work_date=date(2024, 3, 5))
    make_record(1, work_type="hourly", work_date=date(2024, 3, 20))
    ms = services.aggregator.calculate_monthly_salary(employee_id=master_data["emp"].id, year=2024, month=3)
    services.settlement.update_allowances(ms.id, Decimal("100000"))
    services.settlement.pay_monthly_salary(ms.id)

    default = services.aggregator.calculate_monthly_salary(
        employee_id=master_data["emp_salaried"].id, year=2024, month=3,
    )
    services.settlement.pay_monthly_salary(default.id)
    return ms


@pytest.mark.django_db
def test_weekly_report_uses_paid_records(paid_march, make_record, services):
    # record chưa thanh toán không được tính
    make_record(1, work_date=date(2024, 3, 6))
    rep = services.reports.get_weekly_report(year=2024, week=10)

    assert rep["period"] == "Week 10, 2024"
    assert rep["total_employees"] == 1
    assert rep["total_work_days"] == 2
    assert rep["total_amount"] == Decimal("430000.00")
    assert rep["by_department"] == [
        {"department": "Welding", "total_amount": Decimal("430000.00"), "total_work_days": 2},
    ]
    by_type = {r["work_type_name"]: r for r in rep["by_work_type"]}
    assert by_type["Hàn"]["count"] == 2
    assert by_type["Hàn"]["total_amount"] == Decimal("30000.00")
    assert by_type["Lắp ráp"]["total_amount"] == Decimal("400000.00")


@pytest.mark.django_db
def test_monthly_report_from_paid_settlements(paid_march, services):
    rep = services.reports.get_monthly_report(year=2024, month=3)

    assert rep["period"] == "3/2024"
    assert rep["total_employees"] == 2
    assert rep["total_work_days"] == 3
    assert rep["total_allowances"] == Decimal("100000.00")
    # 30,000 + 450,000 + 100,000 phụ cấp + 5,000,000 lương mặc định
    assert rep["total_amount"] == Decimal("5580000.00")
    by_type = {r["work_type_name"]: r for r in rep["by_work_type"]}
    assert by_type[DEFAULT_SALARY_LABEL]["total_amount"] == Decimal("5000000.00")
    assert by_type[DEFAULT_SALARY_LABEL]["count"] == 1
    assert by_type["Lắp ráp"]["count"] == 2
    depts = {r["department"]: r for r in rep["by_department"]}
    assert depts["Office"]["total_amount"] == Decimal("5000000.00")
    assert depts["Welding"]["employee_count"] == 1


@pytest.mark.django_db
def test_monthly_report_splits_default_salary_out_of_merged_settlement(make_record, services, master_data):
    emp = master_data["emp_salaried"]
    default = services.aggregator.calculate_monthly_salary(employee_id=emp.id, year=2024, month=4)
    services.settlement.pay_monthly_salary(default.id)

    # công phát sinh sau khi đã trả lương mặc định, pay sẽ gộp vào bảng lương đã trả
    make_record(1, work_type="daily", employee="emp_salaried", work_date=date(2024, 4, 2))
    draft = services.aggregator.calculate_monthly_salary(employee_id=emp.id, year=2024, month=4)
    merged = services.settlement.pay_monthly_salary(draft.id)
    assert merged.total_work_days == 1

    rep = services.reports.get_monthly_report(year=2024, month=4)
    assert rep["total_amount"] == Decimal("5300000.00")
    by_type = {r["work_type_name"]: r for r in rep["by_work_type"]}
    assert by_type[DEFAULT_SALARY_LABEL]["total_amount"] == Decimal("5000000.00")
    assert by_type[DEFAULT_SALARY_LABEL]["count"] == 1
    assert by_type["Văn phòng"]["total_amount"] == Decimal("300000.00")
    assert sum(r["total_amount"] for r in rep["by_work_type"]) == rep["total_amount"]


@pytest.mark.django_db
def test_monthly_report_department_filter(paid_march, services):
    rep = services.reports.get_monthly_report(year=2024, month=3, department="Office")
    assert rep["total_employees"] == 1
    assert rep["total_amount"] == Decimal("5000000.00")


@pytest.mark.django_db
def test_empty_reports_have_zero_shape(services, db):
    weekly = services.reports.get_weekly_report(year=2024, week=1)
    assert weekly["total_amount"] == 0
    assert weekly["by_department"] == [] and weekly["by_work_type"] == []

    monthly = services.reports.get_monthly_report(year=2024, month=1)
    assert monthly == {
        "period": "1/2024", "total_employees": 0, "total_work_days": 0,
        "total_amount": 0, "total_allowances": 0, "by_department": [], "by_work_type": [],
    }
