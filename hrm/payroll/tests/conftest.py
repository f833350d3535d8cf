import pytest
from datetime import date
from decimal import Decimal
from django.contrib.auth import get_user_model
from django.contrib.auth.models import Group
from rest_framework.test import APIClient

from payroll.models import Employee, WorkType, WorkItem, OvertimeConfig
from payroll.services.registry import build_services

User = get_user_model()


def _user_with_role(username, role):
    u = User.objects.create_user(username=username, password="pass")
    group, _ = Group.objects.get_or_create(name=role)
    u.groups.add(group)
    return u


@pytest.fixture
def admin_user(db):
    return _user_with_role("admin1", "admin")

@pytest.fixture
def member_user(db):
    return _user_with_role("member1", "member")

@pytest.fixture
def employee_user(db):
    return _user_with_role("emp1", "employee")

@pytest.fixture
def admin_client(admin_user):
    client = APIClient()
    client.force_authenticate(user=admin_user)
    return client

@pytest.fixture
def member_client(member_user):
    client = APIClient()
    client.force_authenticate(user=member_user)
    return client

@pytest.fixture
def employee_client(employee_user):
    client = APIClient()
    client.force_authenticate(user=employee_user)
    return client


@pytest.fixture
def services(db):
    return build_services(default_salary_fallback=True, max_hours_per_day=24)


@pytest.fixture
def master_data(db):
    emp = Employee.objects.create(code="E001", first_name="Nguyen", last_name="Van A", department="Welding")
    emp_salaried = Employee.objects.create(
        code="E002", first_name="Tran", last_name="Thi B", department="Office",
        salary=Decimal("5000000.00"),
    )
    weld = WorkType.objects.create(
        name="Hàn", department="Welding", calculation_type=WorkType.CalculationType.WELD_COUNT,
    )
    hourly = WorkType.objects.create(
        name="Lắp ráp", department="Welding", calculation_type=WorkType.CalculationType.HOURLY,
        unit_price=Decimal("50000.00"),
    )
    daily = WorkType.objects.create(
        name="Văn phòng", department="Office", calculation_type=WorkType.CalculationType.DAILY,
        unit_price=Decimal("300000.00"),
    )
    item = WorkItem.objects.create(
        name="Khung thép A", difficulty_level="medium",
        price_per_weld=Decimal("1000.00"), welds_per_item=2, total_quantity=100,
    )
    return {
        "emp": emp, "emp_salaried": emp_salaried,
        "weld": weld, "hourly": hourly, "daily": daily, "item": item,
    }


@pytest.fixture
def overtime_configs(master_data):
    weld_ot = OvertimeConfig.objects.create(work_type=master_data["weld"], overtime_price_per_weld=Decimal("500.00"))
    hourly_ot = OvertimeConfig.objects.create(work_type=master_data["hourly"], overtime_percentage=Decimal("50.00"))
    return {"weld": weld_ot, "hourly": hourly_ot}


@pytest.fixture
def make_record(services, master_data):
    """Tạo work record qua service (giá tính như production)."""
    def _make(quantity, work_date=date(2024, 3, 4), work_type="weld", employee="emp", **extra):
        data = {
            "employee_id": master_data[employee].id,
            "work_date": work_date,
            "work_type_id": master_data[work_type].id,
            "quantity": Decimal(str(quantity)),
        }
        if work_type == "weld":
            data["work_item_id"] = master_data["item"].id
        data.update(extra)
        return services.work_record_service.create_work_record(data)
    return _make
