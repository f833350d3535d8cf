import pytest
from decimal import Decimal

from payroll.models import MonthlySalary, WorkRecord, WorkType


def _record_payload(master_data, **extra):
    payload = {
        "employee_id": master_data["emp"].id,
        "work_date": "2024-03-04",
        "work_type_id": master_data["weld"].id,
        "work_item_id": master_data["item"].id,
        "quantity": "10",
    }
    payload.update(extra)
    return payload


@pytest.mark.django_db
def test_requires_authentication(client, master_data):
    resp = client.get("/api/work-records/")
    assert resp.status_code in (401, 403)


@pytest.mark.django_db
def test_member_creates_work_record(member_client, member_user, master_data):
    resp = member_client.post("/api/work-records/", _record_payload(master_data), format="json")
    assert resp.status_code == 201, resp.content
    body = resp.json()
    assert Decimal(str(body["total_amount"])) == Decimal("20000")
    assert body["status"] == "new"
    assert WorkRecord.objects.get(id=body["id"]).created_by == member_user.id


@pytest.mark.django_db
def test_employee_role_cannot_write(employee_client, master_data):
    resp = employee_client.post("/api/work-records/", _record_payload(master_data), format="json")
    assert resp.status_code == 403
    resp = employee_client.get("/api/work-records/")
    assert resp.status_code == 200


@pytest.mark.django_db
def test_work_record_validation_maps_to_400(member_client, master_data):
    resp = member_client.post("/api/work-records/", _record_payload(master_data, quantity="1000"), format="json")
    assert resp.status_code == 400
    assert "detail" in resp.json()


@pytest.mark.django_db
def test_work_record_list_is_paginated(member_client, make_record):
    for _ in range(3):
        make_record(1, work_type="hourly")
    resp = member_client.get("/api/work-records/", {"page_size": 2})
    body = resp.json()
    assert body["count"] == 3
    assert len(body["results"]) == 2
    assert body["next"] is not None

    # mặc định 50 dòng/trang: 3 record nằm gọn trong 1 trang
    body = member_client.get("/api/work-records/").json()
    assert len(body["results"]) == 3
    assert body["next"] is None


@pytest.mark.django_db
def test_work_record_filters_and_by_month(member_client, master_data, make_record):
    make_record(1)
    make_record(2, work_type="hourly")
    resp = member_client.get("/api/work-records/", {"work_type_id": master_data["hourly"].id})
    assert resp.status_code == 200
    assert resp.json()["count"] == 1

    resp = member_client.get("/api/work-records/by-month/", {
        "employee_id": master_data["emp"].id, "year": 2024, "month": 3,
    })
    assert resp.status_code == 200
    assert len(resp.json()) == 2

    resp = member_client.get(f"/api/work-records/hours/{master_data['emp'].id}/2024-03-04/")
    assert resp.status_code == 200
    assert Decimal(str(resp.json()["total_hours"])) == Decimal("2")


@pytest.mark.django_db
def test_salary_flow_over_api(admin_client, master_data, make_record):
    rec = make_record(10)
    resp = admin_client.post("/api/monthly-salaries/calculate/", {
        "employee_id": master_data["emp"].id, "year": 2024, "month": 3,
    }, format="json")
    assert resp.status_code == 201, resp.content
    ms_id = resp.json()["id"]
    assert resp.json()["status"] == "draft"

    resp = admin_client.put(f"/api/monthly-salaries/{ms_id}/allowances/", {"allowances": "500"}, format="json")
    assert resp.status_code == 200
    assert Decimal(str(resp.json()["allowances"])) == Decimal("500")

    resp = admin_client.get(f"/api/work-records/by-salary/{ms_id}/")
    assert [r["id"] for r in resp.json()] == [rec.id]

    resp = admin_client.put(f"/api/monthly-salaries/{ms_id}/pay/")
    assert resp.status_code == 200
    assert resp.json()["status"] == "paid"

    resp = admin_client.put(f"/api/monthly-salaries/{ms_id}/pay/")
    assert resp.status_code == 409

    resp = admin_client.patch(f"/api/work-records/{rec.id}/", {"quantity": "1"}, format="json")
    assert resp.status_code == 409

    resp = admin_client.delete(f"/api/monthly-salaries/{ms_id}/")
    assert resp.status_code == 204
    rec.refresh_from_db()
    assert rec.status == WorkRecord.Status.NEW

    resp = admin_client.put(f"/api/monthly-salaries/{ms_id}/pay/")
    assert resp.status_code == 404


@pytest.mark.django_db
def test_salary_admin_only(member_client, master_data):
    resp = member_client.post("/api/monthly-salaries/calculate/", {"employee_id": master_data["emp"].id}, format="json")
    assert resp.status_code == 403
    resp = member_client.get("/api/monthly-salaries/")
    assert resp.status_code == 200


@pytest.mark.django_db
def test_calculate_all_over_api(admin_client, master_data, make_record):
    make_record(10)
    resp = admin_client.post("/api/monthly-salaries/calculate-all/", {"year": 2024, "month": 3}, format="json")
    assert resp.status_code == 200
    body = resp.json()
    assert body["total"] == 2 and body["success"] == 2 and body["failed"] == 0
    assert MonthlySalary.objects.filter(year=2024, month=3).count() == 2


@pytest.mark.django_db
def test_work_type_name_unique_per_department(admin_client, master_data):
    resp = admin_client.post("/api/work-types/", {
        "name": "hàn", "department": "Welding", "calculation_type": "weld_count",
    }, format="json")
    assert resp.status_code == 400
    resp = admin_client.post("/api/work-types/", {
        "name": "Hàn", "department": "Office", "calculation_type": "weld_count",
    }, format="json")
    assert resp.status_code == 201


@pytest.mark.django_db
def test_overtime_config_rules(admin_client, master_data):
    resp = admin_client.post("/api/overtime-configs/", {
        "work_type_id": master_data["hourly"].id, "overtime_percentage": "50", "overtime_price_per_weld": "999",
    }, format="json")
    assert resp.status_code == 201, resp.content
    # hourly: giá/mối hàn bị đặt về 0
    assert Decimal(str(resp.json()["overtime_price_per_weld"])) == Decimal("0")

    resp = admin_client.post("/api/overtime-configs/", {
        "work_type_id": master_data["hourly"].id, "overtime_percentage": "10",
    }, format="json")
    assert resp.status_code == 409

    resp = admin_client.post("/api/overtime-configs/", {
        "work_type_id": master_data["daily"].id, "overtime_percentage": "10",
    }, format="json")
    assert resp.status_code == 400

    resp = admin_client.get(f"/api/overtime-configs/{master_data['hourly'].id}/")
    assert resp.status_code == 200


@pytest.mark.django_db
def test_work_item_status_is_read_only(admin_client, master_data, make_record):
    make_record(10)
    item = master_data["item"]
    resp = admin_client.patch(f"/api/work-items/{item.id}/", {"status": "done", "name": "Khung B"}, format="json")
    assert resp.status_code == 200
    assert resp.json()["status"] == "in_progress"
    assert resp.json()["name"] == "Khung B"

    resp = admin_client.get(f"/api/work-items/{item.id}/quantity-made/")
    assert Decimal(str(resp.json()["quantity_made"])) == Decimal("10")


@pytest.mark.django_db
def test_reports_over_api(employee_client, db):
    resp = employee_client.get("/api/reports/monthly/", {"year": 2024, "month": 3})
    assert resp.status_code == 200
    assert resp.json()["total_employees"] == 0

    resp = employee_client.get("/api/reports/weekly/", {"year": 2024, "week": 60})
    assert resp.status_code == 400

    resp = employee_client.get("/api/reports/weekly/", {"year": 2024})
    assert resp.status_code == 400


@pytest.mark.django_db
def test_employee_crud_admin_only(admin_client, member_client, db):
    payload = {"code": "E100", "first_name": "Hoang", "last_name": "E", "department": "QA", "salary": "7000000"}
    assert member_client.post("/api/employees/", payload, format="json").status_code == 403
    resp = admin_client.post("/api/employees/", payload, format="json")
    assert resp.status_code == 201, resp.content
    emp_id = resp.json()["id"]
    assert member_client.get(f"/api/employees/{emp_id}/").json()["full_name"] == "Hoang E"
    assert admin_client.delete(f"/api/employees/{emp_id}/").status_code == 204


@pytest.mark.django_db
def test_schema_endpoint(client, db):
    resp = client.get("/api/schema/")
    assert resp.status_code == 200
