from fastapi import status
from sqlalchemy import select

from hrdesk.models import Employee, Request, Workflow


def _employee_payload(account_id: int, **overrides) -> dict:
    payload = {
        "employeeId": "EMP100",
        "userId": account_id,
        "position": "Analyst",
        "hireDate": "2024-03-01",
    }
    payload.update(overrides)
    return payload


def test_create_and_get_employee(client, admin_headers, user_headers, user, make_department):
    department = make_department()
    response = client.post(
        "/api/employees",
        json=_employee_payload(user.id, departmentId=department.id),
        headers=admin_headers,
    )
    assert response.status_code == status.HTTP_201_CREATED
    body = response.json()
    assert body["employeeId"] == "EMP100"
    assert body["userId"] == user.id
    assert body["status"] == "Active"
    assert body["department"]["name"] == department.name
    assert body["user"]["email"] == user.email

    fetched = client.get(f"/api/employees/{body['id']}", headers=user_headers)
    assert fetched.status_code == status.HTTP_200_OK
    assert fetched.json()["position"] == "Analyst"


def test_hire_date_defaults_to_today(client, admin_headers, user):
    payload = _employee_payload(user.id)
    del payload["hireDate"]
    response = client.post("/api/employees", json=payload, headers=admin_headers)
    assert response.status_code == status.HTTP_201_CREATED
    assert response.json()["hireDate"]


def test_create_employee_requires_existing_user(client, admin_headers):
    response = client.post("/api/employees", json=_employee_payload(999), headers=admin_headers)
    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert response.json()["errors"][0]["field"] == "userId"


def test_create_employee_missing_fields(client, admin_headers, user):
    response = client.post("/api/employees", json={"userId": user.id}, headers=admin_headers)
    assert response.status_code == status.HTTP_400_BAD_REQUEST


def test_employee_code_and_account_are_unique(client, admin_headers, user, make_account, make_employee):
    make_employee(account=user)
    existing_code = client.post("/api/employees", json=_employee_payload(make_account().id, employeeId="EMP001"), headers=admin_headers)
    assert existing_code.status_code == status.HTTP_409_CONFLICT

    same_account = client.post("/api/employees", json=_employee_payload(user.id, employeeId="EMP555"), headers=admin_headers)
    assert same_account.status_code == status.HTTP_409_CONFLICT


def test_employee_code_is_stripped_before_uniqueness_check(client, session, admin_headers, make_account, make_employee):
    first = make_employee()
    make_employee()

    padded = client.post("/api/employees", json=_employee_payload(make_account().id, employeeId=" EMP001 "), headers=admin_headers)
    assert padded.status_code == status.HTTP_409_CONFLICT
    assert padded.json()["message"] == "This Employee ID is already in use"

    clash = client.put(f"/api/employees/{first.id}", json={"employeeId": "  EMP002 "}, headers=admin_headers)
    assert clash.status_code == status.HTTP_409_CONFLICT

    blank = client.put(f"/api/employees/{first.id}", json={"employeeId": "   "}, headers=admin_headers)
    assert blank.status_code == status.HTTP_400_BAD_REQUEST

    renamed = client.put(f"/api/employees/{first.id}", json={"employeeId": " EMP900 "}, headers=admin_headers)
    assert renamed.status_code == status.HTTP_200_OK
    assert renamed.json()["employeeId"] == "EMP900"
    session.expire_all()
    assert session.get(Employee, first.id).employee_no == "EMP900"


def test_unknown_department_is_not_found(client, admin_headers, user):
    response = client.post("/api/employees", json=_employee_payload(user.id, departmentId=42), headers=admin_headers)
    assert response.status_code == status.HTTP_404_NOT_FOUND


def test_list_filters(client, user_headers, make_department, make_employee):
    sales = make_department("Sales")
    make_employee(department=sales)
    make_employee()

    everyone = client.get("/api/employees", headers=user_headers)
    assert len(everyone.json()) == 2

    in_sales = client.get("/api/employees", params={"departmentId": sales.id}, headers=user_headers)
    assert [e["departmentId"] for e in in_sales.json()] == [sales.id]


def test_update_employee(client, admin_headers, user_headers, make_employee):
    employee = make_employee()
    response = client.put(
        f"/api/employees/{employee.id}", json={"position": "Lead", "status": "Inactive"}, headers=admin_headers
    )
    assert response.status_code == status.HTTP_200_OK
    assert response.json()["position"] == "Lead"
    assert response.json()["status"] == "Inactive"

    forbidden = client.put(f"/api/employees/{employee.id}", json={"position": "CEO"}, headers=user_headers)
    assert forbidden.status_code == status.HTTP_403_FORBIDDEN


def test_transfer_creates_exactly_one_workflow(client, session, admin_headers, make_department, make_employee):
    engineering = make_department("Engineering")
    marketing = make_department("Marketing")
    employee = make_employee(department=engineering)

    response = client.post(
        f"/api/employees/{employee.id}/transfer", json={"departmentId": marketing.id}, headers=admin_headers
    )
    assert response.status_code == status.HTTP_201_CREATED
    workflow = response.json()
    assert workflow["type"] == "Department Transfer"
    assert workflow["status"] == "Pending"
    assert workflow["details"] == {"task": "Employee transferred from Engineering to Marketing."}

    session.expire_all()
    assert session.get(Employee, employee.id).department_id == marketing.id
    workflows = session.scalars(select(Workflow).where(Workflow.employee_id == employee.id)).all()
    assert len(workflows) == 1


def test_transfer_to_unknown_department_still_records_workflow(
    client, session, admin_headers, make_department, make_employee
):
    employee = make_employee(department=make_department("Engineering"))

    response = client.post(
        f"/api/employees/{employee.id}/transfer", json={"departmentId": 404}, headers=admin_headers
    )
    assert response.status_code == status.HTTP_201_CREATED
    assert response.json()["details"]["task"] == "Employee transferred from Engineering to Unknown."

    session.expire_all()
    assert session.get(Employee, employee.id).department_id is None
    assert len(session.scalars(select(Workflow)).all()) == 1


def test_transfer_unassigned_employee(client, admin_headers, make_department, make_employee):
    employee = make_employee()
    target = make_department("Support")
    response = client.post(
        f"/api/employees/{employee.id}/transfer", json={"departmentId": target.id}, headers=admin_headers
    )
    assert response.json()["details"]["task"] == "Employee transferred from Unknown to Support."


def test_delete_employee_cascades(client, session, admin_headers, make_employee):
    employee = make_employee()
    session.add(Request(type="Equipment", status="Pending", employee_id=employee.id))
    session.add(Workflow(type="Onboarding", status="Pending", employee_id=employee.id))
    session.commit()

    response = client.delete(f"/api/employees/{employee.id}", headers=admin_headers)
    assert response.status_code == status.HTTP_200_OK

    session.expire_all()
    assert session.scalars(select(Request)).all() == []
    assert session.scalars(select(Workflow)).all() == []
