import pytest
from fastapi.testclient import TestClient

from complaint_desk.core.config import settings
from complaint_desk.models.enums import RoleEnum
from tests.conftest import API, headers_for


def create(client: TestClient, headers: dict, data: dict, **overrides) -> dict:
    response = client.post(f"{API}/complaints", json=dict(data, **overrides), headers=headers)
    assert response.status_code == 201, response.text
    return response.json()


def test_analytics_empty(client: TestClient, admin_auth_headers, departments):
    response = client.get(f"{API}/admin/analytics", headers=admin_auth_headers)

    assert response.status_code == 200
    data = response.json()
    assert data["counts"] == {"total": 0, "open": 0, "inProgress": 0, "resolved": 0, "rejected": 0}
    assert data["deptStats"] == [{"name": "HR", "count": 0}, {"name": "IT Support", "count": 0}]


def test_analytics_counts(
    client: TestClient, auth_headers, staff_auth_headers, admin_auth_headers, departments, complaint_data
):
    """Per-status counts add up to the total; departments sum their categories"""
    ids = [create(client, auth_headers, complaint_data)["id"] for _ in range(4)]
    create(client, auth_headers, complaint_data, categoryId=departments["Benefits"].id)
    client.patch(f"{API}/complaints/{ids[0]}", json={"status": "IN_PROGRESS"}, headers=staff_auth_headers)
    client.patch(f"{API}/complaints/{ids[1]}", json={"status": "RESOLVED"}, headers=staff_auth_headers)
    client.patch(f"{API}/complaints/{ids[2]}", json={"status": "REJECTED"}, headers=staff_auth_headers)

    data = client.get(f"{API}/admin/analytics", headers=admin_auth_headers).json()

    counts = data["counts"]
    assert counts == {"total": 5, "open": 2, "inProgress": 1, "resolved": 1, "rejected": 1}
    assert counts["open"] + counts["inProgress"] + counts["resolved"] + counts["rejected"] == counts["total"]
    assert data["deptStats"] == [{"name": "HR", "count": 1}, {"name": "IT Support", "count": 4}]
    assert sum(d["count"] for d in data["deptStats"]) == counts["total"]


@pytest.mark.parametrize(
    "path,method",
    [("/admin/analytics", "get"), ("/admin/assign", "post"), ("/staff", "get")],
)
def test_admin_routes_forbidden_for_non_admins(
    client: TestClient, auth_headers, staff_auth_headers, path, method
):
    for headers in (auth_headers, staff_auth_headers):
        response = client.request(method.upper(), f"{API}{path}", json={}, headers=headers)
        assert response.status_code == 403


def test_admin_routes_require_token(client: TestClient):
    assert client.get(f"{API}/admin/analytics").status_code == 401


def test_assign_complaint(
    client: TestClient, auth_headers, staff_auth_headers, admin_auth_headers, staff_user, complaint_data
):
    """Assignment moves the complaint to IN_PROGRESS whatever its status"""
    complaint = create(client, auth_headers, complaint_data)
    client.patch(f"{API}/complaints/{complaint['id']}", json={"status": "RESOLVED"}, headers=staff_auth_headers)

    response = client.post(
        f"{API}/admin/assign",
        json={"complaintId": complaint["id"], "staffId": staff_user.id},
        headers=admin_auth_headers,
    )

    assert response.status_code == 200
    data = response.json()
    assert data["assignedToId"] == staff_user.id
    assert data["assignedTo"]["name"] == staff_user.name
    assert data["status"] == "IN_PROGRESS"
    assert data["resolvedAt"] is None

    seen_by_reporter = client.get(f"{API}/complaints/{complaint['id']}", headers=auth_headers).json()
    assert seen_by_reporter["assignedToId"] == staff_user.id
    assert seen_by_reporter["status"] == "IN_PROGRESS"


def test_assign_to_admin(client: TestClient, auth_headers, admin_auth_headers, admin_user, complaint_data):
    complaint = create(client, auth_headers, complaint_data)

    response = client.post(
        f"{API}/admin/assign",
        json={"complaintId": complaint["id"], "staffId": admin_user.id},
        headers=admin_auth_headers,
    )

    assert response.status_code == 200
    assert response.json()["assignedToId"] == admin_user.id


def test_assign_to_plain_user_rejected(
    client: TestClient, auth_headers, admin_auth_headers, other_user, complaint_data
):
    complaint = create(client, auth_headers, complaint_data)

    response = client.post(
        f"{API}/admin/assign",
        json={"complaintId": complaint["id"], "staffId": other_user.id},
        headers=admin_auth_headers,
    )

    assert response.status_code == 400
    assert response.json()["details"] == {"field": "staffId"}
    unchanged = client.get(f"{API}/complaints/{complaint['id']}", headers=auth_headers).json()
    assert unchanged["status"] == "OPEN"
    assert unchanged["assignedToId"] is None


def test_assign_missing_complaint(client: TestClient, admin_auth_headers, staff_user):
    response = client.post(
        f"{API}/admin/assign", json={"complaintId": 9999, "staffId": staff_user.id}, headers=admin_auth_headers
    )

    assert response.status_code == 404
    assert response.json()["code"] == "COMPLAINT_NOT_FOUND"


def test_assign_missing_staff(client: TestClient, auth_headers, admin_auth_headers, complaint_data):
    complaint = create(client, auth_headers, complaint_data)

    response = client.post(
        f"{API}/admin/assign", json={"complaintId": complaint["id"], "staffId": 9999}, headers=admin_auth_headers
    )

    assert response.status_code == 404
    assert response.json()["code"] == "USER_NOT_FOUND"


def test_list_staff(client: TestClient, admin_auth_headers, make_user, test_user):
    make_user(RoleEnum.STAFF, name="Zoe Staff")
    make_user(RoleEnum.STAFF, name="Adam Staff")

    response = client.get(f"{API}/staff", headers=admin_auth_headers)

    assert response.status_code == 200
    staff = response.json()
    assert [s["name"] for s in staff] == ["Adam Staff", "Zoe Staff"]
    assert all(s["role"] == "STAFF" for s in staff)


def test_departments_are_public(client: TestClient, departments):
    response = client.get(f"{API}/departments")

    assert response.status_code == 200
    data = response.json()
    assert [d["name"] for d in data] == ["HR", "IT Support"]
    it_support = data[1]
    assert [c["name"] for c in it_support["categories"]] == ["Hardware", "Software"]


def test_seed_is_idempotent(client: TestClient):
    first = client.post(f"{API}/seed")
    second = client.post(f"{API}/seed")

    assert first.status_code == second.status_code == 200
    assert first.json() == {"message": "Seed successful"}

    departments = client.get(f"{API}/departments").json()
    assert sorted(c["name"] for d in departments for c in d["categories"]) == [
        "Benefits", "Hardware", "Payroll", "Software",
    ]

    login = client.post(f"{API}/auth/login", json={"email": "admin@example.com", "password": "password123"})
    assert login.status_code == 200
    assert login.json()["user"]["role"] == "ADMIN"

    staff = client.post(f"{API}/auth/login", json={"email": "staff@example.com", "password": "password123"})
    assert staff.json()["user"]["role"] == "STAFF"
    assert staff.json()["user"]["departmentId"] is not None


def test_seed_disabled(client: TestClient, monkeypatch):
    monkeypatch.setattr(settings, "ENABLE_DEMO_SEED", False)

    response = client.post(f"{API}/seed")

    assert response.status_code == 404


def test_admin_sees_everyone(client: TestClient, complaint_data, test_user, other_user, admin_auth_headers):
    create(client, headers_for(test_user), complaint_data)
    create(client, headers_for(other_user), complaint_data)

    data = client.get(f"{API}/complaints", headers=admin_auth_headers).json()

    assert {c["reporterId"] for c in data["items"]} == {test_user.id, other_user.id}
