from haven.models import FeeStatus, RoomStatus, UserRole
from haven.services.auth import ProfileService

API = "/api/v1"


def signup(client, email="neha@example.com", name="Neha Singh"):
    response = client.post(f"{API}/auth/signup", json={"name": name, "email": email, "course": "BCA"})
    assert response.status_code == 201, response.text
    body = response.json()
    return body, {"Authorization": f"Bearer {body['access_token']}"}


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "ok"
    assert "X-Request-ID" in response.headers


def test_signup_returns_student_session(client):
    body, headers = signup(client)

    assert body["role"] == "student"
    assert body["landing_view"] == "/student"

    me = client.get(f"{API}/auth/me", headers=headers).json()
    assert me["user_id"] == body["user_id"]
    assert me["role"] == "student"


def test_signup_validates_email(client):
    response = client.post(f"{API}/auth/signup", json={"name": "X", "email": "not-an-email"})
    assert response.status_code == 422


def test_missing_token_is_unauthorized(client):
    response = client.get(f"{API}/student/me")
    assert response.status_code == 401
    assert response.json()["error"]["code"] == "UNAUTHORIZED"


def test_garbage_token_is_unauthorized(client):
    response = client.get(f"{API}/auth/me", headers={"Authorization": "Bearer junk"})
    assert response.status_code == 401
    assert response.json()["error"]["code"] == "TOKEN_INVALID"


def test_student_denied_admin_view_gets_redirect(client):
    _, headers = signup(client)

    response = client.get(f"{API}/admin/overview", headers=headers)

    assert response.status_code == 403
    error = response.json()["error"]
    assert error["code"] == "FORBIDDEN"
    assert error["details"]["redirect_to"] == "/student"


def test_warden_me_includes_block(client, factory, auth_headers):
    warden = factory.profile(UserRole.WARDEN, assigned_block="B")

    me = client.get(f"{API}/auth/me", headers=auth_headers(warden.id, UserRole.WARDEN)).json()

    assert me["assigned_block"] == "B"
    assert me["landing_view"] == "/warden"


def test_demoted_warden_loses_warden_routes(client, factory, auth_headers, admin):
    warden = factory.profile(UserRole.WARDEN, assigned_block="A")
    headers = auth_headers(warden.id, UserRole.WARDEN)
    assert client.get(f"{API}/warden/students", headers=headers).status_code == 200

    assert ProfileService(factory.session).change_role(admin, warden.id, UserRole.STUDENT).is_success

    response = client.get(f"{API}/warden/students", params={"block": "B"}, headers=headers)
    assert response.status_code == 403
    assert response.json()["error"]["details"]["redirect_to"] == "/student"


def test_promoted_student_is_resolved_as_warden(client, factory, auth_headers, admin):
    body, headers = signup(client)
    user_id = body["user_id"]

    service = ProfileService(factory.session)
    assert service.change_role(admin, user_id, UserRole.WARDEN).is_success
    assert service.assign_block(admin, user_id, "B").is_success

    me = client.get(f"{API}/auth/me", headers=headers).json()
    assert me["role"] == "warden"
    assert me["assigned_block"] == "B"


def test_admin_room_and_assignment_flow(client, auth_headers):
    admin = auth_headers("admin-1", UserRole.ADMIN)
    student, _ = signup(client)
    students = client.get(f"{API}/admin/students", headers=admin).json()
    student_id = next(s["id"] for s in students if s["user_id"] == student["user_id"])

    room = client.post(f"{API}/admin/rooms", json={"room_no": "201", "block": "A", "capacity": 1}, headers=admin)
    assert room.status_code == 201
    room_id = room.json()["id"]

    assigned = client.put(f"{API}/admin/students/{student_id}/room", json={"room_id": room_id}, headers=admin)
    assert assigned.status_code == 200
    assert assigned.json()["room_id"] == room_id

    rooms = client.get(f"{API}/admin/rooms", params={"block": "A"}, headers=admin).json()
    assert rooms[0]["occupied"] == 1
    assert rooms[0]["status"] == RoomStatus.FILLED.value
    assert rooms[0]["vacancy"] == 0

    blocked = client.delete(f"{API}/admin/rooms/{room_id}", headers=admin)
    assert blocked.status_code == 409
    assert blocked.json()["detail"]["code"] == "ROOM_NOT_EMPTY"

    shrink = client.patch(f"{API}/admin/rooms/{room_id}", json={"capacity": 0}, headers=admin)
    assert shrink.status_code == 422


def test_student_fee_payment(client, auth_headers):
    admin = auth_headers("admin-1", UserRole.ADMIN)
    student, headers = signup(client)
    students = client.get(f"{API}/admin/students", headers=admin).json()
    student_id = students[0]["id"]

    issued = client.post(
        f"{API}/admin/fees",
        json={"student_id": student_id, "amount": "8500.00", "due_date": "2099-01-31"},
        headers=admin,
    )
    assert issued.status_code == 201
    fee_id = issued.json()["id"]

    mine = client.get(f"{API}/student/fee", headers=headers).json()
    assert mine["status"] == FeeStatus.PENDING.value

    paid = client.post(f"{API}/student/fee/{fee_id}/pay", headers=headers)
    assert paid.status_code == 200
    assert paid.json()["status"] == "paid"
    assert paid.json()["payment_date"] is not None


def test_student_complaint_and_warden_resolution(client, factory, auth_headers):
    _, headers = signup(client)
    warden = auth_headers(factory.profile(UserRole.WARDEN).id, UserRole.WARDEN)

    filed = client.post(f"{API}/student/complaints", json={"title": "Leak", "description": "Bathroom tap"}, headers=headers)
    assert filed.status_code == 201
    complaint_id = filed.json()["id"]

    resolved = client.post(f"{API}/warden/complaints/{complaint_id}/resolve", headers=warden)
    assert resolved.status_code == 200
    assert resolved.json()["status"] == "resolved"

    mine = client.get(f"{API}/student/complaints", headers=headers).json()
    assert [c["status"] for c in mine] == ["resolved"]


def test_public_admission_query(client, auth_headers):
    response = client.post(
        f"{API}/public/queries",
        json={"full_name": "Arjun", "email": "arjun@example.com", "room_type": "Premium Single"},
    )
    assert response.status_code == 201

    listed = client.get(f"{API}/admin/queries", headers=auth_headers("admin-1", UserRole.ADMIN)).json()
    assert [q["room_type"] for q in listed] == ["Premium Single"]
