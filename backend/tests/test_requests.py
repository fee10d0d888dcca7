"""
Tests for the service request endpoints, statistics and audit entries
"""

from sqlalchemy.exc import OperationalError

from app.models.activity_log import ActivityLog
from app.models.request import ServiceRequest
from app.services import activity_log_service


def test_create_request(client, create_user, db):
    user = create_user()

    response = client.post(
        "/api/v1/requests",
        json={"userId": user["id"], "description": "Printer on the 2nd floor is jammed"},
    )

    assert response.status_code == 201
    body = response.json()
    assert body["status"] == "pending"
    assert body["userId"] == user["id"]
    assert body["user"] == {"id": user["id"], "username": "alice01", "email": "alice@mail.com"}

    entries = db.query(ActivityLog).all()
    assert len(entries) == 1
    assert entries[0].action == "CREATE"
    assert entries[0].description == f"Created a new request with ID {body['id']}"
    assert entries[0].user_id == user["id"]


def test_create_request_short_description(client, create_user, db):
    user = create_user()

    response = client.post("/api/v1/requests", json={"userId": user["id"], "description": "short"})

    assert response.status_code == 400
    assert "description" in response.json()["error"]
    assert db.query(ServiceRequest).count() == 0
    assert db.query(ActivityLog).count() == 0


def test_create_request_validation_lists_every_violation(client):
    response = client.post(
        "/api/v1/requests",
        json={"userId": "abc", "description": "short", "status": "done"},
    )

    assert response.status_code == 400
    error = response.json()["error"]
    assert "userId" in error
    assert "description" in error
    assert "status" in error


def test_create_request_unknown_owner(client, db):
    response = client.post(
        "/api/v1/requests",
        json={"userId": 999, "description": "Printer on the 2nd floor is jammed"},
    )

    assert response.status_code == 404
    assert response.json() == {"error": "User not found"}
    assert db.query(ServiceRequest).count() == 0


def test_create_request_owner_id_out_of_range(client, db):
    for user_id in (99999999999999999999999, 0, -1):
        response = client.post(
            "/api/v1/requests",
            json={"userId": user_id, "description": "Printer on the 2nd floor is jammed"},
        )

        assert response.status_code == 400
        assert "userId" in response.json()["error"]
    assert db.query(ServiceRequest).count() == 0


def test_create_request_rejects_unknown_fields(client, create_user):
    user = create_user()

    response = client.post(
        "/api/v1/requests",
        json={"userId": user["id"], "description": "Printer on the 2nd floor is jammed", "priority": 1},
    )

    assert response.status_code == 400
    assert "priority" in response.json()["error"]


def test_create_request_survives_audit_failure(client, create_user, db, monkeypatch):
    user = create_user()

    def failing_log_activity(*args, **kwargs):
        raise OperationalError("INSERT INTO activity_logs", {}, Exception("disk I/O error"))

    monkeypatch.setattr(activity_log_service, "log_activity", failing_log_activity)

    response = client.post(
        "/api/v1/requests",
        json={"userId": user["id"], "description": "Printer on the 2nd floor is jammed"},
    )

    assert response.status_code == 201
    assert db.query(ServiceRequest).count() == 1
    assert db.query(ActivityLog).count() == 0


def test_update_request_survives_audit_failure(client, create_user, create_request, db, monkeypatch):
    user = create_user()
    created = create_request(user["id"])
    db.query(ActivityLog).delete()
    db.commit()

    def failing_log_activity(*args, **kwargs):
        raise OperationalError("INSERT INTO activity_logs", {}, Exception("disk I/O error"))

    monkeypatch.setattr(activity_log_service, "log_activity", failing_log_activity)

    response = client.put(f"/api/v1/requests?id={created['id']}", json={"status": "completed"})

    assert response.status_code == 200
    assert response.json()["status"] == "completed"
    db.expire_all()
    assert db.get(ServiceRequest, created["id"]).status == "completed"
    assert db.query(ActivityLog).count() == 0


def test_delete_request_survives_audit_failure(client, create_user, create_request, db, monkeypatch):
    user = create_user()
    created = create_request(user["id"])
    db.query(ActivityLog).delete()
    db.commit()

    def failing_log_activity(*args, **kwargs):
        raise OperationalError("INSERT INTO activity_logs", {}, Exception("disk I/O error"))

    monkeypatch.setattr(activity_log_service, "log_activity", failing_log_activity)

    response = client.delete(f"/api/v1/requests?id={created['id']}")

    assert response.status_code == 204
    assert db.query(ServiceRequest).count() == 0
    assert db.query(ActivityLog).count() == 0


def test_list_requests(client, create_user, create_request):
    user = create_user()
    create_request(user["id"])
    create_request(user["id"], description="Coffee machine leaks water", status="in-progress")

    response = client.get("/api/v1/requests")

    assert response.status_code == 200
    body = response.json()
    assert len(body) == 2
    assert body[1]["status"] == "in-progress"
    assert body[0]["user"]["username"] == "alice01"


def test_update_request(client, create_user, create_request, db):
    user = create_user()
    created = create_request(user["id"])

    response = client.put(f"/api/v1/requests?id={created['id']}", json={"status": "completed"})

    assert response.status_code == 200
    assert response.json()["status"] == "completed"
    assert response.json()["description"] == created["description"]

    entry = db.query(ActivityLog).filter(ActivityLog.action == "UPDATE").one()
    assert entry.description == f"Updated request with ID {created['id']}"


def test_update_request_any_transition(client, create_user, create_request):
    user = create_user()
    created = create_request(user["id"], status="completed")

    response = client.put(f"/api/v1/requests?id={created['id']}", json={"status": "pending"})

    assert response.status_code == 200
    assert response.json()["status"] == "pending"


def test_update_request_permissive_body(client, create_user, create_request):
    user = create_user()
    created = create_request(user["id"])

    response = client.put(
        f"/api/v1/requests?id={created['id']}",
        json={"description": "Printer is now making a grinding noise", "unknown": "ignored"},
    )

    assert response.status_code == 200
    assert response.json()["description"] == "Printer is now making a grinding noise"


def test_update_request_validates_present_fields(client, create_user, create_request):
    user = create_user()
    created = create_request(user["id"])

    response = client.put(
        f"/api/v1/requests?id={created['id']}",
        json={"description": "tiny", "status": "archived"},
    )

    assert response.status_code == 400
    error = response.json()["error"]
    assert "description" in error
    assert "status" in error


def test_update_request_errors(client):
    response = client.put("/api/v1/requests", json={"status": "completed"})
    assert response.status_code == 400
    assert response.json() == {"error": "Request ID not provided"}

    response = client.put("/api/v1/requests?id=abc", json={"status": "completed"})
    assert response.status_code == 400
    assert response.json() == {"error": "Invalid request id"}

    response = client.put("/api/v1/requests?id=999", json={"status": "completed"})
    assert response.status_code == 404


def test_delete_request(client, create_user, create_request, db):
    user = create_user()
    created = create_request(user["id"])

    response = client.delete(f"/api/v1/requests?id={created['id']}")

    assert response.status_code == 204
    assert db.query(ServiceRequest).count() == 0
    entry = db.query(ActivityLog).filter(ActivityLog.action == "DELETE").one()
    assert entry.description == f"Deleted request with ID {created['id']}"
    assert entry.user_id == user["id"]


def test_delete_request_errors(client):
    assert client.delete("/api/v1/requests").json() == {"error": "Request ID not provided"}
    assert client.delete("/api/v1/requests?id=1.5").json() == {"error": "Invalid request id"}
    assert client.delete("/api/v1/requests?id=999").status_code == 404


def test_request_stats(client, create_user, create_request, db):
    user = create_user()
    create_request(user["id"])
    create_request(user["id"], status="pending")
    create_request(user["id"], status="in-progress")
    create_request(user["id"], status="completed")
    create_request(user["id"], status="rejected")
    db.add(ServiceRequest(user_id=user["id"], description="Legacy row with odd status", status="archived"))
    db.commit()

    response = client.get("/api/v1/requests/stats")

    assert response.status_code == 200
    assert response.json() == {
        "total": 6,
        "pending": 2,
        "inProgress": 1,
        "completed": 1,
        "rejected": 1,
    }


def test_request_stats_empty(client):
    response = client.get("/api/v1/requests/stats")

    assert response.status_code == 200
    assert response.json() == {"total": 0, "pending": 0, "inProgress": 0, "completed": 0, "rejected": 0}
