"""
Tests for the activity log endpoint
"""

from datetime import datetime, timedelta, timezone

from app.models.activity_log import ActivityLog


def test_activity_logs_newest_first(client, create_user, create_request):
    user = create_user()
    created = create_request(user["id"])
    client.put(f"/api/v1/requests?id={created['id']}", json={"status": "in-progress"})
    client.delete(f"/api/v1/requests?id={created['id']}")

    response = client.get("/api/v1/activityLogs")

    assert response.status_code == 200
    body = response.json()
    assert [entry["action"] for entry in body] == ["DELETE", "UPDATE", "CREATE"]
    assert body[0]["user"] == {"id": user["id"], "username": "alice01", "email": "alice@mail.com"}
    assert body[2]["description"] == f"Created a new request with ID {created['id']}"


def test_activity_logs_same_timestamp_uses_id(client, create_user, db):
    user = create_user()
    stamp = datetime(2024, 1, 13, 10, 30, tzinfo=timezone.utc)
    db.add_all([
        ActivityLog(user_id=user["id"], action="CREATE", description="first", created_at=stamp),
        ActivityLog(user_id=user["id"], action="UPDATE", description="second", created_at=stamp),
        ActivityLog(user_id=user["id"], action="DELETE", description="older",
                    created_at=stamp - timedelta(days=1)),
    ])
    db.commit()

    response = client.get("/api/v1/activityLogs")

    assert [entry["description"] for entry in response.json()] == ["second", "first", "older"]


def test_activity_logs_after_user_deleted(client, create_user, create_request):
    user = create_user()
    create_request(user["id"])
    client.delete(f"/api/v1/users/{user['id']}")

    response = client.get("/api/v1/activityLogs")

    assert response.status_code == 200
    entry = response.json()[0]
    assert entry["userId"] is None
    assert entry["user"] is None


def test_activity_logs_empty(client):
    response = client.get("/api/v1/activityLogs")

    assert response.status_code == 200
    assert response.json() == []
