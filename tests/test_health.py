from sqlalchemy.exc import OperationalError

from glucose_tracker.controller import health_controller


def test_health_reports_database_and_oauth(client):
    response = client.get("/api/health")

    assert response.status_code == 200
    body = response.get_json()
    assert body["status"] == "healthy"
    assert body["database"] == "connected"
    assert body["oauth"] == "not_configured"
    assert body["timestamp"].endswith("+00:00")


def test_ready(client):
    response = client.get("/api/health/ready")
    assert response.status_code == 200
    assert response.get_json() == {"status": "ready"}


def test_not_ready_when_database_down(client, monkeypatch):
    def broken_execute(*args, **kwargs):
        raise OperationalError("SELECT 1", {}, Exception("database is gone"))

    monkeypatch.setattr(health_controller.db.session, "execute", broken_execute)

    response = client.get("/api/health/ready")
    assert response.status_code == 503
    assert response.get_json()["reason"] == "database_unavailable"


def test_unknown_route_is_json_404(client):
    response = client.get("/api/nothing-here")
    assert response.status_code == 404
    assert "error" in response.get_json()


def test_unexpected_error_is_generic_500(app, client, alice, auth_headers, monkeypatch):
    from glucose_tracker.services.record_service import RecordService

    def explode(*args, **kwargs):
        raise RuntimeError("secret internal detail")

    monkeypatch.setattr(RecordService, "list_records", staticmethod(explode))

    response = client.get("/api/records", headers=auth_headers(alice))
    assert response.status_code == 500
    assert response.get_json() == {"error": "Internal server error"}
