# tests/v1/test_system.py
"""Tests for the operational system endpoints."""

from fastapi import status

from phochak.services.push import PushClient


def _healthy_push_client(mocker, push_status: str = "healthy"):
    client = mocker.AsyncMock(spec=PushClient)
    client.health_check.return_value = {
        "enabled": True,
        "status": push_status,
        "circuit_breaker": "closed",
    }
    mocker.patch("phochak.api.v1.endpoints.system.push_enabled", return_value=True)
    mocker.patch("phochak.api.v1.endpoints.system.get_push_client", return_value=client)
    return client


def test_push_health_when_disabled(client) -> None:
    response = client.get("/api/v1/system/push/health")

    assert response.status_code == status.HTTP_200_OK
    assert response.json()["status"] == "disabled"
    assert response.json()["enabled"] is False


def test_push_health_reports_gateway_status(client, mocker) -> None:
    push_client = _healthy_push_client(mocker)

    response = client.get("/api/v1/system/push/health")

    assert response.status_code == status.HTTP_200_OK
    assert response.json() == {"enabled": True, "status": "healthy", "circuit_breaker": "closed"}
    push_client.health_check.assert_awaited_once()


def test_system_health_with_push_disabled(client) -> None:
    response = client.get("/api/v1/system/health")

    assert response.status_code == status.HTTP_200_OK
    data = response.json()
    assert data["status"] == "healthy"
    assert data["components"] == {"database": "healthy", "push": "disabled"}


def test_system_health_stays_healthy_when_push_is_down(client, mocker) -> None:
    _healthy_push_client(mocker, push_status="error")

    response = client.get("/api/v1/system/health")

    data = response.json()
    assert data["status"] == "healthy"
    assert data["components"]["push"] == "error"
