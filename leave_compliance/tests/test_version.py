"""
Tests for version endpoint
"""
from fastapi import status
from leave_compliance.constants import SERVICE_NAME


def test_version_endpoint_returns_service_and_env(client):
    response = client.get("/api/v1/version")

    assert response.status_code == status.HTTP_200_OK
    data = response.json()

    assert data["service"] == SERVICE_NAME
    assert "version" in data
    assert data["env"] in ["local", "staging", "prod"]
