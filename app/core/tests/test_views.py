"""Tests for the health check endpoint."""

import pytest
from django.db import OperationalError


@pytest.mark.django_db
class TestHealthCheck:
    def test_all_components_connected(self, client):
        response = client.get("/health/")

        assert response.status_code == 200
        assert response.json() == {
            "status": "healthy",
            "database": "connected",
            "cache": "connected",
            "channel_layer": "connected",
        }

    def test_database_down_is_unhealthy(self, client, mocker):
        connection = mocker.patch("core.views.connection")
        connection.cursor.side_effect = OperationalError("down")

        response = client.get("/health/")

        assert response.status_code == 503
        assert response.json()["database"] == "disconnected"

    def test_channel_layer_down_is_degraded(self, client, mocker):
        mocker.patch("core.views.get_channel_layer", side_effect=RuntimeError("no layer"))

        response = client.get("/health/")

        assert response.status_code == 200
        assert response.json()["channel_layer"] == "disconnected"
