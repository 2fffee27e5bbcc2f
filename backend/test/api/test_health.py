"""Tests for the unauthenticated health endpoint."""

import pytest


@pytest.mark.asyncio
async def test_health_reports_party_size(client):
    response = await client.get("/health")

    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "healthy"
    assert body["service"] == "Aosha Campaign API"
    assert body["party_members"] >= 0
