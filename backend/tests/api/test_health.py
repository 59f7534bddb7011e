"""Health Probe: liveness and session count."""


async def test_health_reports_service_and_sessions(client, gateway, settings):
    gateway.open_session("10.0.0.1")
    response = await client.get("/health")
    assert response.status_code == 200
    assert response.json() == {
        "status": "healthy",
        "service": settings.service_name,
        "version": settings.service_version,
        "sessions": 1,
    }
