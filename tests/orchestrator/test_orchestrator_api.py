import pytest
from httpx import ASGITransport, AsyncClient

from services.orchestrator.app.main import create_app

SCENARIO_A = (
    "Build a system that syncs orders from Business Central to Google Sheets "
    "with OAuth2, caching, and error handling"
)

app = create_app()


@pytest.mark.asyncio
async def test_create_orchestration():
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        response = await client.post("/orchestrations", json={"description": SCENARIO_A})
        assert response.status_code == 200, response.text
        data = response.json()
        assert data["selection"]["count"] == 9
        assert data["plan"]["totalPhases"] == 7
        assert data["recommendations"][0]["title"] == "Secure Credential Storage"


@pytest.mark.asyncio
@pytest.mark.parametrize("payload", [{"description": "short"}, {"description": "   "}, {}])
async def test_invalid_description_is_rejected(payload):
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        response = await client.post("/orchestrations", json=payload)
        assert response.status_code == 422
        body = response.json()
        assert body["error"] == "InvalidInput"
        assert body["remediation"] == "Describe the project in at least 10 characters"


@pytest.mark.asyncio
async def test_text_report_and_analysis():
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        report_resp = await client.post("/orchestrations/report", json={"description": SCENARIO_A})
        assert report_resp.status_code == 200
        assert report_resp.headers["content-type"].startswith("text/plain")
        assert "EXECUTION PLAN" in report_resp.text

        analysis_resp = await client.post("/orchestrations/analysis", json={"description": SCENARIO_A})
        assert analysis_resp.status_code == 200
        analysis = analysis_resp.json()
        assert analysis["complexity"]["level"] == "very-high"
        assert "selection" not in analysis


@pytest.mark.asyncio
async def test_list_specialists_and_healthcheck():
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        specialists_resp = await client.get("/specialists")
        assert specialists_resp.status_code == 200
        specialists = specialists_resp.json()
        assert specialists[0]["id"] == "security"
        assert specialists[-1]["id"] == "documentation"
        platform = next(item for item in specialists if item["id"] == "platform")
        assert platform["alwaysInclude"] is True
        assert platform["includeIfComplex"] is False
        assert platform["deepFiles"][0] == "deep/platform/deployment.md"
        security = specialists[0]
        assert security["requiredFor"] == ["security"]
        assert "required_for" not in security

        health_resp = await client.get("/healthz")
        assert health_resp.status_code == 200
        assert health_resp.json()["status"] == "ok"
