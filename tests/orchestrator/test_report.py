import json

from services.orchestrator.app.domain.orchestrator_service import Orchestrator, orchestrate
from services.orchestrator.app.domain.registry import RegistryOverrides, apply_overrides
from services.orchestrator.app.domain.report import build_analysis_report, build_report, format_report

SCENARIO_A = (
    "Build a system that syncs orders from Business Central to Google Sheets "
    "with OAuth2, caching, and error handling"
)


def test_build_report_is_json_ready(settings):
    report = build_report(orchestrate(SCENARIO_A, settings=settings))

    assert set(report) == {"analysis", "selection", "plan", "recommendations"}
    assert report["analysis"]["complexity"] == {"level": "very-high", "score": 9.5}
    assert report["analysis"]["primaryCategories"] == ["security", "businessCentral", "performance"]
    assert report["selection"]["count"] == 9
    assert report["selection"]["specialists"][0]["id"] == "security"
    assert report["selection"]["dependencies"]["architecture"] == ["security"]
    assert report["plan"]["totalSteps"] == 27
    assert report["plan"]["phases"][0]["steps"][0]["sequence"] == 1
    assert report["recommendations"][0]["priority"] == "high"
    json.dumps(report)


def test_analysis_report_flags():
    orchestrator = Orchestrator()
    report = build_analysis_report(orchestrator.analyze("Real-time dashboard of Sheets data"))

    assert report["requirements"]["nonFunctional"]["realTime"] is True
    assert report["categories"]["ui"] == {"relevant": True, "matchedKeywords": ["dashboard"]}


def test_format_report_sections(settings):
    text = format_report(orchestrate(SCENARIO_A, settings=settings))

    assert "SPECIALIST ORCHESTRATION REPORT" in text
    for heading in ("ANALYSIS", "SPECIALISTS", "EXECUTION PLAN", "RECOMMENDATIONS"):
        assert f"\n{heading}\n" in text
    assert "[1] Security Engineer (specialists/security-engineer.md)" in text
    assert "Phase 1: Foundation & Security (3 steps, ~3h)" in text
    assert "file: deep/security/oauth2-service-account.md" in text
    assert "[low] Deployment & Rollback Runbook" in text
    assert "Ordering conflicts" not in text
    assert text.endswith("\n")


def test_format_report_lists_ordering_conflicts(registry, settings):
    custom = apply_overrides(
        registry,
        RegistryOverrides.model_validate({"specialists": [{"id": "security", "priority": 9}]}),
    )
    result = Orchestrator(custom, settings).orchestrate("Store the client secret in script properties")
    text = format_report(result, custom)

    assert "Ordering conflicts:" in text
    assert "platform (priority 7) depends on security (priority 9)" in text


def test_format_report_tolerates_missing_result():
    text = format_report(None)

    assert text.strip()
    assert "(none)" in text
    assert "Totals: 0 phases" in text
