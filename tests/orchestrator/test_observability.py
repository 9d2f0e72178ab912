import json

import structlog
from opentelemetry.sdk.trace import TracerProvider

from services.orchestrator.app.config import ObservabilitySettings, OrchestratorSettings
from services.orchestrator.app.observability.logging_config import configure_logging
from services.orchestrator.app.observability.otel import configure_telemetry


def test_json_logs_go_to_stderr(capsys):
    configure_logging(OrchestratorSettings(observability=ObservabilitySettings(log_json=True)))
    structlog.get_logger("tests").info("orchestrator.test_event", specialists=2)

    captured = capsys.readouterr()
    assert captured.out == ""
    event = json.loads(captured.err.strip().splitlines()[-1])
    assert event["event"] == "orchestrator.test_event"
    assert event["level"] == "info"
    assert event["specialists"] == 2


def test_log_level_filters_events(capsys):
    configure_logging(OrchestratorSettings(observability=ObservabilitySettings(log_level="warning")))
    structlog.get_logger("tests").info("orchestrator.quiet")

    assert capsys.readouterr().err == ""
    configure_logging(OrchestratorSettings())


def test_telemetry_without_endpoint_installs_provider():
    settings = OrchestratorSettings(observability=ObservabilitySettings(otel_service_name="orchestrator-tests"))
    provider = configure_telemetry(settings)

    assert isinstance(provider, TracerProvider)
    assert provider.resource.attributes["service.name"] == "orchestrator-tests"
