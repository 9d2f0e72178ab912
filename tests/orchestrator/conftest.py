import pytest

from services.orchestrator.app.config import OrchestratorSettings
from services.orchestrator.app.domain.registry import default_registry


@pytest.fixture
def settings() -> OrchestratorSettings:
    return OrchestratorSettings()


@pytest.fixture
def registry():
    return default_registry()
