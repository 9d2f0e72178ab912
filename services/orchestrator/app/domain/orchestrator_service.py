"""Orchestration facade running analysis, selection and planning in order."""
from __future__ import annotations

import time
from typing import Any

import structlog
from opentelemetry import metrics, trace

from ..config import OrchestratorSettings, get_settings
from .analyzer import RequirementsAnalyzer
from .plan_builder import generate_plan
from .recommendations import generate_recommendations
from .registry import Registry, default_registry, load_registry
from .selector import SpecialistSelector
from .types import Analysis, OrchestrationResult

logger = structlog.get_logger(__name__)
tracer = trace.get_tracer(__name__)
meter = metrics.get_meter(__name__)

_runs = meter.create_counter("orchestrator.runs", description="Completed orchestration runs")
_run_duration = meter.create_histogram("orchestrator.run.duration", unit="ms")


class Orchestrator:
    def __init__(self, registry: Registry | None = None, settings: OrchestratorSettings | None = None) -> None:
        self._settings = settings or get_settings()
        self._registry = registry or self._registry_from_settings()
        self._analyzer = RequirementsAnalyzer(self._registry, self._settings.analyzer)
        self._selector = SpecialistSelector(self._registry, self._settings.selection)

    @property
    def registry(self) -> Registry:
        return self._registry

    def _registry_from_settings(self) -> Registry:
        if self._settings.registry.path:
            return load_registry(self._settings.registry.path)
        return default_registry()

    def analyze(self, description: Any) -> Analysis:
        with tracer.start_as_current_span("orchestrator.analyze"):
            return self._analyzer.analyze(description)

    def orchestrate(self, description: Any) -> OrchestrationResult:
        start = time.perf_counter()
        with tracer.start_as_current_span("orchestrator.run"):
            # InvalidInputError from the analyzer propagates before any later stage runs
            with tracer.start_as_current_span("orchestrator.analyze"):
                analysis = self._analyzer.analyze(description)
            with tracer.start_as_current_span("orchestrator.select"):
                selection = self._selector.select(analysis)
            with tracer.start_as_current_span("orchestrator.plan"):
                plan = generate_plan(analysis, selection, self._registry, self._settings.planner)
            recommendations = generate_recommendations(analysis, selection, self._registry)

        wall_time_ms = int((time.perf_counter() - start) * 1000)
        attributes = {"complexity": selection.complexity.level.value}
        _runs.add(1, attributes)
        _run_duration.record(wall_time_ms, attributes)
        logger.info(
            "orchestrator.run",
            specialists=selection.count,
            phases=plan.total_phases,
            steps=plan.total_steps,
            recommendations=len(recommendations),
            wall_time_ms=wall_time_ms,
        )
        return OrchestrationResult(
            analysis=analysis,
            selection=selection,
            plan=plan,
            recommendations=recommendations,
        )


def orchestrate(
    description: Any,
    registry: Registry | None = None,
    settings: OrchestratorSettings | None = None,
) -> OrchestrationResult:
    return Orchestrator(registry, settings).orchestrate(description)


__all__ = ["Orchestrator", "orchestrate"]
