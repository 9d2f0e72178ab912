"""Specialist selection, effort estimation and the derived dependency view."""
from __future__ import annotations

import math
from dataclasses import dataclass

import structlog

from ..config import SelectionTuning, get_settings
from .registry import Registry, SpecialistDefinition, default_registry
from .types import (
    Analysis,
    ComplexityEstimate,
    ComplexityLevel,
    SelectedSpecialist,
    Selection,
    SpecialistId,
)

logger = structlog.get_logger(__name__)


REASON_ALWAYS = "Always included for production readiness"
REASON_COMPLEX = "Complex project requires architectural guidance"

_COMPLEX_LEVELS = (ComplexityLevel.high, ComplexityLevel.very_high)


class SpecialistSelector:
    """Maps an analysis onto the specialist registry."""

    def __init__(self, registry: Registry | None = None, tuning: SelectionTuning | None = None) -> None:
        self._registry = registry or default_registry()
        self._tuning = tuning or get_settings().selection

    def select(self, analysis: Analysis) -> Selection:
        chosen: list[tuple[SpecialistDefinition, list[str]]] = []
        for definition in self._registry.specialists:
            if definition.always_include:
                chosen.append((definition, [REASON_ALWAYS]))

        for definition in self._registry.specialists:
            if definition.always_include:
                continue
            reasons = self._reasons_for(definition, analysis)
            if reasons:
                chosen.append((definition, reasons))

        chosen.sort(key=lambda item: (item[0].priority, item[0].index))
        selected = tuple(
            SelectedSpecialist(
                specialist=definition.specialist,
                name=definition.name,
                resource=definition.resource,
                priority=definition.priority,
                index=definition.index,
                reasons=tuple(reasons),
                deep_files=self._resolve_deep_files(definition, analysis),
            )
            for definition, reasons in chosen
        )

        estimate = self._estimate(analysis, [definition for definition, _ in chosen])
        estimated_files = sum(1 + len(item.deep_files) for item in selected)
        selection = Selection(
            specialists=selected,
            count=len(selected),
            estimated_files=estimated_files,
            complexity=estimate,
        )
        logger.info(
            "selector.completed",
            specialists=[item.specialist.value for item in selected],
            estimated_hours=estimate.estimated_hours,
            level=estimate.level.value,
        )
        return selection

    def _reasons_for(self, definition: SpecialistDefinition, analysis: Analysis) -> list[str]:
        reasons: list[str] = []
        for category in definition.required_for:
            if analysis.is_relevant(category):
                reasons.append(f"Required for {category.value}")

        own_keywords = set(definition.keywords)
        overlapping = [
            match.category.value
            for match in analysis.relevant_categories
            if own_keywords.intersection(match.matched_keywords)
        ]
        if overlapping:
            reasons.append(f"Matched categories: {', '.join(overlapping)}")

        if definition.include_if_complex and analysis.complexity.level in _COMPLEX_LEVELS:
            reasons.append(REASON_COMPLEX)
        return reasons

    def _resolve_deep_files(self, definition: SpecialistDefinition, analysis: Analysis) -> tuple[str, ...]:
        matched = set(analysis.matched_keywords)
        relevant = [deep.path for deep in definition.deep_files if matched.intersection(deep.keywords)]
        rest = [deep.path for deep in definition.deep_files if deep.path not in relevant]
        return tuple((relevant + rest)[: self._tuning.deep_files_per_specialist])

    def _estimate(self, analysis: Analysis, definitions: list[SpecialistDefinition]) -> ComplexityEstimate:
        tuning = self._tuning
        count = len(definitions)
        hours = count * tuning.hours_per_specialist
        if analysis.complexity.level is ComplexityLevel.very_high:
            hours *= tuning.very_high_multiplier
        elif analysis.complexity.level is ComplexityLevel.high:
            hours *= tuning.high_multiplier
        hours += sum(definition.effort_surcharge_hours for definition in definitions)
        estimated_hours = math.ceil(hours)

        level = analysis.complexity.level
        if count >= tuning.high_floor_count:
            level = level.at_least(ComplexityLevel.high)
        elif count >= tuning.medium_floor_count:
            level = level.at_least(ComplexityLevel.medium)

        return ComplexityEstimate(
            level=level,
            estimated_hours=estimated_hours,
            estimated_days=math.ceil(estimated_hours / tuning.hours_per_day),
            specialist_count=count,
        )


def select_specialists(
    analysis: Analysis,
    registry: Registry | None = None,
    tuning: SelectionTuning | None = None,
) -> Selection:
    return SpecialistSelector(registry, tuning).select(analysis)


@dataclass(frozen=True)
class OrderingConflict:
    specialist: SpecialistId
    depends_on: SpecialistId
    description: str


def build_dependency_map(selection: Selection, registry: Registry | None = None) -> dict[SpecialistId, list[SpecialistId]]:
    """Derive which selected specialists each one depends on. Display only."""
    registry = registry or default_registry()
    selected = [item.specialist for item in selection.specialists]
    dependencies: dict[SpecialistId, list[SpecialistId]] = {specialist: [] for specialist in selected}

    for rule in registry.dependency_rules:
        if rule.specialist not in dependencies:
            continue
        others = [specialist for specialist in selected if specialist is not rule.specialist and specialist not in rule.exclude]
        if rule.direction == "upstream":
            for specialist in others:
                if rule.specialist not in dependencies[specialist]:
                    dependencies[specialist].append(rule.specialist)
        else:
            for specialist in others:
                if specialist not in dependencies[rule.specialist]:
                    dependencies[rule.specialist].append(specialist)
    return dependencies


def find_ordering_conflicts(
    selection: Selection,
    dependencies: dict[SpecialistId, list[SpecialistId]],
) -> list[OrderingConflict]:
    priorities = {item.specialist: item.priority for item in selection.specialists}
    conflicts: list[OrderingConflict] = []
    for specialist, upstream in dependencies.items():
        for dependency in upstream:
            if priorities[dependency] > priorities[specialist]:
                conflicts.append(
                    OrderingConflict(
                        specialist=specialist,
                        depends_on=dependency,
                        description=(
                            f"{specialist.value} (priority {priorities[specialist]}) depends on "
                            f"{dependency.value} (priority {priorities[dependency]})"
                        ),
                    )
                )
    return conflicts


__all__ = [
    "OrderingConflict",
    "SpecialistSelector",
    "build_dependency_map",
    "find_ordering_conflicts",
    "select_specialists",
]
