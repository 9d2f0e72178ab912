"""Cross-cutting recommendations derived from a selection and its analysis."""
from __future__ import annotations

from .registry import Registry, default_registry
from .types import Analysis, Recommendation, RecommendationPriority, Selection

_PRIORITY_ORDER = {
    RecommendationPriority.high: 0,
    RecommendationPriority.medium: 1,
    RecommendationPriority.low: 2,
}


def generate_recommendations(
    analysis: Analysis,
    selection: Selection,
    registry: Registry | None = None,
) -> tuple[Recommendation, ...]:
    registry = registry or default_registry()
    fired: list[Recommendation] = []
    titles: set[str] = set()
    for rule in registry.recommendation_rules:
        triggered = any(selection.includes(specialist) for specialist in rule.specialists) or any(
            analysis.is_relevant(category) for category in rule.categories
        )
        if triggered and rule.recommendation.title not in titles:
            titles.add(rule.recommendation.title)
            fired.append(rule.recommendation)
    return tuple(sorted(fired, key=lambda item: _PRIORITY_ORDER[item.priority]))


__all__ = ["generate_recommendations"]
