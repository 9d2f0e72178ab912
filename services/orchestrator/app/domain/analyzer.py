"""Requirements analysis: keyword classification and complexity scoring."""
from __future__ import annotations

from typing import Any

import structlog

from ..config import AnalyzerTuning, get_settings
from .errors import InvalidInputError
from .registry import Registry, default_registry, normalize
from .types import (
    Analysis,
    Category,
    CategoryMatch,
    ComplexityAssessment,
    ComplexityLevel,
    ExtractedRequirements,
    NonFunctionalFlags,
)

logger = structlog.get_logger(__name__)


INSIGHT_NO_CATEGORIES = (
    "No requirement categories matched; add concrete services, integrations or constraints to the description"
)
INSIGHT_SECURITY_WITHOUT_OAUTH = (
    "Security-relevant requirements found but no explicit OAuth2 requirement; confirm the authentication model"
)
INSIGHT_VAGUE_COMPLEX = (
    "Very high complexity with fewer than 2 categories matched; the description may be too vague"
)
INSIGHT_ERP_WITHOUT_SECURITY = (
    "Business Central integration without security requirements; its APIs require OAuth2 service-to-service authentication"
)
INSIGHT_MULTIPLE_SYSTEMS = (
    "Multiple external systems involved; plan for retries, rate limits and idempotent sync"
)
INSIGHT_AI_WITHOUT_MONITORING = (
    "AI integration without monitoring requirements; track token usage and API failures"
)


class RequirementsAnalyzer:
    """Classifies a free-text project description against the category registry."""

    def __init__(self, registry: Registry | None = None, tuning: AnalyzerTuning | None = None) -> None:
        self._registry = registry or default_registry()
        self._tuning = tuning or get_settings().analyzer

    def analyze(self, description: Any) -> Analysis:
        """
        Analyze a project description.

        Args:
            description: Free-text project description

        Returns:
            Analysis with category relevance, complexity, requirements and insights

        Raises:
            InvalidInputError: If the description is missing, not text, or too short
        """
        self._validate(description)
        text = normalize(description)

        matches = self._match_categories(text)
        high_signal_hits = [keyword for keyword in self._registry.high_signal_keywords if keyword in text]
        complexity = self._assess_complexity(matches, high_signal_hits, len(description.strip()))
        primary = self._primary_categories(matches)
        requirements = self._extract_requirements(matches, high_signal_hits)
        insights = self._generate_insights(matches, complexity)

        analysis = Analysis(
            description=description,
            categories=tuple(matches),
            primary_categories=primary,
            complexity=complexity,
            requirements=requirements,
            insights=tuple(insights),
        )
        logger.info(
            "analyzer.completed",
            relevant_categories=[match.category.value for match in analysis.relevant_categories],
            complexity=complexity.level.value,
            score=complexity.score,
        )
        return analysis

    def _validate(self, description: Any) -> None:
        min_length = self._tuning.min_description_length
        if description is None or not isinstance(description, str):
            raise InvalidInputError("Project description is required", min_length=min_length)
        stripped = description.strip()
        if not stripped:
            raise InvalidInputError("Project description cannot be empty", min_length=min_length)
        if len(stripped) < min_length:
            raise InvalidInputError(
                f"Project description must be at least {min_length} characters (got {len(stripped)})",
                min_length=min_length,
            )

    def _match_categories(self, text: str) -> list[CategoryMatch]:
        matches: list[CategoryMatch] = []
        for definition in self._registry.categories:
            matched = tuple(keyword for keyword in definition.keywords if keyword in text)
            matches.append(CategoryMatch(category=definition.category, relevant=bool(matched), matched_keywords=matched))
        return matches

    def _length_score(self, length: int) -> float:
        for upper, score in self._tuning.length_buckets:
            if length < upper:
                return score
        return self._tuning.length_bucket_max

    def _assess_complexity(
        self,
        matches: list[CategoryMatch],
        high_signal_hits: list[str],
        length: int,
    ) -> ComplexityAssessment:
        tuning = self._tuning
        relevant = [match for match in matches if match.relevant]
        keyword_count = sum(len(match.matched_keywords) for match in relevant)
        score = (
            tuning.category_weight * len(relevant)
            + tuning.keyword_weight * keyword_count
            + tuning.high_signal_weight * len(high_signal_hits)
            + self._length_score(length)
        )
        score = round(score, 2)
        return ComplexityAssessment(level=self.level_for(score), score=score)

    def level_for(self, score: float) -> ComplexityLevel:
        if score < self._tuning.low_below:
            return ComplexityLevel.low
        if score < self._tuning.medium_below:
            return ComplexityLevel.medium
        if score <= self._tuning.high_up_to:
            return ComplexityLevel.high
        return ComplexityLevel.very_high

    def _primary_categories(self, matches: list[CategoryMatch]) -> tuple[Category, ...]:
        order = {definition.category: definition.index for definition in self._registry.categories}
        relevant = [match for match in matches if match.relevant]
        ranked = sorted(relevant, key=lambda match: (-len(match.matched_keywords), order[match.category]))
        return tuple(match.category for match in ranked[: self._tuning.primary_category_limit])

    def _extract_requirements(self, matches: list[CategoryMatch], high_signal_hits: list[str]) -> ExtractedRequirements:
        integration_like = {
            definition.category for definition in self._registry.categories if definition.integration_like
        }
        technical: list[str] = []
        integrations: list[str] = []
        relevant: set[Category] = set()
        for match in matches:
            if not match.relevant:
                continue
            relevant.add(match.category)
            for keyword in match.matched_keywords:
                if keyword not in technical:
                    technical.append(keyword)
                if match.category in integration_like and keyword not in integrations:
                    integrations.append(keyword)

        flags = NonFunctionalFlags(
            performance=Category.performance in relevant,
            security=Category.security in relevant,
            monitoring=Category.monitoring in relevant,
            real_time=any(hit in self._registry.real_time_keywords for hit in high_signal_hits),
        )
        return ExtractedRequirements(technical=tuple(technical), integrations=tuple(integrations), non_functional=flags)

    def _generate_insights(self, matches: list[CategoryMatch], complexity: ComplexityAssessment) -> list[str]:
        by_category = {match.category: match for match in matches}
        relevant = {match.category for match in matches if match.relevant}
        integration_like = {
            definition.category for definition in self._registry.categories if definition.integration_like
        }
        insights: list[str] = []

        if not relevant:
            insights.append(INSIGHT_NO_CATEGORIES)
        if Category.security in relevant:
            security_keywords = by_category[Category.security].matched_keywords
            if not any(keyword.startswith("oauth") for keyword in security_keywords):
                insights.append(INSIGHT_SECURITY_WITHOUT_OAUTH)
        if complexity.level is ComplexityLevel.very_high and len(relevant) < 2:
            insights.append(INSIGHT_VAGUE_COMPLEX)
        if Category.business_central in relevant and Category.security not in relevant:
            insights.append(INSIGHT_ERP_WITHOUT_SECURITY)
        if len(relevant & integration_like) >= 2:
            insights.append(INSIGHT_MULTIPLE_SYSTEMS)
        if Category.ai_integration in relevant and Category.monitoring not in relevant:
            insights.append(INSIGHT_AI_WITHOUT_MONITORING)
        return insights


def analyze(
    description: Any,
    registry: Registry | None = None,
    tuning: AnalyzerTuning | None = None,
) -> Analysis:
    return RequirementsAnalyzer(registry, tuning).analyze(description)


__all__ = ["RequirementsAnalyzer", "analyze", "normalize"]
