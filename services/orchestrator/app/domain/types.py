"""Domain-level dataclasses for analyses, selections and plans."""
from __future__ import annotations

import enum
from dataclasses import dataclass, field


class Category(enum.Enum):
    security = "security"
    business_central = "businessCentral"
    performance = "performance"
    data_engineering = "dataEngineering"
    ai_integration = "aiIntegration"
    integration = "integration"
    monitoring = "monitoring"
    workspace = "workspace"
    ui = "ui"
    testing = "testing"


class SpecialistId(enum.Enum):
    security = "security"
    architecture = "architecture"
    business_central = "business-central"
    integration = "integration"
    workspace = "workspace"
    data_engineering = "data-engineering"
    ai_integration = "ai-integration"
    ui = "ui"
    performance = "performance"
    monitoring = "monitoring"
    testing = "testing"
    platform = "platform"
    documentation = "documentation"


class ComplexityLevel(enum.Enum):
    low = "low"
    medium = "medium"
    high = "high"
    very_high = "very-high"

    @property
    def rank(self) -> int:
        return _LEVEL_ORDER.index(self)

    def at_least(self, other: "ComplexityLevel") -> "ComplexityLevel":
        return self if self.rank >= other.rank else other


_LEVEL_ORDER = [ComplexityLevel.low, ComplexityLevel.medium, ComplexityLevel.high, ComplexityLevel.very_high]


class RecommendationPriority(enum.Enum):
    high = "high"
    medium = "medium"
    low = "low"


@dataclass(frozen=True)
class CategoryMatch:
    category: Category
    relevant: bool
    matched_keywords: tuple[str, ...] = ()


@dataclass(frozen=True)
class ComplexityAssessment:
    level: ComplexityLevel
    score: float


@dataclass(frozen=True)
class NonFunctionalFlags:
    performance: bool = False
    security: bool = False
    monitoring: bool = False
    real_time: bool = False

    def as_dict(self) -> dict[str, bool]:
        return {
            "performance": self.performance,
            "security": self.security,
            "monitoring": self.monitoring,
            "realTime": self.real_time,
        }


@dataclass(frozen=True)
class ExtractedRequirements:
    technical: tuple[str, ...] = ()
    integrations: tuple[str, ...] = ()
    non_functional: NonFunctionalFlags = field(default_factory=NonFunctionalFlags)


@dataclass(frozen=True)
class Analysis:
    """Structured classification of one project description."""

    description: str
    categories: tuple[CategoryMatch, ...]
    primary_categories: tuple[Category, ...]
    complexity: ComplexityAssessment
    requirements: ExtractedRequirements
    insights: tuple[str, ...] = ()

    def match_for(self, category: Category) -> CategoryMatch | None:
        for match in self.categories:
            if match.category is category:
                return match
        return None

    def is_relevant(self, category: Category) -> bool:
        match = self.match_for(category)
        return bool(match and match.relevant)

    @property
    def relevant_categories(self) -> tuple[CategoryMatch, ...]:
        return tuple(match for match in self.categories if match.relevant)

    @property
    def matched_keywords(self) -> tuple[str, ...]:
        seen: list[str] = []
        for match in self.relevant_categories:
            for keyword in match.matched_keywords:
                if keyword not in seen:
                    seen.append(keyword)
        return tuple(seen)


@dataclass(frozen=True)
class SelectedSpecialist:
    specialist: SpecialistId
    name: str
    resource: str
    priority: int
    index: int
    reasons: tuple[str, ...]
    deep_files: tuple[str, ...] = ()


@dataclass(frozen=True)
class ComplexityEstimate:
    level: ComplexityLevel
    estimated_hours: int
    estimated_days: int
    specialist_count: int


@dataclass(frozen=True)
class Selection:
    specialists: tuple[SelectedSpecialist, ...]
    count: int
    estimated_files: int
    complexity: ComplexityEstimate

    def get(self, specialist: SpecialistId) -> SelectedSpecialist | None:
        for selected in self.specialists:
            if selected.specialist is specialist:
                return selected
        return None

    def includes(self, specialist: SpecialistId) -> bool:
        return self.get(specialist) is not None


@dataclass(frozen=True)
class Step:
    sequence: int
    specialist: SpecialistId
    specialist_name: str
    action: str
    files: tuple[str, ...]
    description: str
    estimated_duration: str
    expected_outputs: tuple[str, ...] = ()


@dataclass(frozen=True)
class Phase:
    name: str
    priority: int
    steps: tuple[Step, ...]
    files_count: int
    estimated_hours: int


@dataclass(frozen=True)
class Plan:
    phases: tuple[Phase, ...]
    total_phases: int
    total_steps: int
    total_files: int
    estimated_hours: int


@dataclass(frozen=True)
class Recommendation:
    category: str
    priority: RecommendationPriority
    title: str
    description: str
    resources: tuple[str, ...] = ()


@dataclass(frozen=True)
class OrchestrationResult:
    analysis: Analysis
    selection: Selection
    plan: Plan
    recommendations: tuple[Recommendation, ...] = ()


__all__ = [
    "Analysis",
    "Category",
    "CategoryMatch",
    "ComplexityAssessment",
    "ComplexityEstimate",
    "ComplexityLevel",
    "ExtractedRequirements",
    "NonFunctionalFlags",
    "OrchestrationResult",
    "Phase",
    "Plan",
    "Recommendation",
    "RecommendationPriority",
    "SelectedSpecialist",
    "Selection",
    "SpecialistId",
    "Step",
]
