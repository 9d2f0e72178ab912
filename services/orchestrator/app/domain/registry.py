"""Static category and specialist registry.

The registry is read-only configuration shared by every pipeline run. Hosts
may start from :func:`default_registry` and apply a JSON override document
with :func:`load_registry`.
"""
from __future__ import annotations

import json
from dataclasses import dataclass, field, replace
from functools import lru_cache
from pathlib import Path
from typing import Any

import structlog
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .errors import RegistryError
from .tables import (
    DEPENDENCY_RULES,
    OUTPUT_HINTS,
    PHASE_NAMES,
    RECOMMENDATION_RULES,
    DependencyRule,
    RecommendationRule,
)
from .types import Category, SpecialistId

logger = structlog.get_logger(__name__)


def normalize(text: str) -> str:
    """Case-fold and collapse whitespace; descriptions and keywords share this form."""
    return " ".join(text.casefold().split())


@dataclass(frozen=True)
class CategoryDefinition:
    category: Category
    keywords: tuple[str, ...]
    index: int
    integration_like: bool = False


@dataclass(frozen=True)
class DeepFile:
    path: str
    keywords: tuple[str, ...] = ()


@dataclass(frozen=True)
class SpecialistDefinition:
    specialist: SpecialistId
    name: str
    resource: str
    keywords: tuple[str, ...]
    priority: int
    index: int
    required_for: tuple[Category, ...] = ()
    deep_files: tuple[DeepFile, ...] = ()
    always_include: bool = False
    include_if_complex: bool = False
    effort_surcharge_hours: float = 0.0


@dataclass(frozen=True)
class Registry:
    categories: tuple[CategoryDefinition, ...]
    specialists: tuple[SpecialistDefinition, ...]
    high_signal_keywords: tuple[str, ...] = ()
    # high-signal keywords that also set the real-time requirement flag
    real_time_keywords: tuple[str, ...] = ("real-time", "realtime")
    phase_names: tuple[tuple[int, str], ...] = PHASE_NAMES
    output_hints: tuple[tuple[SpecialistId, tuple[str, ...]], ...] = OUTPUT_HINTS
    recommendation_rules: tuple[RecommendationRule, ...] = RECOMMENDATION_RULES
    dependency_rules: tuple[DependencyRule, ...] = DEPENDENCY_RULES
    source: str = field(default="embedded", compare=False)

    def __post_init__(self) -> None:
        category_ids = [definition.category for definition in self.categories]
        if len(set(category_ids)) != len(category_ids):
            raise RegistryError("Duplicate category definitions in registry")
        specialist_ids = [definition.specialist for definition in self.specialists]
        if len(set(specialist_ids)) != len(specialist_ids):
            raise RegistryError("Duplicate specialist definitions in registry")
        if not any(definition.always_include for definition in self.specialists):
            raise RegistryError("Registry requires at least one always-included specialist")

    def category(self, category: Category) -> CategoryDefinition | None:
        for definition in self.categories:
            if definition.category is category:
                return definition
        return None

    def specialist(self, specialist: SpecialistId) -> SpecialistDefinition | None:
        for definition in self.specialists:
            if definition.specialist is specialist:
                return definition
        return None

    def phase_name(self, priority: int) -> str:
        for value, name in self.phase_names:
            if value == priority:
                return name
        return f"Phase {priority}"

    def output_hints_for(self, specialist: SpecialistId) -> tuple[str, ...]:
        for key, hints in self.output_hints:
            if key is specialist:
                return hints
        return (f"{specialist.value}-implementation.gs",)


def _categories() -> tuple[CategoryDefinition, ...]:
    rows: list[tuple[Category, tuple[str, ...], bool]] = [
        (
            Category.security,
            (
                "security",
                "oauth2",
                "oauth",
                "authentication",
                "authorization",
                "credential",
                "api key",
                "token",
                "secrets",
                "client secret",
                "encrypt",
                "permission",
                "propertiesservice",
            ),
            False,
        ),
        (
            Category.business_central,
            (
                "business central",
                "dynamics 365",
                "d365",
                "navision",
                "odata",
                "sales order",
                "purchase order",
                "customer order",
                "invoice",
                "inventory",
                "general ledger",
            ),
            True,
        ),
        (
            Category.performance,
            (
                "performance",
                "caching",
                "cache",
                "batch",
                "quotas",
                "execution time",
                "timeout",
                "large dataset",
                "optimize",
                "high volume",
            ),
            False,
        ),
        (
            Category.data_engineering,
            (
                "etl",
                "pipeline",
                "syncs",
                "syncing",
                "synchron",
                "data sync",
                "transform",
                "bigquery",
                "data warehouse",
                "migration",
                "dataset",
            ),
            False,
        ),
        (
            Category.ai_integration,
            (
                "artificial intelligence",
                "machine learning",
                "claude",
                "openai",
                "gemini",
                "llm",
                "prompts",
                "prompt template",
                "summarize",
                "classification",
                "generative",
            ),
            True,
        ),
        (
            Category.integration,
            (
                "rest api",
                "api call",
                "api integration",
                "api endpoint",
                "external api",
                "web api",
                "webhook",
                "urlfetchapp",
                "http",
                "json",
                "endpoint",
                "third-party",
                "external system",
            ),
            True,
        ),
        (
            Category.monitoring,
            (
                "monitoring",
                "logging",
                "error handling",
                "alert",
                "audit",
                "metrics",
                "health check",
                "observability",
            ),
            False,
        ),
        (
            Category.workspace,
            (
                "sheets",
                "spreadsheet",
                "gmail",
                "email",
                "google drive",
                "shared drive",
                "drive folder",
                "calendar",
                "google docs",
                "google forms",
                "slides",
                "trigger",
            ),
            True,
        ),
        (
            Category.ui,
            (
                "sidebar",
                "dialog",
                "web app",
                "htmlservice",
                "html service",
                "user interface",
                "custom menu",
                "frontend",
                "dashboard",
            ),
            False,
        ),
        (
            Category.testing,
            (
                "unit test",
                "integration test",
                "end-to-end test",
                "automated tests",
                "test harness",
                "regression",
                "mocking",
                "mocks",
                "quality assurance",
                "validation",
            ),
            False,
        ),
    ]
    return tuple(
        CategoryDefinition(category=category, keywords=keywords, index=idx, integration_like=integration_like)
        for idx, (category, keywords, integration_like) in enumerate(rows)
    )


def _specialists() -> tuple[SpecialistDefinition, ...]:
    rows: list[dict[str, Any]] = [
        dict(
            specialist=SpecialistId.security,
            name="Security Engineer",
            resource="specialists/security-engineer.md",
            keywords=("oauth2", "oauth", "credential", "api key", "token", "secrets", "client secret", "propertiesservice", "encrypt"),
            priority=1,
            required_for=(Category.security,),
            deep_files=(
                DeepFile("deep/security/oauth2-service-account.md", ("oauth2", "oauth")),
                DeepFile("deep/security/properties-service-secrets.md", ("secrets", "client secret", "api key", "credential", "propertiesservice")),
                DeepFile("deep/security/token-caching.md", ("token",)),
                DeepFile("deep/security/input-validation.md"),
            ),
            effort_surcharge_hours=3,
        ),
        dict(
            specialist=SpecialistId.architecture,
            name="Solution Architect",
            resource="specialists/solution-architect.md",
            keywords=("architecture", "multi-system", "enterprise", "scalable", "modular"),
            priority=2,
            deep_files=(
                DeepFile("deep/architecture/module-layout.md"),
                DeepFile("deep/architecture/configuration-management.md"),
                DeepFile("deep/architecture/library-versioning.md"),
            ),
            include_if_complex=True,
        ),
        dict(
            specialist=SpecialistId.business_central,
            name="Business Central Integrator",
            resource="specialists/business-central-integrator.md",
            keywords=("business central", "dynamics 365", "d365", "odata", "sales order", "purchase order", "invoice", "inventory"),
            priority=3,
            required_for=(Category.business_central,),
            deep_files=(
                DeepFile("deep/business-central/oauth2-setup.md", ("oauth2", "oauth")),
                DeepFile("deep/business-central/odata-pagination.md", ("odata",)),
                DeepFile("deep/business-central/incremental-sync.md", ("syncs", "syncing", "synchron", "data sync")),
                DeepFile("deep/business-central/error-codes.md", ("error handling",)),
            ),
            effort_surcharge_hours=2,
        ),
        dict(
            specialist=SpecialistId.integration,
            name="Integration Engineer",
            resource="specialists/integration-engineer.md",
            keywords=(
                "rest api",
                "api call",
                "api integration",
                "api endpoint",
                "external api",
                "web api",
                "webhook",
                "urlfetchapp",
                "http",
                "json",
                "endpoint",
                "odata",
            ),
            priority=3,
            required_for=(Category.integration,),
            deep_files=(
                DeepFile("deep/integration/urlfetch-patterns.md", ("urlfetchapp", "http")),
                DeepFile("deep/integration/retry-backoff.md"),
                DeepFile("deep/integration/webhooks.md", ("webhook",)),
            ),
        ),
        dict(
            specialist=SpecialistId.workspace,
            name="Workspace Automation Specialist",
            resource="specialists/workspace-automation.md",
            keywords=(
                "sheets",
                "spreadsheet",
                "gmail",
                "email",
                "google drive",
                "shared drive",
                "drive folder",
                "calendar",
                "google docs",
                "google forms",
                "slides",
                "trigger",
            ),
            priority=3,
            required_for=(Category.workspace,),
            deep_files=(
                DeepFile("deep/workspace/sheets-patterns.md", ("sheets", "spreadsheet")),
                DeepFile("deep/workspace/gmail-automation.md", ("gmail", "email")),
                DeepFile("deep/workspace/triggers.md", ("trigger",)),
                DeepFile("deep/workspace/drive-files.md", ("google drive", "shared drive", "drive folder")),
            ),
        ),
        dict(
            specialist=SpecialistId.data_engineering,
            name="Data Engineer",
            resource="specialists/data-engineer.md",
            keywords=("etl", "pipeline", "syncs", "syncing", "synchron", "data sync", "transform", "bigquery", "data warehouse", "migration", "dataset"),
            priority=4,
            required_for=(Category.data_engineering,),
            deep_files=(
                DeepFile("deep/data/etl-patterns.md", ("etl", "pipeline", "transform")),
                DeepFile("deep/data/checkpointing.md", ("syncs", "syncing", "synchron", "data sync", "migration")),
                DeepFile("deep/data/bigquery-loading.md", ("bigquery", "data warehouse")),
            ),
        ),
        dict(
            specialist=SpecialistId.ai_integration,
            name="AI Integration Specialist",
            resource="specialists/ai-integration.md",
            keywords=("claude", "openai", "gemini", "llm", "prompts", "prompt template", "summarize", "classification", "generative"),
            priority=4,
            required_for=(Category.ai_integration,),
            deep_files=(
                DeepFile("deep/ai/claude-api.md", ("claude",)),
                DeepFile("deep/ai/prompt-templates.md", ("prompts", "prompt template")),
                DeepFile("deep/ai/token-budgeting.md"),
            ),
            effort_surcharge_hours=4,
        ),
        dict(
            specialist=SpecialistId.ui,
            name="UI Developer",
            resource="specialists/ui-developer.md",
            keywords=("sidebar", "dialog", "web app", "htmlservice", "html service", "user interface", "custom menu", "frontend", "dashboard"),
            priority=5,
            required_for=(Category.ui,),
            deep_files=(
                DeepFile("deep/ui/html-service.md", ("htmlservice", "html service", "sidebar", "dialog")),
                DeepFile("deep/ui/web-apps.md", ("web app",)),
                DeepFile("deep/ui/dashboards.md", ("dashboard",)),
            ),
        ),
        dict(
            specialist=SpecialistId.performance,
            name="Performance Engineer",
            resource="specialists/performance-engineer.md",
            keywords=("caching", "cache", "batch", "quotas", "execution time", "timeout", "large dataset", "optimize", "high volume"),
            priority=6,
            required_for=(Category.performance,),
            deep_files=(
                DeepFile("deep/performance/batch-operations.md", ("batch", "large dataset", "high volume")),
                DeepFile("deep/performance/cache-service.md", ("caching", "cache")),
                DeepFile("deep/performance/execution-limits.md", ("execution time", "timeout", "quotas")),
            ),
        ),
        dict(
            specialist=SpecialistId.monitoring,
            name="Monitoring Engineer",
            resource="specialists/monitoring-engineer.md",
            keywords=("logging", "error handling", "alert", "audit", "metrics", "health check", "monitoring", "observability"),
            priority=6,
            required_for=(Category.monitoring,),
            deep_files=(
                DeepFile("deep/monitoring/structured-logging.md", ("logging", "observability")),
                DeepFile("deep/monitoring/error-handling.md", ("error handling",)),
                DeepFile("deep/monitoring/alerting.md", ("alert", "health check")),
            ),
        ),
        dict(
            specialist=SpecialistId.testing,
            name="QA Engineer",
            resource="specialists/qa-engineer.md",
            keywords=(
                "unit test",
                "integration test",
                "end-to-end test",
                "automated tests",
                "test harness",
                "regression",
                "mocking",
                "mocks",
                "quality assurance",
                "validation",
            ),
            priority=7,
            required_for=(Category.testing,),
            deep_files=(
                DeepFile("deep/testing/test-harness.md", ("unit test", "automated tests", "test harness")),
                DeepFile("deep/testing/mocking-services.md", ("mocking", "mocks")),
            ),
        ),
        dict(
            specialist=SpecialistId.platform,
            name="Platform Engineer",
            resource="specialists/platform-engineer.md",
            keywords=("deployment", "clasp", "ci/cd", "versioning", "rollback"),
            priority=7,
            deep_files=(
                DeepFile("deep/platform/deployment.md"),
                DeepFile("deep/platform/rollback.md"),
                DeepFile("deep/platform/pre-deploy-checks.md"),
            ),
            always_include=True,
        ),
        dict(
            specialist=SpecialistId.documentation,
            name="Technical Writer",
            resource="specialists/technical-writer.md",
            keywords=("documentation", "readme", "runbook", "handoff", "training"),
            priority=8,
            deep_files=(
                DeepFile("deep/documentation/readme-template.md"),
                DeepFile("deep/documentation/runbooks.md"),
            ),
            include_if_complex=True,
        ),
    ]
    return tuple(SpecialistDefinition(index=idx, **row) for idx, row in enumerate(rows))


HIGH_SIGNAL_KEYWORDS: tuple[str, ...] = (
    "enterprise",
    "multi-system",
    "real-time",
    "realtime",
    "mission-critical",
    "compliance",
    "high-volume",
    "multi-tenant",
)


@lru_cache(maxsize=1)
def default_registry() -> Registry:
    """Return the embedded registry."""
    return Registry(
        categories=_categories(),
        specialists=_specialists(),
        high_signal_keywords=HIGH_SIGNAL_KEYWORDS,
    )


class CategoryOverride(BaseModel):
    id: Category
    keywords: list[str] | None = None
    integration_like: bool | None = Field(default=None, alias="integrationLike")

    model_config = ConfigDict(populate_by_name=True, extra="forbid")


class DeepFileOverride(BaseModel):
    path: str
    keywords: list[str] = Field(default_factory=list)


class SpecialistOverride(BaseModel):
    id: SpecialistId
    name: str | None = None
    resource: str | None = None
    keywords: list[str] | None = None
    priority: int | None = Field(default=None, ge=0)
    required_for: list[Category] | None = Field(default=None, alias="requiredFor")
    deep_files: list[DeepFileOverride] | None = Field(default=None, alias="deepFiles")
    always_include: bool | None = Field(default=None, alias="alwaysInclude")
    include_if_complex: bool | None = Field(default=None, alias="includeIfComplex")
    effort_surcharge_hours: float | None = Field(default=None, ge=0, alias="effortSurchargeHours")

    model_config = ConfigDict(populate_by_name=True, extra="forbid")


class RegistryOverrides(BaseModel):
    """JSON document shape accepted by :func:`load_registry`."""

    categories: list[CategoryOverride] = Field(default_factory=list)
    specialists: list[SpecialistOverride] = Field(default_factory=list)
    disabled_specialists: list[SpecialistId] = Field(default_factory=list, alias="disabledSpecialists")
    high_signal_keywords: list[str] | None = Field(default=None, alias="highSignalKeywords")
    real_time_keywords: list[str] | None = Field(default=None, alias="realTimeKeywords")
    phase_names: dict[int, str] | None = Field(default=None, alias="phaseNames")
    output_hints: dict[SpecialistId, list[str]] | None = Field(default=None, alias="outputHints")

    model_config = ConfigDict(populate_by_name=True, extra="forbid")


def _normalize_keywords(keywords: list[str]) -> tuple[str, ...]:
    return tuple(normalize(keyword) for keyword in keywords if keyword.strip())


def apply_overrides(base: Registry, overrides: RegistryOverrides, source: str = "overrides") -> Registry:
    category_overrides = {item.id: item for item in overrides.categories}
    categories = []
    for definition in base.categories:
        item = category_overrides.get(definition.category)
        if item is not None:
            changes: dict[str, Any] = {}
            if item.keywords is not None:
                changes["keywords"] = _normalize_keywords(item.keywords)
            if item.integration_like is not None:
                changes["integration_like"] = item.integration_like
            definition = replace(definition, **changes)
        categories.append(definition)

    specialist_overrides = {item.id: item for item in overrides.specialists}
    disabled = set(overrides.disabled_specialists)
    specialists = []
    for definition in base.specialists:
        if definition.specialist in disabled:
            continue
        item = specialist_overrides.get(definition.specialist)
        if item is not None:
            changes = item.model_dump(exclude={"id"}, exclude_none=True)
            if item.keywords is not None:
                changes["keywords"] = _normalize_keywords(item.keywords)
            if item.required_for is not None:
                changes["required_for"] = tuple(item.required_for)
            if item.deep_files is not None:
                changes["deep_files"] = tuple(
                    DeepFile(path=deep.path, keywords=_normalize_keywords(deep.keywords)) for deep in item.deep_files
                )
            definition = replace(definition, **changes)
        specialists.append(definition)

    phase_names = base.phase_names
    if overrides.phase_names is not None:
        merged = dict(base.phase_names)
        merged.update(overrides.phase_names)
        phase_names = tuple(sorted(merged.items()))

    output_hints = base.output_hints
    if overrides.output_hints is not None:
        merged_hints = dict(base.output_hints)
        merged_hints.update({key: tuple(value) for key, value in overrides.output_hints.items()})
        output_hints = tuple(merged_hints.items())

    high_signal = base.high_signal_keywords
    if overrides.high_signal_keywords is not None:
        high_signal = _normalize_keywords(overrides.high_signal_keywords)

    real_time = base.real_time_keywords
    if overrides.real_time_keywords is not None:
        real_time = _normalize_keywords(overrides.real_time_keywords)

    return replace(
        base,
        categories=tuple(categories),
        specialists=tuple(specialists),
        high_signal_keywords=high_signal,
        real_time_keywords=real_time,
        phase_names=phase_names,
        output_hints=output_hints,
        source=source,
    )


def load_registry(path: str | Path, base: Registry | None = None) -> Registry:
    """Load a JSON override document and apply it on top of ``base``."""
    path_obj = Path(path)
    try:
        data = json.loads(path_obj.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as exc:
        raise RegistryError(f"Cannot read registry overrides from {path_obj}: {exc}") from exc
    try:
        overrides = RegistryOverrides.model_validate(data)
    except ValidationError as exc:
        raise RegistryError(f"Invalid registry overrides in {path_obj}: {exc}") from exc

    registry = apply_overrides(base or default_registry(), overrides, source=str(path_obj.resolve()))
    logger.info(
        "registry.loaded",
        source=registry.source,
        categories=len(registry.categories),
        specialists=len(registry.specialists),
    )
    return registry


__all__ = [
    "CategoryDefinition",
    "DeepFile",
    "Registry",
    "RegistryOverrides",
    "SpecialistDefinition",
    "apply_overrides",
    "default_registry",
    "load_registry",
    "normalize",
]
