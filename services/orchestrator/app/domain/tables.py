"""Canned lookup tables used by the planner, recommendations and dependency view.

Each table is an ordered association list so entries can be extended without
touching pipeline code.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

from .types import Category, Recommendation, RecommendationPriority, SpecialistId


PHASE_NAMES: tuple[tuple[int, str], ...] = (
    (1, "Foundation & Security"),
    (2, "Architecture & Design"),
    (3, "Integration & Connectivity"),
    (4, "Data & Intelligence"),
    (5, "User Experience"),
    (6, "Performance & Reliability"),
    (7, "Quality & Production Readiness"),
    (8, "Documentation & Polish"),
)


OUTPUT_HINTS: tuple[tuple[SpecialistId, tuple[str, ...]], ...] = (
    (SpecialistId.security, ("SecurityConfig.gs", "OAuth2Client.gs")),
    (SpecialistId.architecture, ("ARCHITECTURE.md", "Config.gs")),
    (SpecialistId.business_central, ("BCClient.gs", "BCSync.gs")),
    (SpecialistId.integration, ("HttpClient.gs", "RetryPolicy.gs")),
    (SpecialistId.workspace, ("SheetsRepository.gs", "Triggers.gs")),
    (SpecialistId.data_engineering, ("SyncPipeline.gs", "Transformers.gs")),
    (SpecialistId.ai_integration, ("ClaudeClient.gs", "PromptTemplates.gs")),
    (SpecialistId.ui, ("Sidebar.html", "UiController.gs")),
    (SpecialistId.performance, ("CacheLayer.gs", "BatchWriter.gs")),
    (SpecialistId.monitoring, ("Logger.gs", "ErrorHandler.gs")),
    (SpecialistId.testing, ("Tests.gs",)),
    (SpecialistId.platform, (".clasp.json", "appsscript.json", "deploy.sh")),
    (SpecialistId.documentation, ("README.md", "RUNBOOK.md")),
)


@dataclass(frozen=True)
class RecommendationRule:
    """Fires when any listed specialist is selected or any listed category is relevant."""

    recommendation: Recommendation
    specialists: tuple[SpecialistId, ...] = ()
    categories: tuple[Category, ...] = ()


@dataclass(frozen=True)
class DependencyRule:
    specialist: SpecialistId
    # upstream: every other selected specialist depends on this one.
    # downstream: this specialist depends on every other selected one.
    direction: Literal["upstream", "downstream"]
    exclude: tuple[SpecialistId, ...] = ()


RECOMMENDATION_RULES: tuple[RecommendationRule, ...] = (
    RecommendationRule(
        specialists=(SpecialistId.security,),
        recommendation=Recommendation(
            category="security",
            priority=RecommendationPriority.high,
            title="Secure Credential Storage",
            description="Keep API keys and client secrets in PropertiesService script properties, never in source files.",
            resources=("deep/security/properties-service-secrets.md",),
        ),
    ),
    RecommendationRule(
        specialists=(SpecialistId.security,),
        recommendation=Recommendation(
            category="security",
            priority=RecommendationPriority.high,
            title="OAuth2 Token Caching",
            description="Cache access tokens in CacheService until shortly before expiry to avoid a token request per call.",
            resources=("deep/security/oauth2-service-account.md", "deep/security/token-caching.md"),
        ),
    ),
    RecommendationRule(
        specialists=(SpecialistId.business_central,),
        recommendation=Recommendation(
            category="businessCentral",
            priority=RecommendationPriority.high,
            title="OData Pagination & Incremental Sync",
            description="Follow @odata.nextLink and filter on lastModifiedDateTime so each run only pulls changed records.",
            resources=("deep/business-central/odata-pagination.md", "deep/business-central/incremental-sync.md"),
        ),
    ),
    RecommendationRule(
        categories=(Category.performance,),
        recommendation=Recommendation(
            category="performance",
            priority=RecommendationPriority.medium,
            title="Batch Operations",
            description="Read and write ranges with getValues/setValues in one call instead of per-cell access.",
            resources=("deep/performance/batch-operations.md",),
        ),
    ),
    RecommendationRule(
        categories=(Category.performance,),
        recommendation=Recommendation(
            category="performance",
            priority=RecommendationPriority.medium,
            title="Cache Expensive Lookups",
            description="Store reference data in CacheService with an explicit TTL and a fallback to the source.",
            resources=("deep/performance/cache-service.md",),
        ),
    ),
    RecommendationRule(
        specialists=(SpecialistId.data_engineering,),
        recommendation=Recommendation(
            category="dataEngineering",
            priority=RecommendationPriority.medium,
            title="Idempotent Sync Checkpoints",
            description="Persist the last processed cursor so an interrupted run can resume without duplicating rows.",
            resources=("deep/data/checkpointing.md",),
        ),
    ),
    RecommendationRule(
        specialists=(SpecialistId.workspace,),
        recommendation=Recommendation(
            category="workspace",
            priority=RecommendationPriority.medium,
            title="Respect Workspace Quotas",
            description="Budget email recipients, trigger runtime and UrlFetch calls against the daily Apps Script quotas.",
            resources=("deep/workspace/quotas.md",),
        ),
    ),
    RecommendationRule(
        specialists=(SpecialistId.ai_integration,),
        recommendation=Recommendation(
            category="aiIntegration",
            priority=RecommendationPriority.medium,
            title="Prompt & Token Budgeting",
            description="Template prompts, cap max tokens per request and log usage for cost tracking.",
            resources=("deep/ai/prompt-templates.md", "deep/ai/token-budgeting.md"),
        ),
    ),
    RecommendationRule(
        specialists=(SpecialistId.monitoring,),
        recommendation=Recommendation(
            category="monitoring",
            priority=RecommendationPriority.medium,
            title="Structured Logging & Alerting",
            description="Log JSON payloads to Cloud Logging and email an alert when a run fails repeatedly.",
            resources=("deep/monitoring/structured-logging.md", "deep/monitoring/alerting.md"),
        ),
    ),
    RecommendationRule(
        specialists=(SpecialistId.testing,),
        recommendation=Recommendation(
            category="testing",
            priority=RecommendationPriority.low,
            title="Automated Test Harness",
            description="Run unit tests against mocked services before every deployment.",
            resources=("deep/testing/test-harness.md",),
        ),
    ),
    RecommendationRule(
        specialists=(SpecialistId.platform,),
        recommendation=Recommendation(
            category="platform",
            priority=RecommendationPriority.low,
            title="Deployment & Rollback Runbook",
            description="Back up the production version before each clasp deploy and keep a scripted rollback.",
            resources=("deep/platform/deployment.md", "deep/platform/rollback.md"),
        ),
    ),
)


DEPENDENCY_RULES: tuple[DependencyRule, ...] = (
    DependencyRule(
        specialist=SpecialistId.security,
        direction="upstream",
        exclude=(SpecialistId.documentation,),
    ),
    DependencyRule(
        specialist=SpecialistId.architecture,
        direction="upstream",
        exclude=(SpecialistId.documentation, SpecialistId.security),
    ),
    DependencyRule(
        specialist=SpecialistId.platform,
        direction="downstream",
        exclude=(SpecialistId.documentation,),
    ),
)


__all__ = [
    "DEPENDENCY_RULES",
    "DependencyRule",
    "OUTPUT_HINTS",
    "PHASE_NAMES",
    "RECOMMENDATION_RULES",
    "RecommendationRule",
]
