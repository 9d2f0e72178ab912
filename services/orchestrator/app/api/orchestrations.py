"""Orchestration API."""
from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends
from fastapi.responses import PlainTextResponse
from pydantic import BaseModel, ConfigDict, Field

from ..domain.orchestrator_service import Orchestrator
from ..domain.report import build_analysis_report, build_report, format_report
from .deps import get_orchestrator

router = APIRouter(tags=["orchestrations"])


class OrchestrationRequest(BaseModel):
    description: str | None = Field(default=None, description="Free-text project description")


class SpecialistListItem(BaseModel):
    id: str
    name: str
    resource: str
    priority: int
    required_for: list[str] = Field(default_factory=list, alias="requiredFor")
    deep_files: list[str] = Field(default_factory=list, alias="deepFiles")
    always_include: bool = Field(default=False, alias="alwaysInclude")
    include_if_complex: bool = Field(default=False, alias="includeIfComplex")

    model_config = ConfigDict(populate_by_name=True)


@router.post("/orchestrations")
async def create_orchestration(
    request: OrchestrationRequest,
    orchestrator: Orchestrator = Depends(get_orchestrator),
) -> dict[str, Any]:
    result = orchestrator.orchestrate(request.description)
    return build_report(result, orchestrator.registry)


@router.post("/orchestrations/report", response_class=PlainTextResponse)
async def render_orchestration(
    request: OrchestrationRequest,
    orchestrator: Orchestrator = Depends(get_orchestrator),
) -> str:
    result = orchestrator.orchestrate(request.description)
    return format_report(result, orchestrator.registry)


@router.post("/orchestrations/analysis")
async def analyze_description(
    request: OrchestrationRequest,
    orchestrator: Orchestrator = Depends(get_orchestrator),
) -> dict[str, Any]:
    analysis = orchestrator.analyze(request.description)
    return build_analysis_report(analysis)


@router.get("/specialists", response_model=list[SpecialistListItem])
async def list_specialists(orchestrator: Orchestrator = Depends(get_orchestrator)):
    return [
        SpecialistListItem(
            id=definition.specialist.value,
            name=definition.name,
            resource=definition.resource,
            priority=definition.priority,
            required_for=[category.value for category in definition.required_for],
            deep_files=[deep.path for deep in definition.deep_files],
            always_include=definition.always_include,
            include_if_complex=definition.include_if_complex,
        )
        for definition in sorted(orchestrator.registry.specialists, key=lambda item: (item.priority, item.index))
    ]


__all__ = ["router"]
