"""Report helpers: JSON-ready structures and human-readable rendering."""
from __future__ import annotations

from typing import Any, Iterable

from .registry import Registry
from .selector import build_dependency_map, find_ordering_conflicts
from .types import Analysis, OrchestrationResult

_RULE = "=" * 72
_NONE = "  (none)"


def build_analysis_report(analysis: Analysis) -> dict[str, Any]:
    return {
        "description": analysis.description,
        "categories": {
            match.category.value: {
                "relevant": match.relevant,
                "matchedKeywords": list(match.matched_keywords),
            }
            for match in analysis.categories
        },
        "primaryCategories": [category.value for category in analysis.primary_categories],
        "complexity": {"level": analysis.complexity.level.value, "score": analysis.complexity.score},
        "requirements": {
            "technical": list(analysis.requirements.technical),
            "integrations": list(analysis.requirements.integrations),
            "nonFunctional": analysis.requirements.non_functional.as_dict(),
        },
        "insights": list(analysis.insights),
    }


def build_report(result: OrchestrationResult, registry: Registry | None = None) -> dict[str, Any]:
    selection = result.selection
    plan = result.plan
    dependencies = build_dependency_map(selection, registry)
    return {
        "analysis": build_analysis_report(result.analysis),
        "selection": {
            "specialists": [
                {
                    "id": item.specialist.value,
                    "name": item.name,
                    "resource": item.resource,
                    "priority": item.priority,
                    "reasons": list(item.reasons),
                    "deepFiles": list(item.deep_files),
                }
                for item in selection.specialists
            ],
            "count": selection.count,
            "estimatedFiles": selection.estimated_files,
            "complexity": {
                "level": selection.complexity.level.value,
                "estimatedHours": selection.complexity.estimated_hours,
                "estimatedDays": selection.complexity.estimated_days,
                "specialistCount": selection.complexity.specialist_count,
            },
            "dependencies": {
                specialist.value: [dependency.value for dependency in upstream]
                for specialist, upstream in dependencies.items()
            },
        },
        "plan": {
            "phases": [
                {
                    "name": phase.name,
                    "priority": phase.priority,
                    "filesCount": phase.files_count,
                    "estimatedHours": phase.estimated_hours,
                    "steps": [
                        {
                            "sequence": step.sequence,
                            "specialist": step.specialist.value,
                            "action": step.action,
                            "files": list(step.files),
                            "description": step.description,
                            "estimatedDuration": step.estimated_duration,
                            "expectedOutputs": list(step.expected_outputs),
                        }
                        for step in phase.steps
                    ],
                }
                for phase in plan.phases
            ],
            "totalPhases": plan.total_phases,
            "totalSteps": plan.total_steps,
            "totalFiles": plan.total_files,
            "estimatedHours": plan.estimated_hours,
        },
        "recommendations": [
            {
                "category": item.category,
                "priority": item.priority.value,
                "title": item.title,
                "description": item.description,
                "resources": list(item.resources),
            }
            for item in result.recommendations
        ],
    }


def _lines(items: Iterable[str] | None) -> list[str]:
    rendered = [f"  - {item}" for item in (items or ())]
    return rendered or [_NONE]


def _value(obj: Any, *path: str, default: Any = None) -> Any:
    for attr in path:
        if obj is None:
            return default
        obj = getattr(obj, attr, None)
    if obj is None:
        return default
    return getattr(obj, "value", obj)


def _analysis_section(analysis: Any) -> list[str]:
    out = ["ANALYSIS", "-" * 8]
    out.append(f"Complexity: {_value(analysis, 'complexity', 'level', default='unknown')} "
               f"(score {_value(analysis, 'complexity', 'score', default=0)})")
    primary = [_value(category) for category in (_value(analysis, "primary_categories", default=()) or ())]
    out.append(f"Primary categories: {', '.join(primary) if primary else '(none)'}")
    out.append("Relevant categories:")
    relevant = [
        f"{_value(match, 'category')}: {', '.join(match.matched_keywords)}"
        for match in (_value(analysis, "categories", default=()) or ())
        if getattr(match, "relevant", False)
    ]
    out.extend(_lines(relevant))
    out.append("Integrations:")
    out.extend(_lines(_value(analysis, "requirements", "integrations", default=())))
    out.append("Insights:")
    out.extend(_lines(_value(analysis, "insights", default=())))
    return out


def _selection_section(selection: Any, registry: Registry | None) -> list[str]:
    out = ["SPECIALISTS", "-" * 11]
    specialists = _value(selection, "specialists", default=()) or ()
    if not specialists:
        out.append(_NONE)
    for item in specialists:
        out.append(f"  [{item.priority}] {item.name} ({item.resource})")
        for reason in item.reasons:
            out.append(f"      * {reason}")
    out.append(
        f"Estimate: {_value(selection, 'complexity', 'level', default='unknown')}, "
        f"{_value(selection, 'complexity', 'estimated_hours', default=0)}h "
        f"(~{_value(selection, 'complexity', 'estimated_days', default=0)} days), "
        f"{_value(selection, 'estimated_files', default=0)} files"
    )
    if specialists:
        dependencies = build_dependency_map(selection, registry)
        out.append("Dependencies:")
        out.extend(
            _lines(
                f"{specialist.value} <- {', '.join(dependency.value for dependency in upstream)}"
                for specialist, upstream in dependencies.items()
                if upstream
            )
        )
        conflicts = find_ordering_conflicts(selection, dependencies)
        if conflicts:
            out.append("Ordering conflicts:")
            out.extend(_lines(conflict.description for conflict in conflicts))
    return out


def _plan_section(plan: Any) -> list[str]:
    out = ["EXECUTION PLAN", "-" * 14]
    phases = _value(plan, "phases", default=()) or ()
    if not phases:
        out.append(_NONE)
    for phase in phases:
        out.append(f"Phase {phase.priority}: {phase.name} ({len(phase.steps)} steps, ~{phase.estimated_hours}h)")
        for step in phase.steps:
            out.append(f"  {step.sequence:>3}. {step.action} [{step.estimated_duration}]")
            for path in step.files:
                out.append(f"       file: {path}")
            if step.expected_outputs:
                out.append(f"       outputs: {', '.join(step.expected_outputs)}")
    out.append(
        f"Totals: {_value(plan, 'total_phases', default=0)} phases, "
        f"{_value(plan, 'total_steps', default=0)} steps, "
        f"{_value(plan, 'total_files', default=0)} files, "
        f"~{_value(plan, 'estimated_hours', default=0)}h"
    )
    return out


def _recommendation_section(recommendations: Any) -> list[str]:
    out = ["RECOMMENDATIONS", "-" * 15]
    items = recommendations or ()
    if not items:
        out.append(_NONE)
    for item in items:
        out.append(f"  [{_value(item, 'priority')}] {item.title}: {item.description}")
        for resource in item.resources:
            out.append(f"       see: {resource}")
    return out


def format_report(result: OrchestrationResult | None, registry: Registry | None = None) -> str:
    """Render an orchestration result as plain text. Missing parts render as empty sections."""
    sections = [
        _analysis_section(getattr(result, "analysis", None)),
        _selection_section(getattr(result, "selection", None), registry),
        _plan_section(getattr(result, "plan", None)),
        _recommendation_section(getattr(result, "recommendations", None)),
    ]
    out = [_RULE, "SPECIALIST ORCHESTRATION REPORT", _RULE]
    for section in sections:
        out.append("")
        out.extend(section)
    return "\n".join(out) + "\n"


__all__ = ["build_analysis_report", "build_report", "format_report"]
