"""Phased execution plan construction."""
from __future__ import annotations

import math
from itertools import groupby
from pathlib import PurePosixPath

from ..config import PlanTuning, get_settings
from .registry import Registry, default_registry
from .types import Analysis, Phase, Plan, SelectedSpecialist, Selection, Step


def _file_name(path: str) -> str:
    return PurePosixPath(path).name


def _primary_step(sequence: int, specialist: SelectedSpecialist, registry: Registry, tuning: PlanTuning) -> Step:
    reasons = "; ".join(specialist.reasons) or "selected"
    return Step(
        sequence=sequence,
        specialist=specialist.specialist,
        specialist_name=specialist.name,
        action=f"Load and apply {specialist.name} guidance",
        files=(specialist.resource,),
        description=f"Review {_file_name(specialist.resource)} and apply its checklist ({reasons})",
        estimated_duration=tuning.primary_step_duration,
        expected_outputs=registry.output_hints_for(specialist.specialist),
    )


def _deep_file_step(sequence: int, specialist: SelectedSpecialist, path: str, tuning: PlanTuning) -> Step:
    name = _file_name(path)
    return Step(
        sequence=sequence,
        specialist=specialist.specialist,
        specialist_name=specialist.name,
        action=f"Implement pattern from {name}",
        files=(path,),
        description=f"Implement the {PurePosixPath(path).stem} pattern recommended by {specialist.name}",
        estimated_duration=tuning.deep_step_duration,
    )


def generate_plan(
    analysis: Analysis,
    selection: Selection,
    registry: Registry | None = None,
    tuning: PlanTuning | None = None,
) -> Plan:
    registry = registry or default_registry()
    tuning = tuning or get_settings().planner

    phases: list[Phase] = []
    sequence = 0
    for priority, group in groupby(selection.specialists, key=lambda item: item.priority):
        steps: list[Step] = []
        for specialist in group:
            sequence += 1
            steps.append(_primary_step(sequence, specialist, registry, tuning))
            for path in specialist.deep_files:
                sequence += 1
                steps.append(_deep_file_step(sequence, specialist, path, tuning))

        phases.append(
            Phase(
                name=registry.phase_name(priority),
                priority=priority,
                steps=tuple(steps),
                files_count=sum(len(step.files) for step in steps),
                estimated_hours=math.ceil(len(steps) * tuning.minutes_per_step / 60),
            )
        )

    return Plan(
        phases=tuple(phases),
        total_phases=len(phases),
        total_steps=sum(len(phase.steps) for phase in phases),
        total_files=sum(phase.files_count for phase in phases),
        estimated_hours=sum(phase.estimated_hours for phase in phases),
    )


__all__ = ["generate_plan"]
