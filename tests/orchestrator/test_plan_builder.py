from dataclasses import replace

from services.orchestrator.app.config import PlanTuning
from services.orchestrator.app.domain.analyzer import analyze
from services.orchestrator.app.domain.plan_builder import generate_plan
from services.orchestrator.app.domain.selector import select_specialists
from services.orchestrator.app.domain.types import SpecialistId

SCENARIO_A = (
    "Build a system that syncs orders from Business Central to Google Sheets "
    "with OAuth2, caching, and error handling"
)
SCENARIO_B = "Automate weekly sales report from Sheets with email notifications"


def _plan(description, registry=None, tuning=None):
    analysis = analyze(description)
    selection = select_specialists(analysis, registry=registry)
    return selection, generate_plan(analysis, selection, registry=registry, tuning=tuning)


def test_scenario_a_phases():
    _, plan = _plan(SCENARIO_A)

    assert [phase.priority for phase in plan.phases] == [1, 2, 3, 4, 6, 7, 8]
    assert [phase.name for phase in plan.phases] == [
        "Foundation & Security",
        "Architecture & Design",
        "Integration & Connectivity",
        "Data & Intelligence",
        "Performance & Reliability",
        "Quality & Production Readiness",
        "Documentation & Polish",
    ]
    assert [phase.estimated_hours for phase in plan.phases] == [3, 3, 5, 3, 5, 3, 3]
    assert plan.total_phases == 7
    assert plan.total_steps == 27
    assert plan.total_files == 27
    assert plan.estimated_hours == 25


def test_steps_are_numbered_consecutively_across_phases():
    _, plan = _plan(SCENARIO_A)
    sequences = [step.sequence for phase in plan.phases for step in phase.steps]
    assert sequences == list(range(1, plan.total_steps + 1))


def test_totals_match_phase_contents():
    selection, plan = _plan(SCENARIO_A)

    assert plan.total_steps == sum(len(phase.steps) for phase in plan.phases)
    assert plan.total_files == sum(phase.files_count for phase in plan.phases)
    assert plan.estimated_hours == sum(phase.estimated_hours for phase in plan.phases)
    assert plan.total_files == selection.estimated_files


def test_primary_step_precedes_deep_file_steps():
    _, plan = _plan(SCENARIO_B)
    workspace = plan.phases[0]

    assert workspace.name == "Integration & Connectivity"
    primary, first_deep, second_deep = workspace.steps
    assert primary.action == "Load and apply Workspace Automation Specialist guidance"
    assert primary.files == ("specialists/workspace-automation.md",)
    assert primary.expected_outputs == ("SheetsRepository.gs", "Triggers.gs")
    assert primary.estimated_duration == "30-60 min"
    assert first_deep.action == "Implement pattern from sheets-patterns.md"
    assert first_deep.files == ("deep/workspace/sheets-patterns.md",)
    assert first_deep.expected_outputs == ()
    assert first_deep.estimated_duration == "45-90 min"
    assert second_deep.files == ("deep/workspace/gmail-automation.md",)


def test_platform_outputs():
    _, plan = _plan(SCENARIO_B)
    platform = plan.phases[-1]

    assert platform.steps[0].specialist is SpecialistId.platform
    assert platform.steps[0].expected_outputs == (".clasp.json", "appsscript.json", "deploy.sh")


def test_unknown_priority_uses_generic_phase_name(registry):
    custom = replace(registry, phase_names=())
    _, plan = _plan(SCENARIO_B, registry=custom)
    assert [phase.name for phase in plan.phases] == ["Phase 3", "Phase 7"]


def test_missing_output_hints_fall_back_to_default(registry):
    custom = replace(registry, output_hints=())
    _, plan = _plan(SCENARIO_B, registry=custom)
    assert plan.phases[0].steps[0].expected_outputs == ("workspace-implementation.gs",)


def test_minutes_per_step_drive_phase_hours():
    _, plan = _plan(SCENARIO_B, tuning=PlanTuning(minutes_per_step=60))
    assert [phase.estimated_hours for phase in plan.phases] == [3, 3]
    assert plan.estimated_hours == 6
