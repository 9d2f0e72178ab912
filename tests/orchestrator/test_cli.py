import io
import json

from services.orchestrator.app.cli import main

SCENARIO_B = "Automate weekly sales report from Sheets with email notifications"


def test_cli_prints_text_report(capsys):
    assert main([SCENARIO_B]) == 0

    out = capsys.readouterr().out
    assert "SPECIALIST ORCHESTRATION REPORT" in out
    assert "Workspace Automation Specialist" in out


def test_cli_prints_json_report(capsys):
    assert main(["--json", SCENARIO_B]) == 0

    report = json.loads(capsys.readouterr().out)
    assert report["selection"]["count"] == 2
    assert [item["id"] for item in report["selection"]["specialists"]] == ["workspace", "platform"]


def test_cli_reads_description_from_stdin(monkeypatch, capsys):
    monkeypatch.setattr("sys.stdin", io.StringIO(SCENARIO_B + "\n"))

    assert main(["--json"]) == 0
    assert json.loads(capsys.readouterr().out)["plan"]["totalPhases"] == 2


def test_cli_rejects_short_description(capsys):
    assert main(["short"]) == 2

    captured = capsys.readouterr()
    assert captured.out == ""
    assert "error: Project description must be at least 10 characters" in captured.err


def test_cli_reports_bad_registry(tmp_path, capsys):
    assert main(["--registry", str(tmp_path / "missing.json"), SCENARIO_B]) == 1
    assert "error: Cannot read registry overrides" in capsys.readouterr().err


def test_cli_uses_registry_overrides(tmp_path, capsys):
    document = tmp_path / "registry.json"
    document.write_text(json.dumps({"specialists": [{"id": "workspace", "name": "Sheets Wrangler"}]}), encoding="utf-8")

    assert main(["--registry", str(document), SCENARIO_B]) == 0
    assert "Sheets Wrangler" in capsys.readouterr().out
