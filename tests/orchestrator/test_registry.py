import json

import pytest

from services.orchestrator.app.domain.analyzer import analyze
from services.orchestrator.app.domain.errors import RegistryError
from services.orchestrator.app.domain.registry import Registry, default_registry, load_registry
from services.orchestrator.app.domain.types import Category, SpecialistId


def _write(tmp_path, payload) -> str:
    path = tmp_path / "registry.json"
    path.write_text(json.dumps(payload), encoding="utf-8")
    return str(path)


def test_default_registry_shape():
    registry = default_registry()

    assert [definition.category for definition in registry.categories] == list(Category)
    assert [definition.specialist for definition in registry.specialists] == list(SpecialistId)
    assert [definition.specialist for definition in registry.specialists if definition.always_include] == [
        SpecialistId.platform
    ]
    assert registry.source == "embedded"
    assert default_registry() is registry


def test_keywords_are_lowercase():
    registry = default_registry()
    for definition in registry.categories:
        assert all(keyword == keyword.casefold() for keyword in definition.keywords)


def test_registry_rejects_duplicates():
    registry = default_registry()
    with pytest.raises(RegistryError):
        Registry(categories=registry.categories + registry.categories[:1], specialists=registry.specialists)


def test_load_registry_applies_overrides(tmp_path):
    path = _write(
        tmp_path,
        {
            "categories": [{"id": "security", "keywords": ["  SSO ", "Vault"]}],
            "specialists": [
                {
                    "id": "security",
                    "name": "Identity Engineer",
                    "deepFiles": [{"path": "deep/security/sso.md", "keywords": ["SSO"]}],
                }
            ],
            "phaseNames": {"9": "Hardening"},
            "outputHints": {"workspace": ["Sheets.gs"]},
            "highSignalKeywords": ["regulated"],
        },
    )
    registry = load_registry(path)

    assert registry.category(Category.security).keywords == ("sso", "vault")
    security = registry.specialist(SpecialistId.security)
    assert security.name == "Identity Engineer"
    assert security.priority == 1
    assert [deep.path for deep in security.deep_files] == ["deep/security/sso.md"]
    assert registry.phase_name(9) == "Hardening"
    assert registry.phase_name(1) == "Foundation & Security"
    assert registry.output_hints_for(SpecialistId.workspace) == ("Sheets.gs",)
    assert registry.high_signal_keywords == ("regulated",)
    assert registry.source.endswith("registry.json")

    analysis = analyze("Set up SSO for the vault", registry=registry)
    assert analysis.match_for(Category.security).matched_keywords == ("sso", "vault")


def test_disabled_specialists_are_removed(tmp_path):
    registry = load_registry(_write(tmp_path, {"disabledSpecialists": ["ui", "testing"]}))

    assert registry.specialist(SpecialistId.ui) is None
    assert registry.specialist(SpecialistId.testing) is None
    assert len(registry.specialists) == len(default_registry().specialists) - 2


def test_disabling_every_always_included_specialist_fails(tmp_path):
    with pytest.raises(RegistryError):
        load_registry(_write(tmp_path, {"disabledSpecialists": ["platform"]}))


@pytest.mark.parametrize(
    "payload",
    [
        {"specialists": [{"id": "astronaut"}]},
        {"categories": [{"id": "security", "weight": 3}]},
        {"unknown": True},
    ],
)
def test_invalid_documents_raise_registry_error(tmp_path, payload):
    with pytest.raises(RegistryError):
        load_registry(_write(tmp_path, payload))


def test_unreadable_documents_raise_registry_error(tmp_path):
    broken = tmp_path / "broken.json"
    broken.write_text("{not json", encoding="utf-8")

    with pytest.raises(RegistryError):
        load_registry(broken)
    with pytest.raises(RegistryError):
        load_registry(tmp_path / "missing.json")


def test_override_keywords_use_description_normalization(tmp_path):
    registry = load_registry(
        _write(tmp_path, {"categories": [{"id": "security", "keywords": ["API  Key", "\tClient\n Secret "]}]})
    )

    assert registry.category(Category.security).keywords == ("api key", "client secret")
    analysis = analyze("Store the api  key in script properties", registry=registry)
    assert analysis.match_for(Category.security).matched_keywords == ("api key",)


def test_real_time_keywords_can_be_overridden(tmp_path):
    registry = load_registry(
        _write(tmp_path, {"highSignalKeywords": ["live feed"], "realTimeKeywords": ["live feed"]})
    )

    assert analyze("Push a live feed of orders into Sheets", registry=registry).requirements.non_functional.real_time
    assert not analyze("Real-time feed of orders into Sheets", registry=registry).requirements.non_functional.real_time


@pytest.mark.parametrize(
    "word",
    ["capital", "rapid", "therapist", "latest", "contest", "async", "driven", "borders", "promptly", "secretary", "quotation"],
)
def test_default_keywords_do_not_hide_inside_common_words(word):
    registry = default_registry()
    keywords = {keyword for definition in registry.categories for keyword in definition.keywords}
    keywords.update(keyword for definition in registry.specialists for keyword in definition.keywords)
    keywords.update(registry.high_signal_keywords)

    assert [keyword for keyword in sorted(keywords) if keyword in word] == []
