"""
Tests for project and script lookup.
"""
from conftest import details_payload

from luarmor_updater.client import KeyDetails
from luarmor_updater.resolve import get_script_version, resolve_project


def make_details():
    return KeyDetails.model_validate(
        details_payload(
            ("P1", {"S1": "v1", "S2": "v4"}),
            ("P2", {"S3": "v2"}),
            ("P3", {"S1": "v9"}),
        )
    )


def test_project_id_selects_exact_project():
    project = resolve_project(make_details(), "S1", "P2")
    assert project is not None
    assert project.id == "P2"


def test_project_id_ignores_script_contents():
    # P2 does not hold S999, the explicit id still wins
    project = resolve_project(make_details(), "S999", "P2")
    assert project is not None
    assert project.id == "P2"


def test_unknown_project_id_returns_none():
    assert resolve_project(make_details(), "S1", "P404") is None


def test_empty_project_id_finds_first_owner():
    project = resolve_project(make_details(), "S1", "")
    assert project is not None
    assert project.id == "P1"


def test_missing_project_id_uses_script_lookup():
    project = resolve_project(make_details(), "S3")
    assert project is not None
    assert project.id == "P2"


def test_unknown_script_returns_none():
    assert resolve_project(make_details(), "S404") is None


def test_no_projects_returns_none():
    assert resolve_project(KeyDetails(), "S1") is None


def test_get_script_version_returns_matching_script():
    project = resolve_project(make_details(), "S2")
    script = get_script_version(project, "S2")
    assert script is not None
    assert script.script_id == "S2"
    assert script.version == "v4"


def test_get_script_version_missing_script():
    project = resolve_project(make_details(), "S1", "P2")
    assert get_script_version(project, "S1") is None


def test_version_falls_back_to_plain_version_field():
    details = KeyDetails.model_validate(
        {"projects": [{"id": "P1", "scripts": [{"script_id": "S1", "version": 7}]}]}
    )
    script = get_script_version(details.projects[0], "S1")
    assert script.version == 7
