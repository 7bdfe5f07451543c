"""
Tests for the workflow command helpers.
"""
from luarmor_updater import actions


def test_set_failed_prints_error_command(capsys):
    actions.set_failed("could not find project")
    assert capsys.readouterr().out == "::error::could not find project\n"


def test_set_failed_escapes_newlines(capsys):
    actions.set_failed("50% done\nthen failed")
    assert capsys.readouterr().out == "::error::50%25 done%0Athen failed\n"


def test_mask_skips_empty_value(capsys):
    actions.mask("")
    assert capsys.readouterr().out == ""


def test_set_output_without_runner():
    assert actions.set_output("version", "v2") is False


def test_set_output_appends_to_file(monkeypatch, tmp_path):
    output = tmp_path / "output"
    monkeypatch.setenv("GITHUB_OUTPUT", str(output))

    assert actions.set_output("project-id", "P1") is True
    actions.set_output("version", 12)

    assert output.read_text() == "project-id=P1\nversion=12\n"


def test_set_output_multiline_uses_delimiter(monkeypatch, tmp_path):
    output = tmp_path / "output"
    monkeypatch.setenv("GITHUB_OUTPUT", str(output))

    actions.set_output("notes", "a\nb")

    lines = output.read_text().splitlines()
    assert lines[0].startswith("notes<<ghadelimiter_")
    assert lines[1:3] == ["a", "b"]
    assert lines[3] == lines[0].split("<<", 1)[1]
