"""CLI parser and command behaviour tests."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from tests._fixtures.project_builder import ProjectBuilder, css_with_variables
from tokenscout.cli import _build_parser, main
from tokenscout.overrides import SAMPLE_CONFIG_NAME


def test_cli_accepts_verbose_before_command() -> None:
    parser = _build_parser()
    args = parser.parse_args(["--verbose", "detect"])
    assert args.verbose is True
    assert args.command == "detect"
    assert args.path == "."


def test_cli_accepts_verbose_after_command() -> None:
    parser = _build_parser()
    args = parser.parse_args(["extract", "app", "--verbose"])
    assert args.verbose is True
    assert args.command == "extract"
    assert args.path == "app"


def test_cli_extract_options() -> None:
    parser = _build_parser()
    args = parser.parse_args(["extract", "--sources", "tailwind,css-variables", "--format", "css", "--output", "out"])
    assert args.sources == "tailwind,css-variables"
    assert args.format == "css"
    assert args.output == "out"
    assert args.json is False


def test_cli_rejects_unknown_format() -> None:
    with pytest.raises(SystemExit):
        _build_parser().parse_args(["extract", "--format", "scss"])


def test_detect_prints_json(project_builder: ProjectBuilder, capsys: pytest.CaptureFixture[str]) -> None:
    project_builder.write({"tailwind.config.js": "module.exports = {}\n"})

    main(["detect", str(project_builder.path()), "--json"])

    data = json.loads(capsys.readouterr().out)
    assert [entry["type"] for entry in data] == ["tailwind"]
    assert data[0]["confidence"] == 0.9


def test_detect_console_summary(project_builder: ProjectBuilder, capsys: pytest.CaptureFixture[str]) -> None:
    project_builder.write({"src/vars.css": css_with_variables(10)})

    main(["detect", str(project_builder.path())])

    out = capsys.readouterr().out
    assert "Found 1 token source(s)" in out
    assert "  css-variables:" in out
    assert "(50%)" in out


def test_detect_rejects_missing_path(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    with pytest.raises(SystemExit) as excinfo:
        main(["detect", str(tmp_path / "missing")])

    assert excinfo.value.code == 1
    assert "Project path does not exist" in capsys.readouterr().err


def test_detect_rejects_unknown_sources(project_builder: ProjectBuilder, capsys: pytest.CaptureFixture[str]) -> None:
    with pytest.raises(SystemExit) as excinfo:
        main(["detect", str(project_builder.path()), "--sources", "bootstrap"])

    assert excinfo.value.code == 1
    assert "Unknown detectors requested: bootstrap" in capsys.readouterr().err


def test_extract_writes_tokens_and_report(
    project_builder: ProjectBuilder, tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    project_builder.write({"src/vars.css": css_with_variables(7)})
    output = tmp_path / "out"

    main(["extract", str(project_builder.path()), "--output", str(output), "--format", "css", "--json"])

    report = json.loads(capsys.readouterr().out)
    assert report["success"] is True
    assert report["totalTokens"] == 7
    assert report["outputFile"] == str(output / "tokens.css")
    assert report["logFile"] == str(output / "detection-log.json")
    assert (output / "tokens.css").read_text(encoding="utf-8").startswith(":root {")


def test_extract_console_summary(project_builder: ProjectBuilder, capsys: pytest.CaptureFixture[str]) -> None:
    project_builder.write({"src/vars.css": css_with_variables(7)})

    main(["extract", str(project_builder.path())])

    out = capsys.readouterr().out
    assert "Extracted 7 tokens from 1 source(s)" in out
    assert "Detection Summary:" in out
    assert (project_builder.path(".tokenscout") / "tokens.json").is_file()


def test_extract_without_sources_fails(project_builder: ProjectBuilder, capsys: pytest.CaptureFixture[str]) -> None:
    with pytest.raises(SystemExit) as excinfo:
        main(["extract", str(project_builder.path())])

    assert excinfo.value.code == 1
    assert "No token sources detected" in capsys.readouterr().err


def test_init_config_writes_sample_once(project_builder: ProjectBuilder, capsys: pytest.CaptureFixture[str]) -> None:
    main(["init-config", str(project_builder.path())])

    assert (project_builder.path() / SAMPLE_CONFIG_NAME).is_file()
    assert "Configuration written to" in capsys.readouterr().out

    with pytest.raises(SystemExit) as excinfo:
        main(["init-config", str(project_builder.path())])
    assert excinfo.value.code == 1
    assert "--force" in capsys.readouterr().err

    main(["init-config", str(project_builder.path()), "--force"])


def test_log_file_receives_debug_records(
    project_builder: ProjectBuilder, tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    project_builder.write({"tailwind.config.js": "module.exports = {}\n"})
    log_file = tmp_path / "logs" / "run.log"

    main(["--log-file", str(log_file), "detect", str(project_builder.path()), "--json"])

    capsys.readouterr()
    assert "tokenscout.detector" in log_file.read_text(encoding="utf-8")
