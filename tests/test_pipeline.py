from __future__ import annotations

import json
from pathlib import Path

import pytest

from tests._fixtures.project_builder import ProjectBuilder, css_with_variables
from tokenscout.config import EvaluationConfig, TokenScoutConfig
from tokenscout.detection_log import DEFAULT_LOG_NAME
from tokenscout.pipeline import TokenPipeline

MISSING_NODE = "tokenscout-test-missing-node"


def _project(project_builder: ProjectBuilder) -> None:
    project_builder.write(
        {
            ".tokenscout.yml": f"""
            evaluation:
              node: {MISSING_NODE}
              timeout: 2s
            tokens:
              boostConfidence:
                ./src/vars.css: 0.5
            """,
            "tailwind.config.js": """
            module.exports = {
              theme: { extend: { colors: { primary: '#3b82f6' } } },
            }
            """,
            "src/vars.css": css_with_variables(6, "space"),
        }
    )


def test_pipeline_detects_extracts_and_writes_log(project_builder: ProjectBuilder) -> None:
    _project(project_builder)
    pipeline = TokenPipeline(project_builder.path())

    result = pipeline.run_sync()

    assert pipeline.config.evaluation.node_binary == MISSING_NODE
    assert [source.type for source in result.sources] == ["tailwind", "css-variables"]
    assert result.sources[1].confidence == pytest.approx(0.8)
    assert result.tokens["colors"]["tailwind-primary"]["value"] == "#3b82f6"
    assert len(result.tokens["spacing"]) == 6
    assert result.tokens["meta"]["sources"][0]["fallbackUsed"] is True

    assert result.log_path == project_builder.path(".tokenscout") / DEFAULT_LOG_NAME
    data = json.loads(result.log_path.read_text(encoding="utf-8"))
    assert data["summary"]["totalSources"] == 2
    assert data["summary"]["successRate"] == 100
    assert data["summary"]["totalTokens"] == 7
    assert data["overrides"]["rules"][0]["action"] == "boostConfidence"
    assert any("Static fallback used" in issue["message"] for issue in data["summary"]["issues"])
    assert result.summary["totalTokens"] == 7


def test_pipeline_honours_output_dir_and_skips_log(
    project_builder: ProjectBuilder, tmp_path: Path
) -> None:
    _project(project_builder)
    output = tmp_path / "artifacts"
    pipeline = TokenPipeline(project_builder.path(), output_dir=output, ecosystems=["css-variables"])

    result = pipeline.run_sync(write_log=False)

    assert pipeline.config.resolved_output_dir == output.resolve()
    assert pipeline.detection_log.log_file == output.resolve() / DEFAULT_LOG_NAME
    assert result.log_path is None
    assert not output.exists()
    assert [source.type for source in result.sources] == ["css-variables"]


def test_pipeline_accepts_explicit_config(project_builder: ProjectBuilder) -> None:
    project_builder.write({"theme.css": css_with_variables(7, "color")})
    config = TokenScoutConfig(
        root=project_builder.path(), evaluation=EvaluationConfig(node_binary=MISSING_NODE)
    )

    result = TokenPipeline(project_builder.path(), config).run_sync(write_log=False)

    assert len(result.tokens["colors"]) == 7


def test_missing_project_raises(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        TokenPipeline(tmp_path / "nowhere").run_sync()
