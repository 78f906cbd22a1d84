from __future__ import annotations

import asyncio
import time
from pathlib import Path
from typing import Iterable

import pytest

from tests._fixtures.project_builder import ProjectBuilder, css_with_variables
from tokenscout.detection_log import DetectionLogger
from tokenscout.detector import TokenDetector, detect
from tokenscout.detectors import Detector, TailwindDetector
from tokenscout.models import ProjectTree, TokenSource


class ExplodingDetector(Detector):
    ecosystem = "exploding"

    def detect(self, tree: ProjectTree) -> Iterable[TokenSource]:
        raise RuntimeError("kaboom")


class SlowDetector(Detector):
    ecosystem = "slow"

    def detect(self, tree: ProjectTree) -> Iterable[TokenSource]:
        time.sleep(0.4)
        return []


def _sample_project(project_builder: ProjectBuilder) -> None:
    project_builder.write(
        {
            "tailwind.config.js": "module.exports = { theme: {} }\n",
            "src/styles/vars.css": css_with_variables(8),
            "tokens.js": "export const colors = { brand: '#f00' };\n",
        }
    )


def test_detect_all_reports_sources_in_registry_order(
    project_builder: ProjectBuilder, tmp_path: Path
) -> None:
    _sample_project(project_builder)
    log = DetectionLogger(tmp_path / "out")
    detector = TokenDetector(project_builder.path(), logger=log)

    sources = detector.detect_all_sync()

    assert [source.type for source in sources] == ["tailwind", "css-variables", "custom"]
    assert all(0.0 <= source.confidence <= 1.0 for source in sources)
    assert [entry["type"] for entry in log.get_log()["sources"]] == [
        "tailwind",
        "css-variables",
        "custom",
    ]
    assert log.get_log()["performance"]["detectionTime"] is not None
    assert log.get_log()["overrides"]["appliedFrom"] is None


def test_failing_heuristic_does_not_abort_detection(
    project_builder: ProjectBuilder, tmp_path: Path
) -> None:
    _sample_project(project_builder)
    log = DetectionLogger(tmp_path / "out")
    detector = TokenDetector(
        project_builder.path(),
        logger=log,
        detectors=[ExplodingDetector(), TailwindDetector()],
    )

    sources = detector.detect_all_sync()

    assert [source.type for source in sources] == ["tailwind"]
    (issue,) = log.issues
    assert issue["level"] == "warning"
    assert issue["message"] == "exploding detection failed: kaboom"


def test_ecosystem_filter_and_unknown_names(project_builder: ProjectBuilder) -> None:
    _sample_project(project_builder)

    assert [source.type for source in detect(project_builder.path(), ecosystems=["custom"])] == ["custom"]
    with pytest.raises(ValueError, match="Unknown detectors requested"):
        TokenDetector(project_builder.path(), ecosystems=["bootstrap"])


def test_operator_config_applies_overrides_and_enabled_list(
    project_builder: ProjectBuilder, tmp_path: Path
) -> None:
    _sample_project(project_builder)
    project_builder.write(
        {
            ".tokenscout.yml": """
            detectors:
              enabled: [tailwind, custom]
            tokens:
              exclude:
                - ./tokens.js
            """
        }
    )
    log = DetectionLogger(tmp_path / "out")
    detector = TokenDetector(project_builder.path(), logger=log)

    sources = detector.detect_all_sync()

    assert [source.type for source in sources] == ["tailwind"]
    overrides = log.get_log()["overrides"]
    assert overrides["appliedFrom"] == str(project_builder.path(".tokenscout.yml"))
    assert overrides["rules"][0]["action"] == "exclude"
    assert "appliedAt" in overrides["rules"][0]


def test_summary_groups_and_recommends(project_builder: ProjectBuilder, tmp_path: Path) -> None:
    empty = TokenDetector(project_builder.path(), logger=DetectionLogger(tmp_path / "a"))
    empty.detect_all_sync()
    assert empty.get_summary()["recommendations"][0].startswith("No token sources detected")

    _sample_project(project_builder)
    detector = TokenDetector(project_builder.path(), logger=DetectionLogger(tmp_path / "b"))
    detector.detect_all_sync()
    summary = detector.get_summary()

    assert summary["total"] == 3
    assert list(summary["byType"]) == ["tailwind", "css-variables", "custom"]
    assert [entry["type"] for entry in summary["highConfidence"]] == ["tailwind"]
    assert summary["recommendations"] == [
        "Multiple token systems detected. Exclude unwanted sources to avoid conflicts."
    ]


def test_blocking_heuristics_run_off_the_event_loop(
    project_builder: ProjectBuilder, tmp_path: Path
) -> None:
    _sample_project(project_builder)
    detector = TokenDetector(
        project_builder.path(),
        logger=DetectionLogger(tmp_path / "out"),
        detectors=[SlowDetector(), SlowDetector(), TailwindDetector()],
    )

    async def scenario() -> tuple[float, int]:
        ticks = 0

        async def ticker() -> None:
            nonlocal ticks
            while True:
                await asyncio.sleep(0.02)
                ticks += 1

        task = asyncio.create_task(ticker())
        started = time.perf_counter()
        await detector.detect_all()
        elapsed = time.perf_counter() - started
        task.cancel()
        return elapsed, ticks

    elapsed, ticks = asyncio.run(scenario())

    assert elapsed < 0.75
    assert ticks >= 5
