from __future__ import annotations

from pathlib import Path

import pytest

from tests._fixtures.project_builder import ProjectBuilder
from tokenscout.evaluator import ConfigEvaluator

MISSING_NODE = "tokenscout-test-missing-node"


@pytest.fixture
def project_builder(tmp_path: Path) -> ProjectBuilder:
    """Provide a reusable project builder rooted at the pytest tmp_path."""
    return ProjectBuilder(tmp_path)


@pytest.fixture
def static_evaluator() -> ConfigEvaluator:
    """Evaluator whose node binary never resolves, forcing the static path."""
    return ConfigEvaluator(node_binary=MISSING_NODE)
