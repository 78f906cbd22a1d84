"""Shared state handed to every per-ecosystem extraction function."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Awaitable, Callable, Dict, Optional

from ..detection_log import DetectionLogger
from ..evaluator import ConfigEvaluator
from ..models import TokenSource

PartialTree = Dict[str, Dict[str, Dict[str, Any]]]


@dataclass
class ExtractionContext:
    """Evaluator access plus issue reporting for one source."""

    source: TokenSource
    evaluator: ConfigEvaluator
    detection_log: DetectionLogger
    fallback_used: bool = False

    async def evaluate(self, path: Path, ecosystem: Optional[str] = None) -> Any:
        result = await self.evaluator.evaluate_config(path, ecosystem)
        if result.fallback_used:
            self.fallback_used = True
            self.issue(
                "warning",
                f"Static fallback used for {path}: {result.fallback_reason}",
                path=str(path),
            )
        return result.value

    def issue(self, level: str, message: str, **context: Any) -> None:
        context.setdefault("source", self.source.path)
        self.detection_log.log_issue(level, message, **context)


ExtractFn = Callable[[ExtractionContext], Awaitable[PartialTree]]


def unwrap_module(value: Any, *keys: str) -> Dict[str, Any]:
    """Return the mapping behind ``default`` (or any of ``keys``) of an evaluated module."""
    if not isinstance(value, dict):
        return {}
    for key in ("default",) + keys:
        inner = value.get(key)
        if isinstance(inner, dict) and inner:
            return inner
    return value


__all__ = ["ExtractFn", "ExtractionContext", "PartialTree", "unwrap_module"]
