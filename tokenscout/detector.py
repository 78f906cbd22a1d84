"""Project-wide token source detection."""

from __future__ import annotations

import asyncio
import time
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

from .config import TokenScoutConfig, load_config_or_default
from .detection_log import DetectionLogger
from .detectors import Detector, discover_detectors
from .logging import get_logger
from .models import HIGH_CONFIDENCE, ProjectTree, TokenSource
from .overrides import OverrideManager
from .scanner import ProjectScanner


class TokenDetector:
    """Runs every registered heuristic over one project and applies overrides."""

    def __init__(
        self,
        root: str | Path,
        *,
        config: TokenScoutConfig | None = None,
        overrides: OverrideManager | None = None,
        logger: DetectionLogger | None = None,
        detectors: Sequence[Detector] | None = None,
        ecosystems: Sequence[str] | None = None,
    ) -> None:
        self.root = Path(root).resolve()
        self.log = get_logger("detector")
        self.config = config or load_config_or_default(self.root)

        if overrides is None:
            override_config = self.config.tokens if self.config.config_path is not None else None
            overrides = OverrideManager(self.root, config=override_config)
        self.overrides = overrides
        self.detection_log = logger or DetectionLogger(self.config.resolved_output_dir)

        if detectors is None:
            enabled = ecosystems if ecosystems is not None else (self.config.detectors.enabled or None)
            detectors = discover_detectors(enabled)
        self.detectors: List[Detector] = list(detectors)
        self.scanner = ProjectScanner(exclude_paths=self.config.detectors.exclude_paths)
        self.sources: List[TokenSource] = []

    async def detect_all(self) -> List[TokenSource]:
        started = time.perf_counter()
        loop = asyncio.get_running_loop()
        # scanning and the heuristics touch the filesystem; keep them off the loop
        tree = await loop.run_in_executor(None, self.scanner.scan, self.root)
        self.log.debug("Scanned %d files under %s", len(tree.files), self.root)

        slots = await asyncio.gather(*(self._run(detector, tree) for detector in self.detectors))
        detected = [source for slot in slots for source in slot]
        self.log.info("Detected %d candidate token source(s)", len(detected))

        final = self.overrides.apply_overrides(detected)
        if len(final) != len(detected) or self.overrides.applied_rules:
            self.log.info("%d token source(s) remain after overrides", len(final))

        for source in final:
            self.detection_log.log_detected_source(source)
        self.detection_log.log_overrides(self.overrides.load_config(), self.overrides.applied_rules)
        self.detection_log.log_performance("detection", (time.perf_counter() - started) * 1000)

        self.sources = final
        return list(final)

    def detect_all_sync(self) -> List[TokenSource]:
        return asyncio.run(self.detect_all())

    async def _run(self, detector: Detector, tree: ProjectTree) -> List[TokenSource]:
        name = detector.ecosystem or type(detector).__name__
        loop = asyncio.get_running_loop()
        try:
            candidates = await loop.run_in_executor(None, lambda: list(detector.detect(tree)))
            found = [item for item in candidates if isinstance(item, TokenSource)]
        except Exception as exc:
            self.detection_log.log_issue(
                "warning", f"{name} detection failed: {exc}", detector=name
            )
            return []
        return found

    def get_summary(self) -> Dict[str, Any]:
        """Group the last detection run for console reporting."""
        by_type: Dict[str, List[Dict[str, Any]]] = {}
        for source in self.sources:
            by_type.setdefault(source.type, []).append(source.to_dict())
        high = [source.to_dict() for source in self.sources if source.confidence >= HIGH_CONFIDENCE]

        recommendations: List[str] = []
        if not self.sources:
            recommendations.append(
                "No token sources detected. Consider adding tailwind.config.js or CSS custom properties."
            )
        elif not high:
            recommendations.append(
                "Only low-confidence detections. Consider an include rule in tokenscout.config.json."
            )
        if len(by_type) > 2:
            recommendations.append(
                "Multiple token systems detected. Exclude unwanted sources to avoid conflicts."
            )

        return {
            "total": len(self.sources),
            "byType": by_type,
            "highConfidence": high,
            "recommendations": recommendations,
        }


def detect(root: str | Path, *, ecosystems: Optional[Sequence[str]] = None) -> List[TokenSource]:
    """Convenience wrapper running a default detection pass synchronously."""
    return TokenDetector(root, ecosystems=ecosystems).detect_all_sync()


__all__ = ["TokenDetector", "detect"]
