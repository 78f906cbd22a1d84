"""Audit trail for detection and extraction decisions."""

from __future__ import annotations

import json
import sys
import time
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, TextIO

from .config import OverrideConfig
from .logging import get_logger
from .models import HIGH_CONFIDENCE, LOW_CONFIDENCE, AppliedRule, ExtractionResult, TokenSource

LOG_VERSION = "1.0.0"
DEFAULT_LOG_NAME = "detection-log.json"
SLOW_RUN_MS = 10_000
CONFLICT_TYPE_THRESHOLD = 2

_LEVELS = ("error", "warning", "info")


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


class DetectionLogger:
    """Collects every decision of a run and persists it as a JSON document."""

    def __init__(
        self,
        output_dir: str | Path,
        *,
        verbose: bool = False,
        filename: str = DEFAULT_LOG_NAME,
    ) -> None:
        self.output_dir = Path(output_dir)
        self.verbose = verbose
        self.log_file = self.output_dir / filename
        self.logger = get_logger("detection_log")
        self._started = time.perf_counter()
        self.log: Dict[str, Any] = {
            "detectionRun": _now(),
            "version": LOG_VERSION,
            "sources": [],
            "overrides": {"appliedFrom": None, "rules": []},
            "summary": {
                "totalSources": 0,
                "byType": {},
                "highConfidence": 0,
                "issues": [],
            },
            "performance": {
                "startTime": _now(),
                "detectionTime": None,
                "extractionTime": None,
            },
        }

    def _emit(self, message: str, *args: Any) -> None:
        if self.verbose:
            self.logger.info(message, *args)
        else:
            self.logger.debug(message, *args)

    def log_detected_source(self, source: TokenSource, **extra: Any) -> None:
        entry = {
            "type": source.type,
            "path": source.path,
            "confidence": source.confidence,
            "description": source.description,
            "metadata": dict(source.metadata),
            "detectedAt": _now(),
        }
        entry.update(extra)
        self.log["sources"].append(entry)
        self._emit("%s: %s (%.0f%%)", source.type.upper(), source.path, source.confidence * 100)

    def log_extraction_result(self, source: TokenSource, result: ExtractionResult) -> None:
        entry = self._find_entry(source)
        if entry is None:
            # sources extracted without a detection pass are still audited
            self.log_detected_source(source)
            entry = self.log["sources"][-1]
        entry["extraction"] = result.to_dict()
        if result.error:
            self._emit("%s extraction failed: %s", source.type, result.error)
        elif result.success:
            self._emit("%s: %d tokens extracted", source.type, result.tokens_found)

    def _find_entry(self, source: TokenSource) -> Optional[Dict[str, Any]]:
        for entry in self.log["sources"]:
            if entry["path"] == source.path and entry["type"] == source.type:
                return entry
        for entry in self.log["sources"]:
            if entry["path"] == source.path:
                return entry
        return None

    def log_overrides(self, config: OverrideConfig, applied_rules: Sequence[AppliedRule]) -> None:
        self.log["overrides"]["appliedFrom"] = (
            str(config.config_path) if config.config_path is not None else None
        )
        stamped = []
        for rule in applied_rules:
            record = rule.to_dict()
            record["appliedAt"] = _now()
            stamped.append(record)
        self.log["overrides"]["rules"] = stamped
        if applied_rules:
            self._emit("Applied %d override rule(s)", len(applied_rules))
            for rule in applied_rules:
                self._emit("  %s: %s", rule.action, rule.path)

    def log_performance(self, phase: str, ms: float) -> None:
        self.log["performance"][f"{phase}Time"] = ms
        self._emit("%s: %.1fms", phase, ms)

    def log_issue(self, level: str, message: str, **context: Any) -> None:
        if level not in _LEVELS:
            level = "info"
        self.log["summary"]["issues"].append(
            {"level": level, "message": message, "context": context, "timestamp": _now()}
        )
        if level == "error":
            self.logger.error(message)
        elif level == "warning":
            self.logger.warning(message)
        else:
            self._emit(message)

    @property
    def issues(self) -> List[Dict[str, Any]]:
        return list(self.log["summary"]["issues"])

    def generate_summary(self) -> Dict[str, Any]:
        sources = self.log["sources"]

        by_type: Dict[str, int] = {}
        for entry in sources:
            by_type[entry["type"]] = by_type.get(entry["type"], 0) + 1

        high_confidence = sum(1 for entry in sources if entry["confidence"] >= HIGH_CONFIDENCE)
        successful = sum(1 for entry in sources if entry.get("extraction", {}).get("success"))
        success_rate = successful / len(sources) if sources else 0.0
        total_tokens = sum(entry.get("extraction", {}).get("tokensFound", 0) for entry in sources)

        summary = {
            "totalSources": len(sources),
            "byType": by_type,
            "highConfidence": high_confidence,
            "successRate": round(success_rate * 100),
            "totalTokens": total_tokens,
            "issues": self.log["summary"]["issues"],
        }
        self.log["summary"] = summary
        summary["recommendations"] = self.generate_recommendations()
        return summary

    def generate_recommendations(self) -> List[Dict[str, Any]]:
        recommendations: List[Dict[str, Any]] = []
        sources = self.log["sources"]
        by_type = self.log["summary"].get("byType", {})

        if not sources:
            recommendations.append(
                {
                    "type": "setup",
                    "priority": "high",
                    "message": "No token sources detected. Consider setting up a design token system.",
                    "actions": [
                        "Create a tokens.json file",
                        "Set up CSS custom properties",
                        "Configure Tailwind CSS theme",
                    ],
                }
            )

        low = [entry for entry in sources if entry["confidence"] < LOW_CONFIDENCE]
        if low:
            recommendations.append(
                {
                    "type": "accuracy",
                    "priority": "medium",
                    "message": f"{len(low)} low-confidence detections may be incorrect.",
                    "actions": [
                        f"Review detected sources in {self.log_file.name}",
                        "Use tokenscout.config.json to override detection",
                        "Rename files to follow standard conventions",
                    ],
                }
            )

        failures = [
            entry
            for entry in sources
            if "extraction" in entry and not entry["extraction"].get("success")
        ]
        if failures:
            recommendations.append(
                {
                    "type": "extraction",
                    "priority": "high",
                    "message": f"{len(failures)} sources failed to extract tokens.",
                    "actions": [
                        "Check file permissions and syntax",
                        "Install missing dependencies",
                        "Use --verbose for detailed error messages",
                    ],
                }
            )

        if len(by_type) > CONFLICT_TYPE_THRESHOLD:
            recommendations.append(
                {
                    "type": "conflicts",
                    "priority": "medium",
                    "message": f"Multiple token systems detected ({', '.join(by_type)}).",
                    "actions": [
                        "Standardize on a single token system",
                        "Use tokenscout.config.json to exclude unwanted sources",
                    ],
                }
            )

        performance = self.log["performance"]
        total_ms = (performance.get("detectionTime") or 0) + (performance.get("extractionTime") or 0)
        if total_ms > SLOW_RUN_MS:
            recommendations.append(
                {
                    "type": "performance",
                    "priority": "low",
                    "message": f"Token detection took {total_ms / 1000:.1f}s. Consider optimization.",
                    "actions": [
                        "Add large directories to detectors.exclude_paths",
                        "Restrict detection with --sources",
                        "Include token files explicitly instead of relying on auto-detection",
                    ],
                }
            )

        return recommendations

    def write_log(self) -> Path:
        """Finalize the summary and write the JSON log; failures are recorded, not raised."""
        self.generate_summary()
        self.log["performance"]["totalTime"] = (time.perf_counter() - self._started) * 1000
        try:
            self.output_dir.mkdir(parents=True, exist_ok=True)
            self.log_file.write_text(
                json.dumps(self.log, indent=2, default=str), encoding="utf-8"
            )
        except OSError as exc:
            self.log_issue("error", f"Failed to write detection log: {exc}", path=str(self.log_file))
            return self.log_file
        self._emit("Detection log written to %s", self.log_file)
        return self.log_file

    def print_summary(self, stream: TextIO | None = None) -> None:
        stream = stream or sys.stdout
        summary = self.log["summary"]
        if "successRate" not in summary:
            summary = self.generate_summary()

        lines = [
            "",
            "Detection Summary:",
            f"  Sources found: {summary['totalSources']}",
            f"  High confidence: {summary['highConfidence']}",
            f"  Success rate: {summary['successRate']}%",
            f"  Total tokens: {summary['totalTokens']}",
        ]
        if summary["byType"]:
            lines.append("  By type:")
            lines.extend(f"    {tag}: {count}" for tag, count in summary["byType"].items())

        recommendations = summary.get("recommendations") or []
        if recommendations:
            lines.append("")
            lines.append("Recommendations:")
            lines.extend(f"  [{rec['priority']}] {rec['message']}" for rec in recommendations)

        issues = summary.get("issues") or []
        errors = sum(1 for issue in issues if issue["level"] == "error")
        warnings = sum(1 for issue in issues if issue["level"] == "warning")
        if errors or warnings:
            lines.append("")
            lines.append(f"Issues: {errors} error(s), {warnings} warning(s)")
            lines.append(f"  See {self.log_file} for details")

        stream.write("\n".join(lines) + "\n")

    def get_log(self) -> Dict[str, Any]:
        return self.log


__all__ = ["DEFAULT_LOG_NAME", "DetectionLogger"]
