"""Operator overrides applied on top of automatic detection."""

from __future__ import annotations

import json
from numbers import Real
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

from .config import CONFIG_FILENAMES, OverrideConfig, build_override_config, read_config_file
from .errors import ConfigError
from .logging import get_logger
from .models import CUSTOM, ECOSYSTEMS, AppliedRule, TokenSource, clamp_confidence
from .paths import matches_pattern, relative_to_root, resolve_pattern

SAMPLE_CONFIG_NAME = "tokenscout.config.json"
DEFAULT_INCLUDE_CONFIDENCE = 0.7

ACTION_EXCLUDE = "exclude"
ACTION_INCLUDE = "include"
ACTION_FORCE_TYPE = "forceType"
ACTION_BOOST = "boostConfidence"


class OverrideManager:
    """Loads the operator file and rewrites the detected candidate list.

    Rules run in a fixed order: exclude, include, forceType, boostConfidence.
    A rule with the wrong shape is skipped; it never aborts the run.
    """

    def __init__(self, root: str | Path, *, config: OverrideConfig | None = None) -> None:
        self.root = Path(root).resolve()
        self.config = config
        self.logger = get_logger("overrides")
        self._applied: List[AppliedRule] = []

    @property
    def applied_rules(self) -> List[AppliedRule]:
        return list(self._applied)

    def load_config(self) -> OverrideConfig:
        """Return the override rules from the first readable operator file."""
        if self.config is not None:
            return self.config

        for name in CONFIG_FILENAMES:
            candidate = self.root / name
            if not candidate.is_file():
                continue
            try:
                data = read_config_file(candidate)
            except (ConfigError, OSError) as exc:
                self.logger.warning("Ignoring unreadable config %s: %s", candidate, exc)
                continue
            tokens = data.get("tokens")
            self.config = build_override_config(
                tokens if isinstance(tokens, dict) else {}, candidate
            )
            self.logger.debug("Loaded token overrides from %s", candidate)
            return self.config

        self.config = OverrideConfig()
        return self.config

    def apply_overrides(self, sources: Sequence[TokenSource]) -> List[TokenSource]:
        config = self.load_config()
        self._applied = []
        result = list(sources)
        if config.is_empty():
            return result

        result = self._apply_excludes(result, config.exclude)
        result = self._apply_includes(result, config.include)
        self._apply_force_type(result, config.force_type)
        self._apply_boosts(result, config.boost_confidence)
        return result

    def _apply_excludes(self, sources: List[TokenSource], rules: List[Any]) -> List[TokenSource]:
        criteria = []
        for rule in rules:
            parsed = _exclude_criteria(rule)
            if parsed is None:
                self.logger.debug("Skipping malformed exclude rule: %r", rule)
                continue
            criteria.append(parsed)
        if not criteria:
            return sources

        kept: List[TokenSource] = []
        for source in sources:
            match = next((item for item in criteria if self._excluded_by(source, item)), None)
            if match is None:
                kept.append(source)
                continue
            self._applied.append(
                AppliedRule(
                    action=ACTION_EXCLUDE,
                    path=source.path,
                    pattern=_describe_criteria(match),
                    reason="Excluded by override rule",
                    type=source.type,
                )
            )
        return kept

    def _excluded_by(self, source: TokenSource, criteria: Dict[str, Any]) -> bool:
        if "type" in criteria and source.type != criteria["type"]:
            return False
        if "pattern" in criteria and not matches_pattern(source.path, criteria["pattern"], self.root):
            return False
        if "minConfidence" in criteria and not source.confidence < criteria["minConfidence"]:
            return False
        return True

    def _apply_includes(self, sources: List[TokenSource], rules: List[Any]) -> List[TokenSource]:
        result = list(sources)
        for rule in rules:
            entry = _include_entry(rule)
            if entry is None:
                self.logger.debug("Skipping malformed include rule: %r", rule)
                continue
            matches = resolve_pattern(entry["pattern"], self.root)
            if not matches:
                self.logger.debug("Include pattern %s matched nothing", entry["pattern"])
                continue
            for path in matches:
                relative = relative_to_root(path, self.root)
                manual = TokenSource(
                    type=entry["type"],
                    path=str(path),
                    confidence=entry["confidence"],
                    description=entry["description"] or f"Manually included: {relative}",
                    metadata={"source": "manual"},
                )
                result = [item for item in result if not _same_path(item.path, path)]
                result.append(manual)
                self._applied.append(
                    AppliedRule(
                        action=ACTION_INCLUDE,
                        path=str(path),
                        pattern=entry["pattern"],
                        reason="Manually included",
                        type=entry["type"],
                    )
                )
        return result

    def _apply_force_type(self, sources: List[TokenSource], rules: Dict[str, Any]) -> None:
        valid = {}
        for pattern, tag in rules.items():
            if not isinstance(tag, str) or tag not in ECOSYSTEMS:
                self.logger.debug("Skipping forceType rule %s -> %r", pattern, tag)
                continue
            valid[pattern] = tag
        if not valid:
            return

        for source in sources:
            for pattern, tag in valid.items():
                if not matches_pattern(source.path, pattern, self.root):
                    continue
                original = source.type
                source.metadata.setdefault("originalType", original)
                source.metadata["typeOverridden"] = True
                source.type = tag
                self._applied.append(
                    AppliedRule(
                        action=ACTION_FORCE_TYPE,
                        path=source.path,
                        pattern=pattern,
                        reason=f"Type forced from {original} to {tag}",
                        type=tag,
                    )
                )
                break

    def _apply_boosts(self, sources: List[TokenSource], rules: Dict[str, Any]) -> None:
        valid = {}
        for pattern, delta in rules.items():
            if isinstance(delta, bool) or not isinstance(delta, Real):
                self.logger.debug("Skipping boostConfidence rule %s -> %r", pattern, delta)
                continue
            valid[pattern] = float(delta)
        if not valid:
            return

        for source in sources:
            for pattern, delta in valid.items():
                if not matches_pattern(source.path, pattern, self.root):
                    continue
                before = source.confidence
                source.confidence = clamp_confidence(before + delta)
                self._applied.append(
                    AppliedRule(
                        action=ACTION_BOOST,
                        path=source.path,
                        pattern=pattern,
                        reason=f"Confidence adjusted from {before:.2f} to {source.confidence:.2f}",
                        type=source.type,
                        boost=delta,
                    )
                )
                break

    @staticmethod
    def generate_sample_config() -> Dict[str, Any]:
        """Return a starter configuration covering every override section."""
        return {
            "tokens": {
                "exclude": [
                    "**/legacy-tokens.json",
                    "**/*.backup.*",
                    {"type": "css-variables", "minConfidence": 0.5},
                ],
                "include": [
                    "./custom-tokens/**/*.json",
                    {
                        "path": "./brand-configs/brand.js",
                        "type": "custom",
                        "confidence": 0.9,
                        "description": "Brand palette maintained by the design team",
                    },
                ],
                "forceType": {
                    "./weird-config.js": "tailwind",
                    "./custom-theme.json": "style-dictionary",
                },
                "boostConfidence": {
                    "./tokens.json": 0.2,
                    "**/design-tokens/**": 0.3,
                },
            },
            "extraction": {
                "conflictStrategy": "last-wins",
                "maxFileSize": "5MB",
                "timeout": 10000,
            },
        }

    @classmethod
    def create_sample_config(
        cls, directory: str | Path, *, overwrite: bool = False
    ) -> Path:
        """Write the starter configuration into ``directory`` and return its path."""
        target = Path(directory) / SAMPLE_CONFIG_NAME
        if target.exists() and not overwrite:
            raise FileExistsError(f"{target} already exists")
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(
            json.dumps(cls.generate_sample_config(), indent=2) + "\n", encoding="utf-8"
        )
        return target


def _exclude_criteria(rule: Any) -> Optional[Dict[str, Any]]:
    if isinstance(rule, str):
        return {"pattern": rule} if rule.strip() else None
    if not isinstance(rule, dict):
        return None

    criteria: Dict[str, Any] = {}
    tag = rule.get("type")
    if tag is not None:
        if not isinstance(tag, str):
            return None
        criteria["type"] = tag
    pattern = rule.get("path", rule.get("pattern"))
    if pattern is not None:
        if not isinstance(pattern, str) or not pattern.strip():
            return None
        criteria["pattern"] = pattern
    threshold = rule.get("minConfidence", rule.get("min_confidence"))
    if threshold is not None:
        if isinstance(threshold, bool) or not isinstance(threshold, Real):
            return None
        criteria["minConfidence"] = float(threshold)
    return criteria or None


def _describe_criteria(criteria: Dict[str, Any]) -> str:
    if list(criteria) == ["pattern"]:
        return criteria["pattern"]
    return ", ".join(f"{key}={value}" for key, value in criteria.items())


def _include_entry(rule: Any) -> Optional[Dict[str, Any]]:
    if isinstance(rule, str):
        if not rule.strip():
            return None
        return {
            "pattern": rule,
            "type": CUSTOM,
            "confidence": DEFAULT_INCLUDE_CONFIDENCE,
            "description": None,
        }
    if not isinstance(rule, dict):
        return None

    pattern = rule.get("path", rule.get("pattern"))
    if not isinstance(pattern, str) or not pattern.strip():
        return None
    tag = rule.get("type", CUSTOM)
    if tag not in ECOSYSTEMS:
        return None
    confidence = rule.get("confidence", DEFAULT_INCLUDE_CONFIDENCE)
    if isinstance(confidence, bool) or not isinstance(confidence, Real):
        return None
    description = rule.get("description")
    return {
        "pattern": pattern,
        "type": tag,
        "confidence": float(confidence),
        "description": description if isinstance(description, str) else None,
    }


def _same_path(left: str, right: Path) -> bool:
    try:
        return Path(left).resolve() == right
    except OSError:
        return False


__all__ = ["OverrideManager", "SAMPLE_CONFIG_NAME"]
