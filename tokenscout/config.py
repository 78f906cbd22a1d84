"""Configuration loading for tokenscout (.tokenscout.yml and friends)."""

from __future__ import annotations

import json
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

import yaml

from .errors import ConfigError
from .logging import get_logger

CONFIG_FILENAMES: tuple[str, ...] = (
    ".tokenscout.yml",
    ".tokenscout.yaml",
    "tokenscout.config.json",
    "tokenscout.config.yml",
    "dcp.config.json",
    ".dcprc.json",
    ".dcprc",
)

DEFAULT_TIMEOUT = 5.0
DEFAULT_MAX_FILE_SIZE = 1024 * 1024
DEFAULT_OUTPUT_DIR = ".tokenscout"

_SIZE_UNITS = {"b": 1, "kb": 1024, "mb": 1024 * 1024, "gb": 1024 * 1024 * 1024}
_SIZE_RE = re.compile(r"^\s*(\d+(?:\.\d+)?)\s*([kmg]?b)?\s*$", re.IGNORECASE)
_DURATION_RE = re.compile(r"^\s*(\d+(?:\.\d+)?)\s*(ms|s)?\s*$", re.IGNORECASE)


@dataclass
class OverrideConfig:
    """Operator rules applied to the detected candidate list."""

    exclude: List[Any] = field(default_factory=list)
    include: List[Any] = field(default_factory=list)
    force_type: Dict[str, Any] = field(default_factory=dict)
    boost_confidence: Dict[str, Any] = field(default_factory=dict)
    config_path: Optional[Path] = None

    def is_empty(self) -> bool:
        return not (self.exclude or self.include or self.force_type or self.boost_confidence)


@dataclass
class EvaluationConfig:
    """Safety ceilings for configuration evaluation."""

    timeout: float = DEFAULT_TIMEOUT
    max_file_size: int = DEFAULT_MAX_FILE_SIZE
    node_binary: str = "node"
    parser: str = "basic"


@dataclass
class DetectorConfig:
    """Detector enablement and exclusions."""

    enabled: List[str] = field(default_factory=list)
    exclude_paths: List[str] = field(default_factory=list)


@dataclass
class TokenScoutConfig:
    """Represents the high-level settings from the operator configuration file."""

    root: Path
    config_path: Optional[Path] = None
    tokens: OverrideConfig = field(default_factory=OverrideConfig)
    evaluation: EvaluationConfig = field(default_factory=EvaluationConfig)
    detectors: DetectorConfig = field(default_factory=DetectorConfig)
    output_dir: Optional[Path] = None

    @property
    def resolved_output_dir(self) -> Path:
        return self.output_dir or (self.root / DEFAULT_OUTPUT_DIR)


def find_config_file(root: Path) -> Optional[Path]:
    """Return the first operator configuration file present under ``root``."""
    for name in CONFIG_FILENAMES:
        candidate = root / name
        if candidate.is_file():
            return candidate
    return None


def load_config(config_path: Path) -> TokenScoutConfig:
    """Load configuration from a project directory or an explicit file."""
    config_path = config_path.expanduser()
    if config_path.is_dir():
        root = config_path.resolve()
        config_file = find_config_file(root)
    else:
        root = config_path.parent.resolve()
        config_file = config_path.resolve() if config_path.exists() else None

    if config_file is None:
        return TokenScoutConfig(root=root)

    data = read_config_file(config_file)
    return build_config(root, data, config_file)


def load_config_or_default(root: Path) -> TokenScoutConfig:
    """Like :func:`load_config` for a project directory, but a broken file yields defaults."""
    try:
        return load_config(root)
    except (ConfigError, OSError) as exc:
        get_logger("config").warning("Using default settings: %s", exc)
        return TokenScoutConfig(root=root.expanduser().resolve())


def read_config_file(path: Path) -> Dict[str, Any]:
    text = path.read_text(encoding="utf-8")
    if not text.strip():
        return {}

    try:
        if path.suffix == ".json":
            loaded = json.loads(text)
        else:
            # safe_load also accepts JSON documents such as .dcprc
            loaded = yaml.safe_load(text)
    except (json.JSONDecodeError, yaml.YAMLError) as exc:
        raise ConfigError(f"Failed to parse {path.name}: {exc}") from exc

    if loaded is None:
        return {}
    if not isinstance(loaded, dict):
        raise ConfigError(f"{path.name} must contain a mapping at the root")
    return loaded


def build_config(root: Path, data: Dict[str, Any], config_file: Optional[Path]) -> TokenScoutConfig:
    tokens = build_override_config(_as_dict(data.get("tokens")), config_file)

    evaluation = EvaluationConfig()
    # "extraction" is the older spelling of the same ceilings
    for section in (_as_dict(data.get("extraction")), _as_dict(data.get("evaluation"))):
        if not section:
            continue
        timeout = _as_duration(section.get("timeout"))
        if timeout is not None:
            evaluation.timeout = timeout
        max_size = _as_size(section.get("maxFileSize", section.get("max_file_size")))
        if max_size is not None:
            evaluation.max_file_size = max_size
        node_binary = _as_str(section.get("node", section.get("node_binary")))
        if node_binary:
            evaluation.node_binary = node_binary
        parser = _as_str(section.get("parser"))
        if parser:
            evaluation.parser = parser.lower()

    detector_data = _as_dict(data.get("detectors"))
    detectors = DetectorConfig()
    if detector_data:
        detectors.enabled = _as_str_list(detector_data.get("enabled"))
        detectors.exclude_paths = _as_str_list(detector_data.get("exclude_paths"))

    output_str = _as_str(data.get("output_dir", data.get("outputDir")))
    output_dir = root / output_str if output_str else None

    return TokenScoutConfig(
        root=root,
        config_path=config_file,
        tokens=tokens,
        evaluation=evaluation,
        detectors=detectors,
        output_dir=output_dir,
    )


def build_override_config(data: Dict[str, Any], config_file: Optional[Path]) -> OverrideConfig:
    """Build the override rule set; shapes are validated later, rule by rule."""
    return OverrideConfig(
        exclude=_as_rule_list(data.get("exclude")),
        include=_as_rule_list(data.get("include")),
        force_type=_as_dict(data.get("forceType", data.get("force_type"))),
        boost_confidence=_as_dict(data.get("boostConfidence", data.get("boost_confidence"))),
        config_path=config_file,
    )


def _as_rule_list(value: Any) -> List[Any]:
    if value is None:
        return []
    if isinstance(value, (str, dict)):
        return [value]
    if isinstance(value, Sequence):
        return list(value)
    return []


def _as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _as_str(value: Any) -> Optional[str]:
    return str(value) if isinstance(value, (str, int, float, bool)) else None


def _as_duration(value: Any) -> Optional[float]:
    """Return seconds; bare numbers above 100 are read as milliseconds."""
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        seconds = float(value)
        return seconds / 1000.0 if seconds > 100 else seconds
    if isinstance(value, str):
        match = _DURATION_RE.match(value)
        if not match:
            return None
        amount = float(match.group(1))
        unit = (match.group(2) or "s").lower()
        return amount / 1000.0 if unit == "ms" else amount
    return None


def _as_size(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value)
    if isinstance(value, str):
        match = _SIZE_RE.match(value)
        if not match:
            return None
        unit = (match.group(2) or "b").lower()
        return int(float(match.group(1)) * _SIZE_UNITS[unit])
    return None


def _as_str_list(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    if isinstance(value, Sequence):
        return [str(item) for item in value if isinstance(item, (str, int, float, bool))]
    return []


__all__ = [
    "CONFIG_FILENAMES",
    "DetectorConfig",
    "EvaluationConfig",
    "OverrideConfig",
    "TokenScoutConfig",
    "build_config",
    "find_config_file",
    "load_config",
    "load_config_or_default",
    "read_config_file",
]
