"""Detection heuristics and discovery utilities."""

from __future__ import annotations

from importlib import metadata
from typing import Dict, List, Sequence, Tuple, Type

from .base import Detector
from .css_variables import CssVariablesDetector
from .custom import CustomTokensDetector
from .figma import FigmaDetector
from .mui import MuiDetector
from .radix import RadixDetector
from .style_dictionary import StyleDictionaryDetector
from .tailwind import TailwindDetector

_ENTRY_POINT_GROUP = "tokenscout.detectors"

# registry order is fold order; each class is keyed by its ecosystem tag
BUILTIN_DETECTORS: Tuple[Type[Detector], ...] = (
    RadixDetector,
    MuiDetector,
    TailwindDetector,
    CssVariablesDetector,
    StyleDictionaryDetector,
    CustomTokensDetector,
    FigmaDetector,
)


def discover_detectors(enabled: Sequence[str] | None = None) -> List[Detector]:
    """Instantiate builtin and plugin detectors, optionally limited to ``enabled`` tags.

    Plugins registered under the ``tokenscout.detectors`` entry point group are
    appended after the builtins; a plugin may not shadow a builtin tag.
    """
    wanted = None if enabled is None else {name.lower() for name in enabled}
    registry: Dict[str, Detector] = {}

    for detector_cls in BUILTIN_DETECTORS:
        registry.setdefault(detector_cls.ecosystem, detector_cls())

    for entry in metadata.entry_points(group=_ENTRY_POINT_GROUP):
        key = entry.name.lower()
        if key in registry or (wanted is not None and key not in wanted):
            continue
        try:
            loaded = entry.load()
        except Exception as exc:  # pragma: no cover
            raise RuntimeError(f"Failed to load detector entry point '{entry.name}': {exc}") from exc
        registry[key] = _coerce_detector(loaded)

    if wanted is not None:
        unknown = wanted - set(registry)
        if unknown:
            raise ValueError(f"Unknown detectors requested: {', '.join(sorted(unknown))}")
        return [detector for key, detector in registry.items() if key in wanted]
    return list(registry.values())


def _coerce_detector(obj: object) -> Detector:
    if isinstance(obj, type) and issubclass(obj, Detector):
        return obj()
    if isinstance(obj, Detector):
        return obj
    if callable(obj):
        instance = obj()
        if isinstance(instance, Detector):
            return instance
    raise TypeError("Detector entry point must be a Detector subclass or factory")


__all__ = [
    "BUILTIN_DETECTORS",
    "CssVariablesDetector",
    "CustomTokensDetector",
    "Detector",
    "FigmaDetector",
    "MuiDetector",
    "RadixDetector",
    "StyleDictionaryDetector",
    "TailwindDetector",
    "discover_detectors",
]
