"""Core data models shared across tokenscout components."""

from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Optional

TAILWIND = "tailwind"
MUI = "mui"
RADIX = "radix"
CSS_VARIABLES = "css-variables"
STYLE_DICTIONARY = "style-dictionary"
CUSTOM = "custom"
FIGMA = "figma"

ECOSYSTEMS = frozenset(
    {TAILWIND, MUI, RADIX, CSS_VARIABLES, STYLE_DICTIONARY, CUSTOM, FIGMA}
)

CATEGORIES = (
    "colors",
    "spacing",
    "typography",
    "borders",
    "shadows",
    "animations",
    "breakpoints",
    "zIndex",
)

HIGH_CONFIDENCE = 0.8
LOW_CONFIDENCE = 0.5


def clamp_confidence(value: float) -> float:
    """Clamp a confidence score into the closed unit interval."""
    return max(0.0, min(1.0, float(value)))


@dataclass
class TokenSource:
    """A file or directory identified as likely containing design tokens."""

    type: str
    path: str
    confidence: float
    description: str
    metadata: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        self.confidence = clamp_confidence(self.confidence)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class AppliedRule:
    """Audit record for one override rule that changed the candidate list."""

    action: str
    path: str
    pattern: str
    reason: str
    type: Optional[str] = None
    boost: Optional[float] = None

    def to_dict(self) -> Dict[str, Any]:
        return {key: value for key, value in asdict(self).items() if value is not None}


@dataclass
class ExtractionResult:
    """Outcome of extracting a single token source."""

    success: bool
    tokens_found: int = 0
    categories: List[str] = field(default_factory=list)
    error: Optional[str] = None
    fallback_used: bool = False
    extraction_time: Optional[float] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "success": self.success,
            "tokensFound": self.tokens_found,
            "categories": list(self.categories),
            "error": self.error,
            "fallbackUsed": self.fallback_used,
            "extractionTime": self.extraction_time,
        }


@dataclass
class ProjectFile:
    """Metadata for a file discovered by the project scanner."""

    path: str
    size: int
    suffix: str


@dataclass
class ProjectTree:
    """Normalized view of the project handed to detection heuristics."""

    root: str
    files: List[ProjectFile]
