"""Design-token detection and extraction for front-end projects."""

from .detection_log import DetectionLogger
from .detector import TokenDetector
from .evaluator import ConfigEvaluator
from .extractor import UniversalTokenExtractor
from .models import AppliedRule, ExtractionResult, TokenSource
from .overrides import OverrideManager
from .pipeline import PipelineResult, TokenPipeline

__all__ = [
    "AppliedRule",
    "ConfigEvaluator",
    "DetectionLogger",
    "ExtractionResult",
    "OverrideManager",
    "PipelineResult",
    "TokenDetector",
    "TokenPipeline",
    "TokenSource",
    "UniversalTokenExtractor",
]

__version__ = "0.1.0"
