"""Two-tier configuration evaluation: execute under bounds, else parse statically."""

from .config_evaluator import (
    EXECUTABLE_SUFFIXES,
    STRATEGY_DECLARATIVE,
    STRATEGY_DYNAMIC,
    STRATEGY_STATIC,
    ConfigEvaluator,
    EvaluationResult,
)
from .literals import (
    TREE_SITTER_AVAILABLE,
    BasicLiteralParser,
    LiteralParser,
    TreeSitterLiteralParser,
    get_literal_parser,
)
from .static import StaticExtractor, infer_ecosystem

__all__ = [
    "BasicLiteralParser",
    "ConfigEvaluator",
    "EXECUTABLE_SUFFIXES",
    "EvaluationResult",
    "LiteralParser",
    "STRATEGY_DECLARATIVE",
    "STRATEGY_DYNAMIC",
    "STRATEGY_STATIC",
    "StaticExtractor",
    "TREE_SITTER_AVAILABLE",
    "TreeSitterLiteralParser",
    "get_literal_parser",
    "infer_ecosystem",
]
