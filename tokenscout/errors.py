"""Exception hierarchy for tokenscout."""

from __future__ import annotations


class TokenScoutError(RuntimeError):
    """Base class for tokenscout failures."""


class ConfigError(TokenScoutError):
    """Raised when the operator configuration file cannot be parsed."""


class EvaluationError(TokenScoutError):
    """Raised when a configuration file cannot be evaluated."""


class ConfigTooLargeError(EvaluationError):
    """Raised when a file exceeds the configured size ceiling."""


class UnsupportedConfigError(EvaluationError):
    """Raised for file types the evaluator does not understand."""


class DeclarativeParseError(EvaluationError):
    """Raised when a JSON or YAML file is malformed."""


class DynamicEvaluationError(EvaluationError):
    """Raised when executing a module under node fails."""


class EvaluationTimeoutError(DynamicEvaluationError):
    """Raised when module execution exceeds the timeout."""


class TranspilerUnavailable(EvaluationError):
    """Raised when no TypeScript transpiler can be located."""


__all__ = [
    "ConfigError",
    "ConfigTooLargeError",
    "DeclarativeParseError",
    "DynamicEvaluationError",
    "EvaluationError",
    "EvaluationTimeoutError",
    "TokenScoutError",
    "TranspilerUnavailable",
    "UnsupportedConfigError",
]
