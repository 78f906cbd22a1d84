"""Safe evaluation of JS/TS/JSON/YAML configuration files."""

from __future__ import annotations

import asyncio
import contextlib
import json
import uuid
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional

import yaml

from ..config import DEFAULT_MAX_FILE_SIZE, DEFAULT_TIMEOUT, EvaluationConfig
from ..errors import (
    ConfigTooLargeError,
    DeclarativeParseError,
    EvaluationError,
    UnsupportedConfigError,
)
from ..logging import get_logger
from .literals import LiteralParser, get_literal_parser
from .node_runtime import run_module, transpile_typescript
from .static import StaticExtractor

JS_SUFFIXES = {".js", ".mjs", ".cjs"}
TS_SUFFIXES = {".ts", ".mts", ".cts"}
JSON_SUFFIXES = {".json"}
YAML_SUFFIXES = {".yaml", ".yml"}
EXECUTABLE_SUFFIXES = JS_SUFFIXES | TS_SUFFIXES

STRATEGY_DYNAMIC = "dynamic"
STRATEGY_STATIC = "static"
STRATEGY_DECLARATIVE = "declarative"


@dataclass
class EvaluationResult:
    """Value produced for one file and how it was obtained."""

    value: Any
    strategy: str
    fallback_reason: Optional[str] = None

    @property
    def fallback_used(self) -> bool:
        return self.strategy == STRATEGY_STATIC


class ConfigEvaluator:
    """Evaluates one configuration file at a time under size and time ceilings.

    Executable modules run in a fresh node process raced against ``timeout``;
    any failure there (syntax error, missing import, timeout, no node) falls
    back to :class:`StaticExtractor`. Declarative files are parsed directly and
    their parse errors propagate.
    """

    def __init__(
        self,
        *,
        timeout: float = DEFAULT_TIMEOUT,
        max_file_size: int = DEFAULT_MAX_FILE_SIZE,
        node_binary: str = "node",
        literal_parser: LiteralParser | None = None,
        project_root: Path | None = None,
    ) -> None:
        self.timeout = timeout
        self.max_file_size = max_file_size
        self.node_binary = node_binary
        self.project_root = project_root
        self.static = StaticExtractor(literal_parser or get_literal_parser())
        self.logger = get_logger("evaluator")

    @classmethod
    def from_config(
        cls, config: EvaluationConfig, *, project_root: Path | None = None
    ) -> "ConfigEvaluator":
        return cls(
            timeout=config.timeout,
            max_file_size=config.max_file_size,
            node_binary=config.node_binary,
            literal_parser=get_literal_parser(config.parser),
            project_root=project_root,
        )

    async def evaluate(self, config_path: str | Path, ecosystem: str | None = None) -> Any:
        """Return the exported configuration value of ``config_path``."""
        result = await self.evaluate_config(config_path, ecosystem)
        return result.value

    async def evaluate_config(
        self, config_path: str | Path, ecosystem: str | None = None
    ) -> EvaluationResult:
        path = Path(config_path)
        # stat raises FileNotFoundError / PermissionError for the caller
        size = path.stat().st_size
        if size > self.max_file_size:
            raise ConfigTooLargeError(
                f"Config file too large: {size} bytes (max: {self.max_file_size})"
            )

        suffix = path.suffix.lower()
        if suffix in JSON_SUFFIXES or suffix in YAML_SUFFIXES:
            return EvaluationResult(self._load_declarative(path), STRATEGY_DECLARATIVE)
        if suffix in JS_SUFFIXES:
            return await self._evaluate_js(path, ecosystem)
        if suffix in TS_SUFFIXES:
            return await self._evaluate_ts(path, ecosystem)
        raise UnsupportedConfigError(f"Unsupported config file type: {suffix or path.name}")

    async def _evaluate_js(
        self, path: Path, ecosystem: str | None, source_path: Path | None = None
    ) -> EvaluationResult:
        # static fallbacks always read the file the operator wrote, not a scratch copy
        source_path = source_path or path
        self.logger.debug("Evaluating JS config %s", path)
        try:
            outcome = await run_module(path, timeout=self.timeout, node_binary=self.node_binary)
        except EvaluationError as exc:
            self.logger.debug("Dynamic evaluation of %s failed: %s", path, exc)
            return self._static(source_path, ecosystem, str(exc))

        if outcome.factory_error is not None:
            self.logger.debug(
                "Config factory in %s raised (%s); extracting its return block",
                source_path,
                outcome.factory_error,
            )
            content = source_path.read_text(encoding="utf-8", errors="replace")
            return EvaluationResult(
                self.static.extract_function_return(content),
                STRATEGY_STATIC,
                f"factory raised: {outcome.factory_error}",
            )
        return EvaluationResult(outcome.value, STRATEGY_DYNAMIC)

    async def _evaluate_ts(self, path: Path, ecosystem: str | None) -> EvaluationResult:
        self.logger.debug("Evaluating TS config %s", path)
        root = self.project_root or path.parent
        try:
            code = await transpile_typescript(
                path, project_root=root, timeout=self.timeout, node_binary=self.node_binary
            )
        except EvaluationError as exc:
            self.logger.debug("Transpiling %s failed: %s", path, exc)
            return self._static(path, ecosystem, str(exc))

        scratch = path.with_name(f".{path.stem}.tokenscout-{uuid.uuid4().hex[:8]}.mjs")
        try:
            scratch.write_text(code, encoding="utf-8")
            return await self._evaluate_js(scratch, ecosystem, source_path=path)
        except OSError as exc:
            return self._static(path, ecosystem, f"scratch file unavailable: {exc}")
        finally:
            with contextlib.suppress(FileNotFoundError):
                scratch.unlink()

    def _static(self, path: Path, ecosystem: str | None, reason: str) -> EvaluationResult:
        value = self.static.extract_file(path, ecosystem)
        return EvaluationResult(value, STRATEGY_STATIC, reason)

    @staticmethod
    def _load_declarative(path: Path) -> Any:
        content = path.read_text(encoding="utf-8")
        try:
            if path.suffix.lower() in JSON_SUFFIXES:
                return json.loads(content)
            return yaml.safe_load(content)
        except (json.JSONDecodeError, yaml.YAMLError) as exc:
            raise DeclarativeParseError(f"Failed to parse {path.name}: {exc}") from exc

    def evaluate_sync(self, config_path: str | Path, ecosystem: str | None = None) -> Any:
        return asyncio.run(self.evaluate(config_path, ecosystem))


__all__ = [
    "ConfigEvaluator",
    "EXECUTABLE_SUFFIXES",
    "EvaluationResult",
    "STRATEGY_DECLARATIVE",
    "STRATEGY_DYNAMIC",
    "STRATEGY_STATIC",
]
