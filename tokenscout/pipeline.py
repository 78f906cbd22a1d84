"""End-to-end detection and extraction run used by the CLI and service."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

from .config import TokenScoutConfig, load_config_or_default
from .detection_log import DetectionLogger
from .detector import TokenDetector
from .evaluator import ConfigEvaluator
from .extractor import UniversalTokenExtractor
from .logging import get_logger
from .models import TokenSource


@dataclass
class PipelineResult:
    """Everything a run produced."""

    sources: List[TokenSource]
    tokens: Dict[str, Any]
    log_path: Optional[Path] = None
    summary: Dict[str, Any] = field(default_factory=dict)


class TokenPipeline:
    """Wires detection, overrides, evaluation, extraction and the audit log together."""

    def __init__(
        self,
        root: str | Path,
        config: TokenScoutConfig | None = None,
        *,
        ecosystems: Sequence[str] | None = None,
        output_dir: str | Path | None = None,
        verbose: bool = False,
    ) -> None:
        self.root = Path(root).expanduser().resolve()
        self.config = config or load_config_or_default(self.root)
        if output_dir is not None:
            self.config.output_dir = Path(output_dir).expanduser().resolve()
        self.ecosystems = list(ecosystems) if ecosystems else None
        self.detection_log = DetectionLogger(self.config.resolved_output_dir, verbose=verbose)
        self.logger = get_logger("pipeline")

    async def run(self, *, write_log: bool = True) -> PipelineResult:
        if not self.root.is_dir():
            raise FileNotFoundError(f"Project path does not exist: {self.root}")

        detector = TokenDetector(
            self.root,
            config=self.config,
            logger=self.detection_log,
            ecosystems=self.ecosystems,
        )
        sources = await detector.detect_all()

        evaluator = ConfigEvaluator.from_config(self.config.evaluation, project_root=self.root)
        extractor = UniversalTokenExtractor(evaluator=evaluator, logger=self.detection_log)
        tokens = await extractor.extract_all(sources)

        log_path = self.detection_log.write_log() if write_log else None
        summary = self.detection_log.generate_summary()
        self.logger.info(
            "Extracted %d token(s) from %d source(s)", summary["totalTokens"], len(sources)
        )
        return PipelineResult(sources=sources, tokens=tokens, log_path=log_path, summary=summary)

    def run_sync(self, *, write_log: bool = True) -> PipelineResult:
        return asyncio.run(self.run(write_log=write_log))


__all__ = ["PipelineResult", "TokenPipeline"]
