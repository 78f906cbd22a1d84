"""Merge every detected source into one canonical token tree."""

from __future__ import annotations

import asyncio
import time
from datetime import datetime, timezone
from typing import Any, Dict, Mapping, Sequence

from .config import DEFAULT_OUTPUT_DIR
from .detection_log import DetectionLogger
from .evaluator import ConfigEvaluator
from .extractors import EXTRACTORS, ExtractionContext, PartialTree
from .extractors.normalize import count_tokens, populated_categories
from .logging import get_logger
from .models import CATEGORIES, ExtractionResult, TokenSource

TREE_VERSION = "1.0.0"


def empty_tree() -> Dict[str, Any]:
    tree: Dict[str, Any] = {category: {} for category in CATEGORIES}
    tree["meta"] = {
        "sources": [],
        "extractedAt": datetime.now(timezone.utc).isoformat(),
        "version": TREE_VERSION,
    }
    return tree


class UniversalTokenExtractor:
    """Routes each source to its ecosystem extractor and merges the results.

    Sources are extracted one at a time in the given order, so when two
    sources of the same ecosystem produce the same key the later one wins.
    A failing source is recorded and skipped; the tree is always returned.
    """

    def __init__(
        self,
        *,
        evaluator: ConfigEvaluator | None = None,
        logger: DetectionLogger | None = None,
    ) -> None:
        self.evaluator = evaluator or ConfigEvaluator()
        self.detection_log = logger or DetectionLogger(DEFAULT_OUTPUT_DIR)
        self.log = get_logger("extractor")

    async def extract_all(self, sources: Sequence[TokenSource]) -> Dict[str, Any]:
        started = time.perf_counter()
        tree = empty_tree()

        for source in sources:
            extract = EXTRACTORS.get(source.type)
            if extract is None:
                self.detection_log.log_issue(
                    "warning", f"No extractor registered for type: {source.type}", path=source.path
                )
                continue

            self.log.info("Extracting tokens from %s: %s", source.type, source.path)
            ctx = ExtractionContext(source, self.evaluator, self.detection_log)
            source_started = time.perf_counter()
            try:
                partial = await extract(ctx)
            except Exception as exc:
                elapsed = (time.perf_counter() - source_started) * 1000
                self.detection_log.log_issue(
                    "error", f"Failed to extract {source.path}: {exc}", type=source.type
                )
                self.detection_log.log_extraction_result(
                    source,
                    ExtractionResult(
                        success=False,
                        error=str(exc),
                        fallback_used=ctx.fallback_used,
                        extraction_time=elapsed,
                    ),
                )
                continue

            elapsed = (time.perf_counter() - source_started) * 1000
            found = count_tokens(partial)
            self.merge(tree, partial, source)
            tree["meta"]["sources"].append(
                {
                    "type": source.type,
                    "path": source.path,
                    "confidence": source.confidence,
                    "extractedTokens": found,
                    "fallbackUsed": ctx.fallback_used,
                }
            )
            self.detection_log.log_extraction_result(
                source,
                ExtractionResult(
                    success=True,
                    tokens_found=found,
                    categories=populated_categories(partial),
                    fallback_used=ctx.fallback_used,
                    extraction_time=elapsed,
                ),
            )

        self.detection_log.log_performance("extraction", (time.perf_counter() - started) * 1000)
        return tree

    def extract_all_sync(self, sources: Sequence[TokenSource]) -> Dict[str, Any]:
        return asyncio.run(self.extract_all(sources))

    def merge(self, tree: Dict[str, Any], partial: PartialTree, source: TokenSource) -> None:
        """Prefix each key with the source's ecosystem and copy it into ``tree``."""
        for category, tokens in partial.items():
            bucket = tree.get(category)
            if not isinstance(bucket, dict) or not isinstance(tokens, Mapping):
                continue
            for name, entry in tokens.items():
                key = f"{source.type}-{name}"
                existing = bucket.get(key)
                if existing is not None and existing.get("path") != source.path:
                    self.detection_log.log_issue(
                        "warning",
                        f"Token {category}.{key} from {source.path} replaces the one from {existing['path']}",
                        category=category,
                        key=key,
                    )
                bucket[key] = {**entry, "source": source.type, "path": source.path}


def extract_tokens(sources: Sequence[TokenSource]) -> Dict[str, Any]:
    """Run a default extraction synchronously."""
    return UniversalTokenExtractor().extract_all_sync(sources)


def token_count(tree: Mapping[str, Any]) -> int:
    return sum(len(tree.get(category) or {}) for category in CATEGORIES)


__all__ = ["TREE_VERSION", "UniversalTokenExtractor", "empty_tree", "extract_tokens", "token_count"]
