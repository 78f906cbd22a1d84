"""FastAPI application entrypoint for tokenscout service mode."""

from __future__ import annotations

import asyncio
import functools
from typing import Any, Callable, Dict, List, Optional

try:  # pragma: no cover - optional dependency
    from fastapi import Depends, FastAPI
    from fastapi.responses import JSONResponse
    from pydantic import BaseModel

    _FASTAPI_AVAILABLE = True
except ModuleNotFoundError:  # pragma: no cover - service mode optional
    FastAPI = None  # type: ignore[assignment]
    Depends = None  # type: ignore[assignment]
    JSONResponse = None  # type: ignore[assignment]
    BaseModel = object  # type: ignore[assignment]
    _FASTAPI_AVAILABLE = False

from ..detector import TokenDetector
from ..pipeline import TokenPipeline


class DetectRequest(BaseModel):
    path: str
    sources: Optional[List[str]] = None


class SourceModel(BaseModel):
    type: str
    path: str
    confidence: float
    description: str
    metadata: Dict[str, Any] = {}


class DetectResponse(BaseModel):
    total: int
    sources: List[SourceModel]


class ExtractRequest(BaseModel):
    path: str
    sources: Optional[List[str]] = None
    write_log: bool = True


class ExtractResponse(BaseModel):
    tokens: Dict[str, Any]
    summary: Dict[str, Any]
    log_path: Optional[str] = None


class HealthResponse(BaseModel):
    status: str


def _default_detector(path: str, sources: Optional[List[str]]) -> TokenDetector:
    return TokenDetector(path, ecosystems=sources)


def _default_pipeline(path: str, sources: Optional[List[str]]) -> TokenPipeline:
    return TokenPipeline(path, ecosystems=sources)


def create_app(
    detector_factory: Callable[[str, Optional[List[str]]], TokenDetector] = _default_detector,
    pipeline_factory: Callable[[str, Optional[List[str]]], TokenPipeline] = _default_pipeline,
) -> FastAPI:
    """Create the FastAPI application exposing detection and extraction."""

    if not _FASTAPI_AVAILABLE:  # pragma: no cover - validated via unit tests
        raise RuntimeError(
            "FastAPI is required for service mode. Install it with `pip install tokenscout[service]`."
        )

    app = FastAPI(title="tokenscout", version="1.0.0")

    async def get_detector_factory() -> Callable[[str, Optional[List[str]]], TokenDetector]:
        return detector_factory

    async def get_pipeline_factory() -> Callable[[str, Optional[List[str]]], TokenPipeline]:
        return pipeline_factory

    @app.get("/health", response_model=HealthResponse)
    async def health() -> HealthResponse:
        return HealthResponse(status="ok")

    @app.post("/detect", response_model=DetectResponse)
    async def detect(
        payload: DetectRequest,
        factory: Callable[[str, Optional[List[str]]], TokenDetector] = Depends(get_detector_factory),
    ) -> DetectResponse:
        detector = factory(payload.path, payload.sources)
        loop = asyncio.get_running_loop()
        sources = await loop.run_in_executor(None, detector.detect_all_sync)
        return DetectResponse(
            total=len(sources),
            sources=[SourceModel(**source.to_dict()) for source in sources],
        )

    @app.post("/extract", response_model=ExtractResponse)
    async def extract(
        payload: ExtractRequest,
        factory: Callable[[str, Optional[List[str]]], TokenPipeline] = Depends(get_pipeline_factory),
    ) -> ExtractResponse:
        pipeline = factory(payload.path, payload.sources)
        loop = asyncio.get_running_loop()
        result = await loop.run_in_executor(
            None, functools.partial(pipeline.run_sync, write_log=payload.write_log)
        )
        return ExtractResponse(
            tokens=result.tokens,
            summary=result.summary,
            log_path=str(result.log_path) if result.log_path else None,
        )

    @app.exception_handler(FileNotFoundError)
    async def file_not_found_handler(
        _: Any, exc: FileNotFoundError
    ) -> JSONResponse:  # pragma: no cover - simple mapping
        return JSONResponse(status_code=404, content={"detail": str(exc)})

    @app.exception_handler(ValueError)
    async def value_error_handler(
        _: Any, exc: ValueError
    ) -> JSONResponse:  # pragma: no cover - simple mapping
        return JSONResponse(status_code=400, content={"detail": str(exc)})

    return app


def run_service(
    host: str = "0.0.0.0", port: int = 8000
) -> None:  # pragma: no cover - integration path
    if not _FASTAPI_AVAILABLE:
        raise RuntimeError(
            "FastAPI is required for service mode. Install it with `pip install tokenscout[service]`."
        )

    try:
        import uvicorn
    except ModuleNotFoundError as exc:  # pragma: no cover - optional dependency
        raise RuntimeError(
            "uvicorn is required to run the service. Install it with `pip install uvicorn`."
        ) from exc

    app = create_app()
    uvicorn.run(app, host=host, port=port)
