"""HTTP service exposing nanistats analysis."""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Sequence

from fastapi import Depends, FastAPI
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from ..analyzer import analyze_text
from ..models import AggregateStats, FileStats
from ..session import Snapshot, StatsSession

SessionFactory = Callable[[str, Sequence[str]], StatsSession]


class StatsRequest(BaseModel):
    path: str
    exclude_dirs: List[str] = []
    unique_words: bool = False


class FileRequest(BaseModel):
    path: str
    unique_words: bool = False


class TextRequest(BaseModel):
    text: str
    unique_words: bool = False


class StatsPayload(BaseModel):
    body_char_count: int
    word_count: int
    speakers: List[str]
    words: List[str]
    script_line_count: int
    speaker_char_count: int
    file_count: Optional[int] = None


class StatsResponse(BaseModel):
    root: str
    generation: int
    stats: StatsPayload
    tree: Dict[str, Any]


class FileResponse(BaseModel):
    path: str
    stats: StatsPayload


class HealthResponse(BaseModel):
    status: str


def _default_session(path: str, exclude_dirs: Sequence[str]) -> StatsSession:
    return StatsSession(Path(path).expanduser().resolve(), exclude_dirs=exclude_dirs)


def _payload(stats: FileStats, unique_words: bool) -> StatsPayload:
    data = stats.to_dict(unique_words=unique_words)
    if not isinstance(stats, AggregateStats):
        data["file_count"] = None
    return StatsPayload(**data)


async def _run_blocking(func: Callable[[], Any]) -> Any:
    loop = asyncio.get_running_loop()
    return await loop.run_in_executor(None, func)


def create_app(session_factory: SessionFactory = _default_session) -> FastAPI:
    """Create the FastAPI application exposing analysis operations."""

    app = FastAPI(title="nanistats", version="1.0.0")

    async def get_session_factory() -> SessionFactory:
        return session_factory

    @app.get("/health", response_model=HealthResponse)
    async def health() -> HealthResponse:
        return HealthResponse(status="ok")

    @app.post("/stats", response_model=StatsResponse)
    async def workspace_stats(
        payload: StatsRequest,
        factory: SessionFactory = Depends(get_session_factory),
    ) -> StatsResponse:
        def _run() -> Snapshot:
            session = factory(payload.path, payload.exclude_dirs)
            snapshot = session.refresh() or session.snapshot
            if snapshot is None:  # pragma: no cover - refresh always publishes for a fresh session
                raise RuntimeError("Analysis was superseded")
            return snapshot

        snapshot = await _run_blocking(_run)
        return StatsResponse(
            root=snapshot.root,
            generation=snapshot.generation,
            stats=_payload(snapshot.stats, payload.unique_words),
            tree=snapshot.tree.to_dict(unique_words=payload.unique_words),
        )

    @app.post("/file", response_model=FileResponse)
    async def file_stats(
        payload: FileRequest,
        factory: SessionFactory = Depends(get_session_factory),
    ) -> FileResponse:
        target = Path(payload.path).expanduser()

        def _run() -> FileStats:
            if not target.is_file():
                raise FileNotFoundError(f"Script not found: {payload.path}")
            session = factory(str(target.parent), ())
            return session.document_stats(target)

        stats = await _run_blocking(_run)
        return FileResponse(path=target.as_posix(), stats=_payload(stats, payload.unique_words))

    @app.post("/text", response_model=StatsPayload)
    async def text_stats(payload: TextRequest) -> StatsPayload:
        return _payload(analyze_text(payload.text), payload.unique_words)

    @app.exception_handler(FileNotFoundError)
    async def file_not_found_handler(_: Any, exc: FileNotFoundError) -> JSONResponse:
        return JSONResponse(status_code=404, content={"detail": str(exc)})

    @app.exception_handler(RuntimeError)
    async def runtime_error_handler(
        _: Any, exc: RuntimeError
    ) -> JSONResponse:  # pragma: no cover - simple mapping
        return JSONResponse(status_code=400, content={"detail": str(exc)})

    return app


def run_service(host: str = "127.0.0.1", port: int = 8000) -> None:  # pragma: no cover - integration path
    import uvicorn

    uvicorn.run(create_app(), host=host, port=port)
