"""
TalkGraph FastAPI Application

A REST API server for building concept graphs from uploaded text files.
Provides endpoints for uploading files, analyzing them, and saving/loading graphs.
"""

from contextlib import asynccontextmanager
from datetime import UTC, datetime

from fastapi import FastAPI, File, Form, HTTPException, Request, UploadFile
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from talkgraph import __version__
from talkgraph.config import Config
from talkgraph.core.factory import LLMFactory, StorageFactory
from talkgraph.core.library import LocalFileLibrary
from talkgraph.core.llm.base import LLMProvider
from talkgraph.models import GraphDocument, SaveRequest
from talkgraph.services import AnalysisGateway, GraphSession, GraphStore
from talkgraph.utils.exceptions import (
    CorruptDataError,
    NotFoundError,
    TalkGraphError,
    UpstreamError,
    ValidationError,
)
from talkgraph.utils.logger import get_logger, setup_logging

logger = get_logger(__name__)


# Pydantic models for API
class AnalyzeRequest(BaseModel):
    """Request model for analyzing raw content."""

    content: str = Field(default="", description="Text to analyze")


class BatchAnalyzeRequest(BaseModel):
    """Request model for analyzing several library files together."""

    filenames: list[str] = Field(default_factory=list, description="Stored filenames to analyze")


class SaveGraphRequest(BaseModel):
    """Request model for saving a graph."""

    graph: GraphDocument
    metadata: SaveRequest


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    initialized: bool
    llm: str
    storage: str


def error_status(error: TalkGraphError) -> int:
    """HTTP status for a TalkGraph error."""
    if isinstance(error, ValidationError):
        return 400
    if isinstance(error, NotFoundError):
        return 404
    if isinstance(error, UpstreamError):
        return 502
    if isinstance(error, CorruptDataError):
        return 422
    return 500


def create_app(config: Config | None = None, llm: LLMProvider | None = None) -> FastAPI:
    """
    Build the TalkGraph application.

    Args:
        config: Configuration; loaded from the environment if not given
        llm: LLM provider override; created from `config.llm` if not given

    Returns:
        FastAPI application
    """
    config = config or Config.from_env()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Lifespan context manager for startup/shutdown."""
        setup_logging(
            level=config.logging.level,
            log_to_file=config.logging.log_to_file,
            log_dir=config.logging.log_dir,
            file_rotation=config.logging.file_rotation,
            file_retention=config.logging.file_retention,
            compression=config.logging.compression,
            serialize=config.logging.serialize,
        )

        logger.info("Starting TalkGraph server")
        logger.info(
            f"Configuration: LLM={config.llm.provider}/{config.llm.model}, "
            f"Storage={config.storage.backend}"
        )

        provider = llm or LLMFactory.create(config.llm)

        library = LocalFileLibrary(
            uploads_dir=config.library.uploads_dir, metadata_dir=config.library.metadata_dir
        )
        await library.initialize()
        logger.info(f"File library: {config.library.uploads_dir}")

        store = GraphStore(StorageFactory.create(config.storage))
        await store.initialize()
        logger.info(f"Graph store initialized ({config.storage.backend})")

        app.state.library = library
        app.state.store = store
        app.state.gateway = AnalysisGateway(provider, llm_config=config.llm, config=config.analysis)

        yield

        logger.info("Shutting down TalkGraph server")
        await store.close()
        await provider.close()
        logger.info("Cleanup complete")

    app = FastAPI(
        title="TalkGraph API",
        description="Concept graphs from uploaded text files",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.config = config

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.server.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(TalkGraphError)
    async def talkgraph_error_handler(request: Request, exc: TalkGraphError):
        status = error_status(exc)
        if status >= 500:
            logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
        else:
            logger.warning(f"{request.method} {request.url.path} rejected: {exc.message}")
        return JSONResponse(
            status_code=status,
            content={"success": False, "error": exc.message, "details": exc.context},
        )

    def services(request: Request) -> tuple[LocalFileLibrary, GraphStore, AnalysisGateway]:
        state = request.app.state
        if not hasattr(state, "store"):
            raise HTTPException(status_code=503, detail="Server not initialized")
        return state.library, state.store, state.gateway

    # Health endpoints
    @app.get("/health", response_model=HealthResponse)
    async def health_check(request: Request):
        """Health check endpoint."""
        initialized = hasattr(request.app.state, "store")
        return HealthResponse(
            status="healthy" if initialized else "initializing",
            initialized=initialized,
            llm=f"{config.llm.provider}/{config.llm.model}",
            storage=config.storage.backend,
        )

    @app.get("/api/test")
    async def test_endpoint():
        """Liveness probe kept for existing clients."""
        return {
            "status": "ok",
            "message": "Server is running",
            "timestamp": datetime.now(UTC).isoformat(),
        }

    # File library endpoints
    @app.get("/api/files")
    async def list_files(request: Request):
        """List uploaded files available for analysis."""
        library, _, _ = services(request)
        files = await library.list_files()
        return {"files": [f.model_dump(mode="json", by_alias=True) for f in files]}

    @app.post("/api/upload")
    async def upload_file(
        request: Request,
        file: UploadFile = File(...),
        customName: str | None = Form(default=None),
    ):
        """Upload a text file into the library."""
        library, _, _ = services(request)
        data = await file.read()
        source_file = await library.add_file(
            original_name=file.filename or "",
            data=data,
            custom_name=customName,
            file_type=file.content_type,
        )
        return {
            "message": "File uploaded successfully",
            "filename": source_file.filename,
            "metadata": source_file.model_dump(
                mode="json", by_alias=True, exclude={"id", "filename"}
            ),
        }

    @app.get("/api/files/{filename}")
    async def get_file_content(request: Request, filename: str):
        """Return the text content of an uploaded file."""
        library, _, _ = services(request)
        content = await library.read_content(filename)
        return {"success": True, "content": content}

    # Analysis endpoints
    @app.post("/api/analyze")
    async def analyze_content(request: Request, body: AnalyzeRequest):
        """
        Analyze raw text into a concept graph.

        The graph is returned as produced by the model, without provenance.
        """
        _, _, gateway = services(request)
        graph = await gateway.analyze(body.content)
        return {"success": True, "data": graph.to_wire()}

    @app.post("/api/analyze/batch")
    async def analyze_files(request: Request, body: BatchAnalyzeRequest):
        """
        Analyze several library files and combine their graphs.

        Every file is analyzed concurrently; if any of them fails the whole
        request fails and no graph is returned.
        """
        library, store, gateway = services(request)
        session = GraphSession(library=library, gateway=gateway, store=store)
        for filename in body.filenames:
            session.select(await library.get_file(filename))

        graph = await session.analyze()
        return {
            "success": True,
            "data": graph.to_wire(),
            "sourceFiles": [f.original_name for f in session.selected],
        }

    # Saved graph endpoints
    @app.get("/api/graphs")
    async def list_graphs(request: Request):
        """List saved graphs, newest first."""
        _, store, _ = services(request)
        summaries = await store.list()
        return {"graphs": [summary.to_wire() for summary in summaries]}

    @app.post("/api/graphs/save")
    async def save_graph(request: Request, body: SaveGraphRequest):
        """Save a graph under a newly generated filename."""
        _, store, _ = services(request)
        summary = await store.save(body.graph, body.metadata)
        return {"success": True, "data": summary.to_wire()}

    @app.get("/api/graphs/{filename}")
    async def load_graph(request: Request, filename: str):
        """
        Load a saved graph.

        Link endpoints are returned as the full node records they reference.
        """
        _, store, _ = services(request)
        saved = await store.load(filename)
        return {"success": True, "data": saved.to_wire()}

    @app.delete("/api/graphs/{filename}")
    async def delete_graph(request: Request, filename: str):
        """Delete a saved graph."""
        _, store, _ = services(request)
        await store.delete(filename)
        return {"success": True, "filename": filename, "deleted": True}

    # Root endpoint
    @app.get("/")
    async def root():
        """Root endpoint with API information."""
        return {
            "name": "TalkGraph API",
            "version": __version__,
            "description": "Concept graphs from uploaded text files",
            "docs": "/docs",
            "health": "/health",
        }

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("app:app", host="0.0.0.0", port=5001, reload=True, log_level="info")
