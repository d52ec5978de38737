"""
MindMesh FastAPI Application

A REST API server for the MindMesh assistant.
Answers questions grounded in a user's notes, tasks, files and reminders.
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI, Header, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field

from mindmesh.config import Config
from mindmesh.core.factory import (
    DocumentStoreFactory,
    EmbedderFactory,
    LLMFactory,
    SourceStoreFactory,
)
from mindmesh.models.chat import ChatRole, ChatSource
from mindmesh.services.assistant import AssistantService
from mindmesh.utils.exceptions import (
    EmbeddingError,
    GenerationError,
    StoreError,
    UnauthenticatedError,
    ValidationError,
)
from mindmesh.utils.logger import get_logger, setup_logging

# Global service instance
assistant: AssistantService | None = None
config: Config | None = None
logger = get_logger(__name__)


class AskRequest(BaseModel):
    """Request model for asking the assistant."""

    tenant_id: str = Field(..., description="Workspace ID")
    question: str = Field(..., description="Free-form question")


class AskResponse(BaseModel):
    """Assistant chat message with the sources it cited."""

    role: ChatRole = ChatRole.ASSISTANT
    content: str
    sources: list[ChatSource] = Field(default_factory=list)
    model: str | None = None


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    assistant_initialized: bool
    document_backend: str
    embedding_model: str
    chat_model: str


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan context manager for startup/shutdown."""
    global assistant, config

    # Load configuration from environment or use defaults
    config = Config.from_env()

    setup_logging(
        level=config.logging.level,
        log_to_file=config.logging.log_to_file,
        log_dir=config.logging.log_dir,
        file_rotation=config.logging.file_rotation,
        file_retention=config.logging.file_retention,
        compression=config.logging.compression,
        serialize=config.logging.serialize,
    )

    logger.info("Starting MindMesh server")
    logger.info(
        f"Configuration: LLM={config.llm.provider}/{config.llm.model or 'auto'}, "
        f"Embedder={config.embedder.provider}/{config.embedder.model}, "
        f"Documents={config.document_backend}"
    )

    logger.info("Creating LLM provider")
    llm = LLMFactory.create(config.llm)

    logger.info("Creating embedder")
    embedder = EmbedderFactory.create(config.embedder)

    logger.info("Detecting embedding dimension")
    vector_size = await EmbedderFactory.get_dimension(embedder, config.embedder)
    logger.info(f"Embedding dimension: {vector_size}")

    logger.info("Creating stores")
    document_store = DocumentStoreFactory.create(config, vector_size)
    source_store = SourceStoreFactory.create(config.source_store)

    assistant = AssistantService(
        source_store=source_store,
        document_store=document_store,
        embedder=embedder,
        llm=llm,
        config=config,
    )

    await assistant.initialize()
    logger.info("MindMesh assistant initialized")

    yield

    logger.info("Shutting down MindMesh server")
    await assistant.close()
    assistant = None
    logger.info("Cleanup complete")


app = FastAPI(
    title="MindMesh API",
    description="Personal assistant answering from a user's own notes, tasks, files and reminders",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/health", response_model=HealthResponse)
async def health_check():
    """Health check endpoint."""
    return HealthResponse(
        status="healthy" if assistant else "initializing",
        assistant_initialized=assistant is not None,
        document_backend=config.document_backend if config else "unknown",
        embedding_model=config.embedder.model if config else "unknown",
        chat_model=(config.llm.model or "auto") if config else "unknown",
    )


@app.post("/assistant/ask", response_model=AskResponse)
async def ask_assistant(
    request: AskRequest,
    x_user_id: str | None = Header(default=None),
):
    """
    Ask the assistant a question about the caller's own library.

    The caller is identified by the ``X-User-Id`` header set by the upstream
    auth layer. The index is brought up to date before retrieval, so the first
    question after many edits is slower.
    """
    if not assistant:
        raise HTTPException(status_code=503, detail="Assistant not initialized")

    try:
        answer = await assistant.ask(
            tenant_id=request.tenant_id,
            question=request.question,
            user_id=x_user_id,
        )
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=e.message) from e
    except UnauthenticatedError as e:
        raise HTTPException(status_code=401, detail=e.message) from e
    except (EmbeddingError, GenerationError, StoreError) as e:
        logger.bind(error_type=type(e).__name__).error(f"Assistant unavailable: {e}")
        raise HTTPException(status_code=503, detail="Assistant unavailable") from e
    except Exception as e:
        logger.error(f"Error answering question: {e}")
        raise HTTPException(status_code=500, detail=str(e)) from e

    return AskResponse(content=answer.answer, sources=answer.sources, model=answer.model)


@app.get("/")
async def root():
    """Root endpoint with API information."""
    return {
        "name": "MindMesh API",
        "version": "0.1.0",
        "description": "Retrieval-augmented assistant over notes, tasks, files and reminders",
        "docs": "/docs",
        "endpoints": {
            "health": "/health",
            "ask": "POST /assistant/ask",
        },
    }
