"""
Citebase Backend API
FastAPI service for uploading documents to per-user memories and answering
questions from them with cited sources.
"""

import logging
from contextlib import asynccontextmanager
from typing import List, Optional

from fastapi import Depends, FastAPI, File, Form, HTTPException, Request, UploadFile
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .config import Settings, get_settings
from .errors import BatchTooLargeError
from .langbase_client import LangbaseClient
from .models.documents import UploadCandidate, UploadResponse
from .models.queries import (
    CreateAgentRequest,
    CreateMemoryRequest,
    ProvisioningOutcome,
    QueryRequest,
    QueryResponse,
)
from .provisioning import ProvisioningService
from .query_engine import QueryOrchestrator
from .retrieval import ContextRetriever
from .storage import build_storage
from .upload_engine import BatchUploadCoordinator
from .validation import FileValidator

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = get_settings()
    logger.info("Application startup: initializing Langbase client and engines...")
    client = LangbaseClient.from_settings(settings)

    app.state.upload_coordinator = BatchUploadCoordinator(
        storage=build_storage(settings, client),
        validator=FileValidator(max_file_size=settings.max_file_size_bytes),
    )
    app.state.query_orchestrator = QueryOrchestrator(
        retriever=ContextRetriever(client, default_top_k=settings.default_top_k),
        agent=client,
    )
    app.state.provisioning = ProvisioningService(client, settings)
    yield
    client.close()
    logger.info("Application shutdown.")


app = FastAPI(
    title="Citebase API",
    description="Per-user document memories with cited, retrieval-augmented answers",
    version="1.0.0",
    lifespan=lifespan,
)

# CORS middleware for frontend access
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # Configure appropriately for production
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    """Malformed or incomplete requests are client errors (400), not 422."""
    problems = "; ".join(
        f"{'.'.join(str(part) for part in error.get('loc', ()))}: {error.get('msg', 'invalid')}"
        for error in exc.errors()
    )
    return JSONResponse(status_code=400, content={"detail": f"Invalid request: {problems}"})


# ============================================================================
# Dependencies
# ============================================================================

def get_upload_coordinator(request: Request) -> BatchUploadCoordinator:
    return request.app.state.upload_coordinator


def get_query_orchestrator(request: Request) -> QueryOrchestrator:
    return request.app.state.query_orchestrator


def get_provisioning(request: Request) -> ProvisioningService:
    return request.app.state.provisioning


def _require(value: Optional[str], field: str) -> str:
    if not value or not value.strip():
        raise HTTPException(
            status_code=400,
            detail=f"Missing or invalid required field: {field} (must be a non-empty string).",
        )
    return value.strip()


@app.get("/health")
async def health_check():
    """Health check endpoint for Cloud Run."""
    return {"status": "healthy", "service": "citebase-backend"}


@app.get("/")
async def root(settings: Settings = Depends(get_settings)):
    """Root endpoint with API info."""
    return {
        "service": "Citebase Backend",
        "version": "1.0.0",
        "storage_backend": settings.storage_backend,
        "max_batch_files": settings.max_batch_files,
    }


# ============================================================================
# Document Upload Endpoints
# ============================================================================

@app.post("/memories/upload")
def upload_documents(
    user_id: Optional[str] = Form(None, alias="userId"),
    files: Optional[List[UploadFile]] = File(None),
    settings: Settings = Depends(get_settings),
    coordinator: BatchUploadCoordinator = Depends(get_upload_coordinator),
):
    """
    Upload up to five documents (pdf, doc, docx, txt) to the user's memory.

    Responds 200 when every file was stored, 207 when only some were,
    400 for client errors and 500 when storage failed for every file.
    """
    user_id = _require(user_id, "userId")

    if not files:
        raise HTTPException(status_code=400, detail="No files provided under the 'files' key.")

    if len(files) > settings.max_batch_files:
        raise HTTPException(
            status_code=400,
            detail=f"Cannot upload more than {settings.max_batch_files} files at a time.",
        )

    candidates = [
        UploadCandidate(name=f.filename or "", content=f.file.read(), declared_size=f.size)
        for f in files
    ]

    try:
        result = coordinator.process(user_id, candidates, max_batch=settings.max_batch_files)
    except BatchTooLargeError as e:
        raise HTTPException(status_code=400, detail=str(e))

    body = UploadResponse.from_batch(result).model_dump(by_alias=True, exclude_none=True)
    return JSONResponse(content=body, status_code=result.http_status)


# ============================================================================
# Query Endpoints
# ============================================================================

@app.post("/agent/query", response_model=QueryResponse, response_model_by_alias=True)
def query_agent(
    request: QueryRequest,
    orchestrator: QueryOrchestrator = Depends(get_query_orchestrator),
):
    """
    Answer a query from the user's memory with the user's agent.

    404 means the agent or the memory for this user does not exist.
    """
    query = _require(request.query, "query")
    user_id = _require(request.user_id, "userId")

    outcome = orchestrator.answer(user_id, query, request.top_k)
    if not outcome.succeeded:
        raise HTTPException(status_code=outcome.http_status, detail=outcome.error_message)

    return QueryResponse(
        response=outcome.completion,
        context_chunks=[
            {"text": chunk.text, "sourceId": chunk.source_id}
            for chunk in outcome.context_chunks
        ],
    )


# ============================================================================
# Provisioning Endpoints
# ============================================================================

def _provisioning_response(outcome: ProvisioningOutcome, key: str) -> JSONResponse:
    if outcome.http_status >= 500:
        raise HTTPException(status_code=outcome.http_status, detail=outcome.message)
    content = {"message": outcome.message}
    if outcome.created:
        content[key] = outcome.payload
    return JSONResponse(content=content, status_code=outcome.http_status)


@app.post("/memories/create")
def create_memory(
    request: CreateMemoryRequest,
    provisioning: ProvisioningService = Depends(get_provisioning),
):
    """Create the memory for a user. 409 if it already exists."""
    user_id = _require(request.user_id, "userId")
    outcome = provisioning.create_memory(user_id, request.description)
    return _provisioning_response(outcome, "memory")


@app.post("/agent/create")
def create_agent(
    request: CreateAgentRequest,
    provisioning: ProvisioningService = Depends(get_provisioning),
):
    """Create the agent (pipe) for a user. 409 if it already exists."""
    user_id = _require(request.user_id, "userId")
    outcome = provisioning.create_agent(user_id)
    return _provisioning_response(outcome, "pipe")
