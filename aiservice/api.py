"""
FastAPI API routes for the AI service.
"""

import logging
from typing import Any, Dict, List, Literal, Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field

from aiservice.errors import ApplicationError
from aiservice.llm.schemas import GenerateCurlResult
from aiservice.monitoring import get_metrics
from aiservice.service import AIService, get_ai_service


logger = logging.getLogger(__name__)

router = APIRouter()


# === Request/Response Models ===

class GenerateCurlRequest(BaseModel):
    """Curl generation request."""
    service: str = Field(..., min_length=1, max_length=200, description="Name of the API service")
    request: str = Field(..., min_length=1, max_length=5000, description="What the call should do")


class DebugErrorRequest(BaseModel):
    """Node error debugging request."""
    error: Dict[str, Any] = Field(..., description="The error raised by the node")
    nodeType: Optional[Dict[str, Any]] = Field(default=None, description="Node type description")


class DebugErrorResponse(BaseModel):
    message: str


class ChatMessage(BaseModel):
    role: Literal["system", "user", "assistant"]
    content: str


class PromptRequest(BaseModel):
    """Raw prompt request."""
    messages: List[ChatMessage] = Field(..., min_length=1)


class PromptResponse(BaseModel):
    content: str


class HealthResponse(BaseModel):
    """Health check response."""
    status: str
    provider: str
    vector_store: str


def _failed_dependency(error: ApplicationError) -> HTTPException:
    return HTTPException(status_code=424, detail=error.message)


# === AI Endpoints ===

@router.post("/ai/generate-curl", response_model=GenerateCurlResult, tags=["AI"])
async def generate_curl(request: GenerateCurlRequest, service: AIService = Depends(get_ai_service)):
    """
    Generate a curl command for a request against an API service.

    Endpoint documentation of matching services is used when available;
    otherwise the model answers from its own knowledge.
    """
    try:
        return await service.generate_curl(request.service, request.request)
    except ApplicationError as e:
        raise _failed_dependency(e)
    except Exception:
        get_metrics().increment("provider_errors")
        logger.exception("Curl generation failed for %r", request.service)
        raise HTTPException(status_code=500, detail="Internal server error")


@router.post("/ai/debug-error", response_model=DebugErrorResponse, tags=["AI"])
async def debug_error(request: DebugErrorRequest, service: AIService = Depends(get_ai_service)):
    """Explain a node error and suggest how to fix it."""
    try:
        message = await service.debug_error(request.error, request.nodeType)
        return DebugErrorResponse(message=message)
    except ApplicationError as e:
        raise _failed_dependency(e)
    except Exception:
        get_metrics().increment("provider_errors")
        logger.exception("Error debugging failed")
        raise HTTPException(status_code=500, detail="Internal server error")


@router.post("/ai/prompt", response_model=PromptResponse, tags=["AI"])
async def prompt(request: PromptRequest, service: AIService = Depends(get_ai_service)):
    """Send chat messages to the model and return its reply."""
    try:
        messages = [m.model_dump() for m in request.messages]
        result = await service.prompt(messages)
        return PromptResponse(content=service.provider.map_response(result))
    except ApplicationError as e:
        raise _failed_dependency(e)
    except Exception:
        get_metrics().increment("provider_errors")
        logger.exception("Prompt failed")
        raise HTTPException(status_code=500, detail="Internal server error")


# === Metrics & Health ===

@router.get("/metrics", tags=["Monitoring"])
def get_service_metrics():
    """Get service metrics."""
    return get_metrics().get_metrics()


@router.get("/health", response_model=HealthResponse, tags=["Monitoring"])
def health_check(service: AIService = Depends(get_ai_service)):
    """Health check endpoint."""
    return HealthResponse(
        status="healthy",
        provider="configured" if service.is_configured else "not_configured",
        vector_store="configured" if service.vector_store is not None else "not_configured",
    )
