"""
FastAPI application entry point.
AI assistant service.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from aiservice.api import router
from aiservice.config import settings
from aiservice.log import setup_logging


logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan management."""
    setup_logging()
    logger.info("Starting AI assistant service...")

    # Load the catalog and build the service up front
    from aiservice.rag.knowledgebase import get_knowledgebase
    from aiservice.service import get_ai_service

    get_knowledgebase()
    service = get_ai_service()

    if not service.is_configured:
        logger.warning("No AI provider configured, AI endpoints will answer 424")
    if service.vector_store is None:
        logger.info("Vector database not configured, curl generation uses the fallback prompt")

    logger.info("Service ready")

    yield

    logger.info("Shutting down AI assistant service...")


def create_app() -> FastAPI:
    app = FastAPI(
        title="AI Assistant Service",
        description="""
## AI Assistant API

Routes application requests to a configured LLM provider.

### Features:
- **Curl generation**: fuzzy-matches the service name against the API knowledgebase,
  retrieves matching endpoint documentation from the vector index, and asks the model
  for a structured curl command. Falls back to a plain prompt when nothing is retrieved.
- **Error debugging**: explains node errors using the node's parameter summary.
- **Prompting**: passes chat messages straight to the model.
        """,
        version="1.0.0",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(router)

    @app.get("/", tags=["Root"])
    def root():
        """Root endpoint with service info."""
        return {
            "name": "AI Assistant Service",
            "version": "1.0.0",
            "docs": "/docs",
            "health": "/health",
        }

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "aiservice.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.ENV == "development",
    )
