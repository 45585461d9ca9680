# -*- coding: utf-8 -*-

import os
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.api.endpoints.coach import router as coach_router
from app.config import CoachSettings, load_settings
from app.services.coach_service import CoachService
from utils.logging import configure_logging, get_logger

API_VERSION = "1.0.0"

logger = get_logger(__name__)


def create_app(
    settings: Optional[CoachSettings] = None,
    service: Optional[CoachService] = None,
) -> FastAPI:
    """Build the FastAPI application from explicit settings."""

    settings = settings or load_settings()
    configure_logging(settings.log_level)

    application = FastAPI(title="Vocab Coach", version=API_VERSION)

    # Preflight (OPTIONS) requests are answered by the middleware.
    application.add_middleware(
        CORSMiddleware,
        allow_origins=[settings.allowed_origin],
        allow_methods=["POST", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization"],
        max_age=86400,
    )

    application.state.settings = settings
    application.state.coach_service = service or CoachService(settings)
    application.include_router(coach_router)

    logger.info(
        "Coach API ready (provider=%s, llm_configured=%s, allowed_origin=%s)",
        settings.llm_provider,
        application.state.coach_service.llm_configured,
        settings.allowed_origin,
    )

    @application.get("/")
    async def root():
        return {"message": "Vocab Coach API", "version": API_VERSION}

    @application.get("/health")
    async def health():
        return {
            "status": "healthy",
            "llm_configured": application.state.coach_service.llm_configured,
        }

    return application


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "app.main:app",
        host=os.getenv("HOST", "0.0.0.0"),
        port=int(os.getenv("PORT", "8000")),
    )
