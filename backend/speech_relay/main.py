"""
Speech Translation Relay - Main Application

This is the entry point for the FastAPI application.
It handles:
- WebSocket connections for realtime speech translation
- A plain liveness endpoint and a health endpoint
- Startup wiring of the shared speech/translation/TTS collaborators
"""
from contextlib import asynccontextmanager
import logging
from datetime import datetime, UTC

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import PlainTextResponse

from speech_relay.api.websocket import router as ws_router
from speech_relay.config.settings import settings
from speech_relay.services.connection import connection_manager
from speech_relay.services.metrics import start_metrics_server
from speech_relay.services.providers import build_gcp_services
from speech_relay.services.recognition import RecognitionPipeline
from speech_relay.services.translation import TranslationOrchestrator

# Configure logging
logging.basicConfig(level=settings.LOG_LEVEL)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan manager.

    Handles startup and shutdown events using the modern FastAPI pattern.
    """
    # === STARTUP ===
    logger.info("🚀 Starting Speech Translation Relay...")

    # Collaborators may be injected beforehand (tests, alternative providers)
    if getattr(app.state, "services", None) is None:
        app.state.services = build_gcp_services()
    services = app.state.services

    app.state.recognition = RecognitionPipeline(services.transcriber)
    app.state.orchestrator = TranslationOrchestrator(services.translator, services.synthesizer)
    logger.info("✅ Relay pipeline ready")

    if settings.METRICS_ENABLED:
        start_metrics_server(settings.METRICS_PORT)

    yield  # Application runs here

    # === SHUTDOWN ===
    logger.info("🛑 Shutting down...")
    connection_manager.close_all_sessions()


app = FastAPI(
    title="Speech Translation Relay",
    description="Realtime speech-to-speech translation over WebSockets",
    version="1.0.0",
    lifespan=lifespan
)

# CORS configuration
app.add_middleware(
    CORSMiddleware,
    allow_origin_regex=r"http://(localhost|127\.0\.0\.1)(:\d+)?",
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include WebSocket routes
app.include_router(ws_router)


@app.get("/", response_class=PlainTextResponse)
async def root():
    """Liveness endpoint."""
    return "Translator relay is running."


@app.get("/health")
async def health():
    """Health check endpoint."""
    return {
        "status": "ok",
        "timestamp": datetime.now(UTC).isoformat(),
        "active_sessions": connection_manager.get_active_session_count(),
    }
