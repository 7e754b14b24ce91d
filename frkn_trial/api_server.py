#!/usr/bin/env python3
"""
FRKN Trial - API server
Long-running FastAPI application exposing POST /trial
"""

import logging

import httpx
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from . import __version__
from .api.models import TrialResponse
from .api.routes import router, init_services
from .config import ServerSettings, configure_logging
from .database import TrialJournal
from .services import EmailNotifier, FrknClient, IdempotencyGate, ProvisioningOrchestrator
from .services.trial_service import MSG_INVALID, TrialService

logger = logging.getLogger(__name__)


app = FastAPI(
    title="FRKN Trial API",
    description="Trial activation gateway for the FRKN provisioning API",
    version=__version__,
    docs_url=None,
    redoc_url=None,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["POST", "OPTIONS"],
    allow_headers=["Content-Type"],
)


def build_trial_service(settings: ServerSettings, http: httpx.AsyncClient) -> TrialService:
    """
    Wire the trial service: journal -> gate, FRKN client -> orchestrator, notifier

    Args:
        settings: process settings
        http: shared upstream HTTP client
    """
    journal = TrialJournal(settings.journal_path)
    gate = IdempotencyGate(journal.load())
    orchestrator = ProvisioningOrchestrator(FrknClient(http))
    return TrialService(gate, orchestrator, journal, EmailNotifier())


@app.on_event("startup")
async def startup_event():
    """
    Load the journal and initialise services

    Settings installed on ``app.state.settings`` by the launcher take
    precedence over the environment.
    """
    settings = getattr(app.state, "settings", None) or ServerSettings.from_env()
    configure_logging(settings.log_level)

    print("🚀 FRKN Trial API starting...")

    http = httpx.AsyncClient()
    app.state.http = http

    service = build_trial_service(settings, http)
    init_services(service)

    print(f"  ✅ Journal: {settings.journal_path} ({len(service.gate)} trial(s) on record)")
    print(f"  ✅ Trial service on {settings.host}:{settings.port}")


@app.on_event("shutdown")
async def shutdown_event():
    """
    Close the upstream HTTP client
    """
    http = getattr(app.state, "http", None)
    if http is not None:
        await http.aclose()
    print("🛑 FRKN Trial API stopped")


app.include_router(router)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """
    Malformed JSON or an unparsable email is just an invalid trial request
    """
    logger.info("rejected trial request: %s", exc.errors())
    return JSONResponse(
        status_code=200,
        content=TrialResponse.error(MSG_INVALID).model_dump(),
    )
