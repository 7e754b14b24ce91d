#!/usr/bin/env python3
"""
FRKN Trial - API routes
"""

import logging

from fastapi import APIRouter

from .models import TrialRequest, TrialResponse
from ..services.trial_service import MSG_INTERNAL, TrialService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["trial"])

# Injected at application startup
trial_service: TrialService = None


def init_services(service: TrialService):
    """
    Install the trial service used by the routes

    Args:
        service: fully wired trial service
    """
    global trial_service
    trial_service = service


@router.post("/trial", response_model=TrialResponse)
async def request_trial(request: TrialRequest):
    """
    Activate a trial

    - exactly one of email / source must be given
    - one trial per email
    - always answers HTTP 200; see ``status`` for the outcome
    """
    try:
        return await trial_service.request_trial(request)
    except Exception:
        logger.exception("unhandled error while activating trial")
        return TrialResponse.error(MSG_INTERNAL)
