#!/usr/bin/env python3
"""
FRKN Trial - trial activation service
Gate -> provisioning -> journal -> email, with the partial failure rules:

    duplicate email            -> rejected, nothing else happens
    subscription failure       -> rejected, admission is kept
    journal / email failure    -> logged, the trial stays granted
"""

import asyncio
import logging
from datetime import datetime, timezone
from typing import Callable, Optional

from ..config import DEFAULT_ENV
from ..database import JournalEntry, TrialJournal
from ..exceptions import NotificationError, SubscriptionProvisioningError
from .idempotency import AdmitResult, IdempotencyGate
from .notifier import EmailNotifier
from .provisioning import ProvisioningOrchestrator
from ..api.models import TrialRequest, TrialResponse

logger = logging.getLogger(__name__)

MSG_INVALID = "Trial request is not valid"
MSG_DUPLICATE = "Trial already requested"
MSG_SUBSCRIPTION_FAILED = "Failed to create subscription"
MSG_ACTIVATED_EMAIL = "Trial activated. Check your email."
MSG_ACTIVATED = "Trial activated."
MSG_INTERNAL = "Internal error"


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class TrialService:
    """Trial activation business logic"""

    def __init__(
        self,
        gate: IdempotencyGate,
        orchestrator: ProvisioningOrchestrator,
        journal: TrialJournal,
        notifier: EmailNotifier,
        clock: Callable[[], datetime] = utc_now,
    ):
        """
        Args:
            gate: idempotency gate, already seeded from the journal
            orchestrator: FRKN API provisioning
            journal: trial journal
            notifier: activation email sender
            clock: time source for admissions and journal entries
        """
        self.gate = gate
        self.orchestrator = orchestrator
        self.journal = journal
        self.notifier = notifier
        self.clock = clock

    async def request_trial(self, req: TrialRequest) -> TrialResponse:
        """
        Activate a trial

        Args:
            req: decoded request

        Returns:
            response payload; failures are reported via ``status``
        """
        if not req.is_valid():
            return TrialResponse.error(MSG_INVALID)

        email: Optional[str] = req.email

        if email is not None:
            if self.gate.try_admit(email, self.clock()) is AdmitResult.ALREADY_PRESENT:
                logger.info("duplicate trial request for %s", email)
                return TrialResponse.error(MSG_DUPLICATE)

        now = self.clock()

        try:
            result = await self.orchestrator.provision(env=req.env, source=req.source)
        except SubscriptionProvisioningError:
            # admission stays: the email cannot request another trial
            return TrialResponse.error(MSG_SUBSCRIPTION_FAILED)

        sub_id = str(result.sub_id)
        if result.failed:
            logger.warning(
                "trial %s activated with %d failed connection(s): %s",
                sub_id, len(result.failed), ", ".join(sorted(result.failed)),
            )

        if email is None:
            logger.info("trial %s activated for source %s", sub_id, req.source.value)
            return TrialResponse.ok(MSG_ACTIVATED, sub_id)

        entry = JournalEntry(
            timestamp=now,
            email=email,
            telegram=req.telegram or "",
            sub_id=sub_id,
            env=DEFAULT_ENV,
        )
        try:
            await asyncio.to_thread(self.journal.append, entry)
        except (OSError, ValueError) as e:
            logger.error("csv error: %s", e)

        try:
            await self.notifier.send(email, sub_id)
        except NotificationError as e:
            logger.error("email error: %s", e)

        logger.info("trial %s activated for %s", sub_id, email)
        return TrialResponse.ok(MSG_ACTIVATED_EMAIL, sub_id)
