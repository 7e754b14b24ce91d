#!/usr/bin/env python3
"""
FRKN Trial - provisioning orchestrator
Creates the subscription, then all protocol connections in parallel.

Failure policy:
    subscription failure -> SubscriptionProvisioningError (request fails)
    connection failure   -> logged, trial still counts as activated
"""

import asyncio
import logging
import uuid
from dataclasses import dataclass, field
from typing import Dict, Optional

from ..config import DEFAULT_DAYS, DEFAULT_ENV
from ..exceptions import ConfigurationError, SubscriptionProvisioningError, UpstreamError
from .frkn_client import FrknClient
from .protocols import Protocol, TrialSource, trial_protocols

logger = logging.getLogger(__name__)


@dataclass
class ProvisioningResult:
    sub_id: uuid.UUID
    connections: Dict[str, uuid.UUID] = field(default_factory=dict)
    failed: Dict[str, str] = field(default_factory=dict)


class ProvisioningOrchestrator:
    """Sequences the FRKN API calls that make up one trial"""

    def __init__(self, client: FrknClient, days: int = DEFAULT_DAYS):
        self.client = client
        self.days = days

    async def provision(
        self,
        env: Optional[str] = None,
        source: Optional[TrialSource] = None,
    ) -> ProvisioningResult:
        """
        Provision a trial

        Args:
            env: environment label for the subscription (default ``dev``)
            source: request source (default ``Site``)

        Returns:
            subscription id plus per-protocol outcomes

        Raises:
            SubscriptionProvisioningError: if the subscription was not created
        """
        env = env or DEFAULT_ENV
        referred_by = source or TrialSource.Site

        try:
            sub_id = await self.client.create_subscription(env, self.days, referred_by)
        except (UpstreamError, ConfigurationError) as e:
            logger.error("subscription error: %s", e)
            raise SubscriptionProvisioningError(str(e)) from e

        logger.info("subscription %s created (env=%s, referred_by=%s)",
                    sub_id, env, referred_by.referral_label)

        result = ProvisioningResult(sub_id=sub_id)
        protocols = trial_protocols()

        # Connections always go to the default environment
        outcomes = await asyncio.gather(
            *(self._create_connection(p, sub_id) for p in protocols),
            return_exceptions=True,
        )

        for protocol, outcome in zip(protocols, outcomes):
            if isinstance(outcome, BaseException):
                logger.error("connection error (%s, sub %s): %s", protocol.name, sub_id, outcome)
                result.failed[protocol.name] = str(outcome)
            else:
                result.connections[protocol.name] = outcome

        return result

    async def _create_connection(self, protocol: Protocol, sub_id: uuid.UUID) -> uuid.UUID:
        return await self.client.create_connection(DEFAULT_ENV, protocol, sub_id)
