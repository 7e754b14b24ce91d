#!/usr/bin/env python3
"""
FRKN Trial - FRKN API client
Authenticated calls to the upstream provisioning API.

Endpoints:
    POST /subscription - create a subscription, returns its id
    POST /connection   - attach a protocol connection to a subscription

Every response is wrapped as ``{"status", "message", "response": {"id", "instance"}}``;
only ``response.id`` is used here. No retries: a failed call is reported once.
"""

import json
import logging
import uuid
from typing import Any, Callable, Dict, Optional

import httpx

from ..config import UPSTREAM_TIMEOUT, UpstreamSettings
from ..exceptions import (
    UpstreamDecodeError,
    UpstreamEmptyResponseError,
    UpstreamStatusError,
    UpstreamTransportError,
)
from .protocols import Protocol, TrialSource

logger = logging.getLogger(__name__)


def auth_headers(api_token: str) -> Dict[str, str]:
    """Headers sent with every FRKN API request"""
    return {
        "Authorization": f"Bearer {api_token}",
        "Accept": "application/json",
        "Content-Type": "application/json",
    }


def parse_envelope_id(text: str) -> uuid.UUID:
    """
    Extract ``response.id`` from a response envelope

    Raises:
        UpstreamDecodeError: if the body is not JSON or has no valid id
    """
    try:
        envelope = json.loads(text)
    except ValueError as e:
        raise UpstreamDecodeError(f"response is not JSON: {e}") from e

    if not isinstance(envelope, dict) or not isinstance(envelope.get("response"), dict):
        raise UpstreamDecodeError("response envelope has no 'response' object")

    raw_id = envelope["response"].get("id")
    try:
        return uuid.UUID(str(raw_id))
    except ValueError as e:
        raise UpstreamDecodeError(f"invalid id in response: {raw_id!r}") from e


class FrknClient:
    """Thin client over a shared ``httpx.AsyncClient``"""

    def __init__(
        self,
        http: httpx.AsyncClient,
        settings: Optional[UpstreamSettings] = None,
        settings_loader: Callable[[], UpstreamSettings] = UpstreamSettings.from_env,
        timeout: float = UPSTREAM_TIMEOUT,
    ):
        """
        Args:
            http: pooled client shared by all requests
            settings: fixed credentials; when omitted they are read from the
                environment on every call
            settings_loader: how to read credentials when ``settings`` is None
            timeout: per-request deadline in seconds
        """
        self.http = http
        self._settings = settings
        self._settings_loader = settings_loader
        self.timeout = timeout

    def _current_settings(self) -> UpstreamSettings:
        if self._settings is not None:
            return self._settings
        return self._settings_loader()

    async def _post(self, path: str, body: Dict[str, Any]) -> httpx.Response:
        settings = self._current_settings()
        url = f"{settings.host}{path}"

        try:
            response = await self.http.post(
                url,
                content=json.dumps(body),
                headers=auth_headers(settings.api_token),
                timeout=self.timeout,
            )
        except httpx.HTTPError as e:
            raise UpstreamTransportError(f"POST {path} failed: {e}") from e

        logger.debug("POST %s -> %s %s", path, response.status_code, response.text)

        if not response.is_success:
            raise UpstreamStatusError(response.status_code, response.text)
        return response

    async def create_subscription(self, env: str, days: int, referred_by: TrialSource) -> uuid.UUID:
        """
        Create a subscription

        Args:
            env: environment label
            days: subscription length
            referred_by: request source, sent as its referral label

        Returns:
            subscription id

        Raises:
            UpstreamError: any transport, status or decoding failure
            MissingSettingError: FRKN_HOST / FRKN_API_TOKEN not set
        """
        response = await self._post("/subscription", {
            "env": env,
            "days": days,
            "referred_by": referred_by.referral_label,
        })
        if not response.text:
            raise UpstreamEmptyResponseError(response.status_code)
        return parse_envelope_id(response.text)

    async def create_connection(self, env: str, protocol: Protocol, sub_id: uuid.UUID) -> uuid.UUID:
        """
        Create one protocol connection for a subscription

        ``token`` is part of the body only for protocols that carry one.

        Returns:
            connection id
        """
        body: Dict[str, Any] = {"env": env, "subscription_id": str(sub_id)}
        body.update(protocol.payload())

        response = await self._post("/connection", body)
        if not response.text:
            raise UpstreamEmptyResponseError(response.status_code)
        return parse_envelope_id(response.text)
