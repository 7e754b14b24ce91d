#!/usr/bin/env python3
"""
FRKN Trial - email notifier
Sends the activation email through the SMTP relay (implicit TLS).
"""

import asyncio
import logging
import smtplib
import ssl
from email.errors import MessageError
from email.message import EmailMessage
from email.utils import formataddr, parseaddr
from typing import Callable, Optional

from ..config import BRAND, SMTP_TIMEOUT, MailSettings
from ..exceptions import ConfigurationError, NotificationError
from .email_template import TRIAL_EMAIL_SUBJECT, render_trial_email

logger = logging.getLogger(__name__)


def build_message(to: str, sub_id: str, settings: MailSettings) -> EmailMessage:
    """
    Build the activation email

    Args:
        to: recipient address
        sub_id: subscription id shown in the body
        settings: mail settings (sender and public host)

    Returns:
        single-part ``text/html`` message

    Raises:
        NotificationError: if the recipient is not an address
    """
    _, address = parseaddr(to)
    if not address or "@" not in address:
        raise NotificationError(f"invalid recipient address: {to!r}")

    msg = EmailMessage()
    msg["Subject"] = TRIAL_EMAIL_SUBJECT
    msg["From"] = formataddr((BRAND, settings.user))
    msg["To"] = address
    msg.set_content(render_trial_email(settings.public_host, sub_id), subtype="html", charset="utf-8")
    return msg


class EmailNotifier:
    """Activation email sender"""

    def __init__(
        self,
        settings: Optional[MailSettings] = None,
        settings_loader: Callable[[], MailSettings] = MailSettings.from_env,
        timeout: float = SMTP_TIMEOUT,
    ):
        """
        Args:
            settings: fixed settings; read from the environment per send when omitted
            settings_loader: how to read settings when ``settings`` is None
            timeout: SMTP socket timeout in seconds
        """
        self._settings = settings
        self._settings_loader = settings_loader
        self.timeout = timeout

    async def send(self, to: str, sub_id: str) -> None:
        """
        Send the activation email without blocking the event loop

        Raises:
            NotificationError: on any settings, address or SMTP failure
        """
        try:
            settings = self._settings or self._settings_loader()
        except ConfigurationError as e:
            raise NotificationError(str(e)) from e

        try:
            msg = build_message(to, sub_id, settings)
        except (ValueError, MessageError) as e:
            raise NotificationError(f"cannot build message for {to!r}: {e}") from e
        await asyncio.to_thread(self._deliver, msg, settings)
        logger.info("activation email sent to %s (sub %s)", to, sub_id)

    def _deliver(self, msg: EmailMessage, settings: MailSettings) -> None:
        context = ssl.create_default_context()
        try:
            with smtplib.SMTP_SSL(settings.relay, settings.port,
                                  timeout=self.timeout, context=context) as smtp:
                smtp.login(settings.user, settings.password)
                smtp.send_message(msg)
        except (smtplib.SMTPException, OSError, ValueError) as e:
            # ValueError covers UnicodeEncodeError from non-ASCII credentials
            raise NotificationError(f"SMTP delivery via {settings.relay} failed: {e}") from e
