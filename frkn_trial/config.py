#!/usr/bin/env python3
"""
FRKN Trial - configuration
All settings come from environment variables. Secrets are read per call so
that rotating them does not require a restart.
"""

import logging
import os
from dataclasses import dataclass
from typing import Optional

from .exceptions import ConfigurationError, MissingSettingError


# ==================== Constants ====================

CSV_FILE = "trials.csv"
DEFAULT_DAYS = 1
DEFAULT_ENV = "dev"

DEFAULT_BIND_HOST = "127.0.0.1"
DEFAULT_BIND_PORT = 3030

SMTP_RELAY = "smtp.gmail.com"
SMTP_PORT = 465

UPSTREAM_TIMEOUT = 10.0
SMTP_TIMEOUT = 20.0

BRAND = "FRKN"


def require_env(name: str) -> str:
    """
    Read a required environment variable

    Args:
        name: variable name

    Returns:
        the non-empty value

    Raises:
        MissingSettingError: if the variable is unset or empty
    """
    value = os.getenv(name)
    if not value:
        raise MissingSettingError(name)
    return value


@dataclass(frozen=True)
class UpstreamSettings:
    """Credentials for the FRKN provisioning API"""
    host: str
    api_token: str

    @classmethod
    def from_env(cls) -> "UpstreamSettings":
        return cls(
            host=require_env("FRKN_HOST").rstrip("/"),
            api_token=require_env("FRKN_API_TOKEN"),
        )


@dataclass(frozen=True)
class MailSettings:
    """SMTP relay credentials plus the public host used in email links"""
    user: str
    password: str
    public_host: str
    relay: str = SMTP_RELAY
    port: int = SMTP_PORT

    @classmethod
    def from_env(cls) -> "MailSettings":
        return cls(
            user=require_env("GMAIL_USER"),
            password=require_env("GMAIL_APP_PASSWORD"),
            public_host=require_env("FRKN_HOST").rstrip("/"),
            relay=os.getenv("SMTP_RELAY", SMTP_RELAY),
        )


@dataclass(frozen=True)
class ServerSettings:
    """Process-level settings, read once at startup"""
    host: str = DEFAULT_BIND_HOST
    port: int = DEFAULT_BIND_PORT
    journal_path: str = CSV_FILE
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> "ServerSettings":
        raw_port = os.getenv("TRIAL_PORT", str(DEFAULT_BIND_PORT))
        try:
            port = int(raw_port)
        except ValueError:
            raise ConfigurationError(f"TRIAL_PORT must be an integer, got {raw_port!r}")

        return cls(
            host=os.getenv("TRIAL_HOST", DEFAULT_BIND_HOST),
            port=port,
            journal_path=os.getenv("TRIAL_JOURNAL_PATH", CSV_FILE),
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        )


def configure_logging(level: Optional[str] = None) -> None:
    """Install a single stdout handler on the root logger"""
    handler = logging.StreamHandler()
    handler.setFormatter(
        logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s")
    )
    root_logger = logging.getLogger()
    root_logger.handlers = [handler]
    root_logger.setLevel(level or os.getenv("LOG_LEVEL", "INFO").upper())
