#!/usr/bin/env python3
"""
FRKN Trial - API data models
Pydantic request/response models
"""

from typing import Optional

from email_validator import EmailNotValidError, validate_email
from pydantic import BaseModel, Field, field_validator

from ..services.protocols import TrialSource


# ==================== Request models ====================

class TrialRequest(BaseModel):
    """Trial request from the onboarding form or the mobile app"""
    email: Optional[str] = Field(None, description="Recipient of the activation email")
    telegram: Optional[str] = Field(None, description="Telegram handle")
    source: Optional[TrialSource] = Field(None, description="Mobile or Site")
    env: Optional[str] = Field(None, description="Environment label")

    @field_validator("email")
    @classmethod
    def check_email(cls, value: Optional[str]) -> Optional[str]:
        """
        Reject strings that are not addresses but keep the value as submitted;
        the raw string is the identity key in the gate and the journal
        """
        if value is None:
            return value
        try:
            validate_email(value, check_deliverability=False)
        except EmailNotValidError as e:
            raise ValueError(str(e))
        return value

    def is_valid(self) -> bool:
        """Exactly one of ``email`` and ``source`` must be set"""
        return (self.email is not None) != (self.source is not None)


# ==================== Response models ====================

class TrialResponse(BaseModel):
    """Trial result; failures are reported here, never via HTTP status"""
    status: str
    message: str
    sub_id: Optional[str] = None

    @classmethod
    def ok(cls, message: str, sub_id: str) -> "TrialResponse":
        return cls(status="ok", message=message, sub_id=sub_id)

    @classmethod
    def error(cls, message: str) -> "TrialResponse":
        return cls(status="error", message=message, sub_id=None)
