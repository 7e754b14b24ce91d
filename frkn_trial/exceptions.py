"""
FRKN Trial - exception hierarchy
"""


class TrialError(Exception):
    """Base exception for the trial gateway."""
    pass


# ==================== Configuration ====================

class ConfigurationError(TrialError):
    """Process configuration is incomplete or malformed."""
    pass


class MissingSettingError(ConfigurationError):
    """A required environment variable is not set."""

    def __init__(self, name: str):
        super().__init__(f"environment variable {name} is not set")
        self.name = name


# ==================== Upstream API ====================

class UpstreamError(TrialError):
    """Base class for FRKN API failures."""
    pass


class UpstreamTransportError(UpstreamError):
    """The request never produced an HTTP response (connect error, timeout)."""
    pass


class UpstreamStatusError(UpstreamError):
    """The FRKN API answered with a non-2xx status."""

    def __init__(self, status_code: int, body: str):
        super().__init__(f"upstream returned HTTP {status_code}: {body[:200]}")
        self.status_code = status_code
        self.body = body


class UpstreamEmptyResponseError(UpstreamError):
    """The FRKN API answered with an empty body."""

    def __init__(self, status_code: int):
        super().__init__(f"empty upstream response, status = {status_code}")
        self.status_code = status_code


class UpstreamDecodeError(UpstreamError):
    """The response body is not a valid response envelope."""
    pass


# ==================== Provisioning ====================

class ProvisioningError(TrialError):
    """Trial provisioning could not be completed."""
    pass


class SubscriptionProvisioningError(ProvisioningError):
    """The subscription itself could not be created."""
    pass


# ==================== Notification ====================

class NotificationError(TrialError):
    """The activation email could not be delivered to the relay."""
    pass
