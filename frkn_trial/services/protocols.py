"""
FRKN Trial - tunnelling protocols
Each trial gets one connection per protocol below, in this order.
"""

import uuid
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List


class TrialSource(str, Enum):
    """Where the trial request came from"""
    Mobile = "Mobile"
    Site = "Site"

    @property
    def referral_label(self) -> str:
        """Value sent upstream as ``referred_by``"""
        if self is TrialSource.Mobile:
            return "trial-mobile"
        return "trial-site"


@dataclass(frozen=True)
class Protocol:
    """A connection protocol without extra parameters"""
    name: str

    def payload(self) -> Dict[str, Any]:
        """Protocol-specific fields of the ``/connection`` request body"""
        return {"proto": self.name}


@dataclass(frozen=True)
class Hysteria2(Protocol):
    """Hysteria2 authenticates clients with a per-connection token"""
    name: str = "Hysteria2"
    token: uuid.UUID = field(default_factory=uuid.uuid4)

    def payload(self) -> Dict[str, Any]:
        return {"proto": self.name, "token": str(self.token)}


VLESS_TCP_REALITY = Protocol("VlessTcpReality")
VLESS_GRPC_REALITY = Protocol("VlessGrpcReality")
VLESS_XHTTP_REALITY = Protocol("VlessXhttpReality")

PROTOCOL_NAMES = (
    VLESS_TCP_REALITY.name,
    VLESS_GRPC_REALITY.name,
    VLESS_XHTTP_REALITY.name,
    "Hysteria2",
)


def trial_protocols() -> List[Protocol]:
    """The protocol set for one trial; every call mints a new Hysteria2 token"""
    return [
        VLESS_TCP_REALITY,
        VLESS_GRPC_REALITY,
        VLESS_XHTTP_REALITY,
        Hysteria2(),
    ]
