from .frkn_client import FrknClient
from .idempotency import AdmitResult, IdempotencyGate
from .notifier import EmailNotifier
from .protocols import Protocol, TrialSource, trial_protocols
from .provisioning import ProvisioningOrchestrator, ProvisioningResult

__all__ = [
    "AdmitResult",
    "EmailNotifier",
    "FrknClient",
    "IdempotencyGate",
    "Protocol",
    "ProvisioningOrchestrator",
    "ProvisioningResult",
    "TrialSource",
    "trial_protocols",
]
