"""Core domain: validation rules, provider interface and lifecycle controller"""

from .domain_validator import DomainValidator, is_eligible_email, meets_password_policy
from .errors import ErrorKind, Operation, classify_provider_fault
from .identity_provider import IIdentityProvider
from .lifecycle import LifecycleController
from .models import Account, ConfirmationStatus, ProviderFault, ProviderResponse, Session
from .results import OperationResult

__all__ = [
    "Account",
    "ConfirmationStatus",
    "DomainValidator",
    "ErrorKind",
    "IIdentityProvider",
    "LifecycleController",
    "Operation",
    "OperationResult",
    "ProviderFault",
    "ProviderResponse",
    "Session",
    "classify_provider_fault",
    "is_eligible_email",
    "meets_password_policy",
]
