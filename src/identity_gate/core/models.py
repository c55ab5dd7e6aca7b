"""Provider-boundary data models: accounts, sessions and faults"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional


class ConfirmationStatus(Enum):
    """Email confirmation state of an account, derived at the provider boundary."""
    PENDING = "pending"            # No linked identities yet
    NOT_REQUIRED = "not_required"  # Nothing outstanding for the caller


@dataclass
class Account:
    """Account record owned by the identity provider"""

    id: str
    email: str
    display_name: Optional[str] = None
    confirmation_status: ConfirmationStatus = ConfirmationStatus.NOT_REQUIRED
    metadata: Dict[str, Any] = field(default_factory=dict)

    @property
    def requires_confirmation(self) -> bool:
        return self.confirmation_status == ConfirmationStatus.PENDING

    def to_dict(self) -> Dict[str, Any]:
        """Convert to JSON-serializable dict for UI controllers."""
        return {
            "id": self.id,
            "email": self.email,
            "displayName": self.display_name,
            "confirmationStatus": self.confirmation_status.value,
            "metadata": dict(self.metadata),
        }


@dataclass
class Session:
    """
    Opaque token bundle issued by the identity provider on login.

    The raw provider payload is kept verbatim so it can be passed through
    to the caller unmodified.
    """

    access_token: str
    refresh_token: Optional[str] = None
    expires_at: Optional[int] = None
    token_type: str = "bearer"
    raw: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        if self.raw:
            return dict(self.raw)
        return {
            "access_token": self.access_token,
            "refresh_token": self.refresh_token,
            "expires_at": self.expires_at,
            "token_type": self.token_type,
        }


@dataclass
class ProviderFault:
    """
    Structured error reported by the identity provider.

    Attributes:
        message: Prose message from the provider (may be empty)
        code: Typed error code, when the provider supplies one
        status: HTTP status of the provider response, if any
    """

    message: str = ""
    code: Optional[str] = None
    status: Optional[int] = None


@dataclass
class ProviderResponse:
    """Result of a single identity provider call"""

    user: Optional[Account] = None
    session: Optional[Session] = None
    fault: Optional[ProviderFault] = None

    @property
    def ok(self) -> bool:
        return self.fault is None
