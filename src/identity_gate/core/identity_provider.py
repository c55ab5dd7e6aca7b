"""Identity provider interface for pluggable account backends"""

from abc import ABC, abstractmethod
from typing import Any, Dict, Optional

from .models import ProviderResponse


class IIdentityProvider(ABC):
    """
    Interface for identity providers.

    Implementations must:
    1. Report structured failures as ProviderResponse.fault, not by raising
    2. Compute Account.confirmation_status when parsing provider payloads
    3. Raise only for transport-level or otherwise unexpected failures
    """

    @abstractmethod
    def is_configured(self) -> bool:
        """Return True if the provider has the credentials it needs to make calls"""
        pass

    @abstractmethod
    async def sign_up(
        self,
        email: str,
        password: str,
        metadata: Optional[Dict[str, Any]] = None,
        redirect_to: Optional[str] = None,
    ) -> ProviderResponse:
        """
        Create a new account.

        Args:
            email: Account email
            password: Account password
            metadata: Arbitrary user metadata stored by the provider
            redirect_to: Where the confirmation link should land

        Returns:
            ProviderResponse with the created account (if any) or a fault
        """
        pass

    @abstractmethod
    async def sign_in_with_password(self, email: str, password: str) -> ProviderResponse:
        """
        Authenticate with email and password.

        Returns:
            ProviderResponse with account and session, or a fault
        """
        pass

    @abstractmethod
    async def reset_password_for_email(
        self, email: str, redirect_to: Optional[str] = None
    ) -> ProviderResponse:
        """Dispatch a password-reset email"""
        pass

    @abstractmethod
    async def resend(self, email: str, type: str = "signup") -> ProviderResponse:
        """Resend a confirmation email for the given flow type"""
        pass

    @abstractmethod
    async def sign_out(self, access_token: str) -> ProviderResponse:
        """Revoke the session identified by access_token"""
        pass

    @abstractmethod
    async def get_user(self, access_token: str) -> ProviderResponse:
        """Fetch the account that owns access_token"""
        pass

    @abstractmethod
    def get_provider_name(self) -> str:
        """Return the name of this identity provider"""
        pass
