"""Supabase identity provider (Supabase Auth / GoTrue REST API)"""

import logging
from typing import Any, Dict, Optional, Tuple

import httpx

from ..core.identity_provider import IIdentityProvider
from ..core.models import (
    Account,
    ConfirmationStatus,
    ProviderFault,
    ProviderResponse,
    Session,
)

logger = logging.getLogger(__name__)


class SupabaseProvider(IIdentityProvider):
    """
    Identity provider backed by Supabase Auth.

    Features:
    - Email/password signup with user metadata and confirmation redirect
    - Password sign-in returning the provider session verbatim
    - Password reset and signup confirmation resend
    - Session revocation and current-user lookup

    Error bodies are returned as ProviderFault; transport failures raise
    httpx.RequestError and unparseable bodies raise ValueError.
    """

    def __init__(
        self,
        url: Optional[str],
        anon_key: Optional[str],
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize Supabase provider.

        Args:
            url: Supabase project URL (e.g., https://<project>.supabase.co)
            anon_key: Supabase anon API key
            timeout: Per-request timeout in seconds
            transport: Optional httpx transport (used by tests)
        """
        self.url = (url or "").rstrip("/")
        self.anon_key = anon_key or ""
        self.auth_url = f"{self.url}/auth/v1"
        self.timeout = timeout
        self._transport = transport

        if self.is_configured():
            logger.info(f"Initialized SupabaseProvider for {self.url}")
        else:
            logger.warning("SupabaseProvider created without URL or anon key")

    def is_configured(self) -> bool:
        return bool(self.url and self.anon_key)

    def get_provider_name(self) -> str:
        """Return the name of this identity provider"""
        return "supabase"

    async def sign_up(
        self,
        email: str,
        password: str,
        metadata: Optional[Dict[str, Any]] = None,
        redirect_to: Optional[str] = None,
    ) -> ProviderResponse:
        params = {"redirect_to": redirect_to} if redirect_to else None
        body, fault = await self._request(
            "POST",
            "/signup",
            json={"email": email, "password": password, "data": metadata or {}},
            params=params,
        )
        if fault:
            return ProviderResponse(fault=fault)

        # With email confirmation enabled the user object is returned bare;
        # with autoconfirm it is wrapped in a session payload.
        if "access_token" in body:
            return ProviderResponse(
                user=self._parse_account(body.get("user")),
                session=self._parse_session(body),
            )
        return ProviderResponse(user=self._parse_account(body))

    async def sign_in_with_password(self, email: str, password: str) -> ProviderResponse:
        body, fault = await self._request(
            "POST",
            "/token",
            json={"email": email, "password": password},
            params={"grant_type": "password"},
        )
        if fault:
            return ProviderResponse(fault=fault)

        return ProviderResponse(
            user=self._parse_account(body.get("user")),
            session=self._parse_session(body),
        )

    async def reset_password_for_email(
        self, email: str, redirect_to: Optional[str] = None
    ) -> ProviderResponse:
        params = {"redirect_to": redirect_to} if redirect_to else None
        _, fault = await self._request("POST", "/recover", json={"email": email}, params=params)
        return ProviderResponse(fault=fault)

    async def resend(self, email: str, type: str = "signup") -> ProviderResponse:
        _, fault = await self._request("POST", "/resend", json={"type": type, "email": email})
        return ProviderResponse(fault=fault)

    async def sign_out(self, access_token: str) -> ProviderResponse:
        _, fault = await self._request("POST", "/logout", access_token=access_token)
        return ProviderResponse(fault=fault)

    async def get_user(self, access_token: str) -> ProviderResponse:
        body, fault = await self._request("GET", "/user", access_token=access_token)
        if fault:
            return ProviderResponse(fault=fault)
        return ProviderResponse(user=self._parse_account(body))

    async def _request(
        self,
        method: str,
        path: str,
        json: Optional[Dict[str, Any]] = None,
        params: Optional[Dict[str, str]] = None,
        access_token: Optional[str] = None,
    ) -> Tuple[Dict[str, Any], Optional[ProviderFault]]:
        """
        Call a Supabase Auth endpoint.

        Returns:
            Tuple of (json_body, fault). json_body is {} for empty responses.

        Raises:
            httpx.RequestError: If Supabase is unreachable or times out
            ValueError: If a successful response is not a JSON object
        """
        headers = {
            "apikey": self.anon_key,
            "Authorization": f"Bearer {access_token or self.anon_key}",
        }

        async with httpx.AsyncClient(
            base_url=self.auth_url,
            timeout=self.timeout,
            transport=self._transport,
        ) as client:
            response = await client.request(
                method, path, json=json, params=params, headers=headers
            )

        logger.debug(f"Supabase {method} {path} -> {response.status_code}")

        if response.is_error:
            return {}, self._parse_fault(response)

        if not response.content:
            return {}, None

        try:
            body = response.json()
        except ValueError as e:
            raise ValueError(f"Invalid JSON from Supabase {path}: {str(e)}")

        if not isinstance(body, dict):
            raise ValueError(f"Unexpected response shape from Supabase {path}")

        return body, None

    def _parse_fault(self, response: httpx.Response) -> ProviderFault:
        """Extract message and error code from a Supabase error response."""
        try:
            body = response.json()
        except ValueError:
            body = None

        if not isinstance(body, dict):
            return ProviderFault(
                message=response.text or f"HTTP {response.status_code}",
                status=response.status_code,
            )

        message = (
            body.get("msg")
            or body.get("message")
            or body.get("error_description")
            or body.get("error")
            or ""
        )
        code = body.get("error_code")
        return ProviderFault(
            message=str(message),
            code=str(code) if code is not None else None,
            status=response.status_code,
        )

    def _parse_account(self, data: Optional[Dict[str, Any]]) -> Optional[Account]:
        """
        Build an Account from a Supabase user object.

        An explicit, empty identities list means the signup still awaits
        email confirmation.
        """
        if not isinstance(data, dict) or not data.get("id"):
            return None

        identities = data.get("identities")
        if isinstance(identities, list) and len(identities) == 0:
            status = ConfirmationStatus.PENDING
        else:
            status = ConfirmationStatus.NOT_REQUIRED

        metadata = data.get("user_metadata") or {}
        return Account(
            id=str(data["id"]),
            email=data.get("email") or "",
            display_name=metadata.get("display_name"),
            confirmation_status=status,
            metadata=metadata,
        )

    def _parse_session(self, data: Dict[str, Any]) -> Optional[Session]:
        if not data.get("access_token"):
            return None
        return Session(
            access_token=data["access_token"],
            refresh_token=data.get("refresh_token"),
            expires_at=data.get("expires_at"),
            token_type=data.get("token_type", "bearer"),
            raw=data,
        )
