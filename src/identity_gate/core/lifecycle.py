"""Account lifecycle controller.

Orchestrates registration, login, password reset and confirmation resend
against an injected identity provider. Every operation returns an
OperationResult and never raises past its own boundary.

Concurrency:
- Operations are independent coroutines with no shared mutable state
- No ordering or mutual exclusion is imposed between concurrent calls
- No retries are performed; each failure is reported once
- Cancellation propagates (asyncio.CancelledError is not caught). A
  cancelled call may or may not have taken effect at the provider.
"""

import logging
from typing import Optional

from .domain_validator import DomainValidator
from .errors import (
    CONFIGURATION_MESSAGE,
    DATABASE_ERROR_MESSAGE,
    DUPLICATE_ACCOUNT_MESSAGE,
    EMAIL_DOMAIN_MESSAGE,
    FALLBACK_MESSAGES,
    INVALID_CREDENTIALS_MESSAGE,
    PASSWORD_POLICY_MESSAGE,
    TRIGGER_ERROR_MESSAGE,
    UNCONFIRMED_ACCOUNT_MESSAGE,
    UNEXPECTED_MESSAGES,
    UNKNOWN_REASON_MESSAGES,
    ErrorKind,
    Operation,
    classify_provider_fault,
)
from .identity_provider import IIdentityProvider
from .models import ProviderFault
from .results import OperationResult

logger = logging.getLogger(__name__)

CONFIRMATION_PENDING_MESSAGE = "Please check your email to confirm your account."
REGISTRATION_COMPLETE_MESSAGE = "Registration successful!"
LOGIN_COMPLETE_MESSAGE = "Login successful."
RESET_SENT_MESSAGE = "Password reset email sent. Please check your inbox."
CONFIRMATION_RESENT_MESSAGE = "Confirmation email resent. Please check your inbox."
SIGNED_OUT_MESSAGE = "Signed out successfully."
CURRENT_USER_MESSAGE = "User loaded."


class LifecycleController:
    """
    Registration, login and recovery flows for a single-domain membership site.

    Example:
        controller = LifecycleController(
            provider=SupabaseProvider(url, anon_key),
            validator=DomainValidator("org.example"),
            confirm_redirect_url="https://site.example/pages/confirm-email.html",
            reset_redirect_url="https://site.example/pages/reset-password.html",
        )
        result = await controller.register("ada@org.example", "longenough1", "Ada")
    """

    def __init__(
        self,
        provider: Optional[IIdentityProvider],
        validator: Optional[DomainValidator] = None,
        confirm_redirect_url: Optional[str] = None,
        reset_redirect_url: Optional[str] = None,
    ):
        """
        Initialize lifecycle controller.

        Args:
            provider: Identity provider handle, or None if it could not be built
            validator: Registration rules (default: DomainValidator())
            confirm_redirect_url: Landing route for confirmation links
            reset_redirect_url: Landing route for password reset links
        """
        self.provider = provider
        self.validator = validator or DomainValidator()
        self.confirm_redirect_url = confirm_redirect_url
        self.reset_redirect_url = reset_redirect_url

    def is_provider_available(self) -> bool:
        """Check whether a usable provider handle exists."""
        return self.provider is not None and self.provider.is_configured()

    async def register(
        self, email: str, password: str, display_name: Optional[str] = None
    ) -> OperationResult:
        """
        Register a new account.

        Configuration is checked before validation so that a misconfigured
        deployment is reported as such even for an invalid email.
        """
        try:
            return await self._register(email, password, display_name)
        except Exception as e:
            return self._unexpected_error(Operation.REGISTER, e)

    async def login(self, email: str, password: str) -> OperationResult:
        """
        Sign in with email and password.

        Credentials are passed through unvalidated: accounts that predate
        the domain gate must still be able to log in.
        """
        try:
            return await self._login(email, password)
        except Exception as e:
            return self._unexpected_error(Operation.LOGIN, e)

    async def reset_password(self, email: str) -> OperationResult:
        """
        Send a password reset email.

        Success is reported whenever the provider reports no fault; whether
        the address belongs to an account is never disclosed here.
        """
        try:
            return await self._reset_password(email)
        except Exception as e:
            return self._unexpected_error(Operation.RESET_PASSWORD, e)

    async def resend_confirmation(self, email: str) -> OperationResult:
        """Resend the signup confirmation email. No cooldown is enforced here."""
        try:
            return await self._resend_confirmation(email)
        except Exception as e:
            return self._unexpected_error(Operation.RESEND_CONFIRMATION, e)

    async def sign_out(self, access_token: str) -> OperationResult:
        """Revoke the provider session behind access_token."""
        try:
            return await self._sign_out(access_token)
        except Exception as e:
            return self._unexpected_error(Operation.SIGN_OUT, e)

    async def get_current_user(self, access_token: str) -> OperationResult:
        """Load the account that owns access_token."""
        try:
            return await self._get_current_user(access_token)
        except Exception as e:
            return self._unexpected_error(Operation.GET_CURRENT_USER, e)

    async def _register(
        self, email: str, password: str, display_name: Optional[str]
    ) -> OperationResult:
        if not self.is_provider_available():
            return self._configuration_error(Operation.REGISTER)

        if not self.validator.is_eligible_email(email):
            return OperationResult.fail(
                ErrorKind.VALIDATION,
                EMAIL_DOMAIN_MESSAGE.format(domain=self.validator.domain),
            )

        if not self.validator.meets_password_policy(password):
            return OperationResult.fail(
                ErrorKind.VALIDATION,
                PASSWORD_POLICY_MESSAGE.format(min_length=self.validator.password_min_length),
            )

        response = await self.provider.sign_up(
            email,
            password,
            metadata={
                "display_name": display_name,
                "email_domain": self.validator.domain,
            },
            redirect_to=self.confirm_redirect_url,
        )

        if response.fault is not None:
            logger.warning(f"Registration error: {response.fault.message}")
            return self._register_fault(response.fault)

        if response.user is not None:
            logger.info(f"User registered successfully: {response.user.email}")
            if response.user.requires_confirmation:
                return OperationResult.ok(
                    CONFIRMATION_PENDING_MESSAGE,
                    requires_confirmation=True,
                    user=response.user,
                )
            return OperationResult.ok(
                REGISTRATION_COMPLETE_MESSAGE,
                requires_confirmation=False,
                user=response.user,
            )

        return self._unknown_reason(Operation.REGISTER)

    async def _login(self, email: str, password: str) -> OperationResult:
        if not self.is_provider_available():
            return self._configuration_error(Operation.LOGIN)

        response = await self.provider.sign_in_with_password(email, password)

        if response.fault is not None:
            logger.warning(f"Login error: {response.fault.message}")
            kind = classify_provider_fault(
                Operation.LOGIN, response.fault.message, response.fault.code
            )
            if kind == ErrorKind.INVALID_CREDENTIALS:
                return OperationResult.fail(kind, INVALID_CREDENTIALS_MESSAGE)
            if kind == ErrorKind.UNCONFIRMED_ACCOUNT:
                return OperationResult.fail(kind, UNCONFIRMED_ACCOUNT_MESSAGE)
            return self._passthrough_fault(Operation.LOGIN, response.fault)

        if response.user is not None:
            logger.info(f"User logged in successfully: {response.user.email}")
            return OperationResult.ok(
                LOGIN_COMPLETE_MESSAGE,
                user=response.user,
                session=response.session,
            )

        return self._unknown_reason(Operation.LOGIN)

    async def _reset_password(self, email: str) -> OperationResult:
        if not self.is_provider_available():
            return self._configuration_error(Operation.RESET_PASSWORD)

        response = await self.provider.reset_password_for_email(
            email, redirect_to=self.reset_redirect_url
        )

        if response.fault is not None:
            logger.warning(f"Password reset error: {response.fault.message}")
            return self._passthrough_fault(Operation.RESET_PASSWORD, response.fault)

        logger.info("Password reset email dispatched")
        return OperationResult.ok(RESET_SENT_MESSAGE)

    async def _resend_confirmation(self, email: str) -> OperationResult:
        if not self.is_provider_available():
            return self._configuration_error(Operation.RESEND_CONFIRMATION)

        response = await self.provider.resend(email, type="signup")

        if response.fault is not None:
            logger.warning(f"Resend confirmation error: {response.fault.message}")
            return self._passthrough_fault(Operation.RESEND_CONFIRMATION, response.fault)

        logger.info("Confirmation email resent")
        return OperationResult.ok(CONFIRMATION_RESENT_MESSAGE)

    async def _sign_out(self, access_token: str) -> OperationResult:
        if not self.is_provider_available():
            return self._configuration_error(Operation.SIGN_OUT)

        response = await self.provider.sign_out(access_token)

        if response.fault is not None:
            logger.warning(f"Sign out error: {response.fault.message}")
            return self._passthrough_fault(Operation.SIGN_OUT, response.fault)

        logger.info("User signed out successfully")
        return OperationResult.ok(SIGNED_OUT_MESSAGE)

    async def _get_current_user(self, access_token: str) -> OperationResult:
        if not self.is_provider_available():
            return self._configuration_error(Operation.GET_CURRENT_USER)

        response = await self.provider.get_user(access_token)

        if response.fault is not None:
            logger.warning(f"Error getting current user: {response.fault.message}")
            return self._passthrough_fault(Operation.GET_CURRENT_USER, response.fault)

        if response.user is not None:
            return OperationResult.ok(CURRENT_USER_MESSAGE, user=response.user)

        return self._unknown_reason(Operation.GET_CURRENT_USER)

    def _register_fault(self, fault: ProviderFault) -> OperationResult:
        """Map a signup fault to its user-facing result."""
        kind = classify_provider_fault(Operation.REGISTER, fault.message, fault.code)

        if kind == ErrorKind.DUPLICATE_ACCOUNT:
            return OperationResult.fail(kind, DUPLICATE_ACCOUNT_MESSAGE)

        if kind == ErrorKind.BACKEND_MISCONFIGURATION:
            if "database error" in (fault.message or "").lower():
                error = DATABASE_ERROR_MESSAGE
            else:
                error = TRIGGER_ERROR_MESSAGE
            return OperationResult.fail(kind, error, technical_error=fault.message)

        return self._passthrough_fault(Operation.REGISTER, fault)

    def _passthrough_fault(self, operation: Operation, fault: ProviderFault) -> OperationResult:
        """Report an unclassified fault using the provider's own message."""
        return OperationResult.fail(
            ErrorKind.UNKNOWN_PROVIDER_FAULT,
            (fault.message or "").strip() or FALLBACK_MESSAGES[operation],
        )

    def _configuration_error(self, operation: Operation) -> OperationResult:
        logger.error(f"Identity provider unavailable, cannot run {operation.value}")
        return OperationResult.fail(ErrorKind.CONFIGURATION, CONFIGURATION_MESSAGE)

    def _unknown_reason(self, operation: Operation) -> OperationResult:
        logger.error(f"Provider returned neither fault nor account for {operation.value}")
        return OperationResult.fail(
            ErrorKind.UNKNOWN_PROVIDER_FAULT, UNKNOWN_REASON_MESSAGES[operation]
        )

    def _unexpected_error(self, operation: Operation, exc: Exception) -> OperationResult:
        logger.error(f"Exception during {operation.value}: {str(exc)}")
        return OperationResult.fail(
            ErrorKind.UNEXPECTED,
            UNEXPECTED_MESSAGES[operation],
            technical_error=str(exc) or exc.__class__.__name__,
        )
