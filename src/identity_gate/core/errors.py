"""Error taxonomy and provider fault classification.

Every failure a lifecycle operation can report is tagged with an ErrorKind.
Provider faults arrive either with a typed error code or only as prose, so
classify_provider_fault() checks the code first and falls back to ordered
substring rules. It is a pure function with no network dependency.
"""

from enum import Enum
from typing import Dict, Optional, Tuple


class ErrorKind(Enum):
    """Failure categories surfaced to UI controllers."""
    CONFIGURATION = "configuration_error"
    VALIDATION = "validation_error"
    DUPLICATE_ACCOUNT = "duplicate_account"
    INVALID_CREDENTIALS = "invalid_credentials"
    UNCONFIRMED_ACCOUNT = "unconfirmed_account"
    BACKEND_MISCONFIGURATION = "backend_misconfiguration"
    UNKNOWN_PROVIDER_FAULT = "unknown_provider_fault"
    UNEXPECTED = "unexpected_error"


class Operation(Enum):
    """Lifecycle operations, used to select classification rules."""
    REGISTER = "register"
    LOGIN = "login"
    RESET_PASSWORD = "reset_password"
    RESEND_CONFIRMATION = "resend_confirmation"
    SIGN_OUT = "sign_out"
    GET_CURRENT_USER = "get_current_user"


# User-facing messages (complete sentences, no technical detail)
CONFIGURATION_MESSAGE = "Authentication service is not configured. Please check configuration."
DUPLICATE_ACCOUNT_MESSAGE = "An account with this email already exists. Please login instead."
DATABASE_ERROR_MESSAGE = (
    "Database error during registration. This may be due to missing tables "
    "or triggers in the identity provider. Please check the setup guide."
)
TRIGGER_ERROR_MESSAGE = (
    "Database trigger error. Please ensure all required database triggers "
    "are set up correctly."
)
INVALID_CREDENTIALS_MESSAGE = "Invalid email or password. Please try again."
UNCONFIRMED_ACCOUNT_MESSAGE = (
    "Please confirm your email address before logging in. "
    "Check your inbox for the confirmation link."
)
PASSWORD_POLICY_MESSAGE = "Password must be at least {min_length} characters long"
EMAIL_DOMAIN_MESSAGE = "Email must be from @{domain} domain"

FALLBACK_MESSAGES: Dict[Operation, str] = {
    Operation.REGISTER: "Registration failed. Please try again.",
    Operation.LOGIN: "Login failed. Please try again.",
    Operation.RESET_PASSWORD: "Password reset failed. Please try again.",
    Operation.RESEND_CONFIRMATION: "Could not resend the confirmation email. Please try again.",
    Operation.SIGN_OUT: "Sign out failed. Please try again.",
    Operation.GET_CURRENT_USER: "Could not load the current user. Please sign in again.",
}

UNKNOWN_REASON_MESSAGES: Dict[Operation, str] = {
    Operation.REGISTER: "Registration failed for unknown reason. Please try again.",
    Operation.LOGIN: "Login failed for unknown reason.",
    Operation.GET_CURRENT_USER: "No user is signed in.",
}

UNEXPECTED_MESSAGES: Dict[Operation, str] = {
    Operation.REGISTER: "An unexpected error occurred during registration.",
    Operation.LOGIN: "An unexpected error occurred during login.",
    Operation.RESET_PASSWORD: "An unexpected error occurred during password reset.",
    Operation.RESEND_CONFIRMATION: "An unexpected error occurred while resending the confirmation email.",
    Operation.SIGN_OUT: "An unexpected error occurred during sign out.",
    Operation.GET_CURRENT_USER: "An unexpected error occurred while loading the current user.",
}

# Ordered (substring, kind) rules; first match wins. Matched lowercase.
_SUBSTRING_RULES: Dict[Operation, Tuple[Tuple[str, ErrorKind], ...]] = {
    Operation.REGISTER: (
        ("already registered", ErrorKind.DUPLICATE_ACCOUNT),
        ("database error", ErrorKind.BACKEND_MISCONFIGURATION),
        ("trigger", ErrorKind.BACKEND_MISCONFIGURATION),
    ),
    Operation.LOGIN: (
        ("invalid login credentials", ErrorKind.INVALID_CREDENTIALS),
        ("email not confirmed", ErrorKind.UNCONFIRMED_ACCOUNT),
    ),
}

# Typed provider error codes (Supabase Auth "error_code")
_CODE_RULES: Dict[Operation, Dict[str, ErrorKind]] = {
    Operation.REGISTER: {
        "user_already_exists": ErrorKind.DUPLICATE_ACCOUNT,
        "email_exists": ErrorKind.DUPLICATE_ACCOUNT,
    },
    Operation.LOGIN: {
        "invalid_credentials": ErrorKind.INVALID_CREDENTIALS,
        "email_not_confirmed": ErrorKind.UNCONFIRMED_ACCOUNT,
    },
}


def classify_provider_fault(
    operation: Operation, message: Optional[str], code: Optional[str] = None
) -> ErrorKind:
    """
    Map a provider fault to an ErrorKind for the given operation.

    Args:
        operation: Lifecycle operation that received the fault
        message: Provider's prose message (may be None or empty)
        code: Provider's typed error code, if supplied

    Returns:
        Matching ErrorKind, or UNKNOWN_PROVIDER_FAULT if no rule matches
    """
    if isinstance(code, str) and code:
        kind = _CODE_RULES.get(operation, {}).get(code.lower())
        if kind is not None:
            return kind

    text = (message or "").lower()
    for needle, kind in _SUBSTRING_RULES.get(operation, ()):
        if needle in text:
            return kind

    return ErrorKind.UNKNOWN_PROVIDER_FAULT
