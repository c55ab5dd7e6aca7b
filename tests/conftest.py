from unittest.mock import MagicMock

import pytest

from identity_gate.core.domain_validator import DomainValidator
from identity_gate.core.identity_provider import IIdentityProvider
from identity_gate.core.lifecycle import LifecycleController
from identity_gate.core.models import Account, ConfirmationStatus, ProviderResponse, Session

CONFIRM_URL = "https://site.example/pages/confirm-email.html"
RESET_URL = "https://site.example/pages/reset-password.html"


@pytest.fixture
def provider():
    """Configured identity provider double; every call succeeds with no payload."""
    mock = MagicMock(spec=IIdentityProvider)
    mock.is_configured.return_value = True
    mock.get_provider_name.return_value = "fake"
    for name in (
        "sign_up",
        "sign_in_with_password",
        "reset_password_for_email",
        "resend",
        "sign_out",
        "get_user",
    ):
        getattr(mock, name).return_value = ProviderResponse()
    return mock


@pytest.fixture
def controller(provider):
    return LifecycleController(
        provider=provider,
        validator=DomainValidator(domain="org.example"),
        confirm_redirect_url=CONFIRM_URL,
        reset_redirect_url=RESET_URL,
    )


@pytest.fixture
def pending_account():
    return Account(
        id="user-1",
        email="ada@org.example",
        display_name="Ada",
        confirmation_status=ConfirmationStatus.PENDING,
    )


@pytest.fixture
def confirmed_account():
    return Account(id="user-2", email="grace@org.example", display_name="Grace")


@pytest.fixture
def session():
    return Session(
        access_token="access-token",
        refresh_token="refresh-token",
        expires_at=1900000000,
        raw={"access_token": "access-token", "refresh_token": "refresh-token"},
    )
