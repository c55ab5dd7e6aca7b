import logging

import httpx
import pytest
from fastapi.testclient import TestClient

from identity_gate.config import Settings
from identity_gate.core.models import ProviderFault, ProviderResponse
from identity_gate.main import create_app


def _settings(**overrides):
    values = {
        "supabase_url": "https://project.supabase.co",
        "supabase_anon_key": "anon-key",
        "registration_domain": "org.example",
        "site_url": "https://site.example",
    }
    values.update(overrides)
    return Settings(**values)


@pytest.fixture
def client(provider):
    return TestClient(create_app(_settings(), identity_provider=provider))


def test_health(client):
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


def test_readiness_with_configured_provider(client):
    response = client.get("/health/ready")

    assert response.status_code == 200
    assert response.json()["components"][0]["name"] == "identity_provider"


def test_readiness_without_provider():
    client = TestClient(create_app(_settings(supabase_url=None, supabase_anon_key=None)))

    response = client.get("/health/ready")

    assert response.status_code == 503
    assert response.json()["ready"] is False


def test_readiness_status_tracks_provider_configuration(client, provider):
    assert client.get("/health/ready").json()["status"] == "healthy"

    provider.is_configured.return_value = False
    response = client.get("/health/ready")

    assert response.status_code == 503
    assert response.json()["status"] == "unhealthy"


@pytest.fixture
def root_log_level():
    root = logging.getLogger()
    level = root.level
    yield root
    root.setLevel(level)


def test_create_app_applies_log_level(provider, root_log_level):
    create_app(_settings(log_level="WARNING"), identity_provider=provider)
    assert root_log_level.level == logging.WARNING

    create_app(_settings(log_level="debug"), identity_provider=provider)
    assert root_log_level.level == logging.DEBUG


def test_liveness(client):
    assert client.get("/health/live").json()["ready"] is True


def test_register_pending_confirmation(client, provider, pending_account):
    provider.sign_up.return_value = ProviderResponse(user=pending_account)

    response = client.post(
        "/api/v1/auth/register",
        json={"email": "ada@org.example", "password": "longenough1", "displayName": "Ada"},
    )

    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["requiresConfirmation"] is True
    assert body["user"]["confirmationStatus"] == "pending"
    provider.sign_up.assert_awaited_once_with(
        "ada@org.example",
        "longenough1",
        metadata={"display_name": "Ada", "email_domain": "org.example"},
        redirect_to="https://site.example/pages/confirm-email.html",
    )


def test_register_validation_error(client, provider):
    response = client.post(
        "/api/v1/auth/register",
        json={"email": "ada@gmail.com", "password": "longenough1"},
    )

    assert response.status_code == 400
    assert response.json()["errorKind"] == "validation_error"
    provider.sign_up.assert_not_called()


def test_register_duplicate_account(client, provider):
    provider.sign_up.return_value = ProviderResponse(
        fault=ProviderFault(message="User already registered", status=422)
    )

    response = client.post(
        "/api/v1/auth/register",
        json={"email": "ada@org.example", "password": "longenough1"},
    )

    assert response.status_code == 409
    assert response.json()["errorKind"] == "duplicate_account"


def test_register_malformed_body(client):
    response = client.post("/api/v1/auth/register", json={"email": "ada@org.example"})

    assert response.status_code == 422


def test_register_without_provider_is_configuration_error():
    client = TestClient(create_app(_settings(supabase_url=None, supabase_anon_key=None)))

    response = client.post(
        "/api/v1/auth/register",
        json={"email": "ada@gmail.com", "password": "x"},
    )

    assert response.status_code == 503
    assert response.json()["errorKind"] == "configuration_error"


def test_login_returns_session(client, provider, confirmed_account, session):
    provider.sign_in_with_password.return_value = ProviderResponse(
        user=confirmed_account, session=session
    )

    response = client.post(
        "/api/v1/auth/login",
        json={"email": "grace@org.example", "password": "longenough1"},
    )

    assert response.status_code == 200
    assert response.json()["session"]["access_token"] == "access-token"


@pytest.mark.parametrize("message, status_code", [
    ("Invalid login credentials", 401),
    ("Email not confirmed", 403),
])
def test_login_failures(client, provider, message, status_code):
    provider.sign_in_with_password.return_value = ProviderResponse(
        fault=ProviderFault(message=message, status=400)
    )

    response = client.post(
        "/api/v1/auth/login",
        json={"email": "grace@org.example", "password": "wrong"},
    )

    assert response.status_code == status_code
    assert response.json()["success"] is False


def test_technical_error_hidden_by_default(client, provider):
    provider.sign_in_with_password.side_effect = httpx.ConnectError("connection refused")

    response = client.post(
        "/api/v1/auth/login",
        json={"email": "grace@org.example", "password": "longenough1"},
    )

    assert response.status_code == 500
    assert "technicalError" not in response.json()


def test_technical_error_exposed_when_enabled(provider):
    client = TestClient(
        create_app(_settings(expose_technical_errors=True), identity_provider=provider)
    )
    provider.sign_in_with_password.side_effect = httpx.ConnectError("connection refused")

    response = client.post(
        "/api/v1/auth/login",
        json={"email": "grace@org.example", "password": "longenough1"},
    )

    assert response.json()["technicalError"] == "connection refused"


def test_password_reset(client, provider):
    response = client.post("/api/v1/auth/password-reset", json={"email": "nobody@org.example"})

    assert response.status_code == 200
    provider.reset_password_for_email.assert_awaited_once_with(
        "nobody@org.example",
        redirect_to="https://site.example/pages/reset-password.html",
    )


def test_resend_confirmation(client, provider):
    response = client.post("/api/v1/auth/confirmation/resend", json={"email": "ada@org.example"})

    assert response.status_code == 200
    assert response.json()["message"] == "Confirmation email resent. Please check your inbox."


def test_logout_requires_bearer_token(client, provider):
    assert client.post("/api/v1/auth/logout").status_code == 401
    assert client.post(
        "/api/v1/auth/logout", headers={"Authorization": "Basic abc"}
    ).status_code == 401
    provider.sign_out.assert_not_called()


def test_logout(client, provider):
    response = client.post("/api/v1/auth/logout", headers={"Authorization": "Bearer at"})

    assert response.status_code == 200
    provider.sign_out.assert_awaited_once_with("at")


def test_me(client, provider, confirmed_account):
    provider.get_user.return_value = ProviderResponse(user=confirmed_account)

    response = client.get("/api/v1/auth/me", headers={"Authorization": "Bearer at"})

    assert response.status_code == 200
    assert response.json()["user"]["email"] == "grace@org.example"
