"""API routes for health checks and the account lifecycle"""

import logging
from typing import Any, Dict, Optional

from fastapi import APIRouter, Header, Request, Response, status
from fastapi.responses import JSONResponse

from ..core.errors import ErrorKind
from ..core.health_checker import HealthChecker
from ..core.lifecycle import LifecycleController
from ..core.results import OperationResult
from .schemas import EmailRequest, LoginRequest, RegisterRequest

logger = logging.getLogger(__name__)

router = APIRouter()

_STATUS_BY_KIND = {
    ErrorKind.CONFIGURATION: status.HTTP_503_SERVICE_UNAVAILABLE,
    ErrorKind.VALIDATION: status.HTTP_400_BAD_REQUEST,
    ErrorKind.DUPLICATE_ACCOUNT: status.HTTP_409_CONFLICT,
    ErrorKind.INVALID_CREDENTIALS: status.HTTP_401_UNAUTHORIZED,
    ErrorKind.UNCONFIRMED_ACCOUNT: status.HTTP_403_FORBIDDEN,
    ErrorKind.BACKEND_MISCONFIGURATION: status.HTTP_502_BAD_GATEWAY,
    ErrorKind.UNKNOWN_PROVIDER_FAULT: status.HTTP_400_BAD_REQUEST,
    ErrorKind.UNEXPECTED: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


@router.get("/health")
async def health_check() -> Dict[str, Any]:
    """
    Basic health check endpoint.

    Only verifies the process is running and responsive. Use /health/ready
    to also check that the identity provider is configured.
    """
    return {
        "status": "healthy",
        "service": "identity-gate",
        "version": "1.0.0",
    }


@router.get("/health/live")
async def liveness_probe(request: Request) -> Dict[str, Any]:
    """Liveness probe endpoint."""
    health = await _health_checker(request).check_liveness()
    return health.to_dict()


@router.get("/health/ready")
async def readiness_probe(request: Request) -> Response:
    """
    Readiness probe endpoint.

    Returns:
        200 if the identity provider is configured, 503 otherwise
    """
    health = await _health_checker(request).check_readiness()
    status_code = status.HTTP_200_OK if health.ready else status.HTTP_503_SERVICE_UNAVAILABLE

    return JSONResponse(
        status_code=status_code,
        content=health.to_dict(),
    )


@router.post("/api/v1/auth/register")
async def register(body: RegisterRequest, request: Request) -> Response:
    """Create an account; confirmation may be required before login."""
    result = await _controller(request).register(body.email, body.password, body.display_name)
    return _to_response(request, result)


@router.post("/api/v1/auth/login")
async def login(body: LoginRequest, request: Request) -> Response:
    """Sign in and receive the provider session."""
    result = await _controller(request).login(body.email, body.password)
    return _to_response(request, result)


@router.post("/api/v1/auth/password-reset")
async def reset_password(body: EmailRequest, request: Request) -> Response:
    """Send a password reset email."""
    result = await _controller(request).reset_password(body.email)
    return _to_response(request, result)


@router.post("/api/v1/auth/confirmation/resend")
async def resend_confirmation(body: EmailRequest, request: Request) -> Response:
    """Resend the signup confirmation email."""
    result = await _controller(request).resend_confirmation(body.email)
    return _to_response(request, result)


@router.post("/api/v1/auth/logout")
async def logout(
    request: Request, authorization: Optional[str] = Header(default=None)
) -> Response:
    """Revoke the session identified by the bearer token."""
    token, error = _bearer_token(authorization)
    if error:
        return _to_response(request, error, status.HTTP_401_UNAUTHORIZED)
    result = await _controller(request).sign_out(token)
    return _to_response(request, result)


@router.get("/api/v1/auth/me")
async def current_user(
    request: Request, authorization: Optional[str] = Header(default=None)
) -> Response:
    """Return the account that owns the bearer token."""
    token, error = _bearer_token(authorization)
    if error:
        return _to_response(request, error, status.HTTP_401_UNAUTHORIZED)
    result = await _controller(request).get_current_user(token)
    return _to_response(request, result)


def _controller(request: Request) -> LifecycleController:
    return request.app.state.lifecycle_controller


def _health_checker(request: Request) -> HealthChecker:
    return request.app.state.health_checker


def _to_response(
    request: Request, result: OperationResult, status_code: Optional[int] = None
) -> JSONResponse:
    """
    Render an OperationResult as JSON.

    technicalError is logged here and only included in the body when
    expose_technical_errors is enabled.
    """
    if result.success:
        return JSONResponse(status_code=status.HTTP_200_OK, content=result.to_dict())

    if result.technical_error:
        logger.error(
            f"{request.method} {request.url.path} failed "
            f"({result.error_kind.value}): {result.technical_error}"
        )

    settings = request.app.state.settings
    if status_code is None:
        status_code = _STATUS_BY_KIND.get(result.error_kind, status.HTTP_400_BAD_REQUEST)

    return JSONResponse(
        status_code=status_code,
        content=result.to_dict(include_technical=settings.expose_technical_errors),
    )


def _bearer_token(auth_header: Optional[str]) -> tuple[Optional[str], Optional[OperationResult]]:
    """
    Extract token from an Authorization header.

    Expected format: "Bearer <token>"

    Returns:
        Tuple of (token, error_result); exactly one is None
    """
    if not auth_header:
        return None, OperationResult.fail(
            ErrorKind.VALIDATION, "Authorization header is required."
        )

    parts = auth_header.split()
    if len(parts) != 2 or parts[0].lower() != "bearer":
        return None, OperationResult.fail(
            ErrorKind.VALIDATION, "Authorization header must be 'Bearer <token>'."
        )

    return parts[1], None
