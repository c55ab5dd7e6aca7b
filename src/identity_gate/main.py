"""
Identity Gate - Main Application

Account lifecycle service for a single-domain membership site:
- Domain-gated registration with email confirmation
- Password login returning the identity provider session
- Password reset and confirmation resend
- Uniform, classified results for UI controllers
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .api.routes import router
from .config import Settings, get_settings
from .core.domain_validator import DomainValidator
from .core.health_checker import HealthChecker
from .core.identity_provider import IIdentityProvider
from .core.lifecycle import LifecycleController
from .infrastructure import SupabaseProvider

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    stream=sys.stdout,
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator:
    """Application lifespan manager for startup/shutdown events"""
    # Startup
    settings = app.state.settings
    controller = app.state.lifecycle_controller
    logger.info("Starting identity-gate v1.0.0")
    logger.info(f"Registration domain: @{controller.validator.domain}")
    if controller.is_provider_available():
        logger.info(f"Identity provider: {controller.provider.get_provider_name()}")
    else:
        logger.error(
            "Identity provider is not configured; every operation will "
            "return a configuration error"
        )
    logger.info(f"Listening on {settings.service_host}:{settings.service_port}")

    yield

    # Shutdown
    logger.info("Shutting down identity-gate")


def create_app(
    settings: Optional[Settings] = None,
    identity_provider: Optional[IIdentityProvider] = None,
) -> FastAPI:
    """
    Create and configure FastAPI application.

    Args:
        settings: Application settings (default: get_settings())
        identity_provider: Provider to inject; built from settings when omitted

    Returns:
        Configured FastAPI application
    """
    settings = settings or get_settings()

    # Configure logging level from settings
    logging.getLogger().setLevel(settings.log_level.upper())

    if identity_provider is None:
        identity_provider = _create_identity_provider(settings)

    controller = LifecycleController(
        provider=identity_provider,
        validator=DomainValidator(
            domain=settings.registration_domain,
            password_min_length=settings.password_min_length,
        ),
        confirm_redirect_url=settings.confirm_redirect_url,
        reset_redirect_url=settings.reset_redirect_url,
    )

    app = FastAPI(
        title="Identity Gate",
        description="Domain-gated account lifecycle service",
        version="1.0.0",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.lifecycle_controller = controller
    app.state.health_checker = HealthChecker(identity_provider)

    # Configure CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(router)

    return app


def _create_identity_provider(settings: Settings) -> Optional[IIdentityProvider]:
    """
    Create identity provider based on configuration.

    Args:
        settings: Application settings

    Returns:
        Configured provider, or None if Supabase credentials are missing
    """
    if not settings.supabase_url or not settings.supabase_anon_key:
        logger.error(
            "SUPABASE_URL and SUPABASE_ANON_KEY must be set; "
            "identity provider not initialized"
        )
        return None

    logger.info("Using Supabase identity provider")
    return SupabaseProvider(
        url=settings.supabase_url,
        anon_key=settings.supabase_anon_key,
        timeout=settings.provider_timeout,
    )


# Create app instance
app = create_app()


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()

    uvicorn.run(
        "identity_gate.main:app",
        host=settings.service_host,
        port=settings.service_port,
        reload=True,
        log_level=settings.log_level.lower(),
    )
