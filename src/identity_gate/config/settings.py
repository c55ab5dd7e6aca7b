"""Service configuration using pydantic-settings"""

from typing import Optional
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Identity gate configuration from environment variables"""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Identity Provider (Supabase)
    supabase_url: Optional[str] = Field(
        default=None,
        description="Supabase project URL (e.g., https://<project>.supabase.co)",
    )
    supabase_anon_key: Optional[str] = Field(
        default=None,
        description="Supabase anon (public) API key",
    )
    provider_timeout: float = Field(
        default=10.0,
        description="Timeout in seconds for each identity provider call",
    )

    # Registration rules
    registration_domain: str = Field(
        default="cesaris.edu.it",
        description="The only email domain allowed to register",
    )
    password_min_length: int = Field(
        default=8,
        ge=1,
        description="Minimum password length enforced at registration",
    )

    # Redirect targets for provider emails
    site_url: str = Field(
        default="http://localhost:8080",
        description="Public origin of the site, used to build email links",
    )
    confirm_email_path: str = Field(
        default="/pages/confirm-email.html",
        description="Landing route for signup confirmation links",
    )
    reset_password_path: str = Field(
        default="/pages/reset-password.html",
        description="Landing route for password reset links",
    )

    # Error reporting
    expose_technical_errors: bool = Field(
        default=False,
        description="Include technicalError in HTTP responses (support/debug only)",
    )

    # Service Configuration
    service_host: str = Field(
        default="0.0.0.0",
        description="Service bind host",
    )
    service_port: int = Field(
        default=8080,
        description="Service bind port",
    )

    # CORS Configuration
    cors_origins: str = Field(
        default="http://localhost:3000,http://localhost:5173,http://localhost:8080",
        description="Comma-separated list of allowed CORS origins",
    )

    # Logging
    log_level: str = Field(
        default="INFO",
        description="Logging level",
    )

    @property
    def cors_origins_list(self) -> list[str]:
        """Parse CORS origins into list"""
        return [origin.strip() for origin in self.cors_origins.split(",")]

    @property
    def confirm_redirect_url(self) -> str:
        """Absolute URL that confirmation links resolve to"""
        return f"{self.site_url.rstrip('/')}{self.confirm_email_path}"

    @property
    def reset_redirect_url(self) -> str:
        """Absolute URL that password reset links resolve to"""
        return f"{self.site_url.rstrip('/')}{self.reset_password_path}"


# Singleton settings instance
_settings: Settings | None = None


def get_settings() -> Settings:
    """Get or create settings singleton"""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings
