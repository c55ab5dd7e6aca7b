"""Aggregated health checker for liveness and readiness probes.

Readiness validates that the identity provider handle exists and carries
credentials. Without it every lifecycle operation would short-circuit to a
configuration error, so the instance should not receive traffic.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Optional

from .identity_provider import IIdentityProvider

logger = logging.getLogger(__name__)


class HealthStatus(Enum):
    """Overall health status."""
    HEALTHY = "healthy"
    UNHEALTHY = "unhealthy"


@dataclass
class ComponentHealth:
    """Health status for a single component."""
    name: str
    status: HealthStatus
    message: str
    details: Dict[str, Any] = field(default_factory=dict)


@dataclass
class AggregatedHealth:
    """Aggregated health check result."""
    status: HealthStatus
    components: List[ComponentHealth]
    ready: bool
    timestamp: str

    def to_dict(self) -> Dict[str, Any]:
        """Convert to JSON-serializable dict."""
        return {
            "status": self.status.value,
            "ready": self.ready,
            "timestamp": self.timestamp,
            "components": [
                {
                    "name": c.name,
                    "status": c.status.value,
                    "message": c.message,
                    "details": c.details,
                }
                for c in self.components
            ],
        }


def _now() -> str:
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


class HealthChecker:
    """Health checks for the identity gate process and its provider."""

    def __init__(self, provider: Optional[IIdentityProvider]):
        self.provider = provider

    async def check_liveness(self) -> AggregatedHealth:
        """Liveness probe - the process is running if this executes."""
        return AggregatedHealth(
            status=HealthStatus.HEALTHY,
            ready=True,
            timestamp=_now(),
            components=[
                ComponentHealth(
                    name="service_process",
                    status=HealthStatus.HEALTHY,
                    message="Service process is running",
                )
            ],
        )

    async def check_readiness(self) -> AggregatedHealth:
        """Readiness probe - can lifecycle operations reach a provider?"""
        components = [self._check_identity_provider()]
        overall_status, ready = self._aggregate_status(components)

        return AggregatedHealth(
            status=overall_status,
            ready=ready,
            timestamp=_now(),
            components=components,
        )

    def _check_identity_provider(self) -> ComponentHealth:
        if self.provider is None:
            return ComponentHealth(
                name="identity_provider",
                status=HealthStatus.UNHEALTHY,
                message="Identity provider not initialized",
                details={"configured": False},
            )

        name = self.provider.get_provider_name()
        if not self.provider.is_configured():
            logger.error(f"Identity provider {name} is missing credentials")
            return ComponentHealth(
                name="identity_provider",
                status=HealthStatus.UNHEALTHY,
                message=f"{name} credentials are missing",
                details={"provider": name, "configured": False},
            )

        return ComponentHealth(
            name="identity_provider",
            status=HealthStatus.HEALTHY,
            message=f"{name} is configured",
            details={"provider": name, "configured": True},
        )

    def _aggregate_status(
        self, components: List[ComponentHealth]
    ) -> tuple[HealthStatus, bool]:
        """
        Aggregate component statuses into overall status and readiness.

        Logic:
        - UNHEALTHY components -> UNHEALTHY, not ready
        - All HEALTHY -> HEALTHY, ready
        """
        if any(c.status == HealthStatus.UNHEALTHY for c in components):
            return HealthStatus.UNHEALTHY, False

        return HealthStatus.HEALTHY, True
