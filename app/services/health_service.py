"""Health check service for monitoring system components."""
import logging
from typing import Any, Callable, Dict, Optional
from datetime import datetime
from enum import Enum

import redis
from sqlalchemy import text
from sqlalchemy.engine import Engine

from app.config import Settings, settings as default_settings

logger = logging.getLogger(__name__)


class HealthStatus(str, Enum):
    """Health status values."""
    HEALTHY = "healthy"
    UNHEALTHY = "unhealthy"
    DEGRADED = "degraded"


class HealthCheckService:
    """Service for checking health of system components.

    Only the bookmark database is critical. Redis backs the statistics cache
    and an unset Tour API key breaks listing, but both leave the service
    partly usable, so they can only degrade the overall status.
    """

    def __init__(
        self,
        engine: Optional[Engine] = None,
        settings: Optional[Settings] = None,
        redis_factory: Optional[Callable[[], Any]] = None,
    ):
        self.settings = settings or default_settings
        self._engine = engine
        self._redis_factory = redis_factory or self._default_redis

    @property
    def engine(self) -> Engine:
        if self._engine is None:
            from app.infrastructure.persistence.db import engine
            self._engine = engine
        return self._engine

    def _default_redis(self):
        return redis.Redis.from_url(
            self.settings.get_redis_cache_url(),
            socket_connect_timeout=2,
        )

    def check_database(self) -> Dict[str, Any]:
        """Check database connectivity with ``SELECT 1``."""
        backend = self.engine.url.get_backend_name()
        try:
            with self.engine.connect() as conn:
                conn.execute(text("SELECT 1"))

            return {
                "status": HealthStatus.HEALTHY,
                "message": "Database connection successful",
                "details": {"backend": backend}
            }
        except Exception as e:
            logger.error(f"Database health check failed: {e}")
            return {
                "status": HealthStatus.UNHEALTHY,
                "message": f"Database connection failed: {str(e)}",
                "details": {"backend": backend, "error": str(e)}
            }

    def check_redis(self) -> Dict[str, Any]:
        """Check the Redis stats cache, if enabled."""
        if not self.settings.REDIS_CACHE_ENABLED:
            return {
                "status": HealthStatus.HEALTHY,
                "message": "Redis cache disabled; using in-memory cache",
                "details": {"enabled": False}
            }

        details = {
            "enabled": True,
            "host": self.settings.REDIS_CACHE_HOST,
            "port": self.settings.REDIS_CACHE_PORT,
        }
        try:
            client = self._redis_factory()
            client.ping()
            return {
                "status": HealthStatus.HEALTHY,
                "message": "Redis connection successful",
                "details": details
            }
        except Exception as e:
            logger.error(f"Redis health check failed: {e}")
            return {
                "status": HealthStatus.DEGRADED,
                "message": f"Redis connection failed: {str(e)}",
                "details": {**details, "error": str(e)}
            }

    def check_tour_api(self) -> Dict[str, Any]:
        """Configuration check only; no upstream call is made."""
        if self.settings.get_tour_api_key():
            return {
                "status": HealthStatus.HEALTHY,
                "message": "Tour API key configured",
                "details": {"base_url": self.settings.TOUR_API_BASE_URL}
            }
        return {
            "status": HealthStatus.DEGRADED,
            "message": "TOUR_API_KEY is not configured",
            "details": {"base_url": self.settings.TOUR_API_BASE_URL}
        }

    def get_overall_health(self) -> Dict[str, Any]:
        """Get overall system health status."""
        components = {
            "database": self.check_database(),
            "redis": self.check_redis(),
            "tour_api": self.check_tour_api(),
        }
        component_statuses = [component["status"] for component in components.values()]

        if all(status == HealthStatus.HEALTHY for status in component_statuses):
            overall_status = HealthStatus.HEALTHY
        elif any(status == HealthStatus.UNHEALTHY for status in component_statuses):
            overall_status = HealthStatus.UNHEALTHY
        else:
            overall_status = HealthStatus.DEGRADED

        return {
            "status": overall_status,
            "timestamp": datetime.utcnow().isoformat(),
            "components": components,
        }


# Global health check service instance
health_service = HealthCheckService()
