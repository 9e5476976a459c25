"""
Health check endpoints for operations monitoring.

Checks:
- Database connectivity (all configured databases)
- Redis connectivity (Celery broker and channel layer)
- Channel layer round trip

Endpoints:
- /_health/live    - liveness probe (is the process running?)
- /_health/ready   - readiness probe (can we serve traffic?)
- /_health/full    - full health report (for debugging/dashboards)
"""
import logging
import time
from typing import Dict, Any

import redis
from asgiref.sync import async_to_sync
from channels.layers import get_channel_layer
from django.conf import settings
from django.db import connections
from django.http import JsonResponse
from django.views import View

logger = logging.getLogger(__name__)


def _elapsed_ms(start: float) -> float:
    return round((time.time() - start) * 1000, 2)


class HealthCheck:
    """Health check implementation."""

    @staticmethod
    def check_database(alias: str = "default") -> Dict[str, Any]:
        start = time.time()
        try:
            conn = connections[alias]
            conn.ensure_connection()
            with conn.cursor() as cursor:
                cursor.execute("SELECT 1")
                cursor.fetchone()
            return {"status": "healthy", "alias": alias, "duration_ms": _elapsed_ms(start)}
        except Exception as e:
            logger.warning("Database health check failed", extra={"alias": alias, "error": str(e)})
            return {"status": "unhealthy", "alias": alias, "error": str(e), "duration_ms": _elapsed_ms(start)}

    @staticmethod
    def check_all_databases() -> Dict[str, Any]:
        results = {alias: HealthCheck.check_database(alias) for alias in settings.DATABASES}
        all_healthy = all(r["status"] == "healthy" for r in results.values())
        return {
            "status": "healthy" if all_healthy else "degraded",
            "databases": results,
        }

    @staticmethod
    def check_redis() -> Dict[str, Any]:
        """Ping the broker used by Celery and the channel layer."""
        redis_url = getattr(settings, "REDIS_URL", None)
        if not redis_url:
            return {"status": "skipped", "reason": "Redis not configured"}

        start = time.time()
        try:
            client = redis.from_url(redis_url)
            client.ping()
            return {"status": "healthy", "duration_ms": _elapsed_ms(start)}
        except redis.RedisError as e:
            logger.warning("Redis health check failed", extra={"error": str(e)})
            return {"status": "unhealthy", "error": str(e), "duration_ms": _elapsed_ms(start)}

    @staticmethod
    def check_channel_layer() -> Dict[str, Any]:
        """Send and receive one message on a private channel."""
        layer = get_channel_layer()
        if layer is None:
            return {"status": "skipped", "reason": "No channel layer configured"}

        start = time.time()
        try:
            channel = async_to_sync(layer.new_channel)()
            async_to_sync(layer.send)(channel, {"type": "health.ping"})
            message = async_to_sync(layer.receive)(channel)
            if message.get("type") != "health.ping":
                return {"status": "unhealthy", "error": "Unexpected message", "duration_ms": _elapsed_ms(start)}
            return {
                "status": "healthy",
                "backend": type(layer).__name__,
                "duration_ms": _elapsed_ms(start),
            }
        except Exception as e:
            logger.warning("Channel layer health check failed", extra={"error": str(e)})
            return {"status": "unhealthy", "error": str(e), "duration_ms": _elapsed_ms(start)}

    @staticmethod
    def get_full_health() -> Dict[str, Any]:
        checks = {
            "databases": HealthCheck.check_all_databases(),
            "redis": HealthCheck.check_redis(),
            "channel_layer": HealthCheck.check_channel_layer(),
        }

        statuses = [c.get("status", "unknown") for c in checks.values()]
        if all(s in ("healthy", "skipped") for s in statuses):
            overall = "healthy"
        elif any(s == "unhealthy" for s in statuses):
            overall = "unhealthy"
        else:
            overall = "degraded"

        return {
            "status": overall,
            "checks": checks,
            "version": getattr(settings, "VERSION", "unknown"),
            "environment": "production" if not settings.DEBUG else "development",
        }


class LivenessView(View):
    """
    Liveness probe.

    Returns 200 if the process is running. Never touches external services.
    """

    def get(self, request):
        return JsonResponse({"status": "alive"})


class ReadinessView(View):
    """Readiness probe: the default database must answer."""

    def get(self, request):
        db_check = HealthCheck.check_database("default")

        if db_check["status"] == "healthy":
            return JsonResponse({"status": "ready", "database": db_check})
        return JsonResponse({"status": "not_ready", "database": db_check}, status=503)


class FullHealthView(View):
    """
    Full health report.

    Should be protected in production (internal network only).
    """

    def get(self, request):
        health = HealthCheck.get_full_health()
        status_code = 200 if health["status"] == "healthy" else 503
        return JsonResponse(health, status=status_code)
