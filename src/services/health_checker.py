# src/services/health_checker.py

"""Backend connectivity health checker."""

import asyncio
import logging
import time
from dataclasses import dataclass

from curl_cffi import requests as curl_requests

from src.config.settings import Settings

logger = logging.getLogger("vendor_market.health")


@dataclass
class HealthResult:
    """Result of a single endpoint health check."""

    service: str
    status: str  # "ok", "slow", "down"
    latency_ms: float
    message: str


def check_endpoint(service: str, path: str) -> HealthResult:
    """Check one backend endpoint with the configured API key."""
    url = Settings.SUPABASE_URL.rstrip("/") + path
    headers = {
        "apikey": Settings.SUPABASE_KEY,
        "Authorization": f"Bearer {Settings.SUPABASE_KEY}",
    }

    start = time.monotonic()
    try:
        resp = curl_requests.get(
            url, headers=headers, timeout=Settings.HEALTH_TIMEOUT
        )
        elapsed_ms = (time.monotonic() - start) * 1000

        if resp.status_code >= 400:
            return HealthResult(
                service=service,
                status="down",
                latency_ms=elapsed_ms,
                message=f"HTTP {resp.status_code}",
            )

        if elapsed_ms > Settings.HEALTH_SLOW_MS:
            return HealthResult(
                service=service,
                status="slow",
                latency_ms=elapsed_ms,
                message="High latency",
            )

        return HealthResult(
            service=service,
            status="ok",
            latency_ms=elapsed_ms,
            message="",
        )

    except Exception as exc:
        elapsed_ms = (time.monotonic() - start) * 1000
        return HealthResult(
            service=service,
            status="down",
            latency_ms=elapsed_ms,
            message=str(exc)[:80],
        )


class HealthChecker:
    """Runs concurrent checks against the backend's services."""

    def __init__(self) -> None:
        self.endpoints = Settings.HEALTH_ENDPOINTS

    async def check_all(self) -> list[HealthResult]:
        """Check every configured endpoint concurrently."""
        tasks = [
            asyncio.to_thread(check_endpoint, service, path)
            for service, path in self.endpoints.items()
        ]
        results: list[HealthResult] = list(await asyncio.gather(*tasks))
        for r in results:
            logger.info(
                "Health check %s: %s (%.0fms) %s",
                r.service,
                r.status,
                r.latency_ms,
                r.message,
            )
        return results
