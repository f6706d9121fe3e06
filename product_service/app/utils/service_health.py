"""
Product Service Health Check Utilities
======================================
"""

import time
from typing import Any, Awaitable, Callable, Dict

from sqlalchemy import text

HealthCheck = Callable[[], Awaitable[Dict[str, Any]]]


class ProductServiceHealthChecker:
    """Runs named async checks and aggregates them into one report"""

    def __init__(self, service_name: str = "product_service", version: str = "1.0.0"):
        self.service_name = service_name
        self.version = version
        self.checks: Dict[str, HealthCheck] = {}
        self.start_time = time.time()

    def add_check(self, name: str, check_func: HealthCheck) -> None:
        """Add a health check function"""
        self.checks[name] = check_func

    async def run_checks(self) -> Dict[str, Any]:
        results: Dict[str, Dict[str, Any]] = {}
        check_start_time = time.time()

        for name, check_func in self.checks.items():
            individual_start = time.time()
            try:
                result = await check_func()
            except Exception as e:
                result = {"status": "unhealthy", "error": str(e)}
            result["duration_ms"] = round((time.time() - individual_start) * 1000, 2)
            results[name] = result

        # Only the store is required; a missing broker means degraded mode
        store_ok = results.get("database", {}).get("status") == "healthy"
        all_ok = all(r.get("status") == "healthy" for r in results.values())
        status = "healthy" if all_ok else ("degraded" if store_ok else "unhealthy")

        return {
            "service": self.service_name,
            "version": self.version,
            "status": status,
            "checks": results,
            "total_duration_ms": round((time.time() - check_start_time) * 1000, 2),
            "uptime_seconds": round(time.time() - self.start_time, 2),
            "timestamp": time.time(),
        }


def database_check(session_maker: Any) -> HealthCheck:
    """Health check issuing ``SELECT 1`` against the product store"""

    async def check() -> Dict[str, Any]:
        async with session_maker() as session:
            await session.execute(text("SELECT 1"))
        return {"status": "healthy", "component": "database"}

    return check


def events_check(probe: Callable[[], Awaitable[bool]]) -> HealthCheck:
    """Health check reporting whether the Kafka producer is connected"""

    async def check() -> Dict[str, Any]:
        connected = await probe()
        return {
            "status": "healthy" if connected else "degraded",
            "component": "events",
            "connected": connected,
        }

    return check
