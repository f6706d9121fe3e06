from typing import Any, Dict

from fastapi import APIRouter, Response, status

from ...core import database
from ...core.event_management import health_check_events
from ...core.setting import get_settings
from ...utils.service_health import (
    ProductServiceHealthChecker,
    database_check,
    events_check,
)

router = APIRouter()


@router.get("/health")
async def health_check(response: Response) -> Dict[str, Any]:
    """Report product store and event channel health."""
    settings = get_settings()
    checker = ProductServiceHealthChecker(settings.SERVICE_NAME, settings.APP_VERSION)
    checker.add_check(
        "database", database_check(database.database_manager.async_session_maker)
    )
    checker.add_check("events", events_check(health_check_events))

    report = await checker.run_checks()
    if report["status"] == "unhealthy":
        response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    return report
