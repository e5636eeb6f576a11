"""Top X leaderboard routes."""

import logging
from pathlib import Path

from fastapi import APIRouter, HTTPException, Request, status
from slowapi import Limiter
from slowapi.util import get_remote_address

from app.api.deps import Engine
from app.config import get_settings
from app.core.exceptions import InvalidConfiguration, RenderTimedOut
from app.core.user_props import UserLogName, UserProperty
from app.schemas.top_x import (
    LeaderboardEntryResponse,
    RenderRequest,
    RenderResponse,
    SlotResponse,
    SourcesResponse,
)
from app.services.top_x_service import (
    CollectingDisplay,
    RenderReport,
    TopXEngine,
    load_screen_config,
)

logger = logging.getLogger(__name__)

settings = get_settings()
limiter = Limiter(key_func=get_remote_address)

router = APIRouter(prefix="/top-x", tags=["Top X"])


def _to_response(report: RenderReport, display: CollectingDisplay) -> RenderResponse:
    return RenderResponse(
        slots=[
            SlotResponse(
                slot_id=result.slot.slot_id,
                region=result.slot.region_name,
                entries=[
                    LeaderboardEntryResponse.model_validate(e)
                    for e in display.lists.get(result.slot.slot_id, [])
                ],
                error=result.error,
            )
            for result in report.slots
        ]
    )


def _configuration_error(e: InvalidConfiguration) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        detail={
            "error": type(e).__name__,
            "message": str(e),
            "slot_id": e.slot_id,
            "field": e.field,
        },
    )


async def _render(engine: TopXEngine, screen: RenderRequest) -> RenderResponse:
    display = CollectingDisplay()
    try:
        report = await engine.render(screen.mci_map, screen.regions, display)
    except InvalidConfiguration as e:
        raise _configuration_error(e)
    except RenderTimedOut as e:
        raise HTTPException(
            status_code=status.HTTP_504_GATEWAY_TIMEOUT,
            detail=str(e),
        )

    return _to_response(report, display)


@router.post(
    "/render",
    response_model=RenderResponse,
)
@limiter.limit(f"{settings.rate_limit_requests}/minute")
async def render_screen(
    request: Request,
    screen: RenderRequest,
    engine: Engine,
) -> RenderResponse:
    """Render the leaderboards configured for a screen.

    Slots render in declaration order. A slot whose query or user lookups
    fail comes back as an empty list with its error name set.
    """
    return await _render(engine, screen)


@router.get(
    "/screen",
    response_model=RenderResponse,
)
@limiter.limit(f"{settings.rate_limit_requests}/minute")
async def render_default_screen(request: Request, engine: Engine) -> RenderResponse:
    """Render the screen configured in TOP_X_CONFIG_FILE."""
    config_file = get_settings().top_x_config_file
    if not config_file or not Path(config_file).is_file():
        raise HTTPException(status_code=404, detail="No top X screen configured")

    logger.info(f"Rendering top X screen from {config_file}")
    try:
        screen = load_screen_config(config_file)
    except InvalidConfiguration as e:
        raise _configuration_error(e)

    return await _render(engine, screen)


@router.get(
    "/sources",
    response_model=SourcesResponse,
)
async def list_sources() -> SourcesResponse:
    """List the user properties and event logs a slot may rank by."""
    return SourcesResponse(
        properties=[p.value for p in UserProperty],
        log_names=[n.value for n in UserLogName],
    )
