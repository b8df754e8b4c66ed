from datetime import datetime, timezone
from typing import Annotated

from fastapi import APIRouter, Depends, Request

from api.deps import get_broadcaster
from services.broadcaster import Broadcaster

router = APIRouter(tags=["health"])


@router.get("/health")
async def health(
    request: Request,
    broadcaster: Annotated[Broadcaster, Depends(get_broadcaster)],
):
    settings = request.app.state.settings
    return {
        "status": "ok",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "version": settings.APP_VERSION,
        "subscribers": broadcaster.subscriber_count,
    }
