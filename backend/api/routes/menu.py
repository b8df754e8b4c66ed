"""Menu list, add, remove and the live event stream."""

import logging
from typing import Annotated, Optional

from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException, Query, Request
from fastapi.responses import JSONResponse, Response, StreamingResponse
from pydantic import ValidationError

from api.deps import get_broadcaster, get_menu_service
from repositories.menu_store import StoreError
from schemas.menu import MenuEntry, MenuEntryCreate
from services.broadcaster import Broadcaster
from services.menu import MenuService
from services.sse import menu_event_stream

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/menu", tags=["menu"])


def _menu_json(entries: list[MenuEntry], status_code: int = 200) -> JSONResponse:
    return JSONResponse([e.model_dump() for e in entries], status_code=status_code)


async def _release(broadcaster: Broadcaster, subscription_id: int) -> None:
    broadcaster.unsubscribe(subscription_id)


@router.get("")
async def list_menu(service: Annotated[MenuService, Depends(get_menu_service)]):
    try:
        entries = service.list_entries()
    except StoreError as e:
        logger.error("Failed to read menu: %s", e.message)
        raise HTTPException(500, "Failed to read menu") from e
    return _menu_json(entries)


@router.post("", status_code=201)
async def add_menu_entry(
    request: Request,
    service: Annotated[MenuService, Depends(get_menu_service)],
):
    # Parsed by hand so malformed bodies map to 400 rather than FastAPI's 422.
    raw = await request.body()
    try:
        body = MenuEntryCreate.model_validate_json(raw)
    except ValidationError as e:
        if any(err.get("type") == "json_invalid" for err in e.errors()):
            raise HTTPException(400, "Invalid request body") from e
        raise HTTPException(400, "Dish and Who are required") from e

    try:
        entries = service.add_entry(body.dish, body.who)
    except StoreError as e:
        logger.error("Failed to add menu entry: %s", e.message)
        raise HTTPException(500, "Failed to save menu") from e
    return _menu_json(entries, status_code=201)


@router.delete("")
async def remove_menu_entry(
    service: Annotated[MenuService, Depends(get_menu_service)],
    entry_id: Annotated[Optional[str], Query(alias="id")] = None,
):
    if not entry_id:
        raise HTTPException(400, "ID is required")
    try:
        service.remove_entry(entry_id)
    except StoreError as e:
        logger.error("Failed to remove menu entry %s: %s", entry_id, e.message)
        raise HTTPException(500, "Failed to save menu") from e
    return Response(status_code=200)


@router.get("/stream")
async def stream_menu(
    broadcaster: Annotated[Broadcaster, Depends(get_broadcaster)],
    service: Annotated[MenuService, Depends(get_menu_service)],
):
    # Subscribe before reading so no change between the two is missed.
    subscription = broadcaster.subscribe()
    try:
        initial = service.current_snapshot()
    except StoreError as e:
        broadcaster.unsubscribe(subscription.id)
        logger.error("Failed to open menu stream: %s", e.message)
        raise HTTPException(500, "Failed to read menu") from e

    cleanup = BackgroundTasks()
    cleanup.add_task(_release, broadcaster, subscription.id)
    logger.info("Menu stream %d opened (%d live)", subscription.id, broadcaster.subscriber_count)
    return StreamingResponse(
        menu_event_stream(subscription, initial, broadcaster.unsubscribe),
        media_type="text/event-stream",
        headers={"Cache-Control": "no-cache", "Connection": "keep-alive"},
        background=cleanup,
    )
