"""
Friendsgiving Backend API
Shared "who brings what" menu with live updates over server-sent events.

Run: uvicorn main:create_app --factory --host 0.0.0.0 --port 8000
"""

import logging
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from api.routes import health_router, menu_router
from config import Settings, get_settings
from repositories.menu_store import MenuStore
from services.broadcaster import Broadcaster
from services.menu import MenuService

logger = logging.getLogger(__name__)


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )


def create_app(
    settings: Optional[Settings] = None,
    store: Optional[MenuStore] = None,
    broadcaster: Optional[Broadcaster] = None,
) -> FastAPI:
    settings = settings or get_settings()
    configure_logging(settings.LOG_LEVEL)
    store = store or MenuStore(settings.MENU_FILE)
    broadcaster = broadcaster or Broadcaster(settings.SUBSCRIBER_BUFFER)

    app = FastAPI(title=settings.APP_TITLE, version=settings.APP_VERSION)
    app.state.settings = settings
    app.state.store = store
    app.state.broadcaster = broadcaster
    app.state.menu_service = MenuService(store, broadcaster)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.ALLOWED_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(health_router)
    app.include_router(menu_router)

    # Mounted last so the API routes win.
    if settings.STATIC_DIR.is_dir():
        app.mount("/", StaticFiles(directory=settings.STATIC_DIR, html=True), name="static")
    else:
        logger.warning("Static directory %s not found, serving API only", settings.STATIC_DIR)

    logger.info("Menu file: %s, subscriber buffer: %d", store.menu_file, broadcaster.buffer_size)
    return app


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "main:create_app",
        factory=True,
        host=settings.HOST,
        port=settings.PORT,
        log_level=settings.LOG_LEVEL.lower(),
    )
