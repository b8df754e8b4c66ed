"""FastAPI dependencies for routes.

The broadcaster and menu service are built once by create_app() and kept on
app.state; handlers receive them through these providers.
"""

from fastapi import Request

from services.broadcaster import Broadcaster
from services.menu import MenuService


def get_broadcaster(request: Request) -> Broadcaster:
    return request.app.state.broadcaster


def get_menu_service(request: Request) -> MenuService:
    return request.app.state.menu_service
