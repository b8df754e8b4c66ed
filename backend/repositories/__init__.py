"""Persistence layer: abstract interface and implementations."""

from .base import MenuSnapshot, StoreProtocol
from .menu_store import MenuDecodeError, MenuStore, StoreError

__all__ = ["MenuSnapshot", "StoreProtocol", "MenuStore", "StoreError", "MenuDecodeError"]
