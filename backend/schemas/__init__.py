"""Pydantic schemas for API request/response."""

from .menu import MenuEntry, MenuEntryCreate

__all__ = [
    "MenuEntry",
    "MenuEntryCreate",
]
