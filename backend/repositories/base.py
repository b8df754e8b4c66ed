"""Interface the menu service expects from a persistence backend."""

from typing import NamedTuple, Protocol

from schemas.menu import MenuEntry


class MenuSnapshot(NamedTuple):
    """A menu and its encoded form, as persisted at one instant."""

    entries: list[MenuEntry]
    encoded: str


class StoreProtocol(Protocol):
    def read(self) -> list[MenuEntry]: ...

    def snapshot(self) -> MenuSnapshot: ...

    def append(self, entry: MenuEntry) -> MenuSnapshot: ...

    def remove(self, entry_id: str) -> MenuSnapshot: ...

    def ensure_seeded(self) -> bool: ...
