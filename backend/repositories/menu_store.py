"""
File-based implementation of StoreProtocol.
The whole menu lives in one JSON array, rewritten in full on every change.
"""

import json
import logging
import threading
from pathlib import Path

from pydantic import ValidationError

from schemas.menu import MenuEntry

from .base import MenuSnapshot

logger = logging.getLogger(__name__)

SEED_MENU = [
    MenuEntry(id="1763786780838787402", dish="Turkey", who="Will"),
    MenuEntry(id="1763786910210202650", dish="Dessert", who="Sarah"),
]


class StoreError(Exception):
    """Base for persistence failures with a short machine-readable code."""
    def __init__(self, message: str, code: str = "store_error"):
        self.message = message
        self.code = code
        super().__init__(message)


class MenuDecodeError(StoreError):
    def __init__(self, message: str):
        super().__init__(message, code="store_decode_failed")


def encode_menu(entries: list[MenuEntry]) -> str:
    """Indented JSON array, the same text that is written to disk and broadcast."""
    return json.dumps(
        [e.model_dump() for e in entries],
        ensure_ascii=False,
        indent=4,
    )


def decode_menu(text: str) -> list[MenuEntry]:
    """Parse persisted menu text. Empty text and ``null`` both mean an empty menu."""
    if not text.strip():
        return []
    try:
        raw = json.loads(text)
    except json.JSONDecodeError as e:
        raise MenuDecodeError(f"Menu file is not valid JSON: {e}") from e
    if raw is None:
        return []
    if not isinstance(raw, list):
        raise MenuDecodeError(f"Menu file must hold a JSON array, got {type(raw).__name__}")
    try:
        return [MenuEntry.model_validate(item) for item in raw]
    except ValidationError as e:
        raise MenuDecodeError(f"Menu file holds an invalid entry: {e}") from e


class MenuStore:
    """Single authoritative, persisted view of the menu.

    Every operation, reads included, runs its read-modify-persist sequence under
    one lock, so callers never observe a half-applied change.
    """

    def __init__(self, menu_file: Path):
        self.menu_file = Path(menu_file)
        self._lock = threading.Lock()
        self.ensure_seeded()

    def _read(self) -> list[MenuEntry]:
        try:
            with open(self.menu_file, "r", encoding="utf-8") as f:
                text = f.read()
        except FileNotFoundError:
            return []
        except UnicodeDecodeError as e:
            raise MenuDecodeError(f"Menu file is not valid UTF-8: {e}") from e
        except OSError as e:
            raise StoreError(f"Failed to read menu: {e}", code="store_read_failed") from e
        return decode_menu(text)

    def _write(self, entries: list[MenuEntry]) -> str:
        # Encode fully before touching the file.
        data = encode_menu(entries)
        try:
            with open(self.menu_file, "w", encoding="utf-8") as f:
                f.write(data)
        except OSError as e:
            raise StoreError(f"Failed to save menu: {e}", code="store_write_failed") from e
        return data

    def read(self) -> list[MenuEntry]:
        with self._lock:
            return self._read()

    def snapshot(self) -> MenuSnapshot:
        with self._lock:
            entries = self._read()
            return MenuSnapshot(entries, encode_menu(entries))

    def append(self, entry: MenuEntry) -> MenuSnapshot:
        """Append ``entry`` at the tail. The caller assigns ``entry.id``."""
        with self._lock:
            entries = self._read()
            entries.append(entry)
            data = self._write(entries)
        logger.info("Menu entry added: id=%s dish=%r who=%r", entry.id, entry.dish, entry.who)
        return MenuSnapshot(entries, data)

    def remove(self, entry_id: str) -> MenuSnapshot:
        """Drop every entry with ``entry_id``. An unknown id still rewrites the file."""
        with self._lock:
            entries = [e for e in self._read() if e.id != entry_id]
            data = self._write(entries)
        logger.info("Menu entry removed: id=%s (%d left)", entry_id, len(entries))
        return MenuSnapshot(entries, data)

    def ensure_seeded(self) -> bool:
        """Write the seed menu if no file exists yet. Returns True when it wrote one."""
        with self._lock:
            if self.menu_file.exists():
                return False
            try:
                self.menu_file.parent.mkdir(parents=True, exist_ok=True)
                self._write(SEED_MENU)
            except OSError as e:
                logger.error("Failed to create menu directory %s: %s", self.menu_file.parent, e)
                return False
            except StoreError as e:
                logger.error("Failed to create default menu file: %s", e.message)
                return False
        logger.info("Created default menu at %s", self.menu_file)
        return True
