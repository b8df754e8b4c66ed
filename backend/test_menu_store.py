"""
Menu store persistence tests.
Run: python -m pytest backend  (or python -m unittest discover -s backend)
"""

import json
import shutil
import tempfile
import threading
import unittest
from pathlib import Path

from repositories.menu_store import (
    SEED_MENU,
    MenuDecodeError,
    MenuStore,
    StoreError,
    decode_menu,
    encode_menu,
)
from schemas.menu import MenuEntry


def _write_menu(path: Path, entries: list[dict]) -> None:
    path.write_text(json.dumps(entries), encoding="utf-8")


class TestMenuStoreSeeding(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory(prefix="menu_store_")
        self.menu_file = Path(self._tmp.name) / "data" / "menu.json"

    def tearDown(self) -> None:
        self._tmp.cleanup()

    def test_new_store_writes_seed_menu(self) -> None:
        self.assertFalse(self.menu_file.exists())
        MenuStore(self.menu_file)

        raw = json.loads(self.menu_file.read_text(encoding="utf-8"))
        self.assertEqual(
            raw,
            [
                {"id": "1763786780838787402", "dish": "Turkey", "who": "Will"},
                {"id": "1763786910210202650", "dish": "Dessert", "who": "Sarah"},
            ],
        )

    def test_seed_file_is_indented_with_four_spaces(self) -> None:
        MenuStore(self.menu_file)
        text = self.menu_file.read_text(encoding="utf-8")
        self.assertTrue(text.startswith("[\n    {\n        \"id\""))

    def test_seeding_is_idempotent(self) -> None:
        store = MenuStore(self.menu_file)
        before = self.menu_file.read_bytes()
        self.assertFalse(store.ensure_seeded())
        self.assertFalse(store.ensure_seeded())
        self.assertEqual(self.menu_file.read_bytes(), before)

    def test_seeding_never_overwrites_existing_content(self) -> None:
        self.menu_file.parent.mkdir(parents=True)
        self.menu_file.write_text("", encoding="utf-8")
        store = MenuStore(self.menu_file)
        self.assertEqual(self.menu_file.read_text(encoding="utf-8"), "")
        self.assertEqual(store.read(), [])

    def test_unusable_directory_is_logged_not_raised(self) -> None:
        blocker = Path(self._tmp.name) / "blocker"
        blocker.write_text("not a directory", encoding="utf-8")
        with self.assertLogs("repositories.menu_store", level="ERROR"):
            store = MenuStore(blocker / "menu.json")
        self.assertFalse(store.ensure_seeded())
        with self.assertRaises(StoreError) as ctx:
            store.read()
        self.assertEqual(ctx.exception.code, "store_read_failed")


class TestMenuStoreOperations(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory(prefix="menu_store_")
        self.menu_file = Path(self._tmp.name) / "menu.json"
        _write_menu(self.menu_file, [])
        self.store = MenuStore(self.menu_file)

    def tearDown(self) -> None:
        self._tmp.cleanup()

    def test_read_missing_file_returns_empty_menu(self) -> None:
        self.menu_file.unlink()
        self.assertEqual(self.store.read(), [])

    def test_read_empty_file_returns_empty_menu(self) -> None:
        self.menu_file.write_bytes(b"")
        self.assertEqual(self.store.read(), [])

    def test_read_null_returns_empty_menu(self) -> None:
        self.menu_file.write_text("null", encoding="utf-8")
        self.assertEqual(self.store.read(), [])

    def test_read_malformed_file_raises_decode_error(self) -> None:
        self.menu_file.write_text("{not json", encoding="utf-8")
        with self.assertRaises(MenuDecodeError) as ctx:
            self.store.read()
        self.assertEqual(ctx.exception.code, "store_decode_failed")

    def test_read_non_array_raises_decode_error(self) -> None:
        self.menu_file.write_text('{"id": "1"}', encoding="utf-8")
        with self.assertRaises(MenuDecodeError):
            self.store.read()

    def test_read_unreadable_path_raises_store_error(self) -> None:
        store = MenuStore(Path(self._tmp.name))  # a directory, not a file
        with self.assertRaises(StoreError) as ctx:
            store.read()
        self.assertEqual(ctx.exception.code, "store_read_failed")

    def test_append_adds_at_tail_and_persists(self) -> None:
        _write_menu(self.menu_file, [{"id": "1", "dish": "Stuffing", "who": "Pat"}])
        result = self.store.append(MenuEntry(id="2", dish="Cornbread", who="Jess"))

        self.assertEqual([e.id for e in result.entries], ["1", "2"])
        self.assertEqual(self.menu_file.read_text(encoding="utf-8"), result.encoded)
        self.assertEqual(self.store.read(), result.entries)

    def test_remove_keeps_order_of_remaining_entries(self) -> None:
        _write_menu(
            self.menu_file,
            [
                {"id": "1", "dish": "Pumpkin Pie", "who": "Alex"},
                {"id": "2", "dish": "Cranberry Sauce", "who": "Maya"},
                {"id": "3", "dish": "Rolls", "who": "Sam"},
            ],
        )
        result = self.store.remove("2")
        self.assertEqual([e.id for e in result.entries], ["1", "3"])
        self.assertEqual([e.id for e in self.store.read()], ["1", "3"])

    def test_remove_unknown_id_is_a_successful_no_op(self) -> None:
        _write_menu(self.menu_file, [{"id": "1", "dish": "Pumpkin Pie", "who": "Alex"}])
        before = self.store.read()
        result = self.store.remove("does-not-exist")
        self.assertEqual(result.entries, before)
        self.assertEqual(self.store.read(), before)

    def test_remove_last_entry_persists_empty_array(self) -> None:
        _write_menu(self.menu_file, [{"id": "1", "dish": "Pumpkin Pie", "who": "Alex"}])
        result = self.store.remove("1")
        self.assertEqual(result.encoded, "[]")
        self.assertEqual(self.menu_file.read_text(encoding="utf-8"), "[]")

    def test_failed_read_leaves_file_untouched(self) -> None:
        self.menu_file.write_text("{not json", encoding="utf-8")
        with self.assertRaises(MenuDecodeError):
            self.store.append(MenuEntry(id="9", dish="Gravy", who="Lee"))
        self.assertEqual(self.menu_file.read_text(encoding="utf-8"), "{not json")

    def test_concurrent_appends_lose_no_updates(self) -> None:
        def add_many(worker: int) -> None:
            for n in range(25):
                self.store.append(MenuEntry(id=f"{worker}-{n}", dish=f"Dish {n}", who=f"Guest {worker}"))

        threads = [threading.Thread(target=add_many, args=(w,)) for w in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        expected = {f"{w}-{n}" for w in range(8) for n in range(25)}
        in_memory = [e.id for e in self.store.read()]
        self.assertEqual(len(in_memory), 200)
        self.assertEqual(set(in_memory), expected)

        on_disk = decode_menu(self.menu_file.read_text(encoding="utf-8"))
        self.assertEqual({e.id for e in on_disk}, expected)
        # Each worker's entries keep their own order.
        for w in range(8):
            mine = [e.id for e in on_disk if e.who == f"Guest {w}"]
            self.assertEqual(mine, [f"{w}-{n}" for n in range(25)])

    def test_write_failure_raises_store_error(self) -> None:
        menu_dir = Path(self._tmp.name) / "gone"
        store = MenuStore(menu_dir / "menu.json")
        shutil.rmtree(menu_dir)

        with self.assertRaises(StoreError) as ctx:
            store.append(MenuEntry(id="1", dish="Gravy", who="Lee"))
        self.assertEqual(ctx.exception.code, "store_write_failed")
        with self.assertRaises(StoreError) as ctx:
            store.remove("1")
        self.assertEqual(ctx.exception.code, "store_write_failed")
        self.assertFalse(menu_dir.exists())

    def test_snapshot_matches_file_content(self) -> None:
        seeded = Path(self._tmp.name) / "seeded.json"
        store = MenuStore(seeded)
        snap = store.snapshot()
        self.assertEqual(snap.entries, SEED_MENU)
        self.assertEqual(snap.encoded, seeded.read_text(encoding="utf-8"))


class TestMenuEncoding(unittest.TestCase):
    def test_decode_inverts_encode_preserving_order(self) -> None:
        menu = [
            MenuEntry(id="3", dish="Crème brûlée", who="Zoë"),
            MenuEntry(id="1", dish="Turkey", who="Will"),
        ]
        self.assertEqual(decode_menu(encode_menu(menu)), menu)

    def test_encode_keeps_field_order_and_utf8(self) -> None:
        text = encode_menu([MenuEntry(id="1", dish="Crème", who="Zoë")])
        self.assertIn('"id": "1",\n        "dish": "Crème",\n        "who": "Zoë"', text)

    def test_encode_empty_menu(self) -> None:
        self.assertEqual(encode_menu([]), "[]")


if __name__ == "__main__":
    unittest.main()
