"""
Menu Directory
Holds the latest snapshot of the `menus` collection and notifies dependents
once per effective change.
"""
import logging
import threading
from typing import Callable, Dict, Iterable, List, Optional, Tuple

from planboard.models.records import MenuEntry, MenuKind

logger = logging.getLogger(__name__)

MENUS_COLLECTION = "menus"

Subscriber = Callable[[Tuple[MenuEntry, ...]], None]


def _sort_key(entry: MenuEntry):
    return (entry.order, entry.name, entry.id)


class MenuDirectory:
    """In-memory list of MenuEntry values fed by a Firestore watch"""

    def __init__(self, entries: Iterable[MenuEntry] = ()):
        self._lock = threading.RLock()
        self._entries: Tuple[MenuEntry, ...] = tuple(sorted(entries, key=_sort_key))
        self._links: List[Dict[str, str]] = self._build_links(self._entries)
        self._subscribers: List[Subscriber] = []
        self._watch = None

    @property
    def live(self) -> bool:
        return self._watch is not None

    def get(self) -> Tuple[MenuEntry, ...]:
        return self._entries

    def links(self) -> List[Dict[str, str]]:
        return list(self._links)

    def subscribe(self, callback: Subscriber) -> Callable[[], None]:
        with self._lock:
            self._subscribers.append(callback)

        def unsubscribe():
            with self._lock:
                if callback in self._subscribers:
                    self._subscribers.remove(callback)

        return unsubscribe

    def refresh(self, raw_entries: Iterable[MenuEntry]) -> bool:
        """Replace the held set. Returns False when nothing changed."""
        snapshot = tuple(sorted(raw_entries, key=_sort_key))
        with self._lock:
            if snapshot == self._entries:
                logger.debug("Menu refresh ignored: snapshot unchanged")
                return False
            self._entries = snapshot
            self._links = self._build_links(snapshot)
            subscribers = list(self._subscribers)

        logger.info("Menu directory refreshed: %d entries", len(snapshot))
        for callback in subscribers:
            try:
                callback(snapshot)
            except Exception:
                logger.exception("Menu directory subscriber failed")
        return True

    def find(self, menu_id: str) -> Optional[MenuEntry]:
        for entry in self._entries:
            if entry.id == menu_id:
                return entry
        return None

    def find_by_slug(self, slug: str) -> Optional[MenuEntry]:
        for entry in self._entries:
            if entry.slug == slug:
                return entry
        return None

    # Firestore wiring

    def attach(self, db) -> None:
        """Start the live subscription on the menus collection"""
        if self._watch is not None:
            return
        self._watch = db.collection(MENUS_COLLECTION).on_snapshot(self._on_snapshot)
        logger.info("Menu directory subscribed to '%s'", MENUS_COLLECTION)

    def detach(self) -> None:
        if self._watch is None:
            return
        try:
            self._watch.unsubscribe()
        finally:
            self._watch = None

    def sync(self, db) -> bool:
        """One-shot load for when no live watch is attached"""
        return self.refresh(self._convert(db.collection(MENUS_COLLECTION).stream()))

    def _on_snapshot(self, docs, changes, read_time):
        self.refresh(self._convert(docs))

    @staticmethod
    def _convert(docs) -> List[MenuEntry]:
        entries = []
        for doc in docs:
            try:
                entries.append(MenuEntry.from_document(doc))
            except ValueError as e:
                logger.warning("Skipping malformed menu document %s: %s", doc.id, e)
        return entries

    @staticmethod
    def _build_links(entries: Tuple[MenuEntry, ...]) -> List[Dict[str, str]]:
        links = []
        for entry in entries:
            if entry.kind is MenuKind.EXTERNAL_LINK:
                if not entry.url:
                    continue
                href, external = entry.url, True
            else:
                href, external = f"/{entry.slug}", False
            links.append({
                "menu_id": entry.id,
                "name": entry.name,
                "icon": entry.icon,
                "href": href,
                "external": external,
            })
        return links


def current_directory(db=None) -> MenuDirectory:
    """Directory owned by the running app; re-read from Firestore when no watch is live"""
    from flask import current_app

    directory = current_app.extensions["menu_directory"]
    if not directory.live and db is not None:
        directory.sync(db)
    return directory
