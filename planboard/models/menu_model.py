import logging
from typing import Any, Dict, List, Optional

from google.cloud.firestore_v1.base_query import FieldFilter

from planboard.models.base import FirestoreModel
from planboard.models.records import MenuEntry, MenuKind
from planboard.services.path_resolver import is_reserved
from planboard.utils.errors import DuplicateSlugError, NotFoundError, ReservedSlugError, ValidationError
from planboard.utils.validators import Helpers, Validators, MAX_SLUG_LENGTH, normalize_path

logger = logging.getLogger(__name__)


class MenuModel(FirestoreModel):
    """Menu data model for Firestore operations"""

    collection_name = "menus"
    resource_name = "Menu"

    def list_menus(self) -> List[MenuEntry]:
        with self.transport("list menus"):
            docs = list(self.collection.stream())
        entries = []
        for doc in docs:
            try:
                entries.append(MenuEntry.from_document(doc))
            except ValueError as e:
                logger.warning("Skipping malformed menu document %s: %s", doc.id, e)
        return sorted(entries, key=lambda e: (e.order, e.name, e.id))

    def get_menu(self, menu_id: str) -> MenuEntry:
        doc = self._get_snapshot(menu_id)
        try:
            return MenuEntry.from_document(doc)
        except ValueError as e:
            logger.warning("Menu document %s is malformed: %s", menu_id, e)
            raise NotFoundError(self.resource_name) from e

    def validate_slug(self, raw_slug: Any, menu_id: Optional[str] = None) -> str:
        """Canonicalize and check a slug before it is written.

        Order matters: format, then reserved static names, then uniqueness.
        """
        slug = normalize_path(raw_slug)
        if not Validators.validate_slug(slug):
            raise ValidationError(
                f"Invalid slug '{raw_slug}': use lower-case letters, digits and single hyphens "
                f"(max {MAX_SLUG_LENGTH} characters)"
            )
        if is_reserved(slug):
            raise ReservedSlugError(f"Slug '{slug}' is reserved for a built-in page")

        with self.transport("check slug"):
            clashes = self.collection.where(filter=FieldFilter("slug", "==", slug)).limit(2).stream()
            clash_ids = [d.id for d in clashes if d.id != menu_id]
        if clash_ids:
            raise DuplicateSlugError(f"Slug '{slug}' is already used by another menu")
        return slug

    def _validate_kind_and_url(self, kind: MenuKind, url: Optional[str]) -> Optional[str]:
        if kind is MenuKind.EXTERNAL_LINK:
            url = Helpers.sanitize_string(url)
            if not Validators.validate_url(url):
                raise ValidationError("External link menus require an absolute http(s) url")
            return url
        return None

    @staticmethod
    def _parse_kind(value: Any) -> MenuKind:
        try:
            return MenuKind.parse(value)
        except ValueError as e:
            raise ValidationError(str(e)) from e

    @staticmethod
    def _parse_order(value: Any) -> int:
        try:
            return int(value)
        except (TypeError, ValueError) as e:
            raise ValidationError("order must be an integer") from e

    def create_menu(self, payload: Dict[str, Any]) -> MenuEntry:
        name = Helpers.sanitize_string(payload.get("name"))
        if not Validators.validate_name(name):
            raise ValidationError("name is required (max 100 characters)")

        kind = self._parse_kind(payload.get("kind"))
        url = self._validate_kind_and_url(kind, payload.get("url"))
        slug = self.validate_slug(payload.get("slug"))

        if payload.get("order") is not None:
            order = self._parse_order(payload.get("order"))
        else:
            order = len(self.list_menus())

        ref = self.collection.document()
        doc = {
            "slug": slug,
            "name": name,
            "icon": Helpers.sanitize_string(payload.get("icon")),
            "order": order,
            "kind": kind.value,
            "url": url,
            "created_at": Helpers.now_iso(),
            "updated_at": Helpers.now_iso(),
        }
        with self.transport("create menu"):
            ref.set(doc)
        logger.info("Created menu %s with slug '%s'", ref.id, slug)
        return MenuEntry.from_dict(ref.id, doc)

    def update_menu(self, menu_id: str, payload: Dict[str, Any]) -> MenuEntry:
        current = self.get_menu(menu_id)
        updates: Dict[str, Any] = {}

        if "name" in payload:
            name = Helpers.sanitize_string(payload.get("name"))
            if not Validators.validate_name(name):
                raise ValidationError("name is required (max 100 characters)")
            updates["name"] = name

        if "icon" in payload:
            updates["icon"] = Helpers.sanitize_string(payload.get("icon"))

        if "order" in payload:
            updates["order"] = self._parse_order(payload.get("order"))

        kind = current.kind
        if "kind" in payload:
            kind = self._parse_kind(payload.get("kind"))
            updates["kind"] = kind.value
        if "kind" in payload or "url" in payload:
            updates["url"] = self._validate_kind_and_url(kind, payload.get("url", current.url))

        if "slug" in payload:
            slug = self.validate_slug(payload.get("slug"), menu_id=menu_id)
            if slug != current.slug:
                updates["slug"] = slug

        if not updates:
            return current

        updates["updated_at"] = Helpers.now_iso()
        with self.transport("update menu"):
            self.collection.document(menu_id).update(updates)
        if "slug" in updates:
            logger.info("Menu %s slug changed '%s' -> '%s'", menu_id, current.slug, updates["slug"])

        merged = current.to_dict()
        merged.update(updates)
        return MenuEntry.from_dict(menu_id, merged)

    def delete_menu(self, menu_id: str) -> MenuEntry:
        """Delete a menu and the tasks listed under it.

        Activity rows, comments and notifications keep their menu_id and
        resolve to the fallback page from now on.
        """
        current = self.get_menu(menu_id)
        with self.transport("delete menu"):
            tasks = list(self.db.collection("tasks").where(filter=FieldFilter("menu_id", "==", menu_id)).stream())
            batch = self.db.batch()
            for task in tasks:
                batch.delete(task.reference)
            batch.delete(self.collection.document(menu_id))
            batch.commit()
        logger.info("Deleted menu %s and %d tasks", menu_id, len(tasks))
        return current
