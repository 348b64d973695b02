"""Typed records shared by the directory, resolver and recorder."""
from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from planboard.utils.validators import normalize_path


class MenuKind(str, enum.Enum):
    TASK_LIST = "task-list"
    EXTERNAL_LINK = "external-link"

    @classmethod
    def parse(cls, value: Any) -> "MenuKind":
        if isinstance(value, cls):
            return value
        text = str(value or "").strip().lower().replace("_", "-")
        if text in ("external-link", "link", "external"):
            return cls.EXTERNAL_LINK
        if text in ("", "task-list", "tasks", "task"):
            return cls.TASK_LIST
        raise ValueError(f"Unknown menu kind: {value!r}")


class RouteKind(str, enum.Enum):
    STATIC = "static"
    DYNAMIC = "dynamic"
    NOT_FOUND = "notFound"


class ActionKind(str, enum.Enum):
    TASK_CREATED = "task_created"
    TASK_UPDATED = "task_updated"
    TASK_COMPLETED = "task_completed"
    TASK_REOPENED = "task_reopened"
    TASK_DELETED = "task_deleted"
    COMMENT_ADDED = "comment_added"
    MENU_CREATED = "menu_created"
    MENU_UPDATED = "menu_updated"
    MENU_DELETED = "menu_deleted"


@dataclass(frozen=True)
class MenuEntry:
    """One navigable section of the dashboard."""

    id: str
    slug: str
    name: str
    icon: str = ""
    order: int = 0
    kind: MenuKind = MenuKind.TASK_LIST
    url: Optional[str] = None

    @classmethod
    def from_dict(cls, menu_id: str, data: Dict[str, Any]) -> "MenuEntry":
        try:
            order = int(data.get("order") or 0)
        except (TypeError, ValueError):
            order = 0
        return cls(
            id=menu_id,
            slug=normalize_path(data.get("slug")),
            name=str(data.get("name") or ""),
            icon=str(data.get("icon") or ""),
            order=order,
            kind=MenuKind.parse(data.get("kind")),
            url=data.get("url") or None,
        )

    @classmethod
    def from_document(cls, doc) -> "MenuEntry":
        return cls.from_dict(doc.id, doc.to_dict() or {})

    def to_dict(self) -> Dict[str, Any]:
        return {
            "menu_id": self.id,
            "slug": self.slug,
            "name": self.name,
            "icon": self.icon,
            "order": self.order,
            "kind": self.kind.value,
            "url": self.url,
        }


@dataclass(frozen=True)
class ResolvedRoute:
    """Outcome of resolving a path; recomputed on every request."""

    kind: RouteKind
    path: str
    page_id: Optional[str] = None
    menu_id: Optional[str] = None
    name: Optional[str] = None
    current_slug: Optional[str] = None
    redirect_to: Optional[str] = None

    @property
    def found(self) -> bool:
        return self.kind is not RouteKind.NOT_FOUND

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"kind": self.kind.value, "path": self.path}
        if self.kind is RouteKind.STATIC:
            data["page_id"] = self.page_id
        elif self.kind is RouteKind.DYNAMIC:
            data.update(menu_id=self.menu_id, name=self.name, current_slug=self.current_slug)
        else:
            data["redirect_to"] = self.redirect_to
        return data


@dataclass(frozen=True)
class ActionRecord:
    """Something a user did, tied to a menu by its immutable id."""

    action: ActionKind
    menu_id: Optional[str]
    actor_id: Optional[str] = None
    actor_name: Optional[str] = None
    task_id: Optional[str] = None
    task_name: Optional[str] = None
    content: str = ""
    created_at: Optional[str] = None
    record_id: Optional[str] = None
    extra: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_document(cls, doc) -> "ActionRecord":
        data = doc.to_dict() or {}
        return cls(
            action=ActionKind(data.get("action")),
            menu_id=data.get("menu_id"),
            actor_id=data.get("actor_id"),
            actor_name=data.get("actor_name"),
            task_id=data.get("task_id"),
            task_name=data.get("task_name"),
            content=data.get("content") or "",
            created_at=data.get("created_at"),
            record_id=doc.id,
            extra=data.get("extra") or {},
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "action": self.action.value,
            "menu_id": self.menu_id,
            "actor_id": self.actor_id,
            "actor_name": self.actor_name,
            "task_id": self.task_id,
            "task_name": self.task_name,
            "content": self.content,
            "created_at": self.created_at,
            "extra": dict(self.extra),
        }


@dataclass(frozen=True)
class NavigationTarget:
    path: str
    exists: bool
    message: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {"path": self.path, "exists": self.exists, "message": self.message}
