"""
Path Resolver
Maps a browser path to a static page, a task-list menu (by its current slug)
or a not-found outcome. Resolution never raises.
"""
from typing import Dict, Optional

from planboard.config.settings import Settings
from planboard.models.records import MenuKind, ResolvedRoute, RouteKind
from planboard.utils.validators import normalize_path

# Reserved path segments. Menu slugs may never take one of these names.
STATIC_ROUTES: Dict[str, str] = {
    "": "overview",
    "tongquan": "overview",
    "login": "login",
    "admin": "admin",
    "quanly": "plan-management",
    "activity": "activity-log",
    "notifications": "notifications",
    "assignees": "assignees",
}


def is_reserved(slug: str) -> bool:
    return normalize_path(slug) in STATIC_ROUTES


def resolve_path(path: Optional[str], directory, default_route: Optional[str] = None) -> ResolvedRoute:
    normalized = normalize_path(path)

    page_id = STATIC_ROUTES.get(normalized)
    if page_id is not None:
        return ResolvedRoute(kind=RouteKind.STATIC, path=f"/{normalized}", page_id=page_id)

    entry = directory.find_by_slug(normalized)
    if entry is not None and entry.kind is MenuKind.TASK_LIST:
        return ResolvedRoute(
            kind=RouteKind.DYNAMIC,
            path=f"/{normalized}",
            menu_id=entry.id,
            name=entry.name,
            current_slug=entry.slug,
        )

    return ResolvedRoute(
        kind=RouteKind.NOT_FOUND,
        path=f"/{normalized}",
        redirect_to=default_route or Settings.DEFAULT_ROUTE,
    )


def path_for_menu(menu_id: Optional[str], directory) -> Optional[str]:
    """Current path of a menu, or None when it no longer exists"""
    if not menu_id:
        return None
    entry = directory.find(menu_id)
    if entry is None:
        return None
    if entry.kind is MenuKind.EXTERNAL_LINK:
        return entry.url
    return f"/{entry.slug}"
