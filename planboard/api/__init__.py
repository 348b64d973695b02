from flask import Blueprint

# Core blueprints
auth_bp = Blueprint("auth", __name__, url_prefix="/api/auth")
menus_bp = Blueprint("menus", __name__, url_prefix="/api/menus")
navigation_bp = Blueprint("navigation", __name__, url_prefix="/api/navigation")
tasks_bp = Blueprint("tasks", __name__, url_prefix="/api/tasks")

# Additional domain blueprints
assignees_bp = Blueprint("assignees", __name__, url_prefix="/api/assignees")
comments_bp = Blueprint("comments", __name__, url_prefix="/api/comments")
notifications_bp = Blueprint("notifications", __name__, url_prefix="/api/notifications")
activity_bp = Blueprint("activity", __name__, url_prefix="/api/activity")

# Import modules so routes attach
from . import auth  # noqa
from . import menus  # noqa
from . import navigation  # noqa
from . import tasks  # noqa
from . import assignees  # noqa
from . import comments  # noqa
from . import notifications  # noqa
from . import activity  # noqa

__all__ = [
    "auth_bp",
    "menus_bp",
    "navigation_bp",
    "tasks_bp",
    "assignees_bp",
    "comments_bp",
    "notifications_bp",
    "activity_bp",
]
