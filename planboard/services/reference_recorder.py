"""
Stable-Reference Recorder
Action records keep the menu id; the human path is looked up again every
time a record is replayed, so a slug rename never leaves a stale link.
"""
import logging
from typing import Optional

from planboard.config.settings import Settings
from planboard.models.records import ActionKind, ActionRecord, NavigationTarget
from planboard.services.path_resolver import path_for_menu
from planboard.utils.validators import Helpers

logger = logging.getLogger(__name__)

REMOVED_SECTION_MESSAGE = "This section was removed"


class ReferenceRecorder:
    def __init__(self, directory, fallback_path: Optional[str] = None):
        self.directory = directory
        self.fallback_path = fallback_path or Settings.DEFAULT_ROUTE

    @staticmethod
    def record(action: ActionKind, menu_id: Optional[str], **details) -> ActionRecord:
        """Build a record for an action taken inside menu `menu_id`.

        The menu is not checked here; it may be deleted before the record is
        ever replayed.
        """
        details.setdefault("created_at", Helpers.now_iso())
        return ActionRecord(action=ActionKind(action), menu_id=menu_id, **details)

    def resolve_navigation_target(self, record: ActionRecord) -> NavigationTarget:
        path = path_for_menu(record.menu_id, self.directory)
        if path is None:
            logger.info("Stale menu reference %s on record %s", record.menu_id, record.record_id)
            return NavigationTarget(path=self.fallback_path, exists=False, message=REMOVED_SECTION_MESSAGE)
        return NavigationTarget(path=path, exists=True)
