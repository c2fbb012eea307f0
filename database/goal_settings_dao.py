import logging

from database.collection_dao import ROW_ERRORS
from database.db_manager import DatabaseManager
from models.goal_settings import GoalSettings
from utils.constants import DATASET_GOAL_SETTINGS

logger = logging.getLogger(__name__)


class GoalSettingsDAO:
    def __init__(self, db: DatabaseManager):
        self._db = db
        self._settings: GoalSettings | None = None

    def get(self) -> GoalSettings:
        if self._settings is None:
            raw = self._db.load_dataset(DATASET_GOAL_SETTINGS, {})
            try:
                self._settings = GoalSettings.from_dict(raw if isinstance(raw, dict) else {})
            except ROW_ERRORS:
                logger.warning({"event": "load_dataset", "dataset": DATASET_GOAL_SETTINGS, "status": "corrupt"})
                self._settings = GoalSettings()
        return self._settings

    def save(self, settings: GoalSettings) -> GoalSettings:
        self._settings = settings
        self._db.save_dataset(DATASET_GOAL_SETTINGS, settings.to_dict())
        return settings

    def reload(self):
        self._settings = None
