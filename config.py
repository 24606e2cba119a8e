"""
Habit Grid configuration read from environment variables.
"""

import logging
import os
from dataclasses import dataclass
from enum import Enum


class LogLevel(Enum):
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"


@dataclass
class Settings:
    data_file: str = "data/storage.json"
    storage_key: str = "habits"
    log_level: LogLevel = LogLevel.INFO


def load_settings(environ=None) -> Settings:
    env = os.environ if environ is None else environ

    level_name = env.get("HABIT_GRID_LOG_LEVEL", LogLevel.INFO.value).upper()
    try:
        log_level = LogLevel(level_name)
    except ValueError:
        log_level = LogLevel.INFO

    return Settings(
        data_file=env.get("HABIT_GRID_DATA_FILE") or Settings.data_file,
        storage_key=env.get("HABIT_GRID_STORAGE_KEY") or Settings.storage_key,
        log_level=log_level,
    )


def setup_logging(settings: Settings) -> None:
    """Configure root logging once; later calls only adjust the level"""
    root = logging.getLogger()
    if not root.handlers:
        logging.basicConfig(format="%(asctime)s - %(name)s - %(levelname)s - %(message)s")
    root.setLevel(settings.log_level.value)
