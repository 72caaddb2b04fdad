from blogcms.configs.logger import configure_logging, file_logger
from blogcms.configs.settings import (
    ACTIVITY_LOG_COLLECTION,
    Settings,
    engine_kwargs,
    mongo_kwargs,
    settings,
)

__all__ = [
    "ACTIVITY_LOG_COLLECTION",
    "Settings",
    "configure_logging",
    "engine_kwargs",
    "file_logger",
    "mongo_kwargs",
    "settings",
]
