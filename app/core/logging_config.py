"""
Application logging configuration.

- General app logs: {LOG_DIR}/app.log
- Photo upload logs: {LOG_DIR}/uploads.log (separate file)
"""

import logging
import sys
from pathlib import Path
from typing import Optional

from app.core.config import get_settings


# Logger name used by the file upload service (has its own log file)
UPLOADS_LOGGER_NAME = "uploads"

# Format for log messages
LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def setup_logging(
    log_dir: Optional[str] = None,
    log_level: Optional[str] = None,
) -> None:
    """
    Configure application logging at startup.

    - Creates log directory if it does not exist.
    - App (root) logger: writes to {log_dir}/app.log and to console.
    - Logger "uploads": writes only to {log_dir}/uploads.log (no propagation to root).

    **Input (request):**
        - log_dir: Directory for log files. Default from settings LOG_DIR (default "logs").
        - log_level: Level name (DEBUG, INFO, WARNING, ERROR). Default from settings LOG_LEVEL (default "INFO").

    **Output (response):** None.
    """
    settings = get_settings()
    dir_path = Path(log_dir or settings.LOG_DIR)
    dir_path.mkdir(parents=True, exist_ok=True)
    level = getattr(logging, (log_level or settings.LOG_LEVEL).upper(), logging.INFO)

    formatter = logging.Formatter(LOG_FORMAT, datefmt=LOG_DATE_FORMAT)

    # ---- Root / app logger: app.log + console ----
    app_file_handler = logging.FileHandler(dir_path / "app.log", encoding="utf-8")
    app_file_handler.setLevel(level)
    app_file_handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    # Remove existing handlers to avoid duplicates on reload
    for h in root_logger.handlers[:]:
        root_logger.removeHandler(h)
    root_logger.addHandler(app_file_handler)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    # ---- Upload logger: uploads.log only ----
    uploads_file_handler = logging.FileHandler(dir_path / "uploads.log", encoding="utf-8")
    uploads_file_handler.setLevel(level)
    uploads_file_handler.setFormatter(formatter)

    uploads_logger = logging.getLogger(UPLOADS_LOGGER_NAME)
    uploads_logger.setLevel(level)
    uploads_logger.propagate = False
    for h in uploads_logger.handlers[:]:
        uploads_logger.removeHandler(h)
    uploads_logger.addHandler(uploads_file_handler)
