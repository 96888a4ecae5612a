import logging
import os
from logging.handlers import RotatingFileHandler
from typing import Optional

ROOT_LOGGER_NAME = "quiz"
LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'

# Fields never written to the log, even when passed in `extra` or metrics.
SENSITIVE_FIELDS = ("answers", "text", "raw_answers")


def get_logger(name: str) -> logging.Logger:
    """
    Returns a logger nested under the application namespace.
    Handlers live on the root application logger only.
    """
    root = logging.getLogger(ROOT_LOGGER_NAME)
    # Prevent double configuration
    if not root.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        root.addHandler(handler)
        root.setLevel(logging.INFO)

    if name == ROOT_LOGGER_NAME or name.startswith(ROOT_LOGGER_NAME + "."):
        return logging.getLogger(name)
    return logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}")


def configure_logging(level: str = "INFO", log_dir: Optional[str] = None) -> logging.Logger:
    """Applies level and optional rotating file output from settings."""
    root = get_logger(ROOT_LOGGER_NAME)
    root.setLevel(level.upper())

    if log_dir:
        os.makedirs(log_dir, exist_ok=True)
        path = os.path.join(log_dir, "quiz.log")
        already = any(
            isinstance(h, RotatingFileHandler) and h.baseFilename == os.path.abspath(path)
            for h in root.handlers
        )
        if not already:
            handler = RotatingFileHandler(
                path,
                maxBytes=1024*1024, # 1MB
                backupCount=3
            )
            handler.setFormatter(logging.Formatter(LOG_FORMAT))
            root.addHandler(handler)
    return root


class TelemetryLogger:
    def __init__(self, name: str = "telemetry"):
        self.logger = get_logger(name)

    def log_event(self, event_type: str, metrics: dict):
        """
        Logs a structured event.
        CRITICAL: Do NOT log raw answers.
        """
        safe_metrics = {k: v for k, v in metrics.items() if k not in SENSITIVE_FIELDS}
        self.logger.info(f"EVENT: {event_type} - {safe_metrics}", extra={"event": event_type})

    def log_error(self, error_type: str, message: str):
        self.logger.error(f"ERROR: {error_type} - {message}")
