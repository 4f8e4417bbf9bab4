"""
Logging setup and management module

Configures logging for the whole application in one place.
"""

import logging
import logging.handlers
from datetime import datetime
from pathlib import Path
from typing import Optional

from config.settings import get_logging_config


class AppLogger:
    """Application logger"""

    def __init__(self, log_dir: Optional[str] = None):
        self.config = get_logging_config()
        self.log_dir = Path(log_dir or self.config.log_dir)
        self._setup_logging()

    def _setup_logging(self) -> None:
        """Logging setup"""
        level = getattr(logging, self.config.level, logging.INFO)
        formatter = logging.Formatter(self.config.format)

        root_logger = logging.getLogger()
        root_logger.setLevel(level)
        root_logger.handlers.clear()

        # console handler
        console_handler = logging.StreamHandler()
        console_handler.setLevel(level)
        console_handler.setFormatter(formatter)
        root_logger.addHandler(console_handler)

        if not self.config.to_file:
            return

        self.log_dir.mkdir(parents=True, exist_ok=True)

        # file handler (general log)
        log_file = (
            self.log_dir
            / f"{self.config.file_prefix}_{datetime.now().strftime('%Y%m%d')}.log"
        )
        file_handler = logging.handlers.RotatingFileHandler(
            log_file,
            maxBytes=self.config.max_bytes,
            backupCount=self.config.backup_count,
            encoding="utf-8",
        )
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        root_logger.addHandler(file_handler)

        # error log file handler
        error_log_file = (
            self.log_dir
            / f"{self.config.file_prefix}_error_{datetime.now().strftime('%Y%m%d')}.log"
        )
        error_handler = logging.handlers.RotatingFileHandler(
            error_log_file,
            maxBytes=self.config.max_bytes,
            backupCount=self.config.backup_count,
            encoding="utf-8",
        )
        error_handler.setLevel(logging.ERROR)
        error_handler.setFormatter(formatter)
        root_logger.addHandler(error_handler)

    def get_logger(self, name: str) -> logging.Logger:
        """Logger for a given name"""
        return logging.getLogger(name)

    def log_request(
        self, method: str, path: str, status_code: int, duration: float
    ) -> None:
        """HTTP request log"""
        logger = self.get_logger("api.request")
        logger.info(f"{method} {path} -> {status_code} ({duration * 1000:.1f}ms)")

    def log_status_change(
        self,
        location_id: int,
        from_status: Optional[str],
        to_status: str,
        actor_id: Optional[int],
        action: str,
    ) -> None:
        """Moderation status change log"""
        logger = self.get_logger("moderation")
        logger.info(
            f"Location {location_id} status {from_status or '-'} -> {to_status} "
            f"(action: {action}, actor: {actor_id})"
        )


# global logger instance
_logger_instance = None


def get_logger_instance() -> AppLogger:
    """Global logger instance"""
    global _logger_instance
    if _logger_instance is None:
        _logger_instance = AppLogger()
    return _logger_instance


def configure_logging() -> AppLogger:
    """Configure logging once per process"""
    return get_logger_instance()


def get_logger(name: str) -> logging.Logger:
    """Logger for a given name (convenience function)"""
    return get_logger_instance().get_logger(name)
