"""
Server logging module.

This module handles server-side logging functionality.
"""

import logging
from pathlib import Path
from typing import Optional, Union

from chat_relay.common.constants import LOG_FILE


class ServerLogger:
    """Server logging class."""

    def __init__(self, log_level: int = logging.INFO):
        self.logger = logging.getLogger('chat_relay')
        self.logger.setLevel(log_level)

        # Remove existing handlers
        for handler in self.logger.handlers[:]:
            self.logger.removeHandler(handler)

        self.formatter = logging.Formatter(
            '%(asctime)s [%(levelname)s] %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        )

        console_handler = logging.StreamHandler()
        console_handler.setLevel(log_level)
        console_handler.setFormatter(self.formatter)
        self.logger.addHandler(console_handler)

        self.log_path: Optional[Path] = None

    def configure(self, log_level: Union[int, str] = logging.INFO, logs_dir: Optional[str] = None):
        """Apply the level to every handler and optionally log to a file."""
        if isinstance(log_level, str):
            log_level = logging.getLevelName(log_level.upper())

        self.logger.setLevel(log_level)
        for handler in self.logger.handlers:
            handler.setLevel(log_level)

        if logs_dir and self.log_path is None:
            logs_path = Path(logs_dir)
            logs_path.mkdir(parents=True, exist_ok=True)
            self.log_path = logs_path / LOG_FILE

            file_handler = logging.FileHandler(self.log_path, encoding='utf-8')
            file_handler.setLevel(log_level)
            file_handler.setFormatter(self.formatter)
            self.logger.addHandler(file_handler)

    def info(self, message: str):
        """Log info message."""
        self.logger.info(message)

    def error(self, message: str):
        """Log error message."""
        self.logger.error(message)

    def warning(self, message: str):
        """Log warning message."""
        self.logger.warning(message)

    def debug(self, message: str):
        """Log debug message."""
        self.logger.debug(message)

    def exception(self, message: str):
        """Log error message with the current traceback."""
        self.logger.exception(message)

    def log_connection(self, addr, connection_id):
        """Log client connection."""
        self.info(f"Client connection from {addr}, connection_id={connection_id}")

    def log_register(self, username: str, connection_id):
        self.info(f"User '{username}' registered (connection_id={connection_id})")

    def log_rename(self, old_name: str, new_name: str, connection_id):
        self.info(f"User '{old_name}' is now known as '{new_name}' (connection_id={connection_id})")

    def log_chat(self, username: str, connection_id, message: str):
        """Log chat message."""
        self.info(f"Chat from '{username}' (connection_id={connection_id}): {message}")

    def log_disconnect(self, username: Optional[str], connection_id):
        """Log user disconnect."""
        self.info(f"Client disconnected: '{username or ''}' (connection_id={connection_id})")

    def log_send(self, connection_id, frame: str):
        self.debug(f"Data sent to connection_id={connection_id}: {frame}")

    def log_error(self, operation: str, error: Exception):
        """Log error with operation context."""
        self.error(f"Error in {operation}: {error}")


# Global logger instance
logger = ServerLogger()
