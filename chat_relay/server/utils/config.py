"""
Server configuration module.

This module handles server-side configuration settings.
"""

from chat_relay.common.constants import (
    DEFAULT_SERVER_HOST, DEFAULT_PORT, PING_INTERVAL, PING_TIMEOUT,
    MAX_FRAME_SIZE, LOG_DIR, LOG_LEVEL
)


class ServerConfig:
    """Server configuration class."""

    def __init__(self, host: str = DEFAULT_SERVER_HOST, port: int = DEFAULT_PORT,
                 log_level: str = LOG_LEVEL, logs_dir: str = LOG_DIR):
        self.host = host
        self.port = port

        # Logging configuration
        self.log_level = log_level
        self.logs_dir = logs_dir

        # Transport settings
        self.ping_interval = PING_INTERVAL
        self.ping_timeout = PING_TIMEOUT
        self.max_frame_size = MAX_FRAME_SIZE

    def get_connection_info(self):
        """Get connection information."""
        return {
            'host': self.host,
            'port': self.port
        }

    def get_transport_settings(self):
        """Get keyword arguments for the WebSocket server."""
        return {
            'ping_interval': self.ping_interval,
            'ping_timeout': self.ping_timeout,
            'max_size': self.max_frame_size
        }

    def get_log_settings(self):
        """Get logging settings."""
        return {
            'log_level': self.log_level,
            'logs_dir': self.logs_dir
        }
