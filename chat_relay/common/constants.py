"""
Shared constants for the chat relay.

This module contains the wire tags, name bounds and network defaults used
across the server components.
"""

# Network Configuration
DEFAULT_SERVER_HOST = '0.0.0.0'
DEFAULT_PORT = 8100

# Transport keep-alive (seconds)
PING_INTERVAL = 20
PING_TIMEOUT = 300  # clients are dropped after 5 minutes of silence

# Frames larger than this are rejected
MAX_FRAME_SIZE = 1024 * 1024

# Display names: valid iff NAME_MIN_EXCLUSIVE < len(name) < NAME_MAX_EXCLUSIVE.
# The browser client checks 3 <= len <= 25; the server bound wins.
NAME_MIN_EXCLUSIVE = 3
NAME_MAX_EXCLUSIVE = 25
INVALID_NAME_ERROR = "Name is of incorrect length."

# Logging
LOG_DIR = None
LOG_FILE = 'server.log'
LOG_LEVEL = 'INFO'


# Command Types (client to server)
class CommandTypes:
    REGISTER = 0
    MESSAGE = 1
    NAME_CHANGE = 2


# Response Types (server to client)
class ResponseTypes:
    CONNECTION = 0
    DISCONNECT = 1
    MESSAGE = 2
    NAME_CHANGE = 3
    USER_COUNT = 4
    ERROR = 255
