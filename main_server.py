#!/usr/bin/env python3
"""
Chat Relay Server - Main Entry Point

Runs the WebSocket chat relay.

Usage:
    python main_server.py

Optional arguments:
    --host HOST           Bind address (default: 0.0.0.0)
    --port PORT           WebSocket port (default: 8100)
    --log-level LEVEL     DEBUG, INFO, WARNING or ERROR (default: INFO)
    --logs-dir DIR        Also write logs to DIR/server.log
"""

if __name__ == "__main__":
    from chat_relay.server.main_server import main

    main()
