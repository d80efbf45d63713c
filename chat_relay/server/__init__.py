"""
Server package for the chat relay.

This package contains all server-side functionality including:
- Session registry
- Command handling and broadcasting
- WebSocket connection management
- Configuration and utilities
"""
