"""
Chat relay package.

A minimal real-time chat relay: clients connect over WebSocket, register a
display name, exchange chat text and receive join, leave, rename and roster
notifications.
"""

__version__ = "1.0.0"
