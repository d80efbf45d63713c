"""
Chat module for server-side messaging functionality.

Handles:
- Session tracking
- Register, message and rename commands
- Broadcasting to live connections
"""
