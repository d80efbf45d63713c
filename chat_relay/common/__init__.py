"""
Shared protocol definitions and constants.
"""
