"""
MCP tool registrations.
"""

from . import menu_tools

__all__ = ['menu_tools']
