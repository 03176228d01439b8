"""
Visualizer Module
=================

Classes:
    ManualSession - Keyboard play loop with live RAM dump (optionally recording)

Functions:
    format_ram       - 8x16 hex dump of the RAM
    action_from_keys - Map pressed keys to a joystick action
"""

from .ram_view import ManualSession, format_ram, action_from_keys

__all__ = ['ManualSession', 'format_ram', 'action_from_keys']
