"""
GUI-specific utilities for the Background Remover application.

This module contains utility functions and classes that are specific
to the GUI implementation.
"""

from .styling import (
    AccessiblePalette,
    StyleSheets,
    apply_banner_style,
    apply_button_style,
    create_drag_zone_stylesheet,
)

__all__ = [
    "AccessiblePalette",
    "StyleSheets",
    "apply_banner_style",
    "apply_button_style",
    "create_drag_zone_stylesheet",
]
