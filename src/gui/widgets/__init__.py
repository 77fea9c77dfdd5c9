"""
Reusable GUI widgets for the Background Remover application.

This module contains custom widgets that can be reused across different
parts of the application.
"""

from .drag_drop import DragDropLabel
from .image_preview import ImagePreview

__all__ = ["DragDropLabel", "ImagePreview"]
