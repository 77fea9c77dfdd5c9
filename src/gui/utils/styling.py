"""
Shared styling utilities for the Background Remover GUI.

This module contains common styling functions and constants that can be
reused across different GUI components with accessibility compliance.
"""

from typing import Any, Protocol


class StyleableWidget(Protocol):
    """Protocol for widgets that can be styled."""

    def setStyleSheet(self, styleSheet: str) -> None: ...
    def style(self) -> Any: ...


class AccessiblePalette:
    """
    Centralized color palette with WCAG AA accessibility compliance.

    All color combinations meet minimum contrast ratio of 4.5:1 for normal text
    and 3:1 for large text (18pt+ or 14pt+ bold).
    """

    # Banner colors
    ERROR_TEXT = "#721c24"
    ERROR_BG = "#f8d7da"
    WARNING_TEXT = "#856404"
    WARNING_BG = "#fff3cd"

    # UI element colors
    BORDER_DEFAULT = "#dee2e6"
    BORDER_FOCUS = "#0d6efd"
    BORDER_ERROR = "#dc3545"
    BORDER_SUCCESS = "#198754"

    BACKGROUND_DEFAULT = "#ffffff"
    BACKGROUND_SECONDARY = "#f8f9fa"
    BACKGROUND_DISABLED = "#e9ecef"

    TEXT_PRIMARY = "#212529"
    TEXT_SECONDARY = "#6c757d"
    TEXT_DISABLED = "#adb5bd"

    # Button colors (background, hover, pressed)
    BUTTON_PRIMARY = ("#6610f2", "#560bd0", "#4d0ab8")
    BUTTON_SECONDARY = ("#6c757d", "#5c636a", "#565e64")
    BUTTON_SUCCESS = ("#198754", "#157347", "#146c43")
    BUTTON_TEXT = "#ffffff"

    # Drag and drop colors
    DRAG_NORMAL_BORDER = "#6c757d"
    DRAG_HOVER_BORDER = "#6610f2"
    DRAG_REJECT_BORDER = "#dc3545"
    DRAG_HOVER_BG = "rgba(102, 16, 242, 0.1)"
    DRAG_REJECT_BG = "rgba(220, 53, 69, 0.1)"

    # Transparency checkerboard
    CHECKER_LIGHT = "#f1f3f5"
    CHECKER_DARK = "#ced4da"


class StyleSheets:
    """Collection of reusable stylesheet definitions using the accessible palette."""

    @staticmethod
    def get_banner_style(status: str = "error") -> str:
        """Get the inline banner stylesheet for the given status."""
        if status == "warning":
            text, background, border = (
                AccessiblePalette.WARNING_TEXT,
                AccessiblePalette.WARNING_BG,
                AccessiblePalette.WARNING_TEXT,
            )
        else:
            text, background, border = (
                AccessiblePalette.ERROR_TEXT,
                AccessiblePalette.ERROR_BG,
                AccessiblePalette.BORDER_ERROR,
            )
        return f"""
            QLabel#errorBanner {{
                color: {text};
                background-color: {background};
                border: 1px solid {border};
                border-radius: 6px;
                padding: 10px;
                font-size: 13px;
            }}
        """

    @staticmethod
    def get_button_style(button_type: str = "primary") -> str:
        """Get button stylesheet for the given type ("primary", "secondary" or "success")."""
        colors = {
            "primary": AccessiblePalette.BUTTON_PRIMARY,
            "secondary": AccessiblePalette.BUTTON_SECONDARY,
            "success": AccessiblePalette.BUTTON_SUCCESS,
        }
        background, hover, pressed = colors.get(button_type, AccessiblePalette.BUTTON_PRIMARY)
        return f"""
            QPushButton {{
                background-color: {background};
                color: {AccessiblePalette.BUTTON_TEXT};
                border: 2px solid {background};
                border-radius: 6px;
                padding: 8px 16px;
                font-weight: bold;
                min-height: 24px;
            }}

            QPushButton:hover {{
                background-color: {hover};
                border-color: {hover};
            }}

            QPushButton:pressed {{
                background-color: {pressed};
                border-color: {pressed};
            }}

            QPushButton:disabled {{
                background-color: {AccessiblePalette.BACKGROUND_DISABLED};
                color: {AccessiblePalette.TEXT_DISABLED};
                border-color: {AccessiblePalette.BORDER_DEFAULT};
            }}
        """


def apply_banner_style(widget: StyleableWidget, status: str = "error") -> None:
    """Apply banner styling to a label."""
    widget.setStyleSheet(StyleSheets.get_banner_style(status))


def apply_button_style(widget: StyleableWidget, button_type: str = "primary") -> None:
    """Apply button styling to a push button."""
    widget.setStyleSheet(StyleSheets.get_button_style(button_type))


def create_drag_zone_stylesheet(state: str = "normal") -> str:
    """
    Create a stylesheet for drag-and-drop zones based on state.

    Args:
        state: The current state ("normal", "hover", "reject")

    Returns:
        CSS stylesheet string
    """
    if state == "hover":
        border, background, weight = AccessiblePalette.DRAG_HOVER_BORDER, AccessiblePalette.DRAG_HOVER_BG, "bold"
    elif state == "reject":
        border, background, weight = AccessiblePalette.DRAG_REJECT_BORDER, AccessiblePalette.DRAG_REJECT_BG, "bold"
    else:
        border, background, weight = AccessiblePalette.DRAG_NORMAL_BORDER, "rgba(128, 128, 128, 20)", "normal"

    color = AccessiblePalette.DRAG_REJECT_BORDER if state == "reject" else "palette(window-text)"
    return f"""
        QLabel#dragZone {{
            border: 2px dashed {border};
            border-radius: 12px;
            background-color: {background};
            color: {color};
            font-size: 14px;
            font-weight: {weight};
            padding: 24px;
            min-height: 120px;
        }}
    """
