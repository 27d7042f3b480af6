"""Styling module for the admin console."""

from .styles import ColorPalette, Styles, Theme

__all__ = ["ColorPalette", "Styles", "Theme"]
