"""Utility helpers shared across entrylint."""

from .error_format import escape_markup

__all__ = ["escape_markup"]
