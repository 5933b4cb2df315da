from __future__ import annotations

from PySide6.QtWidgets import QApplication


THEME_MODE_PROPERTY = "regdesk.theme_mode"


def normalize_theme_mode(mode: str | None, default: str = "light") -> str:
    if mode in ("dark", "light"):
        return mode
    return default


def current_theme_mode(default: str = "light") -> str:
    app = QApplication.instance()
    if app is None:
        return default
    value = app.property(THEME_MODE_PROPERTY)
    if isinstance(value, str) and value in ("light", "dark"):
        return value
    return default
