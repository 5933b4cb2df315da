from __future__ import annotations

from typing import Literal

from PySide6.QtWidgets import QApplication

from regdesk.ui.assets import THEME_MODE_PROPERTY


ThemeMode = Literal["light", "dark"]
_DEFAULT_MODE: ThemeMode = "light"

_PALETTES: dict[ThemeMode, dict[str, str]] = {
    "light": {
        "window": "#f4f6fb",
        "surface": "#ffffff",
        "surface_alt": "#f8f9fa",
        "border": "#d9dee7",
        "text": "#1f2430",
        "muted": "#667085",
        "accent": "#4285f4",
        "accent_text": "#ffffff",
        "danger": "#d93025",
        "warning": "#b54708",
        "overlay": "rgba(20, 24, 32, 150)",
    },
    "dark": {
        "window": "#14181f",
        "surface": "#1d232d",
        "surface_alt": "#232b36",
        "border": "#343e4c",
        "text": "#e6e9ef",
        "muted": "#9aa4b2",
        "accent": "#5b9bff",
        "accent_text": "#0b1220",
        "danger": "#f97066",
        "warning": "#fdb022",
        "overlay": "rgba(0, 0, 0, 170)",
    },
}

_STYLESHEET = """
#WindowContainer, #FramelessDialogFrame {{
    background: {window};
    border: 1px solid {border};
    border-radius: 12px;
}}
#TitleBar, #DialogTitleBar {{
    background: transparent;
    border-bottom: 1px solid {border};
}}
#TitleLabel, #DialogTitleLabel {{
    color: {text};
    font-weight: 600;
}}
QToolButton#TitleMinButton, QToolButton#TitleMaxButton,
QToolButton#TitleCloseButton, QToolButton#DialogCloseButton {{
    color: {muted};
    border: none;
    border-radius: 6px;
}}
QToolButton#TitleCloseButton:hover, QToolButton#DialogCloseButton:hover {{
    background: {danger};
    color: #ffffff;
}}
QWidget#WindowBody, QWidget#DialogBody {{
    background: transparent;
    color: {text};
}}
QLabel {{
    color: {text};
}}
QLabel#PanelHint, QLabel#PanelMeta, QLabel#PaginationInfo, QLabel#TitleStatusLabel {{
    color: {muted};
}}
QLabel#PanelWarning {{
    color: {warning};
}}
QLabel#PanelTitle {{
    font-size: 18px;
    font-weight: 600;
}}
QLabel#StatValue {{
    font-size: 28px;
    font-weight: 700;
    color: {accent};
}}
QFrame#Panel, QFrame#StatCard, QFrame#CommunityChip {{
    background: {surface};
    border: 1px solid {border};
    border-radius: 10px;
}}
QPushButton#NavButton {{
    text-align: left;
    padding: 8px 12px;
    border: none;
    border-radius: 8px;
    color: {text};
    background: transparent;
}}
QPushButton#NavButton:checked {{
    background: {accent};
    color: {accent_text};
}}
QPushButton#ActionButton, QPushButton#PageButton {{
    padding: 6px 12px;
    border: 1px solid {border};
    border-radius: 8px;
    background: {surface};
    color: {text};
}}
QPushButton#ActionButton[primary="true"], QPushButton#PageButton:checked {{
    background: {accent};
    border-color: {accent};
    color: {accent_text};
}}
QPushButton#DangerButton {{
    padding: 6px 12px;
    border: 1px solid {danger};
    border-radius: 8px;
    background: transparent;
    color: {danger};
}}
QPushButton:disabled {{
    color: {muted};
}}
QLineEdit, QComboBox, QDateEdit, QPlainTextEdit, QSpinBox {{
    padding: 5px 8px;
    border: 1px solid {border};
    border-radius: 6px;
    background: {surface};
    color: {text};
}}
QTableWidget {{
    background: {surface};
    alternate-background-color: {surface_alt};
    color: {text};
    gridline-color: {border};
    border: 1px solid {border};
    border-radius: 8px;
}}
QHeaderView::section {{
    background: {accent};
    color: {accent_text};
    padding: 6px;
    border: none;
}}
QFrame#LoadingOverlay {{
    background: {overlay};
}}
QLabel#LoadingOverlayLabel {{
    background: #333333;
    color: #ffffff;
    padding: 18px 36px;
    border-radius: 8px;
}}
"""


def load_stylesheet(*, mode: ThemeMode = _DEFAULT_MODE) -> str:
    palette = _PALETTES.get(mode, _PALETTES[_DEFAULT_MODE])
    return _STYLESHEET.format(**palette).strip()


def apply_app_theme(app: QApplication, *, mode: ThemeMode = _DEFAULT_MODE) -> None:
    app.setProperty(THEME_MODE_PROPERTY, mode)
    app.setStyleSheet(load_stylesheet(mode=mode))
