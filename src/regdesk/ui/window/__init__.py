from __future__ import annotations

from regdesk.ui.window.app_dialogs import AppConfirmDialog, AppMessageDialog
from regdesk.ui.window.frameless_dialog import FramelessDialog
from regdesk.ui.window.frameless_window import FramelessWindow

__all__ = [
    "AppConfirmDialog",
    "AppMessageDialog",
    "FramelessDialog",
    "FramelessWindow",
]
