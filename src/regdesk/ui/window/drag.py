from __future__ import annotations

from typing import Optional

from PySide6.QtCore import QPoint, QPointF, Qt
from PySide6.QtGui import QGuiApplication
from PySide6.QtWidgets import QAbstractButton, QWidget


class TitleDragController:
    """Moves a frameless top-level widget when its title strip is dragged.

    The compositor move (``startSystemMove``) is tried first. Wayland refuses
    client-side moves, so the manual fallback is skipped there.
    """

    def __init__(self, strip: QWidget) -> None:
        self._strip = strip
        self._anchor: Optional[QPointF] = None
        self._origin: Optional[QPoint] = None

    @property
    def active(self) -> bool:
        return self._anchor is not None

    def is_drag_target(self, pos: QPoint) -> bool:
        child = self._strip.childAt(pos)
        while child is not None and child is not self._strip:
            if isinstance(child, QAbstractButton):
                return False
            child = child.parentWidget()
        return True

    def press(self, event) -> bool:
        if event.button() != Qt.MouseButton.LeftButton:
            return False
        if not self.is_drag_target(event.position().toPoint()):
            return False
        window = self._strip.window()
        if window.isFullScreen():
            return True
        if window.isMaximized():
            window.showNormal()
        if _start_system_move(window):
            self.release()
            return True
        if "wayland" in (QGuiApplication.platformName() or "").lower():
            return True
        self._anchor = event.globalPosition()
        self._origin = window.frameGeometry().topLeft()
        return True

    def move(self, event) -> bool:
        if self._anchor is None or self._origin is None:
            return False
        if not (event.buttons() & Qt.MouseButton.LeftButton):
            self.release()
            return True
        delta = event.globalPosition() - self._anchor
        self._strip.window().move(QPoint(int(self._origin.x() + delta.x()), int(self._origin.y() + delta.y())))
        return True

    def release(self) -> None:
        self._anchor = None
        self._origin = None


def _start_system_move(window: QWidget) -> bool:
    handle = window.windowHandle()
    if handle is None:
        return False
    return bool(handle.startSystemMove())
