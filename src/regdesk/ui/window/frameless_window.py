from __future__ import annotations

from typing import Optional

from PySide6.QtCore import QEvent, QSize, Qt
from PySide6.QtWidgets import QFrame, QHBoxLayout, QLabel, QMainWindow, QSizeGrip, QToolButton, QVBoxLayout, QWidget

from regdesk.ui.assets import normalize_theme_mode
from regdesk.ui.window.drag import TitleDragController


class WindowTitleBar(QWidget):
    """Title strip with minimize/maximize/close; double-click toggles maximize."""

    def __init__(self, window: QMainWindow, parent: Optional[QWidget] = None) -> None:
        super().__init__(parent)
        self.setObjectName("TitleBar")
        self.setAttribute(Qt.WidgetAttribute.WA_StyledBackground, True)
        self.setMinimumHeight(36)
        self._window = window
        self._drag = TitleDragController(self)

        self.title_label = QLabel(self)
        self.title_label.setObjectName("TitleLabel")
        self.status_label = QLabel(self)
        self.status_label.setObjectName("TitleStatusLabel")
        self.max_button = self._control("TitleMaxButton", "[]", "Maximize", self.toggle_maximized)

        row = QHBoxLayout(self)
        row.setContentsMargins(12, 6, 8, 6)
        row.setSpacing(8)
        row.addWidget(self.title_label)
        row.addWidget(self.status_label, 1)
        row.addWidget(self._control("TitleMinButton", "-", "Minimize", window.showMinimized))
        row.addWidget(self.max_button)
        row.addWidget(self._control("TitleCloseButton", "x", "Close", window.close))

    def _control(self, object_name: str, text: str, tooltip: str, slot) -> QToolButton:
        button = QToolButton(self)
        button.setObjectName(object_name)
        button.setAutoRaise(True)
        button.setFixedSize(QSize(30, 24))
        button.setText(text)
        button.setToolTip(tooltip)
        button.setCursor(Qt.CursorShape.PointingHandCursor)
        button.clicked.connect(slot)
        return button

    def toggle_maximized(self) -> None:
        self._drag.release()
        if self._window.isFullScreen():
            return
        if self._window.isMaximized():
            self._window.showNormal()
        else:
            self._window.showMaximized()

    def sync_maximized(self) -> None:
        maximized = self._window.isMaximized()
        self.max_button.setText("<>" if maximized else "[]")
        self.max_button.setToolTip("Restore" if maximized else "Maximize")

    def mousePressEvent(self, event) -> None:
        if self._drag.press(event):
            event.accept()
            return
        super().mousePressEvent(event)

    def mouseMoveEvent(self, event) -> None:
        if self._drag.move(event):
            event.accept()
            return
        super().mouseMoveEvent(event)

    def mouseReleaseEvent(self, event) -> None:
        self._drag.release()
        super().mouseReleaseEvent(event)

    def mouseDoubleClickEvent(self, event) -> None:
        if event.button() == Qt.MouseButton.LeftButton and self._drag.is_drag_target(event.position().toPoint()):
            self.toggle_maximized()
            event.accept()
            return
        super().mouseDoubleClickEvent(event)


class FramelessWindow(QMainWindow):
    """Main window shell with its own title bar; content goes in ``body_layout``."""

    def __init__(
        self,
        *,
        title: str = "",
        theme_mode: str = "light",
        parent: Optional[QWidget] = None,
    ) -> None:
        super().__init__(parent)
        self._theme_mode = normalize_theme_mode(theme_mode)
        self.setWindowFlags(
            Qt.WindowType.Window | Qt.WindowType.FramelessWindowHint | Qt.WindowType.WindowSystemMenuHint
        )
        self.setAttribute(Qt.WidgetAttribute.WA_TranslucentBackground, True)

        self._frame = QFrame(self)
        self._frame.setObjectName("WindowContainer")
        self._title_bar = WindowTitleBar(self, self._frame)
        self._body = QWidget(self._frame)
        self._body.setObjectName("WindowBody")
        self._body_layout = QVBoxLayout(self._body)
        self._body_layout.setContentsMargins(0, 0, 0, 0)
        self._body_layout.setSpacing(0)
        grip = QSizeGrip(self._frame)
        grip.setObjectName("ResizeHandle")

        frame_layout = QVBoxLayout(self._frame)
        frame_layout.setContentsMargins(0, 0, 0, 0)
        frame_layout.setSpacing(0)
        frame_layout.addWidget(self._title_bar)
        frame_layout.addWidget(self._body, 1)
        frame_layout.addWidget(grip, 0, Qt.AlignmentFlag.AlignBottom | Qt.AlignmentFlag.AlignRight)
        self.setCentralWidget(self._frame)
        self.setWindowTitle(title)

    @property
    def title_bar(self) -> WindowTitleBar:
        return self._title_bar

    @property
    def body_layout(self) -> QVBoxLayout:
        return self._body_layout

    @property
    def body_widget(self) -> QWidget:
        return self._body

    def set_title_status(self, text: str) -> None:
        self._title_bar.status_label.setText(text)

    def set_theme_mode(self, mode: str) -> None:
        if mode not in ("light", "dark") or mode == self._theme_mode:
            return
        self._theme_mode = mode
        for widget in (self._frame, self._title_bar):
            style = widget.style()
            if style is not None:
                style.unpolish(widget)
                style.polish(widget)
            widget.update()

    def setWindowTitle(self, title: str) -> None:
        super().setWindowTitle(title)
        self._title_bar.title_label.setText(title)

    def changeEvent(self, event) -> None:
        super().changeEvent(event)
        if event.type() == QEvent.Type.WindowStateChange:
            self._title_bar.sync_maximized()
