from __future__ import annotations

from typing import Optional

from PySide6.QtCore import Qt, Signal
from PySide6.QtWidgets import (
    QDialog,
    QFrame,
    QHBoxLayout,
    QLabel,
    QPushButton,
    QToolButton,
    QVBoxLayout,
    QWidget,
)

from regdesk.ui.assets import current_theme_mode, normalize_theme_mode
from regdesk.ui.window.drag import TitleDragController


BUTTON_DEFAULT = "default"
BUTTON_PRIMARY = "primary"
BUTTON_DANGER = "danger"


class DialogTitleBar(QWidget):
    close_requested = Signal()

    def __init__(self, parent: Optional[QWidget] = None) -> None:
        super().__init__(parent)
        self.setObjectName("DialogTitleBar")
        self.setAttribute(Qt.WidgetAttribute.WA_StyledBackground, True)
        self._drag = TitleDragController(self)

        self._title_label = QLabel(self)
        self._title_label.setObjectName("DialogTitleLabel")
        close_button = QToolButton(self)
        close_button.setObjectName("DialogCloseButton")
        close_button.setAutoRaise(True)
        close_button.setFixedSize(30, 24)
        close_button.setCursor(Qt.CursorShape.PointingHandCursor)
        close_button.setToolTip("Close")
        close_button.setText("x")
        close_button.clicked.connect(self.close_requested.emit)

        row = QHBoxLayout(self)
        row.setContentsMargins(10, 7, 8, 7)
        row.setSpacing(6)
        row.addWidget(self._title_label, 1)
        row.addWidget(close_button)

    def set_title(self, text: str) -> None:
        self._title_label.setText(text)

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


class FramelessDialog(QDialog):
    """Modal dialog drawn inside a rounded frame with its own title strip.

    Subclasses add content to ``body_layout`` and finish with
    ``add_footer(...)``; buttons come from ``make_button`` so they pick up the
    shared ``ActionButton``/``DangerButton`` styles.
    """

    def __init__(
        self,
        title: str = "",
        parent: Optional[QWidget] = None,
        *,
        theme_mode: str | None = None,
    ) -> None:
        super().__init__(parent)
        self._theme_mode = normalize_theme_mode(theme_mode, current_theme_mode())
        self.setObjectName("FramelessDialog")
        self.setWindowFlags(Qt.WindowType.Dialog | Qt.WindowType.FramelessWindowHint)
        self.setAttribute(Qt.WidgetAttribute.WA_TranslucentBackground, True)
        self.setModal(True)
        self.setMinimumSize(460, 240)

        self._frame = QFrame(self)
        self._frame.setObjectName("FramelessDialogFrame")
        self.title_bar = DialogTitleBar(self._frame)
        self.title_bar.close_requested.connect(self.reject)
        self.body = QWidget(self._frame)
        self.body.setObjectName("DialogBody")
        self.body_layout = QVBoxLayout(self.body)
        self.body_layout.setContentsMargins(14, 14, 14, 14)
        self.body_layout.setSpacing(10)

        frame_layout = QVBoxLayout(self._frame)
        frame_layout.setContentsMargins(0, 0, 0, 0)
        frame_layout.setSpacing(0)
        frame_layout.addWidget(self.title_bar)
        frame_layout.addWidget(self.body, 1)

        outer = QVBoxLayout(self)
        outer.setContentsMargins(14, 14, 14, 14)
        outer.addWidget(self._frame)

        self.setWindowTitle(title)
        self.title_bar.set_title(title)

    @property
    def theme_mode(self) -> str:
        return self._theme_mode

    def make_button(self, text: str, *, role: str = BUTTON_DEFAULT) -> QPushButton:
        button = QPushButton(text, self.body)
        button.setObjectName("DangerButton" if role == BUTTON_DANGER else "ActionButton")
        if role == BUTTON_PRIMARY:
            button.setProperty("primary", "true")
        return button

    def add_message(self, text: str, *, warning: bool = False) -> QLabel:
        label = QLabel(text, self.body)
        label.setWordWrap(True)
        label.setObjectName("PanelWarning" if warning else "PanelHint")
        self.body_layout.addWidget(label)
        return label

    def add_footer(self, *buttons: QPushButton) -> None:
        row = QHBoxLayout()
        row.setContentsMargins(0, 0, 0, 0)
        row.setSpacing(8)
        row.addStretch(1)
        for button in buttons:
            row.addWidget(button)
        self.body_layout.addLayout(row)

    def set_theme_mode(self, mode: str) -> None:
        if mode not in ("light", "dark"):
            return
        self._theme_mode = mode
        for widget in (self._frame, self.title_bar, self.body):
            style = widget.style()
            if style is not None:
                style.unpolish(widget)
                style.polish(widget)
            widget.update()
