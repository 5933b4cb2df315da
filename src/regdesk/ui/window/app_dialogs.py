from __future__ import annotations

from regdesk.ui.window.frameless_dialog import (
    BUTTON_DANGER,
    BUTTON_DEFAULT,
    BUTTON_PRIMARY,
    FramelessDialog,
)


class AppMessageDialog(FramelessDialog):
    """One-button notice used for saves, storage problems and validation hints."""

    def __init__(
        self,
        *,
        title: str,
        message: str,
        warning: bool,
        parent=None,
        theme_mode: str | None = None,
    ) -> None:
        super().__init__(title=title, parent=parent, theme_mode=theme_mode)
        self.setMinimumSize(460, 200)
        self.resize(520, 230)

        self.add_message(message, warning=warning)
        self.body_layout.addStretch(1)
        ok_button = self.make_button("OK", role=BUTTON_PRIMARY)
        ok_button.clicked.connect(self.accept)
        self.add_footer(ok_button)
        ok_button.setFocus()

    @classmethod
    def show_info(cls, *, parent, title: str, message: str, theme_mode: str | None = None) -> None:
        cls(title=title, message=message, warning=False, parent=parent, theme_mode=theme_mode).exec()

    @classmethod
    def show_warning(cls, *, parent, title: str, message: str, theme_mode: str | None = None) -> None:
        cls(title=title, message=message, warning=True, parent=parent, theme_mode=theme_mode).exec()


class AppConfirmDialog(FramelessDialog):
    def __init__(
        self,
        *,
        title: str,
        message: str,
        confirm_text: str = "Confirm",
        cancel_text: str = "Cancel",
        danger: bool = False,
        parent=None,
        theme_mode: str | None = None,
    ) -> None:
        super().__init__(title=title, parent=parent, theme_mode=theme_mode)
        self.setMinimumSize(460, 210)
        self.resize(520, 240)

        self.add_message(message, warning=danger)
        self.body_layout.addStretch(1)
        cancel_button = self.make_button(cancel_text, role=BUTTON_DEFAULT)
        cancel_button.clicked.connect(self.reject)
        confirm_button = self.make_button(confirm_text, role=BUTTON_DANGER if danger else BUTTON_PRIMARY)
        confirm_button.clicked.connect(self.accept)
        self.add_footer(cancel_button, confirm_button)
        # Destructive prompts default to Cancel.
        cancel_button.setFocus()

    @classmethod
    def ask(
        cls,
        *,
        parent,
        title: str,
        message: str,
        confirm_text: str = "Confirm",
        cancel_text: str = "Cancel",
        danger: bool = False,
        theme_mode: str | None = None,
    ) -> bool:
        dialog = cls(
            title=title,
            message=message,
            confirm_text=confirm_text,
            cancel_text=cancel_text,
            danger=danger,
            parent=parent,
            theme_mode=theme_mode,
        )
        return dialog.exec() == dialog.DialogCode.Accepted
