from __future__ import annotations

from regdesk.ui.window.app_dialogs import AppConfirmDialog, AppMessageDialog


class WindowDialogsMixin:
    def _dialog_theme_mode(self) -> str:
        return "dark" if self._dark_mode_enabled else "light"

    def _show_info_dialog(self, title: str, message: str) -> None:
        AppMessageDialog.show_info(
            parent=self,
            title=title,
            message=message,
            theme_mode=self._dialog_theme_mode(),
        )

    def _show_warning_dialog(self, title: str, message: str) -> None:
        AppMessageDialog.show_warning(
            parent=self,
            title=title,
            message=message,
            theme_mode=self._dialog_theme_mode(),
        )

    def _confirm_dialog(
        self,
        title: str,
        message: str,
        *,
        confirm_text: str = "Confirm",
        cancel_text: str = "Cancel",
        danger: bool = False,
    ) -> bool:
        return AppConfirmDialog.ask(
            parent=self,
            title=title,
            message=message,
            confirm_text=confirm_text,
            cancel_text=cancel_text,
            danger=danger,
            theme_mode=self._dialog_theme_mode(),
        )

    def _show_save_failed(self, file_name: str) -> None:
        self._show_warning_dialog(
            "Storage Error",
            f"Could not save {file_name}.\n\n"
            "Your changes are kept in memory. Check the data folder in Settings and try again.",
        )
