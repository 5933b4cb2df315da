from regdesk.ui.dialogs.record_dialogs import (
    CommunityEditorDialog,
    ExportFieldsDialog,
    RecordDetailsDialog,
    RecordEditorDialog,
)

__all__ = [
    "CommunityEditorDialog",
    "ExportFieldsDialog",
    "RecordDetailsDialog",
    "RecordEditorDialog",
]
