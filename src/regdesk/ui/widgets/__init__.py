from regdesk.ui.widgets.community_tags import CommunityChip, CommunityTagInput
from regdesk.ui.widgets.loading_overlay import LoadingOverlay

__all__ = [
    "CommunityChip",
    "CommunityTagInput",
    "LoadingOverlay",
]
