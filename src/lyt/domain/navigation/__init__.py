"""Navigation domain - channel grouping and the channel/region/playing state machine."""

from .models import ChannelGroup, ChannelRegion, LevelKind, NavigationLevel, NavigationState
from .navigator import ChannelNavigator, repair
from .organizer import organize_channels, region_display_name, regions_for_group

__all__ = [
    # Models
    "ChannelGroup",
    "ChannelRegion",
    "LevelKind",
    "NavigationLevel",
    "NavigationState",
    # State machine
    "ChannelNavigator",
    "repair",
    # Organization
    "organize_channels",
    "region_display_name",
    "regions_for_group",
]
