"""
Navigation domain models.

Channel groups (P4 with its regions, single channels like P1) and the
three-level navigation position.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from lyt.domain.radio.models import Channel


@dataclass(frozen=True)
class ChannelGroup:
    """A group of channels shown as one entry at the top level.

    Regional groups (P4, P5) open a region picker; non-regional groups wrap
    exactly one channel.
    """

    id: str
    name: str
    description: str = field(compare=False)
    is_regional: bool = field(compare=False)
    channels: tuple[Channel, ...] = field(default=(), compare=False)
    color: Optional[str] = field(default=None, compare=False)

    @property
    def display_channels(self) -> list[Channel]:
        return sorted(self.channels, key=lambda channel: channel.title)


@dataclass(frozen=True)
class ChannelRegion:
    """One regional variant of a grouped channel (e.g. P4 Fyn)."""

    id: str
    name: str
    display_name: str
    channel: Channel


class LevelKind(Enum):
    CHANNEL_GROUPS = "channel_groups"
    REGIONS = "regions"
    PLAYING = "playing"


@dataclass(frozen=True)
class NavigationLevel:
    """Current navigation level; carries the group or channel it is about."""

    kind: LevelKind
    group: Optional[ChannelGroup] = None
    channel: Optional[Channel] = None

    @classmethod
    def channel_groups(cls) -> "NavigationLevel":
        return cls(LevelKind.CHANNEL_GROUPS)

    @classmethod
    def regions(cls, group: ChannelGroup) -> "NavigationLevel":
        return cls(LevelKind.REGIONS, group=group)

    @classmethod
    def playing(cls, channel: Channel) -> "NavigationLevel":
        return cls(LevelKind.PLAYING, channel=channel)

    def __str__(self) -> str:
        if self.kind is LevelKind.REGIONS and self.group is not None:
            return f"regions({self.group.name})"
        if self.kind is LevelKind.PLAYING and self.channel is not None:
            return f"playing({self.channel.title})"
        return self.kind.value


@dataclass(frozen=True)
class NavigationState:
    """Immutable snapshot of the navigator, handed to observers."""

    level: NavigationLevel = field(default_factory=NavigationLevel.channel_groups)
    selected_group: Optional[ChannelGroup] = None
    selected_channel: Optional[Channel] = None

    def is_consistent(self) -> bool:
        """Check the level/selection invariants."""
        kind = self.level.kind
        if kind is LevelKind.CHANNEL_GROUPS:
            return self.selected_group is None and self.selected_channel is None
        if kind is LevelKind.REGIONS:
            return (
                self.level.group is not None
                and self.selected_group is not None
                and self.selected_group.id == self.level.group.id
                and self.selected_channel is None
            )
        return (
            self.level.channel is not None
            and self.selected_channel is not None
            and self.selected_channel.id == self.level.channel.id
        )
