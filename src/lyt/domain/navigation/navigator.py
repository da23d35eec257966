"""
Channel navigation state machine.

Three levels: channel groups (root) -> regions of a regional group -> the
now-playing view of a channel. Every transition ends with a repair pass
that re-establishes the level/selection invariants.
"""

from typing import Callable, Optional

from loguru import logger

from lyt.domain.radio.models import Channel

from .models import ChannelGroup, LevelKind, NavigationLevel, NavigationState

NavigationObserver = Callable[[NavigationState], None]


def repair(state: NavigationState) -> NavigationState:
    """Normalize selections so they agree with the current level.

    - channel groups: nothing selected
    - regions(g): g selected, no channel
    - playing(c): c selected
    """
    level = state.level
    group = state.selected_group
    channel = state.selected_channel

    if level.kind is LevelKind.CHANNEL_GROUPS:
        if group is not None or channel is not None:
            logger.warning("Selection left at channel groups level, clearing it")
        group, channel = None, None

    elif level.kind is LevelKind.REGIONS:
        if level.group is None:
            logger.warning("Regions level without a group, resetting to root")
            return NavigationState()
        if group is None or group.id != level.group.id:
            logger.warning(f"Selected group mismatch at {level}, fixing it")
            group = level.group
        if channel is not None:
            logger.warning(f"Channel still selected at {level}, clearing it")
            channel = None

    else:
        if level.channel is None:
            logger.warning("Playing level without a channel, resetting to root")
            return NavigationState()
        if channel is None or channel.id != level.channel.id:
            logger.warning(f"Selected channel mismatch at {level}, fixing it")
            channel = level.channel

    return NavigationState(level=level, selected_group=group, selected_channel=channel)


class ChannelNavigator:
    """Owner of the single NavigationState.

    Purely synchronous; every public transition returns the repaired state.
    """

    def __init__(self) -> None:
        self._state = NavigationState()
        self._observers: list[NavigationObserver] = []

    @property
    def state(self) -> NavigationState:
        return self._state

    def subscribe(self, observer: NavigationObserver) -> Callable[[], None]:
        """Register an observer of state changes; returns an unsubscribe callable."""
        self._observers.append(observer)

        def unsubscribe() -> None:
            if observer in self._observers:
                self._observers.remove(observer)

        return unsubscribe

    def select_group(self, group: ChannelGroup) -> NavigationState:
        """Open a group: regions for regional groups, straight to playing otherwise."""
        logger.debug(f"select_group({group.name}) regional={group.is_regional}")

        if group.is_regional:
            state = NavigationState(
                level=NavigationLevel.regions(group), selected_group=group
            )
        elif len(group.channels) == 1:
            channel = group.channels[0]
            state = NavigationState(
                level=NavigationLevel.playing(channel),
                selected_group=group,
                selected_channel=channel,
            )
        else:
            logger.warning(
                f"Group {group.name} is not regional but has {len(group.channels)} channels"
            )
            state = NavigationState()

        return self._commit(state)

    def select_channel(self, channel: Channel) -> NavigationState:
        """Jump to the playing view for a channel from any level."""
        logger.debug(f"select_channel({channel.title}) from {self._state.level}")

        group = self._state.selected_group
        if group is not None and channel not in group.channels:
            # Back-navigation must not lead into a group the channel isn't in
            group = None

        state = NavigationState(
            level=NavigationLevel.playing(channel),
            selected_group=group,
            selected_channel=channel,
        )
        return self._commit(state)

    def back(self) -> NavigationState:
        """Go up one level; playing returns to regions only for regional groups."""
        current = self._state
        kind = current.level.kind
        logger.debug(f"back() from {current.level}")

        if kind is LevelKind.CHANNEL_GROUPS:
            state = current
        elif kind is LevelKind.REGIONS:
            state = NavigationState()
        else:
            group = current.selected_group
            if group is not None and group.is_regional:
                state = NavigationState(
                    level=NavigationLevel.regions(group), selected_group=group
                )
            else:
                state = NavigationState()

        return self._commit(state)

    def reset(self) -> NavigationState:
        """Return to the root level with nothing selected."""
        return self._commit(NavigationState())

    def _commit(self, state: NavigationState) -> NavigationState:
        repaired = repair(state)
        changed = repaired != self._state
        self._state = repaired

        if changed:
            logger.debug(
                f"Navigation: level={repaired.level} "
                f"group={repaired.selected_group.name if repaired.selected_group else None} "
                f"channel={repaired.selected_channel.title if repaired.selected_channel else None}"
            )
            for observer in list(self._observers):
                try:
                    observer(repaired)
                except Exception:
                    logger.exception(f"Navigation observer {observer!r} failed")

        return repaired
