"""
Channel organization into navigable groups.

P4 and P5 regional channels collapse into one regional group each; every
other channel becomes its own single-channel group.
"""

from typing import Iterable

from loguru import logger

from lyt.domain.radio.models import Channel

from .models import ChannelGroup, ChannelRegion

# Slug prefix -> (group name, description, color)
REGIONAL_GROUPS: dict[str, tuple[str, str, str]] = {
    "p4": ("P4", "Regional radio with local content", "0066CC"),
    "p5": ("P5", "Classical music with regional content", "663399"),
}

GROUP_NAMES: dict[str, str] = {
    "p1": "P1",
    "p2": "P2",
    "p3": "P3",
    "p6beat": "P6 Beat",
    "p7": "P7",
    "p8jazz": "P8 Jazz",
}

GROUP_DESCRIPTIONS: dict[str, str] = {
    "p1": "News and current affairs",
    "p2": "Classical music and culture",
    "p3": "Pop music for young adults",
    "p6beat": "Rock and alternative music",
    "p7": "Adult contemporary and mix",
    "p8jazz": "Jazz music 24/7",
}

GROUP_COLORS: dict[str, str] = {
    "p1": "E60026",
    "p2": "9933CC",
    "p3": "FF6600",
    "p6beat": "000000",
    "p7": "FF3366",
    "p8jazz": "8B4513",
}

REGION_DISPLAY_NAMES: dict[str, str] = {
    "kbh": "København",
    "syd": "Syd",
    "nord": "Nord",
    "midt": "Midt",
    "vest": "Vest",
    "bornholm": "Bornholm",
    "esbjerg": "Esbjerg",
    "fyn": "Fyn",
    "oestjylland": "Østjylland",
    "østjylland": "Østjylland",
    "sjaelland": "Sjælland",
    "trekanten": "Trekanten",
    "aarhus": "Aarhus",
}


def _regional_prefix(slug: str) -> str | None:
    for prefix in REGIONAL_GROUPS:
        if slug.startswith(prefix):
            return prefix
    return None


def organize_channels(channels: Iterable[Channel]) -> list[ChannelGroup]:
    """Group channels for top-level navigation.

    Args:
        channels: Channels to organize (duplicates by id are dropped)

    Returns:
        Groups sorted by name
    """
    unique: dict[str, Channel] = {}
    for channel in channels:
        unique.setdefault(channel.id, channel)

    regional: dict[str, list[Channel]] = {prefix: [] for prefix in REGIONAL_GROUPS}
    singles: list[Channel] = []
    for channel in unique.values():
        prefix = _regional_prefix(channel.slug)
        if prefix is not None:
            regional[prefix].append(channel)
        else:
            singles.append(channel)

    groups: list[ChannelGroup] = []
    for prefix, members in regional.items():
        if not members:
            continue
        if all(member.slug == prefix for member in members):
            # Only the national channel, no regions to pick from
            singles.extend(members)
            continue
        name, description, color = REGIONAL_GROUPS[prefix]
        groups.append(
            ChannelGroup(
                id=prefix,
                name=name,
                description=description,
                is_regional=True,
                channels=tuple(members),
                color=color,
            )
        )

    for channel in sorted(singles, key=lambda c: c.slug):
        groups.append(
            ChannelGroup(
                id=channel.slug,
                name=GROUP_NAMES.get(channel.slug, channel.slug.upper()),
                description=GROUP_DESCRIPTIONS.get(channel.slug, "Radio channel"),
                is_regional=False,
                channels=(channel,),
                color=GROUP_COLORS.get(channel.slug, "999999"),
            )
        )

    groups.sort(key=lambda group: group.name)
    logger.debug(f"Organized {len(unique)} channels into {len(groups)} groups")
    return groups


def region_display_name(region: str) -> str:
    """Human-readable name for a region slug suffix."""
    return REGION_DISPLAY_NAMES.get(region, region.capitalize())


def regions_for_group(group: ChannelGroup) -> list[ChannelRegion]:
    """List the regions of a regional group, sorted by display name.

    Channels whose slug is exactly the group prefix (no region suffix) are
    left out.
    """
    regions: list[ChannelRegion] = []
    for channel in group.channels:
        if not channel.slug.startswith(group.id):
            continue
        region = channel.slug[len(group.id):]
        if not region:
            continue
        regions.append(
            ChannelRegion(
                id=channel.slug,
                name=region,
                display_name=region_display_name(region),
                channel=channel,
            )
        )
    return sorted(regions, key=lambda r: r.display_name)
