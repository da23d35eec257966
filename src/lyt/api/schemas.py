"""Pydantic wire models for DR radio API v4 responses."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, model_validator
from pydantic.alias_generators import to_camel

from lyt.domain.radio.models import AudioAsset, Channel, ImageAsset, Program, Track

# Role naming the performing artist on an index point
MAIN_ARTIST_ROLE = "Hovedkunstner"


class ChannelSchema(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: str
    slug: str
    title: str
    type: Optional[str] = None
    presentation_url: Optional[str] = None

    def to_domain(self) -> Channel:
        return Channel(
            id=self.id,
            slug=self.slug.lower(),
            title=self.title,
            presentation_url=self.presentation_url,
        )


class AudioAssetSchema(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    format: str
    target: str
    url: str
    type: Optional[str] = None
    is_stream_live: Optional[bool] = None
    bitrate: Optional[int] = None

    def to_domain(self) -> AudioAsset:
        return AudioAsset(
            format=self.format,
            target=self.target,
            url=self.url,
            is_stream_live=self.is_stream_live,
            bitrate=self.bitrate,
        )


class ImageAssetSchema(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: str
    target: str
    ratio: str
    format: str
    blur_hash: Optional[str] = None

    def to_domain(self) -> ImageAsset:
        return ImageAsset(
            id=self.id,
            target=self.target,
            ratio=self.ratio,
            format=self.format,
            blur_hash=self.blur_hash,
        )


class EpisodeSchema(BaseModel):
    """One schedule entry. Older payloads only carry ``learnId``."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: Optional[str] = None
    learn_id: Optional[str] = None
    type: str
    title: str
    description: Optional[str] = None
    start_time: datetime
    end_time: datetime
    channel: ChannelSchema
    audio_assets: list[AudioAssetSchema] = []
    image_assets: list[ImageAssetSchema] = []

    @model_validator(mode="after")
    def _require_identifier(self) -> "EpisodeSchema":
        if not (self.id or self.learn_id):
            raise ValueError("episode has neither id nor learnId")
        return self

    def to_domain(self) -> Program:
        return Program(
            id=self.id or self.learn_id,
            channel=self.channel.to_domain(),
            title=self.title,
            start_time=self.start_time,
            end_time=self.end_time,
            type=self.type,
            description=self.description,
            audio_assets=tuple(asset.to_domain() for asset in self.audio_assets),
            image_assets=tuple(asset.to_domain() for asset in self.image_assets),
        )


class ScheduleSnapshotSchema(BaseModel):
    """Response of ``schedules/snapshot/<slug>``."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    channel: Optional[ChannelSchema] = None
    items: list[EpisodeSchema] = []
    schedule_date: Optional[str] = None


class TrackRoleSchema(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    role: str
    name: str
    artist_urn: Optional[str] = None
    music_url: Optional[str] = None


class TrackSchema(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    track_urn: str
    title: str
    description: str = ""
    played_time: datetime
    duration_milliseconds: int
    roles: Optional[list[TrackRoleSchema]] = None
    classical: bool = False

    @property
    def artist_name(self) -> str:
        """Main artist from roles, falling back to the free-text description."""
        for role in self.roles or []:
            if role.role == MAIN_ARTIST_ROLE:
                return role.name
        return self.description

    def to_domain(self) -> Track:
        return Track(
            track_urn=self.track_urn,
            title=self.title,
            artist_name=self.artist_name,
            played_time=self.played_time,
            duration_ms=self.duration_milliseconds,
        )


class IndexPointsSchema(BaseModel):
    """Response of ``indexpoints/live/<slug>``."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    channel: Optional[ChannelSchema] = None
    total_size: int = 0
    items: list[TrackSchema] = []
