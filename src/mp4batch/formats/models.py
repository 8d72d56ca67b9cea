"""Output job configuration types.

This module contains the closed sets of encoders and profiles and the
per-encoder video configurations produced by the resolver. These have no
dependencies on the parser.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, ClassVar

from mp4batch.formats.tokens import TrackSpec


class Profile(Enum):
    """Encoder tuning profile."""

    FILM = "film"
    GRAIN = "grain"
    ANIME = "anime"
    ANIME_DETAILED = "animedetailed"
    ANIME_GRAIN = "animegrain"
    FAST = "fast"

    @classmethod
    def names(cls) -> tuple[str, ...]:
        return tuple(p.value for p in cls)

    @classmethod
    def from_name(cls, name: str) -> Profile:
        """Look up a profile by name, case-insensitively.

        Raises:
            ValueError: If the name is not a known profile.
        """
        return cls(name.lower())

    @property
    def is_anime(self) -> bool:
        return self in (Profile.ANIME, Profile.ANIME_DETAILED, Profile.ANIME_GRAIN)


class VideoEncoderName(Enum):
    """Video encoders selectable with enc=."""

    AOM = "aom"
    RAV1E = "rav1e"
    SVT = "svt"
    X264 = "x264"
    X265 = "x265"
    COPY = "copy"

    @classmethod
    def supported_encoders(cls) -> tuple[str, ...]:
        return tuple(e.value for e in cls)


class AudioEncoder(Enum):
    """Audio encoders selectable with aenc=."""

    COPY = "copy"
    AAC = "aac"
    FLAC = "flac"
    OPUS = "opus"

    @classmethod
    def supported_encoders(cls) -> tuple[str, ...]:
        return tuple(e.value for e in cls)


SUPPORTED_EXTENSIONS: tuple[str, ...] = ("mp4", "mkv")
SUPPORTED_BIT_DEPTHS: tuple[int, ...] = (8, 10)

# Speed and grain bounds shared by the AV1 encoders
SPEED_RANGE: tuple[int, int] = (0, 10)
GRAIN_RANGE: tuple[int, int] = (0, 64)

MIN_DIMENSION = 64


class _VideoConfigMixin:
    """Shared behaviour for the encoder-specific video configurations."""

    encoder: ClassVar[VideoEncoderName]
    av1an_name: ClassVar[str]
    quantizer_range: ClassVar[tuple[int, int] | None]

    @property
    def is_av1(self) -> bool:
        return self.encoder in (
            VideoEncoderName.AOM,
            VideoEncoderName.RAV1E,
            VideoEncoderName.SVT,
        )

    @property
    def output_suffix(self) -> str:
        """Filename suffix identifying outputs of this configuration.

        Copies are tagged ``.copy``; encodes are tagged with encoder and
        quantizer, e.g. ``.x264-q18``.
        """
        crf = getattr(self, "crf", None)
        if crf is None:
            return f".{self.encoder.value}"
        return f".{self.encoder.value}-q{crf}"

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        data: dict[str, Any] = {"encoder": self.encoder.value}
        for name in ("crf", "speed", "profile", "grain", "compat"):
            if hasattr(self, name):
                value = getattr(self, name)
                data[name] = value.value if isinstance(value, Profile) else value
        return data


@dataclass(frozen=True)
class CopyVideo(_VideoConfigMixin):
    """Stream-copy the source video without re-encoding."""

    encoder: ClassVar[VideoEncoderName] = VideoEncoderName.COPY
    av1an_name: ClassVar[str] = "copy"
    quantizer_range: ClassVar[tuple[int, int] | None] = None


@dataclass(frozen=True)
class AomVideo(_VideoConfigMixin):
    """libaom AV1 encode."""

    encoder: ClassVar[VideoEncoderName] = VideoEncoderName.AOM
    av1an_name: ClassVar[str] = "aom"
    quantizer_range: ClassVar[tuple[int, int] | None] = (0, 63)

    crf: int = 16
    speed: int = 4
    profile: Profile = Profile.FILM
    grain: int = 0
    compat: bool = False


@dataclass(frozen=True)
class Rav1eVideo(_VideoConfigMixin):
    """rav1e AV1 encode."""

    encoder: ClassVar[VideoEncoderName] = VideoEncoderName.RAV1E
    av1an_name: ClassVar[str] = "rav1e"
    quantizer_range: ClassVar[tuple[int, int] | None] = (0, 255)

    crf: int = 40
    speed: int = 5
    profile: Profile = Profile.FILM
    grain: int = 0


@dataclass(frozen=True)
class SvtAv1Video(_VideoConfigMixin):
    """SVT-AV1 encode."""

    encoder: ClassVar[VideoEncoderName] = VideoEncoderName.SVT
    av1an_name: ClassVar[str] = "svt-av1"
    quantizer_range: ClassVar[tuple[int, int] | None] = (0, 63)

    crf: int = 16
    speed: int = 4
    profile: Profile = Profile.FILM
    grain: int = 0


@dataclass(frozen=True)
class X264Video(_VideoConfigMixin):
    """x264 AVC encode."""

    encoder: ClassVar[VideoEncoderName] = VideoEncoderName.X264
    av1an_name: ClassVar[str] = "x264"
    quantizer_range: ClassVar[tuple[int, int] | None] = (-12, 51)

    crf: int = 18
    profile: Profile = Profile.FILM
    compat: bool = False


@dataclass(frozen=True)
class X265Video(_VideoConfigMixin):
    """x265 HEVC encode."""

    encoder: ClassVar[VideoEncoderName] = VideoEncoderName.X265
    av1an_name: ClassVar[str] = "x265"
    quantizer_range: ClassVar[tuple[int, int] | None] = (0, 51)

    crf: int = 18
    profile: Profile = Profile.FILM
    compat: bool = False


# Type alias for union of all video configurations
VideoJobConfig = (
    CopyVideo | AomVideo | Rav1eVideo | SvtAv1Video | X264Video | X265Video
)

# Encoder name -> configuration initialised with that encoder's defaults
VIDEO_CONFIG_TYPES: dict[VideoEncoderName, type[VideoJobConfig]] = {
    VideoEncoderName.AOM: AomVideo,
    VideoEncoderName.RAV1E: Rav1eVideo,
    VideoEncoderName.SVT: SvtAv1Video,
    VideoEncoderName.X264: X264Video,
    VideoEncoderName.X265: X265Video,
    VideoEncoderName.COPY: CopyVideo,
}


def default_video_config(encoder: VideoEncoderName) -> VideoJobConfig:
    """Return the default configuration for a video encoder."""
    return VIDEO_CONFIG_TYPES[encoder]()


@dataclass(frozen=True)
class AudioConfig:
    """Audio encoder selection for one output."""

    encoder: AudioEncoder = AudioEncoder.COPY
    kbps_per_channel: int = 96

    def to_dict(self) -> dict[str, Any]:
        return {
            "encoder": self.encoder.value,
            "kbps_per_channel": self.kbps_per_channel,
        }


@dataclass(frozen=True)
class OutputJobConfig:
    """Fully resolved configuration for one output encode.

    The default instance is the baseline used when no specification is
    given: x264 at crf 18 with the film profile, muxed to mkv.
    """

    video: VideoJobConfig = field(default_factory=X264Video)
    output_extension: str = "mkv"
    bit_depth_override: int | None = None
    resolution_override: tuple[int, int] | None = None
    audio: AudioConfig = field(default_factory=AudioConfig)
    audio_normalize: bool = False
    audio_tracks: tuple[TrackSpec, ...] = ()
    subtitle_tracks: tuple[TrackSpec, ...] = ()

    def output_filename(self, source_file: Path) -> str:
        """Name of the file this output is written to, next to the source."""
        return f"{source_file.stem}{self.video.output_suffix}.{self.output_extension}"

    def output_path(self, source_file: Path, output_dir: Path | None = None) -> Path:
        """Full output path; beside the source unless output_dir is given."""
        directory = output_dir if output_dir is not None else source_file.parent
        return directory / self.output_filename(source_file)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "video": self.video.to_dict(),
            "output_extension": self.output_extension,
            "bit_depth_override": self.bit_depth_override,
            "resolution_override": (
                list(self.resolution_override) if self.resolution_override else None
            ),
            "audio": self.audio.to_dict(),
            "audio_normalize": self.audio_normalize,
            "audio_tracks": [t.to_dict() for t in self.audio_tracks],
            "subtitle_tracks": [t.to_dict() for t in self.subtitle_tracks],
        }
