"""Filter tokens produced by the specification parser.

One token is produced per recognized clause of a segment. Tokens record
the offset of their clause in the segment so resolution errors can point
back at it; the offset takes no part in equality.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from mp4batch.formats.models import Profile


@dataclass(frozen=True)
class FromVideo:
    """Track taken from the source video by stream index."""

    index: int


@dataclass(frozen=True)
class External:
    """Track read from a sibling file of the source."""

    path: Path


TrackSource = FromVideo | External


@dataclass(frozen=True)
class TrackSpec:
    """One audio or subtitle track to include in an output."""

    source: TrackSource
    enabled: bool = False
    forced: bool = False

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        if isinstance(self.source, FromVideo):
            source: dict[str, Any] = {"from_video": self.source.index}
        else:
            source = {"external": str(self.source.path)}
        return {"source": source, "enabled": self.enabled, "forced": self.forced}


def _position() -> Any:
    return field(default=0, compare=False, repr=False)


@dataclass(frozen=True)
class VideoEncoderFilter:
    """enc=<name>"""

    name: str
    position: int = _position()


@dataclass(frozen=True)
class QuantizerFilter:
    """q=, qp= or crf=<signed int>"""

    value: int
    position: int = _position()


@dataclass(frozen=True)
class SpeedFilter:
    """s= or speed=<int>"""

    value: int
    position: int = _position()


@dataclass(frozen=True)
class ProfileFilter:
    """p= or profile=<name>"""

    profile: Profile
    position: int = _position()


@dataclass(frozen=True)
class GrainFilter:
    """g= or grain=<int>"""

    value: int
    position: int = _position()


@dataclass(frozen=True)
class CompatFilter:
    """compat=<digits>, nonzero enables"""

    enabled: bool
    position: int = _position()


@dataclass(frozen=True)
class ExtensionFilter:
    """ext=mp4|mkv"""

    extension: str
    position: int = _position()


@dataclass(frozen=True)
class BitDepthFilter:
    """bd=8|10"""

    bit_depth: int
    position: int = _position()


@dataclass(frozen=True)
class ResolutionFilter:
    """res=<width>x<height>"""

    width: int
    height: int
    position: int = _position()


@dataclass(frozen=True)
class AudioEncoderFilter:
    """aenc=<name>"""

    name: str
    position: int = _position()


@dataclass(frozen=True)
class AudioBitrateFilter:
    """ab=<kbps per channel>"""

    kbps_per_channel: int
    position: int = _position()


@dataclass(frozen=True)
class AudioTracksFilter:
    """at=<track>|<track>..."""

    tracks: tuple[TrackSpec, ...]
    position: int = _position()


@dataclass(frozen=True)
class AudioNormalizeFilter:
    """an=1"""

    position: int = _position()


@dataclass(frozen=True)
class SubtitleTracksFilter:
    """st=<track>|<track>..."""

    tracks: tuple[TrackSpec, ...]
    position: int = _position()


# Type alias for union of all filter tokens
FilterToken = (
    VideoEncoderFilter
    | QuantizerFilter
    | SpeedFilter
    | ProfileFilter
    | GrainFilter
    | CompatFilter
    | ExtensionFilter
    | BitDepthFilter
    | ResolutionFilter
    | AudioEncoderFilter
    | AudioBitrateFilter
    | AudioTracksFilter
    | AudioNormalizeFilter
    | SubtitleTracksFilter
)
