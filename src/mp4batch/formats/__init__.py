"""Encode-job specification language.

Provides resolve() to turn specification strings like
'enc=aom,q=20,p=anime;enc=x264,ext=mp4' into one OutputJobConfig per
``;``-separated segment, plus the lower-level parse_filters() and
resolve_output() stages.
"""

from mp4batch.formats.errors import (
    FilterValueOutOfRangeError,
    FormatError,
    InvalidAudioBitrateError,
    InvalidNumericLiteralError,
    MissingTrackFileError,
    UnknownAudioEncoderNameError,
    UnknownEncoderNameError,
    UnknownProfileError,
    UnrecognizedFilterError,
    UnsupportedBitDepthError,
    UnsupportedExtensionError,
)
from mp4batch.formats.models import (
    AomVideo,
    AudioConfig,
    AudioEncoder,
    CopyVideo,
    OutputJobConfig,
    Profile,
    Rav1eVideo,
    SvtAv1Video,
    VideoEncoderName,
    VideoJobConfig,
    X264Video,
    X265Video,
)
from mp4batch.formats.outputs import resolve
from mp4batch.formats.parser import parse_filters
from mp4batch.formats.resolver import resolve_output
from mp4batch.formats.tokens import External, FilterToken, FromVideo, TrackSpec

__all__ = [
    # Errors
    "FilterValueOutOfRangeError",
    "FormatError",
    "InvalidAudioBitrateError",
    "InvalidNumericLiteralError",
    "MissingTrackFileError",
    "UnknownAudioEncoderNameError",
    "UnknownEncoderNameError",
    "UnknownProfileError",
    "UnrecognizedFilterError",
    "UnsupportedBitDepthError",
    "UnsupportedExtensionError",
    # Models
    "AomVideo",
    "AudioConfig",
    "AudioEncoder",
    "CopyVideo",
    "External",
    "FilterToken",
    "FromVideo",
    "OutputJobConfig",
    "Profile",
    "Rav1eVideo",
    "SvtAv1Video",
    "TrackSpec",
    "VideoEncoderName",
    "VideoJobConfig",
    "X264Video",
    "X265Video",
    # Stages
    "parse_filters",
    "resolve",
    "resolve_output",
]
