"""Resolution of a filter token stream into an output job configuration.

The video encoder is selected first, from the first enc= token anywhere in
the stream. Every token is then folded into the configuration in stream
order. Field-specific filters are projected onto the selected encoder:
a filter targeting a field the encoder lacks is ignored.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import replace

from mp4batch.formats.errors import (
    FilterValueOutOfRangeError,
    FormatError,
    InvalidAudioBitrateError,
)
from mp4batch.formats.models import (
    GRAIN_RANGE,
    SPEED_RANGE,
    AomVideo,
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
    default_video_config,
)
from mp4batch.formats.tokens import (
    AudioBitrateFilter,
    AudioEncoderFilter,
    AudioNormalizeFilter,
    AudioTracksFilter,
    BitDepthFilter,
    CompatFilter,
    ExtensionFilter,
    FilterToken,
    GrainFilter,
    ProfileFilter,
    QuantizerFilter,
    ResolutionFilter,
    SpeedFilter,
    SubtitleTracksFilter,
    VideoEncoderFilter,
)

logger = logging.getLogger(__name__)


def resolve_output(tokens: Sequence[FilterToken]) -> OutputJobConfig:
    """Fold one segment's filter tokens into a validated configuration.

    Args:
        tokens: Filter tokens for a single output, in clause order.

    Returns:
        The resolved OutputJobConfig.

    Raises:
        FilterValueOutOfRangeError: If a quantizer, speed, grain or audio
            bitrate value is outside its allowed range.
    """
    output = OutputJobConfig(video=select_video_config(tokens))
    for token in tokens:
        try:
            output = _apply_filter(output, token)
        except FormatError as e:
            e.position = token.position
            raise
    return output


def select_video_config(tokens: Sequence[FilterToken]) -> VideoJobConfig:
    """Pick the video configuration from the first enc= token.

    Later enc= tokens are ignored. Without any, x264 defaults apply.
    """
    encoders = [t for t in tokens if isinstance(t, VideoEncoderFilter)]
    if not encoders:
        return X264Video()
    if len(encoders) > 1:
        logger.debug(
            "Ignoring %d additional encoder selection(s) after enc=%s",
            len(encoders) - 1,
            encoders[0].name,
        )
    return default_video_config(VideoEncoderName(encoders[0].name))


def _apply_filter(output: OutputJobConfig, token: FilterToken) -> OutputJobConfig:
    """Apply a single token to the configuration."""
    if isinstance(token, VideoEncoderFilter):
        # Already handled by select_video_config
        return output

    if isinstance(token, QuantizerFilter):
        return replace(output, video=_project_quantizer(output.video, token.value))

    if isinstance(token, SpeedFilter):
        return replace(output, video=_project_speed(output.video, token.value))

    if isinstance(token, ProfileFilter):
        return replace(output, video=_project_profile(output.video, token.profile))

    if isinstance(token, GrainFilter):
        return replace(output, video=_project_grain(output.video, token.value))

    if isinstance(token, CompatFilter):
        return replace(output, video=_project_compat(output.video, token.enabled))

    if isinstance(token, ExtensionFilter):
        return replace(output, output_extension=token.extension)

    if isinstance(token, BitDepthFilter):
        return replace(output, bit_depth_override=token.bit_depth)

    if isinstance(token, ResolutionFilter):
        return replace(output, resolution_override=(token.width, token.height))

    if isinstance(token, AudioEncoderFilter):
        audio = replace(output.audio, encoder=AudioEncoder(token.name))
        return replace(output, audio=audio)

    if isinstance(token, AudioBitrateFilter):
        if token.kbps_per_channel == 0:
            raise InvalidAudioBitrateError(token.kbps_per_channel)
        audio = replace(output.audio, kbps_per_channel=token.kbps_per_channel)
        return replace(output, audio=audio)

    if isinstance(token, AudioTracksFilter):
        return replace(output, audio_tracks=token.tracks)

    if isinstance(token, AudioNormalizeFilter):
        return replace(output, audio_normalize=True)

    if isinstance(token, SubtitleTracksFilter):
        return replace(output, subtitle_tracks=token.tracks)

    raise TypeError(f"Unhandled filter token: {token!r}")


def _check_range(filter_name: str, value: int, bounds: tuple[int, int]) -> None:
    low, high = bounds
    if not low <= value <= high:
        raise FilterValueOutOfRangeError(
            filter_name, value, f"between {low} and {high}"
        )


def _project_quantizer(video: VideoJobConfig, value: int) -> VideoJobConfig:
    if isinstance(video, CopyVideo):
        return video
    if isinstance(video, (X264Video, X265Video, AomVideo, SvtAv1Video, Rav1eVideo)):
        # quantizer_range is set on every encoding variant
        _check_range("q", value, video.quantizer_range)  # type: ignore[arg-type]
        return replace(video, crf=value)
    raise TypeError(f"Unhandled video configuration: {video!r}")


def _project_speed(video: VideoJobConfig, value: int) -> VideoJobConfig:
    if isinstance(video, (AomVideo, Rav1eVideo, SvtAv1Video)):
        _check_range("s", value, SPEED_RANGE)
        return replace(video, speed=value)
    if isinstance(video, (X264Video, X265Video, CopyVideo)):
        return video
    raise TypeError(f"Unhandled video configuration: {video!r}")


def _project_profile(video: VideoJobConfig, profile: Profile) -> VideoJobConfig:
    if isinstance(video, (X264Video, X265Video, AomVideo, Rav1eVideo, SvtAv1Video)):
        return replace(video, profile=profile)
    if isinstance(video, CopyVideo):
        return video
    raise TypeError(f"Unhandled video configuration: {video!r}")


def _project_grain(video: VideoJobConfig, value: int) -> VideoJobConfig:
    if isinstance(video, (AomVideo, Rav1eVideo, SvtAv1Video)):
        _check_range("grain", value, GRAIN_RANGE)
        return replace(video, grain=value)
    if isinstance(video, (X264Video, X265Video, CopyVideo)):
        return video
    raise TypeError(f"Unhandled video configuration: {video!r}")


def _project_compat(video: VideoJobConfig, enabled: bool) -> VideoJobConfig:
    if isinstance(video, (X264Video, X265Video, AomVideo)):
        return replace(video, compat=enabled)
    if isinstance(video, (Rav1eVideo, SvtAv1Video, CopyVideo)):
        return video
    raise TypeError(f"Unhandled video configuration: {video!r}")
