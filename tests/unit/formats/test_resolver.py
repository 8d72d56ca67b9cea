"""Tests for folding filter tokens into an output configuration."""

import logging

import pytest

from mp4batch.formats.errors import (
    FilterValueOutOfRangeError,
    InvalidAudioBitrateError,
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
    X264Video,
    X265Video,
)
from mp4batch.formats.resolver import resolve_output, select_video_config
from mp4batch.formats.tokens import (
    AudioBitrateFilter,
    AudioEncoderFilter,
    AudioNormalizeFilter,
    AudioTracksFilter,
    BitDepthFilter,
    CompatFilter,
    ExtensionFilter,
    FromVideo,
    GrainFilter,
    ProfileFilter,
    QuantizerFilter,
    ResolutionFilter,
    SpeedFilter,
    SubtitleTracksFilter,
    TrackSpec,
    VideoEncoderFilter,
)


class TestEncoderSelection:
    @pytest.mark.parametrize(
        ("name", "expected"),
        [
            ("x264", X264Video(crf=18, profile=Profile.FILM, compat=False)),
            ("x265", X265Video(crf=18, profile=Profile.FILM, compat=False)),
            ("aom", AomVideo(crf=16, speed=4, profile=Profile.FILM, grain=0)),
            ("svt", SvtAv1Video(crf=16, speed=4, profile=Profile.FILM, grain=0)),
            ("rav1e", Rav1eVideo(crf=40, speed=5, profile=Profile.FILM, grain=0)),
            ("copy", CopyVideo()),
        ],
    )
    def test_per_encoder_defaults(self, name, expected):
        assert select_video_config([VideoEncoderFilter(name)]) == expected

    def test_defaults_to_x264(self):
        assert select_video_config([QuantizerFilter(20)]) == X264Video()

    def test_first_encoder_wins(self, caplog):
        tokens = [VideoEncoderFilter("aom"), VideoEncoderFilter("x265")]
        with caplog.at_level(logging.DEBUG, logger="mp4batch.formats.resolver"):
            video = select_video_config(tokens)
        assert isinstance(video, AomVideo)
        assert "Ignoring 1 additional encoder" in caplog.text

    def test_encoder_selected_before_folding(self):
        output = resolve_output([QuantizerFilter(30), VideoEncoderFilter("aom")])
        assert output.video == AomVideo(crf=30)


class TestQuantizerRanges:
    @pytest.mark.parametrize(
        ("encoder", "low", "high"),
        [
            ("x264", -12, 51),
            ("x265", 0, 51),
            ("aom", 0, 63),
            ("svt", 0, 63),
            ("rav1e", 0, 255),
        ],
    )
    def test_bounds_inclusive(self, encoder, low, high):
        for value in (low, high):
            tokens = [VideoEncoderFilter(encoder), QuantizerFilter(value)]
            output = resolve_output(tokens)
            assert output.video.crf == value

    @pytest.mark.parametrize(
        ("encoder", "value"),
        [
            ("x264", 52),
            ("x264", -13),
            ("x265", -1),
            ("aom", 64),
            ("svt", 64),
            ("rav1e", 256),
        ],
    )
    def test_out_of_range(self, encoder, value):
        with pytest.raises(FilterValueOutOfRangeError) as exc_info:
            resolve_output([VideoEncoderFilter(encoder), QuantizerFilter(value)])
        assert exc_info.value.filter_name == "q"
        assert exc_info.value.value == value

    def test_copy_ignores_quantizer(self):
        output = resolve_output([VideoEncoderFilter("copy"), QuantizerFilter(999)])
        assert output.video == CopyVideo()


class TestProjection:
    @pytest.mark.parametrize("encoder", ["aom", "svt", "rav1e"])
    def test_speed_applies_to_av1(self, encoder):
        output = resolve_output([VideoEncoderFilter(encoder), SpeedFilter(7)])
        assert output.video.speed == 7

    @pytest.mark.parametrize("encoder", ["aom", "svt", "rav1e"])
    def test_speed_out_of_range(self, encoder):
        with pytest.raises(FilterValueOutOfRangeError):
            resolve_output([VideoEncoderFilter(encoder), SpeedFilter(11)])

    @pytest.mark.parametrize("encoder", ["x264", "x265", "copy"])
    def test_speed_ignored_without_field(self, encoder):
        # Out-of-range values are not checked where the field doesn't exist
        output = resolve_output([VideoEncoderFilter(encoder), SpeedFilter(200)])
        assert not hasattr(output.video, "speed")

    def test_grain_bound(self):
        output = resolve_output([VideoEncoderFilter("aom"), GrainFilter(64)])
        assert output.video.grain == 64
        with pytest.raises(FilterValueOutOfRangeError):
            resolve_output([VideoEncoderFilter("aom"), GrainFilter(65)])

    def test_grain_ignored_for_x264(self):
        output = resolve_output([GrainFilter(100)])
        assert output.video == X264Video()

    @pytest.mark.parametrize("encoder", ["x264", "x265", "aom"])
    def test_compat_applies(self, encoder):
        output = resolve_output([VideoEncoderFilter(encoder), CompatFilter(True)])
        assert output.video.compat is True

    @pytest.mark.parametrize("encoder", ["svt", "rav1e", "copy"])
    def test_compat_ignored(self, encoder):
        output = resolve_output([VideoEncoderFilter(encoder), CompatFilter(True)])
        assert not hasattr(output.video, "compat")

    def test_profile_ignored_for_copy(self):
        output = resolve_output(
            [VideoEncoderFilter("copy"), ProfileFilter(Profile.ANIME)]
        )
        assert output.video == CopyVideo()

    def test_field_filters_commute(self):
        encoder = VideoEncoderFilter("aom")
        quantizer = QuantizerFilter(20)
        profile = ProfileFilter(Profile.ANIME)
        first = resolve_output([encoder, quantizer, profile])
        second = resolve_output([encoder, profile, quantizer])
        assert first == second
        assert first.video.crf == 20
        assert first.video.profile is Profile.ANIME

    def test_later_value_overrides_earlier(self):
        output = resolve_output([QuantizerFilter(10), QuantizerFilter(22)])
        assert output.video.crf == 22


class TestOutputFields:
    def test_container_fields(self):
        output = resolve_output(
            [ExtensionFilter("mp4"), BitDepthFilter(10), ResolutionFilter(1280, 720)]
        )
        assert output.output_extension == "mp4"
        assert output.bit_depth_override == 10
        assert output.resolution_override == (1280, 720)

    def test_audio_fields(self):
        output = resolve_output(
            [AudioEncoderFilter("opus"), AudioBitrateFilter(64), AudioNormalizeFilter()]
        )
        assert output.audio == AudioConfig(
            encoder=AudioEncoder.OPUS, kbps_per_channel=64
        )
        assert output.audio_normalize is True

    def test_zero_audio_bitrate(self):
        with pytest.raises(InvalidAudioBitrateError) as exc_info:
            resolve_output([AudioBitrateFilter(0)])
        assert isinstance(exc_info.value, FilterValueOutOfRangeError)

    def test_track_lists(self):
        audio = (TrackSpec(FromVideo(1), enabled=True),)
        subs = (TrackSpec(FromVideo(3), forced=True),)
        output = resolve_output([AudioTracksFilter(audio), SubtitleTracksFilter(subs)])
        assert output.audio_tracks == audio
        assert output.subtitle_tracks == subs

    def test_empty_stream_is_default(self):
        assert resolve_output([]) == OutputJobConfig()

    def test_error_position_taken_from_token(self):
        with pytest.raises(FilterValueOutOfRangeError) as exc_info:
            resolve_output([VideoEncoderFilter("rav1e"), SpeedFilter(11, position=10)])
        assert exc_info.value.position == 10
