"""Tests for resolved output formatters."""

import json
from pathlib import Path

from mp4batch.formats import resolve
from mp4batch.formats.errors import UnknownProfileError
from mp4batch.formats.formatters import (
    format_error_human,
    format_human,
    format_json,
    format_track_line,
    format_video_line,
)
from mp4batch.formats.models import AomVideo, CopyVideo, Profile, X264Video
from mp4batch.formats.tokens import External, FromVideo, TrackSpec


class TestFormatVideoLine:
    def test_av1(self):
        line = format_video_line(AomVideo(crf=20, profile=Profile.ANIME))
        assert line == "aom crf=20 speed=4 profile=anime grain=0"

    def test_compat_flag(self):
        assert format_video_line(X264Video(compat=True)) == (
            "x264 crf=18 profile=film compat"
        )

    def test_copy(self):
        assert format_video_line(CopyVideo()) == "copy"


class TestFormatTrackLine:
    def test_video_track(self):
        assert format_track_line(TrackSpec(FromVideo(1))) == "#1"

    def test_external_track_with_flags(self):
        track = TrackSpec(External(Path("/m/a.ac3")), enabled=True, forced=True)
        assert format_track_line(track) == "/m/a.ac3 (default, forced)"


class TestFormatHuman:
    def test_lists_each_output(self):
        source = Path("/m/movie.vpy")
        outputs = resolve(
            "enc=aom,q=20,at=1-e;enc=x264,ext=mp4,aenc=aac,ab=80,an=1,bd=10", source,
        )
        text = format_human(source, outputs)
        assert text.splitlines()[0] == "File: /m/movie.vpy"
        assert "  Output 1: /m/movie.aom-q20.mkv" in text
        assert "  Output 2: /m/movie.x264-q18.mp4" in text
        assert "    Audio: aac @ 80 kbps/channel (normalized)" in text
        assert "    Overrides: 10-bit" in text
        assert "      #1 (default)" in text

    def test_output_dir(self):
        source = Path("/m/movie.vpy")
        text = format_human(source, resolve(None, source), Path("/out"))
        assert "Output 1: /out/movie.x264-q18.mkv" in text

    def test_error(self):
        error = UnknownProfileError("toon", ("film",))
        error.locate("p=toon", 0)
        text = format_error_human(Path("/m/movie.vpy"), error)
        assert text.startswith("File: /m/movie.vpy\n  Error: Unrecognized profile")
        assert "    p=toon" in text


class TestFormatJson:
    def test_outputs_and_errors(self):
        good = Path("/m/a.vpy")
        bad = Path("/m/b.vpy")
        error = UnknownProfileError("toon", ("film",))
        error.segment_index = 0
        data = json.loads(
            format_json({good: resolve("enc=copy", good), bad: error})
        )
        assert data[0]["file"] == "/m/a.vpy"
        assert data[0]["outputs"][0]["path"] == "/m/a.copy.mkv"
        assert data[0]["outputs"][0]["video"] == {"encoder": "copy"}
        assert data[1]["error"]["type"] == "UnknownProfileError"
        assert data[1]["error"]["segment_index"] == 0
