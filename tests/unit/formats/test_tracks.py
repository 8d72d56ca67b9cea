"""Tests for track reference resolution."""

from pathlib import Path

import pytest

from mp4batch.formats.errors import (
    InvalidNumericLiteralError,
    MissingTrackFileError,
    UnrecognizedFilterError,
)
from mp4batch.formats.tokens import External, FromVideo, TrackSpec
from mp4batch.formats.tracks import parse_track_clause, resolve_track_source


class TestResolveTrackSource:
    def test_numeric_identifier(self):
        source = resolve_track_source("2", Path("/media/movie.vpy"))
        assert source == FromVideo(2)

    def test_numeric_identifier_skips_filesystem(self):
        def fail(_path):
            raise AssertionError("exists() should not be called")

        assert resolve_track_source("0", Path("movie.vpy"), exists=fail) == FromVideo(0)

    def test_alias_replaces_extension(self, source_file: Path):
        source = resolve_track_source("ac3", source_file)
        assert source == External(source_file.with_suffix(".ac3"))

    def test_multi_part_alias(self, source_file: Path):
        source = resolve_track_source("en.srt", source_file)
        assert source == External(source_file.parent / "movie.en.srt")

    def test_missing_alias(self, source_file: Path):
        with pytest.raises(MissingTrackFileError) as exc_info:
            resolve_track_source("dts", source_file)
        assert exc_info.value.path == source_file.parent / "movie.dts"
        assert exc_info.value.identifier == "dts"
        assert "movie.dts" in str(exc_info.value)

    def test_injected_exists(self):
        seen = []

        def exists(path):
            seen.append(path)
            return True

        source = resolve_track_source("flac", Path("/x/show.vpy"), exists=exists)
        assert source == External(Path("/x/show.flac"))
        assert seen == [Path("/x/show.flac")]


class TestParseTrackClause:
    def test_no_tags(self):
        track = parse_track_clause("1", Path("movie.vpy"))
        assert track == TrackSpec(FromVideo(1), enabled=False, forced=False)

    @pytest.mark.parametrize(
        ("clause", "enabled", "forced"),
        [
            ("1-e", True, False),
            ("1-d", True, False),
            ("1-f", False, True),
            ("1-ef", True, True),
            ("1-fd", True, True),
        ],
    )
    def test_tags(self, clause, enabled, forced):
        track = parse_track_clause(clause, Path("movie.vpy"))
        assert track.enabled is enabled
        assert track.forced is forced

    def test_unknown_tag(self):
        with pytest.raises(UnrecognizedFilterError):
            parse_track_clause("1-z", Path("movie.vpy"))

    @pytest.mark.parametrize("clause", ["", "-e", "1-", "1 e"])
    def test_malformed(self, clause):
        with pytest.raises(UnrecognizedFilterError):
            parse_track_clause(clause, Path("movie.vpy"))


class TestTrackIndexLimits:
    def test_large_index_kept_exactly(self):
        index = "9" * 40
        assert resolve_track_source(index, Path("movie.vpy")) == FromVideo(int(index))

    def test_index_past_digit_limit(self):
        with pytest.raises(InvalidNumericLiteralError) as exc_info:
            resolve_track_source("7" * 5000, Path("movie.vpy"))
        assert exc_info.value.filter_name == "track"
