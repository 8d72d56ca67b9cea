"""Tests for input file discovery."""

from pathlib import Path

import pytest

from mp4batch.discovery import (
    DiscoveryError,
    discover_input_files,
    is_input_file,
    is_processed_file,
    natural_sort_key,
)


def _touch(path: Path) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.touch()
    return path


class TestIsProcessedFile:
    @pytest.mark.parametrize(
        "name",
        [
            "ep01.x264-q18.vpy",
            "ep01.aom-q16.vpy",
            "ep01.svt-q20.vpy",
            "ep01.rav1e-q40.vpy",
            "ep01.x265-q-2.vpy",
            "ep01.copy.vpy",
        ],
    )
    def test_encode_outputs(self, name: str) -> None:
        assert is_processed_file(Path(name))

    @pytest.mark.parametrize("name", ["ep01.vpy", "copyright.vpy", "x264.vpy"])
    def test_plain_inputs(self, name: str) -> None:
        assert not is_processed_file(Path(name))

    def test_is_input_file(self) -> None:
        assert is_input_file(Path("movie.vpy"))
        assert not is_input_file(Path("movie.mkv"))


class TestNaturalSortKey:
    def test_numeric_runs(self) -> None:
        paths = [Path("ep10.vpy"), Path("ep2.vpy"), Path("ep1.vpy")]
        assert sorted(paths, key=natural_sort_key) == [
            Path("ep1.vpy"),
            Path("ep2.vpy"),
            Path("ep10.vpy"),
        ]

    def test_case_insensitive(self) -> None:
        paths = [Path("b.vpy"), Path("A.vpy")]
        assert sorted(paths, key=natural_sort_key) == [Path("A.vpy"), Path("b.vpy")]


class TestDiscoverInputFiles:
    def test_single_file(self, tmp_path: Path) -> None:
        script = _touch(tmp_path / "movie.vpy")
        assert discover_input_files(script) == [script]

    def test_single_file_kept_even_if_processed(self, tmp_path: Path) -> None:
        script = _touch(tmp_path / "movie.x264-q18.vpy")
        assert discover_input_files(script) == [script]

    def test_single_file_must_be_script(self, tmp_path: Path) -> None:
        video = _touch(tmp_path / "movie.mkv")
        with pytest.raises(DiscoveryError, match="must be a .vpy script"):
            discover_input_files(video)

    def test_directory_recursive_natural_order(self, tmp_path: Path) -> None:
        ep10 = _touch(tmp_path / "show" / "ep10.vpy")
        ep2 = _touch(tmp_path / "show" / "ep2.vpy")
        _touch(tmp_path / "show" / "ep2.aom-q16.vpy")
        _touch(tmp_path / "show" / "ep2.copy.vpy")
        _touch(tmp_path / "show" / "notes.txt")
        assert discover_input_files(tmp_path) == [ep2, ep10]

    def test_empty_directory(self, tmp_path: Path) -> None:
        assert discover_input_files(tmp_path) == []

    def test_missing_path(self, tmp_path: Path) -> None:
        with pytest.raises(DiscoveryError, match="neither a file nor a directory"):
            discover_input_files(tmp_path / "missing")
