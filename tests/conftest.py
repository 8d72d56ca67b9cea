"""Shared test fixtures for mp4batch."""

import logging
import os
from pathlib import Path
from unittest.mock import patch

import pytest

from mp4batch.config import clear_config_cache


@pytest.fixture(autouse=True)
def mp4batch_data_dir(tmp_path: Path):
    """Point the data directory at an empty temporary directory.

    Any MP4BATCH_* variables from the developer's environment are removed so
    that the user's own config file and profiles never leak into tests.
    """
    data_dir = tmp_path / ".mp4batch"
    data_dir.mkdir()

    env = {k: v for k, v in os.environ.items() if not k.startswith("MP4BATCH_")}
    env["MP4BATCH_DATA_DIR"] = str(data_dir)

    clear_config_cache()
    with patch.dict(os.environ, env, clear=True):
        yield data_dir
    clear_config_cache()


@pytest.fixture(autouse=True)
def reset_root_logger():
    """Save and restore root logger state between tests."""
    root = logging.getLogger()
    original_handlers = root.handlers[:]
    original_level = root.level
    yield
    root.handlers[:] = original_handlers
    root.setLevel(original_level)


@pytest.fixture
def profiles_dir(mp4batch_data_dir: Path) -> Path:
    """Create the profiles directory inside the temporary data directory."""
    path = mp4batch_data_dir / "profiles"
    path.mkdir()
    return path


@pytest.fixture
def source_file(tmp_path: Path) -> Path:
    """Create a VapourSynth script with sibling track files."""
    media = tmp_path / "media"
    media.mkdir()
    script = media / "movie.vpy"
    script.write_text("import vapoursynth as vs\n")
    (media / "movie.ac3").touch()
    (media / "movie.en.srt").touch()
    return script
