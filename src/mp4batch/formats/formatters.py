"""Formatters for resolved output configurations.

This module provides functions to format the outputs resolved for each
input file for human-readable or JSON output. A file whose specification
failed to resolve is reported with its FormatError instead.
"""

import json
from pathlib import Path
from typing import Any

from mp4batch.formats.errors import FormatError
from mp4batch.formats.models import AudioEncoder, OutputJobConfig, VideoJobConfig
from mp4batch.formats.tokens import FromVideo, TrackSpec

# Input file -> its resolved outputs, or the error that stopped resolution
ResolutionResults = dict[Path, list[OutputJobConfig] | FormatError]


def format_human(
    source_file: Path,
    outputs: list[OutputJobConfig],
    output_dir: Path | None = None,
) -> str:
    """Format the resolved outputs of one input for terminal output.

    Args:
        source_file: Input the outputs were resolved for.
        outputs: Resolved configurations, in order.
        output_dir: Directory outputs are written to (None = beside input).

    Returns:
        Formatted string for terminal output.
    """
    lines: list[str] = [f"File: {source_file}"]

    for number, output in enumerate(outputs, start=1):
        path = output.output_path(source_file, output_dir)
        lines.append(f"  Output {number}: {path}")
        lines.append(f"    Video: {format_video_line(output.video)}")

        overrides = []
        if output.bit_depth_override is not None:
            overrides.append(f"{output.bit_depth_override}-bit")
        if output.resolution_override is not None:
            width, height = output.resolution_override
            overrides.append(f"{width}x{height}")
        if overrides:
            lines.append(f"    Overrides: {', '.join(overrides)}")

        audio = output.audio.encoder.value
        if output.audio.encoder is not AudioEncoder.COPY:
            audio += f" @ {output.audio.kbps_per_channel} kbps/channel"
        if output.audio_normalize:
            audio += " (normalized)"
        lines.append(f"    Audio: {audio}")

        if output.audio_tracks:
            lines.append("    Audio tracks:")
            for track in output.audio_tracks:
                lines.append(f"      {format_track_line(track)}")
        if output.subtitle_tracks:
            lines.append("    Subtitle tracks:")
            for track in output.subtitle_tracks:
                lines.append(f"      {format_track_line(track)}")

    return "\n".join(lines)


def format_error_human(source_file: Path, error: FormatError) -> str:
    """Format a resolution failure for terminal output."""
    detail = error.format_error().replace("\n", "\n    ")
    return f"File: {source_file}\n  Error: {detail}"


def format_video_line(video: VideoJobConfig) -> str:
    """Format a video configuration as a single line, e.g. 'aom crf=16 speed=4'."""
    parts = [video.encoder.value]
    for key, value in video.to_dict().items():
        if key == "encoder":
            continue
        if key == "compat":
            if value:
                parts.append("compat")
            continue
        parts.append(f"{key}={value}")
    return " ".join(parts)


def format_track_line(track: TrackSpec) -> str:
    """Format a single track reference."""
    if isinstance(track.source, FromVideo):
        parts = [f"#{track.source.index}"]
    else:
        parts = [str(track.source.path)]

    flags = []
    if track.enabled:
        flags.append("default")
    if track.forced:
        flags.append("forced")
    if flags:
        parts.append(f"({', '.join(flags)})")

    return " ".join(parts)


def error_to_dict(error: FormatError) -> dict[str, Any]:
    """Convert a FormatError to a dictionary for JSON serialization."""
    return {
        "type": type(error).__name__,
        "message": str(error),
        "segment_index": error.segment_index,
        "segment": error.source or None,
        "position": error.position,
    }


def format_json(
    results: ResolutionResults,
    output_dir: Path | None = None,
) -> str:
    """Format resolution results for several inputs as JSON.

    Args:
        results: Input file mapped to its resolved configurations or error,
            in discovery order.
        output_dir: Directory outputs are written to (None = beside input).

    Returns:
        JSON string.
    """
    data: list[dict[str, Any]] = []
    for source_file, result in results.items():
        if isinstance(result, FormatError):
            data.append({"file": str(source_file), "error": error_to_dict(result)})
            continue
        data.append(
            {
                "file": str(source_file),
                "outputs": [
                    {
                        "path": str(output.output_path(source_file, output_dir)),
                        **output.to_dict(),
                    }
                    for output in result
                ],
            }
        )
    return json.dumps(data, indent=2)
