"""Tests for the top-level command group."""

import json
from pathlib import Path

from click.testing import CliRunner

from mp4batch import __version__
from mp4batch.cli import main
from mp4batch.cli.exit_codes import ExitCode


class TestMain:
    def test_version(self) -> None:
        result = CliRunner().invoke(main, ["--version"])
        assert result.exit_code == 0
        assert __version__ in result.stdout

    def test_commands_registered(self) -> None:
        result = CliRunner().invoke(main, ["--help"])
        assert result.exit_code == 0
        assert "resolve" in result.stdout
        assert "profiles" in result.stdout

    def test_log_file_and_json(self, tmp_path: Path, source_file: Path) -> None:
        log_file = tmp_path / "logs" / "mp4batch.log"
        result = CliRunner().invoke(
            main,
            [
                "--log-file",
                str(log_file),
                "--log-json",
                "--log-level",
                "debug",
                "resolve",
                str(source_file),
                "-f",
                "enc=x264",
            ],
        )
        assert result.exit_code == 0, result.output
        entries = [json.loads(line) for line in log_file.read_text().splitlines()]
        messages = [entry["message"] for entry in entries]
        assert messages[0].startswith("mp4batch starting: log_level=debug")
        assert any(m.startswith("Resolving 1 file(s)") for m in messages)
        (resolved,) = [e for e in entries if e["message"].startswith("Resolved 1")]
        assert resolved["input"] == str(source_file)
        assert resolved["context"] == {"output_count": 1, "encoders": ["x264"]}

    def test_invalid_log_config(self, mp4batch_data_dir: Path) -> None:
        (mp4batch_data_dir / "config.toml").write_text('[logging]\nformat = "xml"\n')
        result = CliRunner().invoke(main, ["profiles", "list"])
        assert result.exit_code == ExitCode.CONFIG_ERROR
        assert "format must be one of" in result.stderr

    def test_failure_logged_with_input_and_segment(
        self, tmp_path: Path, source_file: Path
    ) -> None:
        log_file = tmp_path / "mp4batch.log"
        result = CliRunner().invoke(
            main,
            [
                "--log-file",
                str(log_file),
                "--log-json",
                "resolve",
                str(source_file),
                "-f",
                "enc=x264;p=toon",
            ],
        )
        assert result.exit_code == ExitCode.PARSE_ERROR
        entries = [json.loads(line) for line in log_file.read_text().splitlines()]
        (failure,) = [e for e in entries if e["level"] == "ERROR"]
        assert failure["input"] == str(source_file)
        assert failure["context"] == {
            "segment_index": 1,
            "error_type": "UnknownProfileError",
        }
