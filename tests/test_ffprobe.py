"""Tests for ffprobe subprocess wrappers."""

import subprocess
from pathlib import Path
from unittest.mock import patch

import pytest

from audiobook_splitter.errors import ProbeError
from audiobook_splitter.ffprobe import (
    _run_ffprobe,
    count_chapters,
    get_duration,
    get_duration_ms,
)


def _mock_result(stdout: str = "", returncode: int = 0) -> subprocess.CompletedProcess:
    return subprocess.CompletedProcess(
        args=[], returncode=returncode, stdout=stdout, stderr="",
    )


class TestGetDuration:
    @patch("audiobook_splitter.ffprobe._run_ffprobe")
    def test_parses_float(self, mock_run):
        mock_run.return_value = _mock_result("123.456\n")
        assert get_duration(Path("test.m4b")) == 123.456

    @patch("audiobook_splitter.ffprobe._run_ffprobe")
    def test_empty_output_raises(self, mock_run):
        mock_run.return_value = _mock_result("")
        with pytest.raises(ProbeError, match="empty duration"):
            get_duration(Path("test.m4b"))

    @patch("audiobook_splitter.ffprobe._run_ffprobe")
    def test_failed_probe_raises(self, mock_run):
        mock_run.return_value = _mock_result("N/A", returncode=1)
        with pytest.raises(ProbeError):
            get_duration(Path("test.m4b"))

    @patch("audiobook_splitter.ffprobe._run_ffprobe")
    def test_unparseable_raises(self, mock_run):
        mock_run.return_value = _mock_result("N/A\n")
        with pytest.raises(ProbeError, match="unparseable"):
            get_duration(Path("test.m4b"))

    @patch("audiobook_splitter.ffprobe._run_ffprobe")
    def test_passes_binary(self, mock_run):
        mock_run.return_value = _mock_result("1.0\n")
        get_duration(Path("test.m4b"), ffprobe_bin="/opt/ffprobe")
        assert mock_run.call_args.args[1] == "/opt/ffprobe"


class TestGetDurationMs:
    @patch("audiobook_splitter.ffprobe._run_ffprobe")
    def test_rounds_to_ms(self, mock_run):
        mock_run.return_value = _mock_result("1800.0004\n")
        assert get_duration_ms(Path("test.m4b")) == 1_800_000

    @patch("audiobook_splitter.ffprobe._run_ffprobe")
    def test_rounds_fraction(self, mock_run):
        mock_run.return_value = _mock_result("123.4567\n")
        assert get_duration_ms(Path("test.m4b")) == 123_457


class TestRunFfprobe:
    @patch("subprocess.run")
    def test_common_flags(self, mock_run):
        mock_run.return_value = _mock_result()
        _run_ffprobe(["x.m4b"], "ffprobe")
        assert mock_run.call_args.args[0] == ["ffprobe", "-v", "error", "x.m4b"]


class TestCountChapters:
    @patch("audiobook_splitter.ffprobe._run_ffprobe")
    def test_with_chapters(self, mock_run):
        mock_run.return_value = _mock_result(
            '{"chapters": [{"id": 0}, {"id": 1}, {"id": 2}]}'
        )
        assert count_chapters(Path("test.m4b")) == 3

    @patch("audiobook_splitter.ffprobe._run_ffprobe")
    def test_no_chapters(self, mock_run):
        mock_run.return_value = _mock_result('{"chapters": []}')
        assert count_chapters(Path("test.m4b")) == 0

    @patch("audiobook_splitter.ffprobe._run_ffprobe")
    def test_ffprobe_error(self, mock_run):
        mock_run.return_value = _mock_result(returncode=1)
        assert count_chapters(Path("test.m4b")) == 0

    @patch("audiobook_splitter.ffprobe._run_ffprobe")
    def test_invalid_json(self, mock_run):
        mock_run.return_value = _mock_result("not json")
        assert count_chapters(Path("test.m4b")) == 0
