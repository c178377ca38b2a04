"""Tests for the subprocess runners."""

import subprocess
import sys

import pytest

from video2gif.utils.subprocess_utils import run_command, stream_command


class TestRunCommand:
    def test_captures_stdout(self):
        result = run_command([sys.executable, "-c", "print('hello')"])
        assert result.returncode == 0
        assert result.stdout.strip() == "hello"

    def test_check_raises_on_failure(self):
        with pytest.raises(subprocess.CalledProcessError) as excinfo:
            run_command([sys.executable, "-c", "import sys; sys.stderr.write('boom'); sys.exit(3)"])
        assert excinfo.value.returncode == 3
        assert "boom" in excinfo.value.stderr

    def test_no_check_returns_result(self):
        result = run_command([sys.executable, "-c", "import sys; sys.exit(2)"], check=False)
        assert result.returncode == 2

    def test_missing_binary(self):
        with pytest.raises(FileNotFoundError):
            run_command(["definitely-not-a-real-binary-video2gif"])


class TestStreamCommand:
    def test_lines_delivered_in_order(self):
        seen = []
        script = "print('a=1'); print(''); print('b=2')"
        code, tail = stream_command([sys.executable, "-c", script], seen.append)
        assert code == 0
        assert seen == ["a=1", "b=2"]
        assert tail == ["a=1", "b=2"]

    def test_stderr_is_merged(self):
        seen = []
        script = "import sys; sys.stderr.write('oops\\n'); sys.exit(1)"
        code, tail = stream_command([sys.executable, "-c", script], seen.append)
        assert code == 1
        assert seen == ["oops"]

    def test_tail_is_bounded(self):
        script = "for i in range(50): print(i)"
        _, tail = stream_command([sys.executable, "-c", script], lambda line: None, tail_lines=5)
        assert tail == ["45", "46", "47", "48", "49"]
