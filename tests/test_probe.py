"""Tests for the description probe."""

import os
import subprocess
import tempfile
import time
from unittest.mock import patch, MagicMock

import pytest

from conftest import make_script, skip_on_windows
from shelfsteam.config import ProbeConfig
from shelfsteam.executor.probe import DescriptionProbe, first_line_of


class TestFirstLineOf:
    """Test first-line extraction."""

    def test_stops_at_newline(self):
        assert first_line_of(b"Hello\nWorld\n") == "Hello"

    def test_whole_capture_without_newline(self):
        assert first_line_of(b"Solo") == "Solo"

    def test_empty(self):
        assert first_line_of(b"") == ""

    def test_leading_newline(self):
        assert first_line_of(b"\nSecond") == ""

    def test_undecodable_bytes_are_replaced(self):
        assert first_line_of(b"caf\xff\nx") == "caf\ufffd"


class TestDescribability:
    """Entries that are never spawned."""

    def test_directory(self, repository, probe_config):
        probe = DescriptionProbe(probe_config)
        with patch("shelfsteam.executor.probe.subprocess.Popen") as popen:
            assert probe.describe(str(repository), "levels") == "(empty)"
        popen.assert_not_called()

    def test_non_executable_file(self, repository, probe_config):
        probe = DescriptionProbe(probe_config)
        with patch("shelfsteam.executor.probe.subprocess.Popen") as popen:
            assert probe.describe(str(repository), "notes.txt") == "(empty)"
        popen.assert_not_called()

    def test_missing_entry(self, repository, probe_config):
        probe = DescriptionProbe(probe_config)
        assert probe.describe(str(repository), "ghost") == "(empty)"

    @skip_on_windows
    def test_symlink_to_directory(self, repository, probe_config):
        os.symlink(repository / "levels", repository / "shortcut")
        probe = DescriptionProbe(probe_config)
        assert probe.describe(str(repository), "shortcut") == "(empty)"

    def test_custom_sentinel(self, repository):
        probe = DescriptionProbe(ProbeConfig(empty_description="-"))
        assert probe.describe(str(repository), "levels") == "-"


class TestProbeInvocation:
    """Test how entries are spawned."""

    def test_spawn_arguments(self, repository, probe_config):
        process = MagicMock()
        process.wait.return_value = 0

        def spawn(args, **kwargs):
            kwargs["stdout"].write(b"Chess game\n")
            return process

        probe = DescriptionProbe(probe_config)
        with patch("shelfsteam.executor.probe.subprocess.Popen", side_effect=spawn) as popen:
            assert probe.describe(str(repository), "hello") == "Chess game"

        args, kwargs = popen.call_args
        assert args[0] == ["hello", "--help"]
        assert kwargs["executable"] == os.path.join(str(repository), "hello")
        assert kwargs["stdout"] is not subprocess.PIPE
        assert kwargs["stdin"] == subprocess.DEVNULL
        process.wait.assert_called_once_with(timeout=None)
        process.communicate.assert_not_called()

    def test_spawn_failure_is_absorbed(self, repository, probe_config):
        probe = DescriptionProbe(probe_config)
        with patch("shelfsteam.executor.probe.subprocess.Popen", side_effect=OSError("boom")):
            assert probe.describe(str(repository), "hello") == "(empty)"

    def test_timeout_kills_child(self, repository):
        process = MagicMock()
        process.wait.side_effect = [
            subprocess.TimeoutExpired(cmd="hello", timeout=1.0),
            -9,
        ]
        probe = DescriptionProbe(ProbeConfig(timeout=1.0))

        with patch("shelfsteam.executor.probe.subprocess.Popen", return_value=process):
            assert probe.describe(str(repository), "hello") == "(empty)"

        process.kill.assert_called_once()
        assert process.wait.call_count == 2

    def test_interrupt_kills_and_reaps_child(self, repository, probe_config):
        process = MagicMock()
        process.wait.side_effect = [KeyboardInterrupt(), -9]
        probe = DescriptionProbe(probe_config)

        with patch("shelfsteam.executor.probe.subprocess.Popen", return_value=process):
            with pytest.raises(KeyboardInterrupt):
                probe.describe(str(repository), "hello")

        process.kill.assert_called_once()
        assert process.wait.call_count == 2


@skip_on_windows
class TestProbeExecution:
    """Probe real scripts."""

    def test_first_line_only(self, repository, probe_config):
        probe = DescriptionProbe(probe_config)
        assert probe.describe(str(repository), "hello") == "Hello"

    def test_no_output(self, repository, probe_config):
        probe = DescriptionProbe(probe_config)
        assert probe.describe(str(repository), "quiet") == "(empty)"

    def test_empty_first_line(self, tmp_path, probe_config):
        make_script(tmp_path / "blank", 'printf "\\nlater\\n"\n')
        probe = DescriptionProbe(probe_config)
        assert probe.describe(str(tmp_path), "blank") == "(empty)"

    def test_receives_help_flag(self, tmp_path, probe_config):
        make_script(tmp_path / "flag", 'echo "flag:$1"\n')
        probe = DescriptionProbe(probe_config)
        assert probe.describe(str(tmp_path), "flag") == "flag:--help"

    def test_custom_help_flag(self, tmp_path):
        make_script(tmp_path / "flag", 'echo "flag:$1"\n')
        probe = DescriptionProbe(ProbeConfig(help_flag="-h"))
        assert probe.describe(str(tmp_path), "flag") == "flag:-h"

    def test_stdin_is_not_inherited(self, tmp_path, probe_config):
        make_script(tmp_path / "reader", 'read line\necho "got:$line"\n')
        probe = DescriptionProbe(probe_config)
        assert probe.describe(str(tmp_path), "reader") == "got:"

    def test_invalid_executable_format(self, tmp_path, probe_config):
        bogus = tmp_path / "bogus"
        bogus.write_text("this is not a program\n")
        bogus.chmod(0o755)
        probe = DescriptionProbe(probe_config)
        assert probe.describe(str(tmp_path), "bogus") == "(empty)"

    def test_failing_entry_still_described(self, tmp_path, probe_config):
        make_script(tmp_path / "grumpy", "echo Grumpy game\nexit 3\n")
        probe = DescriptionProbe(probe_config)
        assert probe.describe(str(tmp_path), "grumpy") == "Grumpy game"

    def test_timeout(self, tmp_path):
        make_script(tmp_path / "sleepy", "exec sleep 10\n")
        probe = DescriptionProbe(ProbeConfig(timeout=0.2))
        assert probe.describe(str(tmp_path), "sleepy") == "(empty)"

    def test_leaves_no_capture_files(self, repository, probe_config):
        tmpdir = tempfile.gettempdir()
        before = {name for name in os.listdir(tmpdir) if name.startswith("shelf-steam")}
        probe = DescriptionProbe(probe_config)

        for name in ("hello", "quiet", "notes.txt", "levels"):
            probe.describe(str(repository), name)

        after = {name for name in os.listdir(tmpdir) if name.startswith("shelf-steam")}
        assert after == before

    def test_background_child_does_not_delay_description(self, tmp_path, probe_config):
        make_script(tmp_path / "daemon", "sleep 4 &\necho Daemon game\n")
        probe = DescriptionProbe(probe_config)

        started = time.monotonic()
        assert probe.describe(str(tmp_path), "daemon") == "Daemon game"
        assert time.monotonic() - started < 2
