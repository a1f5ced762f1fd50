"""Unit tests for flowstate/liveness.py."""

from __future__ import annotations

import os
from unittest.mock import patch

import pytest

from flowstate.liveness import is_pid_alive


class TestInvalidInput:
    """Invalid ids are rejected without probing."""

    @pytest.mark.parametrize("pid", ["1234", None, 12.0, float("nan"), True, False, [1]])
    def test_non_integer_is_not_alive(self, pid):
        with patch("flowstate.liveness.os.kill") as kill:
            assert is_pid_alive(pid) is False
        kill.assert_not_called()

    @pytest.mark.parametrize("pid", [0, -1, -4242])
    def test_zero_or_negative_is_not_alive(self, pid):
        with patch("flowstate.liveness.os.kill") as kill:
            assert is_pid_alive(pid) is False
        kill.assert_not_called()


class TestProbe:
    """Probe outcomes map to liveness conservatively."""

    def test_own_pid_is_alive(self):
        assert is_pid_alive(os.getpid()) is True

    def test_exited_child_is_not_alive(self, dead_pid):
        assert is_pid_alive(dead_pid) is False

    def test_running_child_is_alive(self, live_holder):
        assert is_pid_alive(live_holder()) is True

    def test_probe_uses_signal_zero(self):
        with patch("flowstate.liveness.os.kill") as kill:
            is_pid_alive(5678)
        kill.assert_called_once_with(5678, 0)

    def test_no_such_process(self):
        with patch("flowstate.liveness.os.kill", side_effect=ProcessLookupError):
            assert is_pid_alive(5678) is False

    def test_permission_denied_means_exists(self):
        with patch("flowstate.liveness.os.kill", side_effect=PermissionError):
            assert is_pid_alive(1) is True

    @pytest.mark.parametrize("exc", [OSError("weird"), OverflowError("too big")])
    def test_other_faults_are_treated_as_alive(self, exc):
        with patch("flowstate.liveness.os.kill", side_effect=exc):
            assert is_pid_alive(5678) is True
