"""Tests for ExecutionControl."""

import threading
import time

import pytest

from hivemind.execution import ExecutionControl


class TestExecutionControl:
    """Tests for pause, resume and abort flags."""

    def test_initial_state(self):
        control = ExecutionControl()

        assert not control.is_paused
        assert not control.is_aborted
        assert control.check_continue()

    def test_pause_and_resume(self):
        control = ExecutionControl()

        control.pause()
        assert control.is_paused

        control.resume()
        assert not control.is_paused

    def test_check_continue_blocks_while_paused(self):
        control = ExecutionControl(poll_interval=0.01)
        control.pause()
        threading.Timer(0.05, control.resume).start()

        start = time.monotonic()
        assert control.check_continue()
        assert time.monotonic() - start >= 0.04

    def test_abort_releases_pause(self):
        """Test that aborting a paused run unblocks it with False."""
        control = ExecutionControl(poll_interval=0.01)
        control.pause()
        threading.Timer(0.02, control.abort).start()

        assert control.check_continue() is False
        assert control.is_aborted

    def test_wait_completes(self):
        control = ExecutionControl(poll_interval=0.01)

        assert control.wait(0.03)

    def test_wait_interrupted_by_abort(self):
        control = ExecutionControl(poll_interval=0.01)
        threading.Timer(0.02, control.abort).start()

        start = time.monotonic()
        assert control.wait(5.0) is False
        assert time.monotonic() - start < 2.0

    def test_reset(self):
        control = ExecutionControl()
        control.abort()

        control.reset()

        assert not control.is_aborted
        assert control.check_continue()

    def test_invalid_poll_interval(self):
        with pytest.raises(ValueError, match="poll_interval"):
            ExecutionControl(poll_interval=0)
