"""Shared fixtures for the auto-reply bot tests."""

import sys
from pathlib import Path

import pytest

# Add the project root to path
sys.path.append(str(Path(__file__).parent))

from autoreply_engine import AutoReplyBot
from bot_session import LocalStorage
from reply_generator import FixedReplyPicker


class RecordingScheduler:
    """Collects scheduled replies; runs them right away unless told to hold."""

    def __init__(self, hold: bool = False):
        self.hold = hold
        self.delays = []
        self.pending = []

    def __call__(self, delay, callback):
        self.delays.append(delay)
        if self.hold:
            self.pending.append(callback)
        else:
            callback()

    def fire_all(self):
        pending, self.pending = self.pending, []
        for callback in pending:
            callback()


@pytest.fixture
def storage(tmp_path):
    return LocalStorage(tmp_path / "local_storage.json")


@pytest.fixture
def scheduler():
    return RecordingScheduler()


@pytest.fixture
def bot(storage, scheduler):
    return AutoReplyBot(storage=storage, picker=FixedReplyPicker(0),
                        scheduler=scheduler, reply_delay=3)
