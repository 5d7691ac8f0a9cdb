"""Shared fixtures."""

from datetime import datetime, timedelta, timezone

import pytest

from vsg.models import ProjectDraft
from vsg.store import ProjectStore


class FakeClient:
    """Stands in for a generation client; records prompts, replays responses."""

    model = "fake-model"

    def __init__(self, *responses):
        self.responses = list(responses) or [""]
        self.prompts = []
        self.systems = []

    def create_message(self, prompt, max_tokens=4096, system=None, temperature=0.7):
        self.prompts.append(prompt)
        self.systems.append(system)
        response = self.responses.pop(0) if len(self.responses) > 1 else self.responses[0]
        if isinstance(response, Exception):
            raise response
        return response


class TickingClock:
    """Clock that advances one second per reading."""

    def __init__(self, start=datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc)):
        self.now = start

    def __call__(self):
        self.now += timedelta(seconds=1)
        return self.now


@pytest.fixture
def fake_client():
    return FakeClient


@pytest.fixture
def clock():
    return TickingClock()


@pytest.fixture
def store(clock):
    return ProjectStore(clock=clock)


@pytest.fixture
def draft():
    return ProjectDraft(
        title="Morning Coffee",
        description="How a barista starts the day",
        target_audience="young-adults",
        story_style="drama",
        format="reels",
        duration="30-60 seconds",
    )
