"""
Shared pytest fixtures for banksim tests.
"""

from typing import List, Optional

import pytest

from banksim.metrics import Metrics


class ScriptedRandom:
    """Random source replaying fixed values, then a constant default."""

    def __init__(self, values: List[float], default: float = 0.0):
        self.values = list(values)
        self.default = default
        self.calls = 0

    def __call__(self) -> float:
        self.calls += 1
        if self.values:
            return self.values.pop(0)
        return self.default


class RecordingSink(Metrics):
    """Metrics sink that also keeps every event in order."""

    def __init__(self):
        super().__init__()
        self.events = []

    def on_enter(self, cid, t):
        super().on_enter(cid, t)
        self.events.append(("enter", cid, t))

    def on_exit(self, cid, t):
        super().on_exit(cid, t)
        self.events.append(("exit", cid, t))

    def on_drop(self, cid, t):
        super().on_drop(cid, t)
        self.events.append(("drop", cid, t))

    def snapshots_for(self, sid: str) -> List[dict]:
        return [h["stations"][sid] for h in self.history]


@pytest.fixture
def sink() -> RecordingSink:
    return RecordingSink()


@pytest.fixture
def scripted():
    """Factory for scripted random sources."""

    def _make(values: List[float], default: float = 0.0) -> ScriptedRandom:
        return ScriptedRandom(values, default)

    return _make


class StubRouter:
    """Router double collecting what a station hands over."""

    def __init__(self, stage_count: int = 2):
        self.stage_count = stage_count
        self.routed = []
        self.exited = []

    def route(self, customer, stage_index, now):
        self.routed.append((customer.cid, stage_index, now))
        return True

    def exit(self, customer, now):
        self.exited.append((customer.cid, now))


@pytest.fixture
def router() -> StubRouter:
    return StubRouter()
