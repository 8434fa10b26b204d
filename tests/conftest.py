"""
Pytest fixtures for party-engine tests.

Provides a seeded RNG, a small in-memory content bank, a fake clock for
the dwell gate, and a controller wired with a recording view.
"""

import random
import sys
from pathlib import Path

import pytest

# Make the package importable without installing it
sys.path.insert(0, str(Path(__file__).parent.parent))

from party_engine.interface.view import RecordingView
from party_engine.state.schema import Prompt, PromptType
from party_engine.systems.content import ContentProvider
from party_engine.systems.players import PlayerRegistry
from party_engine.systems.session import SessionController


class FakeClock:
    """Monotonic clock the test moves by hand."""

    def __init__(self, start: float = 100.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


def make_prompts() -> list[Prompt]:
    prompts = [
        Prompt(id=f"t{i}", type=PromptType.TRUTH, mode="original", text=f"Truth {i}")
        for i in range(1, 4)
    ]
    prompts += [
        Prompt(id=f"d{i}", type=PromptType.DARE, mode="original", text=f"Dare {i}")
        for i in range(1, 3)
    ]
    # Party has truths only; its dares come from original
    prompts.append(Prompt(id="tp1", type=PromptType.TRUTH, mode="party", text="Party truth"))
    return prompts


@pytest.fixture
def rng():
    """Seeded random source."""
    return random.Random(1234)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def content(rng):
    """Small content bank: 3 truths, 2 dares in original, 1 party truth."""
    return ContentProvider(make_prompts(), rng=rng)


@pytest.fixture
def registry(rng):
    """Empty registry with the default limits."""
    return PlayerRegistry(rng=rng)


@pytest.fixture
def controller(content, rng, clock):
    """Controller over the small bank, nothing started yet."""
    return SessionController(content=content, rng=rng, clock=clock)


@pytest.fixture
def view(controller):
    """Recording view attached to the controller."""
    recorder = RecordingView()
    controller.attach_view(recorder)
    return recorder
