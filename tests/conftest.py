"""Shared fixtures for the arena tests."""

from __future__ import annotations

import pytest

from skirmish.config import GameConfig
from skirmish.game.state import GameState


@pytest.fixture()
def config() -> GameConfig:
    return GameConfig()


@pytest.fixture()
def game(config: GameConfig) -> GameState:
    return GameState(config, seed=7)
