"""Tests for the GameState aggregate."""

from __future__ import annotations

import pytest

from mapwar.domain import models as dm
from mapwar.domain.enums import TerritorySort
from mapwar.domain.errors import PlayerNotFound
from mapwar.domain.game import GameState
from mapwar.domain.layout import PlayerSpec, TerritorySpec, build_game


def _duel():
    territories = [
        TerritorySpec(TerritorySort.LAND, (0, 0), adjacent=[1], owner=0, units=4),
        TerritorySpec(TerritorySort.LAND, (1, 0), adjacent=[0, 2]),
        TerritorySpec(TerritorySort.LAND, (2, 0), adjacent=[1], owner=1, units=4),
    ]
    return build_game(territories, [PlayerSpec("a"), PlayerSpec("b")], seed=8)


def test_new_with_seed_is_deterministic():
    assert GameState.new(3).rng.generate() == GameState.new(3).rng.generate()


def test_player_index_unknown_token():
    with pytest.raises(PlayerNotFound, match="nobody"):
        _duel().player_index("nobody")


def test_no_winner_while_contested():
    state = _duel()
    assert state.alive_players() == [0, 1]
    assert state.winner() is None


def test_last_player_standing_after_resignation():
    state = _duel()
    state.process_action("b", dm.Resign())
    assert state.alive_players() == [0]
    assert state.winner() == 0


def test_player_without_territory_is_out():
    state = _duel()
    state.territories[2].clear()
    assert state.territories_owned_by(dm.PlayerIndex(1)) == []
    assert state.winner() == 0


def test_single_player_game_has_no_winner():
    territories = [TerritorySpec(TerritorySort.LAND, (0, 0), owner=0, units=1)]
    state = build_game(territories, [PlayerSpec("solo")], seed=0)
    assert state.winner() is None
