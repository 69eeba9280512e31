import random
from typing import Dict, List

import pytest

from engine import start_game
from models import GameState, ModifierKind, TrackModifier

SEATS = [("p1", "Ann"), ("p2", "Bo"), ("p3", "Cy")]

# Racers spread out near the start, reverse pieces near the finish, no stacks.
SPREAD = {
    1: ["Red"],
    2: ["Yellow"],
    3: ["Blue"],
    4: ["Purple"],
    5: ["Green"],
    14: ["Black"],
    15: ["White"],
}


def set_board(state: GameState, layout: Dict[int, List[str]]) -> None:
    """layout: position -> [bottom, ..., top]; every piece must appear exactly once."""
    seen = []
    for position, colors in layout.items():
        for order, color in enumerate(colors):
            piece = state.pieces[color]
            piece.position = position
            piece.stack_order = order
            seen.append(color)
    assert sorted(seen) == sorted(state.pieces)


def add_modifier(state: GameState, owner_id: str, position: int, kind: ModifierKind) -> TrackModifier:
    modifier = TrackModifier(id=f"tile-{owner_id}-{position}", position=position, kind=kind, owner_id=owner_id)
    state.modifiers.append(modifier)
    return modifier


def assert_dense_stacks(state: GameState) -> None:
    by_cell: Dict[int, List[int]] = {}
    for piece in state.pieces.values():
        assert 1 <= piece.position <= 16
        by_cell.setdefault(piece.position, []).append(piece.stack_order)
    for orders in by_cell.values():
        assert sorted(orders) == list(range(len(orders)))


@pytest.fixture
def rng():
    return random.Random(1234)


@pytest.fixture
def game(rng):
    state = start_game(SEATS, rng=rng)
    set_board(state, SPREAD)
    return state


@pytest.fixture
def deferred_game(rng):
    state = start_game(SEATS, rng=rng, defer_round_settlement=True)
    set_board(state, SPREAD)
    return state
