"""
Core board logic: initial placement, stacks, piece movement and ranking.
"""

import logging
import random
from typing import Dict, List, Optional

from config import (
    FINISH_POSITION,
    MODIFIER_REWARD,
    PIECES,
    RACING_COLORS,
    RACING_START_POSITIONS,
    REVERSE_COLORS,
    REVERSE_START_POSITIONS,
    TRACK_END,
    TRACK_START,
)
from models import CoinSource, GameState, ModifierKind, MoveOutcome, Piece, TrackModifier

logger = logging.getLogger(__name__)


def make_initial_pieces(rng: Optional[random.Random] = None) -> Dict[str, Piece]:
    """Racing pieces start on 1..3, reverse pieces on 13..15; shared cells stack in color order."""
    rng = rng or random.Random()
    pieces: Dict[str, Piece] = {}
    heights: Dict[int, int] = {}

    for color in PIECES:
        is_reverse = color in REVERSE_COLORS
        position = rng.choice(REVERSE_START_POSITIONS if is_reverse else RACING_START_POSITIONS)
        pieces[color] = Piece(
            color=color,
            position=position,
            stack_order=heights.get(position, 0),
            is_reverse=is_reverse,
        )
        heights[position] = heights.get(position, 0) + 1

    return pieces


def pieces_at(state: GameState, position: int) -> List[Piece]:
    """Pieces on one cell, bottom first."""
    found = [p for p in state.pieces.values() if p.position == position]
    return sorted(found, key=lambda p: p.stack_order)


def stacks(state: GameState) -> Dict[int, List[str]]:
    """position -> [bottom, ..., top] for every occupied cell."""
    result: Dict[int, List[str]] = {}
    for piece in sorted(state.pieces.values(), key=lambda p: (p.position, p.stack_order)):
        result.setdefault(piece.position, []).append(piece.color)
    return result


def modifier_at(state: GameState, position: int) -> Optional[TrackModifier]:
    for modifier in state.modifiers:
        if modifier.position == position:
            return modifier
    return None


def modifier_adjustment(piece: Piece, modifier: TrackModifier) -> int:
    """
    Extra displacement from a tile. Accelerate pushes a piece further along its own
    direction of travel, so reverse pieces get the opposite sign.
    """
    delta = 1 if modifier.kind == ModifierKind.ACCELERATE else -1
    return -delta if piece.is_reverse else delta


def clamp_position(position: int) -> int:
    return max(TRACK_START, min(TRACK_END, position))


def is_finished(state: GameState) -> bool:
    return any(p.position >= FINISH_POSITION for p in state.pieces.values())


def _restack(cell: List[Piece]) -> None:
    for order, piece in enumerate(cell):
        piece.stack_order = order


def resolve_move(state: GameState, color: str, steps: int) -> MoveOutcome:
    """
    Move `color` by `steps` in its own direction, carrying every piece above it.

      - Raw destination is position +steps (forward) or -steps (reverse).
      - A tile on the raw destination adds its ±1 and pays its owner.
      - The result is clamped to the track.
      - The moving block lands on top of whatever already sits at the destination.
    """
    piece = state.pieces[color]
    origin = piece.position

    raw = origin - steps if piece.is_reverse else origin + steps
    destination = raw
    modifier = modifier_at(state, raw)
    if modifier is not None:
        destination += modifier_adjustment(piece, modifier)
    destination = clamp_position(destination)

    origin_cell = pieces_at(state, origin)
    idx = origin_cell.index(piece)
    block = origin_cell[idx:]
    left_behind = origin_cell[:idx]

    if destination == origin:
        # Block stays on top of its own cell; order is already dense.
        landing = origin_cell
    else:
        landing = pieces_at(state, destination) + block
        for p in block:
            p.position = destination
        _restack(left_behind)
    _restack(landing)

    logger.debug(
        "%s moves %d: %d -> %d (raw %d) carrying %s",
        color, steps, origin, destination, raw, [p.color for p in block[1:]],
    )

    if modifier is not None:
        owner = state.player(modifier.owner_id)
        if owner is not None:
            owner.credit(
                MODIFIER_REWARD,
                CoinSource.TILE_REWARD,
                f"{modifier.kind.value} tile on cell {modifier.position} triggered by {color}",
                state.round,
            )

    return MoveOutcome(
        color=color,
        steps=steps,
        origin=origin,
        destination=destination,
        moved_block=[p.color for p in block],
        modifier=modifier,
        finished=is_finished(state),
    )


def rank_racing_pieces(state: GameState) -> List[str]:
    """
    Rank racing pieces from best to worst:
      1) Higher position,
      2) Tie-break by who is higher on the stack at that position.
    Reverse pieces are ignored for ranking.
    """
    return sorted(
        RACING_COLORS,
        key=lambda c: (state.pieces[c].position, state.pieces[c].stack_order),
        reverse=True,
    )


def leading_color(state: GameState) -> str:
    return rank_racing_pieces(state)[0]
