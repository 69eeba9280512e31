"""
Dice pool: which dice are left this round and which piece a die moves.
"""

import random
from typing import Optional, Tuple

from config import DICE, DICE_USED_PER_ROUND, REVERSE_COLORS, ROLL_VALUES, WILDCARD_DIE
from models import GameState


def round_exhausted(state: GameState) -> bool:
    return len(state.used_dice) >= DICE_USED_PER_ROUND


def draw_die(
    state: GameState,
    rng: random.Random,
    forced_die: Optional[str] = None,
) -> str:
    """Move one die from available to used. A forced die is honored only if still available."""
    if forced_die is not None and forced_die in state.available_dice:
        die = forced_die
    else:
        die = rng.choice(state.available_dice)
    state.available_dice.remove(die)
    state.used_dice.append(die)
    return die


def die_color(die: str, rng: random.Random) -> str:
    """The wildcard picks one of the reverse pieces 50/50; every other die moves its own color."""
    if die == WILDCARD_DIE:
        return rng.choice(REVERSE_COLORS)
    return die


def roll_steps(rng: random.Random, forced_steps: Optional[int] = None) -> int:
    if forced_steps is not None:
        return forced_steps
    return rng.choice(ROLL_VALUES)


def roll(
    state: GameState,
    rng: random.Random,
    forced_die: Optional[str] = None,
    forced_steps: Optional[int] = None,
) -> Tuple[str, str, int]:
    """Draw a die and throw it. Returns (die, piece color, steps)."""
    die = draw_die(state, rng, forced_die)
    return die, die_color(die, rng), roll_steps(rng, forced_steps)


def reset_pool(state: GameState) -> None:
    state.available_dice = DICE[:]
    state.used_dice = []
