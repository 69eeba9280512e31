"""
Wager ledger: round cards per color and champion / loser wagers.

Validators raise before mutating, so a rejected claim leaves no trace.
"""

from typing import List, Optional

from config import RACING_COLORS, ROUND_CARD_VALUES
from errors import DuplicateWager, ResourceExhausted
from models import GameState, OutcomeKind, OutcomeWager, Player, RoundWagerCard


def make_round_cards() -> List[RoundWagerCard]:
    cards = []
    for color in RACING_COLORS:
        for i, value in enumerate(ROUND_CARD_VALUES, start=1):
            cards.append(RoundWagerCard(id=f"round-{color}-{i}", color=color, value=value))
    return cards


def available_round_cards(state: GameState, color: Optional[str] = None) -> List[RoundWagerCard]:
    return [
        c for c in state.round_cards
        if c.holder_id is None and (color is None or c.color == color)
    ]


def next_round_card(state: GameState, color: str) -> RoundWagerCard:
    """Highest-value unclaimed card for `color`; equal values go in deck order."""
    cards = available_round_cards(state, color)
    if not cards:
        raise ResourceExhausted(f"no round cards left for {color}")
    return max(cards, key=lambda c: c.value)


def claim_round_card(state: GameState, player: Player, color: str) -> RoundWagerCard:
    card = next_round_card(state, color)
    card.holder_id = player.id
    player.round_cards.append(card)
    return card


def check_outcome_wager(player: Player, color: str) -> None:
    if color in player.wagered_colors():
        raise DuplicateWager(f"{player.id} already wagered on {color}")


def claim_outcome_wager(
    state: GameState, player: Player, color: str, kind: OutcomeKind
) -> OutcomeWager:
    check_outcome_wager(player, color)
    order = sum(1 for w in state.outcome_wagers if w.color == color and w.kind == kind) + 1
    wager = OutcomeWager(player_id=player.id, color=color, kind=kind, submission_order=order)
    state.outcome_wagers.append(wager)
    if kind == OutcomeKind.CHAMPION:
        player.champion_colors.append(color)
    else:
        player.loser_colors.append(color)
    return wager


def claimed_round_cards(state: GameState) -> List[RoundWagerCard]:
    return [c for c in state.round_cards if c.holder_id is not None]


def reset_round_cards(state: GameState) -> None:
    state.round_cards = make_round_cards()
    for player in state.players:
        player.round_cards = []
