"""
Round and final settlement: turn standings plus wagers into coin deltas.

Every delta goes through Player.credit so the coin ledger and the balance
never disagree, and every delta is echoed as one line of the settlement record.
"""

import logging
from datetime import datetime
from typing import Dict, List

from action_log import append_action
from config import (
    OUTCOME_MISS_PENALTY,
    OUTCOME_PAYOUT_FLOOR,
    OUTCOME_PAYOUTS,
    ROUND_MISS_PENALTY,
    ROUND_SECOND_PLACE_PAYOUT,
    SYSTEM_ACTOR,
)
from dice import reset_pool
from game_logic import rank_racing_pieces
from models import (
    ActionType,
    CoinSource,
    GameState,
    GameStatus,
    OutcomeKind,
    Player,
    SettlementRecord,
)
from wagers import claimed_round_cards, reset_round_cards

logger = logging.getLogger(__name__)


def _signed(amount: int) -> str:
    return f"{'won' if amount > 0 else 'lost'} {abs(amount)}"


def round_card_payout(card_color: str, card_value: int, first: str, second: str) -> int:
    if card_color == first:
        return card_value
    if card_color == second:
        return ROUND_SECOND_PLACE_PAYOUT
    return ROUND_MISS_PENALTY


def outcome_payout(submission_order: int) -> int:
    """8, 5, 3 for the first three correct wagers on a color, then 2 each."""
    if 1 <= submission_order <= len(OUTCOME_PAYOUTS):
        return OUTCOME_PAYOUTS[submission_order - 1]
    return OUTCOME_PAYOUT_FLOOR


def settle_round(state: GameState, open_next: bool = True) -> SettlementRecord:
    """
    Pay out every claimed round card, then open the next round:
      - card on the leader pays its face value,
      - card on the runner-up pays 1,
      - any other card costs 1.
    Dice and round cards reset, the first seat starts the new round. With
    open_next=False (the game just ended) only the payouts happen.
    """
    ranking = rank_racing_pieces(state)
    first, second = ranking[0], ranking[1]
    round_number = state.round
    details: List[str] = []

    for card in claimed_round_cards(state):
        player = state.player(card.holder_id)
        if player is None:
            continue
        amount = round_card_payout(card.color, card.value, first, second)
        player.credit(
            amount,
            CoinSource.ROUND_BET,
            f"Round {round_number} wager on {card.color} ({card.value}): {_signed(amount)}",
            round_number,
        )
        details.append(f"{player.name} wagered on {card.color} and {_signed(amount)} coins")

    record = SettlementRecord(round=round_number, details=tuple(details), timestamp=datetime.now())
    state.settlements.append(record)

    append_action(
        state, SYSTEM_ACTOR, ActionType.ROUND_END,
        f"Round {round_number} over, first: {first}, second: {second}",
    )
    for line in details:
        append_action(state, SYSTEM_ACTOR, ActionType.ROUND_END, line)

    logger.info("round %d settled: first=%s second=%s, %d card(s)", round_number, first, second, len(details))

    state.settlement_due = False
    if open_next:
        reset_pool(state)
        reset_round_cards(state)
        state.round += 1
        state.current_player_index = 0
    return record


def _settle_outcome_kind(
    state: GameState,
    kind: OutcomeKind,
    correct_color: str,
    details: List[str],
) -> None:
    source = CoinSource.CHAMPION_BET if kind == OutcomeKind.CHAMPION else CoinSource.LOSER_BET
    label = kind.value

    for wager in state.outcome_wagers:
        if wager.kind != kind or wager.color != correct_color:
            continue
        player = state.player(wager.player_id)
        if player is None:
            continue
        amount = outcome_payout(wager.submission_order)
        player.credit(
            amount,
            source,
            f"{label.capitalize()} wager on {correct_color} (#{wager.submission_order}): won {amount}",
            state.round,
        )
        details.append(f"{player.name}'s {label} wager on {correct_color} won {amount} coins")

    for player in state.players:
        colors = player.champion_colors if kind == OutcomeKind.CHAMPION else player.loser_colors
        misses = sum(1 for c in colors if c != correct_color)
        if misses == 0:
            continue
        amount = OUTCOME_MISS_PENALTY * misses
        player.credit(amount, source, f"Wrong {label} wager(s): lost {-amount}", state.round)
        details.append(f"{player.name} lost {-amount} coins on wrong {label} wagers")


def settle_final(state: GameState) -> SettlementRecord:
    """Pay champion and loser wagers by submission order and end the game."""
    ranking = rank_racing_pieces(state)
    champion, last = ranking[0], ranking[-1]
    details: List[str] = [f"Game over, champion: {champion}, last: {last}"]

    _settle_outcome_kind(state, OutcomeKind.CHAMPION, champion, details)
    _settle_outcome_kind(state, OutcomeKind.LOSER, last, details)

    record = SettlementRecord(
        round=state.round,
        details=tuple(details),
        timestamp=datetime.now(),
        is_final=True,
    )
    state.settlements.append(record)
    for line in details:
        append_action(state, SYSTEM_ACTOR, ActionType.GAME_END, line)

    state.status = GameStatus.ENDED
    state.settlement_due = False
    logger.info("game over after round %d: champion=%s last=%s", state.round, champion, last)
    return record


def final_standings(state: GameState) -> List[Player]:
    """Players by coin balance, richest first; seating order breaks ties."""
    return sorted(state.players, key=lambda p: -p.coin_balance)


def coin_breakdown(player: Player) -> Dict[str, int]:
    totals: Dict[str, int] = {}
    for entry in player.coin_ledger:
        totals[entry.source.value] = totals.get(entry.source.value, 0) + entry.amount
    return totals
