"""
Turn and round state machine.

Public operations take the GameState they act on, validate first and only
then mutate. A rejected action returns False / None and changes nothing;
`apply_action` is the variant for the session relay and lets the typed
RuleViolation through so the sender can be told why.
"""

import logging
import random
from typing import Iterable, List, Optional, Tuple, Union

from action_log import append_action
from config import (
    MAX_PLAYERS,
    MIN_PLAYERS,
    MODIFIER_MAX_POSITION,
    MODIFIER_MIN_POSITION,
    RACING_COLORS,
    ROLL_REWARD,
    ROLL_VALUES,
    STARTING_COINS,
)
from dice import roll, round_exhausted
from errors import (
    GameOver,
    IllegalPlacement,
    InvalidTurn,
    MalformedAction,
    RuleViolation,
    SettlementPending,
)
from game_logic import make_initial_pieces, modifier_at, pieces_at, resolve_move
from models import (
    Action,
    ActionType,
    CoinSource,
    GameState,
    GameStatus,
    ModifierKind,
    OutcomeKind,
    Player,
    RollOutcome,
    TrackModifier,
)
from settlement import settle_final, settle_round
from wagers import (
    check_outcome_wager,
    claim_outcome_wager as record_outcome_wager,
    claim_round_card as assign_round_card,
    make_round_cards,
    next_round_card,
)

logger = logging.getLogger(__name__)


def start_game(
    seats: Iterable[Tuple[str, str]],
    rng: Optional[random.Random] = None,
    defer_round_settlement: bool = False,
) -> GameState:
    """
    Create a fresh table. `seats` is (player_id, display name) in seating order.
    Seat 0 takes the first turn of every round.
    """
    seats = list(seats)
    if not MIN_PLAYERS <= len(seats) <= MAX_PLAYERS:
        raise ValueError(f"need {MIN_PLAYERS}-{MAX_PLAYERS} players, got {len(seats)}")
    ids = [pid for pid, _ in seats]
    if len(set(ids)) != len(ids):
        raise ValueError(f"duplicate player ids: {ids}")

    players = []
    for pid, name in seats:
        player = Player(id=pid, name=name, coin_balance=0)
        player.credit(STARTING_COINS, CoinSource.INITIAL, "Starting coins", 0)
        players.append(player)

    state = GameState(
        players=players,
        pieces=make_initial_pieces(rng),
        round_cards=make_round_cards(),
        defer_round_settlement=defer_round_settlement,
    )
    logger.info("game started with %d players", len(players))
    return state


def current_player(state: GameState) -> Player:
    return state.players[state.current_player_index]


def advance_turn(state: GameState) -> None:
    state.current_player_index = (state.current_player_index + 1) % len(state.players)


def _check_actor(state: GameState, player_id: str, allow_pending: bool = False) -> Player:
    if state.status == GameStatus.ENDED:
        raise GameOver("the game has ended")
    if state.settlement_due and not allow_pending:
        raise SettlementPending(f"round {state.round} is waiting to be settled")
    player = current_player(state)
    if player.id != player_id:
        raise InvalidTurn(f"it is {player.id}'s turn, not {player_id}'s")
    return player


def _check_racing_color(color: Optional[str]) -> str:
    if color not in RACING_COLORS:
        raise MalformedAction(f"not a racing color: {color!r}")
    return color


def _reject(operation: str, exc: RuleViolation) -> None:
    logger.warning("%s rejected (%s): %s", operation, type(exc).__name__, exc)


def _roll(
    state: GameState,
    player_id: str,
    forced_die: Optional[str],
    forced_steps: Optional[int],
    rng: Optional[random.Random],
) -> Optional[RollOutcome]:
    player = _check_actor(state, player_id, allow_pending=True)
    if forced_steps is not None and forced_steps not in ROLL_VALUES:
        raise MalformedAction(f"steps must be one of {ROLL_VALUES}, got {forced_steps}")

    if state.settlement_due or round_exhausted(state):
        # The withheld die is never rolled; asking for it closes the round instead.
        settle_round(state)
        return None

    rng = rng or random.Random()
    die, color, steps = roll(state, rng, forced_die, forced_steps)
    player.credit(ROLL_REWARD, CoinSource.DICE_ROLL, "Dice roll reward", state.round)
    move = resolve_move(state, color, steps)

    description = f"rolled the {die} die: {color} moves {steps} to cell {move.destination}"
    if move.modifier is not None:
        owner = state.player(move.modifier.owner_id)
        owner_name = owner.name if owner else move.modifier.owner_id
        description += f", triggering {owner_name}'s {move.modifier.kind.value} tile (+1 coin)"
    append_action(state, player_id, ActionType.ROLL, description)

    outcome = RollOutcome(player_id=player_id, die=die, color=color, steps=steps, move=move)
    state.last_roll = outcome

    if move.finished:
        if round_exhausted(state):
            settle_round(state, open_next=False)
        settle_final(state)
    elif round_exhausted(state):
        if state.defer_round_settlement:
            state.settlement_due = True
        else:
            settle_round(state)
    else:
        advance_turn(state)
    return outcome


def roll_next(
    state: GameState,
    player_id: str,
    forced_die: Optional[str] = None,
    forced_steps: Optional[int] = None,
    rng: Optional[random.Random] = None,
) -> Optional[RollOutcome]:
    """
    Draw and throw one die for the current player. Returns None when the round's
    dice are used up (the round is settled instead) or when the roll is rejected.
    """
    try:
        return _roll(state, player_id, forced_die, forced_steps, rng)
    except RuleViolation as exc:
        _reject("roll", exc)
        return None


def settle_due_round(state: GameState) -> bool:
    """Settle a round left open by deferred settlement. For the orchestrator's timer."""
    if not state.settlement_due or state.status == GameStatus.ENDED:
        return False
    settle_round(state)
    return True


def _claim_round_card(state: GameState, player_id: str, color: Optional[str]) -> None:
    player = _check_actor(state, player_id)
    color = _check_racing_color(color)
    next_round_card(state, color)

    card = assign_round_card(state, player, color)
    append_action(state, player_id, ActionType.ROUND_BET, f"took the {card.value} round card on {color}")
    advance_turn(state)


def claim_round_card(state: GameState, player_id: str, color: str) -> bool:
    try:
        _claim_round_card(state, player_id, color)
    except RuleViolation as exc:
        _reject("round card", exc)
        return False
    return True


def _claim_outcome_wager(state: GameState, player_id: str, color: Optional[str], kind) -> None:
    player = _check_actor(state, player_id)
    color = _check_racing_color(color)
    try:
        kind = OutcomeKind(kind)
    except ValueError:
        raise MalformedAction(f"unknown wager kind: {kind!r}") from None
    check_outcome_wager(player, color)

    wager = record_outcome_wager(state, player, color, kind)
    # The color stays hidden from the table until the final settlement.
    append_action(state, player_id, ActionType.OUTCOME_BET, f"placed {kind.value} wager #{wager.submission_order}")
    advance_turn(state)


def claim_outcome_wager(
    state: GameState, player_id: str, color: str, kind: Union[OutcomeKind, str]
) -> bool:
    try:
        _claim_outcome_wager(state, player_id, color, kind)
    except RuleViolation as exc:
        _reject("outcome wager", exc)
        return False
    return True


def _check_modifier_placement(state: GameState, player_id: str, position: int) -> Optional[TrackModifier]:
    """Raise IllegalPlacement, or return the owner's own modifier when it sits on `position`."""
    if not isinstance(position, int) or not MODIFIER_MIN_POSITION <= position <= MODIFIER_MAX_POSITION:
        raise IllegalPlacement(f"cell {position} is outside {MODIFIER_MIN_POSITION}..{MODIFIER_MAX_POSITION}")

    existing = modifier_at(state, position)
    if existing is not None:
        if existing.owner_id == player_id:
            return existing
        raise IllegalPlacement(f"cell {position} already holds {existing.owner_id}'s tile")
    if pieces_at(state, position):
        raise IllegalPlacement(f"cell {position} is occupied by a piece")
    for m in state.modifiers:
        if abs(m.position - position) == 1:
            raise IllegalPlacement(f"cell {position} is next to the tile on cell {m.position}")
    return None


def _place_modifier(state: GameState, player_id: str, position: int, kind) -> None:
    _check_actor(state, player_id)
    try:
        kind = ModifierKind(kind)
    except ValueError:
        raise MalformedAction(f"unknown tile kind: {kind!r}") from None
    own = _check_modifier_placement(state, player_id, position)

    if own is not None:
        own.kind = kind
        description = f"turned the tile on cell {position} to {kind.value}"
    else:
        state.modifiers = [m for m in state.modifiers if m.owner_id != player_id]
        state.modifiers.append(
            TrackModifier(id=f"tile-{player_id}-{position}", position=position, kind=kind, owner_id=player_id)
        )
        description = f"placed a {kind.value} tile on cell {position}"

    append_action(state, player_id, ActionType.PLACE_MODIFIER, description)
    advance_turn(state)


def place_modifier(
    state: GameState, player_id: str, position: int, kind: Union[ModifierKind, str]
) -> bool:
    try:
        _place_modifier(state, player_id, position, kind)
    except RuleViolation as exc:
        _reject("tile placement", exc)
        return False
    return True


def legal_modifier_positions(state: GameState, player_id: str) -> List[int]:
    positions = []
    for position in range(MODIFIER_MIN_POSITION, MODIFIER_MAX_POSITION + 1):
        try:
            _check_modifier_placement(state, player_id, position)
        except IllegalPlacement:
            continue
        positions.append(position)
    return positions


def apply_action(
    state: GameState, action: Action, rng: Optional[random.Random] = None
) -> Optional[RollOutcome]:
    """
    Apply one relayed action. Raises the RuleViolation subclass describing a
    rejection (state untouched). Returns the RollOutcome for rolls, else None.
    """
    if action.type == ActionType.ROLL:
        return _roll(state, action.player_id, action.forced_die, action.forced_steps, rng)
    if action.type == ActionType.ROUND_BET:
        _claim_round_card(state, action.player_id, action.color)
    elif action.type == ActionType.OUTCOME_BET:
        _claim_outcome_wager(state, action.player_id, action.color, action.outcome)
    elif action.type == ActionType.PLACE_MODIFIER:
        _place_modifier(state, action.player_id, action.position, action.modifier)
    else:
        raise MalformedAction(f"{action.type} is not a player action")
    return None
