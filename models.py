"""
Data models and state representations.
"""

import copy
from dataclasses import asdict, dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

from config import DICE, STARTING_COINS


class GameStatus(str, Enum):
    PLAYING = "playing"
    ENDED = "ended"


class ModifierKind(str, Enum):
    ACCELERATE = "accelerate"
    DECELERATE = "decelerate"


class OutcomeKind(str, Enum):
    CHAMPION = "champion"
    LOSER = "loser"


class ActionType(str, Enum):
    ROLL = "roll"
    ROUND_BET = "round_bet"
    OUTCOME_BET = "outcome_bet"
    PLACE_MODIFIER = "place_modifier"
    ROUND_END = "round_end"
    GAME_END = "game_end"


class CoinSource(str, Enum):
    INITIAL = "initial"
    DICE_ROLL = "dice_roll"
    ROUND_BET = "round_bet"
    CHAMPION_BET = "champion_bet"
    LOSER_BET = "loser_bet"
    TILE_REWARD = "tile_reward"


@dataclass
class Piece:
    color: str
    position: int
    stack_order: int  # 0 = bottom of the stack at `position`
    is_reverse: bool = False


@dataclass
class TrackModifier:
    id: str
    position: int
    kind: ModifierKind
    owner_id: str


@dataclass
class RoundWagerCard:
    id: str
    color: str
    value: int
    holder_id: Optional[str] = None


@dataclass
class OutcomeWager:
    player_id: str
    color: str
    kind: OutcomeKind
    submission_order: int  # 1-based, per (color, kind)


@dataclass(frozen=True)
class CoinSourceEntry:
    source: CoinSource
    amount: int
    description: str
    round: int


@dataclass
class Player:
    id: str
    name: str
    coin_balance: int = STARTING_COINS
    round_cards: List[RoundWagerCard] = field(default_factory=list)
    champion_colors: List[str] = field(default_factory=list)
    loser_colors: List[str] = field(default_factory=list)
    coin_ledger: List[CoinSourceEntry] = field(default_factory=list)

    def wagered_colors(self) -> List[str]:
        return self.champion_colors + self.loser_colors

    def credit(self, amount: int, source: CoinSource, description: str, round_number: int) -> None:
        """Apply a coin delta and append it to the ledger. Zero deltas are not recorded."""
        if amount == 0 and source != CoinSource.INITIAL:
            return
        self.coin_ledger.append(CoinSourceEntry(source, amount, description, round_number))
        self.coin_balance += amount


@dataclass(frozen=True)
class SettlementRecord:
    round: int
    details: Tuple[str, ...]
    timestamp: datetime
    is_final: bool = False


@dataclass(frozen=True)
class ActionLogEntry:
    id: int
    round: int
    player_id: str
    action: ActionType
    description: str
    timestamp: datetime


@dataclass
class MoveOutcome:
    """Result of moving one piece (and whatever rides on it)."""
    color: str
    steps: int
    origin: int
    destination: int
    moved_block: List[str]              # bottom..top, moving piece first
    modifier: Optional[TrackModifier]   # the tile that fired, if any
    finished: bool                      # some piece is at or past the finish


@dataclass
class RollOutcome:
    player_id: str
    die: str
    color: str
    steps: int
    move: MoveOutcome


@dataclass
class GameState:
    """Aggregate root: everything one table needs, owned by its orchestrator."""
    players: List[Player]
    pieces: Dict[str, Piece]
    modifiers: List[TrackModifier] = field(default_factory=list)
    available_dice: List[str] = field(default_factory=lambda: DICE[:])
    used_dice: List[str] = field(default_factory=list)
    round_cards: List[RoundWagerCard] = field(default_factory=list)
    outcome_wagers: List[OutcomeWager] = field(default_factory=list)
    round: int = 1
    current_player_index: int = 0
    status: GameStatus = GameStatus.PLAYING
    settlements: List[SettlementRecord] = field(default_factory=list)
    action_log: List[ActionLogEntry] = field(default_factory=list)
    last_roll: Optional[RollOutcome] = None
    defer_round_settlement: bool = False
    settlement_due: bool = False

    def clone(self) -> "GameState":
        return copy.deepcopy(self)

    def player(self, player_id: str) -> Optional[Player]:
        for p in self.players:
            if p.id == player_id:
                return p
        return None

    def snapshot(self) -> Dict[str, Any]:
        """Plain, JSON-friendly view of the whole state (enums and datetimes as strings)."""
        return _plain(asdict(self))


def _plain(value: Any) -> Any:
    if isinstance(value, dict):
        return {k: _plain(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_plain(v) for v in value]
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, datetime):
        return value.isoformat()
    return value


@dataclass
class Action:
    """One turn submission, as relayed from a network message or a bot decision."""
    type: ActionType
    player_id: str
    color: Optional[str] = None
    outcome: Optional[OutcomeKind] = None
    position: Optional[int] = None
    modifier: Optional[ModifierKind] = None
    forced_die: Optional[str] = None
    forced_steps: Optional[int] = None
