"""
Append-only history of engine events, keyed by round.
"""

from datetime import datetime
from typing import List

from models import ActionLogEntry, ActionType, GameState


def append_action(state: GameState, player_id: str, action: ActionType, description: str) -> ActionLogEntry:
    entry = ActionLogEntry(
        id=len(state.action_log) + 1,
        round=state.round,
        player_id=player_id,
        action=action,
        description=description,
        timestamp=datetime.now(),
    )
    state.action_log.append(entry)
    return entry


def entries_for_round(state: GameState, round_number: int) -> List[ActionLogEntry]:
    return [e for e in state.action_log if e.round == round_number]


def recent_entries(state: GameState, limit: int) -> List[ActionLogEntry]:
    """Newest first."""
    return list(reversed(state.action_log[-limit:])) if limit > 0 else []
