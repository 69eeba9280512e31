"""
Rejections raised by engine validators before any state is touched.
"""


class RuleViolation(Exception):
    """An action the rules do not allow right now. Never fatal to the engine."""


class InvalidTurn(RuleViolation):
    """The actor is not the current player (or is not seated at all)."""


class ResourceExhausted(RuleViolation):
    """No card or die left to claim or roll."""


class IllegalPlacement(RuleViolation):
    """Modifier position, occupancy or adjacency rule broken."""


class DuplicateWager(RuleViolation):
    """The player already holds a champion or loser wager on that color."""


class GameOver(RuleViolation):
    """The game has ended; nothing more may be submitted."""


class SettlementPending(RuleViolation):
    """The round is over and waiting to be settled."""


class MalformedAction(RuleViolation):
    """Unknown color, kind or step count."""
