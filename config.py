"""
Game configuration and constants.
"""

# Piece names
RACING_COLORS = ["Red", "Yellow", "Blue", "Purple", "Green"]  # eligible for ranking & wagers
REVERSE_COLORS = ["Black", "White"]  # move backwards, never ranked
PIECES = RACING_COLORS + REVERSE_COLORS

# Dice pool: one die per racing color plus a wildcard that moves a reverse piece
WILDCARD_DIE = "Gray"
DICE = RACING_COLORS + [WILDCARD_DIE]

# Track
TRACK_START = 1
TRACK_END = 16
FINISH_POSITION = 16  # game ends once any piece reaches this position
MODIFIER_MIN_POSITION = TRACK_START + 1
MODIFIER_MAX_POSITION = TRACK_END - 1

# Starting cells (chosen uniformly per piece)
RACING_START_POSITIONS = [1, 2, 3]
REVERSE_START_POSITIONS = [13, 14, 15]

# Game mechanics
ROLL_VALUES = [1, 2, 3]
DICE_USED_PER_ROUND = 5  # the 6th die is withheld and returns unrolled next round
ROLL_REWARD = 1
MODIFIER_REWARD = 1

# Players
MIN_PLAYERS = 3
MAX_PLAYERS = 8
STARTING_COINS = 0
SYSTEM_ACTOR = "system"

# Round wager cards, granted highest first
ROUND_CARD_VALUES = [5, 3, 2, 2]
ROUND_SECOND_PLACE_PAYOUT = 1
ROUND_MISS_PENALTY = -1

# Outcome (champion / loser) wagers: payout by submission order, then the floor
OUTCOME_PAYOUTS = [8, 5, 3]
OUTCOME_PAYOUT_FLOOR = 2
OUTCOME_MISS_PENALTY = -1

# Colors for plotting
COLOR_MAP = {
    "Red": "#e41a1c",
    "Yellow": "#ffd92f",
    "Blue": "#377eb8",
    "Purple": "#984ea3",
    "Green": "#4daf4a",
    "Black": "#222222",
    "White": "#f0f0f0",
}
MODIFIER_COLOR_MAP = {
    "accelerate": "#1b9e77",
    "decelerate": "#d95f02",
}

# UI Settings (presentation only, the engine never waits)
SETTLEMENT_DISPLAY_SECONDS = 1.0
ACTION_LOG_ROWS = 25
