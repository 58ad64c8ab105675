"""
Engine constants: capture rewards, search parameters, and session identity.

All tunable numbers used by the engine are defined here so that the search
and the scorer never need to introduce magic numbers of their own. The values
are defaults only: every one of them can be overridden through SearchConfig
or the command line, since the right numbers are found by playing games, not
by reasoning about them.

Rewards are plain floats on an arbitrary scale. Only their ratios matter to
the search, which compares discounted sums of them.
"""

import chess

# ---------------------------------------------------------------------------
# Capture rewards
# ---------------------------------------------------------------------------
# The "aggressive" profile strongly favours trading into the opponent's major
# pieces. Capturing the king only happens in null-move simulations, where the
# opponent never gets to answer a check; it dwarfs every other reward so that
# a line reaching it always wins.

KING_REWARD: float = 100.0
QUEEN_REWARD: float = 35.0
ROOK_REWARD: float = 10.0
KNIGHT_REWARD: float = 10.0
BISHOP_REWARD: float = 5.0
PAWN_REWARD: float = 2.5

# A quiet move costs a little, so that of two otherwise equal lines the one
# that captures sooner scores higher.
NO_CAPTURE_REWARD: float = -1.0

# The "classic" profile: queen worth less, minor pieces and rooks closer
# to the bishop.
CLASSIC_REWARDS: dict[int, float] = {
    chess.KING:   100.0,
    chess.QUEEN:  25.0,
    chess.ROOK:   5.0,
    chess.KNIGHT: 5.0,
    chess.BISHOP: 5.0,
    chess.PAWN:   1.0,
}

# ---------------------------------------------------------------------------
# Search parameters
# ---------------------------------------------------------------------------
# SEARCH_DEPTH: number of our own moves simulated along a line. Opponent
# replies happen in between and are not counted.
SEARCH_DEPTH: int = 5

# SEARCH_BREADTH: trials sampled at the root of the branching search.
# The number of simulated positions grows roughly as the product of the
# breadths at each level, so this is the main cost knob.
SEARCH_BREADTH: int = 10

# BREADTH_DECAY: how much the breadth shrinks at each level below the root.
# Once breadth drops to zero or below, the level produces no trials and the
# line ends there. The defaults give breadths 10, 8, 6, 4, 2, so every one
# of the SEARCH_DEPTH levels runs.
BREADTH_DECAY: int = 2

# SEARCH_ITERATIONS: independent lines played out by the sampling search.
SEARCH_ITERATIONS: int = 2_000

# FUTURE_DISCOUNT: each move further into the future has its reward
# multiplied by this factor once more. Must be in (0, 1].
FUTURE_DISCOUNT: float = 0.52

# ---------------------------------------------------------------------------
# Session identity and logging
# ---------------------------------------------------------------------------
ENGINE_NAME: str = "Coolbot"
ENGINE_AUTHOR: str = "Snazzy"

# Search mode writes a debug log next to the working directory.
DEFAULT_LOG_FILE: str = "coolbot.log"
