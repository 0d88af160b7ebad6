"""
OPPR calculation constants.

Every formula in the engine reads its numbers from an ``OPPRConfig`` tree.
The tree is grouped the same way the ranking rules are written:

  BASE_VALUE          points per rated player and the base value cap
  TVA                 rating- and ranking-based Tournament Value Adjustment
  TGP                 Tournament Grading Percentage (format rigor)
  EVENT_BOOSTERS      multipliers for certified / major events
  CERTIFICATION       thresholds for automatic certified / certified+ status
  POINT_DISTRIBUTION  linear + dynamic share of the first place value
  TIME_DECAY          age tiers for devaluing old results
  RANKING             how many events count toward a player's ranking
  RATING              Glicko constants
  VALIDATION          business limits checked before calculating

All models are frozen. Overrides never mutate the defaults, they produce a
new tree (see ``oppr.engine.config_store``).
"""

import math
from typing import Any, Mapping

from pydantic import BaseModel, ConfigDict


class _ConstantGroup(BaseModel):
    """Base for every constant group: immutable, unknown keys rejected."""

    model_config = ConfigDict(frozen=True, extra="forbid")


# =============================================================================
# Base Value
# =============================================================================

class BaseValueConstants(_ConstantGroup):
    # Points per rated player
    POINTS_PER_PLAYER: float = 0.5
    # Maximum base value (reached at 64+ rated players)
    MAX_BASE_VALUE: float = 32.0
    # Player count that achieves maximum base value
    MAX_PLAYER_COUNT: int = 64
    # Minimum events to become a rated player
    RATED_PLAYER_THRESHOLD: int = 5


# =============================================================================
# Tournament Value Adjustment
# =============================================================================

class TVARatingConstants(_ConstantGroup):
    # Maximum TVA points from ratings
    MAX_VALUE: float = 25.0
    # contribution = rating * COEFFICIENT - OFFSET
    COEFFICIENT: float = 0.000546875
    OFFSET: float = 0.703125
    # A "perfect" player adds 0.390625, so 64 of them add exactly MAX_VALUE
    PERFECT_RATING: float = 2000.0
    # OFFSET / COEFFICIENT, below this a rating adds nothing
    MIN_EFFECTIVE_RATING: float = 1285.71


class TVARankingConstants(_ConstantGroup):
    # Maximum TVA points from rankings
    MAX_VALUE: float = 50.0
    # contribution = ln(ranking) * COEFFICIENT + OFFSET
    COEFFICIENT: float = -0.211675054
    OFFSET: float = 1.459827968


class TVAConstants(_ConstantGroup):
    RATING: TVARatingConstants = TVARatingConstants()
    RANKING: TVARankingConstants = TVARankingConstants()
    # Maximum players considered for each TVA sum
    MAX_PLAYERS_CONSIDERED: int = 64


# =============================================================================
# Tournament Grading Percentage
# =============================================================================

class TGPMultipliers(_ConstantGroup):
    # 4-player PAPA-style groups
    FOUR_PLAYER_GROUPS: float = 2.0
    # 3-player groups
    THREE_PLAYER_GROUPS: float = 1.5
    # Unlimited best game qualifying (min 20 hours)
    UNLIMITED_BEST_GAME: float = 2.0
    # Hybrid best game qualifying
    HYBRID_BEST_GAME: float = 3.0
    # Unlimited card qualifying (min 20 hours)
    UNLIMITED_CARD: float = 4.0


class BallAdjustments(_ConstantGroup):
    ONE_BALL: float = 0.33
    TWO_BALL: float = 0.66
    THREE_PLUS_BALL: float = 1.0


class UnlimitedQualifyingConstants(_ConstantGroup):
    # Time component: 1% per hour, max 20%
    PERCENT_PER_HOUR: float = 0.01
    MAX_BONUS: float = 0.2
    MIN_HOURS_FOR_MULTIPLIER: float = 20.0


class FlipFrenzyConstants(_ConstantGroup):
    THREE_BALL_DIVISOR: float = 2.0
    ONE_BALL_DIVISOR: float = 3.0


class FinalsRequirements(_ConstantGroup):
    # Share of participants that must / may advance to finals
    MIN_FINALISTS_PERCENT: float = 0.1
    MAX_FINALISTS_PERCENT: float = 0.5


class TGPConstants(_ConstantGroup):
    # 4% per meaningful game
    BASE_GAME_VALUE: float = 0.04
    # Cap for events without a separate qualifying stage
    MAX_WITHOUT_FINALS: float = 1.0
    # Cap for events with qualifying and finals
    MAX_WITH_FINALS: float = 2.0
    MAX_GAMES_FOR_200_PERCENT: int = 50
    MULTIPLIERS: TGPMultipliers = TGPMultipliers()
    BALL_ADJUSTMENTS: BallAdjustments = BallAdjustments()
    UNLIMITED_QUALIFYING: UnlimitedQualifyingConstants = UnlimitedQualifyingConstants()
    FLIP_FRENZY: FlipFrenzyConstants = FlipFrenzyConstants()
    FINALS_REQUIREMENTS: FinalsRequirements = FinalsRequirements()


# =============================================================================
# Event Boosters
# =============================================================================

class EventBoosterConstants(_ConstantGroup):
    NONE: float = 1.0
    CERTIFIED: float = 1.25
    CERTIFIED_PLUS: float = 1.5
    CHAMPIONSHIP_SERIES: float = 1.5
    MAJOR: float = 2.0


class CertificationConstants(_ConstantGroup):
    # Finalists needed for certified status
    MIN_FINALISTS: int = 24
    # Maximum consecutive days an event may run
    MAX_DURATION_DAYS: float = 4.0
    # Rated players needed for certified+ status
    CERTIFIED_PLUS_MIN_RATED_PLAYERS: int = 128


# =============================================================================
# Point Distribution
# =============================================================================

class PointDistributionConstants(_ConstantGroup):
    LINEAR_PERCENTAGE: float = 0.1
    DYNAMIC_PERCENTAGE: float = 0.9
    # dynamic = (1 - ratio ** POSITION_EXPONENT) ** VALUE_EXPONENT
    POSITION_EXPONENT: float = 0.7
    VALUE_EXPONENT: float = 3.0
    MAX_DYNAMIC_PLAYERS: int = 64


# =============================================================================
# Time Decay
# =============================================================================

class TimeDecayConstants(_ConstantGroup):
    YEAR_0_TO_1: float = 1.0
    YEAR_1_TO_2: float = 0.75
    YEAR_2_TO_3: float = 0.5
    YEAR_3_PLUS: float = 0.0
    DAYS_PER_YEAR: int = 365


# =============================================================================
# Ranking
# =============================================================================

class RankingConstants(_ConstantGroup):
    # Events that count toward a player's ranking total
    TOP_EVENTS_COUNT: int = 15
    ENTRY_RANKING_PERCENTILE: float = 0.1


# =============================================================================
# Rating (Glicko)
# =============================================================================

class RatingConstants(_ConstantGroup):
    DEFAULT_RATING: float = 1300.0
    MIN_RD: float = 10.0
    MAX_RD: float = 200.0
    RD_DECAY_PER_DAY: float = 0.3
    # Players above/below used as simulated opponents
    OPPONENTS_RANGE: int = 32
    # Glicko system constant q
    Q: float = math.log(10) / 400
    # Events before a rating stops being provisional
    PROVISIONAL_THRESHOLD: int = 5


# =============================================================================
# Validation
# =============================================================================

class ValidationConstants(_ConstantGroup):
    MIN_PLAYERS: int = 3
    MIN_PRIVATE_PLAYERS: int = 16
    MAX_GAMES_PER_MACHINE: float = 3.0
    MIN_PARTICIPATION_PERCENT: float = 0.5


class OPPRConfig(_ConstantGroup):
    """
    Complete OPPR constant tree.

    Instances are immutable. Use ``with_overrides`` to derive a tree with
    some constants replaced:

        config = DEFAULT_CONSTANTS.with_overrides(
            {"BASE_VALUE": {"POINTS_PER_PLAYER": 1.0}}
        )
    """

    BASE_VALUE: BaseValueConstants = BaseValueConstants()
    TVA: TVAConstants = TVAConstants()
    TGP: TGPConstants = TGPConstants()
    EVENT_BOOSTERS: EventBoosterConstants = EventBoosterConstants()
    CERTIFICATION: CertificationConstants = CertificationConstants()
    POINT_DISTRIBUTION: PointDistributionConstants = PointDistributionConstants()
    TIME_DECAY: TimeDecayConstants = TimeDecayConstants()
    RANKING: RankingConstants = RankingConstants()
    RATING: RatingConstants = RatingConstants()
    VALIDATION: ValidationConstants = ValidationConstants()

    def with_overrides(self, overrides: Mapping[str, Any]) -> "OPPRConfig":
        """Return a new config with ``overrides`` deep-merged over this one."""
        from oppr.engine.config_store import merge_config

        return merge_config(self, overrides)


# Stock OPPR constants, used whenever nothing is overridden
DEFAULT_CONSTANTS = OPPRConfig()
