"""
Value objects passed into and returned from the OPPR engine.

Inputs (Player, Tournament, TGPConfig, PlayerResult) are created by whoever
owns storage and handed to the engine as immutable snapshots. Outputs
(TournamentValue, PointDistribution, PlayerEvent, PlayerProfile, RatingResult)
are derived values the caller persists; they expose ``to_dict()`` for that.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any, Literal, Mapping, Optional

QualifyingType = Literal["unlimited", "limited", "hybrid", "none"]

TournamentFormatType = Literal[
    "single-elimination",
    "double-elimination",
    "match-play",
    "best-game",
    "card-qualifying",
    "pin-golf",
    "flip-frenzy",
    "strike-format",
    "target-match-play",
    "hybrid",
    "none",
]

EventBoosterType = Literal[
    "none",
    "certified",
    "certified-plus",
    "championship-series",
    "major",
]

EfficiencyTrendDirection = Literal["improving", "declining", "stable"]

# Rating system used when callers don't name one
DEFAULT_RATING_SYSTEM = "glicko"


# =============================================================================
# Players
# =============================================================================

@dataclass(frozen=True)
class RatingData:
    """
    One rating in one rating system.

    Attributes:
        value: The rating itself (e.g. 1650.0)
        rating_deviation: Glicko RD, None for systems without one
    """
    value: float
    rating_deviation: Optional[float] = None


def get_primary_rating(
    ratings: Optional[Mapping[str, RatingData]],
    system_id: str = DEFAULT_RATING_SYSTEM,
) -> Optional[float]:
    """
    Read a player's rating value for one rating system.

    Returns:
        The rating value, or None if the player has no rating in that system
    """
    if not ratings:
        return None
    rating = ratings.get(system_id)
    if rating is None:
        return None
    return rating.value


@dataclass(frozen=True)
class Player:
    """
    A player as seen by the engine.

    Attributes:
        id: Unique player identifier
        ranking: World ranking position (1 = best, 0 or less = unranked)
        is_rated: Whether the player has enough events to be rated
        event_count: Number of events played
        ratings: Ratings keyed by rating system id, e.g.
                 {"glicko": RatingData(1650.0, 75.0)}
    """
    id: str
    ranking: float = 0
    is_rated: bool = False
    event_count: int = 0
    ratings: Mapping[str, RatingData] = field(default_factory=dict)

    def rating_for(self, system_id: str = DEFAULT_RATING_SYSTEM) -> Optional[RatingData]:
        """Full rating data for ``system_id``, or None."""
        return self.ratings.get(system_id) if self.ratings else None


# =============================================================================
# Tournament format
# =============================================================================

@dataclass(frozen=True)
class QualifyingConfig:
    """Qualifying stage of a tournament, as it affects TGP."""
    type: QualifyingType = "none"
    meaningful_games: float = 0
    hours: Optional[float] = None
    four_player_groups: bool = False
    three_player_groups: bool = False
    multi_matchplay: bool = False
    machine_count: Optional[int] = None
    total_entries: Optional[int] = None


@dataclass(frozen=True)
class FinalsConfig:
    """Finals stage of a tournament, as it affects TGP."""
    format_type: TournamentFormatType = "none"
    # Expected value for brackets
    meaningful_games: float = 0
    four_player_groups: bool = False
    three_player_groups: bool = False
    multi_matchplay: bool = False
    finalist_count: Optional[int] = None


@dataclass(frozen=True)
class TGPConfig:
    """
    Format details used for the Tournament Grading Percentage.

    ball_count_adjustment is 0.33 for 1-ball, 0.66 for 2-ball and 1.0 for
    3+ ball formats (see get_ball_count_adjustment).
    """
    qualifying: QualifyingConfig = field(default_factory=QualifyingConfig)
    finals: FinalsConfig = field(default_factory=FinalsConfig)
    ball_count_adjustment: float = 1.0


@dataclass(frozen=True)
class Tournament:
    """A tournament snapshot handed to the engine."""
    id: str
    name: str
    date: date | datetime
    players: tuple[Player, ...] | list[Player]
    tgp_config: TGPConfig = field(default_factory=TGPConfig)
    event_booster: EventBoosterType = "none"
    allows_opt_out: bool = False


@dataclass(frozen=True)
class PlayerResult:
    """A player's finishing position in one tournament."""
    player: Player
    position: int
    opted_out: bool = False


# =============================================================================
# Derived values
# =============================================================================

@dataclass(frozen=True)
class TournamentValue:
    """
    Breakdown of how much a tournament is worth.

    first_place_value = (base_value + total_tva) * tgp * event_booster_multiplier
    """
    base_value: float
    tva_rating: float
    tva_ranking: float
    total_tva: float
    tgp: float
    event_booster_multiplier: float
    first_place_value: float

    def to_dict(self) -> dict[str, Any]:
        return {
            "base_value": self.base_value,
            "tva_rating": self.tva_rating,
            "tva_ranking": self.tva_ranking,
            "total_tva": self.total_tva,
            "tgp": self.tgp,
            "event_booster_multiplier": self.event_booster_multiplier,
            "first_place_value": self.first_place_value,
        }


@dataclass(frozen=True)
class PointDistribution:
    """Points awarded to one player in one tournament."""
    player: Player
    position: int
    linear_points: float
    dynamic_points: float
    total_points: float

    def to_dict(self) -> dict[str, Any]:
        return {
            "player_id": self.player.id,
            "position": self.position,
            "linear_points": self.linear_points,
            "dynamic_points": self.dynamic_points,
            "total_points": self.total_points,
        }


@dataclass(frozen=True)
class TournamentResult:
    """A tournament with its value and the points it awarded."""
    tournament: Tournament
    value: TournamentValue
    distributions: list[PointDistribution]

    def to_dict(self) -> dict[str, Any]:
        return {
            "tournament_id": self.tournament.id,
            "value": self.value.to_dict(),
            "distributions": [d.to_dict() for d in self.distributions],
        }


@dataclass(frozen=True)
class PlayerEvent:
    """
    One historical participation, with decay applied as of some date.

    Only age_in_days, decay_multiplier and decayed_points change when decay
    is recalculated.
    """
    tournament_id: str
    date: date | datetime
    position: int
    points_earned: float
    first_place_value: float
    age_in_days: int = 0
    decay_multiplier: float = 1.0
    decayed_points: float = 0.0

    @property
    def is_active(self) -> bool:
        """Fully decayed events stay on record but no longer count."""
        return self.decay_multiplier > 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "tournament_id": self.tournament_id,
            "date": self.date.isoformat(),
            "position": self.position,
            "points_earned": self.points_earned,
            "first_place_value": self.first_place_value,
            "age_in_days": self.age_in_days,
            "decay_multiplier": self.decay_multiplier,
            "decayed_points": self.decayed_points,
        }


@dataclass(frozen=True)
class PlayerProfile:
    """
    A player's ranking standing.

    Attributes:
        events: All active events (decay multiplier > 0)
        top_events: The events counting toward total_points
        total_points: Sum of decayed points over top_events
        efficiency: Points earned vs available over top_events, in percent
    """
    player: Player
    events: list[PlayerEvent]
    top_events: list[PlayerEvent]
    total_points: float
    efficiency: float

    def to_dict(self) -> dict[str, Any]:
        return {
            "player_id": self.player.id,
            "total_points": self.total_points,
            "efficiency": self.efficiency,
            "event_count": len(self.events),
            "top_events": [e.to_dict() for e in self.top_events],
        }


@dataclass(frozen=True)
class MatchResult:
    """A simulated head-to-head result used for a rating update."""
    opponent_rating: float
    opponent_rd: float
    # 1 = win, 0.5 = tie, 0 = loss
    score: float


@dataclass(frozen=True)
class RatingResult:
    """New Glicko rating after an update."""
    new_rating: float
    new_rd: float

    def to_dict(self) -> dict[str, Any]:
        return {"new_rating": self.new_rating, "new_rd": self.new_rd}
