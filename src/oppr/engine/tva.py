"""
Tournament Value Adjustment (TVA).

TVA adds points to a tournament's base value for the strength of its field.
It has two independent parts, each summed over at most 64 players and capped
on its own:

Rating TVA (max 25):
    contribution = max(0, rating * 0.000546875 - 0.703125)
    A 2000-rated player adds 0.390625, so 64 of them add exactly 25.
    Ratings below ~1285.71 add nothing.

Ranking TVA (max 50):
    contribution = max(0, ln(ranking) * -0.211675054 + 1.459827968)
    World #1 adds ~1.46, #2 ~1.31. Players with ranking <= 0 are unranked
    and are left out of the sum entirely.

total_tva = rating_tva + ranking_tva (no joint cap).
"""

import logging
import math
from dataclasses import dataclass
from typing import Iterable, Optional

from oppr.config import settings
from oppr.engine.config_store import resolve_config
from oppr.engine.constants import OPPRConfig
from oppr.models import Player, get_primary_rating

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TVABreakdown:
    """Rating and ranking TVA for one tournament."""
    rating: float
    ranking: float

    @property
    def total(self) -> float:
        return self.rating + self.ranking


def _player_rating(player: Player, rating_system_id: str) -> float:
    # Players without a rating in this system sort last and contribute 0
    rating = get_primary_rating(player.ratings, rating_system_id)
    return rating if rating is not None else 0.0


# =============================================================================
# Rating-based TVA
# =============================================================================

def calculate_player_rating_contribution(rating: float, *, config: Optional[OPPRConfig] = None) -> float:
    """One player's contribution to the rating TVA (never negative)."""
    config = resolve_config(config)
    constants = config.TVA.RATING
    return max(0.0, rating * constants.COEFFICIENT - constants.OFFSET)


def rating_contributes_to_tva(rating: float, *, config: Optional[OPPRConfig] = None) -> bool:
    """Whether ``rating`` is above the minimum effective rating."""
    config = resolve_config(config)
    return rating > config.TVA.RATING.MIN_EFFECTIVE_RATING


def get_top_rated_players(
    players: Iterable[Player],
    count: Optional[int] = None,
    rating_system_id: Optional[str] = None,
    *,
    config: Optional[OPPRConfig] = None,
) -> list[Player]:
    """
    The ``count`` highest-rated players, best first.

    Args:
        count: Defaults to TVA.MAX_PLAYERS_CONSIDERED (64)
        rating_system_id: Defaults to settings.default_rating_system
    """
    config = resolve_config(config)
    if count is None:
        count = config.TVA.MAX_PLAYERS_CONSIDERED
    if rating_system_id is None:
        rating_system_id = settings.default_rating_system

    ranked = sorted(players, key=lambda p: _player_rating(p, rating_system_id), reverse=True)
    return ranked[:count]


def calculate_rating_tva(
    players: Iterable[Player],
    rating_system_id: Optional[str] = None,
    *,
    config: Optional[OPPRConfig] = None,
) -> float:
    """
    Rating-based TVA: sum of the top 64 contributions, capped at 25.

    Example:
        # 64 players rated 2000
        calculate_rating_tva(players)  # → 25.0
    """
    config = resolve_config(config)
    if rating_system_id is None:
        rating_system_id = settings.default_rating_system

    top_players = get_top_rated_players(
        players, rating_system_id=rating_system_id, config=config
    )
    total = sum(
        calculate_player_rating_contribution(_player_rating(p, rating_system_id), config=config)
        for p in top_players
    )
    return min(total, config.TVA.RATING.MAX_VALUE)


# =============================================================================
# Ranking-based TVA
# =============================================================================

def calculate_player_ranking_contribution(ranking: float, *, config: Optional[OPPRConfig] = None) -> float:
    """
    One player's contribution to the ranking TVA (never negative).

    Rankings below 1 are treated as 1 so ln() stays defined. Note that
    calculate_ranking_tva never passes such players in: unranked players
    (ranking <= 0) are excluded before summing.
    """
    config = resolve_config(config)
    constants = config.TVA.RANKING
    valid_ranking = max(1.0, ranking)
    return max(0.0, math.log(valid_ranking) * constants.COEFFICIENT + constants.OFFSET)


def get_top_ranked_players(
    players: Iterable[Player],
    count: Optional[int] = None,
    *,
    config: Optional[OPPRConfig] = None,
) -> list[Player]:
    """The ``count`` best-ranked players (ranking > 0), best first."""
    config = resolve_config(config)
    if count is None:
        count = config.TVA.MAX_PLAYERS_CONSIDERED

    ranked = sorted((p for p in players if p.ranking > 0), key=lambda p: p.ranking)
    return ranked[:count]


def calculate_ranking_tva(players: Iterable[Player], *, config: Optional[OPPRConfig] = None) -> float:
    """Ranking-based TVA: sum of the top 64 ranked players, capped at 50."""
    config = resolve_config(config)
    top_players = get_top_ranked_players(players, config=config)
    total = sum(
        calculate_player_ranking_contribution(p.ranking, config=config) for p in top_players
    )
    return min(total, config.TVA.RANKING.MAX_VALUE)


def calculate_total_tva(
    players: Iterable[Player],
    rating_system_id: Optional[str] = None,
    *,
    config: Optional[OPPRConfig] = None,
) -> TVABreakdown:
    """Both TVA parts for one field of players."""
    config = resolve_config(config)
    players = list(players)

    breakdown = TVABreakdown(
        rating=calculate_rating_tva(players, rating_system_id, config=config),
        ranking=calculate_ranking_tva(players, config=config),
    )
    logger.debug(
        "TVA for %d players: rating=%.4f ranking=%.4f",
        len(players), breakdown.rating, breakdown.ranking,
    )
    return breakdown
