"""
Player profiles and the ranking order.

A player's ranking total is built from their best TOP_EVENTS_COUNT (15)
active events, measured by decayed points. Events outside the top 15 or
fully decayed stay in the profile's history but add nothing.
"""

import logging
import math
from dataclasses import dataclass
from datetime import date, datetime
from typing import Iterable, Optional

from oppr.engine.config_store import resolve_config
from oppr.engine.constants import OPPRConfig
from oppr.engine.decay import get_event_decay_info
from oppr.engine.efficiency import calculate_overall_efficiency
from oppr.models import Player, PlayerEvent, PlayerProfile

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RankedProfile:
    """A profile with its place in the ranking (1 = best, ties share)."""
    rank: int
    profile: PlayerProfile

    def to_dict(self) -> dict:
        return {"rank": self.rank, **self.profile.to_dict()}


def build_player_event(
    tournament_id: str,
    event_date: date | datetime,
    position: int,
    points_earned: float,
    first_place_value: float,
    reference_date: Optional[date | datetime] = None,
    *,
    config: Optional[OPPRConfig] = None,
) -> PlayerEvent:
    """
    Record one tournament finish, with decay applied as of ``reference_date``.

    Example:
        build_player_event("t1", date(2024, 1, 1), 3, 12.5, 40.0,
                           reference_date=date(2025, 3, 1))
        # → PlayerEvent(..., age_in_days=425, decay_multiplier=0.75,
        #               decayed_points=9.375)
    """
    config = resolve_config(config)
    info = get_event_decay_info(event_date, reference_date, config=config)

    return PlayerEvent(
        tournament_id=tournament_id,
        date=event_date,
        position=position,
        points_earned=points_earned,
        first_place_value=first_place_value,
        age_in_days=info.age_in_days,
        decay_multiplier=info.decay_multiplier,
        decayed_points=points_earned * info.decay_multiplier,
    )


def build_player_profile(
    player: Player,
    events: Iterable[PlayerEvent],
    *,
    config: Optional[OPPRConfig] = None,
) -> PlayerProfile:
    """
    Aggregate a player's events into their ranking standing.

    Events are expected to carry up to date decay fields (see
    recalculate_time_decay).

    Returns:
        PlayerProfile whose total_points is the sum of decayed points over
        the top events and whose efficiency covers the same events
    """
    config = resolve_config(config)
    active = [e for e in events if e.is_active]

    top_events = sorted(active, key=lambda e: e.decayed_points, reverse=True)
    top_events = top_events[:config.RANKING.TOP_EVENTS_COUNT]

    return PlayerProfile(
        player=player,
        events=active,
        top_events=top_events,
        total_points=sum(e.decayed_points for e in top_events),
        efficiency=calculate_overall_efficiency(top_events),
    )


def rank_profiles(profiles: Iterable[PlayerProfile]) -> list[RankedProfile]:
    """
    Order profiles by total points, best first.

    Equal totals share a rank and the next rank is skipped, so totals of
    50, 40, 40, 30 rank 1, 2, 2, 4. Ties keep their input order.
    """
    ordered = sorted(profiles, key=lambda p: p.total_points, reverse=True)

    ranked = []
    previous_points = None
    rank = 0
    for index, profile in enumerate(ordered, start=1):
        if profile.total_points != previous_points:
            rank = index
            previous_points = profile.total_points
        ranked.append(RankedProfile(rank=rank, profile=profile))

    logger.debug("Ranked %d profiles", len(ranked))
    return ranked


def calculate_entry_ranking(ranked_player_count: int, *, config: Optional[OPPRConfig] = None) -> int:
    """
    Ranking given to a player entering the ranking for the first time.

    New players are placed at the ENTRY_RANKING_PERCENTILE from the bottom
    of the current ranking: with 1000 ranked players and the default 10%,
    a newcomer starts at #900.
    """
    config = resolve_config(config)
    percentile = config.RANKING.ENTRY_RANKING_PERCENTILE
    # round() keeps float noise such as 900.0000000001 from bumping the ceiling
    return max(1, math.ceil(round(ranked_player_count * (1 - percentile), 9)))
