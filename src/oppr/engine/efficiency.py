"""
Player efficiency.

Efficiency is the share of the available points a player actually earned:

    efficiency = 100 * points_earned / first_place_value

Winning every event is 100%. Aggregates divide total points by total first
place value over active events (decay multiplier > 0) rather than averaging
per-event percentages, so bigger events weigh more.
"""

from dataclasses import dataclass
from typing import Iterable, Optional

from oppr.engine.config_store import resolve_config
from oppr.engine.constants import OPPRConfig
from oppr.models import EfficiencyTrendDirection, PlayerEvent

# Percentage points recent efficiency must move before a trend is reported
TREND_THRESHOLD = 5.0
DEFAULT_TREND_WINDOW = 10


@dataclass(frozen=True)
class EfficiencyTrend:
    overall_efficiency: float
    recent_efficiency: float
    trend: EfficiencyTrendDirection


@dataclass(frozen=True)
class EfficiencyStats:
    """Efficiency summary over a player's active events (all percentages)."""
    overall: float
    top15: float
    best: float
    worst: float
    average: float
    median: float

    def to_dict(self) -> dict[str, float]:
        return {
            "overall": self.overall,
            "top15": self.top15,
            "best": self.best,
            "worst": self.worst,
            "average": self.average,
            "median": self.median,
        }


def _active(events: Iterable[PlayerEvent]) -> list[PlayerEvent]:
    return [e for e in events if e.is_active]


def _ratio(points: float, available: float) -> float:
    if available <= 0:
        return 0.0
    return points / available * 100


def calculate_event_efficiency(points_earned: float, first_place_value: float) -> float:
    """
    Efficiency for a single event, in percent.

    Example:
        calculate_event_efficiency(30, 50)  # → 60.0
    """
    return _ratio(points_earned, first_place_value)


def calculate_overall_efficiency(events: Iterable[PlayerEvent]) -> float:
    """Points earned over points available across active events."""
    active = _active(events)
    return _ratio(
        sum(e.points_earned for e in active),
        sum(e.first_place_value for e in active),
    )


def calculate_decayed_efficiency(events: Iterable[PlayerEvent]) -> float:
    """Like overall efficiency, but using decayed points."""
    active = _active(events)
    return _ratio(
        sum(e.decayed_points for e in active),
        sum(e.first_place_value for e in active),
    )


def calculate_top_n_efficiency(
    events: Iterable[PlayerEvent],
    top_n: Optional[int] = None,
    *,
    config: Optional[OPPRConfig] = None,
) -> float:
    """Overall efficiency of the ``top_n`` events with the most points earned."""
    config = resolve_config(config)
    if top_n is None:
        top_n = config.RANKING.TOP_EVENTS_COUNT

    best = sorted(_active(events), key=lambda e: e.points_earned, reverse=True)[:top_n]
    return calculate_overall_efficiency(best)


def analyze_efficiency_trend(
    events: Iterable[PlayerEvent],
    window_size: int = DEFAULT_TREND_WINDOW,
) -> EfficiencyTrend:
    """
    Compare efficiency over the most recent events with the full history.

    'improving' when recent efficiency is more than 5 points above overall,
    'declining' when more than 5 below, 'stable' otherwise.
    """
    active = sorted(_active(events), key=lambda e: e.date, reverse=True)

    overall = calculate_overall_efficiency(active)
    recent = calculate_overall_efficiency(active[:window_size])
    difference = recent - overall

    if difference > TREND_THRESHOLD:
        trend = "improving"
    elif difference < -TREND_THRESHOLD:
        trend = "declining"
    else:
        trend = "stable"

    return EfficiencyTrend(overall_efficiency=overall, recent_efficiency=recent, trend=trend)


def get_efficiency_stats(
    events: Iterable[PlayerEvent],
    *,
    config: Optional[OPPRConfig] = None,
) -> EfficiencyStats:
    """Efficiency summary; all zeros when the player has no active events."""
    active = _active(events)
    if not active:
        return EfficiencyStats(0.0, 0.0, 0.0, 0.0, 0.0, 0.0)

    efficiencies = [
        calculate_event_efficiency(e.points_earned, e.first_place_value) for e in active
    ]
    ordered = sorted(efficiencies, reverse=True)

    return EfficiencyStats(
        overall=calculate_overall_efficiency(active),
        top15=calculate_top_n_efficiency(active, config=config),
        best=ordered[0],
        worst=ordered[-1],
        average=sum(efficiencies) / len(efficiencies),
        # Lower of the two middle values for even counts
        median=ordered[len(ordered) // 2],
    )
