"""
Time decay of ranking points.

Points lose value as the event they were earned at gets older:

    age < 1 year    100%
    age < 2 years    75%
    age < 3 years    50%
    3+ years          0%   (inactive)

Ages are whole days (floored) divided by 365, and each tier's lower bound is
inclusive, so an event exactly 365 days old already decays to 75% and one
exactly 1095 days old is worth nothing.

Inactive events are never dropped: they stay in a player's history and are
only skipped when aggregating. recalculate_time_decay is the periodic batch
job that refreshes the decay fields of stored events. It is idempotent for a
given reference date.
"""

import logging
from dataclasses import dataclass, replace
from datetime import date, datetime, time, timedelta
from typing import Iterable, Optional, Union

from oppr.engine.config_store import resolve_config
from oppr.engine.constants import OPPRConfig
from oppr.models import PlayerEvent

logger = logging.getLogger(__name__)

DateLike = Union[date, datetime]

_ONE_DAY = timedelta(days=1)


@dataclass(frozen=True)
class DecayInfo:
    """Age and decay of one event as of a reference date."""
    age_in_days: int
    age_in_years: float
    decay_multiplier: float
    is_active: bool


def _as_datetime(value: DateLike, like: DateLike) -> datetime:
    if isinstance(value, datetime):
        return value
    tzinfo = like.tzinfo if isinstance(like, datetime) else None
    return datetime.combine(value, time.min, tzinfo=tzinfo)


def calculate_days_between(event_date: DateLike, reference_date: Optional[DateLike] = None) -> int:
    """
    Whole days from ``event_date`` to ``reference_date``, floored.

    Plain dates and datetimes can be mixed; a plain date is taken as
    midnight. ``reference_date`` defaults to now, in the event's timezone
    when the event is an aware datetime.
    """
    if reference_date is None:
        tzinfo = event_date.tzinfo if isinstance(event_date, datetime) else None
        reference_date = datetime.now(tzinfo)

    if isinstance(event_date, datetime) or isinstance(reference_date, datetime):
        event_date = _as_datetime(event_date, reference_date)
        reference_date = _as_datetime(reference_date, event_date)

    return (reference_date - event_date) // _ONE_DAY


def calculate_event_age(
    event_date: DateLike,
    reference_date: Optional[DateLike] = None,
    *,
    config: Optional[OPPRConfig] = None,
) -> float:
    """Age of an event in (fractional) years."""
    config = resolve_config(config)
    days = calculate_days_between(event_date, reference_date)
    return days / config.TIME_DECAY.DAYS_PER_YEAR


def get_decay_multiplier(age_in_years: float, *, config: Optional[OPPRConfig] = None) -> float:
    """
    Decay multiplier for an event of a given age.

    Examples:
        get_decay_multiplier(0.5)   # → 1.0
        get_decay_multiplier(1.0)   # → 0.75
        get_decay_multiplier(2.99)  # → 0.5
        get_decay_multiplier(3.0)   # → 0.0
    """
    config = resolve_config(config)
    tiers = config.TIME_DECAY

    if age_in_years < 1:
        return tiers.YEAR_0_TO_1
    if age_in_years < 2:
        return tiers.YEAR_1_TO_2
    if age_in_years < 3:
        return tiers.YEAR_2_TO_3
    return tiers.YEAR_3_PLUS


def calculate_decay_multiplier(
    event_date: DateLike,
    reference_date: Optional[DateLike] = None,
    *,
    config: Optional[OPPRConfig] = None,
) -> float:
    """Decay multiplier for an event held on ``event_date``."""
    config = resolve_config(config)
    age = calculate_event_age(event_date, reference_date, config=config)
    return get_decay_multiplier(age, config=config)


def apply_time_decay(
    points: float,
    event_date: DateLike,
    reference_date: Optional[DateLike] = None,
    *,
    config: Optional[OPPRConfig] = None,
) -> float:
    """Points earned on ``event_date`` after decay."""
    return points * calculate_decay_multiplier(event_date, reference_date, config=config)


def is_event_active(
    event_date: DateLike,
    reference_date: Optional[DateLike] = None,
    *,
    config: Optional[OPPRConfig] = None,
) -> bool:
    """Whether an event still carries any value."""
    return calculate_decay_multiplier(event_date, reference_date, config=config) > 0


def filter_active_events(
    event_dates: Iterable[DateLike],
    reference_date: Optional[DateLike] = None,
    *,
    config: Optional[OPPRConfig] = None,
) -> list[DateLike]:
    """Event dates that are still active, in their input order."""
    config = resolve_config(config)
    return [d for d in event_dates if is_event_active(d, reference_date, config=config)]


def get_event_decay_info(
    event_date: DateLike,
    reference_date: Optional[DateLike] = None,
    *,
    config: Optional[OPPRConfig] = None,
) -> DecayInfo:
    """Age, multiplier and active flag for one event."""
    config = resolve_config(config)
    days = calculate_days_between(event_date, reference_date)
    years = days / config.TIME_DECAY.DAYS_PER_YEAR
    multiplier = get_decay_multiplier(years, config=config)

    return DecayInfo(
        age_in_days=days,
        age_in_years=years,
        decay_multiplier=multiplier,
        is_active=multiplier > 0,
    )


def recalculate_time_decay(
    events: Iterable[PlayerEvent],
    reference_date: DateLike,
    *,
    config: Optional[OPPRConfig] = None,
) -> list[PlayerEvent]:
    """
    Refresh the decay fields of stored events as of ``reference_date``.

    Only age_in_days, decay_multiplier and decayed_points change. Every input
    event is returned (fully decayed ones included), so running this twice
    with the same reference date gives the same result.

    Args:
        events: Player events as last persisted
        reference_date: The date decay is measured against

    Returns:
        New PlayerEvent objects, in input order
    """
    config = resolve_config(config)
    updated = []

    for event in events:
        info = get_event_decay_info(event.date, reference_date, config=config)
        updated.append(
            replace(
                event,
                age_in_days=info.age_in_days,
                decay_multiplier=info.decay_multiplier,
                decayed_points=event.points_earned * info.decay_multiplier,
            )
        )

    inactive = sum(1 for e in updated if not e.is_active)
    logger.info(
        "Recalculated decay for %d events as of %s (%d inactive)",
        len(updated), reference_date, inactive,
    )
    return updated
