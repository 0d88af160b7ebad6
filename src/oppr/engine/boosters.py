"""
Event boosters.

A booster multiplies the tournament value after TGP:

  none                 1.0x
  certified            1.25x
  certified-plus       1.5x
  championship-series  1.5x
  major                2.0x

Major and championship-series are designations made by hand. Certified and
certified-plus can be derived from the event itself:

  certified       24+ finalists, valid qualifying and finals formats,
                  at most 4 days long
  certified-plus  everything certified needs, plus 128+ rated players
"""

from typing import Optional

from oppr.engine.config_store import resolve_config
from oppr.engine.constants import OPPRConfig
from oppr.engine.errors import ValidationError
from oppr.models import EventBoosterType

_BOOSTER_CONSTANT_NAMES = {
    "none": "NONE",
    "certified": "CERTIFIED",
    "certified-plus": "CERTIFIED_PLUS",
    "championship-series": "CHAMPIONSHIP_SERIES",
    "major": "MAJOR",
}


def get_event_booster_multiplier(
    booster_type: EventBoosterType,
    *,
    config: Optional[OPPRConfig] = None,
) -> float:
    """
    Multiplier for a booster type.

    Raises:
        ValidationError: If booster_type isn't a known booster
    """
    config = resolve_config(config)
    constant_name = _BOOSTER_CONSTANT_NAMES.get(booster_type)
    if constant_name is None:
        raise ValidationError(f"Unknown event booster: {booster_type!r}")
    return getattr(config.EVENT_BOOSTERS, constant_name)


def qualifies_for_certified(
    rated_player_count: int,
    has_valid_qualifying: bool,
    has_valid_finals: bool,
    finalist_count: int,
    duration_days: float,
    *,
    config: Optional[OPPRConfig] = None,
) -> bool:
    """Whether an event meets the certified requirements (rated count not needed)."""
    config = resolve_config(config)
    rules = config.CERTIFICATION

    if finalist_count < rules.MIN_FINALISTS:
        return False
    if not has_valid_qualifying or not has_valid_finals:
        return False
    if duration_days > rules.MAX_DURATION_DAYS:
        return False
    return True


def qualifies_for_certified_plus(
    rated_player_count: int,
    has_valid_qualifying: bool,
    has_valid_finals: bool,
    finalist_count: int,
    duration_days: float,
    *,
    config: Optional[OPPRConfig] = None,
) -> bool:
    """Whether an event meets the certified requirements and has 128+ rated players."""
    config = resolve_config(config)
    if rated_player_count < config.CERTIFICATION.CERTIFIED_PLUS_MIN_RATED_PLAYERS:
        return False

    return qualifies_for_certified(
        rated_player_count,
        has_valid_qualifying,
        has_valid_finals,
        finalist_count,
        duration_days,
        config=config,
    )


def determine_event_booster(
    rated_player_count: int,
    has_valid_qualifying: bool,
    has_valid_finals: bool,
    finalist_count: int,
    duration_days: float,
    *,
    config: Optional[OPPRConfig] = None,
) -> EventBoosterType:
    """
    Highest booster an event earns on its own merits.

    Returns:
        'certified-plus', 'certified' or 'none'
    """
    args = (rated_player_count, has_valid_qualifying, has_valid_finals, finalist_count, duration_days)

    if qualifies_for_certified_plus(*args, config=config):
        return "certified-plus"
    if qualifies_for_certified(*args, config=config):
        return "certified"
    return "none"


def apply_event_booster(
    value: float,
    booster_type: EventBoosterType,
    *,
    config: Optional[OPPRConfig] = None,
) -> float:
    """Multiply a tournament value by its booster."""
    return value * get_event_booster_multiplier(booster_type, config=config)
