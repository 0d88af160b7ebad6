"""
Tournament Grading Percentage (TGP).

TGP measures how rigorous a tournament's format was. It is built from
"meaningful games", each worth BASE_GAME_VALUE (4%), with multipliers for
formats that make every game count for more:

  Qualifying
    unlimited best game, 20+ hours   x2
    hybrid best game                 x3
    unlimited card, 20+ hours        x4   (calculate_unlimited_card_tgp)
  Qualifying and finals
    4-player groups                  x2   (unless multi-matchplay)
    3-player groups                  x1.5 (unless multi-matchplay)

Unlimited qualifying also earns a time bonus of 1% per hour, max 20%.
Everything is scaled by the ball count adjustment.

The total is capped at 200% when there is a real qualifying stage
(type != 'none' with games played), otherwise at 100%.

Example:
    # 7 limited qualifying games + 12 finals games in 4-player groups
    # qualifying: 7 * 4% = 28%, finals: 12 * 4% * 2 = 96%
    calculate_tgp(config)  # → 1.24
"""

import logging
from typing import Optional

from oppr.engine.config_store import resolve_config
from oppr.engine.constants import OPPRConfig
from oppr.models import TGPConfig

logger = logging.getLogger(__name__)


def _group_multiplier(
    four_player_groups: bool,
    three_player_groups: bool,
    multi_matchplay: bool,
    config: OPPRConfig,
) -> float:
    if multi_matchplay:
        return 1.0
    if four_player_groups:
        return config.TGP.MULTIPLIERS.FOUR_PLAYER_GROUPS
    if three_player_groups:
        return config.TGP.MULTIPLIERS.THREE_PLAYER_GROUPS
    return 1.0


def _time_bonus(hours: Optional[float], config: OPPRConfig) -> float:
    if not hours:
        return 0.0
    unlimited = config.TGP.UNLIMITED_QUALIFYING
    return min(hours * unlimited.PERCENT_PER_HOUR, unlimited.MAX_BONUS)


def _max_tgp(has_qualifying: bool, config: OPPRConfig) -> float:
    return config.TGP.MAX_WITH_FINALS if has_qualifying else config.TGP.MAX_WITHOUT_FINALS


def _ball_adjustment(tgp_config: TGPConfig) -> float:
    adjustment = tgp_config.ball_count_adjustment
    return 1.0 if adjustment is None else adjustment


def calculate_qualifying_tgp(tgp_config: TGPConfig, *, config: Optional[OPPRConfig] = None) -> float:
    """TGP earned by the qualifying stage (0 when there is none)."""
    config = resolve_config(config)
    qualifying = tgp_config.qualifying

    if qualifying.type == "none":
        return 0.0

    game_value = config.TGP.BASE_GAME_VALUE
    min_hours = config.TGP.UNLIMITED_QUALIFYING.MIN_HOURS_FOR_MULTIPLIER

    if qualifying.type == "unlimited" and qualifying.hours and qualifying.hours >= min_hours:
        game_value *= config.TGP.MULTIPLIERS.UNLIMITED_BEST_GAME
    elif qualifying.type == "hybrid":
        game_value *= config.TGP.MULTIPLIERS.HYBRID_BEST_GAME

    game_value *= _group_multiplier(
        qualifying.four_player_groups,
        qualifying.three_player_groups,
        qualifying.multi_matchplay,
        config,
    )

    tgp = qualifying.meaningful_games * game_value * _ball_adjustment(tgp_config)

    if qualifying.type == "unlimited":
        tgp += _time_bonus(qualifying.hours, config)

    return tgp


def calculate_finals_tgp(tgp_config: TGPConfig, *, config: Optional[OPPRConfig] = None) -> float:
    """TGP earned by the finals stage. No time bonus applies."""
    config = resolve_config(config)
    finals = tgp_config.finals

    game_value = config.TGP.BASE_GAME_VALUE * _group_multiplier(
        finals.four_player_groups,
        finals.three_player_groups,
        finals.multi_matchplay,
        config,
    )
    return finals.meaningful_games * game_value * _ball_adjustment(tgp_config)


def calculate_tgp(tgp_config: TGPConfig, *, config: Optional[OPPRConfig] = None) -> float:
    """
    Total TGP as a fraction (1.5 = 150%).

    Returns:
        qualifying + finals, capped at MAX_WITH_FINALS (2.0) for events
        with a qualifying stage and MAX_WITHOUT_FINALS (1.0) otherwise
    """
    config = resolve_config(config)
    qualifying_tgp = calculate_qualifying_tgp(tgp_config, config=config)
    finals_tgp = calculate_finals_tgp(tgp_config, config=config)

    qualifying = tgp_config.qualifying
    has_qualifying = qualifying.type != "none" and qualifying.meaningful_games > 0
    total = min(qualifying_tgp + finals_tgp, _max_tgp(has_qualifying, config))

    logger.debug(
        "TGP: qualifying=%.4f finals=%.4f total=%.4f", qualifying_tgp, finals_tgp, total
    )
    return total


def calculate_unlimited_card_tgp(
    meaningful_games: float,
    hours: float,
    finals_games: float,
    *,
    config: Optional[OPPRConfig] = None,
) -> float:
    """
    TGP for unlimited card qualifying followed by match play finals.

    Card qualifying earns x4 per game (16%) once qualifying runs for at
    least MIN_HOURS_FOR_MULTIPLIER hours, plus the usual time bonus. Cap
    rules are the same as calculate_tgp.
    """
    config = resolve_config(config)
    game_value = config.TGP.BASE_GAME_VALUE
    if hours >= config.TGP.UNLIMITED_QUALIFYING.MIN_HOURS_FOR_MULTIPLIER:
        game_value *= config.TGP.MULTIPLIERS.UNLIMITED_CARD

    qualifying_tgp = meaningful_games * game_value + _time_bonus(hours, config)
    finals_tgp = finals_games * config.TGP.BASE_GAME_VALUE

    return min(qualifying_tgp + finals_tgp, _max_tgp(meaningful_games > 0, config))


def calculate_flip_frenzy_tgp(
    average_matches: float,
    is_one_ball: bool = False,
    *,
    config: Optional[OPPRConfig] = None,
) -> float:
    """
    TGP for a Flip Frenzy event.

    Meaningful games are the average matches per player divided by 2 for
    3-ball or 3 for 1-ball play. Capped at MAX_WITHOUT_FINALS.
    """
    config = resolve_config(config)
    frenzy = config.TGP.FLIP_FRENZY
    divisor = frenzy.ONE_BALL_DIVISOR if is_one_ball else frenzy.THREE_BALL_DIVISOR

    meaningful_games = average_matches / divisor
    return min(meaningful_games * config.TGP.BASE_GAME_VALUE, config.TGP.MAX_WITHOUT_FINALS)


def validate_finals_eligibility(
    total_participants: int,
    finalist_count: int,
    *,
    config: Optional[OPPRConfig] = None,
) -> bool:
    """
    Whether the finals cut allows more than 100% TGP.

    Between 10% and 50% of participants (inclusive) must advance.
    """
    config = resolve_config(config)
    if total_participants <= 0:
        return False

    requirements = config.TGP.FINALS_REQUIREMENTS
    share = finalist_count / total_participants
    return requirements.MIN_FINALISTS_PERCENT <= share <= requirements.MAX_FINALISTS_PERCENT


def get_ball_count_adjustment(ball_count: int, *, config: Optional[OPPRConfig] = None) -> float:
    """Ball count adjustment for a format played with ``ball_count`` balls."""
    config = resolve_config(config)
    adjustments = config.TGP.BALL_ADJUSTMENTS
    if ball_count <= 1:
        return adjustments.ONE_BALL
    if ball_count == 2:
        return adjustments.TWO_BALL
    return adjustments.THREE_PLUS_BALL
