"""
Point distribution.

A tournament's first place value is split between finishers in two parts:

Linear (10%): every finisher gets a share, including last place.
    linear = (player_count + 1 - position) / player_count * 10% * FPV

Dynamic (90%): only the top half of the rated field, at most 64 places.
    range   = min(floor(rated_player_count / 2), 64)
    ratio   = (position - 1) / range
    dynamic = (1 - ratio ** 0.7) ** 3 * 90% * FPV     (0 outside the range)

So the winner gets ~100% of FPV and the curve drops steeply after the top
few places. Opted-out players are removed, and the rest renumbered, before
anything is counted.
"""

import logging
from typing import Iterable, Optional

from oppr.engine.config_store import resolve_config
from oppr.engine.constants import OPPRConfig
from oppr.models import PlayerResult, PointDistribution

logger = logging.getLogger(__name__)


def calculate_linear_points(
    position: int,
    player_count: int,
    first_place_value: float,
    *,
    config: Optional[OPPRConfig] = None,
) -> float:
    """Linear share for one finishing position (0 for an empty field)."""
    config = resolve_config(config)
    if player_count <= 0:
        return 0.0
    share = (player_count + 1 - position) / player_count
    return share * config.POINT_DISTRIBUTION.LINEAR_PERCENTAGE * first_place_value


def get_dynamic_range(rated_player_count: int, *, config: Optional[OPPRConfig] = None) -> int:
    """Number of places that receive dynamic points."""
    config = resolve_config(config)
    return min(rated_player_count // 2, config.POINT_DISTRIBUTION.MAX_DYNAMIC_PLAYERS)


def calculate_dynamic_points(
    position: int,
    rated_player_count: int,
    first_place_value: float,
    *,
    config: Optional[OPPRConfig] = None,
) -> float:
    """Dynamic share for one finishing position (0 outside the dynamic range)."""
    config = resolve_config(config)
    constants = config.POINT_DISTRIBUTION
    dynamic_range = get_dynamic_range(rated_player_count, config=config)

    if position - 1 >= dynamic_range:
        return 0.0

    ratio = (position - 1) / dynamic_range
    decay = (1 - ratio ** constants.POSITION_EXPONENT) ** constants.VALUE_EXPONENT
    return decay * constants.DYNAMIC_PERCENTAGE * first_place_value


def calculate_player_points(
    position: int,
    player_count: int,
    rated_player_count: int,
    first_place_value: float,
    *,
    config: Optional[OPPRConfig] = None,
) -> float:
    """Linear + dynamic points for one finishing position."""
    linear = calculate_linear_points(position, player_count, first_place_value, config=config)
    dynamic = calculate_dynamic_points(position, rated_player_count, first_place_value, config=config)
    return linear + dynamic


def _renumber_positions(results: list[PlayerResult]) -> list[int]:
    # Competition ranking over the remaining results: ties still share a place
    return [1 + sum(1 for other in results if other.position < r.position) for r in results]


def distribute_points(
    results: Iterable[PlayerResult],
    first_place_value: float,
    *,
    config: Optional[OPPRConfig] = None,
) -> list[PointDistribution]:
    """
    Award points to every player who didn't opt out.

    Player count and rated player count are taken from the remaining
    results, so opting out shrinks the field for everyone else. Players
    below an opt-out move up to close the gap (1, 4, 5 become 1, 2, 3), so
    last place always keeps a positive linear share.

    Returns:
        One PointDistribution per remaining result, in input order, carrying
        the renumbered position the points were calculated for
    """
    config = resolve_config(config)
    active = [r for r in results if not r.opted_out]
    positions = _renumber_positions(active)

    player_count = len(active)
    rated_player_count = sum(1 for r in active if r.player.is_rated)

    distributions = []
    for result, position in zip(active, positions):
        linear = calculate_linear_points(
            position, player_count, first_place_value, config=config
        )
        dynamic = calculate_dynamic_points(
            position, rated_player_count, first_place_value, config=config
        )
        distributions.append(
            PointDistribution(
                player=result.player,
                position=position,
                linear_points=linear,
                dynamic_points=dynamic,
                total_points=linear + dynamic,
            )
        )

    logger.debug(
        "Distributed %.4f first place value across %d players (%d rated)",
        first_place_value, player_count, rated_player_count,
    )
    return distributions


def get_points_for_position(
    position: int,
    player_count: int,
    rated_player_count: int,
    first_place_value: float,
    *,
    config: Optional[OPPRConfig] = None,
) -> float:
    """Points a finishing position is worth."""
    return calculate_player_points(
        position, player_count, rated_player_count, first_place_value, config=config
    )


def calculate_position_percentage(
    position: int,
    player_count: int,
    rated_player_count: int,
    *,
    config: Optional[OPPRConfig] = None,
) -> float:
    """
    Fraction of the first place value a position receives.

    Independent of the actual value: 1st place in a big rated field is ~1.0.
    """
    points = calculate_player_points(position, player_count, rated_player_count, 100, config=config)
    return points / 100
