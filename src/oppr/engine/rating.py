"""
Glicko player ratings.

Each player has a rating and a rating deviation (RD, how unsure we are about
the rating). A tournament is turned into head-to-head results: every player
beat everyone who finished below them and lost to everyone above, limited to
the OPPONENTS_RANGE (32) closest finishers on either side.

The update is standard Glicko:

    q     = ln(10) / 400
    g(RD) = 1 / sqrt(1 + 3 q^2 RD^2 / pi^2)
    E     = 1 / (1 + 10^(-g(RD_j) (r - r_j) / 400))
    1/d^2 = q^2 * sum(g(RD_j)^2 * E * (1 - E))
    r'    = r + q / (1/RD^2 + 1/d^2) * sum(g(RD_j) * (s_j - E))
    RD'   = sqrt(1 / (1/RD^2 + 1/d^2))      clamped to [MIN_RD, MAX_RD]

RD grows again by RD_DECAY_PER_DAY while a player is inactive.
"""

import logging
import math
from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable, Optional, Sequence

from oppr.config import settings
from oppr.engine.config_store import resolve_config
from oppr.engine.constants import OPPRConfig
from oppr.models import MatchResult, PlayerResult, RatingData, RatingResult

logger = logging.getLogger(__name__)


def _round_rating(value: float) -> float:
    # Half-up to 2dp, so 1500.125 → 1500.13
    return float(Decimal(str(value)).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP))


def calculate_g(rd: float, *, config: Optional[OPPRConfig] = None) -> float:
    """Glicko g(): how much an opponent's result counts given their RD."""
    config = resolve_config(config)
    q = config.RATING.Q
    return 1 / math.sqrt(1 + 3 * q ** 2 * rd ** 2 / math.pi ** 2)


def calculate_expected_score(
    rating: float,
    opponent_rating: float,
    opponent_rd: float,
    *,
    config: Optional[OPPRConfig] = None,
) -> float:
    """
    Expected score against one opponent (0 to 1).

    Example:
        calculate_expected_score(1500, 1500, 50)  # → 0.5
    """
    g = calculate_g(opponent_rd, config=config)
    return 1 / (1 + 10 ** (-g * (rating - opponent_rating) / 400))


def update_rating(
    rating: float,
    rd: float,
    results: Sequence[MatchResult],
    *,
    config: Optional[OPPRConfig] = None,
) -> RatingResult:
    """
    Apply one rating period of match results.

    Args:
        rating: Current rating
        rd: Current rating deviation (values <= 0 are treated as MIN_RD)
        results: Simulated matches against opponents

    Returns:
        RatingResult with the new rating (2dp) and clamped RD. With no
        results the rating and RD come back unchanged.
    """
    config = resolve_config(config)
    constants = config.RATING

    if not results:
        return RatingResult(new_rating=rating, new_rd=rd)

    if rd <= 0:
        rd = constants.MIN_RD

    q = constants.Q
    variance_sum = 0.0
    improvement_sum = 0.0

    for match in results:
        g = calculate_g(match.opponent_rd, config=config)
        expected = calculate_expected_score(
            rating, match.opponent_rating, match.opponent_rd, config=config
        )
        variance_sum += g ** 2 * expected * (1 - expected)
        improvement_sum += g * (match.score - expected)

    inverse_d_squared = q ** 2 * variance_sum
    precision = 1 / rd ** 2 + inverse_d_squared

    new_rating = rating + (q / precision) * improvement_sum
    new_rd = math.sqrt(1 / precision)
    new_rd = max(constants.MIN_RD, min(new_rd, constants.MAX_RD))

    return RatingResult(new_rating=_round_rating(new_rating), new_rd=new_rd)


def apply_rd_decay(rd: float, days_inactive: float, *, config: Optional[OPPRConfig] = None) -> float:
    """RD after ``days_inactive`` days without playing, capped at MAX_RD."""
    config = resolve_config(config)
    return min(rd + days_inactive * config.RATING.RD_DECAY_PER_DAY, config.RATING.MAX_RD)


def simulate_tournament_matches(
    position: int,
    all_results: Sequence[PlayerResult],
    player_id: Optional[str] = None,
    rating_system_id: Optional[str] = None,
    *,
    config: Optional[OPPRConfig] = None,
) -> list[MatchResult]:
    """
    Turn a finishing position into head-to-head results.

    Results are ordered by position and the subject is compared with up to
    OPPONENTS_RANGE entries on either side of them: a better finish is a
    loss (0), the same position a tie (0.5), a worse finish a win (1).

    Args:
        position: The subject's finishing position
        all_results: Every result in the tournament, subject included
        player_id: Identifies the subject when several players share a
                   position. When given, the subject's recorded position
                   is used for scoring; otherwise the first result at
                   ``position`` is the subject
        rating_system_id: Defaults to settings.default_rating_system

    Returns:
        One MatchResult per opponent. Opponents without a rating use
        DEFAULT_RATING, and those without an RD use MAX_RD.
    """
    config = resolve_config(config)
    constants = config.RATING
    if rating_system_id is None:
        rating_system_id = settings.default_rating_system

    ordered = sorted(all_results, key=lambda r: r.position)

    subject_index = None
    for index, result in enumerate(ordered):
        if player_id is not None:
            if result.player.id == player_id:
                subject_index = index
                break
        elif result.position == position:
            subject_index = index
            break

    if subject_index is None:
        logger.warning(
            "No result found for position %s (player %s), no matches simulated",
            position, player_id,
        )
        return []

    # Scores follow the subject's recorded position
    position = ordered[subject_index].position

    start = max(0, subject_index - constants.OPPONENTS_RANGE)
    end = min(len(ordered), subject_index + constants.OPPONENTS_RANGE + 1)

    matches = []
    for index in range(start, end):
        if index == subject_index:
            continue
        opponent = ordered[index]
        rating = opponent.player.rating_for(rating_system_id)

        opponent_rating = rating.value if rating is not None else constants.DEFAULT_RATING
        opponent_rd = constants.MAX_RD
        if rating is not None and rating.rating_deviation is not None:
            opponent_rd = rating.rating_deviation

        if opponent.position < position:
            score = 0.0
        elif opponent.position == position:
            score = 0.5
        else:
            score = 1.0

        matches.append(MatchResult(opponent_rating, opponent_rd, score))

    return matches


def create_new_player_rating(*, config: Optional[OPPRConfig] = None) -> RatingData:
    """Starting rating for a player nobody has rated yet."""
    config = resolve_config(config)
    return RatingData(value=config.RATING.DEFAULT_RATING, rating_deviation=config.RATING.MAX_RD)


def is_provisional_rating(event_count: int, *, config: Optional[OPPRConfig] = None) -> bool:
    """Ratings are provisional until PROVISIONAL_THRESHOLD events are played."""
    config = resolve_config(config)
    return event_count < config.RATING.PROVISIONAL_THRESHOLD


def update_tournament_ratings(
    results: Iterable[PlayerResult],
    rating_system_id: Optional[str] = None,
    *,
    config: Optional[OPPRConfig] = None,
) -> dict[str, RatingResult]:
    """
    New ratings for everyone who played in a tournament.

    Every player is updated against the same pre-tournament ratings, so the
    order of results doesn't matter. Opted-out players are neither updated
    nor used as opponents.

    Returns:
        Mapping of player id to RatingResult
    """
    config = resolve_config(config)
    if rating_system_id is None:
        rating_system_id = settings.default_rating_system

    active = [r for r in results if not r.opted_out]
    updates = {}

    for result in active:
        current = result.player.rating_for(rating_system_id) or create_new_player_rating(config=config)
        rd = current.rating_deviation
        if rd is None:
            rd = config.RATING.MAX_RD

        matches = simulate_tournament_matches(
            result.position,
            active,
            player_id=result.player.id,
            rating_system_id=rating_system_id,
            config=config,
        )
        updates[result.player.id] = update_rating(current.value, rd, matches, config=config)

    logger.debug("Updated %s ratings for %d players", rating_system_id, len(updates))
    return updates
