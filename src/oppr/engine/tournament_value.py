"""
Tournament value assembly.

Puts the pieces together in a fixed order:

    first_place_value = (base_value + total_tva) * tgp * event_booster

Field strength (base value and TVA) is additive, format rigor (TGP) scales
it, and the booster is applied last.
"""

import logging
from typing import Optional, Sequence

from oppr.engine.base_value import calculate_base_value
from oppr.engine.boosters import get_event_booster_multiplier
from oppr.engine.config_store import resolve_config
from oppr.engine.constants import OPPRConfig
from oppr.engine.distribution import distribute_points
from oppr.engine.errors import ValidationError
from oppr.engine.tgp import calculate_tgp
from oppr.engine.tva import calculate_total_tva
from oppr.engine.validators import validate_player_results, validate_tournament
from oppr.models import PlayerResult, Tournament, TournamentResult, TournamentValue

logger = logging.getLogger(__name__)


def calculate_first_place_value(
    base_value: float,
    total_tva: float,
    tgp: float,
    event_booster_multiplier: float,
) -> float:
    """
    Points awarded to the winner.

    Example:
        calculate_first_place_value(10.0, 5.0, 1.24, 1.0)  # → 18.6
    """
    return (base_value + total_tva) * tgp * event_booster_multiplier


def calculate_tournament_value(
    tournament: Tournament,
    validate: bool = True,
    rating_system_id: Optional[str] = None,
    *,
    config: Optional[OPPRConfig] = None,
) -> TournamentValue:
    """
    Work out what a tournament is worth.

    Args:
        tournament: Tournament snapshot with its players and format
        validate: Run validate_tournament first (skip only for inputs that
                  were already validated)
        rating_system_id: Rating system used for rating TVA

    Returns:
        TournamentValue with every intermediate value

    Raises:
        ValidationError: If validation is on and the tournament is invalid
    """
    config = resolve_config(config)
    if validate:
        validate_tournament(tournament, config=config)

    base_value = calculate_base_value(tournament.players, config=config)
    tva = calculate_total_tva(tournament.players, rating_system_id, config=config)
    tgp = calculate_tgp(tournament.tgp_config, config=config)
    booster = get_event_booster_multiplier(tournament.event_booster, config=config)

    value = TournamentValue(
        base_value=base_value,
        tva_rating=tva.rating,
        tva_ranking=tva.ranking,
        total_tva=tva.total,
        tgp=tgp,
        event_booster_multiplier=booster,
        first_place_value=calculate_first_place_value(base_value, tva.total, tgp, booster),
    )

    logger.info(
        "Tournament %s: base=%.2f tva=%.2f tgp=%.2f booster=%.2f -> first place %.2f",
        tournament.id, base_value, tva.total, tgp, booster, value.first_place_value,
    )
    return value


def calculate_tournament_results(
    tournament: Tournament,
    results: Sequence[PlayerResult],
    rating_system_id: Optional[str] = None,
    *,
    config: Optional[OPPRConfig] = None,
) -> TournamentResult:
    """
    Value a tournament and distribute its points in one step.

    Raises:
        ValidationError: If the tournament or results are invalid, or a
                         player opted out of a tournament that doesn't
                         allow it
    """
    config = resolve_config(config)
    validate_player_results(results)

    if not tournament.allows_opt_out:
        opted_out = [r.player.id for r in results if r.opted_out]
        if opted_out:
            raise ValidationError(
                f"Tournament {tournament.id} does not allow opting out "
                f"(opted out: {', '.join(opted_out)})"
            )

    value = calculate_tournament_value(tournament, rating_system_id=rating_system_id, config=config)
    distributions = distribute_points(results, value.first_place_value, config=config)

    return TournamentResult(tournament=tournament, value=value, distributions=distributions)
