"""
Input validation for OPPR calculations.

Every validator is fail-fast: it raises a single ValidationError for the
first rule that is broken and returns None otherwise. Calculations assume
their inputs already passed these checks.
"""

from __future__ import annotations

from collections import Counter
from datetime import date, datetime
from numbers import Real
from typing import Any, Mapping, Optional, Sequence

from oppr.engine.config_store import resolve_config
from oppr.engine.constants import OPPRConfig
from oppr.engine.errors import ValidationError
from oppr.models import Player, PlayerResult, TGPConfig, Tournament

__all__ = [
    "ValidationError",
    "validate_minimum_players",
    "validate_private_tournament",
    "validate_player",
    "validate_players",
    "validate_tgp_config",
    "validate_tournament",
    "validate_player_results",
    "validate_finals_requirements",
    "validate_date_not_future",
    "validate_percentage",
]


def _is_number(value: Any) -> bool:
    # bool is an int subclass, but True is not a ranking
    return isinstance(value, Real) and not isinstance(value, bool)


def validate_minimum_players(player_count: int, *, config: Optional[OPPRConfig] = None) -> None:
    """Raise if a tournament has fewer than VALIDATION.MIN_PLAYERS players."""
    config = resolve_config(config)
    minimum = config.VALIDATION.MIN_PLAYERS
    if player_count < minimum:
        raise ValidationError(
            f"Tournament must have at least {minimum} players (got {player_count})"
        )


def validate_private_tournament(
    player_count: int,
    is_private: bool,
    *,
    config: Optional[OPPRConfig] = None,
) -> None:
    """Raise if a private tournament has fewer than MIN_PRIVATE_PLAYERS players."""
    config = resolve_config(config)
    minimum = config.VALIDATION.MIN_PRIVATE_PLAYERS
    if is_private and player_count < minimum:
        raise ValidationError(
            f"Private tournament must have at least {minimum} players (got {player_count})"
        )


def validate_player(player: Player) -> None:
    """
    Validate a single player.

    Checks the id is present, every rating value is a non-negative number,
    the ranking is a non-negative number and is_rated is a real boolean.
    """
    if player.id is None or player.id == "":
        raise ValidationError("Player must have an ID")

    if not isinstance(player.ratings, Mapping):
        raise ValidationError(f"Player {player.id} must have a ratings mapping")

    for system_id, rating in player.ratings.items():
        value = getattr(rating, "value", None)
        if not _is_number(value) or value < 0:
            raise ValidationError(
                f"Player {player.id} has invalid {system_id} rating: {value}"
            )

    if not _is_number(player.ranking) or player.ranking < 0:
        raise ValidationError(f"Player {player.id} has invalid ranking: {player.ranking}")

    if not isinstance(player.is_rated, bool):
        raise ValidationError(f"Player {player.id} must have a boolean is_rated flag")


def validate_players(players: Sequence[Player]) -> None:
    """Validate a non-empty list of players with unique ids."""
    if isinstance(players, (str, bytes)) or not isinstance(players, Sequence):
        raise ValidationError("Players must be a list")

    if len(players) == 0:
        raise ValidationError("Players list cannot be empty")

    for player in players:
        validate_player(player)

    counts = Counter(p.id for p in players)
    duplicates = [player_id for player_id, count in counts.items() if count > 1]
    if duplicates:
        raise ValidationError(f"Duplicate player IDs found: {', '.join(map(str, duplicates))}")


def validate_tgp_config(tgp_config: TGPConfig, *, config: Optional[OPPRConfig] = None) -> None:
    """
    Validate a TGP configuration.

    Games and hours can't be negative, the ball count adjustment must be a
    fraction, and qualifying can't ask for more games per machine than
    VALIDATION.MAX_GAMES_PER_MACHINE.
    """
    config = resolve_config(config)
    qualifying = tgp_config.qualifying
    finals = tgp_config.finals

    if qualifying.meaningful_games < 0:
        raise ValidationError("Qualifying meaningful games cannot be negative")

    if qualifying.hours is not None and qualifying.hours < 0:
        raise ValidationError("Qualifying hours cannot be negative")

    if finals.meaningful_games < 0:
        raise ValidationError("Finals meaningful games cannot be negative")

    adjustment = tgp_config.ball_count_adjustment
    if adjustment is not None and not 0 <= adjustment <= 1:
        raise ValidationError("Ball count adjustment must be between 0 and 1")

    if qualifying.machine_count:
        games_per_machine = qualifying.meaningful_games / qualifying.machine_count
        maximum = config.VALIDATION.MAX_GAMES_PER_MACHINE
        if games_per_machine > maximum:
            raise ValidationError(
                f"Cannot exceed {maximum:g} games per machine (got {games_per_machine:g})"
            )


def validate_tournament(tournament: Tournament, *, config: Optional[OPPRConfig] = None) -> None:
    """
    Validate a tournament before calculating its value.

    Order of checks: id, name, date, players, minimum player count, TGP
    configuration.
    """
    config = resolve_config(config)

    if not tournament.id:
        raise ValidationError("Tournament must have an ID")

    if not tournament.name:
        raise ValidationError("Tournament must have a name")

    if not isinstance(tournament.date, (date, datetime)):
        raise ValidationError("Tournament must have a valid date")

    validate_players(tournament.players)
    validate_minimum_players(len(tournament.players), config=config)
    validate_tgp_config(tournament.tgp_config, config=config)


def validate_player_results(results: Sequence[PlayerResult]) -> None:
    """
    Validate tournament standings.

    Ties are allowed anywhere except first place: exactly one player must
    finish at position 1.
    """
    if isinstance(results, (str, bytes)) or not isinstance(results, Sequence):
        raise ValidationError("Results must be a list")

    if len(results) == 0:
        raise ValidationError("Results cannot be empty")

    for index, result in enumerate(results):
        validate_player(result.player)

        position = result.position
        if not isinstance(position, int) or isinstance(position, bool) or position < 1:
            raise ValidationError(f"Result {index} has invalid position: {position}")

    first_place_count = sum(1 for r in results if r.position == 1)
    if first_place_count != 1:
        raise ValidationError(
            f"Must have exactly one player in 1st place (found {first_place_count})"
        )


def validate_finals_requirements(
    total_participants: int,
    finalist_count: int,
    *,
    config: Optional[OPPRConfig] = None,
) -> None:
    """
    Raise unless finalists make up between 10% and 50% of the field.

    The bounds are MIN_PARTICIPATION_PERCENT * 0.2 and
    MIN_PARTICIPATION_PERCENT (0.10 and 0.50 by default).
    """
    config = resolve_config(config)
    if total_participants <= 0:
        raise ValidationError(
            f"Total participants must be positive (got {total_participants})"
        )

    maximum = config.VALIDATION.MIN_PARTICIPATION_PERCENT
    minimum = maximum * 0.2
    percentage = finalist_count / total_participants

    if percentage < minimum:
        raise ValidationError(
            f"Finals must include at least {minimum * 100:g}% of participants "
            f"(got {percentage * 100:.1f}%)"
        )

    if percentage > maximum:
        raise ValidationError(
            f"Finals cannot include more than {maximum * 100:g}% of participants "
            f"(got {percentage * 100:.1f}%)"
        )


def validate_date_not_future(
    value: date | datetime,
    field_name: str = "Date",
    *,
    now: Optional[datetime] = None,
) -> None:
    """Raise if ``value`` lies after ``now`` (defaults to the current time)."""
    if isinstance(value, datetime):
        reference = now or datetime.now(value.tzinfo)
        if value > reference:
            raise ValidationError(f"{field_name} cannot be in the future")
        return

    reference_day = (now or datetime.now()).date()
    if value > reference_day:
        raise ValidationError(f"{field_name} cannot be in the future")


def validate_percentage(value: float, field_name: str = "Percentage") -> None:
    """Raise unless 0 <= value <= 100."""
    if not _is_number(value) or not 0 <= value <= 100:
        raise ValidationError(f"{field_name} must be between 0 and 100 (got {value})")
