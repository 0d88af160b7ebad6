"""
Base value of a tournament.

Each rated player (5+ events) adds POINTS_PER_PLAYER (0.5) points, up to
MAX_BASE_VALUE (32), which is reached at 64 rated players. Unrated players
add nothing.
"""

from typing import Iterable, Optional

from oppr.engine.config_store import resolve_config
from oppr.engine.constants import OPPRConfig
from oppr.models import Player


def count_rated_players(players: Iterable[Player]) -> int:
    """Number of players with the is_rated flag set."""
    return sum(1 for player in players if player.is_rated)


def calculate_base_value(players: Iterable[Player], *, config: Optional[OPPRConfig] = None) -> float:
    """
    Calculate the base value for a tournament.

    Args:
        players: Everyone who played in the tournament

    Returns:
        min(rated_player_count * POINTS_PER_PLAYER, MAX_BASE_VALUE)

    Example:
        # 20 rated players
        calculate_base_value(players)  # → 10.0
    """
    config = resolve_config(config)
    rated = count_rated_players(players)
    base_value = rated * config.BASE_VALUE.POINTS_PER_PLAYER
    return min(base_value, config.BASE_VALUE.MAX_BASE_VALUE)


def is_player_rated(event_count: int, *, config: Optional[OPPRConfig] = None) -> bool:
    """Whether a player with ``event_count`` events counts as rated."""
    config = resolve_config(config)
    return event_count >= config.BASE_VALUE.RATED_PLAYER_THRESHOLD
