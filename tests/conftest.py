"""
Pytest configuration and fixtures.

This file is automatically loaded by pytest and provides
shared fixtures for all tests.
"""

from datetime import date

import pytest

from oppr.engine.config_store import reset_config
from oppr.models import Player, PlayerResult, RatingData


@pytest.fixture(autouse=True)
def clean_config():
    """
    Reset the process-wide OPPR config around every test.

    Tests that call configure_oppr() would otherwise leak their overrides
    into whatever runs next.
    """
    reset_config()
    yield
    reset_config()


@pytest.fixture
def make_player():
    """
    Factory for players.

    Usage:
        make_player("p1", rating=1800, rd=60, ranking=12)
    """
    def _make(
        player_id="p1",
        rating=None,
        rd=None,
        ranking=0,
        is_rated=True,
        event_count=5,
        system="glicko",
    ):
        ratings = {} if rating is None else {system: RatingData(rating, rd)}
        return Player(
            id=player_id,
            ranking=ranking,
            is_rated=is_rated,
            event_count=event_count,
            ratings=ratings,
        )

    return _make


@pytest.fixture
def field(make_player):
    """Factory for a field of ``count`` rated players named p1..pN."""
    def _field(count, rating=1500, rd=100, ranking_start=None):
        return [
            make_player(
                f"p{i}",
                rating=rating,
                rd=rd,
                ranking=(ranking_start + i - 1) if ranking_start else 0,
            )
            for i in range(1, count + 1)
        ]

    return _field


@pytest.fixture
def standings():
    """Turn players into results in list order (first player wins)."""
    def _standings(players):
        return [PlayerResult(player=p, position=i) for i, p in enumerate(players, start=1)]

    return _standings


@pytest.fixture
def event_date():
    return date(2024, 6, 1)
