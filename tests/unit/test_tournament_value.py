"""
Tests for putting a whole tournament through the engine.

Validation → base value + TVA → TGP → booster → first place value →
point distribution, plus the decay / profile flow that follows.
"""

from datetime import date

import pytest

from oppr.engine import (
    DEFAULT_CONSTANTS,
    ValidationError,
    build_player_event,
    build_player_profile,
    calculate_first_place_value,
    calculate_tournament_results,
    calculate_tournament_value,
    configure_oppr,
)
from oppr.models import FinalsConfig, PlayerResult, QualifyingConfig, TGPConfig, Tournament

TGP_124 = TGPConfig(
    qualifying=QualifyingConfig(type="limited", meaningful_games=7),
    finals=FinalsConfig(format_type="match-play", meaningful_games=12, four_player_groups=True),
)


@pytest.fixture
def tournament(field):
    return Tournament(
        id="spring-2024",
        name="Spring Classic",
        date=date(2024, 4, 6),
        players=field(20, rating=1200),
        tgp_config=TGP_124,
    )


class TestFirstPlaceValue:
    def test_formula(self):
        assert calculate_first_place_value(10.0, 5.0, 1.24, 1.0) == pytest.approx(18.6)
        assert calculate_first_place_value(10.0, 5.0, 1.0, 2.0) == 30.0


class TestCalculateTournamentValue:
    """Tests for the tournament value assembler."""

    def test_breakdown(self, tournament):
        value = calculate_tournament_value(tournament)

        # 20 rated players, all rated too low and unranked to add TVA
        assert value.base_value == 10.0
        assert value.total_tva == 0.0
        assert value.tgp == pytest.approx(1.24)
        assert value.event_booster_multiplier == 1.0
        assert value.first_place_value == pytest.approx(12.4)

    def test_booster_is_applied_last(self, field):
        major = Tournament(
            id="worlds",
            name="Worlds",
            date=date(2024, 4, 6),
            players=field(20, rating=1200),
            tgp_config=TGP_124,
            event_booster="major",
        )
        assert calculate_tournament_value(major).first_place_value == pytest.approx(24.8)

    def test_strong_field_adds_tva(self, field):
        strong = Tournament(
            id="t",
            name="Strong",
            date=date(2024, 4, 6),
            players=field(64, rating=2000, ranking_start=1),
            tgp_config=TGP_124,
        )

        value = calculate_tournament_value(strong)

        assert value.tva_rating == pytest.approx(25.0)
        # ln-based contributions of rankings 1..64 sum to almost exactly 50
        assert value.tva_ranking == pytest.approx(50.0, abs=1e-3)
        assert value.first_place_value == pytest.approx((32 + 75) * 1.24, rel=1e-4)

    def test_invalid_tournament_is_rejected(self, field):
        small = Tournament(id="t", name="Tiny", date=date(2024, 4, 6), players=field(2))
        with pytest.raises(ValidationError, match=r"at least 3 players \(got 2\)"):
            calculate_tournament_value(small)

    def test_global_overrides_apply(self, tournament):
        configure_oppr({"BASE_VALUE": {"POINTS_PER_PLAYER": 1.0}})
        assert calculate_tournament_value(tournament).base_value == 20.0

    def test_explicit_config_wins(self, tournament):
        configure_oppr({"BASE_VALUE": {"POINTS_PER_PLAYER": 1.0}})
        value = calculate_tournament_value(tournament, config=DEFAULT_CONSTANTS)
        assert value.base_value == 10.0


class TestCalculateTournamentResults:
    """Tests for valuing a tournament and distributing its points."""

    def test_distribution(self, tournament, standings):
        outcome = calculate_tournament_results(tournament, standings(tournament.players))

        assert len(outcome.distributions) == 20
        winner = outcome.distributions[0]
        # 20 rated players: 10% linear + 90% dynamic for the winner
        assert winner.total_points == pytest.approx(outcome.value.first_place_value)

        data = outcome.to_dict()
        assert data["tournament_id"] == "spring-2024"
        assert data["distributions"][0]["player_id"] == "p1"

    def test_opt_out_not_allowed(self, tournament, standings):
        results = standings(tournament.players)
        results[3] = PlayerResult(results[3].player, results[3].position, opted_out=True)

        with pytest.raises(ValidationError, match="does not allow opting out"):
            calculate_tournament_results(tournament, results)

    def test_opt_out_allowed(self, field, standings):
        open_event = Tournament(
            id="t",
            name="Open",
            date=date(2024, 4, 6),
            players=field(10),
            allows_opt_out=True,
        )
        results = standings(open_event.players)
        results[4] = PlayerResult(results[4].player, results[4].position, opted_out=True)

        outcome = calculate_tournament_results(open_event, results)

        assert "p5" not in [d.player.id for d in outcome.distributions]

    def test_results_are_validated(self, tournament, standings):
        results = standings(tournament.players)
        results[1] = PlayerResult(results[1].player, 1)

        with pytest.raises(ValidationError, match="found 2"):
            calculate_tournament_results(tournament, results)


def test_points_flow_into_profile(tournament, standings):
    """A finish becomes a decayed event and then a profile total."""
    outcome = calculate_tournament_results(tournament, standings(tournament.players))
    winner = outcome.distributions[0]

    event = build_player_event(
        tournament.id,
        tournament.date,
        winner.position,
        winner.total_points,
        outcome.value.first_place_value,
        reference_date=date(2025, 6, 1),
    )
    profile = build_player_profile(winner.player, [event])

    assert event.decay_multiplier == 0.75
    assert profile.total_points == pytest.approx(winner.total_points * 0.75)
    assert profile.efficiency == pytest.approx(100.0)
