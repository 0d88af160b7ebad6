"""
Unit tests for Glicko ratings.

Tests the core rating update, the head-to-head simulation that feeds it,
and whole-tournament updates.
"""

import pytest

from oppr.engine.rating import (
    apply_rd_decay,
    calculate_expected_score,
    calculate_g,
    create_new_player_rating,
    is_provisional_rating,
    simulate_tournament_matches,
    update_rating,
    update_tournament_ratings,
)
from oppr.models import MatchResult, PlayerResult


class TestGlickoFunctions:
    def test_g_of_zero_rd(self):
        assert calculate_g(0) == 1.0

    def test_g_shrinks_with_rd(self):
        assert calculate_g(300) < calculate_g(30) < 1.0

    def test_expected_score_equal_ratings(self):
        assert calculate_expected_score(1500, 1500, 50) == pytest.approx(0.5)

    def test_expected_score_favours_higher_rating(self):
        assert calculate_expected_score(1700, 1500, 50) > 0.5
        assert calculate_expected_score(1300, 1500, 50) < 0.5


class TestUpdateRating:
    """Tests for a single rating period."""

    def test_glickman_example(self):
        """Worked example from Glickman's paper: 1500/200 vs three opponents."""
        results = [
            MatchResult(opponent_rating=1400, opponent_rd=30, score=1),
            MatchResult(opponent_rating=1550, opponent_rd=100, score=0),
            MatchResult(opponent_rating=1700, opponent_rd=300, score=0),
        ]

        updated = update_rating(1500, 200, results)

        assert updated.new_rating == pytest.approx(1464.1, abs=0.5)
        assert updated.new_rd == pytest.approx(151.4, abs=0.5)

    def test_empty_results_change_nothing(self):
        updated = update_rating(1612.5, 87.0, [])
        assert updated.new_rating == 1612.5
        assert updated.new_rd == 87.0

    def test_win_raises_rating_and_lowers_rd(self):
        updated = update_rating(1500, 150, [MatchResult(1500, 50, 1)])
        assert updated.new_rating > 1500
        assert updated.new_rd < 150

    def test_loss_lowers_rating(self):
        updated = update_rating(1500, 150, [MatchResult(1500, 50, 0)])
        assert updated.new_rating < 1500

    def test_rating_is_rounded_to_two_places(self):
        updated = update_rating(1500, 150, [MatchResult(1480, 60, 1), MatchResult(1620, 90, 0.5)])
        assert updated.new_rating == round(updated.new_rating, 2)

    def test_rd_is_clamped_to_max(self):
        """An RD above MAX_RD comes back capped at 200."""
        updated = update_rating(1500, 1000, [MatchResult(1500, 50, 1)])
        assert updated.new_rd == 200.0

    def test_rd_is_clamped_to_min(self):
        """Many results against certain opponents cannot push RD below 10."""
        results = [MatchResult(1500, 10, 0.5) for _ in range(500)]
        assert update_rating(1500, 12, results).new_rd == 10.0

    def test_non_positive_rd_is_treated_as_min(self):
        """RD 0 would divide by zero, so it starts from MIN_RD."""
        updated = update_rating(1500, 0, [MatchResult(1500, 50, 1)])
        assert updated.new_rd == 10.0


class TestRatingHelpers:
    def test_rd_decay(self):
        assert apply_rd_decay(100, 10) == pytest.approx(103.0)
        assert apply_rd_decay(190, 100) == 200.0

    def test_new_player(self):
        rating = create_new_player_rating()
        assert rating.value == 1300.0
        assert rating.rating_deviation == 200.0

    def test_provisional(self):
        assert is_provisional_rating(4)
        assert not is_provisional_rating(5)


class TestSimulateTournamentMatches:
    """Tests for turning standings into head-to-head results."""

    def test_scores_by_position(self, field, standings):
        results = standings(field(5))

        matches = simulate_tournament_matches(3, results)

        assert [m.score for m in matches] == [0.0, 0.0, 1.0, 1.0]

    def test_tie(self, field):
        players = field(3)
        results = [
            PlayerResult(players[0], 1),
            PlayerResult(players[1], 2),
            PlayerResult(players[2], 2),
        ]

        matches = simulate_tournament_matches(2, results, player_id="p2")

        assert [m.score for m in matches] == [0.0, 0.5]

    def test_window_is_limited(self, field, standings):
        """At most 32 opponents on each side of the subject."""
        results = standings(field(100))

        assert len(simulate_tournament_matches(50, results)) == 64
        assert len(simulate_tournament_matches(1, results)) == 32
        assert len(simulate_tournament_matches(100, results)) == 32

    def test_missing_rating_uses_defaults(self, make_player):
        """Unrated opponents count as DEFAULT_RATING with MAX_RD."""
        results = [
            PlayerResult(make_player("a", rating=1600, rd=50), 1),
            PlayerResult(make_player("b"), 2),
            PlayerResult(make_player("c", rating=1400), 3),
        ]

        matches = simulate_tournament_matches(1, results, player_id="a")

        assert (matches[0].opponent_rating, matches[0].opponent_rd) == (1300.0, 200.0)
        assert (matches[1].opponent_rating, matches[1].opponent_rd) == (1400, 200.0)

    def test_unknown_subject(self, field, standings):
        assert simulate_tournament_matches(1, standings(field(3)), player_id="nobody") == []

    def test_player_id_decides_position(self, field, standings):
        """A stale position argument cannot flip wins and losses."""
        results = standings(field(3))

        matches = simulate_tournament_matches(1, results, player_id="p3")

        assert [m.score for m in matches] == [0.0, 0.0]


class TestUpdateTournamentRatings:
    """Tests for updating a whole tournament at once."""

    def test_winner_up_last_down(self, field, standings):
        updates = update_tournament_ratings(standings(field(8)))

        assert updates["p1"].new_rating > 1500
        assert updates["p8"].new_rating < 1500
        assert len(updates) == 8

    def test_order_of_results_does_not_matter(self, field, standings):
        """Everyone is rated against the same pre-tournament snapshot."""
        results = standings(field(8))
        assert update_tournament_ratings(results) == update_tournament_ratings(results[::-1])

    def test_opted_out_players_are_skipped(self, field):
        players = field(3)
        results = [
            PlayerResult(players[0], 1),
            PlayerResult(players[1], 2, opted_out=True),
            PlayerResult(players[2], 3),
        ]

        updates = update_tournament_ratings(results)

        assert set(updates) == {"p1", "p3"}

    def test_new_players_start_from_defaults(self, make_player):
        results = [PlayerResult(make_player(f"n{i}"), i) for i in range(1, 4)]

        updates = update_tournament_ratings(results)

        assert updates["n1"].new_rating > 1300.0
        assert updates["n3"].new_rating < 1300.0
