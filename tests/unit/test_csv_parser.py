"""
Unit tests for CSV roster import.

Tests that:
- Valid rosters parse with ranking data or defaults
- Whitespace, extra columns and trailing blank lines are tolerated
- Bad rows raise ValidationError naming the line
"""

import pytest

from oppr.csv_parser import parse_player_csv, parse_player_csv_file
from oppr.engine.errors import ValidationError

VALID_CSV = """"Name","ID","Rank","Rating","Base points","Rating points","Rank points","Points"
"Alice Johnson",1001,1000,1500.5,0.5,0.1,0.05,0.65
"Bob Smith",1002,2000,1400.0,0.5,0,0,0.5
"Charlie Davis",1003,3000,1300.25,0.5,0.05,0,0.55"""


class TestParseWithRankingData:
    """Tests for the default mode, reading ranking and rating columns."""

    def test_valid_csv(self):
        parsed = parse_player_csv(VALID_CSV)

        assert [p.name for p in parsed] == ["Alice Johnson", "Bob Smith", "Charlie Davis"]

        alice = parsed[0].player
        assert alice.id == "1001"
        assert alice.ranking == 1000
        assert alice.ratings["glicko"].value == 1500.5
        assert alice.ratings["glicko"].rating_deviation == 100.0
        assert alice.is_rated is True
        assert alice.event_count == 5

    def test_trailing_blank_lines(self):
        assert len(parse_player_csv(VALID_CSV + "\n\n\n")) == 3

    def test_whitespace_in_fields(self):
        text = '"Name","ID","Rank","Rating"\n"  Alice Johnson  ",  1001  ,  1000  ,  1500.5  '

        parsed = parse_player_csv(text)

        assert parsed[0].name == "Alice Johnson"
        assert parsed[0].player.id == "1001"
        assert parsed[0].player.ratings["glicko"].value == 1500.5

    def test_quoted_name_with_comma(self):
        text = '"Name","ID","Rank","Rating"\n"Smith, Bob",7,12,1650'
        assert parse_player_csv(text)[0].name == "Smith, Bob"

    def test_custom_rating_system(self):
        parsed = parse_player_csv(VALID_CSV, rating_system_id="elo")
        assert "elo" in parsed[0].player.ratings


class TestParseWithDefaults:
    def test_defaults_are_used(self):
        parsed = parse_player_csv(VALID_CSV, use_ranking_data=False)

        bob = parsed[1].player
        assert bob.ratings["glicko"].value == 1200.0
        assert bob.ranking == 999999
        assert bob.is_rated is False
        assert bob.event_count == 0

    def test_ranking_columns_may_be_blank(self):
        text = '"Name","ID","Rank","Rating"\n"Alice",1001,,'
        parsed = parse_player_csv(text, use_ranking_data=False, default_rating=1350)
        assert parsed[0].player.ratings["glicko"].value == 1350


class TestParseErrors:
    """Tests for rejected input."""

    def test_empty(self):
        with pytest.raises(ValidationError, match="CSV data is empty"):
            parse_player_csv("   \n")

    def test_header_only(self):
        with pytest.raises(ValidationError, match="no data rows"):
            parse_player_csv('"Name","ID","Rank","Rating"\n')

    def test_short_row(self):
        text = '"Name","ID","Rank","Rating"\n"Alice",1001'
        with pytest.raises(ValidationError, match="Line 2"):
            parse_player_csv(text)

    def test_duplicate_id(self):
        text = '"Name","ID","Rank","Rating"\n"Alice",1001,5,1500\n"Alicia",1001,6,1490'
        with pytest.raises(ValidationError, match="Line 3: Duplicate player ID: 1001"):
            parse_player_csv(text)

    def test_missing_name(self):
        text = '"Name","ID","Rank","Rating"\n"",1001,5,1500'
        with pytest.raises(ValidationError, match="Line 2: Name is required"):
            parse_player_csv(text)

    def test_invalid_ranking(self):
        text = '"Name","ID","Rank","Rating"\n"Alice",1001,first,1500'
        with pytest.raises(ValidationError, match="Line 2: Invalid ranking value: first"):
            parse_player_csv(text)

    def test_negative_rating(self):
        text = '"Name","ID","Rank","Rating"\n"Alice",1001,5,-10'
        with pytest.raises(ValidationError, match="Invalid rating value: -10"):
            parse_player_csv(text)

    def test_missing_rating_with_ranking_data(self):
        text = '"Name","ID","Rank","Rating"\n"Alice",1001,5,'
        with pytest.raises(ValidationError, match="Rating is required"):
            parse_player_csv(text)


def test_parse_file(tmp_path):
    path = tmp_path / "players.csv"
    path.write_text(VALID_CSV, encoding="utf-8")

    assert len(parse_player_csv_file(path)) == 3
