"""
Player roster import from CSV.

Expected layout (the first row is a header and is skipped):

    "Name","ID","Rank","Rating",...
    "Alice Johnson",1001,1000,1500.5
    "Bob Smith",1002,2000,1400.0

Only the first four columns are read; anything after them is ignored.
Players imported with ranking data are assumed rated (5 events, RD 100).
Without it every player gets the default rating and ranking and starts
unrated.
"""

import io
import logging
import math
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

import pandas as pd

from oppr.config import settings
from oppr.engine.errors import ValidationError
from oppr.engine.validators import validate_player
from oppr.models import Player, RatingData

logger = logging.getLogger(__name__)

MIN_COLUMNS = 4
IMPORTED_RATING_DEVIATION = 100.0
IMPORTED_EVENT_COUNT = 5


@dataclass(frozen=True)
class ParsedPlayer:
    """A player read from CSV, with the display name the engine doesn't use."""
    player: Player
    name: str


def _parse_non_negative(raw: str, label: str, line_number: int) -> float:
    try:
        value = float(raw)
    except ValueError:
        value = math.nan
    if math.isnan(value) or value < 0:
        raise ValidationError(f"Line {line_number}: Invalid {label} value: {raw}")
    return value


def parse_player_csv(
    csv_text: str,
    use_ranking_data: bool = True,
    default_rating: float = 1200.0,
    default_ranking: float = 999999,
    rating_system_id: Optional[str] = None,
) -> list[ParsedPlayer]:
    """
    Parse players from CSV text.

    Args:
        csv_text: Raw CSV, header row included
        use_ranking_data: Take ranking and rating from columns 3 and 4;
                          otherwise use the defaults below
        default_rating: Rating when use_ranking_data is False
        default_ranking: Ranking when use_ranking_data is False
        rating_system_id: Rating system the rating is stored under.
                          Defaults to settings.default_rating_system

    Returns:
        ParsedPlayer per data row, in file order

    Raises:
        ValidationError: On the first bad row, with its line number
    """
    if rating_system_id is None:
        rating_system_id = settings.default_rating_system

    if not csv_text.strip():
        raise ValidationError("CSV data is empty")

    try:
        frame = pd.read_csv(
            io.StringIO(csv_text),
            header=None,
            dtype=str,
            keep_default_na=False,
            skip_blank_lines=True,
            skipinitialspace=True,
        )
    except pd.errors.ParserError as e:
        raise ValidationError(f"CSV could not be parsed: {e}") from e

    rows = frame.iloc[1:]
    if rows.empty:
        raise ValidationError("CSV contains no data rows")

    parsed = []
    seen_ids = set()

    for offset, (_, row) in enumerate(rows.iterrows()):
        # Header is line 1
        line_number = offset + 2
        # Missing trailing fields come back as NaN, present ones as strings
        fields = [value.strip() for value in row.tolist() if isinstance(value, str)]

        if len(fields) < MIN_COLUMNS:
            raise ValidationError(
                f"Line {line_number}: Expected at least {MIN_COLUMNS} columns, got {len(fields)}"
            )

        name, player_id, ranking_raw, rating_raw = fields[:MIN_COLUMNS]

        if not name:
            raise ValidationError(f"Line {line_number}: Name is required (column 0)")
        if not player_id:
            raise ValidationError(f"Line {line_number}: Player ID is required (column 1)")
        if player_id in seen_ids:
            raise ValidationError(f"Line {line_number}: Duplicate player ID: {player_id}")
        seen_ids.add(player_id)

        if use_ranking_data:
            if not ranking_raw:
                raise ValidationError(
                    f"Line {line_number}: Ranking is required when using ranking data (column 2)"
                )
            ranking = _parse_non_negative(ranking_raw, "ranking", line_number)

            if not rating_raw:
                raise ValidationError(
                    f"Line {line_number}: Rating is required when using ranking data (column 3)"
                )
            rating = _parse_non_negative(rating_raw, "rating", line_number)
            is_rated = True
            event_count = IMPORTED_EVENT_COUNT
        else:
            rating = default_rating
            ranking = default_ranking
            is_rated = False
            event_count = 0

        player = Player(
            id=player_id,
            ranking=ranking,
            is_rated=is_rated,
            event_count=event_count,
            ratings={rating_system_id: RatingData(rating, IMPORTED_RATING_DEVIATION)},
        )
        try:
            validate_player(player)
        except ValidationError as e:
            raise ValidationError(f"Line {line_number}: {e}") from e

        parsed.append(ParsedPlayer(player=player, name=name))

    logger.info("Parsed %d players from CSV", len(parsed))
    return parsed


def parse_player_csv_file(path: str | Path, **kwargs) -> list[ParsedPlayer]:
    """Read a CSV file from disk and parse it with parse_player_csv."""
    text = Path(path).read_text(encoding="utf-8")
    return parse_player_csv(text, **kwargs)
