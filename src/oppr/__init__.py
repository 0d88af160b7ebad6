"""
OPPR - Open Pinball Player Ranking

Scoring engine for competitive pinball rankings. Values tournaments from
field strength and format, splits that value into points by finishing
position, decays points with age and keeps Glicko ratings per player.

Main components:
- engine: all calculations (tournament value, points, decay, ratings,
  efficiency, profiles) and the constant/configuration store
- models: immutable inputs and derived values
- csv_parser: importing player rosters from CSV
- config: runtime settings from the environment (OPPR_*)
"""

__version__ = "1.0.0"

from oppr.csv_parser import ParsedPlayer, parse_player_csv, parse_player_csv_file
from oppr.engine import *  # noqa: F401,F403
from oppr.engine import __all__ as _engine_all
from oppr.models import (
    FinalsConfig,
    MatchResult,
    Player,
    PlayerEvent,
    PlayerProfile,
    PlayerResult,
    PointDistribution,
    QualifyingConfig,
    RatingData,
    RatingResult,
    TGPConfig,
    Tournament,
    TournamentResult,
    TournamentValue,
    get_primary_rating,
)

__all__ = [
    "__version__",
    "ParsedPlayer",
    "parse_player_csv",
    "parse_player_csv_file",
    "FinalsConfig",
    "MatchResult",
    "Player",
    "PlayerEvent",
    "PlayerProfile",
    "PlayerResult",
    "PointDistribution",
    "QualifyingConfig",
    "RatingData",
    "RatingResult",
    "TGPConfig",
    "Tournament",
    "TournamentResult",
    "TournamentValue",
    "get_primary_rating",
    *_engine_all,
]
