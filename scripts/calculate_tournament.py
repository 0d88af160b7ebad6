#!/usr/bin/env python3
"""
Calculate a tournament's value and the points each finisher earns.

Players are read from a CSV roster (Name, ID, Rank, Rating, ...) in
finishing order: the first data row finished 1st, the second 2nd, and so on.

Usage:
    python scripts/calculate_tournament.py results.csv \\
        --qualifying-type limited --qualifying-games 7 \\
        --finals-games 12 --four-player-groups

With constant overrides (JSON object mirroring the constant tree):
    python scripts/calculate_tournament.py results.csv --overrides overrides.json

Print JSON instead of a table:
    python scripts/calculate_tournament.py results.csv --json
"""
from __future__ import annotations

import argparse
import json
import logging
import sys
from datetime import date
from pathlib import Path

# Add src to path so this script can be run directly
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from oppr.config import settings
from oppr.csv_parser import parse_player_csv_file
from oppr.engine import ValidationError, calculate_tournament_results, load_overrides_file
from oppr.models import FinalsConfig, PlayerResult, QualifyingConfig, TGPConfig, Tournament

logger = logging.getLogger("calculate_tournament")


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Calculate tournament value and point distribution from a CSV roster.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument("csv_path", help="Players CSV in finishing order.")
    parser.add_argument("--name", default="Tournament", help="Tournament name.")
    parser.add_argument("--id", default="cli", help="Tournament id.")
    parser.add_argument(
        "--date",
        default=None,
        help="Tournament date (YYYY-MM-DD). Defaults to today.",
    )
    parser.add_argument(
        "--qualifying-type",
        choices=["none", "limited", "unlimited", "hybrid"],
        default="none",
    )
    parser.add_argument("--qualifying-games", type=float, default=0)
    parser.add_argument("--qualifying-hours", type=float, default=None)
    parser.add_argument("--finals-games", type=float, default=0)
    parser.add_argument(
        "--four-player-groups",
        action="store_true",
        help="Finals are played in 4-player groups.",
    )
    parser.add_argument(
        "--three-player-groups",
        action="store_true",
        help="Finals are played in 3-player groups.",
    )
    parser.add_argument("--ball-count-adjustment", type=float, default=1.0)
    parser.add_argument(
        "--booster",
        choices=["none", "certified", "certified-plus", "championship-series", "major"],
        default="none",
    )
    parser.add_argument(
        "--no-ranking-data",
        action="store_true",
        help="Ignore ranking/rating columns and import everyone unrated.",
    )
    parser.add_argument(
        "--overrides",
        default=None,
        help="JSON file of constant overrides (default: OPPR_CONFIG_OVERRIDES_PATH).",
    )
    parser.add_argument("--json", action="store_true", help="Print results as JSON.")
    return parser


def main() -> int:
    args = _build_parser().parse_args()

    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        overrides_path = args.overrides or settings.config_overrides_path
        if overrides_path:
            load_overrides_file(overrides_path)

        parsed = parse_player_csv_file(
            args.csv_path, use_ranking_data=not args.no_ranking_data
        )
        players = [p.player for p in parsed]
        names = {p.player.id: p.name for p in parsed}

        tournament = Tournament(
            id=args.id,
            name=args.name,
            date=date.fromisoformat(args.date) if args.date else date.today(),
            players=players,
            tgp_config=TGPConfig(
                qualifying=QualifyingConfig(
                    type=args.qualifying_type,
                    meaningful_games=args.qualifying_games,
                    hours=args.qualifying_hours,
                ),
                finals=FinalsConfig(
                    format_type="match-play" if args.finals_games else "none",
                    meaningful_games=args.finals_games,
                    four_player_groups=args.four_player_groups,
                    three_player_groups=args.three_player_groups,
                    finalist_count=len(players),
                ),
                ball_count_adjustment=args.ball_count_adjustment,
            ),
            event_booster=args.booster,
        )
        results = [PlayerResult(player=p, position=i) for i, p in enumerate(players, start=1)]
        outcome = calculate_tournament_results(tournament, results)
    except (ValidationError, OSError) as exc:
        logger.error("%s", exc)
        return 1

    if args.json:
        print(json.dumps(outcome.to_dict(), indent=2))
        return 0

    value = outcome.value
    print(f"{tournament.name}  ({len(players)} players)")
    print(f"  base value        {value.base_value:8.2f}")
    print(f"  rating TVA        {value.tva_rating:8.2f}")
    print(f"  ranking TVA       {value.tva_ranking:8.2f}")
    print(f"  TGP               {value.tgp:8.2%}")
    print(f"  booster           {value.event_booster_multiplier:8.2f}x")
    print(f"  first place value {value.first_place_value:8.2f}")
    print()
    print(f"{'pos':>4}  {'player':<30} {'linear':>8} {'dynamic':>8} {'total':>8}")
    for dist in outcome.distributions:
        print(
            f"{dist.position:>4}  {names[dist.player.id]:<30} "
            f"{dist.linear_points:8.2f} {dist.dynamic_points:8.2f} {dist.total_points:8.2f}"
        )
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
