"""
OPPR calculation engine.

Tournament value:
- base_value: points for the number of rated players
- tva: field strength from ratings and world rankings
- tgp: format rigor (Tournament Grading Percentage)
- boosters: certified / major event multipliers
- tournament_value: first place value and full tournament results

Points and players:
- distribution: splitting the first place value across finishers
- decay: devaluing points by event age
- rating: Glicko ratings from simulated head-to-head results
- efficiency, profile: player aggregates and the ranking order

Every calculation takes an optional keyword ``config`` (an OPPRConfig) and
falls back to the process-wide configuration store without one.
"""

from oppr.engine.base_value import calculate_base_value, count_rated_players, is_player_rated
from oppr.engine.boosters import (
    apply_event_booster,
    determine_event_booster,
    get_event_booster_multiplier,
    qualifies_for_certified,
    qualifies_for_certified_plus,
)
from oppr.engine.config_store import (
    ConfigStore,
    configure_oppr,
    deep_merge,
    get_config,
    get_default_config,
    load_overrides_file,
    reset_config,
)
from oppr.engine.constants import DEFAULT_CONSTANTS, OPPRConfig
from oppr.engine.decay import (
    DecayInfo,
    apply_time_decay,
    calculate_days_between,
    calculate_decay_multiplier,
    calculate_event_age,
    filter_active_events,
    get_decay_multiplier,
    get_event_decay_info,
    is_event_active,
    recalculate_time_decay,
)
from oppr.engine.distribution import (
    calculate_dynamic_points,
    calculate_linear_points,
    calculate_player_points,
    calculate_position_percentage,
    distribute_points,
    get_points_for_position,
)
from oppr.engine.efficiency import (
    EfficiencyStats,
    EfficiencyTrend,
    analyze_efficiency_trend,
    calculate_decayed_efficiency,
    calculate_event_efficiency,
    calculate_overall_efficiency,
    calculate_top_n_efficiency,
    get_efficiency_stats,
)
from oppr.engine.errors import ValidationError
from oppr.engine.profile import (
    RankedProfile,
    build_player_event,
    build_player_profile,
    calculate_entry_ranking,
    rank_profiles,
)
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
from oppr.engine.tgp import (
    calculate_finals_tgp,
    calculate_flip_frenzy_tgp,
    calculate_qualifying_tgp,
    calculate_tgp,
    calculate_unlimited_card_tgp,
    get_ball_count_adjustment,
    validate_finals_eligibility,
)
from oppr.engine.tournament_value import (
    calculate_first_place_value,
    calculate_tournament_results,
    calculate_tournament_value,
)
from oppr.engine.tva import TVABreakdown, calculate_rating_tva, calculate_ranking_tva, calculate_total_tva

__all__ = [
    "DEFAULT_CONSTANTS",
    "OPPRConfig",
    "ConfigStore",
    "configure_oppr",
    "reset_config",
    "get_config",
    "get_default_config",
    "load_overrides_file",
    "deep_merge",
    "ValidationError",
    "calculate_base_value",
    "count_rated_players",
    "is_player_rated",
    "TVABreakdown",
    "calculate_rating_tva",
    "calculate_ranking_tva",
    "calculate_total_tva",
    "calculate_qualifying_tgp",
    "calculate_finals_tgp",
    "calculate_tgp",
    "calculate_unlimited_card_tgp",
    "calculate_flip_frenzy_tgp",
    "validate_finals_eligibility",
    "get_ball_count_adjustment",
    "get_event_booster_multiplier",
    "qualifies_for_certified",
    "qualifies_for_certified_plus",
    "determine_event_booster",
    "apply_event_booster",
    "calculate_first_place_value",
    "calculate_tournament_value",
    "calculate_tournament_results",
    "calculate_linear_points",
    "calculate_dynamic_points",
    "calculate_player_points",
    "distribute_points",
    "get_points_for_position",
    "calculate_position_percentage",
    "DecayInfo",
    "calculate_days_between",
    "calculate_event_age",
    "get_decay_multiplier",
    "calculate_decay_multiplier",
    "apply_time_decay",
    "is_event_active",
    "filter_active_events",
    "get_event_decay_info",
    "recalculate_time_decay",
    "calculate_g",
    "calculate_expected_score",
    "update_rating",
    "apply_rd_decay",
    "simulate_tournament_matches",
    "create_new_player_rating",
    "is_provisional_rating",
    "update_tournament_ratings",
    "EfficiencyStats",
    "EfficiencyTrend",
    "calculate_event_efficiency",
    "calculate_overall_efficiency",
    "calculate_decayed_efficiency",
    "calculate_top_n_efficiency",
    "analyze_efficiency_trend",
    "get_efficiency_stats",
    "RankedProfile",
    "build_player_event",
    "build_player_profile",
    "rank_profiles",
    "calculate_entry_ranking",
]
