"""
Unit tests for time decay.

Tier lower bounds are inclusive: 365 days is already 75%, 1095 days is 0%.
"""

from datetime import date, datetime, timedelta, timezone

import pytest

from oppr.engine.config_store import configure_oppr
from oppr.engine.decay import (
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
from oppr.models import PlayerEvent

EVENT_DATE = date(2020, 1, 1)


def days_later(days):
    return EVENT_DATE + timedelta(days=days)


class TestDaysBetween:
    def test_dates(self):
        assert calculate_days_between(date(2024, 1, 1), date(2024, 1, 31)) == 30

    def test_partial_days_are_floored(self):
        """One minute short of a full day is still 0 days."""
        start = datetime(2024, 1, 1, 12, 0)
        assert calculate_days_between(start, datetime(2024, 1, 2, 11, 59)) == 0
        assert calculate_days_between(start, datetime(2024, 1, 2, 12, 0)) == 1

    def test_mixed_date_and_datetime(self):
        """A plain date counts as midnight when compared with a datetime."""
        assert calculate_days_between(date(2024, 1, 1), datetime(2024, 1, 3, 6, 0)) == 2

    def test_event_age_in_years(self):
        assert calculate_event_age(EVENT_DATE, days_later(730)) == pytest.approx(2.0)

    def test_aware_datetime_defaults_to_now_in_its_timezone(self):
        """Omitting the reference date works for timezone-aware events."""
        event = datetime.now(timezone.utc) - timedelta(days=400)

        assert calculate_days_between(event) == 400
        assert calculate_decay_multiplier(event) == 0.75
        assert is_event_active(event)
        assert get_event_decay_info(event).age_in_days == 400
        assert filter_active_events([event]) == [event]


class TestDecayMultiplier:
    """Tests for the decay tiers."""

    @pytest.mark.parametrize(
        "days, expected",
        [
            (0, 1.0),
            (364, 1.0),
            (365, 0.75),
            (547, 0.75),
            (729, 0.75),
            (730, 0.5),
            (1094, 0.5),
            (1095, 0.0),
            (2000, 0.0),
        ],
    )
    def test_tiers_by_age_in_days(self, days, expected):
        """Each tier starts on its exact day: 365 is 75%, 1095 is worthless."""
        assert calculate_decay_multiplier(EVENT_DATE, days_later(days)) == expected

    def test_by_age_in_years(self):
        assert get_decay_multiplier(0.99) == 1.0
        assert get_decay_multiplier(1.0) == 0.75
        assert get_decay_multiplier(3.0) == 0.0

    def test_apply_time_decay(self):
        assert apply_time_decay(100.0, EVENT_DATE, days_later(730)) == 50.0

    def test_overridden_tier(self):
        configure_oppr({"TIME_DECAY": {"YEAR_1_TO_2": 0.8}})
        assert calculate_decay_multiplier(EVENT_DATE, days_later(365)) == 0.8


class TestActiveEvents:
    def test_is_event_active(self):
        assert is_event_active(EVENT_DATE, days_later(1094))
        assert not is_event_active(EVENT_DATE, days_later(1095))

    def test_filter_keeps_order(self):
        dates = [date(2023, 1, 1), date(2019, 1, 1), date(2022, 6, 1)]
        assert filter_active_events(dates, date(2024, 1, 1)) == [date(2023, 1, 1), date(2022, 6, 1)]

    def test_decay_info(self):
        info = get_event_decay_info(EVENT_DATE, days_later(547))

        assert info.age_in_days == 547
        assert info.age_in_years == pytest.approx(547 / 365)
        assert info.decay_multiplier == 0.75
        assert info.is_active


class TestRecalculateTimeDecay:
    """Tests for the periodic decay batch job."""

    @pytest.fixture
    def events(self):
        return [
            PlayerEvent("t1", date(2023, 9, 1), 1, 40.0, 40.0),
            PlayerEvent("t2", date(2022, 9, 1), 3, 20.0, 50.0),
            PlayerEvent("t3", date(2021, 9, 1), 2, 30.0, 45.0),
            PlayerEvent("t4", date(2019, 9, 1), 5, 10.0, 60.0),
        ]

    def test_fields_are_refreshed(self, events):
        updated = recalculate_time_decay(events, date(2024, 3, 1))

        assert [e.decay_multiplier for e in updated] == [1.0, 0.75, 0.5, 0.0]
        assert [e.decayed_points for e in updated] == [40.0, 15.0, 15.0, 0.0]
        assert updated[0].age_in_days == 182

    def test_events_are_never_dropped(self, events):
        updated = recalculate_time_decay(events, date(2030, 1, 1))

        assert len(updated) == len(events)
        assert not any(e.is_active for e in updated)

    def test_idempotent(self, events):
        """Running the job twice for the same date changes nothing."""
        reference = date(2024, 3, 1)
        once = recalculate_time_decay(events, reference)
        twice = recalculate_time_decay(once, reference)

        assert once == twice

    def test_inputs_are_untouched(self, events):
        recalculate_time_decay(events, date(2024, 3, 1))
        assert events[1].decay_multiplier == 1.0
        assert events[1].decayed_points == 0.0
