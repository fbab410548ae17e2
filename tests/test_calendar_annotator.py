from datetime import date, datetime, timedelta

import pytest

from tripanalysis.processing.calendar_annotator import (
    canonical_date,
    date_key,
    is_weekend,
    iter_days,
    weekend_count,
    working_days,
)


def test_late_evening_datetime_stays_on_its_day():
    assert canonical_date(datetime(2025, 4, 18, 23, 59)) == date(2025, 4, 18)
    assert canonical_date(datetime(2025, 3, 30, 0, 30)) == date(2025, 3, 30)
    assert date_key("2025-04-01") == "2025-04-01"


def test_iteration_crosses_month_and_dst_boundaries():
    days = list(iter_days(date(2025, 3, 29), date(2025, 4, 2)))
    assert [d.isoformat() for d in days] == [
        "2025-03-29", "2025-03-30", "2025-03-31", "2025-04-01", "2025-04-02",
    ]


def test_single_day_range_is_evaluated():
    assert working_days(date(2025, 4, 18), date(2025, 4, 18)) == 1
    assert working_days(date(2025, 4, 18), date(2025, 4, 18), ["2025-04-18"]) == 0
    assert weekend_count(date(2025, 4, 19), date(2025, 4, 19)) == 1


def test_hybrid_day_counts_half_unless_holiday():
    assert working_days(date(2025, 5, 2), date(2025, 5, 2), [], ["2025-05-02"]) == 0.5
    assert working_days(date(2025, 5, 2), date(2025, 5, 2), ["2025-05-02"], ["2025-05-02"]) == 0


@pytest.mark.parametrize("length", [1, 6, 7, 10, 40])
def test_weekends_plus_working_days_cover_range(length):
    start = date(2025, 4, 3)
    end = start + timedelta(days=length - 1)
    assert weekend_count(start, end) + working_days(start, end) == length


def test_is_weekend():
    assert is_weekend("2025-04-19")
    assert is_weekend(date(2025, 4, 20))
    assert not is_weekend(date(2025, 4, 21))


def test_classify_day(annotator):
    good_friday = annotator.classify_day("2025-04-18")
    assert good_friday.holiday_in == ("german", "indian")
    assert good_friday.is_holiday("german") and good_friday.is_holiday("indian")
    assert not good_friday.is_weekend
    assert good_friday.label == "German & Indian Holiday"

    assert annotator.classify_day(date(2025, 4, 21)).label == "German Holiday"
    assert annotator.classify_day(date(2025, 5, 1)).label == "Indian Holiday"
    hybrid = annotator.classify_day(date(2025, 5, 2))
    assert hybrid.hybrid and hybrid.label == "Hybrid Day"
    assert annotator.classify_day(date(2025, 4, 19)).label == "Weekend"
    assert annotator.classify_day(date(2025, 4, 22)).label == ""


def test_holidays_in_range(annotator):
    holidays, hybrid = annotator.holidays_in_range(date(2025, 4, 18), date(2025, 4, 24))
    assert holidays == {"german": ("2025-04-18", "2025-04-21"), "indian": ("2025-04-18",)}
    assert hybrid == ()

    holidays, hybrid = annotator.holidays_in_range(date(2025, 4, 30), date(2025, 5, 2))
    assert holidays == {"german": (), "indian": ("2025-05-01",)}
    assert hybrid == ("2025-05-02",)


def test_hybrid_days_only_reduce_their_jurisdiction(annotator):
    # May 1 (Thu) .. May 6 (Tue)
    leaves = annotator.leave_days(date(2025, 5, 1), date(2025, 5, 6))
    assert leaves == {"german": 4, "indian": 2.5}


def test_day_schedule_lists_every_day(annotator):
    schedule = annotator.day_schedule(date(2025, 4, 18), date(2025, 4, 24))
    assert len(schedule) == 7
    assert [day.is_weekend for day in schedule] == [False, True, True, False, False, False, False]
