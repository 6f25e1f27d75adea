"""Tests for the monthly projection sequencer and the growth frame."""

import math
from datetime import date, datetime

import pytest

from wealth.models import Asset, AssetType, InterestType, PriceSnapshot
from wealth.projection import (
    growth_frame,
    growth_summary,
    month_starts,
    project,
    round_half_up,
)


@pytest.fixture
def rent() -> Asset:
    return Asset(
        name="Flat",
        type=AssetType.RENT,
        monthly_rent=1000,
        start_date=date(2025, 3, 1),
    )


class TestMonthStarts:
    def test_starts_the_month_after_now(self, now):
        starts = month_starts(now)

        assert starts[0] == datetime(2025, 4, 1)
        assert starts[-1] == datetime(2026, 3, 1)
        assert len(starts) == 12

    def test_december_rolls_into_next_year(self):
        starts = month_starts(datetime(2025, 12, 31, 23, 59), 2)

        assert starts == [datetime(2026, 1, 1), datetime(2026, 2, 1)]


class TestProject:
    def test_empty_collection_is_all_zero(self, prices, now):
        points = project([], prices, 12, now)

        assert len(points) == 12
        assert all(point.value == 0 for point in points)

    def test_labels_are_chronological(self, prices, now):
        points = project([], prices, now=now)

        assert [p.label for p in points] == [
            "Apr", "May", "Jun", "Jul", "Aug", "Sep",
            "Oct", "Nov", "Dec", "Jan", "Feb", "Mar",
        ]
        assert [p.year for p in points] == [2025] * 9 + [2026] * 3

    def test_horizon_controls_length(self, prices, now):
        assert len(project([], prices, 3, now)) == 3

    def test_market_assets_stay_constant(self, prices, now):
        gold = Asset(name="Bar", type=AssetType.GOLD, amount=31.1035)

        values = {point.value for point in project([gold], prices, now=now)}

        assert values == {125000}

    def test_rent_grows_with_months(self, rent, prices, now):
        values = [point.value for point in project([rent], prices, now=now)]

        assert values[:3] == [1000, 2000, 3000]
        assert values == sorted(values)

    def test_rent_freezes_after_end_date(self, prices, now):
        lease = Asset(
            name="Flat",
            type=AssetType.RENT,
            monthly_rent=1000,
            start_date=date(2025, 3, 1),
            end_date=date(2025, 5, 10),
        )

        values = [point.value for point in project([lease], prices, now=now)]

        assert values[0] == 1000
        assert set(values[1:]) == {2000}

    def test_same_inputs_same_output(self, rent, prices, now):
        assert project([rent], prices, now=now) == project([rent], prices, now=now)

    def test_values_are_whole_units(self, now):
        silver = Asset(name="Coin", type=AssetType.SILVER, amount=10)
        snapshot = PriceSnapshot.fallback()

        points = project([silver], snapshot, now=now)

        assert all(isinstance(point.value, int) for point in points)
        assert points[0].value == round_half_up(10 / 31.1035 * 5000)


def test_round_half_up():
    assert round_half_up(0.5) == 1
    assert round_half_up(2.5) == 3
    assert round_half_up(2.49) == 2


class TestGrowthFrame:
    def test_now_row_is_prepended(self, prices, now):
        df = growth_frame([], prices, now=now)

        assert len(df) == 13
        assert df["label"].iloc[0] == "Now"
        assert (df["value"] == 0).all()

    def test_month_over_month_change(self, rent, prices, now):
        df = growth_frame([rent], prices, now=now)

        assert df["value"].iloc[0] == 0
        assert df["change"].iloc[1] == 1000
        assert df["change_pct"].iloc[1] == 0.0
        assert df["change_pct"].iloc[2] == pytest.approx(100.0)
        assert df["change"].isna().iloc[0]

    def test_growth_summary(self, rent, prices, now):
        cash = Asset(name="Wallet", type=AssetType.CASH, amount=10000)
        df = growth_frame([cash, rent], prices, now=now)

        growth, pct = growth_summary(df)

        assert df["from_now"].iloc[1] == 1000
        assert growth == 11000
        assert pct == pytest.approx(110.0)

    def test_growth_summary_with_zero_total(self, prices, now):
        assert growth_summary(growth_frame([], prices, now=now)) == (0, 0.0)


class TestOverflowingAssets:
    def test_projection_does_not_raise(self, prices, now):
        runaway = Asset(
            name="Runaway",
            type=AssetType.INTEREST,
            principal=1000,
            interest_rate=1_000_000,
            interest_type=InterestType.COMPOUND,
            start_date=date(2015, 1, 1),
        )

        points = project([runaway], prices, now=now)
        df = growth_frame([runaway], prices, now=now)
        growth_summary(df)

        assert all(point.value == math.inf for point in points)
        assert df["value"].iloc[0] == math.inf


def test_round_half_up_passes_non_finite_through():
    assert round_half_up(math.inf) == math.inf
    assert math.isnan(round_half_up(math.nan))
