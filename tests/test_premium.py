from datetime import datetime
from decimal import Decimal

import pytest

from app.core.config import get_settings
from app.services.premium import (
    PremiumCalculator,
    PremiumConfig,
    annual_premium,
    monthly_premium,
    no_claim_bonus_multiplier,
)

JANUARY_EVENING = datetime(2026, 1, 15, 18, 30)
JULY_EVENING = datetime(2026, 7, 15, 18, 30)
MORNING = datetime(2026, 1, 15, 9, 0)


def _calc(**overrides) -> PremiumCalculator:
    return PremiumCalculator(PremiumConfig(**overrides))


def test_example_quote_outside_monsoon():
    result = _calc().compute(
        Decimal("5.00"),
        Decimal("40"),
        "Mumbai Industrial Area",
        "ZEPTO",
        now=JANUARY_EVENING,
    )
    assert result.weather == Decimal("1.1")
    # High-risk zone is matched before the industrial keyword.
    assert result.location == Decimal("1.4")
    assert result.platform == Decimal("1.3")
    assert result.time_of_day == Decimal("1.2")
    assert result.final_premium == Decimal("12.01")


def test_example_quote_during_monsoon_adds_rain_factor():
    result = _calc().compute(Decimal("5.00"), 40, "Mumbai Industrial Area", "ZEPTO", now=JULY_EVENING)
    assert result.weather == Decimal("1.43")
    assert result.final_premium == Decimal("15.62")


def test_compute_is_deterministic_for_fixed_time():
    calc = _calc()
    first = calc.compute(Decimal("7.25"), 41, "Chennai Highway", "swiggy", now=JULY_EVENING)
    second = calc.compute(Decimal("7.25"), 41, "Chennai Highway", "swiggy", now=JULY_EVENING)
    assert first == second


def test_final_premium_has_two_decimal_places():
    result = _calc().compute(Decimal("3.3333"), 36, "Green Park Colony", None, now=datetime(2026, 3, 1, 12, 0))
    assert result.final_premium.as_tuple().exponent == -2
    assert result.final_premium >= 0


def test_rounding_is_half_up():
    result = _calc().compute(Decimal("10.125"), now=MORNING)
    assert result.final_premium == Decimal("10.13")


def test_zero_base_premium_stays_zero():
    result = _calc().compute(Decimal("0"), 45, "Delhi", "ZEPTO", now=JANUARY_EVENING)
    assert result.final_premium == Decimal("0.00")


def test_weather_multiplier_only_counts_full_steps():
    calc = _calc()
    assert calc.weather_multiplier(Decimal("39.9"), None, MORNING) == Decimal("1")
    assert calc.weather_multiplier(Decimal("40"), None, MORNING) == Decimal("1.1")
    assert calc.weather_multiplier(Decimal("45"), None, MORNING) == Decimal("1.2")


def test_weather_multiplier_is_capped():
    assert _calc().weather_multiplier(Decimal("70"), None, MORNING) == Decimal("1.5")


def test_weather_multiplier_is_monotonic_above_threshold():
    calc = _calc()
    previous = Decimal("1")
    temp = Decimal("35")
    while temp <= Decimal("80"):
        current = calc.weather_multiplier(temp, "Pune", MORNING)
        assert current >= previous
        assert current <= Decimal("1.5")
        previous = current
        temp += Decimal("0.5")


def test_cold_weather_adds_risk():
    assert _calc().weather_multiplier(Decimal("5"), None, MORNING) == Decimal("1.2")


def test_cold_weather_compounds_with_monsoon():
    august = datetime(2026, 8, 3, 9, 0)
    assert _calc().weather_multiplier(Decimal("8"), "T Nagar, Chennai", august) == Decimal("1.56")


def test_monsoon_only_applies_to_monsoon_cities():
    assert _calc().weather_multiplier(Decimal("30"), "Pune", JULY_EVENING) == Decimal("1")


def test_missing_temperature_skips_weather_factor():
    result = _calc().compute(Decimal("5.00"), None, "Mumbai", None, now=datetime(2026, 7, 1, 9, 0))
    assert result.weather == Decimal("1")
    assert result.final_premium == Decimal("7.00")


def test_custom_threshold_and_cap():
    calc = _calc(weather_threshold=Decimal("30"), weather_max_multiplier=Decimal("1.25"))
    assert calc.weather_multiplier(Decimal("40"), None, MORNING) == Decimal("1.2")
    assert calc.weather_multiplier(Decimal("50"), None, MORNING) == Decimal("1.25")


@pytest.mark.parametrize(
    "location,expected",
    [
        ("Andheri, MUMBAI", Decimal("1.4")),
        ("Delhi Construction Site", Decimal("1.4")),
        ("NH48 Highway", Decimal("1.5")),
        ("Peenya Industrial Estate", Decimal("1.5")),
        ("Green Valley Residential Society", Decimal("0.9")),
        ("Model Colony", Decimal("0.9")),
        ("Pune", Decimal("1")),
        ("", Decimal("1")),
        (None, Decimal("1")),
    ],
)
def test_location_multiplier(location, expected):
    assert _calc().location_multiplier(location) == expected


def test_high_risk_platform_is_case_insensitive():
    assert _calc().platform_multiplier("zepto", MORNING) == Decimal("1.3")
    assert _calc().platform_multiplier("Instamart", MORNING) == Decimal("1.3")


@pytest.mark.parametrize(
    "hour,minute,expected",
    [
        (20, 0, Decimal("1.4")),
        (23, 45, Decimal("1.4")),
        (5, 59, Decimal("1.4")),
        (6, 0, Decimal("1")),
        (19, 59, Decimal("1")),
    ],
)
def test_night_platform_window(hour, minute, expected):
    now = datetime(2026, 1, 15, hour, minute)
    assert _calc().platform_multiplier("SWIGGY", now) == expected


def test_unknown_or_missing_platform():
    assert _calc().platform_multiplier("UBER_EATS", datetime(2026, 1, 15, 23, 0)) == Decimal("1")
    assert _calc().platform_multiplier(None, MORNING) == Decimal("1")
    assert _calc().platform_multiplier("", MORNING) == Decimal("1")


@pytest.mark.parametrize(
    "hour,minute,expected",
    [
        (17, 0, Decimal("1.2")),
        (20, 59, Decimal("1.2")),
        (21, 0, Decimal("1")),
        (21, 30, Decimal("1")),
        (22, 0, Decimal("1.5")),
        (0, 0, Decimal("1.5")),
        (4, 59, Decimal("1.5")),
        (5, 0, Decimal("1")),
        (11, 0, Decimal("0.9")),
        (14, 59, Decimal("0.9")),
        (15, 0, Decimal("1")),
    ],
)
def test_time_of_day_multiplier(hour, minute, expected):
    now = datetime(2026, 1, 15, hour, minute)
    assert _calc().time_of_day_multiplier(now) == expected


def test_subscription_transforms():
    assert monthly_premium(Decimal("10")) == Decimal("270.00")
    assert monthly_premium(Decimal("5.55")) == Decimal("149.85")
    assert annual_premium(Decimal("10")) == Decimal("2920.00")


def test_no_claim_bonus():
    assert no_claim_bonus_multiplier(None) == Decimal("1")
    assert no_claim_bonus_multiplier(0) == Decimal("1")
    assert no_claim_bonus_multiplier(2) == Decimal("0.90")
    assert no_claim_bonus_multiplier(10) == Decimal("0.75")


def test_config_from_settings():
    config = PremiumConfig.from_settings(get_settings())
    assert "Mumbai" in config.high_risk_zones
    assert config.monsoon_months == frozenset({6, 7, 8, 9})
    assert "ZEPTO" in config.high_risk_platforms
    assert "SWIGGY" in config.night_platforms
    assert config.weather_threshold == Decimal("35")
