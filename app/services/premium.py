import logging
from dataclasses import dataclass
from datetime import datetime, time
from decimal import Decimal, ROUND_HALF_UP

from app.core.config import Settings, parse_csv_list, parse_int_list


logger = logging.getLogger(__name__)

ONE = Decimal("1")
CENTS = Decimal("0.01")

HEAT_STEP_DEGREES = Decimal("5")
HEAT_STEP_INCREMENT = Decimal("0.1")
COLD_MULTIPLIER = Decimal("1.2")
MONSOON_MULTIPLIER = Decimal("1.3")

HIGH_RISK_ZONE_MULTIPLIER = Decimal("1.4")
HAZARDOUS_AREA_MULTIPLIER = Decimal("1.5")
RESIDENTIAL_AREA_MULTIPLIER = Decimal("0.9")
HAZARDOUS_AREA_HINTS = ("industrial", "construction", "highway")
RESIDENTIAL_AREA_HINTS = ("residential", "society", "colony")

HIGH_RISK_PLATFORM_MULTIPLIER = Decimal("1.3")
NIGHT_PLATFORM_MULTIPLIER = Decimal("1.4")

PEAK_HOURS_MULTIPLIER = Decimal("1.2")
NIGHT_HOURS_MULTIPLIER = Decimal("1.5")
MIDDAY_MULTIPLIER = Decimal("0.9")

MONTHLY_DAYS = Decimal("30")
MONTHLY_DISCOUNT_FACTOR = Decimal("0.9")
ANNUAL_DAYS = Decimal("365")
ANNUAL_DISCOUNT_FACTOR = Decimal("0.8")

NO_CLAIM_STEP = Decimal("0.05")
NO_CLAIM_MAX_DISCOUNT = Decimal("0.25")


def _as_decimal(value) -> Decimal:
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def _round_money(value: Decimal) -> Decimal:
    return value.quantize(CENTS, rounding=ROUND_HALF_UP)


def _in_window(moment: time, start: time, end: time) -> bool:
    # Half-open [start, end); windows with end <= start wrap past midnight.
    if start < end:
        return start <= moment < end
    return moment >= start or moment < end


@dataclass(frozen=True)
class PremiumConfig:
    weather_threshold: Decimal = Decimal("35")
    weather_max_multiplier: Decimal = Decimal("1.5")
    cold_threshold: Decimal = Decimal("10")
    high_risk_zones: tuple[str, ...] = ("Mumbai", "Chennai", "Delhi", "Bangalore")
    monsoon_cities: tuple[str, ...] = ("Mumbai", "Chennai", "Kolkata")
    monsoon_months: frozenset[int] = frozenset({6, 7, 8, 9})
    high_risk_platforms: frozenset[str] = frozenset({"ZEPTO", "INSTAMART"})
    night_platforms: frozenset[str] = frozenset({"SWIGGY", "ZOMATO"})

    @classmethod
    def from_settings(cls, settings: Settings) -> "PremiumConfig":
        return cls(
            weather_threshold=_as_decimal(settings.weather_threshold_temperature),
            weather_max_multiplier=_as_decimal(settings.weather_risk_max_multiplier),
            cold_threshold=_as_decimal(settings.cold_threshold_temperature),
            high_risk_zones=parse_csv_list(settings.high_risk_zones),
            monsoon_cities=parse_csv_list(settings.monsoon_cities),
            monsoon_months=frozenset(parse_int_list(settings.monsoon_months)),
            high_risk_platforms=frozenset(p.upper() for p in parse_csv_list(settings.high_risk_gig_platforms)),
            night_platforms=frozenset(p.upper() for p in parse_csv_list(settings.night_gig_platforms)),
        )


@dataclass(frozen=True)
class PremiumBreakdown:
    base_premium: Decimal
    final_premium: Decimal
    weather: Decimal
    location: Decimal
    platform: Decimal
    time_of_day: Decimal


class PremiumCalculator:
    """Composes independent risk multipliers into a daily premium.

    Every factor is a total function of its inputs plus the ``now`` passed to
    :meth:`compute`; nothing here reads the wall clock.
    """

    def __init__(self, config: PremiumConfig | None = None):
        self.config = config or PremiumConfig()

    def compute(
        self,
        base_premium,
        temperature=None,
        location: str | None = None,
        gig_platform: str | None = None,
        *,
        now: datetime,
    ) -> PremiumBreakdown:
        base = _as_decimal(base_premium)

        weather = self.weather_multiplier(temperature, location, now) if temperature is not None else ONE
        location_factor = self.location_multiplier(location)
        platform_factor = self.platform_multiplier(gig_platform, now)
        time_factor = self.time_of_day_multiplier(now)

        raw = base * weather * location_factor * platform_factor * time_factor
        final = _round_money(raw)

        logger.debug(
            "Premium calculated: base=%s final=%s weather=%s location=%s platform=%s time=%s",
            base,
            final,
            weather,
            location_factor,
            platform_factor,
            time_factor,
        )
        return PremiumBreakdown(
            base_premium=base,
            final_premium=final,
            weather=weather,
            location=location_factor,
            platform=platform_factor,
            time_of_day=time_factor,
        )

    def weather_multiplier(self, temperature, location: str | None, now: datetime) -> Decimal:
        multiplier = ONE
        cfg = self.config

        if temperature is not None:
            temp = _as_decimal(temperature)
            if temp > cfg.weather_threshold:
                steps = int((temp - cfg.weather_threshold) // HEAT_STEP_DEGREES)
                multiplier = multiplier + HEAT_STEP_INCREMENT * steps
                if multiplier > cfg.weather_max_multiplier:
                    multiplier = cfg.weather_max_multiplier

            # Kept separate from the heat branch: both thresholds are configurable.
            if temp < cfg.cold_threshold:
                multiplier = multiplier * COLD_MULTIPLIER

        if location and now.month in cfg.monsoon_months:
            lowered = location.lower()
            if any(city.lower() in lowered for city in cfg.monsoon_cities):
                multiplier = multiplier * MONSOON_MULTIPLIER

        return multiplier

    def location_multiplier(self, location: str | None) -> Decimal:
        if not location:
            return ONE

        lowered = location.lower()
        # Zone names are checked first, so "Mumbai Industrial Area" prices as a zone.
        for zone in self.config.high_risk_zones:
            if zone.lower() in lowered:
                return HIGH_RISK_ZONE_MULTIPLIER
        if any(hint in lowered for hint in HAZARDOUS_AREA_HINTS):
            return HAZARDOUS_AREA_MULTIPLIER
        if any(hint in lowered for hint in RESIDENTIAL_AREA_HINTS):
            return RESIDENTIAL_AREA_MULTIPLIER
        return ONE

    def platform_multiplier(self, gig_platform: str | None, now: datetime) -> Decimal:
        if not gig_platform:
            return ONE

        platform = gig_platform.strip().upper()
        if platform in self.config.high_risk_platforms:
            return HIGH_RISK_PLATFORM_MULTIPLIER
        if platform in self.config.night_platforms and _in_window(now.time(), time(20, 0), time(6, 0)):
            return NIGHT_PLATFORM_MULTIPLIER
        return ONE

    def time_of_day_multiplier(self, now: datetime) -> Decimal:
        moment = now.time()
        if _in_window(moment, time(17, 0), time(21, 0)):
            return PEAK_HOURS_MULTIPLIER
        if _in_window(moment, time(22, 0), time(5, 0)):
            return NIGHT_HOURS_MULTIPLIER
        if _in_window(moment, time(11, 0), time(15, 0)):
            return MIDDAY_MULTIPLIER
        return ONE


def monthly_premium(daily_premium) -> Decimal:
    return _round_money(_as_decimal(daily_premium) * MONTHLY_DAYS * MONTHLY_DISCOUNT_FACTOR)


def annual_premium(daily_premium) -> Decimal:
    return _round_money(_as_decimal(daily_premium) * ANNUAL_DAYS * ANNUAL_DISCOUNT_FACTOR)


def no_claim_bonus_multiplier(no_claim_years: int | None) -> Decimal:
    if not no_claim_years or no_claim_years < 0:
        return ONE
    discount = min(NO_CLAIM_STEP * no_claim_years, NO_CLAIM_MAX_DISCOUNT)
    return ONE - discount
