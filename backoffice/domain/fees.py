"""Transaction fee calculation - percentage plus fixed fee, clamped to a floor and ceiling"""

from decimal import Decimal, InvalidOperation
from typing import Any, Mapping, Optional

from backoffice.domain.exceptions import CurrencyMismatchError, InvalidArgumentError
from backoffice.domain.models import FeeBreakdown, FeeConfiguration, FeeCorridor, FeeSchedule
from backoffice.domain.money import Money, quantize_half_up
from backoffice.domain.rules import DEFAULT_FEE_SCHEDULES, MAX_FEE_PERCENTAGE


def validate_fee_schedule(schedule: FeeSchedule) -> None:
    """
    Check schedule invariants, raising InvalidArgumentError on the first violation.

    Meant to be called when an operator saves fee configuration, so a bad
    schedule is rejected once instead of on every transaction.
    """
    currency = schedule.fixed.currency
    if schedule.minimum.currency != currency or schedule.maximum.currency != currency:
        raise CurrencyMismatchError(
            "Fee schedule mixes currencies: "
            f"fixed={schedule.fixed.currency}, minimum={schedule.minimum.currency}, "
            f"maximum={schedule.maximum.currency}"
        )
    if not isinstance(schedule.percentage, Decimal) or not schedule.percentage.is_finite():
        raise InvalidArgumentError("Fee percentage must be a finite Decimal")
    if schedule.percentage < 0:
        raise InvalidArgumentError(f"Fee percentage cannot be negative: {schedule.percentage}")
    if schedule.percentage > MAX_FEE_PERCENTAGE:
        raise InvalidArgumentError(f"Fee percentage cannot exceed {MAX_FEE_PERCENTAGE}: {schedule.percentage}")
    if schedule.fixed.is_negative():
        raise InvalidArgumentError(f"Fixed fee cannot be negative: {schedule.fixed}")
    if schedule.minimum.is_negative():
        raise InvalidArgumentError(f"Minimum fee cannot be negative: {schedule.minimum}")
    if schedule.minimum > schedule.maximum:
        raise InvalidArgumentError(
            f"Minimum fee {schedule.minimum} exceeds maximum fee {schedule.maximum}"
        )


def compute_fee_breakdown(amount: Money, schedule: FeeSchedule) -> FeeBreakdown:
    """
    Compute the fee for a transaction and every step that led to it.

    Order of operations (fixed for all callers):
    1. percentage fee = amount * percentage / 100, rounded half-up to the minor unit
    2. subtotal = percentage fee + fixed fee
    3. fee = subtotal clamped to [minimum, maximum]

    Example (domestic default, GHS 1,000.00):
        1000.00 * 2.5% = 25.00; + 0.30 = 25.30; within [0.10, 50.00] -> 25.30
    """
    validate_fee_schedule(schedule)
    if amount.currency != schedule.currency:
        raise CurrencyMismatchError(
            f"Amount is in {amount.currency} but schedule is in {schedule.currency}"
        )
    if amount.is_negative():
        raise InvalidArgumentError(f"Transaction amount cannot be negative: {amount}")

    percentage_fee = Money(
        quantize_half_up(amount.amount * schedule.percentage / Decimal(100), amount.currency),
        amount.currency,
    )
    subtotal = percentage_fee + schedule.fixed

    fee = subtotal
    clamped_to: Optional[str] = None
    if subtotal < schedule.minimum:
        fee, clamped_to = schedule.minimum, "minimum"
    elif subtotal > schedule.maximum:
        fee, clamped_to = schedule.maximum, "maximum"

    return FeeBreakdown(
        amount=amount,
        percentage=schedule.percentage,
        percentage_fee=percentage_fee,
        fixed_fee=schedule.fixed,
        subtotal=subtotal,
        fee=fee,
        clamped_to=clamped_to,
    )


def compute_fee(amount: Money, schedule: FeeSchedule) -> Money:
    """Fee charged on a transaction under the given schedule"""
    return compute_fee_breakdown(amount, schedule).fee


def build_fee_schedule(
    percentage: Any,
    fixed: Any,
    minimum: Any,
    maximum: Any,
    currency: str,
) -> FeeSchedule:
    """
    Build and validate a schedule from loosely typed numbers.

    Stored configuration documents hold plain JSON numbers; floats are read
    through their shortest repr (0.3 -> Decimal("0.3")) and then held to the
    currency's precision by Money.
    """
    schedule = FeeSchedule(
        percentage=_decimal_field("percentage", percentage),
        fixed=Money(_decimal_field("fixed", fixed), currency),
        minimum=Money(_decimal_field("minimum", minimum), currency),
        maximum=Money(_decimal_field("maximum", maximum), currency),
    )
    validate_fee_schedule(schedule)
    return schedule


def _decimal_field(name: str, value: Any) -> Decimal:
    if isinstance(value, bool) or value is None:
        raise InvalidArgumentError(f"Fee field {name!r} must be a number")
    try:
        return Decimal(str(value)) if isinstance(value, float) else Decimal(value)
    except (InvalidOperation, TypeError, ValueError):
        raise InvalidArgumentError(f"Fee field {name!r} is not a number: {value!r}")


def _default_schedule(corridor: FeeCorridor, currency: str) -> FeeSchedule:
    values = DEFAULT_FEE_SCHEDULES[corridor.value]
    return build_fee_schedule(currency=currency, **values)


def default_fee_configuration(currency: str = "GHS") -> FeeConfiguration:
    """Fee configuration a new tenant starts with"""
    return FeeConfiguration(
        domestic=_default_schedule(FeeCorridor.DOMESTIC, currency),
        international=_default_schedule(FeeCorridor.INTERNATIONAL, currency),
    )


DEFAULT_FEE_CONFIGURATION = default_fee_configuration()


def parse_fee_configuration(document: Optional[Mapping[str, Any]], currency: str = "GHS") -> FeeConfiguration:
    """
    Read a stored transactionFees document into a FeeConfiguration.

    A corridor missing from the document falls back to its default schedule;
    a corridor that is present but invalid raises InvalidArgumentError.
    """
    config = default_fee_configuration(currency)
    if not document:
        return config

    for corridor in FeeCorridor:
        raw = document.get(corridor.value)
        if raw is None:
            continue
        if not isinstance(raw, Mapping):
            raise InvalidArgumentError(f"{corridor.value} fee schedule must be an object")
        missing = [key for key in ("percentage", "fixed", "minimum", "maximum") if key not in raw]
        if missing:
            raise InvalidArgumentError(
                f"{corridor.value} fee schedule is missing {', '.join(missing)}"
            )
        schedule = build_fee_schedule(
            percentage=raw["percentage"],
            fixed=raw["fixed"],
            minimum=raw["minimum"],
            maximum=raw["maximum"],
            currency=currency,
        )
        config = config.with_schedule(corridor, schedule)

    return config
