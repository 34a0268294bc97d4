"""Electricity bill proration across occupants by days stayed.

Formula:
    consumption = current_reading - previous_reading
    total_cost  = consumption × rate_per_unit
    share[i]    = total_cost × days_stayed[i] / Σ days_stayed

Everything here is a pure function of its arguments. Shares are kept at full
precision; rounding to the smallest currency unit (round-half-up) happens only
when a value is presented or stored, via ``to_currency``. The sum of rounded
shares may drift from the rounded total; the drift is reported, not
redistributed.
"""

import logging
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Iterable, NamedTuple

from dormitory.errors import BillingValidationError

logger = logging.getLogger(__name__)

CURRENCY_UNIT = Decimal("0.01")
# Finest values the bills table stores without rounding
READING_UNIT = Decimal("0.01")
RATE_UNIT = Decimal("0.0001")

Number = Decimal | int | float | str


class OccupantDays(NamedTuple):
    """Days an occupant stayed during the billed period."""

    occupant_id: int
    days_stayed: int


class ShareResult(NamedTuple):
    """One occupant's share of a bill, at full precision."""

    occupant_id: int
    days_stayed: int
    amount: Decimal

    @property
    def rounded_amount(self) -> Decimal:
        return to_currency(self.amount)


@dataclass(frozen=True)
class BillCalculation:
    """Result of prorating one meter-reading pair across occupants."""

    previous_reading: Decimal
    current_reading: Decimal
    rate_per_unit: Decimal
    consumption: Decimal
    total_cost: Decimal
    total_days: int
    shares: tuple[ShareResult, ...]

    @property
    def rounded_total(self) -> Decimal:
        return to_currency(self.total_cost)

    @property
    def rounding_drift(self) -> Decimal:
        """Σ rounded shares minus the rounded total (in currency, signed)."""
        return sum((s.rounded_amount for s in self.shares), Decimal(0)) - self.rounded_total

    def share_for(self, occupant_id: int) -> ShareResult | None:
        for share in self.shares:
            if share.occupant_id == occupant_id:
                return share
        return None


def to_currency(amount: Decimal) -> Decimal:
    """Round to the smallest currency unit, half-up."""
    return amount.quantize(CURRENCY_UNIT, rounding=ROUND_HALF_UP)


def _to_decimal(value: Number, field: str) -> Decimal:
    if isinstance(value, bool):
        raise BillingValidationError(f"{field} must be a number", field=field)
    try:
        result = value if isinstance(value, Decimal) else Decimal(str(value))
    except (InvalidOperation, ValueError) as e:
        raise BillingValidationError(f"{field} must be a number", field=field) from e
    if not result.is_finite():
        raise BillingValidationError(f"{field} must be a finite number", field=field)
    return result


def _check_places(value: Decimal, unit: Decimal, field: str) -> None:
    if value != value.quantize(unit):
        raise BillingValidationError(
            f"{field} allows at most {-unit.as_tuple().exponent} decimal places", field=field
        )


def calculate_consumption(previous_reading: Number, current_reading: Number) -> Decimal:
    """Meter delta, rejecting readings entered out of order.

    Raises:
        BillingValidationError: If a reading is negative, finer than 0.01 or
            current < previous
    """
    previous = _to_decimal(previous_reading, "previous_reading")
    current = _to_decimal(current_reading, "current_reading")
    _check_places(previous, READING_UNIT, "previous_reading")
    _check_places(current, READING_UNIT, "current_reading")

    if previous < 0:
        raise BillingValidationError("previous reading cannot be negative", field="previous_reading")
    if current < previous:
        raise BillingValidationError(
            f"negative consumption: current reading must be ≥ previous reading "
            f"({current} < {previous})",
            field="current_reading",
        )
    return current - previous


def prorate(
    total_cost: Decimal,
    occupants: Iterable[OccupantDays],
    max_days: int | None = None,
) -> tuple[int, tuple[ShareResult, ...]]:
    """Split total_cost proportionally to each occupant's days stayed.

    Args:
        total_cost: Amount to split (full precision)
        occupants: (occupant_id, days_stayed) pairs, at least one
        max_days: Optional upper bound for days_stayed (billing period length)

    Returns:
        (total_days, shares) with shares in input order

    Raises:
        BillingValidationError: On empty input, duplicate occupants, invalid
            days, or when the days sum to zero
    """
    entries = [OccupantDays(*entry) for entry in occupants]
    if not entries:
        raise BillingValidationError("no occupants supplied", field="occupants")

    seen: set[int] = set()
    for entry in entries:
        if entry.occupant_id in seen:
            raise BillingValidationError(
                f"occupant {entry.occupant_id} listed more than once", field="occupants"
            )
        seen.add(entry.occupant_id)

        if isinstance(entry.days_stayed, bool) or not isinstance(entry.days_stayed, int):
            raise BillingValidationError(
                f"days stayed for occupant {entry.occupant_id} must be a whole number",
                field="days_stayed",
            )
        if entry.days_stayed < 0:
            raise BillingValidationError(
                f"days stayed for occupant {entry.occupant_id} cannot be negative",
                field="days_stayed",
            )
        if max_days is not None and entry.days_stayed > max_days:
            raise BillingValidationError(
                f"days stayed for occupant {entry.occupant_id} exceeds period length "
                f"({entry.days_stayed} > {max_days})",
                field="days_stayed",
            )

    total_days = sum(entry.days_stayed for entry in entries)
    if total_days == 0:
        raise BillingValidationError("zero total days, cannot prorate", field="days_stayed")

    shares = tuple(
        ShareResult(
            occupant_id=entry.occupant_id,
            days_stayed=entry.days_stayed,
            amount=total_cost * entry.days_stayed / total_days,
        )
        for entry in entries
    )
    return total_days, shares


def calculate_bill(
    previous_reading: Number,
    current_reading: Number,
    rate_per_unit: Number,
    occupants: Iterable[OccupantDays],
    max_days: int | None = None,
) -> BillCalculation:
    """Compute consumption, total cost and every occupant's share.

    Args:
        previous_reading: Previous meter value (≥ 0)
        current_reading: Current meter value (≥ previous_reading)
        rate_per_unit: Price per kWh (≥ 0)
        occupants: (occupant_id, days_stayed) pairs
        max_days: Optional cap for days_stayed (billing period length)

    Returns:
        BillCalculation with full-precision shares

    Raises:
        BillingValidationError: If any input is rejected; nothing is computed around
    """
    consumption = calculate_consumption(previous_reading, current_reading)

    rate = _to_decimal(rate_per_unit, "rate_per_unit")
    if rate < 0:
        raise BillingValidationError("rate per unit cannot be negative", field="rate_per_unit")
    _check_places(rate, RATE_UNIT, "rate_per_unit")

    total_cost = consumption * rate
    total_days, shares = prorate(total_cost, occupants, max_days=max_days)

    result = BillCalculation(
        previous_reading=_to_decimal(previous_reading, "previous_reading"),
        current_reading=_to_decimal(current_reading, "current_reading"),
        rate_per_unit=rate,
        consumption=consumption,
        total_cost=total_cost,
        total_days=total_days,
        shares=shares,
    )

    drift = result.rounding_drift
    if abs(drift) > CURRENCY_UNIT:
        logger.warning(
            "Rounded shares differ from rounded total by %s across %d occupants",
            drift,
            len(shares),
        )

    return result


__all__ = [
    "CURRENCY_UNIT",
    "READING_UNIT",
    "RATE_UNIT",
    "OccupantDays",
    "ShareResult",
    "BillCalculation",
    "to_currency",
    "calculate_consumption",
    "prorate",
    "calculate_bill",
]
