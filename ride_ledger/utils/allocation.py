"""
Distance-Proportional Allocation

Splits the cost of a shared expense across the drivers of the rides it covers,
in proportion to the distance each driver drove.

For an expense of amount A covering rides with total distance D:
- every ride r contributes 100 * distance(r) / D percent of the distance
- every driver d carries A * (sum of d's distances) / D of the cost
- every driver other than the payer owes the payer their share

Nothing is rounded here; rounding happens once, when the result is persisted.
An amount that rounds to 0.00 is rejected up front.

Example Usage:
    from ride_ledger.utils.allocation import allocate

    allocation = allocate(Decimal("40"), "Anne", [1, 2], rides)

    # rides: 1 = Anne 10km, 2 = Bram 30km
    # allocation.links    -> [RideShare(1, 25), RideShare(2, 75)]
    # allocation.balances -> [DriverDebt("Bram" -> "Anne", 30)]
"""

import logging
from collections import Counter
from decimal import Decimal
from typing import Dict, Iterable, List, Sequence

from ride_ledger.schemas.expense_schema import Allocation, DriverDebt, RideShare
from ride_ledger.utils.exceptions import ValidationError
from ride_ledger.utils.money import CENTS, round_decimal, to_decimal

logger = logging.getLogger(__name__)

HUNDRED = Decimal('100')


def resolve_rides(ride_ids: Sequence[int], rides: Iterable) -> List:
    """
    Resolve ride ids to ride objects, in the order the ids were given.

    Rides are any objects with `id`, `driver` and `distance` attributes
    (ORM rows in the service, plain schemas in tests).

    Raises:
        ValidationError: If no ride is selected, an id is repeated or an id
            does not resolve to a ride
    """
    if not ride_ids:
        raise ValidationError("At least one ride must be selected")

    duplicates = sorted(ride_id for ride_id, count in Counter(ride_ids).items() if count > 1)
    if duplicates:
        raise ValidationError(f"Rides selected more than once: {duplicates}")

    by_id = {ride.id: ride for ride in rides}
    missing = [ride_id for ride_id in ride_ids if ride_id not in by_id]
    if missing:
        raise ValidationError(f"Unknown ride id(s): {missing}")

    return [by_id[ride_id] for ride_id in ride_ids]


def total_distance(rides: Iterable) -> Decimal:
    """
    Sum ride distances, rejecting anything that cannot be divided by.

    Raises:
        ValidationError: If a distance is negative or the total is zero
    """
    total = Decimal('0')
    for ride in rides:
        distance = to_decimal(ride.distance)
        if not distance.is_finite() or distance < 0:
            raise ValidationError(f"Ride {ride.id} has an invalid distance: {ride.distance}")
        total += distance

    if total == 0:
        raise ValidationError("Total distance of the selected rides is zero")
    return total


def driver_shares(amount: Decimal, rides: Sequence) -> Dict[str, Decimal]:
    """
    Compute each driver's share of an amount, proportional to distance.

    Drivers appear in the order of their first ride. Summing the shares gives
    back the amount (up to Decimal precision).

    Example:
        >>> driver_shares(Decimal("40"), [anne_10km, bram_30km])
        {'Anne': Decimal('10'), 'Bram': Decimal('30')}
    """
    amount = to_decimal(amount)
    total = total_distance(rides)

    distances: Dict[str, Decimal] = {}
    for ride in rides:
        distances[ride.driver] = distances.get(ride.driver, Decimal('0')) + to_decimal(ride.distance)

    return {driver: amount * distance / total for driver, distance in distances.items()}


def allocate(amount: Decimal, payer: str, ride_ids: Sequence[int], rides: Iterable) -> Allocation:
    """
    Allocate an expense over the rides it covers.

    Args:
        amount: Total expense amount (must be positive)
        payer: Participant who paid the expense
        ride_ids: Ids of the rides the expense covers
        rides: Candidate rides; must contain every id in ride_ids

    Returns:
        Allocation with one RideShare per ride and one DriverDebt per
        non-paying driver with a nonzero share

    Raises:
        ValidationError: On an empty, repeated or unknown ride selection,
            a zero total distance or an amount below one cent
    """
    amount = to_decimal(amount)
    if not amount.is_finite() or amount <= 0:
        raise ValidationError(f"Expense amount must be positive, got {amount}")
    if round_decimal(amount) == 0:
        raise ValidationError(f"Expense amount must be at least {CENTS}, got {amount}")

    selected = resolve_rides(ride_ids, rides)
    total = total_distance(selected)

    links = [
        RideShare(ride_id=ride.id, percentage=HUNDRED * to_decimal(ride.distance) / total)
        for ride in selected
    ]

    balances = [
        DriverDebt(from_user=driver, to_user=payer, amount=share)
        for driver, share in driver_shares(amount, selected).items()
        if share > 0 and driver != payer
    ]

    logger.debug(
        f"Allocated {amount} paid by {payer} over {len(links)} ride(s) "
        f"(total {total} km): {len(balances)} debt(s)"
    )
    return Allocation(links=links, balances=balances)
