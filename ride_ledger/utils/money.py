from decimal import Decimal, ROUND_HALF_UP
from typing import Any, List, Sequence

CENTS = Decimal('0.01')


def to_decimal(value: Any) -> Decimal:
    """
    Convert a number coming from the store or a request into a Decimal.

    Floats go through str() so 0.1 becomes Decimal('0.1') rather than its
    binary expansion.
    """
    if isinstance(value, Decimal):
        return value
    if value is None:
        return Decimal('0')
    return Decimal(str(value))


def round_decimal(value: Any, precision: Decimal = CENTS) -> Decimal:
    """
    Round half-up to the given precision (default: cents).

    Example:
        >>> round_decimal(Decimal("100.005"))
        Decimal('100.01')
    """
    return to_decimal(value).quantize(precision, rounding=ROUND_HALF_UP)


def format_amount(value: Any) -> str:
    """Render an amount as a string with exactly two decimals"""
    return f"{round_decimal(value):.2f}"


def round_to_total(values: Sequence[Any], total: Any, precision: Decimal = CENTS) -> List[Decimal]:
    """
    Round each value half-up, then move the leftover units so the rounded
    values add up to the rounded total (largest-remainder rounding).

    A missing unit goes to the value that lost the most when rounded, an
    extra unit comes off the value that gained the most. Ties go to the
    earlier value.

    Example:
        >>> round_to_total([Decimal("100") / 7] * 7, Decimal("100"))
        [Decimal('14.28'), Decimal('14.28'), Decimal('14.28'), Decimal('14.29'), ...]
    """
    exact = [to_decimal(value) for value in values]
    rounded = [round_decimal(value, precision) for value in exact]
    if not rounded:
        return rounded

    leftover = round_decimal(total, precision) - sum(rounded, Decimal('0'))
    steps = int(leftover / precision)
    if steps == 0:
        return rounded

    step = precision if steps > 0 else -precision
    if steps > 0:
        order = sorted(range(len(exact)), key=lambda i: (rounded[i] - exact[i], i))
    else:
        order = sorted(range(len(exact)), key=lambda i: (exact[i] - rounded[i], i))

    for n in range(abs(steps)):
        rounded[order[n % len(order)]] += step
    return rounded
