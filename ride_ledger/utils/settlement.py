"""
Settlement Reduction

Turns per-expense debts ("from_user owes to_user amount") into what people
actually have to pay each other. Two modes are supported:

1. Grouped sum (sum_balances): add up the debts per direction, without
   cancelling opposite directions. A->B 30 and B->A 10 stay two rows.

2. Pairwise netting (reduce_balances):
   - compute each participant's net position (owed to them minus owed by them)
   - for every pair of participants (in sorted order) whose nets have opposite
     signs, the negative one pays the positive one min(|net|, |net|)
   A->B 30 and B->A 10 become a single row A->B 20: A owes 30 and is owed 10.

Netting is exact for two participants. With three or more it is a pairwise
heuristic: a participant's net may be matched against several counterparts,
so the rows are not a minimum-transaction settlement.
"""

import logging
from decimal import Decimal
from itertools import combinations
from typing import Dict, Iterable, List, Tuple

from ride_ledger.schemas.balance_schema import GroupedBalance, Settlement
from ride_ledger.utils.exceptions import ValidationError
from ride_ledger.utils.money import round_decimal, to_decimal

logger = logging.getLogger(__name__)


def _checked_amount(balance) -> Decimal:
    amount = to_decimal(balance.amount)
    if not amount.is_finite():
        raise ValidationError(f"Balance amount is not a finite number: {balance.amount}")
    if amount < 0:
        raise ValidationError(f"Balance amount must not be negative: {balance.amount}")
    return amount


def net_positions(balances: Iterable) -> Dict[str, Decimal]:
    """
    Net position per participant.

    Positive: the participant is owed money overall.
    Negative: the participant owes money overall.

    Raises:
        ValidationError: If an amount is negative or not finite
    """
    nets: Dict[str, Decimal] = {}
    for balance in balances:
        amount = _checked_amount(balance)
        nets[balance.to_user] = nets.get(balance.to_user, Decimal('0')) + amount
        nets[balance.from_user] = nets.get(balance.from_user, Decimal('0')) - amount
    return nets


def reduce_balances(balances: Iterable) -> List[Settlement]:
    """
    Net opposing debts into one-directional settlements.

    Args:
        balances: Objects with from_user, to_user and amount attributes

    Returns:
        Settlements ordered by participant pair

    Raises:
        ValidationError: If an amount is negative or not finite

    Example:
        >>> reduce_balances([debt("A", "B", 30), debt("B", "A", 10)])
        [Settlement(from_user='A', to_user='B', amount=Decimal('20.00'))]
    """
    nets = net_positions(balances)

    settlements = []
    for p, q in combinations(sorted(nets), 2):
        net_p, net_q = nets[p], nets[q]
        if net_p == 0 or net_q == 0 or (net_p > 0) == (net_q > 0):
            continue

        debtor, creditor = (p, q) if net_p < 0 else (q, p)
        amount = round_decimal(min(abs(net_p), abs(net_q)))
        if amount > 0:
            settlements.append(Settlement(from_user=debtor, to_user=creditor, amount=amount))

    if len(nets) > 2:
        logger.debug(f"Pairwise netting over {len(nets)} participants is approximate")
    return settlements


def sum_balances(balances: Iterable) -> List[GroupedBalance]:
    """
    Sum debts per (from_user, to_user) direction without netting.

    Raises:
        ValidationError: If an amount is negative or not finite

    Example:
        >>> sum_balances([debt("A", "B", 30), debt("B", "A", 10)])
        [GroupedBalance('A', 'B', Decimal('30.00')), GroupedBalance('B', 'A', Decimal('10.00'))]
    """
    totals: Dict[Tuple[str, str], Decimal] = {}
    for balance in balances:
        key = (balance.from_user, balance.to_user)
        totals[key] = totals.get(key, Decimal('0')) + _checked_amount(balance)

    return [
        GroupedBalance(from_user=from_user, to_user=to_user, total_amount=round_decimal(total))
        for (from_user, to_user), total in sorted(totals.items())
    ]
