"""
services/aggregator.py
----------------------
Cost aggregation over subscriptions.
Pure functions: they take subscriptions in and return numbers out,
formatting is left to SubscriptionService.
"""

import math
from dataclasses import dataclass, field
from datetime import date, timedelta
from typing import Iterable, Union

from config import BAR_WIDTH, TOP_CATEGORIES_LIMIT
from models.subscription import BillingCycle, Category, Subscription


@dataclass
class CostBreakdown:
    """Monthly-normalized totals for the active subscriptions."""
    monthly_total: float = 0.0
    by_category: list[tuple[Category, float]] = field(default_factory=list)

    @property
    def yearly_total(self) -> float:
        return self.monthly_total * 12


@dataclass
class SubscriptionStats:
    """Counts and spending figures for the stats report."""
    total: int
    active: int
    cancelled: int
    monthly_total: float
    average_monthly: float
    top_categories: list[tuple[Category, float]]


def monthly_equivalent(amount: float, cycle: Union[BillingCycle, str, None]) -> float:
    """
    Convert a per-cycle charge into its monthly rate.

    Examples:
        yearly 120 -> 10.0, weekly 12 -> 52.0, quarterly 30 -> 10.0.
        Unknown cycles are treated as monthly.
    """
    if not isinstance(cycle, BillingCycle):
        cycle = BillingCycle.parse(cycle)
    return amount / (cycle.occurrences_per_year / 12)


def _active(subs: Iterable[Subscription]) -> list[Subscription]:
    return [s for s in subs if s.is_active]


def _sum_by_category(pairs: Iterable[tuple[Category, float]]) -> list[tuple[Category, float]]:
    """Group (category, value) pairs and sort the sums descending."""
    totals: dict[Category, float] = {}
    for category, value in pairs:
        totals[category] = totals.get(category, 0.0) + value
    return sorted(totals.items(), key=lambda x: -x[1])


def cost_breakdown(subs: Iterable[Subscription]) -> CostBreakdown:
    """Monthly total and per-category monthly subtotals over active subscriptions."""
    active = _active(subs)
    monthly = [(s.category, monthly_equivalent(s.amount, s.billing_cycle)) for s in active]
    return CostBreakdown(
        monthly_total=sum(value for _, value in monthly),
        by_category=_sum_by_category(monthly),
    )


def bar_length(subtotal: float, total: float, width: int = BAR_WIDTH) -> int:
    """Number of bar characters for ``subtotal`` as a share of ``total``."""
    if total <= 0:
        return 0
    return math.ceil(subtotal / total * width)


def subscription_stats(subs: Iterable[Subscription]) -> SubscriptionStats:
    """Counts, monthly spending and top categories by raw (per-cycle) amount."""
    subs = list(subs)
    active = _active(subs)
    monthly_total = sum(monthly_equivalent(s.amount, s.billing_cycle) for s in active)
    top = _sum_by_category((s.category, s.amount) for s in active)

    return SubscriptionStats(
        total=len(subs),
        active=len(active),
        cancelled=len(subs) - len(active),
        monthly_total=monthly_total,
        average_monthly=monthly_total / len(active) if active else 0.0,
        top_categories=top[:TOP_CATEGORIES_LIMIT],
    )


def upcoming_renewals(
    subs: Iterable[Subscription], today: date, days: int
) -> list[tuple[Subscription, int]]:
    """
    Active subscriptions billed within ``days`` days of ``today``.

    Both ends of the window are inclusive, so ``days=0`` returns only the
    ones due today. Past due dates are not rolled forward and simply fall
    out of the window.

    Returns:
        (subscription, days_until) pairs ordered by next billing date.
    """
    end = today + timedelta(days=days)
    due = sorted(
        (s for s in _active(subs) if today <= s.next_billing <= end),
        key=lambda s: s.next_billing,
    )
    return [(s, (s.next_billing - today).days) for s in due]
