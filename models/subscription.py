"""
models/subscription.py
----------------------
Domain model for tracked subscriptions.
"""

import uuid
from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Optional

from dateutil.relativedelta import relativedelta

from config import CURRENCY_SYMBOL


class BillingCycle(str, Enum):
    """How often a subscription is charged."""

    WEEKLY = "weekly"
    MONTHLY = "monthly"
    QUARTERLY = "quarterly"
    YEARLY = "yearly"

    def __str__(self) -> str:
        return self.value

    @property
    def occurrences_per_year(self) -> int:
        return _OCCURRENCES[self]

    @classmethod
    def parse(cls, value: Optional[str]) -> "BillingCycle":
        """Map free text to a cycle; missing or unknown values mean monthly."""
        if not value:
            return cls.MONTHLY
        try:
            return cls(value.strip().lower())
        except ValueError:
            return cls.MONTHLY

    def next_date(self, start: date) -> date:
        """The first charge date one cycle after ``start``."""
        if self is BillingCycle.WEEKLY:
            return start + relativedelta(weeks=1)
        elif self is BillingCycle.QUARTERLY:
            return start + relativedelta(months=3)
        elif self is BillingCycle.YEARLY:
            return start + relativedelta(years=1)
        return start + relativedelta(months=1)


_OCCURRENCES = {
    BillingCycle.WEEKLY: 52,
    BillingCycle.MONTHLY: 12,
    BillingCycle.QUARTERLY: 4,
    BillingCycle.YEARLY: 1,
}


class Category(str, Enum):
    """Fixed set of subscription categories, each with a display icon."""

    ENTERTAINMENT = "entertainment"
    PRODUCTIVITY = "productivity"
    CLOUD = "cloud"
    EDUCATION = "education"
    BUSINESS = "business"
    HOME = "home"
    HEALTH = "health"
    NEWS = "news"
    TRANSPORT = "transport"
    FOOD = "food"
    OTHER = "other"

    def __str__(self) -> str:
        return self.value

    @property
    def icon(self) -> str:
        return _ICONS[self]

    @classmethod
    def lookup(cls, value: Optional[str]) -> Optional["Category"]:
        """Return the category named by ``value`` or None if it names none."""
        if not value:
            return None
        try:
            return cls(value.strip().lower())
        except ValueError:
            return None


_ICONS = {
    Category.ENTERTAINMENT: "🎬",
    Category.PRODUCTIVITY: "🛠️",
    Category.CLOUD: "☁️",
    Category.EDUCATION: "📚",
    Category.BUSINESS: "💼",
    Category.HOME: "🏠",
    Category.HEALTH: "❤️",
    Category.NEWS: "📰",
    Category.TRANSPORT: "🚗",
    Category.FOOD: "🍔",
    Category.OTHER: "📦",
}


def normalize_name(name: str) -> str:
    """Key used for duplicate detection and lookups by name."""
    return name.strip().lower()


def generate_id() -> str:
    return uuid.uuid4().hex


@dataclass
class Subscription:
    """
    Represents a single tracked subscription.

    Attributes:
        name: Friendly name (e.g., 'Netflix', 'AWS').
        amount: Charge per billing cycle.
        billing_cycle: How often the amount is charged.
        category: Category used for grouping in reports.
        next_billing: Date of the next charge. Set once at creation.
        id: Opaque identifier generated at creation.
        currency: Display symbol, always the configured one.
        auto_renew: Always True for now.
        cancelled: Soft-cancel flag; cancelled records stay in storage.
        date_added: Creation date.
        date_cancelled: Date the subscription was cancelled, if it was.
        url: Reserved, not populated yet.
        notes: Reserved, not populated yet.
    """
    name: str
    amount: float
    billing_cycle: BillingCycle
    category: Category
    next_billing: date
    id: str = field(default_factory=generate_id)
    currency: str = CURRENCY_SYMBOL
    auto_renew: bool = True
    cancelled: bool = False
    date_added: date = field(default_factory=date.today)
    date_cancelled: Optional[date] = None
    url: Optional[str] = None
    notes: Optional[str] = None

    @property
    def normalized_name(self) -> str:
        return normalize_name(self.name)

    @property
    def is_active(self) -> bool:
        return not self.cancelled

    def cancel(self, on: Optional[date] = None) -> None:
        """Mark the subscription as cancelled (soft delete)."""
        self.cancelled = True
        self.date_cancelled = on or date.today()

    def __str__(self) -> str:
        status = "✅" if self.is_active else "❌"
        return (
            f"{status} {self.name}: {self.amount:.2f}{self.currency} "
            f"({self.billing_cycle.value}) - Next: {self.next_billing}"
        )
