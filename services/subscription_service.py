"""
services/subscription_service.py
--------------------------------
Business logic for tracking subscriptions.
Each public method does one load → (mutate → save) cycle against the
repository and returns a ready-to-send text report.
"""

from datetime import date
from typing import Optional

from config import DEFAULT_RENEWAL_WINDOW_DAYS
from models.subscription import BillingCycle, Category, Subscription, normalize_name
from repositories.subscription_repo import SubscriptionRepository
from services import aggregator
from services.categorizer import resolve_category
from utils.formatting import capitalize, format_amount, format_money
from utils.logger import get_logger

logger = get_logger(__name__)


class SubscriptionService:
    """
    Handles all business logic related to subscriptions.

    Workflow:
        1. Load the full collection from the repository.
        2. Filter / mutate it.
        3. Save it back (add, cancel, delete only).
        4. Return a user-friendly response.
    """

    def __init__(self, repo: Optional[SubscriptionRepository] = None):
        self.repo = repo or SubscriptionRepository()

    # ── CREATE ────────────────────────────────────────────

    def add_subscription(
        self,
        name: str,
        amount: float,
        cycle: Optional[str] = None,
        category: Optional[str] = None,
    ) -> str:
        """
        Add a new subscription.

        Args:
            name: Subscription name, e.g. "Netflix".
            amount: Charge per billing cycle.
            cycle: weekly / monthly / quarterly / yearly (default monthly).
            category: Explicit category; ignored unless it names a known one.

        Returns:
            Confirmation, duplicate warning or validation message.
        """
        name = name.strip()
        if not name:
            return "⚠️ **Subscription name is missing.**"
        if amount < 0:
            return f"⚠️ **Amount must not be negative:** {format_amount(amount)}"

        subs = self.repo.load()
        existing = self._find_active(subs, name)
        if existing:
            return (
                f"⚠️ **Subscription already exists!**\n\n"
                f"{existing.name} - {format_amount(existing.amount)}{existing.currency}"
                f"/{existing.billing_cycle.value}\n\n"
                f"*Use \"Update subscription: [Name]\" to modify.*"
            )

        billing_cycle = BillingCycle.parse(cycle)
        today = date.today()
        sub = Subscription(
            name=name,
            amount=float(amount),
            billing_cycle=billing_cycle,
            category=resolve_category(category, name),
            next_billing=billing_cycle.next_date(today),
            date_added=today,
        )
        subs[sub.id] = sub
        self.repo.save(subs)
        logger.info(f"Added subscription '{sub.name}' #{sub.id}")

        return (
            f"✅ **Subscription added!**\n\n"
            f"{sub.category.icon} **{sub.name}**\n"
            f"💰 {format_amount(sub.amount)}{sub.currency}/{sub.billing_cycle.value}\n"
            f"📅 Next billing: {sub.next_billing.isoformat()}\n"
            f"📂 Category: {sub.category.value}"
        )

    # ── READ ──────────────────────────────────────────────

    def list_subscriptions(self) -> str:
        """Active subscriptions grouped by category."""
        active = [s for s in self.repo.load().values() if s.is_active]
        if not active:
            return (
                "📋 **No subscriptions yet**\n\n"
                "*Use \"Add subscription: [Name] [Amount] [Cycle]\" to get started.*"
            )

        by_category: dict[Category, list[Subscription]] = {}
        for s in active:
            by_category.setdefault(s.category, []).append(s)

        lines = [f"📋 **Your Subscriptions ({len(active)})**\n"]
        for category, items in by_category.items():
            lines.append(f"{category.icon} **{capitalize(category.value)}**")
            for s in items:
                lines.append(
                    f"   • {s.name} - {format_amount(s.amount)}{s.currency}/{s.billing_cycle.value}"
                )
            lines.append("")
        return "\n".join(lines)

    def subscription_costs(self) -> str:
        """Monthly and yearly cost with a per-category bar chart."""
        breakdown = aggregator.cost_breakdown(self.repo.load().values())
        if breakdown.monthly_total <= 0:
            return (
                "💰 **No subscriptions to calculate**\n\n"
                "*Add some subscriptions first.*"
            )

        lines = [
            "💰 **Subscription Costs**\n",
            f"📅 **Monthly:** {format_money(breakdown.monthly_total)}",
            f"📆 **Yearly:** {format_money(breakdown.yearly_total)}\n",
            "**By Category (Monthly):**",
        ]
        for category, subtotal in breakdown.by_category:
            bar = "█" * aggregator.bar_length(subtotal, breakdown.monthly_total)
            lines.append(f"{category.icon} {category.value}: {format_money(subtotal)} {bar}")
        return "\n".join(lines)

    def upcoming_renewals(self, days: int = DEFAULT_RENEWAL_WINDOW_DAYS) -> str:
        """Renewals due between today and ``days`` days from now, inclusive."""
        upcoming = aggregator.upcoming_renewals(self.repo.load().values(), date.today(), days)
        if not upcoming:
            return (
                f"🔔 **No renewals in the next {days} days**\n\n"
                f"*All clear! No upcoming charges.*"
            )

        lines = [f"🔔 **Upcoming Renewals ({days} days)**\n"]
        for s, days_until in upcoming:
            lines.append(f"📅 **{s.name}** - {format_amount(s.amount)}{s.currency}")
            lines.append(f"   Due: {s.next_billing.isoformat()} ({days_until} days)\n")

        total_due = sum(s.amount for s, _ in upcoming)
        lines.append(f"💰 **Total Due:** {format_money(total_due)}")
        return "\n".join(lines)

    def subscription_stats(self) -> str:
        """Counts, spending and top categories, cancelled records included in totals."""
        subs = self.repo.load()
        if not subs:
            return (
                "📊 **No statistics available**\n\n"
                "*Add some subscriptions first.*"
            )

        stats = aggregator.subscription_stats(subs.values())
        lines = [
            "📊 **Subscription Statistics**\n",
            f"📈 **Total Subscriptions:** {stats.total}",
            f"✅ **Active:** {stats.active}",
            f"❌ **Cancelled:** {stats.cancelled}\n",
            f"💰 **Monthly Spending:** {format_money(stats.monthly_total)}",
            f"📊 **Avg per Subscription:** {format_money(stats.average_monthly)}\n",
            "**Top Categories:**",
        ]
        for i, (category, amount) in enumerate(stats.top_categories, start=1):
            lines.append(f"{i}. {category.icon} {category.value}: {format_money(amount)}")
        return "\n".join(lines)

    # ── UPDATE ────────────────────────────────────────────

    def cancel_subscription(self, name: str) -> str:
        """Soft-cancel the active subscription called ``name``."""
        subs = self.repo.load()
        sub = self._find_active(subs, name)
        if not sub:
            if self._find_any(subs, name):
                return f"ℹ️ **Subscription already cancelled:** {name.strip()}"
            return f"⚠️ **Subscription not found:** {name.strip()}"

        sub.cancel()
        self.repo.save(subs)
        logger.info(f"Cancelled subscription '{sub.name}' #{sub.id}")

        return (
            f"🗑️ **Subscription cancelled**\n\n"
            f"{sub.name} will be removed from active subscriptions."
        )

    # ── DELETE ────────────────────────────────────────────

    def delete_subscription(self, name: str) -> str:
        """Permanently remove the subscription called ``name``."""
        subs = self.repo.load()
        sub = self._find_active(subs, name) or self._find_any(subs, name)
        if not sub:
            return f"⚠️ **Subscription not found:** {name.strip()}"

        del subs[sub.id]
        self.repo.save(subs)
        logger.info(f"Deleted subscription '{sub.name}' #{sub.id}")

        return (
            f"🗑️ **Subscription deleted**\n\n"
            f"{sub.name} has been permanently removed."
        )

    # ── HELPERS ───────────────────────────────────────────

    @staticmethod
    def _find_active(subs: dict[str, Subscription], name: str) -> Optional[Subscription]:
        """First non-cancelled subscription whose normalized name matches."""
        key = normalize_name(name)
        return next(
            (s for s in subs.values() if s.is_active and s.normalized_name == key),
            None,
        )

    @staticmethod
    def _find_any(subs: dict[str, Subscription], name: str) -> Optional[Subscription]:
        key = normalize_name(name)
        return next((s for s in subs.values() if s.normalized_name == key), None)
