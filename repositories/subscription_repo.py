"""
repositories/subscription_repo.py
----------------------------------
Data access layer for subscriptions.
The whole collection lives in a single JSON file:

    {"subscriptions": {"<id>": {...record...}, ...}}

Every call reads or rewrites the full file. There is no locking: two
processes saving at the same time may lose one of the updates.
"""

import json
import os
import tempfile
from datetime import date
from typing import Optional

from config import CURRENCY_SYMBOL, SUBSCRIPTIONS_FILE
from models.subscription import BillingCycle, Category, Subscription
from utils.logger import get_logger

logger = get_logger(__name__)


class SubscriptionRepository:
    """Loads and saves the subscription collection as a JSON document."""

    def __init__(self, path: Optional[str] = None):
        self.path = path or SUBSCRIPTIONS_FILE

    # ── READ ──────────────────────────────────────────────

    def load(self) -> dict[str, Subscription]:
        """
        Read the persisted collection.

        Returns:
            Mapping of id -> Subscription. Empty when the file is missing
            or cannot be parsed; read problems are logged, never raised.
        """
        if not os.path.exists(self.path):
            return {}

        try:
            with open(self.path, "r", encoding="utf-8") as f:
                raw = json.load(f)
            records = raw["subscriptions"]
            return {
                sub_id: self._record_to_subscription(sub_id, record)
                for sub_id, record in records.items()
            }
        except (OSError, ValueError, KeyError, TypeError, AttributeError) as e:
            logger.warning(f"Could not read {self.path}, starting empty: {e}")
            return {}

    # ── WRITE ─────────────────────────────────────────────

    def save(self, subscriptions: dict[str, Subscription]) -> None:
        """
        Replace the persisted collection with ``subscriptions``.

        The document is written to a temporary file next to the target
        and then moved over it, so readers never see a half-written file.
        """
        directory = os.path.dirname(os.path.abspath(self.path))
        os.makedirs(directory, exist_ok=True)

        payload = {
            "subscriptions": {
                sub_id: self._subscription_to_record(sub)
                for sub_id, sub in subscriptions.items()
            }
        }

        fd, tmp_path = tempfile.mkstemp(dir=directory, prefix=".subscriptions-", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(payload, f, indent=2, ensure_ascii=False)
            os.replace(tmp_path, self.path)
        except Exception as e:
            logger.error(f"Failed to save subscriptions to {self.path}: {e}")
            if os.path.exists(tmp_path):
                os.remove(tmp_path)
            raise

        logger.debug(f"Saved {len(subscriptions)} subscriptions to {self.path}")

    # ── HELPERS ───────────────────────────────────────────

    @staticmethod
    def _subscription_to_record(sub: Subscription) -> dict:
        """Convert a Subscription to its on-disk JSON shape."""
        record = {
            "id": sub.id,
            "name": sub.name,
            "amount": sub.amount,
            "currency": sub.currency,
            "billingCycle": sub.billing_cycle.value,
            "category": sub.category.value,
            "nextBilling": sub.next_billing.isoformat(),
            "autoRenew": sub.auto_renew,
            "cancelled": sub.cancelled,
            "dateAdded": sub.date_added.isoformat(),
        }
        if sub.date_cancelled:
            record["dateCancelled"] = sub.date_cancelled.isoformat()
        if sub.url:
            record["url"] = sub.url
        if sub.notes:
            record["notes"] = sub.notes
        return record

    @staticmethod
    def _record_to_subscription(sub_id: str, record: dict) -> Subscription:
        """Convert an on-disk JSON record to a Subscription domain object."""
        cancelled_on = record.get("dateCancelled")
        return Subscription(
            id=sub_id,
            name=record["name"],
            amount=float(record["amount"]),
            currency=record.get("currency", CURRENCY_SYMBOL),
            billing_cycle=BillingCycle.parse(record.get("billingCycle")),
            category=Category.lookup(record.get("category")) or Category.OTHER,
            next_billing=date.fromisoformat(record["nextBilling"]),
            auto_renew=bool(record.get("autoRenew", True)),
            cancelled=bool(record.get("cancelled", False)),
            date_added=date.fromisoformat(record["dateAdded"]),
            date_cancelled=date.fromisoformat(cancelled_on) if cancelled_on else None,
            url=record.get("url"),
            notes=record.get("notes"),
        )
