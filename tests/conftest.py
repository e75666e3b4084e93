"""Shared pytest fixtures for the subscription tracker tests."""
from datetime import date, timedelta

import pytest

from handlers.command_router import CommandRouter
from models.subscription import BillingCycle, Category, Subscription
from repositories.subscription_repo import SubscriptionRepository
from services.subscription_service import SubscriptionService


@pytest.fixture
def data_file(tmp_path):
    """Path of a not-yet-existing store file inside a missing directory."""
    return tmp_path / "data" / "subscriptions.json"


@pytest.fixture
def repo(data_file):
    return SubscriptionRepository(str(data_file))


@pytest.fixture
def service(repo):
    return SubscriptionService(repo)


@pytest.fixture
def router(service):
    return CommandRouter(service)


@pytest.fixture
def make_subscription():
    """Factory for Subscription objects with sensible defaults."""
    def _make(name="Netflix", amount=15.99, cycle=BillingCycle.MONTHLY,
              category=Category.ENTERTAINMENT, due_in_days=30, cancelled=False):
        return Subscription(
            name=name,
            amount=amount,
            billing_cycle=cycle,
            category=category,
            next_billing=date.today() + timedelta(days=due_in_days),
            cancelled=cancelled,
        )
    return _make


@pytest.fixture
def store(repo):
    """Write the given subscriptions straight into the repository."""
    def _store(*subs):
        repo.save({s.id: s for s in subs})
        return subs
    return _store
