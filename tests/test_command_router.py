"""Tests for the free-text command router and the public entry point."""
from unittest.mock import MagicMock

import pytest

from handlers.command_router import (
    ADD_USAGE,
    CANCEL_USAGE,
    DELETE_USAGE,
    ERROR_TEXT,
    HELP_TEXT,
    CommandRouter,
    handle_message,
    parse_add,
    parse_cancel,
    parse_days,
    parse_delete,
)
from models.subscription import Category


# ============================================================================
# Parsers
# ============================================================================

@pytest.mark.unit
class TestParseAdd:

    def test_full_command(self):
        params = parse_add("Add subscription: Netflix 15.99€ monthly")

        assert params == {
            "name": "Netflix",
            "amount": 15.99,
            "cycle": "monthly",
            "category": "monthly",
        }

    def test_trailing_category(self):
        params = parse_add("Add subscription: AWS 45€ monthly cloud")

        assert params["name"] == "AWS"
        assert params["amount"] == 45.0
        assert params["category"] == "cloud"

    def test_category_keyword(self):
        params = parse_add("add subscription Team Drive 12 yearly business category")

        assert params["name"] == "Team Drive"
        assert params["cycle"] == "yearly"
        assert params["category"] == "business"

    def test_subscribe_to(self):
        params = parse_add("Subscribe to Spotify 9.99 EUR quarterly")

        assert params["name"] == "Spotify"
        assert params["amount"] == 9.99
        assert params["cycle"] == "quarterly"

    def test_cycle_found_anywhere(self):
        params = parse_add("weekly: add subscription Meal Box 50")

        assert params["name"] == "Meal Box"
        assert params["cycle"] == "weekly"

    def test_no_amount_returns_usage(self):
        assert parse_add("add subscription Netflix") == ADD_USAGE


@pytest.mark.unit
class TestParseTargets:

    def test_cancel(self):
        assert parse_cancel("Cancel subscription: AWS") == {"name": "AWS"}

    def test_cancel_my_subscription(self):
        assert parse_cancel("cancel my subscription to Netflix") == {"name": "Netflix"}

    def test_cancel_keeps_leading_to_in_name(self):
        assert parse_cancel("Cancel subscription: To Do Pro") == {"name": "To Do Pro"}

    def test_cancel_empty(self):
        assert parse_cancel("cancel subscription") == CANCEL_USAGE

    def test_delete(self):
        assert parse_delete("Remove subscription Disney+") == {"name": "Disney+"}

    def test_delete_empty(self):
        assert parse_delete("delete subscription:  ") == DELETE_USAGE


@pytest.mark.unit
class TestParseDays:

    def test_default(self):
        assert parse_days("upcoming renewals") == {"days": 7}

    def test_explicit(self):
        assert parse_days("renewals in 30 days") == {"days": 30}

    def test_singular(self):
        assert parse_days("upcoming in 1 day") == {"days": 1}


# ============================================================================
# Intent classification
# ============================================================================

@pytest.mark.unit
class TestIntentMatching:

    @pytest.mark.parametrize("message, intent", [
        ("Add subscription: Netflix 15.99", "add"),
        ("new subscription Hulu 8", "add"),
        ("Show my subscriptions", "list"),
        ("list subscriptions please", "list"),
        ("How much am I paying?", "costs"),
        ("Subscription costs", "costs"),
        ("What's renewing soon?", "upcoming"),
        ("next billing dates", "upcoming"),
        ("Cancel subscription: AWS", "cancel"),
        ("Delete subscription: AWS", "delete"),
        ("remove subscription Hulu", "delete"),
        ("Subscription stats", "stats"),
        ("subscription overview", "stats"),
    ])
    def test_intent(self, message, intent):
        router = CommandRouter(MagicMock())
        assert router.match(message).intent == intent

    def test_priority_order(self):
        """✅ 'add subscription' is checked before 'my subscriptions'."""
        router = CommandRouter(MagicMock())
        assert router.match("add subscription to my subscriptions 5").intent == "add"

    def test_unknown_is_help(self):
        router = CommandRouter(MagicMock())
        assert router.match("hello there") is None
        assert router.route("hello there") == HELP_TEXT


# ============================================================================
# End to end through the router
# ============================================================================

@pytest.mark.unit
@pytest.mark.asyncio
class TestRouterFlows:

    async def test_add_then_list(self, router):
        reply = await router.handle("Add subscription: Netflix 15.99€ monthly")
        assert "Subscription added!" in reply
        assert "Category: entertainment" in reply

        listing = await router.handle("Show my subscriptions")
        assert "🎬 **Entertainment**" in listing
        assert "Netflix - 15.99€/monthly" in listing

    async def test_costs_example(self, router):
        await router.handle("Add subscription: Netflix 15.99€ monthly")

        reply = await router.handle("Subscription costs")

        assert "**Monthly:** €15.99" in reply
        assert "🎬 entertainment: €15.99 ██████████" in reply

    async def test_add_cancel_stats(self, router, repo):
        await router.handle("Add subscription: AWS 45€ monthly cloud")
        reply = await router.handle("Cancel subscription: AWS")
        assert "Subscription cancelled" in reply

        assert "AWS" not in await router.handle("Show my subscriptions")
        stats = await router.handle("Subscription stats")
        assert "**Cancelled:** 1" in stats
        (sub,) = repo.load().values()
        assert sub.category is Category.CLOUD

    async def test_duplicate_via_router(self, router, repo):
        await router.handle("Add subscription: netflix 15.99")
        reply = await router.handle("Add subscription: Netflix  15.99")

        assert "already exists" in reply
        assert len(repo.load()) == 1

    async def test_add_usage(self, router, repo):
        reply = await router.handle("add subscription please")

        assert reply == ADD_USAGE
        assert repo.load() == {}

    async def test_cancel_name_starting_with_to(self, router, repo):
        """✅ A leading 'To' after 'subscription:' stays part of the name."""
        await router.handle("Add subscription: To Do Pro 4.99€ monthly")

        reply = await router.handle("Cancel subscription: To Do Pro")

        assert "Subscription cancelled" in reply
        (sub,) = repo.load().values()
        assert sub.name == "To Do Pro"
        assert sub.cancelled is True

    async def test_cancel_usage(self, router):
        assert await router.handle("Cancel subscription") == CANCEL_USAGE

    async def test_delete_unknown(self, router):
        reply = await router.handle("Delete subscription: Ghost")
        assert "not found:** Ghost" in reply

    async def test_upcoming_window(self, router, store, make_subscription):
        store(make_subscription("Gym", 30, due_in_days=20))

        assert "No renewals in the next 7 days" in await router.handle("upcoming renewals")
        assert "Gym" in await router.handle("upcoming renewals in 30 days")

    async def test_handler_failure_becomes_error_text(self):
        service = MagicMock()
        service.subscription_stats.side_effect = OSError("disk full")
        router = CommandRouter(service)

        assert await router.handle("subscription stats") == ERROR_TEXT


@pytest.mark.unit
@pytest.mark.asyncio
class TestHandleMessage:

    async def test_entry_point_uses_given_store(self, repo):
        reply = await handle_message("Add subscription: Spotify 9.99€ monthly", repo=repo)

        assert "Subscription added!" in reply
        (sub,) = repo.load().values()
        assert sub.name == "Spotify"

    async def test_help(self, repo):
        assert await handle_message("what can you do?", repo=repo) == HELP_TEXT

    async def test_store_is_keyword_only(self, repo):
        with pytest.raises(TypeError):
            await handle_message("subscription stats", repo)
