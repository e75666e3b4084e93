"""
handlers/command_router.py
--------------------------
Turns a free-text message into a subscription operation.

Each message is matched against an ordered list of rules. A rule has
trigger keywords, a parser that pulls parameters out of the message
(or returns a usage text), and the service method to call. The first
rule with a keyword contained in the lower-cased message wins; when
none matches, the help text is returned. No state is kept between calls.
"""

import re
from dataclasses import dataclass
from typing import Callable, Optional, Union

from config import DEFAULT_RENEWAL_WINDOW_DAYS
from repositories.subscription_repo import SubscriptionRepository
from services.subscription_service import SubscriptionService
from utils.logger import get_logger

logger = get_logger(__name__)

# A parser returns keyword arguments for the handler, or a usage text.
ParseResult = Union[dict, str]

HELP_TEXT = (
    "📊 **Subscription Tracker Commands**\n\n"
    "• \"Add subscription: [Name] [Amount] [Cycle]\"\n"
    "• \"Show my subscriptions\"\n"
    "• \"Subscription costs\"\n"
    "• \"Upcoming renewals\"\n"
    "• \"Subscription stats\"\n"
    "• \"Cancel subscription: [Name]\"\n"
    "• \"Delete subscription: [Name]\""
)

ADD_USAGE = (
    "📝 **Add Subscription**\n\n"
    "Use: \"Add subscription: [Name] [Amount] [Cycle]\"\n\n"
    "Examples:\n"
    "• \"Add subscription: Netflix 15.99€ monthly\"\n"
    "• \"Add subscription: Spotify 9.99€ monthly entertainment\"\n"
    "• \"Add subscription: AWS 45€ monthly cloud\""
)

CANCEL_USAGE = "🗑️ **Cancel Subscription**\n\nUse: \"Cancel subscription: [Name]\""
DELETE_USAGE = "🗑️ **Delete Subscription**\n\nUse: \"Delete subscription: [Name]\""

ERROR_TEXT = "❌ Something went wrong while handling that command. Please try again."

# ── Patterns ──────────────────────────────────────────────

_SUBSCRIPTION_WORD = r"(?:subscription\s*:?\s*)?"

_ADD_PATTERNS = [
    re.compile(
        r"(?:add|new|subscribe to)\s+" + _SUBSCRIPTION_WORD +
        r"(.+?)\s+(\d+\.?\d*)\s*(€|\$|EUR)?\s*(weekly|monthly|quarterly|yearly)?",
        re.IGNORECASE,
    ),
    re.compile(
        r"(?:add|new)\s+" + _SUBSCRIPTION_WORD + r"(.+?)\s+(\d+\.?\d*)",
        re.IGNORECASE,
    ),
]
_CYCLE_RE = re.compile(r"(weekly|monthly|quarterly|yearly)", re.IGNORECASE)
_CATEGORY_RE = re.compile(r"(\w+)(?:\s*$|\s+category)", re.IGNORECASE)
_DAYS_RE = re.compile(r"in\s+(\d+)\s+days?", re.IGNORECASE)
_CANCEL_PREFIX_RE = re.compile(
    r"(?:cancel|cancellation)\s+"
    r"(?:my\s+subscription\s*:?\s*(?:to\s+)?|(?:my\s+)?" + _SUBSCRIPTION_WORD + r")",
    re.IGNORECASE,
)
_DELETE_PREFIX_RE = re.compile(
    r"(?:delete|remove)\s+(?:my\s+)?" + _SUBSCRIPTION_WORD,
    re.IGNORECASE,
)


# ── Parsers ───────────────────────────────────────────────

def parse_add(message: str) -> ParseResult:
    """
    Extract name, amount, cycle and category from an add command.

    The cycle and the category token are searched in the whole message,
    not only next to the matched name and amount. The category token is
    the last word of the message or the word before "category"; it is
    only honoured when it names a known category.
    """
    for pattern in _ADD_PATTERNS:
        match = pattern.search(message)
        if not match:
            continue
        cycle_match = _CYCLE_RE.search(message)
        category_match = _CATEGORY_RE.search(message)
        return {
            "name": match.group(1).strip(),
            "amount": float(match.group(2)),
            "cycle": cycle_match.group(1) if cycle_match else None,
            "category": category_match.group(1) if category_match else None,
        }
    return ADD_USAGE


def _target_parser(prefix: re.Pattern, usage: str) -> Callable[[str], ParseResult]:
    def parse(message: str) -> ParseResult:
        name = prefix.sub("", message, count=1).strip()
        return {"name": name} if name else usage
    return parse


parse_cancel = _target_parser(_CANCEL_PREFIX_RE, CANCEL_USAGE)
parse_delete = _target_parser(_DELETE_PREFIX_RE, DELETE_USAGE)


def parse_days(message: str) -> ParseResult:
    """Look-ahead window from "in N days", default 7."""
    match = _DAYS_RE.search(message)
    return {"days": int(match.group(1)) if match else DEFAULT_RENEWAL_WINDOW_DAYS}


def _no_args(message: str) -> ParseResult:
    return {}


# ── Router ────────────────────────────────────────────────

@dataclass(frozen=True)
class Rule:
    """One intent: trigger keywords, parameter parser, operation."""
    intent: str
    keywords: tuple[str, ...]
    parse: Callable[[str], ParseResult]
    handler: Callable[..., str]

    def matches(self, lowered: str) -> bool:
        return any(kw in lowered for kw in self.keywords)


class CommandRouter:
    """Dispatches free-text commands to a SubscriptionService."""

    def __init__(self, service: SubscriptionService):
        self.service = service
        self.rules: list[Rule] = [
            Rule("add", ("add subscription", "new subscription", "subscribe to"),
                 parse_add, service.add_subscription),
            Rule("list", ("show my subscriptions", "list subscriptions",
                          "all subscriptions", "my subscriptions"),
                 _no_args, service.list_subscriptions),
            Rule("costs", ("subscription costs", "how much", "spending", "total cost"),
                 _no_args, service.subscription_costs),
            Rule("upcoming", ("upcoming", "renewals", "renewing", "next billing"),
                 parse_days, service.upcoming_renewals),
            Rule("cancel", ("cancel subscription", "cancel my subscription"),
                 parse_cancel, service.cancel_subscription),
            Rule("delete", ("delete subscription", "remove subscription"),
                 parse_delete, service.delete_subscription),
            Rule("stats", ("subscription stats", "subscription statistics",
                           "subscription overview"),
                 _no_args, service.subscription_stats),
        ]

    def match(self, message: str) -> Optional[Rule]:
        """First rule triggered by ``message``, or None for help."""
        lowered = message.lower()
        return next((rule for rule in self.rules if rule.matches(lowered)), None)

    def route(self, message: str) -> str:
        """Classify, parse and run a command, always returning a reply."""
        rule = self.match(message)
        if rule is None:
            return HELP_TEXT

        params = rule.parse(message)
        if isinstance(params, str):
            return params

        logger.info(f"Dispatching '{rule.intent}' with {params}")
        try:
            return rule.handler(**params)
        except Exception as e:
            logger.error(f"Command '{rule.intent}' failed: {e}")
            return ERROR_TEXT

    async def handle(self, message: str) -> str:
        return self.route(message)


async def handle_message(
    text: str, *, repo: Optional[SubscriptionRepository] = None
) -> str:
    """
    Public entry point: one free-text command in, one reply out.

    Args:
        text: The raw message, e.g. "Add subscription: Netflix 15.99€ monthly".
        repo: Keyword-only store override; defaults to the configured JSON file.

    Returns:
        The formatted response. Never raises for bad input.
    """
    router = CommandRouter(SubscriptionService(repo or SubscriptionRepository()))
    return await router.handle(text)
