"""
services/categorizer.py
-----------------------
Keyword-based category detection for subscription names.
"""

from typing import Optional

from models.subscription import Category

# Order matters: the first category with a matching keyword wins.
_KEYWORDS: list[tuple[Category, list[str]]] = [
    (Category.ENTERTAINMENT, [
        "netflix", "spotify", "disney", "hulu", "hbo", "youtube", "prime",
        "apple music", "twitch", "audible", "kindle",
    ]),
    (Category.PRODUCTIVITY, [
        "notion", "slack", "jira", "trello", "asana", "monday", "clickup",
        "linear", "obsidian",
    ]),
    (Category.CLOUD, [
        "aws", "azure", "google cloud", "dropbox", "icloud", "drive", "cloud",
        "firebase", "supabase",
    ]),
    (Category.EDUCATION, [
        "coursera", "udemy", "masterclass", "skillshare", "linkedin learning",
        "edx", "khan", "duolingo", "babbel",
    ]),
    (Category.BUSINESS, [
        "figma", "adobe", "github", "canva", "zoom", "webex", "blue", "miro",
        "mural",
    ]),
    (Category.HOME, ["ring", "nest", "ecobee", "smart", "security", "camera", "home"]),
    (Category.HEALTH, [
        "fitbit", "myfitnesspal", "calm", "headspace", "whoop", "oura",
        "strava", "garmin", "yoga", "fitness",
    ]),
    (Category.NEWS, [
        "newspaper", "magazine", "times", "post", "guardian", "economist",
        "washington", "nytimes",
    ]),
    (Category.TRANSPORT, [
        "uber", "lyft", "bolt", "car2go", "share now", "deutsche", "bahn", "vvs",
    ]),
    (Category.FOOD, [
        "doordash", "ubereats", "hellofresh", "blue apron", "grubhub",
        "delivery", "glovo", "lieferando",
    ]),
]


def detect_category(name: str) -> Category:
    """
    Guess a category from a subscription name.

    Args:
        name: Subscription name as typed by the user.

    Returns:
        The first category whose keyword list has a substring match,
        or Category.OTHER.
    """
    name_lower = name.lower()
    for category, keywords in _KEYWORDS:
        if any(kw in name_lower for kw in keywords):
            return category
    return Category.OTHER


def resolve_category(explicit: Optional[str], name: str) -> Category:
    """Use ``explicit`` when it names a known category, else detect from ``name``."""
    return Category.lookup(explicit) or detect_category(name)
