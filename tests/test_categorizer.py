"""Unit tests for keyword category detection."""
import pytest

from models.subscription import Category
from services.categorizer import detect_category, resolve_category


@pytest.mark.unit
class TestDetectCategory:

    @pytest.mark.parametrize("name, expected", [
        ("Netflix", Category.ENTERTAINMENT),
        ("Apple Music Family", Category.ENTERTAINMENT),
        ("Notion", Category.PRODUCTIVITY),
        ("AWS", Category.CLOUD),
        ("Duolingo Plus", Category.EDUCATION),
        ("GitHub Copilot", Category.BUSINESS),
        ("Headspace", Category.HEALTH),
        ("The Economist", Category.NEWS),
        ("Deutsche Bahn BahnCard", Category.TRANSPORT),
        ("HelloFresh", Category.FOOD),
        ("Gym membership", Category.OTHER),
    ])
    def test_keywords(self, name, expected):
        assert detect_category(name) is expected

    def test_first_match_wins(self):
        """✅ 'Google Drive' hits cloud before anything later in the table."""
        assert detect_category("Google Drive") is Category.CLOUD

    def test_table_order_breaks_ties(self):
        """✅ 'Prime Video Delivery' matches entertainment and food; entertainment comes first."""
        assert detect_category("Prime Video Delivery") is Category.ENTERTAINMENT


@pytest.mark.unit
class TestResolveCategory:

    def test_explicit_known_category_wins(self):
        assert resolve_category("cloud", "Netflix") is Category.CLOUD

    def test_unknown_token_falls_back_to_detection(self):
        assert resolve_category("monthly", "Netflix") is Category.ENTERTAINMENT

    def test_missing_token(self):
        assert resolve_category(None, "Something") is Category.OTHER
