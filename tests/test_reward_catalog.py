import os
import sys

os.environ.setdefault("DATABASE_URL", "sqlite:///./data/rememory.db")
os.environ.setdefault("SECRET_KEY", "0123456789abcdef0123456789abcdef0123456789abcdef0123456789abcdef")

sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

from app.services.reward_catalog import get_suggested_rewards, load_reward_catalog


def test_bundled_catalog_has_the_starter_rewards():
    catalog = get_suggested_rewards()

    assert list(catalog) == [
        "watch-a-show",
        "order-a-treat",
        "nap-without-guilt",
        "swap-a-chore",
        "call-a-friend",
        "bath-with-candles",
    ]
    assert catalog["order-a-treat"] == {"title": "Order a treat", "cost": 50, "category": "treat"}
    assert catalog["call-a-friend"]["category"] == "social"


def test_invalid_entries_are_skipped(tmp_path):
    catalog_path = tmp_path / "rewards.yaml"
    catalog_path.write_text(
        """
- slug: good
  title: Good reward
  cost: 5
  category: rest
- slug: free
  title: Free lunch
  cost: 0
- slug: fancy
  title: Yacht
  cost: 100
  category: luxury
- title: No slug
  cost: 3
- slug: good
  title: Duplicate
  cost: 7
- slug: default-category
  title: Cookie
  cost: 2
"""
    )

    catalog = load_reward_catalog(catalog_path)

    assert list(catalog) == ["good", "default-category"]
    assert catalog["good"]["title"] == "Good reward"
    assert catalog["default-category"]["category"] == "treat"


def test_missing_catalog_is_empty(tmp_path):
    assert load_reward_catalog(tmp_path / "missing.yaml") == {}
