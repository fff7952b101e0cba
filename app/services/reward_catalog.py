"""Load the starter rewards offered in the Rewards Vault from YAML."""
import logging
from functools import lru_cache
from pathlib import Path

import yaml

from app.config import get_settings

logger = logging.getLogger(__name__)

REWARD_CATEGORIES = ("treat", "activity", "rest", "social")


def get_suggested_rewards() -> dict[str, dict]:
    """Suggested reward templates keyed by slug, in catalog order."""
    return load_reward_catalog(get_settings().rewards_catalog_path)


@lru_cache
def load_reward_catalog(catalog_path: Path) -> dict[str, dict]:
    """Read and validate a reward catalog file.

    Invalid entries are logged and skipped. A missing file yields an empty catalog.
    """
    if not catalog_path.exists():
        logger.warning("Reward catalog not found: %s", catalog_path)
        return {}

    with open(catalog_path, "r") as f:
        data = yaml.safe_load(f) or []

    catalog: dict[str, dict] = {}
    for entry in data:
        template = _parse_entry(entry, catalog_path)
        if template is None:
            continue
        slug = template.pop("slug")
        if slug in catalog:
            logger.warning("Duplicate reward slug %s in %s", slug, catalog_path)
            continue
        catalog[slug] = template

    logger.info("Loaded %s suggested rewards", len(catalog))
    return catalog


def _parse_entry(entry, catalog_path: Path) -> dict | None:
    if not isinstance(entry, dict) or not entry.get("slug") or not entry.get("title"):
        logger.warning("Reward catalog entry missing slug or title in %s: %r", catalog_path, entry)
        return None

    cost = entry.get("cost")
    if isinstance(cost, bool) or not isinstance(cost, int) or cost < 1:
        logger.warning("Reward %s has an invalid cost: %r", entry["slug"], cost)
        return None

    category = entry.get("category", "treat")
    if category not in REWARD_CATEGORIES:
        logger.warning("Reward %s has an unknown category: %s", entry["slug"], category)
        return None

    return {
        "slug": str(entry["slug"]),
        "title": str(entry["title"]),
        "cost": cost,
        "category": category,
    }
