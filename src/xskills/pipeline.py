"""Pipeline orchestration: wires fetch → cache → extract → cluster → score → hierarchy."""

from __future__ import annotations

import logging
from datetime import UTC, datetime
from pathlib import Path

from xskills import config
from xskills.manager import SkillManager
from xskills.models import ApiUsage, Post, Skill
from xskills.skills import infer_skills
from xskills.store import SkillStore
from xskills.x_client import XClient

logger = logging.getLogger(__name__)


class Workspace:
    """The on-disk collaborators for one data directory."""

    def __init__(self, data_dir: Path | None = None) -> None:
        paths = config.data_paths(data_dir)
        self.store = SkillStore(db_path=paths["db"])
        self.manager = SkillManager(paths["manager"])


def import_bookmarks(
    workspace: Workspace,
    count: int = config.DEFAULT_COUNT,
    force: bool = False,
    client: XClient | None = None,
    usage: ApiUsage | None = None,
) -> list[Post]:
    """Return cached bookmarks, fetching from X when missing or *force* is set."""
    if not force:
        cached = workspace.store.load_posts()
        if cached:
            logger.info("Using %d cached bookmarks (use --force to re-fetch)", len(cached))
            return cached

    count = min(count, config.MAX_BOOKMARKS)
    logger.info("Fetching %d bookmarks from X API…", count)
    client = client or XClient(bearer_token=config.X_BEARER_TOKEN, usage=usage)
    posts = client.fetch_bookmarks(count)

    workspace.store.save_posts(posts)
    # Skills computed from the previous import are stale now
    workspace.store.clear_skills()
    logger.info(
        "Fetched %d bookmarks (%d requests, est. $%.3f)",
        len(posts),
        client.usage.requests,
        client.usage.estimated_cost,
    )
    return posts


def load_skills(
    workspace: Workspace,
    rebuild: bool = False,
    now: datetime | None = None,
    min_cluster_size: int = config.MIN_CLUSTER_SIZE,
) -> list[Skill]:
    """Return cached skills, or compute them from the cached bookmarks."""
    if not rebuild:
        cached = workspace.store.load_skills()
        if cached is not None:
            return workspace.manager.apply(cached)

    posts = workspace.store.load_posts()
    if not posts:
        logger.warning("No bookmarks cached; run `xskills import` first.")
        return []

    now = now or datetime.now(UTC)
    logger.info("=== skill inference start [%d posts] ===", len(posts))
    skills = infer_skills(
        posts,
        now=now,
        min_cluster_size=min_cluster_size,
        ignored=workspace.manager.settings.ignored_keywords,
    )
    workspace.store.save_skills(skills)
    logger.info("=== skill inference done [%d skills] ===", len(skills))
    return workspace.manager.apply(skills)
