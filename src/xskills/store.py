"""SQLite-backed key/value cache for fetched posts and computed skills."""

from __future__ import annotations

import json
import logging
import sqlite3
from datetime import UTC, datetime
from pathlib import Path

from pydantic import TypeAdapter

from xskills.models import Post, Skill

logger = logging.getLogger(__name__)

_SCHEMA = """
CREATE TABLE IF NOT EXISTS cache (
    key        TEXT PRIMARY KEY,
    payload    TEXT NOT NULL,
    item_count INTEGER NOT NULL DEFAULT 0,
    updated_at TEXT NOT NULL
);
"""

_POSTS_KEY = "bookmarks"
_SKILLS_KEY = "skills"

_POSTS = TypeAdapter(list[Post])
_SKILLS = TypeAdapter(list[Skill])


class SkillStore:
    """Last-write-wins cache of the bookmark list and the skill list."""

    def __init__(self, db_path: Path) -> None:
        db_path.parent.mkdir(parents=True, exist_ok=True)
        self._db_path = db_path
        self._init_db()

    # ── public ──────────────────────────────────────────────────────────

    def save_posts(self, posts: list[Post]) -> None:
        self._put(_POSTS_KEY, _POSTS.dump_json(posts).decode(), len(posts))

    def load_posts(self) -> list[Post] | None:
        """Return cached posts, or ``None`` if nothing has been imported."""
        payload = self._get(_POSTS_KEY)
        return _POSTS.validate_json(payload) if payload is not None else None

    def save_skills(self, skills: list[Skill]) -> None:
        self._put(_SKILLS_KEY, _SKILLS.dump_json(skills, by_alias=True).decode(), len(skills))

    def load_skills(self) -> list[Skill] | None:
        payload = self._get(_SKILLS_KEY)
        return _SKILLS.validate_json(payload) if payload is not None else None

    def clear_skills(self) -> None:
        con = self._connect()
        try:
            con.execute("DELETE FROM cache WHERE key = ?", (_SKILLS_KEY,))
            con.commit()
        finally:
            con.close()

    def fetched_at(self) -> datetime | None:
        """When the bookmark list was last written."""
        con = self._connect()
        try:
            row = con.execute(
                "SELECT updated_at FROM cache WHERE key = ?", (_POSTS_KEY,)
            ).fetchone()
        finally:
            con.close()
        return datetime.fromisoformat(row[0]) if row else None

    # ── private ─────────────────────────────────────────────────────────

    def _put(self, key: str, payload: str, item_count: int) -> None:
        con = self._connect()
        try:
            con.execute(
                """
                INSERT OR REPLACE INTO cache (key, payload, item_count, updated_at)
                VALUES (?, ?, ?, ?)
                """,
                (key, payload, item_count, datetime.now(UTC).isoformat()),
            )
            con.commit()
        finally:
            con.close()
        logger.info("Cached %d %s", item_count, key)

    def _get(self, key: str) -> str | None:
        con = self._connect()
        try:
            row = con.execute("SELECT payload FROM cache WHERE key = ?", (key,)).fetchone()
        finally:
            con.close()
        if row is None:
            return None
        # Cached payloads are always JSON arrays
        try:
            if not isinstance(json.loads(row[0]), list):
                logger.warning("Ignoring malformed cache entry: %s", key)
                return None
        except json.JSONDecodeError:
            logger.warning("Ignoring corrupt cache entry: %s", key)
            return None
        return row[0]  # type: ignore[no-any-return]

    def _connect(self) -> sqlite3.Connection:
        return sqlite3.connect(str(self._db_path))

    def _init_db(self) -> None:
        con = self._connect()
        con.executescript(_SCHEMA)
        con.close()
