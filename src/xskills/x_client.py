"""Minimal X API v2 bookmarks client (read-only) with cost tracking.

X bills per use: reading a bookmarked post costs $0.005 and a user lookup
$0.010. Every request is recorded on the caller-supplied :class:`ApiUsage`.
"""

from __future__ import annotations

import logging
import time
from typing import Any

import requests
from pydantic import BaseModel, Field

from xskills.models import ApiUsage, Post, PostMetrics, XUser

logger = logging.getLogger(__name__)

_BASE_URL = "https://api.x.com/2"

_TWEET_FIELDS = "created_at,public_metrics,author_id,conversation_id,entities"
_EXPANSIONS = "author_id"
_USER_FIELDS = "username,name,public_metrics"

COST_PER_BOOKMARK_READ = 0.005
COST_PER_USER_LOOKUP = 0.010

_PAGE_SIZE = 100
_MAX_BOOKMARKS = 800
_PAGE_DELAY_S = 0.35


class XClientError(Exception):
    """Raised when the X API returns an unexpected response."""


# ── Wire schemas (validated here, never inside the pipeline) ──────────────


class _RawUrl(BaseModel):
    expanded_url: str | None = None


class _RawTag(BaseModel):
    tag: str | None = None


class _RawMention(BaseModel):
    username: str | None = None


class _RawEntities(BaseModel):
    urls: list[_RawUrl] = Field(default_factory=list)
    hashtags: list[_RawTag] = Field(default_factory=list)
    mentions: list[_RawMention] = Field(default_factory=list)


class _RawUser(BaseModel):
    id: str
    username: str = ""
    name: str = ""


class _RawTweet(BaseModel):
    id: str
    text: str = ""
    author_id: str = ""
    created_at: str | None = None
    public_metrics: PostMetrics = Field(default_factory=PostMetrics)
    entities: _RawEntities = Field(default_factory=_RawEntities)


class _RawIncludes(BaseModel):
    users: list[_RawUser] = Field(default_factory=list)


class _RawMeta(BaseModel):
    next_token: str | None = None
    result_count: int | None = None


class _RawPage(BaseModel):
    data: list[_RawTweet] = Field(default_factory=list)
    includes: _RawIncludes = Field(default_factory=_RawIncludes)
    meta: _RawMeta = Field(default_factory=_RawMeta)


class _RawUserResponse(BaseModel):
    data: _RawUser | None = None


def _to_posts(page: _RawPage) -> list[Post]:
    users = {u.id: u for u in page.includes.users}
    posts: list[Post] = []
    for raw in page.data:
        user = users.get(raw.author_id)
        entities = raw.entities
        posts.append(
            Post(
                post_id=raw.id,
                text=raw.text,
                author_username=user.username if user else "",
                author_name=user.name if user else "",
                created_at=raw.created_at,
                urls=[u.expanded_url for u in entities.urls if u.expanded_url],
                hashtags=[h.tag for h in entities.hashtags if h.tag],
                mentions=[m.username for m in entities.mentions if m.username],
                metrics=raw.public_metrics,
            )
        )
    return posts


class XClient:
    """Thin wrapper around ``GET /2/users/me`` and ``GET /2/users/:id/bookmarks``."""

    def __init__(self, bearer_token: str, usage: ApiUsage | None = None) -> None:
        if not bearer_token:
            raise ValueError("X_BEARER_TOKEN is required but was empty.")
        self.usage = usage if usage is not None else ApiUsage()
        self._session = requests.Session()
        self._session.headers.update({"Authorization": f"Bearer {bearer_token}"})

    # ── public ──────────────────────────────────────────────────────────
    def get_current_user(self) -> XUser:
        """Return the account the token belongs to."""
        data = self._get("/users/me", {"user.fields": _USER_FIELDS}, COST_PER_USER_LOOKUP)
        parsed = _RawUserResponse.model_validate(data)
        if parsed.data is None:
            raise XClientError("Failed to get current user")
        return XUser(id=parsed.data.id, username=parsed.data.username, name=parsed.data.name)

    def fetch_bookmarks(self, count: int = 100, max_bookmark_id: str | None = None) -> list[Post]:
        """Fetch up to *count* bookmarks (capped at 800), newest first."""
        count = max(1, min(count, _MAX_BOOKMARKS))
        user = self.get_current_user()

        posts: list[Post] = []
        next_token: str | None = None
        max_pages = -(-count // _PAGE_SIZE)

        for page_no in range(max_pages):
            page_size = min(_PAGE_SIZE, count - len(posts))
            if page_size <= 0:
                break

            params: dict[str, Any] = {
                "max_results": page_size,
                "tweet.fields": _TWEET_FIELDS,
                "expansions": _EXPANSIONS,
                "user.fields": _USER_FIELDS,
            }
            if next_token:
                params["pagination_token"] = next_token
            if page_no == 0 and max_bookmark_id:
                params["max_bookmark_id"] = max_bookmark_id

            data = self._get(
                f"/users/{user.id}/bookmarks", params, page_size * COST_PER_BOOKMARK_READ
            )
            page = _RawPage.model_validate(data)
            posts.extend(_to_posts(page))

            next_token = page.meta.next_token
            if not next_token:
                break
            # Polite back-off between pages (X rate limits)
            time.sleep(_PAGE_DELAY_S)

        logger.info(
            "Fetched %d bookmarks for @%s (requests=%d, est. cost=$%.3f)",
            len(posts),
            user.username,
            self.usage.requests,
            self.usage.estimated_cost,
        )
        return posts

    # ── private ─────────────────────────────────────────────────────────
    def _get(self, path: str, params: dict[str, Any], cost: float) -> dict[str, Any]:
        url = f"{_BASE_URL}{path}"
        self.usage.record(cost)
        resp = self._session.get(url, params=params, timeout=30)
        if resp.status_code == 429:
            wait = self._retry_after(resp)
            logger.warning("Rate-limited; sleeping %ds", wait)
            time.sleep(wait)
            resp = self._session.get(url, params=params, timeout=30)
        if resp.status_code != 200:
            raise XClientError(f"X API returned {resp.status_code}: {resp.text[:500]}")
        return resp.json()  # type: ignore[no-any-return]

    @staticmethod
    def _retry_after(resp: requests.Response) -> int:
        reset = resp.headers.get("x-rate-limit-reset")
        if reset and reset.isdigit():
            return max(int(reset) - int(time.time()), 1)
        return int(resp.headers.get("Retry-After", "60"))
