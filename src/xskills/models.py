"""Domain models used across the pipeline."""

from __future__ import annotations

from datetime import datetime
from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class PostMetrics(BaseModel):
    like_count: int = 0
    retweet_count: int = 0
    reply_count: int = 0
    quote_count: int = 0
    impression_count: int = 0
    bookmark_count: int = 0


class Post(BaseModel):
    """A bookmarked post as delivered by the fetch layer. Never mutated."""

    model_config = ConfigDict(frozen=True)

    post_id: str
    text: str = ""
    author_username: str = ""
    author_name: str = ""
    created_at: datetime | None = None
    urls: list[str] = Field(default_factory=list)
    hashtags: list[str] = Field(default_factory=list)
    mentions: list[str] = Field(default_factory=list)
    metrics: PostMetrics = Field(default_factory=PostMetrics)

    @property
    def permalink(self) -> str:
        return f"https://x.com/{self.author_username or 'i'}/status/{self.post_id}"


class XUser(BaseModel):
    id: str
    username: str = ""
    name: str = ""


class ApiUsage(BaseModel):
    """Request/cost counter owned by whoever drives the X client."""

    requests: int = 0
    estimated_cost: float = 0.0

    def record(self, cost: float) -> None:
        self.requests += 1
        self.estimated_cost += cost


class TopicSignals(BaseModel):
    hashtags: list[str] = Field(default_factory=list)
    domains: list[str] = Field(default_factory=list)
    keywords: list[str] = Field(default_factory=list)
    combined: list[str] = Field(default_factory=list)  # dedup union, in that order


class Bookmark(BaseModel):
    bookmark_id: str
    post: Post
    topics: TopicSignals
    primary_topic: str
    saved_at: datetime


class TopicCluster(BaseModel):
    id: str  # slug, e.g. "machine-learning"
    name: str
    topic: str
    keywords: list[str] = Field(default_factory=list)
    domains: list[str] = Field(default_factory=list)
    authors: list[str] = Field(default_factory=list)
    bookmark_ids: list[str] = Field(default_factory=list)
    cohesion: float = 0.0


class SkillLevel(StrEnum):
    NOVICE = "Novice"
    PRACTITIONER = "Practitioner"
    SPECIALIST = "Specialist"
    EXPERT = "Expert"


class ScoreResult(BaseModel):
    score: float
    level: SkillLevel
    confidence: float


# ── Skill output (camelCase on the wire) ──────────────────────────────────


class _SkillRecord(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class SkillEvidence(_SkillRecord):
    bookmark_id: str
    url: str
    title: str
    author: str
    domain: str
    added_at: datetime
    relevance: float = 0.0
    quality: float = 0.0


class ActionableItem(_SkillRecord):
    url: str
    title: str
    action: str
    domain: str


class ActionableContent(_SkillRecord):
    repos: list[ActionableItem] = Field(default_factory=list)
    tools: list[ActionableItem] = Field(default_factory=list)
    docs: list[ActionableItem] = Field(default_factory=list)
    posts: list[ActionableItem] = Field(default_factory=list)
    jobs: list[ActionableItem] = Field(default_factory=list)


class DateRange(_SkillRecord):
    earliest: datetime
    latest: datetime


class Skill(_SkillRecord):
    id: str
    slug: str
    name: str
    description: str = ""
    level: SkillLevel = SkillLevel.NOVICE
    score: float = 0.0
    confidence: float = 0.0
    evidence_quality: float = 0.0
    bookmark_count: int = 0
    evidence: list[SkillEvidence] = Field(default_factory=list)
    parent_skill_id: str | None = None
    child_skill_ids: list[str] = Field(default_factory=list)
    related_skill_ids: list[str] = Field(default_factory=list)
    capability_tags: list[str] = Field(default_factory=list)
    top_domains: list[str] = Field(default_factory=list)
    top_keywords: list[str] = Field(default_factory=list)
    suggested_queries: list[str] = Field(default_factory=list)
    authors: list[str] = Field(default_factory=list)
    date_range: DateRange
    actionable: ActionableContent | None = None
