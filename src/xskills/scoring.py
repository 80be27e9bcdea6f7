"""Expertise scoring for a topic cluster: 0-100 score, level and confidence."""

from __future__ import annotations

import logging
import math
from datetime import datetime, timedelta

from xskills.models import Bookmark, ScoreResult, SkillLevel, TopicCluster

logger = logging.getLogger(__name__)

# ── Score components (each capped; caps sum to 100) ───────────────────────
_COUNT_MAX = 30.0
_COUNT_SATURATION = 30  # bookmarks at which the count score maxes out
_RECENCY_MAX = 25.0
_AUTHOR_DIVERSITY_MAX = 20.0
_DOMAIN_DIVERSITY_MAX = 20.0
_RECENT_BONUS_MAX = 5.0
_RECENT_BONUS_DIVISOR = 5

_DECAY = timedelta(days=180)
_RECENT_WINDOW = timedelta(days=30)

# Lower bound of each band, highest first
_LEVEL_THRESHOLDS: list[tuple[float, SkillLevel]] = [
    (76.0, SkillLevel.EXPERT),
    (51.0, SkillLevel.SPECIALIST),
    (26.0, SkillLevel.PRACTITIONER),
]

# ── Confidence adjustments ────────────────────────────────────────────────
_BASE_CONFIDENCE = 0.5
_MAX_VOLUME_BONUS = 0.2
_W_COHESION = 0.2


def score_to_level(score: float) -> SkillLevel:
    for threshold, level in _LEVEL_THRESHOLDS:
        if score >= threshold:
            return level
    return SkillLevel.NOVICE


def count_score(n: int) -> float:
    return min(math.log2(n + 1) / math.log2(_COUNT_SATURATION + 1), 1.0) * _COUNT_MAX


def recency_score(latest: datetime, now: datetime) -> float:
    age = max((now - latest) / _DECAY, 0.0)
    return math.exp(-age) * _RECENCY_MAX


def diversity_score(unique: int, n: int, cap: float) -> float:
    if n == 0:
        return 0.0
    return min(unique / n * cap, cap)


def recent_bonus(bookmarks: list[Bookmark], now: datetime) -> float:
    recent = sum(1 for b in bookmarks if now - b.saved_at < _RECENT_WINDOW)
    return min(recent / _RECENT_BONUS_DIVISOR, _RECENT_BONUS_MAX)


def calculate_confidence(cluster: TopicCluster, n: int) -> float:
    """How much to trust the score, from volume, cohesion and source spread."""
    confidence = _BASE_CONFIDENCE
    confidence += min(n / _COUNT_SATURATION, _MAX_VOLUME_BONUS)
    confidence += cluster.cohesion * _W_COHESION

    authors = len(cluster.authors)
    if authors >= 3:
        confidence += 0.1
    elif authors == 1:
        confidence -= 0.1

    domains = len(cluster.domains)
    if domains >= 3:
        confidence += 0.1
    elif domains == 1:
        confidence -= 0.05

    return max(0.0, min(1.0, round(confidence, 2)))


def calculate_skill_score(
    cluster: TopicCluster,
    bookmarks: list[Bookmark],
    now: datetime,
) -> ScoreResult:
    """Score a cluster from its member bookmarks.

    ``now`` is sampled once per run by the caller so repeated runs over the
    same posts give the same result.
    """
    n = len(bookmarks)
    if n == 0:
        return ScoreResult(
            score=0.0, level=SkillLevel.NOVICE, confidence=calculate_confidence(cluster, 0)
        )

    latest = max(b.saved_at for b in bookmarks)
    raw = (
        count_score(n)
        + recency_score(latest, now)
        + diversity_score(len(cluster.authors), n, _AUTHOR_DIVERSITY_MAX)
        + diversity_score(len(cluster.domains), n, _DOMAIN_DIVERSITY_MAX)
        + recent_bonus(bookmarks, now)
    )
    score = round(max(0.0, min(100.0, raw)), 1)

    result = ScoreResult(
        score=score,
        level=score_to_level(score),
        confidence=calculate_confidence(cluster, n),
    )
    logger.debug("Scored %s: %.1f (%s, conf=%.2f)", cluster.id, score, result.level, result.confidence)
    return result
