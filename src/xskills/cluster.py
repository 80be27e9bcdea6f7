"""Group bookmarks into topic clusters and measure how tight each one is."""

from __future__ import annotations

import logging
import re
from collections import defaultdict
from collections.abc import Iterable
from datetime import UTC
from itertools import combinations

from xskills.models import Bookmark, Post, TopicCluster
from xskills.topics import extract_primary_topic, extract_topics

logger = logging.getLogger(__name__)

DEFAULT_MIN_CLUSTER_SIZE = 3
DEFAULT_RELATED_THRESHOLD = 0.3

# Weights for cluster-to-cluster similarity
_W_KEYWORDS = 0.7
_W_DOMAINS = 0.3

_NAME_SPLIT_RE = re.compile(r"[-_\s]+")
_WHITESPACE_RE = re.compile(r"\s+")


def parse_bookmarks(posts: list[Post], ignored: Iterable[str] = ()) -> list[Bookmark]:
    """Annotate each post with its topic signals and primary topic.

    Posts without a creation time or with blank text are skipped (logged),
    the rest of the batch is still processed.
    """
    ignored = tuple(ignored)
    bookmarks: list[Bookmark] = []
    for post in posts:
        if post.created_at is None or not post.text.strip():
            logger.warning("Skipping post %s: missing timestamp or empty text", post.post_id)
            continue

        saved_at = post.created_at
        if saved_at.tzinfo is None:
            saved_at = saved_at.replace(tzinfo=UTC)

        topics = extract_topics(post, ignored)
        bookmarks.append(
            Bookmark(
                bookmark_id=post.post_id,
                post=post,
                topics=topics,
                primary_topic=extract_primary_topic(topics),
                saved_at=saved_at.astimezone(UTC),
            )
        )

    logger.info("Parsed %d bookmarks from %d posts", len(bookmarks), len(posts))
    return bookmarks


def slugify_topic(topic: str) -> str:
    return _WHITESPACE_RE.sub("-", topic.strip().lower())


def format_topic_name(topic: str) -> str:
    """``machine learning`` / ``deep-learning`` → ``Machine Learning`` / ``Deep Learning``."""
    words = [w for w in _NAME_SPLIT_RE.split(topic) if w]
    return " ".join(w[:1].upper() + w[1:] for w in words)


def jaccard(a: Iterable[str], b: Iterable[str]) -> float:
    set_a, set_b = set(a), set(b)
    union = len(set_a | set_b)
    if union == 0:
        return 0.0
    return len(set_a & set_b) / union


def cluster_cohesion(members: list[Bookmark]) -> float:
    """Mean pairwise Jaccard similarity of the members' topic signals."""
    if len(members) < 2:
        return 0.5

    pairs = list(combinations(members, 2))
    total = sum(jaccard(a.topics.combined, b.topics.combined) for a, b in pairs)
    return total / len(pairs) if pairs else 0.0


def cluster_by_topics(
    bookmarks: list[Bookmark],
    min_cluster_size: int = DEFAULT_MIN_CLUSTER_SIZE,
) -> list[TopicCluster]:
    """Bucket bookmarks by primary topic; drop buckets below *min_cluster_size*."""
    buckets: dict[str, list[Bookmark]] = defaultdict(list)
    for bookmark in bookmarks:
        buckets[bookmark.primary_topic].append(bookmark)

    clusters: list[TopicCluster] = []
    for topic, members in buckets.items():
        if len(members) < min_cluster_size:
            continue

        clusters.append(
            TopicCluster(
                id=slugify_topic(topic),
                name=format_topic_name(topic),
                topic=topic,
                keywords=list(dict.fromkeys(k for b in members for k in b.topics.combined)),
                domains=list(dict.fromkeys(d for b in members for d in b.topics.domains)),
                authors=list(dict.fromkeys(b.post.author_username for b in members)),
                bookmark_ids=[b.bookmark_id for b in members],
                cohesion=cluster_cohesion(members),
            )
        )

    # Largest first; sort is stable so equal sizes keep first-seen order
    clusters.sort(key=lambda c: len(c.bookmark_ids), reverse=True)
    logger.info(
        "Clustered %d bookmarks into %d topics (%d kept, min size %d)",
        len(bookmarks),
        len(buckets),
        len(clusters),
        min_cluster_size,
    )
    return clusters


def cluster_similarity(a: TopicCluster, b: TopicCluster) -> float:
    return _W_KEYWORDS * jaccard(a.keywords, b.keywords) + _W_DOMAINS * jaccard(
        a.domains, b.domains
    )


def find_related_clusters(
    clusters: list[TopicCluster],
    threshold: float = DEFAULT_RELATED_THRESHOLD,
) -> dict[str, list[str]]:
    """Map each cluster id to the ids of other clusters at or above *threshold*.

    Clusters with no related peers are left out of the result.
    """
    related: dict[str, list[str]] = {}
    for a in clusters:
        ids = [
            b.id
            for b in clusters
            if b.id != a.id and cluster_similarity(a, b) >= threshold
        ]
        if ids:
            related[a.id] = ids
    return related
