"""Turn topic clusters into skills: score, evidence, tags and research queries."""

from __future__ import annotations

import logging
from collections import Counter
from collections.abc import Iterable
from datetime import UTC, datetime

from xskills.actionable import extract_actionable
from xskills.cluster import DEFAULT_MIN_CLUSTER_SIZE, cluster_by_topics, parse_bookmarks
from xskills.evidence import score_evidence
from xskills.hierarchy import build_skill_hierarchy
from xskills.models import Bookmark, DateRange, Post, Skill, SkillEvidence, TopicCluster
from xskills.scoring import calculate_skill_score
from xskills.topics import extract_domain

logger = logging.getLogger(__name__)

_MAX_EVIDENCE = 20
_MAX_TITLE = 200
_TOP_DOMAINS = 5
_TOP_KEYWORDS = 10
_MAX_TAGS = 10
_MAX_QUERIES = 5
_FALLBACK_DOMAIN = "x.com"

# Canonical keyword → short tag it is commonly searched by
_KEYWORD_TAGS: dict[str, str] = {
    "machine learning": "ml",
    "deep learning": "dl",
    "artificial intelligence": "ai",
    "natural language processing": "nlp",
    "large language model": "llm",
    "large language models": "llm",
    "cryptocurrency": "crypto",
    "defi": "defi",
    "web3": "web3",
    "blockchain": "blockchain",
    "javascript": "js",
    "typescript": "ts",
    "python": "py",
    "golang": "go",
    "react": "react",
    "nodejs": "node",
    "kubernetes": "k8s",
    "devops": "devops",
}


def _build_evidence(cluster: TopicCluster, bookmark: Bookmark) -> SkillEvidence:
    post = bookmark.post
    if post.urls:
        url = post.urls[0]
        domain = extract_domain(url)
    else:
        url = post.permalink
        domain = _FALLBACK_DOMAIN

    cluster_keywords = set(cluster.keywords)
    relevance = (
        len(cluster_keywords & set(bookmark.topics.combined)) / len(cluster_keywords)
        if cluster_keywords
        else 0.0
    )
    return SkillEvidence(
        bookmark_id=bookmark.bookmark_id,
        url=url,
        title=post.text[:_MAX_TITLE],
        author=post.author_username,
        domain=domain,
        added_at=bookmark.saved_at,
        relevance=relevance,
    )


def capability_tags(keywords: list[str]) -> list[str]:
    """Keywords interleaved with their short forms, deduplicated."""
    tags: list[str] = []
    for kw in keywords:
        for tag in (kw, _KEYWORD_TAGS.get(kw)):
            if tag and tag not in tags:
                tags.append(tag)
    return tags[:_MAX_TAGS]


def suggested_queries(keywords: list[str], name: str, year: int) -> list[str]:
    """Search-ready queries for researching a skill further."""
    queries: list[str] = []
    top = keywords[:3]
    for kw in top:
        for query in (kw, f"{kw} {year}"):
            if query not in queries:
                queries.append(query)

    if len(top) >= 2:
        compound = f"{top[0]} {top[1]}"
        if compound not in queries:
            queries.append(compound)

    best_practices = f"{name} best practices"
    if best_practices not in queries:
        queries.append(best_practices)

    return queries[:_MAX_QUERIES]


def describe_skill(name: str, keywords: list[str], count: int) -> str:
    top = ", ".join(keywords[:3])
    return f"{name} expertise inferred from {count} bookmarked posts. Key topics: {top}"


def build_skill(cluster: TopicCluster, members: list[Bookmark], now: datetime) -> Skill:
    """Build one skill from a cluster and its member bookmarks."""
    result = calculate_skill_score(cluster, members, now)

    evidence = [_build_evidence(cluster, b) for b in members]
    evidence_quality = score_evidence(evidence)
    actionable = extract_actionable(evidence)
    evidence.sort(key=lambda e: e.relevance, reverse=True)

    domain_counts = Counter(d for b in members for d in b.topics.domains)
    keyword_counts = Counter(k for b in members for k in b.topics.keywords)
    top_domains = [d for d, _ in domain_counts.most_common(_TOP_DOMAINS)]
    top_keywords = [k for k, _ in keyword_counts.most_common(_TOP_KEYWORDS)]

    timestamps = [b.saved_at for b in members]
    date_range = DateRange(
        earliest=min(timestamps, default=now),
        latest=max(timestamps, default=now),
    )

    return Skill(
        id=cluster.id,
        slug=cluster.id,
        name=cluster.name,
        description=describe_skill(cluster.name, top_keywords, len(members)),
        level=result.level,
        score=result.score,
        confidence=result.confidence,
        evidence_quality=evidence_quality,
        bookmark_count=len(cluster.bookmark_ids),
        evidence=evidence[:_MAX_EVIDENCE],
        capability_tags=capability_tags(top_keywords),
        top_domains=top_domains,
        top_keywords=top_keywords,
        suggested_queries=suggested_queries(top_keywords, cluster.name, now.year),
        authors=list(cluster.authors),
        date_range=date_range,
        actionable=actionable,
    )


def build_skills(
    clusters: list[TopicCluster],
    bookmarks: list[Bookmark],
    now: datetime,
) -> list[Skill]:
    by_id = {b.bookmark_id: b for b in bookmarks}
    skills = [
        build_skill(c, [by_id[i] for i in c.bookmark_ids if i in by_id], now)
        for c in clusters
    ]
    logger.info("Built %d skills", len(skills))
    return skills


def infer_skills(
    posts: list[Post],
    now: datetime | None = None,
    min_cluster_size: int = DEFAULT_MIN_CLUSTER_SIZE,
    ignored: Iterable[str] = (),
) -> list[Skill]:
    """Run the full posts → skills pipeline. Pure apart from sampling *now*."""
    now = now or datetime.now(UTC)
    if now.tzinfo is None:
        now = now.replace(tzinfo=UTC)
    bookmarks = parse_bookmarks(posts, ignored)
    clusters = cluster_by_topics(bookmarks, min_cluster_size)
    skills = build_skills(clusters, bookmarks, now)
    # Hierarchy needs every skill built first
    return build_skill_hierarchy(skills)
