"""Credibility scoring for the posts backing a skill."""

from __future__ import annotations

from collections.abc import Collection

from xskills.models import SkillEvidence

# Substring match against the resolved domain
_CREDIBLE_DOMAINS: tuple[str, ...] = (
    "github.com", "arxiv.org", "medium.com", "dev.to", "stackoverflow.com",
    "docs.", "documentation", "blog.", "news.", "tech.", "youtube.com",
)
_SOCIAL_DOMAINS: frozenset[str] = frozenset({"x.com", "twitter.com"})

_W_CREDIBLE = 0.3
_W_SOCIAL = 0.1
_W_OTHER_DOMAIN = 0.15


def _title_score(title: str) -> float:
    # Title length stands in for substance; real engagement needs extra API calls.
    if len(title) > 100:
        return 0.2
    if len(title) > 50:
        return 0.1
    return 0.0


def _domain_score(domain: str) -> float:
    domain = domain.lower()
    if any(d in domain for d in _CREDIBLE_DOMAINS):
        return _W_CREDIBLE
    if domain in _SOCIAL_DOMAINS:
        return _W_SOCIAL
    return _W_OTHER_DOMAIN


def evidence_item_quality(
    evidence: SkillEvidence,
    authors: Collection[str],
    domains: Collection[str],
) -> float:
    """Quality of one evidence item in [0, 1].

    *authors* and *domains* are the unique pools across the whole skill's
    evidence; wider pools lift every item.
    """
    quality = _title_score(evidence.title) + _domain_score(evidence.domain)

    if len(authors) >= 3:
        quality += 0.2
    elif len(authors) >= 2:
        quality += 0.1

    if len(domains) >= 3:
        quality += 0.1

    return min(quality, 1.0)


def score_evidence(evidence: list[SkillEvidence]) -> float:
    """Set ``quality`` on every item and return the rounded mean."""
    if not evidence:
        return 0.0

    authors = {e.author for e in evidence}
    domains = {e.domain for e in evidence}
    for e in evidence:
        e.quality = evidence_item_quality(e, authors, domains)

    return round(sum(e.quality for e in evidence) / len(evidence), 2)
