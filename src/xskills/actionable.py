"""Bucket evidence links into things the user can act on."""

from __future__ import annotations

import logging

from xskills.models import ActionableContent, ActionableItem, SkillEvidence

logger = logging.getLogger(__name__)

_TITLE_MAX = 100

# URL substring → kind (order matters, first match wins)
_URL_PATTERNS: list[tuple[str, str]] = [
    ("github.com", "repo"),
    ("gitlab.com", "repo"),
    ("bitbucket.org", "repo"),
    ("npmjs.com", "package"),
    ("pypi.org", "package"),
    ("crates.io", "package"),
    ("hub.docker.com", "docker"),
    ("docker", "docker"),
    ("readme.io", "docs"),
    ("gitbook.io", "docs"),
    ("mkdocs.org", "docs"),
    ("readthedocs.org", "docs"),
    ("medium.com", "post"),
    ("dev.to", "post"),
    ("blog.", "post"),
    ("news.", "post"),
    ("substack.com", "post"),
    ("youtube.com", "video"),
    ("loom.com", "video"),
    ("linkedin.com", "post"),
    ("crunchbase.com", "job"),
    ("remoteok.com", "job"),
    ("weworkremotely.com", "job"),
    ("jobs.", "job"),
    ("careers.", "job"),
]

# kind → (bucket, action)
_KINDS: dict[str, tuple[str, str]] = {
    "repo": ("repos", "clone/test"),
    "package": ("tools", "install/evaluate"),
    "docker": ("tools", "run/deploy"),
    "docs": ("docs", "read/learn"),
    "post": ("posts", "review/understand"),
    "video": ("posts", "watch/learn"),
    "job": ("jobs", "apply/explore"),
    "other": ("posts", "explore"),
}


def classify_url(url: str) -> str:
    """Return the kind for *url*; ``"other"`` when nothing matches."""
    url_lower = url.lower()
    for pattern, kind in _URL_PATTERNS:
        if pattern in url_lower:
            return kind
    return "other"


def extract_actionable(evidence: list[SkillEvidence]) -> ActionableContent:
    """Group evidence URLs into repos/tools/docs/posts/jobs, one bucket per URL."""
    content = ActionableContent()
    seen: set[str] = set()

    for e in evidence:
        if not e.url or e.url in seen:
            continue
        seen.add(e.url)

        bucket, action = _KINDS[classify_url(e.url)]
        getattr(content, bucket).append(
            ActionableItem(
                url=e.url,
                title=e.title[:_TITLE_MAX],
                action=action,
                domain=e.domain,
            )
        )

    logger.debug(
        "Actionable: %d repos, %d tools, %d docs, %d posts, %d jobs",
        len(content.repos),
        len(content.tools),
        len(content.docs),
        len(content.posts),
        len(content.jobs),
    )
    return content
