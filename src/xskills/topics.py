"""Extract topic signals (hashtags, link domains, keywords) from a post."""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable
from urllib.parse import urlsplit

from xskills.models import Post, TopicSignals

logger = logging.getLogger(__name__)

UNCATEGORIZED = "uncategorized"

# Links back to the platform itself say nothing about the topic.
_SOCIAL_DOMAINS: frozenset[str] = frozenset({"x.com", "twitter.com", "t.co"})

_URL_RE = re.compile(r"https?://\S+")
_MENTION_RE = re.compile(r"@\w+")
_NON_ALNUM_RE = re.compile(r"[^\w\s]|_")

_MIN_TOKEN_LEN = 3

STOPWORDS: frozenset[str] = frozenset({
    "the", "a", "an", "and", "or", "but", "in", "on", "at", "to", "for",
    "of", "with", "by", "from", "as", "is", "was", "are", "were", "been",
    "be", "have", "has", "had", "do", "does", "did", "will", "would",
    "could", "should", "may", "might", "must", "shall", "can", "need",
    "this", "that", "these", "those", "it", "its", "how", "what", "when",
    "where", "who", "which", "why", "all", "each", "every", "both",
    "few", "more", "most", "other", "some", "such", "no", "not", "only",
    "own", "same", "so", "than", "too", "very", "just", "about", "into",
    "through", "during", "before", "after", "above", "below", "between",
    "under", "again", "further", "then", "once", "here", "there", "any",
    "http", "https", "www", "com", "org", "net", "io", "html", "htm",
    "rt", "via", "amp", "like", "new", "get", "got", "im", "dont",
    "youre", "theyre", "hes", "shes", "thats", "whats", "heres",
    "theres", "wont", "cant", "didnt", "doesnt", "isnt", "arent", "wasnt",
    "werent", "hasnt", "havent", "hadnt", "shouldnt", "wouldnt", "couldnt",
    "let", "us", "go", "up", "out", "if", "else", "your", "my", "our",
    "their", "his", "her", "me", "him", "them", "we", "they", "he", "she",
    "i", "you", "one", "also", "back", "now", "even", "still",
})

# Abbreviation → canonical long form. Identity entries pin the spelling.
TOPIC_ALIASES: dict[str, str] = {
    "ml": "machine learning",
    "dl": "deep learning",
    "ai": "artificial intelligence",
    "llm": "large language model",
    "llms": "large language models",
    "nlp": "natural language processing",
    "cv": "computer vision",
    "rl": "reinforcement learning",
    "gan": "generative adversarial network",
    "gans": "generative adversarial networks",
    "rnns": "recurrent neural networks",
    "cnns": "convolutional neural networks",
    "transformers": "transformers",
    "api": "api",
    "apis": "apis",
    "sdk": "sdk",
    "sdks": "sdks",
    "cli": "cli",
    "css": "css",
    "json": "json",
    "xml": "xml",
    "sql": "sql",
    "nosql": "nosql",
    "devops": "devops",
    "ci": "ci cd",
    "cd": "ci cd",
    "crypto": "cryptocurrency",
    "defi": "defi",
    "nft": "nft",
    "web3": "web3",
    "blockchain": "blockchain",
    "btc": "bitcoin",
    "eth": "ethereum",
    "sol": "solana",
    "github": "github",
    "git": "git",
    "aws": "aws",
    "gcp": "gcp",
    "azure": "azure",
    "k8s": "kubernetes",
    "kubernetes": "kubernetes",
    "docker": "docker",
    "react": "react",
    "vue": "vue",
    "angular": "angular",
    "node": "nodejs",
    "js": "javascript",
    "ts": "typescript",
    "py": "python",
    "rust": "rust",
    "go": "golang",
    "golang": "golang",
    "swift": "swift",
    "kotlin": "kotlin",
    "java": "java",
}


def _ordered_unique(values: Iterable[str]) -> list[str]:
    return list(dict.fromkeys(v for v in values if v))


def extract_domain(url: str) -> str:
    """Return the host of *url* without a leading ``www.``; ``""`` if unparseable."""
    try:
        host = urlsplit(url.strip()).hostname
    except ValueError:
        logger.debug("Unparseable URL: %r", url)
        return ""
    if not host:
        return ""
    return host.removeprefix("www.")


def extract_keywords(text: str, ignored: Iterable[str] = ()) -> list[str]:
    """Tokenise *text* into stopword-filtered, alias-canonicalised keywords.

    Order is first-seen; duplicates are collapsed after aliasing, so ``k8s``
    and ``kubernetes`` in the same post yield a single ``kubernetes``.
    """
    ignored_set = {i.lower() for i in ignored}
    cleaned = _URL_RE.sub("", text)
    cleaned = _MENTION_RE.sub("", cleaned)
    cleaned = _NON_ALNUM_RE.sub(" ", cleaned)

    keywords: list[str] = []
    seen: set[str] = set()
    for token in cleaned.lower().split():
        if len(token) < _MIN_TOKEN_LEN or token in STOPWORDS:
            continue
        expanded = TOPIC_ALIASES.get(token, token)
        if token in ignored_set or expanded in ignored_set:
            continue
        if expanded not in seen:
            keywords.append(expanded)
            seen.add(expanded)
    return keywords


def extract_topics(post: Post, ignored: Iterable[str] = ()) -> TopicSignals:
    """Build the topic signals for a single post."""
    hashtags = _ordered_unique(h.strip().lower() for h in post.hashtags)
    domains = _ordered_unique(
        d for d in (extract_domain(u) for u in post.urls) if d not in _SOCIAL_DOMAINS
    )
    keywords = extract_keywords(post.text, ignored)
    return TopicSignals(
        hashtags=hashtags,
        domains=domains,
        keywords=keywords,
        combined=_ordered_unique([*hashtags, *domains, *keywords]),
    )


def extract_primary_topic(topics: TopicSignals) -> str:
    """Pick the bucketing topic: first hashtag, else domain, else keyword."""
    for group in (topics.hashtags, topics.domains, topics.keywords):
        if group:
            return group[0]
    return UNCATEGORIZED
