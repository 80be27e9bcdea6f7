"""Unit tests for evidence quality scoring and actionable-link extraction."""

from datetime import UTC, datetime

import pytest

from xskills.actionable import classify_url, extract_actionable
from xskills.evidence import evidence_item_quality, score_evidence
from xskills.models import SkillEvidence


def _make(
    url: str = "https://x.com/testuser/status/1",
    title: str = "short",
    author: str = "testuser",
    domain: str = "x.com",
) -> SkillEvidence:
    return SkillEvidence(
        bookmark_id="1",
        url=url,
        title=title,
        author=author,
        domain=domain,
        added_at=datetime(2026, 10, 1, tzinfo=UTC),
        relevance=1.0,
    )


class TestEvidenceItemQuality:
    def test_github_long_title(self) -> None:
        e = _make(title="t" * 120, domain="github.com")
        assert evidence_item_quality(e, {"a"}, {"github.com"}) == pytest.approx(0.5)

    def test_social_domain_is_low(self) -> None:
        assert evidence_item_quality(_make(), {"a"}, {"x.com"}) == pytest.approx(0.1)

    def test_other_domain(self) -> None:
        e = _make(title="m" * 60, domain="example.com")
        assert evidence_item_quality(e, {"a"}, {"example.com"}) == pytest.approx(0.25)

    def test_credible_prefix_match(self) -> None:
        assert evidence_item_quality(_make(domain="docs.python.org"), {"a"}, set()) == pytest.approx(0.3)
        assert evidence_item_quality(_make(domain="blog.rust-lang.org"), {"a"}, set()) == pytest.approx(0.3)

    def test_diversity_bonuses(self) -> None:
        e = _make(domain="example.com")
        assert evidence_item_quality(e, {"a", "b"}, {"d1"}) == pytest.approx(0.25)
        assert evidence_item_quality(e, {"a", "b", "c"}, {"d1", "d2", "d3"}) == pytest.approx(0.45)

    def test_capped_at_one(self) -> None:
        e = _make(title="t" * 150, domain="arxiv.org")
        q = evidence_item_quality(e, {"a", "b", "c"}, {"d1", "d2", "d3"})
        assert q == pytest.approx(0.8)
        assert q <= 1.0


class TestScoreEvidence:
    def test_sets_item_quality_and_returns_mean(self) -> None:
        items = [
            _make(title="t" * 120, author="a", domain="github.com"),
            _make(author="b", domain="x.com"),
        ]
        # two authors → +0.1 each; items 0.6 and 0.2
        assert score_evidence(items) == 0.4
        assert items[0].quality == pytest.approx(0.6)
        assert items[1].quality == pytest.approx(0.2)

    def test_empty(self) -> None:
        assert score_evidence([]) == 0.0


class TestClassifyUrl:
    @pytest.mark.parametrize(
        ("url", "kind"),
        [
            ("https://github.com/tokio-rs/tokio", "repo"),
            ("https://gitlab.com/group/project", "repo"),
            ("https://pypi.org/project/httpx/", "package"),
            ("https://hub.docker.com/_/postgres", "docker"),
            ("https://tokio.readthedocs.org/en/latest", "docs"),
            ("https://dev.to/someone/post", "post"),
            ("https://www.youtube.com/watch?v=abc", "video"),
            ("https://jobs.lever.co/acme/123", "job"),
            ("https://example.com/page", "other"),
        ],
    )
    def test_kinds(self, url: str, kind: str) -> None:
        assert classify_url(url) == kind

    def test_case_insensitive(self) -> None:
        assert classify_url("https://GitHub.com/Org/Repo") == "repo"


class TestExtractActionable:
    def test_buckets_and_actions(self) -> None:
        evidence = [
            _make(url="https://github.com/tokio-rs/axum", domain="github.com"),
            _make(url="https://crates.io/crates/serde", domain="crates.io"),
            _make(url="https://hub.docker.com/r/org/img", domain="hub.docker.com"),
            _make(url="https://docs.gitbook.io/guide", domain="docs.gitbook.io"),
            _make(url="https://www.youtube.com/watch?v=1", domain="youtube.com"),
            _make(url="https://careers.acme.com/rust", domain="careers.acme.com"),
            _make(url="https://example.com/thing", domain="example.com"),
        ]
        content = extract_actionable(evidence)
        assert [i.action for i in content.repos] == ["clone/test"]
        assert [i.action for i in content.tools] == ["install/evaluate", "run/deploy"]
        assert [i.action for i in content.docs] == ["read/learn"]
        assert [i.action for i in content.posts] == ["watch/learn", "explore"]
        assert [i.action for i in content.jobs] == ["apply/explore"]

    def test_dedupes_and_skips_empty(self) -> None:
        evidence = [
            _make(url="https://github.com/a/b"),
            _make(url="https://github.com/a/b"),
            _make(url=""),
        ]
        content = extract_actionable(evidence)
        assert len(content.repos) == 1
        assert content.posts == []

    def test_title_truncated(self) -> None:
        content = extract_actionable([_make(url="https://github.com/a/b", title="x" * 180)])
        assert len(content.repos[0].title) == 100
