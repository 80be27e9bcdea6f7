"""Tests for filtering, analytics and output formats."""

from datetime import UTC, datetime, timedelta

import pytest

from xskills.models import DateRange, Skill, SkillEvidence, SkillLevel
from xskills.report import (
    calculate_analytics,
    filter_skills,
    find_skill,
    format_agent_compiler,
    format_analytics,
    format_skill_detail,
    format_skills,
    parse_level,
    render_html,
    sort_skills,
)

NOW = datetime(2026, 10, 18, 12, 0, tzinfo=UTC)


def _make(
    skill_id: str,
    score: float,
    level: SkillLevel,
    confidence: float = 0.7,
    count: int = 5,
    latest: timedelta = timedelta(days=1),
) -> Skill:
    return Skill(
        id=skill_id,
        slug=skill_id,
        name=skill_id.title(),
        score=score,
        level=level,
        confidence=confidence,
        bookmark_count=count,
        top_keywords=[skill_id, "tips"],
        evidence=[
            SkillEvidence(
                bookmark_id="1",
                url="https://github.com/a/b",
                title="A useful repository",
                author="alice",
                domain="github.com",
                added_at=NOW - latest,
                relevance=0.9,
                quality=0.8,
            )
        ],
        date_range=DateRange(earliest=NOW - latest - timedelta(days=30), latest=NOW - latest),
    )


@pytest.fixture
def skills() -> list[Skill]:
    return [
        _make("rust", 80.0, SkillLevel.EXPERT, count=12),
        _make("python", 55.0, SkillLevel.SPECIALIST, confidence=0.4, count=20),
        _make("go", 30.0, SkillLevel.PRACTITIONER, count=6, latest=timedelta(days=200)),
        _make("elixir", 10.0, SkillLevel.NOVICE, count=3, latest=timedelta(days=5)),
    ]


class TestFilterAndSort:
    def test_parse_level(self) -> None:
        assert parse_level("expert") == SkillLevel.EXPERT
        with pytest.raises(ValueError):
            parse_level("guru")

    def test_filter_by_level(self, skills: list[Skill]) -> None:
        assert [s.id for s in filter_skills(skills, level=SkillLevel.SPECIALIST)] == ["python"]

    def test_filter_min_level_and_confidence(self, skills: list[Skill]) -> None:
        out = filter_skills(skills, min_level=SkillLevel.PRACTITIONER, min_confidence=0.5)
        assert [s.id for s in out] == ["rust", "go"]

    def test_sort(self, skills: list[Skill]) -> None:
        assert [s.id for s in sort_skills(skills)] == ["rust", "python", "go", "elixir"]
        assert [s.id for s in sort_skills(skills, by="count")] == ["python", "rust", "go", "elixir"]
        assert sort_skills(skills, by="recent")[-1].id == "go"

    def test_find_skill(self, skills: list[Skill]) -> None:
        found = find_skill(skills, "Rust")
        assert found is not None and found.id == "rust"
        assert find_skill(skills, "haskell") is None


class TestAnalytics:
    def test_summary(self, skills: list[Skill]) -> None:
        analytics = calculate_analytics(skills, bookmark_count=41, now=NOW)
        assert analytics.total_bookmarks == 41
        assert analytics.total_skills == 4
        assert analytics.average_score == 43.8
        assert analytics.level_breakdown == {
            "Expert": 1, "Specialist": 1, "Practitioner": 1, "Novice": 1,
        }
        assert analytics.top_skills[0].id == "rust"
        assert [s.id for s in analytics.emerging_skills] == ["rust", "python", "elixir"]
        assert [s.id for s in analytics.neglected_skills] == ["go"]

    def test_empty(self) -> None:
        analytics = calculate_analytics([], bookmark_count=0, now=NOW)
        assert analytics.average_score == 0.0
        assert analytics.top_skills == []

    def test_format(self, skills: list[Skill]) -> None:
        text = format_analytics(calculate_analytics(skills, 41, NOW))
        assert "Total skills: 4" in text
        assert "- Go" in text


class TestFormatting:
    def test_format_skills_grouped_by_level(self, skills: list[Skill]) -> None:
        text = format_skills(skills)
        assert text.index("## Expert") < text.index("## Specialist") < text.index("## Novice")
        assert "**Rust**" in text

    def test_format_skills_empty(self) -> None:
        assert "No skills found" in format_skills([])

    def test_skill_detail(self, skills: list[Skill]) -> None:
        text = format_skill_detail(skills[0])
        assert text.startswith("# Rust")
        assert "@alice: A useful repository" in text

    def test_render_html(self, skills: list[Skill]) -> None:
        html = render_html(format_skills(skills))
        assert html.startswith("<!DOCTYPE html>")
        assert "<h1>" in html
        assert "<strong>Rust</strong>" in html


class TestAgentCompiler:
    def test_export_shape(self, skills: list[Skill]) -> None:
        doc = format_agent_compiler(skills, bookmark_count=41, now=NOW)
        assert doc["source"] == "xskills"
        assert doc["skill_count"] == 4
        first = doc["skills"][0]
        assert first["skill"] == "Rust"
        assert first["level"] == "Expert"
        assert first["evidence"][0] == {
            "url": "https://github.com/a/b",
            "title": "A useful repository",
            "author": "alice",
            "domain": "github.com",
            "relevance": 0.9,
            "quality": 0.8,
        }
        assert first["date_range"]["latest"] == (NOW - timedelta(days=1)).isoformat()
