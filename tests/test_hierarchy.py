"""Unit tests for skill hierarchy inference."""

from datetime import UTC, datetime

from xskills.hierarchy import build_skill_hierarchy
from xskills.models import DateRange, Skill

_TS = datetime(2026, 10, 1, tzinfo=UTC)


def _make(skill_id: str, keywords: list[str]) -> Skill:
    return Skill(
        id=skill_id,
        slug=skill_id,
        name=skill_id.title(),
        top_keywords=keywords,
        date_range=DateRange(earliest=_TS, latest=_TS),
    )


class TestBuildSkillHierarchy:
    def test_parent_child(self) -> None:
        child = _make("async-rust", ["tokio", "async"])
        parent = _make("rust", ["tokio", "async", "ownership"])
        other = _make("python", ["decorators", "typing"])
        skills = build_skill_hierarchy([child, parent, other])

        assert skills == [child, parent, other]
        assert child.parent_skill_id == "rust"
        assert parent.child_skill_ids == ["async-rust"]
        assert parent.parent_skill_id is None

    def test_parentless_skills_are_mutually_related(self) -> None:
        child = _make("async-rust", ["tokio", "async"])
        parent = _make("rust", ["tokio", "async", "ownership"])
        other = _make("python", ["decorators", "typing"])
        build_skill_hierarchy([child, parent, other])

        assert parent.related_skill_ids == ["python"]
        assert other.related_skill_ids == ["rust"]
        assert child.related_skill_ids == []

    def test_parent_needs_more_keywords(self) -> None:
        a = _make("a", ["x", "y"])
        b = _make("b", ["x", "y"])
        build_skill_hierarchy([a, b])
        assert a.parent_skill_id is None
        assert b.parent_skill_id is None

    def test_parent_needs_half_overlap(self) -> None:
        child = _make("child", ["x", "p", "q", "r"])
        broad = _make("broad", ["x", "m", "n", "o", "s"])
        build_skill_hierarchy([child, broad])
        assert child.parent_skill_id is None

    def test_first_match_wins(self) -> None:
        first = _make("first", ["a", "b", "x", "y", "z"])
        best = _make("best", ["a", "b", "c", "d", "e"])
        child = _make("child", ["a", "b", "c", "d"])
        build_skill_hierarchy([first, best, child])
        # "best" shares all four keywords, but "first" is reached first and shares half
        assert child.parent_skill_id == "first"
        assert first.child_skill_ids == ["child"]
        assert best.child_skill_ids == []

    def test_no_self_parent_and_parent_is_broader(self) -> None:
        skills = [
            _make("s1", ["a", "b", "c", "d", "e", "f"]),
            _make("s2", ["a", "b", "c"]),
            _make("s3", ["a", "b"]),
            _make("s4", ["b"]),
            _make("s5", []),
        ]
        build_skill_hierarchy(skills)
        by_id = {s.id: s for s in skills}
        for s in skills:
            assert s.parent_skill_id != s.id
            if s.parent_skill_id:
                assert len(by_id[s.parent_skill_id].top_keywords) > len(s.top_keywords)

    def test_empty(self) -> None:
        assert build_skill_hierarchy([]) == []
