"""Presentation helpers: filtering, analytics, Markdown/HTML and export formats."""

from __future__ import annotations

import logging
from datetime import datetime, timedelta
from typing import Any

import markdown
from pydantic import BaseModel, Field

from xskills.models import Skill, SkillLevel

logger = logging.getLogger(__name__)

LEVEL_ORDER: list[SkillLevel] = [
    SkillLevel.NOVICE,
    SkillLevel.PRACTITIONER,
    SkillLevel.SPECIALIST,
    SkillLevel.EXPERT,
]

_EMERGING_WINDOW = timedelta(days=30)
_NEGLECTED_AFTER = timedelta(days=90)
_PER_LEVEL = 5
_EXPORT_SOURCE = "xskills"
_EXPORT_VERSION = "1.0"

_HTML_TEMPLATE = """\
<!DOCTYPE html>
<html lang="en">
<head><meta charset="utf-8"><title>{title}</title></head>
<body style="max-width:720px; margin:24px auto; font-family:-apple-system,
             BlinkMacSystemFont,'Segoe UI',Roboto,Helvetica,Arial,sans-serif;
             font-size:15px; line-height:1.6; color:#1a1a1a;">
{body}
</body>
</html>
"""


# ── Filtering / sorting ───────────────────────────────────────────────────


def parse_level(value: str) -> SkillLevel:
    """Case-insensitive level lookup; raises ``ValueError`` for unknown names."""
    for level in LEVEL_ORDER:
        if level.value.lower() == value.strip().lower():
            return level
    raise ValueError(f"Unknown level: {value!r}")


def filter_skills(
    skills: list[Skill],
    level: SkillLevel | None = None,
    min_level: SkillLevel | None = None,
    min_confidence: float = 0.0,
) -> list[Skill]:
    out = [s for s in skills if s.confidence >= min_confidence]
    if level is not None:
        out = [s for s in out if s.level == level]
    if min_level is not None:
        floor = LEVEL_ORDER.index(min_level)
        out = [s for s in out if LEVEL_ORDER.index(s.level) >= floor]
    return out


def sort_skills(skills: list[Skill], by: str = "score") -> list[Skill]:
    if by == "count":
        return sorted(skills, key=lambda s: s.bookmark_count, reverse=True)
    if by == "recent":
        return sorted(skills, key=lambda s: s.date_range.latest, reverse=True)
    return sorted(skills, key=lambda s: s.score, reverse=True)


def find_skill(skills: list[Skill], name_or_id: str) -> Skill | None:
    needle = name_or_id.strip().lower()
    for skill in skills:
        if needle in (skill.id.lower(), skill.slug.lower(), skill.name.lower()):
            return skill
    return None


# ── Analytics ─────────────────────────────────────────────────────────────


class SkillAnalytics(BaseModel):
    total_bookmarks: int
    total_skills: int
    average_score: float
    level_breakdown: dict[str, int]
    top_skills: list[Skill] = Field(default_factory=list)
    emerging_skills: list[Skill] = Field(default_factory=list)
    neglected_skills: list[Skill] = Field(default_factory=list)


def calculate_analytics(skills: list[Skill], bookmark_count: int, now: datetime) -> SkillAnalytics:
    breakdown = {level.value: 0 for level in reversed(LEVEL_ORDER)}
    for skill in skills:
        breakdown[skill.level.value] += 1

    average = sum(s.score for s in skills) / len(skills) if skills else 0.0

    emerging = sorted(
        (
            s for s in skills
            if s.date_range.latest > now - _EMERGING_WINDOW and s.bookmark_count >= 3
        ),
        key=lambda s: s.date_range.latest,
        reverse=True,
    )
    neglected = sorted(
        (
            s for s in skills
            if s.date_range.latest < now - _NEGLECTED_AFTER and s.bookmark_count >= 5
        ),
        key=lambda s: s.date_range.latest,
    )

    return SkillAnalytics(
        total_bookmarks=bookmark_count,
        total_skills=len(skills),
        average_score=round(average, 1),
        level_breakdown=breakdown,
        top_skills=sort_skills(skills)[:10],
        emerging_skills=emerging[:10],
        neglected_skills=neglected[:10],
    )


# ── Markdown ──────────────────────────────────────────────────────────────


def format_skill_line(skill: Skill, index: int | None = None) -> str:
    prefix = f"{index + 1}. " if index is not None else "- "
    lines = [
        f"{prefix}**{skill.name}** — score {skill.score} | {skill.level.value} | "
        f"{skill.bookmark_count} bookmarks | confidence {round(skill.confidence * 100)}%"
    ]
    if skill.top_keywords:
        lines.append(f"   - Topics: {', '.join(skill.top_keywords[:5])}")
    if skill.suggested_queries:
        lines.append(f"   - Research: {', '.join(skill.suggested_queries[:3])}")
    if skill.top_domains:
        lines.append(f"   - Sources: {', '.join(skill.top_domains[:3])}")
    return "\n".join(lines)


def format_skills(skills: list[Skill]) -> str:
    """Skill profile grouped by level, strongest level first."""
    if not skills:
        return "No skills found. Import bookmarks first."

    parts = [f"# Skill Profile ({len(skills)} skills)"]
    for level in reversed(LEVEL_ORDER):
        at_level = [s for s in skills if s.level == level]
        if not at_level:
            continue
        parts.append(f"\n## {level.value} ({len(at_level)})\n")
        parts.extend(format_skill_line(s, i) for i, s in enumerate(at_level[:_PER_LEVEL]))
        if len(at_level) > _PER_LEVEL:
            parts.append(f"\n_… and {len(at_level) - _PER_LEVEL} more_")
    return "\n".join(parts) + "\n"


def format_skill_detail(skill: Skill, evidence_limit: int = 10) -> str:
    out = [
        f"# {skill.name}",
        "",
        f"- Level: {skill.level.value}",
        f"- Score: {skill.score}",
        f"- Confidence: {round(skill.confidence * 100)}%",
        f"- Evidence quality: {skill.evidence_quality}",
        f"- Bookmarks: {skill.bookmark_count}",
        f"- Authors: {len(skill.authors)}",
        "",
        "## Keywords",
        *(f"- {k}" for k in skill.top_keywords),
    ]
    if skill.top_domains:
        out += ["", "## Sources", *(f"- {d}" for d in skill.top_domains)]
    if skill.parent_skill_id:
        out += ["", f"Parent skill: {skill.parent_skill_id}"]
    if skill.child_skill_ids:
        out += ["", f"Sub-skills: {', '.join(skill.child_skill_ids)}"]

    shown = skill.evidence[:evidence_limit]
    out += ["", f"## Evidence ({len(shown)} of {len(skill.evidence)})"]
    for e in shown:
        text = e.title[:60] + ("..." if len(e.title) > 60 else "")
        out.append(f"- @{e.author}: {text}")

    if skill.actionable:
        for bucket in ("repos", "tools", "docs", "posts", "jobs"):
            items = getattr(skill.actionable, bucket)
            if items:
                out += ["", f"## {bucket.title()}"]
                out += [f"- [{i.action}] {i.url}" for i in items]
    return "\n".join(out) + "\n"


def format_analytics(analytics: SkillAnalytics) -> str:
    out = [
        "# Skill Analytics",
        "",
        f"- Total bookmarks: {analytics.total_bookmarks}",
        f"- Total skills: {analytics.total_skills}",
        f"- Average score: {analytics.average_score}",
        "",
        "## Level breakdown",
        *(f"- {level}: {n}" for level, n in analytics.level_breakdown.items()),
    ]
    sections = [
        ("Top skills", analytics.top_skills, True),
        ("Emerging (recent activity)", analytics.emerging_skills, False),
        ("Neglected (no recent activity)", analytics.neglected_skills, False),
    ]
    for title, skills, with_score in sections:
        if skills:
            out += ["", f"## {title}"]
            out += [
                f"- {s.name} ({s.score})" if with_score else f"- {s.name}" for s in skills[:5]
            ]
    return "\n".join(out) + "\n"


def render_html(md_text: str, title: str = "Skill Profile") -> str:
    body = markdown.markdown(md_text, extensions=["tables", "fenced_code"], output_format="html")
    return _HTML_TEMPLATE.format(title=title, body=body)


# ── Export ────────────────────────────────────────────────────────────────


def format_agent_compiler(skills: list[Skill], bookmark_count: int, now: datetime) -> dict[str, Any]:
    """Flat snake_case export consumed by agent tooling."""
    return {
        "version": _EXPORT_VERSION,
        "exported_at": now.isoformat(),
        "source": _EXPORT_SOURCE,
        "bookmark_count": bookmark_count,
        "skill_count": len(skills),
        "skills": [
            {
                "skill": s.name,
                "level": s.level.value,
                "confidence": s.confidence,
                "score": s.score,
                "evidence_quality": s.evidence_quality,
                "evidence": [
                    e.model_dump(include={"url", "title", "author", "domain", "relevance", "quality"})
                    for e in s.evidence
                ],
                "capability_tags": s.capability_tags,
                "keywords": s.top_keywords,
                "suggested_queries": s.suggested_queries,
                "parent_skill": s.parent_skill_id,
                "child_skills": s.child_skill_ids,
                "related_skills": s.related_skill_ids,
                "bookmark_count": s.bookmark_count,
                "authors": s.authors,
                "domains": s.top_domains,
                "date_range": {
                    "earliest": s.date_range.earliest.isoformat(),
                    "latest": s.date_range.latest.isoformat(),
                },
                "actionable": s.actionable.model_dump() if s.actionable else None,
            }
            for s in skills
        ],
    }
