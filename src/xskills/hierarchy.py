"""Infer parent/child and related links between skills from shared keywords."""

from __future__ import annotations

import logging
import math
from collections import defaultdict

from xskills.models import Skill

logger = logging.getLogger(__name__)

_MIN_SHARED_FRACTION = 0.5


def _find_parent(skill: Skill, index: dict[str, list[Skill]]) -> Skill | None:
    """First skill that is broader than *skill* and covers half its keywords."""
    keywords = skill.top_keywords
    parent_keys = keywords[: math.ceil(len(keywords) / 2)]

    for key in parent_keys:
        for candidate in index.get(key, []):
            if candidate.id == skill.id or len(candidate.top_keywords) <= len(keywords):
                continue
            shared = sum(1 for k in keywords if k in candidate.top_keywords)
            if shared >= len(keywords) * _MIN_SHARED_FRACTION:
                return candidate
    return None


def build_skill_hierarchy(skills: list[Skill]) -> list[Skill]:
    """Fill ``parent_skill_id``, ``child_skill_ids`` and ``related_skill_ids``.

    Mutates and returns *skills*. A single pass: the first qualifying parent
    wins, not the best one. Every skill left without a parent is marked
    related to every other parentless skill.
    """
    index: dict[str, list[Skill]] = defaultdict(list)
    for skill in skills:
        for kw in skill.top_keywords:
            index[kw].append(skill)

    for skill in skills:
        parent = _find_parent(skill, index)
        if parent is None:
            continue
        skill.parent_skill_id = parent.id
        if skill.id not in parent.child_skill_ids:
            parent.child_skill_ids.append(skill.id)

    roots = [s for s in skills if s.parent_skill_id is None]
    for skill in roots:
        for other in roots:
            if other.id != skill.id and other.id not in skill.related_skill_ids:
                skill.related_skill_ids.append(other.id)

    logger.info(
        "Hierarchy: %d skills, %d with a parent",
        len(skills),
        len(skills) - len(roots),
    )
    return skills
