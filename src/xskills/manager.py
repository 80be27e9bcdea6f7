"""User customisations for skills, kept in a small YAML file.

The file looks like::

    ignored_keywords: [thread, today]
    custom_names:
      github.com: Open Source
    custom_tags:
      rust: [systems, wasm]
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field

from xskills.models import Skill

logger = logging.getLogger(__name__)


class SkillCustomizations(BaseModel):
    ignored_keywords: list[str] = Field(default_factory=list)
    custom_names: dict[str, str] = Field(default_factory=dict)
    custom_tags: dict[str, list[str]] = Field(default_factory=dict)


class SkillManager:
    """Load, edit and save :class:`SkillCustomizations` at *path*."""

    def __init__(self, path: Path) -> None:
        self._path = path
        self.settings = self._load()

    # ── public ──────────────────────────────────────────────────────────

    def add_ignored_keyword(self, keyword: str) -> None:
        keyword = keyword.strip().lower()
        if keyword and keyword not in self.settings.ignored_keywords:
            self.settings.ignored_keywords.append(keyword)
            self.save()

    def remove_ignored_keyword(self, keyword: str) -> None:
        keyword = keyword.strip().lower()
        self.settings.ignored_keywords = [
            k for k in self.settings.ignored_keywords if k != keyword
        ]
        self.save()

    def set_custom_name(self, skill_id: str, name: str) -> None:
        self.settings.custom_names[skill_id] = name
        self.save()

    def add_custom_tags(self, skill_id: str, tags: list[str]) -> None:
        existing = self.settings.custom_tags.get(skill_id, [])
        self.settings.custom_tags[skill_id] = list(dict.fromkeys([*existing, *tags]))
        self.save()

    def reset(self) -> None:
        self.settings = SkillCustomizations()
        self.save()

    def apply(self, skills: list[Skill]) -> list[Skill]:
        """Overlay custom names and tags onto freshly built skills (in place)."""
        for skill in skills:
            name = self.settings.custom_names.get(skill.id)
            if name:
                skill.name = name
            tags = self.settings.custom_tags.get(skill.id)
            if tags:
                skill.capability_tags = list(dict.fromkeys([*skill.capability_tags, *tags]))
        return skills

    def save(self) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        with open(self._path, "w") as fh:
            yaml.safe_dump(self.settings.model_dump(), fh, sort_keys=False)

    # ── private ─────────────────────────────────────────────────────────

    def _load(self) -> SkillCustomizations:
        if not self._path.exists():
            return SkillCustomizations()
        with open(self._path) as fh:
            raw: dict[str, Any] | None = yaml.safe_load(fh)
        return SkillCustomizations.model_validate(raw or {})
