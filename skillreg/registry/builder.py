"""Conversion of agent-side skills into publishable manifests."""

from __future__ import annotations

import copy
from typing import Iterable

from skillreg.models.skill import AgentSkill, SkillManifest


def build_manifest_from_skills(
    name: str,
    version: str,
    description: str,
    author: str,
    skills: Iterable[AgentSkill],
    tags: list[str] | None = None,
) -> SkillManifest:
    """Bundle agent skills into a manifest.

    The license defaults to MIT and the manifest-level price is taken from
    the first priced skill. When ``tags`` is omitted, the skills' tags are
    merged in first-seen order.
    """
    skills = list(skills)
    definitions = [s.to_definition() for s in skills]

    if tags is None:
        tags = []
        for skill in skills:
            for tag in skill.tags:
                if tag not in tags:
                    tags.append(tag)

    pricing = next((s.pricing for s in skills if s.pricing is not None), None)

    return SkillManifest(
        name=name,
        version=version,
        description=description,
        author=author,
        license="MIT",
        skills=definitions,
        tags=list(tags),
        pricing=copy.copy(pricing),
    )
