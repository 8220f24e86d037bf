"""Keyword discovery over the skill catalog."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable

from skillreg.models.skill import PublishedSkill
from skillreg.registry.catalog import SkillCatalog


@dataclass
class DiscoveryResult:
    """Result of a discovery query."""

    skills: list[PublishedSkill] = field(default_factory=list)
    total: int = 0
    query: str = ""

    def to_dict(self) -> dict:
        return {
            "skills": [s.to_dict() for s in self.skills],
            "total": self.total,
            "query": self.query,
        }


def matches(record: PublishedSkill, needle: str) -> bool:
    """Case-insensitive substring match on name, tags, and skill name/category.

    ``needle`` must already be lower-cased.
    """
    manifest = record.manifest
    if needle in manifest.name.lower():
        return True
    if any(needle in tag.lower() for tag in manifest.tags):
        return True
    return any(
        needle in skill.category.lower() or needle in skill.name.lower()
        for skill in manifest.skills
    )


class DiscoveryEngine:
    """Evaluates free-text queries against a catalog.

    An empty (or whitespace-only) query matches every record.
    """

    def __init__(self, catalog: SkillCatalog) -> None:
        self.catalog = catalog

    def discover(self, query: str) -> DiscoveryResult:
        needle = (query or "").strip().lower()
        records = self.catalog.list_all()
        if needle:
            records = [r for r in records if matches(r, needle)]
        return DiscoveryResult(skills=records, total=len(records), query=query or "")


def filter_published(
    records: Iterable[PublishedSkill],
    category: str | None = None,
    tag: str | None = None,
) -> list[PublishedSkill]:
    """Exact, case-insensitive category and tag filters.

    ``tag`` matches either manifest-level tags or any skill's tags.
    """
    results = list(records)

    if category:
        cat = category.lower()
        results = [
            r for r in results
            if any(s.category.lower() == cat for s in r.manifest.skills)
        ]

    if tag:
        t = tag.lower()
        results = [
            r for r in results
            if any(mt.lower() == t for mt in r.manifest.tags)
            or any(st.lower() == t for s in r.manifest.skills for st in s.tags)
        ]

    return results


def paginate(records: list[PublishedSkill], limit: int, offset: int = 0) -> list[PublishedSkill]:
    offset = max(offset, 0)
    if limit < 0:
        return records[offset:]
    return records[offset:offset + limit]
