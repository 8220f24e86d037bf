"""Core data models for skill manifests and published catalog records.

Covers: pricing, individual skill definitions, the versioned manifest that
bundles them, the catalog's published record, and the simpler agent-side
skill representation that callers convert into manifests.
"""

from __future__ import annotations

import copy
from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class SkillStatus(Enum):
    """Lifecycle state of a catalog record."""

    PUBLISHED = "published"


def _str(value: Any) -> str:
    return value if isinstance(value, str) else ""


def _str_list(value: Any) -> list[str]:
    if not isinstance(value, (list, tuple)):
        return []
    return [v for v in value if isinstance(v, str)]


def _mapping(value: Any) -> dict:
    return dict(value) if isinstance(value, dict) else {}


# --- Pricing ---


@dataclass
class SkillPricing:
    """Price charged per unit of skill usage."""

    amount: float
    token: str
    unit: str

    def to_dict(self) -> dict:
        return {"amount": self.amount, "token": self.token, "unit": self.unit}

    @classmethod
    def from_dict(cls, data: Any) -> SkillPricing | None:
        if not isinstance(data, dict):
            return None
        amount = data.get("amount", 0)
        if isinstance(amount, bool) or not isinstance(amount, (int, float)):
            amount = 0
        return cls(amount=amount, token=_str(data.get("token")), unit=_str(data.get("unit")))


# --- Skill definition ---


@dataclass
class SkillDefinition:
    """One capability offered by a publisher."""

    name: str
    description: str = ""
    category: str = ""
    tags: list[str] = field(default_factory=list)
    input_schema: dict[str, Any] = field(default_factory=dict)
    output_schema: dict[str, Any] = field(default_factory=dict)
    pricing: SkillPricing | None = None

    def to_dict(self) -> dict:
        data = {
            "name": self.name,
            "description": self.description,
            "category": self.category,
            "tags": list(self.tags or []),
            "input_schema": copy.deepcopy(self.input_schema or {}),
            "output_schema": copy.deepcopy(self.output_schema or {}),
        }
        if self.pricing is not None:
            data["pricing"] = self.pricing.to_dict()
        return data

    @classmethod
    def from_dict(cls, data: Any) -> SkillDefinition:
        data = data if isinstance(data, dict) else {}
        return cls(
            name=_str(data.get("name")),
            description=_str(data.get("description")),
            category=_str(data.get("category")),
            tags=_str_list(data.get("tags")),
            input_schema=copy.deepcopy(_mapping(data.get("input_schema"))),
            output_schema=copy.deepcopy(_mapping(data.get("output_schema"))),
            pricing=SkillPricing.from_dict(data.get("pricing")),
        )


# --- Manifest ---


@dataclass
class SkillManifest:
    """A versioned bundle of skills published by one author."""

    name: str
    version: str
    description: str = ""
    author: str = ""
    license: str = "MIT"
    skills: list[SkillDefinition] = field(default_factory=list)
    tags: list[str] = field(default_factory=list)
    pricing: SkillPricing | None = None

    @property
    def qualified_id(self) -> str:
        return f"{self.name}@{self.version}"

    def to_dict(self) -> dict:
        data = {
            "name": self.name,
            "version": self.version,
            "description": self.description,
            "author": self.author,
            "license": self.license,
            "skills": [s.to_dict() for s in self.skills or [] if isinstance(s, SkillDefinition)],
            "tags": list(self.tags or []),
        }
        if self.pricing is not None:
            data["pricing"] = self.pricing.to_dict()
        return data

    @classmethod
    def from_dict(cls, data: Any) -> SkillManifest:
        """Build a manifest from parsed JSON/YAML.

        Tolerant of missing or mistyped fields; run the validator first when
        correctness matters.
        """
        data = data if isinstance(data, dict) else {}
        skills = data.get("skills")
        return cls(
            name=_str(data.get("name")),
            version=_str(data.get("version")),
            description=_str(data.get("description")),
            author=_str(data.get("author")),
            license=_str(data.get("license")) or "MIT",
            skills=[SkillDefinition.from_dict(s) for s in skills] if isinstance(skills, list) else [],
            tags=_str_list(data.get("tags")),
            pricing=SkillPricing.from_dict(data.get("pricing")),
        )


# --- Published record ---


@dataclass(frozen=True)
class PublishedSkill:
    """The catalog's stored record for one (name, version) address."""

    manifest: SkillManifest
    topic_id: str
    publisher: str
    published_at: str  # ISO 8601
    status: SkillStatus = SkillStatus.PUBLISHED

    def to_dict(self) -> dict:
        return {
            "manifest": self.manifest.to_dict(),
            "topic_id": self.topic_id,
            "publisher": self.publisher,
            "published_at": self.published_at,
            "status": self.status.value,
        }


# --- Agent-side skill ---


@dataclass
class AgentSkill:
    """Skill as advertised on an agent profile; convertible into a manifest."""

    id: str
    name: str
    description: str = ""
    category: str = ""
    tags: list[str] = field(default_factory=list)
    input_schema: dict[str, Any] = field(default_factory=dict)
    output_schema: dict[str, Any] = field(default_factory=dict)
    pricing: SkillPricing | None = None

    def to_definition(self) -> SkillDefinition:
        return SkillDefinition(
            name=self.name,
            description=self.description,
            category=self.category,
            tags=list(self.tags),
            input_schema=copy.deepcopy(self.input_schema),
            output_schema=copy.deepcopy(self.output_schema),
            pricing=copy.copy(self.pricing),
        )
