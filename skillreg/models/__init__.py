"""Data models for skill manifests and catalog records."""

from skillreg.models.skill import (
    AgentSkill,
    PublishedSkill,
    SkillDefinition,
    SkillManifest,
    SkillPricing,
    SkillStatus,
)

__all__ = [
    "AgentSkill",
    "PublishedSkill",
    "SkillDefinition",
    "SkillManifest",
    "SkillPricing",
    "SkillStatus",
]
