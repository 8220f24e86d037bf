"""Pydantic models for API request/response serialization.

These models mirror the skillreg dataclasses and provide proper JSON
serialization for the FastAPI endpoints. Request bodies for manifests are
accepted as plain JSON objects so the registry's own validator can report
every violation, instead of the request being rejected field by field.
"""

from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, Field


# ---------------------------------------------------------------------------
# Manifest models
# ---------------------------------------------------------------------------


class SkillPricingModel(BaseModel):
    """Mirrors skillreg.models.skill.SkillPricing."""

    amount: float = 0.0
    token: str = ""
    unit: str = ""


class SkillDefinitionModel(BaseModel):
    """Mirrors skillreg.models.skill.SkillDefinition."""

    name: str
    description: str = ""
    category: str = ""
    tags: list[str] = Field(default_factory=list)
    input_schema: dict[str, Any] = Field(default_factory=dict)
    output_schema: dict[str, Any] = Field(default_factory=dict)
    pricing: Optional[SkillPricingModel] = None


class SkillManifestModel(BaseModel):
    """Mirrors skillreg.models.skill.SkillManifest."""

    name: str
    version: str
    description: str = ""
    author: str = ""
    license: str = "MIT"
    skills: list[SkillDefinitionModel] = Field(default_factory=list)
    tags: list[str] = Field(default_factory=list)
    pricing: Optional[SkillPricingModel] = None


class PublishedSkillResponse(BaseModel):
    """Mirrors skillreg.models.skill.PublishedSkill."""

    manifest: SkillManifestModel
    topic_id: str
    publisher: str
    published_at: str
    status: str = "published"


# ---------------------------------------------------------------------------
# Validation / discovery models
# ---------------------------------------------------------------------------


class ValidationResponse(BaseModel):
    """Mirrors skillreg.registry.validator.ValidationResult."""

    valid: bool
    errors: list[str] = Field(default_factory=list)


class RegistryInfo(BaseModel):
    broker_url: str = ""
    standard: str = "HCS-26"


class SkillListResponse(BaseModel):
    """Paged listing of the local catalog."""

    skills: list[PublishedSkillResponse] = Field(default_factory=list)
    total: int = 0
    offset: int = 0
    limit: int = 50
    published_count: int = 0
    registry: RegistryInfo = Field(default_factory=RegistryInfo)


class SkillSearchResponse(BaseModel):
    """Mirrors skillreg.registry.service.SkillSearchResult."""

    source: str
    query: str = ""
    skills: list[PublishedSkillResponse] = Field(default_factory=list)
    total: int = 0
    broker_skills: list[dict[str, Any]] = Field(default_factory=list)


# ---------------------------------------------------------------------------
# Broker / ledger models
# ---------------------------------------------------------------------------


class MirrorPublishResponse(BaseModel):
    """Mirrors skillreg.registry.service.MirrorPublishResult."""

    status: str
    quote_id: str = ""
    cost: float = 0.0
    job_id: str = ""
    detail: str = ""
    result: dict[str, Any] = Field(default_factory=dict)


class OnChainSkillResponse(BaseModel):
    topic_id: str
    sequence_number: int
    manifest: SkillManifestModel


class RegistryStatusResponse(BaseModel):
    publisher: str
    network: str = ""
    published_count: int = 0
    broker_url: str = ""
    broker_configured: bool = False
    on_chain_resolver: bool = False
