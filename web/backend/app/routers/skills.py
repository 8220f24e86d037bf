"""Skills router -- publish, list, search, and resolve skill manifests."""

from __future__ import annotations

from typing import Any, Optional

from fastapi import APIRouter, Body, Depends, HTTPException, Path, Query

from skillreg.models.skill import PublishedSkill
from skillreg.registry.address import ADDRESS_PATTERN
from skillreg.registry.discovery import filter_published, paginate
from skillreg.registry.service import SkillRegistry
from skillreg.utils.exceptions import InvalidManifestError, LedgerLookupError

from web.backend.app.deps import get_registry
from web.backend.app.models.api import (
    MirrorPublishResponse,
    OnChainSkillResponse,
    PublishedSkillResponse,
    RegistryInfo,
    SkillListResponse,
    SkillSearchResponse,
    ValidationResponse,
)

router = APIRouter(prefix="/api/skills", tags=["skills"])


def _record_to_response(record: PublishedSkill) -> PublishedSkillResponse:
    """Convert a PublishedSkill dataclass to a Pydantic response model."""
    return PublishedSkillResponse.model_validate(record.to_dict())


def _invalid_manifest(exc: InvalidManifestError) -> HTTPException:
    return HTTPException(
        status_code=400,
        detail={"error": "Invalid skill manifest", "errors": exc.errors},
    )


@router.get(
    "",
    response_model=SkillListResponse,
    summary="List published skills",
)
async def list_skills(
    category: Optional[str] = Query(None, description="Exact skill category"),
    tag: Optional[str] = Query(None, description="Manifest or skill tag"),
    limit: int = Query(50, ge=0, le=500),
    offset: int = Query(0, ge=0),
    registry: SkillRegistry = Depends(get_registry),
):
    """List every locally published skill, optionally filtered and paged."""
    records = filter_published(registry.list_published(), category=category, tag=tag)
    return SkillListResponse(
        skills=[_record_to_response(r) for r in paginate(records, limit, offset)],
        total=len(records),
        offset=offset,
        limit=limit,
        published_count=registry.published_count(),
        registry=RegistryInfo(broker_url=registry.broker_url),
    )


@router.get(
    "/search",
    response_model=SkillSearchResponse,
    summary="Search skills",
)
async def search_skills(
    q: str = Query("", description="Free-text query; empty matches everything"),
    category: Optional[str] = Query(None),
    tag: Optional[str] = Query(None),
    limit: int = Query(20, ge=1, le=200),
    featured: bool = Query(False),
    source: str = Query("hybrid", pattern="^(local|broker|hybrid)$"),
    registry: SkillRegistry = Depends(get_registry),
):
    """Search the broker with fallback to the local catalog.

    The ``source`` field of the response reports where results came from.
    """
    result = await registry.search(
        q,
        category=category or "",
        tag=tag or "",
        limit=limit,
        featured=featured,
        source=source,
    )
    return SkillSearchResponse(
        source=result.source,
        query=result.query,
        skills=[_record_to_response(r) for r in result.skills],
        total=result.total,
        broker_skills=result.broker_skills,
    )


@router.post(
    "/validate",
    response_model=ValidationResponse,
    summary="Validate a manifest",
)
async def validate_skill_manifest(
    manifest: dict[str, Any] = Body(...),
    registry: SkillRegistry = Depends(get_registry),
):
    """Validate a manifest without publishing it."""
    return ValidationResponse(**registry.validate_manifest(manifest).to_dict())


@router.post(
    "/publish",
    response_model=PublishedSkillResponse,
    status_code=201,
    summary="Publish a manifest",
)
async def publish_skill(
    manifest: dict[str, Any] = Body(...),
    registry: SkillRegistry = Depends(get_registry),
):
    """Publish a manifest into the local catalog.

    Re-publishing the same name and version returns the same topic id.
    """
    try:
        record = registry.publish(manifest)
    except InvalidManifestError as exc:
        raise _invalid_manifest(exc)
    return _record_to_response(record)


@router.post(
    "/publish/broker",
    response_model=MirrorPublishResponse,
    summary="Mirror a manifest to the broker",
)
async def publish_skill_to_broker(
    manifest: dict[str, Any] = Body(...),
    quote_only: bool = Query(False, description="Stop after obtaining a quote"),
    registry: SkillRegistry = Depends(get_registry),
):
    """Quote and publish a manifest on the remote broker.

    Broker failures are reported in ``status`` rather than as HTTP errors.
    """
    try:
        result = await registry.mirror_publish(manifest, quote_only=quote_only)
    except InvalidManifestError as exc:
        raise _invalid_manifest(exc)
    return MirrorPublishResponse(
        status=result.status,
        quote_id=result.quote_id,
        cost=result.cost,
        job_id=result.job_id,
        detail=result.detail,
        result=result.result,
    )


@router.get(
    "/onchain/{topic_id}",
    response_model=OnChainSkillResponse,
    summary="Resolve a manifest from the ledger",
)
async def get_onchain_skill(
    topic_id: str = Path(..., pattern=ADDRESS_PATTERN.pattern, description="Topic id (0.0.<n>)"),
    sequence: int = Query(1, ge=1, description="Topic message sequence number"),
    registry: SkillRegistry = Depends(get_registry),
):
    """Resolve a manifest published directly to a ledger topic."""
    try:
        manifest = await registry.resolve_on_chain(topic_id, sequence)
    except LedgerLookupError as exc:
        raise HTTPException(status_code=502, detail=str(exc))

    if manifest is None:
        raise HTTPException(
            status_code=404,
            detail=f"No skill manifest at {topic_id}#{sequence}",
        )
    return OnChainSkillResponse(
        topic_id=topic_id,
        sequence_number=sequence,
        manifest=manifest.to_dict(),
    )


@router.get(
    "/{topic_id}",
    response_model=PublishedSkillResponse,
    summary="Get a published skill",
)
async def get_skill(
    topic_id: str = Path(..., pattern=ADDRESS_PATTERN.pattern, description="Topic id (0.0.<n>)"),
    registry: SkillRegistry = Depends(get_registry),
):
    """Retrieve a published skill by its topic id."""
    record = registry.get_by_topic(topic_id)
    if record is None:
        raise HTTPException(status_code=404, detail=f"Skill '{topic_id}' not found")
    return _record_to_response(record)
