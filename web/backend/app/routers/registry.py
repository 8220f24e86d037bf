"""Registry router -- status of the catalog and its external collaborators."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from skillreg.config import RegistryConfig
from skillreg.registry.service import SkillRegistry

from web.backend.app.deps import get_config, get_registry
from web.backend.app.models.api import RegistryStatusResponse

router = APIRouter(prefix="/api/registry", tags=["registry"])


@router.get(
    "/status",
    response_model=RegistryStatusResponse,
    summary="Registry status",
)
async def registry_status(
    registry: SkillRegistry = Depends(get_registry),
    config: RegistryConfig = Depends(get_config),
):
    """Report the catalog size and which collaborators are configured."""
    return RegistryStatusResponse(
        publisher=registry.publisher,
        network=config.network,
        published_count=registry.published_count(),
        broker_url=registry.broker_url,
        broker_configured=registry.gateway is not None,
        on_chain_resolver=registry.has_on_chain_client,
    )
