"""FastAPI dependencies exposing the application's registry instance."""

from __future__ import annotations

from fastapi import Request

from skillreg.config import RegistryConfig
from skillreg.registry.service import SkillRegistry


def get_registry(request: Request) -> SkillRegistry:
    """Return the registry created by ``create_app``."""
    return request.app.state.registry


def get_config(request: Request) -> RegistryConfig:
    return request.app.state.config
