"""Built-in manifests describing the marketplace's own skills."""

from __future__ import annotations

import logging

from skillreg.models.skill import PublishedSkill
from skillreg.registry.service import SkillRegistry

logger = logging.getLogger(__name__)

MARKETPLACE_MANIFESTS: list[dict] = [
    {
        "name": "marketplace-search",
        "version": "1.0.0",
        "description": "Search and discover AI agents by skill, category, or reputation in the agent marketplace",
        "author": "Agent Marketplace",
        "license": "MIT",
        "skills": [
            {
                "name": "marketplace-search",
                "description": "Full-text search across registered agents, skills, and categories",
                "category": "discovery",
                "tags": ["search", "discovery", "marketplace", "agents"],
                "input_schema": {
                    "type": "object",
                    "properties": {
                        "q": {"type": "string"},
                        "category": {"type": "string"},
                        "limit": {"type": "number"},
                    },
                },
                "output_schema": {
                    "type": "object",
                    "properties": {"agents": {"type": "array"}, "total": {"type": "number"}},
                },
            }
        ],
        "tags": ["marketplace", "discovery", "hcs-26"],
    },
    {
        "name": "agent-chat",
        "version": "1.0.0",
        "description": "Interactive chat with AI agents over topic-based messaging",
        "author": "Agent Marketplace",
        "license": "MIT",
        "skills": [
            {
                "name": "agent-chat",
                "description": "Real-time conversational interaction with registered agents",
                "category": "communication",
                "tags": ["chat", "messaging", "agents", "real-time"],
                "input_schema": {
                    "type": "object",
                    "properties": {
                        "agent_id": {"type": "string"},
                        "message": {"type": "string"},
                        "session_id": {"type": "string"},
                    },
                },
                "output_schema": {
                    "type": "object",
                    "properties": {"response": {"type": "string"}, "session_id": {"type": "string"}},
                },
            }
        ],
        "tags": ["chat", "communication", "hcs-10"],
    },
]


def seed_marketplace_skills(registry: SkillRegistry) -> list[PublishedSkill]:
    """Publish the built-in manifests; safe to call repeatedly."""
    published: list[PublishedSkill] = []
    for manifest in MARKETPLACE_MANIFESTS:
        published.append(registry.publish(manifest))
    logger.info("Seeded %d marketplace skills", len(published))
    return published
