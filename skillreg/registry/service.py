"""Skill registry service — the catalog plus its external collaborators.

One explicitly constructed ``SkillRegistry`` is shared by every caller. It
owns the local catalog and discovery engine and optionally holds an
on-chain resolver and a broker gateway. The local path is always
authoritative: broker failures degrade searches and mirrors to local
results, never to errors.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Iterable

from skillreg.broker.gateway import BrokerGateway, HttpBrokerGateway, SkillFilter
from skillreg.broker.jobs import poll_until_resolved
from skillreg.broker.outcome import attempt
from skillreg.config import RegistryConfig
from skillreg.ledger.resolver import MirrorNodeResolver, OnChainResolver
from skillreg.models.skill import AgentSkill, PublishedSkill, SkillManifest
from skillreg.registry.builder import build_manifest_from_skills
from skillreg.registry.catalog import SkillCatalog
from skillreg.registry.discovery import DiscoveryEngine, DiscoveryResult, filter_published, paginate
from skillreg.registry.validator import ValidationResult, validate_manifest
from skillreg.utils.exceptions import InvalidManifestError, PollTimeout, PublishJobFailed

logger = logging.getLogger(__name__)

SEARCH_SOURCES = ("local", "broker", "hybrid")


@dataclass
class SkillSearchResult:
    """Search response, labelled with where its data came from.

    ``skills`` holds only local catalog records and ``broker_skills`` the raw
    broker entries. ``total`` counts both, so for a ``hybrid`` result it is
    ``len(skills) + len(broker_skills)`` rather than ``len(skills)``.
    """

    source: str  # local | registry-broker | hybrid
    query: str = ""
    skills: list[PublishedSkill] = field(default_factory=list)
    total: int = 0
    broker_skills: list[dict[str, Any]] = field(default_factory=list)


@dataclass
class MirrorPublishResult:
    """Outcome of mirroring a manifest to the broker."""

    status: str  # unavailable | quoted | published | failed | timeout
    quote_id: str = ""
    cost: float = 0.0
    job_id: str = ""
    detail: str = ""
    result: dict[str, Any] = field(default_factory=dict)


class SkillRegistry:
    """Facade over the catalog, discovery, ledger resolver, and broker.

    Parameters
    ----------
    publisher : str
        Account identity recorded on every locally published skill.
    resolver : OnChainResolver | None
        Ledger lookup; on-chain resolution returns None when absent.
    gateway : BrokerGateway | None
        Remote broker; searches and mirrors fall back to local when absent.
    """

    def __init__(
        self,
        publisher: str,
        resolver: OnChainResolver | None = None,
        gateway: BrokerGateway | None = None,
        poll_interval_ms: int = 4000,
        poll_timeout_ms: int = 300_000,
    ) -> None:
        self.publisher = publisher
        self.resolver = resolver
        self.gateway = gateway
        self.poll_interval_ms = poll_interval_ms
        self.poll_timeout_ms = poll_timeout_ms
        self.catalog = SkillCatalog()
        self.discovery = DiscoveryEngine(self.catalog)

    # -- lifecycle -----------------------------------------------------------

    def reset(self) -> None:
        """Drop every published record by starting from an empty catalog."""
        self.catalog = SkillCatalog()
        self.discovery = DiscoveryEngine(self.catalog)

    @property
    def has_on_chain_client(self) -> bool:
        return self.resolver is not None

    @property
    def broker_url(self) -> str:
        return self.gateway.base_url if self.gateway is not None else ""

    # -- local catalog -------------------------------------------------------

    def validate_manifest(self, manifest: Any) -> ValidationResult:
        return validate_manifest(manifest)

    def publish(self, manifest: SkillManifest | dict[str, Any]) -> PublishedSkill:
        """Publish into the local catalog; raises InvalidManifestError."""
        return self.catalog.upsert(manifest, self.publisher)

    def get_by_topic(self, topic_id: str) -> PublishedSkill | None:
        return self.catalog.get_by_address(topic_id)

    def list_published(self) -> list[PublishedSkill]:
        return self.catalog.list_all()

    def published_count(self) -> int:
        return self.catalog.count()

    def discover(self, query: str) -> DiscoveryResult:
        return self.discovery.discover(query)

    def build_manifest_from_skills(
        self,
        name: str,
        version: str,
        description: str,
        author: str,
        skills: Iterable[AgentSkill],
        tags: list[str] | None = None,
    ) -> SkillManifest:
        return build_manifest_from_skills(name, version, description, author, skills, tags)

    # -- ledger --------------------------------------------------------------

    async def resolve_on_chain(self, address: str, sequence_number: int = 1) -> SkillManifest | None:
        """Look up a manifest published directly to the ledger.

        Returns None when no resolver is configured or nothing is found;
        LedgerLookupError from the resolver propagates.
        """
        if self.resolver is None:
            return None
        return await self.resolver.resolve(address, sequence_number)

    # -- broker orchestration ------------------------------------------------

    def _local_search(self, query: str, category: str, tag: str, limit: int) -> SkillSearchResult:
        found = self.discovery.discover(query).skills
        found = paginate(filter_published(found, category=category, tag=tag), limit)
        return SkillSearchResult(source="local", query=query, skills=found, total=len(found))

    async def search(
        self,
        query: str = "",
        category: str = "",
        tag: str = "",
        limit: int = 20,
        featured: bool = False,
        source: str = "hybrid",
    ) -> SkillSearchResult:
        """Search the broker and/or the local catalog.

        ``source`` is one of ``local``, ``broker``, or ``hybrid``. Anything
        the broker cannot answer is served from the local catalog.
        """
        if source not in SEARCH_SOURCES:
            raise ValueError(f"Unknown search source '{source}'. Must be one of: {SEARCH_SOURCES}")

        if source != "local" and self.gateway is not None:
            skill_filter = SkillFilter(query=query, category=category, tag=tag, limit=limit, featured=featured)
            outcome = await attempt("list_skills", self.gateway.list_skills, skill_filter)

            if outcome.ok:
                broker_skills = outcome.value.get("skills", [])
                if source == "broker" or broker_skills:
                    if source == "hybrid":
                        local = self._local_search(query, category, tag, limit)
                        return SkillSearchResult(
                            source="hybrid",
                            query=query,
                            skills=local.skills,
                            total=local.total + len(broker_skills),
                            broker_skills=broker_skills,
                        )
                    return SkillSearchResult(
                        source="registry-broker",
                        query=query,
                        total=len(broker_skills),
                        broker_skills=broker_skills,
                    )
            else:
                logger.warning("Falling back to local skill search: %s", outcome.error)

        return self._local_search(query, category, tag, limit)

    async def mirror_publish(
        self,
        manifest: SkillManifest | dict[str, Any],
        quote_only: bool = False,
    ) -> MirrorPublishResult:
        """Quote, publish, and await a broker job for ``manifest``.

        Validation failures raise InvalidManifestError before any remote
        call. Broker failures are reported through the result status.
        """
        result = validate_manifest(manifest)
        if not result.valid:
            raise InvalidManifestError(result.errors)
        if not isinstance(manifest, SkillManifest):
            manifest = SkillManifest.from_dict(manifest)

        if self.gateway is None:
            return MirrorPublishResult(status="unavailable", detail="No broker gateway configured")
        gateway = self.gateway

        quote = await attempt("quote_publish", gateway.quote_publish, manifest)
        if not quote.ok:
            return MirrorPublishResult(status="unavailable", detail=quote.error.detail)

        quote_id, cost = quote.value.quote_id, quote.value.cost
        if quote_only:
            return MirrorPublishResult(status="quoted", quote_id=quote_id, cost=cost)

        job = await attempt("publish", gateway.publish, manifest, quote_id)
        if not job.ok:
            return MirrorPublishResult(status="unavailable", quote_id=quote_id, cost=cost, detail=job.error.detail)

        job_id = job.value.job_id
        logger.info("Broker accepted %s as job %s", manifest.qualified_id, job_id)

        try:
            resolved = await poll_until_resolved(
                lambda: gateway.job_state(job_id),
                attempt_id=job_id,
                interval_ms=self.poll_interval_ms,
                timeout_ms=self.poll_timeout_ms,
            )
        except PublishJobFailed as exc:
            return MirrorPublishResult(status="failed", quote_id=quote_id, cost=cost, job_id=job_id, detail=exc.reason)
        except PollTimeout as exc:
            return MirrorPublishResult(status="timeout", quote_id=quote_id, cost=cost, job_id=job_id, detail=str(exc))
        except Exception as exc:  # gateway went away mid-poll
            logger.warning("Polling job %s failed: %s", job_id, exc)
            return MirrorPublishResult(status="unavailable", quote_id=quote_id, cost=cost, job_id=job_id, detail=str(exc))

        return MirrorPublishResult(
            status="published",
            quote_id=quote_id,
            cost=cost,
            job_id=job_id,
            result=resolved.result,
        )


def build_registry(config: RegistryConfig) -> SkillRegistry:
    """Wire a registry and its collaborators from configuration."""
    gateway = None
    if config.broker_url:
        gateway = HttpBrokerGateway(
            base_url=config.broker_url,
            account_id=config.account_id,
            headers=config.broker_headers,
            timeout=config.http_timeout,
        )

    resolver = None
    if config.mirror_url:
        resolver = MirrorNodeResolver(config.mirror_url, timeout=config.http_timeout)

    return SkillRegistry(
        publisher=config.account_id,
        resolver=resolver,
        gateway=gateway,
        poll_interval_ms=config.poll_interval_ms,
        poll_timeout_ms=config.poll_timeout_ms,
    )
