"""Tests for the registry facade: broker fallback, mirroring, and wiring."""

import asyncio

import pytest

from skillreg.broker.gateway import HttpBrokerGateway, PublishJob, PublishQuote
from skillreg.broker.jobs import Pending, Resolved
from skillreg.config import RegistryConfig
from skillreg.ledger.resolver import MirrorNodeResolver
from skillreg.models.skill import AgentSkill, SkillManifest
from skillreg.registry.seed import MARKETPLACE_MANIFESTS, seed_marketplace_skills
from skillreg.registry.service import SkillRegistry, build_registry
from skillreg.utils.exceptions import GatewayUnavailable, InvalidManifestError, PublishJobFailed

PUBLISHER = "0.0.7854018"


def _manifest(name: str = "agent-finder") -> dict:
    return {
        "name": name,
        "version": "1.0.0",
        "description": "Find agents",
        "skills": [{"name": "find", "description": "d", "category": "discovery", "input_schema": {}, "output_schema": {}}],
        "tags": ["search"],
    }


class FakeGateway:
    """In-memory broker with scripted responses."""

    base_url = "https://broker.test"

    def __init__(self, skills=None, fail=(), states=None):
        self.skills = skills if skills is not None else []
        self.fail = set(fail)
        self.states = list(states or [Resolved({"status": "completed"})])
        self.calls: list[str] = []

    def _maybe_fail(self, operation):
        self.calls.append(operation)
        if operation in self.fail:
            raise GatewayUnavailable(operation, "scripted failure")

    async def list_skills(self, skill_filter):
        self._maybe_fail("list_skills")
        return {"skills": list(self.skills)}

    async def quote_publish(self, manifest):
        self._maybe_fail("quote_publish")
        return PublishQuote(quote_id="q-1", cost=3.0)

    async def publish(self, manifest, quote_id):
        self._maybe_fail("publish")
        return PublishJob(job_id="job-1")

    async def job_state(self, job_id):
        self._maybe_fail("job_state")
        state = self.states.pop(0)
        if isinstance(state, Exception):
            raise state
        return state


class StubResolver:
    def __init__(self, manifest=None):
        self.manifest = manifest
        self.calls = []

    async def resolve(self, address, sequence_number):
        self.calls.append((address, sequence_number))
        return self.manifest


def _registry(gateway=None, resolver=None, **kwargs) -> SkillRegistry:
    registry = SkillRegistry(PUBLISHER, resolver=resolver, gateway=gateway, poll_interval_ms=1, **kwargs)
    registry.publish(_manifest())
    return registry


# -- search ------------------------------------------------------------------


def test_local_search_without_gateway():
    result = asyncio.run(_registry().search("finder", source="hybrid"))
    assert result.source == "local"
    assert [r.manifest.name for r in result.skills] == ["agent-finder"]
    assert result.total == 1


def test_hybrid_search_merges_broker_results():
    gateway = FakeGateway(skills=[{"name": "remote-1"}, {"name": "remote-2"}])
    result = asyncio.run(_registry(gateway).search("finder", source="hybrid"))
    assert result.source == "hybrid"
    assert len(result.skills) == 1
    assert result.broker_skills == [{"name": "remote-1"}, {"name": "remote-2"}]
    assert result.total == 3
    assert result.total == len(result.skills) + len(result.broker_skills)


def test_broker_search_reports_broker_source():
    gateway = FakeGateway(skills=[{"name": "remote"}])
    result = asyncio.run(_registry(gateway).search("x", source="broker"))
    assert result.source == "registry-broker"
    assert result.skills == []
    assert result.total == 1


def test_broker_search_with_no_results_is_still_broker():
    result = asyncio.run(_registry(FakeGateway()).search("x", source="broker"))
    assert result.source == "registry-broker"
    assert result.total == 0


def test_empty_hybrid_broker_falls_back_to_local():
    result = asyncio.run(_registry(FakeGateway()).search("finder", source="hybrid"))
    assert result.source == "local"
    assert result.total == 1


def test_broker_failure_falls_back_to_local():
    gateway = FakeGateway(fail={"list_skills"})
    result = asyncio.run(_registry(gateway).search("finder", source="broker"))
    assert result.source == "local"
    assert result.total == 1


def test_local_source_never_calls_broker():
    gateway = FakeGateway(skills=[{"name": "remote"}])
    result = asyncio.run(_registry(gateway).search("", source="local"))
    assert result.source == "local"
    assert gateway.calls == []


def test_local_search_applies_filters_and_limit():
    registry = _registry()
    registry.publish(_manifest("agent-other"))
    assert asyncio.run(registry.search("agent", category="discovery", limit=1, source="local")).total == 1
    assert asyncio.run(registry.search("agent", category="nope", source="local")).total == 0


def test_unknown_source_rejected():
    with pytest.raises(ValueError, match="Unknown search source"):
        asyncio.run(_registry().search("x", source="everywhere"))


# -- mirror publish ----------------------------------------------------------


def test_mirror_publish_success():
    gateway = FakeGateway(states=[Pending("job-1"), Resolved({"status": "completed", "topicId": "0.0.9"})])
    result = asyncio.run(_registry(gateway).mirror_publish(_manifest()))
    assert result.status == "published"
    assert result.quote_id == "q-1"
    assert result.cost == 3.0
    assert result.job_id == "job-1"
    assert result.result["topicId"] == "0.0.9"
    assert gateway.calls == ["quote_publish", "publish", "job_state", "job_state"]


def test_mirror_publish_quote_only():
    gateway = FakeGateway()
    result = asyncio.run(_registry(gateway).mirror_publish(_manifest(), quote_only=True))
    assert result.status == "quoted"
    assert gateway.calls == ["quote_publish"]


def test_mirror_publish_without_gateway():
    result = asyncio.run(_registry().mirror_publish(SkillManifest.from_dict(_manifest())))
    assert result.status == "unavailable"


@pytest.mark.parametrize("failing", ["quote_publish", "publish", "job_state"])
def test_mirror_publish_gateway_failures(failing):
    result = asyncio.run(_registry(FakeGateway(fail={failing})).mirror_publish(_manifest()))
    assert result.status == "unavailable"


def test_mirror_publish_failed_job():
    gateway = FakeGateway(states=[PublishJobFailed("job-1", "duplicate skill")])
    result = asyncio.run(_registry(gateway).mirror_publish(_manifest()))
    assert result.status == "failed"
    assert result.detail == "duplicate skill"


def test_mirror_publish_timeout():
    gateway = FakeGateway(states=[Pending("job-1")] * 50)
    registry = _registry(gateway, poll_timeout_ms=0)
    result = asyncio.run(registry.mirror_publish(_manifest()))
    assert result.status == "timeout"
    assert result.job_id == "job-1"


def test_mirror_publish_rejects_invalid_manifest_before_remote_calls():
    gateway = FakeGateway()
    with pytest.raises(InvalidManifestError):
        asyncio.run(_registry(gateway).mirror_publish({"name": "x"}))
    assert gateway.calls == []


# -- ledger and lifecycle ----------------------------------------------------


def test_resolve_on_chain_without_resolver():
    assert asyncio.run(_registry().resolve_on_chain("0.0.5")) is None


def test_resolve_on_chain_delegates():
    manifest = SkillManifest.from_dict(_manifest("chain"))
    resolver = StubResolver(manifest)
    registry = _registry(resolver=resolver)
    assert registry.has_on_chain_client
    assert asyncio.run(registry.resolve_on_chain("0.0.5", 2)) is manifest
    assert resolver.calls == [("0.0.5", 2)]


def test_reset_clears_catalog():
    registry = _registry()
    assert registry.published_count() == 1
    registry.reset()
    assert registry.published_count() == 0
    assert registry.discover("").total == 0


def test_facade_lookups():
    registry = _registry()
    record = registry.list_published()[0]
    assert registry.get_by_topic(record.topic_id) == record
    assert record.publisher == PUBLISHER
    assert not registry.validate_manifest({}).valid
    built = registry.build_manifest_from_skills("m", "1.0.0", "d", "a", [AgentSkill(id="1", name="s")])
    assert built.skills[0].name == "s"


def test_broker_url():
    assert _registry().broker_url == ""
    assert _registry(FakeGateway()).broker_url == "https://broker.test"


def test_build_registry_wires_collaborators(monkeypatch):
    monkeypatch.delenv("HEDERA_ACCOUNT_ID", raising=False)
    config = RegistryConfig(account_id="0.0.42", broker_url="https://b.test", mirror_url="https://m.test")
    registry = build_registry(config)
    assert registry.publisher == "0.0.42"
    assert isinstance(registry.gateway, HttpBrokerGateway)
    assert isinstance(registry.resolver, MirrorNodeResolver)


def test_build_registry_offline():
    registry = build_registry(RegistryConfig(broker_url="", mirror_url=""))
    assert registry.gateway is None
    assert not registry.has_on_chain_client


def test_seed_is_idempotent():
    registry = SkillRegistry(PUBLISHER)
    first = seed_marketplace_skills(registry)
    second = seed_marketplace_skills(registry)
    assert len(first) == len(MARKETPLACE_MANIFESTS)
    assert [r.topic_id for r in first] == [r.topic_id for r in second]
    assert registry.published_count() == len(MARKETPLACE_MANIFESTS)
    assert registry.discover("chat").total == 1
