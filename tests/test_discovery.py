"""Tests for keyword discovery over the catalog."""

from skillreg.registry.catalog import SkillCatalog
from skillreg.registry.discovery import DiscoveryEngine, filter_published, paginate

PUBLISHER = "0.0.1001"


def _manifest(name: str = "test-skill", tags=None, skills=None, version: str = "1.0.0") -> dict:
    return {
        "name": name,
        "version": version,
        "description": "A test skill",
        "skills": skills
        or [
            {
                "name": "discover",
                "description": "Discover AI agents by capability",
                "category": "marketplace",
                "tags": ["discovery", "search"],
                "input_schema": {"query": "string"},
                "output_schema": {"agents": "array"},
            }
        ],
        "tags": tags if tags is not None else ["test"],
    }


def _engine(*manifests) -> DiscoveryEngine:
    catalog = SkillCatalog()
    for m in manifests:
        catalog.upsert(m, PUBLISHER)
    return DiscoveryEngine(catalog)


def test_finds_by_name():
    engine = _engine(_manifest(name="agent-finder"), _manifest(name="other", tags=[]))
    result = engine.discover("finder")
    assert result.total >= 1
    assert "agent-finder" in [r.manifest.name for r in result.skills]


def test_finds_by_name_case_insensitive():
    engine = _engine(_manifest(name="Agent-Finder"))
    assert engine.discover("FINDER").total == 1


def test_finds_by_tag():
    engine = _engine(_manifest(tags=["hedera", "blockchain"]))
    result = engine.discover("blockchain")
    assert result.total == 1


def test_finds_by_skill_category():
    engine = _engine(_manifest())
    assert engine.discover("marketplace").total == 1


def test_finds_by_skill_name():
    engine = _engine(_manifest(name="bundle", tags=[]))
    assert engine.discover("discov").total == 1


def test_description_is_not_searched():
    engine = _engine(_manifest(name="bundle", tags=[]))
    assert engine.discover("capability").total == 0


def test_skill_level_tags_are_not_searched():
    engine = _engine(_manifest(name="bundle", tags=[]))
    assert engine.discover("search").total == 0


def test_no_match():
    engine = _engine(_manifest())
    result = engine.discover("zz-nonexistent-zz")
    assert result.total == 0
    assert result.skills == []
    assert result.query == "zz-nonexistent-zz"


def test_empty_query_matches_everything():
    engine = _engine(_manifest(name="a"), _manifest(name="b"))
    assert engine.discover("").total == 2
    assert engine.discover("   ").total == 2


def test_results_in_insertion_order():
    engine = _engine(
        _manifest(name="zeta-agent"),
        _manifest(name="alpha-agent"),
        _manifest(name="mid-agent"),
    )
    result = engine.discover("agent")
    assert [r.manifest.name for r in result.skills] == ["zeta-agent", "alpha-agent", "mid-agent"]
    assert result.total == len(result.skills)


def test_discovery_envelope():
    engine = _engine(_manifest())
    data = engine.discover("test").to_dict()
    assert set(data) == {"skills", "total", "query"}
    assert data["total"] == 1
    assert data["skills"][0]["manifest"]["name"] == "test-skill"


def test_filter_by_category_and_tag():
    chat = _manifest(
        name="agent-chat",
        tags=["chat"],
        skills=[{"name": "chat", "description": "d", "category": "Communication",
                 "tags": ["real-time"], "input_schema": {}, "output_schema": {}}],
    )
    catalog = SkillCatalog()
    catalog.upsert(_manifest(), PUBLISHER)
    catalog.upsert(chat, PUBLISHER)
    records = catalog.list_all()

    assert [r.manifest.name for r in filter_published(records, category="communication")] == ["agent-chat"]
    assert [r.manifest.name for r in filter_published(records, tag="REAL-TIME")] == ["agent-chat"]
    assert [r.manifest.name for r in filter_published(records, tag="test")] == ["test-skill"]
    assert filter_published(records, category="commun") == []
    assert len(filter_published(records)) == 2


def test_paginate():
    catalog = SkillCatalog()
    for i in range(5):
        catalog.upsert(_manifest(version=f"1.0.{i}"), PUBLISHER)
    records = catalog.list_all()
    assert [r.manifest.version for r in paginate(records, 2, 1)] == ["1.0.1", "1.0.2"]
    assert paginate(records, 10, 4) == records[4:]
    assert paginate(records, 0) == []
