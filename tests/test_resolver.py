"""Tests for on-chain manifest resolution through a mirror node."""

import asyncio
import base64
import json

import httpx
import pytest

from skillreg.ledger.resolver import MirrorNodeResolver
from skillreg.utils.exceptions import LedgerLookupError

MIRROR = "https://mirror.test"

VALID = {
    "name": "onchain-skill",
    "version": "1.0.0",
    "description": "Anchored on a topic",
    "skills": [{"name": "s", "description": "d", "category": "c", "input_schema": {}, "output_schema": {}}],
}


def _message(payload) -> dict:
    raw = payload if isinstance(payload, bytes) else json.dumps(payload).encode()
    return {"sequence_number": 1, "message": base64.b64encode(raw).decode()}


def _resolver(handler) -> MirrorNodeResolver:
    return MirrorNodeResolver(MIRROR, transport=httpx.MockTransport(handler))


def test_resolves_valid_manifest():
    seen = []

    def handler(request):
        seen.append(request.url.path)
        return httpx.Response(200, json=_message(VALID))

    manifest = asyncio.run(_resolver(handler).resolve("0.0.4242", 3))

    assert manifest is not None
    assert manifest.name == "onchain-skill"
    assert manifest.skills[0].category == "c"
    assert seen == ["/api/v1/topics/0.0.4242/messages/3"]


def test_missing_message_returns_none():
    assert asyncio.run(_resolver(lambda r: httpx.Response(404)).resolve("0.0.1", 1)) is None


@pytest.mark.parametrize(
    "body",
    [
        _message({"name": "no-version"}),
        _message(b"not json at all"),
        {"message": "%%%not-base64%%%"},
        {"sequence_number": 1},
        ["unexpected"],
    ],
)
def test_non_manifest_payload_returns_none(body):
    assert asyncio.run(_resolver(lambda r: httpx.Response(200, json=body)).resolve("0.0.1", 1)) is None


@pytest.mark.parametrize("address,sequence", [("topic-1", 1), ("0.0.0", 1), ("0.0.5", 0)])
def test_malformed_reference_skips_lookup(address, sequence):
    def handler(request):
        raise AssertionError("mirror node should not be queried")

    assert asyncio.run(_resolver(handler).resolve(address, sequence)) is None


def test_server_error_raises():
    with pytest.raises(LedgerLookupError, match="500"):
        asyncio.run(_resolver(lambda r: httpx.Response(500)).resolve("0.0.1", 1))


def test_unreachable_mirror_raises():
    def handler(request):
        raise httpx.ConnectError("refused", request=request)

    with pytest.raises(LedgerLookupError, match="Failed to reach"):
        asyncio.run(_resolver(handler).resolve("0.0.1", 1))


def test_invalid_json_raises():
    with pytest.raises(LedgerLookupError, match="invalid JSON"):
        asyncio.run(_resolver(lambda r: httpx.Response(200, content=b"<html>")).resolve("0.0.1", 1))
