"""On-chain resolution of skill manifests anchored on a ledger topic.

The registry only depends on the ``OnChainResolver`` protocol. The bundled
``MirrorNodeResolver`` reads topic messages from a Hedera-style mirror node
REST API, where each message body is base64-encoded manifest JSON.
"""

from __future__ import annotations

import base64
import binascii
import json
import logging
from typing import Protocol

import httpx

from skillreg.models.skill import SkillManifest
from skillreg.registry.address import is_address
from skillreg.registry.validator import validate_manifest
from skillreg.utils.exceptions import LedgerLookupError

logger = logging.getLogger(__name__)

MIRROR_URLS: dict[str, str] = {
    "testnet": "https://testnet.mirrornode.hedera.com",
    "mainnet": "https://mainnet-public.mirrornode.hedera.com",
    "previewnet": "https://previewnet.mirrornode.hedera.com",
}


class OnChainResolver(Protocol):
    async def resolve(self, address: str, sequence_number: int) -> SkillManifest | None:
        """Return the manifest stored at (address, sequence), or None when absent.

        Raises LedgerLookupError when the ledger cannot be reached.
        """
        ...


class MirrorNodeResolver:
    """Resolve manifests from topic messages on a mirror node.

    Parameters
    ----------
    base_url : str
        Mirror node root, e.g. ``https://testnet.mirrornode.hedera.com``.
    timeout : float
        Per-request timeout in seconds.
    transport : httpx.AsyncBaseTransport | None
        Optional transport override (used by tests).
    """

    def __init__(
        self,
        base_url: str,
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._transport = transport

    async def resolve(self, address: str, sequence_number: int) -> SkillManifest | None:
        if not is_address(address) or sequence_number < 1:
            logger.debug("Skipping resolution of malformed reference %s#%s", address, sequence_number)
            return None

        url = f"{self.base_url}/api/v1/topics/{address}/messages/{sequence_number}"
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                resp = await client.get(url)
        except httpx.RequestError as exc:
            raise LedgerLookupError(f"Failed to reach mirror node: {exc}") from exc

        if resp.status_code == 404:
            logger.debug("No message at %s#%d", address, sequence_number)
            return None
        if resp.status_code >= 400:
            raise LedgerLookupError(f"Mirror node error {resp.status_code} for {address}#{sequence_number}")

        try:
            body = resp.json()
        except ValueError as exc:
            raise LedgerLookupError(f"Mirror node returned invalid JSON for {address}") from exc

        return _decode_manifest(body, address, sequence_number)


def _decode_manifest(body: object, address: str, sequence_number: int) -> SkillManifest | None:
    """Turn a topic-message body into a manifest, or None if it isn't one."""
    message = body.get("message") if isinstance(body, dict) else None
    if not isinstance(message, str):
        return None

    try:
        payload = json.loads(base64.b64decode(message, validate=True).decode("utf-8"))
    except (binascii.Error, UnicodeDecodeError, ValueError):
        logger.debug("Message at %s#%d is not JSON", address, sequence_number)
        return None

    result = validate_manifest(payload)
    if not result.valid:
        logger.debug("Message at %s#%d is not a valid manifest: %s", address, sequence_number, result.errors)
        return None

    return SkillManifest.from_dict(payload)
