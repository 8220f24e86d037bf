"""Deterministic ledger-style addresses for (name, version) pairs."""

from __future__ import annotations

import hashlib
import json
import re
from typing import Any

ADDRESS_PATTERN = re.compile(r"^0\.0\.[1-9]\d*$")

# Keeps n within a signed 64-bit range, as ledger entity numbers are.
_ADDRESS_SPACE = 2**63 - 1


def derive_address(name: str, version: str) -> str:
    """Return the topic id for a manifest version.

    SHA-256 over a JSON-encoded pair, so ``("a@b", "c")`` and ``("a", "b@c")``
    never share input bytes.
    """
    payload = json.dumps([name, version], ensure_ascii=False).encode("utf-8")
    digest = hashlib.sha256(payload).digest()
    n = int.from_bytes(digest[:8], "big") % _ADDRESS_SPACE + 1
    return f"0.0.{n}"


def is_address(value: Any) -> bool:
    return isinstance(value, str) and ADDRESS_PATTERN.match(value) is not None
