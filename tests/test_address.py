"""Tests for deterministic topic addresses."""

import re

from skillreg.registry.address import derive_address, is_address


def test_address_format():
    addr = derive_address("skill-a", "1.0.0")
    assert re.match(r"^0\.0\.[1-9]\d*$", addr)
    assert is_address(addr)


def test_idempotent():
    assert derive_address("skill-a", "1.0.0") == derive_address("skill-a", "1.0.0")


def test_distinct_versions():
    versions = ["1.0.0", "1.0.1", "1.1.0", "2.0.0", "2.0.0-beta", "2.0.0+build.1"]
    addresses = {derive_address("skill-a", v) for v in versions}
    assert len(addresses) == len(versions)


def test_distinct_names():
    assert derive_address("skill-a", "1.0.0") != derive_address("skill-b", "1.0.0")


def test_pair_encoding_is_unambiguous():
    assert derive_address("a@b", "c") != derive_address("a", "b@c")


def test_is_address_rejects_malformed():
    for value in ["", "0.0.0", "0.0.-1", "1.0.5", "0.0.abc", "0.0.12x", None, 123, "0.0.012"]:
        assert not is_address(value), value
