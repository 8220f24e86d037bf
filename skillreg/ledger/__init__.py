"""Ledger integration — resolving manifests anchored on immutable topics."""
