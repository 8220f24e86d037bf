"""Registry — the catalog and discovery layer for skill manifests.

The registry provides:
- Validation: structural and semantic checks on candidate manifests
- Addressing: deterministic ledger-style topic ids per (name, version)
- Cataloging: in-memory, insertion-ordered upsert store
- Discovery: keyword search over names, tags, and skill categories
- Orchestration: broker mirroring and on-chain resolution with local fallback
"""
