"""skillreg — a skill registry for agent marketplaces.

Validates skill manifests, assigns them deterministic ledger-style
addresses, and indexes them for keyword discovery.
"""

__version__ = "0.1.0"
