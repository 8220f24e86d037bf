"""In-memory skill catalog keyed by deterministic topic id."""

from __future__ import annotations

import logging
import threading
from datetime import datetime, timezone
from typing import Any

from skillreg.models.skill import PublishedSkill, SkillManifest, SkillStatus
from skillreg.registry.address import derive_address
from skillreg.registry.validator import validate_manifest
from skillreg.utils.exceptions import InvalidManifestError

logger = logging.getLogger(__name__)


class SkillCatalog:
    """Insertion-ordered store of published skills.

    Upserting the same (name, version) replaces the record in its original
    slot. The lock only guards the dict itself; records are frozen and
    built before the lock is taken.
    """

    def __init__(self) -> None:
        self._records: dict[str, PublishedSkill] = {}
        self._lock = threading.Lock()

    def upsert(self, manifest: SkillManifest | dict[str, Any], publisher: str) -> PublishedSkill:
        """Validate and store a manifest, returning the published record.

        Raises:
            InvalidManifestError: the manifest failed validation; nothing is stored.
        """
        result = validate_manifest(manifest)
        if not result.valid:
            raise InvalidManifestError(result.errors)

        if isinstance(manifest, SkillManifest):
            manifest = manifest.to_dict()
        stored = SkillManifest.from_dict(manifest)

        record = PublishedSkill(
            manifest=stored,
            topic_id=derive_address(stored.name, stored.version),
            publisher=publisher,
            published_at=datetime.now(timezone.utc).isoformat(),
            status=SkillStatus.PUBLISHED,
        )

        with self._lock:
            replaced = record.topic_id in self._records
            self._records[record.topic_id] = record

        logger.info(
            "%s %s at %s",
            "Republished" if replaced else "Published",
            stored.qualified_id,
            record.topic_id,
        )
        return record

    def get_by_address(self, topic_id: str) -> PublishedSkill | None:
        with self._lock:
            return self._records.get(topic_id)

    def list_all(self) -> list[PublishedSkill]:
        """All records, first-published first."""
        with self._lock:
            return list(self._records.values())

    def count(self) -> int:
        with self._lock:
            return len(self._records)
