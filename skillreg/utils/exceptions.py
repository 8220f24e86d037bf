"""Exception hierarchy for the skill registry."""

from __future__ import annotations


class SkillRegistryError(Exception):
    """Base exception for the skill registry."""


class InvalidManifestError(SkillRegistryError):
    def __init__(self, errors: list[str]):
        self.errors = list(errors)
        super().__init__(f"Invalid skill manifest: {'; '.join(self.errors)}")


class LedgerLookupError(SkillRegistryError):
    """The ledger could not be queried (as opposed to the entry being absent)."""


class GatewayUnavailable(SkillRegistryError):
    def __init__(self, operation: str, detail: str):
        self.operation = operation
        self.detail = detail
        super().__init__(f"Broker gateway unavailable during {operation}: {detail}")


class PublishJobFailed(SkillRegistryError):
    def __init__(self, job_id: str, reason: str):
        self.job_id = job_id
        self.reason = reason
        super().__init__(f"Publish job {job_id} failed: {reason}")


class PollTimeout(SkillRegistryError):
    def __init__(self, attempt_id: str, timeout_ms: int):
        self.attempt_id = attempt_id
        self.timeout_ms = timeout_ms
        super().__init__(f"Job {attempt_id} did not complete within {timeout_ms}ms")
