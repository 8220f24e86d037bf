"""Manifest validator — structural and semantic checks for skill manifests.

Every rule runs independently and all violations are collected, in rule
order, so a caller always sees the complete list. The validator accepts
anything (dataclass manifests, parsed JSON, or garbage) and never raises.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Any

from skillreg.models.skill import SkillDefinition, SkillManifest

# Semantic Versioning 2.0.0
SEMVER_PATTERN = re.compile(
    r"^(0|[1-9]\d*)\.(0|[1-9]\d*)\.(0|[1-9]\d*)"
    r"(?:-((?:0|[1-9]\d*|\d*[a-zA-Z-][0-9a-zA-Z-]*)(?:\.(?:0|[1-9]\d*|\d*[a-zA-Z-][0-9a-zA-Z-]*))*))?"
    r"(?:\+([0-9a-zA-Z-]+(?:\.[0-9a-zA-Z-]+)*))?$"
)

REQUIRED_SKILL_FIELDS = ("name", "description", "category")
SCHEMA_FIELDS = ("input_schema", "output_schema")


@dataclass
class ValidationResult:
    """Outcome of validating one candidate manifest."""

    errors: list[str] = field(default_factory=list)

    @property
    def valid(self) -> bool:
        return not self.errors

    def to_dict(self) -> dict:
        return {"valid": self.valid, "errors": list(self.errors)}


def is_semver(version: Any) -> bool:
    return isinstance(version, str) and SEMVER_PATTERN.match(version) is not None


def validate_manifest(manifest: Any) -> ValidationResult:
    """Validate a candidate skill manifest.

    Args:
        manifest: A SkillManifest, or a parsed dict in the manifest JSON shape.

    Returns:
        ValidationResult; ``valid`` is True exactly when ``errors`` is empty.
    """
    if isinstance(manifest, SkillManifest):
        data = _manifest_fields(manifest)
    elif isinstance(manifest, dict):
        data = manifest
    else:
        data = {}

    result = ValidationResult()

    if not _present(data.get("name")):
        result.errors.append("Missing name")

    if not _present(data.get("description")):
        result.errors.append("Missing description")

    skills = data.get("skills")
    if not isinstance(skills, list) or not skills:
        result.errors.append("Must have at least one skill definition")

    version = data.get("version")
    if not is_semver(version):
        shown = version if isinstance(version, str) else ""
        result.errors.append(f"Invalid version '{shown}': must follow semver (MAJOR.MINOR.PATCH)")

    if isinstance(skills, list):
        for i, skill in enumerate(skills):
            result.errors.extend(_check_skill(i, skill))

    return result


def _manifest_fields(manifest: SkillManifest) -> dict:
    """Read the checked fields off a dataclass manifest without trusting its types.

    Entries of ``skills`` that are not SkillDefinition instances are mapped to
    None so they are reported as non-objects.
    """
    skills = getattr(manifest, "skills", None)
    if isinstance(skills, (list, tuple)):
        skills = [_skill_fields(s) if isinstance(s, SkillDefinition) else None for s in skills]
    return {
        "name": getattr(manifest, "name", None),
        "version": getattr(manifest, "version", None),
        "description": getattr(manifest, "description", None),
        "skills": skills,
    }


def _skill_fields(skill: SkillDefinition) -> dict:
    return {name: getattr(skill, name, None) for name in REQUIRED_SKILL_FIELDS + SCHEMA_FIELDS}


def _present(value: Any) -> bool:
    return isinstance(value, str) and bool(value.strip())


def _check_skill(index: int, skill: Any) -> list[str]:
    prefix = f"skills[{index}]"
    if not isinstance(skill, dict):
        return [f"{prefix}: must be an object"]

    issues: list[str] = []
    for field_name in REQUIRED_SKILL_FIELDS:
        if not _present(skill.get(field_name)):
            issues.append(f"{prefix}: Missing {field_name}")

    # Empty schemas are accepted; only the shape is enforced.
    for field_name in SCHEMA_FIELDS:
        if not isinstance(skill.get(field_name), dict):
            issues.append(f"{prefix}: {field_name} must be an object")

    return issues
