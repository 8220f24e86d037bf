"""Broker gateway — remote registry service used as a mirror and search source.

The registry depends only on the ``BrokerGateway`` protocol. The bundled
``HttpBrokerGateway`` talks to a REST broker over httpx; base URL and
credential headers are injected by the caller.
"""

from __future__ import annotations

import base64
import json
import logging
from dataclasses import dataclass
from typing import Any, Protocol

import httpx

from skillreg.broker.jobs import JobState, Pending, Resolved
from skillreg.models.skill import SkillManifest
from skillreg.utils.exceptions import GatewayUnavailable, PublishJobFailed

logger = logging.getLogger(__name__)

DEFAULT_BROKER_URL = "https://hol.org/registry/api/v1"


@dataclass
class SkillFilter:
    """Filter understood by the broker's skill listing."""

    query: str = ""
    category: str = ""
    tag: str = ""
    limit: int = 20
    featured: bool = False

    def to_params(self) -> dict[str, Any]:
        params: dict[str, Any] = {"limit": self.limit}
        if self.query:
            params["name"] = self.query
        if self.category:
            params["category"] = self.category
        if self.tag:
            params["tag"] = self.tag
        if self.featured:
            params["featured"] = "true"
        return params


@dataclass
class PublishQuote:
    quote_id: str
    cost: float = 0.0


@dataclass
class PublishJob:
    job_id: str


class BrokerGateway(Protocol):
    base_url: str

    async def list_skills(self, skill_filter: SkillFilter) -> dict[str, list[dict]]:
        ...

    async def quote_publish(self, manifest: SkillManifest) -> PublishQuote:
        ...

    async def publish(self, manifest: SkillManifest, quote_id: str) -> PublishJob:
        ...

    async def job_state(self, job_id: str) -> JobState:
        ...


def render_skill_markdown(manifest: SkillManifest) -> str:
    """Human-readable SKILL.md shipped next to skill.json."""
    lines = [f"# {manifest.name}", "", manifest.description, "", "## Skills", ""]
    for skill in manifest.skills:
        lines.append(f"- **{skill.name}** ({skill.category}): {skill.description}")
    if manifest.tags:
        lines.extend(["", f"Tags: {', '.join(manifest.tags)}"])
    lines.extend(["", "## License", "", manifest.license, ""])
    return "\n".join(lines)


def package_files(manifest: SkillManifest) -> list[dict[str, str]]:
    """Encode the manifest as the broker's file list."""
    skill_json = json.dumps(manifest.to_dict(), indent=2) + "\n"
    return [
        {
            "name": "skill.json",
            "base64": base64.b64encode(skill_json.encode("utf-8")).decode("ascii"),
            "mimeType": "application/json",
            "role": "skill-json",
        },
        {
            "name": "SKILL.md",
            "base64": base64.b64encode(render_skill_markdown(manifest).encode("utf-8")).decode("ascii"),
            "mimeType": "text/markdown",
            "role": "skill-md",
        },
    ]


class HttpBrokerGateway:
    """REST client for the remote skill broker.

    Every transport, status, or decoding failure is raised as
    ``GatewayUnavailable`` so callers handle a single failure type.
    """

    def __init__(
        self,
        base_url: str = DEFAULT_BROKER_URL,
        account_id: str = "",
        headers: dict[str, str] | None = None,
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.account_id = account_id
        self.headers = dict(headers or {})
        self.timeout = timeout
        self._transport = transport

    async def _request(self, operation: str, method: str, path: str, **kwargs: Any) -> Any:
        try:
            async with httpx.AsyncClient(
                base_url=self.base_url,
                headers=self.headers,
                timeout=self.timeout,
                transport=self._transport,
            ) as client:
                resp = await client.request(method, path, **kwargs)
                resp.raise_for_status()
                return resp.json()
        except httpx.HTTPStatusError as exc:
            raise GatewayUnavailable(
                operation, f"HTTP {exc.response.status_code}: {exc.response.text[:200]}"
            ) from exc
        except httpx.RequestError as exc:
            raise GatewayUnavailable(operation, f"request failed: {exc}") from exc
        except ValueError as exc:
            raise GatewayUnavailable(operation, "malformed response body") from exc

    async def list_skills(self, skill_filter: SkillFilter) -> dict[str, list[dict]]:
        data = await self._request("list_skills", "GET", "/skills", params=skill_filter.to_params())
        if isinstance(data, dict):
            data = data.get("skills", data.get("results", []))
        if not isinstance(data, list):
            raise GatewayUnavailable("list_skills", "unexpected response shape")
        return {"skills": [s for s in data if isinstance(s, dict)]}

    async def quote_publish(self, manifest: SkillManifest) -> PublishQuote:
        data = await self._request(
            "quote_publish",
            "POST",
            "/skills/quote",
            json={"files": package_files(manifest), "accountId": self.account_id},
        )
        if not isinstance(data, dict) or not data.get("quoteId"):
            raise GatewayUnavailable("quote_publish", "response has no quoteId")
        return PublishQuote(quote_id=str(data["quoteId"]), cost=float(data.get("credits", 0) or 0))

    async def publish(self, manifest: SkillManifest, quote_id: str) -> PublishJob:
        data = await self._request(
            "publish",
            "POST",
            "/skills/publish",
            json={"files": package_files(manifest), "quoteId": quote_id, "accountId": self.account_id},
        )
        if not isinstance(data, dict) or not data.get("jobId"):
            raise GatewayUnavailable("publish", "response has no jobId")
        return PublishJob(job_id=str(data["jobId"]))

    async def job_state(self, job_id: str) -> JobState:
        data = await self._request(
            "job_state",
            "GET",
            f"/skills/jobs/{job_id}",
            params={"accountId": self.account_id},
        )
        if not isinstance(data, dict):
            raise GatewayUnavailable("job_state", "unexpected response shape")

        status = str(data.get("status", "pending"))
        if status == "completed":
            return Resolved(result=data)
        if status == "failed":
            raise PublishJobFailed(job_id, str(data.get("failureReason") or "unknown reason"))
        return Pending(attempt_id=job_id, status=status)
