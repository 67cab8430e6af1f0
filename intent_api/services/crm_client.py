"""
CRM push-back of scoring results.

One upsert per request; non-2xx responses and transport errors fail the
request. Retrying is left to the caller.
"""

import logging
from collections.abc import Mapping

import httpx

from intent_api.config import settings
from intent_api.errors import CollaboratorError
from intent_api.schemas.classifier import ReadinessResult

logger = logging.getLogger(__name__)


def crm_fields_for(result: ReadinessResult, field_map: Mapping[str, str]) -> dict:
    """Map result attributes to CRM field names; attributes that are None are skipped."""
    values = result.model_dump()
    return {
        crm_field: values[attr]
        for attr, crm_field in field_map.items()
        if values.get(attr) is not None
    }


class CRMClient:
    def __init__(
        self,
        base_url: str,
        upsert_path: str = "/leads/upsert",
        api_key: str = "",
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.upsert_path = upsert_path
        self.api_key = api_key
        self.timeout = timeout
        self._transport = transport

    @classmethod
    def from_settings(cls) -> "CRMClient":
        return cls(
            base_url=settings.crm_base_url,
            upsert_path=settings.crm_upsert_path,
            api_key=settings.crm_api_key,
            timeout=settings.crm_timeout_seconds,
        )

    def _headers(self) -> dict:
        headers = {"Content-Type": "application/json"}
        if self.api_key:
            headers["Authorization"] = f"Bearer {self.api_key}"
        return headers

    async def upsert(self, lead_id: str, fields: Mapping) -> dict:
        url = f"{self.base_url}{self.upsert_path}"
        body = {"lead_id": lead_id, "fields": dict(fields)}
        async with httpx.AsyncClient(
            timeout=httpx.Timeout(self.timeout),
            headers=self._headers(),
            transport=self._transport,
        ) as client:
            try:
                r = await client.post(url, json=body)
            except httpx.HTTPError as e:
                raise CollaboratorError("CRM", f"{type(e).__name__}: {e}") from e

        if not r.is_success:
            raise CollaboratorError("CRM", f"HTTP {r.status_code}: {r.text}")

        logger.info("CRM updated lead %s (%d fields)", lead_id, len(body["fields"]))
        try:
            return r.json()
        except ValueError:
            return {}
