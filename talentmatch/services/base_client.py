"""
Shared httpx plumbing for the profile and job service clients.
"""

from typing import Any, Dict, Optional

import httpx

from talentmatch.core.monitoring.correlation_tracker import get_current_correlation_id
from talentmatch.utils.error_handling import ServiceError
from talentmatch.utils.logger import logger


def unwrap_payload(body: Any) -> Any:
    """Services answer either with the bare document or with ``{"data": ...}``."""
    if isinstance(body, dict) and "data" in body:
        return body["data"]
    return body


class ServiceHttpClient:
    """Thin wrapper around ``httpx.AsyncClient`` for one upstream service."""

    service_name = "service"
    error_code = ""

    def __init__(
        self,
        base_url: str,
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.transport = transport

    def _headers(self) -> Dict[str, str]:
        correlation_id = get_current_correlation_id()
        return {"X-Correlation-ID": correlation_id} if correlation_id else {}

    async def get_json(self, path: str, params: Optional[Dict[str, Any]] = None) -> Optional[Any]:
        """
        GET ``path`` and return the unwrapped JSON payload.

        Returns None on 404. Raises ServiceError on transport errors, other
        non-2xx statuses and undecodable bodies.
        """
        try:
            async with httpx.AsyncClient(
                base_url=self.base_url, timeout=self.timeout, transport=self.transport
            ) as cl:
                resp = await cl.get(path, params=params, headers=self._headers())
        except httpx.RequestError as req_err:
            logger.error(f"[{self.service_name}] request error on GET {path}: {req_err}")
            raise ServiceError(
                f"{self.service_name} is unreachable",
                service_name=self.service_name,
                error_code=self.error_code,
                original_error=req_err,
            ) from req_err

        if resp.status_code == 404:
            return None
        if not resp.is_success:
            logger.warning(
                f"[{self.service_name}] GET {path} failed ({resp.status_code}): {resp.text[:200]}"
            )
            raise ServiceError(
                f"{self.service_name} returned status {resp.status_code}",
                service_name=self.service_name,
                error_code=self.error_code,
            )

        try:
            return unwrap_payload(resp.json())
        except ValueError as json_err:
            logger.error(
                f"[{self.service_name}] GET {path} returned invalid JSON: {json_err}. "
                f"Response text: {resp.text[:200]}"
            )
            raise ServiceError(
                f"{self.service_name} returned an invalid response",
                service_name=self.service_name,
                error_code=self.error_code,
                original_error=json_err,
            ) from json_err
