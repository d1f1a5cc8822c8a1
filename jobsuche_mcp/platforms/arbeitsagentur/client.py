"""HTTP binding of JobsucheClient for the Bundesagentur für Arbeit REST API.

Endpoints:
  GET {api_url}/pc/v4/jobs                         search
  GET {api_url}/pc/v4/jobdetails/{base64(refnr)}   one posting

No retries: a failed call surfaces as UpstreamError and the caller decides.
"""

import base64
import logging
from types import TracebackType
from typing import Any, TypeVar

import httpx
from pydantic import BaseModel, ValidationError

from jobsuche_mcp.core.config import ApiConfig
from jobsuche_mcp.core.errors import UpstreamDecodeError, UpstreamError
from jobsuche_mcp.platforms.arbeitsagentur.models import (
    UpstreamJobDetails,
    UpstreamQuery,
    UpstreamSearchResponse,
)
from jobsuche_mcp.platforms.base import JobsucheClient

logger = logging.getLogger(__name__)

# Public key published for the Jobsuche API; used when none is configured.
DEFAULT_API_KEY = "jobboerse-jobsuche"

SEARCH_PATH = "/pc/v4/jobs"
DETAILS_PATH = "/pc/v4/jobdetails/{encoded}"

_ModelT = TypeVar("_ModelT", bound=BaseModel)


def encode_reference_number(reference_number: str) -> str:
    """The detail endpoint expects the reference number base64-encoded."""
    return base64.b64encode(reference_number.encode("utf-8")).decode("ascii")


class ArbeitsagenturClient(JobsucheClient):
    """Async context manager that owns one ``httpx.AsyncClient``.

    Usage::

        async with ArbeitsagenturClient(settings.api) as client:
            response = await client.search(query)

    ``transport`` lets tests plug in ``httpx.MockTransport``.
    """

    def __init__(
        self,
        config: ApiConfig,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._config = config
        self._transport = transport
        self._http: httpx.AsyncClient | None = None

    @property
    def http(self) -> httpx.AsyncClient:
        if self._http is None:
            msg = "ArbeitsagenturClient not entered, use 'async with'"
            raise RuntimeError(msg)
        return self._http

    async def __aenter__(self) -> "ArbeitsagenturClient":
        if self._config.api_key:
            logger.info("Using custom API key")
        else:
            logger.info("Using default API credentials")
        self._http = httpx.AsyncClient(
            base_url=self._config.api_url,
            headers={
                "Accept": "application/json",
                "X-API-Key": self._config.api_key or DEFAULT_API_KEY,
            },
            timeout=self._config.timeout_s,
            transport=self._transport,
        )
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        if self._http is not None:
            await self._http.aclose()
            self._http = None

    async def search(self, query: UpstreamQuery) -> UpstreamSearchResponse:
        params = query.to_params()
        logger.debug("GET %s %s", SEARCH_PATH, params)
        data = await self._get_json(SEARCH_PATH, params=params)
        return _decode(UpstreamSearchResponse, data, "search response")

    async def job_details(self, reference_number: str) -> UpstreamJobDetails:
        path = DETAILS_PATH.format(encoded=encode_reference_number(reference_number))
        logger.debug("GET %s (refnr=%s)", path, reference_number)
        data = await self._get_json(path)
        return _decode(UpstreamJobDetails, data, f"job details for {reference_number}")

    async def _get_json(self, path: str, params: dict[str, str] | None = None) -> Any:
        try:
            response = await self.http.get(path, params=params)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            msg = f"HTTP {e.response.status_code} from {e.request.url.path}"
            raise UpstreamError(msg) from e
        except httpx.HTTPError as e:
            msg = f"Request to {path} failed: {e}"
            raise UpstreamError(msg) from e

        try:
            return response.json()
        except ValueError as e:
            msg = f"Response from {path} is not valid JSON: {e}"
            raise UpstreamDecodeError(msg) from e


def _decode(model: type[_ModelT], data: Any, what: str) -> _ModelT:
    try:
        return model.model_validate(data)
    except ValidationError as e:
        msg = f"Could not decode {what}: {e.error_count()} invalid field(s)"
        raise UpstreamDecodeError(msg) from e
