"""Shared fixtures: an in-memory JobsucheClient and a ready ServerContext."""

from collections.abc import Callable
from typing import Any

import pytest

from jobsuche_mcp.core.config import ApiConfig
from jobsuche_mcp.core.context import ServerContext
from jobsuche_mcp.core.errors import UpstreamError
from jobsuche_mcp.platforms.arbeitsagentur.models import (
    Arbeitsort,
    Stellenangebot,
    UpstreamJobDetails,
    UpstreamQuery,
    UpstreamSearchResponse,
)
from jobsuche_mcp.platforms.base import JobsucheClient


def make_record(refnr: str, *, titel: str | None = None, ort: str | None = "Berlin") -> Stellenangebot:
    return Stellenangebot(
        refnr=refnr,
        beruf="Softwareentwickler/in",
        titel=titel if titel is not None else f"Job {refnr}",
        arbeitgeber="Beispiel GmbH",
        arbeitsort=Arbeitsort(ort=ort, plz="10115"),
    )


class FakeClient(JobsucheClient):
    """Serves a fixed result list; selected searches or references fail.

    ``failing_queries`` matches on the free-text ``was`` of a query.
    Every call is recorded for assertions.
    """

    def __init__(
        self,
        records: list[Stellenangebot] | None = None,
        *,
        failing_refs: set[str] | None = None,
        failing_queries: set[str] | None = None,
        search_error: Exception | None = None,
        total: int | None = None,
    ) -> None:
        self._records = records if records is not None else [
            make_record(f"REF-{i}") for i in range(1, 31)
        ]
        self._failing_refs = failing_refs or set()
        self._failing_queries = failing_queries or set()
        self._search_error = search_error
        self._total = total
        self.queries: list[UpstreamQuery] = []
        self.detail_calls: list[str] = []

    async def search(self, query: UpstreamQuery) -> UpstreamSearchResponse:
        self.queries.append(query)
        if self._search_error is not None:
            raise self._search_error
        if query.was is not None and query.was in self._failing_queries:
            msg = f"HTTP 503 for query '{query.was}'"
            raise UpstreamError(msg)
        hits = self._records[: query.size]
        return UpstreamSearchResponse(
            stellenangebote=hits,
            max_ergebnisse=self._total if self._total is not None else len(self._records),
            page=query.page or 1,
            size=query.size,
        )

    async def job_details(self, reference_number: str) -> UpstreamJobDetails:
        self.detail_calls.append(reference_number)
        if reference_number in self._failing_refs:
            msg = f"HTTP 404 for {reference_number}"
            raise UpstreamError(msg)
        return UpstreamJobDetails(
            titel=f"Job {reference_number}",
            stellenbeschreibung=f"Description of {reference_number}",
            arbeitgeber="Beispiel GmbH",
            verguetung="50.000 EUR",
            arbeitszeit_vollzeit=True,
            quereinstieg_geeignet=True,
        )


@pytest.fixture
def api_config() -> ApiConfig:
    return ApiConfig(default_page_size=25, max_page_size=100)


@pytest.fixture
def make_client() -> Callable[..., FakeClient]:
    def _make(*args: Any, **kwargs: Any) -> FakeClient:
        return FakeClient(*args, **kwargs)

    return _make


@pytest.fixture
def make_ctx(api_config: ApiConfig) -> Callable[..., ServerContext]:
    def _make(client: JobsucheClient, *, detail_concurrency: int = 1) -> ServerContext:
        return ServerContext(client=client, api=api_config, detail_concurrency=detail_concurrency)

    return _make
