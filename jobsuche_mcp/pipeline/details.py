"""Detail fetcher: bounded, best-effort fan-out of per-reference detail lookups.

Takes the first ``limit`` reference numbers (upstream rank order: earlier
results are preferred), looks each one up independently, and returns the
successes in input order. A failed lookup is logged and left out; it never
affects its siblings and never fails the call.
"""

import asyncio
import logging
from collections.abc import Sequence

from pydantic import BaseModel, ConfigDict

from jobsuche_mcp.core.errors import UpstreamError
from jobsuche_mcp.core.schemas import JobDetails
from jobsuche_mcp.pipeline.projector import project_detail
from jobsuche_mcp.platforms.base import JobsucheClient

logger = logging.getLogger(__name__)


class DetailOutcome(BaseModel):
    """Result of one lookup: ``detail`` on success, ``error`` on failure."""

    model_config = ConfigDict(frozen=True)

    reference_number: str
    detail: JobDetails | None = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.detail is not None


async def fetch_detail(client: JobsucheClient, reference_number: str) -> JobDetails:
    """Look up and project one posting. Errors propagate (single-item call)."""
    record = await client.job_details(reference_number)
    return project_detail(reference_number, record)


async def fetch_detail_outcomes(
    client: JobsucheClient,
    reference_numbers: Sequence[str],
    limit: int,
    *,
    concurrency: int = 1,
) -> list[DetailOutcome]:
    """Look up the first ``limit`` references, one tagged outcome per reference.

    With ``concurrency > 1`` lookups overlap, bounded by a semaphore that
    never admits more than ``limit`` at once. Output order always matches
    input order.
    """
    selected = list(reference_numbers[: max(0, limit)])
    if not selected:
        return []

    if concurrency <= 1:
        return [await _lookup(client, ref) for ref in selected]

    semaphore = asyncio.Semaphore(min(concurrency, len(selected)))

    async def _bounded(ref: str) -> DetailOutcome:
        async with semaphore:
            return await _lookup(client, ref)

    return list(await asyncio.gather(*(_bounded(ref) for ref in selected)))


async def fetch_details(
    client: JobsucheClient,
    reference_numbers: Sequence[str],
    limit: int,
    *,
    concurrency: int = 1,
) -> list[JobDetails]:
    """Successful details for the first ``limit`` references, in input order.

    Returning fewer than ``limit`` items is normal: failures are dropped.
    """
    outcomes = await fetch_detail_outcomes(
        client, reference_numbers, limit, concurrency=concurrency,
    )
    return [o.detail for o in outcomes if o.detail is not None]


async def _lookup(client: JobsucheClient, reference_number: str) -> DetailOutcome:
    try:
        detail = await fetch_detail(client, reference_number)
    except UpstreamError as e:
        logger.info("Failed to fetch details for %s: %s", reference_number, e)
        return DetailOutcome(reference_number=reference_number, error=str(e))
    except Exception as e:
        logger.warning(
            "Unexpected error fetching details for %s", reference_number, exc_info=True,
        )
        return DetailOutcome(reference_number=reference_number, error=str(e) or type(e).__name__)
    return DetailOutcome(reference_number=reference_number, detail=detail)
