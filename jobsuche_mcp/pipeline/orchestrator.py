"""Orchestrator: wires query builder, API client, projector and detail fetcher.

Data flow for one search:
  1. Query builder → upstream query (page size clamped)
  2. API client search (one round trip, no retry)
  3. Projector → summaries, upstream order kept
  4. Optional: detail fetcher over the top N summaries, then field filter

A batch runs its searches one after another. A failed search is recorded in
its own result slot and the batch moves on.
"""

import logging
import time

from jobsuche_mcp.core.context import ServerContext
from jobsuche_mcp.core.schemas import (
    BatchSearchItem,
    BatchSearchItemResult,
    BatchSearchJobsParams,
    BatchSearchJobsResult,
    FieldFilter,
    JobDetails,
    SearchJobsParams,
    SearchJobsResult,
    SearchJobsWithDetailsParams,
    SearchJobsWithDetailsResult,
)
from jobsuche_mcp.pipeline.details import fetch_detail, fetch_details
from jobsuche_mcp.pipeline.projector import apply_field_filter, project_summary
from jobsuche_mcp.platforms.arbeitsagentur.query import build_query

logger = logging.getLogger(__name__)

DEFAULT_MAX_DETAILS = 5
MAX_DETAILS = 20

DEFAULT_DETAILS_PER_SEARCH = 3
MAX_DETAILS_PER_SEARCH = 10
MAX_BATCH_SEARCHES = 10


async def run_search(ctx: ServerContext, params: SearchJobsParams) -> SearchJobsResult:
    """Run one search end to end. Upstream errors propagate to the caller."""
    query = build_query(params, ctx.api)
    logger.info("Searching jobs: %s", query.to_params())

    started = time.perf_counter()
    response = await ctx.client.search(query)
    duration_ms = _elapsed_ms(started)

    jobs = [project_summary(record) for record in response.stellenangebote]
    logger.info("Search completed: %d jobs found in %d ms", len(jobs), duration_ms)

    return SearchJobsResult(
        total_results=response.max_ergebnisse,
        current_page=response.page,
        page_size=response.size,
        jobs_count=len(jobs),
        jobs=jobs,
        search_duration_ms=duration_ms,
    )


async def get_job_details(ctx: ServerContext, reference_number: str) -> JobDetails:
    """Fetch one posting. Errors propagate (single-item call)."""
    logger.info("Getting job details for: %s", reference_number)
    detail = await fetch_detail(ctx.client, reference_number)
    logger.info("Job details retrieved for %s", reference_number)
    return detail


async def run_search_with_details(
    ctx: ServerContext,
    params: SearchJobsWithDetailsParams,
) -> SearchJobsWithDetailsResult:
    """Search, then expand the top ``max_details`` hits (default 5, max 20).

    The search phase and the detail phase are timed separately.
    """
    search_started = time.perf_counter()
    search_result = await run_search(ctx, params.search_params())
    search_duration_ms = _elapsed_ms(search_started)

    max_details = clamp_count(params.max_details, DEFAULT_MAX_DETAILS, MAX_DETAILS)
    refs = [job.reference_number for job in search_result.jobs]
    logger.info("Fetching details for %d jobs", min(max_details, len(refs)))

    details_started = time.perf_counter()
    details = await fetch_details(
        ctx.client, refs, max_details, concurrency=ctx.detail_concurrency,
    )
    details_duration_ms = _elapsed_ms(details_started)

    jobs = _filter_all(details, params.fields)
    logger.info(
        "Search completed: %d jobs found, %d details fetched",
        search_result.total_results or 0, len(jobs),
    )

    return SearchJobsWithDetailsResult(
        total_results=search_result.total_results,
        current_page=search_result.current_page,
        page_size=search_result.page_size,
        jobs_count=len(jobs),
        jobs=jobs,
        search_duration_ms=search_duration_ms,
        details_duration_ms=details_duration_ms,
    )


async def run_batch_search(
    ctx: ServerContext,
    params: BatchSearchJobsParams,
) -> BatchSearchJobsResult:
    """Run up to 10 named searches, each with up to 10 expanded details.

    Extra searches are dropped, not rejected. Results come back in input
    order, failed searches included in place.
    """
    items = params.searches[:MAX_BATCH_SEARCHES]
    if len(params.searches) > MAX_BATCH_SEARCHES:
        logger.warning(
            "Batch has %d searches, only the first %d run",
            len(params.searches), MAX_BATCH_SEARCHES,
        )
    max_details = clamp_count(
        params.max_details_per_search, DEFAULT_DETAILS_PER_SEARCH, MAX_DETAILS_PER_SEARCH,
    )
    logger.info("Performing batch search with %d searches", len(items))

    started = time.perf_counter()
    results: list[BatchSearchItemResult] = []
    for item in items:
        results.append(await _run_batch_item(ctx, item, max_details, params.fields))
    duration_ms = _elapsed_ms(started)

    failed = sum(1 for r in results if r.error is not None)
    logger.info(
        "Batch search completed: %d searches (%d failed) in %d ms",
        len(results), failed, duration_ms,
    )

    return BatchSearchJobsResult(
        searches_count=len(results),
        results=results,
        total_duration_ms=duration_ms,
    )


def clamp_count(requested: int | None, default: int, cap: int) -> int:
    """Requested count (or default), silently limited to ``[0, cap]``."""
    value = requested if requested is not None else default
    return max(0, min(value, cap))


async def _run_batch_item(
    ctx: ServerContext,
    item: BatchSearchItem,
    max_details: int,
    fields: FieldFilter | None,
) -> BatchSearchItemResult:
    logger.info("Processing search: %s", item.name)

    # Only as many hits as will be expanded; the page size floor is 1.
    search_params = item.search_params(page_size=max(max_details, 1))
    try:
        search_result = await run_search(ctx, search_params)
    except Exception as e:
        logger.info("Search '%s' failed: %s", item.name, e)
        return BatchSearchItemResult(
            search_name=item.name,
            error=f"Search failed: {e}",
        )

    refs = [job.reference_number for job in search_result.jobs]
    details = await fetch_details(
        ctx.client, refs, max_details, concurrency=ctx.detail_concurrency,
    )
    jobs = _filter_all(details, fields)

    return BatchSearchItemResult(
        search_name=item.name,
        total_results=search_result.total_results,
        jobs_count=len(jobs),
        jobs=jobs,
    )


def _filter_all(details: list[JobDetails], fields: FieldFilter | None) -> list[JobDetails]:
    return [apply_field_filter(d, fields) for d in details]


def _elapsed_ms(started: float) -> int:
    return int((time.perf_counter() - started) * 1000)
