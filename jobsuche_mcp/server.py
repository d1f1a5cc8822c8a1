"""Tool surface: the five named operations a host (MCP, CLI, tests) can call.

Usage::

    async with ArbeitsagenturClient(settings.api) as client:
        server = JobsucheServer(ServerContext(client=client, api=settings.api))
        result = await server.call_tool("search_jobs", {"location": "Berlin"})

``call_tool`` takes and returns JSON-shaped dicts. Invalid arguments raise
pydantic ``ValidationError``; single-item tools let ``UpstreamError`` through;
multi-item tools report failures inside their result.
"""

import logging
from typing import Any

from pydantic import BaseModel

from jobsuche_mcp.core.context import ServerContext
from jobsuche_mcp.core.errors import UnknownToolError
from jobsuche_mcp.core.schemas import (
    BatchSearchJobsParams,
    BatchSearchJobsResult,
    GetJobDetailsParams,
    GetServerStatusParams,
    JobDetails,
    SearchJobsParams,
    SearchJobsResult,
    SearchJobsWithDetailsParams,
    SearchJobsWithDetailsResult,
    ServerStatus,
)
from jobsuche_mcp.pipeline.orchestrator import (
    get_job_details,
    run_batch_search,
    run_search,
    run_search_with_details,
)
from jobsuche_mcp.platforms.arbeitsagentur.models import UpstreamQuery

logger = logging.getLogger(__name__)

SERVER_NAME = "Jobsuche MCP Server"
SERVER_VERSION = "0.3.0"

# Registry: tool name → (parameter model, description)
_TOOLS: dict[str, tuple[type[BaseModel], str]] = {
    "search_jobs": (
        SearchJobsParams,
        "Search German job listings of the Federal Employment Agency. Returns "
        "summaries with reference numbers for get_job_details.",
    ),
    "get_job_details": (
        GetJobDetailsParams,
        "Get full information about one job posting by its reference number.",
    ),
    "search_jobs_with_details": (
        SearchJobsWithDetailsParams,
        "Search and fetch full details for the top results (default 5, max 20). "
        "Optional field filtering keeps responses small.",
    ),
    "batch_search_jobs": (
        BatchSearchJobsParams,
        "Run up to 10 named searches at once, each with up to 10 detailed "
        "results. A failed search does not affect the others.",
    ),
    "get_server_status": (
        GetServerStatusParams,
        "Report server uptime, API URL and whether the API is reachable.",
    ),
}


def available_tools() -> list[str]:
    """Return registered tool names in registration order."""
    return list(_TOOLS)


def describe_tools() -> list[dict[str, Any]]:
    """Name, description and JSON schema of every tool."""
    return [
        {
            "name": name,
            "description": description,
            "input_schema": model.model_json_schema(),
        }
        for name, (model, description) in _TOOLS.items()
    ]


class JobsucheServer:
    """Dispatches tool calls to the orchestrator against one ServerContext."""

    def __init__(self, ctx: ServerContext) -> None:
        self._ctx = ctx

    @property
    def context(self) -> ServerContext:
        return self._ctx

    def list_tools(self) -> list[dict[str, Any]]:
        return describe_tools()

    async def call_tool(self, name: str, arguments: dict[str, Any] | None = None) -> dict[str, Any]:
        """Validate ``arguments`` for tool ``name``, run it, return a JSON-shaped dict.

        Raises:
            UnknownToolError: If ``name`` is not registered.
        """
        if name not in _TOOLS:
            valid = ", ".join(_TOOLS)
            msg = f"Unknown tool '{name}'. Available: {valid}"
            raise UnknownToolError(msg)

        model, _ = _TOOLS[name]
        params = model.model_validate(arguments or {})
        handler = getattr(self, name)
        result: BaseModel = await handler(params)
        return result.model_dump(mode="json")

    # --- tools ---

    async def search_jobs(self, params: SearchJobsParams) -> SearchJobsResult:
        return await run_search(self._ctx, params)

    async def get_job_details(self, params: GetJobDetailsParams) -> JobDetails:
        return await get_job_details(self._ctx, params.reference_number)

    async def search_jobs_with_details(
        self, params: SearchJobsWithDetailsParams,
    ) -> SearchJobsWithDetailsResult:
        return await run_search_with_details(self._ctx, params)

    async def batch_search_jobs(self, params: BatchSearchJobsParams) -> BatchSearchJobsResult:
        return await run_batch_search(self._ctx, params)

    async def get_server_status(
        self, params: GetServerStatusParams | None = None,
    ) -> ServerStatus:
        """Probe the API with a one-hit search and report the outcome."""
        logger.info("Getting server status")
        try:
            await self._ctx.client.search(UpstreamQuery(size=1))
            connection_status = "Connected"
        except Exception as e:
            logger.warning("API probe failed: %s", e)
            connection_status = f"Connection Error: {e}"

        return ServerStatus(
            server_name=SERVER_NAME,
            version=SERVER_VERSION,
            uptime_seconds=self._ctx.uptime_seconds(),
            api_url=self._ctx.api.api_url,
            api_connection_status=connection_status,
            tools_count=len(_TOOLS),
        )
