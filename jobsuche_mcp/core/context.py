"""Server context shared (read-only) by every tool call."""

import time
from dataclasses import dataclass, field

from jobsuche_mcp.core.config import ApiConfig
from jobsuche_mcp.platforms.base import JobsucheClient


@dataclass(frozen=True)
class ServerContext:
    """Everything a tool call may read: API client, paging config, start time.

    Built once at startup and never mutated; request data stays local to
    each call.
    """

    client: JobsucheClient
    api: ApiConfig
    # Parallel detail lookups per call; 1 keeps them sequential.
    detail_concurrency: int = 1
    started_at: float = field(default_factory=time.monotonic)

    def uptime_seconds(self) -> int:
        return int(time.monotonic() - self.started_at)
