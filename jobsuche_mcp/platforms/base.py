"""Abstract base class for Jobsuche API clients."""

from abc import ABC, abstractmethod

from jobsuche_mcp.platforms.arbeitsagentur.models import (
    UpstreamJobDetails,
    UpstreamQuery,
    UpstreamSearchResponse,
)


class JobsucheClient(ABC):
    """What the orchestration core needs from the API: search, and one detail by id.

    Any binding satisfies it (HTTP client, in-memory fixture in tests).
    Implementations must be safe for concurrent use.
    """

    @abstractmethod
    async def search(self, query: UpstreamQuery) -> UpstreamSearchResponse:
        """Run one search round trip.

        Raises:
            UpstreamError: On transport failure or a non-success response.
        """

    @abstractmethod
    async def job_details(self, reference_number: str) -> UpstreamJobDetails:
        """Fetch the full posting for one reference number.

        Raises:
            UpstreamError: On transport failure or a non-success response.
            UpstreamDecodeError: If the payload cannot be decoded.
        """
