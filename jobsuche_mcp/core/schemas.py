"""Tool parameter and result models for the Jobsuche tools.

Parameter models reject unknown keys so a typo in a tool call fails loudly
instead of being ignored. Result models are frozen: every value is built
fresh per call and never mutated afterwards.
"""

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class EmploymentType(str, Enum):
    """Working-time models, valued with the upstream ``arbeitszeit`` codes."""

    FULLTIME = "vz"
    PARTTIME = "tz"
    MINIJOB = "mj"
    HOME_OFFICE = "ho"
    SHIFT_WORK = "snw"


class ContractType(str, Enum):
    """Contract limitation, valued with the upstream ``befristung`` codes."""

    TEMPORARY = "1"
    PERMANENT = "2"


# ---------------------------------------------------------------------------
# Tool parameters
# ---------------------------------------------------------------------------


class FieldFilter(BaseModel):
    """Optional projection over JobDetails attribute names."""

    model_config = ConfigDict(extra="forbid")

    include_fields: list[str] | None = None
    exclude_fields: list[str] | None = None


class SearchJobsParams(BaseModel):
    """Semantic search parameters for one job search.

    ``job_title``, ``employer`` and ``branch`` are combined into a single
    free-text query. Tags in ``employment_type`` and ``contract_type`` are
    matched case-insensitively; unknown tags are ignored.
    """

    model_config = ConfigDict(extra="forbid")

    job_title: str | None = None
    location: str | None = None
    radius_km: int | None = None
    employment_type: list[str] | None = None
    contract_type: list[str] | None = None
    published_since_days: int | None = None
    page_size: int | None = None
    page: int | None = None
    employer: str | None = None
    branch: str | None = None


class GetJobDetailsParams(BaseModel):
    model_config = ConfigDict(extra="forbid")

    reference_number: str


class SearchJobsWithDetailsParams(SearchJobsParams):
    """Search parameters plus detail expansion of the top results."""

    max_details: int | None = None
    fields: FieldFilter | None = None

    def search_params(self) -> SearchJobsParams:
        return SearchJobsParams.model_validate(
            self.model_dump(exclude={"max_details", "fields"}),
        )


class BatchSearchItem(BaseModel):
    """One named search inside a batch. Pagination is set by the batch."""

    model_config = ConfigDict(extra="forbid")

    name: str
    job_title: str | None = None
    location: str | None = None
    radius_km: int | None = None
    employment_type: list[str] | None = None
    contract_type: list[str] | None = None
    published_since_days: int | None = None
    employer: str | None = None
    branch: str | None = None

    def search_params(self, page_size: int) -> SearchJobsParams:
        return SearchJobsParams(
            **self.model_dump(exclude={"name"}),
            page_size=page_size,
        )


class BatchSearchJobsParams(BaseModel):
    model_config = ConfigDict(extra="forbid")

    searches: list[BatchSearchItem]
    max_details_per_search: int | None = None
    fields: FieldFilter | None = None


class GetServerStatusParams(BaseModel):
    model_config = ConfigDict(extra="forbid")


# ---------------------------------------------------------------------------
# Tool results
# ---------------------------------------------------------------------------


class JobSummary(BaseModel):
    """One search hit. ``reference_number`` is the key for detail lookups."""

    model_config = ConfigDict(frozen=True)

    reference_number: str
    title: str
    employer: str = ""
    location: str = ""
    published_date: str | None = None
    external_url: str | None = None


class JobDetails(BaseModel):
    """Full information about one posting.

    Every attribute except ``reference_number`` is optional: the upstream API
    guarantees none of them. ``raw_data`` carries the untouched upstream
    payload for fields not mapped here.
    """

    model_config = ConfigDict(frozen=True)

    reference_number: str
    title: str | None = None
    description: str | None = None
    employer: str | None = None
    location: str | None = None
    employment_type: str | None = None
    contract_type: str | None = None
    start_date: str | None = None
    application_deadline: str | None = None
    contact_info: str | None = None
    external_url: str | None = None
    employer_profile_url: str | None = None
    partner_url: str | None = None
    salary: str | None = None
    contract_duration: str | None = None
    takeover_opportunity: bool | None = None
    job_type: str | None = None
    open_positions: int | None = None
    company_size: str | None = None
    employer_description: str | None = None
    branch: str | None = None
    published_date: str | None = None
    first_published: str | None = None
    only_for_disabled: bool | None = None
    fulltime: bool | None = None
    entry_period: str | None = None
    publication_period: str | None = None
    is_minor_employment: bool | None = None
    is_temp_agency: bool | None = None
    is_private_agency: bool | None = None
    career_changer_suitable: bool | None = None
    cipher_number: str | None = None
    raw_data: dict[str, Any] = Field(default_factory=dict)


class SearchJobsResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    total_results: int | None = None
    current_page: int | None = None
    page_size: int | None = None
    jobs_count: int
    jobs: list[JobSummary]
    search_duration_ms: int


class SearchJobsWithDetailsResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    total_results: int | None = None
    current_page: int | None = None
    page_size: int | None = None
    jobs_count: int
    jobs: list[JobDetails]
    search_duration_ms: int
    details_duration_ms: int


class BatchSearchItemResult(BaseModel):
    """Outcome of one batch entry. ``error`` is set when its search failed."""

    model_config = ConfigDict(frozen=True)

    search_name: str
    total_results: int | None = None
    jobs_count: int = 0
    jobs: list[JobDetails] = Field(default_factory=list)
    error: str | None = None


class BatchSearchJobsResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    searches_count: int
    results: list[BatchSearchItemResult]
    total_duration_ms: int


class ServerStatus(BaseModel):
    model_config = ConfigDict(frozen=True)

    server_name: str
    version: str
    uptime_seconds: int
    api_url: str
    api_connection_status: str
    tools_count: int
