"""Query builder: semantic search parameters → upstream query.

Pure functions with no network dependency. Never raises: unmapped tags are
dropped and absent fields are simply not sent.
"""

import logging
from enum import Enum
from typing import TypeVar

from jobsuche_mcp.core.config import ApiConfig
from jobsuche_mcp.core.schemas import ContractType, EmploymentType, SearchJobsParams
from jobsuche_mcp.platforms.arbeitsagentur.models import UpstreamQuery

logger = logging.getLogger(__name__)

# --- Synonym tables (lower-case keys) ---

EMPLOYMENT_TYPE_MAP: dict[str, EmploymentType] = {
    "fulltime": EmploymentType.FULLTIME,
    "full": EmploymentType.FULLTIME,
    "vollzeit": EmploymentType.FULLTIME,
    "vz": EmploymentType.FULLTIME,
    "parttime": EmploymentType.PARTTIME,
    "part": EmploymentType.PARTTIME,
    "teilzeit": EmploymentType.PARTTIME,
    "tz": EmploymentType.PARTTIME,
    "mini": EmploymentType.MINIJOB,
    "minijob": EmploymentType.MINIJOB,
    "mini_job": EmploymentType.MINIJOB,
    "home": EmploymentType.HOME_OFFICE,
    "homeoffice": EmploymentType.HOME_OFFICE,
    "home_office": EmploymentType.HOME_OFFICE,
    "ho": EmploymentType.HOME_OFFICE,
    "shift": EmploymentType.SHIFT_WORK,
    "schicht": EmploymentType.SHIFT_WORK,
    "snw": EmploymentType.SHIFT_WORK,
}

CONTRACT_TYPE_MAP: dict[str, ContractType] = {
    "temporary": ContractType.TEMPORARY,
    "temp": ContractType.TEMPORARY,
    "befristet": ContractType.TEMPORARY,
    "permanent": ContractType.PERMANENT,
    "perm": ContractType.PERMANENT,
    "unbefristet": ContractType.PERMANENT,
}

_EnumT = TypeVar("_EnumT", bound=Enum)


def parse_employment_type(tag: str) -> EmploymentType | None:
    """Map one employment-type synonym (any case) to its enum, or None."""
    return EMPLOYMENT_TYPE_MAP.get(tag.lower())


def parse_contract_type(tag: str) -> ContractType | None:
    """Map one contract-type synonym (any case) to its enum, or None."""
    return CONTRACT_TYPE_MAP.get(tag.lower())


def resolve_page_size(requested: int | None, config: ApiConfig) -> int:
    """Requested size (or the configured default), capped at the configured max.

    The max is a hard ceiling; the result is never below 1.
    """
    size = requested if requested is not None else config.default_page_size
    return max(1, min(size, config.max_page_size))


def combine_search_terms(*terms: str | None) -> str | None:
    """Join the non-blank terms with a space, or None when nothing is left."""
    parts = [t.strip() for t in terms if t is not None and t.strip()]
    if not parts:
        return None
    return " ".join(parts)


def build_query(params: SearchJobsParams, config: ApiConfig) -> UpstreamQuery:
    """Translate semantic search parameters into an UpstreamQuery.

    Args:
        params: Tool-level search parameters.
        config: Supplies the default and maximum page size.

    Returns:
        The upstream query. ``size`` is always set; every other field only
        when the caller provided it.
    """
    query = UpstreamQuery(
        was=combine_search_terms(params.job_title, params.employer, params.branch),
        wo=params.location,
        umkreis=params.radius_km,
        arbeitszeit=_map_tags(params.employment_type, EMPLOYMENT_TYPE_MAP, "employment_type"),
        befristung=_map_tags(params.contract_type, CONTRACT_TYPE_MAP, "contract_type"),
        veroeffentlichtseit=params.published_since_days,
        page=params.page,
        size=resolve_page_size(params.page_size, config),
    )
    logger.debug("Built upstream query: %s", query.to_params())
    return query


def _map_tags(
    tags: list[str] | None,
    mapping: dict[str, _EnumT],
    field_name: str,
) -> tuple[_EnumT, ...]:
    """Map tags through a synonym table, first-seen order, duplicates collapsed.

    Unknown tags are logged and skipped (never an error).
    """
    if not tags:
        return ()
    mapped: list[_EnumT] = []
    for tag in tags:
        value = mapping.get(tag.lower())
        if value is None:
            logger.debug("Unknown %s value '%s', skipping", field_name, tag)
        elif value not in mapped:
            mapped.append(value)
    return tuple(mapped)
