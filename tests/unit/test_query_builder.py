"""Tests for the upstream query builder."""

import pytest

from jobsuche_mcp.core.config import ApiConfig
from jobsuche_mcp.core.schemas import ContractType, EmploymentType, SearchJobsParams
from jobsuche_mcp.platforms.arbeitsagentur.models import UpstreamQuery
from jobsuche_mcp.platforms.arbeitsagentur.query import (
    CONTRACT_TYPE_MAP,
    EMPLOYMENT_TYPE_MAP,
    build_query,
    combine_search_terms,
    parse_contract_type,
    parse_employment_type,
    resolve_page_size,
)


def _config(default: int = 25, maximum: int = 100) -> ApiConfig:
    return ApiConfig(default_page_size=default, max_page_size=maximum)


# ---------------------------------------------------------------------------
# TestParseEmploymentType
# ---------------------------------------------------------------------------


class TestParseEmploymentType:
    @pytest.mark.parametrize("tag", ["fulltime", "full", "vollzeit", "vz"])
    def test_fulltime_synonyms(self, tag: str) -> None:
        assert parse_employment_type(tag) is EmploymentType.FULLTIME

    @pytest.mark.parametrize("tag", ["parttime", "part", "teilzeit", "tz"])
    def test_parttime_synonyms(self, tag: str) -> None:
        assert parse_employment_type(tag) is EmploymentType.PARTTIME

    @pytest.mark.parametrize("tag", ["mini", "minijob", "mini_job"])
    def test_minijob_synonyms(self, tag: str) -> None:
        assert parse_employment_type(tag) is EmploymentType.MINIJOB

    @pytest.mark.parametrize("tag", ["home", "homeoffice", "home_office", "ho"])
    def test_home_office_synonyms(self, tag: str) -> None:
        assert parse_employment_type(tag) is EmploymentType.HOME_OFFICE

    @pytest.mark.parametrize("tag", ["shift", "schicht", "snw"])
    def test_shift_synonyms(self, tag: str) -> None:
        assert parse_employment_type(tag) is EmploymentType.SHIFT_WORK

    def test_case_insensitive_over_whole_table(self) -> None:
        for tag, expected in EMPLOYMENT_TYPE_MAP.items():
            assert parse_employment_type(tag.upper()) is expected
            assert parse_employment_type(tag.title()) is expected

    @pytest.mark.parametrize("tag", ["invalid", "", "freelance", "voll zeit"])
    def test_unknown_returns_none(self, tag: str) -> None:
        assert parse_employment_type(tag) is None


class TestParseContractType:
    @pytest.mark.parametrize("tag", ["permanent", "UNBEFRISTET", "perm"])
    def test_permanent(self, tag: str) -> None:
        assert parse_contract_type(tag) is ContractType.PERMANENT

    @pytest.mark.parametrize("tag", ["temporary", "Befristet", "temp"])
    def test_temporary(self, tag: str) -> None:
        assert parse_contract_type(tag) is ContractType.TEMPORARY

    def test_unknown_returns_none(self) -> None:
        assert parse_contract_type("seasonal") is None

    def test_table_values_are_upstream_codes(self) -> None:
        assert {c.value for c in CONTRACT_TYPE_MAP.values()} == {"1", "2"}


# ---------------------------------------------------------------------------
# TestResolvePageSize
# ---------------------------------------------------------------------------


class TestResolvePageSize:
    def test_default_when_absent(self) -> None:
        assert resolve_page_size(None, _config(default=25)) == 25

    def test_requested_within_bounds(self) -> None:
        assert resolve_page_size(50, _config()) == 50

    def test_capped_at_max(self) -> None:
        assert resolve_page_size(500, _config(maximum=100)) == 100

    def test_capped_at_lower_configured_max(self) -> None:
        assert resolve_page_size(40, _config(default=10, maximum=30)) == 30

    def test_zero_floors_at_one(self) -> None:
        assert resolve_page_size(0, _config()) == 1

    def test_negative_floors_at_one(self) -> None:
        assert resolve_page_size(-5, _config()) == 1

    @pytest.mark.parametrize("requested", [None, -1, 0, 1, 7, 25, 99, 100, 101, 10_000])
    def test_always_within_bounds(self, requested: int | None) -> None:
        config = _config(default=20, maximum=60)
        size = resolve_page_size(requested, config)
        assert 1 <= size <= 60


# ---------------------------------------------------------------------------
# TestCombineSearchTerms
# ---------------------------------------------------------------------------


class TestCombineSearchTerms:
    def test_fixed_order(self) -> None:
        assert combine_search_terms("Kundenberater", "BARMER", "Versicherung") == (
            "Kundenberater BARMER Versicherung"
        )

    def test_skips_missing(self) -> None:
        assert combine_search_terms(None, "BARMER", None) == "BARMER"

    def test_skips_blank(self) -> None:
        assert combine_search_terms("", "  ", "IT") == "IT"

    def test_all_missing_is_none(self) -> None:
        assert combine_search_terms(None, None, None) is None


# ---------------------------------------------------------------------------
# TestBuildQuery
# ---------------------------------------------------------------------------


class TestBuildQuery:
    def test_empty_params_only_size(self) -> None:
        query = build_query(SearchJobsParams(), _config())
        assert query.to_params() == {"size": "25"}

    def test_no_empty_free_text(self) -> None:
        query = build_query(SearchJobsParams(job_title="", employer=None), _config())
        assert query.was is None
        assert "was" not in query.to_params()

    def test_title_employer_branch_combined(self) -> None:
        params = SearchJobsParams(job_title="Kundenberaterin", employer="BARMER", branch="IT")
        query = build_query(params, _config())
        assert query.was == "Kundenberaterin BARMER IT"

    def test_branch_only(self) -> None:
        query = build_query(SearchJobsParams(branch="IT", location="München"), _config())
        assert query.was == "IT"
        assert query.wo == "München"

    def test_one_to_one_fields(self) -> None:
        params = SearchJobsParams(
            location="Wuppertal", radius_km=50, published_since_days=7, page=3,
        )
        wire = build_query(params, _config()).to_params()
        assert wire["wo"] == "Wuppertal"
        assert wire["umkreis"] == "50"
        assert wire["veroeffentlichtseit"] == "7"
        assert wire["page"] == "3"

    def test_absent_optionals_omitted(self) -> None:
        wire = build_query(SearchJobsParams(job_title="Koch"), _config()).to_params()
        assert set(wire) == {"was", "size"}

    def test_employment_types_mapped(self) -> None:
        params = SearchJobsParams(employment_type=["VOLLZEIT", "ho"])
        query = build_query(params, _config())
        assert query.arbeitszeit == (EmploymentType.FULLTIME, EmploymentType.HOME_OFFICE)
        assert query.to_params()["arbeitszeit"] == "vz;ho"

    def test_employment_type_duplicates_collapse(self) -> None:
        params = SearchJobsParams(employment_type=["fulltime", "vz", "Full"])
        query = build_query(params, _config())
        assert query.arbeitszeit == (EmploymentType.FULLTIME,)

    def test_unknown_employment_types_dropped(self) -> None:
        params = SearchJobsParams(employment_type=["parttime", "freelance"])
        query = build_query(params, _config())
        assert query.arbeitszeit == (EmploymentType.PARTTIME,)

    def test_all_unknown_employment_types_omit_clause(self) -> None:
        params = SearchJobsParams(employment_type=["freelance", "weekend"])
        wire = build_query(params, _config()).to_params()
        assert "arbeitszeit" not in wire

    def test_contract_types_mapped(self) -> None:
        params = SearchJobsParams(contract_type=["permanent", "befristet"])
        wire = build_query(params, _config()).to_params()
        assert wire["befristung"] == "2;1"

    def test_unknown_contract_types_omit_clause(self) -> None:
        params = SearchJobsParams(contract_type=["seasonal"])
        assert "befristung" not in build_query(params, _config()).to_params()

    def test_page_size_capped(self) -> None:
        query = build_query(SearchJobsParams(page_size=250), _config(maximum=100))
        assert query.size == 100

    def test_full_example(self) -> None:
        """Software Engineer in Berlin, full-time, config default 25 / max 100."""
        params = SearchJobsParams(
            job_title="Software Engineer",
            location="Berlin",
            employment_type=["fulltime"],
        )
        query = build_query(params, _config(default=25, maximum=100))
        assert query == UpstreamQuery(
            was="Software Engineer",
            wo="Berlin",
            arbeitszeit=(EmploymentType.FULLTIME,),
            size=25,
        )
        assert query.to_params() == {
            "was": "Software Engineer",
            "wo": "Berlin",
            "arbeitszeit": "vz",
            "size": "25",
        }
