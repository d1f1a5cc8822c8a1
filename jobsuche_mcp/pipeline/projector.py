"""Result projector: upstream records into stable tool result shapes.

Design rules:
  - Missing location, title or employer data never crashes; it degrades to
    "" (summaries) or None (details).
  - Decoding errors are not handled here. They come out of the client and are
    turned into per-item failures by the detail fetcher or the batch runner.
  - Field filtering returns a new JobDetails and never touches the input.
"""

import logging

from jobsuche_mcp.core.schemas import FieldFilter, JobDetails, JobSummary
from jobsuche_mcp.platforms.arbeitsagentur.models import (
    DateRange,
    Stellenangebot,
    UpstreamJobDetails,
)

logger = logging.getLogger(__name__)

# Identity of a detail; survives every filter.
_KEY_FIELD = "reference_number"


def compose_location(ort: str | None, plz: str | None) -> str:
    """``"Berlin (10115)"``, ``"Berlin"``, ``"(10115)"`` or ``""``."""
    city = ort or ""
    postal = f"({plz})" if plz else ""
    if city and postal:
        return f"{city} {postal}"
    return city or postal


def format_date_range(von: str | None, bis: str | None) -> str:
    """``"a - b"``, ``"ab a"``, ``"bis b"`` or ``""``."""
    if von and bis:
        return f"{von} - {bis}"
    if von:
        return f"ab {von}"
    if bis:
        return f"bis {bis}"
    return ""


def project_summary(record: Stellenangebot) -> JobSummary:
    """Project one search hit. Title falls back to the profession name."""
    return JobSummary(
        reference_number=record.refnr,
        title=record.titel or record.beruf or "",
        employer=record.arbeitgeber or "",
        location=_summary_location(record),
        published_date=record.aktuelle_veroeffentlichungsdatum,
        external_url=record.externe_url,
    )


def project_detail(reference_number: str, record: UpstreamJobDetails) -> JobDetails:
    """Project one jobdetails payload.

    Attributes the upstream API does not deliver (deadline, contact, company
    size, ...) stay None.
    """
    entry_period = _period(record.eintrittszeitraum)
    employment_type = None
    if record.arbeitszeit_vollzeit is not None:
        employment_type = "Vollzeit" if record.arbeitszeit_vollzeit else "Teilzeit"

    return JobDetails(
        reference_number=reference_number,
        title=record.titel,
        description=record.stellenbeschreibung,
        employer=record.arbeitgeber,
        location=_detail_location(record),
        employment_type=employment_type,
        start_date=entry_period,
        partner_url=record.allianzpartner_url,
        salary=record.verguetung,
        contract_duration=record.vertragsdauer,
        job_type=record.stellenangebots_art,
        first_published=record.erste_veroeffentlichungsdatum,
        only_for_disabled=record.nur_fuer_schwerbehinderte,
        fulltime=record.arbeitszeit_vollzeit,
        entry_period=entry_period,
        publication_period=_period(record.veroeffentlichungszeitraum),
        is_minor_employment=record.ist_geringfuegige_beschaeftigung,
        is_temp_agency=record.ist_arbeitnehmer_ueberlassung,
        is_private_agency=record.ist_private_arbeitsvermittlung,
        career_changer_suitable=record.quereinstieg_geeignet,
        cipher_number=record.chiffrenummer,
        raw_data=record.payload,
    )


def apply_field_filter(detail: JobDetails, field_filter: FieldFilter | None) -> JobDetails:
    """Keep only included attributes, then drop excluded ones.

    Dropped attributes become absent (None; ``raw_data`` becomes ``{}``).
    Unknown names are ignored. ``reference_number`` is always kept.
    """
    if field_filter is None:
        return detail

    kept = set(JobDetails.model_fields)
    if field_filter.include_fields is not None:
        kept &= set(field_filter.include_fields)
    if field_filter.exclude_fields is not None:
        kept -= set(field_filter.exclude_fields)
    kept.add(_KEY_FIELD)

    unknown = (
        set(field_filter.include_fields or ()) | set(field_filter.exclude_fields or ())
    ) - set(JobDetails.model_fields)
    if unknown:
        logger.debug("Ignoring unknown filter fields: %s", sorted(unknown))

    data = detail.model_dump(include=kept)
    return JobDetails.model_validate(data)


def _summary_location(record: Stellenangebot) -> str:
    if record.arbeitsort is None:
        return ""
    return compose_location(record.arbeitsort.ort, record.arbeitsort.plz)


def _detail_location(record: UpstreamJobDetails) -> str | None:
    """Location of the first work place, or None when it has no city."""
    if not record.arbeitsorte:
        return None
    adresse = record.arbeitsorte[0].adresse
    if adresse is None or not adresse.ort:
        return None
    return compose_location(adresse.ort, adresse.plz)


def _period(date_range: DateRange | None) -> str | None:
    if date_range is None:
        return None
    return format_date_range(date_range.von, date_range.bis)
