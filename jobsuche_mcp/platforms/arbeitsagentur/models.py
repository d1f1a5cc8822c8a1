"""Wire models for the Bundesagentur für Arbeit Jobsuche API.

Field names follow the upstream JSON (camelCase German). Unknown keys are
kept (``extra="allow"``) so ``raw_data`` passthrough loses nothing when the
API grows new fields. Nothing here is required except the reference number
of a search hit.
"""

from typing import Any

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    PrivateAttr,
    ValidatorFunctionWrapHandler,
    field_validator,
    model_validator,
)

from jobsuche_mcp.core.schemas import ContractType, EmploymentType

_WIRE = ConfigDict(extra="allow", populate_by_name=True)


class UpstreamQuery(BaseModel):
    """A search in the upstream query grammar. Absent fields are not sent."""

    model_config = ConfigDict(frozen=True)

    was: str | None = None
    wo: str | None = None
    umkreis: int | None = None
    arbeitszeit: tuple[EmploymentType, ...] = ()
    befristung: tuple[ContractType, ...] = ()
    veroeffentlichtseit: int | None = None
    page: int | None = None
    size: int

    def to_params(self) -> dict[str, str]:
        """Render as HTTP query parameters. Multi-valued fields join with ';'."""
        params: dict[str, str] = {}
        if self.was is not None:
            params["was"] = self.was
        if self.wo is not None:
            params["wo"] = self.wo
        if self.umkreis is not None:
            params["umkreis"] = str(self.umkreis)
        if self.arbeitszeit:
            params["arbeitszeit"] = ";".join(e.value for e in self.arbeitszeit)
        if self.befristung:
            params["befristung"] = ";".join(c.value for c in self.befristung)
        if self.veroeffentlichtseit is not None:
            params["veroeffentlichtseit"] = str(self.veroeffentlichtseit)
        if self.page is not None:
            params["page"] = str(self.page)
        params["size"] = str(self.size)
        return params


class Arbeitsort(BaseModel):
    model_config = _WIRE

    ort: str | None = None
    plz: str | None = None
    region: str | None = None
    land: str | None = None


class Stellenangebot(BaseModel):
    """One record of a search response."""

    model_config = _WIRE

    refnr: str
    beruf: str | None = None
    titel: str | None = None
    arbeitgeber: str | None = None
    arbeitsort: Arbeitsort | None = None
    aktuelle_veroeffentlichungsdatum: str | None = Field(
        default=None, alias="aktuelleVeroeffentlichungsdatum",
    )
    externe_url: str | None = Field(default=None, alias="externeUrl")


class UpstreamSearchResponse(BaseModel):
    model_config = _WIRE

    stellenangebote: list[Stellenangebot] = Field(default_factory=list)
    max_ergebnisse: int | None = Field(default=None, alias="maxErgebnisse")
    page: int | None = None
    size: int | None = None

    @field_validator("stellenangebote", mode="before")
    @classmethod
    def null_is_empty(cls, v: Any) -> Any:
        return [] if v is None else v


class Adresse(BaseModel):
    model_config = _WIRE

    ort: str | None = None
    plz: str | None = None
    strasse: str | None = None
    region: str | None = None
    land: str | None = None


class DetailArbeitsort(BaseModel):
    model_config = _WIRE

    adresse: Adresse | None = None


class DateRange(BaseModel):
    model_config = _WIRE

    von: str | None = None
    bis: str | None = None


class UpstreamJobDetails(BaseModel):
    """The jobdetails payload for one reference number."""

    model_config = _WIRE

    titel: str | None = Field(
        default=None, validation_alias=AliasChoices("titel", "stellenangebotsTitel"),
    )
    stellenbeschreibung: str | None = Field(
        default=None,
        validation_alias=AliasChoices("stellenbeschreibung", "stellenangebotsBeschreibung"),
    )
    arbeitgeber: str | None = Field(
        default=None, validation_alias=AliasChoices("arbeitgeber", "firma"),
    )
    arbeitsorte: list[DetailArbeitsort] | None = None
    arbeitszeit_vollzeit: bool | None = Field(default=None, alias="arbeitszeitVollzeit")
    allianzpartner_url: str | None = Field(default=None, alias="allianzpartnerUrl")
    verguetung: str | None = None
    vertragsdauer: str | None = None
    stellenangebots_art: str | None = Field(default=None, alias="stellenangebotsArt")
    erste_veroeffentlichungsdatum: str | None = Field(
        default=None, alias="ersteVeroeffentlichungsdatum",
    )
    nur_fuer_schwerbehinderte: bool | None = Field(
        default=None, alias="nurFuerSchwerbehinderte",
    )
    eintrittszeitraum: DateRange | None = None
    veroeffentlichungszeitraum: DateRange | None = None
    ist_geringfuegige_beschaeftigung: bool | None = Field(
        default=None, alias="istGeringfuegigeBeschaeftigung",
    )
    ist_arbeitnehmer_ueberlassung: bool | None = Field(
        default=None, alias="istArbeitnehmerUeberlassung",
    )
    ist_private_arbeitsvermittlung: bool | None = Field(
        default=None, alias="istPrivateArbeitsvermittlung",
    )
    quereinstieg_geeignet: bool | None = Field(default=None, alias="quereinstiegGeeignet")
    chiffrenummer: str | None = None

    _payload: dict[str, Any] = PrivateAttr(default_factory=dict)

    @model_validator(mode="wrap")
    @classmethod
    def keep_payload(
        cls, data: Any, handler: ValidatorFunctionWrapHandler,
    ) -> "UpstreamJobDetails":
        model = handler(data)
        if isinstance(data, dict):
            model._payload = dict(data)
        return model

    @property
    def payload(self) -> dict[str, Any]:
        """The decoded JSON object exactly as received, unknown keys included."""
        return self._payload
