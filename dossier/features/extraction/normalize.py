from typing import Any

from dossier.domain.models import (
    DOSSIER_DIMENSIONS,
    CaseData,
    ChronologyEntry,
    Citation,
    DossierAnalysis,
    DossierItem,
    Hearing,
    PersonEntity,
    SourcedValue,
)
from dossier.features.extraction.dedupe import deduplicate_people
from dossier.features.extraction.schemas import (
    CaseExtractionSchema,
    ChronologySchema,
    CitationSchema,
    DossierItemSchema,
    HearingSchema,
    PersonSchema,
    SourcedValueSchema,
    traced_fields,
)

_CASE_FIELDS = traced_fields(CaseExtractionSchema)
_PERSON_FIELDS = traced_fields(PersonSchema)
_CITATION_FIELDS = traced_fields(CitationSchema)
_HEARING_FIELDS = traced_fields(HearingSchema)
_CHRONOLOGY_FIELDS = traced_fields(ChronologySchema)


def _sourced(s: SourcedValueSchema) -> SourcedValue:
    return SourcedValue(value=s.value, page=s.page, quote=s.quote)


def _traced(model: Any, names: tuple[str, ...]) -> dict[str, SourcedValue]:
    return {name: _sourced(getattr(model, name)) for name in names}


def sourced_value(raw: Any) -> SourcedValue:
    """Coerce anything the model returned for a traced field into a SourcedValue.

    Never raises. Missing or falsy values become the "not recorded" sentinel,
    unusable page numbers become 0 and a missing quote becomes "".
    """
    return _sourced(SourcedValueSchema.model_validate(raw))


def _dossier_item(s: DossierItemSchema) -> DossierItem:
    return DossierItem(content=s.content, strategy=tuple(s.strategy), tools=tuple(s.tools))


def dossier_item(raw: Any) -> DossierItem:
    return _dossier_item(DossierItemSchema.model_validate(raw))


def normalize_case(raw: Any) -> CaseData:
    """Build a CaseData from a parsed extraction envelope.

    People are de-duplicated here, once, right after they are normalized.
    """
    envelope = CaseExtractionSchema.model_validate(raw)
    people = [PersonEntity(**_traced(p, _PERSON_FIELDS)) for p in envelope.people]

    return CaseData(
        **_traced(envelope, _CASE_FIELDS),
        people=tuple(deduplicate_people(people)),
        citations=tuple(Citation(**_traced(c, _CITATION_FIELDS)) for c in envelope.citations),
        hearings=tuple(Hearing(**_traced(h, _HEARING_FIELDS)) for h in envelope.hearings),
        chronology=tuple(
            ChronologyEntry(**_traced(c, _CHRONOLOGY_FIELDS)) for c in envelope.chronology
        ),
        dossier=DossierAnalysis(
            **{key: _dossier_item(getattr(envelope.dossier, key)) for key in DOSSIER_DIMENSIONS}
        ),
        technical_analysis=envelope.technical_analysis,
        missing_info=tuple(envelope.missing_info),
    )
