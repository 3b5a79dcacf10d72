from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime

from dossier.domain.enums import CaseStatus

# Stored by the extraction step when a field was not found in the file.
NOT_RECORDED = "NO SE CONSIGNA"


@dataclass(frozen=True)
class SourcedValue:
    """A value extracted from a case file plus where it was found.

    `page` is 1-indexed; 0 means the value could not be traced to a page.
    """

    value: str
    page: int = 0
    quote: str = ""


def _blank() -> SourcedValue:
    return SourcedValue(value="")


@dataclass(frozen=True)
class PersonEntity:
    role: SourcedValue
    name: SourcedValue
    rut: SourcedValue
    dob: SourcedValue
    phones: SourcedValue
    address: SourcedValue
    link: SourcedValue
    participation: SourcedValue
    observations: SourcedValue
    nationality: SourcedValue


@dataclass(frozen=True)
class Citation:
    name: SourcedValue
    date: SourcedValue
    motive: SourcedValue


@dataclass(frozen=True)
class Hearing:
    date: SourcedValue
    time: SourcedValue
    type: SourcedValue
    attendees: SourcedValue
    motive: SourcedValue
    tribunal: SourcedValue


@dataclass(frozen=True)
class ChronologyEntry:
    date: SourcedValue
    event: SourcedValue


@dataclass(frozen=True)
class DossierItem:
    content: str = ""
    strategy: tuple[str, ...] = ()
    tools: tuple[str, ...] = ()


# Order matters: it is the order the dossier is presented in.
DOSSIER_DIMENSIONS: dict[str, str] = {
    "identification": "Identificación del NNA",
    "typologies": "Tipologías de Maltrato",
    "gravity": "Nivel de Gravedad",
    "care_needs": "Necesidades de Cuidado",
    "impact": "Impacto Biopsicosocial",
    "methodologies": "Metodologías de Observación",
    "parental_capabilities": "Capacidades Parentales",
    "risk_factors": "Factores de Riesgo y Protectores",
    "synthesis": "Síntesis Técnica",
    "warnings": "Advertencias Técnicas",
}


@dataclass(frozen=True)
class DossierAnalysis:
    identification: DossierItem = field(default_factory=DossierItem)
    typologies: DossierItem = field(default_factory=DossierItem)
    gravity: DossierItem = field(default_factory=DossierItem)
    care_needs: DossierItem = field(default_factory=DossierItem)
    impact: DossierItem = field(default_factory=DossierItem)
    methodologies: DossierItem = field(default_factory=DossierItem)
    parental_capabilities: DossierItem = field(default_factory=DossierItem)
    risk_factors: DossierItem = field(default_factory=DossierItem)
    synthesis: DossierItem = field(default_factory=DossierItem)
    warnings: DossierItem = field(default_factory=DossierItem)

    def sections(self) -> list[tuple[str, DossierItem]]:
        """(label, item) pairs in presentation order."""
        return [(label, getattr(self, key)) for key, label in DOSSIER_DIMENSIONS.items()]


@dataclass(frozen=True)
class CaseData:
    rit: SourcedValue = field(default_factory=_blank)
    tribunal: SourcedValue = field(default_factory=_blank)
    cause_type: SourcedValue = field(default_factory=_blank)
    denunciant: SourcedValue = field(default_factory=_blank)
    complaint_method: SourcedValue = field(default_factory=_blank)
    complaint_date: SourcedValue = field(default_factory=_blank)
    receiving_institution: SourcedValue = field(default_factory=_blank)
    motive: SourcedValue = field(default_factory=_blank)
    facts: SourcedValue = field(default_factory=_blank)
    measures: SourcedValue = field(default_factory=_blank)
    people: tuple[PersonEntity, ...] = ()
    citations: tuple[Citation, ...] = ()
    hearings: tuple[Hearing, ...] = ()
    chronology: tuple[ChronologyEntry, ...] = ()
    dossier: DossierAnalysis = field(default_factory=DossierAnalysis)
    technical_analysis: str = ""
    missing_info: tuple[str, ...] = ()


@dataclass(frozen=True)
class FileData:
    name: str
    mime_type: str
    data: bytes = field(repr=False)

    @property
    def size(self) -> int:
        return len(self.data)


@dataclass(frozen=True)
class CaseRecord:
    id: str
    file_name: str
    upload_date: datetime
    analysis: CaseData
    file_data: FileData
    status: CaseStatus
    page_count: int | None = None
    error_message: str | None = None


@dataclass(frozen=True)
class HighlightRect:
    x: float
    y: float
    width: float
    height: float


@dataclass(frozen=True)
class ConsolidatedRow:
    case_id: str
    row_key: str
    minor_names: str
    minor_last1: str
    minor_last2: str
    minor_rut: str
    delivery_date: str
    rit: str
    hearing: str
    adult_name: str
    adult_relationship: str
    adult_rut: str
    adult_phone: str
    adult_address: str


@dataclass(frozen=True)
class SearchSource:
    title: str
    uri: str


@dataclass(frozen=True)
class SearchResult:
    query: str
    answer: str
    sources: tuple[SearchSource, ...] = ()
