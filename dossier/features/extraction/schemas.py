"""Extraction envelope, defined once.

The same models describe the JSON requested from the model and parse what
comes back. Parsing is total: anything missing or malformed falls back to
the "not recorded" defaults instead of failing validation.
"""

from __future__ import annotations

import math
from typing import Any

from pydantic import BaseModel, Field, field_validator, model_validator
from pydantic.json_schema import GenerateJsonSchema

from dossier.domain.models import NOT_RECORDED

DOSSIER_UNAVAILABLE = "Información no disponible."
ANALYSIS_UNAVAILABLE = "No disponible"


def page_number(raw: Any) -> int:
    if isinstance(raw, bool):
        return 0
    if isinstance(raw, int):
        return raw if raw > 0 else 0
    if isinstance(raw, float):
        return int(raw) if math.isfinite(raw) and raw >= 1 else 0
    if isinstance(raw, str) and raw.strip().isdigit():
        return int(raw.strip())
    return 0


def _as_list(raw: Any) -> list[Any]:
    return list(raw) if isinstance(raw, (list, tuple)) else []


class LenientModel(BaseModel):
    @model_validator(mode="before")
    @classmethod
    def _mapping_or_empty(cls, raw: Any) -> Any:
        return raw if isinstance(raw, dict) else {}


class SourcedValueSchema(LenientModel):
    value: str = Field(default=NOT_RECORDED, description="El dato extraído con el máximo detalle posible.")
    page: int = Field(default=0, description="Número de página donde aparece (1-indexed). 0 si no existe.")
    quote: str = Field(default="", description="Cita textual exacta del documento que respalda el dato.")

    @field_validator("value", mode="before")
    @classmethod
    def _value(cls, v: Any) -> str:
        return str(v) if v else NOT_RECORDED

    @field_validator("page", mode="before")
    @classmethod
    def _page(cls, v: Any) -> int:
        return page_number(v)

    @field_validator("quote", mode="before")
    @classmethod
    def _quote(cls, v: Any) -> str:
        return str(v) if v else ""


def traced(description: str | None = None) -> Any:
    return Field(default_factory=SourcedValueSchema, description=description)


class PersonSchema(LenientModel):
    role: SourcedValueSchema = traced("Rol estandarizado (NNA, Madre, Padre, Abuela Materna, Agresor, etc).")
    name: SourcedValueSchema = traced()
    rut: SourcedValueSchema = traced()
    dob: SourcedValueSchema = traced()
    phones: SourcedValueSchema = traced()
    address: SourcedValueSchema = traced()
    link: SourcedValueSchema = traced()
    participation: SourcedValueSchema = traced()
    observations: SourcedValueSchema = traced()
    nationality: SourcedValueSchema = traced("Nacionalidad.")


class CitationSchema(LenientModel):
    name: SourcedValueSchema = traced()
    date: SourcedValueSchema = traced()
    motive: SourcedValueSchema = traced()


class HearingSchema(LenientModel):
    date: SourcedValueSchema = traced()
    time: SourcedValueSchema = traced()
    type: SourcedValueSchema = traced()
    attendees: SourcedValueSchema = traced()
    motive: SourcedValueSchema = traced()
    tribunal: SourcedValueSchema = traced()


class ChronologySchema(LenientModel):
    date: SourcedValueSchema = traced()
    event: SourcedValueSchema = traced()


class DossierItemSchema(LenientModel):
    content: str = Field(
        default=DOSSIER_UNAVAILABLE, description="Análisis factual detallado y extenso de la dimensión."
    )
    strategy: list[str] = Field(
        default_factory=list, description="Pasos secuenciales detallados para evaluar esta dimensión."
    )
    tools: list[str] = Field(
        default_factory=list, description="Nombres técnicos de instrumentos o técnicas sugeridas."
    )

    @field_validator("content", mode="before")
    @classmethod
    def _content(cls, v: Any) -> str:
        return str(v) if v else DOSSIER_UNAVAILABLE

    @field_validator("strategy", "tools", mode="before")
    @classmethod
    def _strings(cls, v: Any) -> list[str]:
        return [str(s) for s in _as_list(v)]


def dimension(description: str) -> Any:
    return Field(default_factory=DossierItemSchema, description=description)


class DossierSchema(LenientModel):
    # Field order is the order the dossier is presented in.
    identification: DossierItemSchema = dimension("1. Identificación del NNA")
    typologies: DossierItemSchema = dimension("2. Tipologías de Maltrato")
    gravity: DossierItemSchema = dimension("3. Nivel de Gravedad")
    care_needs: DossierItemSchema = dimension("4. Necesidades de Cuidado")
    impact: DossierItemSchema = dimension("5. Impacto Biopsicosocial")
    methodologies: DossierItemSchema = dimension("6. Metodologías de Observación")
    parental_capabilities: DossierItemSchema = dimension("7. Capacidades Parentales")
    risk_factors: DossierItemSchema = dimension("8. Factores de Riesgo y Protectores")
    synthesis: DossierItemSchema = dimension("9. Síntesis Técnica")
    warnings: DossierItemSchema = dimension("10. Advertencias Técnicas")


class CaseExtractionSchema(LenientModel):
    rit: SourcedValueSchema = traced("RIT de la causa (Ej: P-1234-2024).")
    tribunal: SourcedValueSchema = traced("Tribunal competente.")
    cause_type: SourcedValueSchema = traced("Materia o tipo de causa.")
    denunciant: SourcedValueSchema = traced("Nombre completo de quien realiza la denuncia o requerimiento.")
    complaint_method: SourcedValueSchema = traced("Vía de ingreso (Oficio, Parte Policial, Demanda).")
    complaint_date: SourcedValueSchema = traced("Fecha exacta de la denuncia o inicio de causa.")
    receiving_institution: SourcedValueSchema = traced("Institución que acogió el requerimiento inicial.")
    motive: SourcedValueSchema = traced("Motivo detallado de la vulneración o requerimiento.")
    facts: SourcedValueSchema = traced("Relato circunstanciado de los hechos.")
    measures: SourcedValueSchema = traced("Medidas cautelares o decretadas por el tribunal.")
    people: list[PersonSchema] = Field(default_factory=list)
    citations: list[CitationSchema] = Field(default_factory=list)
    hearings: list[HearingSchema] = Field(default_factory=list)
    chronology: list[ChronologySchema] = Field(default_factory=list)
    dossier: DossierSchema = Field(
        default_factory=DossierSchema, description="Análisis técnico estructurado en 10 dimensiones."
    )
    technical_analysis: str = Field(default=ANALYSIS_UNAVAILABLE, description="Resumen ejecutivo legal del caso.")
    missing_info: list[str] = Field(default_factory=list)

    @field_validator("people", "citations", "hearings", "chronology", mode="before")
    @classmethod
    def _entries(cls, v: Any) -> list[Any]:
        return _as_list(v)

    @field_validator("technical_analysis", mode="before")
    @classmethod
    def _technical(cls, v: Any) -> str:
        return str(v) if v else ANALYSIS_UNAVAILABLE

    @field_validator("missing_info", mode="before")
    @classmethod
    def _missing(cls, v: Any) -> list[str]:
        return [str(m) for m in _as_list(v) if m]


def traced_fields(model: type[BaseModel]) -> tuple[str, ...]:
    """Names of the fields of `model` that hold a SourcedValueSchema."""
    return tuple(name for name, f in model.model_fields.items() if f.annotation is SourcedValueSchema)


class RequestSchemaGenerator(GenerateJsonSchema):
    """Every field required and no defaults: what the model must always send back."""

    def field_is_required(self, field: Any, total: bool) -> bool:
        return True

    def default_schema(self, schema: Any) -> Any:
        return self.generate_inner(schema["schema"])


def request_json_schema() -> dict[str, Any]:
    return CaseExtractionSchema.model_json_schema(schema_generator=RequestSchemaGenerator)
