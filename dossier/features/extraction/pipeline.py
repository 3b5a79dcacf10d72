import json
import logging
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any, Protocol

from dossier.domain.errors import ExtractionError
from dossier.domain.models import NOT_RECORDED, CaseData, FileData, SearchResult
from dossier.features.extraction.normalize import normalize_case

logger = logging.getLogger(__name__)

_UNUSABLE_RITS = {NOT_RECORDED, "SIN_RIT", ""}


class Extractor(Protocol):
    async def analyze_case_file(self, case_file: FileData, references: Sequence[FileData]) -> str:
        """Return the raw JSON text produced for one case file."""
        ...

    async def search_legal_context(self, query: str) -> SearchResult: ...


@dataclass(frozen=True)
class AnalysisOutcome:
    rit: str
    data: CaseData


def parse_envelope(text: str | None) -> dict[str, Any]:
    """Parse the model response. Only a missing or non-object envelope is fatal."""
    if not text or not text.strip():
        raise ExtractionError("empty_response", "No se pudo generar el análisis.")
    try:
        payload = json.loads(text)
    except json.JSONDecodeError as e:
        raise ExtractionError("unparseable_response", "Error al procesar la respuesta de la IA.") from e
    if not isinstance(payload, dict):
        raise ExtractionError("unparseable_response", "Error al procesar la respuesta de la IA.")
    return payload


async def analyze(extractor: Extractor, case_file: FileData, references: Sequence[FileData]) -> AnalysisOutcome:
    text = await extractor.analyze_case_file(case_file, references)
    data = normalize_case(parse_envelope(text))
    logger.debug("normalized %s: %d people, %d hearings", case_file.name, len(data.people), len(data.hearings))
    return AnalysisOutcome(rit=data.rit.value, data=data)


def renamed_file_name(original: str, rit: str) -> str:
    """Name the file after its RIT, keeping the extension."""
    rit = (rit or "").strip()
    if rit in _UNUSABLE_RITS:
        return original

    stem, dot, ext = original.rpartition(".")
    extension = f".{ext}" if dot and stem else ""
    safe_rit = rit.replace("/", "-").replace("\\", "-").strip()
    return f"{safe_rit}{extension}"
