import logging
from collections.abc import Sequence

from google import genai
from google.genai import errors as genai_errors
from google.genai import types

from dossier.domain.errors import ExtractionError
from dossier.domain.models import FileData, SearchResult, SearchSource
from dossier.features.extraction.prompts import (
    ANALYSIS_SYSTEM_PROMPT,
    CASE_FILE_START,
    REFERENCES_END,
    REFERENCES_START,
    search_prompt,
)
from dossier.features.extraction.schemas import request_json_schema

logger = logging.getLogger(__name__)

NO_ANSWER = "No se pudo generar una respuesta."


def build_case_parts(case_file: FileData, references: Sequence[FileData]) -> list[types.Part]:
    parts = [types.Part.from_text(text=ANALYSIS_SYSTEM_PROMPT)]

    if references:
        parts.append(types.Part.from_text(text=REFERENCES_START))
        for ref in references:
            parts.append(types.Part.from_bytes(data=ref.data, mime_type=ref.mime_type))
        parts.append(types.Part.from_text(text=REFERENCES_END))

    parts.append(types.Part.from_text(text=CASE_FILE_START))
    parts.append(types.Part.from_bytes(data=case_file.data, mime_type=case_file.mime_type))
    return parts


class GeminiExtractor:
    def __init__(
        self,
        *,
        api_key: str,
        analysis_model: str,
        search_model: str,
        thinking_budget: int,
    ) -> None:
        self._api_key = api_key
        self._analysis_model = analysis_model
        self._search_model = search_model
        self._thinking_budget = thinking_budget
        self._client: genai.Client | None = None

    def _get_client(self) -> genai.Client:
        if not self._api_key:
            raise ExtractionError("extractor_not_configured", "Falta la clave de API de Gemini.")
        if self._client is None:
            self._client = genai.Client(api_key=self._api_key)
        return self._client

    async def analyze_case_file(self, case_file: FileData, references: Sequence[FileData]) -> str:
        client = self._get_client()
        config = types.GenerateContentConfig(
            response_mime_type="application/json",
            response_json_schema=request_json_schema(),
            thinking_config=types.ThinkingConfig(thinking_budget=self._thinking_budget),
        )
        try:
            response = await client.aio.models.generate_content(
                model=self._analysis_model,
                contents=[types.Content(role="user", parts=build_case_parts(case_file, references))],
                config=config,
            )
        except genai_errors.APIError as e:
            logger.warning("analysis call failed for %s: %s", case_file.name, e)
            raise ExtractionError("remote_call_failed", str(e)) from e
        return response.text or ""

    async def search_legal_context(self, query: str) -> SearchResult:
        client = self._get_client()
        try:
            response = await client.aio.models.generate_content(
                model=self._search_model,
                contents=search_prompt(query),
                config=types.GenerateContentConfig(tools=[types.Tool(google_search=types.GoogleSearch())]),
            )
        except genai_errors.APIError as e:
            logger.warning("search call failed: %s", e)
            raise ExtractionError("remote_call_failed", "Error al realizar la búsqueda legal.") from e

        sources: list[SearchSource] = []
        candidates = response.candidates or []
        metadata = candidates[0].grounding_metadata if candidates else None
        for chunk in (metadata.grounding_chunks if metadata else None) or []:
            if chunk.web:
                sources.append(SearchSource(title=chunk.web.title or "Fuente Web", uri=chunk.web.uri or "#"))

        return SearchResult(query=query, answer=response.text or NO_ANSWER, sources=tuple(sources))
