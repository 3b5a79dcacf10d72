import asyncio
import json
import sys
from collections.abc import Sequence
from pathlib import Path
from typing import Any

import pytest


def pytest_configure() -> None:
    # Ensure `import dossier...` works without installing the package.
    repo_root = Path(__file__).resolve().parents[1]
    sys.path.insert(0, str(repo_root))


def sv(value: str, page: int = 1, quote: str = "") -> dict[str, Any]:
    return {"value": value, "page": page, "quote": quote}


def person(role: str, name: str, rut: str = "", **extra: dict[str, Any]) -> dict[str, Any]:
    return {"role": sv(role), "name": sv(name), "rut": sv(rut), **extra}


def sample_payload(rit: str = "P-1234-2024") -> dict[str, Any]:
    return {
        "rit": sv(rit, 1, f"RIT {rit}"),
        "tribunal": sv("Juzgado de Familia de San Bernardo"),
        "motive": sv("Negligencia parental grave"),
        "facts": sv("Se denuncia abandono"),
        "people": [
            person("NNA", "juan pérez gómez", "21.345.678-9"),
            person(
                "Madre",
                "maría gómez soto",
                "12.345.678-K",
                phones=sv("+56 9 1234 5678"),
                address=sv("pasaje los olmos 123, san bernardo"),
            ),
            person("Hijo", "Juan Perez Gomez", "213456789"),
        ],
        "hearings": [{"date": sv("16 de febrero de 2026")}],
        "dossier": {"identification": {"content": "NNA de 8 años", "strategy": ["Entrevista"], "tools": ["E2P"]}},
        "technical_analysis": "Resumen",
        "missing_info": ["Informe escolar"],
    }


class FakeExtractor:
    """Returns canned JSON per file name; can hold a file until released."""

    def __init__(self, responses: dict[str, Any] | None = None) -> None:
        self.responses = responses or {}
        self.gates: dict[str, asyncio.Event] = {}
        self.calls: list[tuple[str, int]] = []

    def hold(self, name: str) -> None:
        self.gates[name] = asyncio.Event()

    def release(self, name: str) -> None:
        self.gates[name].set()

    async def analyze_case_file(self, case_file, references: Sequence) -> str:
        self.calls.append((case_file.name, len(references)))
        gate = self.gates.get(case_file.name)
        if gate is not None:
            await gate.wait()
        response = self.responses.get(case_file.name, sample_payload())
        if isinstance(response, Exception):
            raise response
        if isinstance(response, str):
            return response
        return json.dumps(response)

    async def search_legal_context(self, query: str):
        from dossier.domain.models import SearchResult, SearchSource

        return SearchResult(query=query, answer="respuesta", sources=(SearchSource("Ley 19.968", "https://bcn.cl"),))


def make_pdf(pages: Sequence[str], rotation: int = 0) -> bytes:
    import fitz  # PyMuPDF

    doc = fitz.open()
    for text in pages:
        page = doc.new_page(width=612, height=792)
        page.insert_text((72, 100), text, fontsize=12)
        if rotation:
            page.set_rotation(rotation)
    data = doc.tobytes()
    doc.close()
    return data


@pytest.fixture
def fake_extractor() -> FakeExtractor:
    return FakeExtractor()


@pytest.fixture
def sample_pdf() -> bytes:
    return make_pdf(["the quick brown fox jumps", "segunda pagina del expediente"])
