import json
from dataclasses import asdict
from typing import Any

from dossier.domain.models import CaseData, CaseRecord

SUMMARY_MOTIVE_LIMIT = 500
NO_HEARING = "No programada"


def case_to_dict(record: CaseRecord, *, include_analysis: bool = False) -> dict[str, Any]:
    out: dict[str, Any] = {
        "id": record.id,
        "file_name": record.file_name,
        "upload_date": record.upload_date.isoformat(),
        "status": record.status.value,
        "mime_type": record.file_data.mime_type,
        "page_count": record.page_count,
        "error_message": record.error_message,
    }
    if include_analysis:
        out["analysis"] = asdict(record.analysis)
    return out


def case_json(data: CaseData) -> str:
    return json.dumps(asdict(data), ensure_ascii=False, indent=2)


def share_summary(data: CaseData) -> str:
    """Short plain-text case card meant to be pasted into a message."""
    hearing = data.hearings[0].date.value if data.hearings else NO_HEARING
    people = "\n".join(f"• {p.role.value}: {p.name.value}" for p in data.people)

    overview = data.motive.value
    if len(overview) > SUMMARY_MOTIVE_LIMIT:
        overview = overview[:SUMMARY_MOTIVE_LIMIT] + " [...]"

    return "\n".join(
        [
            f"📁 FICHA DE CASO: {data.rit.value}",
            f"📅 PRÓX. AUDIENCIA: {hearing}",
            "",
            "👥 INVOLUCRADOS (DCE SAN BERNARDO):",
            people,
            "",
            "📝 RESUMEN DENUNCIA:",
            overview,
            "",
            "--- Generado por Asistente Jurídico AI ---",
        ]
    )
