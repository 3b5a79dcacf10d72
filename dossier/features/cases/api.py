from dataclasses import asdict
from urllib.parse import quote

from fastapi import APIRouter, HTTPException, Request, UploadFile
from fastapi.responses import PlainTextResponse, Response

from dossier.domain.enums import CaseSort
from dossier.domain.errors import CaseNotFound, UploadValidationError
from dossier.domain.models import CaseRecord
from dossier.features.cases.exports import case_json, case_to_dict, share_summary
from dossier.features.cases.validation import read_upload, validate_batch
from dossier.features.table.rows import consolidate_rows, rows_to_tsv

router = APIRouter(prefix="/cases", tags=["cases"])


def _get_case(request: Request, case_id: str) -> CaseRecord:
    try:
        return request.app.state.store.get(case_id)
    except CaseNotFound:
        raise HTTPException(status_code=404, detail="case_not_found")


@router.post("")
async def upload_cases(request: Request, files: list[UploadFile]) -> dict[str, object]:
    cfg = request.app.state.cfg
    batch = [await read_upload(f, max_bytes=cfg.max_upload_bytes, default_name="sin_nombre") for f in files]
    try:
        validate_batch(batch, allowed_mime_types=cfg.case_mime_types, max_bytes=cfg.max_upload_bytes)
    except UploadValidationError as e:
        raise HTTPException(
            status_code=400,
            detail={"error": "invalid_upload", "issues": [asdict(i) for i in e.issues]},
        )

    records = request.app.state.cases.submit(batch)
    return {"cases": [case_to_dict(r) for r in records]}


@router.get("")
def list_cases(request: Request, sort: CaseSort = CaseSort.date) -> dict[str, object]:
    return {"cases": [case_to_dict(r) for r in request.app.state.store.list_records(sort)]}


@router.get("/{case_id}")
def get_case(request: Request, case_id: str) -> dict[str, object]:
    return case_to_dict(_get_case(request, case_id), include_analysis=True)


@router.delete("/{case_id}")
def delete_case(request: Request, case_id: str) -> dict[str, object]:
    try:
        request.app.state.store.remove(case_id)
    except CaseNotFound:
        raise HTTPException(status_code=404, detail="case_not_found")
    request.app.state.viewers.discard(case_id)
    return {"id": case_id, "deleted": True}


@router.get("/{case_id}/file")
def download_file(request: Request, case_id: str) -> Response:
    record = _get_case(request, case_id)
    return Response(
        content=record.file_data.data,
        media_type=record.file_data.mime_type,
        headers={"Content-Disposition": f"attachment; filename*=UTF-8''{quote(record.file_name)}"},
    )


@router.get("/{case_id}/export.json")
def export_json(request: Request, case_id: str) -> Response:
    record = _get_case(request, case_id)
    return Response(content=case_json(record.analysis), media_type="application/json")


@router.get("/{case_id}/summary.txt", response_class=PlainTextResponse)
def export_summary(request: Request, case_id: str) -> PlainTextResponse:
    return PlainTextResponse(share_summary(_get_case(request, case_id).analysis))


@router.get("/{case_id}/rows.tsv", response_class=PlainTextResponse)
def export_rows(request: Request, case_id: str) -> PlainTextResponse:
    return PlainTextResponse(rows_to_tsv(consolidate_rows(_get_case(request, case_id))))
