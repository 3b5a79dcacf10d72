from dataclasses import asdict

from fastapi import APIRouter, HTTPException, Request, UploadFile

from dossier.domain.errors import UploadValidationError
from dossier.features.cases.validation import read_upload

router = APIRouter(prefix="/references", tags=["references"])


@router.get("")
def list_references(request: Request) -> dict[str, object]:
    files = request.app.state.references.list_files()
    return {"references": [{"name": f.name, "mime_type": f.mime_type, "size": f.size} for f in files]}


@router.post("")
async def add_reference(request: Request, file: UploadFile) -> dict[str, object]:
    max_bytes = request.app.state.cfg.max_upload_bytes
    ref = await read_upload(file, max_bytes=max_bytes, default_name="referencia")
    try:
        request.app.state.references.add(ref)
    except UploadValidationError as e:
        raise HTTPException(
            status_code=400,
            detail={"error": "invalid_reference", "issues": [asdict(i) for i in e.issues]},
        )
    return {"name": ref.name, "mime_type": ref.mime_type, "size": ref.size}


@router.delete("/{name}")
def remove_reference(request: Request, name: str) -> dict[str, object]:
    removed = request.app.state.references.remove(name)
    if not removed:
        raise HTTPException(status_code=404, detail="reference_not_found")
    return {"name": name, "removed": removed}
