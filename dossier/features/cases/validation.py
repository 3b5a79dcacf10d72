from collections.abc import Collection, Sequence

from fastapi import UploadFile

from dossier.domain.errors import UploadIssue, UploadValidationError
from dossier.domain.models import FileData


def check_file(file: FileData, *, allowed_mime_types: Collection[str], max_bytes: int) -> UploadIssue | None:
    if file.mime_type not in allowed_mime_types:
        return UploadIssue(
            code="unsupported_mime_type",
            file_name=file.name,
            message=f'El archivo "{file.name}" tiene un formato no soportado.',
        )
    if file.size > max_bytes:
        limit_mb = max_bytes // (1024 * 1024)
        return UploadIssue(
            code="file_too_large",
            file_name=file.name,
            message=f'El archivo "{file.name}" excede el límite de {limit_mb}MB.',
        )
    return None


def validate_batch(
    files: Sequence[FileData], *, allowed_mime_types: Collection[str], max_bytes: int
) -> None:
    """All-or-nothing: one bad file rejects the whole batch."""
    if not files:
        raise UploadValidationError(
            [UploadIssue(code="empty_batch", file_name="", message="No se seleccionaron archivos.")]
        )

    issues = [
        issue
        for f in files
        if (issue := check_file(f, allowed_mime_types=allowed_mime_types, max_bytes=max_bytes))
    ]
    if issues:
        raise UploadValidationError(issues)


async def read_upload(upload: UploadFile, *, max_bytes: int, default_name: str) -> FileData:
    """Read at most one byte past the limit, enough for `check_file` to flag it."""
    data = await upload.read(max_bytes + 1)
    return FileData(name=upload.filename or default_name, mime_type=upload.content_type or "", data=data)
