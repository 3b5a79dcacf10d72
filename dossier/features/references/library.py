from collections.abc import Collection

from dossier.domain.errors import UploadValidationError
from dossier.domain.models import FileData
from dossier.features.cases.validation import check_file


class ReferenceLibrary:
    """Technical reference documents sent along with every new case file."""

    def __init__(self, *, allowed_mime_types: Collection[str], max_bytes: int) -> None:
        self._allowed = allowed_mime_types
        self._max_bytes = max_bytes
        self._files: list[FileData] = []

    def add(self, file: FileData) -> None:
        issue = check_file(file, allowed_mime_types=self._allowed, max_bytes=self._max_bytes)
        if issue:
            raise UploadValidationError([issue])
        self._files.append(file)

    def remove(self, name: str) -> int:
        before = len(self._files)
        self._files = [f for f in self._files if f.name != name]
        return before - len(self._files)

    def list_files(self) -> tuple[FileData, ...]:
        return tuple(self._files)
