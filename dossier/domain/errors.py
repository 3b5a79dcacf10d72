from __future__ import annotations

from dataclasses import dataclass

from dossier.domain.enums import CaseStatus


@dataclass(frozen=True)
class UploadIssue:
    code: str
    file_name: str
    message: str


class UploadValidationError(Exception):
    def __init__(self, issues: list[UploadIssue]):
        super().__init__("upload_validation_error")
        self.issues = issues


class ExtractionError(Exception):
    def __init__(self, code: str, message: str):
        super().__init__(message)
        self.code = code
        self.message = message


class CaseNotFound(KeyError):
    def __init__(self, case_id: str):
        super().__init__(case_id)
        self.case_id = case_id


class InvalidStatusTransition(Exception):
    def __init__(self, case_id: str, current: CaseStatus, requested: CaseStatus):
        super().__init__(f"{case_id}: {current.value} -> {requested.value}")
        self.case_id = case_id
        self.current = current
        self.requested = requested


class NotRenderable(Exception):
    """The file behind a case is not a PDF, so it has no pages to draw."""


class RenderError(Exception):
    pass


class RenderCancelled(Exception):
    pass
